"""End-of-run rewrites of generated documentation assets."""

from .gitignore import GITIGNORE_ENTRIES, write_gitignore
from .search_index import rewrite_search_index, search_index_path

__all__ = ["GITIGNORE_ENTRIES", "rewrite_search_index", "search_index_path", "write_gitignore"]
