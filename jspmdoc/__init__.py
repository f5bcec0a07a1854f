"""Link JSPM managed packages into ESDoc generated documentation."""

from .config import PluginOptions, load_options
from .errors import ConfigError, ManifestError, PathError, PluginError, RootPathError
from .models import PackageRecord
from .orchestrator import Orchestrator, PluginContext
from .plugin import HOOK_ORDER, JspmPlugin, PluginEvent

__version__ = "0.4.0"

__all__ = [
    "ConfigError",
    "HOOK_ORDER",
    "JspmPlugin",
    "ManifestError",
    "Orchestrator",
    "PackageRecord",
    "PathError",
    "PluginContext",
    "PluginError",
    "PluginEvent",
    "PluginOptions",
    "RootPathError",
    "load_options",
]
