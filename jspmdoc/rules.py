"""Rewrite rules that align code, tags, HTML and the search index.

ESDoc only supports a single source root, so the source root is rewritten to
``.`` and every linked package is added as an include. ESDoc then fabricates
paths as if everything lived under the project, and the rules below map those
paths back onto ``<package>/<source root>`` identifiers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple, Union

from .models import PackageRecord


@dataclass(frozen=True)
class RootContext:
    """Names describing the local project being documented."""

    root_package_name: str
    root_dir: str
    local_src_root: str

    @property
    def wrong_import_base(self) -> str:
        return f"{self.root_package_name}/{self.root_dir}/"


@dataclass(frozen=True)
class RewriteRule:
    """A single substitution; literal rules replace plain substrings."""

    pattern: Union[str, re.Pattern[str]]
    replacement: str

    @property
    def literal(self) -> bool:
        return isinstance(self.pattern, str)


@dataclass(frozen=True)
class RewriteRules:
    """Write-once rule tables consumed by the lifecycle hooks."""

    code: Tuple[RewriteRule, ...] = field(default_factory=tuple)
    import_path: Tuple[RewriteRule, ...] = field(default_factory=tuple)
    html: Tuple[RewriteRule, ...] = field(default_factory=tuple)
    search_index: Tuple[RewriteRule, ...] = field(default_factory=tuple)


def build_rules(records: Sequence[PackageRecord], root: RootContext) -> RewriteRules:
    """Derive the four rule tables for ``records``."""
    code: List[RewriteRule] = []
    import_path: List[RewriteRule] = [
        RewriteRule(
            f"{root.wrong_import_base}{root.local_src_root}",
            f"{root.root_package_name}/{root.local_src_root}",
        )
    ]
    html: List[RewriteRule] = []
    search_index: List[RewriteRule] = []

    for record in records:
        code.append(RewriteRule(_import_specifier_pattern(record.normalized_path), record.full_path))
        import_path.append(
            RewriteRule(f"{root.wrong_import_base}{record.relative_path}", record.normalized_path)
        )

        identifier = html_identifier(record)
        html.append(
            RewriteRule(
                _markup_path_pattern(f"{root.root_dir}/{record.relative_path}"),
                f">{identifier}",
            )
        )
        html.append(RewriteRule(_markup_path_pattern(record.relative_path), f">{identifier}"))

        search_index.append(
            RewriteRule(f"{root.root_dir}/{record.relative_path}", record.normalized_path)
        )

    return RewriteRules(
        code=tuple(code),
        import_path=tuple(import_path),
        html=tuple(html),
        search_index=tuple(search_index),
    )


def html_identifier(record: PackageRecord) -> str:
    """Canonical identifier shown in HTML, annotated for aliased packages."""
    if record.is_alias:
        return f"[alias of {record.actual_package_name}] {record.normalized_path}"
    return record.normalized_path


def include_paths(local_src_root: str, records: Iterable[PackageRecord]) -> List[str]:
    """ESDoc ``includes`` covering the local source and every linked package."""
    includes = [f"^{local_src_root}"]
    includes.extend(f"^{record.relative_path}" for record in records if record.relative_path)
    return includes


def apply_code_rules(code: str, rules: Sequence[RewriteRule]) -> str:
    """Point import specifiers of linked packages at their on-disk sources."""
    for rule in rules:
        replacement = rule.replacement
        code = rule.pattern.sub(  # type: ignore[union-attr]
            lambda match: f"{match.group(1)}{match.group(2)}{replacement}", code
        )
    return code


def apply_import_path_rules(import_path: str, rules: Sequence[RewriteRule]) -> str:
    """Correct the import path ESDoc fabricates for a tag."""
    for rule in rules:
        import_path = import_path.replace(rule.pattern, rule.replacement, 1)  # type: ignore[arg-type]
    return import_path


def apply_html_rules(html: str, rules: Sequence[RewriteRule]) -> str:
    """Replace raw package paths rendered after a ``>`` boundary."""
    for rule in rules:
        html = _substitute(html, rule)
    return html


def apply_search_index_rules(value: str, rules: Sequence[RewriteRule]) -> str:
    """Replace raw package paths inside a search index display field."""
    for rule in rules:
        value = _substitute(value, rule)
    return value


def _import_specifier_pattern(normalized_path: str) -> re.Pattern[str]:
    # Group 1: keyword and whitespace, group 2: opening quote. The specifier
    # must be followed by a path separator or the closing quote.
    return re.compile(
        r"(\b(?:from|import)\s+)(['\"])" + re.escape(normalized_path) + r"(?=/|\2)"
    )


def _markup_path_pattern(path: str) -> re.Pattern[str]:
    # Anchored after a markup boundary and not followed by more name characters.
    return re.compile(">" + re.escape(path) + r"(?![\w@.-])")


def _substitute(value: str, rule: RewriteRule) -> str:
    if rule.literal:
        return value.replace(rule.pattern, rule.replacement)  # type: ignore[arg-type]
    replacement = rule.replacement
    return rule.pattern.sub(lambda _match: replacement, value)


__all__ = [
    "RewriteRule",
    "RewriteRules",
    "RootContext",
    "apply_code_rules",
    "apply_html_rules",
    "apply_import_path_rules",
    "apply_search_index_rules",
    "build_rules",
    "html_identifier",
    "include_paths",
]
