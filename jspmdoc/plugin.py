"""ESDoc lifecycle hooks linking JSPM packages into generated documentation.

ESDoc calls the hooks in a fixed order::

    onStart -> onHandleConfig -> onHandleCode* -> onHandleTag* -> onHandleHTML* -> onComplete

``onHandleConfig`` rewrites the single ESDoc source root to ``.`` and replaces
``includes`` with the local source root plus every linked JSPM package, so
user supplied ``includes`` are not supported. All rule tables are built in
that hook; the remaining hooks only apply them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .config import PluginOptions, load_options
from .errors import PluginError
from .logging import configure_logging, is_configured
from .orchestrator import Orchestrator, PluginContext, rewrite_host_config
from .rules import apply_code_rules, apply_html_rules, apply_import_path_rules

HOOK_ORDER = (
    "onStart",
    "onHandleConfig",
    "onHandleCode",
    "onHandleTag",
    "onHandleHTML",
    "onComplete",
)


@dataclass
class PluginEvent:
    """Mutable payload handed to a hook by the host."""

    data: Dict[str, Any] = field(default_factory=dict)


class JspmPlugin:
    """Stateful adapter between ESDoc's hooks and the pure rewrite functions."""

    def __init__(
        self, orchestrator: Orchestrator | None = None, *, cwd: Optional[Path] = None
    ) -> None:
        self.orchestrator = orchestrator or Orchestrator()
        self.cwd = cwd
        self.options = PluginOptions()
        self._context: Optional[PluginContext] = None

    @property
    def context(self) -> PluginContext:
        """Linked package data for this run, available after ``onHandleConfig``."""
        if self._context is None:
            raise PluginError("onHandleConfig has not run yet")
        return self._context

    @property
    def hooks(self) -> Dict[str, Callable[[PluginEvent], None]]:
        return {
            "onStart": self.on_start,
            "onHandleConfig": self.on_handle_config,
            "onHandleCode": self.on_handle_code,
            "onHandleTag": self.on_handle_tag,
            "onHandleHTML": self.on_handle_html,
            "onComplete": self.on_complete,
        }

    def dispatch(self, stage: str, event: PluginEvent) -> None:
        try:
            hook = self.hooks[stage]
        except KeyError:
            raise ValueError(f"Unknown lifecycle stage: {stage}") from None
        hook(event)

    def on_start(self, event: PluginEvent) -> None:
        self.options = load_options(event.data.get("option"))
        self._context = None
        if not is_configured():
            configure_logging(verbose=self.options.verbose)

    def on_handle_config(self, event: PluginEvent) -> None:
        config = event.data["config"]
        self._context = self.orchestrator.prepare(config, self.options, cwd=self.cwd)
        config.update(rewrite_host_config(config, self._context))

    def on_handle_code(self, event: PluginEvent) -> None:
        """Point imports of linked packages at their sources in ``jspm_packages``."""
        event.data["code"] = apply_code_rules(event.data["code"], self.context.rules.code)

    def on_handle_tag(self, event: PluginEvent) -> None:
        """Correct the ``<package>/<root dir>/...`` import paths ESDoc fabricates."""
        rules = self.context.rules.import_path
        for tag in event.data.get("tag") or []:
            import_path = tag.get("importPath")
            if import_path:
                tag["importPath"] = apply_import_path_rules(import_path, rules)

    def on_handle_html(self, event: PluginEvent) -> None:
        event.data["html"] = apply_html_rules(event.data["html"], self.context.rules.html)

    def on_complete(self, event: PluginEvent | None = None) -> None:
        self.orchestrator.finalize(self.context)


__all__ = ["HOOK_ORDER", "JspmPlugin", "PluginEvent"]
