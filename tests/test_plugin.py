"""Tests for jspmdoc.plugin lifecycle hooks."""

from __future__ import annotations

import json

import pytest

from jspmdoc.errors import PluginError
from jspmdoc.plugin import HOOK_ORDER, JspmPlugin, PluginEvent
from tests._fixtures.project_builder import ProjectBuilder, widget_project


def test_hooks_run_in_lifecycle_order(project_builder: ProjectBuilder) -> None:
    root = widget_project(project_builder).path()
    plugin = JspmPlugin(cwd=root)
    config = {"source": "app", "destination": "docs", "title": "Demo"}
    raw = "demo-app/jspm_packages/npm/widget@1.0.0/src"

    events = {
        "onStart": PluginEvent({"option": {"silent": True}}),
        "onHandleConfig": PluginEvent({"config": config}),
        "onHandleCode": PluginEvent({"code": "import Thing from 'widget/src/Thing.js';"}),
        "onHandleTag": PluginEvent(
            {
                "tag": [
                    {"importPath": f"demo-app/{raw}/Thing.js"},
                    {"importPath": "demo-app/demo-app/app/Main.js"},
                    {"name": "untouched"},
                ]
            }
        ),
        "onHandleHTML": PluginEvent({"html": f"<td>{raw}/Thing.js</td>"}),
        "onComplete": PluginEvent(),
    }
    index = root / "docs" / "script" / "search_index.js"
    index.parent.mkdir(parents=True)
    index.write_text(
        "window.esdocSearchIndex = " + json.dumps([["t", "u", f"{raw}/Thing.js", "class"]]),
        encoding="utf-8",
    )

    for stage in HOOK_ORDER:
        plugin.dispatch(stage, events[stage])

    assert plugin.options.silent is True
    assert config["source"] == "."
    assert config["includes"] == ["^app", "^jspm_packages/npm/widget@1.0.0/src"]
    assert config["title"] == "Demo"

    source_root = (root.resolve() / "jspm_packages/npm/widget@1.0.0/src").as_posix()
    assert events["onHandleCode"].data["code"] == f"import Thing from '{source_root}/Thing.js';"

    tags = events["onHandleTag"].data["tag"]
    assert tags[0]["importPath"] == "widget/src/Thing.js"
    assert tags[1]["importPath"] == "demo-app/app/Main.js"
    assert tags[2] == {"name": "untouched"}

    assert events["onHandleHTML"].data["html"] == "<td>widget/src/Thing.js</td>"
    assert "widget/src/Thing.js" in index.read_text(encoding="utf-8")
    assert (root / "docs" / ".gitignore").exists()


def test_context_requires_config_hook() -> None:
    plugin = JspmPlugin()
    plugin.on_start(PluginEvent())

    with pytest.raises(PluginError):
        plugin.on_handle_code(PluginEvent({"code": ""}))


def test_dispatch_rejects_unknown_stage() -> None:
    with pytest.raises(ValueError):
        JspmPlugin().dispatch("onPublish", PluginEvent())
