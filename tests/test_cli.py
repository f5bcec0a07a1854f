"""Tests for the jspmdoc CLI."""

from __future__ import annotations

import json

import pytest

from jspmdoc.cli import main
from tests._fixtures.project_builder import ProjectBuilder, widget_project


def _project(builder: ProjectBuilder) -> ProjectBuilder:
    widget_project(builder)
    builder.esdoc_config({"silent": True})
    return builder


def test_prepare_prints_rewritten_config(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _project(project_builder).path()

    main(["prepare", str(root)])

    payload = json.loads(capsys.readouterr().out)
    assert payload["source"] == "."
    assert payload["includes"] == ["^app", "^jspm_packages/npm/widget@1.0.0/src"]
    assert payload["destination"] == "docs"


def test_prepare_writes_output_file(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _project(project_builder).path()
    output = root / "esdoc.generated.json"

    main(["prepare", str(root / "esdoc.json"), "--output", str(output)])

    assert "Config written to" in capsys.readouterr().out
    assert json.loads(output.read_text(encoding="utf-8"))["source"] == "."


def test_graph_prints_scope(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _project(project_builder).path()

    main(["graph", str(root), "--scope", "main"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["scope"] == "main"
    assert [node["id"] for node in payload["nodes"]] == ["root-demo-app-master", "npm-widget-1-0-0"]


def test_finalize_rewrites_documentation(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _project(project_builder).path()
    index = root / "docs" / "script" / "search_index.js"
    index.parent.mkdir(parents=True)
    index.write_text("window.esdocSearchIndex = []", encoding="utf-8")

    main(["finalize", str(root)])

    assert "Documentation finalized" in capsys.readouterr().out
    assert (root / "docs" / ".gitignore").exists()


def test_cli_exits_on_failure(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _project(project_builder).path()

    with pytest.raises(SystemExit) as excinfo:
        main(["finalize", str(root)])

    assert excinfo.value.code == 1
    assert "jspmdoc finalize failed" in capsys.readouterr().err
