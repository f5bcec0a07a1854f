"""Tests for jspmdoc.manifest."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from jspmdoc.errors import ManifestError
from jspmdoc.manifest import is_external_specifier, load_manifest, load_top_level_packages

MANIFEST = {
    "name": "demo-app",
    "jspm": {
        "dependencies": {
            "widget": "npm:widget@1.0.0",
            "gadget": "github:org/gadget@master",
            "local": "file:../local",
            "linked": "link:../linked",
        },
        "devDependencies": {"tester": "npm:tester@0.1.0"},
    },
}


def test_load_top_level_packages_keeps_external_specifiers() -> None:
    packages = load_top_level_packages(MANIFEST)

    assert packages == {"widget": "npm:widget@1.0.0", "gadget": "github:org/gadget@master"}


def test_load_top_level_packages_dev_kind() -> None:
    assert load_top_level_packages(MANIFEST, kind="dev") == {"tester": "npm:tester@0.1.0"}


def test_load_top_level_packages_explicit_order_and_missing(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)

    packages = load_top_level_packages(MANIFEST, ["gadget", "nope", "widget"])

    assert list(packages) == ["gadget", "widget"]
    assert "'nope' is not declared" in caplog.text


def test_load_top_level_packages_missing_namespace(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)

    assert load_top_level_packages({"name": "x"}) == {}
    assert "no 'jspm.dependencies' entry" in caplog.text

    caplog.clear()
    assert load_top_level_packages({"name": "x"}, silent=True) == {}
    assert caplog.text == ""


def test_load_top_level_packages_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        load_top_level_packages(MANIFEST, kind="peer")


def test_is_external_specifier() -> None:
    assert is_external_specifier("npm:lodash@^4.0.0")
    assert is_external_specifier("github:org/repo@master")
    assert not is_external_specifier("./local")
    assert not is_external_specifier("file:../local")
    assert not is_external_specifier("^1.0.0")


def test_load_manifest_errors(tmp_path: Path) -> None:
    with pytest.raises(ManifestError):
        load_manifest(tmp_path / "package.json")

    path = tmp_path / "package.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(ManifestError):
        load_manifest(path)

    path.write_text('"text"', encoding="utf-8")
    with pytest.raises(ManifestError):
        load_manifest(path)
