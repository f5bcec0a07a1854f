"""Tests for jspmdoc.registry."""

from __future__ import annotations

import logging
from dataclasses import replace

import pytest

from jspmdoc.models import PackageRecord
from jspmdoc.registry import PackageRegistry

WIDGET = PackageRecord(
    package_name="widget",
    actual_package_name="widget",
    full_package="npm:widget@1.0.0",
    version="1.0.0",
    is_alias=False,
    is_dependency=False,
    full_path="/p/jspm_packages/npm/widget@1.0.0/src",
    relative_path="jspm_packages/npm/widget@1.0.0/src",
    normalized_path="widget/src",
    source="src",
)


def test_add_keeps_first_record() -> None:
    registry = PackageRegistry()

    assert registry.add(WIDGET) is True
    assert registry.add(WIDGET) is False
    assert registry.records == (WIDGET,)


def test_add_warns_on_conflicting_path(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    registry = PackageRegistry()
    registry.add(WIDGET)

    moved = replace(WIDGET, relative_path="jspm_packages/npm/widget@2.0.0/src")

    assert registry.add(moved) is False
    assert "Duplicate package 'widget'" in caplog.text


def test_add_warns_when_path_already_claimed(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    registry = PackageRegistry()
    registry.add(WIDGET)

    alias = replace(WIDGET, package_name="gadget", is_alias=True, normalized_path="gadget/src")

    assert registry.add(alias) is False
    assert registry.records == (WIDGET,)
    assert "already linked as 'widget'" in caplog.text


def test_silent_registry_does_not_warn(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    registry = PackageRegistry(silent=True)
    registry.add(WIDGET)
    registry.add(replace(WIDGET, package_name="gadget"))

    assert caplog.text == ""
