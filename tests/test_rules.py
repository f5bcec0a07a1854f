"""Tests for jspmdoc.rules."""

from __future__ import annotations

from dataclasses import replace

from jspmdoc.models import PackageRecord
from jspmdoc.rules import (
    RootContext,
    apply_code_rules,
    apply_html_rules,
    apply_import_path_rules,
    apply_search_index_rules,
    build_rules,
    html_identifier,
    include_paths,
)

ROOT = RootContext(root_package_name="demo-app", root_dir="demo", local_src_root="app")

WIDGET = PackageRecord(
    package_name="widget",
    actual_package_name="widget",
    full_package="npm:widget@1.0.0",
    version="1.0.0",
    is_alias=False,
    is_dependency=False,
    full_path="/work/demo/jspm_packages/npm/widget@1.0.0/src",
    relative_path="jspm_packages/npm/widget@1.0.0/src",
    normalized_path="widget/src",
    source="src",
)

GADGET = replace(
    WIDGET,
    package_name="gadget",
    is_alias=True,
    full_path="/work/demo/jspm_packages/npm/widget@2.0.0/src",
    relative_path="jspm_packages/npm/widget@2.0.0/src",
    normalized_path="gadget/src",
)


def test_include_paths_lists_local_root_then_packages() -> None:
    assert include_paths("app", [WIDGET, GADGET]) == [
        "^app",
        "^jspm_packages/npm/widget@1.0.0/src",
        "^jspm_packages/npm/widget@2.0.0/src",
    ]


def test_code_rules_rewrite_import_specifiers() -> None:
    rules = build_rules([WIDGET], ROOT).code
    code = (
        "import Thing from 'widget/src/Thing.js';\n"
        'import "widget/src";\n'
        "import Other from 'widget/srcs/Other.js';\n"
        "const text = 'widget/src/Thing.js';\n"
    )

    rewritten = apply_code_rules(code, rules)

    assert "from '/work/demo/jspm_packages/npm/widget@1.0.0/src/Thing.js'" in rewritten
    assert 'import "/work/demo/jspm_packages/npm/widget@1.0.0/src";' in rewritten
    assert "'widget/srcs/Other.js'" in rewritten
    assert "const text = 'widget/src/Thing.js';" in rewritten


def test_import_path_rules_fix_fabricated_paths() -> None:
    rules = build_rules([WIDGET], ROOT).import_path

    assert apply_import_path_rules("demo-app/demo/app/Main.js", rules) == "demo-app/app/Main.js"
    assert (
        apply_import_path_rules("demo-app/demo/jspm_packages/npm/widget@1.0.0/src/Thing.js", rules)
        == "widget/src/Thing.js"
    )
    assert apply_import_path_rules("other/path.js", rules) == "other/path.js"


def test_html_rules_respect_boundaries_and_aliases() -> None:
    rules = build_rules([WIDGET, GADGET], ROOT).html
    html = (
        "<td>demo/jspm_packages/npm/widget@1.0.0/src/Thing.js</td>"
        "<span>jspm_packages/npm/widget@2.0.0/src</span>"
        "<td>jspm_packages/npm/widget@1.0.0/src2/Other.js</td>"
        "<a href='jspm_packages/npm/widget@1.0.0/src/Thing.js'>x</a>"
    )

    rewritten = apply_html_rules(html, rules)

    assert "<td>widget/src/Thing.js</td>" in rewritten
    assert "<span>[alias of widget] gadget/src</span>" in rewritten
    assert "<td>jspm_packages/npm/widget@1.0.0/src2/Other.js</td>" in rewritten
    assert "href='jspm_packages/npm/widget@1.0.0/src/Thing.js'" in rewritten


def test_html_identifier_annotates_aliases() -> None:
    assert html_identifier(WIDGET) == "widget/src"
    assert html_identifier(GADGET) == "[alias of widget] gadget/src"


def test_search_index_rules_replace_root_prefixed_paths() -> None:
    rules = build_rules([WIDGET], ROOT).search_index
    display = "<span>demo/jspm_packages/npm/widget@1.0.0/src/Thing.js~Thing</span>"

    assert apply_search_index_rules(display, rules) == "<span>widget/src/Thing.js~Thing</span>"


def test_build_rules_without_records_keeps_local_import_rule() -> None:
    rules = build_rules([], ROOT)

    assert len(rules.import_path) == 1
    assert rules.code == rules.html == rules.search_index == ()
