"""Tests for the single-file linter entry points."""

from __future__ import annotations

import pytest

from zemdomu.config import LinterOptions
from zemdomu.linter import FileKind, lint, lint_html, lint_jsx
from zemdomu.linting.models import PARSE_ERROR_RULE, RULE_IDS

SAMPLE_HTML = """<!DOCTYPE html>
<html>
<body>
<section><p>No heading here</p></section>
<h1>Title</h1>
<h3>Skipped</h3>
<h1>Again</h1>
<img src="cat.png">
<input id="email">
<div><li>stray</li></div>
<a></a>
<table><tr><td>1</td></tr></table>
<p><strong></strong></p>
<button></button>
<iframe src="x"></iframe>
<input type="image" src="go.png" id="go" aria-label="Go">
<nav><p>menu</p></nav>
<p id="dup"></p><p id="dup"></p>
</body>
</html>
"""


class TestLintHtml:
    def test_every_rule_fires_on_sample(self) -> None:
        results = lint_html(SAMPLE_HTML)
        assert {r.rule for r in results} == set(RULE_IDS)
        assert all(r.severity == "warning" for r in results)

    def test_results_are_sorted(self) -> None:
        results = lint_html(SAMPLE_HTML)
        assert [r.position for r in results] == sorted(r.position for r in results)

    def test_idempotent(self) -> None:
        assert lint_html(SAMPLE_HTML) == lint_html(SAMPLE_HTML)

    def test_clean_document(self) -> None:
        source = '<html lang="en"><body><h1>Hi</h1><img src="a.png" alt="A"></body></html>'
        assert lint_html(source) == []

    def test_severity_applied(self) -> None:
        options = LinterOptions(rules={"requireAltText": "error"})
        results = lint_html('<img src="a.png">', options)
        assert [(r.rule, r.severity) for r in results] == [("requireAltText", "error")]

    def test_off_rules_produce_nothing(self) -> None:
        options = LinterOptions(rules={rule: "off" for rule in RULE_IDS})
        assert lint_html(SAMPLE_HTML, options) == []


class TestLintJsx:
    def test_component_file(self, only_rules) -> None:
        source = (
            "import Card from './Card';\n"
            "export default function Page() {\n"
            "  return (\n"
            "    <main>\n"
            "      <h1>Title</h1>\n"
            '      <img src="hero.png" />\n'
            "      <Card />\n"
            "    </main>\n"
            "  );\n"
            "}\n"
        )
        results = lint_jsx(source, only_rules("requireAltText", "singleH1"))
        assert [(r.rule, r.line, r.column) for r in results] == [("requireAltText", 5, 6)]

    def test_element_passed_as_prop_is_linted(self, only_rules) -> None:
        source = 'const A = () => <Card icon={<img src="a.png" />} />;'
        results = lint_jsx(source, only_rules("requireAltText"))
        assert [(r.rule, r.line, r.column) for r in results] == [("requireAltText", 0, 28)]

    def test_prop_jsx_is_not_text_content(self, only_rules) -> None:
        source = 'const A = () => <a href="/" icon={<Icon />}></a>;'
        results = lint_jsx(source, only_rules("requireLinkText"))
        assert [r.rule for r in results] == ["requireLinkText"]

    def test_lone_surrogate_never_raises(self, only_rules) -> None:
        results = lint_jsx("const A = () => <p>\ud800</p>;", only_rules("requireAltText"))
        assert {r.rule for r in results} <= {PARSE_ERROR_RULE}

    def test_parse_error_becomes_single_result(self) -> None:
        results = lint_jsx("const a = <div><span></div>;")
        assert len(results) == 1
        result = results[0]
        assert result.rule == PARSE_ERROR_RULE
        assert (result.line, result.column) == (0, 0)
        assert result.severity == "error"
        assert result.message.startswith("Parse error: ")

    def test_parse_error_ignores_rule_config(self) -> None:
        options = LinterOptions(rules={rule: "off" for rule in RULE_IDS})
        assert [r.rule for r in lint("const = ;", "jsx", options)] == [PARSE_ERROR_RULE]


class TestFileKind:
    @pytest.mark.parametrize(
        ("path", "kind"),
        [
            ("index.html", FileKind.HTML),
            ("page.HTM", FileKind.HTML),
            ("App.jsx", FileKind.JSX),
            ("legacy.js", FileKind.JSX),
            ("App.tsx", FileKind.TSX),
            ("types.ts", None),
            ("README.md", None),
        ],
    )
    def test_from_path(self, path: str, kind: FileKind | None) -> None:
        assert FileKind.from_path(path) is kind

    def test_is_component(self) -> None:
        assert not FileKind.HTML.is_component
        assert FileKind.JSX.is_component
        assert FileKind.TSX.is_component

    def test_string_kind_accepted(self) -> None:
        assert lint('<img src="a.png">', "html")[0].rule == "requireAltText"
