"""Tests for zemdomu.fixes."""

from __future__ import annotations

from zemdomu.fixes import apply_edits, open_tag_end, suggest_fixes
from zemdomu.linter import lint_html, lint_jsx
from zemdomu.linting.models import LintResult


def _fix(source: str, rule: str, options) -> str:
    """Apply the first fix offered for the first ``rule`` result."""
    result = next(r for r in lint_html(source, options) if r.rule == rule)
    [fix] = suggest_fixes(result, source)
    return apply_edits(source, list(fix.edits))


class TestAttributeFixes:
    def test_alt_added(self, only_rules) -> None:
        fixed = _fix('<img src="a.png">', "requireAltText", only_rules("requireAltText"))
        assert fixed == '<img src="a.png" alt="">'

    def test_alt_added_before_self_close(self, only_rules) -> None:
        source = "const A = () => <img src={src} />;"
        result = lint_jsx(source, only_rules("requireAltText"))[0]
        [fix] = suggest_fixes(result, source)
        assert apply_edits(source, list(fix.edits)) == 'const A = () => <img src={src} alt="" />;'

    def test_existing_attribute_not_duplicated(self, only_rules) -> None:
        source = '<img alt="">'
        result = lint_html(source, only_rules("requireAltText"))[0]
        assert suggest_fixes(result, source) == []

    def test_html_lang(self, only_rules) -> None:
        source = "<html>\n<body></body>\n</html>"
        assert _fix(source, "requireHtmlLang", only_rules("requireHtmlLang")).startswith(
            '<html lang="">'
        )

    def test_quoted_gt_inside_tag(self, only_rules) -> None:
        source = '<iframe src="a?x=1>2"></iframe>'
        fixed = _fix(source, "requireIframeTitle", only_rules("requireIframeTitle"))
        assert fixed == '<iframe src="a?x=1>2" title=""></iframe>'


class TestStructuralFixes:
    def test_caption_inserted(self, only_rules) -> None:
        source = "<table>\n<tr><td>1</td></tr>\n</table>"
        fixed = _fix(source, "requireTableCaption", only_rules("requireTableCaption"))
        assert fixed == "<table>\n  <caption></caption>\n<tr><td>1</td></tr>\n</table>"

    def test_heading_level_changed(self, only_rules) -> None:
        source = "<h1>a</h1>\n<h4>b</h4>"
        fixed = _fix(source, "enforceHeadingOrder", only_rules("enforceHeadingOrder"))
        assert fixed == "<h1>a</h1>\n<h2>b</h2>"

    def test_list_item_wrapped(self, only_rules) -> None:
        source = "<div><li>a <li>nested</li></li></div>"
        fixed = _fix(source, "enforceListNesting", only_rules("enforceListNesting"))
        assert fixed == "<div><ul><li>a <li>nested</li></li></ul></div>"


class TestNoFix:
    def test_cross_component_results(self) -> None:
        result = LintResult(
            line=0,
            column=0,
            message="Cross-component heading level skipped: <h3> after <h1>",
            rule="enforceHeadingOrder",
            file_path="/p/Page.tsx",
        )
        assert suggest_fixes(result, "<h3>x</h3>") == []

    def test_rules_without_fixes(self, only_rules) -> None:
        source = '<p id="a"></p><p id="a"></p>'
        result = lint_html(source, only_rules("uniqueIds"))[0]
        assert suggest_fixes(result, source) == []

    def test_stale_position(self) -> None:
        result = LintResult(line=4, column=0, message="m", rule="requireAltText")
        assert suggest_fixes(result, "<img>") == []


class TestOpenTagEnd:
    def test_skips_jsx_expressions(self) -> None:
        text = "<a onClick={() => x > 1}>t</a>"
        assert open_tag_end(text, 0) == text.index(">t")

    def test_unterminated(self) -> None:
        assert open_tag_end("<img src='x", 0) is None
