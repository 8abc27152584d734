"""Tests for zemdomu.parsing.directives."""

from __future__ import annotations

from zemdomu.linter import lint_html, lint_jsx
from zemdomu.linting.models import LintResult
from zemdomu.parsing.directives import LineRange, disabled_ranges, filter_disabled
from zemdomu.parsing.html import parse


class TestDisabledRanges:
    def test_disable_next_covers_following_element(self) -> None:
        doc = parse("<!-- zemdomu-disable-next -->\n\n<img>\n<img>")
        assert disabled_ranges(doc) == [LineRange(0, 2)]

    def test_disable_enable_pair(self) -> None:
        doc = parse("<p>\n<!-- zemdomu-disable -->\n<img>\n<!-- zemdomu-enable -->\n<img>")
        assert disabled_ranges(doc) == [LineRange(1, 3)]

    def test_unclosed_disable_runs_to_end(self) -> None:
        doc = parse("<!-- zemdomu-disable -->\n<img>\n<img>")
        assert disabled_ranges(doc) == [LineRange(0, 2)]

    def test_plain_comments_ignored(self) -> None:
        assert disabled_ranges(parse("<!-- just a note -->\n<img>")) == []

    def test_filter_by_start_line(self) -> None:
        results = [
            LintResult(line=1, column=0, message="a", rule="requireAltText"),
            LintResult(line=4, column=0, message="b", rule="requireAltText"),
        ]
        kept = filter_disabled(results, [LineRange(0, 2)])
        assert [r.message for r in kept] == ["b"]


class TestDirectivesInLinting:
    def test_html_disable_next(self, only_rules) -> None:
        source = '<!-- zemdomu-disable-next -->\n<img src="a.png">\n<img src="b.png">'
        results = lint_html(source, only_rules("requireAltText"))
        assert [r.line for r in results] == [2]

    def test_html_range(self, only_rules) -> None:
        source = "<!-- zemdomu-disable -->\n<img>\n<!-- zemdomu-enable -->\n<img>"
        results = lint_html(source, only_rules("requireAltText"))
        assert [r.line for r in results] == [3]

    def test_jsx_disable_next(self, only_rules) -> None:
        source = (
            "const A = () => (\n"
            "  <div>\n"
            "    {/* zemdomu-disable-next */}\n"
            '    <img src="a.png" />\n'
            '    <img src="b.png" />\n'
            "  </div>\n"
            ");\n"
        )
        results = lint_jsx(source, only_rules("requireAltText"), typescript=False)
        assert [r.line for r in results] == [4]

    def test_jsx_range(self, only_rules) -> None:
        source = (
            "const A = () => (\n"
            "  <div>\n"
            "    {/* zemdomu-disable */}\n"
            "    <img />\n"
            "    {/* zemdomu-enable */}\n"
            "    <img />\n"
            "  </div>\n"
            ");\n"
        )
        results = lint_jsx(source, only_rules("requireAltText"))
        assert [r.line for r in results] == [5]
