"""Tests for zemdomu.parsing.jsx."""

from __future__ import annotations

import pytest

from zemdomu.exceptions import MarkupParseError
from zemdomu.parsing.jsx import parse
from zemdomu.parsing.nodes import DYNAMIC, AttrState, Element, Expression


def _first(source: str, tag: str, dialect: str = "jsx") -> Element:
    doc = parse(source, dialect=dialect)  # type: ignore[arg-type]
    return next(e for e in doc.iter_elements() if e.tag == tag)


class TestAttributes:
    def test_string_literal(self) -> None:
        img = _first('const a = <div className="x"><img alt="" /></div>;', "img")
        assert img.attrs["alt"] == ""
        assert img.self_closing

    def test_expression_is_dynamic(self) -> None:
        img = _first("const a = <img alt={desc} />;", "img")
        assert img.attrs["alt"] is DYNAMIC
        assert img.attr_state("alt") is AttrState.UNKNOWN

    def test_string_in_expression_is_literal(self) -> None:
        assert _first('const a = <img alt={"hi"} />;', "img").attrs["alt"] == "hi"
        assert _first("const a = <img alt={`hi`} />;", "img").attrs["alt"] == "hi"

    def test_template_with_substitution_is_dynamic(self) -> None:
        img = _first("const a = <img alt={`hi ${name}`} />;", "img")
        assert img.attrs["alt"] is DYNAMIC

    def test_bare_attribute_is_empty_literal(self) -> None:
        assert _first("const a = <input disabled />;", "input").attrs["disabled"] == ""

    def test_spread_makes_absent_attributes_unknown(self) -> None:
        img = _first("const a = <img {...props} />;", "img")
        assert img.has_spread
        assert img.attr_state("alt") is AttrState.UNKNOWN

    def test_html_for_kept_as_written(self) -> None:
        label = _first('const a = <label htmlFor="name">Name</label>;', "label")
        assert label.attrs == {"htmlFor": "name"}


class TestTree:
    def test_fragment_is_transparent(self) -> None:
        doc = parse("const a = <><h1>a</h1><p>b</p></>;", dialect="jsx")
        assert [c.tag for c in doc.root.children if isinstance(c, Element)] == ["h1", "p"]

    def test_embedded_jsx_nests_under_parent(self) -> None:
        doc = parse("const a = <ul>{items.map(i => <li key={i}>{i}</li>)}</ul>;", dialect="jsx")
        ul = doc.root.children[0]
        assert isinstance(ul, Element)
        expression = ul.children[0]
        assert isinstance(expression, Expression)
        assert not expression.empty
        assert [c.tag for c in expression.children if isinstance(c, Element)] == ["li"]

    def test_jsx_in_attribute_nests_under_element(self) -> None:
        card = _first('const a = <Card icon={<img src="a.png" />} title="x" />;', "Card")
        assert card.attrs == {"icon": DYNAMIC, "title": "x"}
        [holder] = card.children
        assert isinstance(holder, Expression)
        assert holder.empty
        assert [c.tag for c in holder.children if isinstance(c, Element)] == ["img"]

    def test_attribute_jsx_precedes_body(self) -> None:
        doc = parse("const a = <Route element={<Home />}><p>x</p></Route>;", dialect="jsx")
        assert [e.tag for e in doc.iter_elements()] == ["Route", "Home", "p"]

    def test_string_attribute_has_no_holder(self) -> None:
        assert _first('const a = <Card title="x" />;', "Card").children == []

    def test_comment_only_expression_is_empty(self) -> None:
        a = _first('const x = <a href="/">{/* nothing */}</a>;', "a")
        expression = a.children[0]
        assert isinstance(expression, Expression)
        assert expression.empty

    def test_component_tags_keep_case(self) -> None:
        doc = parse("const a = <Layout><Button /></Layout>;", dialect="jsx")
        tags = [e.tag for e in doc.iter_elements()]
        assert tags == ["Layout", "Button"]
        assert all(e.is_component for e in doc.iter_elements())

    def test_lone_surrogate_does_not_raise_encoding_error(self) -> None:
        source = "const a = <p>\ud800</p>;\nconst b = <img />;"
        try:
            doc = parse(source, dialect="jsx")
        except MarkupParseError:
            return
        img = next(e for e in doc.iter_elements() if e.tag == "img")
        assert img.offset == source.index("<img")

    def test_positions_with_multibyte_characters(self) -> None:
        source = 'const s = "héllo";\nconst a = <img />;'
        img = _first(source, "img")
        assert img.offset == source.index("<img")

    def test_tsx_syntax(self) -> None:
        source = "const a = (x: number): JSX.Element => <h1>{x}</h1>;"
        assert _first(source, "h1", dialect="tsx").heading_level == 1


class TestImportsAndComments:
    def test_capitalized_bindings(self) -> None:
        source = (
            "import Button from './Button';\n"
            "import { Card as Panel, helper } from '../ui';\n"
            "import * as Icons from 'icons';\n"
            "import React, { useState } from 'react';\n"
        )
        doc = parse(source, dialect="jsx")
        assert doc.imports == {"Button": "./Button", "Panel": "../ui", "React": "react"}

    def test_comments_collected(self) -> None:
        doc = parse("const a = <div>{/* zemdomu-disable-next */}<img /></div>;", dialect="jsx")
        assert any("zemdomu-disable-next" in c.text for c in doc.comments)


class TestParseErrors:
    def test_syntax_error_raises(self) -> None:
        with pytest.raises(MarkupParseError) as exc_info:
            parse("export default function A() { return (<div>; }", dialect="jsx")
        assert exc_info.value.line is not None
