"""Tests for the Laminate parser."""

from __future__ import annotations

import pytest

from laminate import ErrorCode, TemplateSyntaxError
from laminate.lexer import tokenize
from laminate.nodes import (
    Const,
    ContentFor,
    Data,
    Getattr,
    InsideLayout,
    Name,
    Output,
    Set,
    Yield,
)
from laminate.parser import ParseError, Parser
from laminate.parser.core import _BLOCK_PARSERS, _END_KEYWORDS


def parse(source: str):
    return Parser(tokenize(source), "page.html", None, source).parse()


class TestDispatchTable:
    def test_every_block_keyword_has_a_parser(self):
        for keyword, method_name in _BLOCK_PARSERS.items():
            assert callable(getattr(Parser, method_name, None)), keyword

    def test_every_block_tag_has_a_specific_end(self):
        for keyword in ("inside_layout", "content_for"):
            assert f"end{keyword}" in _END_KEYWORDS


class TestExpressions:
    def test_data(self):
        assert parse("text").body == (Data(lineno=1, col_offset=0, value="text"),)

    def test_yield(self):
        (output,) = parse("{{ yield }}").body
        assert isinstance(output, Output)
        assert output.expr == Yield(lineno=1, col_offset=3, slot=None)

    def test_yield_named_slot(self):
        (output,) = parse("{{ yield 'menu' }}").body
        assert output.expr.slot == Const(lineno=1, col_offset=9, value="menu")

    def test_yield_slot_from_name(self):
        (output,) = parse("{{ yield which }}").body
        assert isinstance(output.expr.slot, Name)

    def test_dotted_name(self):
        (output,) = parse("{{ user.profile.name }}").body
        expr = output.expr
        assert isinstance(expr, Getattr)
        assert expr.attr == "name"
        assert isinstance(expr.obj, Getattr)
        assert expr.obj.obj == Name(lineno=1, col_offset=3, name="user")

    def test_comment_dropped(self):
        assert parse("a{# note #}b").body == (
            Data(lineno=1, col_offset=0, value="a"),
            Data(lineno=1, col_offset=11, value="b"),
        )


class TestStatements:
    def test_inside_layout(self):
        (node,) = parse("{% inside_layout 'outer' %}<p>{{ yield }}</p>{% end %}").body
        assert isinstance(node, InsideLayout)
        assert node.layout == Const(lineno=1, col_offset=17, value="outer")
        assert [type(n) for n in node.body] == [Data, Output, Data]

    def test_content_for(self):
        (node,) = parse("{% content_for 'menu' %}<ul></ul>{% endcontent_for %}").body
        assert isinstance(node, ContentFor)
        assert node.slot.value == "menu"
        assert node.body == (Data(lineno=1, col_offset=24, value="<ul></ul>"),)

    def test_nested_blocks(self):
        (outer,) = parse(
            "{% inside_layout 'a' %}"
            "{% content_for 'm' %}x{% end %}"
            "{% inside_layout 'b' %}y{% end %}"
            "{% end %}"
        ).body
        assert [type(n) for n in outer.body] == [ContentFor, InsideLayout]

    def test_set(self):
        (node,) = parse("{% set title = 'Home' %}").body
        assert node == Set(
            lineno=1,
            col_offset=3,
            name="title",
            value=Const(lineno=1, col_offset=15, value="Home"),
        )

    def test_set_from_yield(self):
        (node,) = parse("{% set body = yield %}").body
        assert node.value == Yield(lineno=1, col_offset=14, slot=None)

    def test_empty_block_body(self):
        (node,) = parse("{% inside_layout 'outer' %}{% end %}").body
        assert node.body == ()


class TestParseErrors:
    def test_unclosed_block(self):
        with pytest.raises(ParseError) as exc_info:
            parse("{% inside_layout 'outer' %}\nbody")
        err = exc_info.value
        assert err.code is ErrorCode.UNCLOSED_BLOCK
        assert err.lineno == 1
        assert "Unclosed 'inside_layout' block" in str(err)

    def test_stray_end(self):
        with pytest.raises(ParseError, match="no open block"):
            parse("text{% end %}")

    def test_mismatched_end(self):
        with pytest.raises(ParseError, match="cannot close 'inside_layout'"):
            parse("{% inside_layout 'a' %}x{% endcontent_for %}")

    def test_unknown_tag_suggests_close_match(self):
        with pytest.raises(ParseError) as exc_info:
            parse("{% inside_layot 'a' %}")
        err = exc_info.value
        assert err.code is ErrorCode.UNKNOWN_TAG
        assert "Did you mean 'inside_layout'?" in str(err)

    def test_block_without_keyword(self):
        with pytest.raises(ParseError) as exc_info:
            parse("{% 'outer' %}")
        assert exc_info.value.code is ErrorCode.UNKNOWN_TAG

    def test_missing_expression(self):
        with pytest.raises(ParseError) as exc_info:
            parse("{{ }}")
        assert exc_info.value.code is ErrorCode.INVALID_EXPRESSION

    def test_assign_to_yield(self):
        with pytest.raises(ParseError, match="reserved name 'yield'"):
            parse("{% set yield = 'x' %}")

    def test_extra_tokens_in_output(self):
        with pytest.raises(ParseError, match="Expected"):
            parse("{{ a b }}")

    def test_error_points_at_token(self):
        source = "line\n{% frobnicate %}"
        with pytest.raises(ParseError) as exc_info:
            parse(source)
        message = str(exc_info.value)
        assert message.startswith("Parse Error: Unknown tag 'frobnicate'")
        assert "page.html:2:3" in message
        assert "   |    ^" in message

    def test_parse_error_is_syntax_error(self):
        with pytest.raises(TemplateSyntaxError):
            parse("{% end %}")
