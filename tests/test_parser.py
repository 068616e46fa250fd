"""Tests for the parser and the `Parse` entry points."""

from __future__ import annotations

import threading

import pytest

from nestcss.css import Comment, Lexer, Parse, ParseError, Rule, Selector
from nestcss.css import values
from nestcss.css.parser import PARALLEL_THRESHOLD


def _large_stylesheet(count: int = 300) -> str:
    source = "\n\n".join(f".c{i} {{\n    width: {i}px;\n}}" for i in range(count))
    assert len(source) > PARALLEL_THRESHOLD
    return source


class TestSelectors:
    def test_tag(self) -> None:
        assert Parse.parse_selector("h1") == Selector("h1")

    def test_universal(self) -> None:
        assert Parse.parse_selector("*") == Selector("*")

    def test_id(self) -> None:
        assert Parse.parse_selector("#button1") == Selector(identifier="button1")

    def test_compound(self) -> None:
        assert Parse.parse_selector("div#main.container.center-x") == Selector(
            "div", "main", ["container", "center-x"]
        )

    def test_descendant(self) -> None:
        assert Parse.parse_selector("div .button") == Selector(
            "div", descendant=Selector(class_names=["button"])
        )

    def test_child(self) -> None:
        expected = Selector("div", child=Selector("h1"))
        assert Parse.parse_selector("div > h1") == expected
        assert Parse.parse_selector("div>h1") == expected

    def test_child_is_not_descendant(self) -> None:
        assert Parse.parse_selector("div h1") != Parse.parse_selector("div > h1")

    def test_chain(self) -> None:
        assert Parse.parse_selector("ul li > a") == Selector(
            "ul", descendant=Selector("li", child=Selector("a"))
        )

    def test_span(self) -> None:
        selector = Parse.parse_selector("div > h1")
        assert selector.span is not None
        assert (selector.span.start.offset, selector.span.end.offset) == (0, 8)

    def test_from_tokens(self) -> None:
        tokens = Lexer("div .a").process()
        assert Parse.parse_selector(tokens) == Parse.parse_selector("div .a")

    def test_from_tokens_without_eof(self) -> None:
        tokens = Lexer("div").process()[:-1]
        assert Parse.parse_selector(tokens) == Selector("div")

    def test_rejects_other_input(self) -> None:
        with pytest.raises(TypeError):
            Parse.parse_selector(42)  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "source, reason",
        [
            ("*h1", "Tag name specified twice"),
            ("h1#a#b", "Cannot specify two id selectors"),
            (". a", "Expected class name directly after '.'"),
            ("> a", "Expected selector start, found '>'"),
            ("h1 { }", "Expected end of source found '{'"),
        ],
    )
    def test_errors(self, source: str, reason: str) -> None:
        with pytest.raises(ParseError) as exc:
            Parse.parse_selector(source)
        assert exc.value.reason == reason


class TestValues:
    @pytest.mark.parametrize(
        "source, expected",
        [
            ("block", values.Keyword("block")),
            ("#00ff00", values.Color("00ff00")),
            ("1", values.Number("1")),
            ("10%", values.Percentage("10")),
            ("10px", values.NumberWithUnit("10", "px")),
            (".2em", values.NumberWithUnit(".2", "em")),
            ('"SF Pro"', values.StringLiteral("SF Pro")),
        ],
    )
    def test_single(self, source: str, expected: values.CSSValue) -> None:
        assert Parse.parse_value(source) == expected

    def test_number_then_keyword(self) -> None:
        assert Parse.parse_value("10 px") == values.List(
            [values.Number("10"), values.Keyword("px")]
        )

    def test_space_list(self) -> None:
        assert Parse.parse_value("2px solid #00ff00") == values.List(
            [values.NumberWithUnit("2", "px"), values.Keyword("solid"), values.Color("00ff00")]
        )

    def test_comma_list(self) -> None:
        assert Parse.parse_value('"Helvetica", sans-serif') == values.CommaSeparatedList(
            [values.StringLiteral("Helvetica"), values.Keyword("sans-serif")]
        )

    def test_comma_list_of_space_lists(self) -> None:
        assert Parse.parse_value("1px 2px, 3px") == values.CommaSeparatedList(
            [
                values.List([values.NumberWithUnit("1", "px"), values.NumberWithUnit("2", "px")]),
                values.NumberWithUnit("3", "px"),
            ]
        )

    def test_function(self) -> None:
        assert Parse.parse_value("rgba(0, 0, 0, .5)") == values.Function(
            "rgba",
            [values.Number("0"), values.Number("0"), values.Number("0"), values.Number(".5")],
        )

    def test_function_without_arguments(self) -> None:
        assert Parse.parse_value("none()") == values.Function("none")

    def test_unclosed_function(self) -> None:
        with pytest.raises(ParseError) as exc:
            Parse.parse_value("rgba(0, 0")
        assert exc.value.reason == "Expected ')' found end of source"

    def test_not_a_value(self) -> None:
        with pytest.raises(ParseError) as exc:
            Parse.parse_value("{")
        assert exc.value.reason == "Expected value found '{'"


class TestRules:
    def test_declaration(self) -> None:
        rule = Parse.parse_rule("h1 { color: red; }")
        assert rule.selectors == [Selector("h1")]
        assert rule.declarations == [("color", values.Keyword("red"))]
        assert rule.nested_rules is None

    def test_last_semicolon_is_optional(self) -> None:
        assert Parse.parse_rule("h1 { color: red }") == Parse.parse_rule("h1 { color: red; }")

    def test_selector_list(self) -> None:
        rule = Parse.parse_rule("h1, h2 { margin: 0 }")
        assert rule.selectors == [Selector("h1"), Selector("h2")]

    def test_empty(self) -> None:
        rule = Parse.parse_rule("h1 {}")
        assert rule.declarations == []
        assert rule.nested_rules is None

    def test_duplicate_declarations_are_kept(self) -> None:
        rule = Parse.parse_rule("h1 { color: red; color: blue; }")
        assert [name for name, _ in rule.declarations] == ["color", "color"]

    def test_nested(self) -> None:
        rule = Parse.parse_rule(".card { color: red; .title { color: blue; } }")
        assert rule.declarations == [("color", values.Keyword("red"))]
        assert rule.nested_rules == [
            Rule([Selector(class_names=["title"])], [("color", values.Keyword("blue"))])
        ]

    def test_nested_selector_needs_a_compound(self) -> None:
        with pytest.raises(ParseError) as exc:
            Parse.parse_rule("ul { > li { a: b } }")
        assert exc.value.reason == "Expected selector start, found '>'"

    def test_comments_in_blocks_are_dropped(self) -> None:
        rule = Parse.parse_rule("h1 { /* x */ a: b; /* y */ }")
        assert rule.declarations == [("a", values.Keyword("b"))]

    def test_span(self) -> None:
        rule = Parse.parse_rule("h1 { a: b }")
        assert rule.span is not None
        assert (rule.span.start.offset, rule.span.end.offset) == (0, 11)

    def test_missing_colon(self) -> None:
        with pytest.raises(ParseError) as exc:
            Parse.parse_rule("h1 { color red; }")
        assert exc.value.reason == "Expected ':' found Ident 'red'"

    def test_missing_end(self) -> None:
        with pytest.raises(ParseError) as exc:
            Parse.parse_rule("h1 { color: red blue")
        assert exc.value.reason == "Expected ';' or '}' found end of source"


class TestComments:
    def test_in_selector(self) -> None:
        stylesheet = Parse.parse_stylesheet("h1 /* c */ { a: b }")
        assert stylesheet.entries == [Rule([Selector("h1")], [("a", values.Keyword("b"))])]

    def test_in_value(self) -> None:
        rule = Parse.parse_rule("h1 { a: b /* c */; }")
        assert rule.declarations == [("a", values.Keyword("b"))]

    def test_separates_compounds(self) -> None:
        assert Parse.parse_selector("div/* c */.a") == Parse.parse_selector("div .a")

    def test_between_selectors(self) -> None:
        rule = Parse.parse_rule("h1 /* c */, h2 { a: b }")
        assert rule.selectors == [Selector("h1"), Selector("h2")]

    def test_in_function_arguments(self) -> None:
        assert Parse.parse_value("rgba(0, /* c */ 0)") == values.Function(
            "rgba", [values.Number("0"), values.Number("0")]
        )

    def test_trailing(self) -> None:
        assert Parse.parse_value("red /* c */") == values.Keyword("red")

    def test_top_level_kept(self) -> None:
        stylesheet = Parse.parse_stylesheet("h1 { a: b } /* after */")
        assert stylesheet.entries[-1] == Comment(" after ")


class TestStyleSheet:
    def test_entries(self) -> None:
        stylesheet = Parse.parse_stylesheet("/* top */\nh1 { a: b; }\nh2 { c: d; }")
        assert stylesheet.entries[0] == Comment(" top ")
        assert [rule.selectors for rule in stylesheet.rules] == [[Selector("h1")], [Selector("h2")]]

    def test_empty(self) -> None:
        assert Parse.parse_stylesheet("  \n").entries == []

    def test_source_id(self) -> None:
        rule = Parse.parse_stylesheet("h1 { a: b }", source_id=3).rules[0]
        assert rule.span is not None
        assert rule.span.source_id == 3

    @pytest.mark.parametrize(
        "source, reason",
        [
            ('h1 { color: "red; }', "Could not find end to string"),
            ("h1 { color: red; } /* never closes", "Could not find end to comment"),
            ("h1 { color: red; } h2 .", "Found trailing '.'"),
            ("h1 { color: red; ", "Expected Ident found end of source"),
        ],
    )
    def test_errors(self, source: str, reason: str) -> None:
        with pytest.raises(ParseError) as exc:
            Parse.parse_stylesheet(source)
        assert exc.value.reason == reason

    def test_first_error_in_source_wins(self) -> None:
        with pytest.raises(ParseError) as exc:
            Parse.parse_stylesheet('h1 { color red; }\n"oops')
        assert exc.value.reason == "Expected ':' found Ident 'red'"

    def test_same_error_for_any_length(self) -> None:
        short = 'h1 { color red; }\n"oops'
        long = 'h1 { color red; }\n' + _large_stylesheet() + '\n"oops'
        reasons = []
        for source in (short, long):
            with pytest.raises(ParseError) as exc:
                Parse.parse_stylesheet(source)
            reasons.append(exc.value.reason)
        assert reasons == ["Expected ':' found Ident 'red'"] * 2


class TestParallelParse:
    def test_large_input(self) -> None:
        source = _large_stylesheet()
        stylesheet = Parse.parse_stylesheet(source)
        assert len(stylesheet.rules) == 300
        assert stylesheet.rules[-1].declarations == [("width", values.NumberWithUnit("299", "px"))]

    def test_matches_sequential_parse(self) -> None:
        source = _large_stylesheet()
        tokens = Lexer(source).process()
        assert Parse.parse_stylesheet(source) == Parse.parse_stylesheet(tokens)

    def test_lexer_error_at_end(self) -> None:
        source = _large_stylesheet() + '\n"oops'
        with pytest.raises(ParseError) as exc:
            Parse.parse_stylesheet(source)
        assert exc.value.reason == "Could not find end to string"

    def test_parse_error_stops_lexer(self) -> None:
        source = "h1 { color red; }\n" + _large_stylesheet(1000)
        with pytest.raises(ParseError) as exc:
            Parse.parse_stylesheet(source)
        assert exc.value.reason == "Expected ':' found Ident 'red'"
        assert not any(thread.name == "nestcss-lexer" for thread in threading.enumerate())
