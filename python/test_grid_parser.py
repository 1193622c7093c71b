"""Tests for grid_parser module."""

import pytest

from css_parser import ParseError, parse_value
from css_values import Integer, LengthPercentage
from grid_parser import (
    ParseOptions,
    parse_grid_line,
    parse_grid_template_component,
    parse_implicit_grid_tracks,
    parse_line_name_list,
    parse_line_names,
    parse_property,
    parse_repeat_count,
    parse_track_breadth,
    parse_track_list,
    parse_track_repeat,
    parse_track_size,
)
from grid_types import (
    Auto,
    AutoFill,
    AutoFit,
    BreadthSize,
    FitContent,
    Fr,
    GridLine,
    ImplicitGridTracks,
    LengthBreadth,
    LineNameList,
    LineNames,
    MasonryTemplate,
    MaxContent,
    MinContent,
    Minmax,
    NameRepeat,
    NoneTemplate,
    RepeatNumber,
    SubgridTemplate,
    TrackListTemplate,
    TrackRepeat,
    track_list_len,
)


def px(value: float) -> LengthBreadth:
    return LengthBreadth(LengthPercentage(value, "px"))


# =============================================================================
# <grid-line>
# =============================================================================


class TestParseGridLine:
    """Tests for parse_grid_line."""

    def test_auto(self) -> None:
        """`auto` gives the auto sentinel."""
        line = parse_value("auto", parse_grid_line)
        assert line == GridLine.auto()
        assert line.is_auto()
        assert not line.is_ident_only()
        assert not line.is_span

    def test_auto_ignores_case(self) -> None:
        assert parse_value("AUTO", parse_grid_line).is_auto()

    def test_identifier(self) -> None:
        line = parse_value("header", parse_grid_line)
        assert line == GridLine(ident="header")
        assert line.is_ident_only()

    def test_identifier_keeps_case(self) -> None:
        assert parse_value("Header", parse_grid_line).ident == "Header"

    def test_number(self) -> None:
        line = parse_value("3", parse_grid_line)
        assert line == GridLine(line_num=Integer(3))

    def test_negative_number(self) -> None:
        line = parse_value("-2 foo", parse_grid_line)
        assert line == GridLine(ident="foo", line_num=Integer(-2))

    def test_span_number_ident(self) -> None:
        """`span 2 foo` sets all three fields."""
        line = parse_value("span 2 foo", parse_grid_line)
        assert line.is_span
        assert line.line_num == Integer(2)
        assert line.ident == "foo"

    def test_span_keyword_ignores_case(self) -> None:
        assert parse_value("SPAN 2", parse_grid_line) == GridLine(line_num=Integer(2), is_span=True)

    def test_clamps_large_number(self) -> None:
        assert parse_value("99999", parse_grid_line).line_num == Integer(10000)

    def test_clamps_small_number(self) -> None:
        assert parse_value("-99999", parse_grid_line).line_num == Integer(-10000)

    def test_clamps_span_number(self) -> None:
        line = parse_value("span 123456", parse_grid_line)
        assert line == GridLine(line_num=Integer(10000), is_span=True)

    @pytest.mark.parametrize(
        "text, expected",
        [
            # One token
            ("2", GridLine(line_num=Integer(2))),
            ("foo", GridLine(ident="foo")),
            # Two tokens
            ("span 2", GridLine(line_num=Integer(2), is_span=True)),
            ("span foo", GridLine(ident="foo", is_span=True)),
            ("2 span", GridLine(line_num=Integer(2), is_span=True)),
            ("foo span", GridLine(ident="foo", is_span=True)),
            ("2 foo", GridLine(ident="foo", line_num=Integer(2))),
            ("foo 2", GridLine(ident="foo", line_num=Integer(2))),
            # Three tokens: span first or last
            ("span 2 foo", GridLine(ident="foo", line_num=Integer(2), is_span=True)),
            ("span foo 2", GridLine(ident="foo", line_num=Integer(2), is_span=True)),
            ("2 foo span", GridLine(ident="foo", line_num=Integer(2), is_span=True)),
            ("foo 2 span", GridLine(ident="foo", line_num=Integer(2), is_span=True)),
        ],
    )
    def test_accepted_orders(self, text: str, expected: GridLine) -> None:
        assert parse_value(text, parse_grid_line) == expected

    @pytest.mark.parametrize(
        "text",
        [
            # span between the integer and the identifier
            "2 span foo",
            "foo span 2",
            # Bare span, zero, negative span
            "span",
            "span 0",
            "0",
            "0 foo",
            "span -2",
            "-2 span",
            "span -2 foo",
            # Duplicates
            "span span",
            "span 2 span",
            "2 3",
            "foo bar",
            "2 foo 3",
            "foo 2 bar",
            # Keywords that are not identifiers here
            "span auto",
            "2 auto",
            "auto 2",
            "inherit",
            # Too many tokens
            "span 2 foo bar",
            # Not a grid line at all
            "",
            "1.5",
            "10px",
        ],
    )
    def test_rejected(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_value(text, parse_grid_line)

    def test_error_message_for_sandwiched_span(self) -> None:
        """Error points at the token that follows the misplaced span."""
        with pytest.raises(ParseError, match="first or last") as info:
            parse_value("2 span foo", parse_grid_line)
        assert info.value.column == 8

    def test_error_message_for_bare_span(self) -> None:
        with pytest.raises(ParseError, match="integer or an identifier"):
            parse_value("span", parse_grid_line)


# =============================================================================
# <line-names>
# =============================================================================


class TestParseLineNames:
    """Tests for parse_line_names."""

    def test_names(self) -> None:
        assert parse_value("[a b c]", parse_line_names) == ("a", "b", "c")

    def test_empty(self) -> None:
        assert parse_value("[]", parse_line_names) == ()

    def test_whitespace_inside(self) -> None:
        assert parse_value("[  a   b ]", parse_line_names) == ("a", "b")

    @pytest.mark.parametrize("text", ["[span]", "[auto]", "[a AUTO]", "[inherit]", "[1]", "[a, b]", "a"])
    def test_rejected(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_value(text, parse_line_names)


# =============================================================================
# <track-breadth> / <track-size>
# =============================================================================


class TestParseTrackSize:
    """Tests for parse_track_breadth and parse_track_size."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("10px", px(10)),
            ("0", px(0)),
            ("25%", LengthBreadth(LengthPercentage(25, "%"))),
            ("1.5em", LengthBreadth(LengthPercentage(1.5, "em"))),
            ("2fr", Fr(2.0)),
            ("0fr", Fr(0.0)),
            ("auto", Auto()),
            ("min-content", MinContent()),
            ("MAX-CONTENT", MaxContent()),
        ],
    )
    def test_breadths(self, text: str, expected: object) -> None:
        assert parse_value(text, parse_track_breadth) == expected

    @pytest.mark.parametrize(
        "text", ["-10px", "-1fr", "-5%", "10", "10foo", "fit-content", "none", "1e999px", "1e999fr"]
    )
    def test_rejected_breadths(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_value(text, parse_track_breadth)

    def test_breadth_size(self) -> None:
        assert parse_value("1fr", parse_track_size) == BreadthSize(Fr(1.0))

    def test_minmax(self) -> None:
        assert parse_value("minmax(10px, 2fr)", parse_track_size) == Minmax(px(10), Fr(2.0))

    def test_minmax_auto_flex(self) -> None:
        """minmax(auto, <flex>) keeps its shape when parsed."""
        assert parse_value("minmax(auto, 2fr)", parse_track_size) == Minmax(Auto(), Fr(2.0))

    def test_minmax_function_name_ignores_case(self) -> None:
        assert parse_value("MinMax(min-content, 50%)", parse_track_size) == Minmax(
            MinContent(), LengthBreadth(LengthPercentage(50, "%"))
        )

    def test_fit_content(self) -> None:
        assert parse_value("fit-content(50%)", parse_track_size) == FitContent(
            LengthBreadth(LengthPercentage(50, "%"))
        )

    @pytest.mark.parametrize(
        "text",
        [
            "minmax(1fr, 10px)",  # First argument must be inflexible
            "minmax(10px)",
            "minmax(10px, 1fr, auto)",
            "minmax(10px 1fr)",
            "fit-content(1fr)",
            "fit-content(auto)",
            "fit-content(-10px)",
            "fit-content()",
            "calc(10px + 1em)",
        ],
    )
    def test_rejected_sizes(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_value(text, parse_track_size)


# =============================================================================
# repeat()
# =============================================================================


class TestParseRepeat:
    """Tests for parse_repeat_count and parse_track_repeat."""

    def test_number_count(self) -> None:
        assert parse_value("3", parse_repeat_count) == RepeatNumber(Integer(3))

    def test_count_is_capped(self) -> None:
        assert parse_value("20000", parse_repeat_count) == RepeatNumber(Integer(10000))

    def test_keyword_counts(self) -> None:
        assert parse_value("auto-fill", parse_repeat_count) == AutoFill()
        assert parse_value("Auto-Fit", parse_repeat_count) == AutoFit()

    @pytest.mark.parametrize("text", ["0", "-1", "1.5", "auto", "fill"])
    def test_rejected_counts(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_value(text, parse_repeat_count)

    def test_repeat_with_names(self) -> None:
        repeat = parse_value("repeat(2, [a] 1fr [b] 10px [c])", parse_track_repeat)
        assert repeat == TrackRepeat(
            RepeatNumber(Integer(2)),
            (("a",), ("b",), ("c",)),
            (BreadthSize(Fr(1.0)), BreadthSize(px(10))),
        )

    def test_repeat_without_names(self) -> None:
        repeat = parse_value("repeat(2, 1fr)", parse_track_repeat)
        assert repeat.line_names == ((), ())
        assert len(repeat.line_names) == len(repeat.track_sizes) + 1

    def test_auto_fill_repeat(self) -> None:
        """A standalone auto repeat accepts any sizes; the count is AutoFill."""
        repeat = parse_value("repeat(auto-fill, [a] 1fr)", parse_track_repeat)
        assert repeat.count == AutoFill()
        assert repeat.line_names == (("a",), ())

    @pytest.mark.parametrize(
        "text",
        [
            "repeat(0, 1fr)",
            "repeat(-1, 1fr)",
            "repeat(2)",
            "repeat(2,)",
            "repeat(2, [a])",
            "repeat(2 1fr)",
            "repeat(2, 1fr [a] [b])",
            "repeat(2, repeat(2, 1fr))",
        ],
    )
    def test_rejected(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_value(text, parse_track_repeat)


# =============================================================================
# <track-list>
# =============================================================================


class TestParseTrackList:
    """Tests for parse_track_list."""

    def test_sizes_and_names(self) -> None:
        track_list = parse_value("[a] 1fr [b c] 10px", parse_track_list)
        assert track_list.values == (BreadthSize(Fr(1.0)), BreadthSize(px(10)))
        assert track_list.line_names == (("a",), ("b", "c"), ())
        assert not track_list.has_auto_repeat()
        assert track_list.auto_repeat_index == 2
        assert track_list.is_explicit()

    def test_trailing_names(self) -> None:
        track_list = parse_value("1fr [end]", parse_track_list)
        assert track_list.line_names == ((), ("end",))

    def test_fixed_repeat_is_not_explicit(self) -> None:
        track_list = parse_value("10px repeat(2, 1fr)", parse_track_list)
        assert not track_list.is_explicit()
        assert not track_list.has_auto_repeat()

    def test_auto_repeat_index(self) -> None:
        track_list = parse_value("[a] 10px repeat(auto-fill, [b] 100px) [c] 20px", parse_track_list)
        assert track_list.auto_repeat_index == 1
        assert track_list.has_auto_repeat()
        assert isinstance(track_list.values[1], TrackRepeat)
        assert track_list.values[1].count == AutoFill()
        assert track_list.line_names == (("a",), (), ("c",), ())

    def test_auto_repeat_with_fixed_repeat(self) -> None:
        track_list = parse_value("repeat(auto-fit, 100px) repeat(2, 10px minmax(10px, 1fr))", parse_track_list)
        assert track_list.auto_repeat_index == 0

    @pytest.mark.parametrize(
        "text",
        [
            "1fr 10px [a] repeat(2, 1fr)",
            "[a] 1fr",
            "repeat(auto-fill, 10px) [b] 20px [c]",
            "minmax(auto, 1fr) fit-content(10px) repeat(3, [x] 5em [y])",
        ],
    )
    def test_name_groups_match_values(self, text: str) -> None:
        """There is always one more line name group than values."""
        track_list = parse_value(text, parse_track_list)
        assert len(track_list.line_names) == len(track_list.values) + 1

    @pytest.mark.parametrize(
        "text",
        [
            # Auto repeats need fixed sizes around and inside them
            "repeat(auto-fill, 1fr)",
            "repeat(auto-fit, [a] minmax(auto, 1fr))",
            "1fr repeat(auto-fill, 100px)",
            "repeat(auto-fill, 100px) 1fr",
            "repeat(auto-fill, 100px) repeat(2, 1fr)",
            "repeat(2, 1fr) repeat(auto-fill, 10px)",
            "repeat(auto-fill, 100px) repeat(auto-fit, 10px)",
            # Names without a value between them
            "[a] [b] 1fr",
            "1fr [a] [b]",
            # No values
            "[a]",
            "",
            "none",
        ],
    )
    def test_rejected(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_value(text, parse_track_list)

    def test_auto_repeat_error_message(self) -> None:
        with pytest.raises(ParseError, match="fixed track sizes"):
            parse_value("repeat(auto-fill, 1fr)", parse_track_list)


# =============================================================================
# <line-name-list>
# =============================================================================


class TestParseLineNameList:
    """Tests for parse_line_name_list."""

    def test_names_and_repeat(self) -> None:
        line_name_list = parse_value("subgrid [a] [b c] repeat(2, [d])", parse_line_name_list)
        assert line_name_list.line_names == (
            LineNames(("a",)),
            LineNames(("b", "c")),
            NameRepeat(RepeatNumber(Integer(2)), (("d",),)),
        )
        assert line_name_list.expanded_line_names_length == 4

    def test_bare_subgrid(self) -> None:
        assert parse_value("subgrid", parse_line_name_list) == LineNameList()

    def test_auto_fill_not_counted(self) -> None:
        line_name_list = parse_value("subgrid [a] repeat(auto-fill, [b] [])", parse_line_name_list)
        assert line_name_list.expanded_line_names_length == 1
        assert line_name_list.line_names[1].is_auto_fill()

    def test_expanded_length_is_capped(self) -> None:
        line_name_list = parse_value("subgrid repeat(20000, [a] [b])", parse_line_name_list)
        assert line_name_list.expanded_line_names_length == 10000

    @pytest.mark.parametrize(
        "text",
        [
            "subgrid repeat(auto-fit, [a])",
            "subgrid repeat(auto-fill, [a]) repeat(auto-fill, [b])",
            "subgrid repeat(2, 1fr)",
            "subgrid repeat(2)",
            "subgrid [a] 1fr",
            "[a]",
        ],
    )
    def test_rejected(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_value(text, parse_line_name_list)

    def test_auto_fit_error_message(self) -> None:
        with pytest.raises(ParseError, match="auto-fit"):
            parse_value("subgrid repeat(auto-fit, [a])", parse_line_name_list)


# =============================================================================
# <grid-template-component>
# =============================================================================


class TestParseGridTemplateComponent:
    """Tests for parse_grid_template_component."""

    def test_none(self) -> None:
        assert parse_value("none", parse_grid_template_component) == NoneTemplate()

    def test_masonry(self) -> None:
        assert parse_value("masonry", parse_grid_template_component) == MasonryTemplate()

    def test_track_list(self) -> None:
        component = parse_value("1fr repeat(2, 10px) [end]", parse_grid_template_component)
        assert isinstance(component, TrackListTemplate)
        assert track_list_len(component) == 2

    def test_subgrid(self) -> None:
        component = parse_value("subgrid [a]", parse_grid_template_component)
        assert isinstance(component, SubgridTemplate)
        assert track_list_len(component) == 0

    def test_subgrid_with_bad_repeat_is_rejected(self) -> None:
        """The name list error is reported, not a track list error."""
        with pytest.raises(ParseError, match="auto-fit") as info:
            parse_value("subgrid repeat(auto-fit, [a])", parse_grid_template_component)
        assert info.value.column == 9

    def test_subgrid_with_trailing_size_is_rejected(self) -> None:
        with pytest.raises(ParseError, match="Unexpected '1fr'"):
            parse_value("subgrid [a] 1fr", parse_grid_template_component)

    def test_disabled_subgrid(self) -> None:
        options = ParseOptions(subgrid_enabled=False)
        with pytest.raises(ParseError):
            parse_value("subgrid", lambda c: parse_grid_template_component(c, options))

    def test_disabled_masonry(self) -> None:
        options = ParseOptions(masonry_enabled=False)
        with pytest.raises(ParseError):
            parse_value("masonry", lambda c: parse_grid_template_component(c, options))

    @pytest.mark.parametrize("text", ["none 1fr", "masonry 1fr", "none none", "auto-fill"])
    def test_rejected(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_value(text, parse_grid_template_component)


# =============================================================================
# grid-auto-rows / grid-auto-columns
# =============================================================================


class TestParseImplicitGridTracks:
    """Tests for parse_implicit_grid_tracks."""

    def test_lone_auto_is_empty(self) -> None:
        tracks = parse_value("auto", parse_implicit_grid_tracks)
        assert tracks == ImplicitGridTracks()
        assert tracks.is_initial()

    def test_two_autos_are_kept(self) -> None:
        tracks = parse_value("auto auto", parse_implicit_grid_tracks)
        assert tracks.tracks == (BreadthSize(Auto()), BreadthSize(Auto()))

    def test_sizes(self) -> None:
        tracks = parse_value("min-content minmax(10px, 1fr)", parse_implicit_grid_tracks)
        assert tracks.tracks == (BreadthSize(MinContent()), Minmax(px(10), Fr(1.0)))

    @pytest.mark.parametrize("text", ["", "repeat(2, 1fr)", "[a] 1fr", "none"])
    def test_rejected(self, text: str) -> None:
        with pytest.raises(ParseError):
            parse_value(text, parse_implicit_grid_tracks)


# =============================================================================
# Property values
# =============================================================================


class TestParseProperty:
    """Tests for parse_property, including the placement shorthands."""

    def test_grid_row_copies_identifier(self) -> None:
        assert parse_property("grid-row", "main") == (GridLine(ident="main"), GridLine(ident="main"))

    def test_grid_row_fills_auto(self) -> None:
        assert parse_property("grid-row", "2") == (GridLine(line_num=Integer(2)), GridLine.auto())

    def test_grid_column_two_values(self) -> None:
        assert parse_property("grid-column", "1 / span 2") == (
            GridLine(line_num=Integer(1)),
            GridLine(line_num=Integer(2), is_span=True),
        )

    def test_grid_area_fills_from_start_lines(self) -> None:
        a, b = GridLine(ident="a"), GridLine(ident="b")
        assert parse_property("grid-area", "a / b") == (a, b, a, b)

    def test_grid_area_one_number(self) -> None:
        auto = GridLine.auto()
        assert parse_property("grid-area", "3") == (GridLine(line_num=Integer(3)), auto, auto, auto)

    def test_too_many_lines(self) -> None:
        with pytest.raises(ParseError):
            parse_property("grid-row", "1 / 2 / 3")

    def test_trailing_slash(self) -> None:
        with pytest.raises(ParseError):
            parse_property("grid-row", "1 /")

    def test_template_property(self) -> None:
        assert parse_property("grid-template-columns", "none") == NoneTemplate()

    def test_property_name_ignores_case(self) -> None:
        assert parse_property("Grid-Row-Start", "auto") == GridLine.auto()

    def test_options_are_passed(self) -> None:
        with pytest.raises(ParseError):
            parse_property("grid-template-rows", "masonry", ParseOptions(masonry_enabled=False))

    def test_unknown_property(self) -> None:
        with pytest.raises(ValueError, match="Unknown grid property"):
            parse_property("grid-gap", "10px")
