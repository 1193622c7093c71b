"""
Parsers for the CSS grid track-sizing grammar.

Each parse_* function takes a TokenCursor positioned at the start of the
value and either returns the parsed value or raises ParseError. Alternatives
are tried with TokenCursor.try_parse(), which rewinds on failure. Use
parse_property() to parse the complete text of a property value.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from tinycss2.ast import DimensionToken

from css_parser import ParseError, TokenCursor, parse_nested_block, parse_value
from css_values import Integer, LengthPercentage, parse_custom_ident
from grid_types import (
    MAX_GRID_LINE,
    MIN_GRID_LINE,
    Auto,
    AutoFill,
    AutoFit,
    BreadthSize,
    FitContent,
    Fr,
    GridLine,
    GridTemplateComponent,
    ImplicitGridTracks,
    LengthBreadth,
    LineNameList,
    LineNames,
    LineNameListValue,
    LineNameSet,
    MasonryTemplate,
    MaxContent,
    MinContent,
    Minmax,
    NameRepeat,
    NoneTemplate,
    RepeatCount,
    RepeatNumber,
    SubgridTemplate,
    TrackBreadth,
    TrackList,
    TrackListTemplate,
    TrackListValue,
    TrackRepeat,
    TrackSize,
    is_auto_count,
    is_fixed_size,
    is_initial_size,
)

__all__ = [
    "DEFAULT_OPTIONS",
    "ParseError",
    "PROPERTY_PARSERS",
    "ParseOptions",
    "fill_omitted_grid_lines",
    "parse_grid_line",
    "parse_grid_placement",
    "parse_grid_template_component",
    "parse_implicit_grid_tracks",
    "parse_line_name_list",
    "parse_line_names",
    "parse_name_repeat",
    "parse_property",
    "parse_repeat_count",
    "parse_track_breadth",
    "parse_track_list",
    "parse_track_repeat",
    "parse_track_size",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseOptions:
    """Switches for grammar features that can be turned off."""

    subgrid_enabled: bool = True  # `subgrid <line-name-list>?`
    masonry_enabled: bool = True  # `masonry`


DEFAULT_OPTIONS = ParseOptions()


class RepeatType(Enum):
    """Which flavour of repeat() was parsed."""

    FIXED = "fixed"  # <fixed-repeat>: integer count, fixed sizes only
    NORMAL = "normal"  # <track-repeat>: integer count, any sizes
    AUTO = "auto"  # <auto-repeat>: auto-fill/auto-fit, fixed sizes only


def _clamp_line(value: int, what: str) -> int:
    clamped = max(MIN_GRID_LINE, min(value, MAX_GRID_LINE))
    if clamped != value:
        logger.debug("Clamped %s %d to %d", what, value, clamped)
    return clamped


def _keyword(name: str) -> Callable[[TokenCursor], object]:
    return lambda cursor: cursor.expect_ident_matching(name)


# =============================================================================
# <line-names> and <grid-line>
# =============================================================================


def parse_line_names(cursor: TokenCursor) -> LineNameSet:
    """Parse `'[' <custom-ident>* ']'`."""
    block = cursor.expect_square_bracket_block()

    def idents(inner: TokenCursor) -> LineNameSet:
        names: list[str] = []
        while not inner.is_exhausted():
            names.append(parse_custom_ident(inner, excluding=("span", "auto")))
        return tuple(names)

    return parse_nested_block(block, idents)


def parse_grid_line(cursor: TokenCursor) -> GridLine[Integer]:
    """
    Parse a `<grid-line>`.

        auto | <custom-ident> | [ <integer> && <custom-ident>? ]
             | [ span && [ <integer> || <custom-ident> ] ]

    `span` must come first or last, never between the integer and the
    identifier. Line numbers are clamped to [MIN_GRID_LINE, MAX_GRID_LINE].
    """
    if cursor.try_parse(_keyword("auto")) is not None:
        return GridLine.auto()

    ident = ""
    line_num = 0
    is_span = False
    # Set when `span` follows a value; nothing may come after it then
    val_before_span = False

    # At most three tokens: span, integer, identifier
    for _ in range(3):
        location = cursor.current_source_location()
        if cursor.try_parse(_keyword("span")) is not None:
            if is_span:
                raise cursor.new_error("'span' may only appear once in a grid line", location)
            if line_num != 0 or ident:
                val_before_span = True
            is_span = True
        elif (number := cursor.try_parse(Integer.parse)) is not None:
            if number.value == 0:
                raise cursor.new_error("Grid line number must not be 0", location)
            if val_before_span:
                raise cursor.new_error("'span' must be the first or last part of a grid line", location)
            if line_num != 0:
                raise cursor.new_error("A grid line takes at most one integer", location)
            line_num = _clamp_line(number.value, "grid line")
        elif (name := cursor.try_parse(lambda c: parse_custom_ident(c, excluding=("auto",)))) is not None:
            if val_before_span:
                raise cursor.new_error("'span' must be the first or last part of a grid line", location)
            if ident:
                raise cursor.new_error("A grid line takes at most one identifier", location)
            ident = name
        else:
            break

    grid_line = GridLine(ident=ident, line_num=Integer(line_num), is_span=is_span)

    if grid_line.is_auto():
        raise cursor.new_error("Expected a grid line")

    if is_span:
        if line_num < 0:
            raise cursor.new_error("Grid span must be a positive integer")
        if line_num == 0 and not ident:
            raise cursor.new_error("'span' needs an integer or an identifier")

    return grid_line


# =============================================================================
# <track-breadth> and <track-size>
# =============================================================================


_BREADTH_KEYWORDS: dict[str, Callable[[], TrackBreadth]] = {
    "auto": Auto,
    "min-content": MinContent,
    "max-content": MaxContent,
}


def _parse_breadth_keyword(cursor: TokenCursor) -> TrackBreadth:
    location = cursor.current_source_location()
    token = cursor.expect_ident()
    factory = _BREADTH_KEYWORDS.get(token.lower_value)
    if factory is None:
        raise cursor.new_error(f"Expected auto, min-content or max-content, got '{token.value}'", location)
    return factory()


def _parse_flex(cursor: TokenCursor) -> Fr:
    location = cursor.current_source_location()
    token = cursor.next()
    if not (isinstance(token, DimensionToken) and token.lower_unit == "fr"):
        raise cursor.new_error(f"Expected a flex value, got '{token.serialize()}'", location)
    if not math.isfinite(token.value):
        raise cursor.new_error(f"Value out of range: '{token.serialize()}'", location)
    if token.value < 0:
        raise cursor.new_error(f"Flex values must not be negative: '{token.serialize()}'", location)
    return Fr(float(token.value))


def parse_track_breadth(cursor: TokenCursor) -> TrackBreadth[LengthPercentage]:
    """Parse `<length-percentage [0,∞]> | <flex> | min-content | max-content | auto`."""
    length = cursor.try_parse(LengthPercentage.parse_non_negative)
    if length is not None:
        return LengthBreadth(length)
    flex = cursor.try_parse(_parse_flex)
    if flex is not None:
        return flex
    return _parse_breadth_keyword(cursor)


def _parse_inflexible_breadth(cursor: TokenCursor) -> TrackBreadth[LengthPercentage]:
    length = cursor.try_parse(LengthPercentage.parse_non_negative)
    if length is not None:
        return LengthBreadth(length)
    return _parse_breadth_keyword(cursor)


def _parse_minmax(cursor: TokenCursor) -> Minmax[LengthPercentage]:
    arguments = cursor.expect_function_matching("minmax")

    def minmax_arguments(inner: TokenCursor) -> Minmax[LengthPercentage]:
        low = _parse_inflexible_breadth(inner)
        inner.expect_comma()
        return Minmax(low, parse_track_breadth(inner))

    return parse_nested_block(arguments, minmax_arguments)


def parse_track_size(cursor: TokenCursor) -> TrackSize[LengthPercentage]:
    """Parse `<track-breadth> | minmax(...) | fit-content(<length-percentage>)`."""
    breadth = cursor.try_parse(parse_track_breadth)
    if breadth is not None:
        return BreadthSize(breadth)

    minmax = cursor.try_parse(_parse_minmax)
    if minmax is not None:
        return minmax

    location = cursor.current_source_location()
    arguments = cursor.try_parse(lambda c: c.expect_function_matching("fit-content"))
    if arguments is None:
        raise cursor.new_error("Expected a track size", location)
    length = parse_nested_block(arguments, LengthPercentage.parse_non_negative)
    return FitContent(LengthBreadth(length))


# =============================================================================
# repeat()
# =============================================================================


def parse_repeat_count(cursor: TokenCursor) -> RepeatCount[Integer]:
    """Parse `<integer [1,∞]> | auto-fill | auto-fit`; large integers are capped."""
    number = cursor.try_parse(Integer.parse_positive)
    if number is not None:
        if number.value > MAX_GRID_LINE:
            number = Integer(_clamp_line(number.value, "repeat count"))
        return RepeatNumber(number)

    if cursor.try_parse(_keyword("auto-fill")) is not None:
        return AutoFill()
    if cursor.try_parse(_keyword("auto-fit")) is not None:
        return AutoFit()
    raise cursor.new_error("Expected a positive integer, auto-fill or auto-fit")


def _parse_track_repeat_with_type(
    cursor: TokenCursor,
) -> tuple[TrackRepeat[LengthPercentage, Integer], RepeatType]:
    arguments = cursor.expect_function_matching("repeat")

    def repeat_arguments(inner: TokenCursor) -> tuple[TrackRepeat[LengthPercentage, Integer], RepeatType]:
        count = parse_repeat_count(inner)
        inner.expect_comma()

        # <fixed-repeat> is a subset of <track-repeat>; downgrade on the first non-fixed size
        repeat_type = RepeatType.AUTO if is_auto_count(count) else RepeatType.FIXED
        line_names: list[LineNameSet] = []
        track_sizes: list[TrackSize[LengthPercentage]] = []

        while True:
            current_names = inner.try_parse(parse_line_names) or ()
            location = inner.current_source_location()
            track_size = inner.try_parse(parse_track_size)
            if track_size is None:
                if not track_sizes:
                    raise inner.new_error("repeat() needs at least one track size", location)
                line_names.append(current_names)
                break

            if not is_fixed_size(track_size) and repeat_type == RepeatType.FIXED:
                repeat_type = RepeatType.NORMAL

            line_names.append(current_names)
            track_sizes.append(track_size)

        repeat = TrackRepeat(count, tuple(line_names), tuple(track_sizes))
        return repeat, repeat_type

    return parse_nested_block(arguments, repeat_arguments)


def parse_track_repeat(cursor: TokenCursor) -> TrackRepeat[LengthPercentage, Integer]:
    """
    Parse `repeat(<repeat-count>, [<line-names>? <track-size>]+ <line-names>?)`.

    Any track size is accepted. Whether an auto-fill/auto-fit repeat holds
    only fixed sizes is checked where it is used, by parse_track_list().
    """
    repeat, _ = _parse_track_repeat_with_type(cursor)
    return repeat


# =============================================================================
# <track-list>
# =============================================================================


def parse_track_list(cursor: TokenCursor) -> TrackList[LengthPercentage, Integer]:
    """
    Parse `[<line-names>? [<track-size> | <track-repeat>]]+ <line-names>?`.

    A list holding an auto-fill/auto-fit repeat (an <auto-track-list>) may
    hold only one such repeat, whose sizes must all be fixed, and otherwise
    only fixed sizes and fixed repeats.
    """
    line_names: list[LineNameSet] = []
    values: list[TrackListValue[LengthPercentage, Integer]] = []
    current_names: list[str] = []
    auto_repeat_index: int | None = None
    # Everything is assumed <fixed-size> until proven otherwise
    at_least_one_not_fixed = False

    while True:
        current_names.extend(cursor.try_parse(parse_line_names) or ())
        location = cursor.current_source_location()

        track_size = cursor.try_parse(parse_track_size)
        if track_size is not None:
            if not is_fixed_size(track_size):
                at_least_one_not_fixed = True
                if auto_repeat_index is not None:
                    raise cursor.new_error(
                        "Only fixed track sizes may be combined with an auto-fill/auto-fit repeat()",
                        location,
                    )
            line_names.append(tuple(current_names))
            values.append(track_size)
            current_names = []
            continue

        parsed_repeat = cursor.try_parse(_parse_track_repeat_with_type)
        if parsed_repeat is not None:
            repeat, repeat_type = parsed_repeat
            match repeat_type:
                case RepeatType.NORMAL:
                    at_least_one_not_fixed = True
                    if auto_repeat_index is not None:
                        raise cursor.new_error(
                            "Only fixed repeats may be combined with an auto-fill/auto-fit repeat()",
                            location,
                        )
                case RepeatType.AUTO:
                    if not all(is_fixed_size(size) for size in repeat.track_sizes):
                        raise cursor.new_error(
                            "repeat(auto-fill | auto-fit, ...) only accepts fixed track sizes", location
                        )
                    if auto_repeat_index is not None:
                        raise cursor.new_error(
                            "A track list may contain only one auto-fill/auto-fit repeat()", location
                        )
                    if at_least_one_not_fixed:
                        raise cursor.new_error(
                            "An auto-fill/auto-fit repeat() may only be combined with fixed track sizes",
                            location,
                        )
                    auto_repeat_index = len(values)
                case RepeatType.FIXED:
                    pass
            line_names.append(tuple(current_names))
            values.append(repeat)
            current_names = []
            continue

        if not values:
            raise cursor.new_error("Expected a track size or repeat()", location)
        line_names.append(tuple(current_names))
        break

    if auto_repeat_index is None:
        auto_repeat_index = len(values)
    return TrackList(auto_repeat_index, tuple(values), tuple(line_names))


# =============================================================================
# <line-name-list> (subgrid)
# =============================================================================


def parse_name_repeat(cursor: TokenCursor) -> NameRepeat[Integer]:
    """
    Parse `repeat(<repeat-count>, <line-names>+)`.

    Any repeat count is accepted here; parse_line_name_list() rejects the
    counts a subgrid does not allow.
    """
    arguments = cursor.expect_function_matching("repeat")

    def name_repeat_arguments(inner: TokenCursor) -> NameRepeat[Integer]:
        count = parse_repeat_count(inner)
        inner.expect_comma()
        names_list = [parse_line_names(inner)]
        while (names := inner.try_parse(parse_line_names)) is not None:
            names_list.append(names)
        return NameRepeat(count, tuple(names_list))

    return parse_nested_block(arguments, name_repeat_arguments)


def parse_line_name_list(cursor: TokenCursor) -> LineNameList[Integer]:
    """
    Parse `subgrid [<line-names> | <name-repeat>]*`.

    A name repeat may not use auto-fit, and at most one may use auto-fill.
    """
    cursor.expect_ident_matching("subgrid")
    return _parse_line_name_list_values(cursor)


def _parse_line_name_list_values(cursor: TokenCursor) -> LineNameList[Integer]:
    values: list[LineNameListValue[Integer]] = []
    seen_auto_fill = False

    while True:
        location = cursor.current_source_location()
        repeat = cursor.try_parse(parse_name_repeat)
        if repeat is not None:
            match repeat.count:
                case AutoFit():
                    raise cursor.new_error("auto-fit is not allowed in a subgrid line name list", location)
                case AutoFill() if seen_auto_fill:
                    raise cursor.new_error(
                        "A subgrid line name list may contain only one repeat(auto-fill, ...)", location
                    )
                case AutoFill():
                    seen_auto_fill = True
            values.append(repeat)
            continue

        names = cursor.try_parse(parse_line_names)
        if names is None:
            break
        values.append(LineNames(names))

    return LineNameList.from_values(tuple(values))


# =============================================================================
# <grid-template-component> and grid-auto-*
# =============================================================================


def parse_grid_template_component(
    cursor: TokenCursor, options: ParseOptions = DEFAULT_OPTIONS
) -> GridTemplateComponent[LengthPercentage, Integer]:
    """Parse `none | <track-list> | subgrid <line-name-list>? | masonry`."""
    if cursor.try_parse(_keyword("none")) is not None:
        return NoneTemplate()

    # Once `subgrid` has matched, errors in the name list are final
    if options.subgrid_enabled and cursor.try_parse(_keyword("subgrid")) is not None:
        return SubgridTemplate(_parse_line_name_list_values(cursor))

    if options.masonry_enabled and cursor.try_parse(_keyword("masonry")) is not None:
        return MasonryTemplate()

    return TrackListTemplate(parse_track_list(cursor))


def parse_implicit_grid_tracks(cursor: TokenCursor) -> ImplicitGridTracks[LengthPercentage]:
    """Parse `<track-size>+`; a lone `auto` becomes the empty (initial) value."""
    track_sizes = [parse_track_size(cursor)]
    while (track_size := cursor.try_parse(parse_track_size)) is not None:
        track_sizes.append(track_size)

    if len(track_sizes) == 1 and is_initial_size(track_sizes[0]):
        return ImplicitGridTracks()
    return ImplicitGridTracks(tuple(track_sizes))


# =============================================================================
# grid-row / grid-column / grid-area
# =============================================================================


def fill_omitted_grid_lines(lines: list[GridLine[Integer]], count: int) -> tuple[GridLine[Integer], ...]:
    """
    Complete a placement shorthand to `count` values.

    An omitted value copies its reference line when that line is a lone
    identifier, and is `auto` otherwise. The reference is the line two
    places back (grid-area end lines refer to their start lines), or the
    first line.
    """
    filled = list(lines)
    while len(filled) < count:
        index = len(filled)
        reference = filled[index - 2] if index >= 2 else filled[0]
        filled.append(reference if reference.is_ident_only() else GridLine.auto())
    return tuple(filled)


def parse_grid_placement(cursor: TokenCursor, count: int) -> tuple[GridLine[Integer], ...]:
    """Parse up to `count` slash-separated grid lines and fill in the rest."""
    lines = [parse_grid_line(cursor)]
    while len(lines) < count and cursor.try_parse(lambda c: c.expect_delim("/")) is not None:
        lines.append(parse_grid_line(cursor))
    return fill_omitted_grid_lines(lines, count)


# =============================================================================
# Property values
# =============================================================================


PropertyParser = Callable[[TokenCursor, ParseOptions], object]

PROPERTY_PARSERS: dict[str, PropertyParser] = {
    "grid-template-columns": parse_grid_template_component,
    "grid-template-rows": parse_grid_template_component,
    "grid-auto-columns": lambda cursor, options: parse_implicit_grid_tracks(cursor),
    "grid-auto-rows": lambda cursor, options: parse_implicit_grid_tracks(cursor),
    "grid-row-start": lambda cursor, options: parse_grid_line(cursor),
    "grid-row-end": lambda cursor, options: parse_grid_line(cursor),
    "grid-column-start": lambda cursor, options: parse_grid_line(cursor),
    "grid-column-end": lambda cursor, options: parse_grid_line(cursor),
    "grid-row": lambda cursor, options: parse_grid_placement(cursor, 2),
    "grid-column": lambda cursor, options: parse_grid_placement(cursor, 2),
    "grid-area": lambda cursor, options: parse_grid_placement(cursor, 4),
}


def parse_property(name: str, text: str, options: ParseOptions = DEFAULT_OPTIONS) -> object:
    """
    Parse the full text of a grid property value.

    Args:
        name: Property name, e.g. "grid-template-columns"
        text: The value, e.g. "[a] 1fr repeat(2, 10px) [b]"
        options: Grammar feature switches

    Returns:
        The parsed value tree (see PROPERTY_PARSERS for the type per property)

    Raises:
        ValueError: If the property is not a grid property
        ParseError: If the value does not match the property's grammar
    """
    parser = PROPERTY_PARSERS.get(name.lower())
    if parser is None:
        raise ValueError(
            f"Unknown grid property: '{name}'\n"
            f"  Known properties: {', '.join(sorted(PROPERTY_PARSERS))}"
        )
    return parse_value(text, lambda cursor: parser(cursor, options))
