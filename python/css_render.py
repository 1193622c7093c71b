"""
Canonical CSS serialization for grid values.

to_css() writes every value type back to text in its shortest canonical
form; parsing that text again gives an equal value. highlight() adds
terminal colours for display.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

import simple_chalk as chalk  # type: ignore[import-untyped]
import tinycss2
from tinycss2.ast import Node
from tinycss2.serializer import serialize_identifier

from css_values import serialize_number
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
    TrackList,
    TrackListTemplate,
    TrackRepeat,
)

__all__ = ["concat_serialize_idents", "highlight", "serialize_grid_placement", "to_css"]

logger = logging.getLogger(__name__)


def concat_serialize_idents(prefix: str, suffix: str, names: Sequence[str], sep: str = " ") -> str:
    """Join `names` between `prefix` and `suffix`; an empty list gives ''."""
    if not names:
        return ""
    return prefix + sep.join(serialize_identifier(n) for n in names) + suffix


# =============================================================================
# Per-type serializers
# =============================================================================


def _grid_line_to_css(line: GridLine) -> str:
    # 1. auto
    if line.is_auto():
        return "auto"

    # 2. <custom-ident>
    ident = serialize_identifier(line.ident) if line.ident else ""
    if line.is_ident_only():
        return ident

    parts: list[str] = []
    # 3. span && [ <integer [1,∞]> || <custom-ident> ]
    if line.is_span:
        parts.append("span")
        # The integer is left out when absent, or when it is the default 1
        # alongside an identifier.
        if not line.line_num.is_zero() and not (line.line_num.is_one() and ident):
            parts.append(line.line_num.to_css())
    # 4. <integer> && <custom-ident>?
    else:
        parts.append(line.line_num.to_css())

    if ident:
        parts.append(ident)
    return " ".join(parts)


def _breadth_to_css(breadth: object) -> str:
    match breadth:
        case LengthBreadth(value=value):
            return value.to_css()
        case Fr(value=value):
            return f"{serialize_number(value)}fr"
        case Auto():
            return "auto"
        case MinContent():
            return "min-content"
        case MaxContent():
            return "max-content"
        case _:
            raise TypeError(f"Not a track breadth: {breadth!r}")


def _track_size_to_css(size: object) -> str:
    match size:
        case BreadthSize(breadth=breadth):
            return _breadth_to_css(breadth)
        # minmax(auto, <flex>) is equivalent to <flex> and serializes as such
        case Minmax(min=Auto(), max=Fr() as flex):
            return _breadth_to_css(flex)
        case Minmax(min=low, max=high):
            return f"minmax({_breadth_to_css(low)}, {_breadth_to_css(high)})"
        case FitContent(breadth=breadth):
            return f"fit-content({_breadth_to_css(breadth)})"
        case _:
            raise TypeError(f"Not a track size: {size!r}")


def _repeat_count_to_css(count: object) -> str:
    match count:
        case RepeatNumber(value=value):
            return value.to_css()
        case AutoFill():
            return "auto-fill"
        case AutoFit():
            return "auto-fit"
        case _:
            raise TypeError(f"Not a repeat count: {count!r}")


def _track_repeat_to_css(repeat: TrackRepeat) -> str:
    out = ["repeat(", _repeat_count_to_css(repeat.count), ", "]
    for i, (names, size) in enumerate(zip(repeat.line_names, repeat.track_sizes)):
        if i > 0:
            out.append(" ")
        out.append(concat_serialize_idents("[", "] ", names))
        out.append(_track_size_to_css(size))

    trailing = repeat.line_names[len(repeat.track_sizes):]
    if trailing:
        out.append(concat_serialize_idents(" [", "]", trailing[0]))
    out.append(")")
    return "".join(out)


def _track_list_value_to_css(value: object) -> str:
    if isinstance(value, TrackRepeat):
        return _track_repeat_to_css(value)
    return _track_size_to_css(value)


def _track_list_to_css(track_list: TrackList) -> str:
    out: list[str] = []
    count = len(track_list.values)
    for idx, names in enumerate(track_list.line_names):
        out.append(concat_serialize_idents("[", "]", names))
        if idx >= count:
            break

        if names:
            out.append(" ")
        out.append(_track_list_value_to_css(track_list.values[idx]))

        next_names = track_list.line_names[idx + 1] if idx + 1 < len(track_list.line_names) else ()
        next_is_auto_repeat = track_list.has_auto_repeat() and idx + 1 == track_list.auto_repeat_index
        if idx + 1 < count or next_names or next_is_auto_repeat:
            out.append(" ")
    return "".join(out)


def _name_repeat_to_css(repeat: NameRepeat) -> str:
    out = ["repeat(", _repeat_count_to_css(repeat.count), ","]
    for names in repeat.line_names:
        # Unlike elsewhere, empty groups are written out here
        out.append(" " + concat_serialize_idents("[", "]", names) if names else " []")
    out.append(")")
    return "".join(out)


def _line_name_list_to_css(line_name_list: LineNameList) -> str:
    out = ["subgrid"]
    for value in line_name_list.line_names:
        match value:
            case NameRepeat():
                out.append(_name_repeat_to_css(value))
            case LineNames(names=names):
                out.append("[" + concat_serialize_idents("", "", names) + "]")
    return " ".join(out)


def _implicit_tracks_to_css(tracks: ImplicitGridTracks) -> str:
    if tracks.is_initial():
        return "auto"
    return " ".join(_track_size_to_css(size) for size in tracks.tracks)


def to_css(value: object) -> str:
    """
    Serialize any grid value to its canonical CSS text.

    Accepts grid template components, track lists, repeats, track sizes and
    breadths, repeat counts, grid lines, subgrid line name lists and their
    parts, implicit grid tracks, and bare length/integer values.
    """
    match value:
        case NoneTemplate():
            return "none"
        case MasonryTemplate():
            return "masonry"
        case TrackListTemplate(track_list=track_list):
            return _track_list_to_css(track_list)
        case SubgridTemplate(line_names=line_names):
            return _line_name_list_to_css(line_names)
        case TrackList():
            return _track_list_to_css(value)
        case TrackRepeat():
            return _track_repeat_to_css(value)
        case BreadthSize() | Minmax() | FitContent():
            return _track_size_to_css(value)
        case LengthBreadth() | Fr() | Auto() | MinContent() | MaxContent():
            return _breadth_to_css(value)
        case RepeatNumber() | AutoFill() | AutoFit():
            return _repeat_count_to_css(value)
        case GridLine():
            return _grid_line_to_css(value)
        case LineNameList():
            return _line_name_list_to_css(value)
        case NameRepeat():
            return _name_repeat_to_css(value)
        case LineNames(names=names):
            return "[" + concat_serialize_idents("", "", names) + "]"
        case ImplicitGridTracks():
            return _implicit_tracks_to_css(value)
        case tuple() if value and all(isinstance(v, GridLine) for v in value):
            return serialize_grid_placement(value)
        case _ if hasattr(value, "to_css"):
            return value.to_css()
        case _:
            raise TypeError(f"Don't know how to serialize {type(value).__name__}: {value!r}")


# =============================================================================
# Placement shorthands
# =============================================================================


def serialize_grid_placement(lines: Sequence[GridLine]) -> str:
    """
    Serialize grid-row/grid-column (2 lines) or grid-area (4 lines).

    Trailing lines are dropped while can_omit() allows it.
    https://drafts.csswg.org/css-grid/#propdef-grid-area
    """
    match len(lines):
        case 2:
            start, end = lines
            keep = 1 if start.can_omit(end) else 2
        case 4:
            row_start, column_start, row_end, column_end = lines
            if not column_start.can_omit(column_end):
                keep = 4
            elif not row_start.can_omit(row_end):
                keep = 3
            elif not row_start.can_omit(column_start):
                keep = 2
            else:
                keep = 1
        case _:
            raise ValueError(f"Expected 2 or 4 grid lines, got {len(lines)}")
    return " / ".join(_grid_line_to_css(line) for line in lines[:keep])


# =============================================================================
# Colour output
# =============================================================================


def _token_color(token: Node) -> Callable[[str], str]:
    match token.type:
        case "ident":
            return chalk.cyan
        case "number" | "dimension" | "percentage":
            return chalk.yellow
        case "function":
            return chalk.magenta
        case "[] block":
            return chalk.green
        case _:
            return lambda s: s


def _highlight_tokens(tokens: list[Node]) -> str:
    out: list[str] = []
    for token in tokens:
        color = _token_color(token)
        match token.type:
            case "function":
                out.append(color(f"{token.name}(") + _highlight_tokens(token.arguments) + color(")"))
            case "[] block":
                out.append(color("[") + _highlight_tokens(token.content) + color("]"))
            case _:
                out.append(color(token.serialize()))
    return "".join(out)


def highlight(value: object) -> str:
    """
    Canonical CSS text with ANSI colours for the terminal.

    Identifiers are cyan, numbers yellow, functions magenta and line name
    brackets green. Accepts a value (serialized with to_css) or text.
    """
    text = value if isinstance(value, str) else to_css(value)
    tokens = tinycss2.parse_component_value_list(text)
    logger.debug("Highlighting %d tokens", len(tokens))
    return _highlight_tokens(tokens)
