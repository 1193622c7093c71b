"""
Rebuild grid values over a different length/integer representation.

A resolution step turns authored lengths and integers into resolved ones
but keeps the grid structure as is. These functions walk a value tree and
apply `length_fn` to every length and `integer_fn` to every integer,
leaving everything else (line names, keywords, flex factors, the auto
repeat position, the expanded line name count) untouched.
"""

from __future__ import annotations

from typing import Callable

from grid_types import (
    BreadthSize,
    FitContent,
    GridLine,
    GridTemplateComponent,
    ImplicitGridTracks,
    LengthBreadth,
    LineNameList,
    LineNames,
    LineNameListValue,
    Minmax,
    NameRepeat,
    RepeatCount,
    RepeatNumber,
    SubgridTemplate,
    TrackBreadth,
    TrackList,
    TrackListTemplate,
    TrackListValue,
    TrackRepeat,
    TrackSize,
)

__all__ = [
    "map_grid_line",
    "map_grid_template",
    "map_implicit_tracks",
    "map_line_name_list",
    "map_repeat_count",
    "map_track_breadth",
    "map_track_list",
    "map_track_repeat",
    "map_track_size",
]

LengthFn = Callable[[object], object]
IntegerFn = Callable[[object], object]


def map_grid_line(line: GridLine, integer_fn: IntegerFn) -> GridLine:
    return GridLine(ident=line.ident, line_num=integer_fn(line.line_num), is_span=line.is_span)


def map_track_breadth(breadth: TrackBreadth, length_fn: LengthFn) -> TrackBreadth:
    match breadth:
        case LengthBreadth(value=value):
            return LengthBreadth(length_fn(value))
        case _:
            # Fr and the keywords carry no length
            return breadth


def map_track_size(size: TrackSize, length_fn: LengthFn) -> TrackSize:
    match size:
        case BreadthSize(breadth=breadth):
            return BreadthSize(map_track_breadth(breadth, length_fn))
        case Minmax(min=low, max=high):
            return Minmax(map_track_breadth(low, length_fn), map_track_breadth(high, length_fn))
        case FitContent(breadth=breadth):
            return FitContent(map_track_breadth(breadth, length_fn))
        case _:
            raise TypeError(f"Not a track size: {size!r}")


def map_repeat_count(count: RepeatCount, integer_fn: IntegerFn) -> RepeatCount:
    match count:
        case RepeatNumber(value=value):
            return RepeatNumber(integer_fn(value))
        case _:
            return count


def map_track_repeat(repeat: TrackRepeat, length_fn: LengthFn, integer_fn: IntegerFn) -> TrackRepeat:
    return TrackRepeat(
        map_repeat_count(repeat.count, integer_fn),
        repeat.line_names,
        tuple(map_track_size(size, length_fn) for size in repeat.track_sizes),
    )


def _map_track_list_value(value: TrackListValue, length_fn: LengthFn, integer_fn: IntegerFn) -> TrackListValue:
    if isinstance(value, TrackRepeat):
        return map_track_repeat(value, length_fn, integer_fn)
    return map_track_size(value, length_fn)


def map_track_list(track_list: TrackList, length_fn: LengthFn, integer_fn: IntegerFn) -> TrackList:
    return TrackList(
        track_list.auto_repeat_index,
        tuple(_map_track_list_value(v, length_fn, integer_fn) for v in track_list.values),
        track_list.line_names,
    )


def _map_line_name_list_value(value: LineNameListValue, integer_fn: IntegerFn) -> LineNameListValue:
    match value:
        case NameRepeat(count=count, line_names=names):
            return NameRepeat(map_repeat_count(count, integer_fn), names)
        case LineNames():
            return value
        case _:
            raise TypeError(f"Not a line name list value: {value!r}")


def map_line_name_list(line_name_list: LineNameList, integer_fn: IntegerFn) -> LineNameList:
    # The expanded length is kept: repeat counts keep their numeric value
    return LineNameList(
        line_name_list.expanded_line_names_length,
        tuple(_map_line_name_list_value(v, integer_fn) for v in line_name_list.line_names),
    )


def map_grid_template(
    component: GridTemplateComponent, length_fn: LengthFn, integer_fn: IntegerFn
) -> GridTemplateComponent:
    """Map a `<grid-template-component>`; none and masonry come back unchanged."""
    match component:
        case TrackListTemplate(track_list=track_list):
            return TrackListTemplate(map_track_list(track_list, length_fn, integer_fn))
        case SubgridTemplate(line_names=line_names):
            return SubgridTemplate(map_line_name_list(line_names, integer_fn))
        case _:
            return component


def map_implicit_tracks(tracks: ImplicitGridTracks, length_fn: LengthFn) -> ImplicitGridTracks:
    return ImplicitGridTracks(tuple(map_track_size(size, length_fn) for size in tracks.tracks))
