"""
Value types for the CSS grid track-sizing language.

Every type is a frozen dataclass. Sum types are unions of variant classes
and are dispatched with `match`. The types are generic over a length type
`L` and an integer type `I`, so the same structures describe both
as-authored values (css_values.LengthPercentage / css_values.Integer) and
values produced by a later resolution step.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterator, TypeVar, Union

from css_values import Integer, IntegerLike, LengthLike

L = TypeVar("L", bound=LengthLike)
I = TypeVar("I", bound=IntegerLike)

# Limits grid line numbers and repeat counts are clamped to.
# https://drafts.csswg.org/css-grid/#overlarge-grids
MIN_GRID_LINE = -10000
MAX_GRID_LINE = 10000

# A `<line-names>` group: `[a b]` -> ("a", "b"), absent/empty -> ()
LineNameSet = tuple[str, ...]


# =============================================================================
# <grid-line>
# =============================================================================


@dataclass(frozen=True)
class GridLine(Generic[I]):
    """
    A `<grid-line>`, as used by grid-row-start and friends.

    `auto` is the all-default value: no identifier, line 0, no span.
    """

    ident: str = ""  # "" when no <custom-ident> was given
    line_num: I = Integer(0)  # Clamped to [MIN_GRID_LINE, MAX_GRID_LINE] by the parser
    is_span: bool = False

    @classmethod
    def auto(cls) -> GridLine[Integer]:
        return cls()

    def is_auto(self) -> bool:
        return self.ident == "" and self.line_num.is_zero() and not self.is_span

    def is_ident_only(self) -> bool:
        return self.ident != "" and self.line_num.is_zero() and not self.is_span

    def can_omit(self, other: GridLine[I]) -> bool:
        """
        Whether `other` can be left out after `self` in a grid-row/grid-column/
        grid-area shorthand.

        https://drafts.csswg.org/css-grid/#propdef-grid-column
        """
        if self.is_ident_only():
            return self == other
        return other.is_auto()


# =============================================================================
# <track-breadth>
# =============================================================================


@dataclass(frozen=True)
class LengthBreadth(Generic[L]):
    """A non-negative `<length-percentage>` breadth."""

    value: L


@dataclass(frozen=True)
class Fr:
    """A flex breadth in `fr` units."""

    value: float


@dataclass(frozen=True)
class Auto:
    """`auto`"""

    pass


@dataclass(frozen=True)
class MinContent:
    """`min-content`"""

    pass


@dataclass(frozen=True)
class MaxContent:
    """`max-content`"""

    pass


TrackBreadth = Union[LengthBreadth[L], Fr, Auto, MinContent, MaxContent]


def is_fixed_breadth(breadth: TrackBreadth) -> bool:
    """
    Whether this is a `<fixed-breadth>`, i.e. only a length-percentage.

    https://drafts.csswg.org/css-grid/#typedef-fixed-breadth
    """
    return isinstance(breadth, LengthBreadth)


# =============================================================================
# <track-size>
# =============================================================================


@dataclass(frozen=True)
class BreadthSize(Generic[L]):
    """A bare `<track-breadth>` used as a track size."""

    breadth: TrackBreadth[L]


@dataclass(frozen=True)
class Minmax(Generic[L]):
    """`minmax(<inflexible-breadth>, <track-breadth>)`"""

    min: TrackBreadth[L]
    max: TrackBreadth[L]


@dataclass(frozen=True)
class FitContent(Generic[L]):
    """`fit-content(<length-percentage>)`; the breadth is always a LengthBreadth."""

    breadth: TrackBreadth[L]


TrackSize = Union[BreadthSize[L], Minmax[L], FitContent[L]]

INITIAL_TRACK_SIZE: TrackSize = BreadthSize(Auto())


def is_initial_size(size: TrackSize) -> bool:
    return size == INITIAL_TRACK_SIZE


def is_fixed_size(size: TrackSize) -> bool:
    """
    Whether this is a `<fixed-size>`.

    minmax() is fixed as either minmax(<fixed-breadth>, <track-breadth>) or
    minmax(<inflexible-breadth>, <fixed-breadth>). The parser already limits
    the first argument to an inflexible breadth, so only fixed-ness needs
    checking here.

    https://drafts.csswg.org/css-grid/#typedef-fixed-size
    """
    match size:
        case BreadthSize(breadth=breadth):
            return is_fixed_breadth(breadth)
        case Minmax(min=low, max=high):
            if is_fixed_breadth(low):
                return True
            if isinstance(low, Fr):
                return False
            return is_fixed_breadth(high)
        case FitContent():
            return False
        case _:
            raise TypeError(f"Not a track size: {size!r}")


# =============================================================================
# repeat()
# =============================================================================


@dataclass(frozen=True)
class RepeatNumber(Generic[I]):
    """A positive repeat count, at most MAX_GRID_LINE."""

    value: I


@dataclass(frozen=True)
class AutoFill:
    """`auto-fill`"""

    pass


@dataclass(frozen=True)
class AutoFit:
    """`auto-fit`"""

    pass


RepeatCount = Union[RepeatNumber[I], AutoFill, AutoFit]


def is_auto_count(count: RepeatCount) -> bool:
    return isinstance(count, (AutoFill, AutoFit))


def _check_line_names(line_names: tuple[LineNameSet, ...], values: tuple, what: str) -> None:
    if len(line_names) != len(values) + 1:
        raise ValueError(
            f"{what} needs exactly one more <line-names> than values\n"
            f"  Values: {len(values)}\n"
            f"  Line name groups: {len(line_names)}"
        )


@dataclass(frozen=True)
class TrackRepeat(Generic[L, I]):
    """
    `repeat(<count>, [<line-names>? <track-size>]+ <line-names>?)`

    For N track sizes there are always N+1 line name groups; a missing
    group is the empty tuple.
    """

    count: RepeatCount[I]
    line_names: tuple[LineNameSet, ...]
    track_sizes: tuple[TrackSize[L], ...]

    def __post_init__(self) -> None:
        _check_line_names(self.line_names, self.track_sizes, "repeat()")


# =============================================================================
# <track-list>
# =============================================================================


TrackListValue = Union[TrackSize[L], TrackRepeat[L, I]]


def is_repeat(value: TrackListValue) -> bool:
    return isinstance(value, TrackRepeat)


def is_initial_track_list_value(value: TrackListValue) -> bool:
    return value == INITIAL_TRACK_SIZE


@dataclass(frozen=True)
class TrackList(Generic[L, I]):
    """
    A `<track-list>`: track sizes and repeats with interleaved line names.

    `auto_repeat_index` is the position of the single auto-fill/auto-fit
    repeat, or len(values) when there is none.
    """

    auto_repeat_index: int
    values: tuple[TrackListValue[L, I], ...]
    line_names: tuple[LineNameSet, ...]

    def __post_init__(self) -> None:
        _check_line_names(self.line_names, self.values, "<track-list>")
        if not 0 <= self.auto_repeat_index <= len(self.values):
            raise ValueError(
                f"auto_repeat_index {self.auto_repeat_index} out of range for "
                f"{len(self.values)} values"
            )
        if self.has_auto_repeat():
            value = self.values[self.auto_repeat_index]
            if not (isinstance(value, TrackRepeat) and is_auto_count(value.count)):
                raise ValueError(
                    f"auto_repeat_index {self.auto_repeat_index} does not point at an "
                    f"auto-fill/auto-fit repeat: {value!r}"
                )

    def is_explicit(self) -> bool:
        """True when there are no repeat() values at all."""
        return not any(is_repeat(v) for v in self.values)

    def has_auto_repeat(self) -> bool:
        return self.auto_repeat_index < len(self.values)


# =============================================================================
# <line-name-list> (subgrid)
# =============================================================================


@dataclass(frozen=True)
class NameRepeat(Generic[I]):
    """
    `repeat([<integer [1,∞]> | auto-fill], <line-names>+)`

    The count is never AutoFit; the parser rejects it.
    """

    count: RepeatCount[I]
    line_names: tuple[LineNameSet, ...]

    def __post_init__(self) -> None:
        if not self.line_names:
            raise ValueError("Name repeat needs at least one <line-names>")

    def is_auto_fill(self) -> bool:
        return isinstance(self.count, AutoFill)


@dataclass(frozen=True)
class LineNames:
    """A single `<line-names>` group inside a `<line-name-list>`."""

    names: LineNameSet


LineNameListValue = Union[LineNames, NameRepeat[I]]


def count_expanded_line_names(values: tuple[LineNameListValue, ...]) -> int:
    """Number of line name groups once fixed repeats are expanded, skipping auto-fill."""
    total = 0
    for value in values:
        match value:
            case LineNames():
                total += 1
            case NameRepeat(count=RepeatNumber(value=n), line_names=names):
                total += n.value * len(names)
            case NameRepeat():
                pass
    return min(total, MAX_GRID_LINE)


@dataclass(frozen=True)
class LineNameList(Generic[I]):
    """
    `subgrid [<line-names> | <name-repeat>]*`

    `expanded_line_names_length` is computed once when the list is built
    (see from_values) so layout never has to walk the repeats again.
    """

    expanded_line_names_length: int = 0
    line_names: tuple[LineNameListValue[I], ...] = ()

    @classmethod
    def from_values(cls, values: tuple[LineNameListValue[I], ...]) -> LineNameList[I]:
        return cls(count_expanded_line_names(values), values)

    def expanded_line_names(self, auto_fill_repetitions: int = 0) -> Iterator[LineNameSet]:
        """
        Yield every line name group with repeats expanded.

        The auto-fill repeat, if any, is expanded `auto_fill_repetitions`
        times. Output stops after MAX_GRID_LINE groups.
        """
        remaining = MAX_GRID_LINE
        for value in self.line_names:
            match value:
                case LineNames(names=names):
                    groups = [names]
                    times = 1
                case NameRepeat(count=RepeatNumber(value=n), line_names=names):
                    groups = list(names)
                    times = n.value
                case NameRepeat(line_names=names):
                    groups = list(names)
                    times = auto_fill_repetitions
            for _ in range(times):
                for names in groups:
                    if remaining <= 0:
                        return
                    remaining -= 1
                    yield names


# =============================================================================
# <grid-template-component>
# =============================================================================


@dataclass(frozen=True)
class NoneTemplate:
    """`none`"""

    pass


@dataclass(frozen=True)
class TrackListTemplate(Generic[L, I]):
    """A `<track-list>`."""

    track_list: TrackList[L, I]


@dataclass(frozen=True)
class SubgridTemplate(Generic[I]):
    """`subgrid <line-name-list>?`"""

    line_names: LineNameList[I] = field(default_factory=LineNameList)


@dataclass(frozen=True)
class MasonryTemplate:
    """`masonry`"""

    pass


GridTemplateComponent = Union[NoneTemplate, TrackListTemplate[L, I], SubgridTemplate[I], MasonryTemplate]

INITIAL_GRID_TEMPLATE: GridTemplateComponent = NoneTemplate()


def track_list_len(component: GridTemplateComponent) -> int:
    """Number of values in the track list, or 0 for anything but a track list."""
    match component:
        case TrackListTemplate(track_list=track_list):
            return len(track_list.values)
        case _:
            return 0


def is_initial_template(component: GridTemplateComponent) -> bool:
    return isinstance(component, NoneTemplate)


# =============================================================================
# grid-auto-rows / grid-auto-columns
# =============================================================================


@dataclass(frozen=True)
class ImplicitGridTracks(Generic[L]):
    """
    `<track-size>+` for implicit tracks.

    A lone `auto` is stored as the empty tuple, so a one-element tuple never
    holds the initial track size.
    """

    tracks: tuple[TrackSize[L], ...] = ()

    def is_initial(self) -> bool:
        return not self.tracks
