"""
Authored CSS numeric values and identifiers used by the grid grammar.

The grid value types are generic over a length type and an integer type.
The classes here are the as-authored versions that know how to parse
themselves from a TokenCursor; the Protocols describe what any other
representation (e.g. resolved pixel values) must provide.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

from tinycss2.ast import DimensionToken, NumberToken, PercentageToken

from css_parser import TokenCursor

__all__ = [
    "Integer",
    "IntegerLike",
    "LengthLike",
    "LengthPercentage",
    "LENGTH_UNITS",
    "parse_custom_ident",
    "serialize_number",
]


LENGTH_UNITS = frozenset({
    # Absolute
    "px", "cm", "mm", "q", "in", "pt", "pc",
    # Font relative
    "em", "rem", "ex", "rex", "ch", "rch", "cap", "rcap", "ic", "ric", "lh", "rlh",
    # Viewport relative
    "vw", "vh", "vmin", "vmax", "vi", "vb",
    "svw", "svh", "lvw", "lvh", "dvw", "dvh",
    # Container relative
    "cqw", "cqh", "cqi", "cqb", "cqmin", "cqmax",
})

# Never valid as <custom-ident>
CSS_WIDE_KEYWORDS = frozenset({"initial", "inherit", "unset", "revert", "revert-layer", "default"})


class LengthLike(Protocol):
    """Anything usable as the length of a track breadth."""

    def to_css(self) -> str: ...


class IntegerLike(Protocol):
    """Anything usable as a grid line number or repeat count."""

    @property
    def value(self) -> int: ...

    def is_zero(self) -> bool: ...

    def is_one(self) -> bool: ...

    def to_css(self) -> str: ...


def serialize_number(value: float) -> str:
    """Shortest text that parses back to the same float: 2.0 -> '2', 0.50 -> '0.5'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


# =============================================================================
# <integer>
# =============================================================================


@dataclass(frozen=True)
class Integer:
    """An authored `<integer>`."""

    value: int

    def is_zero(self) -> bool:
        return self.value == 0

    def is_one(self) -> bool:
        return self.value == 1

    def to_css(self) -> str:
        return str(self.value)

    @classmethod
    def parse(cls, cursor: TokenCursor) -> Integer:
        return cls(cursor.expect_integer())

    @classmethod
    def parse_positive(cls, cursor: TokenCursor) -> Integer:
        """Parse an `<integer [1,∞]>`."""
        location = cursor.current_source_location()
        value = cursor.expect_integer()
        if value <= 0:
            raise cursor.new_error(f"Expected a positive integer, got {value}", location)
        return cls(value)


# =============================================================================
# <length-percentage>
# =============================================================================


@dataclass(frozen=True)
class LengthPercentage:
    """
    An authored `<length>` or `<percentage>`.

    `unit` is a lowercase length unit, or "%" for percentages.
    """

    value: float
    unit: str = "px"

    @property
    def is_percentage(self) -> bool:
        return self.unit == "%"

    def to_css(self) -> str:
        return f"{serialize_number(self.value)}{self.unit}"

    @classmethod
    def parse_non_negative(cls, cursor: TokenCursor) -> LengthPercentage:
        location = cursor.current_source_location()
        token = cursor.next()

        match token:
            case DimensionToken(lower_unit=unit) if unit in LENGTH_UNITS:
                result = cls(float(token.value), unit)
            case PercentageToken():
                result = cls(float(token.value), "%")
            case NumberToken() if token.value == 0:
                # Unitless zero is a valid <length>
                result = cls(0.0, "px")
            case _:
                raise cursor.new_error(
                    f"Expected a length or percentage, got '{token.serialize()}'", location
                )

        if not math.isfinite(result.value):
            raise cursor.new_error(f"Value out of range: '{token.serialize()}'", location)
        if result.value < 0:
            raise cursor.new_error(f"Negative values are not allowed: '{token.serialize()}'", location)
        return result


# =============================================================================
# <custom-ident>
# =============================================================================


def parse_custom_ident(cursor: TokenCursor, excluding: tuple[str, ...] = ()) -> str:
    """
    Parse a `<custom-ident>`, rejecting CSS-wide keywords and `excluding`.

    Keyword comparison ignores ASCII case; the identifier itself keeps the
    case it was written in.
    """
    location = cursor.current_source_location()
    name = cursor.expect_ident().value
    lowered = name.lower()
    if lowered in CSS_WIDE_KEYWORDS or lowered in (e.lower() for e in excluding):
        raise cursor.new_error(f"'{name}' is not allowed as an identifier here", location)
    return name
