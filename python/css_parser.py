"""
Token cursor over tinycss2 component values.

Provides the small parsing toolkit the grid grammar is written against:
peek/consume tokens, backtrack on failure, descend into function and
bracket blocks, and report source positions for error messages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, TypeVar

import tinycss2
from tinycss2.ast import (
    FunctionBlock,
    IdentToken,
    LiteralToken,
    Node,
    NumberToken,
    SquareBracketsBlock,
)

__all__ = ["ParseError", "SourceLocation", "TokenCursor", "parse_nested_block", "parse_value"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Tokens the cursor never hands out
_SKIPPED = ("whitespace", "comment")


@dataclass(frozen=True)
class SourceLocation:
    """A 1-based line/column position in the parsed text."""

    line: int
    column: int


class ParseError(ValueError):
    """A grammar violation at a given source position."""

    def __init__(self, message: str, line: int = 1, column: int = 1) -> None:
        super().__init__(f"{message} (line {line}, column {column})")
        self.message = message
        self.line = line
        self.column = column

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column)


class TokenCursor:
    """
    Cursor over a list of tinycss2 component values.

    Whitespace and comments are skipped. The only mutable state is the
    position, which try_parse() saves and restores around sub-parsers.

    Args:
        tokens: Component values, as returned by tinycss2
        end: Location reported when the cursor is exhausted
    """

    def __init__(self, tokens: list[Node], end: SourceLocation | None = None) -> None:
        self._tokens = [t for t in tokens if t.type not in _SKIPPED]
        self._pos = 0
        if end is None:
            end = self._guess_end()
        self._end = end

        for token in self._tokens:
            if token.type == "error":
                raise ParseError(
                    f"Tokenizer error: {token.message}", token.source_line, token.source_column
                )

    def _guess_end(self) -> SourceLocation:
        if not self._tokens:
            return SourceLocation(1, 1)
        last = self._tokens[-1]
        return SourceLocation(last.source_line, last.source_column + len(last.serialize()))

    # -------------------------------------------------------------------------
    # Position
    # -------------------------------------------------------------------------

    def is_exhausted(self) -> bool:
        return self._pos >= len(self._tokens)

    def current_source_location(self) -> SourceLocation:
        if self.is_exhausted():
            return self._end
        token = self._tokens[self._pos]
        return SourceLocation(token.source_line, token.source_column)

    def new_error(self, message: str, location: SourceLocation | None = None) -> ParseError:
        """Build a ParseError at `location`, or at the current position."""
        if location is None:
            location = self.current_source_location()
        return ParseError(message, location.line, location.column)

    def peek(self) -> Node | None:
        if self.is_exhausted():
            return None
        return self._tokens[self._pos]

    def next(self) -> Node:
        if self.is_exhausted():
            raise self.new_error("Unexpected end of input")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def try_parse(self, parser: Callable[[TokenCursor], T]) -> T | None:
        """
        Run `parser` on this cursor; on ParseError rewind and return None.

        The sub-parser never leaves the cursor half-advanced: either it
        succeeds and its tokens stay consumed, or the position is restored.
        """
        saved = self._pos
        try:
            return parser(self)
        except ParseError:
            self._pos = saved
            return None

    # -------------------------------------------------------------------------
    # Expectations
    # -------------------------------------------------------------------------

    def expect_ident(self) -> IdentToken:
        location = self.current_source_location()
        token = self.next()
        if not isinstance(token, IdentToken):
            raise self.new_error(f"Expected identifier, got '{token.serialize()}'", location)
        return token

    def expect_ident_matching(self, name: str) -> IdentToken:
        """Consume an identifier equal to `name`, ignoring ASCII case."""
        location = self.current_source_location()
        token = self.next()
        if not isinstance(token, IdentToken) or token.lower_value != name.lower():
            raise self.new_error(f"Expected '{name}', got '{token.serialize()}'", location)
        return token

    def expect_delim(self, char: str) -> None:
        location = self.current_source_location()
        token = self.next()
        if not (isinstance(token, LiteralToken) and token.value == char):
            raise self.new_error(f"Expected '{char}', got '{token.serialize()}'", location)

    def expect_comma(self) -> None:
        self.expect_delim(",")

    def expect_integer(self) -> int:
        location = self.current_source_location()
        token = self.next()
        if not (isinstance(token, NumberToken) and token.is_integer):
            raise self.new_error(f"Expected integer, got '{token.serialize()}'", location)
        return token.int_value

    def expect_function_matching(self, name: str) -> TokenCursor:
        """Consume a `name(...)` function and return a cursor over its arguments."""
        location = self.current_source_location()
        token = self.next()
        if not isinstance(token, FunctionBlock) or token.lower_name != name.lower():
            raise self.new_error(f"Expected '{name}()', got '{token.serialize()}'", location)
        return TokenCursor(token.arguments, end=self._block_end(token))

    def expect_square_bracket_block(self) -> TokenCursor:
        """Consume a `[...]` block and return a cursor over its contents."""
        location = self.current_source_location()
        token = self.next()
        if not isinstance(token, SquareBracketsBlock):
            raise self.new_error(f"Expected '[', got '{token.serialize()}'", location)
        return TokenCursor(token.content, end=self._block_end(token))

    def expect_exhausted(self) -> None:
        if not self.is_exhausted():
            token = self._tokens[self._pos]
            raise self.new_error(f"Unexpected '{token.serialize()}'")

    def _block_end(self, block: Node) -> SourceLocation:
        text = block.serialize()
        return SourceLocation(block.source_line, block.source_column + len(text) - 1)


def parse_nested_block(nested: TokenCursor, parser: Callable[[TokenCursor], T]) -> T:
    """Run `parser` over a block's contents, which must be consumed entirely."""
    result = parser(nested)
    nested.expect_exhausted()
    return result


def parse_value(text: str, parser: Callable[[TokenCursor], T]) -> T:
    """
    Tokenize a whole property value and parse it with `parser`.

    Raises:
        ParseError: If the value does not match, or if tokens remain
    """
    tokens = tinycss2.parse_component_value_list(text, skip_comments=True)
    try:
        return parse_nested_block(TokenCursor(tokens), parser)
    except ParseError as error:
        logger.debug("Rejected value %r: %s", text, error)
        raise
