#!/usr/bin/env python3
"""
Demo of parsing and canonical serialization of grid values.
"""

import logging
import sys

from css_render import highlight, to_css
from grid_parser import ParseError, parse_property

EXAMPLES = [
    ("grid-template-columns", "[full-start] minmax(1em, 1fr) [main-start] minmax(0, 40em) [main-end]"),
    ("grid-template-columns", "repeat(auto-fill, [col] 100px)"),
    ("grid-template-columns", "100px   repeat(2,   [a]   1fr   [b])  fit-content(50%)"),
    ("grid-template-rows", "minmax(auto, 2fr) MINMAX(10px, 2fr)"),
    ("grid-template-rows", "subgrid [a] [b c] repeat(2, [d]) repeat(auto-fill, [] [e])"),
    ("grid-template-rows", "masonry"),
    ("grid-auto-rows", "auto"),
    ("grid-row-start", "span 1 header"),
    ("grid-row-start", "99999"),
    ("grid-column", "main / main"),
    ("grid-area", "2 / 1 / auto / auto"),
    # Invalid
    ("grid-row-start", "span"),
    ("grid-row-start", "2 span foo"),
    ("grid-template-columns", "repeat(auto-fill, 1fr)"),
    ("grid-template-rows", "subgrid repeat(auto-fit, [a])"),
]


def main() -> None:
    """Parse each example and print its canonical form."""
    for name, text in EXAMPLES:
        print(f"{name}: {text}")
        try:
            value = parse_property(name, text)
        except ParseError as error:
            print(f"  -> invalid: {error}")
        else:
            print(f"  -> {highlight(to_css(value))}")
        print()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "debug":
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")
    main()
