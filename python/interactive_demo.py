"""
Interactive demo for grid value parsing.
Type a property value and see its canonical form and parsed value tree.
"""

import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.pretty import pretty_repr
from rich.text import Text

from css_render import highlight, to_css
from grid_parser import PROPERTY_PARSERS, ParseError, ParseOptions, parse_property


class InteractiveDemo:
    """Read-parse-print loop over grid property values."""

    def __init__(self, property_name: str = "grid-template-columns", options: ParseOptions | None = None) -> None:
        self.property_name = property_name
        self.options = options or ParseOptions()
        self.console = Console()
        self.status_message = "Ready"
        self.last_input: str | None = None
        self.last_value: object | None = None

    def generate_display(self) -> Panel:
        """Generate the current display with the last result and status."""
        body = Text()
        body.append("Property: ", style="bold")
        body.append(f"{self.property_name}\n\n")

        if self.last_input is not None:
            body.append("Input:     ", style="bold")
            body.append(f"{self.last_input}\n")

        if self.last_value is not None:
            body.append("Canonical: ", style="bold")
            # Convert ANSI-colored text to Rich Text properly
            body.append(Text.from_ansi(highlight(to_css(self.last_value))))
            body.append("\n\n")
            body.append(pretty_repr(self.last_value, max_width=74), style="dim")
            body.append("\n")

        body.append("\n")
        body.append("Commands:\n", style="bold cyan")
        body.append("  :prop <name> - Switch property\n")
        body.append("  :list        - List properties\n")
        body.append("  :q           - Quit\n\n")

        body.append("─" * 40 + "\n", style="dim")
        body.append("Status: ", style="bold")
        body.append(self.status_message)

        return Panel(body, title="Grid Value Parser", border_style="green", width=80)

    def attempt_parse(self, text: str) -> None:
        """Parse `text` for the current property and record the outcome."""
        self.last_input = text
        try:
            self.last_value = parse_property(self.property_name, text, self.options)
        except ParseError as error:
            self.last_value = None
            self.status_message = f"✗ Invalid: {error.message} at column {error.column}"
        else:
            self.status_message = "✓ Parsed"

    def switch_property(self, name: str) -> None:
        if name.lower() not in PROPERTY_PARSERS:
            self.status_message = f"Unknown property: {name!r}"
            return
        self.property_name = name.lower()
        self.last_input = None
        self.last_value = None
        self.status_message = f"Switched to {self.property_name}"

    def run(self) -> None:
        """Run the loop until :q or end of input."""
        try:
            while True:
                self.console.print(self.generate_display())
                try:
                    line = self.console.input("[bold]> [/bold]").strip()
                except EOFError:
                    break

                if line == ":q":
                    break
                elif line == ":list":
                    self.status_message = ", ".join(sorted(PROPERTY_PARSERS))
                elif line.startswith(":prop"):
                    self.switch_property(line[len(":prop"):].strip())
                elif line:
                    self.attempt_parse(line)
        except KeyboardInterrupt:
            self.status_message = "Interrupted by user"
            self.console.print(self.generate_display())


def main(property_name: str) -> None:
    """Run interactive demo for one property."""
    demo = InteractiveDemo(property_name)
    demo.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "debug":
        # Show clamping and rejected values
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")
        main(sys.argv[2] if len(sys.argv) > 2 else "grid-template-columns")
    else:
        main(sys.argv[1] if len(sys.argv) > 1 else "grid-template-columns")
