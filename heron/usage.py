"""
Usage rendering.

Layout (informational, the renderer guarantees completeness rather than exact bytes):

    Usage: <prog> [/<command> ...] <required switches>

    Options:
        <optional switch>
        ...

    Commands:
    <command> (<descr>)
    <usage block of that command, rendered recursively>

Usage(parser) is a rich renderable that rebuilds its lines on every render and never touches
parser state, so the same object can be printed any number of times.

Palette keys (override through a __styles__ mapping in __main__; colorful parsers only)
- usage-label, program-name, required-name, section-label, option-name, command-name,
  argument-description
"""
import io
from collections import defaultdict

from rich.console import Console
from rich.text import Text


def terminal(file=None, /, *, colorful=False):
    """
    Build the rich console heron writes through.

    - file None: the process stdout, resolved at write time.
    - colorful False: plain text, no control codes, no wrapping.
    """
    return Console(
        file=file,
        color_system="truecolor" if colorful else None,
        force_terminal=True if colorful else None,
        highlight=False,
        markup=False,
        emoji=False,
        soft_wrap=True,
    )


def _styles():
    main = __import__("__main__")
    return defaultdict(str, {
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "required-name": "bold #FFD600",  # AMBER for mandatory switches
        "section-label": "bold #FFFFFF",  # Pure white headers
        "option-name": "bold #00E6FF",  # CYAN for options
        "command-name": "bold #22C55E",  # GREEN for commands
        "argument-description": "#9CA3AF",  # Muted gray
    } | getattr(main, "__styles__", {}))


class Usage:
    """
    Lazy, restartable usage block of one parser (commands included, recursively).
    """

    def __init__(self, parser, /):
        self._parser = parser

    def __repr__(self):
        return f"usage({self._parser.prog!r})"

    def __rich_console__(self, console, options):
        yield from self.lines()

    def lines(self):
        """
        Yield the block as rich Text lines.
        """
        parser = self._parser
        styles = _styles()

        def style(key):
            return styles[key] if parser.colorful else ""

        route = " ".join(f"/{step.name}" for step in parser.path[1:])
        header = Text.assemble(
            ("Usage: ", style("usage-label")),
            (" ".join(filter(None, (parser.prog, route))), style("program-name")),
        )
        if requireds := parser._index.requireds:
            header.append(" ")
            header.append(" ".join(requireds), style("required-name"))
        yield header

        if optionals := parser._index.optionals:
            yield Text("")
            yield Text("Options:", style("section-label"))
            for line in optionals:
                yield Text.assemble("    ", (line, style("option-name")))

        if parser._commands:
            yield Text("")
            yield Text("Commands:", style("section-label"))
            for child in parser._commands.values():
                line = Text(child.name, style("command-name"))
                if child.descr:
                    line.append(f" ({child.descr})", style("argument-description"))
                yield line
                yield from Usage(child).lines()


def render(parser, /):
    """
    Return the usage block of parser as plain text.
    """
    buffer = io.StringIO()
    terminal(buffer).print(Usage(parser))
    return buffer.getvalue()


__all__ = (
    "Usage",
    "render",
    "terminal",
)
