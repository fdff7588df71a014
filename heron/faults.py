"""
Heron faults and their rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing parse failure.
- ParserException: base type carrying a message plus read-only context options; knows how
  to render itself with rich (header, message, hint) and how to be re-created with merged
  options through copy.replace().
- One subclass per failure kind: NullArgumentError, UnknownOptionError,
  MissingArgumentError, InvalidValueError, ResponseFileError.

Propagation
- NullArgumentError is raised to the caller at construction time (it is also a TypeError).
- Every other fault is raised inside the parse engine, caught once by Parser.parse(),
  printed to the parser's output followed by the usage block, and turned into False.

Integration
- The host application can remap numeric codes with a __codes__ mapping in __main__ and
  override the palette with a __styles__ mapping in __main__.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - construction (2110x): NULL_ARGUMENT
    - switches (2111x): UNKNOWN_OPTION, MISSING_ARGUMENT, INVALID_VALUE
    - inputs (2112x): RESPONSE_FILE

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- construction errors ---
    NULL_ARGUMENT       = 21101

    # --- switch errors ---
    UNKNOWN_OPTION      = 21111
    MISSING_ARGUMENT    = 21112
    INVALID_VALUE       = 21113

    # --- input errors ---
    RESPONSE_FILE       = 21121

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to override
        numeric ids with friendlier labels; otherwise the numeric value is returned.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParserException(Exception):
    """
    base class of every heron fault.

    options
    - code: FaultCode, title: str, hint: str (rendering)
    - tool: the Parser that reported the fault (set by Parser.trigger)
    - colorful: bool (rendering)
    - any other context: input, value, path, ...
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if isinstance(self.message, str) else ""

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[style] if colorful else "")

        tool = self.options.get("tool")
        prog = getattr(tool, "prog", None) or "?"
        code = self.options.get("code")
        title = (self.options.get("title") or "").title() or type(self).__name__

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(code.normalize() if code else "", "code"),
            " | ",
            text(title, "error-title"),
            " ]"
        )
        renders = [header, text(self.message, "error-message")]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        return Group(*renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        replica.__cause__ = self.__cause__
        return replica


class NullArgumentError(ParserException, TypeError): ...
class UnknownOptionError(ParserException): ...
class MissingArgumentError(ParserException): ...
class InvalidValueError(ParserException): ...
class ResponseFileError(ParserException): ...


def merge(fault, /, **options):
    """
    return a copy of fault with options merged in (later keys win).
    """
    if not isinstance(fault, ParserException):
        raise TypeError("merge() argument must be a parser exception")
    return copy.replace(fault, **options)


__all__ = (
    "FaultCode",
    "ParserException",
    "NullArgumentError",
    "UnknownOptionError",
    "MissingArgumentError",
    "InvalidValueError",
    "ResponseFileError",
    "merge",
)
