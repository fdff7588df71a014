"""
Heron parse engine: bind command-line tokens to the members of an options object.

What this module provides
- Parser: built once from an options object (see heron.fields for declarations). It owns
  • an argument index (required / optional switch tables, heron.index),
  • a command registry (one child Parser per Command member, built eagerly),
  • a rich console bound to the output sink.

Token grammar (switch names are case-insensitive)
- /Name, /Name:value, /Name=value  optional switch (booleans may omit the value)
- -Name:value, -Name=value         required switch
- /Command                         hands the tokens that follow to that command's parser
- @path                            response file, one token per non-blank line (root only)
- ? or help                        prints the usage block and stops
- anything else, the empty token included, is an unknown option

Response files are expanded before the first token is handled, so an unreadable @path is
reported ahead of faults in tokens that precede it.

Failure model
- parse() returns False on the first failure (no aggregation) after printing the fault and
  the usage block to the output; the fault is kept on parser.faults.
- Parser(None) raises NullArgumentError immediately.

Lifecycle notes
- A parser is meant for one parse. Parsing again with the same instance keeps the
  "satisfied" flags of required switches and appends to list members again.
- Only sinks opened by the parser itself (output given as a path) are closed by close().
"""
import difflib
import logging
import os
from collections.abc import Iterable

from .coercion import coerce
from .descriptors import extract
from .faults import *
from .index import ArgumentIndex
from .usage import Usage, render, terminal
from .utils import *

logger = logging.getLogger(__name__)

_HELP = ("?", "help")
_SEPARATORS = (":", "=")


def _sanitized(tokens, /, *, blanks=False):
    """
    Yield trimmed string tokens; empty ones are kept only when blanks is True.

    Raises
    - TypeError: if any element is not a string.
    """
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("parse() argument must be an iterable of strings")
        if (token := token.strip()) or blanks:
            yield token


def _split(body, /):
    """
    Split 'Name:value' / 'Name=value' at the first separator.

    Returns (name, value); value is None when no separator is present and '' when the
    separator ends the token.
    """
    positions = [position for position in map(body.find, _SEPARATORS) if position >= 0]
    if not positions:
        return body, None
    position = min(positions)
    return body[:position], body[position + 1:]


def _hint(prog, name, candidates, prefix):
    """
    'did you mean' hint built from the closest declared switch names.
    """
    suggestions = difflib.get_close_matches(name.lower(), list(candidates), 1)
    if suggestions:
        return "did you mean %s%s? run '%s ?' to see all options" % (prefix, candidates[suggestions[0]], prog)
    return "run '%s ?' to see all available options" % prog


class Parser(metaclass=IntrospectableType):
    """
    Reflection-driven command-line parser bound to one options object.

    Properties
    - options: the bound options object (mutated in place by parse()).
    - prog: program name shown in usage headers.
    - name / descr: command name and description (None for the root parser).
    - parent / root / path: position in the command hierarchy.
    - colorful: whether output carries colors.
    - faults: faults reported by the last parse() call, in order.
    - ignore_unrecognized: when True, unknown switches and bare tokens are skipped silently.
    - children: command name → child parser.
    - commands / optionals / requireds: (name, usage) pairs for custom help systems.
    """

    __introspectable__ = (
        "prog",
        "name",
        "descr",
        "parent",
        "colorful",
        "faults",
    )
    __displayable__ = (
        "prog",
        "name",
        "descr",
        "colorful",
    )

    def __init__(self, options, output=Unset, /, *, prog=Unset, colorful=False, ignore_unrecognized=False):
        """
        Build the parser, its argument index and (recursively) its command parsers.

        Parameters
        - options: the options object to bind. None raises NullArgumentError.
        - output: where usage and faults are written:
          • Unset: the process stdout (borrowed).
          • str | os.PathLike: a file opened for writing, owned and closed by close().
          • a writable text stream: borrowed, never closed by the parser.
        - prog: program name for usage headers; defaults to the hyphenated options class name.
        - colorful: emit colors (palette overridable via __styles__ in __main__).
        - ignore_unrecognized: skip unknown switches instead of failing.

        Raises
        - NullArgumentError: when options is None.
        - TypeError / ValueError: on invalid configuration or clashing switch names.
        """
        if options is None:
            raise NullArgumentError(
                "options object cannot be None",
                title="null argument",
                code=FaultCode.NULL_ARGUMENT,
                hint="pass an instance of your options class",
            )

        if not isinstance(prog, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'prog' must be a string")
        elif isinstance(prog, str) and not (prog := prog.strip()):
            raise ValueError(f"{type(self).__typename__} 'prog' cannot be empty")

        if output is Unset:
            file, owned = None, False
        elif isinstance(output, str | os.PathLike):
            file, owned = open(output, "w", encoding="utf-8"), True
        elif callable(getattr(output, "write", None)):
            file, owned = output, False
        else:
            raise TypeError(f"{type(self).__typename__} 'output' must be a path or a writable text stream")

        try:
            self._setup(
                options,
                terminal(file, colorful=bool(colorful)),
                prog=coalesce(prog, typename(type(options).__name__)),
                colorful=bool(colorful),
                ignore=bool(ignore_unrecognized),
                parent=None,
                name=None,
                descr=None,
            )
        except BaseException:
            if owned:
                file.close()
            raise
        self._file = file
        self._owned = owned

    def _setup(self, options, console, /, *, prog, colorful, ignore, parent, name, descr):
        self._options = options
        self._console = console
        self._prog = prog
        self._colorful = colorful
        self._ignore = ignore
        self._parent = parent
        self._name = name
        self._descr = descr
        self._faults = []
        self._file = None
        self._owned = False

        descriptors = extract(options)
        commands = [descriptor for descriptor in descriptors if descriptor.command]
        self._index = ArgumentIndex(
            [descriptor for descriptor in descriptors if not descriptor.command],
            reserved=[descriptor.name for descriptor in commands],
        )

        self._commands = {}
        for descriptor in commands:
            if (key := descriptor.name.lower()) in self._commands:
                raise ValueError(f"command name {descriptor.name!r} is already in use")
            self._commands[key] = self._spawn(descriptor)

        logger.debug(
            "built parser %r: %d required, %d optional, %d commands",
            " ".join(step.name or step.prog for step in self.path),
            len(self._index.required),
            len(self._index.optional),
            len(self._commands),
        )

    def _spawn(self, descriptor):
        """
        Build the child parser of one command; it shares this parser's console.
        """
        child = object.__new__(type(self))
        child._setup(
            descriptor.get(),
            self._console,
            prog=self._prog,
            colorful=self._colorful,
            ignore=True,
            parent=self,
            name=descriptor.name,
            descr=descriptor.descr,
        )
        return child

    @property
    def options(self):
        return self._options

    @property
    def ignore_unrecognized(self):
        return self._ignore

    @ignore_unrecognized.setter
    def ignore_unrecognized(self, value):
        self._ignore = bool(value)

    @property
    def root(self):
        """
        Return the topmost parser of the command hierarchy.
        """
        child, parent = self, self._parent
        while parent:
            child, parent = parent, parent._parent
        return child

    @property
    def path(self):
        """
        Return the ancestry from the root parser to this one, as a tuple.
        """
        path = [parser := self]
        while parser._parent:
            path.append(parser := parser._parent)
        return tuple(reversed(path))

    @property
    def children(self):
        """command name → child parser, in declaration order."""
        return {child.name: child for child in self._commands.values()}

    @property
    def commands(self):
        """(command name, full usage block of that command) pairs, in declaration order."""
        return tuple((child.name, render(child)) for child in self._commands.values())

    @property
    def optionals(self):
        """(switch name, usage line) pairs of the optional switches."""
        return self._index.pairs(self._index.optional)

    @property
    def requireds(self):
        """(switch name, usage line) pairs of the required switches."""
        return self._index.pairs(self._index.required)

    def usage(self):
        """
        Print the usage block to the output.
        """
        self._console.print(Usage(self))

    def getusage(self):
        """
        Return the usage block as plain text.
        """
        return render(self)

    def error(self, message, /, *args):
        """
        Print a free-form error message followed by the usage block.
        """
        self._console.print(message % args if args else message)
        self._console.print()
        self._console.print(Usage(self))

    def trigger(self, fault, /, **options):
        """
        Record a fault and print it, followed by the usage block.
        """
        if not isinstance(fault, ParserException):
            raise TypeError("trigger() argument must be a parser exception")
        fault = merge(fault, **options, tool=self, colorful=self._colorful)
        self._faults.append(fault)
        logger.debug("parse failed in %r: %s", self._name or self._prog, fault.message)
        self._console.print(fault)
        self._console.print()
        self._console.print(Usage(self))

    def parse(self, tokens, /):
        """
        Parse tokens into the bound options object.

        Returns
        - True when every token was accepted and every required switch was satisfied.
        - False on help display or on the first fault (already printed and recorded).

        Raises
        - TypeError: when tokens is not an iterable of strings.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = list(_sanitized(tokens, blanks=True))
        self._faults.clear()

        if any(token in _HELP for token in tokens):
            self.usage()
            return False

        try:
            if self._parent is None and any(token.startswith("@") for token in tokens):
                tokens = list(self._expand(tokens, frozenset()))
                if any(token in _HELP for token in tokens):
                    self.usage()
                    return False

            for index, token in enumerate(tokens):
                if not self._dispatch(token, tokens[index + 1:]):
                    return False

            if entry := self._index.unsatisfied():
                raise MissingArgumentError(
                    "missing required argument %r" % entry.descriptor.name,
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    input=entry.descriptor.name,
                    hint="add -%s:value" % entry.descriptor.name,
                )
        except ParserException as fault:
            self.trigger(fault)
            return False
        return True

    def _expand(self, tokens, active, /):
        """
        Replace every @path token with the non-blank lines of that file, recursively.
        """
        for token in tokens:
            if not token.startswith("@"):
                yield token
                continue

            path = token[1:]
            if (key := os.path.abspath(path)) in active:
                raise ResponseFileError(
                    "response file %r references itself" % path,
                    title="response file error",
                    code=FaultCode.RESPONSE_FILE,
                    path=path,
                    hint="remove the circular @%s reference" % path,
                )
            try:
                with open(path, encoding="utf-8") as file:
                    lines = file.read().splitlines()
            except (OSError, UnicodeDecodeError) as error:
                raise ResponseFileError(
                    "error reading response file %r" % path,
                    title="response file error",
                    code=FaultCode.RESPONSE_FILE,
                    path=path,
                    hint=str(error),
                ) from error

            logger.debug("expanding response file %r (%d lines)", path, len(lines))
            yield from self._expand(list(_sanitized(lines)), active | {key})

    def _dispatch(self, token, remainder, /):
        """
        Handle one token. Returns False only when a command parser failed (already reported);
        raises a fault for every other failure.
        """
        if token.startswith("/"):
            name, value = _split(token[1:])
            key = name.lower()

            if child := self._commands.get(key):
                logger.debug("delegating %d tokens to command %r", len(remainder), child.name)
                if child.parse(remainder):
                    return True
                self._faults.extend(child.faults)
                return False

            try:
                descriptor = self._index.optional[key]
            except KeyError:
                if self._ignore:
                    return True
                raise UnknownOptionError(
                    "unknown option %r" % name,
                    title="unknown option",
                    code=FaultCode.UNKNOWN_OPTION,
                    input=name,
                    hint=_hint(self._prog, name, {key: descriptor.name for key, descriptor in self._index.optional.items()}, "/"),
                ) from None

            if descriptor.type is bool and not value:
                value = "true"
            self._assign(descriptor, value)
            return True

        if token.startswith("-"):
            name, value = _split(token[1:])
            key = name.lower()

            try:
                entry = self._index.required[key]
            except KeyError:
                if self._ignore or self._handled(key):
                    return True
                raise UnknownOptionError(
                    "unknown option %r" % name,
                    title="unknown option",
                    code=FaultCode.UNKNOWN_OPTION,
                    input=name,
                    hint=_hint(self._prog, name, {key: entry.descriptor.name for key, entry in self._index.required.items()}, "-"),
                ) from None

            if value is None and entry.descriptor.type is bool:
                value = "true"
            if not value:
                raise MissingArgumentError(
                    "missing value for required argument %r" % entry.descriptor.name,
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    input=name,
                    hint="use the form -%s:value" % entry.descriptor.name,
                )
            self._assign(entry.descriptor, value)
            entry.satisfied = True
            return True

        if self._ignore:
            return True
        raise UnknownOptionError(
            "unknown option %r" % token,
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            input=token,
            hint="prefix optional switches with '/' and required ones with '-'; run '%s ?' for details" % self._prog,
        )

    def _assign(self, descriptor, value):
        """
        Coerce value into the descriptor's type and store it (lists append).
        """
        try:
            coerced = coerce(value, descriptor.type)
            if descriptor.list:
                descriptor.append(coerced)
            else:
                descriptor.set(coerced)
        except Exception as exception:
            raise InvalidValueError(
                "invalid value %r for option %r" % (value, descriptor.name),
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                input=descriptor.name,
                value=value,
                hint="expected a value of type %s" % getattr(descriptor.type, "__name__", descriptor.type),
            ) from exception

    def _handled(self, key, /):
        """
        Whether a required switch named key was satisfied here or in any command parser below.
        """
        entry = self._index.required.get(key)
        if entry is not None and entry.satisfied:
            return True
        return any(child._handled(key) for child in self._commands.values())

    def close(self):
        """
        Close the output when the parser opened it; borrowed outputs are left alone.
        """
        if self._owned and not self._file.closed:
            self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, *exception):
        self.close()


__all__ = (
    "Parser",
)
