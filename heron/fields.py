r"""
Heron field declarations.

Overview
- Argument: data descriptor marking a class attribute as a command-line switch.
  • optional switches are written /Name or /Name:value (or /Name=value)
  • required switches (required=True) are written -Name:value
- Command: data descriptor marking a class attribute as a nested options object that is
  parsed by its own child parser when /Name appears on the command line.

Both descriptors store their values in the owning instance's __dict__ under the attribute
name, so plain attribute access keeps working everywhere else in the program.

Metadata (sanitized on construction)
- name: Unset | str. Defaults to the attribute identifier (bound in __set_name__).
  Must match r"[^\W\d][\w.-]*": no prefixes, separators or whitespace.
- descr: Unset | str. Trimmed; empty strings are rejected; Unset becomes None.
- Argument only
  • required: bool.
  • default: any value; copied on first access per instance, so list defaults are
    never shared between instances.
- Command only
  • factory: Unset | callable building the nested options object. Defaults to the
    attribute's annotated type.

Quick example:
    >>> from heron import Argument, Command
    >>> class CopyCommand:
    ...     source: str = Argument("Source", "the full path to the source file", required=True)
    ...     overwrite: bool = Argument("Overwrite", default=True)
    ...
    >>> class Options:
    ...     copy: CopyCommand = Command("Copy", "copy a file to a destination")
    ...     verbose: bool = False
"""
import copy
import re
import typing

from .utils import *


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the shared 'name' and 'descr' metadata.

    Raises
    - TypeError: when 'name' or 'descr' is neither a string nor Unset.
    - ValueError: when either is empty after trimming, or 'name' is not switch-shaped.
    """
    if not isinstance(name := metadata["name"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif isinstance(name, str):
        if not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
        elif not re.fullmatch(r"[^\W\d][\w.-]*", name):
            raise ValueError(f"{cls.__typename__} 'name' must be a valid switch name (got {name!r})")
    metadata["name"] = name

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Argument(metaclass=IntrospectableType):
    """
    Switch declaration for one attribute of an options class.

    The switch name falls back to the attribute identifier. Marking the argument as required
    makes the parser fail when the switch is absent at the end of a parse.
    """

    __introspectable__ = (
        "name",
        "descr",
        "required",
        "default",
        "attribute",
    )

    def __init__(self, name=Unset, /, descr=Unset, *, required=False, default=None):
        metadata = {
            "name": name,
            "descr": descr,
            "required": bool(required),
            "default": default,
        }
        _sanitize_metadata(type(self), metadata)

        for field, object in metadata.items():
            setattr(self, "_" + field, object)
        self._attribute = Unset

    def __set_name__(self, owner, attribute):
        if self._attribute is not Unset and self._attribute != attribute:
            raise TypeError(f"{type(self).__typename__} cannot be bound to both {self._attribute!r} and {attribute!r}")
        self._attribute = attribute
        self._name = coalesce(self._name, attribute)

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        try:
            return instance.__dict__[self._attribute]
        except KeyError:
            return instance.__dict__.setdefault(self._attribute, copy.copy(self._default))

    def __set__(self, instance, value):
        instance.__dict__[self._attribute] = value


class Command(metaclass=IntrospectableType):
    """
    Nested options declaration for one attribute of an options class.

    The nested object is created on first access and cached on the owning instance.
    """

    __introspectable__ = (
        "name",
        "descr",
        "factory",
        "attribute",
    )

    def __init__(self, name=Unset, /, descr=Unset, *, factory=Unset):
        metadata = {
            "name": name,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)

        if factory is not Unset and not callable(factory):
            raise TypeError(f"{type(self).__typename__} 'factory' must be callable")

        for field, object in metadata.items():
            setattr(self, "_" + field, object)
        self._factory = factory
        self._attribute = Unset
        self._owner = Unset

    def __set_name__(self, owner, attribute):
        if self._attribute is not Unset and self._attribute != attribute:
            raise TypeError(f"{type(self).__typename__} cannot be bound to both {self._attribute!r} and {attribute!r}")
        self._attribute = attribute
        self._owner = owner
        self._name = coalesce(self._name, attribute)

    def _build(self):
        if self._factory is Unset:
            try:
                factory = typing.get_type_hints(self._owner)[self._attribute]
            except KeyError:
                raise TypeError(
                    f"{type(self).__typename__} {self._attribute!r} needs a type annotation or a 'factory'"
                ) from None
            if not callable(factory):
                raise TypeError(f"{type(self).__typename__} {self._attribute!r} annotation must be a class")
            self._factory = factory
        return self._factory()

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        try:
            return instance.__dict__[self._attribute]
        except KeyError:
            return instance.__dict__.setdefault(self._attribute, self._build())

    def __set__(self, instance, value):
        instance.__dict__[self._attribute] = value


__all__ = (
    "Argument",
    "Command",
)
