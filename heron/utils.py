"""
Internal helpers shared by the heron modules.

Scope
- Unset / UnsetType: process-wide sentinel for "not provided" (distinct from None).
- coalesce(): resolve Unset to a concrete default.
- mirror(): read-only property over a private "_name" backing field.
- typename(): CamelCase → hyphen-case labels used in messages and defaults.
- IntrospectableType: metaclass giving stable __repr__/__rich_repr__ and mirrored
  read-only properties to every class declaring __introspectable__.

Nothing here is part of the documented public API, although the names are importable.
"""
import functools
import operator
import re
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    internal singleton sentinel representing an "unset" value.

    behavior
    - truthiness: bool(Unset) is False.
    - identity: Unset is a process-wide singleton (see __new__).
    - display: repr(Unset) -> "Unset".
    - final: subclassing is forbidden to preserve semantics.
    """

    def __or__(self, other, /):
        """
        support UnsetType | T in annotations and isinstance checks.
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        support T | UnsetType in annotations and isinstance checks.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
Internal sentinel for "not provided".

Use Unset as a default when None is a meaningful user value; resolve it with coalesce().
"""


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def _immortalize(object):
    """
    Copy containers recursively so callers cannot mutate private state through a mirror.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return frozenset(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private backing attribute "_{name}".

    Container values are handed out as fresh copies (tuples, dicts, frozensets).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


@functools.cache
def typename(name, /):
    """
    Turn a CamelCase identifier into a hyphenated lower-case label.

    - typename("BasicOptions") -> "basic-options"
    - typename("Argument")     -> "argument"
    """
    if not isinstance(name, str):
        raise TypeError("typename() argument must be a string")
    return re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower()


class IntrospectableType(type):
    """
    Metaclass for heron's metadata-carrying classes.

    Responsibilities
    - Derive __typename__ from the class name (used in messages).
    - Publish every name in __introspectable__ as a read-only property backed by "_{name}".
    - Provide a compact __repr__ and a __rich_repr__ for pretty printers; __displayable__
      narrows the shown fields when set.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": typename(name),
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            },
        )

        if "__repr__" not in namespace:
            def __repr__(self):
                return f"{type(self).__typename__}({
                    ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
                })"
            self.__repr__ = __repr__

        if "__rich_repr__" not in namespace:
            def __rich_repr__(self):
                for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                    yield field, getattr(self, field)
            self.__rich_repr__ = __rich_repr__

        return self


__all__ = (
    # Functions
    "coalesce",
    "mirror",
    "typename",

    # Types
    "UnsetType",
    "IntrospectableType",

    # Constants
    "Unset",
)
