"""
Option descriptor extraction.

extract(options) inspects type(options) once and returns one Descriptor per eligible member:

- annotated attributes across the MRO (base classes first, in declaration order);
- Argument / Command descriptors found in class dictionaries, annotated or not;
- public properties that define a setter.

Members whose name starts with an underscore, and annotations wrapped in ClassVar, are never
touched, whatever metadata they carry. Command members are materialised during extraction.
"""
import functools
import logging
import types
import typing
from collections.abc import MutableSequence

from .fields import Argument, Command
from .utils import *

logger = logging.getLogger(__name__)


class Descriptor(metaclass=IntrospectableType):
    """
    Static metadata plus a bound accessor pair for one member of an options object.

    - type is the element type for list members and the nested options type for commands.
    - get()/set() are closed over the owning instance when the descriptor is built, so the
      parse engine never inspects types mid-parse.
    """

    __introspectable__ = (
        "name",
        "descr",
        "required",
        "command",
        "list",
        "type",
        "attribute",
    )
    __displayable__ = (
        "name",
        "required",
        "command",
        "list",
        "type",
    )

    def __init__(self, options, attribute, /, *, name, descr, required, command, list, type):
        self._name = name
        self._descr = descr
        self._required = required and not command
        self._command = command
        self._list = list
        self._type = type
        self._attribute = attribute
        self.get = functools.partial(getattr, options, attribute)
        self.set = functools.partial(setattr, options, attribute)

    def append(self, value):
        """
        append value to the bound sequence, creating an empty list when the member is None.
        """
        if (sequence := self.get()) is None:
            self.set(sequence := [])
        sequence.append(value)


def _unwrap(annotation):
    """
    Resolve an annotation into (is-list, element-or-scalar type).
    """
    origin = typing.get_origin(annotation)

    # T | None and Optional[T]
    if origin in (typing.Union, types.UnionType):
        arguments = [argument for argument in typing.get_args(annotation) if argument is not type(None)]
        if len(arguments) != 1:
            raise TypeError(f"unsupported union annotation {annotation!r}")
        return _unwrap(arguments[0])

    if origin is typing.Annotated:
        return _unwrap(typing.get_args(annotation)[0])

    if annotation is list:
        return True, str

    if isinstance(origin, type) and issubclass(origin, MutableSequence):
        arguments = typing.get_args(annotation)
        return True, arguments[0] if arguments else str

    return False, annotation


def _members(cls):
    """
    Yield (attribute, annotation, metadata) for every public instance member of cls.
    """
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except NameError as error:
        raise TypeError(f"cannot resolve annotations of {cls.__qualname__!r}: {error}") from None

    seen = set()
    namespace = {}
    for base in reversed(cls.__mro__):
        namespace.update(vars(base))

    for attribute, annotation in hints.items():
        seen.add(attribute)
        if attribute.startswith("_") or typing.get_origin(annotation) is typing.ClassVar:
            continue
        yield attribute, annotation, namespace.get(attribute)

    for attribute, object in namespace.items():
        if attribute in seen or attribute.startswith("_"):
            continue
        if isinstance(object, Argument):
            default = object.default
            yield attribute, type(default) if default is not None else str, object
        elif isinstance(object, Command):
            yield attribute, Unset, object
        elif isinstance(object, property) and object.fset is not None:
            annotation = typing.get_type_hints(object.fget).get("return", str)
            yield attribute, annotation, object


def extract(options, /):
    """
    Derive the descriptors of an options object.

    Returns
    - tuple[Descriptor, ...] in member order.

    Raises
    - TypeError: when an annotation cannot be resolved or is an unsupported union.
    """
    descriptors = []

    for attribute, annotation, metadata in _members(type(options)):
        if isinstance(metadata, Command):
            nested = getattr(options, attribute)
            if nested is None:
                logger.debug("skipping command %r of %s: no nested options", attribute, type(options).__qualname__)
                continue
            descriptors.append(Descriptor(
                options,
                attribute,
                name=metadata.name,
                descr=metadata.descr,
                required=False,
                command=True,
                list=False,
                type=type(nested),
            ))
            continue

        many, element = _unwrap(annotation)
        if isinstance(metadata, Argument):
            name, descr, required = metadata.name, metadata.descr, metadata.required
        else:
            name, descr, required = attribute, None, False

        descriptor = Descriptor(
            options,
            attribute,
            name=name,
            descr=descr,
            required=required,
            command=False,
            list=many,
            type=element,
        )
        if many and not isinstance(metadata, Argument | property) and attribute not in getattr(options, "__dict__", {}):
            # class-level lists are shared by every instance
            descriptor.set(list(getattr(options, attribute, None) or ()))
        elif many and getattr(options, attribute, None) is None:
            descriptor.set([])
        descriptors.append(descriptor)

    logger.debug("extracted %d descriptors from %s", len(descriptors), type(options).__qualname__)
    return tuple(descriptors)


__all__ = (
    "Descriptor",
    "extract",
)
