"""
String-to-value coercion for switch values.

coerce(raw, type) converts one raw token value into the target type:

- empty or None       → None
- str                 → one matching pair of surrounding quotes (" or ') removed
- bool                → "true" / "false", case-insensitive
- int, float          → built-in constructors (invariant, no locale)
- Enum subclasses     → member name (exact case), member value, or integral value
- any other callable  → type(raw)

Failures surface as ValueError or TypeError; the parser reports them as invalid values.
"""
import builtins
import enum

_QUOTES = ('"', "'")
_BOOLEANS = {"true": True, "false": False}


def unquote(raw, /):
    """
    Strip one matching pair of surrounding double or single quotes.

    - unquote('"hello world"') -> 'hello world'
    - unquote("'a'")           -> 'a'
    - unquote('"a\\'')          -> '"a\\'' (unbalanced, unchanged)
    """
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in _QUOTES:
        return raw[1:-1]
    return raw


def _enumerate(cls, raw):
    try:
        return cls[raw]
    except KeyError:
        pass
    try:
        return cls(raw)
    except ValueError:
        pass
    try:
        number = int(raw)
    except ValueError:
        raise ValueError(f"{raw!r} is not a member of {cls.__name__}") from None
    return cls(number)


def coerce(raw, type, /):
    """
    Convert raw into a value of the given type.

    Raises
    - ValueError / TypeError: when raw is not a valid literal for type.
    """
    if not raw:
        return None
    if type is str:
        return unquote(raw)
    if type is bool:
        try:
            return _BOOLEANS[raw.strip().lower()]
        except KeyError:
            raise ValueError(f"{raw!r} is not a valid boolean") from None
    if isinstance(type, builtins.type) and issubclass(type, enum.Enum):
        return _enumerate(type, raw.strip())
    if not callable(type):
        raise TypeError(f"cannot coerce into {type!r}")
    return type(raw)


__all__ = (
    "coerce",
    "unquote",
)
