"""
Argument index: the two-tier (required / optional) switch tables of one parser.
"""


class Entry:
    """
    A required descriptor paired with its "satisfied" flag.

    The flag only ever goes from False to True; a new parser is needed to start over.
    """
    __slots__ = ("descriptor", "satisfied")

    def __init__(self, descriptor):
        self.descriptor = descriptor
        self.satisfied = False

    def __repr__(self):
        return f"entry({self.descriptor.name!r}, satisfied={self.satisfied!r})"


def describe(descriptor, /, *, required):
    """
    Render the usage line of one switch.

    - required:        -Name:value (descr)
    - optional:        /Name:value (descr)
    - boolean switches drop the ':value' placeholder.
    """
    line = ("-" if required else "/") + descriptor.name
    if descriptor.type is not bool:
        line += ":value"
    if descriptor.descr:
        line += f" ({descriptor.descr})"
    return line


class ArgumentIndex:
    """
    Required and optional switch tables keyed by lower-cased switch name.

    Built once from the non-command descriptors of an options object. Each table keeps
    declaration order; the usage lines are sorted independently of it.
    """

    def __init__(self, descriptors, /, *, reserved=()):
        self.required = {}
        self.optional = {}
        self.lines = {}
        taken = {name.lower() for name in reserved}

        for descriptor in descriptors:
            if descriptor.command:
                raise TypeError("argument index cannot hold command descriptors")
            if (key := descriptor.name.lower()) in taken:
                raise ValueError(f"switch name {descriptor.name!r} is already in use")
            taken.add(key)

            if descriptor.required:
                self.required[key] = Entry(descriptor)
            else:
                self.optional[key] = descriptor
            self.lines[key] = describe(descriptor, required=descriptor.required)

        self.requireds = tuple(sorted(self.lines[key] for key in self.required))
        self.optionals = tuple(sorted(self.lines[key] for key in self.optional))

    def pairs(self, table, /):
        """
        (declared name, usage line) pairs of one table, ordered like its usage lines.
        """
        names = {key: getattr(value, "descriptor", value).name for key, value in table.items()}
        return tuple(sorted(((names[key], self.lines[key]) for key in table), key=lambda pair: pair[1]))

    def unsatisfied(self):
        """
        the first required entry not yet satisfied, in table order; None when all are.
        """
        return next((entry for entry in self.required.values() if not entry.satisfied), None)


__all__ = (
    "Entry",
    "ArgumentIndex",
    "describe",
)
