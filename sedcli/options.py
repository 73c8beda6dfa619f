r"""
sedcli option model: option descriptors, namespaces and namespace entries.

Overview
- Option: one switch of a command's option table, e.g. -d/--device <DEVICE>.
  • long_name: required, unique within its table, matched as "--long_name".
  • short_name: optional single ASCII letter, matched as "-x".
  • metavar: optional label; its presence means the option takes argument tokens.
  • nargs: 0 for "any number of tokens up to the next option", k > 0 for a hard
    cap. A nonzero nargs is also the occurrence limit of the option.
  • required / optional / hidden: cardinality, optional-argument display and
    help visibility (see OptionFlag).

- Namespace: the selector option of a namespace command (e.g. --type) plus an
  ordered tuple of Entry objects.
- Entry: a named option table selected at run time by "--selector <name>".

- Introspection & representation
  • DescriptorType metaclass provides __typename__, stable __repr__ and
    __rich_repr__, and exposes every name in __introspectable__ as a read-only
    property.

Validation highlights
- Long names must match r"[A-Za-z][\w-]*" (the first character decides whether a
  token classifies as a long option at all).
- Short names must be exactly one ASCII letter.
- Tables reject duplicate long names and duplicate short names.
- Strings are trimmed; empty strings are rejected.

Quick example:
    >>> from sedcli.options import Option, Namespace, Entry
    >>> device = Option("device", "d", metavar="DEVICE", nargs=1, required=True,
    ...                 descr="Device node e.g. /dev/nvme0n1")
    >>> Namespace("type", "t", entries=[Entry("opal", [device], descr="TCG Opal drives")])
"""
import enum
import functools
import operator
import re
from collections.abc import Iterable

from rich.text import Text

from .utils import *


class DescriptorType(type):
    """
    Metaclass shared by the grammar descriptors (options, namespaces, commands).

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens);
      it prefixes every construction diagnostic.
    - Expose the names listed in __introspectable__ as read-only properties
      backed by "_<name>" fields (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options,
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class OptionFlag(enum.IntFlag):
    """
    behavior bits of an option descriptor.

    - REQUIRED: the option must appear at least once.
    - OPTIONAL: the argument is displayed as "[<ARG>]" in help.
    - HIDDEN: the option is omitted from help.
    """
    NONE = 0
    REQUIRED = enum.auto()
    OPTIONAL = enum.auto()
    HIDDEN = enum.auto()


def _sanitize_text(cls, metadata, name, /):
    """
    Internal: validate an optional str | Text field, trim it and resolve Unset to None.

    Raises
    - TypeError: when the value is not str | Text | Unset.
    - ValueError: when a string becomes empty after trimming.
    """
    if not isinstance(object := metadata[name], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} {name!r} must be a string")
    elif isinstance(object, str) and not (object := object.strip()):
        raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
    metadata[name] = coalesce(object)


def _sanitize_names(cls, metadata, /):
    r"""
    Internal: validate the long/short name pair shared by options and commands.

    - long_name: str matching r"[A-Za-z][\w-]*".
    - short_name: Unset | str holding exactly one ASCII letter. Unset becomes None.

    Raises
    - TypeError: when a name is not a string.
    - ValueError: when a name does not have the expected shape.
    """
    if not isinstance(long_name := metadata["long_name"], str):
        raise TypeError(f"{cls.__typename__} long name must be a string")
    elif not re.fullmatch(r"[A-Za-z][\w-]*", long_name := long_name.strip(), re.ASCII):
        raise ValueError(f"{cls.__typename__} long name must start with an ascii letter ({long_name!r} given)")
    metadata["long_name"] = long_name

    if not isinstance(short_name := metadata["short_name"], str | Unset):
        raise TypeError(f"{cls.__typename__} short name must be a string")
    elif isinstance(short_name, str) and not re.fullmatch(r"[A-Za-z]", short_name, re.ASCII):
        raise ValueError(f"{cls.__typename__} short name must be a single ascii letter ({short_name!r} given)")
    metadata["short_name"] = coalesce(short_name)


def tabulate(cls, options, /):
    """
    Validate an option table and freeze it into a tuple.

    Raises
    - TypeError: when the table is not iterable or holds non-Option items.
    - ValueError: when long names or short names collide.
    """
    if not isinstance(options, Iterable) or isinstance(options, str):
        raise TypeError(f"{cls.__typename__} options must be an iterable of options")
    table = tuple(options)
    long_names = set()
    short_names = set()
    for option in table:
        if not isinstance(option, Option):
            raise TypeError(f"{cls.__typename__} options must be an iterable of options")
        if option.long_name in long_names:
            raise ValueError(f"{cls.__typename__} options cannot share long name {option.long_name!r}")
        long_names.add(option.long_name)
        if option.short_name is not None:
            if option.short_name in short_names:
                raise ValueError(f"{cls.__typename__} options cannot share short name {option.short_name!r}")
            short_names.add(option.short_name)
    return table


class Option(metaclass=DescriptorType):
    """
    Named switch of an option table.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      mirroring the sanitized metadata.
    - flags: OptionFlag view of required/optional/hidden.
    """

    __introspectable__ = (
        "long_name",
        "short_name",
        "metavar",
        "nargs",
        "descr",
        "required",
        "optional",
        "hidden",
    )
    __displayable__ = (
        "long_name",
        "short_name",
        "metavar",
        "nargs",
        "flags",
    )

    def __new__(
            cls,
            long_name,
            short_name=Unset,
            /,
            *,
            metavar=Unset,
            nargs=0,
            descr=Unset,
            required=False,
            optional=False,
            hidden=False,
    ):
        """
        Construct an option descriptor.

        Parameters
        - long_name: str, matched as "--long_name".
        - short_name: Unset | str, one ASCII letter matched as "-x".
        - metavar: Unset | str, argument label. When set, the option consumes the
          argument tokens that follow it.
        - nargs: int >= 0, maximum argument count and occurrence limit (0 = unbounded).
        - descr: Unset | str | Text, one-line description for help.
        - required: bool, the option must be supplied.
        - optional: bool, display the argument as optional ("[<ARG>]").
        - hidden: bool, omit from help.

        Raises
        - TypeError / ValueError on malformed metadata.
        """
        metadata = {
            "long_name": long_name,
            "short_name": short_name,
            "metavar": metavar,
            "nargs": nargs,
            "descr": descr,
            "required": bool(required),
            "optional": bool(optional),
            "hidden": bool(hidden),
        }
        _sanitize_names(cls, metadata)
        _sanitize_text(cls, metadata, "metavar")
        _sanitize_text(cls, metadata, "descr")

        if isinstance(nargs, bool) or not isinstance(nargs, int):
            raise TypeError(f"{cls.__typename__} 'nargs' must be an integer")
        elif nargs < 0:
            raise ValueError(f"{cls.__typename__} 'nargs' cannot be negative")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def flags(self):
        flags = OptionFlag.NONE
        if self._required:
            flags |= OptionFlag.REQUIRED
        if self._optional:
            flags |= OptionFlag.OPTIONAL
        if self._hidden:
            flags |= OptionFlag.HIDDEN
        return flags

    @property
    def parametric(self):
        """
        whether the option consumes argument tokens (it declares a metavar).
        """
        return self._metavar is not None

    def label(self):
        """
        "-x/--long" (or "--long" without a short name), as used in cardinality messages.
        """
        if self._short_name is None:
            return "--%s" % self._long_name
        return "-%s/--%s" % (self._short_name, self._long_name)

    def synopsis(self):
        """
        "--long <ARG>", "--long [<ARG>]" or "--long", as rendered by the help synthesizer.
        """
        if self._metavar is None:
            return "--%s" % self._long_name
        if self._optional:
            return "--%s [<%s>]" % (self._long_name, self._metavar)
        return "--%s <%s>" % (self._long_name, self._metavar)


class Entry(metaclass=DescriptorType):
    """
    Named option table of a namespace (e.g. "opal" under --type).
    """

    __introspectable__ = (
        "name",
        "options",
        "descr",
    )

    def __new__(cls, name, options=(), /, *, descr=Unset):
        metadata = {
            "name": name,
            "descr": descr,
        }
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} name must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} name cannot be empty")
        metadata["name"] = name
        _sanitize_text(cls, metadata, "descr")
        metadata["options"] = tabulate(cls, options)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class Namespace(metaclass=DescriptorType):
    """
    Selector option plus the entries it can select.

    The selector is matched like an option ("--long_name" or "-x") and must be
    followed by the exact name of one of the entries. Entry names are unique.
    """

    __introspectable__ = (
        "long_name",
        "short_name",
        "entries",
    )

    def __new__(cls, long_name, short_name=Unset, /, *, entries):
        metadata = {
            "long_name": long_name,
            "short_name": short_name,
        }
        _sanitize_names(cls, metadata)

        if not isinstance(entries, Iterable) or not (entries := tuple(entries)):
            raise TypeError(f"{cls.__typename__} must specify at least one entry")
        names = set()
        for entry in entries:
            if not isinstance(entry, Entry):
                raise TypeError(f"{cls.__typename__} entries must be entry objects")
            elif entry.name in names:
                raise ValueError(f"{cls.__typename__} entries cannot share name {entry.name!r}")
            names.add(entry.name)
        metadata["entries"] = entries

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def label(self):
        """
        "--long (-x)" (or "--long"), as used in namespace help headings.
        """
        if self._short_name is None:
            return "--%s" % self._long_name
        return "--%s (-%s)" % (self._long_name, self._short_name)

    def find(self, name, /):
        """
        entry whose name equals the given token exactly, or None.
        """
        for entry in self._entries:
            if entry.name == name:
                return entry
        return None


__all__ = (
    "Option",
    "OptionFlag",
    "Namespace",
    "Entry",
)
