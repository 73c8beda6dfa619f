"""
sedcli command model: command descriptors in three variants.

What this module provides
- Command: descriptor of one top-level action (--name / -c). Constructing a
  Command yields one of its variants, picked by the option source given:
  • FlatCommand: a flat option table; options go to parse(long_name, args).
  • NamespaceCommand: a Namespace; the selected entry's options go to
    parse(entry_name, long_name, args).
  • ActionCommand: no options; handle() runs directly.
- CommandKind: the tag of each variant.
- command(...): create a Command, or a decorator that wraps a handle callable.

Callbacks (the business-logic seams)
- handle() -> int: the command body; its status is the process exit status.
- parse(...) -> int: option handler; nonzero aborts the parse.
- configure(command) -> int: run once per invocation; negative hides the command.
- help(app, command) -> None: replaces the synthesized usage of the command.

Variant capabilities
- resolve(argv) -> (options, first, entry): the option table of the invocation,
  the index of the first option token and the selected namespace entry (None
  for flat commands). Namespace commands raise the namespace faults here.
- dispatch(entry, name, args) -> int: forward one matched option.

Quick example:
    >>> from sedcli import command, Option
    >>> def on_option(name, args): return 0
    >>> @command("lock", "L", options=[Option("device", "d", metavar="DEV", nargs=1, required=True)],
    ...          parse=on_option, privileged=True, descr="Lock the drive")
    >>> def lock(): return 0
"""
import enum

from .faults import *
from .options import DescriptorType, Namespace, _sanitize_names, _sanitize_text, tabulate
from .tokens import matches
from .utils import *


class CommandKind(enum.Enum):
    FLAT = "flat"
    NAMESPACE = "namespace"
    ACTION = "action"


def _sanitize_callbacks(cls, metadata, /):
    """
    Internal: handle must be callable; parse/configure/help are callable or Unset (-> None).
    """
    if not callable(metadata["handle"]):
        raise TypeError(f"{cls.__typename__} 'handle' must be callable")
    for name in ("parse", "configure", "help"):
        if not callable(object := metadata[name]) and object is not Unset:
            raise TypeError(f"{cls.__typename__} {name!r} must be callable")
        metadata[name] = coalesce(object)


class Command(metaclass=DescriptorType):
    """
    Top-level command descriptor.

    Construction
    - Command(handle, name, short_name=Unset, /, *, options=..., namespace=..., parse=..., ...)
      returns a FlatCommand when options are given, a NamespaceCommand when a
      namespace is given and an ActionCommand otherwise. Giving both is a TypeError.

    Parameters
    - handle: () -> int, command body.
    - name: str, matched as "--name".
    - short_name: Unset | str, one ASCII letter matched as "-c".
    - options: Iterable[Option], flat option table.
    - namespace: Namespace, namespace selector and entries.
    - parse: option handler (see module docstring for its signature per variant).
    - descr / long_descr: Unset | str | Text, help texts (long_descr defaults to descr in help).
    - hidden: bool, omit from the command list.
    - privileged: bool, elevated privilege is required.
    - configure: (command) -> int, per-invocation hook.
    - help: (app, command) -> None, custom usage renderer.
    """

    __introspectable__ = (
        "name",
        "short_name",
        "descr",
        "long_descr",
        "hidden",
        "privileged",
        "handle",
        "parse",
        "configure",
        "help",
    )
    __displayable__ = (
        "name",
        "short_name",
        "kind",
        "hidden",
        "privileged",
    )

    kind = Unset

    def __new__(
            cls,
            handle,
            name,
            short_name=Unset,
            /,
            *,
            options=Unset,
            namespace=Unset,
            parse=Unset,
            descr=Unset,
            long_descr=Unset,
            hidden=False,
            privileged=False,
            configure=Unset,
            help=Unset,
    ):
        if cls is Command:
            if options is not Unset and namespace is not Unset:
                raise TypeError("command cannot have both 'options' and 'namespace'")
            elif options is not Unset:
                cls = FlatCommand
            elif namespace is not Unset:
                cls = NamespaceCommand
            else:
                cls = ActionCommand
            if cls is ActionCommand and parse is not Unset:
                raise TypeError(f"{cls.__typename__} cannot have a 'parse' callback")

        metadata = {
            "long_name": name,
            "short_name": short_name,
            "descr": descr,
            "long_descr": long_descr,
            "hidden": bool(hidden),
            "privileged": bool(privileged),
            "handle": handle,
            "parse": parse,
            "configure": configure,
            "help": help,
        }
        _sanitize_names(cls, metadata)
        _sanitize_text(cls, metadata, "descr")
        _sanitize_text(cls, metadata, "long_descr")
        _sanitize_callbacks(cls, metadata)
        metadata["name"] = metadata.pop("long_name")

        self = super().__new__(cls)
        for key, object in metadata.items():
            setattr(self, "_" + key, object)
        self._prepare(options=options, namespace=namespace)
        return self

    def _prepare(self, **sources):
        raise NotImplementedError

    def __call__(self):
        return self._handle()

    def matches(self, token, /):
        return matches(token, self._name, self._short_name)

    def label(self):
        """
        "--name (-c)" (or "--name"), as used in help headings.
        """
        if self._short_name is None:
            return "--%s" % self._name
        return "--%s (-%s)" % (self._name, self._short_name)

    def resolve(self, argv, /):
        raise NotImplementedError

    def dispatch(self, entry, name, args, /):
        raise NotImplementedError


class FlatCommand(Command):
    """
    Command with a flat option table; first option token at argv[2].
    """

    __introspectable__ = Command.__introspectable__ + ("options",)

    kind = CommandKind.FLAT

    def _prepare(self, *, options, namespace):
        self._options = tabulate(type(self), options)

    def resolve(self, argv, /):
        return self._options, 2, None

    def dispatch(self, entry, name, args, /):
        if self._parse is None:
            raise InternalError("Internal error", command=self._name, option=name)
        return self._parse(name, args)


class NamespaceCommand(Command):
    """
    Command whose option table is chosen by "--selector <entry>" at argv[2:4];
    first option token at argv[4].
    """

    __introspectable__ = Command.__introspectable__ + ("namespace",)

    kind = CommandKind.NAMESPACE

    def _prepare(self, *, options, namespace):
        if not isinstance(namespace, Namespace):
            raise TypeError(f"{type(self).__typename__} 'namespace' must be a namespace")
        self._namespace = namespace

    def resolve(self, argv, /):
        namespace = self._namespace
        if len(argv) < 3:
            raise MissingNamespaceOptionError("Missing namespace option", command=self._name)
        if len(argv) < 4:
            raise MissingNamespaceNameError("Missing namespace name", command=self._name)
        if not matches(argv[2], namespace.long_name, namespace.short_name):
            raise UnrecognizedNamespaceOptionError("Unrecognized option", command=self._name, token=argv[2])
        if (entry := namespace.find(argv[3])) is None:
            raise UnrecognizedNamespaceEntryError("Unrecognized namespace entry", command=self._name, token=argv[3])
        return entry.options, 4, entry

    def dispatch(self, entry, name, args, /):
        if self._parse is None or entry is None:
            raise InternalError("Internal error", command=self._name, option=name)
        return self._parse(entry.name, name, args)


class ActionCommand(Command):
    """
    Command without options; handle() runs as soon as the command is resolved.
    """

    kind = CommandKind.ACTION

    def _prepare(self, *, options, namespace):
        pass

    def resolve(self, argv, /):
        return None

    def dispatch(self, entry, name, args, /):
        raise InternalError("Internal error", command=self._name, option=name)


def command(*args, **kwargs):
    """
    Create a Command or return a decorator that wraps a handle callable.

    Invocation modes
    - Direct:    command(handle, "name", "n", options=[...], parse=...)
    - Decorator: @command("name", "n", options=[...], parse=...)
                 def handle(): ...

    Returns
    - Command | Callable[[Callable], Command]
    """
    if args and callable(args[0]):
        return Command(*args, **kwargs)

    @rename("command")
    def wrapper(handle, /):
        if not callable(handle):
            raise TypeError("@command() must be applied to a callable")
        return Command(handle, *args, **kwargs)

    return wrapper


__all__ = (
    "CommandKind",
    "Command",
    "FlatCommand",
    "NamespaceCommand",
    "ActionCommand",
    "command",
)
