"""
sedcli application: the program descriptor and its entry point.

Application(name, title, info, commands, /, *, man=..., notes=..., context=...)
- name: program name used in usage lines and fault messages.
- title: first line of the global help.
- info: synopsis printed after "Usage: <name>".
- commands: ordered command table; names and short names are unique. The
  first command is the example of the global help.
- man: manpage name for the global help pointer.
- notes: extra lines printed under the synopsis of the global help.
- context: runtime Context (default: stdout/stderr consoles, system paths).

run(argv) parses and executes one invocation and returns its exit status:
the command's own status, SUCCESS for help, FAILURE for rejected input.
"""
import logging
import sys
from collections.abc import Iterable

from rich.text import Text

from .commands import Command
from .context import Context
from .faults import CommandException, trigger
from .options import DescriptorType, _sanitize_text
from .parser import FAILURE, Dispatcher
from .utils import *

logger = logging.getLogger(__name__)


def _sanitize_commands(cls, metadata, /):
    """
    Internal: freeze the command table and reject name collisions.
    """
    if not isinstance(commands := metadata["commands"], Iterable):
        raise TypeError(f"{cls.__typename__} 'commands' must be an iterable of commands")
    commands = tuple(commands)
    if not commands:
        raise TypeError(f"{cls.__typename__} must specify at least one command")
    names = set()
    short_names = set()
    for command in commands:
        if not isinstance(command, Command):
            raise TypeError(f"{cls.__typename__} 'commands' must be an iterable of commands")
        elif command.name in names:
            raise ValueError(f"{cls.__typename__} commands cannot share name {command.name!r}")
        elif command.short_name is not None and command.short_name in short_names:
            raise ValueError(f"{cls.__typename__} commands cannot share short name {command.short_name!r}")
        names.add(command.name)
        if command.short_name is not None:
            short_names.add(command.short_name)
    metadata["commands"] = commands


def _sanitize_notes(cls, metadata, /):
    if not isinstance(notes := metadata["notes"], Iterable) or isinstance(notes, str):
        raise TypeError(f"{cls.__typename__} 'notes' must be an iterable of strings")
    for note in (notes := tuple(notes)):
        if not isinstance(note, str | Text):
            raise TypeError(f"{cls.__typename__} 'notes' must be an iterable of strings")
    metadata["notes"] = notes


class Application(metaclass=DescriptorType):
    """
    Program descriptor and entry point of a sedcli-style tool.
    """

    __introspectable__ = (
        "name",
        "title",
        "info",
        "man",
        "notes",
        "commands",
        "context",
    )
    __displayable__ = (
        "name",
        "title",
        "man",
        "context",
    )

    def __new__(cls, name, title, info, commands, /, *, man=Unset, notes=(), context=Unset):
        metadata = {
            "name": name,
            "title": title,
            "info": info,
            "man": man,
            "notes": notes,
            "commands": commands,
        }
        for key in ("name", "title", "info", "man"):
            _sanitize_text(cls, metadata, key)
        for key in ("name", "title", "info"):
            if metadata[key] is None:
                raise TypeError(f"{cls.__typename__} {key!r} must be a string")
        _sanitize_notes(cls, metadata)
        _sanitize_commands(cls, metadata)

        if not isinstance(context, Context | Unset):
            raise TypeError(f"{cls.__typename__} 'context' must be a context")
        metadata["context"] = context if context is not Unset else Context()

        self = super().__new__(cls)
        for key, object in metadata.items():
            setattr(self, "_" + key, object)
        return self

    def run(self, argv=Unset, /):
        """
        Parse and execute one invocation (argv[0] is the program name).

        Faults are rendered on the context's channels and turned into FAILURE.
        """
        argv = list(coalesce(argv, sys.argv))
        try:
            return Dispatcher(self).parse(argv)
        except CommandException as fault:
            logger.debug("invocation %r rejected with fault %r", argv, fault.code)
            trigger(fault, context=self._context, prog=self._name)
            return FAILURE


__all__ = (
    "Application",
)
