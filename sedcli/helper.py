"""
sedcli help/usage synthesizer.

Every renderer is a pure function of the model plus the Context of the
application: it assembles one rich Text and writes it to the informational
channel. Styling is applied only when the context is colorful, so the plain
rendering is column-exact:

    <title>

    Usage: <prog> <info>

    <notes>

    Available commands:
       -x  --name                     description
    ...

Layout
- PADDING (three spaces) opens every indented row.
- command rows: short name in 4 columns, "--name" in 27 columns, description.
- option rows: short name in 4 columns, "--long <ARG>" in 38 columns, description.
- hidden commands and hidden options are skipped.
"""
from rich.text import Text

from .commands import CommandKind

PADDING = "   "


def _short(name):
    return "-%s" % name if name else ""


class _Writer:
    """
    Accumulates styled fragments for one help screen.
    """

    def __init__(self, context):
        self._context = context
        self._text = Text()

    def __call__(self, fragment, style="", /):
        self._text.append(fragment, style=self._context.style(style) if style else "")
        return self

    def flush(self):
        self._context.info(self._text, end="")


def _render_option_rows(write, options):
    for option in options:
        if option.hidden:
            continue
        write(PADDING)
        write(_short(option.short_name).ljust(4), "short-name")
        write(option.synopsis().ljust(38), "option-name")
        write(str(option.descr or ""), "description")
        write("\n")


def print_help(app, /, *, hidden=frozenset()):
    """
    Render the global help: title, synopsis, notes, command list and pointers.

    Parameters
    - app: Application (name, title, info, notes, man, commands, context).
    - hidden: names of commands hidden for this invocation in addition to the
      statically hidden ones.
    """
    write = _Writer(app.context)
    write(str(app.title), "title")
    write("\n\n")
    write("Usage:", "usage-label")
    write(" ")
    write(app.name, "program-name")
    write(" %s\n\n" % app.info)
    for note in app.notes:
        write(str(note), "note")
        write("\n")

    write("\n")
    write("Available commands:", "section-label")
    write("\n")
    for command in app.commands:
        if command.hidden or command.name in hidden:
            continue
        write(PADDING)
        if command.short_name:
            write(_short(command.short_name).ljust(4), "short-name")
        write(("--" + command.name).ljust(27), "command-name")
        write(str(command.descr or ""), "description")
        write("\n")

    write("\nSee '%s <command> --help' for more information on a specific command.\n" % app.name)
    write("e.g.\n")
    write("%s%s --%s --help\n" % (PADDING, app.name, app.commands[0].name))
    if app.man is not None:
        write("For more information, please refer to manpage (man %s).\n" % app.man)
    else:
        write("For more information, please refer to manpage.\n")
    write.flush()


def _render_header(write, command):
    write(PADDING)
    write(str(command.long_descr or command.descr or ""), "description")
    write("\n\n")


def print_namespace_help(app, command, /):
    """
    Render the help of a namespace command: every entry with its description,
    then the option table of each entry.
    """
    namespace = command.namespace
    write = _Writer(app.context)
    write("Usage:", "usage-label")
    write(" ")
    write(app.name, "program-name")
    write(" ")
    write("--%s --%s <NAME>" % (command.name, namespace.long_name), "command-name")
    write("\n\n")
    _render_header(write, command)

    write("Valid values of NAME are:", "section-label")
    write("\n")
    for entry in namespace.entries:
        write(PADDING)
        write(entry.name, "entry-name")
        write(" - ")
        write(str(entry.descr or ""), "description")
        write("\n")
    write("\n")

    entries = namespace.entries
    for index, entry in enumerate(entries):
        write("Options that are valid with %s %s %s are:" % (
            command.label(), namespace.label(), entry.name
        ), "section-label")
        write("\n")
        _render_option_rows(write, entry.options)
        if index + 1 < len(entries):
            write("\n")
    write.flush()


def print_command_help(app, command, /):
    """
    Render the help of one command.

    - A custom help callback of the command replaces the synthesized output.
    - Namespace commands use print_namespace_help().
    - Otherwise: a usage line listing the required options inline (plus
      "[option...]" when optional ones exist), the long description and the
      option table.
    """
    if command.help is not None:
        command.help(app, command)
        return

    if command.kind is CommandKind.NAMESPACE:
        print_namespace_help(app, command)
        return

    options = getattr(command, "options", None)
    write = _Writer(app.context)
    write("Usage:", "usage-label")
    write(" ")
    write(app.name, "program-name")
    write(" ")
    write("--%s" % command.name, "command-name")

    visible = False
    if options is not None:
        mandatory = True
        for option in options:
            if option.hidden:
                continue
            visible = True
            if option.required:
                write(" ")
                write(option.synopsis(), "option-name")
            else:
                mandatory = False
        if not mandatory:
            write(" [option...]")
    write("\n\n")

    _render_header(write, command)

    if visible:
        write("Options that are valid with %s are:" % command.label(), "section-label")
        write("\n")
        _render_option_rows(write, options)
    write.flush()


__all__ = (
    "PADDING",
    "print_help",
    "print_command_help",
    "print_namespace_help",
)
