"""
sedcli parse engine: arity resolver, cardinality validator and dispatcher.

Flow of Dispatcher.parse(argv)
1. argv[1] must classify as an option-like token and designate a registered
   command; a bare --help/-H there renders the global help instead.
2. configure hooks of every command run once; a negative status hides that
   command for the rest of the invocation.
3. --help/-H anywhere from argv[2] on renders the command help and stops.
4. Privileged commands require Context.privileged() to hold.
5. The command resolves its option table (flat: argv[2:], namespace: argv[4:]
   after "--selector <entry>"); bare actions run immediately.
6. validate() checks cardinality over the whole remaining stream.
7. The walk classifies, matches and resolves the arity of each token and hands
   (name, args) to the command; any nonzero status aborts the parse.
8. The runner executes handle() and reports its status.

Errors are raised as CommandException subclasses; nothing is printed here.
Every callback receives a fresh list, so no argument buffer is shared.
"""
import logging

from .faults import *
from .helper import print_command_help, print_help
from .runner import run_command
from .tokens import find, is_help, looks_like_option, matches, recognized

SUCCESS = 0
FAILURE = 1

logger = logging.getLogger(__name__)


def count_arguments(tokens):
    """
    number of leading tokens that belong to the option before them.

    The span ends at the first token that starts with "-" and has at least one
    more character, or at the end of the stream.
    """
    for index, token in enumerate(tokens):
        if looks_like_option(token):
            return index
    return len(tokens)


def resolve_arity(option, token, following):
    """
    Arguments of a parametric option given the tokens that follow it.

    Rules (only when option.nargs > 0)
    - a required or optional-argument option needs at least one argument.
    - more than option.nargs arguments is an error.

    Raises
    - InvalidArgumentCountError naming the option token as typed.
    """
    count = count_arguments(following)
    if option.nargs > 0:
        if ((option.required or option.optional) and count == 0) or count > option.nargs:
            raise InvalidArgumentCountError(
                "Invalid number of arguments for %s" % token,
                token=token,
                option=option.long_name,
                count=count,
            )
    return list(following[:count])


def validate(options, tokens):
    """
    Cardinality pass over an option table and the tokens of the invocation.

    Runs before any token is consumed, so its errors win over walk errors.

    Raises
    - MissingRequiredOptionError: a required option does not occur.
    - TooManyOccurrencesError: an option with nonzero nargs occurs more than nargs times.
    """
    for option in options:
        occurrences = sum(1 for token in tokens if matches(token, option.long_name, option.short_name))
        if option.required and not occurrences:
            raise MissingRequiredOptionError(
                "Missing required option %s" % option.label(),
                option=option.long_name,
            )
        if option.nargs and occurrences > option.nargs:
            raise TooManyOccurrencesError(
                "Option supplied too many times %s" % option.label(),
                option=option.long_name,
                occurrences=occurrences,
            )


class Dispatcher:
    """
    Per-invocation parse state over an application's command table.

    The command model is never mutated: commands hidden by their configure
    hook are tracked here.
    """

    def __init__(self, app, /):
        self._app = app
        self._hidden = set()

    @property
    def hidden(self):
        return frozenset(self._hidden)

    def ishidden(self, command, /):
        return command.hidden or command.name in self._hidden

    def configure(self):
        for command in self._app.commands:
            if command.configure is None:
                continue
            if (status := command.configure(command)) < 0:
                logger.debug("command %r hidden by its configure hook (status %d)", command.name, status)
                self._hidden.add(command.name)

    def lookup(self, token, /):
        for command in self._app.commands:
            if command.matches(token):
                return command
        return None

    def parse(self, argv, /):
        """
        Parse argv (argv[0] is the program) and run the resolved command.

        Returns
        - the command's status, or SUCCESS when help was rendered.

        Raises
        - CommandException subclasses on the first violation.
        """
        app = self._app
        if len(argv) < 2:
            raise NoCommandError("No command given")

        if not recognized(name := argv[1]):
            raise UnrecognizedCommandError("Unrecognized command %s" % name, token=name)

        if (command := self.lookup(name)) is None:
            if is_help(name):
                print_help(app, hidden=self.hidden)
                return SUCCESS
            raise UnrecognizedCommandError("Unrecognized command %s" % name, token=name)
        logger.debug("resolved command %r from %r", command.name, name)

        self.configure()

        if len(argv) >= 3 and any(map(is_help, argv[2:])):
            if not self.ishidden(command):
                print_command_help(app, command)
            return SUCCESS

        if command.privileged and not app.context.privileged():
            raise PrivilegeRequiredError("Must be run as root", command=command.name)

        if (resolution := command.resolve(argv)) is None:
            return run_command(app, command, argv)
        options, first, entry = resolution
        if entry is not None:
            logger.debug("resolved namespace entry %r", entry.name)

        tokens = argv[first:]
        validate(options, tokens)
        self.walk(command, entry, options, tokens)
        return run_command(app, command, argv)

    def walk(self, command, entry, options, tokens):
        """
        Consume the option tokens left to right and dispatch each matched option.
        """
        index = 0
        while index < len(tokens):
            token = tokens[index]
            if not recognized(token):
                raise InvalidFormatError("Invalid format %s" % token, token=token)
            if (option := find(options, token)) is None:
                raise UnrecognizedOptionError("Unrecognized option %s" % token, token=token)

            arguments = []
            if option.parametric:
                arguments = resolve_arity(option, token, tokens[index + 1:])
                index += len(arguments)

            status = command.dispatch(entry, option.long_name, arguments)
            logger.debug("option %r with %r handled with status %r", option.long_name, arguments, status)
            if status != 0:
                raise OptionsHandlingError(
                    "Error during options handling",
                    option=option.long_name,
                    status=status,
                )
            index += 1


__all__ = (
    "SUCCESS",
    "FAILURE",
    "count_arguments",
    "resolve_arity",
    "validate",
    "Dispatcher",
)
