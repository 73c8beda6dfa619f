"""
sedcli faults (parse-time errors) and rendering.

Scope
- FaultCode: stable numeric identifiers for every way an invocation can be
  rejected before the command body runs. Codes are grouped by domain.
- CommandException: base type that carries a message plus keyword options and
  knows how to render itself on the error channel of a Context.
- trigger(): central entry point used by the application to surface a fault.

Taxonomy
- usage (11xxx): no command, unrecognized command, invalid token format,
  unrecognized option, namespace selector/entry problems.
- cardinality (12xxx): missing required option, option repeated beyond its limit.
- arity (13xxx): wrong number of argument tokens for an option.
- callback (14xxx): an options-parse callback returned a nonzero status.
- privilege (15xxx): elevated privilege required but not held.
- internal (19xxx): the model cannot dispatch the matched option.

Integration
- The parser raises faults; nothing is printed at the raise site.
- Application.run catches CommandException and calls trigger(fault, context=...,
  prog=...). The message goes to the error channel as "<prog>: <message>." and,
  when the fault carries hint=True, a "Try `<prog> --help' ..." pointer follows
  on the informational channel.
"""
import copy
from enum import IntEnum
from types import MappingProxyType

from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes for parse-time rejections (stable identifiers).

    grouping
    - usage (111xx/112xx)
      • NO_COMMAND, UNRECOGNIZED_COMMAND, INVALID_FORMAT, UNRECOGNIZED_OPTION
      • MISSING_NAMESPACE_OPTION, MISSING_NAMESPACE_NAME,
        UNRECOGNIZED_NAMESPACE_OPTION, UNRECOGNIZED_NAMESPACE_ENTRY
    - cardinality (121xx)
      • MISSING_REQUIRED_OPTION, TOO_MANY_OCCURRENCES
    - arity (131xx)
      • INVALID_ARGUMENT_COUNT
    - callback (141xx)
      • OPTIONS_HANDLING
    - privilege (151xx)
      • PRIVILEGE_REQUIRED
    - internal (191xx)
      • INTERNAL
    """
    # --- usage errors (11xxx) ---
    NO_COMMAND                    = 11101
    UNRECOGNIZED_COMMAND          = 11102
    INVALID_FORMAT                = 11111
    UNRECOGNIZED_OPTION           = 11112
    MISSING_NAMESPACE_OPTION      = 11121
    MISSING_NAMESPACE_NAME        = 11122
    UNRECOGNIZED_NAMESPACE_OPTION = 11123
    UNRECOGNIZED_NAMESPACE_ENTRY  = 11124

    # --- cardinality errors (12xxx) ---
    MISSING_REQUIRED_OPTION       = 12101
    TOO_MANY_OCCURRENCES          = 12102

    # --- arity errors (13xxx) ---
    INVALID_ARGUMENT_COUNT        = 13101

    # --- callback errors (14xxx) ---
    OPTIONS_HANDLING              = 14101

    # --- privilege errors (15xxx) ---
    PRIVILEGE_REQUIRED            = 15101

    # --- internal errors (19xxx) ---
    INTERNAL                      = 19101


class CommandException(Exception):
    """
    Base class of every parse-time rejection.

    Options
    - code: FaultCode of the concrete class (filled in by subclasses).
    - hint: whether the generic "--help" pointer follows the message.
    - context / prog: rendering targets, merged in by trigger().
    - anything else (token, option, entry, status, ...) is kept as payload for
      callers and tests.
    """
    __faultcode__ = Unset
    __hinted__ = True

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).__faultcode__,
            "hint": type(self).__hinted__,
        } | options)

    @property
    def code(self):
        return self.options["code"]

    def __rich__(self):
        context = self.options["context"]
        return Text.assemble(
            context.text(self.options["prog"], "prog-name"),
            ": ",
            context.text("%s." % self.message, "error-message"),
        )

    def __trigger__(self) -> None:
        context = self.options["context"]
        context.error(self)
        if self.options["hint"]:
            context.info(context.text("Try `%s --help' for more information." % self.options["prog"], "hint"))

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NoCommandError(CommandException):
    __faultcode__ = FaultCode.NO_COMMAND


class UnrecognizedCommandError(CommandException):
    __faultcode__ = FaultCode.UNRECOGNIZED_COMMAND


class InvalidFormatError(CommandException):
    __faultcode__ = FaultCode.INVALID_FORMAT


class UnrecognizedOptionError(CommandException):
    __faultcode__ = FaultCode.UNRECOGNIZED_OPTION


class MissingNamespaceOptionError(CommandException):
    __faultcode__ = FaultCode.MISSING_NAMESPACE_OPTION


class MissingNamespaceNameError(CommandException):
    __faultcode__ = FaultCode.MISSING_NAMESPACE_NAME


class UnrecognizedNamespaceOptionError(CommandException):
    __faultcode__ = FaultCode.UNRECOGNIZED_NAMESPACE_OPTION


class UnrecognizedNamespaceEntryError(CommandException):
    __faultcode__ = FaultCode.UNRECOGNIZED_NAMESPACE_ENTRY


class MissingRequiredOptionError(CommandException):
    __faultcode__ = FaultCode.MISSING_REQUIRED_OPTION


class TooManyOccurrencesError(CommandException):
    __faultcode__ = FaultCode.TOO_MANY_OCCURRENCES


class InvalidArgumentCountError(CommandException):
    __faultcode__ = FaultCode.INVALID_ARGUMENT_COUNT


class OptionsHandlingError(CommandException):
    __faultcode__ = FaultCode.OPTIONS_HANDLING


class PrivilegeRequiredError(CommandException):
    __faultcode__ = FaultCode.PRIVILEGE_REQUIRED
    __hinted__ = False


class InternalError(CommandException):
    __faultcode__ = FaultCode.INTERNAL
    __hinted__ = False


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace(fault, **options) before
      triggering; at least 'context' and 'prog' must be known by then.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "NoCommandError",
    "UnrecognizedCommandError",
    "InvalidFormatError",
    "UnrecognizedOptionError",
    "MissingNamespaceOptionError",
    "MissingNamespaceNameError",
    "UnrecognizedNamespaceOptionError",
    "UnrecognizedNamespaceEntryError",
    "MissingRequiredOptionError",
    "TooManyOccurrencesError",
    "InvalidArgumentCountError",
    "OptionsHandlingError",
    "PrivilegeRequiredError",
    "InternalError",
    "trigger",
)
