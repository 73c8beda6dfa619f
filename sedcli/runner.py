"""
sedcli command runner: executes handle() with timing, status reporting and
the audit trail.

- The wall clock of the context is read before and after the command.
- The end offset of the first readable system log is captured before the
  command runs; an unreadable log is skipped silently.
- The status is reported unless argv[1] is a help or version token.
- One audit line is appended unless the command is the version command:
  sedcli invoked with: "<argv>". Exit status is <n> (success|failure). Command took <s>.<cc> s.
- The command's status is returned unchanged.
"""
import logging
import os

from .logs import init_logging
from .status import report
from .tokens import is_help, is_version

logger = logging.getLogger(__name__)


def _snapshot(paths):
    """
    (path, end offset) of the first system log that can be opened, or None.
    """
    for path in paths:
        try:
            with open(path, "rb") as stream:
                return path, stream.seek(0, os.SEEK_END)
        except OSError:
            continue
    return None


def _isversion(command):
    return command.name == "version" or command.short_name == "V"


def audit(context, argv, status, elapsed):
    """
    Append the audit line of one invocation (elapsed in milliseconds).
    """
    if context.audit is None:
        return
    try:
        line = " ".join(argv)
    except MemoryError:
        context.error(context.text("%s: Memory allocation failed for logging." % context.mode.prefix, "error-message"))
        return
    init_logging(context.audit).info(
        'sedcli invoked with: "%s". Exit status is %d (%s). Command took %d.%02d s.',
        line,
        status,
        "failure" if status else "success",
        elapsed // 1000,
        (elapsed % 1000) // 10,
    )


def run_command(app, command, argv):
    """
    Run the command body of a fully parsed invocation and return its status.
    """
    context = app.context
    started = context.clock()
    if (snapshot := _snapshot(context.syslogs)) is not None:
        logger.debug("system log %s ends at offset %d", *snapshot)

    status = command.handle()
    if not is_help(argv[1]) and not is_version(argv[1]):
        report(status, context)

    elapsed = max(0, int((context.clock() - started) * 1000))
    if not _isversion(command):
        audit(context, argv, status, elapsed)
    return status


__all__ = (
    "audit",
    "run_command",
)
