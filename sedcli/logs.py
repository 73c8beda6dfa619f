"""
sedcli audit trail.

- One named logger ("sedcli.audit") with one append-only file handler; it does
  not propagate, so audit lines never reach the root handlers and diagnostics
  of the package ("sedcli.*" module loggers) never reach the audit file.
- Records are written under an exclusive fcntl.lockf lock so concurrent sedcli
  processes cannot interleave lines.
- Line format: "<asctime> sedcli: <message>" where asctime is time.asctime().
- A file that cannot be opened or written is not fatal: the failure is
  reported as a DEBUG diagnostic and the command goes on.
"""
import fcntl
import logging
import os
import time

_LOGGER_NAME = "sedcli.audit"

logger = logging.getLogger(__name__)


class AuditFormatter(logging.Formatter):
    """
    formatter rendering the record time the way asctime(3) does.
    """

    def formatTime(self, record, datefmt=None):
        return time.asctime(time.localtime(record.created))


class LockedFileHandler(logging.FileHandler):
    """
    Append-only file handler that holds an exclusive lock around each record.

    The file is opened lazily on the first record.
    """

    def __init__(self, filename):
        super().__init__(filename, mode="a", encoding="utf-8", delay=True)

    def emit(self, record):
        try:
            if self.stream is None:
                self.stream = self._open()
            fcntl.lockf(self.stream.fileno(), fcntl.LOCK_EX)
            try:
                self.stream.write(self.format(record) + self.terminator)
                self.flush()
            finally:
                fcntl.lockf(self.stream.fileno(), fcntl.LOCK_UN)
        except Exception:
            self.handleError(record)

    def handleError(self, record):
        logger.debug("audit record could not be written to %s", self.baseFilename, exc_info=True)


def init_logging(path):
    """
    Point the audit logger at the given file. Safe to call repeatedly: the
    handler is replaced only when the path changes.
    """
    audit = logging.getLogger(_LOGGER_NAME)
    filename = os.path.abspath(os.fspath(path))
    for handler in audit.handlers:
        if isinstance(handler, LockedFileHandler) and handler.baseFilename == filename:
            return audit

    shutdown_logging()
    audit.setLevel(logging.INFO)
    audit.propagate = False

    handler = LockedFileHandler(filename)
    handler.setFormatter(AuditFormatter("%(asctime)s sedcli: %(message)s"))
    audit.addHandler(handler)
    return audit


def shutdown_logging():
    """
    Detach and close every handler of the audit logger.
    """
    audit = logging.getLogger(_LOGGER_NAME)
    for handler in list(audit.handlers):
        audit.removeHandler(handler)
        handler.close()


def get_logger():
    return logging.getLogger(_LOGGER_NAME)


__all__ = (
    "AuditFormatter",
    "LockedFileHandler",
    "init_logging",
    "shutdown_logging",
    "get_logger",
)
