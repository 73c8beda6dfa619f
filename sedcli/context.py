"""
sedcli runtime context (explicit configuration shared by every component).

Scope
- Context bundles everything that would otherwise be process-wide state: the
  two output channels, the styling palette, the reporting mode, the audit and
  system log locations, and the probes the engine consults (privilege, clock,
  transport error).
- Every component receives the Context it works with; nothing in the package
  reads module globals or __main__ attributes at run time. Tests build a
  Context whose consoles write into io.StringIO buffers.

Channels
- info: informational output (help text, success status) -> stdout console.
- error: diagnostics (faults, failure status) -> stderr console.

Styling
- colorful=False (default) renders plain text; styles are ignored.
- colorful=True applies the palette below, merged with styles=... overrides.
"""
import os
import time
from collections import defaultdict
from collections.abc import Iterable, Mapping
from enum import Enum

from rich.console import Console
from rich.text import Text

from .utils import Unset, coalesce, mirror

SEDCLI_LOGFILE = "/var/log/sedcli.log"
SYSLOG_PATHS = ("/var/log/messages", "/var/log/syslog")


class Mode(Enum):
    """
    reporting mode of the tool; selects status texts and the message prefix.
    """
    STANDARD = "sedcli"
    KMIP = "sedcli-kmip"

    @property
    def prefix(self):
        return self.value


_PALETTE = {
    # faults
    "prog-name": "bold #E6E6F0",
    "error-message": "#FF4DA6",
    "hint": "italic #9CE19C",

    # help
    "title": "bold #FF4D94",
    "usage-label": "bold #00E6FF",
    "program-name": "bold #FF4D94",
    "command-name": "bold #36C5F0",
    "option-name": "bold #00E6FF",
    "short-name": "bold #22C55E",
    "metavar": "bold #FFD600",
    "description": "#9CA3AF",
    "section-label": "bold #FFFFFF",
    "entry-name": "bold #22C55E",
    "note": "#D1D5DB",

    # status
    "status-success": "bold #22C55E",
    "status-failure": "bold #EF4444",
}


def _default_privileged():
    return os.geteuid() == 0


def _default_transport():
    return 0


class Context:
    """
    Explicit runtime configuration of one sedcli process.

    Parameters (keyword-only)
    - console: rich Console for the informational channel (default: stdout).
    - errors: rich Console for the error channel (default: stderr).
    - colorful: bool, apply the style palette.
    - styles: Mapping[str, str], palette overrides.
    - mode: Mode, reporting rules and message prefix.
    - audit: str | os.PathLike | None, audit log path (None disables auditing).
    - syslogs: Iterable of system log candidates probed by the runner.
    - privileged: () -> bool, whether elevated privilege is held.
    - clock: () -> float, wall-clock seconds.
    - transport: () -> int, last transport (ioctl) error reported by the driver layer.

    Raises
    - TypeError on values of the wrong kind.
    """

    __introspectable__ = (
        "console",
        "errors",
        "colorful",
        "styles",
        "mode",
        "audit",
        "syslogs",
        "privileged",
        "clock",
        "transport",
    )

    console = mirror("console")
    errors = mirror("errors")
    colorful = mirror("colorful")
    styles = mirror("styles")
    mode = mirror("mode")
    audit = mirror("audit")
    syslogs = mirror("syslogs")
    privileged = mirror("privileged")
    clock = mirror("clock")
    transport = mirror("transport")

    def __new__(
            cls,
            *,
            console=Unset,
            errors=Unset,
            colorful=False,
            styles=Unset,
            mode=Mode.STANDARD,
            audit=SEDCLI_LOGFILE,
            syslogs=SYSLOG_PATHS,
            privileged=Unset,
            clock=Unset,
            transport=Unset,
    ):
        if not isinstance(console, Console | Unset):
            raise TypeError("context 'console' must be a rich console")
        if not isinstance(errors, Console | Unset):
            raise TypeError("context 'errors' must be a rich console")
        if not isinstance(styles, Mapping | Unset):
            raise TypeError("context 'styles' must be a mapping")
        if not isinstance(mode, Mode):
            raise TypeError("context 'mode' must be a mode")
        if audit is not None and not isinstance(audit, str | os.PathLike):
            raise TypeError("context 'audit' must be a path or None")
        if not isinstance(syslogs, Iterable) or isinstance(syslogs, str):
            raise TypeError("context 'syslogs' must be an iterable of paths")
        for name, probe in (("privileged", privileged), ("clock", clock), ("transport", transport)):
            if probe is not Unset and not callable(probe):
                raise TypeError(f"context {name!r} must be callable")

        metadata = {
            "console": console if console is not Unset else Console(highlight=False),
            "errors": errors if errors is not Unset else Console(stderr=True, highlight=False),
            "colorful": bool(colorful),
            "styles": defaultdict(str, _PALETTE | dict(coalesce(styles, {}))),
            "mode": mode,
            "audit": audit if audit is None else os.fspath(audit),
            "syslogs": tuple(map(os.fspath, syslogs)),
            "privileged": coalesce(privileged, _default_privileged),
            "clock": coalesce(clock, time.time),
            "transport": coalesce(transport, _default_transport),
        }

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def __repr__(self):
        return "context(%s)" % ", ".join(
            "%s=%r" % (name, getattr(self, name)) for name in ("colorful", "mode", "audit", "syslogs")
        )

    def style(self, name, /):
        """
        palette lookup honoring the colorful switch (empty style when plain).
        """
        return self._styles[name] if self._colorful else ""

    def text(self, fragment, style="", /):
        """
        normalize a fragment into rich Text styled with the named palette entry.
        """
        if isinstance(fragment, Text):
            return fragment if self._colorful else Text(fragment.plain)
        return Text(str(fragment), self.style(style) if style else "")

    def info(self, renderable, /, *, end="\n"):
        self._console.print(renderable, end=end, soft_wrap=True, highlight=False)

    def error(self, renderable, /, *, end="\n"):
        self._errors.print(renderable, end=end, soft_wrap=True, highlight=False)


__all__ = (
    "Context",
    "Mode",
    "SEDCLI_LOGFILE",
    "SYSLOG_PATHS",
)
