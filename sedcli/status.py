"""
sedcli status reporting: protocol status texts, platform errors and NVMe
completion status decoding.

Rules of report(status, context)
- status < 0: platform error.
  • standard mode: -EINVAL, -ENODEV, -ENOMEM, anything else.
  • KMIP mode: KMIP_FAILURE, anything else.
- KMIP mode, status >= 0: only KMIP_SUCCESS_CONNECTED is reported.
- otherwise, a pending transport error 4 (EINTR) or 5 (EIO) wins.
- protocol table hit: "status: 0xNN TEXT" (info channel for 0, error channel otherwise).
- miss within 1..0xFFFF: NVMe bitfield breakdown when a transport error is
  pending, "status: Unknown status: N" otherwise.
"""
import errno
import logging
from collections import namedtuple
from enum import IntEnum

from .context import Mode

KMIP_SUCCESS = 0
KMIP_SUCCESS_CONNECTED = 1
KMIP_FAILURE = -1

logger = logging.getLogger(__name__)


class SedStatus(IntEnum):
    """
    TCG storage method status codes.
    """
    SUCCESS                 = 0x00
    NOT_AUTHORIZED          = 0x01
    UNKNOWN_ERROR           = 0x02
    SP_BUSY                 = 0x03
    SP_FAILED               = 0x04
    SP_DISABLED             = 0x05
    SP_FROZEN               = 0x06
    NO_SESSIONS_AVAILABLE   = 0x07
    UNIQUENESS_CONFLICT     = 0x08
    INSUFFICIENT_SPACE      = 0x09
    INSUFFICIENT_ROWS       = 0x0A
    INVALID_FUNCTION        = 0x0B
    INVALID_PARAMETER       = 0x0C
    INVALID_REFERENCE       = 0x0D
    UNKNOWN_ERROR_1         = 0x0E
    TPER_MALFUNCTION        = 0x0F
    TRANSACTION_FAILURE     = 0x10
    RESPONSE_OVERFLOW       = 0x11
    AUTHORITY_LOCKED_OUT    = 0x12
    FAIL                    = 0x3F


_STATUS_TEXTS = {
    SedStatus.SUCCESS: "SUCCESS",
    SedStatus.NOT_AUTHORIZED: "NOT_AUTHORIZED",
    SedStatus.UNKNOWN_ERROR: "OBSOLETE",
    SedStatus.SP_BUSY: "SP_BUSY",
    SedStatus.SP_FAILED: "SP_FAILED",
    SedStatus.SP_DISABLED: "SP_DISABLED",
    SedStatus.SP_FROZEN: "SP_FROZEN",
    SedStatus.NO_SESSIONS_AVAILABLE: "NO_SESSIONS_AVAILABLE",
    SedStatus.UNIQUENESS_CONFLICT: "UNIQUENESS_CONFLICT",
    SedStatus.INSUFFICIENT_SPACE: "INSUFFICIENT_SPACE",
    SedStatus.INSUFFICIENT_ROWS: "INSUFFICIENT_ROWS",
    SedStatus.INVALID_FUNCTION: "OBSOLETE",
    SedStatus.INVALID_PARAMETER: "INVALID PARAMETER",
    SedStatus.INVALID_REFERENCE: "OBSOLETE",
    SedStatus.UNKNOWN_ERROR_1: "OBSOLETE",
    SedStatus.TPER_MALFUNCTION: "TPER_MALFUNCTION",
    SedStatus.TRANSACTION_FAILURE: "TRANSACTION_FAILURE",
    SedStatus.RESPONSE_OVERFLOW: "RESPONSE_OVERFLOW",
    SedStatus.AUTHORITY_LOCKED_OUT: "AUTHORITY_LOCKED_OUT",
    SedStatus.FAIL: "FAIL",
}

_PLATFORM_TEXTS = {
    -errno.EINVAL: "Invalid parameter.",
    -errno.ENODEV: "Couldn't determine device state.",
    -errno.ENOMEM: "No memory.",
}

_TRANSPORT_TEXTS = {
    errno.EINTR: "IOCTL error: 0x04 Interrupted system call.",
    errno.EIO: "IOCTL error: 0x05 I/O error.",
}


def sed_error_text(status):
    """
    text of a protocol status code, or None outside the table (0x13..0x3E included).
    """
    if status < SedStatus.SUCCESS or status > SedStatus.FAIL:
        return None
    return _STATUS_TEXTS.get(status)


NvmeStatus = namedtuple("NvmeStatus", ("sc", "sct", "crd", "m", "dnr"))
NvmeStatus.__doc__ = """
NVMe completion status fields: status code (8 bits), status code type (3),
command retry delay (2), more (1) and do not retry (1).
"""


def decode_nvme(status):
    """
    Split the low 16 bits of a status into its NVMe completion status fields.

    Example
    - decode_nvme(0x0281) -> NvmeStatus(sc=0x81, sct=2, crd=0, m=0, dnr=0)
    """
    status &= 0xFFFF
    return NvmeStatus(
        sc=status & 0xFF,
        sct=(status >> 8) & 0x7,
        crd=(status >> 11) & 0x3,
        m=(status >> 13) & 0x1,
        dnr=(status >> 14) & 0x1,
    )


def report(status, context, /):
    """
    Describe a command status on the channels of the context.

    Reporting is a side effect only; the status itself is never altered.
    """
    prefix = context.mode.prefix
    logger.debug("reporting status %d in %s mode", status, context.mode.name)

    if status < 0:
        if context.mode is Mode.KMIP:
            message = "Failure." if status == KMIP_FAILURE else "Unknown error."
        else:
            message = _PLATFORM_TEXTS.get(status, "Unknown error.")
        context.error(context.text("%s: %s" % (prefix, message), "status-failure"))
        return

    if context.mode is Mode.KMIP:
        if status == KMIP_SUCCESS_CONNECTED:
            context.error(context.text("%s: Successful connection to the KMIP server." % prefix, "status-success"))
        return

    if (transport := context.transport()) in _TRANSPORT_TEXTS:
        context.error(context.text("%s: %s" % (prefix, _TRANSPORT_TEXTS[transport]), "status-failure"))
        return

    if (text := sed_error_text(status)) is None:
        if 0 < status <= 0xFFFF and transport:
            fields = decode_nvme(status)
            context.error(context.text(
                "%s: NVMe error: %d\nSC: %d | SCT: %d | CRD: %d | M: %d | DNR: %d" % (prefix, status, *fields),
                "status-failure",
            ))
        else:
            context.error(context.text("status: Unknown status: %d" % status, "status-failure"))
        return

    if status == 0:
        context.info(context.text("status: 0x%02x %s" % (status, text), "status-success"))
    else:
        context.error(context.text("status: 0x%02x %s" % (status, text), "status-failure"))


__all__ = (
    "KMIP_SUCCESS",
    "KMIP_SUCCESS_CONNECTED",
    "KMIP_FAILURE",
    "SedStatus",
    "NvmeStatus",
    "sed_error_text",
    "decode_nvme",
    "report",
)
