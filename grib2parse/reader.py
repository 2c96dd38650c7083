"""Read entry points.

Wrap :func:`grib2parse.parser.scan` so that decoding failures end up in a
report instead of propagating, and so that finding no message at all is
reported as an error rather than an empty list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from grib2parse.config import GribConfig
from grib2parse.errors import GribError, NoMessagesError
from grib2parse.models import Diagnostic, GribMessage
from grib2parse.parser import scan

NO_MESSAGES = "No GRIB messages could be decoded"


@dataclass
class DecodeReport:
    """Outcome of decoding one buffer or file."""

    path: str = ""
    size: int = 0
    messages: list[GribMessage] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    exception: GribError | None = None

    @property
    def ok(self) -> bool:
        return not self.errors and bool(self.messages)

    def raise_for_error(self) -> None:
        """Re-raise the failure recorded in this report, if any."""
        if self.exception is not None:
            raise self.exception


def read_data(data: bytes, config: GribConfig | None = None) -> DecodeReport:
    """Decode *data* and report the result.

    Parameters
    ----------
    data : bytes-like
        Buffer holding GRIB2 messages.
    config : GribConfig, optional
        Decoder configuration.

    Returns
    -------
    DecodeReport
        ``messages`` holds the decoded messages.  On a fatal decoding
        error, or when no message was found, ``errors`` describes the
        failure and ``messages`` is empty.
    """
    report = DecodeReport(size=len(data))
    try:
        result = scan(data, config)
    except GribError as exc:
        report.errors.append(str(exc))
        report.exception = exc
        return report

    report.diagnostics = result.diagnostics
    if not result.messages:
        report.exception = NoMessagesError(NO_MESSAGES)
        report.errors.append(NO_MESSAGES)
        return report

    report.messages = result.messages
    return report


def read_file(path: str | Path, config: GribConfig | None = None) -> DecodeReport:
    """Read *path* and decode its contents with :func:`read_data`."""
    path = Path(path)
    with open(path, "rb") as fh:
        data = fh.read()
    report = read_data(data, config)
    report.path = str(path)
    return report
