"""Exceptions raised while decoding GRIB2 messages.

Only structural problems are raised.  Unknown templates and section
numbers are reported as :class:`~grib2parse.models.Diagnostic` records
instead.
"""

from __future__ import annotations


class GribError(Exception):
    """Base class for fatal GRIB2 decoding errors."""

    def __init__(self, message: str, offset: int | None = None):
        super().__init__(message)
        self.offset = offset


class UnsupportedEditionError(GribError):
    """An indicator section declared an edition other than 2."""

    def __init__(self, edition: int, offset: int | None = None):
        super().__init__(
            f"Unknown GRIB edition: {edition}. Only version 2 is supported.", offset,
        )
        self.edition = edition


class MalformedSectionError(GribError):
    """A section header is internally inconsistent."""


class TruncatedBufferError(MalformedSectionError):
    """A header or fixed-offset field runs past the end of the buffer."""


class NoMessagesError(GribError):
    """No GRIB message could be decoded from the input."""

    def __init__(self, message: str = "No GRIB messages could be decoded"):
        super().__init__(message)
