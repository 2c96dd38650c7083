"""Message scanner and assembler.

Searches a byte buffer for ``GRIB`` markers, decodes the 16-octet
indicator that follows each one, frames the sections of the message and
folds them into a :class:`~grib2parse.models.GribMessage`.

Indicator layout (Section 0):

  1-4   "GRIB"
  5-6   reserved
  7     discipline (code table 0.0)
  8     edition number (2)
  9-16  total length of the message (uint64)
"""

from __future__ import annotations

import logging
from typing import Iterator

from grib2parse.config import GribConfig, default_config
from grib2parse.errors import (
    MalformedSectionError,
    TruncatedBufferError,
    UnsupportedEditionError,
)
from grib2parse.models import (
    INCOMPLETE_FIELD,
    MISSING_BITMAP,
    MISSING_END_MARKER,
    BitMap,
    Field,
    GribMessage,
    Indicator,
    RawSection,
    ScanResult,
)
from grib2parse.numeric import unpack
from grib2parse.sections import (
    END_MARKER,
    SECTION_HEADER_SIZE,
    SectionNumber,
    decode_section,
    frame_section,
)
from grib2parse.templates import DecodeContext

logger = logging.getLogger(__name__)

MAGIC = b"GRIB"
INDICATOR_SIZE = 16
SUPPORTED_EDITION = 2

# Sections framed per message in "fixed" mode: 1, 2, 3, 4 and 5
FIXED_SECTION_COUNT = 5

# Section number to Field attribute
_FIELD_KEYS = {
    SectionNumber.GRID: "grid",
    SectionNumber.PRODUCT: "product",
    SectionNumber.REPRESENTATION: "representation",
}


def parse_indicator(buffer: bytes, offset: int = 0) -> Indicator:
    """Decode the indicator section starting at *offset*.

    Raises
    ------
    TruncatedBufferError
        Fewer than 16 bytes remain.
    MalformedSectionError
        The magic number is wrong or the declared length is too short.
    UnsupportedEditionError
        The edition is not 2.
    """
    if offset + INDICATOR_SIZE > len(buffer):
        raise TruncatedBufferError(
            f"Indicator at offset {offset} needs {INDICATOR_SIZE} bytes, "
            f"{len(buffer) - offset} available",
            offset,
        )
    magic, res1, res2, discipline, edition, total_length = unpack("4sBBBBQ", buffer, offset)
    if magic != MAGIC:
        raise MalformedSectionError(f"Invalid magic number for indicator: {magic!r}", offset)
    if edition != SUPPORTED_EDITION:
        raise UnsupportedEditionError(edition, offset)
    if total_length < INDICATOR_SIZE:
        raise MalformedSectionError(
            f"Message at offset {offset} declares total length {total_length}", offset,
        )
    return Indicator(
        discipline=discipline,
        edition=edition,
        reserved=(res1, res2),
        total_length=total_length,
    )


def frame_message(buffer: bytes, offset: int, indicator: Indicator,
                  framing: str = "full",
                  ctx: DecodeContext | None = None) -> list[RawSection]:
    """Frame the sections following the indicator at *offset*.

    In ``full`` mode sections are read until the ``7777`` end marker or
    until the sections exactly fill the declared message, which records a
    ``missing_end_marker`` diagnostic on *ctx*.  Data ending before the
    declared length raises.  In ``fixed`` mode exactly five sections are
    read.
    """
    start = offset + INDICATOR_SIZE
    sections: list[RawSection] = []

    if framing == "fixed":
        for _ in range(FIXED_SECTION_COUNT):
            section = frame_section(buffer, start)
            sections.append(section)
            start += section.byte_length
        return sections

    message_end = offset + indicator.total_length
    end = min(message_end, len(buffer))
    while buffer[start:start + len(END_MARKER)] != END_MARKER:
        if start >= end:
            if end < message_end:
                raise TruncatedBufferError(
                    f"Message at offset {offset} declares {indicator.total_length} bytes, "
                    f"data ends at {end}", start,
                )
            if ctx is not None:
                ctx.offset = start
                ctx.warn(MISSING_END_MARKER,
                         f"Message at offset {offset} ends at {end} without end marker")
            break
        if start + SECTION_HEADER_SIZE > end:
            raise TruncatedBufferError(
                f"Section header at offset {start} straddles message end {end}", start,
            )
        section = frame_section(buffer, start, end)
        sections.append(section)
        start += section.byte_length
    return sections


def assemble_message(indicator: Indicator, sections: list[RawSection],
                     ctx: DecodeContext, offset: int = 0) -> GribMessage:
    """Group decoded sections into a message.

    A field is closed by each data section (7).  The next field starts
    from the sections of the previous one so that repeated groups which
    omit the grid or local use section inherit them.  Bitmap indicator
    254 resolves to the last bitmap defined anywhere earlier in the message.
    """
    identification = None
    fields: list[Field] = []
    current: dict = {}
    last_bitmap: BitMap | None = None
    open_group = False

    for section in sections:
        ctx.offset = section.offset
        number = section.number

        if number == SectionNumber.IDENTIFICATION:
            identification = section.contents
            continue
        if number == SectionNumber.LOCAL_USE:
            current["local_use"] = section.payload[SECTION_HEADER_SIZE:]
        elif number in _FIELD_KEYS:
            current[_FIELD_KEYS[number]] = section.contents
        elif number == SectionNumber.BITMAP:
            bitmap = _resolve_bitmap(section.contents, last_bitmap, ctx)
            if bitmap.bitmap is not None:
                last_bitmap = bitmap
            current["bitmap"] = bitmap
        elif number == SectionNumber.DATA:
            current["data"] = section.payload[SECTION_HEADER_SIZE:]
            fields.append(Field(**current))
            current = {k: v for k, v in current.items() if k != "data"}
            open_group = False
            continue
        else:
            continue
        open_group = True

    if open_group:
        if ctx.config.framing == "full":
            ctx.warn(INCOMPLETE_FIELD,
                     f"Message at offset {offset} has sections after its last data section")
        fields.append(Field(**current))

    return GribMessage.assemble(indicator, identification, fields, offset,
                               discipline=ctx.lookup("discipline", indicator.discipline))


def _resolve_bitmap(bitmap: BitMap, previous: BitMap | None,
                    ctx: DecodeContext) -> BitMap:
    """Carry a previously defined bitmap forward for indicator 254."""
    if bitmap.indicator.value != 254:
        return bitmap
    if previous is None:
        ctx.warn(MISSING_BITMAP, "Bitmap indicator 254 without a previous bitmap")
        return bitmap
    return BitMap(indicator=bitmap.indicator, bitmap=previous.bitmap)


def iter_messages(buffer: bytes, ctx: DecodeContext | None = None) -> Iterator[GribMessage]:
    """Yield each message found in *buffer*.

    The search resumes at the end of every decoded message, as declared by
    its indicator, not just past the marker.
    """
    if ctx is None:
        ctx = DecodeContext()
    data = buffer if isinstance(buffer, bytes) else bytes(buffer)

    offset = data.find(MAGIC)
    while offset != -1:
        indicator = parse_indicator(data, offset)
        logger.debug("GRIB%d message at offset %d, %d bytes, discipline %d",
                     indicator.edition, offset, indicator.total_length,
                     indicator.discipline)
        sections = frame_message(data, offset, indicator, ctx.config.framing, ctx)
        for section in sections:
            decode_section(section, ctx)
        yield assemble_message(indicator, sections, ctx, offset)
        offset = data.find(MAGIC, offset + indicator.total_length)


def scan(buffer: bytes, config: GribConfig | None = None) -> ScanResult:
    """Decode every GRIB2 message in *buffer*.

    Parameters
    ----------
    buffer : bytes-like
        Zero or more concatenated GRIB2 messages, possibly surrounded by
        other data.
    config : GribConfig, optional
        Decoder options and code tables.  Defaults to the built-in ones.

    Returns
    -------
    ScanResult
        Decoded messages and non-fatal diagnostics.  No marker found gives
        an empty result, not an error.

    Raises
    ------
    UnsupportedEditionError
        Any message declares an edition other than 2.  Nothing is returned
        for the messages already decoded.
    MalformedSectionError
        A section header is truncated or inconsistent.
    """
    ctx = DecodeContext(config=config or default_config())
    messages = list(iter_messages(buffer, ctx))
    return ScanResult(messages=messages, diagnostics=ctx.diagnostics)
