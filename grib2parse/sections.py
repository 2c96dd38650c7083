"""Section framing and content dispatch.

Every GRIB2 section after the indicator starts with a 4-octet length and
a 1-octet section number.  :func:`frame_section` slices one section out of
a buffer and :func:`decode_section` routes its payload to the decoder
registered for its number.

Section layout (octets are 1 based as in the WMO manual):

  1-4  section length (uint32)
  5    section number
  6-   section contents
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Callable

from grib2parse.errors import MalformedSectionError, TruncatedBufferError
from grib2parse.models import (
    INVALID_REFERENCE_TIME,
    UNKNOWN_SECTION,
    BitMap,
    DataRepresentation,
    GridDefinition,
    Identification,
    ProductDefinition,
    RawSection,
)
from grib2parse.numeric import unpack
from grib2parse.templates import DecodeContext
from grib2parse.templates.grid import GRID_TEMPLATES
from grib2parse.templates.product import PRODUCT_TEMPLATES
from grib2parse.templates.representation import (
    REPRESENTATION_TEMPLATES,
    TEMPLATE_START as REPRESENTATION_TEMPLATE_START,
)

SECTION_HEADER_SIZE = 5
END_MARKER = b"7777"


class SectionNumber(IntEnum):
    INDICATOR = 0
    IDENTIFICATION = 1
    LOCAL_USE = 2
    GRID = 3
    PRODUCT = 4
    REPRESENTATION = 5
    BITMAP = 6
    DATA = 7
    END = 8


def frame_section(buffer: bytes, start: int, end: int | None = None) -> RawSection:
    """Slice the section beginning at *start*.

    Parameters
    ----------
    buffer : bytes
        Buffer holding the section.
    start : int
        Offset of the section's length octets.
    end : int, optional
        Exclusive bound the section must fit in (the end of the enclosing
        message).  Defaults to the end of *buffer*.

    Raises
    ------
    TruncatedBufferError
        If the header or the declared payload extends past *end*.
    MalformedSectionError
        If the declared length is shorter than the header itself.
    """
    if end is None or end > len(buffer):
        end = len(buffer)
    if start + SECTION_HEADER_SIZE > end:
        raise TruncatedBufferError(
            f"Section header at offset {start} runs past end of data ({end})", start,
        )
    byte_length, number = unpack("IB", buffer, start)
    if byte_length < SECTION_HEADER_SIZE:
        raise MalformedSectionError(
            f"Section {number} at offset {start} declares length {byte_length}", start,
        )
    if start + byte_length > end:
        raise TruncatedBufferError(
            f"Section {number} at offset {start} declares {byte_length} bytes, "
            f"only {end - start} available",
            start,
        )
    return RawSection(
        number=number,
        byte_length=byte_length,
        offset=start,
        payload=bytes(buffer[start:start + byte_length]),
    )


# ---------------------------------------------------------------------------
# Section decoders
# ---------------------------------------------------------------------------

def decode_identification(payload: bytes, ctx: DecodeContext) -> Identification:
    (centre, sub_centre, master, local, significance,
     year, month, day, hour, minute, second,
     status, data_type) = unpack("HHBBBHBBBBBBB", payload, 5)
    try:
        reference_time = datetime(year, month, day, hour, minute, second,
                                  tzinfo=timezone.utc)
    except ValueError as exc:
        ctx.warn(INVALID_REFERENCE_TIME,
                 f"{year:04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}:{second:02d}: {exc}")
        reference_time = None
    return Identification(
        originating_center=centre,
        originating_sub_center=sub_centre,
        master_tables_version=master,
        local_tables_version=local,
        reference_time_significance=ctx.lookup("reference_time_significance", significance),
        reference_time=reference_time,
        production_status=ctx.lookup("production_status", status),
        data_type=ctx.lookup("type_of_data", data_type),
    )


def decode_grid(payload: bytes, ctx: DecodeContext) -> GridDefinition:
    source, count, octets, interpretation, template = unpack("BIBBH", payload, 5)
    return GridDefinition(
        source=source,
        data_point_count=count,
        point_count_octets=octets,
        point_count_interpretation=interpretation,
        template_number=template,
        definition=GRID_TEMPLATES.decode(template, payload, ctx),
    )


def decode_product(payload: bytes, ctx: DecodeContext) -> ProductDefinition:
    coordinates, template = unpack("HH", payload, 5)
    return ProductDefinition(
        number_of_coordinate_values=coordinates,
        template_number=template,
        definition=PRODUCT_TEMPLATES.decode(template, payload, ctx),
    )


def decode_representation(payload: bytes, ctx: DecodeContext) -> DataRepresentation:
    count, template = unpack("IH", payload, 5)
    template_number = ctx.lookup("data_representation_template", template)
    details = REPRESENTATION_TEMPLATES.decode(template, payload, ctx)
    raw = None
    if details is None:
        raw = bytes(payload[REPRESENTATION_TEMPLATE_START:])
    return DataRepresentation(
        data_point_count=count,
        template_number=template_number,
        details=details,
        raw=raw,
    )


def decode_bitmap(payload: bytes, ctx: DecodeContext) -> BitMap:
    (indicator,) = unpack("B", payload, 5)
    bitmap = bytes(payload[6:]) if indicator == 0 else None
    return BitMap(indicator=ctx.lookup("bitmap_indicator", indicator), bitmap=bitmap)


_SECTION_DECODERS: dict[SectionNumber, Callable[[bytes, DecodeContext], Any]] = {
    SectionNumber.IDENTIFICATION: decode_identification,
    SectionNumber.GRID: decode_grid,
    SectionNumber.PRODUCT: decode_product,
    SectionNumber.REPRESENTATION: decode_representation,
    SectionNumber.BITMAP: decode_bitmap,
}


def decode_section(section: RawSection, ctx: DecodeContext) -> RawSection:
    """Fill ``section.contents`` from its payload.

    Sections without a decoder (local use, data, end) keep ``contents``
    as *None*.  Numbers outside 0-8 additionally record a diagnostic.
    """
    ctx.offset = section.offset
    try:
        number = SectionNumber(section.number)
    except ValueError:
        ctx.warn(UNKNOWN_SECTION, f"Unknown section number: {section.number}")
        return section
    decoder = _SECTION_DECODERS.get(number)
    if decoder is not None:
        section.contents = decoder(section.payload, ctx)
    return section
