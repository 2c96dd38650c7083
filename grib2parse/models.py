"""Records produced by the GRIB2 decoder."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from grib2parse.tables import CodeValue

# Diagnostic kinds
UNKNOWN_TEMPLATE = "unknown_template"
UNKNOWN_SECTION = "unknown_section"
INCOMPLETE_FIELD = "incomplete_field"
INVALID_REFERENCE_TIME = "invalid_reference_time"
MISSING_BITMAP = "missing_bitmap"
MISSING_END_MARKER = "missing_end_marker"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal decoding notice."""

    kind: str
    message: str
    offset: int | None = None

    def __str__(self) -> str:
        where = f" at offset {self.offset}" if self.offset is not None else ""
        return f"{self.kind}{where}: {self.message}"


@dataclass(frozen=True)
class Indicator:
    """Section 0."""

    discipline: int
    edition: int
    reserved: tuple[int, int]
    total_length: int


@dataclass(frozen=True)
class Identification:
    """Section 1."""

    originating_center: int
    originating_sub_center: int
    master_tables_version: int
    local_tables_version: int
    reference_time_significance: CodeValue
    reference_time: datetime | None
    production_status: CodeValue
    data_type: CodeValue


@dataclass(frozen=True)
class GridDefinition:
    """Section 3.  ``definition`` is *None* for unknown templates."""

    source: int
    data_point_count: int
    point_count_octets: int
    point_count_interpretation: int
    template_number: int
    definition: Any = None


@dataclass(frozen=True)
class ProductDefinition:
    """Section 4."""

    number_of_coordinate_values: int
    template_number: int
    definition: Any = None


@dataclass(frozen=True)
class DataRepresentation:
    """Section 5.

    ``details`` holds the decoded template; for unrecognised templates it
    is *None* and ``raw`` keeps the undecoded template octets.
    """

    data_point_count: int
    template_number: CodeValue
    details: Any = None
    raw: bytes | None = None


@dataclass(frozen=True)
class BitMap:
    """Section 6.

    ``bitmap`` holds the mask octets when the indicator is 0 or when a
    previously defined bitmap was carried forward (indicator 254).
    """

    indicator: CodeValue
    bitmap: bytes | None = None

    @property
    def applies(self) -> bool:
        return self.indicator.value != 255

    def mask(self, count: int) -> list[bool]:
        """Expand the bitmap into *count* presence flags, MSB first."""
        if self.bitmap is None:
            return [True] * count
        flags: list[bool] = []
        for octet in self.bitmap:
            for shift in range(7, -1, -1):
                if len(flags) == count:
                    return flags
                flags.append(bool((octet >> shift) & 1))
        if len(flags) < count:
            raise ValueError(
                f"Bitmap holds {len(flags)} bits, {count} data points requested"
            )
        return flags


@dataclass
class RawSection:
    """A framed section before it is folded into a message."""

    number: int
    byte_length: int
    offset: int
    payload: bytes
    contents: Any = None


@dataclass(frozen=True)
class Field:
    """One repeated {3, 4, 5, 6, 7} group of a message.

    Sections 2 to 6 carry over from the previous group when omitted, so
    ``local_use`` may belong to an earlier group.

    ``data`` is the undecoded Section 7 payload, *None* when the group was
    never closed by a data section.
    """

    local_use: bytes | None = None
    grid: GridDefinition | None = None
    product: ProductDefinition | None = None
    representation: DataRepresentation | None = None
    bitmap: BitMap | None = None
    data: bytes | None = None


@dataclass(frozen=True)
class GribMessage:
    """A decoded GRIB2 message.

    The identification section is kept whole on ``identification`` and
    its fields are also hoisted onto the message itself.
    """

    indicator: Indicator
    offset: int = 0
    discipline_code: CodeValue | None = None
    identification: Identification | None = None
    originating_center: int | None = None
    originating_sub_center: int | None = None
    master_tables_version: int | None = None
    local_tables_version: int | None = None
    reference_time_significance: CodeValue | None = None
    reference_time: datetime | None = None
    production_status: CodeValue | None = None
    data_type: CodeValue | None = None
    fields: tuple[Field, ...] = ()

    @classmethod
    def assemble(cls, indicator: Indicator, identification: Identification | None,
                 fields: list[Field], offset: int = 0,
                 discipline: CodeValue | None = None) -> "GribMessage":
        if identification is None:
            return cls(indicator=indicator, offset=offset, discipline_code=discipline,
                       fields=tuple(fields))
        return cls(
            indicator=indicator,
            offset=offset,
            discipline_code=discipline,
            identification=identification,
            originating_center=identification.originating_center,
            originating_sub_center=identification.originating_sub_center,
            master_tables_version=identification.master_tables_version,
            local_tables_version=identification.local_tables_version,
            reference_time_significance=identification.reference_time_significance,
            reference_time=identification.reference_time,
            production_status=identification.production_status,
            data_type=identification.data_type,
            fields=tuple(fields),
        )

    @property
    def discipline(self) -> int:
        return self.indicator.discipline

    @property
    def total_length(self) -> int:
        return self.indicator.total_length


@dataclass
class ScanResult:
    """Messages found in a buffer plus the non-fatal notices raised."""

    messages: list[GribMessage] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self):
        return iter(self.messages)

    def __getitem__(self, index: int) -> GribMessage:
        return self.messages[index]


def to_dict(obj: Any) -> Any:
    """Convert decoder records to JSON-serialisable structures.

    Byte payloads are summarised by their length.
    """
    if isinstance(obj, CodeValue):
        return obj.to_dict()
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, (bytes, bytearray)):
        return {"byte_length": len(obj)}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        d = {f.name: to_dict(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
        name = getattr(obj, "name", None)
        if isinstance(name, str) and "name" not in d:
            d["name"] = name
        return d
    if isinstance(obj, (list, tuple)):
        return [to_dict(v) for v in obj]
    if isinstance(obj, dict):
        return {k: to_dict(v) for k, v in obj.items()}
    return obj
