"""Data representation templates (Section 5).

Only the representation metadata is decoded.  Unpacking the Section 7
values is left to the caller; :func:`SimplePacking.value` documents the
reconstruction a downstream stage must apply.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from grib2parse.numeric import simple_packing_value, unpack
from grib2parse.tables import CodeValue
from grib2parse.templates import DecodeContext, TemplateRegistry

REPRESENTATION_TEMPLATES = TemplateRegistry("data representation")

# Octet 12 (zero based 11) is the first template octet
TEMPLATE_START = 11


@dataclass(frozen=True)
class SimplePacking:
    reference_value: float
    binary_scale_factor: int
    decimal_scale_factor: int
    number_of_bits_used: int
    original_type: CodeValue

    name: ClassVar[str] = "Grid point data - simple packing"

    def value(self, raw: int) -> float:
        """Reconstruct the physical value of one packed integer."""
        return simple_packing_value(
            raw, self.reference_value,
            self.binary_scale_factor, self.decimal_scale_factor,
        )


@REPRESENTATION_TEMPLATES.register(0)
def decode_simple_packing(payload: bytes, ctx: DecodeContext) -> SimplePacking:
    reference, binary_scale, decimal_scale, bits, original = unpack(
        "fHHBB", payload, TEMPLATE_START,
    )
    return SimplePacking(
        reference_value=reference,
        binary_scale_factor=ctx.signed(binary_scale, 16),
        decimal_scale_factor=ctx.signed(decimal_scale, 16),
        number_of_bits_used=bits,
        original_type=ctx.lookup("original_field_type", original),
    )
