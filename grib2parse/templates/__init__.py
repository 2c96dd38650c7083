"""Shared machinery for GRIB2 template decoders.

Grid, product and data-representation sections each select a numbered
template that describes the octets following the section's fixed header.
Decoders are plain functions ``decoder(payload, ctx)`` registered in a
:class:`TemplateRegistry` per section kind.  ``payload`` is the whole
section, header included, so decoders use the octet offsets printed in
the WMO template tables (minus one).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from grib2parse.config import GribConfig, default_config
from grib2parse.models import UNKNOWN_TEMPLATE, Diagnostic
from grib2parse.numeric import decode_scaled, to_signed
from grib2parse.tables import CodeValue

logger = logging.getLogger(__name__)

Decoder = Callable[[bytes, "DecodeContext"], Any]


@dataclass
class DecodeContext:
    """Per-scan state handed to every section and template decoder."""

    config: GribConfig = field(default_factory=default_config)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    offset: int = 0

    def warn(self, kind: str, message: str) -> Diagnostic:
        """Record a non-fatal diagnostic for the current section."""
        diagnostic = Diagnostic(kind=kind, message=message, offset=self.offset)
        self.diagnostics.append(diagnostic)
        logger.warning("%s", diagnostic)
        return diagnostic

    def signed(self, raw: int, bits: int) -> int:
        return to_signed(raw, bits, self.config.signed_integers)

    def scaled(self, scale_raw: int, value_raw: int) -> float | None:
        return decode_scaled(scale_raw, value_raw, self.config.signed_integers)

    def lookup(self, table_name: str, code: int) -> CodeValue:
        return self.config.lookup(table_name, code)


class TemplateRegistry:
    """Template number to decoder mapping for one section kind."""

    def __init__(self, kind: str):
        self.kind = kind
        self._decoders: dict[int, Decoder] = {}

    def register(self, number: int) -> Callable[[Decoder], Decoder]:
        def wrap(func: Decoder) -> Decoder:
            self._decoders[number] = func
            return func
        return wrap

    def __contains__(self, number: int) -> bool:
        return number in self._decoders

    def numbers(self) -> list[int]:
        return sorted(self._decoders)

    def decode(self, number: int, payload: bytes, ctx: DecodeContext) -> Any:
        """Decode *payload* with template *number*.

        Unknown templates record a diagnostic and return *None*.
        """
        decoder = self._decoders.get(number)
        if decoder is None:
            ctx.warn(UNKNOWN_TEMPLATE, f"Unknown {self.kind} template: {number}")
            return None
        return decoder(payload, ctx)
