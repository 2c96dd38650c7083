"""Code-table lookups.

GRIB2 stores most enumerations as small integer codes whose meaning is
defined by WMO code tables.  The tables themselves are loaded from YAML by
:mod:`grib2parse.config`; this module only resolves codes against them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

UNKNOWN = "Unknown"


@dataclass(frozen=True)
class CodeValue:
    """A raw code together with its table meaning."""

    value: int
    meaning: str = UNKNOWN

    @property
    def raw(self) -> int:
        return self.value

    @property
    def known(self) -> bool:
        return self.meaning != UNKNOWN

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value} ({self.meaning})"

    def to_dict(self) -> dict:
        return {"value": self.value, "meaning": self.meaning}


def lookup(table: Mapping[int, str] | None, code: int) -> CodeValue:
    """Resolve *code* against *table*.

    Never raises: a missing table or an absent code resolves to
    ``"Unknown"``.
    """
    if not table:
        return CodeValue(code)
    return CodeValue(code, table.get(code, UNKNOWN))
