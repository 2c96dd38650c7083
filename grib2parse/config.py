"""Configuration system for the GRIB2 decoder.

Loads YAML files holding decoder options and the WMO code tables used to
give meaning to the small integer codes found throughout GRIB2 sections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from grib2parse.tables import CodeValue, lookup

DEFAULT_CONFIG_PATH = Path(__file__).parent / "configs" / "grib2.yaml"

SIGNED_ENCODINGS = ("sign_magnitude", "twos_complement")
FRAMING_MODES = ("full", "fixed")


@dataclass
class CodeTable:
    """A single WMO code table."""

    name: str
    number: str = ""
    title: str = ""
    entries: dict[int, str] = field(default_factory=dict)

    def __contains__(self, code: int) -> bool:
        return code in self.entries


@dataclass
class GribConfig:
    """Decoder options plus the code tables they are decoded against."""

    signed_integers: str = "sign_magnitude"
    framing: str = "full"
    tables: dict[str, CodeTable] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.signed_integers not in SIGNED_ENCODINGS:
            raise ValueError(
                f"signed_integers must be one of {SIGNED_ENCODINGS}, "
                f"got {self.signed_integers!r}"
            )
        if self.framing not in FRAMING_MODES:
            raise ValueError(
                f"framing must be one of {FRAMING_MODES}, got {self.framing!r}"
            )

    def lookup(self, table_name: str, code: int) -> CodeValue:
        """Resolve *code* in the table called *table_name*."""
        table = self.tables.get(table_name)
        return lookup(table.entries if table else None, code)


def _parse_table(name: str, data: dict) -> CodeTable:
    """Build a :class:`CodeTable` from a dictionary."""
    entries = {int(k): str(v) for k, v in (data.get("entries") or {}).items()}
    return CodeTable(
        name=name,
        number=str(data.get("number", "")),
        title=data.get("title", ""),
        entries=entries,
    )


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, "r") as fh:
        data = yaml.safe_load(fh)
    return data or {}


def load_config(path: str | Path | None = None) -> GribConfig:
    """Load decoder configuration.

    Parameters
    ----------
    path : str or Path, optional
        A user YAML file.  Its ``options`` override the built-in defaults
        and its ``tables`` are merged over the built-in code tables.  When
        *None* only the built-in ``grib2.yaml`` is used.

    Returns
    -------
    GribConfig
    """
    data = _read_yaml(DEFAULT_CONFIG_PATH)
    options: dict[str, Any] = dict(data.get("options") or {})
    tables = {
        name: _parse_table(name, tdata)
        for name, tdata in (data.get("tables") or {}).items()
    }

    if path is not None:
        user = _read_yaml(Path(path))
        options.update(user.get("options") or {})
        for name, tdata in (user.get("tables") or {}).items():
            tables[name] = _parse_table(name, tdata)

    return GribConfig(
        signed_integers=options.get("signed_integers", "sign_magnitude"),
        framing=options.get("framing", "full"),
        tables=tables,
    )


_default: GribConfig | None = None


def default_config() -> GribConfig:
    """Return the built-in configuration, loading it on first use."""
    global _default
    if _default is None:
        _default = load_config()
    return _default
