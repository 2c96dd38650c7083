"""Product definition templates (Section 4).

Template octets start at octet 10 of the section, after the number of
coordinate values (octets 6-7) and the template number (octets 8-9).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from grib2parse.numeric import unpack
from grib2parse.tables import CodeValue
from grib2parse.templates import DecodeContext, TemplateRegistry

PRODUCT_TEMPLATES = TemplateRegistry("product definition")

TEMPLATE_START = 9

# Fixed surface type meaning "no second surface"
_NO_SURFACE = 255


@dataclass(frozen=True)
class FixedSurface:
    type: CodeValue
    value: float | None


@dataclass(frozen=True)
class AnalysisForecast:
    """Analysis or forecast at a horizontal level at a point in time."""

    parameter_category: int
    parameter_number: int
    generating_process: CodeValue
    background_process: int
    forecast_process: int
    hours_after_cutoff: int
    minutes_after_cutoff: int
    time_unit: CodeValue
    forecast_time: int
    first_surface: FixedSurface | None
    second_surface: FixedSurface | None

    name: ClassVar[str] = (
        "Analysis or forecast at a horizontal level or in a horizontal layer "
        "at a point in time"
    )


def _surface(kind: int, scale: int, value: int, ctx: DecodeContext) -> FixedSurface | None:
    if kind == _NO_SURFACE:
        return None
    return FixedSurface(type=ctx.lookup("fixed_surface", kind), value=ctx.scaled(scale, value))


@PRODUCT_TEMPLATES.register(0)
def decode_analysis_forecast(payload: bytes, ctx: DecodeContext) -> AnalysisForecast:
    (category, number, process, background, forecast_process, hours, minutes,
     unit, forecast_time, s1_type, s1_scale, s1_value,
     s2_type, s2_scale, s2_value) = unpack("BBBBBHBBIBBIBBI", payload, TEMPLATE_START)
    return AnalysisForecast(
        parameter_category=category,
        parameter_number=number,
        generating_process=ctx.lookup("generating_process", process),
        background_process=background,
        forecast_process=forecast_process,
        hours_after_cutoff=hours,
        minutes_after_cutoff=minutes,
        time_unit=ctx.lookup("time_unit", unit),
        forecast_time=ctx.signed(forecast_time, 32),
        first_surface=_surface(s1_type, s1_scale, s1_value, ctx),
        second_surface=_surface(s2_type, s2_scale, s2_value, ctx),
    )
