"""Grid definition templates (Section 3).

Every template starts at octet 15 of the section with the shape of the
earth followed by three scale-factor/scaled-value pairs (spherical radius,
major axis, minor axis).  Coordinates are stored as integers; they are
converted to degrees here.

Implemented templates:

==  ==========================================
 0  Latitude/longitude
10  Mercator
20  Polar stereographic
30  Lambert conformal
40  Gaussian latitude/longitude
90  Space view perspective or orthographic
==  ==========================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from grib2parse.numeric import (
    MISSING_U32,
    gaussian_scale,
    parse_basic_angle,
    unpack,
)
from grib2parse.tables import CodeValue
from grib2parse.templates import DecodeContext, TemplateRegistry

GRID_TEMPLATES = TemplateRegistry("grid definition")

# Octet 15 (zero based 14) is the first template octet
TEMPLATE_START = 14
_GEOMETRY_START = 30

# Fixed micro-degree scale used by the projected templates
MICRO_DEGREES = 1e-6


@dataclass(frozen=True)
class GridTemplate:
    """Earth model shared by all grid templates."""

    earth_shape: CodeValue
    spherical_radius: float | None
    major_axis: float | None
    minor_axis: float | None

    name: ClassVar[str] = ""


@dataclass(frozen=True)
class LatLonGrid(GridTemplate):
    ni: int
    nj: int
    basic_angle: float
    la1: float
    lo1: float
    la2: float
    lo2: float
    di: float | None
    dj: float | None
    resolution_flags: int
    scanning_mode: int

    name: ClassVar[str] = "Latitude/longitude (or equidistant cylindrical, or Plate Carree)"


@dataclass(frozen=True)
class MercatorGrid(GridTemplate):
    ni: int
    nj: int
    la1: float
    lo1: float
    resolution_flags: int
    lad: float
    la2: float
    lo2: float
    scanning_mode: int
    grid_orientation: int
    di: int
    dj: int

    name: ClassVar[str] = "Mercator"


@dataclass(frozen=True)
class PolarStereographicGrid(GridTemplate):
    nx: int
    ny: int
    la1: float
    lo1: float
    resolution_flags: int
    lad: float
    lov: float
    dx: int
    dy: int
    projection_centre: int
    scanning_mode: int

    name: ClassVar[str] = "Polar stereographic projection"


@dataclass(frozen=True)
class LambertConformalGrid(PolarStereographicGrid):
    latin1: float
    latin2: float
    la_south_pole: float
    lo_south_pole: float

    name: ClassVar[str] = "Lambert conformal"


@dataclass(frozen=True)
class GaussianGrid(GridTemplate):
    ni: int
    nj: int
    basic_angle: int
    subdivisions: int
    la1: float
    lo1: float
    la2: float
    lo2: float
    di: float | None
    n: int
    resolution_flags: int
    scanning_mode: int

    name: ClassVar[str] = "Gaussian latitude/longitude"


@dataclass(frozen=True)
class SpaceViewGrid(GridTemplate):
    """Space view perspective or orthographic.

    Only the sub-satellite point is converted to degrees.  The apparent
    diameter, camera position and altitude stay in template units.
    """

    nx: int
    ny: int
    basic_angle: float
    lap: float
    lop: float
    resolution_flags: int
    dx: int
    dy: int
    xp: int
    yp: int
    scanning_mode: int
    orientation: float
    nr: int
    xo: int
    yo: int

    name: ClassVar[str] = "Space view perspective or orthographic"


def _earth(payload: bytes, ctx: DecodeContext) -> dict:
    """Decode octets 15-30: shape of the earth and its axes."""
    shape, rs, rv, mas, mav, mis, miv = unpack("BBIBIBI", payload, TEMPLATE_START)
    return {
        "earth_shape": ctx.lookup("earth_shape", shape),
        "spherical_radius": ctx.scaled(rs, rv),
        "major_axis": ctx.scaled(mas, mav),
        "minor_axis": ctx.scaled(mis, miv),
    }


def _increment(raw: int, scale: float) -> float | None:
    return None if raw == MISSING_U32 else raw * scale


@GRID_TEMPLATES.register(0)
def decode_latlon(payload: bytes, ctx: DecodeContext) -> LatLonGrid:
    (ni, nj, angle, subdivisions, la1, lo1, flags,
     la2, lo2, di, dj, scan) = unpack("IIIIIIBIIIIB", payload, _GEOMETRY_START)
    scale = parse_basic_angle(angle, subdivisions)
    return LatLonGrid(
        **_earth(payload, ctx),
        ni=ni, nj=nj,
        basic_angle=scale,
        la1=ctx.signed(la1, 32) * scale,
        lo1=ctx.signed(lo1, 32) * scale,
        la2=ctx.signed(la2, 32) * scale,
        lo2=ctx.signed(lo2, 32) * scale,
        di=_increment(di, scale),
        dj=_increment(dj, scale),
        resolution_flags=flags,
        scanning_mode=scan,
    )


@GRID_TEMPLATES.register(10)
def decode_mercator(payload: bytes, ctx: DecodeContext) -> MercatorGrid:
    (ni, nj, la1, lo1, flags, lad, la2, lo2,
     scan, orientation, di, dj) = unpack("IIIIBIIIBIII", payload, _GEOMETRY_START)
    return MercatorGrid(
        **_earth(payload, ctx),
        ni=ni, nj=nj,
        la1=ctx.signed(la1, 32) * MICRO_DEGREES,
        lo1=ctx.signed(lo1, 32) * MICRO_DEGREES,
        resolution_flags=flags,
        lad=ctx.signed(lad, 32) * MICRO_DEGREES,
        la2=ctx.signed(la2, 32) * MICRO_DEGREES,
        lo2=ctx.signed(lo2, 32) * MICRO_DEGREES,
        scanning_mode=scan,
        grid_orientation=orientation,
        di=di, dj=dj,
    )


def _polar_fields(payload: bytes, ctx: DecodeContext) -> dict:
    (nx, ny, la1, lo1, flags, lad, lov,
     dx, dy, centre, scan) = unpack("IIIIBIIIIBB", payload, _GEOMETRY_START)
    return {
        **_earth(payload, ctx),
        "nx": nx, "ny": ny,
        "la1": ctx.signed(la1, 32) * MICRO_DEGREES,
        "lo1": ctx.signed(lo1, 32) * MICRO_DEGREES,
        "resolution_flags": flags,
        "lad": ctx.signed(lad, 32) * MICRO_DEGREES,
        "lov": ctx.signed(lov, 32) * MICRO_DEGREES,
        "dx": dx, "dy": dy,
        "projection_centre": centre,
        "scanning_mode": scan,
    }


@GRID_TEMPLATES.register(20)
def decode_polar_stereographic(payload: bytes, ctx: DecodeContext) -> PolarStereographicGrid:
    return PolarStereographicGrid(**_polar_fields(payload, ctx))


@GRID_TEMPLATES.register(30)
def decode_lambert_conformal(payload: bytes, ctx: DecodeContext) -> LambertConformalGrid:
    common = _polar_fields(payload, ctx)
    # Octets 66-81 follow the polar stereographic layout
    latin1, latin2, la_sp, lo_sp = unpack("IIII", payload, 65)
    return LambertConformalGrid(
        **common,
        latin1=ctx.signed(latin1, 32) * MICRO_DEGREES,
        latin2=ctx.signed(latin2, 32) * MICRO_DEGREES,
        la_south_pole=ctx.signed(la_sp, 32) * MICRO_DEGREES,
        lo_south_pole=ctx.signed(lo_sp, 32) * MICRO_DEGREES,
    )


@GRID_TEMPLATES.register(40)
def decode_gaussian(payload: bytes, ctx: DecodeContext) -> GaussianGrid:
    (ni, nj, angle, subdivisions, la1, lo1, flags,
     la2, lo2, di, n, scan) = unpack("IIIIIIBIIIIB", payload, _GEOMETRY_START)
    scale = gaussian_scale(angle)
    return GaussianGrid(
        **_earth(payload, ctx),
        ni=ni, nj=nj,
        basic_angle=angle,
        subdivisions=subdivisions,
        la1=ctx.signed(la1, 32) * scale,
        lo1=ctx.signed(lo1, 32) * scale,
        la2=ctx.signed(la2, 32) * scale,
        lo2=ctx.signed(lo2, 32) * scale,
        di=_increment(di, scale),
        n=n,
        resolution_flags=flags,
        scanning_mode=scan,
    )


@GRID_TEMPLATES.register(90)
def decode_space_view(payload: bytes, ctx: DecodeContext) -> SpaceViewGrid:
    (nx, ny, lap, lop, flags, dx, dy, xp, yp, scan,
     orientation, nr, xo, yo) = unpack("IIIIBIIIIBIIII", payload, _GEOMETRY_START)
    scale = parse_basic_angle(0, 0)
    return SpaceViewGrid(
        **_earth(payload, ctx),
        nx=nx, ny=ny,
        basic_angle=scale,
        lap=ctx.signed(lap, 32) * scale,
        lop=ctx.signed(lop, 32) * scale,
        resolution_flags=flags,
        dx=dx, dy=dy,
        xp=xp, yp=yp,
        scanning_mode=scan,
        orientation=ctx.signed(orientation, 32) * scale,
        nr=nr, xo=xo, yo=yo,
    )
