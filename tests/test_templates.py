"""Tests for the grid, product and representation template decoders."""

import struct

import pytest

from conftest import sm32
from grib2parse.config import GribConfig, load_config
from grib2parse.errors import TruncatedBufferError
from grib2parse.sections import decode_section, frame_section
from grib2parse.templates import DecodeContext, TemplateRegistry
from grib2parse.templates.grid import (
    GRID_TEMPLATES,
    GaussianGrid,
    LambertConformalGrid,
    LatLonGrid,
    MercatorGrid,
    PolarStereographicGrid,
    SpaceViewGrid,
)
from grib2parse.templates.product import AnalysisForecast
from grib2parse.templates.representation import REPRESENTATION_TEMPLATES


def _definition(raw, config=None):
    ctx = DecodeContext(config=config) if config else DecodeContext()
    return decode_section(frame_section(raw, 0), ctx).contents.definition


class TestRegistry:
    def test_registered_grid_templates(self):
        assert GRID_TEMPLATES.numbers() == [0, 10, 20, 30, 40, 90]

    def test_registered_representation_templates(self):
        assert 0 in REPRESENTATION_TEMPLATES
        assert 3 not in REPRESENTATION_TEMPLATES

    def test_register_decorator(self):
        registry = TemplateRegistry("test")

        @registry.register(5)
        def decode_five(payload, ctx):
            return len(payload)

        assert registry.decode(5, b"abc", DecodeContext()) == 3

    def test_unknown_returns_none(self):
        ctx = DecodeContext()
        assert TemplateRegistry("test").decode(1, b"", ctx) is None
        assert len(ctx.diagnostics) == 1


class TestLatLonTemplate:
    def test_default_basic_angle(self, builder):
        grid = _definition(builder.latlon_grid(
            la1=60_000_000, lo1=0, la2=-60_000_000, lo2=3_000_000,
            di=1_000_000, dj=1_000_000))
        assert isinstance(grid, LatLonGrid)
        assert grid.name.startswith("Latitude/longitude")
        assert grid.ni == 4 and grid.nj == 3
        assert grid.basic_angle == 1 / 1_000_000
        assert grid.la1 == pytest.approx(60.0)
        assert grid.lo1 == 0.0
        assert grid.la2 == pytest.approx(-60.0)
        assert grid.lo2 == pytest.approx(3.0)
        assert grid.di == pytest.approx(1.0)
        assert grid.dj == pytest.approx(1.0)
        assert grid.resolution_flags == 48
        assert grid.scanning_mode == 0

    def test_raw_times_ratio(self, builder):
        grid = _definition(builder.latlon_grid(
            angle=1, subdivisions=1000, la1=45_500, lo1=10_250, la2=0, lo2=500,
            di=250, dj=500))
        ratio = 1 / 1000
        assert grid.basic_angle == ratio
        assert grid.la1 == 45_500 * ratio
        assert grid.lo1 == 10_250 * ratio
        assert grid.lo2 == 500 * ratio
        assert grid.di == 250 * ratio
        assert grid.dj == 500 * ratio

    def test_zero_sentinel_angle(self, builder):
        grid = _definition(builder.latlon_grid(angle=0, subdivisions=0, la1=1_000_000))
        assert grid.basic_angle == 1 / 1_000_000
        assert grid.la1 == 1_000_000 * (1 / 1_000_000)

    def test_missing_increments(self, builder):
        grid = _definition(builder.latlon_grid(di=0xFFFFFFFF, dj=0xFFFFFFFF))
        assert grid.di is None
        assert grid.dj is None

    def test_earth(self, builder):
        earth = builder.earth(shape=1, radius=(0, 6_371_229))
        grid = _definition(builder.latlon_grid(earth=earth))
        assert grid.earth_shape.value == 1
        assert grid.spherical_radius == 6_371_229.0
        assert grid.major_axis is None
        assert grid.minor_axis is None

    def test_missing_earth(self, builder):
        grid = _definition(builder.latlon_grid())
        assert grid.earth_shape.meaning == "Earth assumed spherical with radius of 6,371,229.0 m"
        assert grid.spherical_radius is None

    def test_twos_complement_config(self, builder):
        geometry = struct.pack(">IIIIiiBiiIIB", 2, 2, 0, 0, -5_000_000, 0, 0,
                               5_000_000, 0, 0, 0, 0)
        config = GribConfig(signed_integers="twos_complement",
                            tables=load_config().tables)
        grid = _definition(builder.grid(0, geometry), config)
        assert grid.la1 == pytest.approx(-5.0)
        assert grid.la2 == pytest.approx(5.0)

    def test_truncated_template(self, builder):
        raw = builder.grid(0, b"\x00" * 10)
        with pytest.raises(TruncatedBufferError):
            _definition(raw)


class TestMercatorTemplate:
    def test_decode(self, builder):
        geometry = struct.pack(
            ">IIIIBIIIBIII", 100, 80, sm32(-10_000_000), 100_000_000, 48,
            20_000_000, 10_000_000, 120_000_000, 64, 0, 12_000_000, 12_000_000)
        grid = _definition(builder.grid(10, geometry, points=8000))
        assert isinstance(grid, MercatorGrid)
        assert grid.name == "Mercator"
        assert (grid.ni, grid.nj) == (100, 80)
        assert grid.la1 == pytest.approx(-10.0)
        assert grid.lo1 == pytest.approx(100.0)
        assert grid.lad == pytest.approx(20.0)
        assert grid.la2 == pytest.approx(10.0)
        assert grid.lo2 == pytest.approx(120.0)
        assert grid.scanning_mode == 64
        assert grid.grid_orientation == 0
        assert grid.di == 12_000_000
        assert grid.dj == 12_000_000


def _polar_geometry():
    return struct.pack(
        ">IIIIBIIIIBB", 93, 65, 20_000_000, 220_000_000, 8,
        60_000_000, 255_000_000, 90_000_000, 90_000_000, 0, 64)


class TestPolarStereographicTemplate:
    def test_decode(self, builder):
        grid = _definition(builder.grid(20, _polar_geometry()))
        assert isinstance(grid, PolarStereographicGrid)
        assert (grid.nx, grid.ny) == (93, 65)
        assert grid.la1 == pytest.approx(20.0)
        assert grid.lo1 == pytest.approx(220.0)
        assert grid.lad == pytest.approx(60.0)
        assert grid.lov == pytest.approx(255.0)
        assert grid.dx == 90_000_000
        assert grid.dy == 90_000_000
        assert grid.projection_centre == 0
        assert grid.scanning_mode == 64


class TestLambertConformalTemplate:
    def test_decode(self, builder):
        geometry = _polar_geometry() + struct.pack(
            ">IIII", 25_000_000, 25_000_000, sm32(-90_000_000), 0)
        grid = _definition(builder.grid(30, geometry))
        assert isinstance(grid, LambertConformalGrid)
        assert grid.name == "Lambert conformal"
        assert grid.lov == pytest.approx(255.0)
        assert grid.latin1 == pytest.approx(25.0)
        assert grid.latin2 == pytest.approx(25.0)
        assert grid.la_south_pole == pytest.approx(-90.0)
        assert grid.lo_south_pole == 0.0


class TestGaussianTemplate:
    def test_decode(self, builder):
        geometry = struct.pack(
            ">IIIIIIBIIIIB", 192, 94, 0, 0xFFFFFFFF, 88_542_000, 0, 48,
            sm32(-88_542_000), 358_125_000, 1_875_000, 47, 0)
        grid = _definition(builder.grid(40, geometry))
        assert isinstance(grid, GaussianGrid)
        assert (grid.ni, grid.nj, grid.n) == (192, 94, 47)
        assert grid.la1 == pytest.approx(88.542)
        assert grid.la2 == pytest.approx(-88.542)
        assert grid.lo2 == pytest.approx(358.125)
        assert grid.di == pytest.approx(1.875)

    def test_basic_angle_divides_micro_degrees(self, builder):
        geometry = struct.pack(
            ">IIIIIIBIIIIB", 2, 2, 2, 0, 10_000_000, 0, 0, 0, 0, 0, 1, 0)
        grid = _definition(builder.grid(40, geometry))
        assert grid.basic_angle == 2
        assert grid.la1 == pytest.approx(10_000_000 * 1e-6 / 2)


class TestSpaceViewTemplate:
    def test_decode(self, builder):
        geometry = struct.pack(
            ">IIIIBIIIIBIIII", 3712, 3712, 0, 0, 0, 3622, 3622, 1856000, 1856000,
            0, 0, 6_610_000, 0, 0)
        grid = _definition(builder.grid(90, geometry))
        assert isinstance(grid, SpaceViewGrid)
        assert (grid.nx, grid.ny) == (3712, 3712)
        assert grid.lap == 0.0
        assert grid.lop == 0.0
        assert grid.dx == 3622
        assert grid.xp == 1856000
        assert grid.nr == 6_610_000

    def test_negative_subsatellite_longitude(self, builder):
        geometry = struct.pack(
            ">IIIIBIIIIBIIII", 10, 10, 0, sm32(-75_000_000), 0, 1, 1, 5, 5,
            0, 0, 1, 0, 0)
        grid = _definition(builder.grid(90, geometry))
        assert grid.lop == pytest.approx(-75.0)


class TestProductTemplate:
    def test_analysis_forecast(self, builder):
        product = _definition(builder.product(category=0, number=0, forecast_time=6,
                                              surface=(103, 0, 2)))
        assert isinstance(product, AnalysisForecast)
        assert product.parameter_category == 0
        assert product.parameter_number == 0
        assert product.generating_process.meaning == "Forecast"
        assert product.forecast_process == 96
        assert product.time_unit.meaning == "Hour"
        assert product.forecast_time == 6
        assert product.first_surface.type.meaning == "Specified height level above ground"
        assert product.first_surface.value == 2.0
        assert product.second_surface is None

    def test_isobaric_surface_scaled(self, builder):
        product = _definition(builder.product(surface=(100, 0, 50000)))
        assert product.first_surface.type.value == 100
        assert product.first_surface.value == 50000.0


class TestSimplePackingValue:
    def test_value_contract(self, builder):
        raw = builder.simple_packing(reference=0.0, binary_scale=0, decimal_scale=0)
        rep = decode_section(frame_section(raw, 0), DecodeContext()).contents
        assert rep.details.value(5) == 5.0
