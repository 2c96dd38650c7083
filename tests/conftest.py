"""Shared test fixtures for grib2parse."""

import struct

import pytest

MISSING_PAIR = (0xFF, 0xFFFFFFFF)


def sm32(value):
    """Encode *value* as a 32-bit sign-and-magnitude integer."""
    return (0x80000000 | -value) if value < 0 else value


def sm16(value):
    return (0x8000 | -value) if value < 0 else value


class Grib2Builder:
    """Assemble GRIB2 byte strings section by section."""

    @staticmethod
    def section(number, body):
        return struct.pack(">IB", 5 + len(body), number) + body

    @classmethod
    def identification(cls, centre=98, sub_centre=0, master=2, local=0,
                       significance=1, when=(2024, 1, 15, 12, 0, 0),
                       status=0, data_type=1):
        body = struct.pack(">HHBBBHBBBBBBB", centre, sub_centre, master, local,
                           significance, *when, status, data_type)
        return cls.section(1, body)

    @classmethod
    def local_use(cls, payload=b"local"):
        return cls.section(2, payload)

    @staticmethod
    def earth(shape=6, radius=MISSING_PAIR, major=MISSING_PAIR, minor=MISSING_PAIR):
        return struct.pack(">BBIBIBI", shape, *radius, *major, *minor)

    @classmethod
    def grid(cls, template, geometry, points=12, earth=None):
        header = struct.pack(">BIBBH", 0, points, 0, 0, template)
        return cls.section(3, header + (earth or cls.earth()) + geometry)

    @classmethod
    def latlon_grid(cls, ni=4, nj=3, angle=0, subdivisions=0xFFFFFFFF,
                    la1=60_000_000, lo1=0, la2=-60_000_000, lo2=3_000_000,
                    di=1_000_000, dj=1_000_000, earth=None):
        geometry = struct.pack(">IIIIIIBIIIIB", ni, nj, angle, subdivisions,
                               sm32(la1), sm32(lo1), 48, sm32(la2), sm32(lo2),
                               di, dj, 0)
        return cls.grid(0, geometry, points=ni * nj, earth=earth)

    @classmethod
    def product(cls, category=0, number=0, forecast_time=6,
                surface=(103, 0, 2)):
        body = struct.pack(">HH", 0, 0) + struct.pack(
            ">BBBBBHBBIBBIBBI", category, number, 2, 0, 96, 0, 0, 1,
            forecast_time, *surface, 255, 0, 0)
        return cls.section(4, body)

    @classmethod
    def simple_packing(cls, points=12, reference=273.15, binary_scale=0,
                       decimal_scale=0, bits=16):
        body = struct.pack(">IH", points, 0) + struct.pack(
            ">fHHBB", reference, sm16(binary_scale), sm16(decimal_scale), bits, 0)
        return cls.section(5, body)

    @classmethod
    def bitmap(cls, indicator=255, bits=b""):
        return cls.section(6, struct.pack(">B", indicator) + bits)

    @classmethod
    def data(cls, payload=b"\x00" * 24):
        return cls.section(7, payload)

    @classmethod
    def field_sections(cls, bitmap=None):
        return [
            cls.latlon_grid(),
            cls.product(),
            cls.simple_packing(),
            bitmap or cls.bitmap(),
            cls.data(),
        ]

    @staticmethod
    def message(sections, edition=2, discipline=0, end=True, total_length=None):
        body = b"".join(sections) + (b"7777" if end else b"")
        if total_length is None:
            total_length = 16 + len(body)
        header = b"GRIB" + struct.pack(">BBBBQ", 0, 0, discipline, edition, total_length)
        return header + body


@pytest.fixture
def builder():
    return Grib2Builder


@pytest.fixture
def grib_bytes(builder):
    """A single message with one field on a 4x3 lat/lon grid."""
    return builder.message([builder.identification()] + builder.field_sections())


@pytest.fixture
def grib_file(tmp_path, grib_bytes):
    p = tmp_path / "sample.grib2"
    p.write_bytes(grib_bytes)
    return p
