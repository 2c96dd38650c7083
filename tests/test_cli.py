"""Tests for grib2parse.cli."""

import json

import pytest

from grib2parse.cli import main


class TestCLI:
    def test_help_returns_zero(self):
        assert main([]) == 0

    def test_list(self, grib_file, capsys):
        ret = main(["list", str(grib_file)])
        assert ret == 0
        out = capsys.readouterr().out
        assert "Message 0 @ 0" in out
        assert "centre 98" in out
        assert "grid 0 (Latitude/longitude" in out

    def test_list_invalid_path(self, tmp_path):
        assert main(["list", str(tmp_path / "nope.grib2")]) == 1

    def test_list_no_messages(self, tmp_path, capsys):
        p = tmp_path / "empty.bin"
        p.write_bytes(b"\x00" * 64)
        assert main(["list", str(p)]) == 1
        assert "No GRIB messages" in capsys.readouterr().err

    def test_dump(self, grib_file, capsys):
        ret = main(["dump", str(grib_file)])
        assert ret == 0
        out = capsys.readouterr().out
        assert "originating_center: 98" in out
        assert "Field 0:" in out

    def test_dump_json(self, grib_file, capsys):
        ret = main(["dump", str(grib_file), "--json"])
        assert ret == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data["messages"]) == 1
        msg = data["messages"][0]
        assert msg["reference_time"] == "2024-01-15T12:00:00+00:00"
        field = msg["fields"][0]
        assert field["grid"]["definition"]["name"].startswith("Latitude/longitude")
        assert field["grid"]["definition"]["la1"] == pytest.approx(60.0)
        assert field["representation"]["template_number"] == {
            "value": 0, "meaning": "Grid point data - simple packing",
        }
        assert field["data"] == {"byte_length": 24}

    def test_dump_with_config(self, grib_file, tmp_path, capsys):
        cfg = tmp_path / "fixed.yaml"
        cfg.write_text("options:\n  framing: fixed\n")
        ret = main(["dump", str(grib_file), "--json", "-c", str(cfg)])
        assert ret == 0
        data = json.loads(capsys.readouterr().out)
        assert data["messages"][0]["fields"][0]["data"] is None

    def test_tables(self, capsys):
        ret = main(["tables", "time_unit"])
        assert ret == 0
        out = capsys.readouterr().out
        assert "code table 4.4" in out
        assert "Hour" in out

    def test_tables_unknown(self, capsys):
        assert main(["tables", "nope"]) == 1
