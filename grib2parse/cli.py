"""Command-line interface for grib2parse."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from grib2parse.config import load_config
from grib2parse.models import to_dict
from grib2parse.reader import DecodeReport, read_file


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grib2parse",
        description="Decode the section structure of GRIB2 files.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log decoder warnings (-v) or debug output (-vv)")
    sub = parser.add_subparsers(dest="command")

    # --- list ---
    list_p = sub.add_parser("list", help="List the messages and fields of a file")
    list_p.add_argument("file", help="GRIB2 file to read")
    list_p.add_argument("-c", "--config", default=None,
                        help="Path to a YAML decoder config file")

    # --- dump ---
    dump_p = sub.add_parser("dump", help="Print every decoded record of a file")
    dump_p.add_argument("file", help="GRIB2 file to read")
    dump_p.add_argument("-c", "--config", default=None)
    dump_p.add_argument("--json", dest="output_json", action="store_true",
                        help="Output results as JSON")

    # --- tables ---
    tab_p = sub.add_parser("tables", help="Show the loaded code tables")
    tab_p.add_argument("name", nargs="?", help="Only show this table")
    tab_p.add_argument("-c", "--config", default=None)

    return parser


def _read(args) -> DecodeReport | None:
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: {args.file} is not a file", file=sys.stderr)
        return None
    report = read_file(path, load_config(args.config))
    for e in report.errors:
        print(f"Error: {e}", file=sys.stderr)
    return report


def _describe_field(field) -> str:
    parts = []
    if field.grid is not None:
        definition = field.grid.definition
        name = definition.name if definition is not None else "unknown"
        parts.append(f"grid {field.grid.template_number} ({name}), "
                     f"{field.grid.data_point_count} points")
    if field.product is not None:
        parts.append(f"product {field.product.template_number}")
    if field.representation is not None:
        parts.append(f"packing {field.representation.template_number}")
    if field.bitmap is not None and field.bitmap.applies:
        parts.append("bitmap")
    if field.data is None:
        parts.append("no data section")
    return "; ".join(parts)


def cmd_list(args) -> int:
    """Execute the ``list`` subcommand."""
    report = _read(args)
    if report is None or not report.ok:
        return 1
    for i, msg in enumerate(report.messages):
        when = msg.reference_time.isoformat() if msg.reference_time else "?"
        print(f"Message {i} @ {msg.offset}: {msg.total_length} bytes, "
              f"centre {msg.originating_center}, reference time {when}")
        for j, field in enumerate(msg.fields):
            print(f"  Field {j}: {_describe_field(field)}")
    for d in report.diagnostics:
        print(f"  WARNING: {d}")
    return 0


def cmd_dump(args) -> int:
    """Execute the ``dump`` subcommand."""
    report = _read(args)
    if report is None or not report.ok:
        return 1

    if args.output_json:
        d = {
            "path": report.path,
            "size": report.size,
            "messages": to_dict(report.messages),
            "diagnostics": to_dict(report.diagnostics),
        }
        print(json.dumps(d, indent=2))
        return 0

    for i, msg in enumerate(report.messages):
        print(f"\n{'='*60}")
        print(f"Message {i} @ {msg.offset}")
        for k, v in to_dict(msg).items():
            if k in ("fields", "identification"):
                continue
            print(f"  {k}: {v}")
        for j, field in enumerate(msg.fields):
            print(f"  Field {j}:")
            for k, v in to_dict(field).items():
                print(f"    {k}: {v}")
    for d in report.diagnostics:
        print(f"  WARNING: {d}")
    return 0


def cmd_tables(args) -> int:
    """Execute the ``tables`` subcommand."""
    config = load_config(args.config)
    names = [args.name] if args.name else sorted(config.tables)
    for name in names:
        table = config.tables.get(name)
        if table is None:
            print(f"Error: no code table named {name!r}", file=sys.stderr)
            return 1
        print(f"{table.name} (code table {table.number}): {table.title}")
        for code, meaning in sorted(table.entries.items()):
            print(f"  {code:>5}  {meaning}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

    if args.command is None:
        parser.print_help()
        return 0

    dispatch = {
        "list": cmd_list,
        "dump": cmd_dump,
        "tables": cmd_tables,
    }
    handler = dispatch.get(args.command)
    if handler is None:
        parser.print_help()
        return 1
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
