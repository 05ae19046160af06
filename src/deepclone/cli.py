"""
Command-line interface for deepclone.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from deepclone import CloneError, CloneOptions, ConfigError, clone_with_report
from deepclone.core.kinds import KIND_DESCRIPTIONS, Kind
from deepclone.core.options import load_options

YAML_SUFFIXES = {".yaml", ".yml"}


def _load_document(path: str) -> Any:
    """Load a YAML or JSON document (by suffix; YAML anchors become shared objects)."""
    with open(path, encoding="utf-8") as f:
        if Path(path).suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(f)
        return json.load(f)


def _dump_document(data: Any, stream, as_yaml: bool) -> None:
    if as_yaml:
        yaml.safe_dump(data, stream, sort_keys=False)
    else:
        json.dump(data, stream, indent=2, default=str)
        stream.write("\n")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def cmd_clone(args) -> int:
    """Clone a YAML/JSON document and report what the traversal saw."""
    _configure_logging(args.verbose)
    try:
        options = load_options(args.options) if args.options else CloneOptions()
        data = _load_document(args.input)
        result, report = clone_with_report(data, options)

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                _dump_document(result, f, Path(args.output).suffix.lower() in YAML_SUFFIXES)
            report_stream = sys.stdout
        else:
            # Document goes to stdout, so the report moves to stderr
            _dump_document(result, sys.stdout, Path(args.input).suffix.lower() in YAML_SUFFIXES)
            report_stream = sys.stderr

        if args.json:
            json.dump(report.to_dict(), report_stream, indent=2)
            report_stream.write("\n")
        else:
            print(str(report), file=report_stream)
        return 0

    except (CloneError, ConfigError) as e:
        print(f"Clone failed: {e}", file=sys.stderr)
        return 1
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        print(f"Cannot read input: {e}", file=sys.stderr)
        return 1


def cmd_kinds(args) -> int:
    """List the kinds values are classified into."""
    if args.json:
        json.dump(
            {kind.value: KIND_DESCRIPTIONS[kind] for kind in Kind.all_kinds()},
            sys.stdout,
            indent=2,
        )
        sys.stdout.write("\n")
        return 0

    width = max(len(kind.value) for kind in Kind.all_kinds())
    for kind in Kind.all_kinds():
        print(f"{kind.value:<{width}}  {KIND_DESCRIPTIONS[kind]}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deepclone", description="deepclone - Identity-preserving deep copy engine"
    )

    # Version argument
    parser.add_argument("--version", action="version", version="deepclone 0.1.0")

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    # Clone command
    clone_parser = subparsers.add_parser(
        "clone", help="Clone a YAML/JSON document and print a traversal report"
    )
    clone_parser.add_argument(
        "-i", "--input", required=True, help="Input document (.yaml, .yml or .json)"
    )
    clone_parser.add_argument(
        "-o", "--output", help="Write the clone here (default: stdout)"
    )
    clone_parser.add_argument(
        "--options", help="YAML/JSON file with clone options"
    )
    clone_parser.add_argument(
        "--json", action="store_true", help="Print the report in JSON format"
    )
    clone_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    clone_parser.set_defaults(func=cmd_clone)

    # Kinds command
    kinds_parser = subparsers.add_parser(
        "kinds", help="List value kinds and how each is cloned"
    )
    kinds_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    kinds_parser.set_defaults(func=cmd_kinds)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
