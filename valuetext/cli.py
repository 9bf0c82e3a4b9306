"""Command line entry point for valuetext.

Subcommands:
- ``render``: read a YAML value and print its invariant text,
- ``parse``: parse text as a named type and print the rendered result,
- ``probe``: report whether text parses as a named type.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from fractions import Fraction
from typing import Any
from uuid import UUID

import numpy as np
import yaml
from pydantic import ValidationError

from .config import load_config
from .logging_utils import setup_logging
from .options import FormatOptions
from .parse import parse, probe_parse
from .render import render

LOG = logging.getLogger(__name__)

TYPE_NAMES: dict[str, Any] = {
    "bool": bool,
    "int": int,
    "float": float,
    "decimal": Decimal,
    "fraction": Fraction,
    "complex": complex,
    "str": str,
    "datetime": datetime,
    "date": date,
    "time": time,
    "timedelta": timedelta,
    "uuid": UUID,
    "int8": np.int8,
    "int16": np.int16,
    "int32": np.int32,
    "int64": np.int64,
    "uint8": np.uint8,
    "uint16": np.uint16,
    "uint32": np.uint32,
    "uint64": np.uint64,
    "float16": np.float16,
    "float32": np.float32,
    "float64": np.float64,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="valuetext", description="Invariant value rendering and parsing")
    parser.add_argument("--config", default=None, help="Path to config YAML")
    parser.add_argument("--max-items", type=int, default=None, help="Maximum rendered items per collection")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum nesting depth")
    parser.add_argument("--no-count", action="store_true", help="Hide the '(N items)' suffix")
    parser.add_argument("--dimensions", action="store_true", help="Annotate multi-dimensional arrays")
    sub = parser.add_subparsers(dest="command", required=True)

    render_cmd = sub.add_parser("render", help="Render a YAML value")
    render_cmd.add_argument("value", nargs="?", default=None, help="YAML value (stdin when omitted)")
    render_cmd.add_argument("--array", action="store_true", help="Convert the value to a numpy array first")

    for name, help_text in (("parse", "Parse text as a type"), ("probe", "Check whether text parses as a type")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("--type", required=True, choices=sorted(TYPE_NAMES), help="Target type name")
        cmd.add_argument("text", help="Text to parse")
    return parser


def _effective_options(base: FormatOptions, args: argparse.Namespace) -> FormatOptions:
    overrides: dict[str, Any] = {}
    if args.max_items is not None:
        overrides["max_collection_items"] = args.max_items
    if args.max_depth is not None:
        overrides["max_nesting_depth"] = args.max_depth
    if args.no_count:
        overrides["show_collection_count"] = False
    if args.dimensions:
        overrides["show_array_dimensions"] = True
    if not overrides:
        return base
    return FormatOptions.model_validate({**base.model_dump(), **overrides})


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns the process exit code."""

    def fail(message: str, exit_code: int = 2) -> None:
        """Print error and terminate process."""
        print(f"ERROR: {message}", file=sys.stderr)
        raise SystemExit(exit_code)

    args = _build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config)
        options = _effective_options(cfg.options, args)
    except ValidationError as exc:
        fail(f"Invalid configuration: {exc}")
    except Exception as exc:
        fail(f"Failed to load configuration: {exc}")

    setup_logging(cfg.logging)

    if args.command == "render":
        raw = args.value if args.value is not None else sys.stdin.read()
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            fail(f"Invalid YAML value: {exc}")
        if args.array:
            try:
                value = np.array(value)
            except ValueError as exc:
                fail(f"Value is not array-like: {exc}")
        LOG.debug("Rendering %s value", type(value).__name__)
        print(render(value, options))
        return 0

    target = TYPE_NAMES[args.type]
    if args.command == "parse":
        print(render(parse(args.text, target, options), options))
        return 0

    ok = probe_parse(args.text, target, options.provider)
    print("true" if ok else "false")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
