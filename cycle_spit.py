#!/usr/bin/env python3
"""Lay out 68000 code as fixed-cycle scanlines for Atari ST fullscreen effects."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from cyclespit import (
    CycleResolver,
    CycleTable,
    DocumentRenderer,
    LayoutConfig,
    LayoutError,
    ScanlineLayout,
    parse_template,
)
from cyclespit.layout import DEFAULT_SCANLINE_LABEL, DEFAULT_TARGET_CYCLES


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("source", type=Path, help="Assembly snippet to lay out")
    parser.add_argument(
        "--template",
        type=Path,
        default=None,
        help="Scanline template with border injection code and dcb.w filler budgets",
    )
    parser.add_argument(
        "--label",
        default=DEFAULT_SCANLINE_LABEL,
        help="Symbol receiving the number of generated scanlines",
    )
    parser.add_argument(
        "--cycles",
        type=int,
        default=DEFAULT_TARGET_CYCLES,
        help="Cycle budget of a single scanline",
    )
    parser.add_argument(
        "--cycle-table",
        type=Path,
        default=None,
        help="Override the bundled instruction cycle table",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the generated source here instead of stdout",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only report errors")
    return parser.parse_args()


def configure_logging(args: argparse.Namespace) -> None:
    level = logging.WARNING
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def validate_inputs(source: Path, template: Optional[Path]) -> None:
    for path in (source, template):
        if path is not None and not path.is_file():
            raise SystemExit(f"missing input file: {path}")


def main() -> None:
    start_time = time.perf_counter()
    args = parse_args()
    configure_logging(args)
    validate_inputs(args.source, args.template)

    try:
        config = LayoutConfig(
            target_cycles=args.cycles,
            scanline_label=args.label,
            template_name=str(args.template) if args.template else None,
        )
    except ValueError as exc:
        raise SystemExit(str(exc))

    table = CycleTable.load(args.cycle_table) if args.cycle_table else CycleTable.default()
    resolver = CycleResolver(table)

    sections = []
    if args.template is not None:
        sections = parse_template(args.template.read_text("utf-8"), resolver)

    layout = ScanlineLayout(resolver, sections, config)
    try:
        program = layout.generate(args.source.read_text("utf-8").splitlines())
    except LayoutError as exc:
        raise SystemExit(f"layout failed: {exc}")

    renderer = DocumentRenderer()
    if args.output is not None:
        renderer.write(program, config, args.output)
        print(f"{program.scanline_count} scanlines written to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(renderer.render(program, config))

    logging.getLogger(__name__).debug(
        "total execution time: %.2fs", time.perf_counter() - start_time
    )


if __name__ == "__main__":
    main()
