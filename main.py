from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
import sys
from typing import Sequence

from rusplot import (
    ExecutionResult,
    ExportError,
    ExportService,
    FileSystemWriter,
    FixedPathPicker,
    PlotDataError,
    PlotEngine,
    load_config,
    panel_caption,
    series_summary,
    validate_config,
)


def main(argv: Sequence[str] | None = None) -> int:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    parser = argparse.ArgumentParser(prog="rusplot")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", parents=[common], help="Render the plots of an execution-result JSON file to PNG.")
    render.add_argument("result", type=Path)
    render.add_argument("--out", type=Path, default=None, help="Output path. Default: config export_filename.")
    render.add_argument("--config", type=Path, default=None, help="TOML file with a [plot] table.")
    render.add_argument("--theme", choices=["dark", "light"], default=None)
    render.add_argument("--zoom", type=float, default=1.0, help="Zoom factor, clamped to [0.5, 3.0].")
    render.add_argument("--width", type=int, default=None, help="Viewport width at zoom 1.0.")
    render.add_argument("--height", type=int, default=None, help="Viewport height at zoom 1.0.")
    render.add_argument("--profile", choices=["padded", "symmetric"], default=None, help="Bounds profile.")

    summary = sub.add_parser("summary", parents=[common], help="Print the panel caption and per-series point counts.")
    summary.add_argument("result", type=Path)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        result = _load_result(args.result)
    except (OSError, json.JSONDecodeError, PlotDataError) as exc:
        print(f"error: cannot read {args.result}: {exc}", file=sys.stderr)
        return 2

    if args.command == "summary":
        print(panel_caption(result.plots))
        for line in series_summary(result.plots):
            print(f"  {line}")
        for line in result.diagnostics:
            print(f"! {line}")
        return 0

    if args.command == "render":
        overrides: dict[str, object] = {}
        if args.theme is not None:
            overrides["theme"] = args.theme
        if args.width is not None:
            overrides["width"] = args.width
        if args.height is not None:
            overrides["height"] = args.height
        if args.profile is not None:
            overrides["bounds_profile"] = args.profile
        try:
            config = load_config(args.config, overrides) if args.config is not None else validate_config(overrides)
        except (OSError, ValueError) as exc:
            print(f"error: invalid configuration: {exc}", file=sys.stderr)
            return 2

        engine = PlotEngine(config)
        engine.set_zoom(args.zoom)
        engine.set_plot_set(result.plots)
        if engine.status == "empty":
            print("error: execution result contains no plottable points", file=sys.stderr)
            return 1
        out = args.out if args.out is not None else Path(config.export_filename)
        service = ExportService(engine, FixedPathPicker(out), FileSystemWriter(), default_filename=config.export_filename)
        try:
            outcome = asyncio.run(service.export())
        except ExportError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        if outcome is None:
            raise RuntimeError(f"export to {out} returned no outcome")
        print(f"wrote {outcome.path} ({outcome.width}x{outcome.height}, {outcome.byte_count} bytes)")
        return 0

    raise RuntimeError(f"unsupported command: {args.command}")


def _load_result(path: Path) -> ExecutionResult:
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    return ExecutionResult.from_payload(payload)


if __name__ == "__main__":
    sys.exit(main())
