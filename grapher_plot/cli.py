from __future__ import annotations

import argparse
import logging
import math
import os
from pathlib import Path
from typing import Callable, Sequence

from grapher_core.measures import Measures
from grapher_core.rulers import RulerSettings
from grapher_plot.navigator import Navigator
from grapher_plot.render import FrameRenderer, save_png


LOGGER = logging.getLogger(__name__)

DEMO_FUNCTIONS: dict[str, tuple[Callable[[float], float], tuple[int, int, int, int], str]] = {
    "sin": (lambda x: math.sin(x) * 10, (255, 255, 255, 255), "default"),
    "cos": (lambda x: math.cos(x) * 5, (0, 200, 0, 255), "default"),
    "exp": (math.exp, (255, 170, 70, 255), "default"),
    "inverse": (lambda x: 1 / x, (90, 180, 255, 255), "default"),
    "sqrt": (math.sqrt, (220, 90, 220, 255), "default"),
    "steps": (lambda x: x * -5, (0, 255, 255, 255), "integer"),
}


def _measures(args: argparse.Namespace, axis: str) -> Measures:
    return Measures(
        min_log=getattr(args, f"{axis}_min_log"),
        max_log=getattr(args, f"{axis}_max_log"),
        min_value=getattr(args, f"{axis}_min"),
        max_value=getattr(args, f"{axis}_max"),
        min_value_limit=getattr(args, f"{axis}_min_limit"),
        max_value_limit=getattr(args, f"{axis}_max_limit"),
    )


def _add_axis_arguments(parser: argparse.ArgumentParser, axis: str) -> None:
    upper = axis.upper()
    parser.add_argument(f"--{axis}-min-log", type=int, default=None, help=f"{upper} linear zone ends at 10^N.")
    parser.add_argument(f"--{axis}-max-log", type=int, default=None, help=f"{upper} log zone ends at 10^N.")
    parser.add_argument(f"--{axis}-min", type=float, default=None, help=f"Lowest visible {upper} value.")
    parser.add_argument(f"--{axis}-max", type=float, default=None, help=f"Highest visible {upper} value.")
    parser.add_argument(f"--{axis}-min-limit", type=float, default=None, help=f"Hard lower {upper} limit.")
    parser.add_argument(f"--{axis}-max-limit", type=float, default=None, help=f"Hard upper {upper} limit.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="grapher")
    parser.add_argument(
        "--log-level",
        default=os.getenv("GRAPHER_LOG_LEVEL", "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render demo functions to a PNG file.")
    render.add_argument("--out", type=Path, default=Path("grapher.png"))
    render.add_argument("--width", type=int, default=800)
    render.add_argument("--height", type=int, default=600)
    render.add_argument(
        "--function",
        dest="functions",
        action="append",
        choices=sorted(DEMO_FUNCTIONS),
        default=None,
        help="Function to plot; repeatable. Default: sin, cos and steps.",
    )
    render.add_argument("--zoom-in", type=int, default=0, help="Zoom in N steps around the plot centre.")
    render.add_argument("--zoom-out", type=int, default=0, help="Zoom out N steps around the plot centre.")
    render.add_argument("--ruler-step", type=float, default=None, help="Pixel span needed to subdivide rulers.")
    _add_axis_arguments(render, "x")
    _add_axis_arguments(render, "y")
    return parser


def run_render(args: argparse.Namespace) -> Path:
    navigator = Navigator(args.width, args.height)
    navigator.set_measures(x=_measures(args, "x"), y=_measures(args, "y"))

    for name in args.functions or ["sin", "cos", "steps"]:
        calculate, color, kind = DEMO_FUNCTIONS[name]
        navigator.add_graph(calculate, color, kind=kind)  # type: ignore[arg-type]

    centre_x = args.width // 2
    centre_y = args.height // 2
    for _ in range(args.zoom_in):
        navigator.zoom(True, native_x=centre_x, native_y=centre_y)
    for _ in range(args.zoom_out):
        navigator.zoom(False, native_x=centre_x, native_y=centre_y)

    settings = RulerSettings() if args.ruler_step is None else RulerSettings(min_coord_step_for_deep=args.ruler_step)
    frame = FrameRenderer(ruler_settings=settings).render(navigator)
    out = save_png(frame, args.out)
    LOGGER.info("wrote %s", out)
    return out


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "render":
        out = run_render(args)
        print(out)
        return 0
    parser.error(f"unknown command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
