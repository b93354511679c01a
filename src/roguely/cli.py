from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from .config import Settings, load_settings
from .core.geometry import Point
from .core.random import RandomSource
from .dungeon.cells import Cell
from .dungeon.maps import MapInfo
from .exceptions import ConfigError, RoguelyError
from .fov.fov import VISIBLE
from .utils.logging import configure_logging
from .world.context import GameContext

logger = logging.getLogger(__name__)

PATH_MARK = "*"
OBSERVER_MARK = "@"


def _point(values: Optional[List[int]]) -> Optional[Point]:
    if values is None:
        return None
    return Point(values[0], values[1])


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="roguely", description="Roguelike map generation, FOV and pathfinding")
    p.add_argument("--config", type=str, default=None, help="Path to a YAML settings file")
    p.add_argument("--seed", type=str, default=None, help="Seed (int or string) for deterministic output")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--json", action="store_true", help="Print JSON instead of ASCII")
    p.add_argument("--width", type=int, default=None, help="Map width (defaults to settings)")
    p.add_argument("--height", type=int, default=None, help="Map height (defaults to settings)")

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("generate", help="Generate a cave map and print it")

    fov = sub.add_parser("fov", help="Print what is visible from a point")
    fov.add_argument("--at", nargs=2, type=int, metavar=("X", "Y"), help="Observer (random open cell if omitted)")

    path = sub.add_parser("path", help="Print an A* path between two points")
    path.add_argument("--start", nargs=2, type=int, metavar=("X", "Y"), help="Start (random open cell if omitted)")
    path.add_argument("--goal", nargs=2, type=int, metavar=("X", "Y"), help="Goal (random open cell if omitted)")
    return p


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def build_context(args: argparse.Namespace) -> GameContext:
    settings: Settings = load_settings(args.config)
    seed: Any = args.seed if args.seed is not None else settings.seed
    if isinstance(seed, str) and seed.lstrip("-").isdigit():
        seed = int(seed)
    # Without a seed each run draws a fresh map.
    source = RandomSource(seed)
    return GameContext(settings, random_source=source)


def _render(info: MapInfo, marks: Dict[Point, str], only_visible: bool = False) -> List[str]:
    lines = info.cells.to_lines()
    out = []
    for y, line in enumerate(lines):
        chars = list(line)
        for x in range(len(chars)):
            if only_visible and info.visibility.get(y, x) != VISIBLE:
                chars[x] = " "
        for p, ch in marks.items():
            if p.y == y:
                chars[p.x] = ch
        out.append("".join(chars))
    return out


def cmd_generate(ctx: GameContext, args: argparse.Namespace) -> Dict[str, Any]:
    info = ctx.generate_map(width=args.width, height=args.height)
    return {
        "name": info.name,
        "width": info.width,
        "height": info.height,
        "seed": ctx.random_source.seed,
        "floor_cells": info.cells.count(int(Cell.FLOOR)),
        "cells": info.cells.to_lists(),
        "lines": info.cells.to_lines(),
    }


def cmd_fov(ctx: GameContext, args: argparse.Namespace) -> Dict[str, Any]:
    info = ctx.generate_map(width=args.width, height=args.height)
    observer = _point(args.at) or ctx.random_open_point()
    ctx.update_player_viewport(observer)
    return {
        "observer": [observer.x, observer.y],
        "visible_cells": info.visibility.count(VISIBLE),
        "visibility": info.visibility.to_lists(),
        "lines": _render(info, {observer: OBSERVER_MARK}, only_visible=True),
    }


def cmd_path(ctx: GameContext, args: argparse.Namespace) -> Dict[str, Any]:
    info = ctx.generate_map(width=args.width, height=args.height)
    start = _point(args.start) or ctx.random_open_point()
    goal = _point(args.goal) or ctx.random_open_point()
    path = ctx.find_path(start, goal)
    if not path:
        logger.warning("No path from %s to %s", start, goal)
    return {
        "start": [start.x, start.y],
        "goal": [goal.x, goal.y],
        "length": max(len(path) - 1, 0),
        "path": [[p.x, p.y] for p in path],
        "lines": _render(info, {p: PATH_MARK for p in path}),
    }


COMMANDS = {
    "generate": cmd_generate,
    "fov": cmd_fov,
    "path": cmd_path,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.debug else logging.INFO)

    try:
        ctx = build_context(args)
        if not args.debug:
            logging.getLogger().setLevel(ctx.settings.log_level)
        result = COMMANDS[args.command](ctx, args)
    except ConfigError as exc:
        logger.error("%s", exc)
        return 2
    except (RoguelyError, IndexError, ValueError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1

    if args.json:
        result.pop("lines", None)
        print(json.dumps(result, sort_keys=True))
    else:
        print("\n".join(result["lines"]))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
