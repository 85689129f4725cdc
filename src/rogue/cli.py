from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import ALGORITHMS, GenerationSettings
from .dungeon.level import generate_level
from .errors import MapGenError
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rogue-mapgen",
        description="Generate a dungeon level and print it",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--algorithm", choices=ALGORITHMS, default=None, help="Map building algorithm")
    parser.add_argument("--width", type=int, default=None, help="Map width in tiles")
    parser.add_argument("--height", type=int, default=None, help="Map height in tiles")
    parser.add_argument("--depth", type=int, default=None, help="Dungeon depth of the level")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible levels")
    parser.add_argument("--config", type=Path, default=None, help="YAML settings file")
    parser.add_argument("--json", action="store_true", help="Print a JSON summary instead of the map")
    parser.add_argument(
        "--snapshots", action="store_true", help="Print every intermediate builder snapshot"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> GenerationSettings:
    """Settings from the YAML file and environment, then CLI flags on top."""
    settings = GenerationSettings.load(args.config)
    for name in ("algorithm", "width", "height", "depth", "seed"):
        value = getattr(args, name)
        if value is not None:
            setattr(settings, name, value)
    if args.snapshots:
        settings.debug_snapshots = True
    settings.validate()
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = build_settings(args)
        level = generate_level(settings)
    except MapGenError as exc:
        logger.error("Generation failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        # JSON summary so runs can be diffed
        print(json.dumps(level.summary(), indent=2, sort_keys=True))
        return 0

    if settings.debug_snapshots:
        for n, snapshot in enumerate(level.snapshots):
            print(f"-- snapshot {n} --")
            print("\n".join(snapshot.to_str_lines()))
        print("-- final --")
    print("\n".join(level.render()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
