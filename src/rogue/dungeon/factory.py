from __future__ import annotations
import logging

from ..config import GenerationSettings
from ..rng import RandomSource
from .generator import CellularAutomataBuilder, MapBuilder, RoomsAndCorridorsBuilder

logger = logging.getLogger(__name__)


def random_builder(width: int, height: int, depth: int, rng: RandomSource) -> MapBuilder:
    """Pick rooms-and-corridors or cellular automata with equal odds."""
    if rng.roll_dice(1, 2) == 1:
        return RoomsAndCorridorsBuilder(width, height, depth, rng=rng)
    return CellularAutomataBuilder(width, height, depth, rng=rng)


class DungeonFactory:
    """Factory to produce map builders using the selected algorithm.

    Usage:
      settings = GenerationSettings.from_env()
      builder = DungeonFactory.build_builder(settings, RandomSource(settings.seed))
      builder.build_map()
    """

    @staticmethod
    def _rooms(settings: GenerationSettings, rng: RandomSource) -> MapBuilder:
        return RoomsAndCorridorsBuilder(
            settings.width,
            settings.height,
            settings.depth,
            rng=rng,
            debug_snapshots=settings.debug_snapshots,
            max_rooms=settings.max_rooms,
            room_min_size=settings.room_min_size,
            room_max_size=settings.room_max_size,
        )

    @staticmethod
    def _cellular(settings: GenerationSettings, rng: RandomSource) -> MapBuilder:
        return CellularAutomataBuilder(
            settings.width,
            settings.height,
            settings.depth,
            rng=rng,
            debug_snapshots=settings.debug_snapshots,
            floor_percent=settings.cell_floor_percent,
            iterations=settings.cell_iterations,
            sweeps_per_iteration=settings.cell_sweeps_per_iteration,
            start_tries=settings.cell_start_tries,
        )

    @staticmethod
    def build_builder(settings: GenerationSettings, rng: RandomSource) -> MapBuilder:
        algo = (settings.algorithm or "random").lower()
        if algo == "random":
            algo = "rooms" if rng.roll_dice(1, 2) == 1 else "cellular"
            logger.debug("DungeonFactory: random pick -> %s", algo)
        if algo in ("bsp", "rooms"):
            logger.info("DungeonFactory: using RoomsAndCorridorsBuilder (algorithm=%s)", algo)
            return DungeonFactory._rooms(settings, rng)
        elif algo in ("cellular", "cave"):
            logger.info("DungeonFactory: using CellularAutomataBuilder (algorithm=%s)", algo)
            return DungeonFactory._cellular(settings, rng)
        else:
            logger.warning("Unknown algorithm '%s', falling back to RoomsAndCorridorsBuilder", algo)
            return DungeonFactory._rooms(settings, rng)
