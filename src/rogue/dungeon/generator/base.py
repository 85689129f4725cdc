from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from ...errors import BuilderNotReadyError
from ...rng import RandomSource
from ..map import Map, Point
from ..spawning import EntitySpawner, TerrainSpawner

logger = logging.getLogger(__name__)


class MapBuilder(ABC):
    """Generation contract shared by every map building algorithm.

    A builder exclusively owns its Map while build_map() runs. Accessors may
    only be used after build_map() returned; map() hands out a copy.
    """

    name = "base"

    def __init__(
        self,
        width: int,
        height: int,
        depth: int = 1,
        rng: Optional[RandomSource] = None,
        debug_snapshots: bool = False,
    ) -> None:
        self.depth = depth
        self.rng = rng if rng is not None else RandomSource()
        self.debug_snapshots = debug_snapshots
        self._map = Map(width, height, depth)
        self._history: List[Map] = []
        self._starting_position: Optional[Point] = None
        self._stairs_position: Optional[Point] = None
        self._built = False

    @abstractmethod
    def build_map(self) -> None:
        """Generate the level in place."""
        raise NotImplementedError

    @abstractmethod
    def terrain_regions(self) -> List[List[int]]:
        """Tile index regions handed to the terrain spawner."""
        raise NotImplementedError

    @abstractmethod
    def entity_regions(self) -> List[List[int]]:
        """Tile index regions handed to the entity spawner."""
        raise NotImplementedError

    # ---- Accessors -------------------------------------------------------
    def _require_built(self, what: str) -> None:
        if not self._built:
            raise BuilderNotReadyError(f"{type(self).__name__}.{what}() called before build_map()")

    def map(self) -> Map:
        self._require_built("map")
        return self._map.copy()

    def starting_position(self) -> Point:
        self._require_built("starting_position")
        if self._starting_position is None:
            raise BuilderNotReadyError(f"{type(self).__name__} has no starting position")
        return self._starting_position

    def stairs_position(self) -> Point:
        self._require_built("stairs_position")
        if self._stairs_position is None:
            raise BuilderNotReadyError(f"{type(self).__name__} has no stairs position")
        return self._stairs_position

    def regions(self) -> List[List[int]]:
        self._require_built("regions")
        return self.terrain_regions()

    # ---- Collaborators ---------------------------------------------------
    def spawn_terrain(self, terrain_spawner: TerrainSpawner) -> None:
        self._require_built("spawn_terrain")
        for region in self.terrain_regions():
            terrain_spawner.spawn_region(self._map, region, self.depth)

    def spawn_entities(self, entity_spawner: EntitySpawner) -> None:
        self._require_built("spawn_entities")
        for region in self.entity_regions():
            entity_spawner.spawn_region(region, self.depth)

    # ---- Debug history ---------------------------------------------------
    def take_snapshot(self) -> None:
        if not self.debug_snapshots:
            return
        snapshot = self._map.copy()
        # So the snapshot renders everything
        snapshot.revealed = [True] * snapshot.size
        self._history.append(snapshot)

    def snapshot_history(self) -> List[Map]:
        return list(self._history)

    def _finish(self, start: Point, stairs: Point) -> None:
        self._map.synchronize_blocked()
        self._map.synchronize_ok_to_spawn()
        self._map.clear_tile_content()
        self._starting_position = start
        self._stairs_position = stairs
        self._built = True
        self.take_snapshot()
        logger.info(
            "%s finished: %dx%d depth=%d start=%s stairs=%s",
            type(self).__name__,
            self._map.width,
            self._map.height,
            self.depth,
            start,
            stairs,
        )
