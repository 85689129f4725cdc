from __future__ import annotations
import logging
from typing import Dict, List, Optional

from ...errors import StartingPositionError
from ...rng import RandomSource
from ..noise import CellularDistance, CellularReturn, NoiseSampler, NoiseType
from ..pathfinding import DistanceField, furthest_reachable
from ..tiles import TileType
from .base import MapBuilder

logger = logging.getLogger(__name__)

REGION_NOISE_FREQUENCY = 0.08
REGION_KEY_SCALE = 10240.0


class CellularAutomataBuilder(MapBuilder):
    """Cellular automata caverns.

    Algorithm:
    - Seed every interior tile as floor with probability floor_percent.
    - Sweep the 8-neighbour rule (wall with <= 3 wall neighbours opens,
      floor with >= 5 wall neighbours closes), double-buffered.
    - Pick a start, wall off floor the start cannot reach, and put the stairs
      on the reachable floor tile furthest from the start.
    - Bucket the floor into pseudo-rooms with coarse cellular noise.
    """

    name = "cellular"

    def __init__(
        self,
        width: int,
        height: int,
        depth: int = 1,
        rng: Optional[RandomSource] = None,
        debug_snapshots: bool = False,
        floor_percent: int = 52,
        iterations: int = 4,
        sweeps_per_iteration: int = 15,
        start_tries: int = 250,
    ) -> None:
        super().__init__(width, height, depth, rng=rng, debug_snapshots=debug_snapshots)
        self.floor_percent = int(floor_percent)
        self.iterations = int(iterations)
        self.sweeps_per_iteration = int(sweeps_per_iteration)
        self.start_tries = int(start_tries)
        self.noise_regions: Dict[int, List[int]] = {}

    def build_map(self) -> None:
        self._initialize()
        self.take_snapshot()
        for _ in range(self.iterations):
            for _ in range(self.sweeps_per_iteration):
                self._sweep()
            self.take_snapshot()

        m = self._map
        m.synchronize_blocked()
        start = m.random_unblocked_point(self.start_tries, self.rng)
        if start is None:
            raise StartingPositionError(
                f"No unblocked floor tile found in {self.start_tries} tries"
            )
        start_idx = m.xy_idx(*start)

        field = DistanceField(m, [start_idx])
        culled = 0
        for idx, tile in enumerate(m.tiles):
            if tile == TileType.FLOOR and not field.is_reachable(idx):
                m.tiles[idx] = TileType.WALL
                culled += 1
        if culled:
            logger.debug("CellularAutomataBuilder: walled off %d unreachable floor tiles", culled)

        stairs_idx = furthest_reachable(field, m.iter_indices(TileType.FLOOR))
        if stairs_idx is None or stairs_idx == start_idx:
            raise StartingPositionError(f"Start {start} is enclosed; no room for stairs")
        m.tiles[stairs_idx] = TileType.DOWN_STAIRS

        self._build_noise_regions()
        self._finish(start, m.idx_xy(stairs_idx))

    def _initialize(self) -> None:
        m = self._map
        threshold = 100 - self.floor_percent
        for y in range(1, m.height - 1):
            for x in range(1, m.width - 1):
                roll = self.rng.roll_dice(1, 100)
                m.tiles[m.xy_idx(x, y)] = TileType.FLOOR if roll > threshold else TileType.WALL

    def _sweep(self) -> None:
        m = self._map
        w = m.width
        old = m.tiles
        new = list(old)
        wall = TileType.WALL
        for y in range(1, m.height - 1):
            for x in range(1, w - 1):
                idx = y * w + x
                walls = (
                    (old[idx - 1] == wall)
                    + (old[idx + 1] == wall)
                    + (old[idx - w] == wall)
                    + (old[idx + w] == wall)
                    + (old[idx - w - 1] == wall)
                    + (old[idx - w + 1] == wall)
                    + (old[idx + w - 1] == wall)
                    + (old[idx + w + 1] == wall)
                )
                if old[idx] == wall:
                    if walls <= 3:
                        new[idx] = TileType.FLOOR
                elif walls >= 5:
                    new[idx] = wall
        m.tiles = new

    def _build_noise_regions(self) -> None:
        m = self._map
        sampler = NoiseSampler(
            seed=self.rng.next_seed(),
            noise_type=NoiseType.CELLULAR,
            frequency=REGION_NOISE_FREQUENCY,
            cellular_distance=CellularDistance.MANHATTAN,
            cellular_return=CellularReturn.CELL_VALUE,
        )
        values = sampler.sample_flat(m.width, m.height)
        regions: Dict[int, List[int]] = {}
        for idx in m.iter_indices(TileType.FLOOR):
            key = int(float(values[idx]) * REGION_KEY_SCALE)
            regions.setdefault(key, []).append(idx)
        self.noise_regions = regions
        logger.debug("CellularAutomataBuilder: %d noise regions", len(regions))

    def terrain_regions(self) -> List[List[int]]:
        return list(self.noise_regions.values())

    def entity_regions(self) -> List[List[int]]:
        start_idx = self._map.xy_idx(*self.starting_position())
        return [r for r in self.noise_regions.values() if start_idx not in r]
