from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..rng import RandomSource
from .colormaps import (
    RGB,
    grass_green_from_noise,
    shallow_water_bg_from_noise,
    water_bg_from_noise,
    water_fg_from_noise,
)
from .map import Map, Point
from .noise import CellularDistance, CellularReturn, NoiseSampler, NoiseType
from .tiles import TileType

logger = logging.getLogger(__name__)


LARGE_LAKES_SHALLOW_WATER_THRESHOLD = 0.4
LARGE_LAKES_DEEP_WATER_THRESHOLD = 0.6
LARGE_LAKES_NOISE_FREQUENCY = 0.1

SMALL_LAKES_SHALLOW_WATER_THRESHOLD = 0.6
SMALL_LAKES_DEEP_WATER_THRESHOLD = 0.7
SMALL_LAKES_NOISE_FREQUENCY = 0.25

SHORT_GRASS_NOISE_THRESHOLD = 0.0
SPORADIC_TALL_GRASS_NOISE_THRESHOLD = 0.8
GROVE_TALL_GRASS_NOISE_THRESHOLD = 0.4

STATUE_NOISE_THRESHOLD = 0.98

BLESSING_SEARCH_TRIES = 100


class WaterGeometry(Enum):
    NONE = "none"
    LARGE_LAKES = "large_lakes"
    SMALL_LAKES = "small_lakes"

    @classmethod
    def random(cls, rng: RandomSource) -> "WaterGeometry":
        return rng.weighted_choice(WATER_GEOMETRY_WEIGHTS)


class GrassGeometry(Enum):
    NONE = "none"
    ONLY_SHORT = "only_short"
    SPORADIC_TALL = "sporadic_tall"
    GROVE_TALL = "grove_tall"

    @classmethod
    def random(cls, rng: RandomSource) -> "GrassGeometry":
        return rng.weighted_choice(GRASS_GEOMETRY_WEIGHTS)


class StatueGeometry(Enum):
    NONE = "none"
    SOME = "some"

    @classmethod
    def random(cls, rng: RandomSource) -> "StatueGeometry":
        return rng.weighted_choice(STATUE_GEOMETRY_WEIGHTS)


# NONE variants with zero weight exist for completeness but are never rolled.
WATER_GEOMETRY_WEIGHTS: Dict[WaterGeometry, float] = {
    WaterGeometry.NONE: 0,
    WaterGeometry.LARGE_LAKES: 1,
    WaterGeometry.SMALL_LAKES: 1,
}
GRASS_GEOMETRY_WEIGHTS: Dict[GrassGeometry, float] = {
    GrassGeometry.NONE: 0,
    GrassGeometry.ONLY_SHORT: 1,
    GrassGeometry.SPORADIC_TALL: 2,
    GrassGeometry.GROVE_TALL: 2,
}
STATUE_GEOMETRY_WEIGHTS: Dict[StatueGeometry, float] = {
    StatueGeometry.NONE: 1,
    StatueGeometry.SOME: 1,
}

_WATER_FREQUENCY = {
    WaterGeometry.NONE: 1.0,
    WaterGeometry.LARGE_LAKES: LARGE_LAKES_NOISE_FREQUENCY,
    WaterGeometry.SMALL_LAKES: SMALL_LAKES_NOISE_FREQUENCY,
}

# Smooth sampler settings and white noise frequency per channel. Water's
# smooth frequency comes from its geometry.
CHANNEL_PARAMS: Dict[str, Tuple[Dict[str, Any], float]] = {
    "spawning": ({"noise_type": NoiseType.VALUE, "frequency": 0.25}, 0.5),
    "grass": ({"noise_type": NoiseType.VALUE_FRACTAL, "frequency": 0.1}, 0.1),
    "water": ({"noise_type": NoiseType.VALUE}, 0.7),
    "fire": ({"noise_type": NoiseType.VALUE_FRACTAL, "frequency": 0.15}, 0.5),
    "chill": (
        {
            "noise_type": NoiseType.CELLULAR,
            "frequency": 0.12,
            "cellular_distance": CellularDistance.EUCLIDEAN,
            "cellular_return": CellularReturn.CELL_VALUE,
        },
        0.5,
    ),
    "statue": ({"noise_type": NoiseType.VALUE, "frequency": 0.3}, 0.5),
}

# color value = smooth * c0 + white * c1 + c2, fed into a two colour ramp
COLOR_RAMP_COEFFICIENTS: Dict[str, Tuple[str, Tuple[float, float, float]]] = {
    "short_grass_fg": ("grass", (1.0, 0.3, 0.6)),
    "long_grass_fg": ("grass", (1.0, 0.3, 0.0)),
    "shallow_water_fg": ("water", (1.0, 0.0, 0.4)),
    "shallow_water_bg": ("water", (0.5, 0.1, 0.4)),
    "deep_water_fg": ("water", (1.0, 0.0, 0.6)),
    "deep_water_bg": ("water", (0.7, 0.2, 0.4)),
    "fire_fg": ("fire", (0.5, 0.3, 0.5)),
    "fire_bg": ("fire", (0.4, 0.2, 0.5)),
    "chill_fg": ("chill", (0.5, 0.3, 0.5)),
    "chill_bg": ("chill", (0.4, 0.2, 0.5)),
    "steam_fg": ("water", (0.5, 0.3, 0.5)),
    "blood_fg": ("fire", (0.3, 0.2, 0.2)),
    "blood_bg": ("fire", (0.3, 0.2, 0.3)),
}


# ---------------------------------------------------------------------------
# Spawn tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WaterSpawnData:
    x: int
    y: int
    fg_noise: float
    bg_noise: float
    deep: bool

    @property
    def fg_color(self) -> RGB:
        return water_fg_from_noise(self.fg_noise)

    @property
    def bg_color(self) -> RGB:
        if self.deep:
            return water_bg_from_noise(self.bg_noise)
        return shallow_water_bg_from_noise(self.bg_noise)


@dataclass
class WaterSpawnTable:
    shallow: List[WaterSpawnData] = field(default_factory=list)
    deep: List[WaterSpawnData] = field(default_factory=list)


@dataclass(frozen=True)
class GrassSpawnData:
    x: int
    y: int
    color_noise: float

    @property
    def fg_color(self) -> RGB:
        return grass_green_from_noise(self.color_noise)


@dataclass
class GrassSpawnTable:
    short: List[GrassSpawnData] = field(default_factory=list)
    long: List[GrassSpawnData] = field(default_factory=list)


@dataclass(frozen=True)
class StatueSpawnData:
    x: int
    y: int


# ---------------------------------------------------------------------------
# Noise maps
# ---------------------------------------------------------------------------

@dataclass
class NoiseChannel:
    """Paired smooth and white noise for one terrain channel, one value per tile."""

    smooth: np.ndarray
    white: np.ndarray

    @classmethod
    def sample(
        cls,
        rng: RandomSource,
        width: int,
        height: int,
        smooth_params: Dict[str, Any],
        white_frequency: float,
    ) -> "NoiseChannel":
        smooth = NoiseSampler(seed=rng.next_seed(), **smooth_params)
        white = NoiseSampler(seed=rng.next_seed(), noise_type=NoiseType.WHITE, frequency=white_frequency)
        return cls(smooth=smooth.sample_flat(width, height), white=white.sample_flat(width, height))

    def pair(self, idx: int) -> Tuple[float, float]:
        return float(self.smooth[idx]), float(self.white[idx])

    def color_values(self, coefficients: Tuple[float, float, float]) -> List[float]:
        c0, c1, c2 = coefficients
        return (self.smooth * c0 + self.white * c1 + c2).tolist()


@dataclass
class NoiseMaps:
    """
    Noise fields of one level and the tables derived from them.

    Sampled once after the map is finished. Everything else here is a pure
    query over the sampled fields and a map:
    - to_*_spawn_table: tile lists for the terrain spawners
    - to_*_color_value / color_values: scalars for the colour ramps
    - *_spawn_positions: candidate orderings for monster placement
    """

    width: int
    height: int
    water_geometry: WaterGeometry
    grass_geometry: GrassGeometry
    statue_geometry: StatueGeometry
    blessing: Optional[Point]
    spawning: NoiseChannel
    grass: NoiseChannel
    water: NoiseChannel
    fire: NoiseChannel
    chill: NoiseChannel
    statue: NoiseChannel

    @classmethod
    def sample(cls, rng: RandomSource, game_map: Map) -> "NoiseMaps":
        water_geometry = WaterGeometry.random(rng)
        grass_geometry = GrassGeometry.random(rng)
        statue_geometry = StatueGeometry.random(rng)
        blessing = game_map.random_unblocked_point(BLESSING_SEARCH_TRIES, rng)
        logger.info(
            "Noise geometry: water=%s grass=%s statue=%s blessing=%s",
            water_geometry.value,
            grass_geometry.value,
            statue_geometry.value,
            blessing,
        )

        w, h = game_map.width, game_map.height
        channels: Dict[str, NoiseChannel] = {}
        for name, (smooth_params, white_frequency) in CHANNEL_PARAMS.items():
            params = dict(smooth_params)
            if name == "water":
                params["frequency"] = _WATER_FREQUENCY[water_geometry]
            channels[name] = NoiseChannel.sample(rng, w, h, params, white_frequency)

        return cls(
            width=w,
            height=h,
            water_geometry=water_geometry,
            grass_geometry=grass_geometry,
            statue_geometry=statue_geometry,
            blessing=blessing,
            **channels,
        )

    # ---- Thresholds ------------------------------------------------------
    def deep_water_noise_threshold(self) -> float:
        if self.water_geometry is WaterGeometry.LARGE_LAKES:
            return LARGE_LAKES_DEEP_WATER_THRESHOLD
        if self.water_geometry is WaterGeometry.SMALL_LAKES:
            return SMALL_LAKES_DEEP_WATER_THRESHOLD
        return math.inf

    def shallow_water_noise_threshold(self) -> float:
        if self.water_geometry is WaterGeometry.LARGE_LAKES:
            return LARGE_LAKES_SHALLOW_WATER_THRESHOLD
        if self.water_geometry is WaterGeometry.SMALL_LAKES:
            return SMALL_LAKES_SHALLOW_WATER_THRESHOLD
        return math.inf

    def short_grass_noise_threshold(self) -> float:
        return SHORT_GRASS_NOISE_THRESHOLD

    def _is_tall_grass(self, smooth: float, white: float) -> bool:
        if self.grass_geometry is GrassGeometry.SPORADIC_TALL:
            return white > SPORADIC_TALL_GRASS_NOISE_THRESHOLD
        if self.grass_geometry is GrassGeometry.GROVE_TALL:
            return smooth > GROVE_TALL_GRASS_NOISE_THRESHOLD
        return False

    # ---- Spawn tables ----------------------------------------------------
    def _decoratable(self, game_map: Map, idx: int) -> bool:
        x, y = game_map.idx_xy(idx)
        if game_map.is_edge_tile(x, y):
            return False
        return game_map.tiles[idx] != TileType.DOWN_STAIRS

    def _check_map(self, game_map: Map) -> None:
        if (game_map.width, game_map.height) != (self.width, self.height):
            raise ValueError(
                f"NoiseMaps sampled for {self.width}x{self.height}, "
                f"got map {game_map.width}x{game_map.height}"
            )

    def to_water_spawn_table(self, game_map: Map) -> WaterSpawnTable:
        self._check_map(game_map)
        table = WaterSpawnTable()
        blessing_adjacent = set()
        if self.blessing is not None:
            blessing_adjacent = set(game_map.get_adjacent_tiles(*self.blessing))
        deep_threshold = self.deep_water_noise_threshold()
        shallow_threshold = self.shallow_water_noise_threshold()
        for idx in range(game_map.size):
            if not self._decoratable(game_map, idx):
                continue
            x, y = game_map.idx_xy(idx)
            s, w = self.water.pair(idx)
            if s > deep_threshold or (x, y) in blessing_adjacent:
                table.deep.append(WaterSpawnData(x, y, s + 0.6, 0.7 * s + 0.2 * w + 0.4, deep=True))
            elif s > shallow_threshold:
                table.shallow.append(WaterSpawnData(x, y, s + 0.4, 0.5 * s + 0.1 * w + 0.4, deep=False))
        logger.debug("Water spawn table: deep=%d shallow=%d", len(table.deep), len(table.shallow))
        return table

    def to_grass_spawn_table(self, game_map: Map) -> GrassSpawnTable:
        self._check_map(game_map)
        table = GrassSpawnTable()
        for idx in range(game_map.size):
            if not self._decoratable(game_map, idx):
                continue
            s, w = self.grass.pair(idx)
            if s > self.short_grass_noise_threshold() and game_map.ok_to_spawn[idx]:
                x, y = game_map.idx_xy(idx)
                if self._is_tall_grass(s, w):
                    table.long.append(GrassSpawnData(x, y, s + 0.3 * w))
                else:
                    table.short.append(GrassSpawnData(x, y, s + 0.3 * w + 0.6))
        logger.debug("Grass spawn table: short=%d long=%d", len(table.short), len(table.long))
        return table

    def to_statue_spawn_table(self, game_map: Map) -> List[StatueSpawnData]:
        self._check_map(game_map)
        if self.statue_geometry is StatueGeometry.NONE:
            return []
        table: List[StatueSpawnData] = []
        for idx in range(game_map.size):
            if not self._decoratable(game_map, idx):
                continue
            if float(self.statue.white[idx]) > STATUE_NOISE_THRESHOLD and game_map.ok_to_spawn[idx]:
                table.append(StatueSpawnData(*game_map.idx_xy(idx)))
        return table

    # ---- Colour values ---------------------------------------------------
    def color_values(self, ramp: str, game_map: Map) -> List[float]:
        self._check_map(game_map)
        try:
            channel_name, coefficients = COLOR_RAMP_COEFFICIENTS[ramp]
        except KeyError:
            raise KeyError(f"Unknown colour ramp: {ramp}") from None
        channel: NoiseChannel = getattr(self, channel_name)
        return channel.color_values(coefficients)

    def to_grass_color_value(self, game_map: Map) -> List[float]:
        return self.color_values("short_grass_fg", game_map)

    def to_water_color_value(self, game_map: Map) -> List[float]:
        return self.color_values("shallow_water_fg", game_map)

    def to_fire_color_value(self, game_map: Map) -> List[float]:
        return self.color_values("fire_fg", game_map)

    def to_chill_color_value(self, game_map: Map) -> List[float]:
        return self.color_values("chill_fg", game_map)

    # ---- Spawn ranking ---------------------------------------------------
    def _rank(self, values: np.ndarray) -> List[Point]:
        order = np.argsort(values, kind="stable")
        return [(int(i) % self.width, int(i) // self.width) for i in order]

    def general_spawn_positions(self) -> List[Point]:
        """All positions by ascending smooth + white; pop from the end."""
        return self._rank(self.spawning.smooth + self.spawning.white)

    def grassbound_spawn_positions(self) -> List[Point]:
        return self._rank(self.grass.smooth)

    def waterbound_spawn_positions(self) -> List[Point]:
        return self._rank(self.water.smooth)
