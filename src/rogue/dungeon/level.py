from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import GenerationSettings
from ..rng import RandomSource
from .colormaps import ColorMaps
from .factory import DungeonFactory
from .generator import MapBuilder
from .map import Map, Point
from .noisemaps import NoiseMaps
from .spawning import EntitySpawner, TerrainSpawner
from .tiles import TileType

logger = logging.getLogger(__name__)


@dataclass
class LevelState:
    """A finished level. Owns its map once generation returned."""

    map: Map
    starting_position: Point
    stairs_position: Point
    depth: int
    noise_maps: NoiseMaps
    regions: List[List[int]] = field(default_factory=list)
    algorithm: str = ""
    snapshots: List[Map] = field(default_factory=list)

    def color_maps(self) -> ColorMaps:
        return ColorMaps.from_noise_maps(self.noise_maps, self.map)

    def render(self) -> List[str]:
        return self.map.to_str_lines({self.starting_position: "@"})

    def summary(self) -> Dict[str, Any]:
        """JSON friendly description of the level, stable across runs with one seed."""
        water = self.noise_maps.to_water_spawn_table(self.map)
        grass = self.noise_maps.to_grass_spawn_table(self.map)
        statues = self.noise_maps.to_statue_spawn_table(self.map)
        return {
            "algorithm": self.algorithm,
            "width": self.map.width,
            "height": self.map.height,
            "depth": self.depth,
            "start": list(self.starting_position),
            "stairs": list(self.stairs_position),
            "floor_tiles": self.map.count_tiles(TileType.FLOOR),
            "regions": len(self.regions),
            "water_geometry": self.noise_maps.water_geometry.value,
            "grass_geometry": self.noise_maps.grass_geometry.value,
            "statue_geometry": self.noise_maps.statue_geometry.value,
            "blessing": list(self.noise_maps.blessing) if self.noise_maps.blessing else None,
            "spawn_tables": {
                "deep_water": len(water.deep),
                "shallow_water": len(water.shallow),
                "short_grass": len(grass.short),
                "long_grass": len(grass.long),
                "statues": len(statues),
            },
            "map": self.map.to_dict(),
        }


def generate_level(
    settings: GenerationSettings,
    rng: Optional[RandomSource] = None,
    *,
    entity_spawner: Optional[EntitySpawner] = None,
    terrain_spawner: Optional[TerrainSpawner] = None,
) -> LevelState:
    """Build one level end to end.

    Order: pick a builder, build the map, sample noise maps over the finished
    map, hand regions to the terrain then entity spawners. The same rng is
    used throughout, so a seed fixes the whole level.
    """
    if rng is None:
        rng = RandomSource(settings.seed)
    builder: MapBuilder = DungeonFactory.build_builder(settings, rng)
    builder.build_map()

    # Spawners mutate the builder's map; the level takes it only afterwards.
    noise_maps = NoiseMaps.sample(rng, builder.map())
    if terrain_spawner is not None:
        builder.spawn_terrain(terrain_spawner)
    if entity_spawner is not None:
        builder.spawn_entities(entity_spawner)

    level = LevelState(
        map=builder.map(),
        starting_position=builder.starting_position(),
        stairs_position=builder.stairs_position(),
        depth=settings.depth,
        noise_maps=noise_maps,
        regions=builder.regions(),
        algorithm=builder.name,
        snapshots=builder.snapshot_history(),
    )
    logger.info(
        "Generated depth %d level with %s: start=%s stairs=%s regions=%d",
        level.depth,
        level.algorithm,
        level.starting_position,
        level.stairs_position,
        len(level.regions),
    )
    return level
