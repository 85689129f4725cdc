from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .map import Map
from .pathfinding import DistanceField
from .tiles import TileType

logger = logging.getLogger(__name__)


@dataclass
class ConnectedComponent:
    base_index: int
    members: List[int] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)


def _next_unvisited(floor: List[bool]) -> Optional[int]:
    for idx, is_floor in enumerate(floor):
        if is_floor:
            return idx
    return None


def get_connected_component(game_map: Map, start_idx: int) -> ConnectedComponent:
    """All traversable floor reachable from start_idx, start included."""
    dist = DistanceField(game_map, [start_idx])
    members = [
        idx for idx in dist.reachable_indices()
        if idx == start_idx or game_map.is_traversable(idx)
    ]
    return ConnectedComponent(base_index=start_idx, members=members)


def enumerate_connected_components(game_map: Map) -> List[ConnectedComponent]:
    """Split the traversable floor of a map into connected components.

    Scans for the lowest unvisited floor index, floods it with a distance
    field and repeats until every floor tile belongs to a component.
    Reads map.blocked, so it must be in sync with the tiles.
    """
    floor = [game_map.is_traversable(idx) for idx in range(game_map.size)]
    components: List[ConnectedComponent] = []
    while True:
        idx = _next_unvisited(floor)
        if idx is None:
            break
        component = get_connected_component(game_map, idx)
        for cidx in component.members:
            floor[cidx] = False
        components.append(component)
    logger.debug(
        "Found %d connected components (sizes=%s)",
        len(components),
        [c.size for c in components],
    )
    return components


def fill_all_but_largest_component(
    game_map: Map, components: List[ConnectedComponent]
) -> Optional[ConnectedComponent]:
    """Wall off every component except the largest; returns the kept one.

    Ties keep the first component encountered. The caller is responsible for
    resynchronising blocked afterwards.
    """
    if not components:
        return None
    largest = components[0]
    for component in components[1:]:
        if component.size > largest.size:
            largest = component
    filled = 0
    for component in components:
        if component is largest:
            continue
        for cidx in component.members:
            game_map.tiles[cidx] = TileType.WALL
            filled += 1
    if filled:
        logger.info("Filled %d tiles outside the largest component (kept %d)", filled, largest.size)
    return largest
