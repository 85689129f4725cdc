from __future__ import annotations
import logging
from typing import List, Optional

from ...errors import ConfigError, NoRoomsPlacedError
from ...rng import RandomSource
from ..carving import carve_horizontal_tunnel, carve_room, carve_vertical_tunnel
from ..connectivity import enumerate_connected_components, fill_all_but_largest_component
from ..tiles import Rectangle, TileType
from .base import MapBuilder

logger = logging.getLogger(__name__)


class RoomsAndCorridorsBuilder(MapBuilder):
    """Rectangular rooms joined by L-shaped corridors.

    Algorithm:
    - Try max_rooms random rectangles, rejecting any that intersects a room
      already accepted.
    - Connect each accepted room to the previous one, centre to centre,
      horizontal-then-vertical or vertical-then-horizontal at random.
    - Start in the centre of the first room, stairs in the centre of the last.
    """

    name = "rooms"

    def __init__(
        self,
        width: int,
        height: int,
        depth: int = 1,
        rng: Optional[RandomSource] = None,
        debug_snapshots: bool = False,
        max_rooms: int = 30,
        room_min_size: int = 6,
        room_max_size: int = 10,
    ) -> None:
        super().__init__(width, height, depth, rng=rng, debug_snapshots=debug_snapshots)
        if room_min_size >= room_max_size:
            raise ConfigError("room_min_size must be smaller than room_max_size")
        if width < room_max_size + 2 or height < room_max_size + 2:
            raise ConfigError(f"Map {width}x{height} too small for rooms up to {room_max_size}")
        self.max_rooms = max_rooms
        self.room_min_size = room_min_size
        self.room_max_size = room_max_size
        self.rooms: List[Rectangle] = []

    def build_map(self) -> None:
        self._carve_rooms_and_corridors()
        if len(self.rooms) < 2:
            # Start and stairs need separate rooms
            raise NoRoomsPlacedError(
                f"Only {len(self.rooms)} room(s) placed in {self.max_rooms} trials on a "
                f"{self._map.width}x{self._map.height} map, need at least 2"
            )

        start = self.rooms[0].center()
        stairs = self.rooms[-1].center()
        m = self._map
        m.tiles[m.xy_idx(*stairs)] = TileType.DOWN_STAIRS
        m.synchronize_blocked()

        # Corridors connect every room, so this only matters if carving changes
        components = enumerate_connected_components(m)
        if len(components) > 1:
            fill_all_but_largest_component(m, components)

        logger.debug("RoomsAndCorridorsBuilder: placed %d rooms", len(self.rooms))
        self._finish(start, stairs)

    def _carve_rooms_and_corridors(self) -> None:
        rng = self.rng
        m = self._map
        for _ in range(self.max_rooms):
            w = rng.range(self.room_min_size, self.room_max_size)
            h = rng.range(self.room_min_size, self.room_max_size)
            x = rng.roll_dice(1, m.width - w - 1) - 1
            y = rng.roll_dice(1, m.height - h - 1) - 1
            new_room = Rectangle.from_size(x, y, w, h)
            if any(new_room.intersect(other) for other in self.rooms):
                continue
            carve_room(m, new_room)
            self.take_snapshot()
            if self.rooms:
                new_x, new_y = new_room.center()
                prev_x, prev_y = self.rooms[-1].center()
                if rng.range(0, 2) == 1:
                    carve_horizontal_tunnel(m, prev_x, new_x, prev_y)
                    carve_vertical_tunnel(m, prev_y, new_y, new_x)
                else:
                    carve_vertical_tunnel(m, prev_y, new_y, prev_x)
                    carve_horizontal_tunnel(m, prev_x, new_x, new_y)
            self.rooms.append(new_room)
            self.take_snapshot()

    def _room_floor(self, room: Rectangle) -> List[int]:
        m = self._map
        region = []
        for x, y in room.interior():
            idx = m.xy_idx(x, y)
            if m.is_traversable(idx):
                region.append(idx)
        return region

    def terrain_regions(self) -> List[List[int]]:
        return [self._room_floor(room) for room in self.rooms]

    def entity_regions(self) -> List[List[int]]:
        # The first room holds the player
        return [self._room_floor(room) for room in self.rooms[1:]]
