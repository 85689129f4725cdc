from __future__ import annotations

from .map import Map
from .tiles import Rectangle, TileType


def carve_room(game_map: Map, room: Rectangle) -> None:
    for x, y in room.interior():
        game_map.tiles[game_map.xy_idx(x, y)] = TileType.FLOOR


def carve_horizontal_tunnel(game_map: Map, x1: int, x2: int, y: int) -> None:
    for x in range(min(x1, x2), max(x1, x2) + 1):
        idx = game_map.xy_idx(x, y)
        if 0 < idx < game_map.size:
            game_map.tiles[idx] = TileType.FLOOR


def carve_vertical_tunnel(game_map: Map, y1: int, y2: int, x: int) -> None:
    for y in range(min(y1, y2), max(y1, y2) + 1):
        idx = game_map.xy_idx(x, y)
        if 0 < idx < game_map.size:
            game_map.tiles[idx] = TileType.FLOOR
