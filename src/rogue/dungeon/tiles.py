from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Tuple


class TileType(IntEnum):
    WALL = 0
    FLOOR = 1
    BLOOD_STAIN = 2
    DOWN_STAIRS = 3


TRAVERSABLE_TILES = frozenset({TileType.FLOOR, TileType.BLOOD_STAIN})

TILE_GLYPHS = {
    TileType.WALL: "#",
    TileType.FLOOR: ".",
    TileType.BLOOD_STAIN: ",",
    TileType.DOWN_STAIRS: ">",
}


@dataclass
class Rectangle:
    """Axis-aligned rectangle in tile coordinates.

    The walls of a room sit on x1/y1, the carved interior spans
    x1+1..x2 and y1+1..y2 inclusive.
    """

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> "Rectangle":
        return cls(x, y, x + w, y + h)

    def center(self) -> Tuple[int, int]:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def intersect(self, other: "Rectangle") -> bool:
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def interior(self) -> Iterator[Tuple[int, int]]:
        for y in range(self.y1 + 1, self.y2 + 1):
            for x in range(self.x1 + 1, self.x2 + 1):
                yield x, y
