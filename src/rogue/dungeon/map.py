from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..rng import RandomSource
from .tiles import TILE_GLYPHS, TRAVERSABLE_TILES, TileType

logger = logging.getLogger(__name__)

Point = Tuple[int, int]

DIAGONAL_COST = math.sqrt(2.0)

# (dx, dy, cost) in the fixed order exits are reported
_EXIT_DIRECTIONS = (
    (-1, 0, 1.0),
    (1, 0, 1.0),
    (0, -1, 1.0),
    (0, 1, 1.0),
    (-1, -1, DIAGONAL_COST),
    (1, -1, DIAGONAL_COST),
    (-1, 1, DIAGONAL_COST),
    (1, 1, DIAGONAL_COST),
)


class Map:
    """
    Row-major tile grid plus the per-tile state the rest of the game reads.

    All per-tile lists share the same length width*height and are indexed with
    xy_idx. The map doubles as the navigation graph used by distance fields
    and A*: see get_available_exits and get_pathing_distance.

    tile_content is a transient occupancy cache owned by the per-turn indexing
    step of the game. Generation only clears it and it is never persisted.
    """

    def __init__(self, width: int, height: int, depth: int = 1) -> None:
        if width < 3 or height < 3:
            raise ValueError("Map must be at least 3x3 to maintain wall borders")
        self.width = width
        self.height = height
        self.depth = depth
        size = width * height
        self.tiles: List[TileType] = [TileType.WALL] * size
        self.revealed: List[bool] = [False] * size
        self.visible: List[bool] = [False] * size
        self.blocked: List[bool] = [True] * size
        self.ok_to_spawn: List[bool] = [False] * size
        self.tile_content: List[List[Any]] = [[] for _ in range(size)]
        logger.debug("Map created: %dx%d depth=%d", width, height, depth)

    @property
    def size(self) -> int:
        return self.width * self.height

    # ---- Coordinates -----------------------------------------------------
    def xy_idx(self, x: int, y: int) -> int:
        return y * self.width + x

    def idx_xy(self, idx: int) -> Point:
        return (idx % self.width, idx // self.width)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_edge_tile(self, x: int, y: int) -> bool:
        return x == 0 or y == 0 or x == self.width - 1 or y == self.height - 1

    def is_interior(self, x: int, y: int) -> bool:
        return 1 <= x <= self.width - 2 and 1 <= y <= self.height - 2

    # ---- Tile queries ----------------------------------------------------
    def is_opaque(self, idx: int) -> bool:
        return self.tiles[idx] == TileType.WALL

    def is_traversable(self, idx: int) -> bool:
        return self.tiles[idx] in TRAVERSABLE_TILES

    def count_tiles(self, *types: TileType) -> int:
        wanted = set(types)
        return sum(1 for t in self.tiles if t in wanted)

    def find_tile(self, tile_type: TileType) -> Optional[int]:
        for idx, t in enumerate(self.tiles):
            if t == tile_type:
                return idx
        return None

    def get_adjacent_tiles(self, x: int, y: int) -> List[Point]:
        out: List[Point] = []
        for dx, dy in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                out.append((nx, ny))
        return out

    # ---- Navigation graph ------------------------------------------------
    def get_available_exits(self, idx: int) -> List[Tuple[int, float]]:
        """Neighbours reachable in one step from idx, with their step cost.

        A neighbour counts only if it lies strictly inside the one tile border
        and is not blocked. Order is fixed so every consumer sees the same graph.
        """
        x, y = self.idx_xy(idx)
        exits: List[Tuple[int, float]] = []
        for dx, dy, cost in _EXIT_DIRECTIONS:
            nx, ny = x + dx, y + dy
            if not self.is_interior(nx, ny):
                continue
            nidx = self.xy_idx(nx, ny)
            if self.blocked[nidx]:
                continue
            exits.append((nidx, cost))
        return exits

    def get_pathing_distance(self, idx1: int, idx2: int) -> float:
        x1, y1 = self.idx_xy(idx1)
        x2, y2 = self.idx_xy(idx2)
        return math.hypot(x2 - x1, y2 - y1)

    # ---- Synchronisation -------------------------------------------------
    def synchronize_blocked(self) -> None:
        self.blocked = [t == TileType.WALL for t in self.tiles]

    def synchronize_ok_to_spawn(self) -> None:
        self.ok_to_spawn = [
            t in TRAVERSABLE_TILES and not self.is_edge_tile(*self.idx_xy(idx))
            for idx, t in enumerate(self.tiles)
        ]

    def clear_tile_content(self) -> None:
        for content in self.tile_content:
            content.clear()

    # ---- Sampling --------------------------------------------------------
    def random_unblocked_point(self, n_tries: int, rng: RandomSource) -> Optional[Point]:
        """Rejection-sample an interior, traversable, unblocked tile.

        Returns None once n_tries samples have all been rejected.
        """
        for _ in range(n_tries):
            x = rng.randint(1, self.width - 2)
            y = rng.randint(1, self.height - 2)
            idx = self.xy_idx(x, y)
            if self.is_traversable(idx) and not self.blocked[idx]:
                return (x, y)
        logger.debug("random_unblocked_point: no tile found in %d tries", n_tries)
        return None

    # ---- Export / Persistence -------------------------------------------
    def to_str_lines(self, marks: Optional[Dict[Point, str]] = None) -> List[str]:
        marks = marks or {}
        lines: List[str] = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                mark = marks.get((x, y))
                row.append(mark if mark else TILE_GLYPHS[self.tiles[self.xy_idx(x, y)]])
            lines.append("".join(row))
        return lines

    def to_dict(self) -> Dict[str, Any]:
        """Flat row-major form for save files. tile_content is left out."""
        return {
            "width": self.width,
            "height": self.height,
            "depth": self.depth,
            "tiles": [t.name for t in self.tiles],
            "revealed": list(self.revealed),
            "visible": list(self.visible),
            "blocked": list(self.blocked),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Map":
        m = cls(int(data["width"]), int(data["height"]), int(data.get("depth", 1)))
        size = m.size
        for key in ("tiles", "revealed", "visible", "blocked"):
            if len(data[key]) != size:
                raise ValueError(f"Map field {key!r} has {len(data[key])} entries, expected {size}")
        m.tiles = [TileType[name] for name in data["tiles"]]
        m.revealed = [bool(v) for v in data["revealed"]]
        m.visible = [bool(v) for v in data["visible"]]
        m.blocked = [bool(v) for v in data["blocked"]]
        m.synchronize_ok_to_spawn()
        return m

    def copy(self) -> "Map":
        clone = Map(self.width, self.height, self.depth)
        clone.tiles = list(self.tiles)
        clone.revealed = list(self.revealed)
        clone.visible = list(self.visible)
        clone.blocked = list(self.blocked)
        clone.ok_to_spawn = list(self.ok_to_spawn)
        return clone

    def iter_indices(self, *types: TileType) -> Iterable[int]:
        wanted = set(types)
        return (idx for idx, t in enumerate(self.tiles) if t in wanted)

    def __repr__(self) -> str:
        return f"Map({self.width}x{self.height}, depth={self.depth})"
