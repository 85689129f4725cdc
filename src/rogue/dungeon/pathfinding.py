from __future__ import annotations

import heapq
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from .map import Map

logger = logging.getLogger(__name__)

UNREACHABLE = math.inf


class DistanceField:
    """Shortest-path cost from a set of source tiles to every tile of a map.

    Built with Dijkstra over Map.get_available_exits, so it sees exactly the
    graph that A* and the game's movement see. Unreachable tiles hold
    math.inf. An optional max_depth stops expansion beyond that cost.
    """

    def __init__(self, game_map: Map, starts: Sequence[int], max_depth: Optional[float] = None) -> None:
        self.width = game_map.width
        self.height = game_map.height
        self.starts = list(starts)
        self.max_depth = max_depth
        self.values: List[float] = self._build(game_map)

    def _build(self, game_map: Map) -> List[float]:
        dist = [UNREACHABLE] * game_map.size
        heap: List[tuple[float, int]] = []
        for s in self.starts:
            dist[s] = 0.0
            heapq.heappush(heap, (0.0, s))
        while heap:
            d, idx = heapq.heappop(heap)
            if d > dist[idx]:
                continue
            for nidx, cost in game_map.get_available_exits(idx):
                nd = d + cost
                if self.max_depth is not None and nd > self.max_depth:
                    continue
                if nd < dist[nidx]:
                    dist[nidx] = nd
                    heapq.heappush(heap, (nd, nidx))
        return dist

    def __getitem__(self, idx: int) -> float:
        return self.values[idx]

    def __len__(self) -> int:
        return len(self.values)

    def is_reachable(self, idx: int) -> bool:
        return self.values[idx] != UNREACHABLE

    def reachable_indices(self) -> List[int]:
        return [idx for idx, d in enumerate(self.values) if d != UNREACHABLE]


def furthest_reachable(field: DistanceField, candidates: Iterable[int]) -> Optional[int]:
    """Candidate with the largest finite distance; first in iteration order on ties."""
    best: Optional[int] = None
    best_d = -1.0
    for idx in candidates:
        d = field[idx]
        if d == UNREACHABLE:
            continue
        if d > best_d:
            best_d = d
            best = idx
    return best


@dataclass
class NavigationPath:
    destination: int
    success: bool = False
    steps: List[int] = field(default_factory=list)


def a_star_search(game_map: Map, start: int, end: int, max_steps: int = 65536) -> NavigationPath:
    """A* over the map graph with Euclidean distance as the heuristic.

    steps includes start and end when a path is found. max_steps bounds the
    number of node expansions.
    """
    result = NavigationPath(destination=end)
    if start == end:
        result.success = True
        result.steps = [start]
        return result

    open_heap: List[tuple[float, int, int]] = []
    counter = 0
    heapq.heappush(open_heap, (game_map.get_pathing_distance(start, end), counter, start))
    g_score: Dict[int, float] = {start: 0.0}
    parent: Dict[int, int] = {}
    closed: set[int] = set()
    expansions = 0

    while open_heap and expansions < max_steps:
        _f, _c, idx = heapq.heappop(open_heap)
        if idx in closed:
            continue
        if idx == end:
            path = [idx]
            while idx in parent:
                idx = parent[idx]
                path.append(idx)
            path.reverse()
            result.success = True
            result.steps = path
            return result
        closed.add(idx)
        expansions += 1
        for nidx, cost in game_map.get_available_exits(idx):
            if nidx in closed:
                continue
            g = g_score[idx] + cost
            if g < g_score.get(nidx, UNREACHABLE):
                g_score[nidx] = g
                parent[nidx] = idx
                counter += 1
                heapq.heappush(open_heap, (g + game_map.get_pathing_distance(nidx, end), counter, nidx))

    logger.debug("a_star_search: no path from %d to %d after %d expansions", start, end, expansions)
    return result
