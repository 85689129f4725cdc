import math

import pytest

from rogue.dungeon.connectivity import (
    enumerate_connected_components,
    fill_all_but_largest_component,
    get_connected_component,
)
from rogue.dungeon.pathfinding import (
    UNREACHABLE,
    DistanceField,
    a_star_search,
    furthest_reachable,
)
from rogue.dungeon.tiles import TileType


CORRIDOR = [
    "#######",
    "#.....#",
    "#######",
]

TWO_CAVES = [
    "##########",
    "#...##..##",
    "#...##..##",
    "#...######",
    "##########",
]


def test_distance_field_along_corridor(map_from_rows):
    m = map_from_rows(CORRIDOR)
    field = DistanceField(m, [m.xy_idx(1, 1)])
    assert [field[m.xy_idx(x, 1)] for x in range(1, 6)] == [0.0, 1.0, 2.0, 3.0, 4.0]
    assert field[m.xy_idx(0, 0)] == UNREACHABLE
    assert len(field) == m.size


def test_distance_field_uses_diagonals(map_from_rows):
    m = map_from_rows([
        "#####",
        "#...#",
        "#...#",
        "#...#",
        "#####",
    ])
    field = DistanceField(m, [m.xy_idx(1, 1)])
    assert field[m.xy_idx(3, 3)] == pytest.approx(2 * math.sqrt(2))
    assert field[m.xy_idx(3, 2)] == pytest.approx(1 + math.sqrt(2))


def test_distance_field_max_depth(map_from_rows):
    m = map_from_rows(CORRIDOR)
    field = DistanceField(m, [m.xy_idx(1, 1)], max_depth=2.0)
    assert field.is_reachable(m.xy_idx(3, 1))
    assert not field.is_reachable(m.xy_idx(4, 1))


def test_distance_field_multiple_sources(map_from_rows):
    m = map_from_rows(CORRIDOR)
    field = DistanceField(m, [m.xy_idx(1, 1), m.xy_idx(5, 1)])
    assert field[m.xy_idx(3, 1)] == 2.0
    assert field[m.xy_idx(5, 1)] == 0.0


def test_furthest_reachable_first_wins_ties(map_from_rows):
    m = map_from_rows(CORRIDOR)
    field = DistanceField(m, [m.xy_idx(3, 1)])
    candidates = list(m.iter_indices(TileType.FLOOR))
    assert furthest_reachable(field, candidates) == m.xy_idx(1, 1)
    assert furthest_reachable(field, [m.xy_idx(0, 0)]) is None


def test_a_star_finds_shortest_path(map_from_rows):
    m = map_from_rows([
        "#######",
        "#.....#",
        "#.###.#",
        "#.....#",
        "#######",
    ])
    start, end = m.xy_idx(1, 1), m.xy_idx(5, 3)
    path = a_star_search(m, start, end)
    assert path.success
    assert path.steps[0] == start and path.steps[-1] == end
    for a, b in zip(path.steps, path.steps[1:]):
        assert b in dict(m.get_available_exits(a))
    # Same cost as the distance field says
    cost = sum(dict(m.get_available_exits(a))[b] for a, b in zip(path.steps, path.steps[1:]))
    assert cost == pytest.approx(DistanceField(m, [start])[end])


def test_a_star_reports_failure(map_from_rows):
    m = map_from_rows(TWO_CAVES)
    path = a_star_search(m, m.xy_idx(1, 1), m.xy_idx(6, 1))
    assert not path.success
    assert path.steps == []
    assert path.destination == m.xy_idx(6, 1)


def test_a_star_trivial_path(map_from_rows):
    m = map_from_rows(CORRIDOR)
    path = a_star_search(m, 8, 8)
    assert path.success and path.steps == [8]


def test_enumerate_components(map_from_rows):
    m = map_from_rows(TWO_CAVES)
    components = enumerate_connected_components(m)
    assert [c.size for c in components] == [9, 4]
    assert components[0].base_index == m.xy_idx(1, 1)
    assert components[1].base_index == m.xy_idx(6, 1)
    assert set(get_connected_component(m, m.xy_idx(7, 2)).members) == set(components[1].members)


def test_fill_all_but_largest(map_from_rows):
    m = map_from_rows(TWO_CAVES)
    floor_before = m.count_tiles(TileType.FLOOR)
    kept = fill_all_but_largest_component(m, enumerate_connected_components(m))
    m.synchronize_blocked()
    assert kept is not None and kept.size == 9
    assert m.count_tiles(TileType.FLOOR) == 9 <= floor_before
    assert len(enumerate_connected_components(m)) == 1
    assert m.tiles[m.xy_idx(6, 1)] == TileType.WALL


def test_fill_tie_keeps_first(map_from_rows):
    m = map_from_rows([
        "#######",
        "#..#..#",
        "#######",
    ])
    kept = fill_all_but_largest_component(m, enumerate_connected_components(m))
    assert kept.base_index == m.xy_idx(1, 1)
    assert m.tiles[m.xy_idx(4, 1)] == TileType.WALL
    assert fill_all_but_largest_component(m, []) is None


def test_components_cross_stairs(map_from_rows):
    m = map_from_rows([
        "#######",
        "#..>..#",
        "#######",
    ])
    components = enumerate_connected_components(m)
    assert len(components) == 1
    assert m.xy_idx(3, 1) not in components[0].members
