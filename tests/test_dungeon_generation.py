from rogue.config import GenerationSettings
from rogue.dungeon import LevelState, generate_level
from rogue.dungeon.factory import DungeonFactory, random_builder
from rogue.dungeon.generator import CellularAutomataBuilder, RoomsAndCorridorsBuilder
from rogue.dungeon.pathfinding import DistanceField
from rogue.dungeon.tiles import TileType
from rogue.rng import RandomSource


class CountingEntitySpawner:
    def __init__(self):
        self.regions = []

    def spawn_region(self, region, depth):
        self.regions.append((len(region), depth))


class GrassTerrainSpawner:
    """Marks the first tile of every region as used."""

    def __init__(self):
        self.used = []

    def spawn_region(self, game_map, region, depth):
        if region:
            game_map.ok_to_spawn[region[0]] = False
            self.used.append(region[0])


def assert_navigable(level: LevelState):
    m = level.map
    start_idx = m.xy_idx(*level.starting_position)
    stairs_idx = m.xy_idx(*level.stairs_position)
    assert m.is_traversable(start_idx)
    assert m.tiles[stairs_idx] == TileType.DOWN_STAIRS
    assert DistanceField(m, [start_idx]).is_reachable(stairs_idx)

    # There should be a reasonable amount of floor
    frac = m.count_tiles(TileType.FLOOR) / float(m.size)
    assert 0.05 <= frac <= 0.8


def test_factory_picks_builder():
    rng = RandomSource(1)
    assert isinstance(
        DungeonFactory.build_builder(GenerationSettings(algorithm="bsp"), rng), RoomsAndCorridorsBuilder
    )
    assert isinstance(
        DungeonFactory.build_builder(GenerationSettings(algorithm="cave"), rng), CellularAutomataBuilder
    )


def test_factory_passes_settings_through():
    settings = GenerationSettings(algorithm="cellular", width=50, height=30, depth=3, cell_start_tries=99)
    builder = DungeonFactory.build_builder(settings, RandomSource(1))
    assert builder.depth == 3
    assert builder.start_tries == 99
    assert (builder._map.width, builder._map.height) == (50, 30)


def test_factory_unknown_algorithm_falls_back(caplog):
    builder = DungeonFactory.build_builder(GenerationSettings(algorithm="maze"), RandomSource(1))
    assert isinstance(builder, RoomsAndCorridorsBuilder)
    assert "falling back" in caplog.text


def test_random_choice_covers_both_builders():
    rng = RandomSource(9)
    kinds = {type(random_builder(60, 40, 1, rng)) for _ in range(40)}
    assert kinds == {RoomsAndCorridorsBuilder, CellularAutomataBuilder}
    settings = GenerationSettings(algorithm="random")
    kinds = {type(DungeonFactory.build_builder(settings, rng)) for _ in range(40)}
    assert kinds == {RoomsAndCorridorsBuilder, CellularAutomataBuilder}


def test_rooms_level_navigable():
    level = generate_level(GenerationSettings(algorithm="rooms", width=60, height=40, seed=123, max_rooms=15))
    assert level.algorithm == "rooms"
    assert_navigable(level)


def test_cellular_level_navigable():
    level = generate_level(GenerationSettings(algorithm="cellular", width=60, height=40, seed=123))
    assert level.algorithm == "cellular"
    assert_navigable(level)


def test_level_hands_regions_to_spawners():
    settings = GenerationSettings(algorithm="rooms", seed=5, depth=6)
    entities = CountingEntitySpawner()
    terrain = GrassTerrainSpawner()
    level = generate_level(settings, entity_spawner=entities, terrain_spawner=terrain)

    assert level.depth == 6
    assert len(terrain.used) == len(level.regions)
    assert len(entities.regions) == len(level.regions) - 1
    assert all(depth == 6 for _, depth in entities.regions)
    # Terrain bookkeeping survives the hand-off into the level
    assert all(not level.map.ok_to_spawn[idx] for idx in terrain.used)


def test_level_noise_maps_match_map():
    level = generate_level(GenerationSettings(seed=31))
    assert (level.noise_maps.width, level.noise_maps.height) == (level.map.width, level.map.height)
    table = level.noise_maps.to_grass_spawn_table(level.map)
    for entry in table.short + table.long:
        assert not level.map.is_edge_tile(entry.x, entry.y)
    colors = level.color_maps()
    assert colors is not None


def test_level_render_and_summary():
    level = generate_level(GenerationSettings(algorithm="rooms", width=50, height=30, seed=2))
    lines = level.render()
    assert len(lines) == 30 and all(len(line) == 50 for line in lines)
    sx, sy = level.starting_position
    assert lines[sy][sx] == "@"
    assert sum(line.count(">") for line in lines) == 1

    summary = level.summary()
    assert summary["algorithm"] == "rooms"
    assert summary["start"] == [sx, sy]
    assert summary["map"]["width"] == 50
    assert set(summary["spawn_tables"]) == {"deep_water", "shallow_water", "short_grass", "long_grass", "statues"}


def test_debug_snapshots_reach_level():
    level = generate_level(GenerationSettings(algorithm="rooms", seed=4, debug_snapshots=True))
    assert level.snapshots
    assert level.snapshots[-1].tiles == level.map.tiles
    assert generate_level(GenerationSettings(algorithm="rooms", seed=4)).snapshots == []
