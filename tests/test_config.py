import pytest
import yaml

from rogue.config import GenerationSettings
from rogue.errors import ConfigError


def test_defaults_validate():
    settings = GenerationSettings()
    settings.validate()
    assert (settings.width, settings.height) == (80, 43)
    assert settings.algorithm == "random"
    assert settings.seed is None


def test_from_env(monkeypatch):
    monkeypatch.setenv("ROGUE_ALGORITHM", "cellular")
    monkeypatch.setenv("ROGUE_WIDTH", "50")
    monkeypatch.setenv("ROGUE_HEIGHT", "35")
    monkeypatch.setenv("ROGUE_DEPTH", "4")
    monkeypatch.setenv("ROGUE_SEED", "042")
    monkeypatch.setenv("ROGUE_DEBUG_SNAPSHOTS", "yes")
    settings = GenerationSettings.from_env()
    assert settings.algorithm == "cellular"
    assert (settings.width, settings.height, settings.depth) == (50, 35, 4)
    assert settings.seed == 42
    assert settings.debug_snapshots is True


def test_from_env_ignores_empty_and_rejects_garbage(monkeypatch):
    monkeypatch.setenv("ROGUE_WIDTH", "")
    assert GenerationSettings.from_env().width == 80
    monkeypatch.setenv("ROGUE_WIDTH", "wide")
    with pytest.raises(ConfigError):
        GenerationSettings.from_env()


def test_seed_is_decimal():
    assert GenerationSettings.from_env({"ROGUE_SEED": "010"}).seed == 10
    with pytest.raises(ConfigError):
        GenerationSettings.from_env({"ROGUE_SEED": "0x2A"})


def test_explicit_env_mapping():
    settings = GenerationSettings.from_env({"ROGUE_SEED": "none", "ROGUE_DEPTH": "2"})
    assert settings.seed is None
    assert settings.depth == 2


@pytest.mark.parametrize(
    "overrides",
    [
        {"width": 2},
        {"depth": 0},
        {"room_min_size": 10, "room_max_size": 6},
        {"cell_floor_percent": 101},
        {"cell_start_tries": 0},
    ],
)
def test_validate_rejects(overrides):
    with pytest.raises(ConfigError):
        GenerationSettings(**overrides).validate()
    assert issubclass(ConfigError, ValueError)


def test_yaml_round_trip(tmp_path):
    path = tmp_path / "nested" / "mapgen.yaml"
    saved = GenerationSettings(algorithm="rooms", width=64, height=40, seed=7, max_rooms=12)
    saved.save(path)
    assert path.exists()
    loaded = GenerationSettings.load(path, env={})
    assert loaded == saved


def test_yaml_sections_and_env_precedence(tmp_path):
    path = tmp_path / "mapgen.yaml"
    path.write_text(
        yaml.safe_dump({
            "algorithm": "cave",
            "width": 70,
            "rooms": {"max_rooms": 5},
            "cellular": {"iterations": 2, "floor_percent": 55},
        }),
        encoding="utf-8",
    )
    settings = GenerationSettings.load(path, env={"ROGUE_WIDTH": "90"})
    assert settings.algorithm == "cave"
    assert settings.width == 90
    assert settings.max_rooms == 5
    assert settings.cell_iterations == 2
    assert settings.cell_floor_percent == 55


def test_yaml_unknown_key_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("algorithm: rooms\ncolour: blue\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        GenerationSettings.load(path, env={})


def test_yaml_must_be_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        GenerationSettings.load(path, env={})


def test_missing_file_uses_defaults(tmp_path, caplog):
    settings = GenerationSettings.load(tmp_path / "absent.yaml", env={})
    assert settings == GenerationSettings()
    assert "not found" in caplog.text
