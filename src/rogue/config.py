from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

ALGORITHMS = ("random", "rooms", "bsp", "cellular", "cave")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_seed(value: str) -> Optional[int]:
    value = value.strip()
    if value == "" or value.lower() == "none":
        return None
    return int(value)


@dataclass
class GenerationSettings:
    """Knobs for one level generation run.

    - algorithm: "rooms" (alias "bsp"), "cellular" (alias "cave") or "random"
    - width/height: map size in tiles, outer ring included
    - depth: dungeon level, handed to the spawners
    - seed: RandomSource seed; None draws one from the OS
    - debug_snapshots: record the intermediate maps of every builder step
    """

    algorithm: str = "random"
    width: int = 80
    height: int = 43
    depth: int = 1
    seed: Optional[int] = None
    debug_snapshots: bool = False

    # Rooms and corridors
    max_rooms: int = 30
    room_min_size: int = 6
    room_max_size: int = 10

    # Cellular automata
    cell_floor_percent: int = 52
    cell_iterations: int = 4
    cell_sweeps_per_iteration: int = 15
    cell_start_tries: int = 250

    _ENV_MAPPING = {
        "ROGUE_ALGORITHM": ("algorithm", str),
        "ROGUE_WIDTH": ("width", int),
        "ROGUE_HEIGHT": ("height", int),
        "ROGUE_DEPTH": ("depth", int),
        "ROGUE_SEED": ("seed", _parse_seed),
        "ROGUE_DEBUG_SNAPSHOTS": ("debug_snapshots", _parse_bool),
    }

    def validate(self) -> None:
        if self.algorithm.lower() not in ALGORITHMS:
            logger.warning("Unknown algorithm %r; the factory will fall back to rooms", self.algorithm)
        if self.width < 3 or self.height < 3:
            raise ConfigError(f"Map must be at least 3x3, got {self.width}x{self.height}")
        if self.depth < 1:
            raise ConfigError(f"depth must be >= 1, got {self.depth}")
        if self.max_rooms < 0:
            raise ConfigError("max_rooms must be >= 0")
        if not 1 <= self.room_min_size < self.room_max_size:
            raise ConfigError(
                f"Need 1 <= room_min_size < room_max_size, got {self.room_min_size}/{self.room_max_size}"
            )
        if not 0 <= self.cell_floor_percent <= 100:
            raise ConfigError("cell_floor_percent must be within [0, 100]")
        if self.cell_iterations < 0 or self.cell_sweeps_per_iteration < 0:
            raise ConfigError("Cellular iteration counts must be >= 0")
        if self.cell_start_tries < 1:
            raise ConfigError("cell_start_tries must be >= 1")

    # ------------------------ Loaders ------------------------
    @classmethod
    def env_overrides(cls, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        env = os.environ if env is None else env
        out: Dict[str, Any] = {}
        for env_key, (field_name, caster) in cls._ENV_MAPPING.items():
            if env.get(env_key, "") == "":
                continue
            try:
                out[field_name] = caster(env[env_key])
            except ValueError as exc:
                raise ConfigError(f"Invalid value for {env_key}={env[env_key]!r}: {exc}") from exc
        return out

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "GenerationSettings":
        settings = cls(**cls.env_overrides(env))
        settings.validate()
        return settings

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must hold a mapping")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def _from_dict(cls, data: dict) -> "GenerationSettings":
        # Files may group knobs under sections: rooms/cellular
        flat: Dict[str, Any] = {}
        for k, v in data.items():
            if k == "rooms" and isinstance(v, dict):
                flat.update(v)
            elif k == "cellular" and isinstance(v, dict):
                flat.update({f"cell_{ck}": cv for ck, cv in v.items()})
            else:
                flat[k] = v
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(flat) - known)
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(unknown)}")
        return cls(**flat)

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> "GenerationSettings":
        """Load settings: defaults < YAML file < environment.

        A missing file is logged and ignored.
        """
        data: dict = {}
        if path is not None:
            path = Path(path)
            if path.exists():
                data = cls._load_yaml(path)
                logger.info("Loaded generation settings from %s", path)
            else:
                logger.warning("Settings file not found: %s", path)
        merged = cls._deep_merge(data, cls.env_overrides(env))
        settings = cls._from_dict(merged)
        settings.validate()
        logger.debug("Settings merged: %s", settings)
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        logger.info("Saved generation settings to %s", path)
