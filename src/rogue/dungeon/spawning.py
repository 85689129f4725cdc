from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from .map import Map


class EntitySpawner(Protocol):
    """Places monsters and items inside a region of tile indices.

    Implemented by the game's entity layer; generation never creates
    entities itself.
    """

    def spawn_region(self, region: Sequence[int], depth: int) -> None:
        """Spawn entities in region for a level of the given depth."""


class TerrainSpawner(Protocol):
    """Places terrain features (water, grass, statues) inside a region."""

    def spawn_region(self, game_map: "Map", region: Sequence[int], depth: int) -> None:
        """Spawn terrain in region. May clear game_map.ok_to_spawn on used tiles."""
