"""Procedural dungeon level generation.

Builders carve a Map (rooms and corridors, or cellular caverns), noise maps
decorate it, and generate_level() ties both into a LevelState.
"""
from importlib.metadata import version, PackageNotFoundError

__all__ = ["__version__"]

try:
    __version__ = version("rogue-mapgen")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"
