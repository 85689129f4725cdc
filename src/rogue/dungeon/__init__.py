from .tiles import Rectangle, TileType
from .map import Map, Point
from .factory import DungeonFactory
from .level import LevelState, generate_level

__all__ = [
    "Rectangle",
    "TileType",
    "Map",
    "Point",
    "DungeonFactory",
    "LevelState",
    "generate_level",
]
