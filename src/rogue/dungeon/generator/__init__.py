from .base import MapBuilder
from .rooms import RoomsAndCorridorsBuilder
from .cellular import CellularAutomataBuilder

__all__ = ["MapBuilder", "RoomsAndCorridorsBuilder", "CellularAutomataBuilder"]
