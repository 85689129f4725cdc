class MapGenError(Exception):
    """Base error for map generation failures."""


class NoRoomsPlacedError(MapGenError):
    """Raised when the rooms builder accepted fewer than two rooms, so start and stairs cannot be kept apart."""


class StartingPositionError(MapGenError):
    """Raised when a bounded search for an unblocked starting tile ran out of tries."""


class BuilderNotReadyError(MapGenError, RuntimeError):
    """Raised when a builder accessor is used before build_map() completed."""


class ConfigError(MapGenError, ValueError):
    """Raised when generation settings are invalid."""
