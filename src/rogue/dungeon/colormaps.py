from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from .map import Map
    from .noisemaps import NoiseMaps

RGB = Tuple[int, int, int]

WHITE: RGB = (255, 255, 255)
BLUE: RGB = (0, 0, 255)
MEDIUM_BLUE: RGB = (0, 0, 205)
LIGHT_BLUE: RGB = (173, 216, 230)
SANDY_BROWN: RGB = (244, 164, 96)
DARK_GREEN: RGB = (0, 100, 0)
GREEN: RGB = (0, 255, 0)
RED: RGB = (255, 0, 0)
ORANGE: RGB = (255, 165, 0)
YELLOW: RGB = (255, 255, 0)
SILVER: RGB = (192, 192, 192)
LIGHT_GRAY: RGB = (211, 211, 211)
DARK_GRAY: RGB = (169, 169, 169)
RED4: RGB = (139, 0, 0)
HOT_PINK: RGB = (255, 105, 180)


def interpolate_colors(f: float, low: RGB, high: RGB) -> RGB:
    """Linear ramp between two colours; f is clamped to [0, 1]."""
    f = min(1.0, max(0.0, float(f)))
    return tuple(  # type: ignore[return-value]
        min(255, int((1.0 - f) * lo) + int(f * hi)) for lo, hi in zip(low, high)
    )


def grass_green_from_noise(f: float) -> RGB:
    return interpolate_colors(f, DARK_GREEN, GREEN)


def water_fg_from_noise(f: float) -> RGB:
    return interpolate_colors(f, WHITE, BLUE)


def water_bg_from_noise(f: float) -> RGB:
    return interpolate_colors(f, BLUE, MEDIUM_BLUE)


def shallow_water_bg_from_noise(f: float) -> RGB:
    return interpolate_colors(f, SANDY_BROWN, BLUE)


def fire_fg_from_noise(f: float) -> RGB:
    return interpolate_colors(f, RED, YELLOW)


def fire_bg_from_noise(f: float) -> RGB:
    return interpolate_colors(f, ORANGE, RED)


def chill_fg_from_noise(f: float) -> RGB:
    return interpolate_colors(f, SILVER, LIGHT_GRAY)


def chill_bg_from_noise(f: float) -> RGB:
    return interpolate_colors(f, WHITE, LIGHT_BLUE)


def steam_fg_from_noise(f: float) -> RGB:
    return interpolate_colors(f, WHITE, DARK_GRAY)


def blood_fg_from_noise(f: float) -> RGB:
    return interpolate_colors(f, RED, DARK_GREEN)


def blood_bg_from_noise(f: float) -> RGB:
    return interpolate_colors(f, RED4, BLUE)


class FgColorMap(Enum):
    NONE = "none"
    SHORT_GRASS = "short_grass_fg"
    LONG_GRASS = "long_grass_fg"
    SHALLOW_WATER = "shallow_water_fg"
    DEEP_WATER = "deep_water_fg"
    FIRE = "fire_fg"
    CHILL = "chill_fg"
    STEAM = "steam_fg"
    BLOOD = "blood_fg"


class BgColorMap(Enum):
    NONE = "none"
    SHALLOW_WATER = "shallow_water_bg"
    DEEP_WATER = "deep_water_bg"
    FIRE = "fire_bg"
    CHILL = "chill_bg"
    BLOOD = "blood_bg"


_RAMPS: Dict[str, Callable[[float], RGB]] = {
    "short_grass_fg": grass_green_from_noise,
    "long_grass_fg": grass_green_from_noise,
    "shallow_water_fg": water_fg_from_noise,
    "shallow_water_bg": shallow_water_bg_from_noise,
    "deep_water_fg": water_fg_from_noise,
    "deep_water_bg": water_bg_from_noise,
    "fire_fg": fire_fg_from_noise,
    "fire_bg": fire_bg_from_noise,
    "chill_fg": chill_fg_from_noise,
    "chill_bg": chill_bg_from_noise,
    "steam_fg": steam_fg_from_noise,
    "blood_fg": blood_fg_from_noise,
    "blood_bg": blood_bg_from_noise,
}


class ColorMaps:
    """Per-tile colours for immobile terrain, looked up by renderers.

    Every ramp is resolved once from the noise maps of the level, so a tile
    keeps its colour when terrain on it changes (e.g. water freezing).
    """

    def __init__(self, colors: Dict[str, List[RGB]]) -> None:
        self._colors = colors

    @classmethod
    def from_noise_maps(cls, noise_maps: "NoiseMaps", game_map: "Map") -> "ColorMaps":
        colors: Dict[str, List[RGB]] = {}
        for ramp, to_rgb in _RAMPS.items():
            colors[ramp] = [to_rgb(v) for v in noise_maps.color_values(ramp, game_map)]
        return cls(colors)

    def get_fg_color(self, idx: int, cmap: FgColorMap) -> RGB:
        if cmap is FgColorMap.NONE:
            return HOT_PINK
        return self._colors[cmap.value][idx]

    def get_bg_color(self, idx: int, cmap: BgColorMap) -> RGB:
        if cmap is BgColorMap.NONE:
            return HOT_PINK
        return self._colors[cmap.value][idx]
