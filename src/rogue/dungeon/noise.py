from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)

# ----------------------------- Hash Utilities ---------------------------- #

_PRIME_X = 501125321
_PRIME_Y = 1136930381
_HASH_MUL = np.uint32(0x27D4EB2D)
_INV_INT32 = 1.0 / 2147483648.0


def _prime(coord: np.ndarray, prime: int) -> np.ndarray:
    """Multiply integer lattice coordinates by a prime, wrapped to uint32."""
    return ((coord.astype(np.int64) * prime) & 0xFFFFFFFF).astype(np.uint32)


def _hash(seed: int, xp: np.ndarray, yp: np.ndarray) -> np.ndarray:
    h = np.uint32(seed & 0xFFFFFFFF) ^ xp ^ yp
    return h * _HASH_MUL


def _val_coord(seed: int, xp: np.ndarray, yp: np.ndarray) -> np.ndarray:
    """Hash a lattice point to a float in [-1, 1)."""
    h = np.uint32(seed & 0xFFFFFFFF) ^ xp ^ yp
    h = h * h * _HASH_MUL
    h = h ^ (h << np.uint32(19))
    return h.view(np.int32) * _INV_INT32


def _quintic(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


# ----------------------------- Noise Types ------------------------------- #

class NoiseType(Enum):
    VALUE = "value"
    VALUE_FRACTAL = "value_fractal"
    CELLULAR = "cellular"
    WHITE = "white"


class CellularDistance(Enum):
    EUCLIDEAN = "euclidean"
    MANHATTAN = "manhattan"
    NATURAL = "natural"


class CellularReturn(Enum):
    CELL_VALUE = "cell_value"
    DISTANCE = "distance"


@dataclass
class NoiseSampler:
    """
    Seeded 2D procedural noise, evaluated over whole numpy coordinate grids.

    - VALUE: lattice values with quintic interpolation, varies smoothly.
    - VALUE_FRACTAL: fractal brownian motion of VALUE octaves, normalised.
    - CELLULAR: jittered feature points per cell (Worley), returns the value
      of the closest cell or the distance to it.
    - WHITE: independent per coordinate, hashes the float32 bits of the
      scaled coordinate.

    All types return values in [-1, 1] (DISTANCE returns may exceed it).
    """

    seed: int
    noise_type: NoiseType = NoiseType.VALUE
    frequency: float = 0.01
    octaves: int = 3
    lacunarity: float = 2.0
    gain: float = 0.5
    cellular_distance: CellularDistance = CellularDistance.EUCLIDEAN
    cellular_return: CellularReturn = CellularReturn.CELL_VALUE
    cellular_jitter: float = 0.45

    def sample(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        xs = np.asarray(xs, dtype=np.float64) * self.frequency
        ys = np.asarray(ys, dtype=np.float64) * self.frequency
        if self.noise_type is NoiseType.VALUE:
            return self._value(self.seed, xs, ys)
        if self.noise_type is NoiseType.VALUE_FRACTAL:
            return self._value_fractal(xs, ys)
        if self.noise_type is NoiseType.CELLULAR:
            return self._cellular(xs, ys)
        if self.noise_type is NoiseType.WHITE:
            return self._white(xs, ys)
        raise ValueError(f"Unsupported noise type: {self.noise_type!r}")

    def sample_grid(self, width: int, height: int) -> np.ndarray:
        """Noise at every integer tile coordinate, shape (height, width)."""
        xs, ys = _grid_coords(width, height)
        return self.sample(xs, ys)

    def sample_flat(self, width: int, height: int) -> np.ndarray:
        """Row-major flattening of sample_grid, indexed like Map.tiles."""
        return self.sample_grid(width, height).ravel()

    # ---- Implementations -------------------------------------------------
    @staticmethod
    def _value(seed: int, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        x0 = np.floor(xs)
        y0 = np.floor(ys)
        xd = _quintic(xs - x0)
        yd = _quintic(ys - y0)
        x0p = _prime(x0, _PRIME_X)
        y0p = _prime(y0, _PRIME_Y)
        x1p = _prime(x0 + 1, _PRIME_X)
        y1p = _prime(y0 + 1, _PRIME_Y)
        xf0 = _lerp(_val_coord(seed, x0p, y0p), _val_coord(seed, x1p, y0p), xd)
        xf1 = _lerp(_val_coord(seed, x0p, y1p), _val_coord(seed, x1p, y1p), xd)
        return _lerp(xf0, xf1, yd)

    def _value_fractal(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        total = np.zeros_like(xs)
        amp = 1.0
        amp_sum = 0.0
        seed = self.seed
        for _ in range(max(1, self.octaves)):
            total += self._value(seed, xs, ys) * amp
            amp_sum += amp
            seed += 1
            xs = xs * self.lacunarity
            ys = ys * self.lacunarity
            amp *= self.gain
        return total / amp_sum

    def _cellular(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        xr = np.rint(xs)
        yr = np.rint(ys)
        best = np.full(xs.shape, np.inf)
        closest = np.zeros(xs.shape, dtype=np.uint32)
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                cx = xr + dx
                cy = yr + dy
                h = _hash(self.seed, _prime(cx, _PRIME_X), _prime(cy, _PRIME_Y))
                jx = ((h & np.uint32(0xFFFF)) / 65535.0 - 0.5) * 2.0 * self.cellular_jitter
                jy = (((h >> np.uint32(16)) & np.uint32(0xFFFF)) / 65535.0 - 0.5) * 2.0 * self.cellular_jitter
                vx = cx + jx - xs
                vy = cy + jy - ys
                d = self._distance(vx, vy)
                nearer = d < best
                best = np.where(nearer, d, best)
                closest = np.where(nearer, h, closest)
        if self.cellular_return is CellularReturn.CELL_VALUE:
            return closest.view(np.int32) * _INV_INT32
        if self.cellular_distance is CellularDistance.EUCLIDEAN:
            best = np.sqrt(best)
        return best - 1.0

    def _distance(self, vx: np.ndarray, vy: np.ndarray) -> np.ndarray:
        if self.cellular_distance is CellularDistance.EUCLIDEAN:
            return vx * vx + vy * vy
        if self.cellular_distance is CellularDistance.MANHATTAN:
            return np.abs(vx) + np.abs(vy)
        return np.abs(vx) + np.abs(vy) + (vx * vx + vy * vy)

    def _white(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        xi = np.ascontiguousarray(xs, dtype=np.float32).view(np.uint32)
        yi = np.ascontiguousarray(ys, dtype=np.float32).view(np.uint32)
        xi = xi ^ (xi >> np.uint32(16))
        yi = yi ^ (yi >> np.uint32(16))
        return _val_coord(self.seed, xi * np.uint32(_PRIME_X), yi * np.uint32(_PRIME_Y))


def _grid_coords(width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    return np.meshgrid(
        np.arange(width, dtype=np.float64),
        np.arange(height, dtype=np.float64),
    )


__all__ = [
    "NoiseType",
    "CellularDistance",
    "CellularReturn",
    "NoiseSampler",
]
