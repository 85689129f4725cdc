from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class RandomSource:
    """
    A thin wrapper around random.Random that is threaded through every
    generation step, so a single seed determines the whole level:
    - room placement and corridor orientation
    - cellular automaton initialisation
    - geometry choices and noise sampler seeds
    """

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.seed is not None:
            self._rng = random.Random(self.seed)
            logger.debug("Initialized RandomSource with deterministic seed=%s", self.seed)
        else:
            # Non-deterministic seed using system random state
            self._rng = random.Random()
            logger.debug("Initialized RandomSource with non-deterministic seed")

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def roll_dice(self, n: int, die_type: int) -> int:
        """Sum of ``n`` rolls of a die numbered 1..die_type."""
        if die_type < 1:
            raise ValueError(f"roll_dice requires die_type >= 1, got {die_type}")
        return sum(self._rng.randint(1, die_type) for _ in range(n))

    def range(self, lo: int, hi: int) -> int:
        """Uniform integer in the half-open interval [lo, hi)."""
        if hi <= lo:
            raise ValueError(f"range requires hi > lo, got [{lo}, {hi})")
        return self._rng.randrange(lo, hi)

    def next_seed(self) -> int:
        """Draw a 32-bit seed for a downstream sampler."""
        return self._rng.getrandbits(32)

    def weighted_choice(self, weights: Dict[Any, float]) -> Any:
        """
        Select a key from a dictionary of weights where values are non-negative numbers.
        Zero-weight keys are never selected. If all weights are zero, raises ValueError.
        """
        if not weights:
            raise ValueError("weighted_choice requires a non-empty weights mapping")

        keys: List[Any] = []
        cumulative: List[float] = []
        total = 0.0
        for k, w in weights.items():
            if w < 0:
                raise ValueError(f"Weight for {k!r} must be non-negative, got {w}")
            if w == 0:
                continue
            total += w
            keys.append(k)
            cumulative.append(total)

        if total == 0:
            raise ValueError("All weights are zero; cannot make a weighted choice")

        r = self._rng.random() * total
        for i, c in enumerate(cumulative):
            if r < c:
                return keys[i]
        # Rounding can leave r == total
        return keys[-1]

    def getstate(self) -> Sequence[Any]:
        return self._rng.getstate()

    def setstate(self, state: Sequence[Any]) -> None:
        self._rng.setstate(state)


__all__ = ["RandomSource"]
