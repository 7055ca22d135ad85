"""
Random event resolution.

Draws flavor records uniformly from category pools and rolls independent
Bernoulli gates (NPC knocks, expedition bonus items).

Draws and rolls use separate random streams, so a bonus-item roll never
shifts which record the next draw picks.
"""

import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class EmptyPoolError(ValueError):
    """draw() was called with an empty pool."""
    pass


class RandomEventResolver:
    """
    Uniform draws and probability rolls.

    Args:
        seed: Seeds both streams deterministically (each gets its own
            derived seed). None draws fresh OS entropy.
        draw_rng: Explicit generator for draws (overrides seed)
        roll_rng: Explicit generator for rolls (overrides seed)
    """

    def __init__(
        self,
        seed: int | str | None = None,
        draw_rng: random.Random | None = None,
        roll_rng: random.Random | None = None,
    ):
        if seed is None:
            self._draw_rng = draw_rng or random.Random()
            self._roll_rng = roll_rng or random.Random()
        else:
            self._draw_rng = draw_rng or random.Random(f"{seed}:draw")
            self._roll_rng = roll_rng or random.Random(f"{seed}:roll")
        self.seed = seed

    def draw(self, pool: Sequence[T]) -> T:
        """
        Pick one element with probability 1/len(pool).

        No memory of earlier draws; repeats are allowed.

        Raises:
            EmptyPoolError: If the pool is empty. Callers substitute a
                fallback message instead of drawing from nothing.
        """
        if not pool:
            raise EmptyPoolError("Cannot draw from an empty pool")
        return pool[self._draw_rng.randrange(len(pool))]

    def draw_or(self, pool: Sequence[T], fallback: T) -> T:
        """draw(), or `fallback` when the pool is empty."""
        if not pool:
            return fallback
        return self.draw(pool)

    def chance(self, probability: float) -> bool:
        """Bernoulli roll. Probabilities outside [0, 1] are clamped."""
        probability = max(0.0, min(1.0, probability))
        if probability <= 0.0:
            return False
        if probability >= 1.0:
            return True
        return self._roll_rng.random() < probability
