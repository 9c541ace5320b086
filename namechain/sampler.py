#!/usr/bin/env python3
"""
Weighted Sampler
================
Discrete weighted-random choice over the successors of one context.

The sampler is built from a snapshot of successor counts. Counts are
accumulated into a strictly increasing list of running sums, so a draw is a
single random integer in ``[0, total)`` followed by a binary search for the
first running sum strictly greater than it.

Example: counts ``{'a': 3, 'b': 1}`` give ``cumulative == [3, 4]``.
Draws 0, 1, 2 select 'a'; draw 3 selects 'b'.
"""

from __future__ import annotations

import random
from bisect import bisect_right
from typing import Generic, Hashable, Mapping, TypeVar

from .errors import EmptyDistributionError

T = TypeVar("T", bound=Hashable)


class WeightedSampler(Generic[T]):
    """Immutable weighted sampler over a fixed set of outcomes."""

    __slots__ = ("total", "cumulative", "outcomes")

    def __init__(self, counts: Mapping[T, int]):
        """
        Build the sampler from successor counts.

        Outcomes keep the iteration order of ``counts``, which makes ties
        and the draw-to-outcome mapping reproducible for a given mapping.

        Raises:
            EmptyDistributionError: If ``counts`` holds no positive mass
            ValueError: If any count is negative
        """
        total = 0
        cumulative = []
        outcomes = []
        for outcome, count in counts.items():
            if count < 0:
                raise ValueError(f"Negative count for {outcome!r}: {count}")
            if count == 0:
                continue
            total += count
            cumulative.append(total)
            outcomes.append(outcome)

        if total <= 0:
            raise EmptyDistributionError("Cannot sample from an empty distribution")

        self.total = total
        self.cumulative = tuple(cumulative)
        self.outcomes = tuple(outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    def __repr__(self) -> str:
        return f"WeightedSampler(total={self.total}, outcomes={len(self.outcomes)})"

    def index_for(self, r: int) -> int:
        """Map a draw in ``[0, total)`` to an outcome index (upper bound)."""
        if not 0 <= r < self.total:
            raise ValueError(f"Draw {r} outside [0, {self.total})")
        return bisect_right(self.cumulative, r)

    def sample(self, rng: random.Random) -> T:
        """Draw one outcome with probability proportional to its count."""
        return self.outcomes[self.index_for(rng.randrange(self.total))]

    def probability(self, outcome: T) -> float:
        """Probability of drawing ``outcome`` (0.0 if it is not an outcome)."""
        try:
            i = self.outcomes.index(outcome)
        except ValueError:
            return 0.0
        lower = self.cumulative[i - 1] if i else 0
        return (self.cumulative[i] - lower) / self.total


__all__ = ["WeightedSampler"]
