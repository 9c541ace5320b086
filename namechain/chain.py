#!/usr/bin/env python3
"""
Markov Chain Engine
===================
Fixed-order Markov chain over arbitrary hashable symbols.

The chain maps a context (any hashable value, typically a string of the
last ``order`` characters) to the counts of the symbols observed right after
it. Contexts are opaque keys: the chain does not know the order, the driver
does, by how it slices training data.

Training is cheap: ``update`` increments one counter and invalidates the
context's cached sampler. Generation rebuilds a stale sampler once, then
reuses it for every draw until the next ``update`` on that context.

Usage:
    chain = MarkovChain(rng=random.Random(42))
    chain.update("^ab", "c")
    chain.update("^ab", "d")
    chain.generate("^ab")   # 'c' or 'd'
"""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Generic, Hashable, Iterator, Optional, Tuple, TypeVar

from .errors import NotFoundError
from .sampler import WeightedSampler
from .settings import get_setting

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


@lru_cache(maxsize=1)
def default_rng() -> random.Random:
    """
    Process-wide random source, created and seeded once per process.

    The seed comes from ``generation.seed``; when unset the generator is
    seeded from OS entropy.
    """
    seed = get_setting("generation.seed")
    logger.debug(f"Seeding default random source (seed={seed!r})")
    return random.Random(seed)


@dataclass
class Target(Generic[T]):
    """Successor counts for one context plus its cached sampler."""
    counts: Dict[T, int] = field(default_factory=dict)
    sampler: Optional[WeightedSampler] = None   # None = stale

    @property
    def dirty(self) -> bool:
        return self.sampler is None

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def add(self, successor: T) -> None:
        self.counts[successor] = self.counts.get(successor, 0) + 1
        self.sampler = None

    def fresh_sampler(self) -> WeightedSampler:
        if self.sampler is None:
            self.sampler = WeightedSampler(self.counts)
        return self.sampler


class MarkovChain(Generic[T]):
    """
    Transition statistics keyed by context.

    Args:
        rng: Random source for ``generate``; defaults to ``default_rng()``

    All mutation happens under one chain-wide lock, so concurrent ``update``
    calls never interleave inside a single context's counts.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else default_rng()
        self._targets: Dict[T, Target[T]] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, context: object) -> bool:
        return context in self._targets

    def __repr__(self) -> str:
        return f"MarkovChain(contexts={len(self._targets)})"

    def update(self, previous: T, next: T) -> None:
        """Record one observation of ``next`` following ``previous``."""
        with self._lock:
            target = self._targets.get(previous)
            if target is None:
                target = self._targets[previous] = Target()
            target.add(next)

    def generate(self, context: T, rng: Optional[random.Random] = None) -> T:
        """
        Draw a successor of ``context``.

        Args:
            context: A context previously passed to ``update``
            rng: Random source for this draw (defaults to the chain's)

        Raises:
            NotFoundError: If ``context`` was never observed
        """
        with self._lock:
            target = self._targets.get(context)
            if target is None:
                raise NotFoundError(context)
            if target.dirty:
                logger.debug(f"Rebuilding sampler for {context!r} ({len(target.counts)} successors)")
            sampler = target.fresh_sampler()
        return sampler.sample(rng if rng is not None else self.rng)

    def target(self, context: T) -> Target[T]:
        """Return the live Target for ``context``."""
        try:
            return self._targets[context]
        except KeyError:
            raise NotFoundError(context) from None

    def counts(self, context: T) -> Dict[T, int]:
        """Copy of the successor counts for ``context``."""
        with self._lock:
            return dict(self.target(context).counts)

    def contexts(self) -> list:
        with self._lock:
            return list(self._targets)

    def items(self) -> Iterator[Tuple[T, T, int]]:
        """Yield ``(context, successor, count)`` triples."""
        with self._lock:
            snapshot = [(ctx, dict(t.counts)) for ctx, t in self._targets.items()]
        for context, counts in snapshot:
            for successor, count in counts.items():
                yield context, successor, count

    def transition_count(self) -> int:
        """Number of distinct (context, successor) pairs."""
        with self._lock:
            return sum(len(t.counts) for t in self._targets.values())

    def dump(self) -> str:
        """Debug listing: each context followed by ``-- successor (count)`` lines."""
        lines = []
        last = object()
        for context, successor, count in self.items():
            if context != last:
                lines.append(str(context))
                last = context
            lines.append(f"-- {successor} ({count})")
        return "\n".join(lines)


__all__ = ["MarkovChain", "Target", "default_rng"]
