"""
Tests for WeightedSampler
=========================
Construction invariants, upper-bound lookup, and sampling distribution
of namechain/sampler.py.
"""

import pytest
import random
import sys
from collections import Counter
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from namechain.sampler import WeightedSampler
from namechain.errors import EmptyDistributionError, ChainError


class FixedDraw:
    """Random source stub that always draws the same integer."""

    def __init__(self, value):
        self.value = value
        self.calls = []

    def randrange(self, stop):
        self.calls.append(stop)
        return self.value


class TestConstruction:
    """Tests for building a sampler from counts."""

    def test_cumulative_sums(self):
        """Running sums follow the mapping's iteration order."""
        sampler = WeightedSampler({'a': 3, 'b': 1, 'c': 2})
        assert sampler.cumulative == (3, 4, 6)
        assert sampler.outcomes == ('a', 'b', 'c')
        assert sampler.total == 6

    def test_invariants(self):
        """Parallel sequences, strictly ascending, last equals total."""
        counts = {chr(97 + i): i + 1 for i in range(20)}
        sampler = WeightedSampler(counts)
        assert len(sampler.cumulative) == len(sampler.outcomes) == len(sampler)
        assert all(a < b for a, b in zip(sampler.cumulative, sampler.cumulative[1:]))
        assert sampler.cumulative[-1] == sampler.total == sum(counts.values())

    def test_empty_counts_raise(self):
        """An empty mapping is an explicit error."""
        with pytest.raises(EmptyDistributionError):
            WeightedSampler({})

    def test_empty_distribution_is_chain_error(self):
        """EmptyDistributionError belongs to the engine's error family."""
        with pytest.raises(ChainError):
            WeightedSampler({})

    def test_all_zero_counts_raise(self):
        """Zero mass is treated like an empty mapping."""
        with pytest.raises(EmptyDistributionError):
            WeightedSampler({'a': 0, 'b': 0})

    def test_zero_counts_skipped(self):
        """Zero-count outcomes are never drawable."""
        sampler = WeightedSampler({'a': 0, 'b': 2})
        assert sampler.outcomes == ('b',)
        assert sampler.cumulative == (2,)

    def test_negative_count_raises(self):
        with pytest.raises(ValueError):
            WeightedSampler({'a': 2, 'b': -1})

    def test_rebuild_is_deterministic(self):
        """Same counts always give the same arrays."""
        counts = {'x': 5, 'y': 1, 'z': 9}
        first = WeightedSampler(counts)
        second = WeightedSampler(counts)
        assert first.cumulative == second.cumulative
        assert first.outcomes == second.outcomes

    def test_non_string_symbols(self):
        """Symbols can be any hashable value."""
        sampler = WeightedSampler({(1, 2): 1, 7: 3, None: 1})
        assert sampler.outcomes == ((1, 2), 7, None)


class TestLookup:
    """Tests for the draw-to-outcome mapping."""

    def test_upper_bound_semantics(self):
        """Draws 0..2 map to 'a', draw 3 maps to 'b'."""
        sampler = WeightedSampler({'a': 3, 'b': 1})
        assert [sampler.index_for(r) for r in range(4)] == [0, 0, 0, 1]

    def test_last_draw_hits_last_outcome(self):
        """r == total - 1 resolves to the final bucket."""
        sampler = WeightedSampler({'a': 1, 'b': 1, 'c': 5})
        assert sampler.index_for(sampler.total - 1) == 2

    def test_first_draw_hits_first_outcome(self):
        sampler = WeightedSampler({'a': 1, 'b': 1})
        assert sampler.index_for(0) == 0

    def test_out_of_range_draw(self):
        sampler = WeightedSampler({'a': 1})
        with pytest.raises(ValueError):
            sampler.index_for(1)
        with pytest.raises(ValueError):
            sampler.index_for(-1)

    def test_sample_uses_total_as_range(self):
        """sample() draws from [0, total) of the supplied source."""
        sampler = WeightedSampler({'a': 3, 'b': 1})
        rng = FixedDraw(3)
        assert sampler.sample(rng) == 'b'
        assert rng.calls == [4]

    def test_every_bucket_reachable(self):
        sampler = WeightedSampler({'a': 2, 'b': 3, 'c': 1})
        drawn = [sampler.sample(FixedDraw(r)) for r in range(sampler.total)]
        assert drawn == ['a', 'a', 'b', 'b', 'b', 'c']


class TestDistribution:
    """Statistical tests with a seeded random source."""

    def test_three_to_one_convergence(self):
        """{a: 3, b: 1} over 100,000 draws stays within 2% of 3:1."""
        sampler = WeightedSampler({'a': 3, 'b': 1})
        rng = random.Random(12345)
        n = 100_000
        tally = Counter(sampler.sample(rng) for _ in range(n))
        assert set(tally) == {'a', 'b'}
        share = tally['a'] / n
        assert abs(share - 0.75) <= 0.75 * 0.02

    def test_same_state_same_draw(self):
        """Identical random state yields identical outcomes."""
        sampler = WeightedSampler({'a': 1, 'b': 1, 'c': 1, 'd': 1})
        first = [sampler.sample(random.Random(99)) for _ in range(5)]
        second = [sampler.sample(random.Random(99)) for _ in range(5)]
        assert first == second

    def test_probability(self):
        sampler = WeightedSampler({'a': 3, 'b': 1})
        assert sampler.probability('a') == pytest.approx(0.75)
        assert sampler.probability('b') == pytest.approx(0.25)
        assert sampler.probability('zz') == 0.0
