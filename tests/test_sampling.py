"""Tests for weighted sampling, depth selection and catch metrics."""

import random
from collections import Counter

import pytest

from models import FishDefinition
from sampling import DepthSelector, MetricsRoller, WeightedSampler


class TestWeightedSampler:
    """Tests for WeightedSampler.pick."""

    def test_frequencies_match_weights(self, seeded_rng):
        sampler = WeightedSampler(seeded_rng)
        entries = [('a', 1), ('b', 3), ('c', 6)]
        draws = 100_000

        counts = Counter(sampler.pick(entries)[0] for _ in range(draws))

        for key, weight in entries:
            assert counts[key] / draws == pytest.approx(weight / 10, abs=0.01)

    def test_all_zero_weights_returns_none(self, seeded_rng):
        sampler = WeightedSampler(seeded_rng)
        assert sampler.pick([('a', 0), ('b', 0)]) is None

    def test_negative_weights_never_selected(self, seeded_rng):
        sampler = WeightedSampler(seeded_rng)
        entries = [('neg', -5), ('zero', 0), ('pos', 0.5)]

        for _ in range(1000):
            assert sampler.pick(entries) == ('pos', 0.5)

    def test_only_negative_weights_returns_none(self, seeded_rng):
        sampler = WeightedSampler(seeded_rng)
        assert sampler.pick([('a', -1), ('b', -2)]) is None

    def test_empty_input_returns_none(self, seeded_rng):
        assert WeightedSampler(seeded_rng).pick([]) is None

    def test_returns_key_and_weight(self, seeded_rng):
        assert WeightedSampler(seeded_rng).pick([('only', 2.5)]) == ('only', 2.5)

    def test_first_exceeding_entry_wins(self):
        """A draw just below a threshold lands on that entry."""

        class FixedRandom(random.Random):
            def random(self):
                return 0.4999

        sampler = WeightedSampler(FixedRandom())
        # total 4, draw 1.9996: thresholds 1, 2, 4 -> second entry
        assert sampler.pick([('a', 1), ('b', 1), ('c', 2)])[0] == 'b'

    def test_sample_draws_with_replacement(self, seeded_rng):
        picks = WeightedSampler(seeded_rng).sample([('a', 1), ('b', 1)], 50)
        assert len(picks) == 50
        assert {key for key, _ in picks} == {'a', 'b'}

    def test_sample_of_nothing_is_empty(self, seeded_rng):
        assert WeightedSampler(seeded_rng).sample([('a', 0)], 10) == []


class TestDepthSelector:
    """Tests for DepthSelector.pick."""

    def test_long_run_frequencies(self):
        selector = DepthSelector(random.Random(1234))
        draws = 100_000

        counts = Counter(selector.pick() for _ in range(draws))

        expected = {
            'shoals': 0.5158,
            'shelf': 0.3224,
            'dropoff': 0.1289,
            'canyon': 0.0322,
            'abyss': 0.00064,
        }
        for depth, share in expected.items():
            assert counts[depth] / draws == pytest.approx(share, abs=0.005)

    def test_only_known_tiers(self, seeded_rng):
        selector = DepthSelector(seeded_rng)
        assert {selector.pick() for _ in range(2000)} <= set(selector.tiers)

    def test_deterministic_with_seed(self):
        first, second = DepthSelector(random.Random(7)), DepthSelector(random.Random(7))
        assert [first.pick() for _ in range(50)] == [second.pick() for _ in range(50)]


class TestMetricsRoller:
    """Tests for MetricsRoller.roll."""

    def test_junk_has_no_metrics(self, seeded_rng):
        roller = MetricsRoller(seeded_rng)
        junk = FishDefinition(key='boot', rarity='junk', base_catch_rate=5,
                              min_weight=1, max_weight=3, min_length=4, max_length=9)

        for _ in range(100):
            assert roller.roll(junk) == {'weight': None, 'length': None}

    def test_metrics_within_range_and_rounded(self, seeded_rng):
        roller = MetricsRoller(seeded_rng)
        salmon = FishDefinition(key='salmon', rarity='common', base_catch_rate=10,
                                min_weight=1, max_weight=2, min_length=10, max_length=20)

        for _ in range(1000):
            metrics = roller.roll(salmon)
            assert 1 <= metrics['weight'] <= 2
            assert 10 <= metrics['length'] <= 20
            assert metrics['weight'] == round(metrics['weight'], 2)
            assert metrics['length'] == round(metrics['length'], 2)

    def test_degenerate_range(self, seeded_rng):
        fixed = FishDefinition(key='fixed', rarity='rare', base_catch_rate=1,
                               min_weight=3, max_weight=3, min_length=7, max_length=7)
        assert MetricsRoller(seeded_rng).roll(fixed) == {'weight': 3, 'length': 7}

    def test_bounds_off_the_two_decimal_grid(self, seeded_rng):
        roller = MetricsRoller(seeded_rng)
        odd = FishDefinition(key='odd', rarity='common', base_catch_rate=1,
                             min_weight=1.005, max_weight=1.009, min_length=2.004, max_length=2.996)

        for _ in range(500):
            metrics = roller.roll(odd)
            assert 1.005 <= metrics['weight'] <= 1.009
            assert 2.004 <= metrics['length'] <= 2.996
            assert metrics['length'] == round(metrics['length'], 2)

    def test_rounded_metrics_never_leave_range(self, seeded_rng):
        roller = MetricsRoller(seeded_rng)
        fish = FishDefinition(key='fish', rarity='common', base_catch_rate=1,
                              min_weight=1.005, max_weight=2.0, min_length=0.999, max_length=1.011)

        for _ in range(2000):
            metrics = roller.roll(fish)
            assert 1.005 <= metrics['weight'] <= 2.0
            assert 0.999 <= metrics['length'] <= 1.011
            assert metrics['weight'] == round(metrics['weight'], 2)
            assert metrics['length'] == round(metrics['length'], 2)
