"""
Tests for aeo_tracker/seeding/generator.py.

What we test
------------
generate_checks():
  - Produces exactly days × keywords × engines checks.
  - Every (day, keyword, engine) triple appears exactly once.
  - Covers the trailing N UTC days, today inclusive.
  - Same seed + same anchor → identical output; different seed differs.
  - absence_threshold 0.0 / 1.0 → all present / all absent.
  - Aggregating seeded checks for one engine gives yes/total of that engine.
  - Invalid days / threshold raise ValueError.
"""

from __future__ import annotations

import random
from collections import Counter
from datetime import timedelta

import pytest

from aeo_tracker.seeding.generator import generate_checks
from aeo_tracker.utils.time_utils import utc_day
from aeo_tracker.visibility.aggregator import compute_per_engine
from aeo_tracker.visibility.tally import visibility_percent

ENGINES = ("ChatGPT", "Gemini", "Claude", "Perplexity")


class TestGenerateChecks:
    def test_count(self, fixed_now):
        checks = generate_checks([1, 2, 3], ENGINES, rng=random.Random(1), now=fixed_now)
        assert len(checks) == 14 * 3 * 4

    def test_each_triple_once(self, fixed_now):
        checks = generate_checks([1, 2], ENGINES, rng=random.Random(1), now=fixed_now, days=5)
        triples = Counter((utc_day(c.timestamp), c.keyword_id, c.engine) for c in checks)
        assert len(triples) == 5 * 2 * 4
        assert set(triples.values()) == {1}

    def test_covers_trailing_days(self, fixed_now):
        checks = generate_checks([1], ENGINES, rng=random.Random(1), now=fixed_now)
        days = sorted({utc_day(c.timestamp) for c in checks})
        today = fixed_now.date()
        assert days == [today - timedelta(days=n) for n in range(13, -1, -1)]

    def test_newest_day_first_keeps_time_of_day(self, fixed_now):
        checks = generate_checks([1], ENGINES, rng=random.Random(1), now=fixed_now, days=3)
        stamps = [c.timestamp for c in checks[:: len(ENGINES)]]
        assert stamps == [fixed_now - timedelta(days=n) for n in range(3)]

    def test_reproducible_with_seed(self, fixed_now):
        first = generate_checks([1, 2], ENGINES, rng=random.Random(42), now=fixed_now)
        second = generate_checks([1, 2], ENGINES, rng=random.Random(42), now=fixed_now)
        assert first == second

    def test_different_seed_differs(self, fixed_now):
        first = generate_checks([1, 2], ENGINES, rng=random.Random(1), now=fixed_now)
        second = generate_checks([1, 2], ENGINES, rng=random.Random(2), now=fixed_now)
        assert [c.presence for c in first] != [c.presence for c in second]

    @pytest.mark.parametrize("threshold, expected", [(0.0, True), (1.0, False)])
    def test_threshold_extremes(self, fixed_now, threshold, expected):
        checks = generate_checks(
            [1], ENGINES, rng=random.Random(5), now=fixed_now, absence_threshold=threshold
        )
        assert {c.presence for c in checks} == {expected}

    def test_no_keywords(self, fixed_now):
        assert generate_checks([], ENGINES, now=fixed_now) == []

    def test_aggregate_matches_counts(self, fixed_now):
        checks = generate_checks([1, 2, 3], ENGINES, rng=random.Random(9), now=fixed_now)
        per_engine = compute_per_engine(checks, ENGINES)
        for engine in ENGINES:
            own = [c for c in checks if c.engine == engine]
            yes = sum(c.presence for c in own)
            assert per_engine[engine] == visibility_percent(yes, len(own))

    def test_rough_presence_rate(self, fixed_now):
        checks = generate_checks(list(range(1, 11)), ENGINES, rng=random.Random(3), now=fixed_now)
        rate = sum(c.presence for c in checks) / len(checks)
        assert 0.65 < rate < 0.85

    @pytest.mark.parametrize("kwargs", [{"days": 0}, {"absence_threshold": -0.1}, {"absence_threshold": 1.5}])
    def test_invalid_arguments(self, fixed_now, kwargs):
        with pytest.raises(ValueError):
            generate_checks([1], ENGINES, now=fixed_now, **kwargs)
