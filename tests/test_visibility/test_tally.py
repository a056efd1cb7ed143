"""
Tests for aeo_tracker/visibility/tally.py.

What we test
------------
visibility_percent():
  - 0 total → 0.0 (no division by zero).
  - Rounds to one decimal place.
  - Exact halves round up (6.25 → 6.3), unlike Python's round().
  - Result always within [0, 100].

VisibilityTally:
  - add() returns a new tally and leaves the original unchanged.
  - percent property follows visibility_percent().

tally() / tally_by():
  - Fold all checks into one counter / one counter per key.
"""

from __future__ import annotations

import pytest

from aeo_tracker.visibility.tally import (
    EMPTY_TALLY,
    VisibilityTally,
    tally,
    tally_by,
    visibility_percent,
)


class TestVisibilityPercent:
    def test_zero_total_is_zero(self):
        assert visibility_percent(0, 0) == 0.0

    @pytest.mark.parametrize(
        "yes, total, expected",
        [
            (1, 3, 33.3),
            (2, 3, 66.7),
            (7, 14, 50.0),
            (35, 56, 62.5),
            (14, 14, 100.0),
            (0, 14, 0.0),
        ],
    )
    def test_one_decimal_rounding(self, yes, total, expected):
        assert visibility_percent(yes, total) == expected

    @pytest.mark.parametrize("yes, total, expected", [(1, 16, 6.3), (5, 16, 31.3), (3, 16, 18.8)])
    def test_exact_halves_round_up(self, yes, total, expected):
        assert visibility_percent(yes, total) == expected

    def test_bounds(self):
        for total in range(1, 40):
            for yes in range(total + 1):
                assert 0.0 <= visibility_percent(yes, total) <= 100.0


class TestVisibilityTally:
    def test_add_is_immutable(self):
        start = VisibilityTally()
        after = start.add(True)
        assert start == EMPTY_TALLY
        assert after == VisibilityTally(yes=1, total=1)

    def test_add_absence_counts_total_only(self):
        assert VisibilityTally(2, 3).add(False) == VisibilityTally(2, 4)

    def test_percent(self):
        assert VisibilityTally(3, 4).percent == 75.0
        assert EMPTY_TALLY.percent == 0.0


class TestFolds:
    def test_tally_all(self, make_check):
        checks = [make_check(presence=True), make_check(presence=False), make_check(presence=True)]
        assert tally(checks) == VisibilityTally(yes=2, total=3)

    def test_tally_empty(self):
        assert tally([]) == EMPTY_TALLY

    def test_tally_by_engine(self, make_check):
        checks = [
            make_check("ChatGPT", True),
            make_check("Gemini", False),
            make_check("ChatGPT", False),
        ]
        result = tally_by(checks, lambda c: c.engine)
        assert result == {
            "ChatGPT": VisibilityTally(1, 2),
            "Gemini": VisibilityTally(0, 1),
        }
