"""
Presence tallies and visibility percentages.

A ``VisibilityTally`` is an immutable ``(yes, total)`` counter. Aggregation
folds checks into one tally per group, then maps each tally to a percent in
a separate pass.

Percent rule
------------
    percent = round_half_up(100 * yes / total, 1 dp)

computed in integer arithmetic so that exact halves (e.g. 62.45) always round
up regardless of float representation. An empty tally is 0.0, never a
division by zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, TypeVar

from aeo_tracker.models.tracking import Check

K = TypeVar("K", bound=Hashable)


def visibility_percent(yes: int, total: int) -> float:
    """Share of ``yes`` in ``total`` as a percent rounded half-up to 1 dp.

    Args:
        yes: Number of checks with ``presence=True``.
        total: Number of checks in the group.

    Returns:
        Percent in [0.0, 100.0]; 0.0 when ``total`` is 0.
    """
    if total <= 0:
        return 0.0
    tenths = (2000 * yes + total) // (2 * total)
    return tenths / 10


@dataclass(frozen=True)
class VisibilityTally:
    """Immutable presence counter for one group of checks."""

    yes: int = 0
    total: int = 0

    def add(self, presence: bool) -> "VisibilityTally":
        return VisibilityTally(self.yes + int(presence), self.total + 1)

    @property
    def percent(self) -> float:
        return visibility_percent(self.yes, self.total)


EMPTY_TALLY = VisibilityTally()


def tally(checks: Iterable[Check]) -> VisibilityTally:
    """Fold all ``checks`` into a single tally."""
    result = EMPTY_TALLY
    for check in checks:
        result = result.add(check.presence)
    return result


def tally_by(
    checks: Iterable[Check],
    key: Callable[[Check], K],
) -> dict[K, VisibilityTally]:
    """Fold ``checks`` into one tally per ``key(check)``.

    The returned dict's iteration order is incidental; callers must impose
    their own order before emitting results.
    """
    tallies: dict[K, VisibilityTally] = {}
    for check in checks:
        group = key(check)
        tallies[group] = tallies.get(group, EMPTY_TALLY).add(check.presence)
    return tallies
