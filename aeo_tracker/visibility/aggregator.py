"""
Visibility aggregation: turns a window of presence checks into the four
dashboard statistic sets.

Outputs
-------
overall     : percent of all checks with presence=True.
per_engine  : percent per engine; engines with no checks are absent.
trend       : one row per UTC calendar day that has checks, ascending; each
              row carries an overall percent and one percent per known engine
              (0.0 for engines without checks that day).
keywords    : one row per resolved keyword name, with an overall percent and
              one percent per known engine (0.0 where the keyword has no
              checks for that engine); sorted by overall descending, ties in
              encounter order.

Known engines
-------------
The configured engine order first, followed by any engine label present in
the checks but missing from configuration (alphabetically). Every per-engine
mapping in the output iterates in this order.

Keyword resolution
------------------
``keyword_id → keyword`` comes from the ``keywords`` argument. Checks whose
keyword_id is not in that mapping are grouped under ``UNKNOWN_KEYWORD`` for
the keyword breakdown only; they always count toward overall/per-engine
totals. Encounter order for tie-breaking is the order of first appearance of
each name in ``keywords``, with ``UNKNOWN_KEYWORD`` last, so the order of the
``checks`` argument never leaks into the output.

All functions are pure: no DB access, no I/O, no mutation of inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from aeo_tracker.models.tracking import Check, Keyword
from aeo_tracker.taxonomy.engine_taxonomy import DEFAULT_ENGINES
from aeo_tracker.utils.time_utils import utc_day
from aeo_tracker.visibility.tally import EMPTY_TALLY, VisibilityTally, tally, tally_by

UNKNOWN_KEYWORD = "Unknown"


@dataclass(frozen=True)
class DailyTrendRow:
    """Visibility for one UTC calendar day.

    Attributes:
        day:        Calendar day (UTC).
        overall:    Percent across all engines that day.
        per_engine: Percent per known engine (fixed shape, 0.0 when absent).
    """

    day: date
    overall: float
    per_engine: dict[str, float]


@dataclass(frozen=True)
class KeywordBreakdownRow:
    """Visibility for one keyword name across engines.

    Attributes:
        keyword:    Resolved keyword text (or ``UNKNOWN_KEYWORD``).
        overall:    Percent across all engines for this keyword.
        per_engine: Percent per known engine (fixed shape, 0.0 when absent).
        checks:     Number of checks behind ``overall``.
    """

    keyword: str
    overall: float
    per_engine: dict[str, float]
    checks: int


@dataclass(frozen=True)
class VisibilitySummary:
    """All aggregate outputs for one window of checks.

    An empty summary (no checks) has overall 0.0 and empty collections; it is
    distinct from "not loaded", which callers represent as ``None``.
    """

    overall: float
    per_engine: dict[str, float]
    trend: tuple[DailyTrendRow, ...]
    keywords: tuple[KeywordBreakdownRow, ...]
    engines: tuple[str, ...]
    observation_count: int

    @property
    def is_empty(self) -> bool:
        return self.observation_count == 0

    @classmethod
    def empty(cls, engines: Sequence[str] = DEFAULT_ENGINES) -> "VisibilitySummary":
        return cls(
            overall=0.0,
            per_engine={},
            trend=(),
            keywords=(),
            engines=tuple(str(e) for e in engines),
            observation_count=0,
        )


def resolve_engines(
    checks: Iterable[Check],
    engines: Sequence[str] = DEFAULT_ENGINES,
) -> tuple[str, ...]:
    """Return the known engine labels in output order.

    Args:
        checks:  Checks in scope.
        engines: Configured engine order.

    Returns:
        Configured engines followed by unconfigured labels seen in ``checks``
        (sorted alphabetically).
    """
    configured = [str(e) for e in engines]
    seen = {check.engine for check in checks}
    extras = sorted(seen.difference(configured))
    return tuple(configured + extras)


def compute_overall(checks: Iterable[Check]) -> float:
    """Percent of all ``checks`` with presence=True (0.0 when empty)."""
    return tally(checks).percent


def compute_per_engine(
    checks: Sequence[Check],
    engines: Sequence[str] = DEFAULT_ENGINES,
) -> dict[str, float]:
    """Percent per engine, omitting engines with no checks.

    Args:
        checks:  Checks in scope.
        engines: Configured engine order (controls mapping order).

    Returns:
        ``{engine: percent}`` in known-engine order.
    """
    tallies = tally_by(checks, lambda c: c.engine)
    return {
        engine: tallies[engine].percent
        for engine in resolve_engines(checks, engines)
        if engine in tallies
    }


def compute_daily_trend(
    checks: Sequence[Check],
    engines: Sequence[str] = DEFAULT_ENGINES,
) -> list[DailyTrendRow]:
    """Daily visibility rows, ascending by UTC calendar day.

    Days without any checks do not produce a row.

    Args:
        checks:  Checks in scope.
        engines: Configured engine order.

    Returns:
        List of ``DailyTrendRow`` with strictly increasing ``day``.
    """
    known = resolve_engines(checks, engines)
    by_day = tally_by(checks, lambda c: utc_day(c.timestamp))
    by_day_engine = tally_by(checks, lambda c: (utc_day(c.timestamp), c.engine))

    return [
        DailyTrendRow(
            day=day,
            overall=by_day[day].percent,
            per_engine=_fixed_shape(by_day_engine, day, known),
        )
        for day in sorted(by_day)
    ]


def compute_keyword_breakdown(
    keywords: Sequence[Keyword],
    checks: Sequence[Check],
    engines: Sequence[str] = DEFAULT_ENGINES,
) -> list[KeywordBreakdownRow]:
    """Per-keyword visibility rows, sorted by overall percent descending.

    Keywords sharing the same text are merged into one row. Only keyword
    names with at least one check produce a row.

    Args:
        keywords: Keywords in scope (defines the id → name mapping and the
                  encounter order used to break ties).
        checks:   Checks in scope.
        engines:  Configured engine order.

    Returns:
        List of ``KeywordBreakdownRow``; equal-percent rows keep encounter order.
    """
    known = resolve_engines(checks, engines)
    names = {kw.keyword_id: kw.keyword for kw in keywords}

    def _name(check: Check) -> str:
        return names.get(check.keyword_id, UNKNOWN_KEYWORD)

    by_keyword = tally_by(checks, _name)
    by_keyword_engine = tally_by(checks, lambda c: (_name(c), c.engine))

    rows = [
        KeywordBreakdownRow(
            keyword=name,
            overall=by_keyword[name].percent,
            per_engine=_fixed_shape(by_keyword_engine, name, known),
            checks=by_keyword[name].total,
        )
        for name in _encounter_order(keywords)
        if name in by_keyword
    ]
    # sorted() is stable: ties keep encounter order.
    return sorted(rows, key=lambda row: -row.overall)


def aggregate_visibility(
    keywords: Sequence[Keyword],
    checks: Sequence[Check],
    engines: Sequence[str] = DEFAULT_ENGINES,
) -> VisibilitySummary:
    """Compute every aggregate output for one window of checks.

    Args:
        keywords: Keywords in scope.
        checks:   Checks restricted to those keywords and the window.
        engines:  Configured engine order.

    Returns:
        ``VisibilitySummary``; ``VisibilitySummary.empty()`` when there are
        no checks.
    """
    if not checks:
        return VisibilitySummary.empty(engines)

    return VisibilitySummary(
        overall=compute_overall(checks),
        per_engine=compute_per_engine(checks, engines),
        trend=tuple(compute_daily_trend(checks, engines)),
        keywords=tuple(compute_keyword_breakdown(keywords, checks, engines)),
        engines=resolve_engines(checks, engines),
        observation_count=len(checks),
    )


# ── Internal helpers ──────────────────────────────────────────────────────────


def _fixed_shape(
    tallies: dict[tuple, VisibilityTally],
    group: object,
    known: Sequence[str],
) -> dict[str, float]:
    """One percent per known engine for ``group``; 0.0 where no checks exist."""
    return {engine: tallies.get((group, engine), EMPTY_TALLY).percent for engine in known}


def _encounter_order(keywords: Sequence[Keyword]) -> list[str]:
    """Distinct keyword names in first-appearance order, ``UNKNOWN_KEYWORD`` last."""
    order: list[str] = []
    seen: set[str] = set()
    for kw in keywords:
        if kw.keyword not in seen:
            seen.add(kw.keyword)
            order.append(kw.keyword)
    if UNKNOWN_KEYWORD not in seen:
        order.append(UNKNOWN_KEYWORD)
    return order
