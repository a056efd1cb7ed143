"""
Rule-based recommendations over visibility aggregates.

Rules (evaluated in this order, output truncated to ``max_items``)
------------------------------------------------------------------
1. WEAK_ENGINES     : every engine below ``weak_threshold_pct``, named in one
                      message, weakest first (ties: engine name ascending).
2. STRONGEST_ENGINE : the highest-percent engine (ties: engine name ascending).
3. WEAK_KEYWORDS    : up to ``max_weak_keywords`` keywords below
                      ``weak_threshold_pct``, in breakdown order, one message.
4. CRITICAL_ABSENCE : one message per keyword scoring exactly 0% on at least
                      ``critical_zero_engines`` engines.
5. HEALTH_*         : mean of per-keyword overall percents; above
                      ``healthy_mean_pct`` → HEALTH_POSITIVE, below
                      ``urgent_mean_pct`` → HEALTH_URGENT, otherwise nothing.
                      Skipped when there are no keyword rows.

Truncation happens last, so a long run of rule-4 messages can push the
health message out of the list.

All functions are pure (no DB or I/O) and never raise on degenerate input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Mapping, Optional, Sequence

from aeo_tracker.config import RecommendationConfig
from aeo_tracker.visibility.aggregator import KeywordBreakdownRow, VisibilitySummary


class RecommendationKind(StrEnum):
    """Which rule produced a recommendation."""

    WEAK_ENGINES = "weak_engines"
    STRONGEST_ENGINE = "strongest_engine"
    WEAK_KEYWORDS = "weak_keywords"
    CRITICAL_ABSENCE = "critical_absence"
    HEALTH_POSITIVE = "health_positive"
    HEALTH_URGENT = "health_urgent"


@dataclass(frozen=True)
class Recommendation:
    """One human-readable alert.

    Attributes:
        kind:    Rule that emitted it.
        message: Display text (no markup).
    """

    kind: RecommendationKind
    message: str


def build_recommendations(
    per_engine: Mapping[str, float],
    keyword_rows: Sequence[KeywordBreakdownRow],
    config: Optional[RecommendationConfig] = None,
) -> list[Recommendation]:
    """Run the rule pipeline over per-engine and per-keyword aggregates.

    Args:
        per_engine:   ``{engine: percent}`` (engines without checks absent).
        keyword_rows: Per-keyword rows, already sorted by overall descending.
        config:       Thresholds; defaults to ``RecommendationConfig()``.

    Returns:
        At most ``config.max_items`` recommendations in rule-emission order.
    """
    cfg = config or RecommendationConfig()
    items: list[Recommendation] = []

    weak = weak_engines_alert(per_engine, cfg.weak_threshold_pct)
    if weak is not None:
        items.append(weak)

    strongest = strongest_engine_alert(per_engine)
    if strongest is not None:
        items.append(strongest)

    weak_kw = weak_keywords_alert(keyword_rows, cfg.weak_threshold_pct, cfg.max_weak_keywords)
    if weak_kw is not None:
        items.append(weak_kw)

    items.extend(critical_absence_alerts(keyword_rows, cfg.critical_zero_engines))

    health = health_alert(keyword_rows, cfg.healthy_mean_pct, cfg.urgent_mean_pct)
    if health is not None:
        items.append(health)

    return items[: cfg.max_items]


def recommend_for_summary(
    summary: VisibilitySummary,
    config: Optional[RecommendationConfig] = None,
) -> list[Recommendation]:
    """Convenience wrapper: ``build_recommendations`` over a summary."""
    return build_recommendations(summary.per_engine, summary.keywords, config)


# ── Individual rules ──────────────────────────────────────────────────────────


def weak_engines_alert(
    per_engine: Mapping[str, float],
    threshold: float,
) -> Optional[Recommendation]:
    weak = sorted(
        ((engine, pct) for engine, pct in per_engine.items() if pct < threshold),
        key=lambda item: (item[1], item[0]),
    )
    if not weak:
        return None
    named = ", ".join(f"{engine} ({pct:.1f}%)" for engine, pct in weak)
    return Recommendation(
        RecommendationKind.WEAK_ENGINES,
        f"Low visibility on {named}. Prioritise content these engines cite.",
    )


def strongest_engine_alert(per_engine: Mapping[str, float]) -> Optional[Recommendation]:
    """Highest-percent engine; ties resolve to the alphabetically first name."""
    if not per_engine:
        return None
    engine, pct = min(per_engine.items(), key=lambda item: (-item[1], item[0]))
    return Recommendation(
        RecommendationKind.STRONGEST_ENGINE,
        f"Strongest engine: {engine} ({pct:.1f}%). Reuse what works there on other engines.",
    )


def weak_keywords_alert(
    keyword_rows: Sequence[KeywordBreakdownRow],
    threshold: float,
    limit: int,
) -> Optional[Recommendation]:
    weak = [row for row in keyword_rows if row.overall < threshold][:limit]
    if not weak:
        return None
    named = ", ".join(f"'{row.keyword}' ({row.overall:.1f}%)" for row in weak)
    return Recommendation(
        RecommendationKind.WEAK_KEYWORDS,
        f"Weak keywords: {named}. Strengthen the pages that target them.",
    )


def critical_absence_alerts(
    keyword_rows: Sequence[KeywordBreakdownRow],
    min_zero_engines: int,
) -> list[Recommendation]:
    alerts: list[Recommendation] = []
    for row in keyword_rows:
        absent = [engine for engine, pct in row.per_engine.items() if pct == 0.0]
        if len(absent) >= min_zero_engines:
            alerts.append(
                Recommendation(
                    RecommendationKind.CRITICAL_ABSENCE,
                    f"'{row.keyword}' scores 0% on {_join_names(absent)}.",
                )
            )
    return alerts


def health_alert(
    keyword_rows: Sequence[KeywordBreakdownRow],
    healthy_above: float,
    urgent_below: float,
) -> Optional[Recommendation]:
    if not keyword_rows:
        return None
    mean = sum(row.overall for row in keyword_rows) / len(keyword_rows)
    if mean > healthy_above:
        return Recommendation(
            RecommendationKind.HEALTH_POSITIVE,
            f"Healthy visibility: keywords average {mean:.1f}% across engines.",
        )
    if mean < urgent_below:
        return Recommendation(
            RecommendationKind.HEALTH_URGENT,
            f"Urgent: keywords average only {mean:.1f}% across engines.",
        )
    return None


def _join_names(names: Sequence[str]) -> str:
    """``["a"]`` → ``a``; ``["a", "b", "c"]`` → ``a, b and c``."""
    if len(names) <= 1:
        return "".join(names)
    return f"{', '.join(names[:-1])} and {names[-1]}"
