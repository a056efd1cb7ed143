"""
Synthetic check generator for demos and tests.

Layout
------
For each of the trailing ``days`` calendar days (today inclusive), for each
keyword id, for each engine: exactly one ``Check`` with

    presence  = rng.random() > absence_threshold     (~75% True at 0.25)
    timestamp = now - day_offset days                (same time of day)

The random source is injected: pass ``random.Random(seed)`` for reproducible
output. Every call produces a complete fresh set; storing it is the caller's
job (see ``services.seeding``), which replaces any existing checks for the
affected keywords rather than upserting.
"""

from __future__ import annotations

import random
from datetime import datetime
from typing import Optional, Sequence

from aeo_tracker.models.tracking import Check
from aeo_tracker.taxonomy.engine_taxonomy import DEFAULT_ENGINES
from aeo_tracker.utils.time_utils import as_utc, trailing_days, utcnow


def generate_checks(
    keyword_ids: Sequence[int],
    engines: Sequence[str] = DEFAULT_ENGINES,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
    days: int = 14,
    absence_threshold: float = 0.25,
) -> list[Check]:
    """Generate one check per (day, keyword, engine).

    Random draws are consumed in (day offset, keyword, engine) order, so a
    fixed seed, ``now`` and inputs always yield the same checks.

    Args:
        keyword_ids:       Keywords to generate checks for.
        engines:           Engine labels.
        rng:               Random source; a fresh unseeded ``random.Random``
                           if omitted.
        now:               Anchor instant (today); defaults to ``utcnow()``.
        days:              Number of trailing calendar days, today inclusive.
        absence_threshold: Draws at or below this value are absences.

    Returns:
        ``days * len(keyword_ids) * len(engines)`` checks, newest day first.

    Raises:
        ValueError: If ``days < 1`` or ``absence_threshold`` is outside [0, 1].
    """
    if not 0.0 <= absence_threshold <= 1.0:
        raise ValueError(f"absence_threshold must be in [0.0, 1.0], got {absence_threshold}.")

    rng = rng or random.Random()
    anchor = as_utc(now) if now is not None else utcnow()

    today = anchor.date()
    checks: list[Check] = []
    # Newest day first; each check keeps the anchor's time of day.
    for day in reversed(trailing_days(today, days)):
        timestamp = anchor - (today - day)
        for keyword_id in keyword_ids:
            for engine in engines:
                checks.append(
                    Check(
                        keyword_id=keyword_id,
                        engine=str(engine),
                        presence=rng.random() > absence_threshold,
                        timestamp=timestamp,
                    )
                )
    return checks
