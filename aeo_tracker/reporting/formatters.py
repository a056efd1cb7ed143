"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept a ``DashboardState`` (or parts of it) and return plain
multi-line strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from aeo_tracker.recommendations.alerts import Recommendation
from aeo_tracker.services.dashboard import DashboardState, DashboardStatus
from aeo_tracker.visibility.aggregator import VisibilitySummary

_EMPTY_HINTS: dict[DashboardStatus, str] = {
    DashboardStatus.NO_PROJECTS:     "no projects yet; run 'aeo-tracker seed-demo' first",
    DashboardStatus.NO_KEYWORDS:     "no keywords for these projects",
    DashboardStatus.NO_OBSERVATIONS: "no checks in the window; run 'aeo-tracker reseed-checks'",
}


def format_dashboard(state: DashboardState) -> str:
    """Full report: header, engines, trend, keywords, recommendations."""
    summary = state.summary
    lines: list[str] = []
    lines.append("")
    lines.append("=== AI Visibility Dashboard ===")
    lines.append(f"  Projects:  {', '.join(str(p) for p in state.project_ids) or '-'}")
    lines.append(f"  Window:    {state.window_start:%Y-%m-%d %H:%M} -> {state.generated_at:%Y-%m-%d %H:%M} UTC")
    lines.append(f"  Keywords:  {state.keyword_count}")
    lines.append(f"  Checks:    {summary.observation_count}")

    if state.status is not DashboardStatus.READY:
        lines.append("")
        lines.append(f"  ({_EMPTY_HINTS[state.status]})")
        return "\n".join(lines)

    lines.append(f"  Overall:   {summary.overall:.1f}%")
    lines.append(format_engine_table(summary))
    lines.append(format_trend_table(summary))
    lines.append(format_keyword_table(summary))
    lines.append(format_recommendations(list(state.recommendations)))
    return "\n".join(lines)


def format_engine_table(summary: VisibilitySummary) -> str:
    lines = ["", "  [ENGINES]"]
    for engine in summary.engines:
        pct = summary.per_engine.get(engine)
        value = f"{pct:5.1f}%" if pct is not None else "    --"
        lines.append(f"    {engine:<14}  {value}")
    return "\n".join(lines)


def format_trend_table(summary: VisibilitySummary) -> str:
    engines = list(summary.engines)
    header = f"    {'Day':<10}  {'Overall':>7}" + "".join(f"  {e[:10]:>10}" for e in engines)
    lines = ["", "  [DAILY TREND]", header, "    " + "-" * (len(header) - 4)]
    for row in summary.trend:
        cells = "".join(f"  {row.per_engine.get(e, 0.0):>9.1f}%" for e in engines)
        lines.append(f"    {row.day.isoformat():<10}  {row.overall:>6.1f}%{cells}")
    return "\n".join(lines)


def format_keyword_table(summary: VisibilitySummary) -> str:
    engines = list(summary.engines)
    header = f"    {'Keyword':<28}  {'Overall':>7}" + "".join(f"  {e[:10]:>10}" for e in engines)
    lines = ["", "  [KEYWORDS]", header, "    " + "-" * (len(header) - 4)]
    for row in summary.keywords:
        cells = "".join(f"  {row.per_engine.get(e, 0.0):>9.1f}%" for e in engines)
        lines.append(f"    {row.keyword[:28]:<28}  {row.overall:>6.1f}%{cells}")
    return "\n".join(lines)


def format_recommendations(recommendations: list[Recommendation]) -> str:
    lines = ["", "  [RECOMMENDATIONS]"]
    if not recommendations:
        lines.append("    (none)")
    for i, rec in enumerate(recommendations, start=1):
        lines.append(f"    {i}. {rec.message}")
    return "\n".join(lines)
