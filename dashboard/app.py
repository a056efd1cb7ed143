"""
AEO Tracker: Streamlit Dashboard
=================================

Optional local UI over the SQLite check store. It reads through
``load_dashboard()`` and can trigger the two seeding actions; it never talks
to a live AI engine.

Layout
------
  - Overall visibility metric plus one metric per engine.
  - Daily trend line chart (overall + per engine).
  - Keyword breakdown table, sorted by overall visibility.
  - Recommendations list (max 5).

Each seeding action runs its delete and inserts in one SQLite transaction,
so two sessions seeding at once serialise on the store's write lock.

Usage
-----
    pip install -e ".[dashboard]"
    streamlit run dashboard/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# ── Ensure project root is importable ────────────────────────────────────────
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

# ── Must be the first Streamlit call ─────────────────────────────────────────
st.set_page_config(
    page_title="AEO Tracker",
    layout="wide",
    initial_sidebar_state="expanded",
)

from aeo_tracker.config import load_config
from aeo_tracker.services.dashboard import DashboardStatus, StoreFetchError
from aeo_tracker.services.seeding import SeedError
from aeo_tracker.utils.logging import configure_logging
from dashboard.data_loader import engine_frame, keyword_frame, load_state, run_seed, trend_frame

_EMPTY_MESSAGES = {
    DashboardStatus.NO_PROJECTS:     "No projects yet. Seed the demo project from the sidebar.",
    DashboardStatus.NO_KEYWORDS:     "These projects have no keywords.",
    DashboardStatus.NO_OBSERVATIONS: "No checks in the window. Regenerate checks from the sidebar.",
}


@st.cache_resource
def _config():
    config = load_config()
    configure_logging(config.logging, log_to_file=False)
    return config


@st.cache_data(ttl=60)
def _cached_state(db_path: str):
    return load_state(_config())


config = _config()


def _seed(demo: bool) -> None:
    try:
        result = run_seed(config, demo=demo)
        st.session_state["flash"] = (
            f"Seeded {result.inserted} checks for {result.keyword_count} keyword(s)."
        )
    except SeedError as exc:
        st.session_state["flash_error"] = str(exc)
    finally:
        st.cache_data.clear()


# ── Sidebar ───────────────────────────────────────────────────────────────────

with st.sidebar:
    st.title("AEO Tracker")
    st.caption(f"Store: {config.database.db_path}")
    st.divider()

    st.button("Seed demo project", on_click=_seed, args=(True,),
              help="Replaces all projects with the demo project.")
    st.button("Regenerate checks", on_click=_seed, args=(False,),
              help="Replaces the last 14 days of checks for existing keywords.")
    if st.button("Refresh"):
        st.cache_data.clear()
        st.rerun()

if msg := st.session_state.pop("flash", None):
    st.success(msg)
if err := st.session_state.pop("flash_error", None):
    st.error(err)


# ── Main view ─────────────────────────────────────────────────────────────────

st.header("AI Visibility Dashboard")

try:
    state = _cached_state(config.database.db_path)
except StoreFetchError as exc:
    st.error(f"Could not load data: {exc}")
    st.stop()

st.caption(
    f"Window: {state.window_start:%Y-%m-%d} to {state.generated_at:%Y-%m-%d} UTC · "
    f"{state.summary.observation_count} checks · {state.keyword_count} keywords"
)

if state.status is not DashboardStatus.READY:
    st.info(_EMPTY_MESSAGES[state.status])
    st.stop()

summary = state.summary

cols = st.columns(len(summary.per_engine) + 1)
cols[0].metric("Overall", f"{summary.overall:.1f}%")
for col, row in zip(cols[1:], engine_frame(summary).itertuples(index=False)):
    col.metric(row.engine, f"{row.visibility:.1f}%")

st.subheader("Daily Trend")
st.line_chart(trend_frame(summary))

st.subheader("Keywords")
st.dataframe(keyword_frame(summary), use_container_width=True, hide_index=True)

st.subheader("Recommendations")
if not state.recommendations:
    st.write("No recommendations for this window.")
for rec in state.recommendations:
    st.markdown(f"- {rec.message}")
