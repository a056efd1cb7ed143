"""
Visibility aggregation: pure functions that turn presence checks into
overall, per-engine, daily and per-keyword visibility percentages.

Modules
-------
tally      : VisibilityTally + visibility_percent() + tally()/tally_by() folds.
aggregator : DailyTrendRow / KeywordBreakdownRow / VisibilitySummary +
             compute_*() and aggregate_visibility(); no DB or I/O.
"""
