"""
Recommendation engine: converts visibility aggregates into a short, ordered,
capped list of human-readable alerts.

Modules
-------
alerts : Recommendation dataclass + RecommendationKind + build_recommendations()
         and the individual rule functions; pure functions, no DB or I/O.
"""
