"""
aeo_tracker.reporting: format and export a computed dashboard state.

It does NOT query the store or aggregate; callers pass a ``DashboardState``
from ``services.dashboard.load_dashboard()``.

Modules:
  formatters: ASCII terminal formatters for Typer CLI commands.
  export    : JSON/CSV flat-file export helpers.
"""
