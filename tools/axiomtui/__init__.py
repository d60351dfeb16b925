"""
axiomtui - Interactive terminal client for the Axiom query service.

This package provides a curses TUI where a developer types an APL query,
commits it with enter, and watches the results refresh every few seconds.

Purpose:
    Checking a metric or a burst of events usually means opening a browser,
    finding the right dataset and re-running the query by hand. axiomtui
    keeps that loop in the terminal: totals, per-group line charts and the
    raw matching events, re-queried on a countdown.

Package Structure:
    - cli.py: Command-line interface and entry point
    - query/: Query transport (HTTP client) and result model
    - tui/: Controller state machine, result projection and curses views
    - utils/: Shared utilities (session logging)

Usage:
    Run as a module: python -m axiomtui [--query APL] [--refresh SECONDS]

Example:
    AXIOM_TOKEN=xaat-... python -m axiomtui --query "['logs'] | count()"
"""

__version__ = "0.1.0"
