"""
Utility modules for axiomtui.

Modules:
    - sessionlog: Append-only session logger

Purpose:
    The curses screen owns the terminal while the TUI runs, so diagnostics
    go to a log file instead of stdout. Keeping the logger here lets the
    CLI, the controller and the query worker share one instance.
"""
