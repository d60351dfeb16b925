"""
TUI (Text User Interface) components for axiomtui.

This subpackage holds the interactive part of the program: the state
machine, the projection of query results into charts and tables, and the
curses loop that ties them to the terminal.

Modules:
    - controller: State machine applying events to the Model
    - events: Event and command types exchanged with the runner
    - model: The Model and the projected artifacts
    - projection: QueryResult -> meta, graphs, totals and matches tables
    - highlight: Totals row selection -> highlighted graph series
    - ticks: Spinner, pulse and refresh tick sources
    - views: Model -> Frame screen assembly
    - widgets: Text input, table and spinner widgets
    - chart: Multi-series ASCII line charts
    - layout: Frame composition helpers
    - styles: Colours and curses colour pairs
    - runner: curses main loop, query workers and timers

Architecture:
    Like a producer-consumer pipeline:
    1. Keys, query workers and timers produce events
    2. The controller consumes them and returns commands
    3. The runner executes commands and paints views.view(model)
"""
