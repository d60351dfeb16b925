"""
Session logging for axiomtui.

This module provides a small structured logger that appends one line per
event to a session log file. It is the only diagnostic channel while the
curses screen owns the terminal.

Purpose:
    When a query fails or the screen stops refreshing, a developer needs
    to see what the TUI did: which query it sent, how long the service
    took, which state it moved to. Each run gets a session id so several
    runs can share one file and still be told apart.

Design Decisions:
    - Logging is opt-in (--log-file or AXIOMTUI_LOG_FILE); without a path
      the logger does nothing and no file is created
    - Append-only writes, one open per line, so a crash never loses
      earlier lines
    - A lock serializes writes because query workers log from their own
      threads
    - UTC timestamps for consistency across machines
"""

from __future__ import annotations

import datetime
import os
import threading
import uuid
from pathlib import Path
from typing import Optional

LOG_FILE_ENV = "AXIOMTUI_LOG_FILE"


def resolve_log_path(cli_value: Optional[str] = None) -> Optional[Path]:
    """
    Decide where the session log goes.

    The --log-file flag wins over AXIOMTUI_LOG_FILE. If neither is set,
    logging is disabled.

    Args:
        cli_value: Value of the --log-file flag, if given.

    Returns:
        Path to the log file, or None when logging is disabled.
    """
    value = cli_value or os.environ.get(LOG_FILE_ENV)
    if not value:
        return None
    return Path(value).expanduser()


class SessionLogger:
    """
    Minimal append-only session logger.

    Attributes:
        session_id: Short random identifier for this run.
        path: The log file, or None when logging is disabled.

    Log Line Format:
        <timestamp> [session=<id>] [component=<name>] <LEVEL> <message>

    Example:
        >>> logger = SessionLogger(Path("/tmp/axiomtui.log"))
        >>> logger.info("controller", "state typing -> querying")
        # Writes: 2024-01-15T12:00:00Z [session=3f2a9c1b] [component=controller] INFO state typing -> querying
    """

    def __init__(self, path: Optional[Path] = None, session_id: Optional[str] = None) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:8]
        self.path = path
        self._lock = threading.Lock()
        if self.path is not None:
            # Ensure the directory exists before the first write
            self.path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def enabled(self) -> bool:
        return self.path is not None

    def _ts(self) -> str:
        return (
            datetime.datetime.now(datetime.timezone.utc)
            .isoformat(timespec="seconds")
            # Replace the verbose +00:00 suffix with the more compact Z
            .replace("+00:00", "Z")
        )

    def log(self, component: str, level: str, message: str) -> None:
        """
        Write a structured log line.

        Args:
            component: The part of the program emitting the line
                       (e.g. "controller", "query").
            level: Severity (INFO, WARN, ERROR).
            message: Human-readable message. Newlines are flattened so
                     one event is always one line.
        """
        if self.path is None:
            return

        flat = " ".join(str(message).splitlines())
        line = (
            f"{self._ts()} "
            f"[session={self.session_id}] "
            f"[component={component}] "
            f"{level.upper()} {flat}\n"
        )
        with self._lock:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line)

    def info(self, component: str, message: str) -> None:
        self.log(component, "INFO", message)

    def warn(self, component: str, message: str) -> None:
        self.log(component, "WARN", message)

    def error(self, component: str, message: str) -> None:
        self.log(component, "ERROR", message)
