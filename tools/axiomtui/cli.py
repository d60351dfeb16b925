#!/usr/bin/env python3
"""
axiomtui - Interactive terminal client for the Axiom query service.

This module implements the command-line entry point: it loads
configuration, builds the query client, and hands the terminal over to
the curses TUI.

Responsibilities:
    - Load .env configuration (AXIOM_TOKEN, AXIOM_ORG_ID, AXIOM_URL)
    - Parse command-line options
    - Construct the query client, failing fast on bad configuration
    - Run the TUI and restore the terminal on exit

Usage:
    python -m axiomtui [options]

Examples:
    python -m axiomtui
    python -m axiomtui --query "['logs'] | summarize count() by bin_auto(_time)"
    python -m axiomtui --refresh 10 --log-file ~/.cache/axiomtui.log

Exit Codes:
    0: The user quit
    1: The client could not be constructed (bad or missing configuration)
"""

import argparse
import curses
import os
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .query.client import DEFAULT_TIMEOUT, ClientConfigError, QueryClient
from .tui.controller import Controller
from .tui.model import DEFAULT_REFRESH_SECONDS, Model
from .tui.runner import run_app
from .utils.sessionlog import SessionLogger, resolve_log_path

# ============================================================
# Environment Configuration
# ============================================================


def load_dotenv(paths: Optional[List[Path]] = None) -> None:
    """
    Load KEY=VALUE lines from .env files into os.environ.

    By default looks at ./.env and the repository root's .env. Variables
    that are already set are never overwritten, and the first file to set
    a variable wins.

    Args:
        paths: Files to read, in priority order. Missing files are skipped.

    Note:
        A dozen lines of parsing don't justify a python-dotenv dependency.
    """
    if paths is None:
        # cli.py -> axiomtui/ -> tools/ -> repo/
        repo_root = Path(__file__).resolve().parents[2]
        paths = [Path.cwd() / ".env", repo_root / ".env"]

    for env_path in paths:
        if not env_path.is_file():
            continue
        with env_path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                # Skip empty lines and comments
                if not line or line.startswith("#"):
                    continue
                if line.startswith("export "):
                    line = line[len("export "):].lstrip()
                # Skip malformed lines (no = sign)
                if "=" not in line:
                    continue
                # Split on first = only (value might contain =)
                key, value = line.split("=", 1)
                key, value = key.strip(), value.strip()
                # Strip matching surrounding quotes
                if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                    value = value[1:-1]
                if key:
                    os.environ.setdefault(key, value)


# ============================================================
# Command-Line Argument Parsing
# ============================================================


def _refresh_seconds(text: str) -> int:
    value = int(text)
    # The countdown re-runs when it reaches 1, so 2 is the shortest cycle
    if value < 2:
        raise argparse.ArgumentTypeError("refresh must be at least 2 seconds")
    return value


def _timeout_seconds(text: str) -> float:
    value = float(text)
    if value <= 0:
        raise argparse.ArgumentTypeError("timeout must be positive")
    return value


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser ready to parse sys.argv.
    """
    parser = argparse.ArgumentParser(
        prog="axiomtui",
        description="Run APL queries interactively and watch the results refresh.",
        epilog="Credentials come from AXIOM_TOKEN, AXIOM_ORG_ID and AXIOM_URL "
               "(environment or .env).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--query", default="",
                        help="Pre-fill the query input with this APL")
    parser.add_argument(
        "--refresh",
        type=_refresh_seconds,
        default=DEFAULT_REFRESH_SECONDS,
        metavar="SECONDS",
        help=f"Seconds between automatic re-runs (default: {DEFAULT_REFRESH_SECONDS})",
    )
    parser.add_argument(
        "--timeout",
        type=_timeout_seconds,
        default=DEFAULT_TIMEOUT,
        metavar="SECONDS",
        help=f"Query request timeout (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        metavar="PATH",
        help="Append a session log here (default: $AXIOMTUI_LOG_FILE, else no log)",
    )
    return parser


def build_model(args: argparse.Namespace) -> Model:
    model = Model(refresh_seconds=args.refresh)
    if args.query:
        model.text.set_value(args.query)
    return model


# ============================================================
# Entry Point
# ============================================================


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the axiomtui CLI.

    This function:
    1. Loads environment configuration from .env
    2. Parses command-line arguments
    3. Builds the query client (exit 1 on failure)
    4. Runs the TUI until the user quits
    """
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    logger = SessionLogger(resolve_log_path(args.log_file))

    try:
        client = QueryClient.from_env(timeout=args.timeout)
    except ClientConfigError as exc:
        logger.error("cli", f"client construction failed: {exc}")
        print(f"axiomtui: {exc}", file=sys.stderr)
        sys.exit(1)

    logger.info(
        "cli",
        f"starting axiomtui {__version__} url={client.config.url} "
        f"org={client.config.org_id or '-'} refresh={args.refresh}s",
    )

    controller = Controller(build_model(args), logger)

    try:
        # curses.wrapper switches to the alternate screen and restores
        # the terminal however run_app exits
        curses.wrapper(run_app, controller, client, logger)
    except KeyboardInterrupt:
        # Ctrl+C before raw mode was set up
        logger.info("cli", "interrupted")
    finally:
        client.close()

    sys.exit(0)


# Standard Python idiom: only run main() if this file is executed directly
if __name__ == "__main__":
    main()
