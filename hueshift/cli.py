"""Command-line front door for hueshift.

Parses CLI options, loads config and saved state, and either runs one
non-interactive action (``--list``, ``--apply``) or opens the picker.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .catalog import flatten_unique
from .config import load_config
from .notify import StatusNotifier
from .persistence import JsonStateStore
from .runtime import run_picker
from .runtime.app import build_session
from .search import best_match
from .session import PickerOptions, PickerSession
from .ui_theme import available_theme_names

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_file: Path | None, verbose: bool) -> None:
    """Send logs to ``log_file`` only; the terminal belongs to the picker."""
    root = logging.getLogger("hueshift")
    if log_file is None:
        root.addHandler(logging.NullHandler())
        root.propagate = False
        return
    logging.basicConfig(
        filename=str(log_file),
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


def resolve_theme_name(session: PickerSession, query: str) -> str | None:
    """Return ``query`` when installed, else the best fuzzy match among installed styles."""
    if session.availability.is_available(query):
        return query
    installed = session.catalog_provider.current(restrict_to_configured=False)
    return best_match(flatten_unique(installed), query)


def list_themes(session: PickerSession, options: PickerOptions) -> str:
    """Return the picker list as plain text, one line per row."""
    session.open(options)
    lines = [line.text for line in session.view.lines]
    session.debouncer.cancel_all()
    return "\n".join(lines) + "\n"


def apply_theme(session: PickerSession, notifier: StatusNotifier, query: str) -> int:
    name = resolve_theme_name(session, query)
    if name is None:
        sys.stderr.write(f"hueshift: no theme matches {query!r}\n")
        return 1
    if not session.select(name):
        sys.stderr.write(f"hueshift: {notifier.message}\n")
        return 1
    sys.stdout.write(name + "\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hueshift",
        description="Pick, preview and bookmark Pygments color themes from the terminal.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config JSON.")
    parser.add_argument("--state", type=Path, default=None, help="Path to saved state JSON.")
    parser.add_argument("--profile", default=None, help="Profile whose bookmarks and quick slots to use.")
    parser.add_argument(
        "--other",
        action="store_true",
        help="Also list installed styles that the configured catalog leaves out.",
    )
    parser.add_argument("--list", action="store_true", help="Print the theme list and exit.")
    parser.add_argument("--apply", metavar="NAME", default=None, help="Apply a theme (fuzzy matched) and exit.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and run the requested action.

    Returns the process exit status; the interactive picker prints the
    active theme name on exit so shells can capture it.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.verbose)

    config = load_config(args.config)
    if args.profile:
        config = config.with_profile(args.profile)
    store = JsonStateStore(args.state)
    options = PickerOptions(restrict_to_configured=not args.other)

    if args.list or args.apply is not None:
        notifier = StatusNotifier()
        session = build_session(config, store, notifier)
        if args.list:
            sys.stdout.write(list_themes(session, options))
            return 0
        return apply_theme(session, notifier, args.apply)

    if not (os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())):
        sys.stderr.write("hueshift: the picker needs a terminal; use --list or --apply\n")
        return 2

    result = run_picker(config, store, options, ui_theme=args.theme, no_color=args.no_color)
    if result.current:
        sys.stdout.write(result.current + "\n")
    return 0
