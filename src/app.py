"""Application entry point for listblock."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from art import tprint

import settings
from adapters.feed_file import FeedPager, load_postings
from adapters.sqlite_storage import SQLiteKeyValueStore
from core.config import FilterConfig
from core.config_interface import CLEAR_CONFIRM
from core.pattern_store import PatternStore
from core.rules_engine import explain

NAME = "LISTBLOCK"
FONT = "tarty-1"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _console_handler(tui: bool) -> logging.Handler:
    if not tui:
        return logging.StreamHandler()
    # Under the TUI, records go to the Textual devtools console instead of the screen.
    from textual.logging import TextualHandler

    return TextualHandler()


def _file_handler(file_cfg: dict) -> RotatingFileHandler:
    path = file_cfg.get("path", "logs/listblock.log")
    if not os.path.isabs(path):
        path = os.path.join(settings.PROJECT_ROOT, path)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
        backupCount=int(file_cfg.get("backup_count", 5)),
        encoding="utf-8",
    )


def _configure_logging(config: dict, tui: bool = False) -> None:
    if not config.get("enabled", False):
        return

    level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
    file_cfg = config.get("file") or {}

    handlers: list[logging.Handler] = []
    if config.get("console", True):
        handlers.append(_console_handler(tui))
    if file_cfg.get("enabled", False):
        handlers.append(_file_handler(file_cfg))
    if not handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers)


def _open_storage(db_path: str) -> SQLiteKeyValueStore:
    storage = SQLiteKeyValueStore(db_path)
    storage.init_db()
    return storage


def _open_store(db_path: str, filter_config: FilterConfig) -> PatternStore:
    store = PatternStore(
        _open_storage(db_path),
        key=filter_config.storage_key,
        policy=filter_config.invalid_pattern_policy,
        alert=lambda message: print(message, file=sys.stderr),
    )
    store.load()
    return store


def _run(args: argparse.Namespace) -> int:
    _configure_logging(settings.LOGGING, tui=True)
    logger = logging.getLogger(__name__)

    feed_path = Path(args.feed or settings.FEED.path)
    postings = load_postings(feed_path)
    logger.info("Loaded %s postings from %s", len(postings), feed_path)

    from frontend.app import FeedViewerApp

    FeedViewerApp(
        filter_config=settings.FILTER,
        storage=_open_storage(args.db),
        pager=FeedPager(postings, settings.FEED.page_size),
        auto_load_seconds=args.auto_load or settings.FEED.auto_load_seconds,
    ).run()
    return 0


def _patterns(args: argparse.Namespace) -> int:
    _configure_logging(settings.LOGGING)
    store = _open_store(args.db, settings.FILTER)

    if args.action == "list":
        patterns = store.get()
        if not patterns:
            print("No patterns stored.")
        skipped = set(store.snapshot.skipped)
        for pattern in patterns:
            suffix = "  (does not compile, ignored)" if pattern in skipped else ""
            print(f"{pattern}{suffix}")
        return 0

    if args.action == "add":
        if not store.add(args.pattern):
            return 1
        print(f"Blocked: {args.pattern.strip()}")
        return 0

    if args.action == "remove":
        if not store.remove(args.pattern):
            print(f"Not stored: {args.pattern}", file=sys.stderr)
            return 1
        print(f"Unblocked: {args.pattern}")
        return 0

    if args.action == "clear":
        if not args.yes:
            answer = input(f"{CLEAR_CONFIRM} [y/N] ")
            if answer.strip().lower() not in {"y", "yes"}:
                return 1
        store.clear()
        print("All patterns removed.")
        return 0

    raise ValueError(f"Unsupported patterns action: {args.action}")


def _test(args: argparse.Namespace) -> int:
    _configure_logging(settings.LOGGING)
    store = _open_store(args.db, settings.FILTER)
    if not store.snapshot:
        print("No patterns configured.")
        return 0
    matched = explain(args.text, store.snapshot)
    if not matched:
        print("Not matched")
        return 0
    print(f"Matched {len(matched)} pattern(s):")
    for pattern in matched:
        print(f"- {pattern}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="listblock")
    parser.add_argument("--db", default=settings.DB_PATH, help="SQLite database holding the patterns")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Open the feed viewer with the filter attached")
    run_parser.add_argument("--feed", help="JSON file with postings")
    run_parser.add_argument("--auto-load", type=float, help="Append a page every N seconds")

    patterns_parser = subparsers.add_parser("patterns", help="Manage stored patterns")
    actions = patterns_parser.add_subparsers(dest="action", required=True)
    actions.add_parser("list", help="Show stored patterns")
    add_parser = actions.add_parser("add", help="Block a keyword or regex")
    add_parser.add_argument("pattern")
    remove_parser = actions.add_parser("remove", help="Unblock a stored pattern")
    remove_parser.add_argument("pattern")
    clear_parser = actions.add_parser("clear", help="Remove every pattern")
    clear_parser.add_argument("--yes", action="store_true", help="Skip the confirmation")

    test_parser = subparsers.add_parser("test", help="Show which stored patterns match a text")
    test_parser.add_argument("text")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "patterns":
        return _patterns(args)
    if args.command == "test":
        return _test(args)
    _print_banner()
    if args.command is None:
        args = parser.parse_args(["--db", args.db, "run"])
    return _run(args)


if __name__ == "__main__":
    sys.exit(main())
