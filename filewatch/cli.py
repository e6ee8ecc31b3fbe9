"""Command line entry point: watch files and page through their lines."""

from __future__ import annotations

import argparse
import curses
import logging
import queue
import threading
import time
from pathlib import Path
from typing import Iterator, Sequence, Union

from filewatch.store import LogStore, get_file_tags
from filewatch.view import SCROLL_BOTTOM, App
from filewatch.watcher import LogsMessage, watch_file

log = logging.getLogger(__name__)

PACKAGE_LOGGER = "filewatch"
DATABASE_DIR = "db"
TICK_SECONDS = 0.25
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse the command line; at least one file is required."""
    parser = argparse.ArgumentParser(
        prog="filewatch", description="A file watcher and log aggregator"
    )
    parser.add_argument("files", nargs="+", help="Files to watch")
    parser.add_argument(
        "-o",
        "--debug-output",
        type=Path,
        default=None,
        help="Enable debug logging to this file",
    )
    return parser.parse_args(argv)


def configure_logging(
    debug_output: Union[str, Path, None],
) -> logging.Handler:
    """Send the package's debug log to a file, or silence it entirely.

    The file is opened for appending. The installed handler is returned.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.propagate = False

    handler: logging.Handler
    if debug_output is not None:
        handler = logging.FileHandler(debug_output, mode="a", encoding="utf-8")
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler.setLevel(logging.DEBUG)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        logger.info("Debug logging enabled to file: %s", debug_output)
    else:
        handler = logging.NullHandler()
        logger.addHandler(handler)
        logger.setLevel(logging.CRITICAL + 1)
    return handler


def database_path(directory: Union[str, Path] = DATABASE_DIR) -> Path:
    """A database file in ``directory`` named by the current time in milliseconds."""
    millis = time.time_ns() // 1_000_000
    return Path(directory) / f"{millis}.db3"


def _key_code(key: Union[int, str]) -> int:
    if isinstance(key, str):
        return ord(key) if len(key) == 1 else -1
    return key


def handle_key(app: App, key: Union[int, str]) -> bool:
    """Apply a key press to the app; return False when the pager should quit."""
    code = _key_code(key)
    page_size = app.logs_view_state.height
    if code == ord("q"):
        return False
    if code == ord("g"):
        app.set_scroll(SCROLL_BOTTOM)
    elif code in (ord("j"), curses.KEY_DOWN):
        app.scroll_down(1)
    elif code in (ord("k"), curses.KEY_UP):
        app.scroll_up(1)
    elif code == curses.KEY_PPAGE:
        app.scroll_up(page_size)
    elif code == curses.KEY_NPAGE:
        app.scroll_down(page_size)
    return True


def _drain(messages: "queue.Queue[LogsMessage]") -> Iterator[LogsMessage]:
    while True:
        try:
            yield messages.get_nowait()
        except queue.Empty:
            return


def _watch(path: str, messages: "queue.Queue[LogsMessage]", stop: threading.Event) -> None:
    try:
        watch_file(path, messages.put, stop)
    except Exception as err:
        log.error("Error tailing file %s: %s", path, err)


def _pager(
    screen: "curses.window",
    store: LogStore,
    tags: dict[str, str],
    messages: "queue.Queue[LogsMessage]",
) -> None:
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    app = App()
    last_tick = time.monotonic()
    while True:
        app.render(screen)
        remaining = max(0.0, TICK_SECONDS - (time.monotonic() - last_tick))
        screen.timeout(int(remaining * 1000))
        key = screen.getch()
        if key != -1:
            log.debug("event received")
            if not handle_key(app, key):
                break
        for message in _drain(messages):
            store.insert(message.file_id, message.lines)
        app.set_log_lines(store.formatted_lines(tags))
        last_tick = time.monotonic()


def main(argv: Sequence[str] | None = None) -> int:
    """Watch the given files and show their lines in a terminal pager."""
    args = parse_args(argv)
    configure_logging(args.debug_output)

    files: list[str] = list(args.files)
    tags = get_file_tags(files)
    log.info("Watching files: %s", files)

    db_path = database_path(DATABASE_DIR)
    log.debug("Creating database at %s", db_path)
    with LogStore(db_path) as store:
        log.debug("Database opened successfully")
        messages: "queue.Queue[LogsMessage]" = queue.Queue()
        stop = threading.Event()
        threads = [
            threading.Thread(target=_watch, args=(path, messages, stop), daemon=True)
            for path in files
        ]
        for thread in threads:
            thread.start()
        try:
            curses.wrapper(_pager, store, tags, messages)
        finally:
            stop.set()
            for thread in threads:
                thread.join(timeout=2.0)
    return 0