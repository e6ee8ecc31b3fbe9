import curses
import logging
import sqlite3
import time
from pathlib import Path
from unittest import mock

import pytest

from filewatch import cli
from filewatch.view import SCROLL_BOTTOM, App


@pytest.fixture
def restore_logger():
    logger = logging.getLogger(cli.PACKAGE_LOGGER)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def test_parse_args_files_and_debug_output():
    args = cli.parse_args(["a.log", "b.log", "-o", "debug.log"])
    assert args.files == ["a.log", "b.log"]
    assert args.debug_output == Path("debug.log")


def test_parse_args_long_option_and_default():
    assert cli.parse_args(["a.log"]).debug_output is None
    args = cli.parse_args(["--debug-output", "out.log", "a.log"])
    assert args.debug_output == Path("out.log")
    assert args.files == ["a.log"]


def test_parse_args_requires_files():
    with pytest.raises(SystemExit):
        cli.parse_args([])


def test_configure_logging_writes_to_file(tmp_path, restore_logger):
    target = tmp_path / "debug.log"
    target.write_text("earlier\n", encoding="utf-8")
    handler = cli.configure_logging(target)
    logging.getLogger("filewatch.sample").debug("a debug message")
    handler.flush()
    content = target.read_text(encoding="utf-8")
    assert content.startswith("earlier\n")
    assert "Debug logging enabled to file" in content
    assert "a debug message" in content
    assert "[DEBUG]" in content


def test_configure_logging_off_silences_package(restore_logger):
    handler = cli.configure_logging(None)
    assert restore_logger.handlers == [handler]
    assert not restore_logger.isEnabledFor(logging.CRITICAL)
    assert restore_logger.propagate is False


def test_configure_logging_replaces_previous_handler(tmp_path, restore_logger):
    cli.configure_logging(tmp_path / "one.log")
    second = cli.configure_logging(None)
    assert restore_logger.handlers == [second]


def test_database_path_is_timestamp_in_directory(tmp_path):
    before = time.time_ns() // 1_000_000
    path = cli.database_path(tmp_path)
    after = time.time_ns() // 1_000_000
    assert path.parent == tmp_path
    assert path.suffix == ".db3"
    assert before <= int(path.stem) <= after


def test_database_path_default_directory():
    assert cli.database_path().parent == Path("db")


def test_handle_key_quit():
    app = App()
    assert cli.handle_key(app, ord("q")) is False
    assert cli.handle_key(app, "q") is False


def test_handle_key_go_to_bottom():
    app = App()
    assert cli.handle_key(app, "g") is True
    assert app.vertical_scroll_pos == SCROLL_BOTTOM


@pytest.mark.parametrize("key", [ord("j"), "j", curses.KEY_DOWN])
def test_handle_key_scroll_down(key):
    app = App()
    assert cli.handle_key(app, key) is True
    assert app.vertical_scroll_pos == 1


@pytest.mark.parametrize("key", [ord("k"), curses.KEY_UP])
def test_handle_key_scroll_up_saturates(key):
    app = App()
    app.set_scroll(3)
    cli.handle_key(app, key)
    assert app.vertical_scroll_pos == 2
    app.set_scroll(0)
    cli.handle_key(app, key)
    assert app.vertical_scroll_pos == 0


def test_handle_key_pages_by_view_height():
    app = App()
    app.logs_view_state.height = 5
    cli.handle_key(app, curses.KEY_NPAGE)
    assert app.vertical_scroll_pos == 5
    cli.handle_key(app, curses.KEY_NPAGE)
    cli.handle_key(app, curses.KEY_PPAGE)
    assert app.vertical_scroll_pos == 5


def test_handle_key_unknown_is_ignored():
    app = App()
    app.set_scroll(4)
    assert cli.handle_key(app, ord("x")) is True
    assert app.vertical_scroll_pos == 4


class FakeScreen:
    def __init__(self, wanted):
        self.wanted = wanted
        self.frames = []
        self.current = []
        self.calls = 0

    def getmaxyx(self):
        return (10, 40)

    def erase(self):
        self.current = []

    def addnstr(self, y, x, text, limit, attr=0):
        self.current.append(text[:limit])

    def refresh(self):
        self.frames.append(list(self.current))

    def timeout(self, ms):
        assert ms >= 0

    def getch(self):
        self.calls += 1
        drawn = any(self.wanted in row for frame in self.frames for row in frame)
        if drawn or self.calls > 250:
            return ord("q")
        time.sleep(0.02)
        return -1


def test_main_collects_lines_into_database(tmp_path, monkeypatch, restore_logger):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "db").mkdir()
    watched = tmp_path / "app.log"
    watched.write_text("hello\n\nworld\n", encoding="utf-8")
    screen = FakeScreen(" > world")

    with mock.patch.object(
        cli.curses, "wrapper", side_effect=lambda fn, *a: fn(screen, *a)
    ):
        assert cli.main([str(watched)]) == 0

    drawn = [row for frame in screen.frames for row in frame]
    assert " > hello" in drawn
    assert " > world" in drawn

    databases = list((tmp_path / "db").glob("*.db3"))
    assert len(databases) == 1
    with sqlite3.connect(databases[0]) as conn:
        rows = conn.execute("SELECT file_id, message FROM log ORDER BY id").fetchall()
    assert rows == [(str(watched), "hello"), (str(watched), "world")]


def test_main_fails_without_database_directory(tmp_path, monkeypatch, restore_logger):
    monkeypatch.chdir(tmp_path)
    watched = tmp_path / "app.log"
    watched.write_text("line\n", encoding="utf-8")
    with pytest.raises(sqlite3.OperationalError):
        cli.main([str(watched)])