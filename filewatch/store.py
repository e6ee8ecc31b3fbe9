"""SQLite storage of collected log lines."""

from __future__ import annotations

import logging
import os
import sqlite3
from typing import Iterable, Mapping, Sequence, Union

log = logging.getLogger(__name__)

DEFAULT_TAG = " >"

_CREATE = (
    "CREATE TABLE log ( id INTEGER PRIMARY KEY, "
    "file_id TEXT NOT NULL, message TEXT NOT NULL )"
)
_INSERT = "INSERT INTO log (file_id, message) VALUES (?, ?)"
_SELECT = "SELECT file_id, message FROM log ORDER BY id"


def get_file_tags(file_names: Sequence[str]) -> dict[str, str]:
    """Map each file to the prefix its lines are shown with.

    A single file gets the plain prefix; several files are tagged by name.
    """
    names = list(file_names)
    if not names:
        raise ValueError("at least one file name is required")
    if len(names) == 1:
        return {names[0]: DEFAULT_TAG}
    return {name: name for name in names}


class LogStore:
    """A fresh database holding every line read from the watched files."""

    def __init__(self, path: Union[str, "os.PathLike[str]"]) -> None:
        self.path = path
        self._conn = sqlite3.connect(path)
        try:
            self._conn.execute(_CREATE)
            self._conn.commit()
        except sqlite3.Error:
            self._conn.close()
            raise

    def __enter__(self) -> "LogStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def insert(self, file_id: str, lines: Iterable[str]) -> int:
        """Store lines for a file; return how many were stored."""
        stored = 0
        for line in lines:
            try:
                self._conn.execute(_INSERT, (file_id, line))
            except sqlite3.Error as err:
                log.error("Failed to insert to database: %s", err)
                continue
            stored += 1
        self._conn.commit()
        return stored

    def formatted_lines(self, tags: Mapping[str, str]) -> list[str]:
        """Every stored line, in arrival order, prefixed by its file's tag."""
        return [
            f"{tags.get(file_id, DEFAULT_TAG)} {message}"
            for file_id, message in self._conn.execute(_SELECT)
        ]

    def close(self) -> None:
        self._conn.close()