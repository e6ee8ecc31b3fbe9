"""Tailing of watched files into messages of new lines."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

log = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


@dataclass
class LogsMessage:
    """A batch of lines read from one watched file."""

    file_id: str
    lines: list[str] = field(default_factory=list)


Sink = Callable[[LogsMessage], None]


def read_lines(handle: BinaryIO, start: int, end: int) -> list[str]:
    """Read the non-empty lines of a binary file from ``start`` to its end.

    Nothing is read when ``start`` lies past ``end``.
    """
    if start > end:
        log.info("will not read file, start pos (%d) > end pos (%d)", start, end)
        return []
    log.debug("Reading from position %d to %d", start, end)
    handle.seek(start)
    lines = []
    for raw in handle.read().split(b"\n"):
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        if raw:
            lines.append(raw.decode("utf-8"))
    return lines


class FileTailer:
    """Follows one file and hands each batch of new lines to a sink."""

    def __init__(self, path: PathLike, sink: Sink) -> None:
        self.path = os.fspath(path)
        self.file_id = self.path
        self._sink = sink
        self._handle: BinaryIO = open(self.path, "rb")
        self.position = 0

    def __enter__(self) -> "FileTailer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _size(self) -> int:
        return os.fstat(self._handle.fileno()).st_size

    def _send(self, message: LogsMessage) -> bool:
        try:
            self._sink(message)
        except Exception:
            log.exception("File event handler %s failed to send", self.file_id)
            return False
        return True

    def read_existing(self) -> LogsMessage:
        """Send everything already in the file."""
        size = self._size()
        message = LogsMessage(self.file_id, read_lines(self._handle, 0, size))
        self.position = size if self._send(message) else 0
        return message

    def handle_change(self) -> LogsMessage | None:
        """React to a modification; return the message sent, if any."""
        size = self._size()
        if size == self.position:
            log.debug("Ignoring event as file length = cursor position")
            return None
        if size < self.position:
            message = LogsMessage(
                self.file_id, [f"filewatch: File truncated to position {size}"]
            )
            self._send(message)
            self.position = size
            return message
        message = LogsMessage(
            self.file_id, read_lines(self._handle, self.position, size)
        )
        if self._send(message):
            self.position = size
        return message

    def close(self) -> None:
        self._handle.close()


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, tailer: FileTailer, target: str) -> None:
        super().__init__()
        self._tailer = tailer
        self._target = target
        self._lock = threading.Lock()

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        if os.path.realpath(os.fsdecode(event.src_path)) != self._target:
            log.debug("Skip Event: %r", event)
            return
        log.debug("Event: %r", event)
        with self._lock:
            self._tailer.handle_change()


def watch_file(path: PathLike, sink: Sink, stop_event: threading.Event) -> None:
    """Send the file's lines, then new lines on every change, until stopped."""
    tailer = FileTailer(path, sink)
    try:
        tailer.read_existing()
        target = os.path.realpath(tailer.path)
        observer = Observer()
        observer.schedule(
            _ChangeHandler(tailer, target),
            str(Path(target).parent),
            recursive=False,
        )
        observer.start()
        try:
            stop_event.wait()
        finally:
            observer.stop()
            observer.join()
    finally:
        tailer.close()