"""Scrollable, wrapping view over log lines."""

from __future__ import annotations

import curses
import logging
import sys
from dataclasses import dataclass
from typing import Any, Iterator, Sequence

log = logging.getLogger(__name__)

SCROLL_BOTTOM = sys.maxsize
TITLE = "filewatch"


def _line_starts(logs: Sequence[str], width: int) -> Iterator[tuple[int, int, bool]]:
    last = len(logs) - 1
    for log_idx, entry in enumerate(logs):
        count = max(1, -(-len(entry) // width))
        for line_idx in range(count):
            yield log_idx, line_idx * width, log_idx == last and line_idx == count - 1


def locate_scroll_position(
    logs: Sequence[str], width: int, height: int, scroll_y: int
) -> tuple[int, int, int, bool]:
    """Find where rendering starts for a scroll position.

    Returns ``(log_index, char_offset, actual_scroll_y, at_bottom)``, with the
    scroll clamped so that the last page is full whenever possible.
    """
    if width < 1:
        raise ValueError("width must be positive")
    target = scroll_y + height
    starts: list[tuple[int, int]] = []
    at_bottom = False
    for log_idx, offset, is_end in _line_starts(logs, width):
        at_bottom = is_end
        starts.append((log_idx, offset))
        if len(starts) == target:
            break
    actual = max(0, len(starts) - height)
    log_idx, offset = starts[actual] if actual < len(starts) else (0, 0)
    return log_idx, offset, actual, at_bottom


def _wrap(text: str, width: int) -> list[str]:
    full = len(text) // width
    rows = [text[i * width:(i + 1) * width] for i in range(full)]
    rows.append(text[full * width:])
    return rows


@dataclass
class LogsViewState:
    """What the view remembers between renders."""

    actual_scroll_y: int = 0
    was_at_bottom: bool = False
    last_log_count: int = 0
    height: int = 0


class LogsView:
    """One render of a list of log lines at a scroll position."""

    def __init__(self, logs: Sequence[str], scroll_y: int = 0) -> None:
        self.logs = list(logs)
        self.scroll_y = scroll_y

    def render_rows(self, width: int, height: int, state: LogsViewState) -> list[str]:
        """Return the visible rows and update ``state``."""
        new_logs = len(self.logs) > state.last_log_count
        scroll_y = SCROLL_BOTTOM if new_logs and state.was_at_bottom else self.scroll_y
        log.debug(
            "render: count=%d last=%d new=%s at_bottom=%s scroll_in=%d scroll=%d",
            len(self.logs), state.last_log_count, new_logs,
            state.was_at_bottom, self.scroll_y, scroll_y,
        )
        log_idx, offset, actual, at_bottom = locate_scroll_position(
            self.logs, width, height, scroll_y
        )
        state.actual_scroll_y = actual
        state.last_log_count = len(self.logs)
        state.was_at_bottom = at_bottom
        state.height = height

        rows: list[str] = []
        for entry in self.logs[log_idx:]:
            if len(rows) >= height:
                break
            rows.extend(_wrap(entry[offset:], width))
            offset = 0
        return rows[:height]


class App:
    """Scroll state and log lines of the terminal pager."""

    def __init__(self) -> None:
        self.vertical_scroll_pos = 0
        self.logs: list[str] = []
        self.logs_view_state = LogsViewState()

    def scroll_down(self, amount: int) -> None:
        self.vertical_scroll_pos = min(self.vertical_scroll_pos + amount, SCROLL_BOTTOM)

    def scroll_up(self, amount: int) -> None:
        self.vertical_scroll_pos = max(self.vertical_scroll_pos - amount, 0)

    def set_scroll(self, position: int) -> None:
        self.vertical_scroll_pos = position

    def set_log_lines(self, logs: Sequence[str]) -> None:
        self.logs = list(logs)

    def render_rows(self, width: int, height: int) -> list[str]:
        """Render the log area and settle the scroll position."""
        view = LogsView(self.logs, self.vertical_scroll_pos)
        rows = view.render_rows(width, height, self.logs_view_state)
        self.vertical_scroll_pos = self.logs_view_state.actual_scroll_y
        return rows

    def status_line(self) -> str:
        return f"{TITLE}  {self.logs_view_state.actual_scroll_y + 1}"

    @staticmethod
    def _put(screen: Any, y: int, x: int, text: str, limit: int, attr: int = 0) -> None:
        if limit <= 0:
            return
        try:
            screen.addnstr(y, x, text, limit, attr)
        except curses.error:
            # writing into the bottom-right cell moves the cursor off screen
            pass

    def render(self, screen: Any) -> None:
        """Draw the logs and the title line onto a curses window."""
        height, width = screen.getmaxyx()
        screen.erase()
        if width > 0:
            for y, row in enumerate(self.render_rows(width, max(0, height - 1))):
                self._put(screen, y, 0, row, width)
        if height > 0 and width > 0:
            bottom = height - 1
            self._put(screen, bottom, 0, TITLE, width, curses.A_UNDERLINE)
            info = f"  {self.logs_view_state.actual_scroll_y + 1}"
            self._put(screen, bottom, len(TITLE), info, width - len(TITLE), curses.A_BOLD)
        screen.refresh()