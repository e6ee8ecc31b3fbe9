# filewatch

A small terminal tool that follows several log files at once and shows their
lines together in one scrollable pager.

Each watched file is read from the start. New lines are picked up as the file
grows, and empty lines are skipped. If a file gets shorter, the line
`filewatch: File truncated to position N` is added to the stream. Every line
goes into a fresh SQLite database under `./db/`, and the pager shows the lines
in the order they arrived.

## Installation

```
pip install .
```

## Usage

```
filewatch FILE [FILE ...] [-o DEBUG_LOG]
```

- `FILE`: one or more files to watch. At least one is required.
- `-o`, `--debug-output`: append debug logging to the given file. Without
  this option the package logs nothing, so the pager has the whole terminal.

The `./db/` directory must already exist in the current working directory.
Each run creates a new database there, named `<milliseconds since the epoch>.db3`.

With a single file, every line starts with ` >`. With several files, every
line starts with the name of the file it came from, as it was given on the
command line.

### Keys

| Key                | Action                                  |
|--------------------|-----------------------------------------|
| `q`                | quit                                    |
| `g`                | jump to the bottom and follow new lines |
| `j` / Down         | scroll down one row                     |
| `k` / Up           | scroll up one row                       |
| PageDown / PageUp  | scroll by one page                      |

Long lines wrap to the terminal width, and scrolling counts wrapped rows. The
scroll position is kept so that the last page is full whenever possible. While
the view is at the bottom, it stays there as new lines arrive. The bottom row
of the screen shows `filewatch` followed by the number of the first visible
row.

## Using the modules

The pieces behind the command can be used on their own:

- `filewatch.watcher`: `FileTailer(path, sink)` reads a file with
  `read_existing()` and new content with `handle_change()`, passing each
  batch to `sink` as a `LogsMessage(file_id, lines)`. `watch_file(path, sink,
  stop_event)` does the same on every file-system change until the event is
  set. `read_lines(handle, start, end)` returns the non-empty lines of a
  binary file from `start` on.
- `filewatch.store`: `LogStore(path)` creates the `log` table in a new SQLite
  database; `insert(file_id, lines)` stores lines and
  `formatted_lines(tags)` returns them prefixed by their file's tag.
  `get_file_tags(file_names)` builds those tags.
- `filewatch.view`: `App` holds the lines and scroll position and draws onto a
  curses window with `render(screen)`; `render_rows(width, height)` returns
  the visible rows as strings. `locate_scroll_position(logs, width, height,
  scroll_y)` finds where a page starts.

## Limitations

- The `./db/` directory is not created; if it is missing, the command fails.
- Databases from earlier runs are never read again; each run starts from the
  beginning of every file.
- There is no search or filtering of lines, and no colour per file.
- The pager uses curses, so it needs a POSIX terminal.

## Development

```
pip install -e .[test]
pytest
```