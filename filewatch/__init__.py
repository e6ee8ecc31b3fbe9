"""Follow log files, store their lines in SQLite and page through them in the terminal."""

__version__ = "0.1.0"
__all__ = ["__version__"]