"""Utility functions for mockstream."""

from mockstream.utils.io import (
    iter_bytes,
    read_exactly,
    read_line,
    read_to_end,
    write_all,
)

__all__ = [
    "iter_bytes",
    "read_exactly",
    "read_line",
    "read_to_end",
    "write_all",
]
