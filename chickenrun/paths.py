"""Locating data files that ship next to the running program."""

from __future__ import annotations

import functools
import os
import sys


@functools.lru_cache(maxsize=None)
def executable_dir() -> str:
    """Return the directory holding the running program, or "" if unknown.

    The result is cached for the life of the process.
    """
    program = sys.argv[0] if sys.argv else ""
    if not program:
        return ""
    return os.path.dirname(os.path.realpath(program))


def data_path(suffix: str) -> str:
    """Return ``suffix`` joined onto the directory of the running program."""
    return executable_dir() + "/" + suffix