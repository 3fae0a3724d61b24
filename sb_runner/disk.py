"""On-disk footprint measurement."""

from __future__ import annotations

import os
from pathlib import Path


def dir_size(path: Path) -> int:
    """Return the total size in bytes of regular files under ``path``.

    Symlinks are not followed. Errors propagate as OSError.
    """
    total = 0
    with os.scandir(path) as entries:
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                total += dir_size(Path(entry.path))
            elif entry.is_file(follow_symlinks=False):
                total += entry.stat(follow_symlinks=False).st_size
    return total
