"""Recursive ownership normalization for clone directories."""

from __future__ import annotations

import os
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


def chown_tree(path: Path, uid: int, gid: int) -> int:
    """Give ``path`` and everything below it to ``uid:gid``.

    Symlinks are re-owned themselves and never followed. Returns the number
    of entries touched.

    Raises
    ------
    OSError
        If any entry cannot be re-owned.

    """
    os.chown(path, uid, gid, follow_symlinks=False)
    touched = 1
    for dirpath, dirnames, filenames in path.walk():
        for name in (*dirnames, *filenames):
            os.chown(dirpath / name, uid, gid, follow_symlinks=False)
            touched += 1
    return touched
