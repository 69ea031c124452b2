"""Structural comparison of two package trees."""

from __future__ import annotations

import os
from enum import Enum
from itertools import zip_longest

from aurwatch.checks.walker import walk_tree


class Site(Enum):
    LEFT = "left"
    RIGHT = "right"
    UNKNOWN = "unknown"


def compare_dirs(
    left_root: str | os.PathLike[str],
    right_root: str | os.PathLike[str],
) -> Site | None:
    """Return None for structurally identical trees, else the divergence site.

    LEFT or RIGHT means one side has additional entries after everything else
    matched. UNKNOWN means the trees are misaligned (depth, kind or name differ
    at the same position). Stops at the first divergence.
    """
    for left, right in zip_longest(walk_tree(left_root), walk_tree(right_root), fillvalue=None):
        if right is None:
            return Site.LEFT
        if left is None:
            return Site.RIGHT
        if (
            left.depth != right.depth
            or left.is_dir != right.is_dir
            or left.name != right.name
        ):
            return Site.UNKNOWN
    return None
