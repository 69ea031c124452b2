"""Deterministic directory traversal shared by the differ and the validator."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

IGNORED_DIRS = frozenset({".git"})
IGNORED_FILES = frozenset({".gitignore", ".SRCINFO"})


@dataclass(slots=True, frozen=True)
class TreeEntry:
    path: Path
    rel_path: Path
    depth: int
    is_dir: bool
    name: str


def is_ignored(name: str, is_dir: bool) -> bool:
    """Version-control metadata and derived marker files never take part in a diff."""
    if is_dir:
        return name in IGNORED_DIRS
    return name in IGNORED_FILES


def walk_tree(root: str | os.PathLike[str]) -> Iterator[TreeEntry]:
    """Yield every non-ignored entry below ``root`` depth-first, siblings sorted by name.

    The root itself is not yielded; its children have depth 1. A missing or
    unreadable root raises ``OSError`` on the first ``next()``.
    """
    base = Path(root)
    yield from _walk(base, base, 1)


def _walk(base: Path, directory: Path, depth: int) -> Iterator[TreeEntry]:
    with os.scandir(directory) as it:
        children = sorted(it, key=lambda entry: entry.name)
    for child in children:
        is_dir = child.is_dir(follow_symlinks=False)
        if is_ignored(child.name, is_dir):
            continue
        path = Path(child.path)
        yield TreeEntry(
            path=path,
            rel_path=path.relative_to(base),
            depth=depth,
            is_dir=is_dir,
            name=child.name,
        )
        if is_dir:
            yield from _walk(base, path, depth + 1)
