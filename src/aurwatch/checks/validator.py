"""Content validation of an upstream package tree against the custom tree.

Content is guilty until proven to be a change to a known-safe declaration
field. Every remote file is classified by its bytes; declaration files are
normalized and line-diffed, binaries are compared by hash.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterator
from dataclasses import dataclass, field
from difflib import SequenceMatcher
from enum import Enum
from itertools import zip_longest
from pathlib import Path

from aurwatch.checks.content import (
    ContentClass,
    classify_media_type,
    content_hash,
    sniff_media_type,
)
from aurwatch.checks.normalize import normalize_declaration
from aurwatch.checks.policy import check_added_line
from aurwatch.checks.walker import walk_tree

logger = logging.getLogger(__name__)

SYMLINK_MEDIA_TYPE = "inode/symlink"


class ChangeTag(Enum):
    REMOVED = "-"
    UNCHANGED = " "
    ADDED = "+"


@dataclass(slots=True, frozen=True)
class LineChange:
    tag: ChangeTag
    text: str
    other: str | None = None


@dataclass(slots=True)
class ValidationVerdict:
    ok: bool
    reason: str
    added_lines: int = 0


@dataclass(slots=True)
class FileReport:
    rel_path: Path
    media_type: str
    content_class: ContentClass
    changed: bool
    added_lines: int = 0
    reason: str | None = None
    changes: list[LineChange] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.reason is None


def line_diff(left: str, right: str) -> list[LineChange]:
    left_lines = left.splitlines()
    right_lines = right.splitlines()
    matcher = SequenceMatcher(None, left_lines, right_lines, autojunk=False)
    changes: list[LineChange] = []
    for op, i1, i2, j1, j2 in matcher.get_opcodes():
        if op == "equal":
            changes.extend(
                LineChange(ChangeTag.UNCHANGED, a, b)
                for a, b in zip(left_lines[i1:i2], right_lines[j1:j2])
            )
            continue
        if op in ("delete", "replace"):
            changes.extend(LineChange(ChangeTag.REMOVED, line) for line in left_lines[i1:i2])
        if op in ("insert", "replace"):
            changes.extend(LineChange(ChangeTag.ADDED, line) for line in right_lines[j1:j2])
    return changes


def render_changes(changes: list[LineChange]) -> str:
    return "\n".join(f"{change.tag.value}{change.text}" for change in changes)


def _diff_symlink(local: Path | None, remote: Path, rel_path: Path) -> FileReport:
    target = os.readlink(remote)
    unchanged = local is not None and local.is_symlink() and os.readlink(local) == target
    return FileReport(
        rel_path=rel_path,
        media_type=SYMLINK_MEDIA_TYPE,
        content_class=ContentClass.OPAQUE_BINARY,
        changed=not unchanged,
        reason=None if unchanged else f"symbolic link changed: {rel_path} -> {target}",
    )


def diff_file(local: Path | None, remote: Path, rel_path: Path) -> FileReport:
    """Compare one file pair. ``local`` is None for a file only upstream has."""
    if remote.is_symlink():
        return _diff_symlink(local, remote, rel_path)
    remote_bytes = remote.read_bytes()
    local_bytes = local.read_bytes() if local is not None else b""
    media_type = sniff_media_type(remote_bytes)
    content_class = classify_media_type(media_type)
    report = FileReport(
        rel_path=rel_path,
        media_type=media_type,
        content_class=content_class,
        changed=False,
    )

    if content_class is ContentClass.TEXTUAL_DECLARATION:
        changes = line_diff(
            normalize_declaration(local_bytes.decode("utf-8", errors="replace")),
            normalize_declaration(remote_bytes.decode("utf-8")),
        )
        report.changes = changes
        for change in changes:
            if change.tag is ChangeTag.UNCHANGED:
                continue
            report.changed = True
            if change.tag is ChangeTag.ADDED:
                report.added_lines += 1
                if report.reason is None:
                    report.reason = check_added_line(change.text)
        return report

    report.changed = local is None or content_hash(local_bytes) != content_hash(remote_bytes)
    if report.changed and content_class is ContentClass.OPAQUE_BINARY:
        report.reason = f"binary content changed: {rel_path} ({media_type})"
    return report


def iter_file_reports(
    local_root: str | os.PathLike[str],
    remote_root: str | os.PathLike[str],
) -> Iterator[FileReport]:
    """Walk both trees in lock-step and report every remote file.

    Remote entries past the end of the local walk are new files and are
    compared against empty content. Local entries without a remote
    counterpart are ignored; the directory differ is responsible for them.
    """
    for left, right in zip_longest(walk_tree(local_root), walk_tree(remote_root), fillvalue=None):
        if right is None:
            break
        if right.is_dir or (left is not None and left.is_dir):
            continue
        if left is None:
            yield diff_file(None, right.path, right.rel_path)
            continue
        if left.rel_path != right.rel_path:
            yield FileReport(
                rel_path=right.rel_path,
                media_type="",
                content_class=ContentClass.OPAQUE_BINARY,
                changed=True,
                reason=f"unaligned trees: {left.rel_path} vs {right.rel_path}",
            )
            return
        yield diff_file(left.path, right.path, right.rel_path)


def validate_trees(
    local_root: str | os.PathLike[str],
    remote_root: str | os.PathLike[str],
) -> ValidationVerdict:
    added_total = 0
    for report in iter_file_reports(local_root, remote_root):
        logger.debug(
            "Checked %s as %s (changed=%s added=%d)",
            report.rel_path,
            report.media_type,
            report.changed,
            report.added_lines,
        )
        if report.reason is not None:
            logger.info("Rejected %s: %s", report.rel_path, report.reason)
            return ValidationVerdict(ok=False, reason=report.reason, added_lines=added_total)
        added_total += report.added_lines

    if added_total == 0:
        return ValidationVerdict(ok=False, reason="no change detected")
    return ValidationVerdict(ok=True, reason="validated", added_lines=added_total)


def apply_changes(
    local_root: str | os.PathLike[str],
    remote_root: str | os.PathLike[str],
) -> list[Path]:
    """Copy every remote file over its local counterpart; return the copied paths."""
    base = Path(local_root)
    copied: list[Path] = []
    for entry in walk_tree(remote_root):
        target = base / entry.rel_path
        if entry.is_dir:
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.is_symlink():
            target.unlink()
        shutil.copy(entry.path, target, follow_symlinks=False)
        copied.append(entry.rel_path)
    return copied
