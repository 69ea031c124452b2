"""Normalization of declaration files before line diffing.

Reformatting alone must never register as a content change, and several
statements sharing one physical line must be diffed independently. A
statement that leaves a quote open continues on the following lines, the
same way the shell reads it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

_ARRAY_ASSIGNMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*\+?=\(")
_BLANKS = re.compile(r"[ \t]+")
# A "#" only starts a comment at the beginning of a word.
_WORD_BREAKS = " \t;()|&<>"
ANSI_C_QUOTE = "$'"


@dataclass(slots=True)
class ShellScan:
    """Quoting state of a shell fragment after reading it left to right."""

    unquoted: list[tuple[int, str]] = field(default_factory=list)
    quote: str = ""
    escaped: bool = False
    depth: int = 0
    comment_at: int | None = None

    @property
    def open(self) -> bool:
        return bool(self.quote) or self.escaped

    @property
    def balanced(self) -> bool:
        return not self.open and self.depth == 0


def scan_shell(line: str) -> ShellScan:
    scan = ShellScan()
    for index, char in enumerate(line):
        if scan.escaped:
            scan.escaped = False
            continue
        if scan.quote == "'":
            if char == "'":
                scan.quote = ""
            continue
        if scan.quote:
            # Double quotes and $'...' both honour backslash escapes.
            if char == "\\":
                scan.escaped = True
            elif char == scan.quote[-1]:
                scan.quote = ""
            continue
        if char == "\\":
            scan.escaped = True
            continue
        if char == "'":
            after_dollar = bool(scan.unquoted) and scan.unquoted[-1] == (index - 1, "$")
            scan.quote = ANSI_C_QUOTE if after_dollar else char
            continue
        if char == '"':
            scan.quote = char
            continue
        if char == "#" and (index == 0 or line[index - 1] in _WORD_BREAKS):
            scan.comment_at = index
            break
        if char == "(":
            scan.depth += 1
        elif char == ")":
            scan.depth -= 1
        scan.unquoted.append((index, char))
    return scan


def iter_unquoted(line: str) -> Iterator[tuple[int, str]]:
    """Yield ``(index, char)`` for characters outside shell quoting.

    Escaped characters are skipped and scanning stops at an unquoted ``#``
    that starts a comment.
    """
    yield from scan_shell(line).unquoted


def paren_delta(line: str) -> int:
    return scan_shell(line).depth


def is_balanced(line: str) -> bool:
    """True when ``line`` closes every quote and parenthesis it opens."""
    return scan_shell(line).balanced


def _is_skippable(line: str) -> bool:
    return not line or line.startswith("#")


def _continues(statement: str) -> bool:
    scan = scan_shell(statement)
    if scan.open:
        return True
    return scan.depth > 0 and _ARRAY_ASSIGNMENT.match(statement) is not None


def _split_unquoted(line: str) -> Iterator[str]:
    start = 0
    for index, char in iter_unquoted(line):
        if char == ";":
            piece = line[start : index + 1].strip()
            if not _is_skippable(piece):
                yield piece
            start = index + 1
    rest = line[start:].strip()
    if not _is_skippable(rest):
        yield rest


def _extend(buffer: str, line: str) -> str | None:
    """Append a physical line to an unfinished statement.

    Returns None when the line carries nothing for the statement.
    """
    scan = scan_shell(buffer)
    if scan.quote:
        return f"{buffer} {line}" if line else None
    if scan.escaped:
        return buffer[:-1] + line
    if _is_skippable(line):
        return None
    if scan.comment_at is not None:
        buffer = buffer[: scan.comment_at].rstrip()
    return f"{buffer} {line}"


def iter_statements(lines: Iterable[str]) -> Iterator[str]:
    """Yield one stripped, blank-collapsed statement per logical shell line.

    Blank lines and full-line comments are dropped, ``;`` splits statements
    outside quotes, and multi-line arrays or strings are joined into one
    statement. A statement still open at end of input is yielded as is.
    """
    buffer: str | None = None
    for raw in lines:
        line = _BLANKS.sub(" ", raw.strip())
        if buffer is not None:
            extended = _extend(buffer, line)
            if extended is None:
                continue
            buffer = extended
            if not _continues(buffer):
                yield buffer
                buffer = None
            continue
        if _is_skippable(line):
            continue
        pieces = list(_split_unquoted(line))
        yield from pieces[:-1]
        if pieces and _continues(pieces[-1]):
            buffer = pieces[-1]
        elif pieces:
            yield pieces[-1]
    if buffer is not None:
        yield buffer


def normalize_declaration(text: str) -> str:
    lines = list(iter_statements(text.splitlines()))
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
