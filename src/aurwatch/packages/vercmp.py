"""Pure-Python port of pacman's ``vercmp`` ordering.

Versions have the form ``[epoch:]version[-release]``. Epochs compare first,
then versions, then releases when both sides carry one. Segments are runs of
digits or letters; numeric segments beat alphabetic ones and longer
separators win.
"""

from __future__ import annotations


def _parse_evr(evr: str) -> tuple[str, str, str | None]:
    index = 0
    while index < len(evr) and evr[index].isdigit():
        index += 1
    if index < len(evr) and evr[index] == ":":
        epoch = evr[:index] or "0"
        rest = evr[index + 1 :]
    else:
        epoch = "0"
        rest = evr
    version, sep, release = rest.rpartition("-")
    if not sep:
        return epoch, rest, None
    return epoch, version, release


def _isalnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def _isalpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _isdigit(char: str) -> bool:
    return char.isascii() and char.isdigit()


def rpmvercmp(a: str, b: str) -> int:
    if a == b:
        return 0
    # one/two mark segment starts; p1/p2 scan ahead.
    one = p1 = 0
    two = p2 = 0
    len_a, len_b = len(a), len(b)

    while p1 < len_a and p2 < len_b:
        while p1 < len_a and not _isalnum(a[p1]):
            p1 += 1
        while p2 < len_b and not _isalnum(b[p2]):
            p2 += 1
        if p1 >= len_a or p2 >= len_b:
            break
        if (p1 - one) != (p2 - two):
            return -1 if (p1 - one) < (p2 - two) else 1

        one, two = p1, p2
        if _isdigit(a[p1]):
            while p1 < len_a and _isdigit(a[p1]):
                p1 += 1
            while p2 < len_b and _isdigit(b[p2]):
                p2 += 1
            isnum = True
        else:
            while p1 < len_a and _isalpha(a[p1]):
                p1 += 1
            while p2 < len_b and _isalpha(b[p2]):
                p2 += 1
            isnum = False

        seg_a = a[one:p1]
        seg_b = b[two:p2]
        if not seg_a:
            return -1
        if not seg_b:
            return 1 if isnum else -1
        if isnum:
            seg_a = seg_a.lstrip("0")
            seg_b = seg_b.lstrip("0")
            if len(seg_a) != len(seg_b):
                return 1 if len(seg_a) > len(seg_b) else -1
        if seg_a != seg_b:
            return -1 if seg_a < seg_b else 1
        one, two = p1, p2

    rest_a = a[p1:]
    rest_b = b[p2:]
    if not rest_a and not rest_b:
        return 0
    if (not rest_a and not _isalpha(rest_b[0])) or (rest_a and _isalpha(rest_a[0])):
        return -1
    return 1


def vercmp(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` is older than, equal to or newer than ``b``."""
    if a == b:
        return 0
    epoch_a, version_a, release_a = _parse_evr(a)
    epoch_b, version_b, release_b = _parse_evr(b)
    result = rpmvercmp(epoch_a, epoch_b)
    if result == 0:
        result = rpmvercmp(version_a, version_b)
        if result == 0 and release_a is not None and release_b is not None:
            result = rpmvercmp(release_a, release_b)
    return result


class AlpmVersionOracle:
    def compare(self, local: str, remote: str) -> int:
        return vercmp(local, remote)
