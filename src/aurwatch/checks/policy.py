"""Allow-list policy for added declaration lines.

The allow-list is the most security-sensitive data in aurwatch. Review it
whenever the upstream PKGBUILD format gains new fields.
"""

from __future__ import annotations

import re

from aurwatch.checks.normalize import is_balanced, iter_unquoted

# PKGBUILD variables whose value may change without human review.
ALLOWED_CHANGES = frozenset(
    {
        "license",
        "pkgver",
        "pkgrel",
        "pkgdesc",
        "arch",
        "sha256sums",
        "sha512sums",
        "md5sums",
        "b2sums",
        "optdepends",
        "validpgpkeys",
        "conflicts",
        "sha256sums_armv7h",
        "sha256sums_aarch64",
        "sha256sums_x86_64",
        "depends",
        "_pkgname",
    }
)

# Maintainer-defined helper variables use this prefix.
CUSTOM_VARIABLE_PREFIX = "_"

_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_SUBSTITUTIONS = ("$(", "`")
# Unquoted, these chain, pipe or redirect into another command.
_CONTROL_CHARS = frozenset(";&|<>")


def assignment_name(line: str) -> str | None:
    if "=" not in line:
        return None
    name = line.split("=", 1)[0]
    return name if _NAME.match(name) else None


def is_allowed_name(name: str) -> bool:
    return name in ALLOWED_CHANGES or name.startswith(CUSTOM_VARIABLE_PREFIX)


def _trailing_command(value: str) -> bool:
    depth = 0
    for index, char in iter_unquoted(value):
        if char in _CONTROL_CHARS:
            return True
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char in " \t" and depth <= 0:
            # A trailing comment is not a command.
            return not value[index:].lstrip().startswith("#")
    return False


def check_added_line(line: str) -> str | None:
    """Return a rejection reason for an added line, or None when it is allowed."""
    name = assignment_name(line)
    if name is None:
        return f"non-assignment change: {line!r}"
    if not is_allowed_name(name):
        return f"variable {name!r} may not change"
    value = line.split("=", 1)[1].rstrip(";").strip()
    if any(token in value for token in _SUBSTITUTIONS):
        return f"command substitution in {name!r}"
    if not is_balanced(value):
        return f"unbalanced quoting in {name!r}"
    if _trailing_command(value):
        return f"command after assignment to {name!r}"
    return None
