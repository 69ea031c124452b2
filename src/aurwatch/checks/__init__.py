"""Structural and content checks for upstream package trees."""

from aurwatch.checks.dir_diff import Site, compare_dirs
from aurwatch.checks.validator import ValidationVerdict, apply_changes, validate_trees
from aurwatch.checks.walker import TreeEntry, walk_tree

__all__ = [
    "Site",
    "TreeEntry",
    "ValidationVerdict",
    "apply_changes",
    "compare_dirs",
    "validate_trees",
    "walk_tree",
]
