"""Per-package scratch workspace whose existence is the update lock."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

CUSTOM_DIR = "custom"
UPSTREAM_DIR = "aur"


@dataclass(slots=True, frozen=True)
class ScratchWorkspace:
    root: Path
    custom: Path
    upstream: Path

    @classmethod
    def for_package(cls, tmp_dir: Path, name: str) -> ScratchWorkspace:
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise ValueError(f"unsafe package name for workspace: {name!r}")
        root = tmp_dir / name
        return cls(root=root, custom=root / CUSTOM_DIR, upstream=root / UPSTREAM_DIR)

    def acquire(self) -> bool:
        """Create the workspace. False means another attempt already owns it.

        ``mkdir`` without ``exist_ok`` checks and creates in one step.
        """
        try:
            self.root.mkdir()
        except FileExistsError:
            return False
        self.custom.mkdir()
        self.upstream.mkdir()
        return True

    def release(self) -> None:
        shutil.rmtree(self.root)
