"""Package identity types."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class LocalPackageInfo:
    name: str
    version: str
    path: Path | None = None

    def __post_init__(self) -> None:
        if not self.name.strip() or not self.version.strip():
            raise ValueError("package name and version must be non-empty")


@dataclass(slots=True, frozen=True)
class RemotePackageInfo:
    name: str
    version: str
    description: str = ""
    maintainer: str = ""
    url_path: str = ""
    last_modified: int = 0
