"""Collaborator contracts consumed by the update pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from aurwatch.packages.types import LocalPackageInfo, RemotePackageInfo


class JobState(Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset({JobState.SUCCEEDED, JobState.FAILED, JobState.CANCELLED})


@dataclass(slots=True)
class BuildJob:
    job_id: str
    state: JobState = JobState.PENDING


class MetadataReader(Protocol):
    def read(self, path: Path) -> LocalPackageInfo: ...


class RemoteLookup(Protocol):
    async def lookup(self, name: str) -> list[RemotePackageInfo]: ...


class VersionOracle(Protocol):
    def compare(self, local: str, remote: str) -> int: ...


class GitProvider(Protocol):
    async def clone(self, url: str, dest: Path) -> None: ...

    async def commit_and_push(self, repo: Path, message: str) -> None: ...


class BuildTool(Protocol):
    async def refresh_srcinfo(self, repo: Path) -> None: ...


class BuildProvider(Protocol):
    async def submit(self, name: str) -> str: ...

    async def poll(self, job_id: str) -> JobState: ...
