"""Refresh cycles: discovery plus bounded concurrent package pipelines."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from aurwatch.channels.base import Notifier, NullNotifier
from aurwatch.logging import bind_context
from aurwatch.packages.pkginfo import discover_packages
from aurwatch.packages.types import LocalPackageInfo
from aurwatch.providers.base import MetadataReader, VersionOracle
from aurwatch.updater.orchestrator import PackageUpdater, UpdateOutcome

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CycleReport:
    outcomes: dict[str, UpdateOutcome] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def updated(self) -> list[str]:
        return sorted(
            name for name, outcome in self.outcomes.items() if outcome is UpdateOutcome.UPDATED
        )


class RefreshRunner:
    """Runs one pipeline per discovered package, at most ``max_concurrent`` at a time."""

    def __init__(
        self,
        updater: PackageUpdater,
        *,
        repo_dir: Path,
        reader: MetadataReader,
        oracle: VersionOracle,
        notifier: Notifier | None = None,
        max_concurrent: int = 10,
    ) -> None:
        self._updater = updater
        self._repo_dir = repo_dir
        self._reader = reader
        self._oracle = oracle
        self._notifier = notifier or NullNotifier()
        self._max_concurrent = max(1, max_concurrent)
        self._shutdown = asyncio.Event()

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    async def run_cycle(self) -> CycleReport:
        packages = await asyncio.to_thread(
            discover_packages, self._repo_dir, self._reader, self._oracle
        )
        logger.info("Discovered %d packages in %s", len(packages), self._repo_dir)
        report = CycleReport()
        semaphore = asyncio.Semaphore(self._max_concurrent)
        tasks = [
            asyncio.create_task(self._execute(semaphore, package, report))
            for package in packages
        ]
        await asyncio.gather(*tasks)
        logger.info(
            "Refresh cycle done: %d updated, %d failed, %d checked",
            len(report.updated),
            len(report.failures),
            len(packages),
        )
        return report

    async def _execute(
        self,
        semaphore: asyncio.Semaphore,
        package: LocalPackageInfo,
        report: CycleReport,
    ) -> None:
        async with semaphore:
            # Each task runs in a copied context, so this binding stays local.
            bind_context(package=package.name)
            try:
                report.outcomes[package.name] = await self._updater.handle_package(package)
            except Exception as exc:
                logger.exception("Update of %s failed", package.name)
                report.failures[package.name] = str(exc)
                await self._notifier.notify(f"Update of {package.name} failed: {exc}")

    async def run(self, interval_seconds: float) -> None:
        """Run cycles back to back, ``interval_seconds`` apart, until shutdown."""
        interval = max(1.0, float(interval_seconds))
        while not self._shutdown.is_set():
            try:
                await self.run_cycle()
            except OSError:
                logger.exception("Package discovery failed in %s", self._repo_dir)
            try:
                await asyncio.wait_for(self._shutdown.wait(), timeout=interval)
            except TimeoutError:
                continue

    async def shutdown(self) -> None:
        self._shutdown.set()
