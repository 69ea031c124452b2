"""Per-package update pipeline.

One call to :meth:`PackageUpdater.handle_package` takes a locally built
package from "maybe outdated" to either a finished update (validated,
applied, built remotely, committed and pushed) or one of the quiet outcomes
in :class:`UpdateOutcome`. Every failure after the workspace exists is an
exception and leaves the workspace in place, which blocks later cycles from
retrying the package until an operator removes it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from aurwatch.channels.base import Notifier, NullNotifier
from aurwatch.checks.dir_diff import Site, compare_dirs
from aurwatch.checks.validator import apply_changes, validate_trees
from aurwatch.errors import DifferentDirsError, JobSubmissionError
from aurwatch.packages.types import LocalPackageInfo, RemotePackageInfo
from aurwatch.providers.base import (
    BuildProvider,
    BuildTool,
    GitProvider,
    RemoteLookup,
    VersionOracle,
)
from aurwatch.updater.jobs import Sleep, wait_for_job
from aurwatch.updater.workspace import ScratchWorkspace

logger = logging.getLogger(__name__)

UrlFor = Callable[[str], str]


class UpdateOutcome(Enum):
    NOT_FOUND = "not_found"
    UP_TO_DATE = "up_to_date"
    IN_FLIGHT = "in_flight"
    REJECTED = "rejected"
    UPDATED = "updated"


def commit_message(local: LocalPackageInfo, remote: RemotePackageInfo) -> str:
    lines = [f"Update {local.name} {local.version} -> {remote.version}"]
    if remote.maintainer:
        lines.extend(["", f"Upstream maintainer: {remote.maintainer}"])
    return "\n".join(lines)


class PackageUpdater:
    def __init__(
        self,
        *,
        tmp_dir: Path,
        lookup: RemoteLookup,
        oracle: VersionOracle,
        git: GitProvider,
        build_tool: BuildTool,
        builder: BuildProvider,
        custom_url: UrlFor,
        upstream_url: UrlFor,
        notifier: Notifier | None = None,
        poll_interval_s: float = 60.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._tmp_dir = tmp_dir
        self._lookup = lookup
        self._oracle = oracle
        self._git = git
        self._build_tool = build_tool
        self._builder = builder
        self._custom_url = custom_url
        self._upstream_url = upstream_url
        self._notifier = notifier or NullNotifier()
        self._poll_interval_s = poll_interval_s
        self._sleep = sleep

    def workspace_for(self, name: str) -> ScratchWorkspace:
        return ScratchWorkspace.for_package(self._tmp_dir, name)

    async def handle_package(self, local: LocalPackageInfo) -> UpdateOutcome:
        results = await self._lookup.lookup(local.name)
        if not results:
            logger.debug("No upstream package named %s", local.name)
            return UpdateOutcome.NOT_FOUND
        remote = results[0]
        if self._oracle.compare(local.version, remote.version) >= 0:
            logger.debug("%s %s is up to date", local.name, local.version)
            return UpdateOutcome.UP_TO_DATE
        logger.info("Upstream has %s %s (local %s)", local.name, remote.version, local.version)
        return await self.update_package(local, remote)

    async def update_package(
        self, local: LocalPackageInfo, remote: RemotePackageInfo
    ) -> UpdateOutcome:
        name = local.name
        workspace = self.workspace_for(name)
        if not workspace.acquire():
            logger.info("Update of %s already in progress at %s", name, workspace.root)
            return UpdateOutcome.IN_FLIGHT

        await self._git.clone(self._custom_url(name), workspace.custom)
        await self._git.clone(self._upstream_url(name), workspace.upstream)

        site = compare_dirs(workspace.custom, workspace.upstream)
        if site is not None and site is not Site.RIGHT:
            raise DifferentDirsError(f"{name}: package trees diverge ({site.value} side)")

        verdict = validate_trees(workspace.custom, workspace.upstream)
        if not verdict.ok:
            logger.warning("Rejected update of %s to %s: %s", name, remote.version, verdict.reason)
            return UpdateOutcome.REJECTED

        changed = apply_changes(workspace.custom, workspace.upstream)
        logger.info("Applied %d upstream files to %s", len(changed), name)
        await self._build_tool.refresh_srcinfo(workspace.custom)

        try:
            job_id = await self._builder.submit(name)
        except JobSubmissionError:
            raise
        except Exception as exc:
            raise JobSubmissionError(f"{name}: build submission failed: {exc}") from exc
        logger.info("Submitted build job %s for %s", job_id, name)
        await wait_for_job(
            self._builder, job_id, interval_s=self._poll_interval_s, sleep=self._sleep
        )

        await self._git.commit_and_push(workspace.custom, commit_message(local, remote))
        await self._notifier.notify(f"Updated {name} {local.version} -> {remote.version}")
        workspace.release()
        logger.info("Updated %s to %s", name, remote.version)
        return UpdateOutcome.UPDATED
