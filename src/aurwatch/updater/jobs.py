"""Turn an asynchronous remote build into a synchronous result."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from aurwatch.errors import JobFailedError, JobInfoError
from aurwatch.providers.base import BuildJob, BuildProvider, JobState

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


async def wait_for_job(
    provider: BuildProvider,
    job_id: str,
    *,
    interval_s: float,
    sleep: Sleep = asyncio.sleep,
) -> BuildJob:
    """Poll ``job_id`` every ``interval_s`` seconds until it is terminal.

    Returns the job on success. Raises JobFailedError for failed or
    cancelled jobs and JobInfoError when a poll itself fails.
    """
    job = BuildJob(job_id=job_id)
    while True:
        try:
            job.state = await provider.poll(job_id)
        except JobInfoError:
            raise
        except Exception as exc:
            raise JobInfoError(f"job {job_id} info failed: {exc}") from exc
        logger.debug("Job %s is %s", job_id, job.state.value)
        if job.state is JobState.SUCCEEDED:
            return job
        if job.state.is_terminal:
            raise JobFailedError(f"job {job_id} ended {job.state.value}")
        await sleep(interval_s)
