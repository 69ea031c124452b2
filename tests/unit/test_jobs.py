from __future__ import annotations

import pytest

from aurwatch.errors import JobFailedError, JobInfoError
from aurwatch.providers.base import JobState
from aurwatch.updater.jobs import wait_for_job


class _ScriptedProvider:
    def __init__(self, states: list[JobState | Exception]) -> None:
        self._states = list(states)
        self.polls = 0

    async def submit(self, name: str) -> str:
        return f"job-{name}"

    async def poll(self, job_id: str) -> JobState:
        self.polls += 1
        state = self._states.pop(0)
        if isinstance(state, Exception):
            raise state
        return state


class _Sleeps:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.mark.asyncio
async def test_wait_succeeds_after_non_terminal_polls() -> None:
    provider = _ScriptedProvider([JobState.PENDING, JobState.RUNNING, JobState.SUCCEEDED])
    sleeps = _Sleeps()
    job = await wait_for_job(provider, "42", interval_s=5.0, sleep=sleeps)
    assert job.job_id == "42"
    assert job.state is JobState.SUCCEEDED
    assert provider.polls == 3
    assert sleeps.calls == [5.0, 5.0]


@pytest.mark.asyncio
async def test_failed_job_raises() -> None:
    provider = _ScriptedProvider([JobState.RUNNING, JobState.FAILED])
    sleeps = _Sleeps()
    with pytest.raises(JobFailedError, match="failed"):
        await wait_for_job(provider, "42", interval_s=1.0, sleep=sleeps)
    assert sleeps.calls == [1.0]


@pytest.mark.asyncio
async def test_cancelled_job_raises() -> None:
    provider = _ScriptedProvider([JobState.CANCELLED])
    with pytest.raises(JobFailedError, match="cancelled"):
        await wait_for_job(provider, "42", interval_s=1.0, sleep=_Sleeps())


@pytest.mark.asyncio
async def test_poll_errors_abort_the_wait() -> None:
    provider = _ScriptedProvider([JobState.RUNNING, JobInfoError("status endpoint down")])
    with pytest.raises(JobInfoError, match="status endpoint down"):
        await wait_for_job(provider, "42", interval_s=1.0, sleep=_Sleeps())


@pytest.mark.asyncio
async def test_os_errors_become_job_info_errors() -> None:
    provider = _ScriptedProvider([ConnectionResetError("reset")])
    with pytest.raises(JobInfoError):
        await wait_for_job(provider, "42", interval_s=1.0, sleep=_Sleeps())


@pytest.mark.asyncio
async def test_unexpected_poll_errors_become_job_info_errors() -> None:
    provider = _ScriptedProvider([ValueError("bad status payload")])
    with pytest.raises(JobInfoError, match="bad status payload"):
        await wait_for_job(provider, "42", interval_s=1.0, sleep=_Sleeps())
