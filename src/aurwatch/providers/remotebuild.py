"""RemoteBuild job API client.

Jobs build an AUR package on a remote builder which uploads the result to a
DManager instance; the upload target travels with the job arguments.
"""

from __future__ import annotations

from typing import Any

import httpx

from aurwatch.errors import JobInfoError, JobSubmissionError
from aurwatch.providers.base import JobState

_STATE_ALIASES: dict[str, JobState] = {
    "pending": JobState.PENDING,
    "waiting": JobState.PENDING,
    "queued": JobState.PENDING,
    "running": JobState.RUNNING,
    "building": JobState.RUNNING,
    "uploading": JobState.RUNNING,
    "done": JobState.SUCCEEDED,
    "success": JobState.SUCCEEDED,
    "succeeded": JobState.SUCCEEDED,
    "failed": JobState.FAILED,
    "error": JobState.FAILED,
    "cancelled": JobState.CANCELLED,
    "canceled": JobState.CANCELLED,
}


def parse_job_state(value: object) -> JobState:
    if not isinstance(value, str):
        raise JobInfoError(f"job status missing or malformed: {value!r}")
    state = _STATE_ALIASES.get(value.strip().lower())
    if state is None:
        raise JobInfoError(f"unknown job status: {value}")
    return state


class RemoteBuildClient:
    def __init__(
        self,
        base_url: str,
        *,
        username: str,
        token: str,
        dmanager_url: str = "",
        dmanager_user: str = "",
        dmanager_token: str = "",
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._username = username
        self._token = token
        self._dmanager = {
            "url": dmanager_url,
            "user": dmanager_user,
            "token": dmanager_token,
        }
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "X-Username": self._username,
            "User-Agent": "aurwatch/0.1",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout_seconds,
            transport=self._transport,
            headers=self._headers(),
        )

    async def submit(self, name: str) -> str:
        body: dict[str, Any] = {
            "type": "aur",
            "args": {"pkgName": name},
            "upload": {"type": "dmanager", **self._dmanager},
        }
        try:
            async with self._client() as client:
                response = await client.post(f"{self.base_url}/job/create/aur", json=body)
                response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise JobSubmissionError(f"build submission for {name} failed: {exc}") from exc
        job_id = payload.get("id") if isinstance(payload, dict) else None
        if job_id is None or str(job_id) == "":
            raise JobSubmissionError(f"build submission for {name} returned no job id")
        return str(job_id)

    async def poll(self, job_id: str) -> JobState:
        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/job/info", params={"id": job_id})
                response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise JobInfoError(f"job {job_id} info failed: {exc}") from exc
        if not isinstance(payload, dict):
            raise JobInfoError(f"job {job_id} info is not an object")
        return parse_job_state(payload.get("status"))
