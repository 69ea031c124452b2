"""Git provider backed by the ``git`` command line."""

from __future__ import annotations

import asyncio
import subprocess
from pathlib import Path

import httpx

from aurwatch.errors import GitError


def with_credentials(url: str, username: str, token: str) -> str:
    """Embed HTTPS credentials into a clone URL; other URLs pass through."""
    if not token:
        return url
    parsed = httpx.URL(url)
    if parsed.scheme not in ("http", "https"):
        return url
    return str(parsed.copy_with(username=username or "git", password=token))


def custom_repo_url(base_url: str, user: str, name: str) -> str:
    return f"{base_url.rstrip('/')}/{user}/{name}"


class SubprocessGitProvider:
    def __init__(
        self,
        *,
        token: str = "",
        author_name: str = "aurwatch",
        author_email: str = "aurwatch@localhost",
        timeout_s: float = 120.0,
    ) -> None:
        self._token = token
        self._author_name = author_name
        self._author_email = author_email
        self._timeout_s = timeout_s

    def _redact(self, text: str) -> str:
        if self._token:
            return text.replace(self._token, "***")
        return text

    def _git(self, args: list[str], cwd: Path | None = None) -> str:
        try:
            proc = subprocess.run(
                ["git", *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self._timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise GitError(f"git {args[0]} timed out", retryable=True) from exc
        except OSError as exc:
            raise GitError(f"git unavailable: {exc}") from exc
        if proc.returncode != 0:
            detail = self._redact(proc.stderr.strip() or proc.stdout.strip())
            raise GitError(f"git {args[0]} failed: {detail or proc.returncode}")
        return proc.stdout

    def clone_sync(self, url: str, dest: Path) -> None:
        self._git(["clone", "--depth", "1", url, str(dest)])

    def commit_and_push_sync(self, repo: Path, message: str) -> None:
        self._git(["add", "-A"], cwd=repo)
        if not self._git(["status", "--porcelain"], cwd=repo).strip():
            raise GitError("nothing to commit")
        self._git(
            [
                "-c",
                f"user.name={self._author_name}",
                "-c",
                f"user.email={self._author_email}",
                "commit",
                "-m",
                message,
            ],
            cwd=repo,
        )
        self._git(["push"], cwd=repo)

    async def clone(self, url: str, dest: Path) -> None:
        await asyncio.to_thread(self.clone_sync, url, dest)

    async def commit_and_push(self, repo: Path, message: str) -> None:
        await asyncio.to_thread(self.commit_and_push_sync, repo, message)
