"""Regenerate ``.SRCINFO`` with makepkg."""

from __future__ import annotations

import asyncio
import subprocess
from pathlib import Path

from aurwatch.errors import BuildToolError


class MakepkgSrcinfo:
    def __init__(self, timeout_s: float = 120.0) -> None:
        self._timeout_s = timeout_s

    def refresh_srcinfo_sync(self, repo: Path) -> None:
        try:
            proc = subprocess.run(
                ["makepkg", "--printsrcinfo"],
                cwd=repo,
                capture_output=True,
                text=True,
                timeout=self._timeout_s,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise BuildToolError(f"makepkg --printsrcinfo failed: {exc}") from exc
        if proc.returncode != 0:
            detail = proc.stderr.strip() or f"exit {proc.returncode}"
            raise BuildToolError(f"makepkg --printsrcinfo failed: {detail}")
        (repo / ".SRCINFO").write_text(proc.stdout)

    async def refresh_srcinfo(self, repo: Path) -> None:
        await asyncio.to_thread(self.refresh_srcinfo_sync, repo)
