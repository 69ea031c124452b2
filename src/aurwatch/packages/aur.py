"""AUR RPC v5 lookup client."""

from __future__ import annotations

from typing import Any

import httpx

from aurwatch.errors import LookupFailedError
from aurwatch.packages.types import RemotePackageInfo


class AurClient:
    def __init__(
        self,
        base_url: str = "https://aur.archlinux.org",
        *,
        timeout_seconds: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    def git_url(self, name: str) -> str:
        return f"{self.base_url}/{name}.git"

    @staticmethod
    def _parse_result(item: dict[str, Any]) -> RemotePackageInfo | None:
        name = item.get("Name")
        version = item.get("Version")
        if not isinstance(name, str) or not isinstance(version, str) or not name or not version:
            return None
        last_modified = item.get("LastModified")
        return RemotePackageInfo(
            name=name,
            version=version,
            description=str(item.get("Description") or ""),
            maintainer=str(item.get("Maintainer") or ""),
            url_path=str(item.get("URLPath") or ""),
            last_modified=last_modified if isinstance(last_modified, int) else 0,
        )

    async def lookup(self, name: str) -> list[RemotePackageInfo]:
        """Return exact-name matches for ``name``; an empty list means not found."""
        endpoint = f"{self.base_url}/rpc/v5/info"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds, transport=self._transport
            ) as client:
                response = await client.get(endpoint, params={"arg[]": name})
                response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise LookupFailedError(f"AUR lookup for {name} failed: {exc}") from exc

        if not isinstance(payload, dict):
            raise LookupFailedError("AUR response is not an object")
        if payload.get("type") == "error":
            raise LookupFailedError(f"AUR error: {payload.get('error', 'unknown')}")
        results = payload.get("results")
        if not isinstance(results, list):
            raise LookupFailedError("AUR response missing results")

        packages: list[RemotePackageInfo] = []
        for item in results:
            if not isinstance(item, dict):
                continue
            parsed = self._parse_result(item)
            if parsed is not None and parsed.name == name:
                packages.append(parsed)
        return packages
