"""Notifier protocol for outbound operator messages."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    """Best-effort sink for operator messages. Implementations never raise."""

    async def notify(self, text: str) -> None: ...


class NullNotifier:
    """Used when no chat channel is configured."""

    async def notify(self, text: str) -> None:
        del text
