"""Telegram notifier using the Bot API."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)


class TelegramNotifier:
    def __init__(
        self,
        token: str,
        chat_id: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._chat_id = chat_id
        self._transport = transport

    @property
    def url(self) -> str:
        return f"https://api.telegram.org/bot{self._token}/sendMessage"

    async def send_text(self, text: str) -> int:
        """Send ``text`` to the configured chat and return the last HTTP status.

        Long messages are chunked to stay within the 4096 character limit
        imposed by the Telegram Bot API.
        """
        last_status = 200
        async with httpx.AsyncClient(timeout=20, transport=self._transport) as client:
            for chunk in _chunk_text(text, max_len=4096):
                response = await client.post(
                    self.url, json={"chat_id": self._chat_id, "text": chunk}
                )
                last_status = response.status_code
                if last_status >= 400:
                    break
        return last_status

    async def notify(self, text: str) -> None:
        try:
            status = await self.send_text(text)
        except httpx.HTTPError as exc:
            logger.warning("Telegram notification failed: %s", exc)
            return
        if status >= 400:
            logger.warning("Telegram notification rejected with HTTP %d", status)


def _chunk_text(text: str, max_len: int = 4096) -> list[str]:
    """Split text into chunks of at most ``max_len`` characters."""
    if len(text) <= max_len:
        return [text]
    chunks: list[str] = []
    while text:
        chunks.append(text[:max_len])
        text = text[max_len:]
    return chunks
