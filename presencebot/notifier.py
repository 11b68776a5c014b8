from __future__ import annotations

import asyncio
from typing import Optional, Protocol

import discord

from .config import logger


class MessageSink(Protocol):
    async def send(self, channel_id: int, text: str, tts: bool = False) -> None: ...


class DiscordChannelSink:
    """Delivers text to a Discord channel through the bot's connection."""

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    async def send(self, channel_id: int, text: str, tts: bool = False) -> None:
        channel = self._client.get_channel(channel_id)
        if channel is None:
            channel = await self._client.fetch_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            raise RuntimeError(f"Channel {channel_id} cannot receive messages")
        await channel.send(text, tts=tts)


class NotificationDispatcher:
    """Sends notifications to the output channel and remembers the last text sent.

    Delivery is best effort: failures are logged and dropped, never retried.
    """

    def __init__(self, sink: MessageSink, channel_id: int) -> None:
        self._sink = sink
        self._channel_id = channel_id
        self._last: Optional[str] = None
        self._lock = asyncio.Lock()

    async def last_notification(self) -> Optional[str]:
        async with self._lock:
            return self._last

    async def _deliver(self, text: str, tts: bool) -> bool:
        try:
            await self._sink.send(self._channel_id, text, tts)
            return True
        except Exception as e:
            logger.error(f"Error sending message to channel {self._channel_id}: {e}")
            return False

    async def send(self, text: str, tts: bool = False) -> bool:
        """Send unconditionally; on success the text becomes the last notification."""
        if not await self._deliver(text, tts):
            return False
        async with self._lock:
            self._last = text
        return True

    async def send_unique(self, text: str, tts: bool = False) -> bool:
        """Send unless ``text`` equals the last notification.

        The text is claimed before the network call, so a racing caller with
        the same text sees it as already sent. The claim is released if
        delivery fails.
        """
        async with self._lock:
            if text == self._last:
                logger.debug("Duplicate notification suppressed")
                return False
            previous, self._last = self._last, text

        if await self._deliver(text, tts):
            return True

        async with self._lock:
            if self._last == text:
                self._last = previous
        return False
