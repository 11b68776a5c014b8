from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import discord

from .config import logger
from .formatting import fmt_presence
from .localization import Localization
from .notifier import NotificationDispatcher
from .state import ChangeKind, PlayerStatus, SharedPlayerState


# Device preference when a per-device status is present
DEVICE_ORDER = ("mobile", "web", "desktop")

DISCORD_STATUSES = {
    discord.Status.online: PlayerStatus.ONLINE,
    discord.Status.idle: PlayerStatus.IDLE,
    discord.Status.dnd: PlayerStatus.DO_NOT_DISTURB,
    discord.Status.offline: PlayerStatus.OFFLINE,
    discord.Status.invisible: PlayerStatus.INVISIBLE,
}


def status_from_discord(status: Any) -> PlayerStatus:
    return DISCORD_STATUSES.get(status, PlayerStatus.UNKNOWN)


@dataclass(frozen=True)
class ActivityInfo:
    name: str
    is_custom: bool = False
    details: Optional[str] = None
    large_text: Optional[str] = None
    small_text: Optional[str] = None

    @classmethod
    def from_discord(cls, activity: Any) -> "ActivityInfo":
        if getattr(activity, "type", None) is discord.ActivityType.custom:
            # The free text of a custom status lives in ``state`` (``name`` mirrors it)
            text = getattr(activity, "state", None) or getattr(activity, "name", None)
            return cls(name=getattr(activity, "name", None) or "", is_custom=True, details=text)
        return cls(
            name=getattr(activity, "name", None) or "",
            details=getattr(activity, "details", None),
            large_text=getattr(activity, "large_image_text", None),
            small_text=getattr(activity, "small_image_text", None),
        )


@dataclass(frozen=True)
class PresenceUpdate:
    """A gateway presence event, reduced to what the handler needs."""
    guild_id: Optional[int]
    user_id: int
    status: PlayerStatus
    devices: Dict[str, PlayerStatus] = field(default_factory=dict)
    activities: Sequence[ActivityInfo] = ()

    @classmethod
    def from_member(cls, member: discord.Member) -> "PresenceUpdate":
        # Discord omits offline devices from client_status
        device_statuses = {
            "mobile": member.mobile_status,
            "web": member.web_status,
            "desktop": member.desktop_status,
        }
        devices = {
            device: status_from_discord(status)
            for device, status in device_statuses.items()
            if status is not discord.Status.offline
        }
        guild = getattr(member, "guild", None)
        return cls(
            guild_id=guild.id if guild is not None else None,
            user_id=member.id,
            status=status_from_discord(member.status),
            devices=devices,
            activities=tuple(ActivityInfo.from_discord(a) for a in member.activities),
        )


def resolve_status(update: PresenceUpdate) -> Tuple[PlayerStatus, Optional[str]]:
    """Pick the status to report and the device it came from."""
    for device in DEVICE_ORDER:
        if device in update.devices:
            return update.devices[device], device
    return update.status, None


def pick_activity(activities: Sequence[ActivityInfo]) -> Optional[ActivityInfo]:
    """First real activity; a custom status only when nothing else is going on."""
    for activity in activities:
        if not activity.is_custom:
            return activity
    return activities[0] if activities else None


def describe_activity(activity: Optional[ActivityInfo]) -> Tuple[Optional[str], List[str]]:
    """Return the game label and the secondary lines for an activity."""
    if activity is None:
        return None, []
    if activity.is_custom:
        return (activity.details or "").strip() or None, []
    lines = [
        text.strip()
        for text in (activity.details, activity.large_text, activity.small_text)
        if text and text.strip()
    ]
    return activity.name.strip() or None, lines


class PresenceEventHandler:
    """Turns gateway presence updates for the watched user into notifications."""

    def __init__(
        self,
        guild_id: int,
        user_id: int,
        state: SharedPlayerState,
        dispatcher: NotificationDispatcher,
        locale: Localization,
    ) -> None:
        self.guild_id = guild_id
        self.user_id = user_id
        self.state = state
        self.dispatcher = dispatcher
        self.locale = locale
        # Nothing announced from the gateway yet; the first event may be status-only
        self._announced = False

    def is_target(self, update: PresenceUpdate) -> bool:
        return update.guild_id == self.guild_id and update.user_id == self.user_id

    async def handle(self, update: PresenceUpdate) -> bool:
        """Process one presence event. Returns True if a notification went out."""
        if not self.is_target(update):
            return False

        status, device = resolve_status(update)
        game, details = describe_activity(pick_activity(update.activities))

        change = await self.state.update_if_game_changed(status, game, force=not self._announced)
        if change is ChangeKind.NO_CHANGE:
            logger.debug(f"Presence game unchanged for {self.user_id}: {status.value}, game={game!r}")
            return False

        logger.info(f"Presence change ({change.value}): {status.value} via {device or 'default'}, game={game!r}")
        text = fmt_presence(self.locale, status, device, game, details)
        sent = await self.dispatcher.send_unique(text, tts=game is not None)
        if sent:
            self._announced = True
        return sent
