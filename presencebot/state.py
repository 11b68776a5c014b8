from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PlayerStatus(Enum):
    """Canonical online status, whichever source reported it."""
    OFFLINE = "offline"
    ONLINE = "online"
    IDLE = "idle"
    DO_NOT_DISTURB = "dnd"
    INVISIBLE = "invisible"
    UNKNOWN = "unknown"


class ChangeKind(Enum):
    NO_CHANGE = "no_change"
    STATUS_CHANGED = "status_changed"
    GAME_CHANGED = "game_changed"
    BOTH = "both"


class SupervisorPhase(Enum):
    """Watcher supervisor phase definitions for the state machine"""
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    RESTARTING = "restarting"


@dataclass(frozen=True)
class PlayerState:
    status: PlayerStatus = PlayerStatus.OFFLINE
    current_game: Optional[str] = None


def classify_change(old: PlayerState, status: PlayerStatus, game: Optional[str]) -> ChangeKind:
    status_changed = old.status != status
    game_changed = old.current_game != game
    if status_changed and game_changed:
        return ChangeKind.BOTH
    if status_changed:
        return ChangeKind.STATUS_CHANGED
    if game_changed:
        return ChangeKind.GAME_CHANGED
    return ChangeKind.NO_CHANGE


class SharedPlayerState:
    """Last known status and game of the watched player.

    Shared by the Steam poller and the presence handler. Every write goes
    through ``compare_and_update`` or ``update_if_game_changed`` so the
    decision and the mutation happen in the same critical section.
    """

    def __init__(self, initial: Optional[PlayerState] = None) -> None:
        self._state = initial or PlayerState()
        self._lock = asyncio.Lock()

    async def read(self) -> PlayerState:
        async with self._lock:
            return self._state

    async def compare_and_update(self, status: PlayerStatus, game: Optional[str]) -> ChangeKind:
        return await self.update_if_game_changed(status, game, force=True)

    async def update_if_game_changed(
        self, status: PlayerStatus, game: Optional[str], force: bool = False
    ) -> ChangeKind:
        """Commit ``(status, game)`` only when the game differs from the tracked one.

        With ``force`` the game check is skipped and any change is committed.
        """
        game = game or None
        async with self._lock:
            if not force and game == self._state.current_game:
                return ChangeKind.NO_CHANGE
            change = classify_change(self._state, status, game)
            if change is not ChangeKind.NO_CHANGE:
                self._state = PlayerState(status=status, current_game=game)
            return change
