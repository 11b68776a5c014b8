from __future__ import annotations

import asyncio
from typing import Optional, Tuple

from .api import OpenDotaClient, SteamClient
from .config import STEAM_POLL_SECS, MATCH_POLL_SECS, logger
from .formatting import fmt_match_result, fmt_steam_status
from .heroes import HeroCatalog
from .http import ApiAuthError, ApiError
from .localization import Localization
from .notifier import NotificationDispatcher
from .state import ChangeKind, PlayerState, PlayerStatus, SharedPlayerState


# Steam personastate codes. Anything not listed reads as offline.
PERSONA_STATES = {
    0: PlayerStatus.OFFLINE,
    1: PlayerStatus.ONLINE,
    2: PlayerStatus.DO_NOT_DISTURB,  # busy
    3: PlayerStatus.IDLE,            # away
    4: PlayerStatus.IDLE,            # snooze
    5: PlayerStatus.ONLINE,          # looking to trade
    6: PlayerStatus.ONLINE,          # looking to play
}

# Consecutive offline reads needed before Steam may flip a non-offline status
OFFLINE_CONFIRMATIONS = 2


def status_from_persona_state(code: int) -> PlayerStatus:
    return PERSONA_STATES.get(code, PlayerStatus.OFFLINE)


class Poller:
    """A timer-driven loop stopped through an ``asyncio.Event``.

    The stop event is only checked between ticks and after each fetch; an
    in-flight request is never interrupted, its result is just dropped.
    """

    name = "poller"

    def __init__(self, interval: float) -> None:
        self.interval = interval

    async def tick(self, stop_event: asyncio.Event) -> None:
        raise NotImplementedError

    async def run(self, stop_event: asyncio.Event) -> None:
        logger.info(f"Started {self.name} loop (every {self.interval}s)")
        try:
            while not stop_event.is_set():
                try:
                    await self.tick(stop_event)
                except Exception as e:
                    logger.error(f"{self.name} error: {e}")

                # Wait for next poll or stop event
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    pass
        finally:
            logger.info(f"{self.name} loop stopped")


class SteamPoller(Poller):
    """Polls Steam player summaries and announces status or game changes."""

    name = "steam"

    def __init__(
        self,
        client: SteamClient,
        steamid64: int,
        state: SharedPlayerState,
        dispatcher: NotificationDispatcher,
        locale: Localization,
        interval: float = STEAM_POLL_SECS,
    ) -> None:
        super().__init__(interval)
        self.client = client
        self.steamid64 = steamid64
        self.state = state
        self.dispatcher = dispatcher
        self.locale = locale
        self._offline_reads = 0

    def filter_reading(
        self, tracked: PlayerState, status: PlayerStatus, game: Optional[str]
    ) -> Tuple[PlayerStatus, Optional[str]]:
        """Drop the parts of a Steam reading that are too unreliable to act on."""
        # Steam reports no game while away or briefly between sessions
        if not game and tracked.current_game:
            game = tracked.current_game

        if status is PlayerStatus.OFFLINE and tracked.status is not PlayerStatus.OFFLINE:
            self._offline_reads += 1
            if self._offline_reads < OFFLINE_CONFIRMATIONS:
                logger.debug(f"Holding back unconfirmed Steam offline read ({self._offline_reads}/{OFFLINE_CONFIRMATIONS})")
                status = tracked.status
        else:
            self._offline_reads = 0

        # an offline player is not playing anything
        if status is PlayerStatus.OFFLINE:
            game = None

        return status, game

    async def tick(self, stop_event: asyncio.Event) -> None:
        try:
            summary = await self.client.get_player_summary(self.steamid64)
        except ApiAuthError as e:
            logger.error(f"Steam rejected the API key: {e}")
            return
        except ApiError as e:
            logger.warning(f"Couldn't fetch Steam summary: {e}")
            return

        if stop_event.is_set():
            logger.debug("Steam poller stopped during fetch, discarding result")
            return
        if summary is None:
            logger.warning(f"Steam returned no summary for {self.steamid64}")
            return

        tracked = await self.state.read()
        status, game = self.filter_reading(
            tracked, status_from_persona_state(summary.persona_state), summary.current_game
        )

        change = await self.state.compare_and_update(status, game)
        if change is ChangeKind.NO_CHANGE:
            return

        logger.info(f"Steam change ({change.value}): {status.value}, game={game!r}")
        await self.dispatcher.send_unique(fmt_steam_status(self.locale, status, game))


class MatchPoller(Poller):
    """Polls recent Dota matches and announces each newly finished one."""

    name = "matches"

    def __init__(
        self,
        client: OpenDotaClient,
        heroes: HeroCatalog,
        account_id: int,
        dispatcher: NotificationDispatcher,
        locale: Localization,
        interval: float = MATCH_POLL_SECS,
    ) -> None:
        super().__init__(interval)
        self.client = client
        self.heroes = heroes
        self.account_id = account_id
        self.dispatcher = dispatcher
        self.locale = locale
        # None until the first successful poll seeds it
        self.last_match_id: Optional[int] = None

    @property
    def seeded(self) -> bool:
        return self.last_match_id is not None

    async def tick(self, stop_event: asyncio.Event) -> None:
        try:
            heroes = await self.heroes.get()
        except ApiError as e:
            logger.warning(f"Error fetching heroes: {e}")
            return

        try:
            matches = await self.client.get_recent_matches(self.account_id)
        except ApiError as e:
            logger.warning(f"Couldn't fetch matches: {e}")
            return

        if stop_event.is_set():
            logger.debug("Match poller stopped during fetch, discarding result")
            return
        if not matches:
            logger.warning("Empty matches list")
            return

        last = matches[0]
        if not self.seeded:
            self.last_match_id = last.match_id
            logger.info(f"Match cursor seeded at {last.match_id}")
            return
        if last.match_id == self.last_match_id:
            return
        self.last_match_id = last.match_id

        hero = heroes.get(last.hero_id)
        if hero is None:
            logger.error(f"Hero {last.hero_id} missing from catalog (match {last.match_id})")

        logger.info(f"New match {last.match_id} for {self.account_id}")
        await self.dispatcher.send(fmt_match_result(self.locale, last, hero), tts=True)
