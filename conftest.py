"""Pytest configuration and shared fakes.

Fixtures:
    - locale: English localization bundle used by all message assertions
    - sink: in-memory message sink recording every delivery
    - dispatcher: NotificationDispatcher writing to ``sink``
    - player_state: fresh SharedPlayerState (offline, no game)
"""

import asyncio

import pytest

from presencebot.api import MatchData, PlayerSummary
from presencebot.http import ApiError
from presencebot.localization import Localization
from presencebot.notifier import NotificationDispatcher
from presencebot.state import SharedPlayerState

OUTPUT_CHANNEL = 555
TARGET_GUILD = 111
TARGET_USER = 222

LOCALE_DATA = {
    "bot_activity": "Keeping an eye on things",
    "plays": "playing",
    "won": "won",
    "lost": "lost",
    "played_on": "Played on",
    "with_score": "Score",
    "match_duration": "Match lasted",
    "minutes": "minutes",
    "target_name": "Player",
    "offline": "is now offline",
    "idle": "is now idle",
    "invisible": "is now invisible",
    "online": "is now online",
    "donotdisturb": "does not want to be disturbed",
    "unknown": "is in an unknown state",
    "on_steam": "on Steam",
    "from_mobile": "from phone",
    "from_web": "from browser",
    "from_desktop": "",
}


class FakeSink:
    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, channel_id, text, tts=False):
        await asyncio.sleep(0)
        if self.fail:
            raise RuntimeError("channel unavailable")
        self.sent.append((channel_id, text, tts))

    @property
    def texts(self):
        return [text for _, text, _ in self.sent]


class FakeSteamClient:
    """Returns queued summaries; an Exception instance in the queue is raised."""

    def __init__(self, *summaries):
        self.summaries = list(summaries)
        self.calls = 0

    async def get_player_summary(self, steamid64):
        self.calls += 1
        await asyncio.sleep(0)
        item = self.summaries.pop(0) if len(self.summaries) > 1 else self.summaries[0]
        if isinstance(item, Exception):
            raise item
        return item


class FakeOpenDota:
    base_url = "https://opendota.test/api"

    def __init__(self, matches=None, heroes=None):
        self.matches = matches if matches is not None else []
        self.heroes = heroes if heroes is not None else {1: "Anti-Mage", 2: "Axe"}
        self.fail_heroes = False
        self.fail_matches = False
        self.hero_calls = 0

    async def get_heroes(self):
        self.hero_calls += 1
        await asyncio.sleep(0)
        if self.fail_heroes:
            raise ApiError("/heroes", "HTTP 502", 502)
        return dict(self.heroes)

    async def get_recent_matches(self, account_id):
        await asyncio.sleep(0)
        if self.fail_matches:
            raise ApiError("/recentMatches", "HTTP 502", 502)
        return list(self.matches)


def make_match(match_id=1000, player_slot=2, radiant_win=True, hero_id=2,
               duration=754, kills=10, deaths=2, assists=7):
    return MatchData(
        match_id=match_id,
        player_slot=player_slot,
        radiant_win=radiant_win,
        hero_id=hero_id,
        duration=duration,
        kills=kills,
        deaths=deaths,
        assists=assists,
    )


def summary(persona_state, game=None):
    return PlayerSummary(persona_state=persona_state, current_game=game)


@pytest.fixture
def locale():
    return Localization.from_dict(dict(LOCALE_DATA))


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def dispatcher(sink):
    return NotificationDispatcher(sink, OUTPUT_CHANNEL)


@pytest.fixture
def player_state():
    return SharedPlayerState()
