from types import SimpleNamespace

import discord
import pytest

from conftest import TARGET_GUILD, TARGET_USER

from presencebot.presence import (
    ActivityInfo,
    PresenceEventHandler,
    PresenceUpdate,
    describe_activity,
    pick_activity,
    resolve_status,
)
from presencebot.state import PlayerState, PlayerStatus


@pytest.fixture
def handler(player_state, dispatcher, locale):
    return PresenceEventHandler(TARGET_GUILD, TARGET_USER, player_state, dispatcher, locale)


def update(status=PlayerStatus.ONLINE, devices=None, activities=(), guild_id=TARGET_GUILD, user_id=TARGET_USER):
    return PresenceUpdate(
        guild_id=guild_id,
        user_id=user_id,
        status=status,
        devices=devices or {},
        activities=tuple(activities),
    )


@pytest.mark.asyncio
async def test_events_for_other_subjects_are_ignored(handler, sink, player_state):
    assert not await handler.handle(update(guild_id=999))
    assert not await handler.handle(update(user_id=999))
    assert sink.sent == []
    assert await player_state.read() == PlayerState()


@pytest.mark.asyncio
async def test_mobile_idle_without_activities(handler, sink, player_state):
    assert await handler.handle(update(status=PlayerStatus.ONLINE, devices={"mobile": PlayerStatus.IDLE}))
    assert sink.sent == [(555, "Player is now idle from phone", False)]
    assert await player_state.read() == PlayerState(PlayerStatus.IDLE, None)


@pytest.mark.asyncio
async def test_repeated_events_send_only_the_first(handler, sink):
    event = update(activities=[ActivityInfo(name="Dota 2", details="Ranked")])
    for _ in range(4):
        await handler.handle(event)
    assert sink.sent == [(555, "Player is now online playing Dota 2\nRanked", True)]


@pytest.mark.asyncio
async def test_status_flaps_within_the_same_game_send_once(handler, sink, player_state):
    for status in (PlayerStatus.ONLINE, PlayerStatus.IDLE, PlayerStatus.ONLINE, PlayerStatus.DO_NOT_DISTURB):
        await handler.handle(update(status=status, activities=[ActivityInfo(name="Dota 2")]))
    assert sink.texts == ["Player is now online playing Dota 2"]
    assert await player_state.read() == PlayerState(PlayerStatus.ONLINE, "Dota 2")


@pytest.mark.asyncio
async def test_status_only_change_after_first_announcement_is_ignored(handler, sink):
    assert await handler.handle(update(devices={"mobile": PlayerStatus.IDLE}))
    assert not await handler.handle(update(status=PlayerStatus.ONLINE))
    assert sink.texts == ["Player is now idle from phone"]


@pytest.mark.asyncio
async def test_leaving_a_game_is_announced(handler, sink, player_state):
    await handler.handle(update(activities=[ActivityInfo(name="Dota 2")]))
    assert await handler.handle(update())
    assert sink.texts == ["Player is now online playing Dota 2", "Player is now online"]
    assert (await player_state.read()).current_game is None


@pytest.mark.asyncio
async def test_game_change_is_announced_with_detail_lines(handler, sink):
    await handler.handle(update(activities=[ActivityInfo(name="Dota 2")]))
    await handler.handle(update(activities=[
        ActivityInfo(name="Terraria", details="Boss fight", large_text="", small_text="Hardmode"),
    ]))
    assert sink.texts == [
        "Player is now online playing Dota 2",
        "Player is now online playing Terraria\nBoss fight\nHardmode",
    ]


@pytest.mark.asyncio
async def test_custom_status_text_is_the_activity(handler, sink, player_state):
    await handler.handle(update(activities=[ActivityInfo(name="Custom Status", is_custom=True, details="brb")]))
    assert sink.texts == ["Player is now online playing brb"]
    assert (await player_state.read()).current_game == "brb"


def test_device_preference_order():
    assert resolve_status(update(devices={"desktop": PlayerStatus.ONLINE, "web": PlayerStatus.IDLE})) == (PlayerStatus.IDLE, "web")
    assert resolve_status(update(devices={"desktop": PlayerStatus.DO_NOT_DISTURB})) == (PlayerStatus.DO_NOT_DISTURB, "desktop")
    assert resolve_status(update(status=PlayerStatus.OFFLINE)) == (PlayerStatus.OFFLINE, None)


def test_real_activity_wins_over_custom_status():
    custom = ActivityInfo(name="Custom Status", is_custom=True, details="brb")
    game = ActivityInfo(name="Dota 2")
    assert pick_activity([custom, game]) is game
    assert pick_activity([custom]) is custom
    assert pick_activity([]) is None
    assert describe_activity(None) == (None, [])


def test_presence_update_from_member():
    member = SimpleNamespace(
        id=TARGET_USER,
        guild=SimpleNamespace(id=TARGET_GUILD),
        status=discord.Status.online,
        mobile_status=discord.Status.idle,
        web_status=discord.Status.offline,
        desktop_status=discord.Status.online,
        activities=(
            discord.CustomActivity(name="brb"),
            discord.Activity(
                type=discord.ActivityType.playing,
                name="Dota 2",
                details="Ranked All Pick",
                assets={"large_text": "Axe", "small_text": "Level 12"},
            ),
        ),
    )

    result = PresenceUpdate.from_member(member)

    assert result.guild_id == TARGET_GUILD
    assert result.status is PlayerStatus.ONLINE
    assert result.devices == {"mobile": PlayerStatus.IDLE, "desktop": PlayerStatus.ONLINE}
    assert result.activities[0] == ActivityInfo(name="brb", is_custom=True, details="brb")
    assert result.activities[1] == ActivityInfo(
        name="Dota 2", details="Ranked All Pick", large_text="Axe", small_text="Level 12"
    )
