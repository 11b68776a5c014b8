import asyncio

import pytest

from conftest import OUTPUT_CHANNEL


@pytest.mark.asyncio
async def test_send_delivers_and_records_last(dispatcher, sink):
    assert await dispatcher.send("hello", tts=True)
    assert sink.sent == [(OUTPUT_CHANNEL, "hello", True)]
    assert await dispatcher.last_notification() == "hello"


@pytest.mark.asyncio
async def test_send_unique_suppresses_repeated_text(dispatcher, sink):
    assert await dispatcher.send_unique("Player is now online")
    assert not await dispatcher.send_unique("Player is now online")
    assert await dispatcher.send_unique("Player is now idle")
    assert sink.texts == ["Player is now online", "Player is now idle"]


@pytest.mark.asyncio
async def test_racing_identical_texts_send_once(dispatcher, sink):
    results = await asyncio.gather(*[dispatcher.send_unique("same text") for _ in range(3)])
    assert results.count(True) == 1
    assert sink.texts == ["same text"]


@pytest.mark.asyncio
async def test_failed_delivery_is_dropped_and_not_recorded(dispatcher, sink):
    await dispatcher.send("first")
    sink.fail = True

    assert not await dispatcher.send_unique("second")
    assert not await dispatcher.send("third")
    assert await dispatcher.last_notification() == "first"

    # the same text may go out once the channel is back
    sink.fail = False
    assert await dispatcher.send_unique("second")
    assert sink.texts == ["first", "second"]
