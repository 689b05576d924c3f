import asyncio

import pytest

from components.core import realtime
from components.core.realtime import ChangeFeed


@pytest.mark.asyncio
async def test_snapshots_emit_initial_state_then_changes():
    feed = ChangeFeed()
    state = {"items": ["a"]}

    async def fetch():
        return list(state["items"])

    stream = feed.snapshots(1, realtime.ACCOUNTS, fetch)
    assert await stream.__anext__() == ["a"]

    state["items"].append("b")
    feed.publish(1, realtime.ACCOUNTS)
    assert await asyncio.wait_for(stream.__anext__(), timeout=1) == ["a", "b"]

    await stream.aclose()
    assert feed.listener_count(1, realtime.ACCOUNTS) == 0


@pytest.mark.asyncio
async def test_changes_are_scoped_by_user_and_collection():
    feed = ChangeFeed()
    mine = feed.subscribe(1, realtime.COSTS)
    theirs = feed.subscribe(2, realtime.COSTS)
    history = feed.subscribe(1, realtime.HISTORY)

    feed.publish(1, realtime.COSTS)

    assert mine.qsize() == 1
    assert theirs.qsize() == 0
    assert history.qsize() == 0


@pytest.mark.asyncio
async def test_bursts_collapse_into_one_snapshot():
    feed = ChangeFeed()
    calls = []

    async def fetch():
        calls.append(len(calls))
        return len(calls)

    stream = feed.snapshots(1, realtime.TEMPLATES, fetch)
    await stream.__anext__()
    for _ in range(5):
        feed.publish(1, realtime.TEMPLATES)

    assert await stream.__anext__() == 2
    assert len(calls) == 2
    await stream.aclose()


def test_unknown_collection_is_rejected():
    with pytest.raises(ValueError):
        ChangeFeed().subscribe(1, "secrets")
