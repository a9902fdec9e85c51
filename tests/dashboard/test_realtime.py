from unittest.mock import AsyncMock, MagicMock

import pytest

from booktracker.dashboard.realtime import BookChangeFeed


@pytest.fixture
def client():
    channel = MagicMock()
    channel.on_postgres_changes = MagicMock(return_value=channel)
    channel.subscribe = AsyncMock(return_value=channel)

    mock = MagicMock()
    mock.channel = MagicMock(return_value=channel)
    mock.remove_channel = AsyncMock()
    return mock


@pytest.mark.asyncio
async def test_subscribe_listens_to_all_events_on_books(client):
    feed = BookChangeFeed(client)

    await feed.subscribe(lambda payload: None)

    client.channel.assert_called_once_with("realtime-books")
    channel = client.channel.return_value
    args, kwargs = channel.on_postgres_changes.call_args
    assert args == ("*",)
    assert kwargs["table"] == "books"
    assert kwargs["schema"] == "public"
    channel.subscribe.assert_awaited_once()
    assert feed.is_subscribed


@pytest.mark.asyncio
async def test_events_are_forwarded_unfiltered(client):
    received = []
    feed = BookChangeFeed(client)
    await feed.subscribe(received.append)

    forward = client.channel.return_value.on_postgres_changes.call_args.kwargs["callback"]
    forward({"eventType": "UPDATE", "new": {"user_id": "someone-else"}})
    forward({"eventType": "DELETE", "old": {"id": "book-1"}})

    assert [event["eventType"] for event in received] == ["UPDATE", "DELETE"]


@pytest.mark.asyncio
async def test_subscribe_twice_is_a_no_op(client):
    feed = BookChangeFeed(client)

    await feed.subscribe(lambda payload: None)
    await feed.subscribe(lambda payload: None)

    client.channel.assert_called_once()


@pytest.mark.asyncio
async def test_close_removes_channel(client):
    feed = BookChangeFeed(client)
    await feed.subscribe(lambda payload: None)

    await feed.close()
    await feed.close()

    client.remove_channel.assert_awaited_once_with(client.channel.return_value)
    assert not feed.is_subscribed
