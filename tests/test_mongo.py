from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from rentalhub.db import mongo


def _client(ping_error=None):
    client = MagicMock()
    client.admin.command = AsyncMock(side_effect=ping_error)
    return client


@pytest.fixture(autouse=True)
def reset_client():
    yield
    mongo._client = None
    mongo._db = None


@pytest.mark.asyncio
async def test_connect_keeps_pinged_client():
    first = _client()
    with patch.object(mongo, "_new_client", side_effect=[first]):
        await mongo.connect()

    assert mongo.get_client() is first
    first.close.assert_not_called()


@pytest.mark.asyncio
async def test_failed_ping_closes_first_client_before_lazy_retry():
    first = _client(ping_error=ConnectionError("no server"))
    lazy = _client()
    with patch.object(mongo, "_new_client", side_effect=[first, lazy]):
        await mongo.connect()

    first.close.assert_called_once()
    assert mongo.get_client() is lazy
    lazy.close.assert_not_called()


@pytest.mark.asyncio
async def test_disconnect_closes_and_forgets_client():
    client = _client()
    with patch.object(mongo, "_new_client", side_effect=[client]):
        await mongo.connect()
    await mongo.disconnect()

    client.close.assert_called_once()
    with pytest.raises(AssertionError):
        mongo.get_client()
