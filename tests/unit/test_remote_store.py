"""Tests for RemoteStore and the per-kind store factories."""
from unittest.mock import AsyncMock, Mock
import pytest


STRATEGIES_PAYLOAD = [
    {
        "strategy_name": "MA",
        "strategy_description": "d",
        "params": {
            "lookback": {
                "name": "lookback",
                "description": "x",
                "param_type": "Float",
                "default_value": {"Float": 20},
            }
        },
    }
]


@pytest.fixture
def mock_client():
    """Create a mock service client."""
    from candlerunner_client.collectors.candlerunner.client import ServiceClient

    client = Mock(spec=ServiceClient)
    client.get_json = AsyncMock()
    return client


@pytest.mark.asyncio
async def test_strategies_store_publishes_flattened_definitions(mock_client):
    from candlerunner_client.core.remote_store import strategies_store
    from candlerunner_client.core.store import LoadState

    mock_client.get_json.return_value = STRATEGIES_PAYLOAD
    store = strategies_store(mock_client)
    received = []
    store.subscribe(received.append)

    await store.load()

    mock_client.get_json.assert_awaited_once_with("/list-strategies")
    assert store.state is LoadState.LOADED
    assert received[0] == []
    assert [s.strategy_name for s in received[1]] == ["MA"]
    assert [p.to_dict() for p in store.value[0].params] == [
        {"name": "lookback", "description": "x", "param_type": "Float", "default_value": {"Float": 20}}
    ]


@pytest.mark.asyncio
async def test_accounts_store_keeps_order(mock_client):
    from candlerunner_client.core.remote_store import accounts_store

    payload = [
        {"id": "b", "name": "B", "access_level": "ReadOnly", "environment": "Sandbox"},
        {"id": "a", "name": "A", "access_level": "FullAccess", "environment": "Production"},
    ]
    mock_client.get_json.return_value = payload
    store = accounts_store(mock_client)

    accounts = await store.load()

    mock_client.get_json.assert_awaited_once_with("/list-accounts")
    assert [a.to_dict() for a in accounts] == payload
    assert store.value is accounts


@pytest.mark.asyncio
async def test_strategy_instances_store_rekeys(mock_client):
    from candlerunner_client.core.remote_store import strategy_instances_store

    instance = {
        "strategy_name": "MA",
        "time_from": None,
        "time_to": None,
        "resolution": "OneMinute",
        "params": {},
    }
    mock_client.get_json.return_value = {"i1": instance, "i2": instance}
    store = strategy_instances_store(mock_client)

    await store.load()

    mock_client.get_json.assert_awaited_once_with("/list-strategy-instances")
    assert [i.instance_id for i in store.value] == ["i1", "i2"]


@pytest.mark.asyncio
async def test_load_failure_keeps_previous_value(mock_client):
    from candlerunner_client.collectors.candlerunner.client import ApiError
    from candlerunner_client.core.remote_store import instruments_store
    from candlerunner_client.core.store import LoadState

    mock_client.get_json.side_effect = ApiError(500, "database unavailable")
    store = instruments_store(mock_client)
    received = []
    store.subscribe(received.append)

    with pytest.raises(ApiError):
        await store.load()

    assert store.state is LoadState.FAILED
    assert isinstance(store.error, ApiError)
    assert store.value == []
    assert received == [[]]


@pytest.mark.asyncio
async def test_decode_failure_marks_store_failed(mock_client):
    from candlerunner_client.collectors.candlerunner.parsers import DecodeError
    from candlerunner_client.core.remote_store import position_managers_store
    from candlerunner_client.core.store import LoadState

    mock_client.get_json.return_value = {"not": "a list"}
    store = position_managers_store(mock_client)

    with pytest.raises(DecodeError):
        await store.load()

    mock_client.get_json.assert_awaited_once_with("/list-position-managers")
    assert store.state is LoadState.FAILED
    assert not store.is_loaded


@pytest.mark.asyncio
async def test_loaded_but_empty_is_distinguishable(mock_client):
    from candlerunner_client.core.remote_store import accounts_store
    from candlerunner_client.core.store import LoadState

    mock_client.get_json.return_value = []
    store = accounts_store(mock_client)

    assert store.state is LoadState.UNLOADED
    await store.load()

    assert store.value == []
    assert store.state is LoadState.LOADED


def test_store_factories_cover_all_kinds(mock_client):
    from candlerunner_client.core.remote_store import STORE_FACTORIES
    from candlerunner_client.core.config import STORE_NAMES

    assert list(STORE_FACTORIES) == STORE_NAMES
    for name, factory in STORE_FACTORIES.items():
        store = factory(mock_client)
        assert store.name == name
        assert store.value == []
        assert store.endpoint.startswith("/list-")


@pytest.mark.asyncio
async def test_status_subscribers_see_load_progress(mock_client):
    from candlerunner_client.core.remote_store import accounts_store
    from candlerunner_client.core.store import LoadState

    mock_client.get_json.return_value = []
    store = accounts_store(mock_client)
    states = []
    store.status.subscribe(states.append)

    await store.load()

    assert states == [LoadState.UNLOADED, LoadState.LOADING, LoadState.LOADED]


@pytest.mark.asyncio
async def test_status_subscribers_hear_about_failure(mock_client):
    from candlerunner_client.collectors.candlerunner.client import ApiError
    from candlerunner_client.core.remote_store import strategies_store
    from candlerunner_client.core.store import LoadState

    mock_client.get_json.side_effect = ApiError(503, "unavailable")
    store = strategies_store(mock_client)
    seen = []
    store.status.subscribe(lambda state: seen.append((state, store.error)))

    with pytest.raises(ApiError):
        await store.load()

    assert seen[-1][0] is LoadState.FAILED
    assert isinstance(seen[-1][1], ApiError)
    assert store.value == []


def test_initial_status_is_unloaded(mock_client):
    from candlerunner_client.core.remote_store import instruments_store
    from candlerunner_client.core.store import LoadState

    store = instruments_store(mock_client)

    assert store.state is LoadState.UNLOADED
    assert store.status.value is LoadState.UNLOADED
    assert store.error is None
