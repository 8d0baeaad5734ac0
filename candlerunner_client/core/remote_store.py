"""Stores backed by candlerunner list endpoints."""
import logging
from typing import Any, Callable, TypeVar

from candlerunner_client.collectors.candlerunner.client import ServiceClient
from candlerunner_client.collectors.candlerunner.parsers import (
    parse_accounts,
    parse_instruments,
    parse_strategies,
    parse_position_managers,
    parse_strategy_instances,
)
from candlerunner_client.core.store import Store, LoadState
from candlerunner_client.models import (
    Account,
    Instrument,
    StrategyDefinition,
    PositionManagerDefinition,
    StrategyInstance,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ACCOUNTS_ENDPOINT = "/list-accounts"
INSTRUMENTS_ENDPOINT = "/list-instruments"
STRATEGIES_ENDPOINT = "/list-strategies"
POSITION_MANAGERS_ENDPOINT = "/list-position-managers"
STRATEGY_INSTANCES_ENDPOINT = "/list-strategy-instances"


class RemoteStore(Store[list[T]]):
    """Store whose value is loaded from one service endpoint.

    The value starts as an empty list. load() fetches the endpoint, runs the
    parser (which decodes and reshapes the payload) and publishes the result.
    Load progress is published separately through the ``status`` store.
    """

    def __init__(
        self,
        name: str,
        client: ServiceClient,
        endpoint: str,
        parser: Callable[[Any], list[T]],
    ):
        super().__init__([], name=name)
        self.client = client
        self.endpoint = endpoint
        self.parser = parser

        self.status: Store[LoadState] = Store(LoadState.UNLOADED, name=f"{name} status")
        self.error: BaseException | None = None

    @property
    def state(self) -> LoadState:
        return self.status.value

    @property
    def is_loaded(self) -> bool:
        return self.state is LoadState.LOADED

    async def load(self) -> list[T]:
        """Fetch, decode and publish the endpoint's collection.

        Failures are not retried. The store keeps its previous value, moves to
        FAILED and the exception is re-raised.

        Returns:
            The published collection
        """
        self.error = None
        self.status.set(LoadState.LOADING)

        logger.debug(
            f"STEP 1/2: Loading {self.name}",
            extra={
                "extra_data": {
                    "action": "store_load_start",
                    "store": self.name,
                    "endpoint": self.endpoint,
                }
            },
        )

        try:
            raw = await self.client.get_json(self.endpoint)
            items = self.parser(raw)
        except Exception as e:
            self.error = e
            self.status.set(LoadState.FAILED)
            logger.error(f"Failed to load {self.name} from {self.endpoint}: {e}")
            raise

        self.status.set(LoadState.LOADED)
        self.set(items)

        logger.debug(
            f"STEP 2/2: Published {self.name}",
            extra={
                "extra_data": {
                    "action": "store_load_success",
                    "store": self.name,
                    "count": len(items),
                }
            },
        )
        logger.info(f"Loaded {len(items)} {self.name}")

        return items


def accounts_store(client: ServiceClient) -> RemoteStore[Account]:
    return RemoteStore("accounts", client, ACCOUNTS_ENDPOINT, parse_accounts)


def instruments_store(client: ServiceClient) -> RemoteStore[Instrument]:
    return RemoteStore("instruments", client, INSTRUMENTS_ENDPOINT, parse_instruments)


def strategies_store(client: ServiceClient) -> RemoteStore[StrategyDefinition]:
    return RemoteStore("strategies", client, STRATEGIES_ENDPOINT, parse_strategies)


def position_managers_store(client: ServiceClient) -> RemoteStore[PositionManagerDefinition]:
    return RemoteStore(
        "position_managers", client, POSITION_MANAGERS_ENDPOINT, parse_position_managers
    )


def strategy_instances_store(client: ServiceClient) -> RemoteStore[StrategyInstance]:
    return RemoteStore(
        "strategy_instances", client, STRATEGY_INSTANCES_ENDPOINT, parse_strategy_instances
    )


STORE_FACTORIES: dict[str, Callable[[ServiceClient], RemoteStore]] = {
    "accounts": accounts_store,
    "instruments": instruments_store,
    "strategies": strategies_store,
    "position_managers": position_managers_store,
    "strategy_instances": strategy_instances_store,
}
