"""Application context that owns the service client and all stores."""
import asyncio
import logging

from candlerunner_client.collectors.candlerunner.client import ServiceClient
from candlerunner_client.core.config import Config
from candlerunner_client.core.param_validator import ParamValidator
from candlerunner_client.core.remote_store import RemoteStore, STORE_FACTORIES
from candlerunner_client.core.store import LoadState

logger = logging.getLogger(__name__)


class AppContext:
    """Wires the service client to one store per entity kind.

    Responsibilities:
    1. Create the service client from configuration (or use an injected one)
    2. Create the enabled stores
    3. Schedule each store's load as an independent background task
    4. Report load failures to the event loop's exception handler
    """

    def __init__(self, config: Config, client: ServiceClient | None = None):
        """Initialize the context.

        Args:
            config: Client configuration
            client: Service client to use instead of one built from config
        """
        self.config = config
        self.client = client or ServiceClient(
            config.service.base_url,
            timeout_seconds=config.service.timeout_seconds,
        )
        self._tasks: list[asyncio.Task] = []

        enabled = config.get_enabled_stores()
        created = {name: STORE_FACTORIES[name](self.client) for name in enabled}

        self.accounts: RemoteStore | None = created.get("accounts")
        self.instruments: RemoteStore | None = created.get("instruments")
        self.strategies: RemoteStore | None = created.get("strategies")
        self.position_managers: RemoteStore | None = created.get("position_managers")
        self.strategy_instances: RemoteStore | None = created.get("strategy_instances")

        self.param_validator = ParamValidator(self.instruments) if self.instruments is not None else None

        logger.info(f"Application context initialized with stores: {enabled}")

    @property
    def stores(self) -> list[RemoteStore]:
        """Get the enabled stores."""
        candidates = [
            self.accounts,
            self.instruments,
            self.strategies,
            self.position_managers,
            self.strategy_instances,
        ]
        return [store for store in candidates if store is not None]

    @property
    def is_started(self) -> bool:
        return bool(self._tasks)

    def get_store(self, name: str) -> RemoteStore | None:
        """Get a store by name.

        Args:
            name: Store name

        Returns:
            Store if enabled, None otherwise
        """
        for store in self.stores:
            if store.name == name:
                return store
        return None

    def start(self) -> list[asyncio.Task]:
        """Schedule every store's load without awaiting it.

        Must be called from a running event loop. Calling it again does not
        trigger a second load.

        Returns:
            The scheduled load tasks
        """
        if self._tasks:
            logger.warning("Application context already started")
            return list(self._tasks)

        loop = asyncio.get_running_loop()
        for store in self.stores:
            task = loop.create_task(store.load(), name=f"load-{store.name}")
            task.add_done_callback(self._on_load_done)
            self._tasks.append(task)
            logger.debug(f"Scheduled load of {store.name}")

        logger.info(f"Started loading {len(self._tasks)} stores")
        return list(self._tasks)

    def _on_load_done(self, task: asyncio.Task) -> None:
        """Forward a failed load to the loop's unhandled-error channel."""
        if task.cancelled():
            return

        exc = task.exception()
        if exc is None:
            return

        task.get_loop().call_exception_handler({
            "message": f"Unhandled failure in {task.get_name()}",
            "exception": exc,
            "task": task,
        })

    async def wait(self) -> dict[str, LoadState]:
        """Wait for all scheduled loads to finish.

        Returns:
            Final load state per store name
        """
        if self._tasks:
            await asyncio.wait(self._tasks)
        return {store.name: store.state for store in self.stores}

    async def close(self) -> None:
        """Close the service client."""
        await self.client.close()
        logger.info("Application context closed")

    async def __aenter__(self) -> "AppContext":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
