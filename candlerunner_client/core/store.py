"""Observable value holder that notifies subscribers on every replacement."""
import logging
import threading
from enum import Enum
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoadState(Enum):
    """Where a store is in its load lifecycle."""
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class Store(Generic[T]):
    """Holds a single value and pushes it to subscribers.

    Subscribers receive the current value as soon as they subscribe and again
    after every set(), in subscription order. Values are replaced whole.
    """

    def __init__(self, initial: T, name: str = "store"):
        self.name = name
        self._value = initial
        self._subscribers: list[Callable[[T], None]] = []
        self._lock = threading.Lock()

    @property
    def value(self) -> T:
        """Get the current value."""
        return self._value

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register callback and immediately call it with the current value.

        Args:
            callback: Function to call with each published value.

        Returns:
            Zero-argument function that removes this subscription.
        """
        with self._lock:
            self._subscribers.append(callback)
            logger.debug(f"Subscribed {_callback_name(callback)} to {self.name}")

        self._notify(callback, self._value)

        def unsubscribe() -> None:
            self.unsubscribe(callback)

        return unsubscribe

    def unsubscribe(self, callback: Callable[[T], None]) -> None:
        """Remove callback from the subscribers.

        Args:
            callback: The callback function to remove.
        """
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
                logger.debug(f"Unsubscribed {_callback_name(callback)} from {self.name}")

    def set(self, value: T) -> None:
        """Replace the value and send it to all subscribers.

        Args:
            value: The new value. Subscribers are notified even if it equals
                the previous one.
        """
        with self._lock:
            self._value = value
            callbacks = list(self._subscribers)

        for callback in callbacks:
            self._notify(callback, value)

    def _notify(self, callback: Callable[[T], None], value: T) -> None:
        try:
            callback(value)
        except Exception as e:
            logger.error(f"Error in subscriber {_callback_name(callback)} of {self.name}: {e}")


def _callback_name(callback: Callable) -> str:
    return getattr(callback, "__name__", repr(callback))
