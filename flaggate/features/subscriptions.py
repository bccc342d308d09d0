"""
Reactive observation of flag state.

Each flag name gets one SubscriptionCell holding the latest known value and
the observers attached to it. Publishing replaces the value and hands it to
every observer before returning. Observers keep a single pending slot, not a
queue: a consumer that falls behind skips intermediate values and reads the
latest one.

Three consumption styles share a cell:
- FlagObservation: blocking iterator for worker threads
- AsyncFlagObservation: async iterator bound to an event loop
- plain callbacks registered through SubscriptionHub.subscribe
"""

import asyncio
import logging
import threading
from typing import Callable, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

_NO_VALUE = object()


class FlagObserver(Protocol):
    """Anything a cell can push values to."""

    def deliver(self, value: bool) -> None:
        ...


class SubscriptionCell:
    """
    Latest value for one flag name plus its attached observers.

    The value update and the fan-out happen under one lock, so observers of
    a given name see publishes in the order they were made.
    """

    def __init__(self, name: str, value: bool = False):
        self.name = name
        self._value = value
        self._observers: List[FlagObserver] = []
        self._lock = threading.RLock()

    @property
    def value(self) -> bool:
        with self._lock:
            return self._value

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def attach(self, observer: FlagObserver) -> None:
        """Attach an observer and hand it the current value."""
        with self._lock:
            self._observers.append(observer)
            observer.deliver(self._value)

    def detach(self, observer: FlagObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def set(self, value: bool) -> None:
        """Replace the value and deliver it to every attached observer."""
        with self._lock:
            self._value = value
            for observer in list(self._observers):
                observer.deliver(value)


class FlagObservation:
    """
    Blocking iterator over one flag's state.

    Yields the value current at subscription time, then every later publish.
    Iteration only ends when the caller closes the observation.

    Example:
        with registry.observe("new_checkout") as observation:
            for enabled in observation:
                apply(enabled)
    """

    def __init__(self, cell: SubscriptionCell):
        self.name = cell.name
        self._cell = cell
        self._condition = threading.Condition()
        self._pending = _NO_VALUE
        self._closed = False
        cell.attach(self)

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, value: bool) -> None:
        with self._condition:
            if self._closed:
                return
            self._pending = value
            self._condition.notify_all()

    def poll(self) -> Optional[bool]:
        """Return the unread value without blocking, or None if nothing is pending."""
        with self._condition:
            return self._take()

    def close(self) -> None:
        """Detach from the cell and wake any blocked reader."""
        with self._condition:
            if self._closed:
                return
            self._closed = True
            self._pending = _NO_VALUE
            self._condition.notify_all()
        self._cell.detach(self)

    def __iter__(self) -> "FlagObservation":
        return self

    def __next__(self) -> bool:
        with self._condition:
            while self._pending is _NO_VALUE and not self._closed:
                self._condition.wait()
            if self._closed:
                raise StopIteration
            return self._take()

    def __enter__(self) -> "FlagObservation":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _take(self) -> Optional[bool]:
        value, self._pending = self._pending, _NO_VALUE
        return None if value is _NO_VALUE else value


class AsyncFlagObservation:
    """
    Async iterator over one flag's state, bound to an event loop.

    Values are handed to the loop with call_soon_threadsafe, so publishes made
    from worker threads arrive in publish order. Close it from the loop thread.
    """

    def __init__(self, cell: SubscriptionCell, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.name = cell.name
        self._cell = cell
        self._loop = loop or asyncio.get_running_loop()
        self._ready = asyncio.Event()
        self._pending = _NO_VALUE
        self._closed = False
        cell.attach(self)

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, value: bool) -> None:
        try:
            self._loop.call_soon_threadsafe(self._store, value)
        except RuntimeError:
            logger.debug(f"Event loop closed, detaching observer of '{self.name}'")
            self._closed = True
            self._cell.detach(self)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._cell.detach(self)
        self._ready.set()

    def __aiter__(self) -> "AsyncFlagObservation":
        return self

    async def __anext__(self) -> bool:
        while self._pending is _NO_VALUE:
            if self._closed:
                raise StopAsyncIteration
            self._ready.clear()
            await self._ready.wait()
        if self._closed:
            raise StopAsyncIteration
        value, self._pending = self._pending, _NO_VALUE
        return value

    async def __aenter__(self) -> "AsyncFlagObservation":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _store(self, value: bool) -> None:
        if self._closed:
            return
        self._pending = value
        self._ready.set()


class _CallbackObserver:
    """Adapts a plain callable to the observer protocol."""

    def __init__(self, name: str, callback: Callable[[bool], None]):
        self.name = name
        self._callback = callback

    def deliver(self, value: bool) -> None:
        try:
            self._callback(value)
        except Exception:
            logger.exception(f"Observer callback for '{self.name}' failed")


class SubscriptionHub:
    """
    Registry of subscription cells, one per flag name.

    Cells are created lazily on first observation or first publish and live
    as long as the hub, independent of whether the flag is still defined.
    """

    def __init__(self):
        self._cells: Dict[str, SubscriptionCell] = {}
        self._lock = threading.Lock()

    def cell(self, name: str, initial: bool = False) -> SubscriptionCell:
        """Get the cell for a name, creating it with `initial` if absent."""
        with self._lock:
            cell = self._cells.get(name)
            if cell is None:
                cell = SubscriptionCell(name, initial)
                self._cells[name] = cell
            return cell

    def current(self, name: str) -> Optional[bool]:
        """The cell's value, or None if nothing has observed or published this name."""
        with self._lock:
            cell = self._cells.get(name)
        return None if cell is None else cell.value

    def observe(self, name: str, initial: bool = False) -> FlagObservation:
        return FlagObservation(self.cell(name, initial))

    def observe_async(
        self,
        name: str,
        initial: bool = False,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> AsyncFlagObservation:
        return AsyncFlagObservation(self.cell(name, initial), loop=loop)

    def subscribe(
        self,
        name: str,
        callback: Callable[[bool], None],
        initial: bool = False,
    ) -> Callable[[], None]:
        """
        Call `callback` with the current value now and with every later publish.

        The callback runs on the publishing thread while the cell lock is held,
        so it must not block on another thread that publishes the same name.

        Returns:
            A function that detaches the callback.
        """
        cell = self.cell(name, initial)
        observer = _CallbackObserver(name, callback)
        cell.attach(observer)
        return lambda: cell.detach(observer)

    def publish(self, name: str, enabled: bool) -> None:
        """Set the cell's value and deliver it to all observers before returning."""
        self.cell(name, enabled).set(enabled)
        logger.debug(f"Published '{name}' = {enabled}")

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._cells
