"""Public IP change monitoring via periodic resolver queries."""

import asyncio
import inspect
import logging
import threading
from typing import Awaitable, Callable, Optional, Union

from myip.address import Address, addresses_equal
from myip.resolver import Resolver

logger = logging.getLogger(__name__)

ChangeCallback = Callable[
    [Optional[Address], Address], Union[Awaitable[None], None]
]


class IpMonitor:
    """Caches the public IP and reports changes.

    A background task asks the resolver for the address once per
    interval, stores it, and hands every change to the callback
    registered with start_loop. The cached value is guarded by a lock so
    get_address is safe from any thread.
    """

    def __init__(self, resolver: Resolver, check_interval: float = 1.0):
        """Initialize IP monitor.

        Args:
            resolver: Resolver used on every tick.
            check_interval: Seconds between resolutions.
        """
        self._resolver = resolver
        self._interval = check_interval
        self._lock = threading.Lock()
        self._address: Optional[Address] = None
        self._task: Optional[asyncio.Task] = None
        self._callbacks: set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        """Whether the refresh loop is active."""
        return self._task is not None and not self._task.done()

    def get_address(self) -> Optional[Address]:
        """Return the cached address, or None if never resolved."""
        with self._lock:
            return self._address

    def set_address(self, address: Optional[Address]) -> None:
        """Overwrite the cached address. Does not notify."""
        with self._lock:
            self._address = address

    def start_loop(self, on_change: Optional[ChangeCallback] = None) -> None:
        """Start the refresh loop in the background.

        Returns immediately; must be called from a running event loop.

        Args:
            on_change: Called as on_change(old, new) for every change.
                May be a coroutine function or a plain callable; plain
                callables run in a worker thread.
        """
        if self.is_running:
            logger.warning("IP monitor already running")
            return

        self._task = asyncio.get_running_loop().create_task(
            self._monitor_loop(on_change)
        )
        logger.info("IP monitor started")

    async def stop(self) -> None:
        """Stop the refresh loop and wait for in-flight callbacks."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._callbacks:
            await asyncio.gather(*self._callbacks, return_exceptions=True)
        logger.info("IP monitor stopped")

    async def close(self) -> None:
        """Stop the loop and release the resolver's resources.

        Resolvers without a close() method are left alone.
        """
        await self.stop()
        close = getattr(self._resolver, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        """Exit async context, stopping the loop and closing the resolver."""
        await self.close()

    async def _monitor_loop(self, on_change: Optional[ChangeCallback]) -> None:
        """Resolve, compare, notify, sleep. Runs until cancelled."""
        observed = self.get_address()
        while True:
            observed = await self._tick(observed, on_change)
            await asyncio.sleep(self._interval)

    async def _tick(
        self, old: Optional[Address], on_change: Optional[ChangeCallback]
    ) -> Optional[Address]:
        """Run one refresh.

        Returns:
            The snapshot to compare against on the next tick.
        """
        try:
            address = await self._resolver.resolve()
        except Exception as e:
            logger.warning(f"refresh myip failed: {e}")
            return old

        if address is None:
            logger.warning("refresh myip failed: resolver returned no address")
            return old

        self.set_address(address)
        new = self.get_address()
        if addresses_equal(old, new):
            return old

        logger.info("Public IP changed")
        logger.debug(f"Public IP changed from {old} to {new}")
        if on_change is not None:
            self._dispatch(on_change, old, new)
        return new

    def _dispatch(
        self, callback: ChangeCallback, old: Optional[Address], new: Address
    ) -> None:
        """Fire the callback in its own task without waiting for it."""
        task = asyncio.create_task(self._run_callback(callback, old, new))
        self._callbacks.add(task)
        task.add_done_callback(self._callbacks.discard)

    async def _run_callback(
        self, callback: ChangeCallback, old: Optional[Address], new: Address
    ) -> None:
        try:
            if inspect.iscoroutinefunction(callback):
                await callback(old, new)
            else:
                result = await asyncio.to_thread(callback, old, new)
                if inspect.isawaitable(result):
                    await result
        except Exception as e:
            logger.error(f"IP change callback failed: {e}")
