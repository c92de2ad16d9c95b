import asyncio
import logging
from collections.abc import Callable
from typing import Union

from .options import CacheOptions

logger = logging.getLogger(__name__)

CacheValue = Union[bytes, str]


class ExpirationTimer:
    """
    A cancellable callback scheduled on the running event loop.

    Cancelling is idempotent: cancelling a fired or already cancelled
    timer does nothing.
    """

    def __init__(self, delay_ms: int, callback: Callable[[], None]):
        self.delay_ms = delay_ms
        self._callback = callback
        self._fired = False
        self._cancelled = False
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay_ms / 1000, self._fire)

    @property
    def active(self) -> bool:
        """True while the timer is still waiting to fire."""
        return not (self._fired or self._cancelled)

    @property
    def when(self) -> float:
        """Event loop time at which the timer fires."""
        return self._handle.when()

    def cancel(self) -> None:
        if not self.active:
            return
        self._cancelled = True
        self._handle.cancel()

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._fired = True
        self._callback()

    def __repr__(self):
        state = "active" if self.active else ("fired" if self._fired else "cancelled")
        return f"ExpirationTimer(delay_ms={self.delay_ms}, {state})"


class CacheSlot:
    """
    Single-value cache owned by one file handle.

    Holds the cached contents and at most one ExpirationTimer. The slot is
    Empty (no value), Cached-Persistent (value, no timer) or
    Cached-Expiring (value and an armed timer). Only operations resolved
    with ``cache=True`` change it; the timer firing is the only other way
    back to Empty.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self.value: CacheValue | None = None
        self.timer: ExpirationTimer | None = None

    @property
    def populated(self) -> bool:
        return self.value is not None

    def lookup(self, options: CacheOptions) -> CacheValue | None:
        """
        Return the cached value when the read may skip the filesystem.

        Args:
            options: Resolved options of the read.

        Returns:
            The cached value if ``from_cache`` is set and a value is present,
            else None.
        """
        if options.from_cache and self.populated:
            logger.debug("Cache hit (%d bytes)", len(self.value))
            return self.value
        return None

    def store(self, value: CacheValue, options: CacheOptions) -> None:
        """Replace the cached value after a read or write."""
        if not options.cache:
            return
        self.value = value
        logger.debug("Cache stored (%d bytes)", len(value))
        self._rearm(options)

    def extend(self, data: CacheValue, options: CacheOptions) -> None:
        """
        Concatenate appended data onto the cached value.

        An empty slot stays empty: the cache is never seeded from a
        partial append.
        """
        if not options.cache or not self.populated:
            return
        self.value = self._concat(self.value, data)
        logger.debug("Cache extended to %d bytes", len(self.value))
        self._rearm(options)

    def clear(self) -> None:
        """Drop the value and cancel any armed timer."""
        self.value = None
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None

    def _rearm(self, options: CacheOptions) -> None:
        if options.reset_timer and self.timer is not None:
            self.timer.cancel()
            self.timer = None
            logger.debug("Expiration timer reset")
        if options.expires > 0 and self.timer is None:
            self.timer = ExpirationTimer(options.expires, self._expire)
            logger.debug("Expiration timer armed for %d ms", options.expires)

    def _expire(self) -> None:
        self.value = None
        self.timer = None
        logger.debug("Cache expired")

    def _concat(self, current: CacheValue, data: CacheValue) -> CacheValue:
        if isinstance(current, str) and isinstance(data, str):
            return current + data
        if isinstance(current, str):
            current = current.encode(self.encoding)
        if isinstance(data, str):
            data = data.encode(self.encoding)
        return bytes(current) + bytes(data)
