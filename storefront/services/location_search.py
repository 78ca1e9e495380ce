"""Debounced location search for the checkout address field.

Each keystroke submits the current text. A query is only sent to the
geocoder once it has stayed unchanged for the debounce interval, and results
that arrive after a newer query has started are discarded so a slow earlier
response can never overwrite a newer one.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from ..models import GeocodeLookup

logger = logging.getLogger(__name__)

SuggestionListener = Callable[[GeocodeLookup], None]


class Geocoder(Protocol):
    async def lookup(self, query: str) -> GeocodeLookup: ...


class LocationSearch:
    """Debounces lookups and publishes only the newest query's results."""

    def __init__(self, geocoder: Geocoder, debounce_seconds: float = 0.3):
        """Initialize location search.

        Args:
            geocoder: Lookup backend, usually GeocodingService.
            debounce_seconds: Quiet period before a query is looked up.
        """
        self.geocoder = geocoder
        self.debounce_seconds = debounce_seconds
        self.latest: GeocodeLookup | None = None
        self._generation = 0
        self._listeners: list[SuggestionListener] = []
        self._tasks: set[asyncio.Task[GeocodeLookup | None]] = set()

    def subscribe(self, listener: SuggestionListener) -> Callable[[], None]:
        """Register a callback for published lookups.

        Returns:
            Function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _publish(self, lookup: GeocodeLookup) -> None:
        self.latest = lookup
        for listener in list(self._listeners):
            listener(lookup)

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    async def search(self, query: str) -> GeocodeLookup | None:
        """Run one debounced lookup.

        Args:
            query: Current text of the location field.

        Returns:
            The published lookup, or None if a newer query superseded this one.
        """
        return await self._run(query, self._next_generation())

    async def _run(self, query: str, generation: int) -> GeocodeLookup | None:
        if not query.strip():
            # Clears suggestions immediately, no debounce and no request.
            lookup = GeocodeLookup(query=query)
            self._publish(lookup)
            return lookup

        await asyncio.sleep(self.debounce_seconds)
        if not self._is_current(generation):
            logger.debug(f"Query '{query}' superseded during debounce")
            return None

        lookup = await self.geocoder.lookup(query)
        if not self._is_current(generation):
            logger.debug(f"Discarding stale results for '{query}'")
            return None

        self._publish(lookup)
        return lookup

    def submit(self, query: str) -> asyncio.Task[GeocodeLookup | None]:
        """Schedule a search for the latest keystroke without waiting for it.

        Raises:
            RuntimeError: If called outside a running event loop. Nothing is
                scheduled and earlier searches stay current in that case.
        """
        loop = asyncio.get_running_loop()
        # Bump now so earlier searches see themselves superseded right away.
        task = loop.create_task(self._run(query, self._next_generation()))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled search to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
