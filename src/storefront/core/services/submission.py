"""Busy flags for mutation handlers."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from src.storefront.core.errors import SubmissionInProgress


class SubmissionGuard:
    """Rejects a second submission of the same action while one is in flight.

    Keys combine the browser session and the action, so two admins never block
    each other. The check and the claim happen without an ``await`` between
    them, which makes them atomic on the event loop.
    """

    def __init__(self) -> None:
        self._in_flight: set[str] = set()

    def is_busy(self, key: str) -> bool:
        return key in self._in_flight

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        if key in self._in_flight:
            raise SubmissionInProgress()
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)
