"""Shared behaviour of the view components."""

from __future__ import annotations

from typing import Any

from loguru import logger

from src.storefront.core.models import Notice


class View:
    """A view component that is mounted for the duration of one request.

    Used as an async context manager. State writes go through :meth:`_set`,
    which ignores them once the view has been unmounted, so a backend call
    that completes late cannot touch a torn-down view.
    """

    def __init__(self) -> None:
        self.mounted = False
        self.loading = False
        self.busy = False
        self.errors: list[Notice] = []

    async def __aenter__(self):
        self.mounted = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.unmount()

    def unmount(self) -> None:
        self.mounted = False

    def _set(self, **state: Any) -> None:
        if not self.mounted:
            logger.debug("{} unmounted; dropping update of {}", type(self).__name__, sorted(state))
            return
        for name, value in state.items():
            setattr(self, name, value)

    def _report(self, message: str) -> None:
        """Surface a load failure on the page."""
        if self.mounted:
            self.errors.append(Notice.error(message))
