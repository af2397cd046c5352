"""Shared helpers for the CLI commands."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from rich.console import Console

from src.storefront.core.backend import BackendError, InMemoryBackend, StoreBackend, create_backend
from src.storefront.runtime.context import get_config

console = Console()

T = TypeVar("T")


def run_with_backend(action: Callable[[StoreBackend], Awaitable[T]]) -> T:
    """Connect to the configured backend, run ``action`` against it and close it.

    Backend failures are reported and turned into exit code 1.
    """

    async def _run() -> T:
        backend = await create_backend(get_config().backend)
        if isinstance(backend, InMemoryBackend):
            console.print(
                "[yellow]⚠️  Using the in-memory backend: changes are not shared "
                "with a running server[/yellow]"
            )
        try:
            return await action(backend)
        finally:
            await backend.close()

    try:
        return asyncio.run(_run())
    except BackendError as e:
        console.print(f"[red]❌ Backend call failed: {e.message}[/red]")
        raise typer.Exit(code=1) from e
