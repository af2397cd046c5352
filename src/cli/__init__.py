"""Main CLI application module."""

import typer
import uvicorn
from rich.panel import Panel

from src.storefront.runtime.context import get_config

from .catalog_commands import catalog_app
from .user_commands import users_app
from .utils import console

# Create the main CLI application
app = typer.Typer(
    help="🛍️  Storefront CLI - serve the shop and manage its catalog",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register command groups
app.add_typer(catalog_app, name="catalog")
app.add_typer(users_app, name="users")


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Host to bind to (default: app.host)"),
    port: int | None = typer.Option(None, help="Port to bind to (default: app.port)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
) -> None:
    """
    🚀 Start the storefront HTTP server.
    """
    config = get_config()
    host = host or config.app.host
    port = port or config.app.port

    console.print(
        Panel.fit(
            "[bold green]Starting Storefront Server[/bold green]",
            border_style="green",
        )
    )
    console.print(f"[blue]Backend:[/blue] {config.backend.provider}")
    console.print(f"[blue]Server will be available at:[/blue] http://{host}:{port}")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    uvicorn.run(
        "src.storefront.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        reload_dirs=["src"] if reload else None,
        access_log=False,  # We handle access logging in middleware
    )


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
