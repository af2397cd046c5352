"""Admin account management CLI commands."""

import typer
from rich.prompt import Confirm
from rich.table import Table

from .utils import console, run_with_backend

users_app = typer.Typer(help="Manage admin accounts in the auth backend")


@users_app.command("list")
def list_users() -> None:
    """List all accounts (needs the service-role key)."""
    users = run_with_backend(lambda backend: backend.admin_list_users())

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Email", style="blue")
    table.add_column("Created", style="white")

    for user in users:
        table.add_row(user.id, user.email or "", user.created_at.isoformat())

    console.print(table)
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("add")
def add_user(
    email: str = typer.Argument(..., help="Email address"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, help="Password"
    ),
) -> None:
    """Create an account through sign-up."""
    user = run_with_backend(lambda backend: backend.sign_up(email, password))
    console.print(f"[green]✅ Successfully created user '{user.email}' ({user.id})[/green]")


@users_app.command("delete")
def delete_user(
    user_id: str = typer.Argument(..., help="ID of the user to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete an account through the admin API, revoking its sessions."""
    if not force and not Confirm.ask(f"Are you sure you want to delete user '{user_id}'?"):
        console.print("[yellow]Deletion cancelled[/yellow]")
        return

    run_with_backend(lambda backend: backend.admin_delete_user(user_id))
    console.print(f"[green]✅ Successfully deleted user '{user_id}'[/green]")
