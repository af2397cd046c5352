"""Catalog inspection and maintenance commands."""

import typer
from rich.prompt import Confirm
from rich.table import Table

from src.storefront.core.backend import StoreBackend
from src.storefront.core.services.catalog import format_price

from .utils import console, run_with_backend

catalog_app = typer.Typer(help="Inspect and maintain products and categories")


@catalog_app.command("products")
def list_products(
    category: str = typer.Option("", "--category", "-c", help="Only this category"),
    featured: bool = typer.Option(False, "--featured", help="Only featured products"),
) -> None:
    """List products, newest first."""
    products = run_with_backend(lambda backend: backend.list_products())

    if category:
        products = [p for p in products if p.category == category]
    if featured:
        products = [p for p in products if p.featured]

    if not products:
        console.print("[yellow]No products found[/yellow]")
        return

    table = Table(title="Products")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Model", style="magenta")
    table.add_column("Category", style="blue")
    table.add_column("Price", style="white", justify="right")
    table.add_column("Featured", style="yellow")

    for product in products:
        table.add_row(
            product.id,
            product.name,
            product.model_name or "",
            product.category or "",
            format_price(product.price),
            "⭐" if product.featured else "",
        )

    console.print(table)
    console.print(f"\n[green]Found {len(products)} products[/green]")


@catalog_app.command("categories")
def list_categories() -> None:
    """List categories with the number of products using each."""

    async def _load(backend: StoreBackend):
        categories = await backend.list_categories()
        return [
            (category, len(await backend.product_ids_in_category(category.name)))
            for category in categories
        ]

    rows = run_with_backend(_load)
    if not rows:
        console.print("[yellow]No categories found[/yellow]")
        return

    table = Table(title="Categories")
    table.add_column("Name", style="green")
    table.add_column("Products", style="cyan", justify="right")
    table.add_column("Created", style="white")
    for category, count in rows:
        table.add_row(category.name, str(count), category.created_at.isoformat())

    console.print(table)


@catalog_app.command("delete-category")
def delete_category(
    name: str = typer.Argument(..., help="Category name"),
    cascade: bool = typer.Option(
        False, "--cascade", help="Also delete the products in this category"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete a category. Refused while products use it unless --cascade is given."""
    referencing = run_with_backend(lambda backend: backend.product_ids_in_category(name))

    if referencing and not cascade:
        console.print(
            f"[red]❌ Cannot delete category '{name}': {len(referencing)} products use it "
            "(use --cascade to delete them too)[/red]"
        )
        raise typer.Exit(code=1)

    if not force:
        detail = f" and its {len(referencing)} products" if referencing else ""
        if not Confirm.ask(f"Are you sure you want to delete category '{name}'{detail}?"):
            console.print("[yellow]Deletion cancelled[/yellow]")
            return

    async def _delete(backend: StoreBackend) -> int:
        removed = await backend.delete_products_in_category(name) if cascade else 0
        await backend.delete_category(name)
        return removed

    removed = run_with_backend(_delete)
    console.print(f"[green]✅ Deleted category '{name}'[/green]")
    if removed:
        console.print(f"[green]✅ Deleted {removed} products[/green]")
