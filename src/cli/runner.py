# src/cli/runner.py

"""Headless catalog commands: listing, product detail, categories."""

import asyncio
import json
import logging
import sys
from typing import Any

from rich.console import Console
from rich.table import Table

from src.api.errors import ApiError
from src.filters.product_filter import ProductFilter
from src.models.product import Product, ProductFilters
from src.services.catalog_pages import CatalogPages

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _dump_json(data: Any) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _print_table(products: list[Product], title: str) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title=title,
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Category", style="magenta")
    table.add_column("Rating", justify="center")

    for p in products:
        table.add_row(
            str(p.id),
            p.title[:60],
            f"${p.price:,.2f}",
            p.category,
            f"{p.rating.rate:.1f} ({p.rating.count})",
        )

    Console().print(table)


def _describe_error(exc: ApiError) -> str:
    status = exc.status_code if exc.status_code is not None else "-"
    return f"{exc.message} [dim](status={status}, endpoint={exc.endpoint})[/dim]"


async def cli_list(
    query: str | None,
    category: str | None,
    min_price: float | None,
    max_price: float | None,
    output_format: str,
    pages: CatalogPages | None = None,
) -> int:
    """List the catalog, narrowed by the given criteria.

    A category goes through the by-category endpoint; text and price
    criteria are applied locally. Returns an exit code (0=ok, 1=fail).
    """
    pages = pages or CatalogPages()

    try:
        if category:
            products = await asyncio.to_thread(
                pages.client.fetch_products_by_category, category
            )
        else:
            products = (await pages.load_catalog_page()).products
    except ApiError as exc:
        logger.error("Listing failed: %s", exc)
        if exc.is_not_found and category:
            _err.print(
                f'[red]Category "{category}" not found. '
                "Run with --categories to see valid names.[/red]"
            )
        else:
            _err.print(f"[red]{_describe_error(exc)}[/red]")
        return 1

    filters = ProductFilters(
        search_query=query,
        min_price=min_price,
        max_price=max_price,
    )
    visible = ProductFilter.apply(products, filters)

    detail = f' in category "{category}"' if category else ""
    if query:
        detail += f' matching "{query}"'
    _err.print(
        f"[green]Showing {len(visible)} of {len(products)} "
        f"products{detail}[/green]"
    )
    if not visible:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    if output_format == "table":
        _print_table(visible, "Products Catalog")
    else:
        _dump_json([p.to_dict() for p in visible])
    return 0


async def cli_show(
    raw_id: str,
    output_format: str,
    pages: CatalogPages | None = None,
) -> int:
    """Print one product; any failure renders as not found."""
    pages = pages or CatalogPages()
    page = await pages.load_product_page(raw_id)
    if page is None:
        _err.print("[red]404 - Page Not Found[/red]")
        _err.print(
            "[dim]The page you are looking for does not exist "
            "or has been moved.[/dim]"
        )
        return 1

    product = page.product
    if output_format == "table":
        console = Console()
        console.print(f"[bold]{product.title}[/bold]")
        console.print(f"[green]${product.price:.2f}[/green]")
        console.print(f"[magenta]{product.category}[/magenta]")
        console.print(
            f"Rating: {product.rating.rate:.1f} "
            f"({product.rating.count} reviews)"
        )
        console.print()
        console.print(product.description)
        console.print(f"[dim]{product.image}[/dim]")
    else:
        data = product.to_dict()
        data["metadata"] = {
            "title": page.metadata.title,
            "description": page.metadata.description,
            "image": page.metadata.image,
        }
        _dump_json(data)
    return 0


async def cli_categories(
    output_format: str,
    pages: CatalogPages | None = None,
) -> int:
    """Print the category names."""
    pages = pages or CatalogPages()
    try:
        categories = await asyncio.to_thread(pages.client.fetch_categories)
    except ApiError as exc:
        logger.error("Category listing failed: %s", exc)
        _err.print(f"[red]{_describe_error(exc)}[/red]")
        return 1

    if output_format == "table":
        table = Table(title="Categories", title_style="bold cyan")
        table.add_column("Category", style="magenta")
        for c in categories:
            table.add_row(c)
        Console().print(table)
    else:
        _dump_json(categories)
    return 0
