"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from rms.application.add_product import AddProductHandler
from rms.application.check_availability import (
    RecalculateAvailabilityHandler,
    SearchAvailableProductsHandler,
)
from rms.application.delete_product import DeleteProductHandler
from rms.application.dto import ProductDTO
from rms.application.list_products import ListProductsHandler, ShowProductHandler
from rms.application.pagination import Page, Pagination
from rms.application.update_product import UpdateProductHandler
from rms.domain.exceptions import DomainException
from rms.infrastructure import bootstrap, config


def _pagination(page: str | None, limit: str | None) -> Pagination:
    return Pagination.from_raw(
        page, limit, default_limit=config.PAGE_SIZE, max_limit=config.MAX_PAGE_SIZE
    )


def _print_products(result: Page[ProductDTO], with_availability: bool = False) -> None:
    if not result.items:
        click.echo("No products found.")
        return

    header = f"{'ID':<6} {'Code':<10} {'Name':<24} {'Stock':>6} {'Price':>12}"
    if with_availability:
        header += f" {'Available':>10}"
    click.echo(header)
    click.echo("-" * len(header))
    for p in result.items:
        row = f"{p.id:<6} {p.code:<10} {p.name:<24} {p.total_quantity:>6} {p.price:>12}"
        if with_availability:
            row += f" {p.available_quantity:>10}"
        click.echo(row)
    click.echo(f"Page {result.page}/{max(result.total_pages, 1)}  ({result.total} products)")


@click.command("add")
@click.option("--code", required=True, help="Product code.")
@click.option("--name", required=True, help="Product name.")
@click.option("--quantity", required=True, type=int, help="Units owned.")
@click.option("--price", required=True, help="Rental price per unit (e.g. 15.00).")
@click.option("--description", default=None, help="Optional description.")
def product_add(
    code: str,
    name: str,
    quantity: int,
    price: str,
    description: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(bootstrap.unit_of_work())

    try:
        product = handler.handle(
            code=code,
            name=name,
            total_quantity=quantity,
            price=price,
            description=description,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} '{product.name}' added "
        f"({product.total_quantity} units at {product.price})"
    )


@click.command("list")
@click.option("--search", "term", default=None, help="Filter by name or code.")
@click.option("--page", default=None, help="Page number (default 1).")
@click.option("--limit", default=None, help="Rows per page.")
def product_list(term: str | None, page: str | None, limit: str | None) -> None:
    """List products in the catalog."""
    handler = ListProductsHandler(bootstrap.unit_of_work())
    _print_products(handler.handle(_pagination(page, limit), term=term))


@click.command("show")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_show(product_id: int) -> None:
    """Show one product."""
    handler = ShowProductHandler(bootstrap.unit_of_work())

    try:
        p = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{p.id}  [{p.code}] {p.name}")
    click.echo(f"Stock:  {p.total_quantity}")
    click.echo(f"Price:  {p.price}")
    if p.description:
        click.echo(f"About:  {p.description}")


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--code", default=None, help="New code.")
@click.option("--name", default=None, help="New name.")
@click.option("--quantity", type=int, default=None, help="New number of units owned.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--description", default=None, help="New description.")
def product_update(
    product_id: int,
    code: str | None,
    name: str | None,
    quantity: int | None,
    price: str | None,
    description: str | None,
) -> None:
    """Edit a product; omitted options stay unchanged."""
    handler = UpdateProductHandler(bootstrap.unit_of_work())

    try:
        product = handler.handle(
            product_id=product_id,
            code=code,
            name=name,
            total_quantity=quantity,
            price=price,
            description=description,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} updated.")


@click.command("delete")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_delete(product_id: int) -> None:
    """Remove a product that no rental references."""
    handler = DeleteProductHandler(bootstrap.unit_of_work())

    try:
        handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} deleted.")


@click.command("available")
@click.option("--start", "start_date", required=True, help="Start date (YYYY-MM-DD).")
@click.option("--end", "end_date", required=True, help="End date (YYYY-MM-DD).")
@click.option("--search", "term", default=None, help="Filter by name or code.")
@click.option("--page", default=None, help="Page number (default 1).")
@click.option("--limit", default=None, help="Rows per page.")
def product_available(
    start_date: str,
    end_date: str,
    term: str | None,
    page: str | None,
    limit: str | None,
) -> None:
    """List products with their free units over a date range."""
    handler = SearchAvailableProductsHandler(bootstrap.unit_of_work())

    try:
        result = handler.handle(start_date, end_date, _pagination(page, limit), term=term)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _print_products(result, with_availability=True)


@click.command("recalculate")
@click.option("--start", "start_date", required=True, help="Start date (YYYY-MM-DD).")
@click.option("--end", "end_date", required=True, help="End date (YYYY-MM-DD).")
@click.option("--ids", required=True, help="Comma-separated product IDs.")
def product_recalculate(start_date: str, end_date: str, ids: str) -> None:
    """Recompute availability for specific products."""
    try:
        product_ids = [int(raw) for raw in ids.split(",") if raw.strip()]
    except ValueError:
        raise click.BadParameter(f"Invalid product IDs '{ids}'.") from None

    handler = RecalculateAvailabilityHandler(bootstrap.unit_of_work())

    try:
        available = handler.handle(start_date, end_date, product_ids)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for product_id, quantity in available.items():
        click.echo(f"{product_id}: {quantity}")
