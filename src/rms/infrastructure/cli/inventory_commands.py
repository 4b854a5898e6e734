"""CLI commands for stock availability."""

from __future__ import annotations

import click

from rms.application.check_availability import CheckAvailabilityHandler
from rms.application.show_dashboard import ShowDashboardHandler
from rms.domain.exceptions import DomainException
from rms.infrastructure import bootstrap


@click.command("availability")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--start", "start_date", required=True, help="Start date (YYYY-MM-DD).")
@click.option("--end", "end_date", required=True, help="End date (YYYY-MM-DD).")
def inventory_availability(product_id: int, start_date: str, end_date: str) -> None:
    """Free units of a product over a date range."""
    handler = CheckAvailabilityHandler(bootstrap.unit_of_work())

    try:
        available = handler.handle(product_id, start_date, end_date)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id}: {available} available {start_date} .. {end_date}")


@click.command("dashboard")
def dashboard() -> None:
    """Rentals awaiting return and rentals starting this month."""
    dto = ShowDashboardHandler(bootstrap.unit_of_work()).handle()

    click.echo(f"Pending returns:       {dto.pending_rentals}")
    click.echo(f"Rentals in {dto.month}:   {dto.monthly_events}")
