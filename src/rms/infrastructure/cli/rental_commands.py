"""CLI commands for the Rental aggregate."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from rms.application.build_invoice import BuildInvoiceHandler
from rms.application.complete_rental import CompleteRentalHandler
from rms.application.create_rental import CreateRentalHandler
from rms.application.dto import (
    ClientSpec,
    CompleteRentalCommand,
    CreateRentalCommand,
    RentalDTO,
    RentalItemSpec,
    ReturnSpec,
    UpdateRentalCommand,
)
from rms.application.list_rentals import ListRentalsHandler
from rms.application.pagination import Pagination
from rms.application.show_rental import ShowRentalHandler
from rms.application.update_rental import UpdateRentalHandler
from rms.domain.exceptions import DomainException
from rms.infrastructure import bootstrap, config


def _parse_pairs(raw: str, what: str) -> list[tuple[int, int]]:
    """Parse '3:2,7:1' into [(3, 2), (7, 1)]."""
    pairs: list[tuple[int, int]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid {what} '{pair}'. Expected 'ProductID:Quantity'."
            )
        pid_str, qty_str = pair.split(":", 1)
        try:
            pairs.append((int(pid_str), int(qty_str)))
        except ValueError:
            raise click.BadParameter(f"Invalid {what} '{pair}'.") from None
    return pairs


def _parse_items(raw: str) -> list[RentalItemSpec]:
    return [
        RentalItemSpec(product_id=pid, quantity=qty)
        for pid, qty in _parse_pairs(raw, "item")
    ]


def _parse_returns(raw: str | None) -> list[ReturnSpec]:
    if not raw:
        return []
    return [
        ReturnSpec(product_id=pid, quantity_returned=qty)
        for pid, qty in _parse_pairs(raw, "return")
    ]


def _display_rental(dto: RentalDTO) -> None:
    click.echo(f"Rental #{dto.id}  (status={dto.status})")
    click.echo(f"Client:   {dto.client_name} (DNI {dto.client_dni})")
    click.echo(f"Period:   {dto.start_date} .. {dto.end_date}")
    click.echo(f"Created:  {dto.created_at} by {dto.created_by}")
    if dto.is_delivery_by_us:
        click.echo(f"Delivery: {dto.delivery_price}")
    click.echo(f"Discount: {dto.discount}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    if dto.date_returned:
        click.echo(f"Returned: {dto.date_returned}")
    if dto.return_notes:
        click.echo(f"Return notes: {dto.return_notes}")
    click.echo()

    click.echo(f"  {'ID':<6} {'Product':<24} {'Rented':>7} {'Returned':>9} {'Out':>5}")
    click.echo(f"  {'-' * 55}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_id:<6} {line.product_name:<24} "
            f"{line.quantity_rented:>7} {line.quantity_returned:>9} {line.outstanding:>5}"
        )


@click.command("create")
@click.option("--client-id", type=int, default=None, help="Existing client ID.")
@click.option("--client-name", default=None, help="Client name (new client).")
@click.option("--client-dni", default=None, help="Client national ID.")
@click.option("--client-phone", default=None, help="Client phone.")
@click.option("--start", "start_date", required=True, help="Start date (YYYY-MM-DD).")
@click.option("--end", "end_date", required=True, help="End date (YYYY-MM-DD).")
@click.option("--items", required=True, help="Items as 'ProductID:Qty,ProductID:Qty'.")
@click.option("--notes", default=None, help="Free-form notes.")
@click.option("--delivery/--no-delivery", default=False, help="We deliver the goods.")
@click.option("--delivery-price", default=None, help="Delivery fee (e.g. 15.00).")
@click.option("--discount", default=None, help="Discount percentage (0-100).")
@click.option("--actor", default=None, help="User recorded as the creator.")
def rental_create(
    client_id: int | None,
    client_name: str | None,
    client_dni: str | None,
    client_phone: str | None,
    start_date: str,
    end_date: str,
    items: str,
    notes: str | None,
    delivery: bool,
    delivery_price: str | None,
    discount: str | None,
    actor: str | None,
) -> None:
    """Create a rental and reserve its products."""
    command = CreateRentalCommand(
        client=ClientSpec(
            client_id=client_id, name=client_name, phone=client_phone, dni=client_dni
        ),
        start_date=start_date,
        end_date=end_date,
        items=_parse_items(items),
        notes=notes,
        is_delivery_by_us=delivery,
        delivery_price=delivery_price,
        discount=discount,
    )
    handler = CreateRentalHandler(bootstrap.unit_of_work())

    try:
        dto = handler.handle(command, actor_id=actor or config.DEFAULT_ACTOR)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Rental #{dto.id} created  (status={dto.status})")
    click.echo()
    _display_rental(dto)


@click.command("update")
@click.option("--id", "rental_id", required=True, type=int, help="Rental ID.")
@click.option("--client-id", type=int, default=None, help="Switch to this client.")
@click.option("--client-name", default=None, help="Client name (new client).")
@click.option("--client-dni", default=None, help="Client national ID.")
@click.option("--client-phone", default=None, help="Client phone.")
@click.option("--start", "start_date", default=None, help="New start date.")
@click.option("--end", "end_date", default=None, help="New end date.")
@click.option("--items", default=None, help="Complete new item set 'ProductID:Qty,...'.")
@click.option("--notes", default=None, help="Replace the notes.")
@click.option("--delivery/--no-delivery", default=None, help="We deliver the goods.")
@click.option("--delivery-price", default=None, help="Delivery fee.")
@click.option("--discount", default=None, help="Discount percentage (0-100).")
@click.option("--actor", default=None, help="User performing the change.")
def rental_update(
    rental_id: int,
    client_id: int | None,
    client_name: str | None,
    client_dni: str | None,
    client_phone: str | None,
    start_date: str | None,
    end_date: str | None,
    items: str | None,
    notes: str | None,
    delivery: bool | None,
    delivery_price: str | None,
    discount: str | None,
    actor: str | None,
) -> None:
    """Edit an existing rental; omitted options stay unchanged."""
    client = None
    if client_id is not None or client_name or client_dni:
        client = ClientSpec(
            client_id=client_id, name=client_name, phone=client_phone, dni=client_dni
        )
    command = UpdateRentalCommand(
        client=client,
        start_date=start_date,
        end_date=end_date,
        items=_parse_items(items) if items is not None else None,
        notes=notes,
        is_delivery_by_us=delivery,
        delivery_price=delivery_price,
        discount=discount,
    )
    handler = UpdateRentalHandler(bootstrap.unit_of_work())

    try:
        dto = handler.handle(rental_id, command, actor_id=actor or config.DEFAULT_ACTOR)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Rental #{dto.id} updated.")
    click.echo()
    _display_rental(dto)


@click.command("complete")
@click.option("--id", "rental_id", required=True, type=int, help="Rental ID.")
@click.option(
    "--status",
    required=True,
    type=click.Choice(["completed", "with_issues"]),
    help="Closing status.",
)
@click.option("--returns", default=None, help="Returned units as 'ProductID:Qty,...'.")
@click.option("--notes", "return_notes", default=None, help="Return notes.")
@click.option(
    "--date-returned",
    default=None,
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%d %H:%M"]),
    help="Return date (UTC). Defaults to now on the first completion.",
)
def rental_complete(
    rental_id: int,
    status: str,
    returns: str | None,
    return_notes: str | None,
    date_returned: datetime | None,
) -> None:
    """Record returned quantities and close a rental."""
    command = CompleteRentalCommand(
        status=status,
        returns=_parse_returns(returns),
        return_notes=return_notes,
        date_returned=(
            date_returned.replace(tzinfo=timezone.utc) if date_returned else None
        ),
    )
    handler = CompleteRentalHandler(bootstrap.unit_of_work())

    try:
        dto = handler.handle(rental_id, command)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Rental #{dto.id} closed as {dto.status}.")


@click.command("show")
@click.option("--id", "rental_id", required=True, type=int, help="Rental ID to display.")
def rental_show(rental_id: int) -> None:
    """Show details of an existing rental."""
    handler = ShowRentalHandler(bootstrap.unit_of_work())

    try:
        dto = handler.handle(rental_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_rental(dto)


@click.command("list")
@click.option("--page", default=None, help="Page number (default 1).")
@click.option("--limit", default=None, help="Rows per page.")
@click.option(
    "--status",
    default=None,
    type=click.Choice(["pending_return", "completed", "with_issues"]),
    help="Only rentals in this status.",
)
def rental_list(page: str | None, limit: str | None, status: str | None) -> None:
    """List rentals, newest first."""
    pagination = Pagination.from_raw(
        page, limit, default_limit=config.PAGE_SIZE, max_limit=config.MAX_PAGE_SIZE
    )
    handler = ListRentalsHandler(bootstrap.unit_of_work())

    try:
        result = handler.handle(pagination, status=status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.items:
        click.echo("No rentals found.")
        return

    click.echo(f"{'ID':<6} {'Client':<24} {'Start':<11} {'End':<11} {'Status':<15}")
    click.echo("-" * 70)
    for dto in result.items:
        click.echo(
            f"{dto.id:<6} {dto.client_name:<24} {dto.start_date:<11} "
            f"{dto.end_date:<11} {dto.status:<15}"
        )
    click.echo(f"Page {result.page}/{max(result.total_pages, 1)}  ({result.total} rentals)")


@click.command("invoice")
@click.option("--id", "rental_id", required=True, type=int, help="Rental ID to invoice.")
def rental_invoice(rental_id: int) -> None:
    """Print the priced summary of a rental."""
    try:
        handler = BuildInvoiceHandler(bootstrap.unit_of_work(), bootstrap.invoice_assembler())
        dto = handler.handle(rental_id)
    except (DomainException, RuntimeError) as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Rental #{dto.rental_id}")
    click.echo(f"Client:  {dto.client_name}  DNI {dto.client_dni}  Tel. {dto.client_phone}")
    click.echo(f"Period:  {dto.start_date} .. {dto.end_date}")
    click.echo(f"Seller:  {dto.created_by}")
    click.echo()
    click.echo(f"  {'Code':<10} {'Description':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-' * 67}")
    for line in dto.lines:
        click.echo(
            f"  {line.code:<10} {line.description:<24} {line.quantity:>5} "
            f"{line.unit_price:>12} {line.line_total:>12}"
        )
    click.echo(f"  {'-' * 67}")
    click.echo(f"  {'Subtotal':<53} {dto.subtotal:>12}")
    click.echo(f"  {'Discount (' + dto.discount + ')':<53} {dto.discount_amount:>12}")
    if dto.delivery_charge != "$0.00":
        click.echo(f"  {'Delivery':<53} {dto.delivery_charge:>12}")
    click.echo(f"  {'Total':<53} {dto.total:>12}")
    click.echo()
    click.echo(f"Notes: {dto.notes}")
