"""CLI commands for clients."""

from __future__ import annotations

import click

from rms.application.dto import ClientDTO
from rms.application.manage_clients import FindClientHandler, UpdateClientHandler
from rms.domain.exceptions import DomainException
from rms.infrastructure import bootstrap


def _display_client(dto: ClientDTO) -> None:
    click.echo(f"Client #{dto.id}  {dto.name}")
    click.echo(f"DNI:    {dto.dni}")
    click.echo(f"Phone:  {dto.phone or '-'}")


@click.command("show")
@click.option("--dni", required=True, help="National ID.")
def client_show(dni: str) -> None:
    """Look a client up by national ID."""
    handler = FindClientHandler(bootstrap.unit_of_work())

    try:
        dto = handler.handle(dni)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_client(dto)


@click.command("update")
@click.option("--id", "client_id", required=True, type=int, help="Client ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--phone", default=None, help="New phone.")
def client_update(client_id: int, name: str | None, phone: str | None) -> None:
    """Change a client's name or phone."""
    handler = UpdateClientHandler(bootstrap.unit_of_work())

    try:
        dto = handler.handle(client_id, name=name, phone=phone)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Client #{dto.id} updated.")
    _display_client(dto)
