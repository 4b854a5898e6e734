import click

from rms.infrastructure import bootstrap
from rms.infrastructure.cli.client_commands import client_show, client_update
from rms.infrastructure.cli.inventory_commands import dashboard, inventory_availability
from rms.infrastructure.cli.product_commands import (
    product_add,
    product_available,
    product_delete,
    product_list,
    product_recalculate,
    product_show,
    product_update,
)
from rms.infrastructure.cli.rental_commands import (
    rental_complete,
    rental_create,
    rental_invoice,
    rental_list,
    rental_show,
    rental_update,
)
from rms.infrastructure.logger import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override RMS_LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """RMS: Rental Management System"""
    configure_logging(log_level)


@cli.group()
def rental() -> None:
    """Manage rentals."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def client() -> None:
    """Manage clients."""


@cli.group()
def inventory() -> None:
    """Query stock availability."""


@cli.group()
def db() -> None:
    """Database maintenance."""


@db.command("init")
def db_init() -> None:
    """Create the database tables if they do not exist."""
    bootstrap.init_database()
    click.echo("Database ready.")


# Register subcommands
rental.add_command(rental_complete)
rental.add_command(rental_create)
rental.add_command(rental_invoice)
rental.add_command(rental_list)
rental.add_command(rental_show)
rental.add_command(rental_update)
product.add_command(product_add)
product.add_command(product_available)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_recalculate)
product.add_command(product_show)
product.add_command(product_update)
client.add_command(client_show)
client.add_command(client_update)
inventory.add_command(inventory_availability)
cli.add_command(dashboard)
