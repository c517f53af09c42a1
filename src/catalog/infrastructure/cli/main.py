import click

from catalog.infrastructure.bootstrap import build_services
from catalog.infrastructure.cli.health_commands import health
from catalog.infrastructure.cli.product_commands import (
    product_create,
    product_delete,
    product_get,
    product_list,
    product_search_category,
    product_search_name,
    product_update,
)
from catalog.infrastructure.config import get_settings
from catalog.infrastructure.log_setup import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Catalog: product catalog with a write-through cache"""
    settings = get_settings()
    configure_logging(settings)
    services = build_services(settings)
    ctx.obj = services
    ctx.call_on_close(services.close)


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
product.add_command(product_create)
product.add_command(product_delete)
product.add_command(product_get)
product.add_command(product_list)
product.add_command(product_search_category)
product.add_command(product_search_name)
product.add_command(product_update)
cli.add_command(health)
