"""CLI command for store and cache health."""

from __future__ import annotations

import click

from catalog.application.check_health import UNHEALTHY, CheckHealthHandler
from catalog.infrastructure.bootstrap import Services


@click.command("health")
@click.pass_obj
def health(services: Services) -> None:
    """Check the store and the cache."""
    handler = CheckHealthHandler(services.product_repo, services.cache)
    report = handler.handle()

    click.echo(f"Status: {report.status}")
    for name, status in report.services.items():
        click.echo(f"  {name:<8} {status}")

    if report.status == UNHEALTHY:
        raise click.exceptions.Exit(1)
