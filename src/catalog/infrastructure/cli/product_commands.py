"""CLI commands for the Product aggregate."""

from __future__ import annotations

import json

import click

from catalog.application.create_product import CreateProductHandler
from catalog.application.delete_product import DeleteProductHandler
from catalog.application.dto import (
    DEFAULT_PAGE_SIZE,
    CreateProductInput,
    PageRequest,
    UpdateProductInput,
)
from catalog.application.get_product import GetProductHandler
from catalog.application.list_products import ListProductsHandler
from catalog.application.search_products_by_category import SearchProductsByCategoryHandler
from catalog.application.search_products_by_name import SearchProductsByNameHandler
from catalog.application.update_product import UpdateProductHandler
from catalog.domain.exceptions import DomainException
from catalog.domain.model.product import Product
from catalog.infrastructure.bootstrap import Services


def _parse_specs(raw: tuple[str, ...]) -> dict:
    """Parse ('color=red', 'ram_gb=8') into {'color': 'red', 'ram_gb': 8}.

    Values are read as JSON when possible so numbers, booleans and nested
    structures survive; anything else is kept as plain text.
    """
    specs: dict = {}
    for pair in raw:
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid specification '{pair}'. Expected 'key=value'."
            )
        key, value = pair.split("=", 1)
        try:
            specs[key.strip()] = json.loads(value)
        except ValueError:
            specs[key.strip()] = value
    return specs


def _display_product(product: Product) -> None:
    click.echo(f"Product {product.id}  (version={product.version})")
    click.echo(f"Name:       {product.name}")
    click.echo(f"Reference:  {product.reference_number}")
    click.echo(f"Category:   {product.category}")
    click.echo(f"Brand:      {product.brand}")
    click.echo(f"SKU:        {product.sku}")
    click.echo(f"Stock:      {product.stock}")
    click.echo(f"Created:    {product.created_at.strftime('%Y-%m-%d %H:%M UTC')}")
    click.echo(f"Updated:    {product.updated_at.strftime('%Y-%m-%d %H:%M UTC')}")
    if product.description:
        click.echo(f"Description: {product.description}")
    for image in product.images:
        click.echo(f"  image: {image}")
    if product.specifications:
        click.echo(f"Specifications: {json.dumps(product.specifications, sort_keys=True)}")


def _display_table(products: list[Product]) -> None:
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<26}  {'Name':<24} {'Category':<16} {'Stock':>6} {'Ver':>4}")
    click.echo("-" * 80)
    for p in products:
        click.echo(
            f"{p.id:<26}  {p.name[:24]:<24} {p.category[:16]:<16} {p.stock:>6} {p.version:>4}"
        )


def _page(limit: int, offset: int) -> PageRequest:
    try:
        return PageRequest(limit=limit, offset=offset)
    except DomainException as exc:
        raise click.BadParameter(str(exc))


_pagination_options = [
    click.option("--limit", default=DEFAULT_PAGE_SIZE, show_default=True, type=int),
    click.option("--offset", default=0, show_default=True, type=int),
]


def _with_pagination(command):
    for option in reversed(_pagination_options):
        command = option(command)
    return command


@click.command("create")
@click.option("--name", required=True, help="Product name.")
@click.option("--reference", "reference_number", required=True, help="Reference number.")
@click.option("--category", required=True, help="Category.")
@click.option("--description", default="", help="Free-text description.")
@click.option("--sku", default="", help="Stock keeping unit.")
@click.option("--brand", default="", help="Brand.")
@click.option("--stock", default=0, type=int, help="Units in stock.")
@click.option("--image", "images", multiple=True, help="Image URL (repeatable).")
@click.option("--spec", "specs", multiple=True, help="Specification as key=value (repeatable).")
@click.pass_obj
def product_create(
    services: Services,
    name: str,
    reference_number: str,
    category: str,
    description: str,
    sku: str,
    brand: str,
    stock: int,
    images: tuple[str, ...],
    specs: tuple[str, ...],
) -> None:
    """Add a new product to the catalog."""
    handler = CreateProductHandler(services.product_repo, services.cache)
    data = CreateProductInput(
        name=name,
        reference_number=reference_number,
        category=category,
        description=description,
        sku=sku,
        brand=brand,
        stock=stock,
        images=list(images),
        specifications=_parse_specs(specs),
    )

    try:
        product = handler.handle(data)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' saved (version={product.version})")


@click.command("get")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_get(services: Services, product_id: str) -> None:
    """Show a single product."""
    handler = GetProductHandler(services.product_repo, services.cache)

    try:
        product = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_product(product)


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--category", default=None, help="New category.")
@click.option("--description", default=None, help="New description.")
@click.option("--sku", default=None, help="New SKU.")
@click.option("--brand", default=None, help="New brand.")
@click.option("--stock", default=None, type=int, help="New stock level.")
@click.option("--image", "images", multiple=True, help="Replace images (repeatable).")
@click.option("--spec", "specs", multiple=True, help="Replace specifications (repeatable).")
@click.option("--clear-images", is_flag=True, help="Remove every image.")
@click.option("--clear-specs", is_flag=True, help="Remove every specification.")
@click.pass_obj
def product_update(
    services: Services,
    product_id: str,
    name: str | None,
    category: str | None,
    description: str | None,
    sku: str | None,
    brand: str | None,
    stock: int | None,
    images: tuple[str, ...],
    specs: tuple[str, ...],
    clear_images: bool,
    clear_specs: bool,
) -> None:
    """Change fields of an existing product."""
    if clear_images and images:
        raise click.UsageError("--clear-images cannot be combined with --image")
    if clear_specs and specs:
        raise click.UsageError("--clear-specs cannot be combined with --spec")

    handler = UpdateProductHandler(services.product_repo, services.cache)
    changes = UpdateProductInput(
        name=name,
        category=category,
        description=description,
        sku=sku,
        brand=brand,
        stock=stock,
        images=[] if clear_images else (list(images) if images else None),
        specifications={} if clear_specs else (_parse_specs(specs) if specs else None),
    )

    try:
        product = handler.handle(product_id, changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} is at version {product.version}")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_delete(services: Services, product_id: str) -> None:
    """Remove a product from the catalog."""
    handler = DeleteProductHandler(services.product_repo, services.cache, services.cleanup)

    try:
        handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} deleted.")


@click.command("list")
@_with_pagination
@click.pass_obj
def product_list(services: Services, limit: int, offset: int) -> None:
    """List products, newest first."""
    handler = ListProductsHandler(services.product_repo, services.cache)

    try:
        products = handler.handle(_page(limit, offset))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_table(products)


@click.command("search-name")
@click.option("--name", required=True, help="Name or part of a name.")
@_with_pagination
@click.pass_obj
def product_search_name(services: Services, name: str, limit: int, offset: int) -> None:
    """Find products by name."""
    handler = SearchProductsByNameHandler(services.product_repo, services.cache)

    try:
        products = handler.handle(name, _page(limit, offset))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_table(products)


@click.command("search-category")
@click.option("--category", required=True, help="Category (case-insensitive).")
@_with_pagination
@click.pass_obj
def product_search_category(
    services: Services, category: str, limit: int, offset: int
) -> None:
    """Find products in a category."""
    handler = SearchProductsByCategoryHandler(services.product_repo, services.cache)

    try:
        products = handler.handle(category, _page(limit, offset))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_table(products)
