"""CLI helpers for customer and product resolution."""

from __future__ import annotations

import click
from shopledger.domain.customer import CustomerService
from shopledger.domain.product import ProductService
from shopledger.utils.resolvers import resolve_customer, resolve_product


def resolve_customer_or_exit(
    ctx: click.Context, customer_service: CustomerService, customer: str | int
) -> int:
    """Resolve customer name or ID, or exit with a CLI error."""
    try:
        return resolve_customer(customer_service, customer)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_product_or_exit(
    ctx: click.Context, product_service: ProductService, product: str | int
) -> int:
    """Resolve product SKU or ID, or exit with a CLI error."""
    try:
        return resolve_product(product_service, product)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
