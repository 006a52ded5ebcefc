"""Product (inventory) commands."""

import click
from shopledger.cli.error_handling import handle_domain_error
from shopledger.cli.resolution import resolve_product_or_exit
from shopledger.domain.errors import DomainError
from shopledger.domain.product import ProductService
from shopledger.utils.amount_parser import parse_amount, parse_quantity


@click.group()
def product_group():
    """Manage products and stock."""
    pass


@product_group.command("create")
@click.argument("sku", metavar="SKU")
@click.argument("name", metavar="NAME")
@click.option("--description", help="Product description")
@click.option("--cost", default="0", help="Unit cost price")
@click.option("--price", default="0", help="Selling price")
@click.option("--stock", type=int, default=0, help="Initial stock level")
@click.option("--reorder-level", type=int, default=10, help="Low-stock threshold")
@click.pass_context
def create_product(
    ctx,
    sku: str,
    name: str,
    description: str | None,
    cost: str,
    price: str,
    stock: int,
    reorder_level: int,
):
    """Create a new product.

    Examples:
        shopledger product create SKU-1 "Basmati Rice 5kg" --cost 380 --price 450 --stock 20
    """
    service = ProductService(ctx.obj["db"])

    try:
        product_id = service.create_product(
            sku=sku,
            name=name,
            description=description,
            unit_price=parse_amount(cost),
            price=parse_amount(price),
            stock_level=stock,
            reorder_level=reorder_level,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created product '{name}' (ID: {product_id}, SKU: {sku})")


def _echo_products(products) -> None:
    click.echo("-" * 80)
    for p in products:
        click.echo(
            f"ID: {p.id:3d} | {p.sku:10s} | {p.name:25s} | Stock: {p.stock_level:5d} "
            f"| {p.stock_status.value}"
        )


@product_group.command("list")
@click.pass_context
def list_products(ctx):
    """List all products."""
    products = ProductService(ctx.obj["db"]).list_products()
    if not products:
        click.echo("No products found.")
        return

    click.echo("\nProducts:")
    _echo_products(products)


@product_group.command("low-stock")
@click.pass_context
def low_stock(ctx):
    """List products at or below their reorder level."""
    products = ProductService(ctx.obj["db"]).list_low_stock()
    if not products:
        click.echo("No products are low on stock.")
        return

    click.echo("\nLow stock:")
    _echo_products(products)


@product_group.command("show")
@click.argument("product", metavar="PRODUCT")
@click.pass_context
def show_product(ctx, product: str):
    """Show a product. PRODUCT can be a SKU or ID."""
    service = ProductService(ctx.obj["db"])
    product_id = resolve_product_or_exit(ctx, service, product)
    p = service.require_product(product_id)

    click.echo(f"Product {p.id}: {p.name} ({p.sku})")
    if p.description:
        click.echo(f"  Description: {p.description}")
    click.echo(f"  Cost: {p.unit_price:,.2f}")
    click.echo(f"  Price: {p.price:,.2f}")
    click.echo(f"  Stock: {p.stock_level} (reorder at {p.reorder_level}) - {p.stock_status.value}")


@product_group.command("update")
@click.argument("product", metavar="PRODUCT")
@click.option("--sku", help="New SKU")
@click.option("--name", help="New name")
@click.option("--description", help="New description")
@click.option("--cost", help="New unit cost price")
@click.option("--price", help="New selling price")
@click.option("--reorder-level", type=int, help="New low-stock threshold")
@click.pass_context
def update_product(
    ctx,
    product: str,
    sku: str | None,
    name: str | None,
    description: str | None,
    cost: str | None,
    price: str | None,
    reorder_level: int | None,
):
    """Update product fields. Use adjust-stock to change the stock level."""
    service = ProductService(ctx.obj["db"])
    product_id = resolve_product_or_exit(ctx, service, product)

    try:
        service.update_product(
            product_id,
            sku=sku,
            name=name,
            description=description,
            unit_price=parse_amount(cost) if cost is not None else None,
            price=parse_amount(price) if price is not None else None,
            reorder_level=reorder_level,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated product {product_id}")


@product_group.command("adjust-stock")
@click.argument("product", metavar="PRODUCT")
@click.argument("delta", metavar="DELTA")
@click.pass_context
def adjust_stock(ctx, product: str, delta: str):
    """Add (or with a negative DELTA, remove) units of stock.

    Examples:
        shopledger product adjust-stock SKU-1 5
        shopledger product adjust-stock SKU-1 -- -2
    """
    service = ProductService(ctx.obj["db"])
    product_id = resolve_product_or_exit(ctx, service, product)

    try:
        new_level = service.adjust_stock(product_id, parse_quantity(delta))
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Stock of product {product_id} is now {new_level}")


@product_group.command("delete")
@click.argument("product", metavar="PRODUCT")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_product(ctx, product: str, yes: bool):
    """Delete a product that no order or purchase refers to."""
    service = ProductService(ctx.obj["db"])
    product_id = resolve_product_or_exit(ctx, service, product)

    if not yes and not click.confirm(f"Are you sure you want to delete product {product_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_product(product_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted product {product_id}")


def register_commands(cli):
    """Register product commands with main CLI."""
    cli.add_command(product_group, name="product")
