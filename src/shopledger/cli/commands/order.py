"""Sales order commands."""

import click
from shopledger.cli.date_filters import resolve_cli_date_range, resolve_cli_datetime
from shopledger.cli.error_handling import handle_domain_error
from shopledger.cli.resolution import resolve_customer_or_exit, resolve_product_or_exit
from shopledger.domain.customer import CustomerService
from shopledger.domain.entities import OrderDraft, OrderLineDraft, OrderUpdate
from shopledger.domain.errors import DomainError
from shopledger.domain.order import OrderService
from shopledger.domain.product import ProductService
from shopledger.utils.amount_parser import parse_amount
from shopledger.utils.line_parser import parse_line


@click.group()
def order_group():
    """Manage sales orders."""
    pass


@order_group.command("create")
@click.option("--customer", required=True, help="Customer name or ID")
@click.option(
    "--line",
    "raw_lines",
    multiple=True,
    required=True,
    help="Line item PRODUCT:QTY[+FREE][@PRICE]; PRICE defaults to the product's selling price",
)
@click.option("--paid", default="0", help="Amount paid at the time of sale")
@click.option("--discount", default="0", help="Discount off the order subtotal")
@click.option("--payment-mode", help="Cash, UPI, Card or Net Banking")
@click.option("--salesman", help="Salesman ID")
@click.option("--date", "order_date", help="Backdate the order (YYYY-MM-DD or relative like 'yesterday')")
@click.pass_context
def create_order(
    ctx,
    customer: str,
    raw_lines: tuple[str, ...],
    paid: str,
    discount: str,
    payment_mode: str | None,
    salesman: str | None,
    order_date: str | None,
):
    """Create an order, debit stock and bill the customer.

    Free units count against stock but are not charged.

    Examples:
        shopledger order create --customer "Asha Traders" --line SKU-1:3 --line SKU-2:10+1@22.50
        shopledger order create --customer 4 --line SKU-1:2 --paid 500 --payment-mode UPI
    """
    db = ctx.obj["db"]
    product_service = ProductService(db)
    customer_id = resolve_customer_or_exit(ctx, CustomerService(db), customer)
    created_at = resolve_cli_datetime(ctx, order_date)

    lines = []
    for raw in raw_lines:
        try:
            parsed = parse_line(raw)
        except ValueError as e:
            handle_domain_error(ctx, e)
        product_id = resolve_product_or_exit(ctx, product_service, parsed.product)
        product = product_service.require_product(product_id)
        lines.append(
            OrderLineDraft(
                product_id=product_id,
                quantity=parsed.quantity,
                free_quantity=parsed.free_quantity,
                unit_price=product.unit_price,
                selling_price=parsed.price if parsed.price is not None else product.price,
                description=product.name,
            )
        )

    try:
        order = OrderService(db).create_order(
            OrderDraft(
                customer_id=customer_id,
                lines=tuple(lines),
                amount_paid=parse_amount(paid),
                discount=parse_amount(discount),
                payment_mode=payment_mode,
                salesman_id=salesman,
                created_at=created_at,
            )
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Created order {order.id} for '{order.customer_name}': total {order.total:,.2f}, "
        f"paid {order.amount_paid:,.2f} ({order.payment_status.value})"
    )


@order_group.command("list")
@click.option("--customer", help="Customer name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.pass_context
def list_orders(ctx, customer: str | None, start_date: str | None, end_date: str | None):
    """List orders, newest first."""
    db = ctx.obj["db"]
    customer_id = None
    if customer is not None:
        customer_id = resolve_customer_or_exit(ctx, CustomerService(db), customer)
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)

    orders = OrderService(db).list_orders(start_date=start, end_date=end, customer_id=customer_id)
    if not orders:
        click.echo("No orders found.")
        return

    click.echo("\nOrders:")
    click.echo("-" * 100)
    for o in orders:
        click.echo(
            f"ID: {o.id:4d} | {o.created_at:%Y-%m-%d} | {o.customer_name:20s} "
            f"| Total: {o.total:>10,.2f} | Paid: {o.amount_paid:>10,.2f} "
            f"| {o.payment_status.value:7s} | {o.status}"
        )


@order_group.command("show")
@click.argument("order_id", type=int)
@click.pass_context
def show_order(ctx, order_id: int):
    """Show an order with its line items."""
    try:
        order = OrderService(ctx.obj["db"]).require_order(order_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Order {order.id} ({order.created_at:%Y-%m-%d}) - {order.status}")
    click.echo(f"  Customer: {order.customer_name} (ID: {order.customer_id})")
    if order.customer_address:
        click.echo(f"  Address: {order.customer_address}")
    click.echo("\n  Lines:")
    for line in order.lines:
        free = f" +{line.free_quantity} free" if line.free_quantity else ""
        click.echo(
            f"    {line.description or line.product_id}: {line.quantity}{free} "
            f"x {line.selling_price:,.2f}"
        )
    if order.discount:
        click.echo(f"\n  Discount: {order.discount:,.2f}")
    click.echo(f"  Total: {order.total:,.2f}")
    click.echo(f"  Paid: {order.amount_paid:,.2f} ({order.payment_status.value})")
    click.echo(f"  Owed: {order.amount_owed:,.2f}")
    if order.payment_mode:
        click.echo(f"  Payment mode: {order.payment_mode}")


@order_group.command("update")
@click.argument("order_id", type=int)
@click.option("--paid", help="New total amount paid")
@click.option("--total", help="New order total")
@click.option("--status", help="Pending, Completed or Cancelled")
@click.option("--payment-mode", help="Cash, UPI, Card or Net Banking")
@click.pass_context
def update_order(
    ctx,
    order_id: int,
    paid: str | None,
    total: str | None,
    status: str | None,
    payment_mode: str | None,
):
    """Update an order.

    Changing the amount paid or the total moves the customer's balance by
    the difference. Payment status follows the amounts.

    Examples:
        shopledger order update 12 --paid 800
        shopledger order update 12 --status Completed
    """
    try:
        changes = OrderUpdate(
            amount_paid=parse_amount(paid) if paid is not None else None,
            total=parse_amount(total) if total is not None else None,
            status=status,
            payment_mode=payment_mode,
        )
        if changes.is_empty():
            click.echo("Nothing to update.")
            return
        OrderService(ctx.obj["db"]).update_order(order_id, changes)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated order {order_id}")


@order_group.command("delete")
@click.argument("order_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_order(ctx, order_id: int, yes: bool):
    """Delete an order, restoring stock and the customer's balance."""
    service = OrderService(ctx.obj["db"])
    try:
        order = service.require_order(order_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete order {order.id} for '{order.customer_name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_order(order_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted order {order_id}")


def register_commands(cli):
    """Register order commands with main CLI."""
    cli.add_command(order_group, name="order")
