"""Customer management commands."""

import click
from shopledger.cli.error_handling import handle_domain_error
from shopledger.cli.resolution import resolve_customer_or_exit
from shopledger.domain.customer import CustomerService
from shopledger.domain.errors import DomainError
from shopledger.domain.order import OrderService
from shopledger.utils.amount_parser import parse_amount


@click.group()
def customer_group():
    """Manage customers."""
    pass


@customer_group.command("create")
@click.argument("name", metavar="NAME")
@click.option("--email", help="Email address")
@click.option("--phone", help="Phone number")
@click.option("--address", help="Postal address")
@click.option(
    "--opening-balance",
    default="0",
    help="Signed opening balance (negative means the customer owes money)",
)
@click.pass_context
def create_customer(
    ctx,
    name: str,
    email: str | None,
    phone: str | None,
    address: str | None,
    opening_balance: str,
):
    """Create a new customer.

    Examples:
        shopledger customer create "Asha Traders" --phone 9800000000
        shopledger customer create "Ravi Stores" --opening-balance -1500
    """
    service = CustomerService(ctx.obj["db"])

    try:
        balance = parse_amount(opening_balance)
        customer_id = service.create_customer(
            name=name, email=email, phone=phone, address=address, opening_balance=balance
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created customer '{name}' (ID: {customer_id})")


@customer_group.command("list")
@click.option("--search", help="Filter by name")
@click.pass_context
def list_customers(ctx, search: str | None):
    """List customers, newest first."""
    service = CustomerService(ctx.obj["db"])

    customers = service.list_customers(search=search)
    if not customers:
        click.echo("No customers found.")
        return

    click.echo("\nCustomers:")
    click.echo("-" * 60)
    for c in customers:
        click.echo(f"ID: {c.id:3d} | {c.name:25s} | Balance: {c.balance:>12,.2f}")


@customer_group.command("show")
@click.argument("customer", metavar="CUSTOMER")
@click.pass_context
def show_customer(ctx, customer: str):
    """Show a customer and their outstanding orders.

    CUSTOMER can be a customer name or ID.
    """
    db = ctx.obj["db"]
    service = CustomerService(db)
    customer_id = resolve_customer_or_exit(ctx, service, customer)
    cust = service.require_customer(customer_id)

    click.echo(f"Customer {cust.id}: {cust.name}")
    if cust.phone:
        click.echo(f"  Phone: {cust.phone}")
    if cust.email:
        click.echo(f"  Email: {cust.email}")
    if cust.address:
        click.echo(f"  Address: {cust.address}")
    click.echo(f"  Status: {cust.status}")
    click.echo(f"  Balance: {cust.balance:,.2f}")

    outstanding = OrderService(db).list_outstanding_orders(customer_id)
    if outstanding:
        click.echo("\nOutstanding orders (oldest first):")
        for o in outstanding:
            click.echo(
                f"  Order {o.id:4d} | {o.created_at:%Y-%m-%d} | Total: {o.total:>10,.2f} "
                f"| Paid: {o.amount_paid:>10,.2f} | {o.payment_status.value}"
            )


@customer_group.command("update")
@click.argument("customer", metavar="CUSTOMER")
@click.option("--name", help="New name")
@click.option("--email", help="New email")
@click.option("--phone", help="New phone number")
@click.option("--address", help="New address")
@click.option("--status", help="New status label")
@click.pass_context
def update_customer(
    ctx,
    customer: str,
    name: str | None,
    email: str | None,
    phone: str | None,
    address: str | None,
    status: str | None,
):
    """Update customer contact details. The balance cannot be edited."""
    service = CustomerService(ctx.obj["db"])
    customer_id = resolve_customer_or_exit(ctx, service, customer)

    try:
        service.update_customer(
            customer_id, name=name, email=email, phone=phone, address=address, status=status
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated customer {customer_id}")


@customer_group.command("delete")
@click.argument("customer", metavar="CUSTOMER")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_customer(ctx, customer: str, yes: bool):
    """Delete a customer that has no orders."""
    service = CustomerService(ctx.obj["db"])
    customer_id = resolve_customer_or_exit(ctx, service, customer)
    cust = service.require_customer(customer_id)

    if not yes and not click.confirm(f"Are you sure you want to delete customer '{cust.name}' (ID: {customer_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_customer(customer_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted customer '{cust.name}'")


@customer_group.command("pay")
@click.argument("customer", metavar="CUSTOMER")
@click.argument("amount", metavar="AMOUNT")
@click.pass_context
def pay(ctx, customer: str, amount: str):
    """Record a payment from a customer.

    The payment settles the customer's oldest unpaid orders first. Anything
    left over is credited to the customer's balance.

    Examples:
        shopledger customer pay "Asha Traders" 1200
    """
    db = ctx.obj["db"]
    customer_id = resolve_customer_or_exit(ctx, CustomerService(db), customer)

    try:
        allocation = OrderService(db).allocate_payment(customer_id, parse_amount(amount))
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded payment of {allocation.amount:,.2f}")
    for app in allocation.applications:
        click.echo(
            f"  Order {app.order_id}: applied {app.applied:,.2f} "
            f"(paid {app.new_amount_paid:,.2f}, {app.payment_status.value})"
        )
    if allocation.credited > 0:
        click.echo(f"  Credited to balance: {allocation.credited:,.2f}")


def register_commands(cli):
    """Register customer commands with main CLI."""
    cli.add_command(customer_group, name="customer")
