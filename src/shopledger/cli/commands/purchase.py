"""Stock purchase commands."""

import click
from shopledger.cli.date_filters import resolve_cli_date_range, resolve_cli_datetime
from shopledger.cli.error_handling import handle_domain_error
from shopledger.cli.resolution import resolve_product_or_exit
from shopledger.domain.entities import PurchaseDraft, PurchaseLineDraft
from shopledger.domain.errors import DomainError
from shopledger.domain.product import ProductService
from shopledger.domain.purchase import PurchaseService
from shopledger.utils.amount_parser import parse_amount
from shopledger.utils.line_parser import parse_line


@click.group()
def purchase_group():
    """Record and manage stock purchases."""
    pass


@purchase_group.command("record")
@click.option("--supplier", required=True, help="Supplier name")
@click.option(
    "--line",
    "raw_lines",
    multiple=True,
    required=True,
    help="Line item PRODUCT:QTY[@COST]; COST defaults to the product's current cost",
)
@click.option("--company", help="Supplier company")
@click.option("--payment-mode", help="Cash, UPI, Card or Net Banking")
@click.option("--date", "purchase_date", help="Purchase date (YYYY-MM-DD or relative like 'yesterday')")
@click.pass_context
def record_purchase(
    ctx,
    supplier: str,
    raw_lines: tuple[str, ...],
    company: str | None,
    payment_mode: str | None,
    purchase_date: str | None,
):
    """Record a received purchase and add its quantities to stock.

    Each line also sets the product's cost price to the line's cost.

    Examples:
        shopledger purchase record --supplier "Metro Wholesale" --line SKU-1:24@360
    """
    db = ctx.obj["db"]
    product_service = ProductService(db)
    created_at = resolve_cli_datetime(ctx, purchase_date)

    lines = []
    for raw in raw_lines:
        try:
            parsed = parse_line(raw)
        except ValueError as e:
            handle_domain_error(ctx, e)
        if parsed.free_quantity:
            handle_domain_error(ctx, ValueError(f"Free units are not allowed on purchase lines: '{raw}'"))
        product_id = resolve_product_or_exit(ctx, product_service, parsed.product)
        product = product_service.require_product(product_id)
        lines.append(
            PurchaseLineDraft(
                product_id=product_id,
                quantity=parsed.quantity,
                unit_cost=parsed.price if parsed.price is not None else product.unit_price,
                description=product.name,
            )
        )

    try:
        purchase = PurchaseService(db).record_purchase(
            PurchaseDraft(
                supplier_name=supplier,
                lines=tuple(lines),
                company_name=company,
                payment_mode=payment_mode,
                purchase_date=created_at,
            )
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Recorded purchase {purchase.id} from '{purchase.supplier_name}': "
        f"{len(purchase.lines)} lines, total {purchase.total:,.2f}"
    )


@purchase_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.pass_context
def list_purchases(ctx, start_date: str | None, end_date: str | None):
    """List purchases, newest first."""
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)
    purchases = PurchaseService(ctx.obj["db"]).list_purchases(start_date=start, end_date=end)
    if not purchases:
        click.echo("No purchases found.")
        return

    click.echo("\nPurchases:")
    click.echo("-" * 80)
    for p in purchases:
        click.echo(
            f"ID: {p.id:4d} | {p.created_at:%Y-%m-%d} | {p.supplier_name:20s} "
            f"| Total: {p.total:>10,.2f} | {p.status}"
        )


@purchase_group.command("show")
@click.argument("purchase_id", type=int)
@click.pass_context
def show_purchase(ctx, purchase_id: int):
    """Show a purchase with its line items."""
    try:
        purchase = PurchaseService(ctx.obj["db"]).require_purchase(purchase_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Purchase {purchase.id} ({purchase.created_at:%Y-%m-%d}) - {purchase.status}")
    click.echo(f"  Supplier: {purchase.supplier_name}")
    if purchase.company_name:
        click.echo(f"  Company: {purchase.company_name}")
    click.echo("\n  Lines:")
    for line in purchase.lines:
        click.echo(
            f"    {line.description or line.product_id}: {line.quantity} x {line.unit_cost:,.2f}"
        )
    click.echo(f"  Total: {purchase.total:,.2f} ({purchase.payment_status.value})")


@purchase_group.command("update")
@click.argument("purchase_id", type=int)
@click.option("--supplier", help="New supplier name")
@click.option("--company", help="New supplier company")
@click.option("--total", help="New total")
@click.option("--payment-mode", help="Cash, UPI, Card or Net Banking")
@click.option("--date", "purchase_date", help="New purchase date")
@click.pass_context
def update_purchase(
    ctx,
    purchase_id: int,
    supplier: str | None,
    company: str | None,
    total: str | None,
    payment_mode: str | None,
    purchase_date: str | None,
):
    """Edit a purchase header. Stock levels are not changed."""
    created_at = resolve_cli_datetime(ctx, purchase_date)
    try:
        PurchaseService(ctx.obj["db"]).update_purchase(
            purchase_id,
            supplier_name=supplier,
            company_name=company,
            total=parse_amount(total) if total is not None else None,
            payment_mode=payment_mode,
            purchase_date=created_at,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated purchase {purchase_id}")


@purchase_group.command("receive")
@click.argument("purchase_id", type=int)
@click.pass_context
def receive_purchase(ctx, purchase_id: int):
    """Mark a purchase as received."""
    try:
        PurchaseService(ctx.obj["db"]).mark_received(purchase_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Purchase {purchase_id} marked as received")


@purchase_group.command("cancel")
@click.argument("purchase_id", type=int)
@click.pass_context
def cancel_purchase(ctx, purchase_id: int):
    """Cancel a purchase. Stock is not reversed."""
    try:
        PurchaseService(ctx.obj["db"]).cancel_purchase(purchase_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Purchase {purchase_id} cancelled; adjust stock manually if needed")


@purchase_group.command("delete")
@click.argument("purchase_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_purchase(ctx, purchase_id: int, yes: bool):
    """Delete a purchase. Stock is not reversed."""
    if not yes and not click.confirm(f"Are you sure you want to delete purchase {purchase_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        PurchaseService(ctx.obj["db"]).delete_purchase(purchase_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted purchase {purchase_id}; adjust stock manually if needed")


def register_commands(cli):
    """Register purchase commands with main CLI."""
    cli.add_command(purchase_group, name="purchase")
