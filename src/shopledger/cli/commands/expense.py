"""Expense log commands."""

from datetime import date as date_type

import click
from shopledger.cli.date_filters import resolve_cli_date_range
from shopledger.cli.error_handling import handle_domain_error
from shopledger.domain.errors import DomainError
from shopledger.domain.expense import ExpenseService
from shopledger.utils.amount_parser import parse_amount
from shopledger.utils.date_parser import parse_date


@click.group()
def expense_group():
    """Record business expenses."""
    pass


@expense_group.command("add")
@click.argument("description", metavar="DESCRIPTION")
@click.argument("amount", metavar="AMOUNT")
@click.option("--date", "expense_date", default="today", help="Expense date (default: today)")
@click.option("--category", help="Free-form category, e.g. Rent")
@click.option("--payment-mode", help="Cash, UPI, Card or Net Banking")
@click.pass_context
def add_expense(
    ctx,
    description: str,
    amount: str,
    expense_date: str,
    category: str | None,
    payment_mode: str | None,
):
    """Record an expense.

    Examples:
        shopledger expense add "Shop rent" 12000 --category Rent --payment-mode "Net Banking"
    """
    try:
        when: date_type = parse_date(expense_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        expense_id = ExpenseService(ctx.obj["db"]).record_expense(
            date=when,
            description=description,
            amount=parse_amount(amount),
            category=category,
            payment_mode=payment_mode,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded expense {expense_id}")


@expense_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.pass_context
def list_expenses(ctx, start_date: str | None, end_date: str | None):
    """List expenses, newest first."""
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date)
    expenses = ExpenseService(ctx.obj["db"]).list_expenses(start_date=start, end_date=end)
    if not expenses:
        click.echo("No expenses found.")
        return

    total = sum(e.amount for e in expenses)
    click.echo("\nExpenses:")
    click.echo("-" * 80)
    for e in expenses:
        category = e.category or "-"
        click.echo(
            f"ID: {e.id:4d} | {e.date:%Y-%m-%d} | {e.description:30s} "
            f"| {category:12s} | {e.amount:>10,.2f}"
        )
    click.echo(f"\nTotal: {total:,.2f}")


@expense_group.command("delete")
@click.argument("expense_id", type=int)
@click.pass_context
def delete_expense(ctx, expense_id: int):
    """Delete an expense."""
    try:
        ExpenseService(ctx.obj["db"]).delete_expense(expense_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted expense {expense_id}")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
