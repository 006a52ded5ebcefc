"""CLI helpers for date range options."""

from datetime import date, datetime

import click

from shopledger.utils.date_parser import parse_date, parse_datetime


def resolve_cli_date_range(
    ctx: click.Context,
    *,
    start_date: str | None,
    end_date: str | None,
) -> tuple[date | None, date | None]:
    """Parse --start-date/--end-date values, or exit with a CLI error."""
    start = None
    end = None

    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must be on or before end date", err=True)
        ctx.exit(1)

    return start, end


def resolve_cli_datetime(ctx: click.Context, value: str | None) -> datetime | None:
    """Parse a --date value for backdating a record, or exit with a CLI error."""
    if value is None:
        return None
    try:
        return parse_datetime(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)
