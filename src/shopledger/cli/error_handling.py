"""CLI error handling helpers."""

import click

from shopledger.domain.errors import DomainError, PartialWriteError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, PartialWriteError):
        click.echo(
            f"Run 'shopledger journal show {error.journal_id}' to see what was written.",
            err=True,
        )
    ctx.exit(1)
