"""Workflow journal commands."""

import json

import click
from shopledger.cli.error_handling import handle_domain_error
from shopledger.domain.errors import DomainError
from shopledger.domain.journal import JournalService


@click.group()
def journal_group():
    """Inspect the workflow journal."""
    pass


@journal_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include completed workflows")
@click.pass_context
def list_entries(ctx, show_all: bool):
    """List workflows that failed or never finished.

    A failed entry names the steps that were written before the failure,
    so the affected balances and stock levels can be corrected by hand.
    """
    service = JournalService(ctx.obj["db"])
    entries = service.list_entries() if show_all else service.list_incomplete()
    if not entries:
        click.echo("No journal entries found." if show_all else "No incomplete workflows.")
        return

    for entry in entries:
        click.echo(
            f"ID: {entry.id:4d} | {entry.created_at:%Y-%m-%d %H:%M} | {entry.operation:18s} "
            f"| {entry.status.value:9s} | {len(entry.completed_steps)} steps"
        )


@journal_group.command("show")
@click.argument("journal_id", type=int)
@click.pass_context
def show_entry(ctx, journal_id: int):
    """Show one journal entry with its payload and completed steps."""
    try:
        entry = JournalService(ctx.obj["db"]).get_entry(journal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Journal {entry.id}: {entry.operation} ({entry.status.value})")
    if entry.entity_id is not None:
        click.echo(f"  Entity: {entry.entity_id}")
    if entry.error:
        click.echo(f"  Error: {entry.error}")
    click.echo("  Completed steps:")
    for step in entry.completed_steps:
        click.echo(f"    - {step}")
    click.echo("  Payload:")
    click.echo(json.dumps(entry.payload, indent=2, sort_keys=True))


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
