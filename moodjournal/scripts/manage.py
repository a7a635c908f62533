"""CLI commands for storage setup, bulk export and streaks.

Usage:
    flask init-db                 # Create tables and seed prebuilt tags
    flask export-all              # Export every entry to the configured export dir
    flask export-all --out ./pdf  # Export to a specific directory
    flask streak                  # Print current and longest streak
"""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from moodjournal.core.errors import ExportFailed


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create tables if missing and seed the prebuilt tags."""
    from moodjournal.domains.journal.services.storage_service import initialize_storage

    added = initialize_storage()
    click.echo(f"Storage ready. Seeded {added} prebuilt tag(s).")


@click.command("export-all")
@click.option("--out", "-o", "out_dir", type=click.Path(file_okay=False), help="Destination directory")
@with_appcontext
def export_all_command(out_dir: str | None):
    """Export all journal entries into one PDF."""
    from moodjournal.domains.journal.services import export_service, journal_service

    entries = journal_service.get_all_entries()
    if not entries:
        click.echo("No journal entries to export.")
        return
    try:
        path = export_service.export_all(entries, output_dir=out_dir)
    except ExportFailed as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Exported {len(entries)} entries to {path}")


@click.command("streak")
@with_appcontext
def streak_command():
    """Print the current and longest writing streak."""
    from moodjournal.domains.journal.services import analytics_service

    click.echo(f"Current streak: {analytics_service.get_current_streak()} day(s)")
    click.echo(f"Longest streak: {analytics_service.get_longest_streak()} day(s)")


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(init_db_command)
    app.cli.add_command(export_all_command)
    app.cli.add_command(streak_command)
