"""
Exchange Commands
------------------

Legacy CSV import and export.

Commands:
    - export-csv: Write every recorded day to a CSV file
    - import-csv: Load a CSV file into the diary
"""
import click

from habitdiary.core.exceptions import DatabaseError, ValidationError
from habitdiary.core.logging_manager import handle_cli_error
from habitdiary.database.export_manager import ExportManager
from . import get_diary


@click.command("export-csv")
@click.argument("path", type=click.Path(dir_okay=False))
@click.pass_context
def export_csv(ctx, path):
    """Export the diary to PATH."""
    try:
        diary = get_diary(ctx)
        rows = ExportManager(diary.logger).export_csv(diary, path)
        click.echo(f"✅ Exported {rows} days to {path}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "export_csv", {"path": path})


@click.command("import-csv")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_csv(ctx, path):
    """Import days from PATH, replacing days already recorded."""
    try:
        diary = get_diary(ctx)
        written = ExportManager(diary.logger).import_csv(diary, path)
        click.echo(f"✅ Imported {written} days from {path}")

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(ctx, e, "import_csv", {"path": path})
