"""
Schema Commands
----------------

Diary schema inspection and upgrade.

Commands:
    - migrate: Upgrade a diary to the current schema version

Usage:
    # Show the stored version and pending steps without writing
    diarydb migrate --check

    # Upgrade (a pre-migration backup is written to --backup-dir)
    diarydb migrate
"""
import click

from habitdiary.core.exceptions import DatabaseError, OpenError
from habitdiary.core.logging_manager import handle_cli_error
from habitdiary.database.engine import create_diary_engine
from habitdiary.database.manager import check_diary_tables
from habitdiary.database.migrator import CURRENT_SCHEMA_VERSION, SchemaMigrator
from . import get_diary


def _report_status(ctx) -> None:
    db_path = ctx.obj["db_path"]
    if not db_path.is_file():
        raise OpenError(f"Diary file not found: {db_path}")

    engine = create_diary_engine(db_path)
    try:
        check_diary_tables(engine, db_path)
        migrator = SchemaMigrator(engine, ctx.obj["logger"])
        stored = migrator.current_version()
        pending = migrator.pending_steps()
    finally:
        engine.dispose()

    click.echo(f"Stored version: {stored}")
    click.echo(f"Current version: {CURRENT_SCHEMA_VERSION}")
    if pending:
        click.echo("Pending steps:")
        for step in pending:
            click.echo(f"  • {step.from_version} -> {step.from_version + 1}: {step.description}")
    else:
        click.echo("✅ Up to date")


@click.command()
@click.option("--check", is_flag=True, help="Report pending steps without writing")
@click.pass_context
def migrate(ctx, check):
    """Upgrade the diary to the current schema version."""
    try:
        if check:
            _report_status(ctx)
            return

        click.echo("⬆️  Migrating diary...")
        diary = get_diary(ctx)
        click.echo(f"✅ Diary is at schema version {diary.schema_version}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "migrate", {"db_path": str(ctx.obj["db_path"])})
