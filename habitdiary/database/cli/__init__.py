#!/usr/bin/env python3
"""
habitdiary Maintenance CLI
---------------------------

Command-line interface for operating on diary files outside the
habit-entry application.

This module provides the main CLI group and shared context setup
for all commands.

Command Structure:
    - Setup (create, generate)
    - Schema (migrate)
    - Categories (categories, add-category, hide-category)
    - Statistics (compare, top, missing)
    - Exchange (export-csv, import-csv)

Usage:
    # Get general help
    diarydb --help

    # Work on a specific file
    diarydb --db-path ~/habits.db compare --period-days 7
"""
import logging
from pathlib import Path

import click

from habitdiary.core.logging_manager import DiaryLogger
from habitdiary.core.paths import BACKUP_DIR, DB_PATH, LOG_DIR
from habitdiary.database.manager import Diary


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to diary file",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--backup-dir",
    type=click.Path(),
    default=str(BACKUP_DIR),
    help="Path to backup directory",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, log_dir, backup_dir, verbose):
    """habitdiary maintenance CLI"""

    # Suppress Alembic INFO logging by default
    logging.getLogger("alembic").setLevel(logging.WARNING)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path).expanduser()
    ctx.obj["log_dir"] = Path(log_dir).expanduser()
    ctx.obj["backup_dir"] = Path(backup_dir).expanduser()
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = DiaryLogger(ctx.obj["log_dir"], component_name="cli")
    ctx.call_on_close(ctx.obj["logger"].close)


def get_diary(ctx) -> Diary:
    """Get or open the diary named by --db-path; closed when the command ends."""
    if "diary" not in ctx.obj:
        diary = Diary.open(
            ctx.obj["db_path"],
            log_dir=ctx.obj["log_dir"],
            backup_dir=ctx.obj["backup_dir"],
        )
        ctx.obj["diary"] = diary
        ctx.call_on_close(diary.close)
    return ctx.obj["diary"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import create, generate  # noqa: E402
from .migration import migrate  # noqa: E402
from .categories import add_category, categories, hide_category  # noqa: E402
from .query import compare, missing, top  # noqa: E402
from .exchange import export_csv, import_csv  # noqa: E402

cli.add_command(create)
cli.add_command(generate)
cli.add_command(migrate)
cli.add_command(categories)
cli.add_command(add_category)
cli.add_command(hide_category)
cli.add_command(compare)
cli.add_command(top)
cli.add_command(missing)
cli.add_command(export_csv)
cli.add_command(import_csv)


if __name__ == "__main__":
    cli(obj={})
