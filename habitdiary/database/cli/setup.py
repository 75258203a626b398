"""
Setup Commands
---------------

Diary file creation.

Commands:
    - create: Create an empty diary with initial categories
    - generate: Create a diary filled with random entries
"""
import click

from habitdiary.core.exceptions import DatabaseError, ValidationError
from habitdiary.core.logging_manager import handle_cli_error
from habitdiary.database.generator import generate_diary
from habitdiary.database.manager import Diary


@click.command()
@click.argument("categories", nargs=-1)
@click.pass_context
def create(ctx, categories):
    """Create a new diary with CATEGORIES in display order."""
    db_path = ctx.obj["db_path"]
    try:
        click.echo(f"🗄️  Creating diary at {db_path}...")
        with Diary.create(db_path, categories, log_dir=ctx.obj["log_dir"]) as diary:
            click.echo(f"✅ Diary created (schema version {diary.schema_version})")
            if categories:
                click.echo(f"  Categories: {', '.join(categories)}")

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(ctx, e, "create", {"db_path": str(db_path)})


@click.command()
@click.argument("categories", nargs=-1, required=True)
@click.option("--days", type=int, default=365, show_default=True, help="Days to record")
@click.option(
    "--until",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Last recorded day (default: today)",
)
@click.option(
    "--probability",
    type=click.FloatRange(0.0, 1.0),
    default=0.5,
    show_default=True,
    help="Chance that a category occurs on a day",
)
@click.option("--seed", type=int, default=None, help="Random seed")
@click.pass_context
def generate(ctx, categories, days, until, probability, seed):
    """Create a diary with CATEGORIES filled with random entries."""
    db_path = ctx.obj["db_path"]
    try:
        click.echo(f"🎲 Generating {days} days at {db_path}...")
        diary = generate_diary(
            db_path,
            categories,
            days=days,
            until=until,
            probability=probability,
            seed=seed,
            log_dir=ctx.obj["log_dir"],
        )
        with diary:
            first, last = diary.date_bounds()
            click.echo(f"✅ Recorded {first} to {last}")

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(ctx, e, "generate", {"db_path": str(db_path)})
