"""
Category Commands
------------------

Commands:
    - categories: List categories in display order
    - add-category: Append a category (or un-hide a hidden one)
    - hide-category: Hide a category, keeping its history
"""
import click

from habitdiary.core.exceptions import DatabaseError, ValidationError
from habitdiary.core.logging_manager import handle_cli_error
from . import get_diary


@click.command()
@click.option("--all", "include_hidden", is_flag=True, help="Include hidden categories")
@click.pass_context
def categories(ctx, include_hidden):
    """List categories in display order."""
    try:
        diary = get_diary(ctx)
        listed = diary.list_categories(include_hidden=include_hidden)
        if not listed:
            click.echo("No categories")
            return
        for category in listed:
            click.echo(f"  {category.display_order:>3}  {category}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "categories")


@click.command("add-category")
@click.argument("abbreviation")
@click.pass_context
def add_category(ctx, abbreviation):
    """Add ABBREVIATION at the end of the display order."""
    try:
        diary = get_diary(ctx)
        category_id = diary.add_category(abbreviation)
        click.echo(f"✅ Category {diary.get_category(abbreviation)} (id {category_id})")

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(ctx, e, "add_category", {"abbreviation": abbreviation})


@click.command("hide-category")
@click.argument("abbreviation")
@click.pass_context
def hide_category(ctx, abbreviation):
    """Hide ABBREVIATION; its entries are kept."""
    try:
        diary = get_diary(ctx)
        if diary.hide_category(abbreviation):
            click.echo(f"✅ Category {abbreviation} hidden")
        else:
            click.echo(f"⚠️  Category {abbreviation} was already hidden")

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(ctx, e, "hide_category", {"abbreviation": abbreviation})
