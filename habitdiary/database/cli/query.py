"""
Statistics Commands
--------------------

Read-only reports over a diary.

Commands:
    - compare: Category counts over consecutive periods
    - top: Most frequent daily compositions
    - missing: Days without a recorded entry

Period defaults come from DiarySettings.
"""
from datetime import date, timedelta

import click

from habitdiary.core.exceptions import DatabaseError, ValidationError
from habitdiary.core.logging_manager import handle_cli_error
from habitdiary.core.settings import DiarySettings
from habitdiary.dataclasses import Period
from habitdiary.database.aggregator import Aggregator
from . import get_diary

DEFAULTS = DiarySettings()

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


def _yesterday() -> date:
    return date.today() - timedelta(days=1)


@click.command()
@click.option(
    "--period-days",
    type=int,
    default=DEFAULTS.period_days,
    show_default=True,
    help="Days per period",
)
@click.option(
    "--periods",
    type=int,
    default=DEFAULTS.past_periods,
    show_default=True,
    help="Number of periods",
)
@click.option("--until", type=DATE_TYPE, default=None, help="Last day (default: yesterday)")
@click.option("--all", "include_hidden", is_flag=True, help="Include hidden categories")
@click.pass_context
def compare(ctx, period_days, periods, until, include_hidden):
    """Compare category counts over consecutive periods."""
    try:
        diary = get_diary(ctx)
        summaries = Aggregator(diary).compare_periods(
            period_days,
            periods,
            visible_only=not include_hidden,
            until=until.date() if until else None,
        )

        click.echo(f"\n📊 Last {periods} periods of {period_days} days")
        click.echo("=" * 50)
        for summary in summaries:
            click.echo(f"\n{summary.period} (total {summary.total})")
            for abbreviation, count in summary.counts.items():
                click.echo(f"  {abbreviation:<10} {count:>5}")

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(ctx, e, "compare")


@click.command()
@click.option(
    "--days",
    type=int,
    default=None,
    help="Days considered (default: all recorded history)",
)
@click.option(
    "--count",
    "top_k",
    type=int,
    default=DEFAULTS.list_most_frequent_days,
    show_default=True,
    help="Number of compositions listed",
)
@click.option("--until", type=DATE_TYPE, default=None, help="Last day (default: yesterday)")
@click.pass_context
def top(ctx, days, top_k, until):
    """List the most frequent daily compositions."""
    try:
        diary = get_diary(ctx)
        last_day = until.date() if until else _yesterday()
        if days is None:
            history = diary.recorded_period()
            if history is None or history.start > last_day:
                click.echo(f"ℹ️  No entries recorded up to {last_day}")
                return
            period = Period.between(history.start, last_day)
        else:
            period = Period.ending_on(last_day, days)

        ranked = Aggregator(diary).most_frequent_compositions(period, top_k)

        click.echo(f"\n🏆 Most frequent compositions, {len(period)} days to {last_day}")
        click.echo("=" * 50)
        for composition, count in ranked:
            label = ", ".join(sorted(composition)) or "(none)"
            click.echo(f"  {count:>5}  {label}")

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(ctx, e, "top")


@click.command()
@click.option("--since", type=DATE_TYPE, default=None, help="First day (default: first recorded)")
@click.option("--until", type=DATE_TYPE, default=None, help="Last day (default: yesterday)")
@click.pass_context
def missing(ctx, since, until):
    """List days without a recorded entry."""
    try:
        diary = get_diary(ctx)
        days = diary.missing_dates(
            until.date() if until else _yesterday(),
            since=since.date() if since else None,
        )
        if not days:
            click.echo("✅ No missing days")
            return
        click.echo(f"⚠️  {len(days)} missing days:")
        for day in days:
            click.echo(f"  {day.isoformat()}")

    except (DatabaseError, ValidationError) as e:
        handle_cli_error(ctx, e, "missing")
