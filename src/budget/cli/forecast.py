#!/usr/bin/env python3
"""
Forecast and Balance CLI Commands

Projects recurring rules over a window and resolves balances from an exported
backup.
"""

from datetime import date

import click

from ..balances.anchors import resolve_balance, resolve_savings_balance
from ..core.config import get_config
from ..core.currency import format_cents
from ..core.json_utils import format_json
from ..core.models import ForecastType
from ..forecast.expander import expand_rules, monthly_equivalent_totals, monthly_occurrence_totals
from ..savings.interest import estimate_goal_completion, get_effective_rate
from .common import load_engine_data, validate_date


@click.command()
@click.argument("backup", type=click.Path(exists=True, dir_okay=False))
@click.option("--start", required=True, callback=validate_date, help="Window start (YYYY-MM-DD)")
@click.option("--end", required=True, callback=validate_date, help="Window end (YYYY-MM-DD)")
@click.option("--scenario", help="Scenario id (default: the backup's active scenario)")
@click.option("--json", "as_json", is_flag=True, help="Print occurrences as JSON")
@click.pass_context
def forecast(ctx: click.Context, backup: str, start: str, end: str, scenario: str | None, as_json: bool) -> None:
    """
    Expand forecast rules into dated occurrences.

    Examples:
      budget forecast backup.json --start 2026-01-01 --end 2026-03-31
      budget forecast backup.json --start 2026-01-01 --end 2026-12-31 --json
    """
    # validate_date has normalised both to ISO, so string order is date order
    if end < start:
        raise click.BadParameter("--end must not be before --start", param_hint="--end")

    data = load_engine_data(backup, scenario)
    occurrences = expand_rules(data.forecast_rules, start, end)

    if as_json:
        click.echo(format_json([o.to_dict() for o in occurrences]))
        return

    if ctx.obj.get("verbose", False):
        click.echo(f"Rules: {len(data.forecast_rules)}")
        click.echo(f"Window: {start} to {end}")
        click.echo()

    for occurrence in occurrences:
        click.echo(
            f"{occurrence.date}  {occurrence.type.value:<8} {format_cents(occurrence.amount_cents):>14}  "
            f"{occurrence.description}"
        )

    click.echo("\nMonthly totals:")
    for month, totals in monthly_occurrence_totals(occurrences, start, end).items():
        net = totals["income"] - totals["expense"] - totals["savings"]
        click.echo(
            f"  {month}  income {format_cents(totals['income'])}  expense {format_cents(totals['expense'])}"
            f"  savings {format_cents(totals['savings'])}  net {format_cents(net)}"
        )

    click.echo("\nMonthly equivalents:")
    for forecast_type, cents in monthly_equivalent_totals(data.forecast_rules).items():
        click.echo(f"  {forecast_type.value}: {format_cents(cents)}")


@click.command()
@click.argument("backup", type=click.Path(exists=True, dir_okay=False))
@click.option("--as-of", "as_of", callback=validate_date, help="Balance date (YYYY-MM-DD), defaults to today")
@click.option("--goal", "goal_id", help="Resolve a savings goal instead of the cash balance")
def balance(backup: str, as_of: str | None, goal_id: str | None) -> None:
    """
    Resolve the cash or savings goal balance on a date.

    Examples:
      budget balance backup.json --as-of 2026-02-01
      budget balance backup.json --goal goal-1
    """
    as_of = as_of or date.today().isoformat()
    data = load_engine_data(backup)

    if goal_id is None:
        cents = resolve_balance(data.balance_anchors, data.transactions, as_of)
        if cents is None:
            click.echo(f"No balance anchor on or before {as_of}")
            return
        click.echo(f"Balance on {as_of}: {format_cents(cents)}")
        return

    goal = next((g for g in data.savings_goals if g.id == goal_id), None)
    if goal is None:
        raise click.ClickException(f"Unknown savings goal: {goal_id}")

    cents = resolve_savings_balance(data.savings_anchors, data.transactions, goal_id, as_of)
    rate = get_effective_rate(goal, as_of)
    click.echo(f"{goal.name} on {as_of}: {format_cents(cents)} of {format_cents(goal.target_amount_cents)}")
    click.echo(f"Interest rate: {rate:g}% p.a.")

    goal_rules = [r for r in data.forecast_rules if r.savings_goal_id == goal_id]
    monthly_contribution = monthly_equivalent_totals(goal_rules)[ForecastType.SAVINGS]
    projection = estimate_goal_completion(
        cents,
        goal.target_amount_cents,
        monthly_contribution,
        rate,
        max_months=get_config().projection.max_projection_months,
        today=date.fromisoformat(as_of),
    )
    if projection is None:
        click.echo("Projected completion: not reachable at the current rate")
    elif projection.months_away == 0:
        click.echo("Projected completion: reached")
    else:
        click.echo(f"Projected completion: {projection.month} ({projection.months_away} months)")
