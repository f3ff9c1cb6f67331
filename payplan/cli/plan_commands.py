"""Take-home pay and contribution commands.

Commands read the household from profile.yaml and print Rich tables, or JSON
with --format json.
"""

import json
from datetime import date
from typing import List, Optional

import click
from rich.console import Console
from rich.table import Table

from payplan.sdk import (
    ConfigNotFoundError,
    ProfileNotFoundError,
    ProfileStore,
    TaxRulesError,
    get_tax_year,
    load_tax_rules,
)
from payplan.sdk.bonus import estimate_bonus
from payplan.sdk.contributions import max_for, required_401k_percent, required_ira_monthly
from payplan.sdk.paydays import extra_paycheck_income
from payplan.sdk.proration import prorate_income
from payplan.sdk.schemas import AccountType, HsaCoverage, PayPeriod, Person
from payplan.sdk.household import summarize_household
from payplan.sdk.takehome import compute_for_person

from .renderers.takehome_renderer import fmt_currency, render_household, render_take_home, render_warnings

CONFIG_ERRORS = (ConfigNotFoundError, ProfileNotFoundError, TaxRulesError)

today_option = click.option(
    "--today", "today", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
    help="Reference date YYYY-MM-DD (default: current date)",
)
format_option = click.option(
    "--format", "output_format", type=click.Choice(["table", "json"]), default="table",
    help="Output format (default: table)",
)


def _today(value) -> date:
    return value.date() if value is not None else date.today()


def _rules(today: date):
    """Tax rules for the configured plan year, or today's year."""
    try:
        return load_tax_rules(get_tax_year() or today.year)
    except CONFIG_ERRORS as e:
        raise click.ClickException(str(e))


def _persons(name: Optional[str]) -> List[Person]:
    """Household members, or just the named one."""
    store = ProfileStore()
    try:
        if name:
            return [store.person(name)]
        persons = store.persons()
    except CONFIG_ERRORS as e:
        raise click.ClickException(str(e))
    if not persons:
        raise click.ClickException(f"No persons in {store.path}")
    return persons


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.command("takehome")
@click.argument("name", required=False)
@today_option
@format_option
def takehome(name, today, output_format):
    """Show take-home pay per paycheck for each person (or NAME).

    \b
    Examples:
      pay-plan takehome
      pay-plan takehome Alex --format json
    """
    today = _today(today)
    rules = _rules(today)

    results = {}
    for person in _persons(name):
        result = compute_for_person(person, today, rules)
        if result is None:
            raise click.ClickException(
                f"Cannot calculate take-home pay for {person.name}: "
                f"salary must be positive and 401(k) elections at most 100%"
            )
        results[person.name] = result

    if output_format == "json":
        _echo_json({n: r.model_dump(mode="json") for n, r in results.items()})
        return

    console = Console()
    for person_name, result in results.items():
        render_take_home(console, person_name, result)
        console.print()


@click.command("limits")
@click.option("--age", type=int, default=0, show_default=True, help="Age for catch-up eligibility")
@click.option("--hsa-coverage", type=click.Choice([c.value for c in HsaCoverage]), default="self",
              show_default=True, help="HSA coverage tier")
@click.option("--salary", type=float, default=None, help="Salary for the 401(k) percent needed to max out")
@click.option("--year", type=int, default=None, help="Plan year (default: settings tax_year or current year)")
@format_option
def limits(age, hsa_coverage, salary, year, output_format):
    """Show annual contribution limits for an age and coverage.

    \b
    Examples:
      pay-plan limits --age 52 --hsa-coverage family
      pay-plan limits --age 40 --salary 150000
    """
    if year is None:
        rules = _rules(date.today())
    else:
        try:
            rules = load_tax_rules(year)
        except TaxRulesError as e:
            raise click.ClickException(str(e))

    contribution_limits = rules.contribution_limits
    data = {
        "year": rules.year,
        "age": age,
        "hsa_coverage": hsa_coverage,
        "limits": {
            t.value: max_for(t, age, hsa_coverage, contribution_limits)
            for t in (AccountType.K401, AccountType.IRA, AccountType.HSA)
        },
        "ira_monthly_to_max": required_ira_monthly(contribution_limits, age),
    }
    if salary:
        data["k401_percent_to_max"] = required_401k_percent(salary, contribution_limits, age)

    if output_format == "json":
        _echo_json(data)
        return

    table = Table(title=f"Contribution Limits {rules.year} (age {age}, HSA {hsa_coverage})")
    table.add_column("Account", style="bold")
    table.add_column("Annual Limit", justify="right")
    for account_type, limit in data["limits"].items():
        table.add_row(account_type.upper(), fmt_currency(limit))
    console = Console()
    console.print(table)
    console.print(f"IRA per month to max out: {fmt_currency(data['ira_monthly_to_max'])}")
    if "k401_percent_to_max" in data:
        console.print(f"401(k) percent of salary to max out: {data['k401_percent_to_max']:.1f}%")


@click.command("income")
@click.argument("name", required=False)
@today_option
@format_option
def income(name, today, output_format):
    """Show YTD and projected annual income from income periods.

    With no income periods, the salary is treated as a full-year run rate.
    """
    today = _today(today)

    results = {}
    for person in _persons(name):
        results[person.name] = prorate_income(
            person.income_periods, person.pay_period, person.salary, today
        )

    if output_format == "json":
        _echo_json({
            n: {**p.model_dump(mode="json"), "projected_annual": p.projected_annual}
            for n, p in results.items()
        })
        return

    console = Console()
    table = Table(title=f"Income {today.year} (as of {today.isoformat()})")
    table.add_column("Person", style="bold")
    table.add_column("Periods", justify="right")
    table.add_column("YTD", justify="right")
    table.add_column("Remainder", justify="right")
    table.add_column("Projected Annual", justify="right", style="green")
    for person_name, proration in results.items():
        table.add_row(
            person_name,
            str(proration.periods_used),
            fmt_currency(proration.ytd_income),
            fmt_currency(proration.projected_remainder),
            fmt_currency(proration.projected_annual),
        )
        render_warnings(console, proration.warnings)
    console.print(table)


@click.command("contributions")
@today_option
@format_option
def contributions(today, output_format):
    """Show YTD, projected and remaining contribution room for the household.

    YTD amounts come from the profile's performance records. Joint account
    types (IRA, joint brokerage) are split evenly between members.
    """
    today = _today(today)
    rules = _rules(today)
    persons = _persons(None)

    store = ProfileStore()
    try:
        records = store.performance_records(today.year)
        policy = store.policy()
    except CONFIG_ERRORS as e:
        raise click.ClickException(str(e))

    summary = summarize_household(persons, records, today, rules, policy)

    if output_format == "json":
        _echo_json(summary.model_dump(mode="json"))
        return

    render_household(Console(), summary)


@click.command("bonus")
@click.argument("name", required=False)
@today_option
@format_option
def bonus(name, today, output_format):
    """Estimate the annual bonus before and after 401(k) and taxes.

    Taxes use the effective rate from the person's take-home calculation.
    """
    today = _today(today)
    rules = _rules(today)

    estimates = {}
    for person in _persons(name):
        result = compute_for_person(person, today, rules)
        rate = result.effective_tax_rate if result is not None else 0
        estimates[person.name] = estimate_bonus(person.salary, person.bonus, person.retirement, rate)

    if output_format == "json":
        _echo_json({n: e.model_dump(mode="json") for n, e in estimates.items()})
        return

    table = Table(title="Bonus Estimate")
    table.add_column("Person", style="bold")
    table.add_column("Gross", justify="right")
    table.add_column("After 401(k)", justify="right")
    table.add_column("After Tax", justify="right")
    table.add_column("After Tax + 401(k)", justify="right", style="green")
    for person_name, estimate in estimates.items():
        table.add_row(
            person_name,
            fmt_currency(estimate.gross),
            fmt_currency(estimate.after_401k),
            fmt_currency(estimate.after_tax),
            fmt_currency(estimate.after_tax_and_401k),
        )
    Console().print(table)


@click.command("paychecks")
@click.argument("name", required=False)
@click.option("--year", type=int, default=None, help="Calendar year (default: current year)")
@format_option
def paychecks(name, year, output_format):
    """Show three-paycheck months for bi-weekly earners.

    The third paycheck in those months is extra income for a budget built
    on two paychecks a month.
    """
    today = date.today()
    year = year or today.year
    rules = _rules(date(year, 1, 1))

    extras = {}
    for person in _persons(name):
        if person.pay_period != PayPeriod.BI_WEEKLY:
            continue
        result = compute_for_person(person, today, rules)
        net = result.net_take_home_paycheck if result is not None else 0
        extras[person.name] = extra_paycheck_income(net, year, person.pay_week)

    if not extras:
        raise click.ClickException("No bi-weekly earners in the household")

    if output_format == "json":
        _echo_json({
            n: {**e.model_dump(mode="json"), "extra_paychecks": e.extra_paychecks, "total": e.total}
            for n, e in extras.items()
        })
        return

    table = Table(title=f"Three-Paycheck Months {year}")
    table.add_column("Person", style="bold")
    table.add_column("Pay Week")
    table.add_column("Months")
    table.add_column("Net / Paycheck", justify="right")
    table.add_column("Extra Income", justify="right", style="green")
    for person_name, extra in extras.items():
        table.add_row(
            person_name,
            extra.pay_week.value,
            ", ".join(m.name for m in extra.months) or "-",
            fmt_currency(extra.net_paycheck),
            fmt_currency(extra.total),
        )
    Console().print(table)
