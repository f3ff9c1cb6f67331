"""Rich renderers for take-home pay and contribution summaries.

Transforms SDK models into formatted Rich tables.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from payplan.sdk.household import HouseholdSummary
from payplan.sdk.schemas import AccountType, CalculationResult

ACCOUNT_LABELS = {
    AccountType.K401: "401(k)",
    AccountType.IRA: "IRA",
    AccountType.HSA: "HSA",
    AccountType.ESPP: "ESPP",
    AccountType.BROKERAGE: "Brokerage",
}


def render_warnings(console: Console, warnings) -> None:
    """Render each warning as a yellow note panel."""
    for warning in warnings:
        console.print(Panel(
            f"[yellow]{warning}[/yellow]",
            title="Note",
            border_style="yellow"
        ))


def render_take_home(console: Console, name: str, result: CalculationResult) -> None:
    """Render a take-home calculation as a paycheck/annual table.

    Args:
        console: Rich Console instance
        name: Person name for the title
        result: compute_take_home_pay() output
    """
    render_warnings(console, result.warnings)

    table = Table(
        title=f"Take-Home Pay: {name} ({result.pay_period.label}, {result.filing_status.value})",
        box=box.ROUNDED,
    )
    table.add_column("", style="bold", min_width=25)
    table.add_column("Paycheck", justify="right", min_width=12)
    table.add_column("Annual", justify="right", min_width=14)

    table.add_row("[bold]EARNINGS[/bold]", "", "")
    table.add_row("  Gross Pay", fmt_currency(result.gross_pay), fmt_currency(result.annual_gross_income))
    table.add_row("", "", "")

    table.add_row("[bold]PRETAX DEDUCTIONS[/bold]", "", "")
    table.add_row(
        f"  Traditional 401(k) ({result.traditional_401k_percent:g}%)",
        fmt_currency(result.traditional_401k_paycheck),
        fmt_currency(result.traditional_401k_annual),
    )
    table.add_row(
        "  Benefits / HSA / Other",
        fmt_currency(result.pretax_deductions_paycheck),
        fmt_currency(result.pretax_deductions_annual),
    )
    table.add_row(
        "Adjusted Gross",
        fmt_currency(result.adjusted_gross_pay),
        fmt_currency(result.adjusted_gross_income),
        style="dim",
    )
    table.add_row("", "", "")

    table.add_row("[bold]TAXES[/bold]", "", "")
    fit_label = "  Federal Income Tax"
    if result.using_multiple_jobs_method:
        fit_label += " (2c)"
    table.add_row(fit_label, fmt_currency(result.federal_tax_paycheck), fmt_currency(result.federal_tax_annual))
    table.add_row("  Social Security", fmt_currency(result.social_security_tax_paycheck), fmt_currency(result.social_security_tax_annual))
    table.add_row("  Medicare", fmt_currency(result.medicare_tax_paycheck), fmt_currency(result.medicare_tax_annual))
    table.add_row(
        f"  [dim]Total Taxes ({result.effective_tax_rate:.1f}%)[/dim]",
        f"[dim]{fmt_currency(result.total_taxes_paycheck)}[/dim]",
        f"[dim]{fmt_currency(result.total_taxes_annual)}[/dim]",
    )
    table.add_row("", "", "")

    table.add_row("[bold]POST-TAX DEDUCTIONS[/bold]", "", "")
    table.add_row(
        f"  Roth 401(k) ({result.roth_401k_percent:g}%)",
        fmt_currency(result.roth_401k_paycheck),
        fmt_currency(result.roth_401k_annual),
    )
    table.add_row(f"  ESPP ({result.espp_percent:g}%)", fmt_currency(result.espp_paycheck), fmt_currency(result.espp_annual))
    table.add_row(
        "  Other Post-Tax",
        fmt_currency(result.additional_post_tax_paycheck),
        fmt_currency(result.additional_post_tax_annual),
    )
    table.add_row("", "", "")

    table.add_row(
        "[bold green]NET PAY[/bold green]",
        f"[bold green]{fmt_currency(result.net_take_home_paycheck)}[/bold green]",
        f"[bold green]{fmt_currency(result.net_take_home_annual)}[/bold green]",
    )

    console.print(table)

    if result.contribution_limit_reached:
        console.print(
            f"[cyan]401(k) elections reach the {fmt_currency(result.max_401k_contribution)} limit[/cyan]"
        )
    console.print(
        f"[dim]Taxable income after {fmt_currency(result.standard_deduction)} standard deduction: "
        f"{fmt_currency(result.taxable_income)}[/dim]"
    )


def render_household(console: Console, summary: HouseholdSummary) -> None:
    """Render per-person and household contribution tables."""
    render_warnings(console, summary.warnings)

    for person in summary.people:
        table = Table(
            title=f"Contributions {summary.year}: {person.person} (age {person.age})",
            box=box.ROUNDED,
        )
        table.add_column("Account", style="bold")
        table.add_column("YTD", justify="right")
        table.add_column("Projected", justify="right")
        table.add_column("Employer", justify="right")
        table.add_column("Total", justify="right")
        table.add_column("Limit", justify="right")
        table.add_column("Room", justify="right")

        for account_type, account in person.accounts.items():
            label = ACCOUNT_LABELS[account_type]
            if account.joint:
                label += " [dim](joint share)[/dim]"
            table.add_row(
                label,
                fmt_currency(account.ytd),
                fmt_currency(account.projected),
                fmt_currency(account.employer_total) if account.employer_total else "-",
                fmt_currency(account.total),
                fmt_currency(account.limit),
                _room(account.room),
            )
        console.print(table)

        max_out = person.max_out
        console.print(
            f"[dim]To max out: 401(k) +{fmt_currency(max_out.k401_per_paycheck)}/paycheck "
            f"(+{max_out.k401_percent:.1f}%), IRA +{fmt_currency(max_out.ira_monthly)}/month, "
            f"HSA +{fmt_currency(max_out.hsa_per_paycheck)}/paycheck[/dim]"
        )
        console.print()

    if len(summary.people) < 2:
        return

    table = Table(title=f"Household {summary.year}", box=box.ROUNDED)
    table.add_column("Account", style="bold")
    table.add_column("YTD", justify="right")
    table.add_column("Projected", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Room", justify="right")

    for account_type, total in summary.totals.items():
        label = ACCOUNT_LABELS[account_type]
        if total.joint:
            label += " [dim](joint)[/dim]"
        table.add_row(
            label,
            fmt_currency(total.ytd),
            fmt_currency(total.projected),
            fmt_currency(total.total),
            fmt_currency(total.limit),
            _room(total.room),
        )
    console.print(table)


def _room(room) -> str:
    """Format room, flagging over-contribution in red."""
    if room is None:
        return "-"
    if room.over_contributed:
        return f"[red]-{fmt_currency(-room.delta)}[/red]"
    return fmt_currency(room.room)


def fmt_currency(amount: Optional[float]) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    return f"${amount:,.2f}"
