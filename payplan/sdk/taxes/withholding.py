"""Federal income tax withholding calculations.

Implements the IRS Pub 15-T annual percentage method for computing FIT
withholding from W-4 inputs, plus flat-rate Social Security and Medicare.
Pure calculation: callers pass the tax rules (or get the default year).
"""

import logging
from typing import Optional, Sequence, Tuple, Union

from ..schemas import FederalTax, FilingStatus, PayrollTax, W4FormVersion, W4Profile
from .rules import TaxRulesError, load_tax_rules
from .schemas import PayrollTaxRates, TaxRules, WithholdingRow

logger = logging.getLogger(__name__)


def resolve_filing_status(value: Union[FilingStatus, str, None]) -> Tuple[FilingStatus, Optional[str]]:
    """Map a filing status value to a FilingStatus.

    Unknown values fall back to single. The fallback is logged and the
    warning text is returned so callers can surface it.

    Returns:
        Tuple of (filing_status, warning or None)
    """
    if isinstance(value, FilingStatus):
        return value, None
    try:
        return FilingStatus(value), None
    except ValueError:
        warning = f"Unknown filing status {value!r}; using single withholding table"
        logger.warning(warning)
        return FilingStatus.SINGLE, warning


def compute_withholding(annual_income: float, table: Sequence[WithholdingRow]) -> float:
    """Tentative annual withholding from a percentage method table.

    Uses the highest row whose threshold is at or below the income:
    base_withholding + (income - threshold) * rate. Negative income is
    treated as zero income and the result is never negative.

    Raises:
        TaxRulesError: If the table is empty
    """
    if not table:
        raise TaxRulesError("Withholding table is empty")

    income = max(0.0, annual_income)

    row = table[0]
    for candidate in reversed(table):
        if income >= candidate.threshold:
            row = candidate
            break

    amount_over = max(0.0, income - row.threshold)
    return max(0.0, row.base_withholding + amount_over * row.rate)


def annual_wage_withholding(
    annual_income: float,
    filing_status: FilingStatus,
    rules: TaxRules,
    multiple_jobs: bool = False,
) -> float:
    """Bracket withholding for a filing status on the standard or Step 2(c) table."""
    return compute_withholding(annual_income, rules.table(filing_status, multiple_jobs))


def compute_payroll_tax(
    annual_income: float,
    rates: Optional[PayrollTaxRates] = None,
) -> PayrollTax:
    """Annual Social Security and Medicare at flat rates.

    No Social Security wage base cap and no Additional Medicare Tax are
    applied; this is a run-rate estimate, not a payroll ledger. Negative
    income is treated as zero.
    """
    if rates is None:
        rates = load_tax_rules().payroll_tax_rates

    wages = max(0.0, annual_income)
    return PayrollTax(
        social_security=wages * rates.social_security,
        medicare=wages * rates.medicare,
    )


def compute_federal_tax(
    adjusted_annual_income: float,
    filing_status: Union[FilingStatus, str],
    w4: W4Profile,
    periods_per_year: int,
    rules: Optional[TaxRules] = None,
) -> FederalTax:
    """Annual federal withholding for W-4 settings.

    Args:
        adjusted_annual_income: Annual wages after pretax deductions
        filing_status: Filing status (unknown values fall back to single)
        w4: W-4 settings; extra_withholding is per paycheck
        periods_per_year: Pay periods used to annualize extra withholding
        rules: Tax rules (default: DEFAULT_TAX_YEAR rules)

    Returns:
        FederalTax with the annual amount, the status used and any warnings
    """
    if rules is None:
        rules = load_tax_rules()

    status, warning = resolve_filing_status(filing_status)
    warnings = (warning,) if warning else ()

    is_new_form = w4.form_version == W4FormVersion.NEW

    # Step 1: Step 2(c) checkbox selects the multiple jobs table (new form only)
    multiple_jobs = is_new_form and w4.multiple_jobs

    # Step 2: Tentative annual withholding from the table
    tax = annual_wage_withholding(adjusted_annual_income, status, rules, multiple_jobs)

    # Step 3: Old form allowances reduce the wages looked up (replaces the base)
    if w4.form_version == W4FormVersion.OLD and w4.allowances > 0:
        reduced = max(0.0, adjusted_annual_income - w4.allowances * rules.allowance_amount)
        tax = annual_wage_withholding(reduced, status, rules, multiple_jobs)

    # Step 4: New form dependent credits and other income
    if is_new_form:
        credits = (
            w4.qualifying_children * rules.tax_credits.child_tax_credit
            + w4.other_dependents * rules.tax_credits.other_dependent_credit
        )
        tax = max(0.0, tax - credits)

        if w4.additional_income > 0:
            # Other income is always withheld at the standard table
            tax += annual_wage_withholding(w4.additional_income, status, rules, False)

    # Step 5: Extra withholding is per paycheck; annualize it
    tax += w4.extra_withholding * periods_per_year

    return FederalTax(
        annual=tax,
        filing_status=status,
        used_multiple_jobs_table=multiple_jobs,
        warnings=warnings,
    )
