"""Take-home pay per paycheck.

Assembles gross pay, 401(k) elections, benefit deductions and taxes into a
per-paycheck and annual breakdown. Order of operations:

1. Nominal traditional and Roth 401(k) from the election percentages
2. Cap the combined 401(k) at the annual limit, traditional first
3. Adjusted pay = gross - capped traditional 401(k) - pretax deductions
4. Federal withholding and payroll tax on adjusted annual income
5. Net = gross - taxes - 401(k) - pretax - post-tax (ESPP, named items)

Invalid input (non-positive or non-numeric gross pay, 401(k) elections over
100%, unknown pay period) returns None rather than raising.
"""

import logging
import math
from datetime import date
from typing import Optional, Union

from .contributions.limits import (
    CATCH_UP_AGE_401K,
    CATCH_UP_AGE_HSA,
    hsa_limit,
    k401_limit,
    required_hsa_per_paycheck,
)
from .schemas import (
    CalculationResult,
    FilingStatus,
    HsaCoverage,
    MedicalDeductions,
    PayPeriod,
    Person,
    RetirementOptions,
    W4Profile,
)
from .taxes.rules import load_tax_rules
from .taxes.schemas import TaxRules
from .taxes.withholding import compute_federal_tax, compute_payroll_tax

logger = logging.getLogger(__name__)


def _invalid(reason: str) -> None:
    logger.debug(f"take-home calculation skipped: {reason}")
    return None


def compute_take_home_pay(
    gross_pay: float,
    pay_period: Union[PayPeriod, str],
    filing_status: Union[FilingStatus, str],
    w4: Optional[W4Profile] = None,
    retirement: Optional[RetirementOptions] = None,
    medical: Optional[MedicalDeductions] = None,
    espp_percent: float = 0,
    hsa_coverage: Union[HsaCoverage, str] = HsaCoverage.NONE,
    *,
    age: Optional[int] = None,
    rules: Optional[TaxRules] = None,
) -> Optional[CalculationResult]:
    """Compute take-home pay for one paycheck.

    Args:
        gross_pay: Gross pay per paycheck
        pay_period: Pay frequency
        filing_status: Filing status (unknown values fall back to single
            with a warning in the result)
        w4: W-4 settings (default: new form, no adjustments)
        retirement: 401(k) elections (default: none)
        medical: Benefit deductions (default: none)
        espp_percent: ESPP percent of gross pay (post-tax)
        hsa_coverage: HSA coverage tier, used for HSA limit reporting
        age: Age for catch-up limits; when omitted, retirement.is_over_50
            decides 401(k) catch-up and HSA catch-up is not applied
        rules: Tax rules (default: DEFAULT_TAX_YEAR rules)

    Returns:
        CalculationResult, or None when the input is invalid
    """
    try:
        gross = float(gross_pay)
        espp_percent = float(espp_percent)
    except (TypeError, ValueError):
        return _invalid(f"gross pay {gross_pay!r} or ESPP percent {espp_percent!r} is not a number")
    if not math.isfinite(gross) or gross <= 0:
        return _invalid(f"gross pay {gross_pay!r} must be positive")

    try:
        pay_period = PayPeriod(pay_period)
        hsa_coverage = HsaCoverage(hsa_coverage)
    except ValueError as e:
        return _invalid(str(e))

    w4 = w4 or W4Profile()
    retirement = retirement or RetirementOptions()
    medical = medical or MedicalDeductions()

    if retirement.total_percent > 100:
        return _invalid(f"401(k) elections total {retirement.total_percent}% (over 100%)")
    if not 0 <= espp_percent <= 100:
        return _invalid(f"ESPP percent {espp_percent} is outside 0-100")

    if rules is None:
        rules = load_tax_rules()
    limits = rules.contribution_limits

    periods = pay_period.periods_per_year
    annual_gross = gross * periods
    warnings = []

    if age is None:
        k401_catch_up = retirement.is_over_50
        hsa_catch_up = False
    else:
        k401_catch_up = age >= CATCH_UP_AGE_401K
        hsa_catch_up = age >= CATCH_UP_AGE_HSA

    # Step 1: Nominal 401(k) from election percentages
    traditional_nominal = gross * retirement.traditional_401k_percent / 100
    roth_nominal = gross * retirement.roth_401k_percent / 100

    # Step 2: Cap at the annual limit; traditional is allocated first
    max_401k = k401_limit(limits, k401_catch_up)
    traditional_annual = min(traditional_nominal * periods, max_401k)
    roth_annual = min(roth_nominal * periods, max(0.0, max_401k - traditional_annual))
    traditional_paycheck = traditional_annual / periods
    roth_paycheck = roth_annual / periods
    limit_reached = traditional_annual + roth_annual >= max_401k
    if (traditional_nominal + roth_nominal) * periods > max_401k:
        logger.debug(f"401(k) capped at ${max_401k:,.2f}")

    # Step 3: Adjusted pay after pretax deductions
    pretax_paycheck = medical.pretax_per_paycheck
    adjusted_pay = gross - traditional_paycheck - pretax_paycheck
    adjusted_annual = adjusted_pay * periods

    # HSA is reported against its limit, not capped
    max_hsa = hsa_limit(limits, hsa_coverage, hsa_catch_up)
    hsa_annual = medical.hsa * periods
    if hsa_annual + medical.employer_hsa > max_hsa and hsa_annual > 0:
        warnings.append(
            f"HSA contributions ${hsa_annual + medical.employer_hsa:,.2f} exceed "
            f"the ${max_hsa:,.2f} limit for {hsa_coverage.value} coverage"
        )
    hsa_needed = required_hsa_per_paycheck(
        hsa_coverage, pay_period, medical.employer_hsa, age or 0, limits
    )

    # Step 4: Taxes on adjusted annual income
    federal = compute_federal_tax(adjusted_annual, filing_status, w4, periods, rules)
    payroll = compute_payroll_tax(adjusted_annual, rules.payroll_tax_rates)
    warnings.extend(federal.warnings)

    total_taxes_annual = federal.annual + payroll.total
    total_taxes_paycheck = total_taxes_annual / periods

    # Step 5: Post-tax deductions and net
    espp_paycheck = gross * espp_percent / 100
    additional_post_tax_paycheck = medical.post_tax_per_paycheck
    post_tax_paycheck = espp_paycheck + additional_post_tax_paycheck

    net_paycheck = (
        gross
        - total_taxes_paycheck
        - (traditional_paycheck + roth_paycheck)
        - pretax_paycheck
        - post_tax_paycheck
    )

    standard_deduction = rules.standard_deductions[federal.filing_status]

    return CalculationResult(
        pay_period=pay_period,
        periods_per_year=periods,
        filing_status=federal.filing_status,
        w4_form_version=w4.form_version,
        gross_pay=gross,
        annual_gross_income=annual_gross,
        traditional_401k_percent=retirement.traditional_401k_percent,
        roth_401k_percent=retirement.roth_401k_percent,
        traditional_401k_paycheck=traditional_paycheck,
        traditional_401k_annual=traditional_annual,
        roth_401k_paycheck=roth_paycheck,
        roth_401k_annual=roth_annual,
        max_401k_contribution=max_401k,
        contribution_limit_reached=limit_reached,
        pretax_deductions_paycheck=pretax_paycheck,
        pretax_deductions_annual=pretax_paycheck * periods,
        hsa_contribution_annual=min(hsa_annual, max_hsa),
        required_hsa_per_paycheck=hsa_needed,
        espp_percent=espp_percent,
        espp_paycheck=espp_paycheck,
        espp_annual=espp_paycheck * periods,
        additional_post_tax_paycheck=additional_post_tax_paycheck,
        additional_post_tax_annual=additional_post_tax_paycheck * periods,
        post_tax_deductions_paycheck=post_tax_paycheck,
        post_tax_deductions_annual=post_tax_paycheck * periods,
        adjusted_gross_pay=adjusted_pay,
        adjusted_gross_income=adjusted_annual,
        standard_deduction=standard_deduction,
        taxable_income=max(0.0, adjusted_annual - standard_deduction),
        federal_tax_paycheck=federal.annual / periods,
        federal_tax_annual=federal.annual,
        social_security_tax_paycheck=payroll.social_security / periods,
        social_security_tax_annual=payroll.social_security,
        medicare_tax_paycheck=payroll.medicare / periods,
        medicare_tax_annual=payroll.medicare,
        total_taxes_paycheck=total_taxes_paycheck,
        total_taxes_annual=total_taxes_annual,
        effective_tax_rate=total_taxes_annual / annual_gross * 100,
        using_multiple_jobs_method=federal.used_multiple_jobs_table,
        net_take_home_paycheck=net_paycheck,
        net_take_home_annual=net_paycheck * periods,
        warnings=tuple(warnings),
    )


def compute_for_person(
    person: Person,
    today: date,
    rules: Optional[TaxRules] = None,
) -> Optional[CalculationResult]:
    """Take-home pay for a profile person at their current salary.

    Age comes from the birthday when known (as of today); otherwise the
    person's is_over_50 flag decides 401(k) catch-up.
    """
    if rules is None:
        rules = load_tax_rules(today.year)

    age = person.age_on(today) if person.birthday is not None else None
    return compute_take_home_pay(
        person.gross_pay_per_period,
        person.pay_period,
        person.filing_status,
        person.w4,
        person.retirement,
        person.medical,
        person.espp_percent,
        person.hsa_coverage,
        age=age,
        rules=rules,
    )
