"""Year-to-date proration of income and contributions.

Converts date ranges into fractional pay-period counts using an average
year (365.25 days), then splits annual figures into what has been earned or
contributed so far and what the rest of the year projects to.

This is average-year proration, not pay-date enumeration: a range of N days
counts as N / 365.25 * periods_per_year pay periods. A period spanning the
whole calendar year (Jan 1 - Dec 31) is credited its full salary directly.

Every function takes 'today' explicitly; nothing here reads the clock.
"""

import logging
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from .schemas import IncomePeriod, PayPeriod

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25
SECONDS_PER_DAY = 24 * 60 * 60

IncomePeriodInput = Union[IncomePeriod, Mapping[str, Any]]


class IncomeProration(BaseModel):
    """Income split for a calendar year."""

    model_config = ConfigDict(frozen=True)

    year: int
    ytd_income: float
    projected_remainder: float
    periods_used: int
    warnings: Tuple[str, ...] = ()

    @property
    def projected_annual(self) -> float:
        return self.ytd_income + self.projected_remainder


# =============================================================================
# Pay period arithmetic
# =============================================================================


def periods_between(start: date, end: date, pay_period: PayPeriod) -> float:
    """Fractional pay periods between two dates (never negative)."""
    days = (end - start).total_seconds() / SECONDS_PER_DAY
    return max(0.0, days / DAYS_PER_YEAR * pay_period.periods_per_year)


def year_start(today: date) -> date:
    return date(today.year, 1, 1)


def year_end(today: date) -> date:
    return date(today.year, 12, 31)


def elapsed_pay_periods(today: date, pay_period: PayPeriod) -> float:
    """Pay periods from Jan 1 to today."""
    return periods_between(year_start(today), today, pay_period)


def remaining_pay_periods(today: date, pay_period: PayPeriod) -> float:
    """Pay periods from today to Dec 31."""
    return periods_between(today, year_end(today), pay_period)


def remaining_months(today: date) -> int:
    """Whole months left in the year, starting with next month."""
    return max(0, 12 - today.month)


# =============================================================================
# Income proration
# =============================================================================


def _is_full_year(period: IncomePeriod, year: int) -> bool:
    return period.start_date == date(year, 1, 1) and period.end_date == date(year, 12, 31)


def _valid_periods(
    income_periods: Sequence[IncomePeriodInput],
    year: int,
) -> Tuple[List[IncomePeriod], List[str]]:
    """Validate raw periods, skipping malformed or out-of-year ones with a warning."""
    valid = []
    warnings = []

    for index, raw in enumerate(income_periods):
        try:
            period = raw if isinstance(raw, IncomePeriod) else IncomePeriod.model_validate(raw)
        except ValidationError as e:
            message = f"Skipping income period {index + 1}: invalid dates or salary ({e.error_count()} error(s))"
            logger.warning(message)
            logger.debug(str(e))
            warnings.append(message)
            continue

        if period.start_date.year != year or period.end_date.year != year:
            message = (
                f"Skipping income period {index + 1}: "
                f"{period.start_date} to {period.end_date} is not within {year}"
            )
            logger.warning(message)
            warnings.append(message)
            continue

        valid.append(period)

    return valid, warnings


def period_income(period: IncomePeriod, pay_period: PayPeriod) -> float:
    """Gross income earned over one income period."""
    if _is_full_year(period, period.start_date.year):
        return period.gross_salary
    per_paycheck = period.gross_salary / pay_period.periods_per_year
    return per_paycheck * periods_between(period.start_date, period.end_date, pay_period)


def prorate_income(
    income_periods: Sequence[IncomePeriodInput],
    pay_period: PayPeriod,
    current_salary: float,
    today: date,
) -> IncomeProration:
    """Split a year's income into recorded periods and the projected remainder.

    Args:
        income_periods: IncomePeriod models or raw dicts (malformed ones skipped)
        pay_period: Pay frequency used for proration
        current_salary: Annual salary used for the rest of the year
        today: Reference date; its year is the year being prorated

    Returns:
        IncomeProration. With no periods at all, the salary is treated as a
        full-year run rate (ytd_income = current_salary, no remainder).
    """
    year = today.year

    if not income_periods:
        return IncomeProration(
            year=year,
            ytd_income=current_salary,
            projected_remainder=0.0,
            periods_used=0,
        )

    valid, warnings = _valid_periods(income_periods, year)

    # Periods may overlap; each is summed independently.
    ytd = sum(period_income(p, pay_period) for p in valid)

    projection_start = max((p.end_date for p in valid), default=today)
    remainder_periods = periods_between(projection_start, year_end(today), pay_period)
    remainder = current_salary / pay_period.periods_per_year * remainder_periods

    return IncomeProration(
        year=year,
        ytd_income=ytd,
        projected_remainder=remainder,
        periods_used=len(valid),
        warnings=tuple(warnings),
    )


def compute_ytd_income(
    income_periods: Sequence[IncomePeriodInput],
    pay_period: PayPeriod,
    fallback_annual_salary: float,
    today: date,
) -> float:
    """Income earned across the year's income periods.

    Returns fallback_annual_salary unchanged when there are no periods.
    """
    return prorate_income(income_periods, pay_period, fallback_annual_salary, today).ytd_income


def compute_projected_annual_income(
    income_periods: Sequence[IncomePeriodInput],
    current_salary: float,
    pay_period: PayPeriod,
    today: date,
) -> float:
    """YTD income plus current_salary's rate from the latest period end to Dec 31."""
    return prorate_income(income_periods, pay_period, current_salary, today).projected_annual


# =============================================================================
# Contribution projection
# =============================================================================


def project_percent_of_pay(
    annual_salary: float,
    percent: float,
    pay_period: PayPeriod,
    today: date,
    from_date: Optional[date] = None,
) -> float:
    """Projected contributions for the rest of the year at a percent of pay.

    Used for 401(k), ESPP and employer match. from_date defaults to today.
    """
    start = from_date or today
    per_paycheck = annual_salary / pay_period.periods_per_year
    return per_paycheck * periods_between(start, year_end(today), pay_period) * (percent / 100)


def project_per_paycheck(
    amount_per_paycheck: float,
    pay_period: PayPeriod,
    today: date,
) -> float:
    """Projected contributions for the rest of the year at a fixed paycheck amount."""
    return amount_per_paycheck * remaining_pay_periods(today, pay_period)


def project_monthly(monthly_amount: float, today: date) -> float:
    """Projected contributions for the remaining whole months (IRA, brokerage)."""
    return monthly_amount * remaining_months(today)
