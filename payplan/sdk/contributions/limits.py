"""Contribution limits and remaining room.

Annual maximums per account type with age-based catch-up. 401(k) and IRA
catch-up starts at 50; HSA catch-up starts at 55.
"""

from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from ..schemas import AccountType, HsaCoverage, PayPeriod, Person
from ..taxes.schemas import ContributionLimits

CATCH_UP_AGE_401K = 50
CATCH_UP_AGE_IRA = 50
CATCH_UP_AGE_HSA = 55


class ContributionRoom(BaseModel):
    """Room left under a limit.

    room is floored at zero; delta keeps the sign so over-contribution
    (negative delta) can be flagged.
    """

    model_config = ConfigDict(frozen=True)

    limit: float
    contributed: float
    room: float
    delta: float

    @property
    def over_contributed(self) -> bool:
        return self.delta < 0


def k401_limit(limits: ContributionLimits, catch_up_eligible: bool) -> float:
    """Employee deferral limit, with catch-up when eligible."""
    return limits.k401_employee + (limits.k401_catch_up if catch_up_eligible else 0)


def hsa_limit(limits: ContributionLimits, coverage: HsaCoverage, catch_up_eligible: bool) -> float:
    """HSA limit for a coverage tier (employee plus employer contributions)."""
    if coverage == HsaCoverage.NONE:
        return 0.0
    base = limits.hsa_self if coverage == HsaCoverage.SELF else limits.hsa_family
    return base + (limits.hsa_catch_up if catch_up_eligible else 0)


def max_for(
    account_type: Union[AccountType, str],
    age: int,
    hsa_coverage: Union[HsaCoverage, str],
    limits: ContributionLimits,
) -> Optional[float]:
    """Annual contribution limit for an account type.

    Returns None for account types with no statutory limit (ESPP, brokerage).

    Raises:
        ValueError: If account_type or hsa_coverage is not recognized
    """
    account_type = AccountType(account_type)

    if account_type == AccountType.K401:
        return k401_limit(limits, age >= CATCH_UP_AGE_401K)
    if account_type == AccountType.IRA:
        return limits.ira_self + (limits.ira_catch_up if age >= CATCH_UP_AGE_IRA else 0)
    if account_type == AccountType.HSA:
        return hsa_limit(limits, HsaCoverage(hsa_coverage), age >= CATCH_UP_AGE_HSA)
    return None


def planning_age(person: Person, today: date) -> int:
    """Age used for catch-up eligibility.

    Uses the birthday when known. Without one, the is_over_50 flag stands in
    for 401(k)/IRA catch-up only; HSA catch-up (55) needs a birthday.
    """
    if person.birthday is not None:
        return person.age_on(today)
    return CATCH_UP_AGE_401K if person.retirement.is_over_50 else 0


def remaining_room(limit: float, ytd_plus_projected: float) -> ContributionRoom:
    """Remaining room under a limit given YTD plus projected contributions."""
    delta = limit - ytd_plus_projected
    return ContributionRoom(
        limit=limit,
        contributed=ytd_plus_projected,
        room=max(0.0, delta),
        delta=delta,
    )


# =============================================================================
# Amounts needed to max out
# =============================================================================


def required_401k_percent(salary: float, limits: ContributionLimits, age: int) -> float:
    """Percent of salary that reaches the 401(k) employee limit over a full year."""
    if salary <= 0:
        return 0.0
    return max_for(AccountType.K401, age, HsaCoverage.NONE, limits) / salary * 100


def required_ira_monthly(limits: ContributionLimits, age: int) -> float:
    """Monthly IRA contribution that reaches the IRA limit over a full year."""
    return max_for(AccountType.IRA, age, HsaCoverage.NONE, limits) / 12


def required_hsa_per_paycheck(
    coverage: Union[HsaCoverage, str],
    pay_period: PayPeriod,
    employer_hsa_annual: float,
    age: int,
    limits: ContributionLimits,
) -> float:
    """Employee HSA per paycheck that, with the employer amount, reaches the limit."""
    limit = max_for(AccountType.HSA, age, coverage, limits)
    if limit <= 0:
        return 0.0
    return max(0.0, (limit - employer_hsa_annual) / pay_period.periods_per_year)
