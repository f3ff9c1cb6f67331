"""Per-person contribution breakdown.

Combines recorded YTD contributions with projections at the person's current
settings for the rest of the year, and compares the totals against the annual
limits. Percent-of-pay accounts (401k, ESPP) project over remaining pay
periods; monthly accounts (IRA, brokerage) over remaining whole months.

HSA projections are (expected annual - YTD) so YTD + projected always equals
the annual amount the current settings produce.
"""

import logging
from datetime import date
from typing import Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..proration import (
    elapsed_pay_periods,
    project_monthly,
    project_percent_of_pay,
    remaining_months,
    remaining_pay_periods,
)
from ..schemas import AccountType, Person, YtdContributions
from ..taxes.rules import load_tax_rules
from ..taxes.schemas import TaxRules
from .limits import ContributionRoom, max_for, planning_age, remaining_room

logger = logging.getLogger(__name__)


class AccountBreakdown(BaseModel):
    """YTD and projected contributions for one account category.

    limit/room are None for account types with no statutory limit. For HSA,
    employer money counts toward the limit; for 401(k) it does not.
    """

    model_config = ConfigDict(frozen=True)

    account_type: AccountType
    ytd: float = 0
    projected: float = 0
    employer_ytd: float = 0
    employer_projected: float = 0
    joint: bool = False
    limit: Optional[float] = None
    room: Optional[ContributionRoom] = None

    @property
    def total(self) -> float:
        return self.ytd + self.projected

    @property
    def employer_total(self) -> float:
        return self.employer_ytd + self.employer_projected

    @property
    def combined_total(self) -> float:
        return self.total + self.employer_total


class MaxOutAmounts(BaseModel):
    """Additional contributions needed to reach each limit by Dec 31."""

    model_config = ConfigDict(frozen=True)

    k401_per_paycheck: float = 0
    k401_percent: float = 0
    ira_monthly: float = 0
    hsa_per_paycheck: float = 0
    remaining_paychecks: float = 0
    remaining_months: int = 0


class ContributionBreakdown(BaseModel):
    """All account categories for one person in one year."""

    model_config = ConfigDict(frozen=True)

    person: str
    year: int
    age: int
    accounts: Dict[AccountType, AccountBreakdown]
    max_out: MaxOutAmounts
    warnings: Tuple[str, ...] = ()

    def account(self, account_type: AccountType) -> AccountBreakdown:
        return self.accounts[AccountType(account_type)]

    @property
    def over_contributed(self) -> Tuple[AccountType, ...]:
        return tuple(
            t for t, a in self.accounts.items()
            if a.room is not None and a.room.over_contributed
        )


def employer_match_applies(person: Person) -> bool:
    """Employer match is paid only once the employee meets the match threshold."""
    retirement = person.retirement
    return retirement.total_percent >= retirement.employee_contribution_for_match_percent


def _per_remaining(amount: float, remaining: float) -> float:
    if remaining <= 0:
        return 0.0
    return max(0.0, amount) / remaining


def compute_contribution_breakdown(
    person: Person,
    ytd: YtdContributions,
    today: date,
    rules: Optional[TaxRules] = None,
    joint_types: FrozenSet[AccountType] = frozenset(),
) -> ContributionBreakdown:
    """Build the contribution breakdown for one person.

    Args:
        person: Person settings (salary, elections, coverage)
        ytd: Contributions attributed to this person so far this year
            (joint shares already divided)
        today: Reference date; projections run from here to Dec 31
        rules: Tax rules for the limits (default: rules for today's year)
        joint_types: Account types shared by the household

    Returns:
        ContributionBreakdown with per-account totals, room and max-out amounts
    """
    if rules is None:
        rules = load_tax_rules(today.year)

    limits = rules.contribution_limits
    pay_period = person.pay_period
    periods_per_year = pay_period.periods_per_year
    salary = person.salary
    age = planning_age(person, today)
    paychecks_left = remaining_pay_periods(today, pay_period)
    months_left = remaining_months(today)
    warnings = []

    # 401(k): only employee deferrals count toward the limit
    k401_limit = max_for(AccountType.K401, age, person.hsa_coverage, limits)
    k401_projected = project_percent_of_pay(salary, person.retirement.total_percent, pay_period, today)
    match_projected = 0.0
    if employer_match_applies(person):
        match_projected = project_percent_of_pay(
            salary, person.retirement.employer_match_percent, pay_period, today
        )
    k401 = AccountBreakdown(
        account_type=AccountType.K401,
        ytd=ytd.k401,
        projected=k401_projected,
        employer_ytd=ytd.k401_employer_match,
        employer_projected=match_projected,
        limit=k401_limit,
        room=remaining_room(k401_limit, ytd.k401 + k401_projected),
    )

    # IRA: monthly budget contributions
    ira_limit = max_for(AccountType.IRA, age, person.hsa_coverage, limits)
    ira_projected = project_monthly(person.budget.ira_monthly, today)
    ira = AccountBreakdown(
        account_type=AccountType.IRA,
        ytd=ytd.ira,
        projected=ira_projected,
        joint=AccountType.IRA in joint_types,
        limit=ira_limit,
        room=remaining_room(ira_limit, ytd.ira + ira_projected),
    )

    # HSA: employee and employer both count toward the limit
    hsa_limit = max_for(AccountType.HSA, age, person.hsa_coverage, limits)
    employer_hsa_annual = person.medical.employer_hsa
    employer_hsa_ytd = ytd.hsa_employer
    if employer_hsa_ytd == 0 and employer_hsa_annual > 0:
        # No employer records yet; assume it has been paid evenly so far
        employer_hsa_ytd = employer_hsa_annual / periods_per_year * elapsed_pay_periods(today, pay_period)
    hsa_projected = max(0.0, person.medical.hsa * periods_per_year - ytd.hsa)
    employer_hsa_projected = max(0.0, employer_hsa_annual - employer_hsa_ytd)
    hsa_total = ytd.hsa + hsa_projected + employer_hsa_ytd + employer_hsa_projected
    hsa = AccountBreakdown(
        account_type=AccountType.HSA,
        ytd=ytd.hsa,
        projected=hsa_projected,
        employer_ytd=employer_hsa_ytd,
        employer_projected=employer_hsa_projected,
        limit=hsa_limit,
        room=remaining_room(hsa_limit, hsa_total),
    )
    if hsa_limit == 0 and hsa_total > 0:
        warnings.append(f"{person.name} has HSA contributions but no HSA coverage")

    espp = AccountBreakdown(
        account_type=AccountType.ESPP,
        ytd=ytd.espp,
        projected=project_percent_of_pay(salary, person.espp_percent, pay_period, today),
    )

    brokerage = AccountBreakdown(
        account_type=AccountType.BROKERAGE,
        ytd=ytd.brokerage,
        projected=project_monthly(person.budget.brokerage_monthly, today),
        joint=AccountType.BROKERAGE in joint_types,
    )

    k401_per_paycheck = _per_remaining(k401.room.delta, paychecks_left)
    max_out = MaxOutAmounts(
        k401_per_paycheck=k401_per_paycheck,
        k401_percent=k401_per_paycheck / person.gross_pay_per_period * 100 if salary > 0 else 0.0,
        ira_monthly=_per_remaining(ira.room.delta, months_left),
        hsa_per_paycheck=_per_remaining(hsa.room.delta, paychecks_left),
        remaining_paychecks=paychecks_left,
        remaining_months=months_left,
    )

    for account in (k401, ira, hsa):
        if account.room.over_contributed:
            message = (
                f"{person.name} is projected to exceed the {account.account_type.value} "
                f"limit by ${-account.room.delta:,.2f}"
            )
            logger.warning(message)
            warnings.append(message)

    return ContributionBreakdown(
        person=person.name,
        year=today.year,
        age=age,
        accounts={a.account_type: a for a in (k401, ira, hsa, espp, brokerage)},
        max_out=max_out,
        warnings=tuple(warnings),
    )
