"""Household contribution summary.

Builds every member's contribution breakdown from the year's performance
records, then rolls them up. Joint YTD amounts were split evenly between
members, so their household figure is one share times the member count;
individual YTD amounts and every projection are summed.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from ..contributions.breakdown import ContributionBreakdown, compute_contribution_breakdown
from ..contributions.limits import ContributionRoom, remaining_room
from ..schemas import AccountType, PerformanceRecord, Person
from ..taxes.rules import load_tax_rules
from ..taxes.schemas import TaxRules
from .joint import (
    JointAccountPolicy,
    allocate_ytd_contributions,
    detect_joint_account_types,
    household_total,
)

logger = logging.getLogger(__name__)


class HouseholdAccountTotal(BaseModel):
    """One account category totalled across the household."""

    model_config = ConfigDict(frozen=True)

    account_type: AccountType
    joint: bool
    ytd: float
    projected: float
    employer: float = 0
    limit: Optional[float] = None
    room: Optional[ContributionRoom] = None

    @property
    def total(self) -> float:
        return self.ytd + self.projected


class HouseholdSummary(BaseModel):
    """Per-person breakdowns and household totals for one year."""

    model_config = ConfigDict(frozen=True)

    year: int
    members: Tuple[str, ...]
    joint_types: Tuple[AccountType, ...]
    people: Tuple[ContributionBreakdown, ...]
    totals: Dict[AccountType, HouseholdAccountTotal]

    @property
    def warnings(self) -> List[str]:
        return [w for p in self.people for w in p.warnings]


def _account_total(
    account_type: AccountType,
    people: Sequence[ContributionBreakdown],
    joint_types,
) -> HouseholdAccountTotal:
    accounts = [p.account(account_type) for p in people]
    ytd = household_total(account_type, [a.ytd for a in accounts], joint_types)
    # Projections come from each member's own settings and were never divided
    projected = sum(a.projected for a in accounts)
    employer = sum(a.employer_total for a in accounts)

    # Each member has their own statutory limit, joint or not
    limits = [a.limit for a in accounts if a.limit is not None]
    limit = sum(limits) if limits else None
    room = None
    if limit is not None:
        counted = ytd + projected
        if account_type == AccountType.HSA:
            counted += employer
        room = remaining_room(limit, counted)

    return HouseholdAccountTotal(
        account_type=account_type,
        joint=account_type in joint_types,
        ytd=ytd,
        projected=projected,
        employer=employer,
        limit=limit,
        room=room,
    )


def summarize_household(
    persons: Sequence[Person],
    records: Sequence[PerformanceRecord],
    today: date,
    rules: Optional[TaxRules] = None,
    policy: JointAccountPolicy = JointAccountPolicy(),
) -> HouseholdSummary:
    """Contribution summary for all household members.

    Args:
        persons: Household members (one or two)
        records: Performance records (any years; only today's year is used)
        today: Reference date
        rules: Tax rules for the limits (default: rules for today's year)
        policy: Joint account policy

    Returns:
        HouseholdSummary
    """
    if rules is None:
        rules = load_tax_rules(today.year)

    year = today.year
    members = [p.name for p in persons]
    joint_types = detect_joint_account_types(records, policy)
    logger.debug(f"joint account types: {sorted(t.value for t in joint_types)}")

    people = []
    for person in persons:
        ytd = allocate_ytd_contributions(records, person.name, members, year, policy)
        people.append(compute_contribution_breakdown(person, ytd, today, rules, joint_types))

    totals = {t: _account_total(t, people, joint_types) for t in AccountType}

    return HouseholdSummary(
        year=year,
        members=tuple(members),
        joint_types=tuple(sorted(joint_types, key=lambda t: t.value)),
        people=tuple(people),
        totals=totals,
    )
