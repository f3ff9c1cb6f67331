"""Joint account detection and division.

Decides from performance records which account types are shared by the
household, and attributes joint YTD totals evenly to each actual member.

Rules:
- Brokerage/taxable accounts are joint when the owner is the literal
  "Joint" or the account name contains "joint" (case-insensitive).
- IRA contributions are always treated as joint. This is a fixed household
  policy (IRA_ALWAYS_JOINT), not something detected from records.
- 401(k), HSA and ESPP are always individual.
"""

import logging
from typing import FrozenSet, Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from ..schemas import AccountType, PerformanceRecord, YtdContributions

logger = logging.getLogger(__name__)

JOINT_OWNER = "Joint"
IRA_ALWAYS_JOINT = True


class JointAccountPolicy(BaseModel):
    """Household policy for shared account types."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    ira_always_joint: bool = IRA_ALWAYS_JOINT
    joint_owner_name: str = JOINT_OWNER


# Fields that move together when an account type is joint
_JOINT_FIELDS = {
    AccountType.IRA: ("ira",),
    AccountType.BROKERAGE: ("brokerage",),
}


def classify_account_type(account_type: str) -> Optional[AccountType]:
    """Map a free-text account type to a contribution category."""
    text = (account_type or "").strip().lower()
    if "401" in text:
        return AccountType.K401
    if "hsa" in text or "health savings" in text:
        return AccountType.HSA
    if "espp" in text:
        return AccountType.ESPP
    if "ira" in text:
        return AccountType.IRA
    if "brokerage" in text or "taxable" in text:
        return AccountType.BROKERAGE
    return None


def actual_members(member_names: Iterable[Optional[str]]) -> List[str]:
    """Non-blank, distinct member names in order."""
    seen = []
    for name in member_names:
        if name and name.strip() and name.strip() not in seen:
            seen.append(name.strip())
    return seen


def is_joint_record(record: PerformanceRecord, policy: JointAccountPolicy = JointAccountPolicy()) -> bool:
    """True for a brokerage/taxable record owned jointly."""
    if classify_account_type(record.account_type) != AccountType.BROKERAGE:
        return False
    owner = record.owner.strip().lower()
    return owner == policy.joint_owner_name.lower() or "joint" in record.account_name.lower()


def detect_joint_account_types(
    records: Sequence[PerformanceRecord],
    policy: JointAccountPolicy = JointAccountPolicy(),
) -> FrozenSet[AccountType]:
    """Account types the household shares."""
    joint = set()
    if policy.ira_always_joint:
        joint.add(AccountType.IRA)
    if any(is_joint_record(r, policy) for r in records):
        joint.add(AccountType.BROKERAGE)
    return frozenset(joint)


def sum_contributions(
    records: Sequence[PerformanceRecord],
    owners: Iterable[str],
    year: int,
) -> YtdContributions:
    """Total a year's contributions for a set of owners by category."""
    owner_keys = {o.strip().lower() for o in owners}
    totals = dict.fromkeys(YtdContributions.model_fields, 0.0)

    for record in records:
        if record.year != year or record.owner.strip().lower() not in owner_keys:
            continue

        category = classify_account_type(record.account_type)
        if category is None:
            logger.debug(f"ignoring record with account type '{record.account_type}'")
            continue

        if category == AccountType.K401:
            totals["k401"] += record.contributions
            totals["k401_employer_match"] += record.employer_match
        elif category == AccountType.HSA:
            totals["hsa"] += record.contributions
            totals["hsa_employer"] += record.employer_match
        else:
            totals[category.name.lower()] += record.contributions

    return YtdContributions(**totals)


def split_joint_total(total: float, member_count: int) -> float:
    """One member's share of a joint total (unchanged for a single member)."""
    if member_count > 1:
        return total / member_count
    return total


def allocate_ytd_contributions(
    records: Sequence[PerformanceRecord],
    person_name: str,
    member_names: Sequence[Optional[str]],
    year: int,
    policy: JointAccountPolicy = JointAccountPolicy(),
) -> YtdContributions:
    """YTD contributions attributed to one person.

    Individual account types come from the person's own records. Joint types
    are totalled across all members plus the joint owner, then divided
    evenly among the actual members.
    """
    members = actual_members(member_names)
    individual = sum_contributions(records, [person_name], year)

    joint_types = detect_joint_account_types(records, policy)
    if not joint_types:
        return individual

    household = sum_contributions(records, [*members, policy.joint_owner_name], year)

    updates = {}
    for account_type in joint_types:
        for field in _JOINT_FIELDS.get(account_type, ()):
            updates[field] = split_joint_total(getattr(household, field), len(members))

    return individual.model_copy(update=updates)


def household_total(
    account_type: AccountType,
    per_person_amounts: Sequence[float],
    joint_types: FrozenSet[AccountType],
) -> float:
    """Household total from per-person YTD amounts.

    Joint YTD shares were divided evenly, so the total is one share times the
    member count; individual amounts are summed. Only use this for amounts
    produced by allocate_ytd_contributions.
    """
    if not per_person_amounts:
        return 0.0
    if account_type in joint_types and len(per_person_amounts) > 1:
        return per_person_amounts[0] * len(per_person_amounts)
    return sum(per_person_amounts)
