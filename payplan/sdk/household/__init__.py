"""household - Joint accounts and household roll-ups.

Scope:
- Joint account detection (brokerage by owner/name, IRA by policy)
- Even division of joint YTD totals among actual members
- Household totals across per-person contribution breakdowns
"""

from .joint import (
    IRA_ALWAYS_JOINT,
    JOINT_OWNER,
    JointAccountPolicy,
    actual_members,
    allocate_ytd_contributions,
    classify_account_type,
    detect_joint_account_types,
    household_total,
    is_joint_record,
    split_joint_total,
    sum_contributions,
)

from .summary import (
    HouseholdAccountTotal,
    HouseholdSummary,
    summarize_household,
)

__all__ = [
    "IRA_ALWAYS_JOINT",
    "JOINT_OWNER",
    "JointAccountPolicy",
    "actual_members",
    "allocate_ytd_contributions",
    "classify_account_type",
    "detect_joint_account_types",
    "household_total",
    "is_joint_record",
    "split_joint_total",
    "sum_contributions",
    "HouseholdAccountTotal",
    "HouseholdSummary",
    "summarize_household",
]
