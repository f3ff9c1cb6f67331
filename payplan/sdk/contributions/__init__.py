"""contributions - Contribution limits, room and per-person breakdowns.

Scope:
- Annual limits with catch-up (401k/IRA at 50, HSA at 55)
- Remaining room, floored, with the signed delta kept for over-contribution
- YTD + projected breakdown per account category
- Amounts needed to max out by year end
"""

from .limits import (
    CATCH_UP_AGE_401K,
    CATCH_UP_AGE_HSA,
    CATCH_UP_AGE_IRA,
    ContributionRoom,
    hsa_limit,
    k401_limit,
    max_for,
    planning_age,
    remaining_room,
    required_401k_percent,
    required_hsa_per_paycheck,
    required_ira_monthly,
)

from .breakdown import (
    AccountBreakdown,
    ContributionBreakdown,
    MaxOutAmounts,
    compute_contribution_breakdown,
    employer_match_applies,
)

__all__ = [
    "CATCH_UP_AGE_401K",
    "CATCH_UP_AGE_HSA",
    "CATCH_UP_AGE_IRA",
    "ContributionRoom",
    "hsa_limit",
    "k401_limit",
    "max_for",
    "planning_age",
    "remaining_room",
    "required_401k_percent",
    "required_hsa_per_paycheck",
    "required_ira_monthly",
    "AccountBreakdown",
    "ContributionBreakdown",
    "MaxOutAmounts",
    "compute_contribution_breakdown",
    "employer_match_applies",
]
