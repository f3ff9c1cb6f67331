"""Pay Plan MCP Server - FastMCP implementation for take-home and contribution tools."""

import logging
from datetime import date
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field, ValidationError

from payplan.sdk import (
    ConfigNotFoundError,
    ProfileNotFoundError,
    ProfileStore,
    TaxRulesError,
    get_tax_year,
    load_tax_rules,
)
from payplan.sdk.contributions import max_for, remaining_room
from payplan.sdk.household import summarize_household
from payplan.sdk.schemas import MedicalDeductions, RetirementOptions, W4Profile
from payplan.sdk.takehome import compute_for_person, compute_take_home_pay

logger = logging.getLogger(__name__)

TOOL_ERRORS = (ConfigNotFoundError, ProfileNotFoundError, TaxRulesError, ValidationError, ValueError)

# Initialize FastMCP server
mcp = FastMCP("pay-plan")


def _parse_today(today: str | None) -> date:
    return date.fromisoformat(today) if today else date.today()


def _rules(today: date):
    return load_tax_rules(get_tax_year() or today.year)


# --- Tools ---

@mcp.tool()
async def take_home_pay(
    person: str | None = Field(default=None, description="Profile person name; omit to use the explicit inputs below"),
    gross_pay: float | None = Field(default=None, description="Gross pay per paycheck (when no person is given)"),
    pay_period: str = Field(default="bi_weekly", description="weekly, bi_weekly, semi_monthly or monthly"),
    filing_status: str = Field(default="single", description="single, married_jointly, married_separately, head_of_household"),
    traditional_401k_percent: float = Field(default=0, description="Traditional 401(k) percent of gross"),
    roth_401k_percent: float = Field(default=0, description="Roth 401(k) percent of gross"),
    espp_percent: float = Field(default=0, description="ESPP percent of gross"),
    age: int | None = Field(default=None, description="Age for catch-up limits"),
    today: str | None = Field(default=None, description="Reference date YYYY-MM-DD (default: today)"),
) -> dict[str, Any]:
    """Calculate net take-home pay per paycheck with the full tax and deduction breakdown."""
    try:
        ref_date = _parse_today(today)
        rules = _rules(ref_date)

        if person:
            profile_person = ProfileStore().person(person)
            result = compute_for_person(profile_person, ref_date, rules)
        else:
            if gross_pay is None:
                return {"error": "Provide a person name or gross_pay"}
            result = compute_take_home_pay(
                gross_pay,
                pay_period,
                filing_status,
                W4Profile(),
                RetirementOptions(
                    traditional_401k_percent=traditional_401k_percent,
                    roth_401k_percent=roth_401k_percent,
                ),
                MedicalDeductions(),
                espp_percent,
                age=age,
                rules=rules,
            )

        if result is None:
            return {"error": "Invalid input: gross pay must be positive and 401(k) elections at most 100%"}
        return result.model_dump(mode="json")

    except TOOL_ERRORS as e:
        logger.error(f"Error calculating take-home pay: {e}")
        return {"error": str(e)}


@mcp.tool()
async def contribution_room(
    account_type: str = Field(description="401k, ira or hsa"),
    age: int = Field(description="Age on the reference date"),
    contributed: float = Field(default=0, description="YTD plus projected contributions"),
    hsa_coverage: str = Field(default="none", description="HSA coverage: none, self or family"),
    year: int | None = Field(default=None, description="Plan year (default: current year)"),
) -> dict[str, Any]:
    """Annual limit and remaining room for an account type. Negative delta means over-contribution."""
    try:
        rules = load_tax_rules(year or get_tax_year() or date.today().year)
        limit = max_for(account_type, age, hsa_coverage, rules.contribution_limits)
        if limit is None:
            return {"account_type": account_type, "limit": None, "note": "No statutory limit"}

        room = remaining_room(limit, contributed)
        return {
            "account_type": account_type,
            "year": rules.year,
            **room.model_dump(),
            "over_contributed": room.over_contributed,
        }

    except TOOL_ERRORS as e:
        logger.error(f"Error computing contribution room: {e}")
        return {"error": str(e)}


@mcp.tool()
async def household_contributions(
    today: str | None = Field(default=None, description="Reference date YYYY-MM-DD (default: today)"),
) -> dict[str, Any]:
    """YTD, projected and remaining contributions for each household member and the household."""
    try:
        ref_date = _parse_today(today)
        store = ProfileStore()
        summary = summarize_household(
            store.persons(),
            store.performance_records(ref_date.year),
            ref_date,
            _rules(ref_date),
            store.policy(),
        )
        return summary.model_dump(mode="json")

    except TOOL_ERRORS as e:
        logger.error(f"Error summarizing household contributions: {e}")
        return {"error": str(e)}


def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
