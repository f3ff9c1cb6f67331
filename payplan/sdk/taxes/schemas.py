"""Pydantic schemas for tax rules validation.

These schemas validate the tax-rules/*.yaml files and provide typed access
to withholding tables, payroll tax rates, contribution limits and W-4 constants.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..schemas import FilingStatus


class WithholdingRow(BaseModel):
    """One row of a Pub 15-T annual percentage method table."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    threshold: float = Field(..., ge=0, description="Annual wage amount the row starts at")
    base_withholding: float = Field(..., ge=0, description="Tentative withholding at threshold")
    rate: float = Field(..., ge=0, le=1, description="Marginal rate above threshold")


class WithholdingTables(BaseModel):
    """Tables for every filing status, for one withholding variant."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    single: List[WithholdingRow]
    married_jointly: List[WithholdingRow]
    married_separately: List[WithholdingRow]
    head_of_household: List[WithholdingRow]

    @field_validator("single", "married_jointly", "married_separately", "head_of_household")
    @classmethod
    def check_table(cls, rows: List[WithholdingRow]) -> List[WithholdingRow]:
        """Tables start at 0 and are strictly increasing by threshold."""
        if not rows:
            raise ValueError("withholding table is empty")
        if rows[0].threshold != 0:
            raise ValueError(f"first threshold must be 0, got {rows[0].threshold}")
        for prev, row in zip(rows, rows[1:]):
            if row.threshold <= prev.threshold:
                raise ValueError(
                    f"thresholds must be strictly increasing ({prev.threshold} -> {row.threshold})"
                )
        return rows

    def for_status(self, status: FilingStatus) -> List[WithholdingRow]:
        return getattr(self, status.value)


class PayrollTaxRates(BaseModel):
    """Employee FICA rates."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    social_security: float = Field(..., ge=0, le=1)
    medicare: float = Field(..., ge=0, le=1)


class ContributionLimits(BaseModel):
    """Statutory annual contribution limits for a plan year."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    k401_employee: float = Field(..., ge=0, description="Employee elective deferral limit")
    k401_catch_up: float = Field(..., ge=0, description="Additional deferral at age 50+")
    k401_total: float = Field(..., ge=0, description="Total including employer contributions")
    hsa_self: float = Field(..., ge=0)
    hsa_family: float = Field(..., ge=0)
    hsa_catch_up: float = Field(..., ge=0, description="Additional HSA room at age 55+")
    ira_self: float = Field(..., ge=0)
    ira_catch_up: float = Field(..., ge=0, description="Additional IRA room at age 50+")


class TaxCredits(BaseModel):
    """Form W-4 (2020+) Step 3 credit amounts."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    child_tax_credit: float = Field(..., ge=0)
    other_dependent_credit: float = Field(..., ge=0)


class TaxRules(BaseModel):
    """Complete withholding rules for a year."""
    model_config = ConfigDict(extra="ignore", frozen=True)  # Allow unknown fields for forward compat

    year: int
    standard_withholding: WithholdingTables
    multiple_jobs_withholding: WithholdingTables
    standard_deductions: Dict[FilingStatus, float]
    payroll_tax_rates: PayrollTaxRates
    contribution_limits: ContributionLimits
    tax_credits: TaxCredits
    allowance_amount: float = Field(..., ge=0, description="Old W-4 value per allowance")

    @field_validator("standard_deductions")
    @classmethod
    def check_deductions(cls, value: Dict[FilingStatus, float]) -> Dict[FilingStatus, float]:
        missing = [s.value for s in FilingStatus if s not in value]
        if missing:
            raise ValueError(f"standard_deductions missing: {', '.join(missing)}")
        return value

    def table(self, status: FilingStatus, multiple_jobs: bool = False) -> List[WithholdingRow]:
        """Withholding table for a filing status and W-4 Step 2(c) setting."""
        tables = self.multiple_jobs_withholding if multiple_jobs else self.standard_withholding
        return tables.for_status(status)
