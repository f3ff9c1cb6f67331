"""Pydantic schemas for pay-plan data validation.

Input models (persons, W-4 settings, deductions, performance records) and the
CalculationResult produced by the take-home assembler. All models are frozen:
every calculation builds fresh value objects and nothing is mutated in place.

Input schemas use extra='forbid' so typos in profile.yaml cause clear errors
rather than silently falling back to defaults.
"""

import re
from datetime import date
from enum import Enum
from typing import Annotated, Any, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _normalize_key(value: str) -> str:
    """Lowercase and strip separators so 'marriedJointly' == 'married_jointly'."""
    return re.sub(r"[^a-z0-9]", "", value.lower())


# =============================================================================
# Enumerations
# =============================================================================


class FilingStatus(str, Enum):
    """Filing status selecting the withholding table and standard deduction."""

    SINGLE = "single"
    MARRIED_JOINTLY = "married_jointly"
    MARRIED_SEPARATELY = "married_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return _FILING_STATUS_ALIASES.get(_normalize_key(value))
        return None


_FILING_STATUS_ALIASES = {
    "single": FilingStatus.SINGLE,
    "marriedjointly": FilingStatus.MARRIED_JOINTLY,
    "mfj": FilingStatus.MARRIED_JOINTLY,
    "marriedseparately": FilingStatus.MARRIED_SEPARATELY,
    "mfs": FilingStatus.MARRIED_SEPARATELY,
    "headofhousehold": FilingStatus.HEAD_OF_HOUSEHOLD,
    "hoh": FilingStatus.HEAD_OF_HOUSEHOLD,
}


class PayPeriod(str, Enum):
    """Pay frequency. Determines periods_per_year."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    SEMI_MONTHLY = "semi_monthly"
    MONTHLY = "monthly"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return _PAY_PERIOD_ALIASES.get(_normalize_key(value))
        return None

    @property
    def periods_per_year(self) -> int:
        return PAY_PERIODS[self]

    @property
    def label(self) -> str:
        return self.value.replace("_", "-").title()


_PAY_PERIOD_ALIASES = {
    "weekly": PayPeriod.WEEKLY,
    "biweekly": PayPeriod.BI_WEEKLY,
    "semimonthly": PayPeriod.SEMI_MONTHLY,
    "monthly": PayPeriod.MONTHLY,
}

# Pay periods by frequency
PAY_PERIODS = {
    PayPeriod.WEEKLY: 52,
    PayPeriod.BI_WEEKLY: 26,
    PayPeriod.SEMI_MONTHLY: 24,
    PayPeriod.MONTHLY: 12,
}


class W4FormVersion(str, Enum):
    """W-4 revision: 2020+ ('new') or 2019 and earlier ('old')."""

    NEW = "new"
    OLD = "old"


class HsaCoverage(str, Enum):
    """HSA-eligible health plan coverage tier."""

    NONE = "none"
    SELF = "self"
    FAMILY = "family"


class PayWeek(str, Enum):
    """Which alternate Friday a bi-weekly payroll starts on."""

    EVEN = "even"
    ODD = "odd"


class AccountType(str, Enum):
    """Contribution account categories tracked against limits."""

    K401 = "401k"
    IRA = "ira"
    HSA = "hsa"
    ESPP = "espp"
    BROKERAGE = "brokerage"


# =============================================================================
# Person inputs
# =============================================================================


class W4Profile(BaseModel):
    """Form W-4 settings.

    Only the fields of the selected form version are used: allowances apply to
    the old form; dependents, additional income and the multiple-jobs checkbox
    apply to the new form. extra_withholding (Step 4(c) / line 6) is a
    per-paycheck amount on both.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    form_version: W4FormVersion = Field(default=W4FormVersion.NEW)
    allowances: int = Field(default=0, ge=0, description="Old form allowances")
    qualifying_children: int = Field(default=0, ge=0)
    other_dependents: int = Field(default=0, ge=0)
    additional_income: float = Field(default=0, ge=0, description="Step 4(a) annual other income")
    extra_withholding: float = Field(default=0, ge=0, description="Extra withholding per paycheck")
    multiple_jobs: bool = Field(default=False, description="Step 2(c) checkbox")


class RetirementOptions(BaseModel):
    """401(k) election. Percentages are whole numbers (5 == 5%)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    traditional_401k_percent: float = Field(default=0, ge=0)
    roth_401k_percent: float = Field(default=0, ge=0)
    is_over_50: bool = False
    employer_match_percent: float = Field(default=0, ge=0)
    employee_contribution_for_match_percent: float = Field(
        default=4, ge=0,
        description="Employee percent required before the employer match applies",
    )

    @property
    def total_percent(self) -> float:
        return self.traditional_401k_percent + self.roth_401k_percent


class NamedDeduction(BaseModel):
    """A user-named per-paycheck deduction (pre-tax or post-tax list entry)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    name: str
    amount: float = Field(default=0, ge=0)


class MedicalDeductions(BaseModel):
    """Per-paycheck benefit deductions.

    Everything here except employer_hsa (an annual employer contribution) and
    additional_post_tax reduces federal taxable wages.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    medical: float = Field(default=0, ge=0)
    dental: float = Field(default=0, ge=0)
    vision: float = Field(default=0, ge=0)
    short_term_disability: float = Field(default=0, ge=0)
    long_term_disability: float = Field(default=0, ge=0)
    hsa: float = Field(default=0, ge=0, description="Employee HSA per paycheck")
    employer_hsa: float = Field(default=0, ge=0, description="Employer HSA per year")
    additional_pretax: List[NamedDeduction] = Field(default_factory=list)
    additional_post_tax: List[NamedDeduction] = Field(default_factory=list)

    @property
    def pretax_per_paycheck(self) -> float:
        """Core benefit deductions plus named pre-tax items."""
        core = (
            self.medical
            + self.dental
            + self.vision
            + self.short_term_disability
            + self.long_term_disability
            + self.hsa
        )
        return core + sum(d.amount for d in self.additional_pretax)

    @property
    def post_tax_per_paycheck(self) -> float:
        return sum(d.amount for d in self.additional_post_tax)


class BrokerageContribution(BaseModel):
    """Monthly contribution to a named brokerage account."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    monthly_amount: float = Field(default=0, ge=0)


class BudgetImpacting(BaseModel):
    """Monthly contributions paid from the budget rather than payroll."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    traditional_ira_monthly: float = Field(default=0, ge=0)
    roth_ira_monthly: float = Field(default=0, ge=0)
    brokerage_accounts: List[BrokerageContribution] = Field(default_factory=list)

    @property
    def ira_monthly(self) -> float:
        return self.traditional_ira_monthly + self.roth_ira_monthly

    @property
    def brokerage_monthly(self) -> float:
        return sum(a.monthly_amount for a in self.brokerage_accounts)


class BonusOptions(BaseModel):
    """Annual bonus expectation.

    The estimate is salary x multiplier% x target%; override_amount (when set,
    including 0) replaces the estimate.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    multiplier_percent: float = Field(default=0, ge=0)
    target_percent: float = Field(default=0, ge=0)
    override_amount: Optional[float] = Field(default=None, ge=0)
    remove_401k_from_bonus: bool = False
    no_bonus_expected: bool = False


class IncomePeriod(BaseModel):
    """A closed date range earning an annualized gross salary."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    start_date: date
    end_date: date
    gross_salary: float = Field(..., ge=0, description="Annualized salary for the range")
    description: str = ""

    @model_validator(mode="after")
    def check_order(self) -> "IncomePeriod":
        if self.end_date < self.start_date:
            raise ValueError(
                f"end_date ({self.end_date}) is before start_date ({self.start_date})"
            )
        return self


# Entries that fail IncomePeriod validation are kept as given; proration
# skips them with a warning.
IncomePeriodEntry = Annotated[Union[IncomePeriod, Any], Field(union_mode="left_to_right")]


class Person(BaseModel):
    """One household member's pay and contribution settings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    salary: float = Field(default=0, ge=0, description="Annual gross salary")
    birthday: Optional[date] = None
    pay_period: PayPeriod = PayPeriod.BI_WEEKLY
    # Kept as text so an unknown status reaches the withholding engine,
    # which falls back to single and reports it.
    filing_status: str = FilingStatus.SINGLE.value
    w4: W4Profile = Field(default_factory=W4Profile)
    retirement: RetirementOptions = Field(default_factory=RetirementOptions)
    medical: MedicalDeductions = Field(default_factory=MedicalDeductions)
    budget: BudgetImpacting = Field(default_factory=BudgetImpacting)
    espp_percent: float = Field(default=0, ge=0, le=100)
    bonus: BonusOptions = Field(default_factory=BonusOptions)
    hsa_coverage: HsaCoverage = HsaCoverage.NONE
    pay_week: PayWeek = Field(default=PayWeek.EVEN, description="Bi-weekly pay week parity")
    income_periods: List[IncomePeriodEntry] = Field(default_factory=list)

    def age_on(self, today: date) -> int:
        """Completed years of age on a date (0 when birthday is unknown)."""
        if self.birthday is None:
            return 0
        age = today.year - self.birthday.year
        if (today.month, today.day) < (self.birthday.month, self.birthday.day):
            age -= 1
        return max(0, age)

    @property
    def gross_pay_per_period(self) -> float:
        return self.salary / self.pay_period.periods_per_year


class PerformanceRecord(BaseModel):
    """One account's contributions for a year, as recorded by the owner."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    account_type: str = Field(..., description="e.g. '401k', 'Roth IRA', 'HSA', 'Brokerage'")
    owner: str = Field(..., description="Person name or the literal 'Joint'")
    account_name: str = ""
    contributions: float = 0
    employer_match: float = 0


# =============================================================================
# Results
# =============================================================================


class PayrollTax(BaseModel):
    """Annual Social Security and Medicare amounts."""

    model_config = ConfigDict(frozen=True)

    social_security: float
    medicare: float

    @property
    def total(self) -> float:
        return self.social_security + self.medicare


class FederalTax(BaseModel):
    """Annual federal withholding with the W-4 path that produced it."""

    model_config = ConfigDict(frozen=True)

    annual: float = Field(..., ge=0)
    filing_status: FilingStatus
    used_multiple_jobs_table: bool = False
    warnings: Tuple[str, ...] = ()


class CalculationResult(BaseModel):
    """Full per-paycheck and annual breakdown from compute_take_home_pay."""

    model_config = ConfigDict(frozen=True)

    pay_period: PayPeriod
    periods_per_year: int
    filing_status: FilingStatus
    w4_form_version: W4FormVersion

    gross_pay: float
    annual_gross_income: float

    traditional_401k_percent: float
    roth_401k_percent: float
    traditional_401k_paycheck: float
    traditional_401k_annual: float
    roth_401k_paycheck: float
    roth_401k_annual: float
    max_401k_contribution: float
    contribution_limit_reached: bool

    pretax_deductions_paycheck: float
    pretax_deductions_annual: float
    hsa_contribution_annual: float
    required_hsa_per_paycheck: float

    espp_percent: float
    espp_paycheck: float
    espp_annual: float
    additional_post_tax_paycheck: float
    additional_post_tax_annual: float
    post_tax_deductions_paycheck: float
    post_tax_deductions_annual: float

    adjusted_gross_pay: float
    adjusted_gross_income: float
    standard_deduction: float
    taxable_income: float

    federal_tax_paycheck: float
    federal_tax_annual: float
    social_security_tax_paycheck: float
    social_security_tax_annual: float
    medicare_tax_paycheck: float
    medicare_tax_annual: float
    total_taxes_paycheck: float
    total_taxes_annual: float
    effective_tax_rate: float
    using_multiple_jobs_method: bool

    net_take_home_paycheck: float
    net_take_home_annual: float

    warnings: Tuple[str, ...] = ()


class YtdContributions(BaseModel):
    """Year-to-date contributions attributed to one person, by category."""

    model_config = ConfigDict(frozen=True)

    k401: float = 0
    k401_employer_match: float = 0
    ira: float = 0
    hsa: float = 0
    hsa_employer: float = 0
    espp: float = 0
    brokerage: float = 0
