"""Pay Plan SDK - Take-home pay and contribution room calculations."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_tax_year,
    get_profile_path,
    load_profile,
    save_profile,
    get_profile_value,
    ProfileNotFoundError,
    ConfigNotFoundError,
    # Profile validation
    validate_profile,
    ProfileValidationResult,
)

from .schemas import (
    AccountType,
    BonusOptions,
    BrokerageContribution,
    BudgetImpacting,
    CalculationResult,
    FederalTax,
    FilingStatus,
    HsaCoverage,
    IncomePeriod,
    MedicalDeductions,
    NamedDeduction,
    PayPeriod,
    PayrollTax,
    PayWeek,
    PerformanceRecord,
    Person,
    RetirementOptions,
    W4FormVersion,
    W4Profile,
    YtdContributions,
)

from .taxes import (
    DEFAULT_TAX_YEAR,
    TaxRules,
    TaxRulesError,
    compute_federal_tax,
    compute_payroll_tax,
    compute_withholding,
    load_tax_rules,
)

from .contributions import (
    ContributionBreakdown,
    ContributionRoom,
    compute_contribution_breakdown,
    max_for,
    remaining_room,
    required_401k_percent,
    required_hsa_per_paycheck,
    required_ira_monthly,
)

from .proration import (
    IncomeProration,
    compute_projected_annual_income,
    compute_ytd_income,
    periods_between,
    prorate_income,
)

from .household import (
    IRA_ALWAYS_JOINT,
    HouseholdSummary,
    JointAccountPolicy,
    allocate_ytd_contributions,
    detect_joint_account_types,
    summarize_household,
)

from .takehome import compute_for_person, compute_take_home_pay
from .bonus import BonusEstimate, estimate_bonus
from .paydays import ExtraPaycheckIncome, extra_paycheck_income, extra_paycheck_months
from .profile import ProfileStore

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_tax_year",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "get_profile_value",
    "ProfileNotFoundError",
    "ConfigNotFoundError",
    "validate_profile",
    "ProfileValidationResult",
    # Schemas
    "AccountType",
    "BonusOptions",
    "BrokerageContribution",
    "BudgetImpacting",
    "CalculationResult",
    "FederalTax",
    "FilingStatus",
    "HsaCoverage",
    "IncomePeriod",
    "MedicalDeductions",
    "NamedDeduction",
    "PayPeriod",
    "PayrollTax",
    "PayWeek",
    "PerformanceRecord",
    "Person",
    "RetirementOptions",
    "W4FormVersion",
    "W4Profile",
    "YtdContributions",
    # Taxes
    "DEFAULT_TAX_YEAR",
    "TaxRules",
    "TaxRulesError",
    "compute_federal_tax",
    "compute_payroll_tax",
    "compute_withholding",
    "load_tax_rules",
    # Contributions
    "ContributionBreakdown",
    "ContributionRoom",
    "compute_contribution_breakdown",
    "max_for",
    "remaining_room",
    "required_401k_percent",
    "required_hsa_per_paycheck",
    "required_ira_monthly",
    # Proration
    "IncomeProration",
    "compute_projected_annual_income",
    "compute_ytd_income",
    "periods_between",
    "prorate_income",
    # Household
    "IRA_ALWAYS_JOINT",
    "HouseholdSummary",
    "JointAccountPolicy",
    "allocate_ytd_contributions",
    "detect_joint_account_types",
    "summarize_household",
    # Take-home
    "compute_for_person",
    "compute_take_home_pay",
    "BonusEstimate",
    "estimate_bonus",
    "ExtraPaycheckIncome",
    "extra_paycheck_income",
    "extra_paycheck_months",
    "ProfileStore",
]
