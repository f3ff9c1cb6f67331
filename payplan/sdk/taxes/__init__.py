"""taxes - Tax withholding rules and calculations.

Scope:
- Federal withholding tables (IRS Pub 15-T annual percentage method)
- W-4 adjustments (old form allowances, new form credits, Step 2(c), Step 4)
- Flat-rate Social Security and Medicare
- Year-specific rules loaded from tax-rules/{year}.yaml

Constraints:
- Pure calculation - no profile access
- Rules are validated on load; bad rules raise TaxRulesError

Usage:
    from payplan.sdk.taxes import compute_federal_tax, load_tax_rules

    rules = load_tax_rules(2025)
    fit = compute_federal_tax(76000, "single", W4Profile(), 26, rules)
"""

from .rules import (
    DEFAULT_TAX_YEAR,
    TaxRulesError,
    get_available_years,
    load_tax_rules,
    load_tax_rules_file,
)

from .schemas import (
    ContributionLimits,
    PayrollTaxRates,
    TaxCredits,
    TaxRules,
    WithholdingRow,
    WithholdingTables,
)

from .withholding import (
    annual_wage_withholding,
    compute_federal_tax,
    compute_payroll_tax,
    compute_withholding,
    resolve_filing_status,
)

__all__ = [
    # Rules
    "DEFAULT_TAX_YEAR",
    "TaxRulesError",
    "get_available_years",
    "load_tax_rules",
    "load_tax_rules_file",
    # Schemas
    "ContributionLimits",
    "PayrollTaxRates",
    "TaxCredits",
    "TaxRules",
    "WithholdingRow",
    "WithholdingTables",
    # Withholding
    "annual_wage_withholding",
    "compute_federal_tax",
    "compute_payroll_tax",
    "compute_withholding",
    "resolve_filing_status",
]
