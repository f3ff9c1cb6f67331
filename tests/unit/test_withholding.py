"""Tests for federal withholding and payroll tax.

Expected values are worked by hand from the 2025 annual percentage method
tables in payplan/sdk/taxes/tax-rules/2025.yaml.
"""

import pytest

from payplan.sdk.schemas import FilingStatus, W4FormVersion, W4Profile
from payplan.sdk.taxes import (
    TaxRulesError,
    compute_federal_tax,
    compute_payroll_tax,
    compute_withholding,
    load_tax_rules,
    load_tax_rules_file,
    resolve_filing_status,
)


@pytest.fixture
def rules():
    return load_tax_rules(2025)


# === BRACKET WITHHOLDING ===


class TestBracketWithholding:
    """Piecewise-linear table lookup."""

    def test_zero_and_negative_income(self, rules):
        table = rules.table(FilingStatus.SINGLE)
        assert compute_withholding(0, table) == 0
        assert compute_withholding(-5000, table) == 0

    def test_inside_zero_rate_band(self, rules):
        assert compute_withholding(6000, rules.table(FilingStatus.SINGLE)) == 0

    def test_single_76000(self, rules):
        # 5578.50 + (76000 - 54875) * 0.22
        assert compute_withholding(76000, rules.table(FilingStatus.SINGLE)) == pytest.approx(10226.0)

    def test_married_jointly_76000(self, rules):
        # 2385 + (76000 - 40950) * 0.12
        assert compute_withholding(76000, rules.table(FilingStatus.MARRIED_JOINTLY)) == pytest.approx(6591.0)

    def test_top_bracket(self, rules):
        # 188769.75 + (1000000 - 632750) * 0.37
        assert compute_withholding(1_000_000, rules.table(FilingStatus.SINGLE)) == pytest.approx(324652.25)

    def test_empty_table_is_config_error(self):
        with pytest.raises(TaxRulesError):
            compute_withholding(50000, [])

    @pytest.mark.parametrize("status", list(FilingStatus))
    @pytest.mark.parametrize("multiple_jobs", [False, True])
    def test_non_negative_and_non_decreasing(self, rules, status, multiple_jobs):
        table = rules.table(status, multiple_jobs)
        previous = 0.0
        for income in range(0, 1_000_001, 2500):
            amount = compute_withholding(income, table)
            assert amount >= 0
            assert amount >= previous
            previous = amount

    @pytest.mark.parametrize("status", list(FilingStatus))
    @pytest.mark.parametrize("multiple_jobs", [False, True])
    def test_continuous_at_bracket_edges(self, rules, status, multiple_jobs):
        table = rules.table(status, multiple_jobs)
        for prev, row in zip(table, table[1:]):
            via_previous_row = prev.base_withholding + (row.threshold - prev.threshold) * prev.rate
            assert compute_withholding(row.threshold, table) == pytest.approx(via_previous_row, abs=0.01)


# === PAYROLL TAX ===


class TestPayrollTax:
    """Flat Social Security and Medicare."""

    def test_flat_rates(self, rules):
        payroll = compute_payroll_tax(76000, rules.payroll_tax_rates)
        assert payroll.social_security == pytest.approx(4712.0)
        assert payroll.medicare == pytest.approx(1102.0)
        assert payroll.total == pytest.approx(5814.0)

    def test_no_wage_base_cap(self, rules):
        payroll = compute_payroll_tax(500000, rules.payroll_tax_rates)
        assert payroll.social_security == pytest.approx(31000.0)

    def test_negative_income_is_zero(self, rules):
        payroll = compute_payroll_tax(-100, rules.payroll_tax_rates)
        assert payroll.total == 0


# === FEDERAL WITHHOLDING ENGINE ===


class TestFederalTax:
    """W-4 adjustments on top of the table lookup."""

    def test_new_form_no_adjustments(self, rules):
        fit = compute_federal_tax(76000, "single", W4Profile(), 26, rules)
        assert fit.annual == pytest.approx(10226.0)
        assert fit.filing_status == FilingStatus.SINGLE
        assert fit.used_multiple_jobs_table is False
        assert fit.warnings == ()

    def test_multiple_jobs_table(self, rules):
        fit = compute_federal_tax(76000, "single", W4Profile(multiple_jobs=True), 26, rules)
        # 8825.44 + (76000 - 59175) * 0.24
        assert fit.annual == pytest.approx(12863.44)
        assert fit.used_multiple_jobs_table is True

    def test_old_form_ignores_multiple_jobs(self, rules):
        w4 = W4Profile(form_version=W4FormVersion.OLD, multiple_jobs=True)
        fit = compute_federal_tax(76000, "single", w4, 26, rules)
        assert fit.annual == pytest.approx(10226.0)
        assert fit.used_multiple_jobs_table is False

    def test_old_form_allowances_reduce_wages(self, rules):
        w4 = W4Profile(form_version=W4FormVersion.OLD, allowances=2)
        fit = compute_federal_tax(76000, "single", w4, 26, rules)
        # 76000 - 2 * 4850 = 66300 -> 5578.50 + 11425 * 0.22
        assert fit.annual == pytest.approx(8092.0)

    def test_old_form_ignores_new_form_fields(self, rules):
        w4 = W4Profile(form_version=W4FormVersion.OLD, qualifying_children=2, additional_income=10000)
        fit = compute_federal_tax(76000, "single", w4, 26, rules)
        assert fit.annual == pytest.approx(10226.0)

    def test_dependent_credits(self, rules):
        fit = compute_federal_tax(76000, "single", W4Profile(qualifying_children=1, other_dependents=1), 26, rules)
        assert fit.annual == pytest.approx(10226.0 - 2000 - 500)

    def test_credits_floor_at_zero(self, rules):
        fit = compute_federal_tax(20000, "single", W4Profile(qualifying_children=3), 26, rules)
        assert fit.annual == 0

    def test_additional_income_uses_standard_table(self, rules):
        w4 = W4Profile(additional_income=10000, multiple_jobs=True)
        fit = compute_federal_tax(76000, "single", w4, 26, rules)
        # 12863.44 on the 2(c) table, plus (10000 - 6400) * 0.10 on the standard table
        assert fit.annual == pytest.approx(12863.44 + 360.0)

    def test_extra_withholding_is_per_paycheck(self, rules):
        fit = compute_federal_tax(76000, "single", W4Profile(extra_withholding=50), 26, rules)
        assert fit.annual == pytest.approx(10226.0 + 50 * 26)

        monthly = compute_federal_tax(76000, "single", W4Profile(extra_withholding=50), 12, rules)
        assert monthly.annual == pytest.approx(10226.0 + 50 * 12)

    def test_unknown_filing_status_falls_back_to_single(self, rules):
        fit = compute_federal_tax(76000, "qualifying_widow", W4Profile(), 26, rules)
        assert fit.filing_status == FilingStatus.SINGLE
        assert fit.annual == pytest.approx(10226.0)
        assert len(fit.warnings) == 1
        assert "qualifying_widow" in fit.warnings[0]

    def test_camel_case_filing_status(self, rules):
        fit = compute_federal_tax(76000, "marriedJointly", W4Profile(), 26, rules)
        assert fit.filing_status == FilingStatus.MARRIED_JOINTLY
        assert fit.warnings == ()


class TestResolveFilingStatus:

    @pytest.mark.parametrize("value,expected", [
        ("single", FilingStatus.SINGLE),
        ("mfj", FilingStatus.MARRIED_JOINTLY),
        ("married-separately", FilingStatus.MARRIED_SEPARATELY),
        ("headOfHousehold", FilingStatus.HEAD_OF_HOUSEHOLD),
    ])
    def test_known_values(self, value, expected):
        assert resolve_filing_status(value) == (expected, None)

    def test_unknown_value_warns(self, caplog):
        status, warning = resolve_filing_status("bogus")
        assert status == FilingStatus.SINGLE
        assert warning is not None
        assert "bogus" in caplog.text


# === TAX RULES ===


class TestTaxRules:
    """Loading and validating year rules."""

    def test_2025_values(self, rules):
        assert rules.year == 2025
        assert rules.standard_deductions[FilingStatus.SINGLE] == 15000
        assert rules.contribution_limits.k401_employee == 23500
        assert rules.allowance_amount == 4850

    def test_later_year_falls_back(self):
        assert load_tax_rules(2031).year == 2025

    def test_earlier_year_is_error(self):
        with pytest.raises(TaxRulesError):
            load_tax_rules(1999)

    def test_non_numeric_year(self):
        with pytest.raises(TaxRulesError):
            load_tax_rules("next")

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "2030.yaml"
        path.write_text("year: 2030\nstandard_withholding: {}\n")
        with pytest.raises(TaxRulesError):
            load_tax_rules_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(TaxRulesError):
            load_tax_rules_file(tmp_path / "nope.yaml")
