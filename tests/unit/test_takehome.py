"""Tests for the take-home pay assembler.

Baseline scenario: $80,000 salary, bi-weekly, single, 5% traditional 401(k).
Adjusted annual income is 76,000, which gives 10,226 federal withholding,
4,712 Social Security and 1,102 Medicare.
"""

import math
from datetime import date

import pytest

from payplan.sdk.schemas import (
    FilingStatus,
    MedicalDeductions,
    NamedDeduction,
    PayPeriod,
    Person,
    RetirementOptions,
    W4Profile,
)
from payplan.sdk.taxes import load_tax_rules
from payplan.sdk.takehome import compute_for_person, compute_take_home_pay

GROSS = 80000 / 26


@pytest.fixture
def rules():
    return load_tax_rules(2025)


def calculate(rules, gross=GROSS, retirement=None, medical=None, **kwargs):
    if retirement is None:
        retirement = RetirementOptions(traditional_401k_percent=5)
    return compute_take_home_pay(
        gross, "bi_weekly", kwargs.pop("filing_status", "single"),
        kwargs.pop("w4", None), retirement, medical, rules=rules, **kwargs,
    )


class TestBaseline:
    """Full breakdown for the baseline scenario."""

    def test_net_pay(self, rules):
        result = calculate(rules)
        assert result.net_take_home_paycheck == pytest.approx(59960 / 26)
        assert result.net_take_home_annual == pytest.approx(59960)

    def test_taxes(self, rules):
        result = calculate(rules)
        assert result.federal_tax_annual == pytest.approx(10226)
        assert result.social_security_tax_annual == pytest.approx(4712)
        assert result.medicare_tax_annual == pytest.approx(1102)
        assert result.total_taxes_annual == pytest.approx(16040)
        assert result.total_taxes_paycheck == pytest.approx(16040 / 26)

    def test_reported_figures(self, rules):
        result = calculate(rules)
        assert result.periods_per_year == 26
        assert result.annual_gross_income == pytest.approx(80000)
        assert result.traditional_401k_annual == pytest.approx(4000)
        assert result.adjusted_gross_income == pytest.approx(76000)
        assert result.taxable_income == pytest.approx(61000)
        assert result.effective_tax_rate == pytest.approx(20.05)
        assert result.contribution_limit_reached is False
        assert result.filing_status == FilingStatus.SINGLE

    def test_net_identity(self, rules):
        result = calculate(
            rules,
            retirement=RetirementOptions(traditional_401k_percent=6, roth_401k_percent=2),
            medical=MedicalDeductions(
                medical=80, dental=10,
                additional_post_tax=[NamedDeduction(id="1", name="Legal plan", amount=15)],
            ),
            espp_percent=5,
        )
        expected = (
            result.gross_pay
            - result.total_taxes_paycheck
            - result.traditional_401k_paycheck
            - result.roth_401k_paycheck
            - result.pretax_deductions_paycheck
            - result.post_tax_deductions_paycheck
        )
        assert result.net_take_home_paycheck == pytest.approx(expected)


class TestDeductions:

    def test_pretax_reduces_taxable_wages(self, rules):
        result = calculate(rules, medical=MedicalDeductions(medical=100))
        assert result.adjusted_gross_income == pytest.approx(73400)
        assert result.federal_tax_annual == pytest.approx(10226 - 2600 * 0.22)
        assert result.net_take_home_annual == pytest.approx(80000 - 9654 - 5615.1 - 4000 - 2600)

    def test_roth_does_not_reduce_taxable_wages(self, rules):
        result = calculate(rules, retirement=RetirementOptions(roth_401k_percent=5))
        assert result.adjusted_gross_income == pytest.approx(80000)
        assert result.roth_401k_annual == pytest.approx(4000)

    def test_espp_is_post_tax(self, rules):
        result = calculate(rules, espp_percent=10)
        assert result.espp_annual == pytest.approx(8000)
        assert result.federal_tax_annual == pytest.approx(10226)
        assert result.net_take_home_annual == pytest.approx(59960 - 8000)

    def test_hsa_over_limit_is_reported_not_capped(self, rules):
        result = calculate(
            rules, medical=MedicalDeductions(hsa=200), hsa_coverage="self",
        )
        assert result.pretax_deductions_annual == pytest.approx(5200)
        assert result.hsa_contribution_annual == pytest.approx(4300)
        assert any("HSA" in w for w in result.warnings)

    def test_required_hsa_per_paycheck(self, rules):
        result = calculate(
            rules, medical=MedicalDeductions(employer_hsa=1000), hsa_coverage="self", age=30,
        )
        assert result.required_hsa_per_paycheck == pytest.approx(3300 / 26)


class TestContributionCap:
    """401(k) capped at the annual limit, traditional first."""

    def test_traditional_capped(self, rules):
        result = calculate(rules, gross=300000 / 26, retirement=RetirementOptions(traditional_401k_percent=10))
        assert result.traditional_401k_annual == pytest.approx(23500)
        assert result.contribution_limit_reached is True

    def test_roth_gets_remainder(self, rules):
        retirement = RetirementOptions(traditional_401k_percent=5, roth_401k_percent=10)
        result = calculate(rules, gross=300000 / 26, retirement=retirement)
        assert result.traditional_401k_annual == pytest.approx(15000)
        assert result.roth_401k_annual == pytest.approx(8500)

    def test_catch_up_by_age(self, rules):
        retirement = RetirementOptions(traditional_401k_percent=20)
        result = calculate(rules, gross=300000 / 26, retirement=retirement, age=50)
        assert result.max_401k_contribution == 31000
        assert result.traditional_401k_annual == pytest.approx(31000)

    def test_catch_up_by_flag(self, rules):
        retirement = RetirementOptions(traditional_401k_percent=20, is_over_50=True)
        result = calculate(rules, gross=300000 / 26, retirement=retirement)
        assert result.max_401k_contribution == 31000


class TestInvalidInput:
    """Invalid input returns None instead of raising."""

    @pytest.mark.parametrize("gross", [0, -100, "abc", None, math.nan, math.inf])
    def test_bad_gross_pay(self, rules, gross):
        assert calculate(rules, gross=gross) is None

    def test_numeric_string_accepted(self, rules):
        assert calculate(rules, gross=str(GROSS)) is not None

    def test_unknown_pay_period(self, rules):
        assert compute_take_home_pay(GROSS, "fortnightly", "single", rules=rules) is None

    def test_401k_over_100_percent(self, rules):
        retirement = RetirementOptions(traditional_401k_percent=60, roth_401k_percent=50)
        assert calculate(rules, retirement=retirement) is None

    def test_espp_out_of_range(self, rules):
        assert calculate(rules, espp_percent=150) is None

    @pytest.mark.parametrize("espp", ["abc", None])
    def test_espp_not_a_number(self, rules, espp):
        assert calculate(rules, espp_percent=espp) is None

    def test_unknown_filing_status_warns(self, rules):
        result = calculate(rules, filing_status="bogus")
        assert result.filing_status == FilingStatus.SINGLE
        assert result.federal_tax_annual == pytest.approx(10226)
        assert any("bogus" in w for w in result.warnings)


class TestOtherSettings:

    def test_w4_extra_withholding(self, rules):
        result = calculate(rules, w4=W4Profile(extra_withholding=50))
        assert result.federal_tax_paycheck == pytest.approx(10226 / 26 + 50)

    def test_married_jointly(self, rules):
        result = calculate(rules, filing_status="married_jointly")
        assert result.federal_tax_annual == pytest.approx(6591)

    def test_monthly_pay_period(self, rules):
        result = compute_take_home_pay(
            80000 / 12, PayPeriod.MONTHLY, "single",
            retirement=RetirementOptions(traditional_401k_percent=5), rules=rules,
        )
        assert result.periods_per_year == 12
        assert result.net_take_home_annual == pytest.approx(59960)


class TestComputeForPerson:

    def test_matches_explicit_inputs(self, rules):
        person = Person(
            name="Alex",
            salary=80000,
            retirement=RetirementOptions(traditional_401k_percent=5),
        )
        result = compute_for_person(person, date(2025, 6, 1), rules)
        assert result.net_take_home_annual == pytest.approx(59960)

    def test_birthday_drives_catch_up(self, rules):
        person = Person(
            name="Alex",
            salary=300000,
            birthday=date(1975, 1, 1),
            retirement=RetirementOptions(traditional_401k_percent=20),
        )
        result = compute_for_person(person, date(2025, 6, 1), rules)
        assert result.max_401k_contribution == 31000


class TestRepeatability:
    """Identical inputs give identical results."""

    def test_same_inputs_same_result(self, rules):
        kwargs = dict(
            w4=W4Profile(qualifying_children=2, additional_income=5000, extra_withholding=25, multiple_jobs=True),
            retirement=RetirementOptions(traditional_401k_percent=12, roth_401k_percent=6),
            medical=MedicalDeductions(
                medical=120, hsa=150, employer_hsa=750,
                additional_pretax=[NamedDeduction(id="1", name="Commuter", amount=40)],
                additional_post_tax=[NamedDeduction(id="2", name="Legal plan", amount=15)],
            ),
            espp_percent=5,
            hsa_coverage="family",
            age=56,
            filing_status="married_jointly",
        )
        first = calculate(rules, gross=250000 / 26, **dict(kwargs))
        second = calculate(rules, gross=250000 / 26, **dict(kwargs))

        assert first == second
        assert first.model_dump() == second.model_dump()
