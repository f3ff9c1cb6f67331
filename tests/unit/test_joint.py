"""Tests for joint account detection and division."""

import pytest

from payplan.sdk.household import (
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
from payplan.sdk.schemas import AccountType, PerformanceRecord

MEMBERS = ["Alex", "Blake"]


def record(account_type, owner, contributions, account_name="", employer_match=0, year=2025):
    return PerformanceRecord(
        year=year,
        account_type=account_type,
        owner=owner,
        account_name=account_name,
        contributions=contributions,
        employer_match=employer_match,
    )


class TestClassifyAccountType:

    @pytest.mark.parametrize("text,expected", [
        ("401k", AccountType.K401),
        ("Roth 401(k)", AccountType.K401),
        ("HSA", AccountType.HSA),
        ("Health Savings Account", AccountType.HSA),
        ("ESPP", AccountType.ESPP),
        ("Roth IRA", AccountType.IRA),
        ("Traditional IRA", AccountType.IRA),
        ("Brokerage", AccountType.BROKERAGE),
        ("Taxable", AccountType.BROKERAGE),
        ("Savings", None),
        ("", None),
    ])
    def test_categories(self, text, expected):
        assert classify_account_type(text) == expected


class TestDetection:
    """Which account types the household shares."""

    def test_ira_always_joint(self):
        assert detect_joint_account_types([]) == frozenset({AccountType.IRA})

    def test_ira_policy_can_be_disabled(self):
        policy = JointAccountPolicy(ira_always_joint=False)
        assert detect_joint_account_types([], policy) == frozenset()

    def test_brokerage_joint_by_owner(self):
        records = [record("Brokerage", "Joint", 6000)]
        assert AccountType.BROKERAGE in detect_joint_account_types(records)

    def test_brokerage_joint_by_account_name(self):
        rec = record("Brokerage", "Alex", 6000, account_name="Vanguard JOINT")
        assert is_joint_record(rec)

    def test_individual_brokerage(self):
        records = [record("Brokerage", "Alex", 6000, account_name="Fidelity")]
        assert AccountType.BROKERAGE not in detect_joint_account_types(records)

    def test_joint_owner_on_401k_is_not_joint(self):
        assert not is_joint_record(record("401k", "Joint", 1000))


class TestSumContributions:

    def test_employer_money_kept_separate(self):
        records = [
            record("401k", "Alex", 10000, employer_match=4000),
            record("HSA", "Alex", 2000, employer_match=500),
            record("ESPP", "Alex", 3000),
            record("401k", "Blake", 9999),
            record("401k", "Alex", 7777, year=2024),
            record("Savings", "Alex", 100),
        ]
        totals = sum_contributions(records, ["alex"], 2025)
        assert totals.k401 == 10000
        assert totals.k401_employer_match == 4000
        assert totals.hsa == 2000
        assert totals.hsa_employer == 500
        assert totals.espp == 3000
        assert totals.ira == 0


class TestAllocation:
    """Even split of joint totals among actual members."""

    def test_ira_split_between_two_members(self):
        records = [record("Roth IRA", "Alex", 4000), record("Roth IRA", "Blake", 2000)]
        alex = allocate_ytd_contributions(records, "Alex", MEMBERS, 2025)
        blake = allocate_ytd_contributions(records, "Blake", MEMBERS, 2025)
        assert alex.ira == 3000
        assert blake.ira == 3000

    def test_joint_brokerage_split(self):
        records = [record("Brokerage", "Joint", 6000)]
        alex = allocate_ytd_contributions(records, "Alex", MEMBERS, 2025)
        assert alex.brokerage == 3000

    def test_individual_types_not_split(self):
        records = [record("401k", "Alex", 10000), record("401k", "Blake", 5000)]
        alex = allocate_ytd_contributions(records, "Alex", MEMBERS, 2025)
        assert alex.k401 == 10000

    def test_single_member_keeps_whole_total(self):
        records = [record("Roth IRA", "Alex", 4000), record("Roth IRA", "Joint", 1000)]
        alex = allocate_ytd_contributions(records, "Alex", ["Alex", ""], 2025)
        assert alex.ira == 5000

    def test_shares_sum_back_to_household_total(self):
        records = [
            record("Roth IRA", "Alex", 4000),
            record("Roth IRA", "Blake", 2500),
            record("Brokerage", "Joint", 7000),
        ]
        shares = [allocate_ytd_contributions(records, m, MEMBERS, 2025) for m in MEMBERS]
        assert sum(s.ira for s in shares) == pytest.approx(6500)
        assert sum(s.brokerage for s in shares) == pytest.approx(7000)


class TestHelpers:

    def test_actual_members(self):
        assert actual_members(["Alex", "", None, " Blake ", "Alex"]) == ["Alex", "Blake"]

    def test_split_joint_total(self):
        assert split_joint_total(6000, 2) == 3000
        assert split_joint_total(6000, 1) == 6000
        assert split_joint_total(6000, 0) == 6000

    def test_household_total(self):
        joint = frozenset({AccountType.IRA})
        assert household_total(AccountType.IRA, [3000, 3000], joint) == 6000
        assert household_total(AccountType.K401, [10000, 5000], joint) == 15000
        assert household_total(AccountType.K401, [], joint) == 0
