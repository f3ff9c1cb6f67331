"""Tests for settings, profile resolution, validation and ProfileStore."""

import json

import pytest
import yaml

from payplan.sdk.config import (
    ConfigNotFoundError,
    ProfileNotFoundError,
    get_config_dir,
    get_profile_path,
    get_profile_value,
    get_tax_year,
    load_profile,
    set_setting,
    validate_profile,
)
from payplan.sdk.profile import ProfileStore
from payplan.sdk.schemas import IncomePeriod, PerformanceRecord, Person


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point the config directory at a temp dir."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("PAY_PLAN_CONFIG_PATH", str(config_dir))
    return config_dir


def write_profile(config_dir, profile):
    path = config_dir / "profile.yaml"
    path.write_text(yaml.dump(profile))
    return path


VALID_PROFILE = {
    "persons": [
        {"name": "Alex", "salary": 130000, "birthday": "1985-03-01"},
        {"name": "Blake", "salary": 90000, "birthday": "1987-07-15", "pay_period": "semi_monthly"},
    ],
    "performance": [
        {"year": 2025, "account_type": "Roth IRA", "owner": "Alex", "contributions": 4000},
        {"year": 2024, "account_type": "401k", "owner": "Blake", "contributions": 15000},
    ],
}


class TestSettings:

    def test_config_dir_from_env(self, isolated_env):
        assert get_config_dir() == isolated_env

    def test_tax_year_round_trip(self, isolated_env):
        assert get_tax_year() is None
        set_setting("tax_year", 2025)
        assert get_tax_year() == 2025

    def test_invalid_tax_year(self, isolated_env):
        (isolated_env / "settings.json").write_text(json.dumps({"tax_year": "next"}))
        with pytest.raises(ConfigNotFoundError):
            get_tax_year()

    def test_custom_profile_path(self, isolated_env, tmp_path):
        custom = tmp_path / "elsewhere" / "household.yaml"
        set_setting("profile", str(custom))
        assert get_profile_path() == custom
        with pytest.raises(ProfileNotFoundError):
            get_profile_path(require_exists=True)


class TestLoadProfile:

    def test_missing_profile(self, isolated_env):
        with pytest.raises(ProfileNotFoundError):
            load_profile()
        assert load_profile(require_exists=False) == {}

    def test_invalid_yaml(self, isolated_env):
        (isolated_env / "profile.yaml").write_text("persons: [unclosed")
        with pytest.raises(ConfigNotFoundError):
            load_profile()

    def test_dot_notation_value(self, isolated_env):
        write_profile(isolated_env, {"policy": {"ira_always_joint": False}})
        assert get_profile_value("policy.ira_always_joint") is False
        assert get_profile_value("policy.missing", "x") == "x"


class TestValidateProfile:
    """Errors block use; warnings are informational."""

    def test_valid_profile(self, isolated_env):
        write_profile(isolated_env, VALID_PROFILE)
        validation = validate_profile()
        assert validation.errors == []
        assert validation.all_ready
        validation.require_feature("takehome")

    def test_too_many_persons(self, isolated_env):
        profile = {"persons": [{"name": n, "salary": 1} for n in ("A", "B", "C")]}
        validation = validate_profile(profile)
        assert any("at most 2" in e for e in validation.errors)

    def test_duplicate_and_reserved_names(self, isolated_env):
        validation = validate_profile({"persons": [{"name": "Alex"}, {"name": "Alex"}]})
        assert any("duplicate" in e for e in validation.errors)
        validation = validate_profile({"persons": [{"name": "Joint"}]})
        assert any("reserved" in e for e in validation.errors)

    def test_field_errors_have_paths(self, isolated_env):
        validation = validate_profile({"persons": [{"name": "Alex", "salary": -5}]})
        assert any(e.startswith("persons[0].salary") for e in validation.errors)

    def test_unknown_keys_and_owners_warn(self, isolated_env):
        profile = {
            "persons": [{"name": "Alex", "salary": 1, "birthday": "1985-03-01"}],
            "performance": [{"year": 2025, "account_type": "IRA", "owner": "Casey"}],
            "extras": 1,
        }
        validation = validate_profile(profile)
        assert validation.errors == []
        assert any("extras" in w for w in validation.warnings)
        assert any("Casey" in w for w in validation.warnings)

    def test_feature_not_ready(self, isolated_env):
        validation = validate_profile({"persons": [{"name": "Alex"}]})
        assert not validation.is_ready("takehome")
        with pytest.raises(ConfigNotFoundError):
            validation.require_feature("takehome")


class TestProfileStore:

    def test_reads(self, isolated_env):
        write_profile(isolated_env, VALID_PROFILE)
        store = ProfileStore()
        assert [p.name for p in store.persons()] == ["Alex", "Blake"]
        assert store.person("blake").salary == 90000
        assert len(store.performance_records(2025)) == 1
        assert store.policy().ira_always_joint is True

    def test_unknown_person(self, isolated_env):
        write_profile(isolated_env, VALID_PROFILE)
        with pytest.raises(ConfigNotFoundError):
            ProfileStore().person("Casey")

    def test_invalid_person(self, isolated_env):
        write_profile(isolated_env, {"persons": [{"name": "Alex", "salary": "lots"}]})
        with pytest.raises(ConfigNotFoundError):
            ProfileStore().persons()

    def test_writes(self, tmp_path):
        store = ProfileStore(tmp_path / "profile.yaml")
        store.save_person(Person(name="Alex", salary=100000))
        store.save_person(Person(name="alex", salary=110000))
        store.add_performance_record(
            PerformanceRecord(year=2025, account_type="HSA", owner="Alex", contributions=1200)
        )

        persons = store.persons()
        assert len(persons) == 1
        assert persons[0].salary == 110000
        assert store.performance_records()[0].contributions == 1200

    def test_bad_income_period_kept_raw(self, isolated_env):
        profile = {
            "persons": [{
                "name": "Alex",
                "salary": 100000,
                "income_periods": [
                    {"start_date": "2025-01-01", "end_date": "2025-03-31", "gross_salary": 90000},
                    {"start_date": "2025-09-01", "end_date": "2025-08-01", "gross_salary": 90000},
                ],
            }],
        }
        write_profile(isolated_env, profile)
        alex = ProfileStore().person("Alex")
        assert isinstance(alex.income_periods[0], IncomePeriod)
        assert isinstance(alex.income_periods[1], dict)

        validation = validate_profile()
        assert validation.errors == []
        assert any("income_periods[1]" in w for w in validation.warnings)
