"""Configuration management for Pay Plan.

Configuration is split into two files:

1. settings.json - Machine-specific settings
   - profile: path to profile.yaml (optional, if not colocated)
   - tax_year: plan year for tax rules (optional, defaults to today's year)

2. profile.yaml - The household
   - persons: one or two household members (salary, W-4, elections)
   - performance: account contribution records by year
   - policy: joint account policy overrides

Config directory resolution:
1. PAY_PLAN_CONFIG_PATH environment variable (if set)
2. ~/.config/pay-plan/ (XDG_CONFIG_HOME fallback)

Profile resolution:
1. settings.json "profile" key (if set via CLI)
2. profile.yaml in same config directory
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .household.joint import JOINT_OWNER, JointAccountPolicy
from .schemas import IncomePeriod, PerformanceRecord, Person

logger = logging.getLogger(__name__)

APP_NAME = "pay-plan"
CONFIG_PATH_ENV = "PAY_PLAN_CONFIG_PATH"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"
MAX_PERSONS = 2


class ConfigNotFoundError(Exception):
    """Raised when required configuration is missing or unusable."""
    pass


class ProfileNotFoundError(Exception):
    """Raised when no profile is found."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAY_PLAN_CONFIG_PATH environment variable
    2. ~/.config/pay-plan/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def get_tax_year() -> Optional[int]:
    """Plan year from settings.json, or None when not set.

    Raises:
        ConfigNotFoundError: If the stored value is not a year
    """
    value = get_setting("tax_year")
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigNotFoundError(
            f"Invalid tax_year in {get_settings_path()}: {value!r}\n\n"
            f"Fix with: pay-plan settings tax-year 2025"
        )


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    custom_profile = load_settings().get("profile")
    if custom_profile:
        profile_path = Path(custom_profile)
        if require_exists and not profile_path.exists():
            raise ProfileNotFoundError(
                f"Profile not found at configured path: {profile_path}\n\n"
                f"Update with: pay-plan settings profile /path/to/profile.yaml"
            )
        return profile_path

    profile_path = get_config_dir() / PROFILE_FILENAME
    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found. Checked:\n"
            f"  1. settings.json 'profile' key (not set)\n"
            f"  2. {profile_path} (not found)\n\n"
            f"Set {CONFIG_PATH_ENV} or create {PROFILE_FILENAME} with a 'persons:' list"
        )

    return profile_path


def load_profile(require_exists: bool = True) -> dict:
    """Load the household profile from profile.yaml.

    Args:
        require_exists: If True, raises ProfileNotFoundError if not found

    Returns:
        Profile dictionary (empty dict if not required and not found)

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
        ConfigNotFoundError: If the file is not valid YAML
    """
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    try:
        with open(profile_path, "r") as f:
            profile = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigNotFoundError(f"Invalid YAML in {profile_path}: {e}")

    if not isinstance(profile, dict):
        raise ConfigNotFoundError(f"Profile must be a YAML dictionary: {profile_path}")
    return profile


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Save the household profile to profile.yaml.

    Returns:
        Path to the saved profile file
    """
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


def get_profile_value(key: str, default: Any = None) -> Any:
    """Get a profile value by dot-notation key (e.g. "policy.ira_always_joint")."""
    value = load_profile(require_exists=False)

    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default

    return value


# =============================================================================
# Profile validation
# =============================================================================


def format_validation_errors(prefix: str, error: ValidationError) -> list:
    messages = []
    for detail in error.errors():
        loc = ".".join(str(p) for p in detail["loc"])
        path = f"{prefix}.{loc}" if loc else prefix
        messages.append(f"{path}: {detail['msg']}")
    return messages


class ProfileValidationResult:
    """Result of profile validation with feature readiness status."""

    def __init__(
        self,
        location_path: Path,
        features: dict,
        profile: dict,
        errors: list = None,
        warnings: list = None,
    ):
        """
        Args:
            location_path: Path to the profile file
            features: Dict of feature_name -> dict with keys:
                      ready (bool), missing (list), message (str)
            profile: The loaded profile dict
            errors: List of validation errors (invalid values)
            warnings: List of validation warnings (suspicious but allowed)
        """
        self.location_path = location_path
        self.features = features
        self.profile = profile
        self.errors = errors or []
        self.warnings = warnings or []

    @property
    def all_ready(self) -> bool:
        """True if all features are ready."""
        return all(f["ready"] for f in self.features.values())

    def is_ready(self, feature: str) -> bool:
        """Check if a specific feature is ready."""
        return self.features.get(feature, {}).get("ready", False)

    def require_feature(self, feature: str) -> None:
        """Raise exception if profile has errors or feature is not ready.

        Raises:
            ConfigNotFoundError: If profile has errors or feature is not ready
        """
        if self.errors:
            error_str = "\n  ! ".join(self.errors)
            raise ConfigNotFoundError(
                f"Profile has validation errors:\n\n"
                f"  ! {error_str}\n\n"
                f"Profile: {self.location_path}\n"
                f"Check with: pay-plan profile validate"
            )

        if feature not in self.features:
            raise ConfigNotFoundError(f"Unknown feature: {feature}")

        status = self.features[feature]
        if not status["ready"]:
            missing_str = "\n  - ".join(status["missing"])
            raise ConfigNotFoundError(
                f"Profile not configured for '{feature}'.\n\n"
                f"Missing:\n  - {missing_str}\n\n"
                f"Profile: {self.location_path}\n"
                f"View with: pay-plan profile show"
            )


def validate_profile(profile: Optional[dict] = None) -> ProfileValidationResult:
    """Validate the profile and check feature readiness.

    Args:
        profile: Optional profile dict (loads from file if not provided)

    Raises:
        ProfileNotFoundError: If no profile exists and none was provided
    """
    location_path = get_profile_path(require_exists=profile is None)
    if profile is None:
        profile = load_profile(require_exists=True)

    errors = []
    warnings = []

    unknown = set(profile) - {"persons", "performance", "policy"}
    for key in sorted(unknown):
        warnings.append(f"Unknown top-level key '{key}' is ignored")

    persons = _validate_persons(profile.get("persons"), errors, warnings)
    _validate_performance(profile.get("performance"), persons, errors, warnings)

    policy = profile.get("policy")
    if policy is not None:
        try:
            JointAccountPolicy.model_validate(policy)
        except ValidationError as e:
            errors.extend(format_validation_errors("policy", e))

    features = {
        "takehome": _takehome_status(persons),
        "contributions": _contributions_status(persons, profile.get("performance")),
    }

    return ProfileValidationResult(
        location_path=location_path,
        features=features,
        profile=profile,
        errors=errors,
        warnings=warnings,
    )


def _validate_persons(raw, errors: list, warnings: list) -> list:
    """Validate persons; returns the ones that parsed."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        errors.append("persons: must be a list")
        return []
    if len(raw) > MAX_PERSONS:
        errors.append(f"persons: at most {MAX_PERSONS} household members are supported (found {len(raw)})")

    persons = []
    for i, entry in enumerate(raw):
        try:
            persons.append(Person.model_validate(entry))
        except ValidationError as e:
            errors.extend(format_validation_errors(f"persons[{i}]", e))

    names = [p.name for p in persons]
    for name in sorted({n for n in names if names.count(n) > 1}):
        errors.append(f"persons: duplicate name '{name}'")
    if any(n.strip().lower() == JOINT_OWNER.lower() for n in names):
        errors.append(f"persons: '{JOINT_OWNER}' is reserved for joint accounts")

    for person in persons:
        if person.retirement.total_percent > 100:
            errors.append(f"persons.{person.name}: 401(k) elections exceed 100%")
        if person.birthday is None:
            warnings.append(f"persons.{person.name}: no birthday; HSA catch-up will not apply")
        warnings.extend(_income_period_warnings(person))

    return persons


def _income_period_warnings(person: Person) -> list:
    """Income periods that will be skipped by proration."""
    messages = []
    for j, entry in enumerate(person.income_periods):
        if isinstance(entry, IncomePeriod):
            continue
        try:
            IncomePeriod.model_validate(entry)
        except ValidationError as e:
            for message in format_validation_errors(f"persons.{person.name}.income_periods[{j}]", e):
                messages.append(f"{message} (period skipped)")
    return messages


def _validate_performance(raw, persons: list, errors: list, warnings: list) -> None:
    if raw is None:
        return
    if not isinstance(raw, list):
        errors.append("performance: must be a list")
        return

    owners = {p.name.lower() for p in persons} | {JOINT_OWNER.lower()}
    for i, entry in enumerate(raw):
        try:
            record = PerformanceRecord.model_validate(entry)
        except ValidationError as e:
            errors.extend(format_validation_errors(f"performance[{i}]", e))
            continue
        if persons and record.owner.strip().lower() not in owners:
            warnings.append(
                f"performance[{i}]: owner '{record.owner}' is not a household member"
            )


def _takehome_status(persons: list) -> dict:
    paid = [p for p in persons if p.salary > 0]
    if not paid:
        return {
            "ready": False,
            "missing": ["persons[].salary (at least one person with a salary)"],
            "message": "Take-home pay requires a person with a salary",
        }
    return {
        "ready": True,
        "missing": [],
        "message": f"Ready ({', '.join(p.name for p in paid)})",
    }


def _contributions_status(persons: list, performance) -> dict:
    if not persons:
        return {
            "ready": False,
            "missing": ["persons (household members)"],
            "message": "Contribution tracking requires household members",
        }
    count = len(performance) if isinstance(performance, list) else 0
    return {
        "ready": True,
        "missing": [],
        "message": f"Ready ({count} performance record(s))",
    }
