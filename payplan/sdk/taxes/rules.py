"""Tax rules loading.

Rules live in tax-rules/{year}.yaml beside this module and are validated by
the TaxRules schema. Requesting a year with no rules file falls back to the
most recent earlier year, so a new plan year keeps working until its tables
are published.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Union

import yaml
from pydantic import ValidationError

from .schemas import TaxRules

logger = logging.getLogger(__name__)

DEFAULT_TAX_YEAR = 2025


class TaxRulesError(ValueError):
    """Raised when tax rules are missing or malformed (configuration error)."""
    pass


def get_tax_rules_dir() -> Path:
    """Get the tax-rules directory path."""
    return Path(__file__).parent / "tax-rules"


def get_available_years() -> List[int]:
    """Get sorted list of available tax rule years (descending)."""
    years = [int(p.stem) for p in get_tax_rules_dir().glob("*.yaml") if p.stem.isdigit()]
    return sorted(years, reverse=True)


def resolve_rules_year(year: Union[int, str]) -> int:
    """Pick the rules year to use for a requested plan year.

    Returns the requested year when its file exists, otherwise the latest
    earlier year.

    Raises:
        TaxRulesError: If the year is not numeric or no earlier rules exist
    """
    try:
        target = int(year)
    except (TypeError, ValueError):
        raise TaxRulesError(f"Invalid tax year: {year!r}")

    available = get_available_years()
    if target in available:
        return target

    candidates = [y for y in available if y <= target]
    if not candidates:
        raise TaxRulesError(
            f"No tax rules for {target} or any earlier year in {get_tax_rules_dir()}"
        )
    logger.warning(f"No tax rules for {target}, using {candidates[0]} rules")
    return candidates[0]


def load_tax_rules(year: Union[int, str] = DEFAULT_TAX_YEAR) -> TaxRules:
    """Load validated tax rules for a plan year.

    Args:
        year: Plan year (int or 4-digit string)

    Returns:
        Frozen TaxRules (cached per resolved year)

    Raises:
        TaxRulesError: If no rules file applies or the file fails validation
    """
    return _load_rules_for_year(resolve_rules_year(year))


@lru_cache(maxsize=None)
def _load_rules_for_year(year: int) -> TaxRules:
    return load_tax_rules_file(get_tax_rules_dir() / f"{year}.yaml")


def load_tax_rules_file(path: Path) -> TaxRules:
    """Load and validate a tax rules YAML file.

    Raises:
        TaxRulesError: If the file is missing, not YAML, or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise TaxRulesError(f"Tax rules file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise TaxRulesError(f"Invalid YAML in {path}: {e}")

    if not isinstance(data, dict):
        raise TaxRulesError(f"Tax rules must be a YAML dictionary: {path}")

    try:
        rules = TaxRules.model_validate(data)
    except ValidationError as e:
        raise TaxRulesError(f"Invalid tax rules in {path}:\n{e}")

    logger.debug(f"loaded tax rules for {rules.year} from {path.name}")
    return rules
