"""Household profile repository.

ProfileStore is the read/write boundary between profile.yaml and the
calculation code. Calculations take plain models; only the store touches the
file.
"""

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from .config import (
    ConfigNotFoundError,
    ProfileNotFoundError,
    format_validation_errors,
    get_profile_path,
    load_profile,
    save_profile,
)
from .household.joint import JointAccountPolicy
from .schemas import PerformanceRecord, Person

logger = logging.getLogger(__name__)


class ProfileStore:
    """Persons, performance records and policy stored in profile.yaml.

    Args:
        path: Profile file (default: resolved from settings/config dir)
    """

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path:
        return self._path or get_profile_path(require_exists=False)

    def load(self) -> dict:
        """Raw profile dict.

        Raises:
            ProfileNotFoundError: If the profile file does not exist
        """
        if self._path is None:
            return load_profile(require_exists=True)

        if not self._path.exists():
            raise ProfileNotFoundError(f"Profile not found: {self._path}")
        with open(self._path, "r") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigNotFoundError(f"Invalid YAML in {self._path}: {e}")
        if not isinstance(data, dict):
            raise ConfigNotFoundError(f"Profile must be a YAML dictionary: {self._path}")
        return data

    def _save(self, profile: dict) -> Path:
        return save_profile(profile, self.path)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def persons(self) -> List[Person]:
        """All household members.

        Raises:
            ConfigNotFoundError: If any person fails validation
        """
        raw = self.load().get("persons") or []
        persons = []
        errors = []
        for i, entry in enumerate(raw):
            try:
                persons.append(Person.model_validate(entry))
            except ValidationError as e:
                errors.extend(format_validation_errors(f"persons[{i}]", e))
        if errors:
            raise ConfigNotFoundError(
                "Invalid persons in profile:\n  ! " + "\n  ! ".join(errors)
            )
        return persons

    def person(self, name: str) -> Person:
        """One household member by name (case-insensitive).

        Raises:
            ConfigNotFoundError: If no person has that name
        """
        for person in self.persons():
            if person.name.lower() == name.strip().lower():
                return person
        raise ConfigNotFoundError(f"No person named '{name}' in {self.path}")

    def performance_records(self, year: Optional[int] = None) -> List[PerformanceRecord]:
        """Performance records, optionally for one year.

        Raises:
            ConfigNotFoundError: If any record fails validation
        """
        raw = self.load().get("performance") or []
        records = []
        for i, entry in enumerate(raw):
            try:
                record = PerformanceRecord.model_validate(entry)
            except ValidationError as e:
                raise ConfigNotFoundError(
                    "Invalid performance record:\n  ! " + "\n  ! ".join(format_validation_errors(f"performance[{i}]", e))
                )
            if year is None or record.year == year:
                records.append(record)
        logger.debug(f"loaded {len(records)} performance record(s) from {self.path}")
        return records

    def policy(self) -> JointAccountPolicy:
        """Joint account policy (defaults when not configured)."""
        raw = self.load().get("policy") or {}
        try:
            return JointAccountPolicy.model_validate(raw)
        except ValidationError as e:
            raise ConfigNotFoundError(
                "Invalid policy:\n  ! " + "\n  ! ".join(format_validation_errors("policy", e))
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def save_person(self, person: Person) -> Path:
        """Insert or replace a person (matched by name)."""
        try:
            profile = self.load()
        except ProfileNotFoundError:
            profile = {}

        data = person.model_dump(mode="json", exclude_defaults=True)
        data["name"] = person.name
        persons = profile.get("persons") or []
        for i, entry in enumerate(persons):
            if isinstance(entry, dict) and str(entry.get("name", "")).lower() == person.name.lower():
                persons[i] = data
                break
        else:
            persons.append(data)
        profile["persons"] = persons
        return self._save(profile)

    def add_performance_record(self, record: PerformanceRecord) -> Path:
        """Append a performance record."""
        try:
            profile = self.load()
        except ProfileNotFoundError:
            profile = {}

        records = profile.get("performance") or []
        records.append(record.model_dump(mode="json"))
        profile["performance"] = records
        return self._save(profile)
