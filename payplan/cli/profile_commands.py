"""Profile CLI commands for Pay Plan.

Manages the household profile (profile.yaml) - persons, performance
records, joint account policy.
"""

from pathlib import Path

import click
import yaml

from payplan.sdk import (
    ConfigNotFoundError,
    ProfileNotFoundError,
    get_profile_path,
    validate_profile,
)


def _load_profile_file(path: Path) -> dict:
    """Load a profile file for validation.

    Raises:
        click.ClickException: If the file is missing or not a YAML dictionary
    """
    if not path.exists():
        raise click.ClickException(f"Profile file not found: {path}")

    try:
        with open(path, "r") as f:
            profile_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {path}: {e}")

    if not isinstance(profile_data, dict):
        raise click.ClickException(f"Profile must be a YAML dictionary, got {type(profile_data).__name__}")

    return profile_data


def _display_validation(validation, show_contents=True):
    """Display validation results consistently across commands.

    Returns:
        True if valid (no errors), False if has errors
    """
    if validation.errors:
        click.echo()
        click.echo("Validation Errors (profile is invalid):")
        for error in validation.errors:
            click.echo(f"  ! {error}")
        click.echo()
        click.echo(f"Profile path: {validation.location_path}")

    click.echo()
    click.echo("Feature Readiness:")
    for feature, status in validation.features.items():
        icon = "+" if status["ready"] else "-"
        click.echo(f"  {icon} {feature}: {status['message']}")

    all_missing = []
    for status in validation.features.values():
        all_missing.extend(status["missing"])

    if all_missing:
        click.echo()
        click.echo("Missing configuration:")
        for item in sorted(set(all_missing)):
            click.echo(f"  - {item}")

    if validation.warnings:
        click.echo()
        click.echo("Warnings:")
        for warning in validation.warnings:
            click.echo(f"  - {warning}")

    if show_contents:
        click.echo()
        click.echo("---")
        click.echo(yaml.dump(validation.profile, default_flow_style=False, sort_keys=False))

    return not validation.errors


@click.group()
def profile():
    """Manage the household profile (profile.yaml)."""
    pass


@profile.command("path")
def profile_path():
    """Print the active profile path."""
    click.echo(get_profile_path())


@profile.command("show")
def profile_show():
    """Show profile status, readiness and contents."""
    try:
        validation = validate_profile()
    except (ProfileNotFoundError, ConfigNotFoundError) as e:
        raise click.ClickException(str(e))

    click.echo(f"Profile: {validation.location_path}")
    _display_validation(validation, show_contents=True)


@profile.command("validate")
@click.argument("path", required=False, type=click.Path())
def profile_validate(path):
    """Validate the active profile, or the profile file at PATH.

    Exits with an error if the profile has validation errors.
    """
    try:
        if path:
            file_path = Path(path)
            validation = validate_profile(profile=_load_profile_file(file_path))
            validation.location_path = file_path
        else:
            validation = validate_profile()
    except (ProfileNotFoundError, ConfigNotFoundError) as e:
        raise click.ClickException(str(e))

    click.echo(f"Profile: {validation.location_path}")
    if not _display_validation(validation, show_contents=False):
        raise click.ClickException("Profile has validation errors. Fix them before continuing.")
    click.echo()
    click.echo("Profile is valid.")
