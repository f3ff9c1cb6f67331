"""Settings CLI commands for Pay Plan.

Manages settings.json - profile location and plan year.
"""

from pathlib import Path

import click

from payplan.sdk import (
    ConfigNotFoundError,
    DEFAULT_TAX_YEAR,
    get_profile_path,
    get_settings_path,
    get_tax_year,
    load_settings,
    save_settings,
    set_setting,
)
from payplan.sdk.taxes import get_available_years


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - profile: path to profile.yaml
    - tax_year: plan year for tax rules and limits
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective values:")
    click.echo(f"  profile: {get_profile_path()}")
    try:
        year = get_tax_year()
    except ConfigNotFoundError as e:
        raise click.ClickException(str(e))
    click.echo(f"  tax_year: {year if year else 'current year'}")
    years = ", ".join(str(y) for y in get_available_years())
    click.echo(f"  tax rules available: {years}")


@settings.command("tax-year")
@click.argument("year", required=False, type=int)
@click.option("--clear", is_flag=True, help="Clear tax_year, revert to the current year")
def settings_tax_year(year, clear):
    """Set or clear the plan year used for tax rules.

    \b
    Examples:
        pay-plan settings tax-year 2025
        pay-plan settings tax-year --clear
    """
    if clear:
        current = load_settings()
        if "tax_year" in current:
            del current["tax_year"]
            save_settings(current)
            click.echo("Cleared tax_year setting.")
        else:
            click.echo("tax_year was not set.")
        return

    if year is None:
        try:
            current_year = get_tax_year()
        except ConfigNotFoundError as e:
            raise click.ClickException(str(e))
        if current_year:
            click.echo(f"Current tax_year: {current_year}")
        else:
            click.echo("No tax_year set. Using the current year.")
        return

    available = get_available_years()
    if year < min(available, default=DEFAULT_TAX_YEAR):
        raise click.ClickException(
            f"No tax rules for {year}. Available: {', '.join(str(y) for y in available)}"
        )
    if year not in available:
        click.echo(f"Note: no {year} rules yet; the latest earlier year will be used.")

    path = set_setting("tax_year", year)
    click.echo(f"Set tax_year: {year}")
    click.echo(f"Saved to: {path}")


@settings.command("profile")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom profile path, use the config directory")
def settings_profile(path, clear):
    """Set or clear a custom profile.yaml location.

    \b
    Examples:
        pay-plan settings profile ~/household/profile.yaml
        pay-plan settings profile --clear
    """
    if clear:
        current = load_settings()
        if "profile" in current:
            del current["profile"]
            save_settings(current)
            click.echo("Cleared profile setting.")
        click.echo(f"Profile is now: {get_profile_path()}")
        return

    if not path:
        click.echo(f"Profile: {get_profile_path()}")
        return

    profile_path = Path(path).expanduser().resolve()
    if profile_path.suffix not in (".yaml", ".yml"):
        raise click.ClickException(f"Profile must be a YAML file: {profile_path}")
    if not profile_path.exists():
        click.echo(f"Note: {profile_path} does not exist yet.")

    saved = set_setting("profile", str(profile_path))
    click.echo(f"Set profile: {profile_path}")
    click.echo(f"Saved to: {saved}")
