"""Pay Plan CLI - Take-home pay and contribution room estimates."""

import logging
import os

import click

from payplan import __version__

from .plan_commands import bonus, contributions, income, limits, paychecks, takehome
from .profile_commands import profile as profile_group
from .settings_commands import settings as settings_group

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)


@click.group()
@click.version_option(version=__version__, prog_name="pay-plan")
def cli():
    """Pay Plan - Household take-home pay and contribution tools.

    Estimates net pay per paycheck from salary, W-4 and benefit elections,
    and tracks 401(k)/IRA/HSA/ESPP/brokerage contributions against annual
    limits.

    Configuration is loaded from (in order):

    \b
    1. PAY_PLAN_CONFIG_PATH environment variable
    2. settings.json 'profile' key (if set via CLI)
    3. ~/.config/pay-plan/profile.yaml (XDG default)

    Run 'pay-plan profile show' to see profile status and readiness.
    """
    pass


cli.add_command(profile_group)
cli.add_command(settings_group)
cli.add_command(takehome)
cli.add_command(limits)
cli.add_command(income)
cli.add_command(contributions)
cli.add_command(bonus)
cli.add_command(paychecks)


def main():
    cli()


if __name__ == "__main__":
    main()
