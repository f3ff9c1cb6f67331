"""Annual bonus estimate.

The expected bonus is salary x multiplier% x target% unless an override
amount is set (an override of 0 is honoured). 401(k) elections can
optionally be taken out of the bonus; taxes use the effective rate from the
take-home calculation.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from .schemas import BonusOptions, RetirementOptions


class BonusEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    gross: float
    after_401k: float
    after_tax: float
    after_tax_and_401k: float
    effective_tax_rate: float

    @property
    def final_amount(self) -> float:
        """Amount recorded as expected bonus income (after 401(k) if elected)."""
        return self.after_401k


def calculated_bonus(salary: float, options: BonusOptions) -> float:
    """Bonus from the multiplier and target percentages."""
    return salary * options.multiplier_percent * options.target_percent / 10000


def estimate_bonus(
    salary: float,
    options: BonusOptions,
    retirement: Optional[RetirementOptions] = None,
    effective_tax_rate: float = 0,
) -> BonusEstimate:
    """Estimate the bonus before and after 401(k) and taxes.

    Args:
        salary: Annual salary
        options: Bonus settings
        retirement: 401(k) elections, used when remove_401k_from_bonus is set
        effective_tax_rate: Percent of gross withheld (from take-home results)
    """
    if options.no_bonus_expected:
        return BonusEstimate(
            gross=0, after_401k=0, after_tax=0, after_tax_and_401k=0,
            effective_tax_rate=effective_tax_rate,
        )

    if options.override_amount is not None:
        gross = options.override_amount
    else:
        gross = calculated_bonus(salary, options)

    after_401k = gross
    if options.remove_401k_from_bonus and retirement is not None:
        after_401k = gross - gross * retirement.total_percent / 100

    tax_fraction = effective_tax_rate / 100
    return BonusEstimate(
        gross=gross,
        after_401k=after_401k,
        after_tax=gross - gross * tax_fraction,
        after_tax_and_401k=after_401k - after_401k * tax_fraction,
        effective_tax_rate=effective_tax_rate,
    )
