"""Bi-weekly pay dates and three-paycheck months.

Bi-weekly payroll pays every other Friday. "Even" weeks start on the first
Friday of January, "odd" weeks one week later. Months with a third paycheck
are extra income for a budget built on two paychecks a month.
"""

import calendar
from collections import Counter
from datetime import date, timedelta
from typing import List, Tuple, Union

from pydantic import BaseModel, ConfigDict

from .schemas import PayWeek

FRIDAY = 4
PAY_INTERVAL = timedelta(days=14)


class ExtraPaycheckMonth(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int
    name: str
    paychecks: int


class ExtraPaycheckIncome(BaseModel):
    """Extra net income from three-paycheck months in a year."""

    model_config = ConfigDict(frozen=True)

    year: int
    pay_week: PayWeek
    months: Tuple[ExtraPaycheckMonth, ...]
    net_paycheck: float

    @property
    def extra_paychecks(self) -> int:
        return len(self.months)

    @property
    def total(self) -> float:
        return self.extra_paychecks * self.net_paycheck


def first_payday(year: int, pay_week: Union[PayWeek, str] = PayWeek.EVEN) -> date:
    """First bi-weekly payday of the year."""
    jan1 = date(year, 1, 1)
    first_friday = jan1 + timedelta(days=(FRIDAY - jan1.weekday()) % 7)
    if PayWeek(pay_week) == PayWeek.ODD:
        return first_friday + timedelta(days=7)
    return first_friday


def bi_weekly_paydays(year: int, pay_week: Union[PayWeek, str] = PayWeek.EVEN) -> List[date]:
    """All bi-weekly paydays falling in the year."""
    paydays = []
    payday = first_payday(year, pay_week)
    while payday.year == year:
        paydays.append(payday)
        payday += PAY_INTERVAL
    return paydays


def extra_paycheck_months(
    year: int,
    pay_week: Union[PayWeek, str] = PayWeek.EVEN,
) -> List[ExtraPaycheckMonth]:
    """Months of the year with three bi-weekly paydays."""
    per_month = Counter(d.month for d in bi_weekly_paydays(year, pay_week))
    return [
        ExtraPaycheckMonth(month=m, name=calendar.month_name[m], paychecks=count)
        for m, count in sorted(per_month.items())
        if count == 3
    ]


def extra_paycheck_income(
    net_paycheck: float,
    year: int,
    pay_week: Union[PayWeek, str] = PayWeek.EVEN,
) -> ExtraPaycheckIncome:
    """Net income from the third paycheck in three-paycheck months."""
    return ExtraPaycheckIncome(
        year=year,
        pay_week=PayWeek(pay_week),
        months=tuple(extra_paycheck_months(year, pay_week)),
        net_paycheck=net_paycheck,
    )
