import re
from datetime import date, datetime
from typing import Iterable, Tuple, Union

from dateutil.relativedelta import relativedelta

from ledger.domain import Expense

_MONTH_KEY = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def is_month_key(value: str) -> bool:
    return isinstance(value, str) and bool(_MONTH_KEY.match(value))


def month_key(d: Union[date, datetime]) -> str:
    return d.strftime("%Y-%m")


def current_month(now: Union[date, datetime]) -> str:
    return month_key(now)


def month_start(key: str) -> date:
    if not is_month_key(key):
        raise ValueError(f"Invalid month key: {key!r}")
    year, month = key.split("-")
    return date(int(year), int(month), 1)


def shift_month(key: str, offset: int) -> str:
    """Move a month key by ``offset`` calendar months (negative goes back).

    shift_month("2024-03", -4) == "2023-11"
    """
    return month_key(month_start(key) + relativedelta(months=offset))


def available_months(expenses: Iterable[Expense], now: Union[date, datetime]) -> Tuple[str, ...]:
    months = {current_month(now)}
    months.update(e.month for e in expenses)
    return tuple(sorted(months, reverse=True))
