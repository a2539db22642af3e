from datetime import date, datetime
from functools import lru_cache
from typing import Iterable, Tuple, Union

from ledger.aggregation import monthly_summary
from ledger.domain import Expense, MonthlyTotal
from ledger.months import current_month, shift_month

SUMMARY_MONTHS = 6


@lru_cache(maxsize=64)
def _summaries(expenses: Tuple[Expense, ...], end_month: str, months: int) -> Tuple[MonthlyTotal, ...]:
    newest_first = [monthly_summary(expenses, shift_month(end_month, -offset)) for offset in range(months)]
    return tuple(reversed(newest_first))


def rolling_summary(
    expenses: Iterable[Expense],
    now: Union[date, datetime],
    months: int = SUMMARY_MONTHS,
) -> Tuple[MonthlyTotal, ...]:
    """Monthly totals for the month of ``now`` and the ``months - 1`` before it.

    Entries are oldest first and months without expenses are present with a
    zero total. The result is rebuilt from the whole collection each time;
    identical inputs hit the cache.
    """
    return _summaries(tuple(expenses), current_month(now), months)
