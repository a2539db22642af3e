from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Callable, Generic, Mapping, Optional, TypeVar

from ledger.domain import Budget, Category, CategoryAmounts, Expense, SavingsGoal
from ledger.months import is_month_key

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):
    """Outcome of an operation that may be rejected.

    ``Right`` carries the result, ``Left`` carries an error dict with at least
    ``error`` (a stable code) and ``message`` (text fit for display).
    """

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def fold(self, on_left: Callable[[E], U], on_right: Callable[[T], U]) -> U:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    def get_or_else(self, default: T) -> T:
        return self.fold(lambda _: default, lambda value: value)


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def fold(self, on_left, on_right):
        return on_right(self._value)

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def fold(self, on_left, on_right):
        return on_left(self._error)

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_category(raw: str) -> Maybe[Category]:
    try:
        return Some(Category(raw))
    except ValueError:
        return Nothing()


def validate_expense(e: Expense) -> Either[dict, Expense]:
    if e.amount <= 0:
        return Left({
            "error": "invalid_amount",
            "message": "Please enter a valid amount",
            "expense_id": e.id,
            "amount": e.amount,
        })
    return Right(e)


def validate_budget(b: Budget) -> Either[dict, Budget]:
    if not is_month_key(b.month):
        return Left({
            "error": "invalid_month",
            "message": f"Month must look like YYYY-MM, got {b.month!r}",
            "month": b.month,
        })
    if b.total_limit < 0:
        return Left({
            "error": "invalid_amount",
            "message": "Total budget cannot be negative",
            "amount": b.total_limit,
        })
    negative = [cat.value for cat, limit in b.category_limits.items() if limit < 0]
    if negative:
        return Left({
            "error": "invalid_category_limit",
            "message": f"Category limits cannot be negative: {', '.join(negative)}",
            "categories": negative,
        })
    return Right(b)


def validate_savings_goal(g: SavingsGoal) -> Either[dict, SavingsGoal]:
    if g.target_amount <= 0:
        return Left({
            "error": "invalid_amount",
            "message": "Target amount must be greater than zero",
            "amount": g.target_amount,
        })
    if g.current_amount < 0:
        return Left({
            "error": "invalid_amount",
            "message": "Current amount cannot be negative",
            "amount": g.current_amount,
        })
    if g.current_amount > g.target_amount:
        return Left({
            "error": "exceeds_target",
            "message": "Current amount cannot exceed the target amount",
            "current": g.current_amount,
            "target": g.target_amount,
        })
    if g.target_date < g.start_date:
        return Left({
            "error": "invalid_dates",
            "message": "Target date cannot be before the start date",
            "start_date": g.start_date,
            "target_date": g.target_date,
        })
    return Right(g)


def to_decimal(raw) -> Either[dict, Decimal]:
    try:
        value = Decimal(str(raw).strip())
    except (ArithmeticError, ValueError):
        value = None
    if value is None or not value.is_finite():
        return Left({
            "error": "invalid_amount",
            "message": "Please enter a valid amount",
            "amount": raw,
        })
    return Right(value)


def parse_category_limits(raw: Mapping[Category, Optional[str]]) -> Either[dict, CategoryAmounts]:
    """Read per-category limit inputs; a blank entry means no limit for that category."""
    limits = {}
    for category, text in raw.items():
        if not (text or "").strip():
            continue
        parsed = to_decimal(text)
        if parsed.is_left():
            return Left({
                "error": "invalid_category_limit",
                "message": f"Limit for {category.value} is not a valid amount",
                "categories": [category.value],
            })
        limits[category] = parsed.get_or_else(Decimal(0))
    return Right(CategoryAmounts(limits))
