from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable, Iterator, Mapping, Optional, Tuple


class Category(Enum):
    HOUSING = "housing"
    TRANSPORTATION = "transportation"
    FOOD = "food"
    UTILITIES = "utilities"
    INSURANCE = "insurance"
    HEALTHCARE = "healthcare"
    ENTERTAINMENT = "entertainment"
    PERSONAL = "personal"
    EDUCATION = "education"
    DEBT = "debt"
    SAVINGS = "savings"
    GIFTS = "gifts"
    OTHER = "other"


class CategoryAmounts(Mapping[Category, Decimal]):
    """Sparse, immutable category -> amount mapping.

    A missing key means "no limit set" for budgets and "no spend" for totals;
    use ``amount()`` to read it as zero.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Optional[Mapping[Category, Decimal] | Iterable[Tuple[Category, Decimal]]] = None):
        pairs = items.items() if isinstance(items, Mapping) else (items or ())
        self._items: dict[Category, Decimal] = {Category(k): Decimal(v) for k, v in pairs}

    def __getitem__(self, key: Category) -> Decimal:
        return self._items[key]

    def __iter__(self) -> Iterator[Category]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __hash__(self) -> int:
        return hash(frozenset(self._items.items()))

    def __eq__(self, other) -> bool:
        if isinstance(other, Mapping):
            return dict(self.items()) == dict(other.items())
        return NotImplemented

    def __repr__(self) -> str:
        inner = ", ".join(f"{k.value}: {v}" for k, v in self._items.items())
        return f"CategoryAmounts({{{inner}}})"

    def amount(self, category: Category) -> Decimal:
        return self._items.get(category, Decimal(0))

    def total(self) -> Decimal:
        return sum(self._items.values(), Decimal(0))


@dataclass(frozen=True)
class Expense:
    id: str
    amount: Decimal      # always > 0
    description: str
    category: Category
    date: date
    created_at: datetime
    owner_id: str

    @property
    def month(self) -> str:
        return self.date.strftime("%Y-%m")


# One budget per (owner, month)
@dataclass(frozen=True)
class Budget:
    id: str
    month: str  # "YYYY-MM"
    total_limit: Decimal
    owner_id: str
    category_limits: CategoryAmounts = field(default_factory=CategoryAmounts)


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal  # never above target_amount
    start_date: date
    target_date: date
    owner_id: str
    category: Optional[str] = None


@dataclass(frozen=True)
class MonthlyTotal:
    month: str
    total: Decimal
    per_category: CategoryAmounts = field(default_factory=CategoryAmounts)
