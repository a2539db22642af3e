from typing import Dict, Tuple

from ledger.domain import Category
from ledger.functional import safe_category

_LABELS: Dict[Category, str] = {
    Category.HOUSING: "Housing",
    Category.TRANSPORTATION: "Transportation",
    Category.FOOD: "Food & Dining",
    Category.UTILITIES: "Utilities",
    Category.INSURANCE: "Insurance",
    Category.HEALTHCARE: "Healthcare",
    Category.ENTERTAINMENT: "Entertainment",
    Category.PERSONAL: "Personal",
    Category.EDUCATION: "Education",
    Category.DEBT: "Debt Payments",
    Category.SAVINGS: "Savings",
    Category.GIFTS: "Gifts & Donations",
    Category.OTHER: "Other",
}

_COLORS: Dict[Category, str] = {
    Category.HOUSING: "#0D9488",
    Category.TRANSPORTATION: "#8B5CF6",
    Category.FOOD: "#22c55e",
    Category.UTILITIES: "#f59e0b",
    Category.INSURANCE: "#3b82f6",
    Category.HEALTHCARE: "#ef4444",
    Category.ENTERTAINMENT: "#ec4899",
    Category.PERSONAL: "#8b5cf6",
    Category.EDUCATION: "#14b8a6",
    Category.DEBT: "#f43f5e",
    Category.SAVINGS: "#06b6d4",
    Category.GIFTS: "#a855f7",
    Category.OTHER: "#6b7280",
}


def categories() -> Tuple[Category, ...]:
    return tuple(Category)


def category_label(category: Category) -> str:
    return _LABELS[category]


def category_color(category: Category) -> str:
    return _COLORS[category]


def label_for(raw: str) -> str:
    """Display label for a raw identifier, or the identifier itself if unknown."""
    return safe_category(raw).map(category_label).get_or_else(raw)
