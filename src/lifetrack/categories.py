"""Activity categories.

Defines the closed Category tag type and its display table.
"""

from dataclasses import dataclass
from enum import Enum


class UnknownCategoryError(ValueError):
    """Raised when a value does not name a known category."""

    def __init__(self, value: object) -> None:
        """Initialize error.

        Args:
            value: The offending category value.
        """
        super().__init__(f"Unknown category: {value!r}")
        self.value = value


class Category(Enum):
    """Fixed categories for tracked time."""

    WORK = "work"
    STUDY = "study"
    EXERCISE = "exercise"
    PERSONAL = "personal"
    CREATIVE = "creative"

    @classmethod
    def parse(cls, value: "Category | str") -> "Category":
        """Convert a member or its string value into a Category.

        Args:
            value: Category member or value such as "work" (case-insensitive)

        Returns:
            The matching Category

        Raises:
            UnknownCategoryError: If the value names no category
        """
        if isinstance(value, Category):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnknownCategoryError(value)


@dataclass(frozen=True)
class CategoryInfo:
    """Display attributes for a category."""

    category: Category
    label: str
    symbol: str
    chart_color: str


CATEGORY_INFO: dict[Category, CategoryInfo] = {
    info.category: info
    for info in (
        CategoryInfo(Category.WORK, "Work", "⚜️", "#9d4edd"),
        CategoryInfo(Category.STUDY, "Study", "📜", "#00f5ff"),
        CategoryInfo(Category.EXERCISE, "Exercise", "⚡", "#ff006e"),
        CategoryInfo(Category.PERSONAL, "Personal", "🌙", "#7209b7"),
        CategoryInfo(Category.CREATIVE, "Creative", "✨", "#39ff14"),
    )
}


def _validate_table() -> None:
    missing = [c.value for c in Category if c not in CATEGORY_INFO]
    if missing:
        raise RuntimeError(f"Category table missing entries: {', '.join(missing)}")


_validate_table()


def category_info(category: Category | str) -> CategoryInfo:
    """Look up display attributes for a category.

    Raises:
        UnknownCategoryError: If the category is not known
    """
    return CATEGORY_INFO[Category.parse(category)]


__all__ = [
    "CATEGORY_INFO",
    "Category",
    "CategoryInfo",
    "UnknownCategoryError",
    "category_info",
]
