"""Models describing the outcome of one import run."""

import string
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Same folding as SQLite NOCASE: only ASCII letters are case-insensitive
_ASCII_FOLD = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def fold_name(name: str) -> str:
    """Matching key for a category or subcategory name."""
    return name.translate(_ASCII_FOLD)


@dataclass
class RowError:
    """A row rejected during reconciliation."""

    row_number: int
    reason: str

    def __str__(self) -> str:
        return f"Row {self.row_number}: {self.reason}"


@dataclass
class WorkingCategory:
    """Working-set entry for one category name.

    Attributes:
        key: Name folded with fold_name, used for matching.
        name: Casing of the first occurrence in the file.
        description: Description from the first occurrence.
        display_order: Display order from the first occurrence.
        category_id: Persisted ID, known up front for matched categories and
            filled in by resolution for new ones.
        matched: True when the category already existed.
    """

    key: str
    name: str
    description: Optional[str] = None
    display_order: Optional[int] = None
    category_id: Optional[int] = None
    matched: bool = False


@dataclass
class WorkingSubCategory:
    """Working-set entry for one new (category, subcategory) pair."""

    category_key: str
    name: str
    description: Optional[str] = None
    display_order: Optional[int] = None
    category_id: Optional[int] = None
    subcategory_id: Optional[int] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.category_key, fold_name(self.name))


@dataclass
class ImportResult:
    """Summary of a reconciled import.

    The counts satisfy:
    - categories_created + categories_matched == distinct category names
      among valid rows
    - subcategories_created + subcategories_duplicate == valid rows
    """

    categories_created: int = 0
    categories_matched: int = 0
    subcategories_created: int = 0
    subcategories_duplicate: int = 0
    errors: List[RowError] = field(default_factory=list)
    categories: List[WorkingCategory] = field(default_factory=list)
    subcategories: List[WorkingSubCategory] = field(default_factory=list)
    resolved: bool = False

    @property
    def valid_rows(self) -> int:
        """Number of rows that passed validation."""
        return self.subcategories_created + self.subcategories_duplicate

    @property
    def success(self) -> bool:
        """True if at least one row made it through validation."""
        return self.valid_rows > 0

    @property
    def message(self) -> str:
        """Human readable one-line summary."""
        if not self.success:
            return "No data was imported. Please check your file format."
        return (
            f"Imported {self.categories_created} new categories "
            f"({self.categories_matched} existing) and "
            f"{self.subcategories_created} new subcategories "
            f"({self.subcategories_duplicate} duplicates skipped)"
        )

    def to_dict(self) -> dict:
        """Convert result to a dictionary for display or JSON output."""
        return {
            "success": self.success,
            "message": self.message,
            "categories_created": self.categories_created,
            "categories_matched": self.categories_matched,
            "subcategories_created": self.subcategories_created,
            "subcategories_duplicate": self.subcategories_duplicate,
            "errors": [str(error) for error in self.errors],
        }
