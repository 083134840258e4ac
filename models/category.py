"""Category model for the menu catalog."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Category:
    """Represents a top-level menu category.

    Attributes:
        id: Unique identifier (auto-generated).
        name: Category name (unique, case-insensitive).
        description: Optional description shown alongside the category.
        display_order: Optional position of the category on the menu.
    """

    id: int
    name: str
    description: Optional[str] = None
    display_order: Optional[int] = None
