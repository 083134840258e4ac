"""SubCategory model for the menu catalog."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SubCategory:
    """Represents a subcategory owned by exactly one category.

    Attributes:
        id: Unique identifier (auto-generated).
        category_id: ID of the owning category.
        name: Subcategory name (unique within its category, case-insensitive).
        description: Optional description.
        display_order: Optional position within the parent category.
    """

    id: int
    category_id: int
    name: str
    description: Optional[str] = None
    display_order: Optional[int] = None
