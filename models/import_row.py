"""Transient row model produced by the file decoders."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ImportRow:
    """One decoded record of an import file.

    Values are kept exactly as the decoder read them; trimming, required
    field checks and display order parsing happen during reconciliation.

    Attributes:
        row_number: 1-based line in the source file (the header is row 1).
        category_name: Name of the owning category.
        subcategory_name: Name of the subcategory.
        category_description: Optional category description.
        category_display_order: Optional category display order.
        subcategory_description: Optional subcategory description.
        subcategory_display_order: Optional subcategory display order.
    """

    row_number: int
    category_name: Optional[str]
    subcategory_name: Optional[str]
    category_description: Optional[str] = None
    category_display_order: Any = None
    subcategory_description: Optional[str] = None
    subcategory_display_order: Any = None
