"""DataImport model representing one category import run."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class DataImport:
    """Represents a completed import run.

    Attributes:
        id: Unique identifier (auto-generated).
        filename: Name of the archived file (None if archiving disabled).
        file_format: Decoder used, "csv" or "excel".
        uploaded_by: Who ran the import.
        categories_created: Categories created by the run.
        categories_matched: Categories that already existed.
        subcategories_created: Subcategories created by the run.
        subcategories_duplicate: Subcategory rows skipped as duplicates.
        error_count: Number of rejected rows.
        created_at: Timestamp when the import was recorded.
    """

    id: int
    filename: Optional[str]
    file_format: str
    uploaded_by: str
    categories_created: int
    categories_matched: int
    subcategories_created: int
    subcategories_duplicate: int
    error_count: int
    created_at: datetime
