"""Header handling shared by the CSV and Excel decoders."""

import re
from typing import Any, Dict, List, Optional, Sequence

from models.import_row import ImportRow


class DecodeError(ValueError):
    """Raised when a file cannot be turned into import rows at all."""


# ImportRow field -> accepted header spellings (already normalized)
COLUMN_ALIASES = {
    "category_name": ("categoryname", "category"),
    "subcategory_name": ("subcategoryname", "subcategory"),
    "category_description": ("categorydescription",),
    "category_display_order": ("categorydisplayorder", "categoryorder"),
    "subcategory_description": ("subcategorydescription", "description"),
    "subcategory_display_order": (
        "subcategorydisplayorder",
        "subcategoryorder",
        "displayorder",
    ),
}

REQUIRED_COLUMNS = ("category_name", "subcategory_name")

_SEPARATORS = re.compile(r"[\s_\-]+")


def normalize_header(value: Any) -> str:
    """Lowercase a header cell and drop spaces, underscores and hyphens."""
    if value is None:
        return ""
    return _SEPARATORS.sub("", str(value)).lower()


def map_columns(headers: Sequence[Any]) -> Dict[str, int]:
    """Map ImportRow fields to column positions.

    Args:
        headers: Raw header row.

    Returns:
        Dict of field name to column index.

    Raises:
        DecodeError: If a required column is missing.
    """
    normalized = [normalize_header(h) for h in headers]
    column_map = {}

    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in normalized:
                column_map[field_name] = normalized.index(alias)
                break

    missing = [name for name in REQUIRED_COLUMNS if name not in column_map]
    if missing:
        raise DecodeError(
            f"Missing required column(s): {', '.join(missing)}. "
            f"Found headers: {[h for h in headers if h not in (None, '')]}"
        )

    return column_map


def is_blank(values: Sequence[Any]) -> bool:
    """True if every cell in a row is empty."""
    return all(v is None or str(v).strip() == "" for v in values)


def build_row(
    row_number: int, values: Sequence[Any], column_map: Dict[str, int]
) -> ImportRow:
    """Build an ImportRow from the cells of one data row."""

    def cell(field_name: str) -> Optional[Any]:
        index = column_map.get(field_name)
        if index is None or index >= len(values):
            return None
        return values[index]

    return ImportRow(
        row_number=row_number,
        category_name=cell("category_name"),
        subcategory_name=cell("subcategory_name"),
        category_description=cell("category_description"),
        category_display_order=cell("category_display_order"),
        subcategory_description=cell("subcategory_description"),
        subcategory_display_order=cell("subcategory_display_order"),
    )


def rows_from_table(table: List[Sequence[Any]]) -> List[ImportRow]:
    """Turn a header-first table of cells into ImportRows.

    Wholly blank rows are skipped but still count towards row numbers, so
    errors point at the line a user sees in their spreadsheet.

    Raises:
        DecodeError: If the table has no header row.
    """
    if not table or is_blank(table[0]):
        raise DecodeError("File is empty or missing headers")

    column_map = map_columns(table[0])

    rows = []
    for row_number, values in enumerate(table[1:], start=2):
        if is_blank(values):
            continue
        rows.append(build_row(row_number, values, column_map))

    return rows
