"""Helper utilities for tests."""

import csv
import io
from typing import List, Optional, Sequence

from openpyxl import Workbook

from models.import_result import fold_name
from models.import_row import ImportRow

HEADER = ["CategoryName", "SubCategoryName"]

# 11 rows over 4 categories, every subcategory distinct
MENU_PAIRS = [
    ("Beverages", "Coffee"),
    ("Beverages", "Tea"),
    ("Beverages", "Juice"),
    ("Food", "Pastries"),
    ("Food", "Sandwiches"),
    ("Food", "Salads"),
    ("Desserts", "Cakes"),
    ("Desserts", "Ice Cream"),
    ("Desserts", "Cookies"),
    ("Snacks", "Chips"),
    ("Snacks", "Nuts"),
]


def make_rows(pairs: Sequence[tuple], first_row: int = 2) -> List[ImportRow]:
    """Build ImportRows from (category, subcategory) pairs, numbered like a file."""
    return [
        ImportRow(row_number=i, category_name=category, subcategory_name=sub)
        for i, (category, sub) in enumerate(pairs, start=first_row)
    ]


def make_csv_bytes(
    rows: Sequence[Sequence], header: Optional[Sequence[str]] = HEADER
) -> bytes:
    """Write rows (with an optional header) as CSV bytes."""
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer)
    if header is not None:
        writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def make_xlsx_bytes(
    rows: Sequence[Sequence],
    header: Optional[Sequence[str]] = HEADER,
    title: str = "Categories",
) -> bytes:
    """Write rows (with an optional header) to an in-memory .xlsx workbook."""
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = title
    if header is not None:
        worksheet.append(list(header))
    for row in rows:
        worksheet.append(list(row))

    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


class RecordingStorage:
    """In-memory storage collaborator that records every call."""

    def __init__(self, existing=None):
        self.categories = dict(existing or {})
        self.subcategories = {}
        self.calls = []
        self._next_id = 1000

    def _new_id(self):
        self._next_id += 1
        return self._next_id

    def find_category_by_name(self, name):
        self.calls.append(("find_category_by_name", name))
        for existing_name, category_id in self.categories.items():
            if fold_name(existing_name) == fold_name(name):
                return category_id
        return None

    def create_category(self, name, description, display_order):
        self.calls.append(("create_category", name, description, display_order))
        category_id = self._new_id()
        self.categories[name] = category_id
        return category_id

    def create_subcategory(self, category_id, name, description, display_order):
        self.calls.append(
            ("create_subcategory", category_id, name, description, display_order)
        )
        subcategory_id = self._new_id()
        self.subcategories[(category_id, name)] = subcategory_id
        return subcategory_id
