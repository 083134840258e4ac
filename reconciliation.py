"""Reconciliation of imported category rows against the persisted catalog.

Reconciling runs in two phases:

1. ``reconcile`` walks the decoded rows, validates them and builds an
   in-memory working set of categories and subcategories keyed by name.
   It performs no I/O; existing categories (and optionally existing
   subcategories) are handed in by the caller.
2. ``resolve`` takes that working set and turns it into persisted records
   through a storage collaborator: new categories are created, matched ones
   reuse their ID, and every subcategory's parent reference is rewritten to
   the resolved category ID before it is created.

Row-level problems never abort a run; they are collected as RowError entries
on the ImportResult. Only an empty input (a decode-level failure) or a
storage failure during resolution is fatal.
"""

from typing import (
    Any,
    Collection,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

from ingestion import DecodeError
from logger import get_logger
from models.import_result import (
    ImportResult,
    RowError,
    WorkingCategory,
    WorkingSubCategory,
    fold_name,
)
from models.import_row import ImportRow

logger = get_logger("reconciliation")

MAX_NAME_LENGTH = 100

# SQLite INTEGER is a signed 64-bit value
MIN_DISPLAY_ORDER = -(2**63)
MAX_DISPLAY_ORDER = 2**63 - 1


class CatalogStorage(Protocol):
    """Storage operations needed to resolve a working set."""

    def find_category_by_name(self, name: str) -> Optional[int]: ...

    def create_category(
        self, name: str, description: Optional[str], display_order: Optional[int]
    ) -> int: ...

    def create_subcategory(
        self,
        category_id: int,
        name: str,
        description: Optional[str],
        display_order: Optional[int],
    ) -> int: ...


def _clean(value: Any) -> Optional[str]:
    """Trim a raw cell to a string, mapping blanks to None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_order(value: Any, field_name: str) -> int:
    """Parse a display order cell.

    Raises:
        ValueError: If the value is not a whole number that fits in a
            SQLite INTEGER.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid display order: {field_name}")
    if isinstance(value, int):
        order = value
    elif isinstance(value, float) and value.is_integer():
        order = int(value)
    else:
        try:
            order = int(str(value).strip())
        except ValueError:
            raise ValueError(f"invalid display order: {field_name}") from None

    if not MIN_DISPLAY_ORDER <= order <= MAX_DISPLAY_ORDER:
        raise ValueError(f"invalid display order: {field_name}")
    return order


def _validate_row(row: ImportRow) -> Tuple[str, str, Dict[str, Any]]:
    """Validate one row and return its cleaned values.

    Returns:
        Tuple of (category name, subcategory name, optional attributes).

    Raises:
        ValueError: With the row-level reason if the row is rejected.
    """
    category_name = _clean(row.category_name)
    subcategory_name = _clean(row.subcategory_name)

    if category_name is None:
        raise ValueError("missing required field: category_name")
    if subcategory_name is None:
        raise ValueError("missing required field: subcategory_name")
    if len(category_name) > MAX_NAME_LENGTH:
        raise ValueError("name too long: category_name")
    if len(subcategory_name) > MAX_NAME_LENGTH:
        raise ValueError("name too long: subcategory_name")
    if fold_name(subcategory_name) == fold_name(category_name):
        raise ValueError("subcategory name matches category name")

    attributes = {
        "category_description": _clean(row.category_description),
        "subcategory_description": _clean(row.subcategory_description),
        "category_display_order": None,
        "subcategory_display_order": None,
    }
    for field_name in ("category_display_order", "subcategory_display_order"):
        raw = _clean(getattr(row, field_name))
        if raw is not None:
            attributes[field_name] = _parse_order(getattr(row, field_name), field_name)

    return category_name, subcategory_name, attributes


def reconcile(
    rows: Sequence[ImportRow],
    existing_categories: Mapping[str, int],
    existing_subcategories: Optional[Collection[Tuple[str, str]]] = None,
) -> ImportResult:
    """Validate rows and build the working set for an import.

    Names match the way the database's NOCASE indexes do: ASCII letters
    ignore case, other characters must match exactly, so "Café" and "CAFÉ"
    are different categories. The first occurrence of a category in the
    file decides the display casing, description and display order, and later
    rows only add subcategories. A subcategory seen earlier in the run, or
    already present in ``existing_subcategories``, is counted as a duplicate
    and skipped without touching the first occurrence.

    Args:
        rows: Decoded rows in file order.
        existing_categories: Persisted category name -> category ID.
        existing_subcategories: Optional persisted (category name,
            subcategory name) pairs, compared case-insensitively.

    Returns:
        ImportResult with counts, row errors and the working set.

    Raises:
        DecodeError: If there are no rows at all.
    """
    if not rows:
        raise DecodeError("File is empty")

    existing_ids = {fold_name(name): cid for name, cid in existing_categories.items()}
    known_subcategories = {
        (fold_name(category), fold_name(name))
        for category, name in (existing_subcategories or ())
    }

    result = ImportResult()
    working: Dict[str, WorkingCategory] = {}
    seen_subcategories = set()

    for row in rows:
        try:
            category_name, subcategory_name, attributes = _validate_row(row)
        except ValueError as e:
            result.errors.append(RowError(row.row_number, str(e)))
            logger.debug(f"Row {row.row_number} rejected: {e}")
            continue

        key = fold_name(category_name)
        category = working.get(key)
        if category is None:
            category = WorkingCategory(
                key=key,
                name=category_name,
                description=attributes["category_description"],
                display_order=attributes["category_display_order"],
                category_id=existing_ids.get(key),
                matched=key in existing_ids,
            )
            working[key] = category
            result.categories.append(category)

        subcategory_key = (key, fold_name(subcategory_name))
        if subcategory_key in seen_subcategories or subcategory_key in known_subcategories:
            result.subcategories_duplicate += 1
            logger.debug(
                f"Row {row.row_number}: duplicate subcategory "
                f"'{category.name}/{subcategory_name}' skipped"
            )
            continue

        seen_subcategories.add(subcategory_key)
        result.subcategories.append(
            WorkingSubCategory(
                category_key=key,
                name=subcategory_name,
                description=attributes["subcategory_description"],
                display_order=attributes["subcategory_display_order"],
                category_id=category.category_id,
            )
        )
        result.subcategories_created += 1

    result.categories_matched = sum(1 for c in result.categories if c.matched)
    result.categories_created = len(result.categories) - result.categories_matched

    logger.info(
        f"Reconciled {len(rows)} rows: "
        f"{result.categories_created} new / {result.categories_matched} existing categories, "
        f"{result.subcategories_created} new / {result.subcategories_duplicate} duplicate subcategories, "
        f"{len(result.errors)} rejected"
    )
    return result


def resolve(result: ImportResult, storage: CatalogStorage) -> ImportResult:
    """Persist a reconciled working set.

    Every category gets a persisted ID (created if new, reused if matched),
    then each subcategory's parent reference is rewritten to that ID and the
    subcategory is created. A category that appeared in storage after
    ``reconcile`` ran is reused and counted as matched.

    Args:
        result: Output of ``reconcile``.
        storage: Storage collaborator.

    Returns:
        The same ImportResult with IDs filled in.

    Raises:
        ValueError: If the result was already resolved.
        Exception: Storage errors propagate unchanged; the final state is
            then unknown and the import may be re-run.
    """
    if result.resolved:
        raise ValueError("Import result has already been resolved")

    ids_by_key = {}
    for category in result.categories:
        if category.category_id is None:
            found_id = storage.find_category_by_name(category.name)
            if found_id is not None:
                logger.info(f"Category '{category.name}' already exists (ID: {found_id})")
                category.category_id = found_id
                category.matched = True
                result.categories_created -= 1
                result.categories_matched += 1
            else:
                category.category_id = storage.create_category(
                    category.name, category.description, category.display_order
                )
                logger.debug(f"Created category '{category.name}' (ID: {category.category_id})")
        ids_by_key[category.key] = category.category_id

    for subcategory in result.subcategories:
        subcategory.category_id = ids_by_key[subcategory.category_key]
        subcategory.subcategory_id = storage.create_subcategory(
            subcategory.category_id,
            subcategory.name,
            subcategory.description,
            subcategory.display_order,
        )

    result.resolved = True
    logger.info(
        f"Resolved {len(result.categories)} categories and "
        f"{len(result.subcategories)} subcategories"
    )
    return result
