"""SubCategory service for database operations."""

from typing import List, Optional, Set, Tuple
from models.subcategory import SubCategory

_SUBCATEGORY_SELECT_FIELDS = "id, category_id, name, description, display_order"


class SubCategoryService:
    """Service for managing subcategories."""

    def __init__(self, db_manager):
        """Initialize the subcategory service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[SubCategory]:
        """Get all subcategories, grouped by category."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_SUBCATEGORY_SELECT_FIELDS} FROM subcategories
                ORDER BY category_id, display_order IS NULL, display_order, name
                """
            )
            return [self._row_to_subcategory(row) for row in cursor.fetchall()]

    def find(self, subcategory_id: int) -> Optional[SubCategory]:
        """Get a single subcategory by ID.

        Args:
            subcategory_id: The subcategory ID to find.

        Returns:
            SubCategory object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_SUBCATEGORY_SELECT_FIELDS} FROM subcategories WHERE id = ?",
                (subcategory_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_subcategory(row)
            return None

    def find_by_category(self, category_id: int) -> List[SubCategory]:
        """Get the subcategories of one category.

        Args:
            category_id: The owning category ID.

        Returns:
            List of SubCategory objects ordered by display order then name.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_SUBCATEGORY_SELECT_FIELDS} FROM subcategories
                WHERE category_id = ?
                ORDER BY display_order IS NULL, display_order, name
                """,
                (category_id,),
            )
            return [self._row_to_subcategory(row) for row in cursor.fetchall()]

    def find_by_name(self, category_id: int, name: str) -> Optional[SubCategory]:
        """Get a subcategory by its natural key, ignoring case."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_SUBCATEGORY_SELECT_FIELDS} FROM subcategories
                WHERE category_id = ? AND name = ? COLLATE NOCASE
                """,
                (category_id, name.strip()),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_subcategory(row)
            return None

    def existing_keys(self) -> Set[Tuple[str, str]]:
        """Get the (category name, subcategory name) pair of every subcategory.

        Used by imports to recognise subcategories created by earlier runs.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                SELECT c.name, s.name
                FROM subcategories s
                JOIN categories c ON c.id = s.category_id
                """
            )
            return {(row[0], row[1]) for row in cursor.fetchall()}

    def create(
        self,
        category_id: int,
        name: str,
        description: Optional[str] = None,
        display_order: Optional[int] = None,
    ) -> SubCategory:
        """Create a new subcategory.

        Args:
            category_id: ID of the owning category.
            name: Subcategory name (unique within the category).
            description: Optional description.
            display_order: Optional position within the category.

        Returns:
            The created SubCategory object with id populated.

        Raises:
            sqlite3.IntegrityError: If the category does not exist or already
                has a subcategory with this name.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO subcategories (category_id, name, description, display_order)
                VALUES (?, ?, ?, ?)
                """,
                (category_id, name, description, display_order),
            )
            conn.commit()

            return SubCategory(
                id=cursor.lastrowid,
                category_id=category_id,
                name=name,
                description=description,
                display_order=display_order,
            )

    def delete(self, subcategory_id: int) -> bool:
        """Delete a subcategory by ID.

        Returns:
            True if subcategory was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM subcategories WHERE id = ?", (subcategory_id,)
            )
            conn.commit()
            return cursor.rowcount > 0

    def _row_to_subcategory(self, row: tuple) -> SubCategory:
        """Convert a database row to a SubCategory object."""
        return SubCategory(
            id=row[0],
            category_id=row[1],
            name=row[2],
            description=row[3],
            display_order=row[4],
        )
