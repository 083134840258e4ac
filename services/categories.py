"""Category service for database operations."""

from typing import Dict, List, Optional
from models.category import Category

_CATEGORY_SELECT_FIELDS = "id, name, description, display_order"


class CategoryService:
    """Service for managing menu categories."""

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Category]:
        """Get all categories from the database.

        Returns:
            List of Category objects, ordered by display order then name.
            Categories without a display order come last.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CATEGORY_SELECT_FIELDS} FROM categories
                ORDER BY display_order IS NULL, display_order, name
                """
            )
            rows = cursor.fetchall()

            return [self._row_to_category(row) for row in rows]

    def find(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID.

        Args:
            category_id: The category ID to find.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories WHERE id = ?",
                (category_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def find_by_name(self, name: str) -> Optional[Category]:
        """Get a single category by name, ignoring case.

        Args:
            name: The category name to find.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CATEGORY_SELECT_FIELDS} FROM categories
                WHERE name = ? COLLATE NOCASE
                """,
                (name.strip(),),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def name_to_id_map(self) -> Dict[str, int]:
        """Get every category name mapped to its ID."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute("SELECT name, id FROM categories")
            return {row[0]: row[1] for row in cursor.fetchall()}

    def create(
        self,
        name: str,
        description: Optional[str] = None,
        display_order: Optional[int] = None,
    ) -> Category:
        """Create a new category.

        Args:
            name: Category name (unique, case-insensitive).
            description: Optional description of the category.
            display_order: Optional position of the category on the menu.

        Returns:
            The created Category object with id populated.

        Raises:
            sqlite3.IntegrityError: If a category with the same name exists.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO categories (name, description, display_order) VALUES (?, ?, ?)",
                (name, description, display_order),
            )
            conn.commit()
            category_id = cursor.lastrowid

            return Category(
                id=category_id,
                name=name,
                description=description,
                display_order=display_order,
            )

    def update(
        self,
        category_id: int,
        name: str,
        description: Optional[str] = None,
        display_order: Optional[int] = None,
    ) -> Category:
        """Update an existing category.

        Args:
            category_id: The category ID to update.
            name: New category name.
            description: New description (can be None).
            display_order: New display order (can be None).

        Returns:
            The updated Category object.

        Raises:
            ValueError: If category not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "UPDATE categories SET name = ?, description = ?, display_order = ? WHERE id = ?",
                (name, description, display_order, category_id),
            )
            conn.commit()

            if cursor.rowcount == 0:
                raise ValueError(f"Category with ID {category_id} not found")

            return Category(
                id=category_id,
                name=name,
                description=description,
                display_order=display_order,
            )

    def delete(self, category_id: int) -> bool:
        """Delete a category and, through the foreign key, its subcategories.

        Args:
            category_id: The category ID to delete.

        Returns:
            True if category was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
            return cursor.rowcount > 0

    def _row_to_category(self, row: tuple) -> Category:
        return Category(
            id=row[0], name=row[1], description=row[2], display_order=row[3]
        )
