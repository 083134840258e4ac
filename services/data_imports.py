"""DataImport service for database operations."""

from typing import List, Optional
from datetime import datetime
from models.data_import import DataImport
from models.import_result import ImportResult

_DATA_IMPORT_SELECT_FIELDS = """id, filename, file_format, uploaded_by, categories_created,
       categories_matched, subcategories_created, subcategories_duplicate, error_count,
       created_at"""


class DataImportService:
    """Service for managing data import records."""

    def __init__(self, db_manager):
        """Initialize the data import service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(
        self,
        filename: Optional[str],
        file_format: str,
        uploaded_by: str,
        result: ImportResult,
    ) -> DataImport:
        """Record a completed import run.

        Args:
            filename: Name of the archived file (None if archiving disabled).
            file_format: Decoder used for the file.
            uploaded_by: Who ran the import.
            result: The resolved import result.

        Returns:
            The created DataImport object with id and created_at populated.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO data_imports (
                    filename, file_format, uploaded_by, categories_created,
                    categories_matched, subcategories_created,
                    subcategories_duplicate, error_count
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    filename,
                    file_format,
                    uploaded_by,
                    result.categories_created,
                    result.categories_matched,
                    result.subcategories_created,
                    result.subcategories_duplicate,
                    len(result.errors),
                ),
            )
            conn.commit()
            import_id = cursor.lastrowid

            # Fetch the created record to get the created_at timestamp
            cursor = conn.execute(
                f"SELECT {_DATA_IMPORT_SELECT_FIELDS} FROM data_imports WHERE id = ?",
                (import_id,),
            )
            row = cursor.fetchone()

            return self._row_to_data_import(row)

    def find(self, data_import_id: int) -> Optional[DataImport]:
        """Get a single data import by ID.

        Args:
            data_import_id: The data import ID to find.

        Returns:
            DataImport object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_DATA_IMPORT_SELECT_FIELDS} FROM data_imports WHERE id = ?",
                (data_import_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_data_import(row)
            return None

    def find_all(self) -> List[DataImport]:
        """Get all data imports, newest first."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_DATA_IMPORT_SELECT_FIELDS}
                FROM data_imports
                ORDER BY created_at DESC, id DESC
                """
            )
            rows = cursor.fetchall()

            return [self._row_to_data_import(row) for row in rows]

    def _row_to_data_import(self, row: tuple) -> DataImport:
        """Convert a database row to a DataImport object.

        Args:
            row: Database row tuple.

        Returns:
            DataImport object.
        """
        return DataImport(
            id=row[0],
            filename=row[1],
            file_format=row[2],
            uploaded_by=row[3],
            categories_created=row[4],
            categories_matched=row[5],
            subcategories_created=row[6],
            subcategories_duplicate=row[7],
            error_count=row[8],
            created_at=datetime.fromisoformat(row[9]),
        )
