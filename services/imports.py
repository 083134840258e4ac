"""Import service: runs a category file through decode, reconcile and resolve."""

import gzip
from datetime import datetime
from pathlib import Path
from typing import Optional

from ingestion import DecodeError, detect_format, get_decoder
from logger import get_logger
from models.import_result import ImportResult
from reconciliation import reconcile, resolve
from services.catalog import CatalogStorage

logger = get_logger("imports")


class ImportRejectedError(ValueError):
    """Raised when a file is refused before it is decoded."""


class ImportService:
    """Service for importing category files.

    Args:
        config: Application configuration (upload limits, archiving).
        categories: CategoryService instance.
        subcategories: SubCategoryService instance.
        data_imports: DataImportService instance.
    """

    def __init__(self, config, categories, subcategories, data_imports):
        self.config = config
        self.categories = categories
        self.subcategories = subcategories
        self.data_imports = data_imports
        self.storage = CatalogStorage(categories, subcategories)

    def check_upload(self, path: Path) -> str:
        """Check a file against the upload rules.

        Args:
            path: File to import.

        Returns:
            The decoder format for the file.

        Raises:
            ImportRejectedError: If the file is missing, empty, too large or
                has an extension outside the allow-list.
        """
        if not path.exists():
            raise ImportRejectedError(f"File not found: {path}")

        try:
            file_format = detect_format(path.name)
        except DecodeError as e:
            raise ImportRejectedError(str(e)) from e

        size = path.stat().st_size
        if size == 0:
            raise ImportRejectedError("No file uploaded: file is empty")
        if size > self.config.max_upload_bytes:
            raise ImportRejectedError(
                f"File is too large ({size} bytes). "
                f"Maximum upload size is {self.config.max_upload_bytes} bytes"
            )

        return file_format

    def import_file(
        self, path: Path, uploaded_by: str = "Unknown", dry_run: bool = False
    ) -> ImportResult:
        """Import categories and subcategories from a CSV or Excel file.

        Args:
            path: File to import.
            uploaded_by: Who ran the import, kept in the import history.
            dry_run: If True, reconcile only and write nothing.

        Returns:
            ImportResult with counts and row-level errors.

        Raises:
            ImportRejectedError: If the file fails the upload checks.
            DecodeError: If the file cannot be decoded.
            sqlite3.Error: If storage fails while resolving.
        """
        path = Path(path)
        file_format = self.check_upload(path)
        logger.info(f"Importing {path.name} as {file_format} (uploaded by {uploaded_by})")

        return self.import_bytes(
            path.read_bytes(), path.name, file_format, uploaded_by, dry_run=dry_run
        )

    def import_bytes(
        self,
        data: bytes,
        filename: str,
        file_format: str,
        uploaded_by: str = "Unknown",
        dry_run: bool = False,
    ) -> ImportResult:
        """Import already-read file contents.

        Args:
            data: Raw file bytes.
            filename: Original file name, used for archiving.
            file_format: Decoder name ("csv" or "excel").
            uploaded_by: Who ran the import.
            dry_run: If True, reconcile only and write nothing.

        Returns:
            ImportResult with counts and row-level errors.
        """
        decoder = get_decoder(file_format)
        rows = decoder.decode(data)

        result = reconcile(
            rows,
            self.categories.name_to_id_map(),
            self.subcategories.existing_keys(),
        )

        for error in result.errors:
            logger.warning(str(error))

        if dry_run:
            logger.info("Dry run - nothing written")
            return result

        resolve(result, self.storage)

        archive_filename = self._archive(data, filename)
        data_import = self.data_imports.create(
            archive_filename, file_format, uploaded_by, result
        )
        logger.info(f"Created data import record (ID: {data_import.id})")

        return result

    def _archive(self, data: bytes, filename: str) -> Optional[str]:
        """Gzip a copy of the imported file into the archive directory.

        Returns:
            The archive file name, or None if archiving is disabled.
        """
        if not self.config.archive_enabled:
            return None

        self.config.archive_dir.mkdir(parents=True, exist_ok=True)

        # {timestamp}_{original_filename}.gz
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        archive_filename = f"{timestamp}_{Path(filename).name}.gz"
        archive_path = self.config.archive_dir / archive_filename

        with gzip.open(archive_path, "wb") as f_out:
            f_out.write(data)

        logger.info(f"Archived upload to: {archive_path}")
        return archive_filename
