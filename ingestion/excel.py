import io
import zipfile
from typing import Any, List

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ingestion.columns import DecodeError, rows_from_table
from logger import get_logger
from models.import_row import ImportRow

logger = get_logger("ingestion")


def _cell_value(value: Any) -> Any:
    """Normalize a cell read by openpyxl.

    Excel stores every number as a float, so 3 comes back as 3.0; whole
    numbers are turned back into ints so display orders survive.
    """
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def decode(data: bytes) -> List[ImportRow]:
    """
    Decode an Excel category workbook.

    Only the first worksheet is read. The layout matches the CSV format:
    a header row followed by one subcategory per row.

    Raises:
        DecodeError: If the workbook cannot be opened or has no usable header
    """
    try:
        workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise DecodeError(f"File processing error: {e}") from e

    try:
        worksheet = workbook.worksheets[0]
        table = [
            [_cell_value(v) for v in row]
            for row in worksheet.iter_rows(values_only=True)
        ]
    finally:
        workbook.close()

    rows = rows_from_table(table)
    logger.info(f"Decoded {len(rows)} rows from worksheet '{worksheet.title}'")
    return rows
