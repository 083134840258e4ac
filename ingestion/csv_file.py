import csv
import io
from typing import List

from ingestion.columns import DecodeError, rows_from_table
from logger import get_logger
from models.import_row import ImportRow

logger = get_logger("ingestion")


def decode(data: bytes) -> List[ImportRow]:
    """
    Decode a CSV category file.

    Expected format:
    - Header row (line 1): CategoryName,SubCategoryName plus optional
      CategoryDescription, CategoryDisplayOrder, SubCategoryDescription,
      SubCategoryDisplayOrder columns in any order
    - Data rows (line 2+): one subcategory per row

    Raises:
        DecodeError: If the bytes are not UTF-8 text, the CSV is malformed,
            or the header is missing required columns
    """
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DecodeError(f"CSV file is not valid UTF-8 text: {e}") from e

    try:
        table = list(csv.reader(io.StringIO(text, newline="")))
    except csv.Error as e:
        raise DecodeError(f"CSV processing error: {e}") from e

    rows = rows_from_table(table)
    logger.info(f"Decoded {len(rows)} rows from CSV")
    return rows
