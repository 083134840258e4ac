from pathlib import Path

import ingestion.csv_file as csv_file
import ingestion.excel as excel
from ingestion.columns import DecodeError

_DECODERS = {
    "csv": csv_file,
    "excel": excel,
}

# Extension -> decoder name, also the upload allow-list
_EXTENSIONS = {
    ".csv": "csv",
    ".xlsx": "excel",
    ".xls": "excel",
}


def get_decoder(file_format: str):
    """Get a decoder module by format name."""
    if file_format not in _DECODERS:
        raise ValueError(f"Unknown file format: {file_format}")
    return _DECODERS[file_format]


def get_available_formats():
    """Get list of available decoder formats."""
    return list(_DECODERS.keys())


def get_allowed_extensions():
    """Get the file extensions accepted for import."""
    return list(_EXTENSIONS.keys())


def detect_format(filename: str) -> str:
    """Work out the decoder for a file from its extension.

    Raises:
        DecodeError: If the extension is not on the allow-list.
    """
    suffix = Path(filename).suffix.lower()
    if suffix not in _EXTENSIONS:
        raise DecodeError(
            "Invalid file format. Only .xlsx, .xls, and .csv files are supported"
        )
    return _EXTENSIONS[suffix]


__all__ = [
    "DecodeError",
    "detect_format",
    "get_allowed_extensions",
    "get_available_formats",
    "get_decoder",
]
