"""
File Upload Utility - Read student spreadsheets into row dicts.

Supported formats:
- Excel (.xlsx) using pandas + openpyxl
- Legacy Excel (.xls) using pandas + xlrd
- CSV (.csv)

The first sheet is read; its header row becomes the dict keys. Cells are
passed through untouched (numbers stay numbers, date cells stay dates) -
all cleanup happens in the import service.
"""

import io
import logging
from typing import Any, Dict, List, Tuple

import pandas as pd
from fastapi import UploadFile

from app.core.config import get_settings
from app.core.exceptions import SpreadsheetError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'.xlsx', '.xls', '.csv'}


def max_file_size_bytes() -> int:
    return get_settings().max_upload_size_mb * 1024 * 1024


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_rows_from_upload(file: UploadFile) -> Tuple[List[Dict[str, Any]], str]:
    """
    Read an uploaded spreadsheet.

    Args:
        file: FastAPI UploadFile

    Returns:
        Tuple of (rows, filename)

    Raises:
        SpreadsheetError on validation/decoding errors
    """
    if not file.filename:
        raise SpreadsheetError("No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise SpreadsheetError(f"Unsupported file type '{ext}'. Allowed: XLSX, XLS, CSV")

    content = await file.read()

    if len(content) > max_file_size_bytes():
        raise SpreadsheetError(
            f"File too large. Maximum size: {get_settings().max_upload_size_mb}MB"
        )

    rows = read_rows(content, ext)
    logger.info("Read %d rows from %s", len(rows), file.filename)
    return rows, file.filename


def read_rows(content: bytes, ext: str) -> List[Dict[str, Any]]:
    """Decode spreadsheet bytes into one dict per data row."""
    if not content:
        raise SpreadsheetError("File is empty")

    try:
        if ext == '.csv':
            df = read_csv(content)
        else:
            df = pd.read_excel(io.BytesIO(content), sheet_name=0)
    except SpreadsheetError:
        raise
    except Exception as e:
        raise SpreadsheetError(f"Error reading spreadsheet: {str(e)}")

    df = df.dropna(how='all')
    df.columns = [str(c).strip() for c in df.columns]
    # NaN cells become None so downstream blank checks stay simple
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient='records')


def read_csv(content: bytes) -> pd.DataFrame:
    """Read CSV bytes, trying the encodings spreadsheets usually export."""
    for encoding in ['utf-8-sig', 'cp1252', 'latin-1']:
        try:
            return pd.read_csv(io.BytesIO(content), encoding=encoding)
        except UnicodeDecodeError:
            continue
    raise SpreadsheetError("Could not decode CSV file")


def get_supported_formats() -> dict:
    """Get info about supported spreadsheet formats."""
    return {
        "supported_formats": [
            {"extension": ".xlsx", "name": "Excel Workbook"},
            {"extension": ".xls", "name": "Excel 97-2003 Workbook"},
            {"extension": ".csv", "name": "Comma Separated Values"}
        ],
        "max_size_mb": get_settings().max_upload_size_mb
    }
