"""Spreadsheet file I/O: uploaded workbooks to raw rows, export rows to .xlsx bytes."""

from __future__ import annotations

import csv
import io
import zipfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from tindahan.domain.errors import SpreadsheetFormatError
from tindahan.runtime.logging import get_logger

logger = get_logger(__name__)

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
CSV_SUFFIXES = {".csv"}
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
# Workbooks often carry notes or pivot sheets; prefer the one that looks like inventory.
PREFERRED_SHEET_HINT = "inv"


def _frame_to_rows(df: pd.DataFrame) -> list[list[Any]]:
    """DataFrame -> list of rows with NaN cells as None."""
    cleaned = df.astype(object).where(pd.notna(df), None)
    return [list(row) for row in cleaned.itertuples(index=False, name=None)]


def _pick_sheet(sheets: dict[str, pd.DataFrame]) -> tuple[str, pd.DataFrame]:
    for name, frame in sheets.items():
        if PREFERRED_SHEET_HINT in str(name).lower():
            return name, frame
    name = next(iter(sheets))
    return name, sheets[name]


def _read_csv_rows(source: Path | bytes) -> list[list[Any]]:
    """CSV rows may be ragged (a lone category cell above wider product rows)."""
    if isinstance(source, Path):
        text = source.read_text(encoding="utf-8-sig")
    else:
        text = source.decode("utf-8-sig")
    reader = csv.reader(io.StringIO(text))
    return [[cell if cell.strip() else None for cell in row] for row in reader]


def read_spreadsheet_rows(source: Path | bytes, filename: str | None = None) -> list[list[Any]]:
    """Read a .xlsx/.xlsm/.csv file (path or uploaded bytes) into raw cell rows.

    No header row is assumed; row 0 is the first row of the sheet.
    """
    name = filename or (source.name if isinstance(source, Path) else "")
    suffix = Path(name).suffix.lower()
    if suffix not in EXCEL_SUFFIXES | CSV_SUFFIXES:
        raise SpreadsheetFormatError(f"Unsupported file type {suffix or '(none)'}; upload .xlsx or .csv")

    if suffix in CSV_SUFFIXES:
        try:
            rows = _read_csv_rows(source)
        except (UnicodeDecodeError, csv.Error) as exc:
            raise SpreadsheetFormatError(f"Failed to read spreadsheet {name}: {exc}") from exc
        logger.info("Read %d rows from %s", len(rows), name)
        return rows

    handle: Path | io.BytesIO = source if isinstance(source, Path) else io.BytesIO(source)
    try:
        sheets = pd.read_excel(handle, sheet_name=None, header=None, dtype=object, engine="openpyxl")
    except (ValueError, KeyError, OSError, zipfile.BadZipFile) as exc:
        raise SpreadsheetFormatError(f"Failed to read spreadsheet {name}: {exc}") from exc
    if not sheets:
        raise SpreadsheetFormatError("Workbook has no sheets")
    sheet_name, df = _pick_sheet(sheets)
    logger.debug("Reading sheet %r of %s", sheet_name, name)

    rows = _frame_to_rows(df)
    logger.info("Read %d rows from %s", len(rows), name)
    return rows


def write_xlsx_bytes(rows: Sequence[Sequence[Any]], sheet_title: str = "Inventory", bold_first_row: bool = False) -> bytes:
    """Write rows to a single-sheet workbook and return the file contents."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title
    for row in rows:
        ws.append(list(row))

    if bold_first_row and rows:
        for cell in ws[1]:
            cell.font = Font(bold=True)

    widths: dict[int, int] = {}
    for row in rows:
        for index, value in enumerate(row, start=1):
            widths[index] = max(widths.get(index, 0), len(str(value)) if value is not None else 0)
    for index, width in widths.items():
        ws.column_dimensions[get_column_letter(index)].width = min(max(width + 2, 10), 60)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def write_xlsx_file(rows: Sequence[Sequence[Any]], path: Path, bold_first_row: bool = False) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(write_xlsx_bytes(rows, bold_first_row=bold_first_row))
    return path
