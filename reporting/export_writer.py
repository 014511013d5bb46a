"""Serialization of formatted sheets to spreadsheet and CSV bytes.

The only module that knows about file formats. It produces in-memory
buffers; choosing where to write them is up to the caller.
"""

from __future__ import annotations

import logging
from datetime import date
from io import BytesIO
from typing import Dict, List, Mapping, Optional, Sequence

import pandas as pd

from .enums import ExportFormat
from .export_formatter import SHEET_COLUMNS, Row

LOG = logging.getLogger(__name__)

# Excel limits sheet names to 31 characters.
MAX_SHEET_NAME_LENGTH = 31


def rows_to_frame(rows: Sequence[Row], columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Build a DataFrame from formatted rows.

    When columns is given it fixes the column order, and an empty sheet
    still gets a header row.
    """
    if columns is None:
        return pd.DataFrame(list(rows))
    return pd.DataFrame(list(rows), columns=columns)


def write_workbook(
    sheets: Mapping[str, Sequence[Row]],
    columns: Optional[Mapping[str, List[str]]] = None,
) -> bytes:
    """Write sheets to an .xlsx workbook, one worksheet per entry.

    Parameters
    ----------
    sheets : Mapping[str, Sequence[Row]]
        Sheet name to rows, in the order worksheets should appear.
    columns : Mapping[str, List[str]], optional
        Header columns per sheet name (default: SHEET_COLUMNS). A sheet
        with no entry takes its columns from its rows, so an empty one has
        no header.

    Returns
    -------
    bytes
        Workbook contents.

    Raises
    ------
    ValueError
        If sheets is empty or a sheet name is longer than Excel allows.
    """
    if not sheets:
        raise ValueError("At least one sheet is required to write a workbook")

    if columns is None:
        columns = SHEET_COLUMNS

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            if len(name) > MAX_SHEET_NAME_LENGTH:
                raise ValueError(
                    f"Sheet name '{name}' exceeds {MAX_SHEET_NAME_LENGTH} characters"
                )
            frame = rows_to_frame(rows, columns.get(name))
            frame.to_excel(writer, sheet_name=name, index=False)
            LOG.debug("Wrote sheet %s with %d row(s)", name, len(frame))

    return buffer.getvalue()


def write_csv(rows: Sequence[Row], columns: Optional[List[str]] = None) -> str:
    """Write one sheet as CSV text with a header row."""
    return rows_to_frame(rows, columns).to_csv(index=False)


def export_file_name(
    prefix: str,
    today: date,
    export_format: ExportFormat = ExportFormat.XLSX,
) -> str:
    """File name such as 'comprehensive_report_2025-01-15.xlsx'."""
    return f"{prefix}_{today.isoformat()}.{export_format.value}"


def sheet_file_stem(name: str) -> str:
    """Sheet name as a file name part: 'Files Report' -> 'files_report'."""
    return "_".join(name.lower().split())


def write_sheets(
    sheets: Mapping[str, Sequence[Row]],
    prefix: str,
    today: date,
    export_format: ExportFormat = ExportFormat.XLSX,
    columns: Optional[Mapping[str, List[str]]] = None,
) -> Dict[str, bytes]:
    """Serialize sheets into named file buffers.

    XLSX produces a single workbook. CSV produces '<prefix>_<date>.csv'
    for a single sheet, and otherwise one file per sheet named
    '<prefix>_<sheet>_<date>.csv' (see sheet_file_stem).
    """
    if columns is None:
        columns = SHEET_COLUMNS

    if export_format is ExportFormat.XLSX:
        return {
            export_file_name(prefix, today, export_format): write_workbook(
                sheets, columns
            )
        }

    files: Dict[str, bytes] = {}
    for name, rows in sheets.items():
        stem = prefix if len(sheets) == 1 else f"{prefix}_{sheet_file_stem(name)}"
        file_name = export_file_name(stem, today, export_format)
        files[file_name] = write_csv(rows, columns.get(name)).encode("utf-8")
    return files
