"""Company reference list loaded from the customer spreadsheet."""

import os
from dataclasses import dataclass, field
from typing import Any, List, Sequence

from openpyxl import load_workbook


class ConfigurationError(Exception):
    """Raised when the run configuration refers to data that does not exist."""
    pass


@dataclass
class SpreadsheetData:
    """First sheet of a workbook: header row and data rows."""

    columns: List[str]
    rows: List[Sequence[Any]] = field(default_factory=list)


def load_spreadsheet(path: str) -> SpreadsheetData:
    """Read the first sheet of an .xlsx workbook.

    The first non-blank row is used as the column names; blank rows are skipped.

    Raises:
        ConfigurationError: If the file is not an .xlsx workbook, cannot be read
            or the sheet is empty
    """
    if os.path.splitext(path)[1].lower() == ".xls":
        raise ConfigurationError(
            f"Legacy .xls workbooks are not supported, save {path} as .xlsx"
        )

    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except Exception as e:
        raise ConfigurationError(f"Failed to read spreadsheet {path}: {e}")

    try:
        sheet = workbook.worksheets[0]
        rows = [row for row in sheet.iter_rows(values_only=True)
                if any(cell is not None for cell in row)]
    finally:
        workbook.close()

    if not rows:
        raise ConfigurationError(f"Spreadsheet is empty: {path}")

    columns = ["" if cell is None else str(cell).strip() for cell in rows[0]]
    return SpreadsheetData(columns=columns, rows=rows[1:])


def extract_company_list(data: SpreadsheetData, column_name: str) -> List[str]:
    """Collect the company names from one column.

    Values are trimmed; empty and non-text cells are skipped; duplicates are
    dropped keeping the first occurrence, so row order is match priority.

    Raises:
        ConfigurationError: If the column does not exist
    """
    if column_name not in data.columns:
        raise ConfigurationError(
            f"Column '{column_name}' not found. Available columns: {', '.join(c for c in data.columns if c)}"
        )
    index = data.columns.index(column_name)

    names = []
    for row in data.rows:
        if index >= len(row):
            continue
        value = row[index]
        if isinstance(value, str) and value.strip():
            names.append(value.strip())

    return list(dict.fromkeys(names))


def load_company_list(path: str, column_name: str) -> List[str]:
    """Load the company reference list from a spreadsheet column."""
    return extract_company_list(load_spreadsheet(path), column_name)
