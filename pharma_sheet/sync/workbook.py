import logging
from pathlib import Path

from openpyxl import load_workbook

from pharma_sheet.sync.sheet_rows import SheetRows, default_sheet_names, normalize_header

logger = logging.getLogger(__name__)


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def load_sheet_rows(worksheet):
    """Read a header row followed by data rows into dicts keyed by field."""
    rows_iter = worksheet.iter_rows(values_only=True)
    headers = next(rows_iter, None)
    if not headers:
        return []
    indices = [
        (idx, key)
        for idx, key in enumerate(normalize_header(header) for header in headers)
        if key
    ]
    rows = []
    for row in rows_iter:
        if row is None or all(_is_blank(value) for value in row):
            continue
        rows.append({key: row[idx] if idx < len(row) else None for idx, key in indices})
    return rows


def load_workbook_rows(workbook_path, sheet_names=None):
    workbook_path = Path(workbook_path)
    if not workbook_path.exists():
        raise FileNotFoundError(f"File not found: {workbook_path}")
    if workbook_path.suffix.lower() != ".xlsx":
        raise ValueError("Only .xlsx files are supported.")

    sheet_names = sheet_names or default_sheet_names()
    workbook = load_workbook(workbook_path, read_only=True, data_only=True)
    try:
        missing = [name for name in sheet_names.values() if name not in workbook.sheetnames]
        if missing:
            raise ValueError(f"sheet is invalid: missing {', '.join(missing)}")

        title = workbook.properties.title or workbook_path.stem
        rows = SheetRows(title=title, source=str(workbook_path), sheet_names=dict(sheet_names))
        for kind, name in sheet_names.items():
            kind_rows = load_sheet_rows(workbook[name])
            rows.rows_for(kind).extend(kind_rows)
            logger.debug("Read %d rows from sheet %s", len(kind_rows), name)
    finally:
        workbook.close()
    return rows


__all__ = ["load_sheet_rows", "load_workbook_rows"]
