from pharma_sheet.sync.metadata import build_sync_metadata, summarize_metadata
from pharma_sheet.sync.reconciler import reconcile, summarize
from pharma_sheet.sync.sheet_rows import SheetRows, rows_from_payload
from pharma_sheet.sync.workbook import load_workbook_rows

__all__ = [
    "SheetRows",
    "build_sync_metadata",
    "load_workbook_rows",
    "reconcile",
    "rows_from_payload",
    "summarize",
    "summarize_metadata",
]
