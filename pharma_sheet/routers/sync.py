from fastapi import APIRouter, Depends, HTTPException, Query
from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.orm import Session

from pharma_sheet.core.errors import (
    ConflictError,
    NotFoundError,
    SyncError,
    TransientStoreError,
    ValidationError,
)
from pharma_sheet.dependencies import get_db, require_auth
from pharma_sheet.schemas.sync import SyncMedicineMetadata, SyncRequest
from pharma_sheet.sync import load_workbook_rows, reconcile, rows_from_payload, summarize

router = APIRouter(prefix="/warehouses", tags=["Sync"])

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (TransientStoreError, 503),
)


def _http_error(exc: SyncError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def _read_workbook(path):
    try:
        return load_workbook_rows(path)
    except (OSError, ValueError, InvalidFileException) as exc:
        raise ValidationError(str(exc)) from exc


def _rows_for_request(payload: SyncRequest):
    if payload.path:
        rows = _read_workbook(payload.path)
        if payload.title:
            rows.title = payload.title
        return rows
    if payload.has_rows():
        return rows_from_payload(payload, title=payload.title)
    raise ValidationError("Provide a workbook path or sheet rows.")


@router.get("/{warehouse_id}/sync/summary", response_model=SyncMedicineMetadata)
def get_sync_summary(
    warehouse_id: str,
    path: str = Query(..., description="Path of the .xlsx workbook to preview"),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        return summarize(db, warehouse_id, _read_workbook(path))
    except SyncError as exc:
        raise _http_error(exc) from exc


@router.post("/{warehouse_id}/sync", response_model=SyncMedicineMetadata)
def sync_warehouse_sheet(
    warehouse_id: str,
    payload: SyncRequest,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        rows = _rows_for_request(payload)
        return reconcile(
            db,
            warehouse_id,
            rows,
            dry_run=payload.dry_run,
            prune_missing=payload.prune_missing,
        )
    except SyncError as exc:
        raise _http_error(exc) from exc
