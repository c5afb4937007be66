import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from pharma_sheet.dependencies import get_db, require_auth
from pharma_sheet.models.warehouse import Warehouse
from pharma_sheet.schemas.warehouse import WarehouseCreate, WarehouseRead, WarehouseUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/warehouses", tags=["Warehouses"])


def _get_or_404(db: Session, warehouse_id: str) -> Warehouse:
    warehouse = db.get(Warehouse, warehouse_id)
    if warehouse is None:
        raise HTTPException(status_code=404, detail="Warehouse not found.")
    return warehouse


@router.get("", response_model=List[WarehouseRead])
def get_warehouses(db: Session = Depends(get_db)):
    return list(db.execute(select(Warehouse).order_by(Warehouse.warehouse_id)).scalars().all())


@router.get("/{warehouse_id}", response_model=WarehouseRead)
def get_warehouse(warehouse_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, warehouse_id)


@router.post("/{warehouse_id}", response_model=WarehouseRead, status_code=201)
def create_warehouse(
    warehouse_id: str,
    payload: WarehouseCreate,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    warehouse_id = warehouse_id.strip()
    if not warehouse_id:
        raise HTTPException(status_code=400, detail="warehouse_id is required.")
    if db.get(Warehouse, warehouse_id) is not None:
        raise HTTPException(status_code=409, detail="Warehouse already exists.")

    warehouse = Warehouse(warehouse_id=warehouse_id, name=payload.name.strip() or warehouse_id)
    db.add(warehouse)
    db.commit()
    db.refresh(warehouse)
    logger.info("Created warehouse %s", warehouse_id, extra={"warehouse_id": warehouse_id})
    return warehouse


@router.patch("/{warehouse_id}", response_model=WarehouseRead)
def update_warehouse(
    warehouse_id: str,
    payload: WarehouseUpdate,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    warehouse = _get_or_404(db, warehouse_id)
    warehouse.name = payload.name.strip() or warehouse.name
    db.commit()
    db.refresh(warehouse)
    return warehouse


@router.delete("/{warehouse_id}", status_code=204)
def delete_warehouse(
    warehouse_id: str,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    warehouse = _get_or_404(db, warehouse_id)
    # Houses, history and the sheet registration go with it (ON DELETE CASCADE).
    db.delete(warehouse)
    db.commit()
    logger.info("Deleted warehouse %s", warehouse_id, extra={"warehouse_id": warehouse_id})
    return Response(status_code=204)


__all__ = ["router"]
