"""Stored state of each sheet kind, keyed by external id.

One query per kind. Medications and brands are global catalogs; houses and
blister history belong to a warehouse.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from pharma_sheet.models.medicine import Medicine
from pharma_sheet.models.medicine_brand import MedicineBrand
from pharma_sheet.services.medicine_service import (
    ByWarehouse,
    list_blister_date_history,
    list_medicine_houses,
)
from pharma_sheet.sync.identity import external_id


@dataclass(frozen=True)
class StoredBlisterDate:
    warehouse_id: str
    medication_id: str
    # "" when the sheet row had no trade id.
    trade_id: str
    blister_change_date: date
    id: Optional[str] = None


def load_medication_snapshot(db: Session) -> dict:
    medicines = db.execute(select(Medicine)).scalars().all()
    return {external_id(medicine): medicine for medicine in medicines}


def load_brand_snapshot(db: Session) -> dict:
    brands = db.execute(select(MedicineBrand)).scalars().all()
    return {external_id(brand): brand for brand in brands}


def load_house_snapshot(db: Session, warehouse_id: str) -> dict:
    houses = list_medicine_houses(db, ByWarehouse(warehouse_id))
    return {external_id(house): house for house in houses}


def load_blister_date_snapshot(db: Session, warehouse_id: str) -> dict:
    snapshot = {}
    for history in list_blister_date_history(db, warehouse_id):
        stored = StoredBlisterDate(
            warehouse_id=history.warehouse_id,
            medication_id=history.medication_id,
            trade_id=history.trade_id or "",
            blister_change_date=history.blister_change_date,
            id=history.id,
        )
        snapshot[external_id(stored)] = stored
    return snapshot


def load_brand_ids(db: Session) -> dict:
    """Brand surrogate ids by ``(medication_id, trade_id)``."""
    rows = db.execute(
        select(MedicineBrand.medication_id, MedicineBrand.trade_id, MedicineBrand.id)
    ).all()
    return {(medication_id, trade_id): brand_id for medication_id, trade_id, brand_id in rows}


__all__ = [
    "StoredBlisterDate",
    "load_blister_date_snapshot",
    "load_brand_ids",
    "load_brand_snapshot",
    "load_house_snapshot",
    "load_medication_snapshot",
]
