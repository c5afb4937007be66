from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from pharma_sheet.dependencies import get_db
from pharma_sheet.schemas.medicine import (
    BlisterDateHistoryRead,
    MedicineBrandRead,
    MedicineHouseRead,
    MedicinePage,
    Pagination,
)
from pharma_sheet.services.medicine_service import (
    house_filter_from_params,
    list_blister_date_history,
    list_medicine_brands,
    list_medicine_houses,
    list_medicines,
    paginate,
    parse_sort,
)

router = APIRouter(prefix="/medicines", tags=["Medicines"])


@router.get("", response_model=MedicinePage)
def get_medicines(
    limit: int = Query(10, ge=1, le=500),
    offset: int = Query(0, ge=0),
    page: int = Query(0, ge=0),
    sort: Optional[str] = Query(None, description="medicationID | medicalName | createdAt | updatedAt, then asc | desc"),
    search: Optional[str] = Query(None, description="Medication ID or medical name"),
    db: Session = Depends(get_db),
):
    try:
        medicine_sort = parse_sort(sort)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    pagination = Pagination(limit=limit, offset=offset, page=page)
    medicines, total = list_medicines(db, pagination, sort=medicine_sort, search=search)
    return paginate(medicines, total, pagination)


@router.get("/houses", response_model=List[MedicineHouseRead])
def get_medicine_houses(
    warehouse_id: Optional[str] = Query(None),
    medication_id: Optional[str] = Query(None),
    record_id: Optional[str] = Query(None, alias="id"),
    db: Session = Depends(get_db),
):
    try:
        house_filter = house_filter_from_params(
            warehouse_id=warehouse_id,
            medication_id=medication_id,
            record_id=record_id,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return list_medicine_houses(db, house_filter)


@router.get("/brands", response_model=List[MedicineBrandRead])
def get_medicine_brands(
    medication_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return list_medicine_brands(db, medication_id=medication_id)


@router.get("/blister-dates", response_model=List[BlisterDateHistoryRead])
def get_blister_date_history(
    warehouse_id: str = Query(...),
    medication_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return list_blister_date_history(db, warehouse_id, medication_id=medication_id)
