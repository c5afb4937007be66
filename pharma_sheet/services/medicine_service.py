from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from pharma_sheet.models.blister_date_history import MedicineBlisterDateHistory
from pharma_sheet.models.medicine import Medicine
from pharma_sheet.models.medicine_brand import MedicineBrand
from pharma_sheet.models.medicine_house import MedicineHouse
from pharma_sheet.schemas.medicine import MedicinePage, MedicineRead, Pagination, PaginationMetadata


def _require(value: str, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{field} is required")
    return str(value).strip()


@dataclass(frozen=True)
class ByWarehouse:
    warehouse_id: str

    def __post_init__(self):
        object.__setattr__(self, "warehouse_id", _require(self.warehouse_id, "warehouse_id"))


@dataclass(frozen=True)
class ByMedication:
    medication_id: str

    def __post_init__(self):
        object.__setattr__(self, "medication_id", _require(self.medication_id, "medication_id"))


@dataclass(frozen=True)
class ById:
    """Matches the stored surrogate id, not the sheet house id."""

    id: str

    def __post_init__(self):
        object.__setattr__(self, "id", _require(self.id, "id"))


HouseFilter = Union[ByWarehouse, ByMedication, ById]


def house_filter_from_params(
    warehouse_id: Optional[str] = None,
    medication_id: Optional[str] = None,
    record_id: Optional[str] = None,
) -> HouseFilter:
    """Exactly one of the parameters selects the variant."""
    given = [
        (name, value)
        for name, value in (
            ("warehouse_id", warehouse_id),
            ("medication_id", medication_id),
            ("id", record_id),
        )
        if value
    ]
    if len(given) != 1:
        raise ValueError("exactly one of warehouse_id, medication_id, id is required")
    name, value = given[0]
    if name == "warehouse_id":
        return ByWarehouse(value)
    if name == "medication_id":
        return ByMedication(value)
    return ById(value)


def _house_condition(house_filter: HouseFilter):
    if isinstance(house_filter, ByWarehouse):
        return MedicineHouse.warehouse_id == house_filter.warehouse_id
    if isinstance(house_filter, ByMedication):
        return MedicineHouse.medication_id == house_filter.medication_id
    if isinstance(house_filter, ById):
        return MedicineHouse.id == house_filter.id
    raise TypeError(f"Unsupported house filter: {house_filter!r}")


def list_medicine_houses(db: Session, house_filter: HouseFilter) -> list[MedicineHouse]:
    stmt = (
        select(MedicineHouse)
        .where(_house_condition(house_filter))
        .order_by(MedicineHouse.locker, MedicineHouse.floor, MedicineHouse.no)
    )
    return list(db.execute(stmt).scalars().all())


class MedicineSortKey(str, Enum):
    MEDICATION_ID = "medicationID"
    MEDICAL_NAME = "medicalName"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


_MEDICINE_SORT_COLUMNS = {
    MedicineSortKey.MEDICATION_ID: Medicine.medication_id,
    MedicineSortKey.MEDICAL_NAME: Medicine.medical_name,
    MedicineSortKey.CREATED_AT: Medicine.created_at,
    MedicineSortKey.UPDATED_AT: Medicine.updated_at,
}


@dataclass(frozen=True)
class MedicineSort:
    key: MedicineSortKey = MedicineSortKey.MEDICATION_ID
    direction: SortDirection = SortDirection.ASC

    def clauses(self):
        column = _MEDICINE_SORT_COLUMNS[self.key]
        primary = column.desc() if self.direction is SortDirection.DESC else column.asc()
        if self.key is MedicineSortKey.MEDICATION_ID:
            return (primary,)
        return (primary, Medicine.medication_id.asc())


def parse_sort(value: Optional[str]) -> MedicineSort:
    """Parse ``"<key> [asc|desc]"`` against the allow-listed sort keys."""
    if value is None or not value.strip():
        return MedicineSort()
    parts = value.split()
    if len(parts) > 2:
        raise ValueError(f"Invalid sort: {value}")
    try:
        key = MedicineSortKey(parts[0])
    except ValueError:
        allowed = ", ".join(item.value for item in MedicineSortKey)
        raise ValueError(f"Unsupported sort key: {parts[0]} (allowed: {allowed})") from None
    direction = SortDirection.ASC
    if len(parts) == 2:
        try:
            direction = SortDirection(parts[1].lower())
        except ValueError:
            raise ValueError(f"Unsupported sort direction: {parts[1]}") from None
    return MedicineSort(key=key, direction=direction)


def list_medicines(
    db: Session,
    pagination: Pagination,
    sort: Optional[MedicineSort] = None,
    search: Optional[str] = None,
) -> tuple[list[Medicine], int]:
    sort = sort or MedicineSort()
    conditions = []
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        conditions.append(
            or_(
                func.lower(Medicine.medication_id).like(pattern),
                func.lower(Medicine.medical_name).like(pattern),
            )
        )

    total = db.execute(
        select(func.count()).select_from(Medicine).where(*conditions)
    ).scalar_one()
    if total == 0:
        return [], 0

    stmt = (
        select(Medicine)
        .where(*conditions)
        .order_by(*sort.clauses())
        .limit(pagination.limit)
        .offset(pagination.resolved_offset())
    )
    return list(db.execute(stmt).scalars().all()), total


def paginate(items, total: int, pagination: Pagination) -> MedicinePage:
    return MedicinePage(
        data=[MedicineRead.model_validate(item) for item in items],
        metadata=PaginationMetadata.build(pagination, total),
    )


def list_medicine_brands(db: Session, medication_id: Optional[str] = None) -> list[MedicineBrand]:
    stmt = select(MedicineBrand).order_by(MedicineBrand.medication_id, MedicineBrand.trade_id)
    if medication_id:
        stmt = stmt.where(MedicineBrand.medication_id == medication_id)
    return list(db.execute(stmt).scalars().all())


def list_blister_date_history(
    db: Session,
    warehouse_id: str,
    medication_id: Optional[str] = None,
) -> list[MedicineBlisterDateHistory]:
    stmt = (
        select(MedicineBlisterDateHistory)
        .where(MedicineBlisterDateHistory.warehouse_id == warehouse_id)
        .order_by(
            MedicineBlisterDateHistory.medication_id,
            MedicineBlisterDateHistory.blister_change_date.desc(),
        )
    )
    if medication_id:
        stmt = stmt.where(MedicineBlisterDateHistory.medication_id == medication_id)
    return list(db.execute(stmt).scalars().all())


__all__ = [
    "ById",
    "ByMedication",
    "ByWarehouse",
    "HouseFilter",
    "MedicineSort",
    "MedicineSortKey",
    "SortDirection",
    "house_filter_from_params",
    "list_blister_date_history",
    "list_medicine_brands",
    "list_medicine_houses",
    "list_medicines",
    "paginate",
    "parse_sort",
]
