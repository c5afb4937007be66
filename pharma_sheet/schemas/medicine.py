import math
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MedicineRead(BaseModel):
    medication_id: str = Field(alias="medicationID")
    medical_name: str = Field(alias="medicalName")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class MedicineHouseRead(BaseModel):
    id: str
    warehouse_id: str = Field(alias="warehouseID")
    medication_id: str = Field(alias="medicationID")
    house_id: Optional[str] = Field(default=None, alias="houseID")
    locker: str
    floor: int
    no: int
    address: str
    label: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class MedicineBrandRead(BaseModel):
    id: str
    medication_id: str = Field(alias="medicationID")
    trade_id: str = Field(alias="tradeID")
    trade_name: Optional[str] = Field(default=None, alias="tradeName")
    blister_image_url: Optional[str] = Field(default=None, alias="blisterImageURL")
    tablet_image_url: Optional[str] = Field(default=None, alias="tabletImageURL")
    box_image_url: Optional[str] = Field(default=None, alias="boxImageURL")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class BlisterDateHistoryRead(BaseModel):
    id: str
    warehouse_id: str = Field(alias="warehouseID")
    medication_id: str = Field(alias="medicationID")
    brand_id: Optional[str] = Field(default=None, alias="brandID")
    trade_id: Optional[str] = Field(default=None, alias="tradeID")
    blister_change_date: date = Field(alias="date")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class Pagination(BaseModel):
    limit: int = Field(default=10, ge=1, le=500)
    offset: int = Field(default=0, ge=0)
    page: int = Field(default=0, ge=0)

    def resolved_offset(self) -> int:
        if self.page > 0:
            return (self.page - 1) * self.limit
        return self.offset


class PaginationMetadata(BaseModel):
    limit: int
    offset: int
    total_item: int = Field(alias="totalItem")
    total_page: int = Field(alias="totalPage")
    current_page: int = Field(alias="currentPage")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def build(cls, pagination: Pagination, total: int) -> "PaginationMetadata":
        offset = pagination.resolved_offset()
        total_page = math.ceil(total / pagination.limit) if total else 0
        current_page = offset // pagination.limit + 1 if total_page else 0
        return cls(
            limit=pagination.limit,
            offset=offset,
            total_item=total,
            total_page=total_page,
            current_page=current_page,
        )


class MedicinePage(BaseModel):
    data: List[MedicineRead] = Field(default_factory=list)
    metadata: PaginationMetadata
