from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class WarehouseCreate(BaseModel):
    name: str = Field(
        min_length=1,
        validation_alias=AliasChoices("warehouseName", "name"),
    )


class WarehouseUpdate(BaseModel):
    name: str = Field(
        min_length=1,
        validation_alias=AliasChoices("warehouseName", "name"),
    )


class WarehouseRead(BaseModel):
    warehouse_id: str = Field(alias="warehouseID")
    name: str = Field(alias="warehouseName")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
