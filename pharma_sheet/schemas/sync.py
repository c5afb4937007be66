from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class MedicineMetadata(BaseModel):
    sheet_name: str = Field(default="", alias="sheetName")
    total_medicine: int = Field(default=0, alias="totalMedicine")
    total_new_medicine: int = Field(default=0, alias="totalNewMedicine")
    total_updated_medicine: int = Field(default=0, alias="totalUpdatedMedicine")
    total_skipped_medicine: int = Field(default=0, alias="totalSkippedMedicine")
    total_invalid_medicine: int = Field(default=0, alias="totalInvalidMedicine")
    total_deleted_medicine: int = Field(default=0, alias="totalDeletedMedicine")

    model_config = ConfigDict(populate_by_name=True)


class SyncMedicineMetadata(BaseModel):
    title: str = ""
    synced_date: str = Field(default="", alias="syncedDate")
    medication: MedicineMetadata = Field(default_factory=MedicineMetadata)
    house: MedicineMetadata = Field(default_factory=MedicineMetadata)
    brand: MedicineMetadata = Field(default_factory=MedicineMetadata)
    blister_date: MedicineMetadata = Field(default_factory=MedicineMetadata, alias="blisterDate")

    model_config = ConfigDict(populate_by_name=True)


class SyncRequest(BaseModel):
    path: Optional[str] = None
    title: Optional[str] = None
    medication: List[Dict[str, Any]] = Field(default_factory=list)
    house: List[Dict[str, Any]] = Field(default_factory=list)
    brand: List[Dict[str, Any]] = Field(default_factory=list)
    blister_date: List[Dict[str, Any]] = Field(
        default_factory=list,
        validation_alias=AliasChoices("blisterDate", "blister_date"),
    )
    dry_run: bool = Field(default=False, validation_alias=AliasChoices("dryRun", "dry_run"))
    prune_missing: Optional[bool] = Field(
        default=None,
        validation_alias=AliasChoices("pruneMissing", "prune_missing"),
    )

    def has_rows(self) -> bool:
        return bool(self.medication or self.house or self.brand or self.blister_date)
