from dataclasses import dataclass
from datetime import date

from pharma_sheet.core.constants import (
    KIND_BLISTER_DATE,
    KIND_BRAND,
    KIND_HOUSE,
    KIND_MEDICATION,
)
from pharma_sheet.core.dates import format_day
from pharma_sheet.schemas.sync import MedicineMetadata, SyncMedicineMetadata
from pharma_sheet.sync.diff_engine import Classification


@dataclass
class KindCounter:
    """Per-kind tally; every input row lands in exactly one bucket."""

    sheet_name: str = ""
    total: int = 0
    new: int = 0
    updated: int = 0
    skipped: int = 0
    invalid: int = 0
    deleted: int = 0

    def add(self, classification):
        self.total += 1
        if classification is Classification.NEW:
            self.new += 1
        elif classification is Classification.UPDATED:
            self.updated += 1
        else:
            self.skipped += 1
            if classification is Classification.INVALID:
                self.invalid += 1

    def add_skipped(self, count=1):
        self.total += count
        self.skipped += count

    def to_metadata(self):
        return MedicineMetadata(
            sheet_name=self.sheet_name,
            total_medicine=self.total,
            total_new_medicine=self.new,
            total_updated_medicine=self.updated,
            total_skipped_medicine=self.skipped,
            total_invalid_medicine=self.invalid,
            total_deleted_medicine=self.deleted,
        )


def build_sync_metadata(title, counters, synced_on=None):
    if synced_on is None:
        synced_on = date.today()

    def _metadata(kind):
        counter = counters.get(kind)
        return counter.to_metadata() if counter else MedicineMetadata()

    return SyncMedicineMetadata(
        title=title or "",
        synced_date=format_day(synced_on),
        medication=_metadata(KIND_MEDICATION),
        house=_metadata(KIND_HOUSE),
        brand=_metadata(KIND_BRAND),
        blister_date=_metadata(KIND_BLISTER_DATE),
    )


def summarize_metadata(metadata):
    parts = []
    for kind, counts in (
        (KIND_MEDICATION, metadata.medication),
        (KIND_HOUSE, metadata.house),
        (KIND_BRAND, metadata.brand),
        (KIND_BLISTER_DATE, metadata.blister_date),
    ):
        parts.append(
            "{}: {} new, {} updated, {} skipped".format(
                kind,
                counts.total_new_medicine,
                counts.total_updated_medicine,
                counts.total_skipped_medicine,
            )
        )
    return "; ".join(parts)


__all__ = ["KindCounter", "build_sync_metadata", "summarize_metadata"]
