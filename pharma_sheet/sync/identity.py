"""Natural keys shared by sheet records and stored rows.

Composite keys are tuples so that ids containing the separator can never
collide; ``format_key`` renders them for logs and error context.
"""

from pharma_sheet.core.dates import format_day
from pharma_sheet.models.medicine import Medicine
from pharma_sheet.models.medicine_brand import MedicineBrand
from pharma_sheet.models.medicine_house import MedicineHouse
from pharma_sheet.sync.normalizer import (
    BrandRecord,
    HouseRecord,
    MedicationRecord,
)

KEY_SEPARATOR = "-"


def _parts(*parts):
    return tuple("" if part is None else str(part) for part in parts)


def medication_key(medication_id):
    return medication_id or ""


def house_key(warehouse_id, medication_id, address):
    return _parts(warehouse_id, medication_id, address)


def brand_key(medication_id, trade_id):
    return _parts(medication_id, trade_id)


def blister_date_key(warehouse_id, medication_id, trade_id, blister_change_date):
    return _parts(warehouse_id, medication_id, trade_id, format_day(blister_change_date))


def format_key(key):
    if isinstance(key, tuple):
        return KEY_SEPARATOR.join(key)
    return key


def external_id(record):
    """Stable key of a sheet record or stored row; never raises."""
    if isinstance(record, (MedicationRecord, Medicine)):
        return medication_key(record.medication_id)
    if isinstance(record, (HouseRecord, MedicineHouse)):
        return house_key(record.warehouse_id, record.medication_id, record.address)
    if isinstance(record, (BrandRecord, MedicineBrand)):
        return brand_key(record.medication_id, record.trade_id)
    # Blister history: sheet records and StoredBlisterDate snapshots share field names.
    return blister_date_key(
        getattr(record, "warehouse_id", None),
        getattr(record, "medication_id", None),
        getattr(record, "trade_id", None),
        getattr(record, "blister_change_date", None),
    )


def display_id(record):
    return format_key(external_id(record))


def dedupe_by_external_id(records):
    """Collapse records sharing a key, last one wins.

    Returns the surviving records in first-seen key order and the number of
    rows that were collapsed away.
    """
    latest = {}
    for record in records:
        latest[external_id(record)] = record
    return list(latest.values()), len(records) - len(latest)


__all__ = [
    "blister_date_key",
    "brand_key",
    "dedupe_by_external_id",
    "display_id",
    "external_id",
    "format_key",
    "house_key",
    "medication_key",
]
