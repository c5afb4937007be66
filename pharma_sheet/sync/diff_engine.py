from datetime import date
from enum import Enum

from pharma_sheet.core.dates import format_day
from pharma_sheet.sync.normalizer import (
    BlisterDateRecord,
    BrandRecord,
    HouseRecord,
    MedicationRecord,
)


class Classification(str, Enum):
    NEW = "new"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    INVALID = "invalid"


# (sheet record field, stored row field) pairs that may change in place.
_COMPARED_FIELDS = {
    MedicationRecord: (("medical_name", "medical_name"),),
    HouseRecord: (
        ("locker", "locker"),
        ("floor", "floor"),
        ("no", "no"),
        ("address", "address"),
        ("label", "label"),
    ),
    BrandRecord: (
        ("trade_id", "trade_id"),
        ("trade_name", "trade_name"),
        ("blister_file_id", "blister_image_url"),
        ("tablet_file_id", "tablet_image_url"),
        ("box_file_id", "box_image_url"),
    ),
    BlisterDateRecord: (
        ("medication_id", "medication_id"),
        ("warehouse_id", "warehouse_id"),
        ("trade_id", "trade_id"),
        ("blister_change_date", "blister_change_date"),
    ),
}


def optional_text(value):
    """Blank text and None are the same "absent" value."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _same(sheet_value, stored_value):
    if isinstance(sheet_value, date) or isinstance(stored_value, date):
        return format_day(sheet_value) == format_day(stored_value)
    return optional_text(sheet_value) == optional_text(stored_value)


def changed_fields(record, current):
    changed = []
    for sheet_field, stored_field in _COMPARED_FIELDS[type(record)]:
        if not _same(getattr(record, sheet_field), getattr(current, stored_field)):
            changed.append(sheet_field)
    return changed


def classify(record, current):
    if record.invalid:
        return Classification.INVALID
    if current is None:
        return Classification.NEW
    if changed_fields(record, current):
        return Classification.UPDATED
    return Classification.UNCHANGED


__all__ = ["Classification", "changed_fields", "classify", "optional_text"]
