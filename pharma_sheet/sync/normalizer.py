"""Turn raw sheet rows into typed, validated records.

Each ``normalize_*_row`` takes a mapping of header key to cell value (as read
by :mod:`pharma_sheet.sync.workbook` or posted as JSON) and returns a frozen
record. Bad rows are not raised: the record carries the failed checks in
``errors`` and reports ``invalid``.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar, Optional

from pharma_sheet.core.constants import (
    KIND_BLISTER_DATE,
    KIND_BRAND,
    KIND_HOUSE,
    KIND_MEDICATION,
)
from pharma_sheet.core.dates import format_sheet_date, parse_sheet_date

NO_VALUE = "-"

_DRIVE_FILE_PATH = re.compile(r"^https?://drive\.google\.com/file/d/([A-Za-z0-9_-]+)")
_DRIVE_ID_QUERY = re.compile(r"^https?://drive\.google\.com/[^?#]*\?(?:.*&)?id=([A-Za-z0-9_-]+)")
_BARE_FILE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass(frozen=True)
class MedicationRecord:
    kind: ClassVar[str] = KIND_MEDICATION

    medication_id: Optional[str]
    medical_name: Optional[str]
    errors: tuple = ()

    @property
    def invalid(self):
        return bool(self.errors)


@dataclass(frozen=True)
class HouseRecord:
    kind: ClassVar[str] = KIND_HOUSE

    warehouse_id: Optional[str]
    house_id: Optional[str]
    medication_id: Optional[str]
    medical_name: Optional[str]
    locker: Optional[str]
    floor: int
    no: int
    address: Optional[str]
    label: Optional[str]
    errors: tuple = ()

    @property
    def invalid(self):
        return bool(self.errors)


@dataclass(frozen=True)
class BrandRecord:
    kind: ClassVar[str] = KIND_BRAND

    medication_id: Optional[str]
    medical_name: Optional[str]
    trade_id: Optional[str]
    trade_name: Optional[str]
    blister_file_id: Optional[str]
    tablet_file_id: Optional[str]
    box_file_id: Optional[str]
    errors: tuple = ()

    @property
    def invalid(self):
        return bool(self.errors)


@dataclass(frozen=True)
class BlisterDateRecord:
    kind: ClassVar[str] = KIND_BLISTER_DATE

    warehouse_id: Optional[str]
    house_id: Optional[str]
    medication_id: Optional[str]
    medical_name: Optional[str]
    # None when the row is not tied to a specific brand.
    trade_id: Optional[str]
    trade_name: Optional[str]
    blister_change_date: Optional[date]
    errors: tuple = ()

    @property
    def invalid(self):
        return bool(self.errors)


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def clean_text(value):
    """Cell value as stripped text, or None when blank."""
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime)):
        return format_sheet_date(value)
    text = str(value).strip()
    return text or None


def parse_positive_int(value):
    """Positive integer from a cell; 0 when non-numeric or not positive."""
    if _is_blank(value) or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return 0
        number = int(value)
    else:
        value_text = str(value).strip()
        try:
            number = int(value_text)
        except ValueError:
            try:
                numeric = float(value_text)
            except ValueError:
                return 0
            if not numeric.is_integer():
                return 0
            number = int(numeric)
    return number if number > 0 else 0


def drive_file_id(value):
    """Extract the Drive file id from a sharing URL.

    ``https://drive.google.com/file/d/<id>/view`` and ``...?id=<id>`` forms
    are recognised; bare ids pass through. Blank, ``"-"`` and URLs without an
    id all mean "no image" and return None.
    """
    text = clean_text(value)
    if not text or text == NO_VALUE:
        return None
    match = _DRIVE_FILE_PATH.match(text) or _DRIVE_ID_QUERY.match(text)
    if match:
        file_id = match.group(1)
    elif _BARE_FILE_ID.match(text):
        file_id = text
    else:
        return None
    if file_id == NO_VALUE or not file_id.strip(NO_VALUE):
        return None
    return file_id


def clean_trade_name(value):
    text = clean_text(value)
    if not text:
        return None
    text = text.replace(NO_VALUE, "").strip()
    return text or None


def _required(errors, row_values, *fields):
    for field in fields:
        if not row_values.get(field):
            errors.append(f"{field} is required")


def normalize_medication_row(row):
    values = {
        "medication_id": clean_text(row.get("medication_id")),
        "medical_name": clean_text(row.get("medical_name")),
    }
    errors = []
    _required(errors, values, "medication_id", "medical_name")
    return MedicationRecord(errors=tuple(errors), **values)


def normalize_house_row(row):
    values = {
        "warehouse_id": clean_text(row.get("warehouse_id")),
        "house_id": clean_text(row.get("house_id")),
        "medication_id": clean_text(row.get("medication_id")),
        "medical_name": clean_text(row.get("medical_name")),
        "locker": clean_text(row.get("locker")),
        "floor": parse_positive_int(row.get("floor")),
        "no": parse_positive_int(row.get("no")),
        "address": clean_text(row.get("address")),
        "label": clean_text(row.get("label")),
    }
    errors = []
    _required(
        errors,
        values,
        "warehouse_id",
        "house_id",
        "medication_id",
        "medical_name",
        "locker",
    )
    if values["floor"] <= 0:
        errors.append("floor must be a positive integer")
    if values["no"] <= 0:
        errors.append("no must be a positive integer")
    _required(errors, values, "address")
    return HouseRecord(errors=tuple(errors), **values)


def normalize_brand_row(row):
    values = {
        "medication_id": clean_text(row.get("medication_id")),
        "medical_name": clean_text(row.get("medical_name")),
        "trade_id": clean_text(row.get("trade_id")),
        "trade_name": clean_trade_name(row.get("trade_name")),
        "blister_file_id": drive_file_id(row.get("blister_image_url")),
        "tablet_file_id": drive_file_id(row.get("tablet_image_url")),
        "box_file_id": drive_file_id(row.get("box_image_url")),
    }
    errors = []
    _required(errors, values, "medication_id", "trade_id")
    content = (
        values["trade_name"],
        values["blister_file_id"],
        values["tablet_file_id"],
        values["box_file_id"],
    )
    if not any(content):
        errors.append("trade_name or an image is required")
    return BrandRecord(errors=tuple(errors), **values)


def normalize_blister_date_row(row):
    raw_date = row.get("blister_date")
    values = {
        "warehouse_id": clean_text(row.get("warehouse_id")),
        "house_id": clean_text(row.get("house_id")),
        "medication_id": clean_text(row.get("medication_id")),
        "medical_name": clean_text(row.get("medical_name")),
        "trade_id": clean_text(row.get("trade_id")),
        "trade_name": clean_trade_name(row.get("trade_name")),
        "blister_change_date": parse_sheet_date(raw_date),
    }
    errors = []
    _required(errors, values, "medication_id", "warehouse_id", "house_id", "trade_id")
    if values["blister_change_date"] is None:
        errors.append("blister_date must be a D/M/YYYY date")
    # "-" satisfies the required check but means the row has no brand.
    if values["trade_id"] == NO_VALUE:
        values["trade_id"] = None
    return BlisterDateRecord(errors=tuple(errors), **values)


ROW_NORMALIZERS = {
    KIND_MEDICATION: normalize_medication_row,
    KIND_HOUSE: normalize_house_row,
    KIND_BRAND: normalize_brand_row,
    KIND_BLISTER_DATE: normalize_blister_date_row,
}


__all__ = [
    "BlisterDateRecord",
    "BrandRecord",
    "HouseRecord",
    "MedicationRecord",
    "ROW_NORMALIZERS",
    "clean_text",
    "clean_trade_name",
    "drive_file_id",
    "normalize_blister_date_row",
    "normalize_brand_row",
    "normalize_house_row",
    "normalize_medication_row",
    "parse_positive_int",
]
