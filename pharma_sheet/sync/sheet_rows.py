from dataclasses import dataclass, field

from pharma_sheet.config import get_settings
from pharma_sheet.core.constants import (
    KIND_BLISTER_DATE,
    KIND_BRAND,
    KIND_HOUSE,
    KIND_MEDICATION,
)

# Fixed column headers of the shared spreadsheet, plus the camelCase keys
# API callers post.
_ALIAS_SPECS = (
    (("medication_id", "medicationid"), "medication_id"),
    (("ชื่อสามัญทางยา", "medical_name", "medicalname"), "medical_name"),
    (("tradename_id", "trade_id", "tradeid"), "trade_id"),
    (("ชื่อการค้า", "trade_name", "tradename"), "trade_name"),
    (("link_แผงยา", "blister_image_url", "blisterimageurl"), "blister_image_url"),
    (("link_เม็ดยา", "tablet_image_url", "tabletimageurl"), "tablet_image_url"),
    (("link_กล่องยา", "box_image_url", "boximageurl"), "box_image_url"),
    (("ศูนย์", "warehouse_id", "warehouseid"), "warehouse_id"),
    (("house_id", "houseid"), "house_id"),
    (("ตู้", "locker"), "locker"),
    (("ชั้น", "floor"), "floor"),
    (("ลำดับที่", "no"), "no"),
    (("บ้านเลขที่ยา", "address"), "address"),
    (("label_ตะกร้า", "label"), "label"),
    (("วันที่เปลี่ยนแผงยา", "blister_date", "blisterdate", "date"), "blister_date"),
)

HEADER_ALIASES = {alias: target for aliases, target in _ALIAS_SPECS for alias in aliases}


def normalize_header(value):
    if value is None:
        return ""
    value_text = str(value).strip().lower()
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/"):
        value_text = value_text.replace(char, "_")
    value_text = "_".join(part for part in value_text.split("_") if part)
    alias = HEADER_ALIASES.get(value_text)
    if alias:
        return alias
    alias = HEADER_ALIASES.get(value_text.replace("_", ""))
    if alias:
        return alias
    return value_text


def normalize_row_keys(row):
    return {normalize_header(key): value for key, value in row.items()}


def default_sheet_names():
    settings = get_settings()
    return {
        KIND_MEDICATION: settings.SHEET_MEDICATION_NAME,
        KIND_HOUSE: settings.SHEET_HOUSE_NAME,
        KIND_BRAND: settings.SHEET_BRAND_NAME,
        KIND_BLISTER_DATE: settings.SHEET_BLISTER_DATE_NAME,
    }


@dataclass
class SheetRows:
    """Rows of the four tabs, still untyped; the normalizer coerces them."""

    title: str = ""
    source: str = ""
    medication: list = field(default_factory=list)
    house: list = field(default_factory=list)
    brand: list = field(default_factory=list)
    blister_date: list = field(default_factory=list)
    sheet_names: dict = field(default_factory=default_sheet_names)

    def rows_for(self, kind):
        if kind == KIND_MEDICATION:
            return self.medication
        if kind == KIND_HOUSE:
            return self.house
        if kind == KIND_BRAND:
            return self.brand
        if kind == KIND_BLISTER_DATE:
            return self.blister_date
        raise ValueError(f"Unsupported sheet kind: {kind}")


def rows_from_payload(payload, *, title="", source="api"):
    """Build SheetRows from already-parsed JSON rows (``SyncRequest``)."""
    return SheetRows(
        title=title or "",
        source=source,
        medication=[normalize_row_keys(row) for row in payload.medication],
        house=[normalize_row_keys(row) for row in payload.house],
        brand=[normalize_row_keys(row) for row in payload.brand],
        blister_date=[normalize_row_keys(row) for row in payload.blister_date],
    )


__all__ = [
    "HEADER_ALIASES",
    "SheetRows",
    "default_sheet_names",
    "normalize_header",
    "normalize_row_keys",
    "rows_from_payload",
]
