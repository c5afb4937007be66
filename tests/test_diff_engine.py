import unittest
from datetime import date, datetime, timezone

from pharma_sheet.models.medicine import Medicine
from pharma_sheet.models.medicine_brand import MedicineBrand
from pharma_sheet.models.medicine_house import MedicineHouse
from pharma_sheet.sync.diff_engine import Classification, changed_fields, classify, optional_text
from pharma_sheet.sync.normalizer import (
    normalize_blister_date_row,
    normalize_brand_row,
    normalize_house_row,
    normalize_medication_row,
)
from pharma_sheet.sync.snapshot import StoredBlisterDate


def stored_house(**overrides):
    values = dict(
        warehouse_id="W1",
        medication_id="MED01",
        house_id="H1",
        locker="A",
        floor=1,
        no=2,
        address="A-1-2",
        label=None,
    )
    values.update(overrides)
    return MedicineHouse(**values)


def sheet_house(**overrides):
    row = {
        "warehouse_id": "W1",
        "house_id": "H1",
        "medication_id": "MED01",
        "medical_name": "Paracetamol",
        "locker": "A",
        "floor": 1,
        "no": 2,
        "address": "A-1-2",
        "label": "",
    }
    row.update(overrides)
    return normalize_house_row(row)


class DiffEngineTest(unittest.TestCase):
    def test_invalid_wins(self):
        record = normalize_medication_row({"medication_id": "MED01"})
        current = Medicine(medication_id="MED01", medical_name="Paracetamol")
        self.assertIs(classify(record, current), Classification.INVALID)
        self.assertIs(classify(record, None), Classification.INVALID)

    def test_new_when_not_stored(self):
        record = normalize_medication_row({"medication_id": "MED01", "medical_name": "Paracetamol"})
        self.assertIs(classify(record, None), Classification.NEW)

    def test_medication_name_change(self):
        record = normalize_medication_row({"medication_id": "MED01", "medical_name": "Paracetamol 500"})
        current = Medicine(medication_id="MED01", medical_name="Paracetamol")
        self.assertIs(classify(record, current), Classification.UPDATED)

    def test_blank_label_equals_missing_label(self):
        self.assertIs(classify(sheet_house(), stored_house(label="")), Classification.UNCHANGED)
        self.assertIs(classify(sheet_house(), stored_house(label=None)), Classification.UNCHANGED)

    def test_floor_change_is_update(self):
        record = sheet_house(floor=3)
        current = stored_house()
        self.assertIs(classify(record, current), Classification.UPDATED)
        self.assertEqual(changed_fields(record, current), ["floor"])

    def test_brand_compares_file_ids(self):
        record = normalize_brand_row(
            {
                "medication_id": "MED01",
                "trade_id": "T01",
                "trade_name": "Sara",
                "box_image_url": "https://drive.google.com/file/d/box01/view",
            }
        )
        current = MedicineBrand(medication_id="MED01", trade_id="T01", trade_name="Sara", box_image_url="box01")
        self.assertIs(classify(record, current), Classification.UNCHANGED)

        current.box_image_url = "box00"
        self.assertEqual(changed_fields(record, current), ["box_file_id"])

    def test_dates_compare_by_day(self):
        record = normalize_blister_date_row(
            {
                "warehouse_id": "W1",
                "house_id": "H1",
                "medication_id": "MED01",
                "trade_id": "T01",
                "blister_date": "5/3/2024",
            }
        )
        current = StoredBlisterDate(
            warehouse_id="W1",
            medication_id="MED01",
            trade_id="T01",
            blister_change_date=datetime(2024, 3, 5, 10, 15, tzinfo=timezone.utc),
        )
        self.assertIs(classify(record, current), Classification.UNCHANGED)

        moved = StoredBlisterDate(
            warehouse_id="W1",
            medication_id="MED01",
            trade_id="T01",
            blister_change_date=date(2024, 3, 6),
        )
        self.assertIs(classify(record, moved), Classification.UPDATED)

    def test_optional_text(self):
        self.assertIsNone(optional_text(""))
        self.assertIsNone(optional_text("  "))
        self.assertEqual(optional_text(" a "), "a")
        self.assertEqual(optional_text(3), 3)


if __name__ == "__main__":
    unittest.main()
