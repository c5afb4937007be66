import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from openpyxl import Workbook

from pharma_sheet.sync.sheet_rows import normalize_header, normalize_row_keys
from pharma_sheet.sync.workbook import load_workbook_rows

HOUSE_HEADERS = [
    "ศูนย์",
    "House_ID",
    "Medication_ID",
    "ชื่อสามัญทางยา",
    "ตู้",
    "ชั้น",
    "ลำดับที่",
    "บ้านเลขที่ยา",
    "Label ตะกร้า",
]
BRAND_HEADERS = [
    "Medication_ID",
    "ชื่อสามัญทางยา",
    "TRADENAME_ID",
    "ชื่อการค้า",
    "Link_แผงยา",
    "Link_เม็ดยา",
    "Link_กล่องยา",
]
BLISTER_HEADERS = [
    "ศูนย์",
    "House_ID",
    "Medication_ID",
    "ชื่อสามัญทางยา",
    "TRADENAME_ID",
    "ชื่อการค้า",
    "วันที่เปลี่ยนแผงยา",
]


def build_workbook(path, skip_sheet=None):
    workbook = Workbook()
    workbook.properties.title = "Pharmacy W1"
    medication = workbook.active
    medication.title = "Medication_ID"
    medication.append(["Medication_ID", "ชื่อสามัญทางยา"])
    medication.append(["MED01", "Paracetamol"])
    medication.append([None, None])
    medication.append(["MED02", "Ibuprofen"])

    if skip_sheet != "Pictures":
        brand = workbook.create_sheet("Pictures")
        brand.append(BRAND_HEADERS)
        brand.append(
            [
                "MED01",
                "Paracetamol",
                "T01",
                "Sara",
                "https://drive.google.com/file/d/blister01/view",
                "-",
                "",
            ]
        )

    house = workbook.create_sheet("บ้านเลขที่ยา")
    house.append(HOUSE_HEADERS)
    house.append(["W1", "H1", "MED01", "Paracetamol", "A", 1, 2, "A-1-2", "ตะกร้า 1"])

    blister = workbook.create_sheet("วันที่เปลี่ยนแผงยา")
    blister.append(BLISTER_HEADERS)
    blister.append(["W1", "H1", "MED01", "Paracetamol", "T01", "Sara", "5/3/2024"])
    blister.append(["W1", "H1", "MED01", "Paracetamol", "-", "-", datetime(2024, 2, 1)])

    workbook.save(path)


class WorkbookReaderTest(unittest.TestCase):
    def test_header_aliases(self):
        self.assertEqual(normalize_header("Medication_ID"), "medication_id")
        self.assertEqual(normalize_header("TRADENAME_ID"), "trade_id")
        self.assertEqual(normalize_header("Label ตะกร้า"), "label")
        self.assertEqual(normalize_header("ชั้น"), "floor")
        self.assertEqual(normalize_header("วันที่เปลี่ยนแผงยา"), "blister_date")
        self.assertEqual(normalize_header("Unknown Column"), "unknown_column")
        self.assertEqual(normalize_header(None), "")

    def test_payload_keys(self):
        self.assertEqual(
            normalize_row_keys({"medicationID": "MED01", "blisterImageURL": "x", "date": "5/3/2024"}),
            {"medication_id": "MED01", "blister_image_url": "x", "blister_date": "5/3/2024"},
        )

    def test_load_workbook_rows(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "pharmacy.xlsx"
            build_workbook(path)

            rows = load_workbook_rows(path)

        self.assertEqual(rows.title, "Pharmacy W1")
        self.assertEqual(
            rows.medication,
            [
                {"medication_id": "MED01", "medical_name": "Paracetamol"},
                {"medication_id": "MED02", "medical_name": "Ibuprofen"},
            ],
        )
        self.assertEqual(rows.house[0]["address"], "A-1-2")
        self.assertEqual(rows.house[0]["floor"], 1)
        self.assertEqual(rows.house[0]["label"], "ตะกร้า 1")
        self.assertEqual(rows.brand[0]["trade_id"], "T01")
        self.assertEqual(len(rows.blister_date), 2)
        self.assertEqual(rows.blister_date[0]["blister_date"], "5/3/2024")
        self.assertEqual(rows.blister_date[1]["blister_date"], datetime(2024, 2, 1))

    def test_missing_tab(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "pharmacy.xlsx"
            build_workbook(path, skip_sheet="Pictures")
            with self.assertRaises(ValueError) as ctx:
                load_workbook_rows(path)
        self.assertIn("sheet is invalid", str(ctx.exception))
        self.assertIn("Pictures", str(ctx.exception))

    def test_rejects_missing_and_non_xlsx_files(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            with self.assertRaises(FileNotFoundError):
                load_workbook_rows(Path(tmp_dir) / "missing.xlsx")

            csv_path = Path(tmp_dir) / "pharmacy.csv"
            csv_path.write_text("Medication_ID\nMED01\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_workbook_rows(csv_path)


if __name__ == "__main__":
    unittest.main()
