import unittest
from datetime import date

from pharma_sheet.core.constants import KIND_HOUSE, KIND_MEDICATION
from pharma_sheet.sync.diff_engine import Classification
from pharma_sheet.sync.metadata import KindCounter, build_sync_metadata, summarize_metadata


class MetadataTest(unittest.TestCase):
    def test_counter_buckets(self):
        counter = KindCounter(sheet_name="Medication_ID")
        counter.add(Classification.NEW)
        counter.add(Classification.UPDATED)
        counter.add(Classification.UNCHANGED)
        counter.add(Classification.INVALID)
        counter.add_skipped(2)

        self.assertEqual(counter.total, 6)
        self.assertEqual(counter.new, 1)
        self.assertEqual(counter.updated, 1)
        self.assertEqual(counter.skipped, 4)
        self.assertEqual(counter.invalid, 1)
        self.assertEqual(counter.total, counter.new + counter.updated + counter.skipped)

    def test_build_sync_metadata(self):
        medication = KindCounter(sheet_name="Medication_ID")
        medication.add(Classification.NEW)
        house = KindCounter(sheet_name="บ้านเลขที่ยา", deleted=2)

        metadata = build_sync_metadata(
            "Pharmacy W1",
            {KIND_MEDICATION: medication, KIND_HOUSE: house},
            synced_on=date(2024, 3, 5),
        )
        payload = metadata.model_dump(by_alias=True)

        self.assertEqual(payload["title"], "Pharmacy W1")
        self.assertEqual(payload["syncedDate"], "2024-03-05")
        self.assertEqual(payload["medication"]["sheetName"], "Medication_ID")
        self.assertEqual(payload["medication"]["totalNewMedicine"], 1)
        self.assertEqual(payload["house"]["totalDeletedMedicine"], 2)
        self.assertEqual(payload["blisterDate"]["totalMedicine"], 0)
        self.assertIn("medication: 1 new, 0 updated, 0 skipped", summarize_metadata(metadata))


if __name__ == "__main__":
    unittest.main()
