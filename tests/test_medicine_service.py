import unittest
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import sessionmaker

from pharma_sheet.database import build_engine, init_db
from pharma_sheet.models import (
    Medicine,
    MedicineBlisterDateHistory,
    MedicineBrand,
    MedicineHouse,
    Warehouse,
)
from pharma_sheet.schemas.medicine import Pagination
from pharma_sheet.services.medicine_service import (
    ById,
    ByMedication,
    ByWarehouse,
    MedicineSortKey,
    SortDirection,
    house_filter_from_params,
    list_blister_date_history,
    list_medicine_brands,
    list_medicine_houses,
    list_medicines,
    paginate,
    parse_sort,
)


class SortAndFilterTest(unittest.TestCase):
    def test_parse_sort(self):
        default = parse_sort(None)
        self.assertIs(default.key, MedicineSortKey.MEDICATION_ID)
        self.assertIs(default.direction, SortDirection.ASC)

        sort = parse_sort("medicalName DESC")
        self.assertIs(sort.key, MedicineSortKey.MEDICAL_NAME)
        self.assertIs(sort.direction, SortDirection.DESC)

    def test_parse_sort_rejects_unknown_values(self):
        with self.assertRaises(ValueError):
            parse_sort("medical_name; DROP TABLE pharma_sheet_medicines")
        with self.assertRaises(ValueError):
            parse_sort("medicalName sideways")
        with self.assertRaises(ValueError):
            parse_sort("medicalName asc extra")

    def test_house_filter_needs_a_value(self):
        for variant in (ByWarehouse, ByMedication, ById):
            with self.assertRaises(ValueError):
                variant("")
            with self.assertRaises(ValueError):
                variant("   ")
        self.assertEqual(ByWarehouse(" W1 ").warehouse_id, "W1")

    def test_house_filter_from_params(self):
        self.assertEqual(house_filter_from_params(medication_id="MED01"), ByMedication("MED01"))
        with self.assertRaises(ValueError):
            house_filter_from_params()
        with self.assertRaises(ValueError):
            house_filter_from_params(warehouse_id="W1", record_id="abc")


class MedicineQueryTest(unittest.TestCase):
    def setUp(self):
        self.engine = build_engine("sqlite://")
        init_db(bind=self.engine)
        self.db = sessionmaker(bind=self.engine)()

        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.db.add_all(
            [
                Warehouse(warehouse_id="W1", name="Main"),
                Warehouse(warehouse_id="W2", name="North"),
                Medicine(medication_id="MED01", medical_name="Paracetamol", created_at=created),
                Medicine(
                    medication_id="MED02",
                    medical_name="Amoxicillin",
                    created_at=created + timedelta(days=1),
                ),
                Medicine(
                    medication_id="MED03",
                    medical_name="Ibuprofen",
                    created_at=created + timedelta(days=2),
                ),
            ]
        )
        self.db.flush()
        self.db.add_all(
            [
                MedicineHouse(
                    warehouse_id="W1",
                    medication_id="MED01",
                    locker="B",
                    floor=1,
                    no=1,
                    address="B-1-1",
                ),
                MedicineHouse(
                    warehouse_id="W1",
                    medication_id="MED02",
                    locker="A",
                    floor=2,
                    no=1,
                    address="A-2-1",
                ),
                MedicineHouse(
                    warehouse_id="W2",
                    medication_id="MED01",
                    locker="A",
                    floor=1,
                    no=1,
                    address="A-1-1",
                ),
                MedicineBrand(medication_id="MED01", trade_id="T02", trade_name="Tylenol"),
                MedicineBrand(medication_id="MED01", trade_id="T01", trade_name="Sara"),
                MedicineBrand(medication_id="MED02", trade_id="T01", trade_name="Amoxil"),
            ]
        )
        self.db.commit()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_list_medicines_sorted_and_paged(self):
        pagination = Pagination(limit=2, page=1)
        medicines, total = list_medicines(self.db, pagination, sort=parse_sort("medicalName"))
        self.assertEqual(total, 3)
        self.assertEqual([m.medical_name for m in medicines], ["Amoxicillin", "Ibuprofen"])

        second = Pagination(limit=2, page=2)
        medicines, _total = list_medicines(self.db, second, sort=parse_sort("createdAt desc"))
        self.assertEqual([m.medication_id for m in medicines], ["MED01"])

        page = paginate(medicines, total, second).model_dump(by_alias=True)
        self.assertEqual(page["metadata"]["totalItem"], 3)
        self.assertEqual(page["metadata"]["totalPage"], 2)
        self.assertEqual(page["metadata"]["currentPage"], 2)
        self.assertEqual(page["data"][0]["medicationID"], "MED01")

    def test_list_medicines_search(self):
        medicines, total = list_medicines(self.db, Pagination(), search="profen")
        self.assertEqual(total, 1)
        self.assertEqual(medicines[0].medication_id, "MED03")

        medicines, total = list_medicines(self.db, Pagination(), search="nothing")
        self.assertEqual((medicines, total), ([], 0))

    def test_list_medicine_houses(self):
        houses = list_medicine_houses(self.db, ByWarehouse("W1"))
        self.assertEqual([house.address for house in houses], ["A-2-1", "B-1-1"])

        houses = list_medicine_houses(self.db, ByMedication("MED01"))
        self.assertEqual({house.warehouse_id for house in houses}, {"W1", "W2"})

        house_id = houses[0].id
        self.assertEqual([house.id for house in list_medicine_houses(self.db, ById(house_id))], [house_id])

    def test_by_id_matches_the_stored_id_not_the_sheet_house_id(self):
        house = MedicineHouse(
            warehouse_id="W1",
            medication_id="MED03",
            house_id="H9",
            locker="C",
            floor=1,
            no=1,
            address="C-1-1",
        )
        self.db.add(house)
        self.db.commit()

        self.assertEqual(ById(f" {house.id} ").id, house.id)
        self.assertEqual([item.id for item in list_medicine_houses(self.db, ById(house.id))], [house.id])
        self.assertEqual(list_medicine_houses(self.db, ById("H9")), [])
        self.assertEqual(house_filter_from_params(record_id=house.id), ById(house.id))

    def test_list_medicine_brands(self):
        brands = list_medicine_brands(self.db, medication_id="MED01")
        self.assertEqual([brand.trade_id for brand in brands], ["T01", "T02"])
        self.assertEqual(len(list_medicine_brands(self.db)), 3)

    def test_list_blister_date_history(self):
        brand = list_medicine_brands(self.db, medication_id="MED01")[0]
        self.db.add_all(
            [
                MedicineBlisterDateHistory(
                    warehouse_id="W1",
                    medication_id="MED01",
                    brand_id=brand.id,
                    trade_id="T01",
                    blister_change_date=date(2024, 3, 5),
                ),
                MedicineBlisterDateHistory(
                    warehouse_id="W1",
                    medication_id="MED01",
                    blister_change_date=date(2024, 4, 1),
                ),
                MedicineBlisterDateHistory(
                    warehouse_id="W2",
                    medication_id="MED01",
                    blister_change_date=date(2024, 4, 1),
                ),
            ]
        )
        self.db.commit()

        history = list_blister_date_history(self.db, "W1")
        self.assertEqual(
            [(item.blister_change_date, item.trade_id) for item in history],
            [(date(2024, 4, 1), None), (date(2024, 3, 5), "T01")],
        )


if __name__ == "__main__":
    unittest.main()
