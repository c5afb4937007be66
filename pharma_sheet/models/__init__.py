from pharma_sheet.models.blister_date_history import MedicineBlisterDateHistory
from pharma_sheet.models.medicine import Medicine
from pharma_sheet.models.medicine_brand import MedicineBrand
from pharma_sheet.models.medicine_house import MedicineHouse
from pharma_sheet.models.warehouse import Warehouse
from pharma_sheet.models.warehouse_sheet import WarehouseSheet

__all__ = [
    "Medicine",
    "MedicineBlisterDateHistory",
    "MedicineBrand",
    "MedicineHouse",
    "Warehouse",
    "WarehouseSheet",
]
