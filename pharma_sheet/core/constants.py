from pathlib import Path


PACKAGE_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = PACKAGE_DIR.parent

KIND_MEDICATION = "medication"
KIND_HOUSE = "house"
KIND_BRAND = "brand"
KIND_BLISTER_DATE = "blisterDate"

# Writes must follow this order: houses and brands reference medications,
# blister history references brands.
SYNC_KIND_ORDER = (KIND_MEDICATION, KIND_HOUSE, KIND_BRAND, KIND_BLISTER_DATE)
