from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String

from pharma_sheet.database.base import Base


class WarehouseSheet(Base):
    """Which spreadsheet a warehouse was last synced from."""

    __tablename__ = "pharma_sheet_warehouse_sheets"

    warehouse_id = Column(
        String,
        ForeignKey("pharma_sheet_warehouses.warehouse_id", ondelete="CASCADE"),
        primary_key=True,
    )
    spreadsheet_title = Column(String, nullable=False, default="")
    source = Column(String, nullable=False, default="")

    medicine_sheet_name = Column(String, nullable=False)
    medicine_brand_sheet_name = Column(String, nullable=False)
    medicine_house_sheet_name = Column(String, nullable=False)
    medicine_blister_date_history_sheet_name = Column(String, nullable=False)

    latest_synced_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


__all__ = ["WarehouseSheet"]
