import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, String

from pharma_sheet.database.base import Base


class MedicineBlisterDateHistory(Base):
    __tablename__ = "pharma_sheet_medicine_blister_date_histories"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    warehouse_id = Column(
        String,
        ForeignKey("pharma_sheet_warehouses.warehouse_id", ondelete="CASCADE"),
        nullable=False,
    )
    medication_id = Column(
        String,
        ForeignKey("pharma_sheet_medicines.medication_id", ondelete="CASCADE"),
        nullable=False,
    )
    brand_id = Column(
        String(36),
        ForeignKey("pharma_sheet_medicine_brands.id", ondelete="CASCADE"),
    )
    # Trade id as written in the sheet, kept even when no brand matches it.
    trade_id = Column(String)
    blister_change_date = Column(Date, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("idx_blister_history_warehouse", "warehouse_id", "medication_id"),
    )


__all__ = ["MedicineBlisterDateHistory"]
