import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint

from pharma_sheet.database.base import Base


class MedicineHouse(Base):
    __tablename__ = "pharma_sheet_medicine_houses"

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
    house_id = Column(String)

    locker = Column(String, nullable=False)
    floor = Column(Integer, nullable=False)
    no = Column(Integer, nullable=False)
    # Address text as written in the sheet ("locker-floor-no"); part of the natural key.
    address = Column(String, nullable=False)
    label = Column(String)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("warehouse_id", "medication_id", "address", name="unique_house"),
        Index("idx_house_medication", "medication_id"),
    )


__all__ = ["MedicineHouse"]
