import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, UniqueConstraint

from pharma_sheet.database.base import Base


class MedicineBrand(Base):
    __tablename__ = "pharma_sheet_medicine_brands"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    medication_id = Column(
        String,
        ForeignKey("pharma_sheet_medicines.medication_id", ondelete="CASCADE"),
        nullable=False,
    )
    trade_id = Column(String, nullable=False)
    trade_name = Column(String)

    # Drive file identifiers, never the sharing URL.
    blister_image_url = Column(String)
    tablet_image_url = Column(String)
    box_image_url = Column(String)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("medication_id", "trade_id", name="unique_brand"),
        Index("idx_brand_trade_id", "trade_id"),
    )


__all__ = ["MedicineBrand"]
