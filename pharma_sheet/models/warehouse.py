from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from pharma_sheet.database.base import Base


class Warehouse(Base):
    __tablename__ = "pharma_sheet_warehouses"

    warehouse_id = Column(String, primary_key=True)
    name = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


__all__ = ["Warehouse"]
