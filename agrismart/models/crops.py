"""Crop ORM model: the persistent crop registry.

``soil_data`` / ``activities`` / ``costs`` are JSONB documents.  Activity and
cost logs are append-only from the API's point of view; the row itself is only
removed by an explicit delete.

    activities: [{"id": "...", "type": "Irrigated", "date": "2024-03-12", "notes": "..."}]
    costs:      [{"id": "...", "category": "Labor", "amount": 8000, "date": "2024-02-05"}]
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Enum, Float, Index, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from agrismart.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from agrismart.models.enums import IrrigationMethodEnum


class Crop(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A registered crop plot."""

    __tablename__ = "crops"
    __table_args__ = (Index("ix_crops_crop_type", "crop_type"),)

    crop_type: Mapped[str] = mapped_column(String(100), nullable=False)
    variety: Mapped[str] = mapped_column(
        String(255), nullable=False, default="", server_default=""
    )
    planting_date: Mapped[date] = mapped_column(Date, nullable=False)
    farm_size: Mapped[float] = mapped_column(Float, nullable=False)
    plot_location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    irrigation_method: Mapped[IrrigationMethodEnum] = mapped_column(
        Enum(
            IrrigationMethodEnum,
            name="irrigation_method",
            create_constraint=False,
            native_enum=True,
        ),
        nullable=False,
        default=IrrigationMethodEnum.drip,
    )
    health_score: Mapped[float] = mapped_column(Float, nullable=False, default=100.0)
    current_stage: Mapped[str | None] = mapped_column(String(100), nullable=True)
    target_yield: Mapped[float] = mapped_column(Float, nullable=False, default=10.0)
    soil_data: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    activities: Mapped[list] = mapped_column(
        JSONB, nullable=False, default=list, server_default="[]"
    )
    costs: Mapped[list] = mapped_column(
        JSONB, nullable=False, default=list, server_default="[]"
    )

    def __repr__(self) -> str:
        return (
            f"<Crop id={self.id} type={self.crop_type!r} "
            f"planted={self.planting_date}>"
        )
