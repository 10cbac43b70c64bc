from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.db.base import Base


class BreedingRecordORM(Base):
    __tablename__ = "breeding_records"
    __table_args__ = (
        Index("ix_breeding_records_farm_date", "farm_id", "breeding_date"),
        Index("ix_breeding_records_farm_male", "farm_id", "male_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    farm_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)
    farmer_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    breeding_id: Mapped[str] = mapped_column(String(32), nullable=False)
    male_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    breeding_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # camelCase documents with epoch-millisecond dates
    female_breeding_info: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    comments: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
