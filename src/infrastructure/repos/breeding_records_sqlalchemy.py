from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.errors import NotFound, PersistenceError
from src.application.interfaces.repositories.breeding_records import BreedingRecordsRepository
from src.domain.models.breeding_record import BreedingRecord, FemaleBreedingInfo
from src.domain.models.comment import Comment
from src.infrastructure.db.orm.breeding_record import BreedingRecordORM
from src.utils.datetime_tz import from_epoch_ms, to_epoch_ms, to_utc, utc_to_local


@contextmanager
def persistence_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Could not {action}", details={"reason": str(exc)}) from exc


def _to_db(value: datetime | None) -> datetime | None:
    return to_utc(value) if value is not None else None


def female_to_document(info: FemaleBreedingInfo) -> dict[str, Any]:
    return {
        "femaleId": str(info.female_id),
        "pregnancyConfirmedDate": to_epoch_ms(info.pregnancy_confirmed_date) or None,
        "expectedBirthDate": to_epoch_ms(info.expected_birth_date) or None,
        "actualBirthDate": to_epoch_ms(info.actual_birth_date) or None,
        "offspring": [str(animal_id) for animal_id in info.offspring],
    }


def female_from_document(doc: dict[str, Any]) -> FemaleBreedingInfo:
    return FemaleBreedingInfo(
        female_id=UUID(doc["femaleId"]),
        pregnancy_confirmed_date=from_epoch_ms(doc.get("pregnancyConfirmedDate")),
        expected_birth_date=from_epoch_ms(doc.get("expectedBirthDate")),
        actual_birth_date=from_epoch_ms(doc.get("actualBirthDate")),
        offspring=[UUID(animal_id) for animal_id in doc.get("offspring") or []],
    )


def comment_to_document(comment: Comment) -> dict[str, Any]:
    return {
        "id": str(comment.id),
        "content": comment.content,
        "createdBy": str(comment.created_by),
        "urgency": comment.urgency,
        "createdAt": to_epoch_ms(comment.created_at),
    }


def comment_from_document(doc: dict[str, Any]) -> Comment:
    return Comment(
        id=UUID(doc["id"]),
        content=doc.get("content") or "",
        created_by=UUID(doc["createdBy"]),
        urgency=doc.get("urgency") or "none",
        created_at=from_epoch_ms(doc.get("createdAt")) or datetime.now(timezone.utc),
    )


class BreedingRecordsSQLAlchemyRepository(BreedingRecordsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _to_domain(self, orm: BreedingRecordORM) -> BreedingRecord:
        return BreedingRecord(
            id=orm.id,
            farm_id=orm.farm_id,
            farmer_id=orm.farmer_id,
            breeding_id=orm.breeding_id,
            male_id=orm.male_id,
            breeding_date=utc_to_local(orm.breeding_date),
            female_breeding_info=[female_from_document(d) for d in orm.female_breeding_info or []],
            notes=orm.notes or "",
            comments=[comment_from_document(d) for d in orm.comments or []],
            created_at=utc_to_local(orm.created_at),
            updated_at=utc_to_local(orm.updated_at),
            version=orm.version,
        )

    def _write(self, orm: BreedingRecordORM, record: BreedingRecord) -> None:
        orm.breeding_id = record.breeding_id
        orm.male_id = record.male_id
        orm.breeding_date = _to_db(record.breeding_date)
        orm.female_breeding_info = [female_to_document(i) for i in record.female_breeding_info]
        orm.comments = [comment_to_document(c) for c in record.comments]
        orm.notes = record.notes
        orm.updated_at = _to_db(record.updated_at)
        orm.version = record.version

    async def add(self, record: BreedingRecord) -> BreedingRecord:
        orm = BreedingRecordORM(
            id=record.id,
            farm_id=record.farm_id,
            farmer_id=record.farmer_id,
            created_at=_to_db(record.created_at),
        )
        self._write(orm, record)
        with persistence_errors("create breeding record"):
            self.session.add(orm)
            await self.session.flush()
        return self._to_domain(orm)

    async def _get_orm(self, farm_id: UUID, record_id: UUID) -> BreedingRecordORM | None:
        stmt = (
            select(BreedingRecordORM)
            .where(BreedingRecordORM.farm_id == farm_id)
            .where(BreedingRecordORM.id == record_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, record: BreedingRecord) -> BreedingRecord:
        with persistence_errors("update breeding record"):
            orm = await self._get_orm(record.farm_id, record.id)
            if not orm:
                raise NotFound(f"Breeding record {record.id} not found")
            self._write(orm, record)
            await self.session.flush()
        return self._to_domain(orm)

    async def get(self, farm_id: UUID, record_id: UUID) -> BreedingRecord | None:
        with persistence_errors("load breeding record"):
            orm = await self._get_orm(farm_id, record_id)
        return self._to_domain(orm) if orm else None

    async def list(self, farm_id: UUID) -> list[BreedingRecord]:
        stmt = (
            select(BreedingRecordORM)
            .where(BreedingRecordORM.farm_id == farm_id)
            .order_by(BreedingRecordORM.breeding_date.desc(), BreedingRecordORM.created_at.desc())
        )
        with persistence_errors("list breeding records"):
            result = await self.session.execute(stmt)
            rows = result.scalars().all()
        return [self._to_domain(orm) for orm in rows]

    async def count_by_breeding_day(
        self,
        farm_id: UUID,
        day_start: datetime,
        day_end: datetime,
    ) -> int:
        """Records whose breeding date falls in [day_start, day_end)."""
        stmt = (
            select(func.count())
            .select_from(BreedingRecordORM)
            .where(BreedingRecordORM.farm_id == farm_id)
            .where(BreedingRecordORM.breeding_date >= to_utc(day_start))
            .where(BreedingRecordORM.breeding_date < to_utc(day_end))
        )
        with persistence_errors("count breeding records"):
            result = await self.session.execute(stmt)
            return int(result.scalar_one() or 0)

    async def delete(self, farm_id: UUID, record_id: UUID) -> None:
        with persistence_errors("delete breeding record"):
            orm = await self._get_orm(farm_id, record_id)
            if not orm:
                raise NotFound(f"Breeding record {record_id} not found")
            await self.session.delete(orm)
            await self.session.flush()
