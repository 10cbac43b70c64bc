from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from src.domain.value_objects.animal_status import AnimalStage, AnimalStatus


@dataclass(slots=True)
class Animal:
    id: UUID
    farm_id: UUID
    animal_number: str
    species: str
    stage: str = AnimalStage.ADULT.value
    gender: str | None = None
    weight: Decimal | None = None
    color: str | None = None
    status: str = AnimalStatus.HEALTHY.value
    health_notes: str | None = None
    birth_date: datetime | None = None

    # Genealogy fields
    mother_id: UUID | None = None
    father_id: UUID | None = None

    notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    @classmethod
    def create(
        cls,
        farm_id: UUID,
        animal_number: str,
        species: str,
        stage: str = AnimalStage.ADULT.value,
        gender: str | None = None,
        weight: Decimal | None = None,
        color: str | None = None,
        status: str = AnimalStatus.HEALTHY.value,
        health_notes: str | None = None,
        birth_date: datetime | None = None,
        mother_id: UUID | None = None,
        father_id: UUID | None = None,
        notes: str | None = None,
    ) -> Animal:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            farm_id=farm_id,
            animal_number=animal_number,
            species=species,
            stage=stage,
            gender=gender,
            weight=weight,
            color=color,
            status=status,
            health_notes=health_notes,
            birth_date=birth_date,
            mother_id=mother_id,
            father_id=father_id,
            notes=notes,
            created_at=now,
            updated_at=now,
            version=1,
        )

    def bump_version(self) -> None:
        self.version += 1
        self.updated_at = datetime.now(timezone.utc)
