from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from uuid import UUID, uuid4

from src.domain.models.comment import Comment
from src.utils.datetime_tz import local_date, local_day_start


def _day_start(value: datetime | None) -> datetime | None:
    return local_day_start(value) if value is not None else None


@dataclass(slots=True)
class FemaleBreedingInfo:
    female_id: UUID
    pregnancy_confirmed_date: datetime | None = None
    expected_birth_date: datetime | None = None
    actual_birth_date: datetime | None = None
    offspring: list[UUID] = field(default_factory=list)

    @property
    def is_finished(self) -> bool:
        return self.actual_birth_date is not None

    @property
    def is_pregnant(self) -> bool:
        """Confirmed pregnancy still waiting for its birth."""
        return self.pregnancy_confirmed_date is not None and self.actual_birth_date is None

    def normalized(self) -> FemaleBreedingInfo:
        """Copy with every date field truncated to local day start."""
        return replace(
            self,
            pregnancy_confirmed_date=_day_start(self.pregnancy_confirmed_date),
            expected_birth_date=_day_start(self.expected_birth_date),
            actual_birth_date=_day_start(self.actual_birth_date),
            offspring=list(self.offspring),
        )


@dataclass(slots=True)
class BreedingRecord:
    id: UUID
    farm_id: UUID
    farmer_id: UUID
    breeding_id: str
    male_id: UUID
    breeding_date: datetime | None = None
    female_breeding_info: list[FemaleBreedingInfo] = field(default_factory=list)
    notes: str = ""
    comments: list[Comment] = field(default_factory=list)

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    @classmethod
    def create(
        cls,
        farm_id: UUID,
        farmer_id: UUID,
        breeding_id: str,
        male_id: UUID,
        female_breeding_info: list[FemaleBreedingInfo],
        breeding_date: datetime | None = None,
        notes: str | None = None,
    ) -> BreedingRecord:
        now = datetime.now(timezone.utc)
        return cls(
            id=uuid4(),
            farm_id=farm_id,
            farmer_id=farmer_id,
            breeding_id=breeding_id,
            male_id=male_id,
            breeding_date=_day_start(breeding_date),
            female_breeding_info=[info.normalized() for info in female_breeding_info],
            notes=notes or "",
            comments=[],
            created_at=now,
            updated_at=now,
            version=1,
        )

    def find_female(self, female_id: UUID) -> FemaleBreedingInfo | None:
        for info in self.female_breeding_info:
            if info.female_id == female_id:
                return info
        return None

    def involves(self, animal_id: UUID) -> bool:
        return self.male_id == animal_id or self.find_female(animal_id) is not None

    def invariant_violations(self) -> list[str]:
        problems: list[str] = []
        breeding_day = local_date(self.breeding_date) if self.breeding_date else None
        for info in self.female_breeding_info:
            if info.offspring and info.actual_birth_date is None:
                problems.append(f"Female {info.female_id} has offspring but no birth date")
            if (
                breeding_day is not None
                and info.expected_birth_date is not None
                and local_date(info.expected_birth_date) < breeding_day
            ):
                problems.append(
                    f"Female {info.female_id} expected birth is before the breeding date"
                )
        return problems

    def bump_version(self) -> None:
        self.version += 1
        self.updated_at = datetime.now(timezone.utc)
