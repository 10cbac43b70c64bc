from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.utils.datetime_tz import assume_local_tz


class CamelModel(BaseModel):
    """Payloads use the camelCase names of the stored documents."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _local(value: datetime | None) -> datetime | None:
    # Naive dates are farm-local calendar dates
    return assume_local_tz(value) if value is not None else None


class FemaleBreedingInfoIn(CamelModel):
    female_id: UUID
    pregnancy_confirmed_date: datetime | None = None
    expected_birth_date: datetime | None = None
    actual_birth_date: datetime | None = None
    offspring: list[UUID] = Field(default_factory=list)

    @field_validator("pregnancy_confirmed_date", "expected_birth_date", "actual_birth_date")
    @classmethod
    def ensure_aware_local(cls, v: datetime | None) -> datetime | None:
        return _local(v)


class BreedingCreate(CamelModel):
    male_id: UUID
    female_breeding_info: list[FemaleBreedingInfoIn] = Field(default_factory=list)
    breeding_date: datetime | None = None
    notes: str | None = None

    @field_validator("breeding_date")
    @classmethod
    def ensure_aware_local(cls, v: datetime | None) -> datetime | None:
        return _local(v)


class BreedingUpdate(CamelModel):
    """Only fields sent by the client are merged."""

    breeding_id: str | None = None
    male_id: UUID | None = None
    breeding_date: datetime | None = None
    female_breeding_info: list[FemaleBreedingInfoIn] | None = None
    notes: str | None = None

    @field_validator("breeding_date")
    @classmethod
    def ensure_aware_local(cls, v: datetime | None) -> datetime | None:
        return _local(v)


class FemaleBreedingInfoResponse(CamelModel):
    female_id: UUID
    pregnancy_confirmed_date: datetime | None
    expected_birth_date: datetime | None
    actual_birth_date: datetime | None
    offspring: list[UUID]


class CommentResponse(CamelModel):
    id: UUID
    content: str
    created_by: UUID
    urgency: str
    created_at: datetime


class BreedingResponse(CamelModel):
    id: UUID
    farm_id: UUID
    farmer_id: UUID
    breeding_id: str
    male_id: UUID
    breeding_date: datetime | None
    female_breeding_info: list[FemaleBreedingInfoResponse]
    notes: str
    comments: list[CommentResponse]
    created_at: datetime
    updated_at: datetime
    version: int


class BreedingListResponse(CamelModel):
    items: list[BreedingResponse]
    needs_pregnancy_confirmation: list[BreedingResponse]
    needs_birth_confirmation: list[BreedingResponse]
    finished: list[BreedingResponse]


class ConfirmPregnancyInput(CamelModel):
    female_ids: list[UUID] = Field(min_length=1)
    confirmed_date: datetime | None = None

    @field_validator("confirmed_date")
    @classmethod
    def ensure_aware_local(cls, v: datetime | None) -> datetime | None:
        return _local(v)


class UnconfirmInput(CamelModel):
    female_id: UUID


class RemoveAnimalInput(CamelModel):
    animal_id: UUID


class OffspringIn(CamelModel):
    animal_number: str
    gender: str | None = None
    weight: Decimal | None = None
    color: str | None = None
    status: str = "healthy"
    health_notes: str | None = None


class BirthInput(CamelModel):
    female_id: UUID
    actual_birth_date: datetime
    offspring: list[OffspringIn] = Field(default_factory=list)

    @field_validator("actual_birth_date")
    @classmethod
    def ensure_aware_local(cls, v: datetime) -> datetime:
        return assume_local_tz(v)


class RetractOffspringInput(CamelModel):
    animal_ids: list[UUID]


class RetractOffspringResponse(CamelModel):
    removed_ids: list[UUID]


class CommentCreate(CamelModel):
    content: str
    urgency: str | None = None


class UrgencyUpdate(CamelModel):
    urgency: str


class BirthWindowEntryResponse(CamelModel):
    record_id: UUID
    breeding_id: str
    female_id: UUID
    expected_birth_date: datetime
    days_diff: int


class BirthsWindowResponse(CamelModel):
    past_due: list[BirthWindowEntryResponse]
    upcoming: list[BirthWindowEntryResponse]
    days: int


class BirthsWindowSummaryResponse(CamelModel):
    past_due_count: int
    upcoming_count: int
    window_days: int


class BreedingStatsResponse(CamelModel):
    total_breedings: int
    active_pregnancies: int
    upcoming_births: int
    total_offspring: int


class RecentBirthResponse(CamelModel):
    record_id: UUID
    breeding_id: str
    female_id: UUID
    actual_birth_date: datetime
    offspring: list[UUID]


class GestationConfigResponse(CamelModel):
    species: str
    gestation_days: int
    average_litter_size: float
    min_breeding_age: int
    max_breeding_age: int | None
    breeding_cycle_days: int
    weaning_days: int
    breeding_season_start: int | None
    breeding_season_end: int | None
    description: str


class BreedingAdviceResponse(CamelModel):
    species: str
    breeding_date: date
    expected_birth_date: date
    in_breeding_season: bool
    advice: list[str]
