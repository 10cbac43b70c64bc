from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from src.application.errors import NotFound
from src.application.services.birth_window import BirthWindowEntry
from src.application.services.breeding_manager import BreedingManager
from src.application.use_cases.breeding.record_birth import OffspringSpec
from src.application.use_cases.breeding.update_breeding_record import RecordUpdate
from src.domain.models.breeding_record import BreedingRecord, FemaleBreedingInfo
from src.infrastructure.auth.context import ActorContext
from src.interfaces.http.deps import get_actor_context, get_breeding_manager
from src.interfaces.http.schemas.breedings import (
    BirthInput,
    BirthsWindowResponse,
    BirthsWindowSummaryResponse,
    BirthWindowEntryResponse,
    BreedingCreate,
    BreedingListResponse,
    BreedingResponse,
    BreedingStatsResponse,
    BreedingUpdate,
    CommentCreate,
    CommentResponse,
    ConfirmPregnancyInput,
    FemaleBreedingInfoIn,
    RecentBirthResponse,
    RemoveAnimalInput,
    RetractOffspringInput,
    RetractOffspringResponse,
    UnconfirmInput,
    UrgencyUpdate,
)

router = APIRouter(prefix="/breedings", tags=["breedings"])


def _to_response(record: BreedingRecord) -> BreedingResponse:
    return BreedingResponse.model_validate(record)


def _to_females(items: list[FemaleBreedingInfoIn]) -> list[FemaleBreedingInfo]:
    return [
        FemaleBreedingInfo(
            female_id=item.female_id,
            pregnancy_confirmed_date=item.pregnancy_confirmed_date,
            expected_birth_date=item.expected_birth_date,
            actual_birth_date=item.actual_birth_date,
            offspring=list(item.offspring),
        )
        for item in items
    ]


def _entry(entry: BirthWindowEntry) -> BirthWindowEntryResponse:
    return BirthWindowEntryResponse(
        record_id=entry.record.id,
        breeding_id=entry.record.breeding_id,
        female_id=entry.info.female_id,
        expected_birth_date=entry.info.expected_birth_date,
        days_diff=entry.days_diff,
    )


def _record_or_404(manager: BreedingManager, record_id: UUID) -> BreedingRecord:
    record = manager.get_record(record_id)
    if record is None:
        raise NotFound(f"Breeding record {record_id} not found")
    return record


@router.get("", response_model=BreedingListResponse)
async def list_breedings_endpoint(
    reload: bool = False,
    manager: BreedingManager = Depends(get_breeding_manager),
):
    if reload:
        await manager.load()
    groups = manager.classify()
    return BreedingListResponse(
        items=[_to_response(r) for r in manager.records],
        needs_pregnancy_confirmation=[_to_response(r) for r in groups.needs_pregnancy_confirmation],
        needs_birth_confirmation=[_to_response(r) for r in groups.needs_birth_confirmation],
        finished=[_to_response(r) for r in groups.finished],
    )


@router.post("", response_model=BreedingResponse, status_code=status.HTTP_201_CREATED)
async def create_breeding_endpoint(
    payload: BreedingCreate,
    context: ActorContext = Depends(get_actor_context),
    manager: BreedingManager = Depends(get_breeding_manager),
):
    record = await manager.create_record(
        context.user_id,
        payload.male_id,
        _to_females(payload.female_breeding_info),
        breeding_date=payload.breeding_date,
        notes=payload.notes,
    )
    return _to_response(record)


@router.get("/births-window", response_model=BirthsWindowResponse)
async def births_window_endpoint(
    days: int | None = Query(default=None, ge=0),
    manager: BreedingManager = Depends(get_breeding_manager),
):
    window = manager.get_births_window(days)
    return BirthsWindowResponse(
        past_due=[_entry(e) for e in window.past_due],
        upcoming=[_entry(e) for e in window.upcoming],
        days=window.days,
    )


@router.get("/births-window/summary", response_model=BirthsWindowSummaryResponse)
async def births_window_summary_endpoint(
    days: int | None = Query(default=None, ge=0),
    manager: BreedingManager = Depends(get_breeding_manager),
):
    summary = manager.get_births_window_summary(days)
    return BirthsWindowSummaryResponse(
        past_due_count=summary.past_due_count,
        upcoming_count=summary.upcoming_count,
        window_days=summary.window_days,
    )


@router.get("/stats", response_model=BreedingStatsResponse)
async def stats_endpoint(manager: BreedingManager = Depends(get_breeding_manager)):
    stats = manager.get_stats()
    return BreedingStatsResponse(
        total_breedings=stats.total_breedings,
        active_pregnancies=stats.active_pregnancies,
        upcoming_births=stats.upcoming_births,
        total_offspring=stats.total_offspring,
    )


@router.get("/recent-births", response_model=list[RecentBirthResponse])
async def recent_births_endpoint(
    days: int | None = Query(default=None, ge=0),
    manager: BreedingManager = Depends(get_breeding_manager),
):
    return [
        RecentBirthResponse(
            record_id=birth.record.id,
            breeding_id=birth.record.breeding_id,
            female_id=birth.info.female_id,
            actual_birth_date=birth.info.actual_birth_date,
            offspring=list(birth.info.offspring),
        )
        for birth in manager.get_recent_births(days)
    ]


@router.get("/active-pregnancies", response_model=list[BreedingResponse])
async def active_pregnancies_endpoint(manager: BreedingManager = Depends(get_breeding_manager)):
    return [_to_response(r) for r in manager.get_active_pregnancies()]


@router.get("/by-animal/{animal_id}", response_model=list[BreedingResponse])
async def records_by_animal_endpoint(
    animal_id: UUID,
    manager: BreedingManager = Depends(get_breeding_manager),
):
    return [_to_response(r) for r in manager.get_records_by_animal(animal_id)]


@router.post("/offspring/retract", response_model=RetractOffspringResponse)
async def retract_offspring_endpoint(
    payload: RetractOffspringInput,
    manager: BreedingManager = Depends(get_breeding_manager),
):
    removed = await manager.retract_offspring(payload.animal_ids)
    return RetractOffspringResponse(removed_ids=removed)


@router.get("/{record_id}", response_model=BreedingResponse)
async def get_breeding_endpoint(
    record_id: UUID,
    manager: BreedingManager = Depends(get_breeding_manager),
):
    return _to_response(_record_or_404(manager, record_id))


@router.patch("/{record_id}", response_model=BreedingResponse)
async def update_breeding_endpoint(
    record_id: UUID,
    payload: BreedingUpdate,
    manager: BreedingManager = Depends(get_breeding_manager),
):
    values = payload.model_dump(exclude_unset=True)
    if "female_breeding_info" in values:
        females = payload.female_breeding_info
        values["female_breeding_info"] = _to_females(females) if females is not None else None
    record = await manager.update_record(record_id, RecordUpdate.of(**values))
    return _to_response(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_breeding_endpoint(
    record_id: UUID,
    manager: BreedingManager = Depends(get_breeding_manager),
):
    await manager.delete_record(record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{record_id}/confirm", response_model=BreedingResponse)
async def confirm_pregnancy_endpoint(
    record_id: UUID,
    payload: ConfirmPregnancyInput,
    manager: BreedingManager = Depends(get_breeding_manager),
):
    record = _record_or_404(manager, record_id)
    updated = await manager.confirm_pregnancy(record, payload.female_ids, payload.confirmed_date)
    return _to_response(updated)


@router.post("/{record_id}/unconfirm", response_model=BreedingResponse)
async def unconfirm_pregnancy_endpoint(
    record_id: UUID,
    payload: UnconfirmInput,
    manager: BreedingManager = Depends(get_breeding_manager),
):
    record = _record_or_404(manager, record_id)
    return _to_response(await manager.unconfirm_pregnancy(record, payload.female_id))


@router.post("/{record_id}/remove-animal", response_model=BreedingResponse | None)
async def remove_animal_endpoint(
    record_id: UUID,
    payload: RemoveAnimalInput,
    manager: BreedingManager = Depends(get_breeding_manager),
):
    """Returns null when removing the animal deleted the whole record."""
    record = _record_or_404(manager, record_id)
    updated = await manager.remove_from_breeding(record, payload.animal_id)
    return _to_response(updated) if updated is not None else None


@router.post("/{record_id}/births", response_model=BreedingResponse)
async def record_birth_endpoint(
    record_id: UUID,
    payload: BirthInput,
    manager: BreedingManager = Depends(get_breeding_manager),
):
    record = _record_or_404(manager, record_id)
    offspring = [
        OffspringSpec(
            animal_number=item.animal_number,
            gender=item.gender,
            weight=item.weight,
            color=item.color,
            status=item.status,
            health_notes=item.health_notes,
        )
        for item in payload.offspring
    ]
    updated = await manager.record_birth(
        record, payload.female_id, payload.actual_birth_date, offspring
    )
    return _to_response(updated)


@router.post(
    "/{record_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment_endpoint(
    record_id: UUID,
    payload: CommentCreate,
    context: ActorContext = Depends(get_actor_context),
    manager: BreedingManager = Depends(get_breeding_manager),
):
    comment = await manager.add_comment(record_id, context.user_id, payload.content, payload.urgency)
    return CommentResponse.model_validate(comment)


@router.patch("/{record_id}/comments/{comment_id}", response_model=BreedingResponse)
async def update_comment_urgency_endpoint(
    record_id: UUID,
    comment_id: UUID,
    payload: UrgencyUpdate,
    manager: BreedingManager = Depends(get_breeding_manager),
):
    record = await manager.update_comment_urgency(record_id, comment_id, payload.urgency)
    return _to_response(record)
