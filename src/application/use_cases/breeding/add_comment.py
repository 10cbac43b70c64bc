from __future__ import annotations

from uuid import UUID

from src.application.errors import ValidationError
from src.application.use_cases.breeding.update_breeding_record import RecordUpdate
from src.domain.models.breeding_record import BreedingRecord
from src.domain.models.comment import Comment
from src.domain.value_objects.urgency import Urgency


def parse_urgency(value: str | Urgency | None) -> Urgency:
    if value is None:
        return Urgency.NONE
    try:
        return Urgency(value)
    except ValueError as exc:
        valid = ", ".join(u.value for u in Urgency)
        raise ValidationError(f"Invalid urgency. Must be one of: {valid}") from exc


def build_update(
    record: BreedingRecord,
    actor_user_id: UUID | None,
    content: str,
    urgency: str | Urgency | None = None,
) -> tuple[Comment, RecordUpdate]:
    if actor_user_id is None:
        raise ValidationError("User not authenticated")
    if not content or not content.strip():
        raise ValidationError("Comment content is required")
    comment = Comment.create(
        content=content.strip(),
        created_by=actor_user_id,
        urgency=parse_urgency(urgency).value,
    )
    # Newest first
    return comment, RecordUpdate.of(comments=[comment, *record.comments])
