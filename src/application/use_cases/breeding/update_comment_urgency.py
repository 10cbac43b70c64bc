from __future__ import annotations

from dataclasses import replace
from uuid import UUID

from src.application.errors import NotFound
from src.application.use_cases.breeding.add_comment import parse_urgency
from src.application.use_cases.breeding.update_breeding_record import RecordUpdate
from src.domain.models.breeding_record import BreedingRecord
from src.domain.value_objects.urgency import Urgency


def build_update(record: BreedingRecord, comment_id: UUID, level: str | Urgency) -> RecordUpdate:
    urgency = parse_urgency(level)
    if not any(c.id == comment_id for c in record.comments):
        raise NotFound(f"Comment {comment_id} not found")
    comments = [
        replace(c, urgency=urgency.value) if c.id == comment_id else c for c in record.comments
    ]
    return RecordUpdate.of(comments=comments)
