from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from src.domain.value_objects.urgency import Urgency


@dataclass(slots=True)
class Comment:
    id: UUID
    content: str
    created_by: UUID
    urgency: str = Urgency.NONE.value
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(cls, content: str, created_by: UUID, urgency: str = Urgency.NONE.value) -> Comment:
        return cls(
            id=uuid4(),
            content=content,
            created_by=created_by,
            urgency=urgency,
            created_at=datetime.now(timezone.utc),
        )
