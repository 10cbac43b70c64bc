from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from src.application.errors import AuthError, ValidationError
from src.domain.value_objects.farm_id import parse_farm_id


@dataclass(slots=True)
class ActorContext:
    """Who is acting and on which farm; the farm may not be selected yet."""

    user_id: UUID
    farm_id: UUID | None = None
    claims: dict[str, Any] = field(default_factory=dict)

    def require_farm(self) -> UUID:
        if self.farm_id is None:
            raise ValidationError("Select a farm first")
        return self.farm_id


def actor_from_claims(claims: dict[str, Any], farm_value: str | None) -> ActorContext:
    subject = claims.get("sub")
    if not subject:
        raise AuthError("Token missing subject")
    try:
        user_id = UUID(str(subject))
    except ValueError as exc:
        raise AuthError("Token subject is not a valid UUID") from exc
    farm_value = farm_value or claims.get("farm")
    try:
        farm_id = parse_farm_id(farm_value) if farm_value else None
    except ValueError as exc:
        raise ValidationError("Invalid farm identifier") from exc
    return ActorContext(user_id=user_id, farm_id=farm_id, claims=claims)
