from __future__ import annotations

from typing import Any, Mapping, Sequence
from uuid import UUID


class AppError(Exception):
    code = "app_error"
    status_code = 400

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class AuthError(AppError):
    code = "auth_error"
    status_code = 401


class NotFound(AppError):
    code = "not_found"
    status_code = 404


class ValidationError(AppError):
    code = "validation_error"
    status_code = 422


class InfrastructureError(AppError):
    code = "infrastructure_error"
    status_code = 500


class PersistenceError(InfrastructureError):
    code = "persistence_error"
    status_code = 500


class PartialBatchFailure(AppError):
    """A multi-entity write stopped midway; `created_ids` were committed before the failure."""

    code = "partial_batch_failure"
    status_code = 502

    def __init__(self, message: str, *, created_ids: Sequence[UUID]) -> None:
        super().__init__(message, details={"created_ids": [str(i) for i in created_ids]})
        self.created_ids = list(created_ids)
