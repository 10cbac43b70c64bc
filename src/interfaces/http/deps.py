from __future__ import annotations

from fastapi import Request

from src.application.errors import AuthError
from src.application.services.breeding_manager import BreedingManager, BreedingManagers
from src.config.settings import Settings, get_settings
from src.infrastructure.auth.context import ActorContext
from src.infrastructure.auth.jwt_service import JWTService


async def get_actor_context(request: Request) -> ActorContext:
    context = getattr(request.state, "actor_context", None)
    if context is None:
        raise AuthError("Authentication required")
    return context


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_jwt_service(request: Request) -> JWTService:
    service = getattr(request.app.state, "jwt_service", None)
    if service is None:
        raise RuntimeError("JWT service not configured")
    return service


async def get_breeding_manager(request: Request) -> BreedingManager:
    """The calling farm's manager, loaded on first use."""
    context = await get_actor_context(request)
    managers: BreedingManagers | None = getattr(request.app.state, "breeding_managers", None)
    if managers is None:
        raise RuntimeError("Breeding managers not configured")
    return await managers.get(context.require_farm())
