from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query

from src.application.errors import ValidationError
from src.domain.models.gestation_config import (
    GestationConfig,
    breeding_advice,
    expected_birth_date,
    get_gestation_config,
    is_in_breeding_season,
)
from src.interfaces.http.schemas.breedings import BreedingAdviceResponse, GestationConfigResponse

router = APIRouter(prefix="/gestation", tags=["gestation"])


def _config_or_422(species: str) -> GestationConfig:
    try:
        return get_gestation_config(species)
    except ValueError as exc:
        raise ValidationError(str(exc), details={"species": species}) from exc


@router.get("/{species}", response_model=GestationConfigResponse)
async def gestation_config_endpoint(species: str):
    config = _config_or_422(species)
    return GestationConfigResponse(
        species=config.species.value,
        gestation_days=config.gestation_days,
        average_litter_size=config.average_litter_size,
        min_breeding_age=config.min_breeding_age,
        max_breeding_age=config.max_breeding_age,
        breeding_cycle_days=config.breeding_cycle_days,
        weaning_days=config.weaning_days,
        breeding_season_start=config.breeding_season_start,
        breeding_season_end=config.breeding_season_end,
        description=config.description,
    )


@router.get("/{species}/advice", response_model=BreedingAdviceResponse)
async def breeding_advice_endpoint(
    species: str,
    breeding_date: date,
    female_age_months: int | None = Query(default=None, ge=0),
):
    config = _config_or_422(species)
    return BreedingAdviceResponse(
        species=config.species.value,
        breeding_date=breeding_date,
        expected_birth_date=expected_birth_date(breeding_date, config.species),
        in_breeding_season=is_in_breeding_season(breeding_date, config.species),
        advice=breeding_advice(breeding_date, config.species, female_age_months),
    )
