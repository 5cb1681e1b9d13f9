"""Race calendar router."""

from fastapi import APIRouter, Query

from app.config import settings
from app.schemas.race import RaceWeekend
from app.services.race_catalog import race_catalog

router = APIRouter()


@router.get("", response_model=list[RaceWeekend], response_model_exclude_none=True)
async def list_races(year: int = Query(default=settings.default_season, ge=1950, le=2100)):
    """Race weekends of a season, earliest first."""
    return race_catalog.list_races(year)
