"""Flight prices for the public sample itinerary."""

import logging

from fastapi import APIRouter, HTTPException

from app.config import settings
from app.schemas.itinerary import TripRequest
from app.services.itinerary_merge import get_flight_prices_for_request
from app.services.race_catalog import race_catalog

logger = logging.getLogger(__name__)

router = APIRouter()

SAMPLE_REQUEST = TripRequest(origin_city="London", race_id="monaco-gp", duration_days=5, budget_tier="$$")


@router.get("/sample")
async def sample_flight_prices():
    """Priced flights for London to the Monaco GP, five days, mid budget."""
    race = race_catalog.get_race_by_id(settings.default_season, SAMPLE_REQUEST.race_id)
    if race is None:
        logger.warning(f"Sample race {SAMPLE_REQUEST.race_id} missing from the {settings.default_season} calendar")
        raise HTTPException(status_code=404, detail="Sample race not found")
    flights_by_option = await get_flight_prices_for_request(SAMPLE_REQUEST, race)
    return {"flightsByOption": flights_by_option}
