"""Itinerary generation — validate, look up the race, build and persist."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.schemas.itinerary import ItineraryResult, TripRequest
from app.services.itinerary_builder import build_itinerary
from app.services.itinerary_repository import ItineraryRepository, itinerary_repository
from app.services.link_builder import LinkBuilder
from app.services.race_catalog import RaceCatalog, race_catalog

logger = logging.getLogger(__name__)


class RaceNotFoundError(LookupError):
    def __init__(self, race_id: str):
        super().__init__(f"Race not found: {race_id}")
        self.race_id = race_id


async def generate_and_save_itinerary(
    db: AsyncSession,
    user_id: str,
    request_data: TripRequest | dict,
    catalog: RaceCatalog | None = None,
    repository: ItineraryRepository | None = None,
    link_builder: LinkBuilder | None = None,
) -> tuple[str, ItineraryResult]:
    """
    Build an itinerary for the default season and store it.

    Raises pydantic.ValidationError for an invalid request and
    RaceNotFoundError when the race is not on the calendar.
    """
    request = (
        request_data if isinstance(request_data, TripRequest) else TripRequest.model_validate(request_data)
    )

    race = (catalog or race_catalog).get_race_by_id(settings.default_season, request.race_id)
    if race is None:
        raise RaceNotFoundError(request.race_id)

    result = build_itinerary(request, race, link_builder=link_builder)
    itinerary_id = await (repository or itinerary_repository).create_itinerary(db, user_id, request, result)
    logger.info(f"Generated itinerary {itinerary_id}: {request.origin_city} -> {race.name}, {request.duration_days} days")
    return itinerary_id, result
