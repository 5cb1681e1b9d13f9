"""Airport service — resolves origin cities and race venues to IATA codes."""

import logging

from app.data.airports import ORIGIN_CITY_TO_IATA, RACE_CITY_TO_IATA
from app.schemas.race import RaceWeekend

logger = logging.getLogger(__name__)


def normalize_city(value: str | None) -> str:
    """Trim, lowercase and collapse internal whitespace."""
    return " ".join(str(value or "").lower().split())


class AirportService:
    """Static-table IATA resolution used by deep links and flight pricing."""

    def __init__(
        self,
        origin_table: dict[str, str] | None = None,
        race_city_table: dict[str, str] | None = None,
    ):
        self._origins = origin_table if origin_table is not None else ORIGIN_CITY_TO_IATA
        self._race_cities = race_city_table if race_city_table is not None else RACE_CITY_TO_IATA

    def get_origin_iata(self, city: str | None) -> str | None:
        """IATA for free-text origin; 'San Francisco, USA' falls back to 'san francisco'."""
        key = normalize_city(city)
        iata = self._origins.get(key)
        if iata:
            return iata
        comma = key.find(",")
        if comma > 0:
            return self._origins.get(key[:comma].strip())
        return None

    def get_dest_iata(self, race: RaceWeekend) -> str | None:
        """Race airportCode when present, else the host city lookup."""
        if race.airport_code:
            return race.airport_code
        iata = self._race_cities.get(normalize_city(race.city))
        if iata is None:
            logger.debug(f"No airport mapping for race city {race.city!r}")
        return iata


airport_service = AirportService()


def get_origin_iata(city: str | None) -> str | None:
    return airport_service.get_origin_iata(city)


def get_dest_iata(race: RaceWeekend) -> str | None:
    return airport_service.get_dest_iata(race)
