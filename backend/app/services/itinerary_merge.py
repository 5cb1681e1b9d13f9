"""Itinerary merge — refreshes a stored itinerary against the live race catalog.

Stored results are camelCase JSON written by any past release, so everything
here works on plain dicts and only decodes the pieces it regenerates. Fields
that are not regenerated are passed through as stored, and the stored
document is never modified.
"""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from app.config import settings
from app.schemas.itinerary import DateOption, ItineraryRecord, SectionLinks, TripRequest, decode_date_option
from app.schemas.race import RaceWeekend
from app.services.amadeus_client import AmadeusClient
from app.services.date_options import generate_date_options, parse_iso_date
from app.services.flight_price_service import apply_prices_to_flights_section, get_flight_prices_for_options
from app.services.itinerary_builder import FLIGHTS_TITLE, STAYS_TITLE
from app.services.link_builder import (
    LinkBuilder,
    get_flight_notes_by_budget,
    get_neighborhood_tips_by_budget,
    link_builder as default_link_builder,
)
from app.services.race_catalog import RaceCatalog, race_catalog as default_race_catalog

logger = logging.getLogger(__name__)


@dataclass
class _MergeContext:
    stored: dict
    request: TripRequest | None
    live_race: RaceWeekend | None
    race_for_links: RaceWeekend | None
    # None when flights and stays must be passed through as stored
    date_options: list[DateOption] | None
    regenerated_options: bool = False


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _decode(model_cls, raw):
    if not isinstance(raw, dict):
        return None
    try:
        return model_cls.model_validate(raw)
    except ValidationError as e:
        logger.debug(f"Stored {model_cls.__name__} is not decodable: {e.error_count()} errors")
        return None


def _stored_sections(stored: dict, field: str) -> dict:
    sections = stored.get(field)
    return sections if isinstance(sections, dict) else {}


def _season_year(stored_race) -> int:
    race_date = stored_race.get("raceDateISO") if isinstance(stored_race, dict) else None
    parsed = parse_iso_date(race_date) if isinstance(race_date, str) else None
    return parsed.year if parsed else settings.default_season


def _live_over_stored(stored_race: dict, live_race: RaceWeekend | None) -> RaceWeekend | None:
    if live_race is None:
        return _decode(RaceWeekend, stored_race)
    return _decode(RaceWeekend, {**stored_race, **_dump(live_race)}) or live_race


def _resolve(record: ItineraryRecord, catalog: RaceCatalog) -> _MergeContext:
    stored = record.result_json if isinstance(record.result_json, dict) else {}
    stored_request = stored.get("request")
    stored_race = stored.get("race")

    race_id = stored_request.get("raceId") if isinstance(stored_request, dict) else None
    live_race = catalog.get_race_by_id(_season_year(stored_race), race_id or record.race_id)

    request = _decode(TripRequest, stored_request)
    has_race = isinstance(stored_race, dict) and bool(stored_race)
    race_for_links = _live_over_stored(stored_race, live_race) if has_race else None

    ctx = _MergeContext(
        stored=stored,
        request=request,
        live_race=live_race,
        race_for_links=race_for_links,
        date_options=None,
    )
    if request is None or race_for_links is None:
        return ctx

    raw_options = stored.get("dateOptions")
    if isinstance(raw_options, list) and raw_options:
        ctx.date_options = [opt for opt in map(decode_date_option, raw_options) if opt is not None]
        if len(ctx.date_options) < len(raw_options):
            logger.info(f"Skipped {len(raw_options) - len(ctx.date_options)} undecodable date options on itinerary {record.id}")
    elif live_race is not None:
        try:
            ctx.date_options = generate_date_options(stored_race.get("raceDateISO"), request.duration_days)
            ctx.regenerated_options = True
        except ValueError:
            logger.warning(f"Cannot regenerate date options for itinerary {record.id}: bad race date")
    return ctx


def _build_flights(
    builder: LinkBuilder, request: TripRequest, race: RaceWeekend, date_options: list[DateOption]
) -> dict[str, dict]:
    return {
        option.key: _dump(
            SectionLinks(
                title=FLIGHTS_TITLE,
                links=builder.build_flights_links(request, race, option),
                notes=get_flight_notes_by_budget(request.budget_tier),
            )
        )
        for option in date_options
    }


def _build_stays(
    builder: LinkBuilder, request: TripRequest, race: RaceWeekend, date_options: list[DateOption]
) -> dict[str, dict]:
    return {
        option.key: _dump(
            SectionLinks(
                title=STAYS_TITLE,
                links=builder.build_stays_links(race, option),
                notes=get_neighborhood_tips_by_budget(request.budget_tier),
            )
        )
        for option in date_options
    }


def get_merged_itinerary_result(
    record: ItineraryRecord,
    catalog: RaceCatalog | None = None,
    link_builder: LinkBuilder | None = None,
) -> dict:
    """
    Stored result refreshed with current tickets, flights and stays links.

    Tickets are rebuilt when the race is still in the catalog. Flights and
    stays are rebuilt for the stored date options (legacy field names
    accepted), or for freshly generated ones when none were stored. Prices
    are not fetched here; see get_flight_prices_for_itinerary.
    """
    builder = link_builder or default_link_builder
    ctx = _resolve(record, catalog or default_race_catalog)
    merged = {**ctx.stored}

    if ctx.live_race is not None:
        merged["tickets"] = _dump(builder.build_tickets_section(ctx.live_race))

    if ctx.date_options is not None:
        # Rebuilt keys overlay the stored sections; keys that were not rebuilt keep their stored value
        merged["flightsByOption"] = {
            **_stored_sections(ctx.stored, "flightsByOption"),
            **_build_flights(builder, ctx.request, ctx.race_for_links, ctx.date_options),
        }
        merged["staysByOption"] = {
            **_stored_sections(ctx.stored, "staysByOption"),
            **_build_stays(builder, ctx.request, ctx.race_for_links, ctx.date_options),
        }
        if ctx.regenerated_options:
            merged["dateOptions"] = [_dump(opt) for opt in ctx.date_options]

    return merged


async def get_flight_prices_for_itinerary(
    record: ItineraryRecord,
    catalog: RaceCatalog | None = None,
    link_builder: LinkBuilder | None = None,
    client: AmadeusClient | None = None,
) -> dict[str, dict]:
    """Flights sections for the itinerary's date options with live prices merged in."""
    builder = link_builder or default_link_builder
    ctx = _resolve(record, catalog or default_race_catalog)
    if ctx.date_options is None:
        return {}

    flights = _build_flights(builder, ctx.request, ctx.race_for_links, ctx.date_options)
    prices = await get_flight_prices_for_options(ctx.request, ctx.race_for_links, ctx.date_options, client=client)
    return {key: apply_prices_to_flights_section(section, prices.get(key)) for key, section in flights.items()}


async def get_flight_prices_for_request(
    request: TripRequest,
    race: RaceWeekend,
    link_builder: LinkBuilder | None = None,
    client: AmadeusClient | None = None,
) -> dict[str, dict]:
    """Priced flights sections for an unsaved itinerary (the public sample trip)."""
    builder = link_builder or default_link_builder
    date_options = generate_date_options(race.race_date_iso, request.duration_days)
    flights = _build_flights(builder, request, race, date_options)
    prices = await get_flight_prices_for_options(request, race, date_options, client=client)
    return {key: apply_prices_to_flights_section(section, prices.get(key)) for key, section in flights.items()}
