"""Itinerary builder — composes date options and provider links into one result."""

from app.schemas.itinerary import ItineraryResult, SectionLinks, TripRequest
from app.schemas.race import RaceWeekend
from app.services.date_options import generate_date_options
from app.services.link_builder import (
    LinkBuilder,
    get_flight_notes_by_budget,
    get_neighborhood_tips_by_budget,
    link_builder as default_link_builder,
)

FLIGHTS_TITLE = "Flights"
STAYS_TITLE = "Accommodation"


def build_itinerary(
    request: TripRequest,
    race: RaceWeekend,
    link_builder: LinkBuilder | None = None,
) -> ItineraryResult:
    """Pure: same request and race always give the same result (Kayak cache-buster aside)."""
    builder = link_builder or default_link_builder
    date_options = generate_date_options(race.race_date_iso, request.duration_days)

    flights_by_option = {}
    stays_by_option = {}
    for option in date_options:
        flights_by_option[option.key] = SectionLinks(
            title=FLIGHTS_TITLE,
            links=builder.build_flights_links(request, race, option),
            notes=get_flight_notes_by_budget(request.budget_tier),
        )
        stays_by_option[option.key] = SectionLinks(
            title=STAYS_TITLE,
            links=builder.build_stays_links(race, option),
            notes=get_neighborhood_tips_by_budget(request.budget_tier),
        )

    # Ticket and experience availability does not vary by travel date
    return ItineraryResult(
        request=request,
        race=race,
        date_options=date_options,
        flights_by_option=flights_by_option,
        stays_by_option=stays_by_option,
        tickets=builder.build_tickets_section(race),
        experiences=builder.build_experiences_section(race),
    )
