"""Provider deep links — flights, stays, tickets and experiences.

Every builder is total: malformed race data or configuration degrades to the
safest available link (provider homepage, unchanged URL, or omission) and
never raises, since links are built inline while rendering an itinerary.
"""

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import SplitResult, parse_qsl, quote, urlencode, urlsplit, urlunsplit

from app.config import Settings, settings
from app.data.activities import (
    CITY_ACTIVITIES_FALLBACK,
    FLIGHT_NOTES_BY_BUDGET,
    MAX_ACTIVITIES_PER_PROVIDER,
    NEIGHBORHOOD_TIPS_BY_BUDGET,
)
from app.schemas.itinerary import (
    BudgetTier,
    DateOption,
    ExperiencesSection,
    ProviderLink,
    TicketsSection,
    TripRequest,
)
from app.schemas.race import ExperienceActivity, RaceWeekend
from app.services.airport_service import AirportService, airport_service, normalize_city

logger = logging.getLogger(__name__)

OFFICIAL_TICKETS_HOST = "tickets.formula1.com"

GOOGLE_FLIGHTS_URL = "https://www.google.com/travel/flights/search"
SKYSCANNER_HOME_URL = "https://www.skyscanner.com/"
KAYAK_URL = "https://www.kayak.com"
BOOKING_URL = "https://www.booking.com/searchresults.html"
AIRBNB_URL = "https://www.airbnb.com/s"
GOOGLE_HOTELS_URL = "https://www.google.com/travel/hotels"
GOOGLE_SEARCH_URL = "https://www.google.com/search"
GETYOURGUIDE_URL = "https://www.getyourguide.com/s"
VIATOR_URL = "https://www.viator.com/searchResults/all"
TRIPADVISOR_URL = "https://www.tripadvisor.com/Search"

LOGOS = {
    "Google Flights": "/logos/google-flights.svg",
    "Skyscanner": "/logos/skyscanner.svg",
    "Kayak": "/logos/kayak.svg",
    "Booking.com": "/logos/booking.svg",
    "Airbnb": "/logos/airbnb.svg",
    "Google Hotels": "/logos/google.svg",
    "GetYourGuide": "/logos/getyourguide.svg",
    "Viator": "/logos/viator.svg",
    "TripAdvisor": "/logos/tripadvisor.svg",
}

# encodeURIComponent-compatible safe set for path segments
_PATH_SAFE = "!'()*"


@dataclass(frozen=True)
class AffiliateConfig:
    """Partner identifiers appended to outbound links. All optional."""
    official_tickets_affiliate_param: str = ""
    booking_affiliate_aid: str = ""
    skyscanner_partner_id: str = ""
    viator_partner_id: str = ""
    getyourguide_partner_id: str = ""
    force_partner_label_for_demo: bool = False

    @classmethod
    def from_settings(cls, s: Settings) -> "AffiliateConfig":
        return cls(
            official_tickets_affiliate_param=s.f1_tickets_affiliate_param.strip(),
            booking_affiliate_aid=s.booking_affiliate_aid.strip(),
            skyscanner_partner_id=s.skyscanner_partner_id.strip(),
            viator_partner_id=s.viator_partner_id.strip(),
            getyourguide_partner_id=s.getyourguide_partner_id.strip(),
            force_partner_label_for_demo=s.affiliate_labels_demo,
        )

    def is_partner(self, identifier: str) -> bool:
        return bool(identifier.strip()) or self.force_partner_label_for_demo


def _with_query(base: str, params: dict[str, str]) -> str:
    return f"{base}?{urlencode(params)}" if params else base


def _absolute_parts(url: str) -> SplitResult | None:
    """urlsplit result for an absolute URL, else None."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return parts


def append_affiliate_param(url: str, param: str | None) -> str:
    """Append 'key=value' to the URL's query without touching existing params."""
    if not param or not param.strip():
        return url
    parts = _absolute_parts(url)
    if parts is None:
        return url
    to_append = param.strip().removeprefix("?")
    query = f"{parts.query}&{to_append}" if parts.query else to_append
    return urlunsplit(parts._replace(path=parts.path or "/", query=query))


def append_return_url_to_href(href: str, base_url: str | None, itinerary_id: str | None, section: str) -> str:
    """Set redirect_uri so a partner can send the user back to this itinerary section."""
    if not (base_url or "").strip() or not (itinerary_id or "").strip():
        return href
    parts = _absolute_parts(href)
    if parts is None:
        return href

    return_path = f"{re.sub(r'/$', '', base_url)}/itinerary/{itinerary_id}?return={section}"
    params = parse_qsl(parts.query, keep_blank_values=True)
    replaced = False
    updated = []
    for key, value in params:
        if key == "redirect_uri":
            if replaced:
                continue
            value = return_path
            replaced = True
        updated.append((key, value))
    if not replaced:
        updated.append(("redirect_uri", return_path))
    return urlunsplit(parts._replace(path=parts.path or "/", query=urlencode(updated)))


def is_official_tickets_url(href: str | None) -> bool:
    parts = _absolute_parts(href or "")
    return parts is not None and parts.hostname == OFFICIAL_TICKETS_HOST


def to_yymmdd(iso: str | None) -> str:
    """'2026-06-03' -> '260603'; '' when the date is too short."""
    if not iso or len(iso) < 10:
        return ""
    pieces = iso[:10].split("-")
    if len(pieces) != 3:
        return ""
    year, month, day = pieces
    return f"{year[2:]}{month}{day}"


def _valid_date(iso: str | None) -> str:
    return iso if iso and len(iso) >= 10 else ""


def get_flight_notes_by_budget(budget_tier: BudgetTier) -> list[str]:
    return list(FLIGHT_NOTES_BY_BUDGET[budget_tier])


def get_neighborhood_tips_by_budget(budget_tier: BudgetTier) -> list[str]:
    return list(NEIGHBORHOOD_TIPS_BY_BUDGET[budget_tier])


class LinkBuilder:
    """Builds outbound search links for one affiliate configuration."""

    def __init__(
        self,
        config: AffiliateConfig | None = None,
        airports: AirportService | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or AffiliateConfig()
        self.airports = airports or airport_service
        self._clock = clock

    # --- Flights ---

    def build_flights_links(
        self, request: TripRequest, race: RaceWeekend, date_option: DateOption
    ) -> list[ProviderLink]:
        """Google Flights, Skyscanner and Kayak, in that order."""
        origin_city = request.origin_city
        depart = _valid_date(date_option.depart_date_iso)
        return_ = _valid_date(date_option.return_date_iso)

        google_params = {"q": f"Flights from {origin_city} to {race.city}"}
        if depart:
            google_params["departure"] = depart
        if return_:
            google_params["return"] = return_
        google_url = _with_query(GOOGLE_FLIGHTS_URL, google_params)

        origin_iata = self.airports.get_origin_iata(origin_city)
        dest_iata = self.airports.get_dest_iata(race)
        has_iata = bool(origin_iata and dest_iata)

        # Skyscanner path search 404s without valid codes, so fall back to the homepage
        out_yymmdd = to_yymmdd(depart)
        in_yymmdd = to_yymmdd(return_)
        partner_id = self.config.skyscanner_partner_id.strip()
        if has_iata and out_yymmdd and in_yymmdd:
            skyscanner_base = (
                f"https://www.skyscanner.com/transport/flights/"
                f"{origin_iata.lower()}/{dest_iata.lower()}/{out_yymmdd}/{in_yymmdd}"
            )
            skyscanner_params = {"adultsv2": "1", "cabinclass": "economy", "rtn": "1"}
        else:
            skyscanner_base = SKYSCANNER_HOME_URL
            skyscanner_params = {}
        if partner_id:
            skyscanner_params["partner"] = partner_id
        skyscanner_url = _with_query(skyscanner_base, skyscanner_params)

        # Cache-buster so Kayak does not replay a previous search
        cache_bust = urlencode({"_cb": str(int(self._clock() * 1000))})
        if has_iata and depart and return_:
            kayak_path = f"/flights/{origin_iata.lower()}-{dest_iata.lower()}/{depart}/{return_}"
        else:
            route = f"{quote(origin_city, safe=_PATH_SAFE)}-{quote(race.city, safe=_PATH_SAFE)}"
            kayak_path = f"/flights/{route}/{depart}/{return_}" if depart and return_ else f"/flights/{route}"
        kayak_url = f"{KAYAK_URL}{kayak_path}?{cache_bust}"

        return [
            ProviderLink(label="Google Flights", href=google_url, logo=LOGOS["Google Flights"]),
            ProviderLink(
                label="Skyscanner",
                href=skyscanner_url,
                logo=LOGOS["Skyscanner"],
                is_affiliate=self.config.is_partner(partner_id),
            ),
            ProviderLink(label="Kayak", href=kayak_url, logo=LOGOS["Kayak"]),
        ]

    # --- Stays ---

    def build_stays_links(self, race: RaceWeekend, date_option: DateOption) -> list[ProviderLink]:
        """Booking.com, Airbnb and Google Hotels, in that order."""
        checkin = date_option.depart_date_iso
        checkout = date_option.return_date_iso

        booking_params = {"ss": race.city, "checkin": checkin, "checkout": checkout}
        aid = self.config.booking_affiliate_aid.strip()
        if aid:
            booking_params["aid"] = aid

        return [
            ProviderLink(
                label="Booking.com",
                href=_with_query(BOOKING_URL, booking_params),
                logo=LOGOS["Booking.com"],
                is_affiliate=self.config.is_partner(aid),
            ),
            ProviderLink(
                label="Airbnb",
                href=_with_query(AIRBNB_URL, {"query": race.city, "checkin": checkin, "checkout": checkout}),
                logo=LOGOS["Airbnb"],
            ),
            ProviderLink(
                label="Google Hotels",
                href=_with_query(
                    GOOGLE_HOTELS_URL,
                    {"q": f"Hotels in {race.city}", "checkin": checkin, "checkout": checkout},
                ),
                logo=LOGOS["Google Hotels"],
            ),
        ]

    # --- Tickets ---

    def _official_tickets_href(self, href: str) -> str:
        # Affiliate params only ever go to the official ticket site
        if is_official_tickets_url(href):
            return append_affiliate_param(href, self.config.official_tickets_affiliate_param)
        return href

    def build_tickets_links(self, race: RaceWeekend) -> list[ProviderLink]:
        links = []
        if race.official_tickets_url:
            links.append(
                ProviderLink(
                    label="Official F1 Tickets",
                    href=self._official_tickets_href(race.official_tickets_url),
                    is_affiliate=self.config.is_partner(self.config.official_tickets_affiliate_param),
                )
            )
        if race.other_tickets_url:
            links.append(ProviderLink(label="Other ticket sources", href=race.other_tickets_url))

        links.append(
            ProviderLink(
                label="Search Circuit Tickets",
                href=_with_query(GOOGLE_SEARCH_URL, {"q": f"{race.circuit} tickets Formula 1"}),
            )
        )
        return links

    def build_tickets_section(self, race: RaceWeekend) -> TicketsSection:
        """Fallback links plus curated ticket cards."""
        options = None
        if race.ticket_options is not None:
            options = [
                opt.model_copy(update={"href": self._official_tickets_href(opt.href)})
                for opt in race.ticket_options
            ]
        return TicketsSection(title="Race Tickets", links=self.build_tickets_links(race), options=options)

    # --- Experiences ---

    def build_experiences_links(self, race: RaceWeekend) -> list[ProviderLink]:
        """GetYourGuide, Viator and TripAdvisor, in that order."""
        gyg_params = {"q": race.city}
        gyg_partner = self.config.getyourguide_partner_id.strip()
        if gyg_partner:
            gyg_params["partner_id"] = gyg_partner

        viator_params = {"text": race.city}
        viator_partner = self.config.viator_partner_id.strip()
        if viator_partner:
            viator_params["mcid"] = viator_partner

        return [
            ProviderLink(
                label="GetYourGuide",
                href=_with_query(GETYOURGUIDE_URL, gyg_params),
                logo=LOGOS["GetYourGuide"],
                is_affiliate=self.config.is_partner(gyg_partner),
            ),
            ProviderLink(
                label="Viator",
                href=_with_query(VIATOR_URL, viator_params),
                logo=LOGOS["Viator"],
                is_affiliate=self.config.is_partner(viator_partner),
            ),
            ProviderLink(
                label="TripAdvisor",
                href=_with_query(TRIPADVISOR_URL, {"q": f"{race.city} things to do"}),
                logo=LOGOS["TripAdvisor"],
            ),
        ]

    def build_experiences_section(self, race: RaceWeekend) -> ExperiencesSection:
        """Provider links plus up to two curated activities per provider."""
        links = self.build_experiences_links(race)
        provider_activities: dict[str, list[ExperienceActivity]] = {}

        if race.experience_options:
            for entry in race.experience_options:
                activities = entry.activities[:MAX_ACTIVITIES_PER_PROVIDER]
                if activities:
                    provider_activities[entry.provider] = list(activities)
        else:
            by_city = CITY_ACTIVITIES_FALLBACK.get(normalize_city(race.city), {})
            for link in links:
                activities = by_city.get(link.label, [])[:MAX_ACTIVITIES_PER_PROVIDER]
                if activities:
                    provider_activities[link.label] = [
                        ExperienceActivity.model_validate(a) for a in activities
                    ]

        return ExperiencesSection(
            title="Experiences & Activities",
            links=links,
            provider_activities=provider_activities or None,
        )


link_builder = LinkBuilder(AffiliateConfig.from_settings(settings))
