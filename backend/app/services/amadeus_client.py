"""Amadeus API client — OAuth2 token exchange and flight-offer search."""

import logging
import re

import httpx

from app.config import settings
from app.schemas.itinerary import SampleFlight, SampleFlightLeg

logger = logging.getLogger(__name__)

TOKEN_PATH = "/v1/security/oauth2/token"
FLIGHT_OFFERS_PATH = "/v2/shopping/flight-offers"

UNKNOWN = "–"

# Airline name lookup (common ones)
AIRLINE_NAMES = {
    "AA": "American Airlines", "AC": "Air Canada", "AF": "Air France",
    "AS": "Alaska Airlines", "AY": "Finnair", "AZ": "ITA Airways",
    "BA": "British Airways", "B6": "JetBlue Airways", "CX": "Cathay Pacific",
    "DL": "Delta Air Lines", "EK": "Emirates", "EY": "Etihad Airways",
    "FI": "Icelandair", "IB": "Iberia", "JL": "Japan Airlines", "KL": "KLM",
    "LH": "Lufthansa", "LX": "Swiss International Air Lines", "NH": "All Nippon Airways",
    "OS": "Austrian", "QF": "Qantas", "QR": "Qatar Airways", "SA": "South African Airways",
    "SK": "SAS", "SQ": "Singapore Airlines", "TK": "Turkish Airlines",
    "TP": "TAP Air Portugal", "UA": "United Airlines", "VS": "Virgin Atlantic",
    "WS": "WestJet",
}

_HOURS = re.compile(r"(\d+)H")
_MINUTES = re.compile(r"(\d+)M")


def airline_name(code: str | None) -> str:
    """Full airline name for a carrier code, or the code itself when unknown."""
    if not code:
        return "Flight"
    return AIRLINE_NAMES.get(code.upper(), code)


def format_clock(iso: str | None) -> str:
    """'2026-06-03T07:45:00' -> '07:45'."""
    if not isinstance(iso, str) or len(iso) < 16:
        return UNKNOWN
    return iso[11:16] or UNKNOWN


def format_duration(duration: str | None) -> str:
    """Parse ISO 8601 duration (PT12H30M) to '12h 30m'."""
    if not isinstance(duration, str) or not duration.startswith("PT"):
        return UNKNOWN
    parts = []
    hours = _HOURS.search(duration)
    minutes = _MINUTES.search(duration)
    if hours:
        parts.append(f"{hours.group(1)}h")
    if minutes:
        parts.append(f"{minutes.group(1)}m")
    return " ".join(parts) if parts else UNKNOWN


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _summarize_errors(payload: dict | None) -> str:
    errors = _as_dict(payload).get("errors")
    if not isinstance(errors, list) or not errors:
        return "Unknown error"
    summaries = []
    for err in filter(lambda e: isinstance(e, dict), errors):
        source = _as_dict(err.get("source"))
        where = None
        if source.get("parameter"):
            where = f"param={source['parameter']}"
        elif source.get("pointer"):
            where = f"ptr={source['pointer']}"
        summaries.append(" | ".join(p for p in (err.get("title"), err.get("detail"), where) if p))
    return "; ".join(summaries)


class AmadeusClient:
    """Adapter for the Amadeus Self-Service flight offers API."""

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.client_id = settings.amadeus_client_id if client_id is None else client_id
        self.client_secret = settings.amadeus_client_secret if client_secret is None else client_secret
        self.base_url = (base_url or settings.amadeus_base_url).rstrip("/")
        self._client = http_client

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=30.0)
        return self._client

    async def get_token(self) -> str | None:
        """Exchange client credentials for a bearer token. None when unavailable."""
        if not self.configured:
            logger.warning("Amadeus credentials missing; flight prices disabled")
            return None

        client = await self._get_client()
        try:
            resp = await client.post(
                f"{self.base_url}{TOKEN_PATH}",
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.RequestError as e:
            logger.warning(f"Amadeus token request error: {e}")
            return None

        if resp.is_error:
            try:
                data = resp.json()
                detail = " — ".join(
                    p for p in (data.get("error"), data.get("error_description")) if p
                ) or "unknown"
            except (ValueError, AttributeError):
                detail = "(non-JSON response)"
            logger.warning(f"Amadeus token request failed: {resp.status_code} {detail}")
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.warning(f"Amadeus token response was not JSON: {resp.status_code}")
            return None
        token = data.get("access_token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            logger.warning("Amadeus token response had no access_token")
            return None
        logger.info(f"Amadeus token obtained from {self.base_url}")
        return token

    async def search_top_offers(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        return_date: str,
        token: str,
        limit: int = 3,
    ) -> list[dict]:
        """
        Cheapest offers as [{"price": float, "sample_flight": SampleFlight | None}].

        Tries a round-trip search first and a one-way search when the
        round trip yields nothing. Empty list when neither has a priced offer.
        Network errors propagate to the caller.
        """
        depart = departure_date[:10]
        return_ = return_date[:10]
        base_params = {
            "originLocationCode": origin,
            "destinationLocationCode": destination,
            "departureDate": depart,
            "adults": "1",
        }
        attempts = [
            ("rt", {**base_params, "returnDate": return_}),
            ("ow", base_params),
        ]

        client = await self._get_client()
        last_err = None
        for label, params in attempts:
            resp = await client.get(
                f"{self.base_url}{FLIGHT_OFFERS_PATH}",
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
            try:
                payload = resp.json()
            except ValueError:
                payload = None

            if resp.is_error:
                summary = _summarize_errors(payload) if payload else resp.text[:200]
                last_err = f"{label}: {summary}"
                logger.warning(f"Amadeus flight offers failed: {resp.status_code} {last_err}")
                continue

            offers = _as_dict(payload).get("data")
            if not isinstance(offers, list) or not offers:
                last_err = f"{label}: no_offers"
                logger.info(f"No Amadeus offers for {label} {origin}->{destination} {depart} {return_}")
                continue

            priced = []
            for offer in offers:
                price = self._parse_price(offer)
                if price is not None:
                    priced.append((price, offer))
            if not priced:
                last_err = f"{label}: no_parsable_price"
                continue

            priced.sort(key=lambda p: p[0])
            return [
                {"price": price, "sample_flight": self._parse_offer(offer)}
                for price, offer in priced[:limit]
            ]

        if last_err:
            logger.warning(f"All Amadeus flight-offer attempts failed: {last_err}")
        return []

    @staticmethod
    def _parse_price(offer: dict) -> float | None:
        if not isinstance(offer, dict):
            return None
        price = offer.get("price")
        total = price.get("grandTotal") if isinstance(price, dict) else None
        if total is None:
            return None
        try:
            return float(total)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _parse_offer(offer: dict) -> SampleFlight | None:
        """Summarize the outbound itinerary of an offer for display on a card."""
        itineraries = offer.get("itineraries") if isinstance(offer, dict) else None
        if not isinstance(itineraries, list) or not itineraries:
            return None
        itin = _as_dict(itineraries[0])
        segments = [s for s in itin.get("segments") or [] if isinstance(s, dict)]
        if not segments:
            return None

        first_seg = segments[0]
        last_seg = segments[-1]

        # Connections count as stops; a single segment reports its own technical stops
        if len(segments) > 1:
            stops = len(segments) - 1
        else:
            stops = first_seg.get("numberOfStops") or 0

        stop_airports = [
            _as_dict(s.get("arrival")).get("iataCode")
            for s in segments[:-1]
            if _as_dict(s.get("arrival")).get("iataCode")
        ]

        legs = []
        for s in segments:
            dep = _as_dict(s.get("departure"))
            arr = _as_dict(s.get("arrival"))
            dep_time = format_clock(dep.get("at"))
            arr_time = format_clock(arr.get("at"))
            if not dep.get("iataCode") and not arr.get("iataCode") and dep_time == UNKNOWN and arr_time == UNKNOWN:
                continue
            legs.append(
                SampleFlightLeg(
                    dep_iata=dep.get("iataCode", ""),
                    dep_time=dep_time,
                    arr_iata=arr.get("iataCode", ""),
                    arr_time=arr_time,
                    duration_text=format_duration(s.get("duration")),
                )
            )

        return SampleFlight(
            airline_label=airline_name(first_seg.get("carrierCode")),
            departure=format_clock(_as_dict(first_seg.get("departure")).get("at")),
            arrival=format_clock(_as_dict(last_seg.get("arrival")).get("at")),
            stops=stops,
            duration_text=format_duration(itin.get("duration")),
            stop_airports=stop_airports or None,
            legs=legs or None,
        )

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

