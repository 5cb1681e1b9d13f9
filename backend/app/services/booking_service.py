"""Booking validation and classification into itinerary sections."""

import re
from collections.abc import Iterable
from urllib.parse import urlsplit

from app.schemas.booking import BookingInput, BookingResponse, BookingsBySection

BOOKING_TYPES = ("flight", "stay", "ticket", "activity")

PROVIDER_MAX = 100
CONFIRMATION_REF_MAX = 100
NOTES_MAX = 500

_CONFIRMATION_REF = re.compile(r"[A-Za-z0-9\s\-]+")

SECTION_BY_TYPE = {
    "flight": "flights",
    "stay": "stays",
    "ticket": "tickets",
    "activity": "experiences",
}


def _is_http_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def validate_booking_input(data: BookingInput) -> str | None:
    """One user-facing error message, or None when the booking can be saved."""
    provider = (data.provider or "").strip()
    confirmation = (data.confirmation_ref or "").strip()

    if data.type not in BOOKING_TYPES:
        return "Invalid booking type."
    if not provider or not confirmation:
        return "Provider and confirmation number are required."
    if len(provider) > PROVIDER_MAX:
        return "Provider name is too long."
    if len(confirmation) > CONFIRMATION_REF_MAX:
        return "Confirmation number is too long."
    if not _CONFIRMATION_REF.fullmatch(confirmation):
        return "Use only letters, numbers, and hyphens for the confirmation number."

    details = (data.details_url or "").strip()
    if details and not _is_http_url(details):
        return "Please enter a valid link."
    notes = (data.notes or "").strip()
    if len(notes) > NOTES_MAX:
        return "Notes are too long."
    return None


def section_for_booking_type(booking_type: str) -> str | None:
    return SECTION_BY_TYPE.get(booking_type)


def group_bookings_by_section(bookings: Iterable[BookingResponse]) -> BookingsBySection:
    grouped = BookingsBySection()
    for booking in bookings:
        section = section_for_booking_type(booking.type)
        if section:
            getattr(grouped, section).append(booking)
    return grouped
