"""Candidate travel windows around a race weekend."""

from datetime import date, timedelta

from app.schemas.itinerary import DateOption

DEPART_OFFSETS = (-4, -3, -2)
OPTION_KEYS = ("A", "B", "C")

# Fixed English abbreviations; labels must not follow the process locale
_MONTH_ABBREVS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
                  "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def parse_iso_date(value: str | None) -> date | None:
    """Parse the YYYY-MM-DD prefix of an ISO string, or None if malformed."""
    if not value or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _short_label(d: date) -> str:
    return f"{_MONTH_ABBREVS[d.month - 1]} {d.day}"


def generate_date_options(race_date_iso: str, duration_days: int) -> list[DateOption]:
    """Exactly three options (A, B, C) departing 4, 3 and 2 days before the race."""
    race_date = parse_iso_date(race_date_iso)
    if race_date is None:
        raise ValueError(f"Invalid race date: {race_date_iso!r}")

    options = []
    for key, offset in zip(OPTION_KEYS, DEPART_OFFSETS):
        depart = race_date + timedelta(days=offset)
        return_ = depart + timedelta(days=duration_days)
        options.append(
            DateOption(
                key=key,
                label=f"{_short_label(depart)} - {_short_label(return_)}",
                depart_date_iso=depart.isoformat(),
                return_date_iso=return_.isoformat(),
            )
        )
    return options
