from datetime import date

import pytest

from app.services.date_options import generate_date_options, parse_iso_date


def test_three_options_before_race_weekend():
    options = generate_date_options("2026-06-07", 5)

    assert [o.key for o in options] == ["A", "B", "C"]
    assert [o.depart_date_iso for o in options] == ["2026-06-03", "2026-06-04", "2026-06-05"]
    assert [o.return_date_iso for o in options] == ["2026-06-08", "2026-06-09", "2026-06-10"]
    assert options[0].label == "Jun 3 - Jun 8"


@pytest.mark.parametrize("duration", [2, 30])
def test_boundary_durations_produce_ordered_windows(duration):
    options = generate_date_options("2026-06-07", duration)

    for option in options:
        depart = date.fromisoformat(option.depart_date_iso)
        return_ = date.fromisoformat(option.return_date_iso)
        assert (return_ - depart).days == duration
    assert options[0].depart_date_iso < options[1].depart_date_iso < options[2].depart_date_iso


def test_thirty_day_trip_label_spans_months():
    assert generate_date_options("2026-06-07", 30)[0].label == "Jun 3 - Jul 3"


def test_windows_cross_year_boundary():
    options = generate_date_options("2026-01-02", 3)
    assert options[0].depart_date_iso == "2025-12-29"
    assert options[0].label == "Dec 29 - Jan 1"


def test_only_date_prefix_of_timestamp_is_used():
    options = generate_date_options("2026-06-07T15:00:00Z", 5)
    assert options[0].depart_date_iso == "2026-06-03"


def test_same_input_same_output():
    assert generate_date_options("2026-07-05", 4) == generate_date_options("2026-07-05", 4)


def test_invalid_race_date_raises():
    with pytest.raises(ValueError):
        generate_date_options("June 7th", 5)


def test_parse_iso_date():
    assert parse_iso_date("2026-06-07") == date(2026, 6, 7)
    assert parse_iso_date("2026-13-40") is None
    assert parse_iso_date("") is None
    assert parse_iso_date(None) is None
