import httpx

from app.config import settings
from app.schemas.itinerary import TripRequest
from app.services.date_options import generate_date_options
from app.services.flight_price_service import (
    apply_prices_to_flights_section,
    get_flight_prices_for_options,
    seeded_placeholder_prices,
)
from app.services.itinerary_builder import build_itinerary

from amadeus_payloads import TOKEN_PATH, FakeAmadeus, offer, offers, segment


def test_placeholder_golden_values():
    prices = seeded_placeholder_prices("London", "Monte Carlo")
    assert (prices.google, prices.skyscanner, prices.kayak) == (710, 665, 695)
    assert prices.from_api is False

    prices = seeded_placeholder_prices("a", "b")
    assert (prices.google, prices.skyscanner, prices.kayak) == (460, 395, 435)


def test_placeholder_normalizes_city_names():
    assert seeded_placeholder_prices("  LONDON ", "monte   carlo") == seeded_placeholder_prices("London", "Monte Carlo")


def test_placeholder_prices_are_multiples_of_five():
    for origin in ("Paris", "Tokyo", "São Paulo", "Zürich"):
        prices = seeded_placeholder_prices(origin, "Melbourne")
        assert prices.google % 5 == prices.skyscanner % 5 == prices.kayak % 5 == 0


async def test_without_credentials_every_option_is_placeholder(london_request, monaco):
    options = generate_date_options(monaco.race_date_iso, 5)
    prices = await get_flight_prices_for_options(london_request, monaco, options)

    assert set(prices) == {"A", "B", "C"}
    assert all(not p.from_api for p in prices.values())
    assert prices["A"].google == 710


async def test_no_options_no_calls(london_request, monaco, amadeus_factory):
    fake = FakeAmadeus()
    assert await get_flight_prices_for_options(london_request, monaco, [], client=amadeus_factory(fake)) == {}
    assert fake.token_calls == 0


async def test_one_token_per_batch(london_request, monaco, amadeus_factory):
    fake = FakeAmadeus(
        {
            "2026-06-03": offers(512.4, 530.5, 610),
            "2026-06-04": offers(480),
            "2026-06-05": offers(455, 460),
        }
    )
    options = generate_date_options(monaco.race_date_iso, 5)
    prices = await get_flight_prices_for_options(london_request, monaco, options, client=amadeus_factory(fake))

    assert fake.token_calls == 1
    assert sorted(fake.search_calls) == ["2026-06-03", "2026-06-04", "2026-06-05"]

    a = prices["A"]
    assert a.from_api is True
    assert (a.google, a.skyscanner, a.kayak) == (512, 531, 610)
    assert len(a.sample_flights) == 3

    b = prices["B"]
    assert (b.google, b.skyscanner, b.kayak) == (480, 480, 480)
    assert b.sample_flights[0] is not None
    assert b.sample_flights[1:] == [None, None]

    assert (prices["C"].google, prices["C"].skyscanner, prices["C"].kayak) == (455, 460, 455)


async def test_failing_option_does_not_affect_others(london_request, monaco, amadeus_factory):
    fake = FakeAmadeus(
        {"2026-06-03": offers(400), "2026-06-05": offers(420)},
        fail_dates={"2026-06-04"},
    )
    options = generate_date_options(monaco.race_date_iso, 5)
    prices = await get_flight_prices_for_options(london_request, monaco, options, client=amadeus_factory(fake))

    assert prices["A"].from_api and prices["C"].from_api
    assert prices["B"].from_api is False
    assert prices["B"].google == 710


async def test_slow_option_times_out_alone(london_request, monaco, amadeus_factory, monkeypatch):
    monkeypatch.setattr(settings, "flight_price_option_timeout", 0.2)
    fake = FakeAmadeus(
        {"2026-06-03": offers(400), "2026-06-04": offers(410), "2026-06-05": offers(420)},
        slow_dates={"2026-06-05"},
    )
    options = generate_date_options(monaco.race_date_iso, 5)
    prices = await get_flight_prices_for_options(london_request, monaco, options, client=amadeus_factory(fake))

    assert prices["A"].google == 400
    assert prices["B"].google == 410
    assert prices["C"].from_api is False


async def test_no_offers_means_placeholder(london_request, monaco, amadeus_factory):
    fake = FakeAmadeus()
    option = generate_date_options(monaco.race_date_iso, 5)[0]
    prices = await get_flight_prices_for_options(london_request, monaco, [option], client=amadeus_factory(fake))

    assert prices["A"].from_api is False
    # round trip then one way
    assert fake.search_calls == ["2026-06-03", "2026-06-03"]


async def test_unknown_origin_skips_api(monaco, amadeus_factory):
    fake = FakeAmadeus()
    request = TripRequest(origin_city="Springfield", race_id="monaco-gp", duration_days=5, budget_tier="$")
    options = generate_date_options(monaco.race_date_iso, 5)
    prices = await get_flight_prices_for_options(request, monaco, options, client=amadeus_factory(fake))

    assert all(not p.from_api for p in prices.values())
    assert fake.token_calls == 0
    assert fake.search_calls == []


async def test_token_failure_gives_placeholders(london_request, monaco, amadeus_factory):
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(401, json={"error": "invalid_client"})

    options = generate_date_options(monaco.race_date_iso, 5)
    prices = await get_flight_prices_for_options(london_request, monaco, options, client=amadeus_factory(handler))

    assert all(not p.from_api for p in prices.values())
    assert calls == [TOKEN_PATH]


def test_apply_prices_positionally(london_request, monaco, builder):
    section = build_itinerary(london_request, monaco, builder).to_json()["flightsByOption"]["A"]
    prices = seeded_placeholder_prices("x", "y").model_copy(
        update={"google": 500, "skyscanner": 520, "kayak": 540, "from_api": True, "sample_flights": [None] * 3}
    )
    priced = apply_prices_to_flights_section(section, prices)

    assert [link["fromPrice"] for link in priced["links"]] == ["500", "520", "540"]
    assert [link["label"] for link in priced["links"]] == ["Google Flights", "Skyscanner", "Kayak"]
    assert "fromPrice" not in section["links"][0]


def test_apply_placeholder_prices_is_noop(london_request, monaco, builder):
    section = build_itinerary(london_request, monaco, builder).to_json()["flightsByOption"]["A"]
    assert apply_prices_to_flights_section(section, seeded_placeholder_prices("London", "Monte Carlo")) is section



async def test_malformed_offer_only_affects_its_option(london_request, monaco, amadeus_factory):
    broken = offer(
        455,
        segments=[
            {**segment("LHR", "2026-06-04T07:45:00", "CDG", "2026-06-04T10:00:00"), "arrival": None},
            segment("CDG", "2026-06-04T11:00:00", "NCE", "2026-06-04T12:30:00"),
        ],
    )
    fake = FakeAmadeus(
        {"2026-06-03": offers(400), "2026-06-04": {"data": [broken]}, "2026-06-05": offers(420)}
    )
    options = generate_date_options(monaco.race_date_iso, 5)

    prices = await get_flight_prices_for_options(london_request, monaco, options, client=amadeus_factory(fake))

    assert prices["A"].google == 400
    assert prices["C"].google == 420
    # the null arrival is skipped rather than breaking the sample flight
    assert prices["B"].from_api is True
    assert prices["B"].sample_flights[0].stops == 1
    assert prices["B"].sample_flights[0].stop_airports is None


async def test_unparsable_offers_fall_back_to_placeholder(london_request, monaco, amadeus_factory):
    fake = FakeAmadeus(
        {
            "2026-06-03": offers(400),
            "2026-06-04": {"data": [offer(455, segments=[{**segment("LHR", "x", "NCE", "y"), "numberOfStops": "two"}])]},
        }
    )
    options = generate_date_options(monaco.race_date_iso, 5)

    prices = await get_flight_prices_for_options(london_request, monaco, options, client=amadeus_factory(fake))

    assert prices["A"].from_api is True
    assert prices["B"] == seeded_placeholder_prices("London", "Monte Carlo")


async def test_non_json_token_response_gives_placeholders(london_request, monaco, amadeus_factory):
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    options = generate_date_options(monaco.race_date_iso, 5)
    prices = await get_flight_prices_for_options(london_request, monaco, options, client=amadeus_factory(handler))

    assert all(not p.from_api for p in prices.values())


async def test_token_response_without_token_gives_placeholders(london_request, monaco, amadeus_factory):
    def handler(request):
        return httpx.Response(200, json=["not", "a", "token"])

    options = generate_date_options(monaco.race_date_iso, 5)
    prices = await get_flight_prices_for_options(london_request, monaco, options, client=amadeus_factory(handler))

    assert all(not p.from_api for p in prices.values())
