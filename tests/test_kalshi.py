"""Kalshi normalization and the events connector."""

import httpx
import pytest

from predboard.ingestion import UpstreamError
from predboard.ingestion.kalshi import KalshiConnector
from predboard.ingestion.kalshi.normalize import kalshi_price, normalize_market, option_name


def test_cents_converted_to_probability(kalshi_market, kalshi_event, now):
    raw = kalshi_market("K-1", "EV-1")
    m = normalize_market(raw, kalshi_event("EV-1", [raw]), now=now)
    assert m.yes_bid == pytest.approx(0.40)
    assert m.no_bid == pytest.approx(0.58)
    assert m.yes_ask == pytest.approx(0.42)
    assert m.outcomes == ["Yes", "No"]
    assert m.outcome_prices == [pytest.approx(0.40), pytest.approx(0.58)]


def test_dollar_fields_take_precedence():
    assert kalshi_price({"yes_bid": 40, "yes_bid_dollars": "0.4500"}, "yes_bid") == pytest.approx(0.45)
    assert kalshi_price({}, "yes_bid") is None
    assert kalshi_price({"yes_bid": "x"}, "yes_bid") is None


def test_no_quotes_means_no_outcomes(kalshi_market, now):
    raw = kalshi_market("K-1", "EV-1")
    del raw["yes_bid"], raw["no_bid"]
    m = normalize_market(raw, {}, now=now)
    assert m.outcomes == []
    assert m.outcome_prices == []


@pytest.mark.parametrize(
    "status,active,closed",
    [
        ("active", True, False),
        ("initialized", True, False),
        ("settled", False, True),
        ("canceled", False, True),
        ("closed", False, True),
        ("unknown", False, False),
    ],
)
def test_status_flags(kalshi_market, now, status, active, closed):
    m = normalize_market(kalshi_market("K-1", "EV-1", status=status), {}, now=now)
    assert (m.active, m.closed) == (active, closed)


def test_event_fields_and_category(kalshi_market, kalshi_event, now):
    raw = kalshi_market("K-1", "EV-1")
    m = normalize_market(raw, kalshi_event("EV-1", [raw], category="politics"), now=now)
    assert m.id == "K-1"
    assert m.ticker == "K-1"
    assert m.event_ticker == "EV-1"
    assert m.event_title == "Event EV-1"
    assert m.category == "Politics"
    assert m.end_date == "2027-01-01T00:00:00Z"
    assert m.volume == 100.0
    assert m.liquidity == 5000.0


def test_missing_event_category_uses_text(kalshi_market, now):
    m = normalize_market(kalshi_market("K-1", "EV-1", title="Bitcoin above 120k?"), {"title": ""}, now=now)
    assert m.category == "Crypto"


def test_missing_volume_is_zero(kalshi_market, now):
    raw = kalshi_market("K-1", "EV-1")
    del raw["volume"]
    assert normalize_market(raw, {}, now=now).volume == 0.0


def test_is_new_from_open_time(kalshi_market, now):
    assert normalize_market(kalshi_market("K", "E", open_time="2026-10-16T00:00:00Z"), {}, now=now).is_new
    assert not normalize_market(kalshi_market("K", "E"), {}, now=now).is_new


def test_option_name_rules():
    event = {"sub_title": "On Dec 31"}
    assert option_name({"yes_sub_title": "Above 5%"}, event) == "Above 5%"
    assert option_name({"yes_sub_title": "On Dec 31", "subtitle": ":: 4.5% to 5%"}, event) == "4.5% to 5%"
    assert option_name({"custom_strike": {"Candidate": "Jane Doe"}}, event) == "Jane Doe"
    assert option_name({}, event) == ""
    assert option_name({"yes_sub_title": 9, "subtitle": 5}, event) == ""


def _connector(transport: httpx.MockTransport) -> KalshiConnector:
    return KalshiConnector("https://kalshi.test/trade-api/v2", client=httpx.Client(transport=transport))


def test_connector_flattens_and_dedups_by_ticker(kalshi_market, kalshi_event, now):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        a = kalshi_market("A", "EV-1", volume=10, title="Same title")
        b = kalshi_market("B", "EV-1", volume=30, title="Same title")
        return httpx.Response(
            200,
            json={"events": [kalshi_event("EV-1", [a, b]), kalshi_event("EV-2", [dict(a)]), {"no": "markets"}]},
        )

    result = _connector(httpx.MockTransport(handler)).discover_markets(now=now)
    assert [m.ticker for m in result.markets] == ["B", "A"]
    assert result.duplicates_skipped == 1
    assert seen[0].path == "/trade-api/v2/events"
    assert seen[0].params["with_nested_markets"] == "true"


def test_connector_missing_events_raises(status_transport):
    with pytest.raises(UpstreamError, match="Invalid response format"):
        _connector(status_transport(200, {"cursor": ""})).discover_markets()


def test_connector_http_error_raises(status_transport):
    with pytest.raises(UpstreamError) as exc:
        _connector(status_transport(503, {})).discover_markets()
    assert exc.value.status_code == 503
    assert exc.value.venue == "kalshi"


def test_non_string_text_fields_get_defaults(kalshi_market, kalshi_event, now):
    raw = kalshi_market("K-1", "EV-1", title=42, subtitle=5, yes_sub_title=["x"], no_sub_title=1.5)
    m = normalize_market(raw, kalshi_event("EV-1", [raw], title=7), now=now)
    assert m.ticker == "K-1"
    assert m.title == "K-1"
    assert m.question == ""
    assert m.event_title == ""
    assert m.subtitle is None
    assert m.yes_sub_title is None
    assert m.no_sub_title is None
    assert m.option_name == ""
    assert m.yes_bid == pytest.approx(0.40)
