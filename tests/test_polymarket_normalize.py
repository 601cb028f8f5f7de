"""Gamma record normalization."""

import pytest

from predboard.ingestion.polymarket.normalize import (
    SeriesShape,
    classify_series,
    normalize_market,
    parse_outcome_series,
)


def test_full_record(gamma_event, now):
    m = normalize_market(gamma_event(1, image="https://img", slug="thing-1"), now=now)
    assert m.id == "1001"
    assert m.venue == "polymarket"
    assert m.title == "Market number 1"
    assert m.question == "Will thing 1 happen?"
    assert m.volume == 9999.0
    assert m.liquidity == 501.0
    assert m.end_date == "2026-12-31T00:00:00Z"
    assert m.outcomes == ["Yes", "No"]
    assert m.outcome_prices == [0.6, 0.4]
    assert m.active is True and m.closed is False
    assert m.image == "https://img"
    assert m.slug == "thing-1"
    assert m.is_new is False


@pytest.mark.parametrize("drop", ["volume", "liquidity"])
def test_missing_amount_is_zero(gamma_event, now, drop):
    raw = gamma_event(1)
    del raw[drop]
    assert getattr(normalize_market(raw, now=now), drop) == 0.0


@pytest.mark.parametrize("value", ["abc", None, [], {"x": 1}, True, "nan", -5])
def test_unusable_volume_is_zero(gamma_event, now, value):
    assert normalize_market(gamma_event(1, volume=value), now=now).volume == 0.0


def test_volume_num_fallback(gamma_event, now):
    raw = gamma_event(1, volumeNum=123.5, liquidityNum=7)
    del raw["volume"], raw["liquidity"]
    m = normalize_market(raw, now=now)
    assert m.volume == 123.5
    assert m.liquidity == 7.0


@pytest.mark.parametrize("prices", ["not json", "[0.5,", "{", "42", '["a", "b"]'])
def test_bad_outcome_prices_yield_empty_list(gamma_event, now, prices):
    m = normalize_market(gamma_event(1, outcomePrices=prices), now=now)
    assert m.outcome_prices == []
    assert m.outcomes == ["Yes", "No"]


def test_bad_outcomes_yield_empty_lists(gamma_event, now):
    m = normalize_market(gamma_event(1, outcomes="[broken"), now=now)
    assert m.outcomes == []
    assert m.outcome_prices == []


def test_misaligned_prices_are_dropped():
    outcomes, prices = parse_outcome_series('["A", "B", "C"]', '["0.2", "0.8"]')
    assert outcomes == ["A", "B", "C"]
    assert prices == []


def test_price_mapping_is_aligned_to_outcomes():
    outcomes, prices = parse_outcome_series(["No", "Yes"], {"Yes": 0.7, "No": "0.3"})
    assert outcomes == ["No", "Yes"]
    assert prices == [0.3, 0.7]


def test_price_mapping_without_outcomes_uses_keys():
    outcomes, prices = parse_outcome_series(None, {"Yes": 0.25, "No": 0.75})
    assert outcomes == ["Yes", "No"]
    assert prices == [0.25, 0.75]


def test_classify_series():
    assert classify_series(None)[0] is SeriesShape.ABSENT
    assert classify_series("")[0] is SeriesShape.ABSENT
    assert classify_series('["a"]') == (SeriesShape.SEQUENCE, ["a"])
    assert classify_series(["a"]) == (SeriesShape.SEQUENCE, ["a"])
    assert classify_series('{"a": 1}') == (SeriesShape.MAPPING, {"a": 1})
    assert classify_series("oops")[0] is SeriesShape.INVALID
    assert classify_series(3)[0] is SeriesShape.INVALID


@pytest.mark.parametrize(
    "key", ["endDate", "end_date", "endDateIso", "end_date_iso"]
)
def test_end_date_sources(gamma_event, now, key):
    raw = gamma_event(1)
    del raw["endDate"]
    raw[key] = "2027-03-01"
    assert normalize_market(raw, now=now).end_date == "2027-03-01"


def test_end_date_sentinel(gamma_event, now):
    raw = gamma_event(1)
    del raw["endDate"]
    assert normalize_market(raw, now=now).end_date == "N/A"


def test_title_fallbacks(gamma_event, now):
    raw = gamma_event(1)
    del raw["title"]
    assert normalize_market(raw, now=now).title == "Will thing 1 happen?"
    del raw["question"]
    m = normalize_market(raw, now=now)
    assert m.title == "Untitled Market"
    assert m.question == ""


def test_is_new_from_created_at(gamma_event, now):
    assert normalize_market(gamma_event(1, createdAt="2026-10-15T00:00:00Z"), now=now).is_new
    assert not normalize_market(gamma_event(1, createdAt="2026-10-01T00:00:00Z"), now=now).is_new


def test_is_new_flag_and_start_date(gamma_event, now):
    assert normalize_market(gamma_event(1, new=True), now=now).is_new
    raw = gamma_event(1, startDate="2026-10-18T00:00:00Z")
    del raw["createdAt"]
    assert normalize_market(raw, now=now).is_new
    assert not normalize_market(gamma_event(1, createdAt="garbage"), now=now).is_new


def test_category_from_text_and_raw(gamma_event, now):
    assert normalize_market(gamma_event(1, title="Bitcoin above 100k?", question=""), now=now).category == "Crypto"
    assert normalize_market(gamma_event(1, category="sports"), now=now).category == "Sports"


def test_category_uses_nested_question_when_untitled(gamma_event, now):
    raw = gamma_event(1, markets=[{"id": "a", "question": "Senate control after the midterms?"}])
    del raw["title"], raw["question"]
    assert normalize_market(raw, now=now).category == "Politics"


def test_nested_markets_become_sub_markets(gamma_event, now):
    raw = gamma_event(
        1,
        title="Bitcoin price end of year",
        question="",
        outcomes=None,
        outcomePrices=None,
        markets=[
            {
                "id": "s1",
                "question": "Above 100k?",
                "groupItemTitle": "100k+",
                "outcomes": '["Yes", "No"]',
                "outcomePrices": '["0.3", "0.7"]',
                "volume": "12",
                "active": True,
            },
            {"conditionId": "0xabc", "question": "Below 50k?", "outcomePrices": "junk"},
            "not a dict",
        ],
    )
    m = normalize_market(raw, now=now)
    assert m.outcomes == [] and m.outcome_prices == []
    assert [s.id for s in m.sub_markets] == ["s1", "0xabc"]
    first, second = m.sub_markets
    assert first.title == "100k+"
    assert first.outcome_prices == [0.3, 0.7]
    assert first.category == "Crypto"
    assert second.title == "Below 50k"
    assert second.outcome_prices == []
    assert second.sub_markets == []


def test_serialized_with_camel_case(gamma_event, now):
    data = normalize_market(gamma_event(1, conditionId="0x1"), now=now).model_dump(by_alias=True)
    assert data["endDate"] == "2026-12-31T00:00:00Z"
    assert data["outcomePrices"] == [0.6, 0.4]
    assert data["isNew"] is False
    assert data["conditionId"] == "0x1"


def test_non_string_text_fields_get_defaults(gamma_event, now):
    m = normalize_market(gamma_event(1, question=12345, slug=["x"], description={"a": 1}), now=now)
    assert m.id == "1001"
    assert m.title == "Market number 1"
    assert m.question == ""
    assert m.slug is None
    assert m.description is None


def test_nested_market_with_non_string_labels(gamma_event, now):
    raw = gamma_event(1, markets=[{"question": 7}, {"groupItemTitle": 3, "question": "Above 5?", "title": 9}])
    first, second = normalize_market(raw, now=now).sub_markets
    assert first.id == "1001-0"
    assert first.title == "Option"
    assert first.question == ""
    assert second.title == "Above 5"
