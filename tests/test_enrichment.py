import random

import pytest

from apps.core.constants import AQI_ADVISORIES, POLLUTANT_ADVISORIES, TREND_LABELS
from apps.core.records import EnrichedRecord
from apps.enrichment.engine import (
    calculate_health_index,
    classify_trend,
    enrich,
    generate_recommendations,
)

from .helpers import build_record

STAY_INDOORS, AVOID_OUTDOORS, LIMIT_OUTDOORS = (advice for _, advice in AQI_ADVISORIES)
PM25_ADVICE, PM10_ADVICE, O3_ADVICE, NO2_ADVICE = (advice for _, _, advice in POLLUTANT_ADVISORIES)

QUIET = dict(pm25=0, pm10=0, o3=0, no2=0)


def test_health_index_is_rounded_mean():
    rng = random.Random(7)
    for _ in range(500):
        aqi, pm25, pm10 = (rng.randint(0, 500) for _ in range(3))
        record = build_record(aqi=aqi, pm25=pm25, pm10=pm10)
        assert calculate_health_index(record) == round((aqi + pm25 + pm10) / 3)


@pytest.mark.parametrize("aqi,label", [
    (0, 'Good'),
    (50, 'Good'),
    (51, 'Fair'),
    (100, 'Fair'),
    (101, 'Moderate'),
    (150, 'Moderate'),
    (151, 'Unhealthy'),
    (200, 'Unhealthy'),
    (201, 'Hazardous'),
    (500, 'Hazardous'),
])
def test_trend_boundaries(aqi, label):
    assert classify_trend(aqi) == label


def test_trend_covers_every_aqi_with_ordered_labels():
    labels = [classify_trend(aqi) for aqi in range(0, 501)]
    assert set(labels) == set(TREND_LABELS)
    # Monotonic: the label index never decreases as AQI grows
    ranks = [TREND_LABELS.index(label) for label in labels]
    assert ranks == sorted(ranks)


def test_only_highest_aqi_tier_fires():
    record = build_record(aqi=250, **QUIET)
    assert generate_recommendations(record) == [STAY_INDOORS]


@pytest.mark.parametrize("aqi,expected", [
    (100, []),
    (101, [LIMIT_OUTDOORS]),
    (151, [AVOID_OUTDOORS]),
    (201, [STAY_INDOORS]),
])
def test_aqi_tier_advisory_thresholds(aqi, expected):
    assert generate_recommendations(build_record(aqi=aqi, **QUIET)) == expected


def test_fair_record_has_no_aqi_advisory():
    record = build_record(aqi=80, **QUIET)
    assert classify_trend(record.aqi) == 'Fair'
    assert generate_recommendations(record) == []


def test_pollutant_advisories_follow_field_order():
    record = build_record(aqi=120, pm25=36, pm10=51, o3=101, no2=41)
    assert generate_recommendations(record) == [
        LIMIT_OUTDOORS, PM25_ADVICE, PM10_ADVICE, O3_ADVICE, NO2_ADVICE,
    ]


def test_pollutant_thresholds_are_strict():
    record = build_record(aqi=10, pm25=35, pm10=50, o3=100, no2=40)
    assert generate_recommendations(record) == []


def test_enrich_is_deterministic():
    record = build_record(aqi=180, pm25=40, pm10=90, o3=20, no2=50)
    first = enrich(record)
    second = enrich(record)

    assert isinstance(first, EnrichedRecord)
    assert first == second
    assert first.recommendations == (AVOID_OUTDOORS, PM25_ADVICE, PM10_ADVICE, NO2_ADVICE)
    assert first.health_index == round((180 + 40 + 90) / 3)
    assert first.trend_label == 'Unhealthy'
    assert first.aqi == record.aqi
    assert first.captured_at == record.captured_at


def test_enrich_of_enriched_record_matches():
    record = build_record(aqi=130)
    assert enrich(enrich(record)) == enrich(record)
