"""
Derived health metrics for a canonical record.

Everything here is pure: the same record always yields the same
EnrichedRecord.
"""
import logging
from typing import List

from apps.core.constants import (
    AQI_ADVISORIES,
    POLLUTANT_ADVISORIES,
    TREND_GOOD,
    TREND_THRESHOLDS,
)
from apps.core.records import AirQualityRecord, EnrichedRecord

logger = logging.getLogger(__name__)


def calculate_health_index(record: AirQualityRecord) -> int:
    """Mean of AQI, PM2.5 and PM10, rounded half up."""
    total = record.aqi + record.pm25 + record.pm10
    return int(total / 3 + 0.5)


def classify_trend(aqi: int) -> str:
    """Label an AQI with the five-step ladder; the upper bound of each step is inclusive."""
    for threshold, label in TREND_THRESHOLDS:
        if aqi > threshold:
            return label
    return TREND_GOOD


def generate_recommendations(record: AirQualityRecord) -> List[str]:
    """
    Build the ordered advisory list.

    At most one AQI-tier advisory comes first (only above 100), followed by
    each pollutant advisory whose threshold is exceeded, in field order.
    """
    recommendations = []

    for threshold, advice in AQI_ADVISORIES:
        if record.aqi > threshold:
            recommendations.append(advice)
            break

    for field_name, threshold, advice in POLLUTANT_ADVISORIES:
        if getattr(record, field_name) > threshold:
            recommendations.append(advice)

    return recommendations


def enrich(record: AirQualityRecord) -> EnrichedRecord:
    enriched = EnrichedRecord.from_record(
        record,
        health_index=calculate_health_index(record),
        trend_label=classify_trend(record.aqi),
        recommendations=generate_recommendations(record),
    )
    logger.debug(
        f"Enriched AQI {record.aqi}: health index {enriched.health_index}, "
        f"trend {enriched.trend_label}, {len(enriched.recommendations)} advisories"
    )
    return enriched
