"""
Canonical record types shared by every stage of the pipeline.

Records are immutable; each acquisition cycle replaces them wholesale.
"""
from dataclasses import dataclass, field, fields, asdict
from datetime import datetime
from typing import Dict, Optional, Tuple

from django.utils import timezone

UNKNOWN = 'Unknown'

POLLUTANT_FIELDS = ('pm25', 'pm10', 'o3', 'no2', 'so2', 'co')


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __str__(self):
        return f"({self.latitude:.4f}, {self.longitude:.4f})"


@dataclass(frozen=True)
class PlaceInfo:
    """Best-effort place name. 'Unknown' is a valid value, never None."""
    city: str = UNKNOWN
    country: str = UNKNOWN

    @property
    def label(self) -> str:
        if self.country == UNKNOWN:
            return self.city
        return f"{self.city}, {self.country}"


@dataclass(frozen=True)
class ResolvedLocation:
    coordinate: Coordinate
    place: PlaceInfo
    is_fallback: bool = False
    fallback_reason: str = ''
    resolved_at: datetime = field(default_factory=timezone.now)


@dataclass(frozen=True)
class RawReading:
    """Provider-native payload before unit and scale normalization."""
    source: str
    payload: Dict
    fetched_at: datetime = field(default_factory=timezone.now)


@dataclass(frozen=True)
class AirQualityRecord:
    """
    Canonical reading.

    aqi is on the unified 0-500 scale, pollutants are non-negative integer
    concentrations (co in mg/m3, the rest in ug/m3), temperature in degrees C
    and humidity in percent.
    """
    aqi: int
    pm25: int
    pm10: int
    o3: int
    no2: int
    so2: int
    co: int
    temperature: int
    humidity: int
    place_label: str
    captured_at: datetime

    def pollutants(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in POLLUTANT_FIELDS}

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class EnrichedRecord(AirQualityRecord):
    health_index: int
    trend_label: str
    recommendations: Tuple[str, ...]

    @classmethod
    def from_record(cls, record: AirQualityRecord, health_index: int,
                    trend_label: str, recommendations) -> 'EnrichedRecord':
        base = {item.name: getattr(record, item.name) for item in fields(AirQualityRecord)}
        return cls(
            **base,
            health_index=health_index,
            trend_label=trend_label,
            recommendations=tuple(recommendations),
        )


@dataclass(frozen=True)
class Notice:
    """Non-blocking message shown alongside the current record."""
    message: str
    level: str = 'warning'
    source: Optional[str] = None
    created_at: datetime = field(default_factory=timezone.now)
