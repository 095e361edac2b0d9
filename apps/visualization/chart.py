"""
Bar chart of pollutant concentrations against reference maxima.
"""
from dataclasses import dataclass
from typing import List

from apps.core.constants import CHART_POLLUTANTS, POLLUTANTS
from apps.core.records import AirQualityRecord
from apps.core.utils import get_bar_color

from .surface import DrawingSurface


@dataclass(frozen=True)
class Bar:
    key: str
    label: str
    value: int
    maximum: int
    ratio: float
    x: float
    y: float
    width: float
    height: float
    color: str


class BarChartRenderer:
    GAP = 20
    MARGIN = 10
    BASELINE_OFFSET = 30
    VERTICAL_PADDING = 60
    LABEL_OFFSET = 10
    VALUE_OFFSET = 5

    def layout(self, record: AirQualityRecord, width: float, height: float) -> List[Bar]:
        """
        Place one bar per pollutant. Bar height is value/max of the
        available height, measured up from the baseline.
        """
        count = len(CHART_POLLUTANTS)
        bar_width = max(width / count - self.GAP, 0)
        max_bar_height = max(height - self.VERTICAL_PADDING, 0)

        bars = []
        for index, (key, maximum) in enumerate(CHART_POLLUTANTS):
            value = getattr(record, key)
            ratio = value / maximum
            bar_height = ratio * max_bar_height

            bars.append(Bar(
                key=key,
                label=POLLUTANTS[key]['name'],
                value=value,
                maximum=maximum,
                ratio=ratio,
                x=index * (bar_width + self.GAP) + self.MARGIN,
                y=height - bar_height - self.BASELINE_OFFSET,
                width=bar_width,
                height=bar_height,
                color=get_bar_color(value, maximum),
            ))
        return bars

    def draw(self, surface: DrawingSurface, record: AirQualityRecord) -> List[Bar]:
        bars = self.layout(record, surface.width, surface.height)

        surface.clear()
        for bar in bars:
            center = bar.x + bar.width / 2
            surface.fill_rect(bar.x, bar.y, bar.width, bar.height, bar.color)
            surface.fill_text(bar.label, center, surface.height - self.LABEL_OFFSET)
            surface.fill_text(str(bar.value), center, bar.y - self.VALUE_OFFSET)

        return bars
