"""Price chart view model."""

from dataclasses import dataclass
from typing import Iterable

from core.models import PricePoint

SERIES_LABEL = "BTC Price (USD)"
TIME_FORMAT = "%H:%M:%S"


@dataclass(frozen=True)
class ChartSeries:
    labels: tuple[str, ...]
    values: tuple[float, ...]
    label: str = SERIES_LABEL

    def __len__(self) -> int:
        return len(self.values)


def format_time(point: PricePoint) -> str:
    """Local time of day for an axis label."""
    return point.timestamp.astimezone().strftime(TIME_FORMAT)


def to_chart_series(prices: Iterable[PricePoint]) -> ChartSeries:
    """One label and one value per point, in the order given.

    Input is expected oldest first (see ``core.models.chronological``); no
    resampling or smoothing happens here.
    """
    points = list(prices)
    return ChartSeries(
        labels=tuple(format_time(p) for p in points),
        values=tuple(p.price for p in points),
    )
