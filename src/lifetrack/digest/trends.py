"""Productivity trend analysis.

Classifies the direction of recent daily productivity scores by
comparing the opening and closing averages of a one-week window.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

TREND_WINDOW_DAYS = 7
TREND_EDGE_SIZE = 3
TREND_THRESHOLD = 5.0


class Trend(Enum):
    """Direction of productivity over the trend window."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass(frozen=True)
class TrendResult:
    """Outcome of a trend analysis.

    Attributes:
        trend: Classified direction
        change: Rounded magnitude of the difference between averages
        first_average: Mean of the first entries of the window
        last_average: Mean of the last entries of the window
    """

    trend: Trend
    change: int
    first_average: float
    last_average: float

    def to_dict(self) -> dict[str, object]:
        return {
            "trend": self.trend.value,
            "change": self.change,
            "first_average": self.first_average,
            "last_average": self.last_average,
        }


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def analyze_trend(scores: Sequence[float]) -> TrendResult:
    """Classify the trend of chronologically ordered daily scores.

    Only the last seven scores are considered. A difference of exactly
    5 points either way is still stable.

    Args:
        scores: Daily productivity scores (0-100), oldest first

    Returns:
        TrendResult with direction and magnitude

    Raises:
        ValueError: If scores is empty or contains values outside 0-100
    """
    if not scores:
        raise ValueError("At least one productivity score is required")
    for score in scores:
        if not 0 <= score <= 100:
            raise ValueError(f"Productivity score out of range: {score}")

    window = list(scores)[-TREND_WINDOW_DAYS:]
    first_average = _mean(window[:TREND_EDGE_SIZE])
    last_average = _mean(window[-TREND_EDGE_SIZE:])
    difference = last_average - first_average

    if difference > TREND_THRESHOLD:
        trend = Trend.UP
    elif difference < -TREND_THRESHOLD:
        trend = Trend.DOWN
    else:
        trend = Trend.STABLE

    return TrendResult(
        trend=trend,
        change=_round_half_up(abs(difference)),
        first_average=first_average,
        last_average=last_average,
    )


__all__ = ["Trend", "TrendResult", "analyze_trend"]
