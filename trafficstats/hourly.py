"""
Hour-of-day aggregation.

Every consecutive pair of samples becomes one rate observation, classed by
the local clock hour of the pair's midpoint. Calendar dates are ignored, so
the 24 classes describe a "typical day" for the interface.

Pairs more than `max_gap` seconds apart are skipped: a long outage averaged
into one rate says little about any particular hour.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from trafficstats.rates import check_series, consecutive_rates
from trafficstats.schemas import HourStats, StatSummary
from trafficstats.stats import summarize

logger = logging.getLogger(__name__)

HOURS = 24
DEFAULT_MAX_GAP = 600
DEFAULT_MIN_SAMPLES = 3


def _empty_hours() -> List[List[float]]:
    return [[] for _ in range(HOURS)]


class HourlyProfile(BaseModel):
    """Per-hour lists of rx/tx rates in Mbps, index 0 = 00:00-00:59."""

    rx: List[List[float]] = Field(default_factory=_empty_hours)
    tx: List[List[float]] = Field(default_factory=_empty_hours)

    @property
    def observations(self) -> int:
        return sum(len(values) for values in self.rx)


def local_hour(timestamp: float, tz: Optional[tzinfo] = None) -> int:
    """Clock hour of a unix timestamp in `tz` (None = process local zone)."""
    return datetime.fromtimestamp(timestamp, tz).hour


def hourly_rates(
    samples: Sequence,
    max_gap: int = DEFAULT_MAX_GAP,
    tz: Optional[tzinfo] = None,
) -> Optional[HourlyProfile]:
    """
    Build the hour-of-day profile of an interface's full sample history.

    Returns None when there are fewer than two samples.
    """
    if len(samples) < 2:
        return None
    check_series(samples)

    profile = HourlyProfile()
    for obs in consecutive_rates(samples, max_gap=max_gap):
        hour = local_hour((obs.interval_start + obs.interval_end) / 2, tz)
        profile.rx[hour].append(obs.rx_mbps)
        profile.tx[hour].append(obs.tx_mbps)

    logger.debug(
        "hourly profile: %d observations from %d samples",
        profile.observations,
        len(samples),
    )
    return profile


def _sufficient(values: List[float], min_samples: int) -> Optional[StatSummary]:
    if len(values) < min_samples:
        return None
    return summarize(values)


def summarize_hours(
    profile: HourlyProfile,
    min_samples: int = DEFAULT_MIN_SAMPLES,
) -> List[HourStats]:
    """
    Statistics per hour. Hours with fewer than `min_samples` observations
    carry no summary at all rather than a misleading one.
    """
    return [
        HourStats(
            hour=hour,
            rx=_sufficient(profile.rx[hour], min_samples),
            tx=_sufficient(profile.tx[hour], min_samples),
        )
        for hour in range(HOURS)
    ]


def overall(profile: HourlyProfile):
    """Return `(rx, tx)` summaries across all hours (either may be None)."""
    rx = summarize(v for values in profile.rx for v in values)
    tx = summarize(v for values in profile.tx for v in values)
    return rx, tx


def peak_p95(hour_stats: Sequence[HourStats]) -> float:
    """Largest p95 among summarized hours, used to scale histogram bars."""
    peak = 0.0
    for stats in hour_stats:
        for summary in (stats.rx, stats.tx):
            if summary is not None:
                peak = max(peak, summary.p95)
    return peak or 1.0
