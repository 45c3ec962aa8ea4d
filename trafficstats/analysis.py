"""
Glue between the sample store and the analysis core.

Every report mode (CLI and HTTP) goes through these functions, so the
fetch window and the defaults from settings are decided in one place.
"""

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from trafficstats.aggregate import IntervalSpec, aggregate_intervals, lookback_since
from trafficstats.config import settings
from trafficstats.hourly import hourly_rates, summarize_hours, HourlyProfile
from trafficstats.rates import PERIODS, period_traffic
from trafficstats.schemas import HourStats, InterfaceRef, IntervalSeries, PeriodTraffic
from trafficstats.store import query_samples


def load_interval_series(
    db: Session,
    ref: InterfaceRef,
    spec: IntervalSpec,
    count: int,
    now: int,
) -> IntervalSeries:
    since = lookback_since(spec, count, now)
    samples = query_samples(db, ref.device_name, ref.interface_index, since)
    return aggregate_intervals(samples, spec, count, now)


def load_hourly_profile(db: Session, ref: InterfaceRef) -> Optional[HourlyProfile]:
    samples = query_samples(db, ref.device_name, ref.interface_index)
    return hourly_rates(
        samples,
        max_gap=settings.hourly_max_gap_seconds,
        tz=settings.tz,
    )


def load_hour_stats(db: Session, ref: InterfaceRef) -> Optional[Tuple[HourlyProfile, List[HourStats]]]:
    """Profile plus per-hour statistics, or None when there is no history."""
    profile = load_hourly_profile(db, ref)
    if profile is None:
        return None
    return profile, summarize_hours(profile, min_samples=settings.hourly_min_samples)


def load_period_traffic(
    db: Session,
    ref: InterfaceRef,
    now: int,
) -> List[Tuple[str, Optional[PeriodTraffic]]]:
    longest = max(seconds for _, seconds in PERIODS)
    samples = query_samples(db, ref.device_name, ref.interface_index, now - longest)
    return period_traffic(samples, now)
