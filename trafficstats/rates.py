"""
Rate calculation between counter snapshots.

Two samples of the same interface give one RateObservation, or nothing when
the pair cannot produce a meaningful rate:

- the samples belong to different interfaces
- the second sample is not strictly later than the first (clock skew,
  duplicate poll)
- any octet or packet counter went backwards (device reboot, counter wrap)
- the gap between them exceeds an optional ceiling

Wrapped counters are not estimated; the interval is simply discarded.
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from collections import Counter
from typing import Optional, Sequence

from trafficstats.schemas import PeriodTraffic, RateObservation

logger = logging.getLogger(__name__)


OK = "ok"
MIXED_INTERFACE = "mixed_interface"
NON_CHRONOLOGICAL = "non_chronological"
COUNTER_RESET = "counter_reset"
GAP = "gap"


# Look-back periods used by the period reports, shortest first.
PERIODS = [
    ("5m", 5 * 60),
    ("15m", 15 * 60),
    ("1h", 60 * 60),
    ("6h", 6 * 60 * 60),
    ("12h", 12 * 60 * 60),
    ("24h", 24 * 60 * 60),
    ("3d", 3 * 24 * 60 * 60),
    ("7d", 7 * 24 * 60 * 60),
    ("28d", 28 * 24 * 60 * 60),
    ("90d", 90 * 24 * 60 * 60),
]


class SampleOrderError(ValueError):
    """Raised when a sample sequence is not one interface in time order."""


def classify_pair(a, b, max_gap: Optional[int] = None) -> str:
    """
    Return why a pair of samples would be rejected, or OK if it is usable.
    """
    if (a.device_name, a.interface_index) != (b.device_name, b.interface_index):
        return MIXED_INTERFACE

    duration = b.timestamp - a.timestamp
    if duration <= 0:
        return NON_CHRONOLOGICAL

    if (
        b.in_octets < a.in_octets
        or b.out_octets < a.out_octets
        or b.in_packets < a.in_packets
        or b.out_packets < a.out_packets
    ):
        return COUNTER_RESET

    if max_gap is not None and duration > max_gap:
        return GAP

    return OK


def compute_rate(a, b, max_gap: Optional[int] = None) -> Optional[RateObservation]:
    """
    Compute the traffic rate between samples `a` and `b`.

    Returns None when the pair is rejected (see `classify_pair`). Error
    counters never invalidate a pair; a decreasing error counter counts as
    zero new errors.
    """
    if classify_pair(a, b, max_gap) != OK:
        return None

    duration = b.timestamp - a.timestamp
    rx_bytes = b.in_octets - a.in_octets
    tx_bytes = b.out_octets - a.out_octets

    errors = max(0, b.in_errors - a.in_errors) + max(0, b.out_errors - a.out_errors)

    return RateObservation(
        interval_start=a.timestamp,
        interval_end=b.timestamp,
        rx_bytes=rx_bytes,
        tx_bytes=tx_bytes,
        rx_bits_per_sec=rx_bytes * 8 / duration,
        tx_bits_per_sec=tx_bytes * 8 / duration,
        rx_packets=b.in_packets - a.in_packets,
        tx_packets=b.out_packets - a.out_packets,
        errors=errors,
    )


def check_series(samples: Sequence) -> None:
    """
    Validate that `samples` is one interface in non-decreasing time order.

    Equal timestamps (duplicate polls) are allowed here; the rate
    calculation drops them. Anything else is a caller bug.
    """
    for prev, cur in zip(samples, samples[1:]):
        if (prev.device_name, prev.interface_index) != (cur.device_name, cur.interface_index):
            raise SampleOrderError(
                f"samples mix interfaces {prev.device_name}/{prev.interface_index} "
                f"and {cur.device_name}/{cur.interface_index}"
            )
        if cur.timestamp < prev.timestamp:
            raise SampleOrderError(
                f"samples out of order: {cur.timestamp} after {prev.timestamp}"
            )


def consecutive_rates(samples: Sequence, max_gap: Optional[int] = None):
    """
    Yield a RateObservation for every valid consecutive pair.

    Rejected pairs are tallied and logged at debug level so dropped
    intervals (reboots in particular) stay visible without changing output.
    """
    dropped = Counter()
    for prev, cur in zip(samples, samples[1:]):
        reason = classify_pair(prev, cur, max_gap)
        if reason != OK:
            dropped[reason] += 1
            continue
        yield compute_rate(prev, cur)

    if dropped:
        logger.debug("dropped intervals: %s", dict(dropped))


def window_traffic(samples: Sequence, period: str, seconds: int) -> Optional[PeriodTraffic]:
    """
    Sum traffic over the samples of one look-back window.

    Totals are accumulated per valid consecutive pair, so a counter reset
    inside the window only loses the interval it happened in. Returns None
    when no pair in the window is usable.
    """
    check_series(samples)

    duration = rx_bytes = tx_bytes = rx_packets = tx_packets = errors = 0
    for obs in consecutive_rates(samples):
        duration += obs.duration
        rx_bytes += obs.rx_bytes
        tx_bytes += obs.tx_bytes
        rx_packets += obs.rx_packets
        tx_packets += obs.tx_packets
        errors += obs.errors

    if duration <= 0:
        return None

    return PeriodTraffic(
        period=period,
        seconds=seconds,
        duration=duration,
        rx_bytes=rx_bytes,
        tx_bytes=tx_bytes,
        rx_packets=rx_packets,
        tx_packets=tx_packets,
        errors=errors,
    )


def period_traffic(samples: Sequence, now: int, periods=PERIODS):
    """
    Return `(name, PeriodTraffic or None)` for each look-back period.

    `samples` must cover the longest period; shorter ones are sliced from it.
    Every window is `[now - seconds, now]`, so samples after `now` never count.
    """
    timestamps = [s.timestamp for s in samples]
    hi = bisect_right(timestamps, now)
    results = []
    for name, seconds in periods:
        lo = bisect_left(timestamps, now - seconds, 0, hi)
        results.append((name, window_traffic(samples[lo:hi], name, seconds)))
    return results
