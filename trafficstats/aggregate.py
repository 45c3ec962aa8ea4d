"""
Interval aggregation: fixed-width, time-aligned buckets over a sample series.

For a step width S, a bucket count N and a reference instant `now`:

    aligned_end   = floor(now / S) * S
    aligned_start = aligned_end - N * S

Bucket i covers `[aligned_start + i*S, aligned_start + (i+1)*S)`. Its rate
comes from the samples bracketing that slot. Samples should be fetched from
`aligned_start - S` onward so the first bucket can be bracketed.
"""

from __future__ import annotations

import logging
import re
from typing import Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from trafficstats.bracket import bracket_samples
from trafficstats.rates import check_series, compute_rate
from trafficstats.schemas import Bucket, IntervalSeries

logger = logging.getLogger(__name__)


_INTERVAL_RE = re.compile(r"^\s*(\d+)\s*([hm]?)\s*$", re.IGNORECASE)


class IntervalSpec(BaseModel):
    """
    Bucket width for the interval aggregator, in seconds.

    Build one with `IntervalSpec.parse("15m")` or `IntervalSpec(seconds=900)`.
    """

    model_config = ConfigDict(frozen=True)

    seconds: int = Field(gt=0)

    @classmethod
    def parse(cls, value: str) -> "IntervalSpec":
        """
        Parse interval shorthand:

        - "5m"  -> 300
        - "1h"  -> 3600
        - "30"  -> 1800 (bare numbers are minutes)
        """
        m = _INTERVAL_RE.match(str(value))
        if not m:
            raise ValueError(f"invalid interval {value!r}; use e.g. 5m, 15m, 30m, 1h")
        amount, unit = int(m.group(1)), m.group(2).lower()
        seconds = amount * 3600 if unit == "h" else amount * 60
        if seconds <= 0:
            raise ValueError(f"interval must be positive, got {value!r}")
        return cls(seconds=seconds)

    @property
    def label(self) -> str:
        if self.seconds % 3600 == 0:
            return f"{self.seconds // 3600}h"
        if self.seconds % 60 == 0:
            return f"{self.seconds // 60}min"
        return f"{self.seconds}s"


def interval_window(spec: IntervalSpec, count: int, now: int) -> Tuple[int, int]:
    """Return `(aligned_start, aligned_end)` for `count` buckets ending at `now`."""
    if count <= 0:
        raise ValueError(f"bucket count must be positive, got {count}")
    step = spec.seconds
    aligned_end = (int(now) // step) * step
    return aligned_end - count * step, aligned_end


def lookback_since(spec: IntervalSpec, count: int, now: int) -> int:
    """Earliest timestamp the caller needs to fetch for this window."""
    aligned_start, _ = interval_window(spec, count, now)
    return aligned_start - spec.seconds


def aggregate_intervals(
    samples: Sequence,
    spec: IntervalSpec,
    count: int,
    now: int,
) -> IntervalSeries:
    """
    Bucket an ordered sample series into `count` slots of `spec.seconds`.

    Always returns exactly `count` buckets. When fewer than two samples are
    given the buckets are all empty and `enough_data` is False.
    """
    aligned_start, aligned_end = interval_window(spec, count, now)
    step = spec.seconds
    check_series(samples)

    timestamps = [s.timestamp for s in samples]
    enough_data = len(samples) >= 2

    buckets = []
    dropped = 0
    for i in range(count):
        start = aligned_start + i * step
        end = start + step

        observation = None
        if enough_data:
            pair = bracket_samples(samples, timestamps, start, end)
            if pair is not None:
                observation = compute_rate(*pair)
                if observation is None:
                    dropped += 1

        buckets.append(Bucket(start=start, end=end, observation=observation))

    series = summarize_buckets(
        buckets,
        step,
        start=aligned_start,
        end=aligned_end,
        enough_data=enough_data,
        dropped=dropped,
    )

    if dropped:
        logger.debug("%d of %d buckets dropped (counter reset)", dropped, count)

    return series


def summarize_buckets(buckets: Sequence[Bucket], step: int, **extra) -> IntervalSeries:
    """
    Totals over the buckets that carry an observation.

    The average rate runs from the start of the first valid bucket to the end
    of the last one.
    """
    rx_bytes = tx_bytes = valid = 0
    first_valid = last_valid = None

    for bucket in buckets:
        obs = bucket.observation
        if obs is None:
            continue
        valid += 1
        rx_bytes += obs.rx_bytes
        tx_bytes += obs.tx_bytes
        if first_valid is None:
            first_valid = bucket.start
        last_valid = bucket.end

    fields = dict(
        start=buckets[0].start if buckets else 0,
        end=buckets[-1].end if buckets else 0,
    )
    fields.update(extra)

    return IntervalSeries(
        interval_seconds=step,
        buckets=list(buckets),
        valid_buckets=valid,
        rx_bytes=rx_bytes,
        tx_bytes=tx_bytes,
        first_valid=first_valid,
        last_valid=last_valid,
        **fields,
    )
