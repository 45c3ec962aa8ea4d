"""
Find the samples that bracket a time slot.

For a slot `[start, end)` the bracket is:

- prev: the latest sample with timestamp <= start
- next: the earliest sample with timestamp >= end

Both lookups use binary search over the (sorted) timestamps, which gives the
same answer as scanning the whole sequence for every slot.
"""

from bisect import bisect_left, bisect_right
from typing import Optional, Sequence, Tuple


def find_bracket(
    timestamps: Sequence[int],
    start: int,
    end: int,
) -> Tuple[Optional[int], Optional[int]]:
    """
    Return `(prev_index, next_index)` into `timestamps`; either may be None.
    """
    prev_idx = bisect_right(timestamps, start) - 1
    next_idx = bisect_left(timestamps, end)

    return (
        prev_idx if prev_idx >= 0 else None,
        next_idx if next_idx < len(timestamps) else None,
    )


def bracket_samples(samples: Sequence, timestamps: Sequence[int], start: int, end: int):
    """
    Return the bracketing `(prev, next)` samples for a slot, or None when
    the slot cannot be bracketed.
    """
    prev_idx, next_idx = find_bracket(timestamps, start, end)
    if prev_idx is None or next_idx is None:
        return None

    prev, nxt = samples[prev_idx], samples[next_idx]
    if nxt.timestamp <= prev.timestamp:
        return None
    return prev, nxt
