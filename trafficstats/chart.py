"""
Terminal chart of an rx/tx bucket series.

The grid has one column per bucket and `rows` value bands. Row r (counted
from the bottom) covers `[r/rows * scale, (r+1)/rows * scale)`; a cell shows
which of rx and tx fall inside its band:

    *  both      -  rx only      +  tx only

Buckets without data stay blank. Rendering is a pure function of its
arguments; printing is left to the caller.
"""

import math
from datetime import tzinfo
from typing import Optional, Sequence

from trafficstats.formatting import format_clock, format_rate
from trafficstats.schemas import Bucket, Chart, IntervalSeries

Y_AXIS_WIDTH = 8
DEFAULT_ROWS = 15
DEFAULT_LABELS = 6
# top, middle and zero labels each need a row of their own
MIN_ROWS = 3

RX_GLYPH = "-"
TX_GLYPH = "+"
BOTH_GLYPH = "*"

LEGEND = f"Legend: {RX_GLYPH} RX (in)  {TX_GLYPH} TX (out)  {BOTH_GLYPH} both"


def nice_max(buckets: Sequence[Bucket]) -> float:
    """Round the observed peak (in Mbps) up with 10% headroom; 1 when flat."""
    peak = 0.0
    for bucket in buckets:
        obs = bucket.observation
        if obs is not None:
            peak = max(peak, obs.rx_mbps, obs.tx_mbps)
    if peak <= 0:
        return 1
    return math.ceil(peak * 1.1)


def _glyph(bucket: Bucket, low: float, high: float) -> str:
    obs = bucket.observation
    if obs is None:
        return " "
    rx_in = low <= obs.rx_mbps < high
    tx_in = low <= obs.tx_mbps < high
    if rx_in and tx_in:
        return BOTH_GLYPH
    if rx_in:
        return RX_GLYPH
    if tx_in:
        return TX_GLYPH
    return " "


def _y_label(row: int, rows: int, scale: float) -> str:
    pad = Y_AXIS_WIDTH - 2
    if row == rows - 1:
        return format_rate(scale).rjust(pad) + " ┤"
    if row == rows // 2:
        return format_rate(scale / 2).rjust(pad) + " ┤"
    if row == 0:
        return "0".rjust(pad) + " ┤"
    return " " * pad + " │"


def _time_axis(buckets: Sequence[Bucket], labels: int, tz: Optional[tzinfo]) -> str:
    width = Y_AXIS_WIDTH + len(buckets)
    line = [" "] * width
    spacing = len(buckets) // labels if labels > 0 else 0
    free = 0

    for i in range(labels + 1):
        idx = i * spacing
        if idx >= len(buckets):
            continue
        text = format_clock(buckets[idx].start, tz)
        pos = Y_AXIS_WIDTH + idx
        # narrow charts: never let a label overwrite the previous one
        if pos < free or pos + len(text) >= width:
            continue
        line[pos:pos + len(text)] = text
        free = pos + len(text) + 1
    return "".join(line)


def render_chart(
    buckets: Sequence[Bucket],
    rows: int = DEFAULT_ROWS,
    scale: Optional[float] = None,
    labels: int = DEFAULT_LABELS,
    tz: Optional[tzinfo] = None,
) -> Chart:
    """
    Render `buckets` into a character grid `rows` high.

    `scale` is the value at the top of the chart in Mbps; by default it is
    derived from the data with `nice_max`. `rows` must be at least 3 so the
    top, middle and zero labels land on distinct rows. The result has `rows`
    plot lines, an x-axis line and a time-label line, all of equal width.
    """
    if rows < MIN_ROWS:
        raise ValueError(f"rows must be at least {MIN_ROWS}, got {rows}")
    if scale is None:
        scale = nice_max(buckets)
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")

    lines = []
    for row in range(rows - 1, -1, -1):
        low = row / rows * scale
        high = (row + 1) / rows * scale
        cells = "".join(_glyph(bucket, low, high) for bucket in buckets)
        lines.append(_y_label(row, rows, scale) + cells)

    lines.append(" " * (Y_AXIS_WIDTH - 1) + "└" + "─" * len(buckets))
    lines.append(_time_axis(buckets, labels, tz))

    return Chart(lines=lines, scale=scale)


def render_series(series: IntervalSeries, rows: int = DEFAULT_ROWS, tz: Optional[tzinfo] = None) -> Chart:
    """
    Chart an aggregated interval series.

    A series built from fewer than two samples is flagged `not_enough_data`;
    one whose buckets all came out empty still gets its blank grid.
    """
    chart = render_chart(series.buckets, rows=rows, tz=tz)
    chart.not_enough_data = not series.enough_data
    return chart
