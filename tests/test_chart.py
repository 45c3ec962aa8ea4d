from datetime import timezone

import pytest

from trafficstats.aggregate import IntervalSpec, aggregate_intervals
from trafficstats.chart import (
    BOTH_GLYPH,
    RX_GLYPH,
    TX_GLYPH,
    Y_AXIS_WIDTH,
    nice_max,
    render_chart,
    render_series,
)
from trafficstats.schemas import Bucket, RateObservation

STEP = 300


def bucket(i, rx_mbps=None, tx_mbps=None):
    start = i * STEP
    if rx_mbps is None:
        return Bucket(start=start, end=start + STEP)
    obs = RateObservation(
        interval_start=start,
        interval_end=start + STEP,
        rx_bytes=int(rx_mbps * 1_000_000 * STEP / 8),
        tx_bytes=int(tx_mbps * 1_000_000 * STEP / 8),
        rx_bits_per_sec=rx_mbps * 1_000_000,
        tx_bits_per_sec=tx_mbps * 1_000_000,
    )
    return Bucket(start=start, end=start + STEP, observation=obs)


def plot_cells(chart, rows):
    """Plot area only, top row first."""
    return [line[Y_AXIS_WIDTH:] for line in chart.lines[:rows]]


def test_nice_max():
    assert nice_max([]) == 1
    assert nice_max([bucket(0, 0, 0), bucket(1)]) == 1
    assert nice_max([bucket(0, 5, 2), bucket(1, 1, 3)]) == 6
    assert nice_max([bucket(0, 0.5, 0.2)]) == 1


def test_grid_dimensions():
    buckets = [bucket(i, 1, 1) for i in range(40)]

    chart = render_chart(buckets, rows=10, tz=timezone.utc)

    assert len(chart.lines) == 12
    assert {len(line) for line in chart.lines} == {Y_AXIS_WIDTH + 40}
    assert chart.lines[10] == " " * (Y_AXIS_WIDTH - 1) + "└" + "─" * 40


def test_glyphs_by_band():
    buckets = [bucket(0, 7, 7), bucket(1, 2.5, 5), bucket(2), bucket(3, 0, 0)]

    chart = render_chart(buckets, rows=4, scale=8, tz=timezone.utc)
    cells = plot_cells(chart, 4)

    # bands from the top: [6, 8), [4, 6), [2, 4), [0, 2)
    assert cells[0] == BOTH_GLYPH + "   "
    assert cells[1] == " " + TX_GLYPH + "  "
    assert cells[2] == " " + RX_GLYPH + "  "
    assert cells[3] == "   " + BOTH_GLYPH


def test_no_data_column_is_blank():
    buckets = [bucket(0, 1, 1), bucket(1), bucket(2, 1, 1)]

    chart = render_chart(buckets, rows=4, tz=timezone.utc)

    assert all(row[1] == " " for row in plot_cells(chart, 4))
    assert not chart.not_enough_data


def test_y_axis_labels():
    chart = render_chart([bucket(0, 5, 2)], rows=15, tz=timezone.utc)

    assert chart.scale == 6
    assert chart.lines[0].startswith("  6.0M ┤")
    assert chart.lines[15 - 1 - 7].startswith("  3.0M ┤")
    assert chart.lines[14].startswith("     0 ┤")
    assert chart.lines[1].startswith("       │")


def test_time_labels():
    buckets = [bucket(i, 1, 1) for i in range(60)]

    chart = render_chart(buckets, rows=5, labels=6, tz=timezone.utc)
    axis = chart.lines[-1]

    assert axis[Y_AXIS_WIDTH:Y_AXIS_WIDTH + 5] == "00:00"
    # label every 10 buckets = 50 minutes
    assert axis[Y_AXIS_WIDTH + 10:Y_AXIS_WIDTH + 15] == "00:50"
    assert axis[Y_AXIS_WIDTH + 50:Y_AXIS_WIDTH + 55] == "04:10"


def test_values_above_scale_are_clipped():
    chart = render_chart([bucket(0, 100, 100)], rows=5, scale=10, tz=timezone.utc)

    assert all(row == " " for row in plot_cells(chart, 5))


def test_empty_input_gives_blank_grid():
    series = aggregate_intervals([], IntervalSpec(seconds=STEP), 20, 6000)

    chart = render_series(series, rows=5, tz=timezone.utc)

    assert chart.not_enough_data
    assert all(row.strip() == "" for row in plot_cells(chart, 5))
    assert chart.scale == 1


def test_all_empty_buckets_still_draw_a_grid(make_sample):
    samples = [make_sample(0, 0), make_sample(10, 1000)]
    series = aggregate_intervals(samples, IntervalSpec(seconds=STEP), 5, 30_000)

    chart = render_series(series, rows=3, tz=timezone.utc)

    assert series.enough_data
    assert not chart.not_enough_data
    assert all(row.strip() == "" for row in plot_cells(chart, 3))
    assert len(chart.lines) == 5


@pytest.mark.parametrize("rows,scale", [(0, None), (2, None), (3, 0), (3, -1)])
def test_bad_dimensions(rows, scale):
    with pytest.raises(ValueError):
        render_chart([bucket(0, 1, 1)], rows=rows, scale=scale)
