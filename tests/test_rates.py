import pytest

from trafficstats.rates import (
    COUNTER_RESET,
    GAP,
    MIXED_INTERFACE,
    NON_CHRONOLOGICAL,
    OK,
    SampleOrderError,
    check_series,
    classify_pair,
    compute_rate,
    period_traffic,
    window_traffic,
)


def test_rate_between_two_polls(make_sample):
    a = make_sample(0, 1000)
    b = make_sample(300, 1_300_000)

    obs = compute_rate(a, b)

    assert obs.rx_bytes == 1_299_000
    assert obs.duration == 300
    assert obs.rx_bits_per_sec == 1_299_000 * 8 / 300
    assert obs.rx_bits_per_sec == 34640
    assert obs.rx_mbps == pytest.approx(0.03464)


@pytest.mark.parametrize(
    "t0,t1,in0,in1,out0,out1",
    [
        (0, 1, 0, 0, 0, 0),
        (10, 70, 500, 9_000_500, 0, 77),
        (1_700_000_000, 1_700_000_030, 2**40, 2**40 + 12345, 9, 10),
        (5, 600, 1, 2, 3, 3),
    ],
)
def test_rate_formula_is_exact(make_sample, t0, t1, in0, in1, out0, out1):
    obs = compute_rate(make_sample(t0, in0, out0), make_sample(t1, in1, out1))

    assert obs.rx_bits_per_sec == (in1 - in0) * 8 / (t1 - t0)
    assert obs.tx_bits_per_sec == (out1 - out0) * 8 / (t1 - t0)
    assert obs.interval_start == t0
    assert obs.interval_end == t1


def test_counter_reset_is_invalid(make_sample):
    a = make_sample(0, 5000)
    b = make_sample(100, 4000)

    assert compute_rate(a, b) is None
    assert classify_pair(a, b) == COUNTER_RESET


def test_tx_reset_is_invalid(make_sample):
    assert compute_rate(make_sample(0, 10, 500), make_sample(60, 20, 100)) is None


def test_packet_reset_is_invalid(make_sample):
    a = make_sample(0, 10, 10, in_packets=50)
    b = make_sample(60, 20, 20, in_packets=3)

    assert classify_pair(a, b) == COUNTER_RESET


@pytest.mark.parametrize("t1", [100, 99, 0])
def test_non_increasing_time_is_invalid(make_sample, t1):
    a = make_sample(100, 0)
    b = make_sample(t1, 1000)

    assert compute_rate(a, b) is None
    assert classify_pair(a, b) == NON_CHRONOLOGICAL


def test_samples_of_different_interfaces_are_invalid(make_sample):
    a = make_sample(0, 0)
    b = make_sample(60, 1000, interface_index=2)

    assert compute_rate(a, b) is None
    assert classify_pair(a, b) == MIXED_INTERFACE


def test_gap_ceiling(make_sample):
    a = make_sample(0, 0)

    assert classify_pair(a, make_sample(600, 10), max_gap=600) == OK
    assert classify_pair(a, make_sample(601, 10), max_gap=600) == GAP
    assert compute_rate(a, make_sample(601, 10)) is not None


def test_errors_are_clamped_and_summed(make_sample):
    a = make_sample(0, 0, in_errors=10, out_errors=4)
    b = make_sample(60, 100, in_errors=2, out_errors=7)

    obs = compute_rate(a, b)

    assert obs is not None
    assert obs.errors == 3


def test_packet_deltas(make_sample):
    a = make_sample(0, 0, in_packets=10, out_packets=20)
    b = make_sample(60, 100, in_packets=15, out_packets=29)

    obs = compute_rate(a, b)

    assert (obs.rx_packets, obs.tx_packets) == (5, 9)


def test_check_series_rejects_decreasing_timestamps(make_sample):
    with pytest.raises(SampleOrderError):
        check_series([make_sample(10, 0), make_sample(5, 0)])


def test_check_series_rejects_mixed_interfaces(make_sample):
    with pytest.raises(SampleOrderError):
        check_series([make_sample(0, 0), make_sample(5, 0, device_name="switch")])


def test_check_series_allows_duplicate_polls(make_sample):
    check_series([make_sample(0, 0), make_sample(0, 0), make_sample(5, 10)])


def test_window_traffic_skips_reset_interval(make_sample):
    samples = [
        make_sample(0, 0),
        make_sample(60, 6000),
        make_sample(120, 100),
        make_sample(180, 6100),
    ]

    traffic = window_traffic(samples, "1h", 3600)

    assert traffic.rx_bytes == 12000
    assert traffic.duration == 120
    assert traffic.rx_mbps == pytest.approx(12000 * 8 / 120 / 1_000_000)


def test_window_traffic_without_pairs(make_sample):
    assert window_traffic([], "5m", 300) is None
    assert window_traffic([make_sample(0, 0)], "5m", 300) is None


def test_period_traffic_slices_each_window(make_series):
    now = 10_000
    samples = make_series(now - 7200, now, 60, rx_per_sec=1000, tx_per_sec=10)

    periods = dict(period_traffic(samples, now))

    assert list(periods)[:3] == ["5m", "15m", "1h"]
    assert periods["5m"].duration == 300
    assert periods["5m"].rx_bytes == 300_000
    assert periods["1h"].tx_bytes == 36_000
    assert periods["90d"].duration == 7200
    assert periods["90d"].rx_mbps == pytest.approx(0.008)


def test_period_traffic_reports_missing_windows(make_sample):
    now = 100_000
    samples = [make_sample(now - 5000, 0), make_sample(now - 4000, 1000)]

    periods = dict(period_traffic(samples, now))

    assert periods["5m"] is None
    assert periods["1h"] is None
    assert periods["6h"].rx_bytes == 1000


def test_period_traffic_ignores_samples_after_now(make_series):
    samples = make_series(0, 7200, 60, rx_per_sec=1000)

    periods = dict(period_traffic(samples, 3600))

    assert periods["5m"].duration == 300
    assert periods["5m"].rx_bytes == 300_000
    assert periods["90d"].duration == 3600
