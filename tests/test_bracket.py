import random

from trafficstats.bracket import bracket_samples, find_bracket


def linear_bracket(timestamps, start, end):
    """Reference scan: last sample <= start, first sample >= end."""
    prev_idx = next_idx = None
    for i, ts in enumerate(timestamps):
        if ts <= start:
            prev_idx = i
        if ts >= end and next_idx is None:
            next_idx = i
    return prev_idx, next_idx


def test_slot_on_sample_boundaries():
    assert find_bracket([0, 100, 200, 300], 100, 200) == (1, 2)


def test_slot_between_samples():
    assert find_bracket([0, 100, 200, 300], 150, 250) == (1, 3)


def test_missing_prev_and_next():
    ts = [100, 200]

    assert find_bracket(ts, 50, 150) == (None, 1)
    assert find_bracket(ts, 150, 250) == (0, None)
    assert find_bracket([], 0, 10) == (None, None)


def test_duplicate_timestamps():
    assert find_bracket([0, 100, 100, 200, 200], 100, 200) == (2, 3)


def test_matches_linear_scan():
    rng = random.Random(7)
    for _ in range(200):
        ts = sorted(rng.randrange(0, 2000) for _ in range(rng.randrange(0, 30)))
        start = rng.randrange(-100, 2100)
        end = start + rng.randrange(1, 400)
        assert find_bracket(ts, start, end) == linear_bracket(ts, start, end)


def test_bracket_samples(make_sample):
    samples = [make_sample(0, 0), make_sample(100, 10), make_sample(250, 20)]
    ts = [s.timestamp for s in samples]

    prev, nxt = bracket_samples(samples, ts, 100, 200)

    assert prev.timestamp == 100
    assert nxt.timestamp == 250
    assert bracket_samples(samples, ts, 200, 300) is None


def test_bracket_samples_rejects_empty_slot(make_sample):
    samples = [make_sample(0, 0), make_sample(100, 10)]
    ts = [s.timestamp for s in samples]

    assert bracket_samples(samples, ts, 100, 100) is None
