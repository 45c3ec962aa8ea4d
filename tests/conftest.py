"""
Pytest configuration shared by all tests.

The settings object is built at import time, so the environment is set
before any trafficstats module is imported: a throwaway SQLite file for the
sample store and UTC for every hour/clock computation.
"""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="trafficstats-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'traffic.sqlite')}"
os.environ["REPORT_TIMEZONE"] = "UTC"

import pytest  # noqa: E402

from trafficstats.database import Base, SessionLocal, engine  # noqa: E402
from trafficstats.models import InterfaceSample  # noqa: E402
from trafficstats.schemas import Sample  # noqa: E402


def sample(timestamp, in_octets, out_octets=0, **kwargs):
    """Build a Sample for router/internet (ifIndex 1) unless overridden."""
    fields = dict(
        timestamp=timestamp,
        device_name="router",
        interface_index=1,
        interface_name="internet",
        in_octets=in_octets,
        out_octets=out_octets,
    )
    fields.update(kwargs)
    return Sample(**fields)


def steady_series(start, end, step, rx_per_sec, tx_per_sec=0, **kwargs):
    """Samples every `step` seconds with constant byte rates."""
    return [
        sample(t, t * rx_per_sec, t * tx_per_sec, **kwargs)
        for t in range(start, end + 1, step)
    ]


@pytest.fixture
def make_sample():
    return sample


@pytest.fixture
def make_series():
    return steady_series


@pytest.fixture
def db():
    """A session on an empty samples table."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.query(InterfaceSample).delete()
        session.commit()
        session.close()


@pytest.fixture
def store(db):
    """Insert Sample objects into the store and commit."""

    def add(samples):
        for s in samples:
            db.add(InterfaceSample(**s.model_dump()))
        db.commit()

    return add
