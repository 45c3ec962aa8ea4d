"""
Pydantic models ("schemas") for samples and everything derived from them.

We keep these separate from the ORM models so the analysis code and the API
layer do not depend on SQLAlchemy internals. Every derived value here is
computed fresh per query and never persisted.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, computed_field


class Sample(BaseModel):
    """
    Read-only view of one stored counter snapshot.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    timestamp: int
    device_name: str
    interface_index: int
    interface_name: str
    in_octets: int
    out_octets: int
    in_packets: int = 0
    out_packets: int = 0
    in_errors: int = 0
    out_errors: int = 0
    oper_status: int = 0
    speed_mbps: int = 0


class InterfaceRef(BaseModel):
    """An entry of the interface catalog: identity plus display name."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    device_name: str
    interface_index: int
    interface_name: str

    @property
    def label(self) -> str:
        return f"{self.device_name}/{self.interface_name}"


class RateObservation(BaseModel):
    """
    Traffic between two samples of the same interface.

    - rx/tx bytes and packets: counter deltas, never negative
    - rx/tx bits per second: bytes * 8 / duration
    - errors: new in + out errors, clamped at zero per direction
    """

    model_config = ConfigDict(frozen=True)

    interval_start: int
    interval_end: int
    rx_bytes: int
    tx_bytes: int
    rx_bits_per_sec: float
    tx_bits_per_sec: float
    rx_packets: int = 0
    tx_packets: int = 0
    errors: int = 0

    @computed_field
    @property
    def duration(self) -> int:
        return self.interval_end - self.interval_start

    @computed_field
    @property
    def rx_mbps(self) -> float:
        return self.rx_bits_per_sec / 1_000_000

    @computed_field
    @property
    def tx_mbps(self) -> float:
        return self.tx_bits_per_sec / 1_000_000


class Bucket(BaseModel):
    """A fixed-width time slot `[start, end)` with at most one observation."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    observation: Optional[RateObservation] = None

    @property
    def has_data(self) -> bool:
        return self.observation is not None


class IntervalSeries(BaseModel):
    """
    Output of the interval aggregator.

    `enough_data` is False when the store had fewer than two samples for the
    window; that is reported separately from a series whose buckets all came
    out empty. Totals and averages only cover buckets with data.
    """

    interval_seconds: int
    start: int
    end: int
    buckets: List[Bucket]
    enough_data: bool = True

    valid_buckets: int = 0
    dropped: int = 0
    rx_bytes: int = 0
    tx_bytes: int = 0
    first_valid: Optional[int] = None
    last_valid: Optional[int] = None

    @computed_field
    @property
    def rx_avg_mbps(self) -> Optional[float]:
        return self._avg_mbps(self.rx_bytes)

    @computed_field
    @property
    def tx_avg_mbps(self) -> Optional[float]:
        return self._avg_mbps(self.tx_bytes)

    def _avg_mbps(self, total: int) -> Optional[float]:
        if self.first_valid is None or self.last_valid is None:
            return None
        duration = self.last_valid - self.first_valid
        if duration <= 0:
            return None
        return total * 8 / duration / 1_000_000


class StatSummary(BaseModel):
    """Descriptive statistics over a non-empty set of rate values."""

    model_config = ConfigDict(frozen=True)

    n: int
    mean: float
    stddev: float
    ci: float
    min: float
    max: float
    p50: float
    p95: float
    p99: float


class HourStats(BaseModel):
    """
    Statistics for one local clock hour. `rx`/`tx` are None when the hour
    has too few observations to be summarized.
    """

    hour: int
    rx: Optional[StatSummary] = None
    tx: Optional[StatSummary] = None

    @property
    def sufficient(self) -> bool:
        return self.rx is not None and self.tx is not None


class PeriodTraffic(BaseModel):
    """Totals for one look-back period (e.g. the last 24h)."""

    period: str
    seconds: int
    duration: int
    rx_bytes: int
    tx_bytes: int
    rx_packets: int = 0
    tx_packets: int = 0
    errors: int = 0

    @computed_field
    @property
    def rx_mbps(self) -> float:
        return self.rx_bytes * 8 / self.duration / 1_000_000

    @computed_field
    @property
    def tx_mbps(self) -> float:
        return self.tx_bytes * 8 / self.duration / 1_000_000


class InterfaceSpan(BaseModel):
    """How much history the store holds for one interface."""

    device_name: str
    interface_index: int
    interface_name: str
    first_timestamp: int
    last_timestamp: int
    sample_count: int

    @computed_field
    @property
    def days(self) -> float:
        return (self.last_timestamp - self.first_timestamp) / 86400.0


class Chart(BaseModel):
    """
    A rendered character grid, printed verbatim by the terminal layer.

    `not_enough_data` is set when the series had fewer than two samples to
    work with, as opposed to a window where every bucket came out empty.
    """

    lines: List[str]
    scale: float
    not_enough_data: bool = False

    def __str__(self) -> str:
        return "\n".join(self.lines)


class PeriodRow(BaseModel):
    """One look-back period in the traffic table; `traffic` is None without data."""

    period: str
    traffic: Optional[PeriodTraffic] = None


class HourlyOut(BaseModel):
    """Hour-of-day profile of one interface as returned by the API."""

    interface: InterfaceRef
    observations: int
    hours: List[HourStats]
    overall_rx: Optional[StatSummary] = None
    overall_tx: Optional[StatSummary] = None
