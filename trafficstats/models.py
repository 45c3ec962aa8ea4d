"""
SQLAlchemy ORM models.

We only read a single table:

- InterfaceSample: one row per (timestamp, device, interface) counter snapshot
"""

from sqlalchemy import BigInteger, Column, Index, Integer, String

from trafficstats.database import Base


class InterfaceSample(Base):
    """
    One counter snapshot for a network interface, as stored by the poller.

    Counters are cumulative and only go down when the device reboots or a
    counter wraps. `timestamp` is unix seconds.
    """

    __tablename__ = "samples"

    id = Column(Integer, primary_key=True, autoincrement=True)

    timestamp = Column(Integer, index=True, nullable=False)

    # Interface identity is (device_name, interface_index)
    device_name = Column(String(128), nullable=False, default="default")
    interface_index = Column(Integer, index=True, nullable=False)
    interface_name = Column(String(128), nullable=False)

    # 64-bit counters
    in_octets = Column(BigInteger, nullable=False)
    out_octets = Column(BigInteger, nullable=False)
    in_packets = Column(BigInteger, nullable=False, default=0)
    out_packets = Column(BigInteger, nullable=False, default=0)
    in_errors = Column(BigInteger, nullable=False, default=0)
    out_errors = Column(BigInteger, nullable=False, default=0)

    oper_status = Column(Integer, nullable=False, default=0)  # 1=up, 2=down, ...
    speed_mbps = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_samples_series", "device_name", "interface_index", "timestamp"),
    )
