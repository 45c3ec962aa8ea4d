"""
Read access to the sample store.

These are the only queries the analysis needs:

- query_samples:   one interface's samples since a timestamp, oldest first
- list_interfaces: the catalog of (device, index, name) seen in the data
- interface_spans: how much history exists per interface
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from trafficstats.models import InterfaceSample
from trafficstats.schemas import InterfaceRef, InterfaceSpan, Sample


def query_samples(
    db: Session,
    device_name: str,
    interface_index: int,
    since: Optional[int] = None,
) -> List[Sample]:
    """
    Return samples for one interface, ordered by timestamp ascending.
    """
    stmt = (
        select(InterfaceSample)
        .where(
            InterfaceSample.device_name == device_name,
            InterfaceSample.interface_index == interface_index,
        )
        .order_by(InterfaceSample.timestamp.asc(), InterfaceSample.id.asc())
    )
    if since is not None:
        stmt = stmt.where(InterfaceSample.timestamp >= since)

    return [Sample.model_validate(row) for row in db.scalars(stmt)]


def list_interfaces(db: Session) -> List[InterfaceRef]:
    """
    Distinct interfaces in the store, ordered by device then index.

    If an interface was renamed, its most recent name wins.
    """
    latest = (
        select(
            InterfaceSample.device_name,
            InterfaceSample.interface_index,
            func.max(InterfaceSample.timestamp).label("max_ts"),
        )
        .group_by(InterfaceSample.device_name, InterfaceSample.interface_index)
        .subquery()
    )

    stmt = (
        select(
            InterfaceSample.device_name,
            InterfaceSample.interface_index,
            InterfaceSample.interface_name,
        )
        .join(
            latest,
            (InterfaceSample.device_name == latest.c.device_name)
            & (InterfaceSample.interface_index == latest.c.interface_index)
            & (InterfaceSample.timestamp == latest.c.max_ts),
        )
        .distinct()
        .order_by(InterfaceSample.device_name, InterfaceSample.interface_index)
    )

    refs = []
    seen = set()
    for device_name, interface_index, interface_name in db.execute(stmt):
        if (device_name, interface_index) in seen:
            continue
        seen.add((device_name, interface_index))
        refs.append(
            InterfaceRef(
                device_name=device_name,
                interface_index=interface_index,
                interface_name=interface_name,
            )
        )
    return refs


def find_interface(db: Session, device_name: str, interface_index: int) -> Optional[InterfaceRef]:
    for ref in list_interfaces(db):
        if ref.device_name == device_name and ref.interface_index == interface_index:
            return ref
    return None


def interface_spans(db: Session) -> List[InterfaceSpan]:
    """First/last timestamp and sample count per interface."""
    names = {
        (ref.device_name, ref.interface_index): ref.interface_name
        for ref in list_interfaces(db)
    }

    stmt = (
        select(
            InterfaceSample.device_name,
            InterfaceSample.interface_index,
            func.min(InterfaceSample.timestamp),
            func.max(InterfaceSample.timestamp),
            func.count(InterfaceSample.id),
        )
        .group_by(InterfaceSample.device_name, InterfaceSample.interface_index)
        .order_by(InterfaceSample.device_name, InterfaceSample.interface_index)
    )

    return [
        InterfaceSpan(
            device_name=device_name,
            interface_index=interface_index,
            interface_name=names.get((device_name, interface_index), ""),
            first_timestamp=first_ts,
            last_timestamp=last_ts,
            sample_count=count,
        )
        for device_name, interface_index, first_ts, last_ts, count in db.execute(stmt)
    ]
