"""
FastAPI application exposing traffic statistics.

Endpoints
---------
- GET /health                                   -> Simple liveness check
- GET /interfaces                               -> Interface catalog (optional ?filter=)
- GET /interfaces/spans                         -> Stored history per interface
- GET /interfaces/{device}/{index}/traffic      -> Totals per look-back period
- GET /interfaces/{device}/{index}/series       -> Fixed-interval rate buckets
- GET /interfaces/{device}/{index}/hourly       -> Hour-of-day statistics
- GET /interfaces/{device}/{index}/chart        -> Rendered text chart
"""

import time
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from trafficstats.aggregate import IntervalSpec
from trafficstats.analysis import load_hour_stats, load_interval_series, load_period_traffic
from trafficstats.chart import MIN_ROWS, render_series
from trafficstats.config import settings
from trafficstats.database import Base, SessionLocal, engine
from trafficstats.filters import FilterNotFoundError, select_interfaces
from trafficstats.hourly import overall
from trafficstats.schemas import (
    HourlyOut,
    InterfaceRef,
    InterfaceSpan,
    IntervalSeries,
    PeriodRow,
)
from trafficstats.store import find_interface, interface_spans, list_interfaces
from trafficstats import models  # noqa: F401  (registers the samples table)


# ---------------------------------------------------------------------------
# Database bootstrap
# ---------------------------------------------------------------------------

# Make sure the table exists even if the poller has not run yet.
Base.metadata.create_all(bind=engine)


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Interface Traffic Statistics API",
    version="0.1.0",
)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_db() -> Session:
    """
    FastAPI dependency that provides a SQLAlchemy session.

    The session is created at the start of the request and closed at the end.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_interface(
    device_name: str,
    interface_index: int,
    db: Session = Depends(get_db),
) -> InterfaceRef:
    ref = find_interface(db, device_name, interface_index)
    if ref is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown interface {device_name}/{interface_index}",
        )
    return ref


def get_interval(interval: Optional[str] = None) -> IntervalSpec:
    try:
        return IntervalSpec.parse(interval or settings.default_interval)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _now(now: Optional[int]) -> int:
    return int(time.time()) if now is None else now


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict:
    """Simple liveness endpoint used for health checks."""
    return {"status": "ok"}


@app.get("/interfaces", response_model=List[InterfaceRef])
def get_interfaces(filter: Optional[str] = None, db: Session = Depends(get_db)):
    """
    Return the interface catalog, optionally narrowed by a filter string
    (`device`, `interface` substring or `device/interface`).
    """
    catalog = list_interfaces(db)
    try:
        return select_interfaces(filter, catalog)
    except FilterNotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail={
                "message": str(exc),
                "devices": exc.devices,
                "interfaces": exc.interfaces,
            },
        ) from exc


@app.get("/interfaces/spans", response_model=List[InterfaceSpan])
def get_spans(db: Session = Depends(get_db)):
    """First/last sample time, days covered and sample count per interface."""
    return interface_spans(db)


@app.get(
    "/interfaces/{device_name}/{interface_index}/traffic",
    response_model=List[PeriodRow],
)
def get_traffic(
    now: Optional[int] = None,
    ref: InterfaceRef = Depends(get_interface),
    db: Session = Depends(get_db),
):
    """Traffic totals and average rates for each look-back period."""
    return [
        PeriodRow(period=name, traffic=traffic)
        for name, traffic in load_period_traffic(db, ref, _now(now))
    ]


@app.get(
    "/interfaces/{device_name}/{interface_index}/series",
    response_model=IntervalSeries,
)
def get_series(
    count: int = Query(60, gt=0, le=10_000),
    now: Optional[int] = None,
    spec: IntervalSpec = Depends(get_interval),
    ref: InterfaceRef = Depends(get_interface),
    db: Session = Depends(get_db),
):
    """
    Rate per aligned bucket for the last `count` intervals.

    `enough_data` is false when the store holds fewer than two samples for
    the window; buckets without an observation have `observation: null`.
    """
    return load_interval_series(db, ref, spec, count, _now(now))


@app.get(
    "/interfaces/{device_name}/{interface_index}/hourly",
    response_model=HourlyOut,
)
def get_hourly(
    ref: InterfaceRef = Depends(get_interface),
    db: Session = Depends(get_db),
):
    """Hour-of-day statistics over the interface's whole history."""
    result = load_hour_stats(db, ref)
    if result is None:
        raise HTTPException(status_code=404, detail=f"No data for {ref.label}")

    profile, hours = result
    rx, tx = overall(profile)
    return HourlyOut(
        interface=ref,
        observations=profile.observations,
        hours=hours,
        overall_rx=rx,
        overall_tx=tx,
    )


@app.get(
    "/interfaces/{device_name}/{interface_index}/chart",
    response_class=PlainTextResponse,
)
def get_chart(
    count: int = Query(80, gt=0, le=1_000),
    rows: int = Query(settings.chart_rows, ge=MIN_ROWS, le=200),
    now: Optional[int] = None,
    spec: IntervalSpec = Depends(get_interval),
    ref: InterfaceRef = Depends(get_interface),
    db: Session = Depends(get_db),
):
    """The insight chart as plain text."""
    series = load_interval_series(db, ref, spec, count, _now(now))
    chart = render_series(series, rows=rows, tz=settings.tz)
    if chart.not_enough_data:
        return PlainTextResponse(f"Not enough data for {ref.label}\n")
    return PlainTextResponse(str(chart) + "\n")
