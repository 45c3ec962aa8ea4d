"""
Plain-text reports.

Each function takes already-computed results and returns the lines to print,
so the same output can be tested without a terminal.
"""

from datetime import datetime, tzinfo
from typing import List, Optional, Sequence, Tuple

from trafficstats.chart import LEGEND
from trafficstats.formatting import (
    format_bytes,
    format_datetime,
    format_mb,
    format_rate_short,
)
from trafficstats.hourly import HourlyProfile, overall, peak_p95
from trafficstats.rates import PERIODS
from trafficstats.schemas import (
    Chart,
    HourStats,
    InterfaceRef,
    InterfaceSpan,
    IntervalSeries,
    PeriodTraffic,
    StatSummary,
)

PeriodRows = Sequence[Tuple[str, Optional[PeriodTraffic]]]

BAR_WIDTH = 25


# ---------------------------------------------------------------------------
# Period tables
# ---------------------------------------------------------------------------

def detailed_report(
    items: Sequence[Tuple[InterfaceRef, PeriodRows]],
    generated_at: datetime,
) -> List[str]:
    """One table per interface: totals, rates and errors per look-back period."""
    lines = [f"Traffic Statistics - {generated_at.isoformat(timespec='seconds')}", "=" * 90]

    for ref, periods in items:
        lines.append("")
        lines.append(ref.label.upper())
        lines.append("-" * 90)
        lines.append(
            "Period".ljust(8)
            + "RX".rjust(14)
            + "TX".rjust(14)
            + "RX Mbps".rjust(12)
            + "TX Mbps".rjust(12)
            + "Errors".rjust(12)
        )
        lines.append("-" * 90)
        for name, traffic in periods:
            if traffic is None:
                lines.append(name.ljust(8) + "no data".rjust(14))
                continue
            lines.append(
                name.ljust(8)
                + format_bytes(traffic.rx_bytes).rjust(14)
                + format_bytes(traffic.tx_bytes).rjust(14)
                + f"{traffic.rx_mbps:.2f}".rjust(12)
                + f"{traffic.tx_mbps:.2f}".rjust(12)
                + (str(traffic.errors) if traffic.errors > 0 else "-").rjust(12)
            )

    lines.append("")
    return lines


def summary_report(items: Sequence[Tuple[InterfaceRef, PeriodRows]]) -> List[str]:
    """One line per interface with rx/tx totals for every period."""
    col_width = 14
    name_width = 35

    header = "Device/Interface".ljust(name_width)
    header += "".join(name.rjust(col_width) for name, _ in PERIODS)
    lines = [header, "=" * (name_width + len(PERIODS) * col_width)]

    for ref, periods in items:
        line = ref.label[: name_width - 1].ljust(name_width)
        for _, traffic in periods:
            if traffic is None:
                line += "-".rjust(col_width)
            else:
                line += f"{format_mb(traffic.rx_bytes)}/{format_mb(traffic.tx_bytes)}".rjust(col_width)
        lines.append(line)

    lines.append("")
    return lines


# ---------------------------------------------------------------------------
# Hour-of-day reports
# ---------------------------------------------------------------------------

def hourly_summary_report(items: Sequence[Tuple[InterfaceRef, Optional[List[HourStats]]]]) -> List[str]:
    """Mean rx+tx per hour for several interfaces side by side."""
    col_width = 7
    name_width = 30

    header = "Interface".ljust(name_width) + "│"
    header += "".join(f"{h:02d}".rjust(col_width) for h in range(24))
    lines = [
        "",
        "=== HOURLY TRAFFIC (avg Mbps rx/tx) ===",
        "",
        header,
        "─" * name_width + "┼" + "─" * (24 * col_width),
    ]

    for ref, hours in items:
        if hours is None:
            continue
        line = ref.label[: name_width - 1].ljust(name_width) + "│"
        for stats in hours:
            if not stats.sufficient:
                line += "-".rjust(col_width)
            else:
                line += format_rate_short(stats.rx.mean + stats.tx.mean).rjust(col_width)
        lines.append(line)

    lines.append("")
    return lines


def _hour_table(title: str, summaries: Sequence[Optional[StatSummary]], peak: float) -> List[str]:
    lines = [
        title,
        "Hour  │   N   │   p50 │   p95 │   p99 │   Max │ Histogram",
        "──────┼───────┼───────┼───────┼───────┼───────┼" + "─" * 30,
    ]
    for hour, s in enumerate(summaries):
        hour_str = f"{hour:02d}:00".ljust(5)
        if s is None:
            lines.append(f"{hour_str} │     - │     - │     - │     - │     - │")
            continue
        bar = "█" * round(s.p95 / peak * BAR_WIDTH)
        lines.append(
            f"{hour_str} │ {str(s.n).rjust(5)} │ {s.p50:5.2f} │ {s.p95:5.2f} │ "
            f"{s.p99:5.2f} │ {s.max:5.2f} │ {bar}"
        )
    return lines


def hourly_detail_report(
    ref: InterfaceRef,
    profile: Optional[HourlyProfile],
    hours: Optional[List[HourStats]],
) -> List[str]:
    """Per-hour percentiles and a p95 histogram for one interface."""
    if profile is None or hours is None:
        return [f"No data for {ref.label}"]

    peak = peak_p95(hours)
    lines = ["", f"=== HOURLY TRAFFIC: {ref.label} ===", ""]
    lines += _hour_table("RX (Download) - Mbps", [h.rx for h in hours], peak)
    lines.append("")
    lines += _hour_table("TX (Upload) - Mbps", [h.tx for h in hours], peak)

    rx, tx = overall(profile)
    if rx is not None and tx is not None:
        lines.append("")
        lines.append("─" * 70)
        lines.append(f"Overall ({rx.n} samples):")
        lines.append(f"  RX: p50={rx.p50:.2f} p95={rx.p95:.2f} p99={rx.p99:.2f} Mbps")
        lines.append(f"  TX: p50={tx.p50:.2f} p95={tx.p95:.2f} p99={tx.p99:.2f} Mbps")

    lines.append("")
    return lines


# ---------------------------------------------------------------------------
# Insight (chart) report
# ---------------------------------------------------------------------------

def insight_report(
    ref: InterfaceRef,
    series: IntervalSeries,
    chart: Chart,
    label: str,
    tz: Optional[tzinfo] = None,
    show_dropped: bool = False,
) -> List[str]:
    """
    Chart plus legend and totals for the valid part of the window.

    A window without any valid bucket shows the blank chart and legend only.
    With `show_dropped`, buckets lost to counter resets are reported too.
    """
    if chart.not_enough_data:
        return [f"Not enough data for {ref.label}"]

    width = max(len(line) for line in chart.lines)
    rule = "  " + "─" * (width - 2)

    lines = ["", f"  {ref.label} - {label} intervals", rule]
    lines += chart.lines
    lines += ["", f"  {LEGEND}", rule]

    if series.first_valid is not None:
        duration = series.last_valid - series.first_valid
        lines.append(
            f"  Time range: {format_datetime(series.first_valid, tz)} → "
            f"{format_datetime(series.last_valid, tz)}"
        )
        lines.append(f"  Duration:   {duration / 3600:.1f} hours ({series.valid_buckets} samples)")
        lines.append(f"  RX total:   {format_bytes(series.rx_bytes).ljust(12)} avg: {series.rx_avg_mbps or 0:.2f} Mbps")
        lines.append(f"  TX total:   {format_bytes(series.tx_bytes).ljust(12)} avg: {series.tx_avg_mbps or 0:.2f} Mbps")
        if show_dropped and series.dropped:
            lines.append(f"  Dropped:    {series.dropped} intervals (counter reset)")

    lines.append("")
    return lines


def spans_report(spans: Sequence[InterfaceSpan], tz: Optional[tzinfo] = None) -> List[str]:
    """How much history the store holds per interface."""
    lines = [
        "interface".ljust(35) + "first".ljust(21) + "last".ljust(21) + "days".rjust(7) + "n".rjust(9),
    ]
    for span in spans:
        lines.append(
            f"{span.device_name}/{span.interface_name}"[:34].ljust(35)
            + format_datetime(span.first_timestamp, tz).ljust(21)
            + format_datetime(span.last_timestamp, tz).ljust(21)
            + f"{span.days:.1f}".rjust(7)
            + str(span.sample_count).rjust(9)
        )
    return lines
