"""
Unit formatting helpers shared by the text reports and the chart.
"""

import math
from datetime import datetime, tzinfo
from typing import Optional

_BYTE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]


def format_bytes(num: float) -> str:
    """1024-based size with two decimals, e.g. "1.50 MB"."""
    if num == 0:
        return "0 B"
    i = int(math.floor(math.log(abs(num), 1024)))
    i = max(0, min(i, len(_BYTE_UNITS) - 1))
    return f"{num / 1024 ** i:.2f} {_BYTE_UNITS[i]}"


def format_mb(num: Optional[float]) -> str:
    """Compact size in MiB, switching to GiB above 1000M."""
    if num is None:
        return "-"
    mb = num / (1024 * 1024)
    if mb >= 1000:
        return f"{mb / 1024:.1f}G"
    return f"{mb:.1f}M"


def format_rate(mbps: float) -> str:
    """Rate label for chart axes: "1.2G", "12.5M", "800K"."""
    if mbps >= 1000:
        return f"{mbps / 1000:.1f}G"
    if mbps >= 1:
        return f"{mbps:.1f}M"
    return f"{mbps * 1000:.0f}K"


def format_rate_short(mbps: float) -> str:
    """Rate that fits a narrow table column."""
    if mbps >= 100:
        return str(round(mbps))
    if mbps >= 10:
        return f"{mbps:.1f}"
    if mbps >= 1:
        return f"{mbps:.2f}"
    return f"{mbps * 1000:.0f}K"


def format_clock(timestamp: int, tz: Optional[tzinfo] = None) -> str:
    """HH:MM in `tz` (None = local time)."""
    return datetime.fromtimestamp(timestamp, tz).strftime("%H:%M")


def format_datetime(timestamp: int, tz: Optional[tzinfo] = None) -> str:
    return datetime.fromtimestamp(timestamp, tz).strftime("%Y-%m-%d %H:%M:%S")
