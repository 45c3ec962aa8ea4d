"""Rate statistics, hour-of-day profiles and terminal charts from interface counters."""

__version__ = "0.1.0"
