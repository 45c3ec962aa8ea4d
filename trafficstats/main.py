"""
Entrypoint module for uvicorn.

Run as:

    uvicorn trafficstats.main:app --reload
"""

from trafficstats.api import app  # FastAPI app  # noqa: F401
