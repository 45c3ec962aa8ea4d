"""
Engine and session factory for the sample store.

The samples table is written by the poller; this package only reads it.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from trafficstats.config import settings

engine = create_engine(settings.database_url, future=True)

SessionLocal = sessionmaker(bind=engine, autoflush=False, future=True)

Base = declarative_base()
