"""Utilities for dealing with timezones and timestamps.

Bars, trades and valuation series all key on aware datetimes. The helpers
below check that a timestamp carries timezone information and measure the
distance between two of them.
"""
from __future__ import annotations

from datetime import datetime


def ensure_aware(dt: datetime) -> datetime:
    """Return ``dt`` unchanged, rejecting naive datetimes."""

    if dt.tzinfo is None:
        raise ValueError("Datetime must be timezone-aware")
    return dt


def seconds_between(start: datetime, end: datetime) -> float:
    """Return the wall-clock seconds elapsed from ``start`` to ``end``."""

    return (end - start).total_seconds()
