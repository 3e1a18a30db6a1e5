"""Trip and lifetime distance accumulation from positional fixes."""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Tuple

from scooter_dash.models.data_records import OdometerState, PositionFix
from scooter_dash.utils.geo import haversine_meters, mps_to_kmh


def fix_distance_meters(previous: PositionFix, current: PositionFix) -> float:
    """Great-circle distance between two fixes in meters."""
    return haversine_meters(previous.lat, previous.lon, current.lat, current.lon)


def on_fix(fix: PositionFix, state: OdometerState) -> Tuple[float, OdometerState]:
    """
    Apply a positional fix to the odometer.

    The delta from the previous fix is added to both counters only when it is
    finite and non-negative. The fix always becomes the new reference point,
    so a single bad sample cannot poison the next delta.

    Args:
        fix: Newest fix, in arrival order
        state: Current odometer state

    Returns:
        (speed in km/h, new odometer state)
    """
    speed_kmh = mps_to_kmh(fix.speed_mps)

    trip = state.trip_meters
    total = state.total_meters
    if state.last_fix is not None:
        delta = fix_distance_meters(state.last_fix, fix)
        if math.isfinite(delta) and delta >= 0:
            trip += delta
            total += delta

    return speed_kmh, OdometerState(trip_meters=trip, total_meters=total, last_fix=fix)


def reset_trip(state: OdometerState) -> OdometerState:
    """Zero the trip counter; lifetime distance and last fix are kept."""
    return replace(state, trip_meters=0.0)


def reset_totals(state: OdometerState) -> OdometerState:
    """Zero lifetime distance. The trip counter is cleared along with it."""
    return replace(state, trip_meters=0.0, total_meters=0.0)


def set_trip(state: OdometerState, trip_meters: float) -> OdometerState:
    """Overwrite the trip counter, e.g. after charge reconciliation."""
    return replace(state, trip_meters=max(0.0, trip_meters))
