"""Geographic utility functions for distance and unit conversions."""

from __future__ import annotations

import math

# Earth radius constant
EARTH_RADIUS_M = 6371000  # meters

# Conversion constants
MPS_TO_KMH = 3.6
METERS_PER_KM = 1000.0


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points in meters.

    Args:
        lat1: Latitude of first point (degrees)
        lon1: Longitude of first point (degrees)
        lat2: Latitude of second point (degrees)
        lon2: Longitude of second point (degrees)

    Returns:
        Distance in meters (NaN if any coordinate is NaN)
    """
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push a a hair above 1.0 for antipodal points
    if a > 1.0:
        a = 1.0
    c = 2 * math.asin(math.sqrt(a))

    return EARTH_RADIUS_M * c


def mps_to_kmh(mps: float) -> float:
    """Convert meters per second to kilometers per hour."""
    return mps * MPS_TO_KMH


def meters_to_km(meters: float) -> float:
    """Convert meters to kilometers."""
    return meters / METERS_PER_KM


def km_to_meters(km: float) -> float:
    """Convert kilometers to meters."""
    return km * METERS_PER_KM
