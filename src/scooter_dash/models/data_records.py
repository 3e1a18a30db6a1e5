"""Data transfer objects for positional fixes, odometer state, and snapshots."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from scooter_dash.models.battery import BatteryEstimate

if TYPE_CHECKING:
    from scooter_dash.config.settings import Settings


@dataclass(frozen=True)
class PositionFix:
    """Single positional fix from the location provider."""

    lat: float  # Latitude (degrees)
    lon: float  # Longitude (degrees)
    speed_mps: float = 0.0  # Ground speed (meters per second)
    timestamp: float = field(default_factory=time.time)  # Unix timestamp


@dataclass(frozen=True)
class OdometerState:
    """
    Distance counters plus the fix the next delta is measured from.

    Only total_meters is persisted. last_fix lives for the process lifetime.
    """

    trip_meters: float = 0.0
    total_meters: float = 0.0
    last_fix: Optional[PositionFix] = None

    @property
    def trip_km(self) -> float:
        return self.trip_meters / 1000.0

    @property
    def total_km(self) -> float:
        return self.total_meters / 1000.0


@dataclass(frozen=True)
class DashboardData:
    """Everything the repository loads at start and saves after mutations."""

    settings: Settings
    total_meters: float


@dataclass(frozen=True)
class DashboardSnapshot:
    """Read-only view handed to the presentation layer."""

    speed_kmh: float
    trip_meters: float
    total_meters: float
    estimate: BatteryEstimate
    settings: Settings
