"""Range and state-of-charge estimate from pack settings and trip distance."""

from __future__ import annotations

import math
from typing import Optional

from scooter_dash.config.settings import Settings
from scooter_dash.engine.chemistry import state_of_charge
from scooter_dash.models.battery import BatteryEstimate
from scooter_dash.utils.geo import meters_to_km

# Nominal consumption model
BASELINE_WH_PER_KM = 35.0

# Temperature derating
REFERENCE_TEMP_C = 20.0  # No penalty at or above this
TEMP_PENALTY_PER_DEG = 0.005  # Capacity lost per degree below reference
MIN_CAPACITY_FACTOR = 0.6

# Synthetic discharge curve ends at this fraction of nominal pack voltage
SYNTHETIC_EMPTY_FRACTION = 0.85


def capacity_factor(settings: Settings) -> float:
    """Usable-capacity multiplier for the ambient temperature."""
    temp_penalty = max(0.0, (REFERENCE_TEMP_C - settings.temperature_c) * TEMP_PENALTY_PER_DEG)
    return max(MIN_CAPACITY_FACTOR, 1.0 - temp_penalty)


def effective_wh_per_km(settings: Settings) -> float:
    """Baseline consumption inflated by the configured loss percentage."""
    loss_factor = 1.0 + max(0, settings.loss_percent) / 100.0
    return BASELINE_WH_PER_KM * loss_factor


def range_at_voltage(settings: Settings, voltage: float) -> float:
    """Distance (km) a pack resting at ``voltage`` can cover under current conditions."""
    soc = state_of_charge(voltage, settings) * capacity_factor(settings)
    return settings.energy_wh * soc / effective_wh_per_km(settings)


def start_range_km(settings: Settings) -> float:
    """Range available from a full charge under current conditions."""
    return range_at_voltage(settings, settings.full_charge_voltage)


def synthetic_voltage(settings: Settings, used_km: float, start_range: float) -> float:
    """
    Approximate the pack voltage from distance used when no reading exists.

    Interpolates linearly from full charge voltage down to 85% of nominal.
    A pack with no starting range is treated as fully drained.
    """
    if start_range > 0:
        ratio = max(0.0, min(1.0, used_km / start_range))
    else:
        ratio = 1.0
    floor_v = settings.pack_voltage * SYNTHETIC_EMPTY_FRACTION
    return settings.full_charge_voltage - ratio * (settings.full_charge_voltage - floor_v)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate(settings: Settings, trip_meters: float) -> BatteryEstimate:
    """
    Estimate battery percentage and remaining range.

    Remaining range is the full-charge range minus the distance travelled.
    When a post-charge voltage is recorded, it also caps the remaining range
    at what that voltage supports, and it drives the percentage directly;
    otherwise the percentage follows a synthetic voltage derived from the
    distance used.

    Args:
        settings: Pack parameters
        trip_meters: Distance travelled since the last full charge (m)

    Returns:
        BatteryEstimate with percent in [0, 100] and remaining_km >= 0
    """
    cap_factor = capacity_factor(settings)
    start_range = start_range_km(settings)

    used_km = meters_to_km(trip_meters)
    remaining_km = start_range - used_km

    voltage_now: Optional[float] = settings.last_charge_voltage
    if voltage_now is not None:
        remaining_km = min(remaining_km, range_at_voltage(settings, voltage_now))
    else:
        voltage_now = synthetic_voltage(settings, used_km, start_range)

    soc_now = max(0.0, min(1.0, state_of_charge(voltage_now, settings) * cap_factor))
    percent = _round_half_up(soc_now * 100.0)

    if not remaining_km > 0:
        remaining_km = 0.0

    return BatteryEstimate(percent=percent, remaining_km=remaining_km)
