"""Post-charge reconciliation of the trip counter against a measured voltage."""

from __future__ import annotations

from typing import Tuple

from scooter_dash.config.settings import Settings
from scooter_dash.engine.range_estimator import estimate
from scooter_dash.utils.geo import km_to_meters


def apply_charge_voltage(settings: Settings, observed_voltage: float) -> Tuple[float, Settings]:
    """
    Rewrite trip distance from a freshly measured resting voltage.

    The distance already "used" is the range a full pack would offer minus the
    range the observed voltage offers. Both sides go through the estimator so
    the chemistry curve stays the single voltage/charge mapping.

    Args:
        settings: Settings currently in effect
        observed_voltage: Resting pack voltage measured after charging (V)

    Returns:
        (new trip distance in meters, settings with the observed voltage recorded)
    """
    range_at_full = estimate(
        settings.with_changes(last_charge_voltage=settings.full_charge_voltage), 0.0
    ).remaining_km
    range_at_observed = estimate(
        settings.with_changes(last_charge_voltage=observed_voltage), 0.0
    ).remaining_km

    used_km = max(0.0, range_at_full - range_at_observed)
    return km_to_meters(used_km), settings.with_changes(last_charge_voltage=observed_voltage)
