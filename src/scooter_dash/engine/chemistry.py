"""Open-circuit-voltage to state-of-charge curve per battery chemistry."""

from __future__ import annotations

import math

from scooter_dash.config.settings import Settings
from scooter_dash.models.battery import CHEMISTRY_PROFILES

# SoC band that receives the mid-discharge plateau bump
FLATTEN_BAND = (0.2, 0.8)


def empty_voltage(settings: Settings) -> float:
    """Resting voltage treated as 0% for the pack's chemistry."""
    return settings.pack_voltage * CHEMISTRY_PROFILES[settings.chem].empty_fraction


def _flatten(soc: float, mid_flatten: float) -> float:
    """Add the triangular plateau bump centered at 50%."""
    return soc + mid_flatten * (0.5 - abs(soc - 0.5))


def state_of_charge(voltage: float, settings: Settings) -> float:
    """
    Map a resting terminal voltage to a state-of-charge fraction.

    The linear span between the chemistry's empty voltage and the full charge
    voltage is bent upwards inside the 20-80% band for lithium-family packs,
    approximating their flat discharge plateau. Above the band the curve holds
    the plateau value until the linear fraction catches up with it.

    Args:
        voltage: Measured or synthetic pack voltage (V)
        settings: Pack parameters

    Returns:
        State of charge in [0, 1]
    """
    empty = empty_voltage(settings)
    full = settings.full_charge_voltage

    if not math.isfinite(voltage):
        return 0.0
    if full <= empty:
        # Degenerate pack: no usable span to interpolate over
        return 1.0 if voltage >= full else 0.0

    clamped = max(empty, min(full, voltage))
    soc = (clamped - empty) / (full - empty)

    mid_flatten = CHEMISTRY_PROFILES[settings.chem].mid_flatten
    low, high = FLATTEN_BAND
    if low <= soc <= high:
        soc = _flatten(soc, mid_flatten)
    elif soc > high:
        soc = max(soc, _flatten(high, mid_flatten))

    return max(0.0, min(1.0, soc))
