"""Battery pack settings and settings-form parsing."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from scooter_dash.models.battery import BatteryChem

# Lifetime distance shown when the store holds no (or a zero) total
DEFAULT_TOTAL_METERS_SEED = 2_200_000.0


@dataclass(frozen=True)
class Settings:
    """
    Static pack parameters used by the estimation engine.

    All voltages are in volts, capacity in amp-hours, temperature in Celsius.
    Instances are immutable; use ``with_changes`` to derive a modified copy.
    """

    chem: BatteryChem = BatteryChem.LEAD
    pack_voltage: float = 60.0  # Nominal pack voltage
    pack_capacity_ah: float = 20.0
    full_charge_voltage: float = 74.0  # Resting voltage of a fully charged pack
    last_charge_voltage: Optional[float] = None  # Measured after charging, if recorded
    temperature_c: float = 20.0  # Ambient temperature
    loss_percent: int = 0  # Drivetrain/electrical overhead

    def with_changes(self, **changes) -> Settings:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @property
    def energy_wh(self) -> float:
        """Nominal pack energy in watt-hours."""
        return self.pack_voltage * self.pack_capacity_ah

    @classmethod
    def from_form(cls, fields: Mapping[str, str], previous: Settings) -> Settings:
        """
        Build settings from raw text form input.

        Malformed numbers fall back to the value in ``previous`` so one bad
        field never blocks saving the rest. A blank last-charge voltage clears
        the recorded reading.

        Args:
            fields: Text keyed by Settings field name; ``chem`` may be an index
                or a chemistry name. Missing keys keep the previous value.
            previous: Settings currently in effect

        Returns:
            New Settings instance
        """
        last_raw = fields.get("last_charge_voltage")
        if last_raw is None:
            last_charge = previous.last_charge_voltage
        elif not last_raw.strip():
            last_charge = None
        else:
            last_charge = _parse_float(last_raw, previous.last_charge_voltage)

        return cls(
            chem=_parse_chem(fields.get("chem"), previous.chem),
            pack_voltage=_parse_float(fields.get("pack_voltage"), previous.pack_voltage),
            pack_capacity_ah=_parse_float(fields.get("pack_capacity_ah"), previous.pack_capacity_ah),
            full_charge_voltage=_parse_float(
                fields.get("full_charge_voltage"), previous.full_charge_voltage
            ),
            last_charge_voltage=last_charge,
            temperature_c=_parse_float(fields.get("temperature_c"), previous.temperature_c),
            loss_percent=_parse_int(fields.get("loss_percent"), previous.loss_percent),
        )


def parse_voltage(text: Optional[str]) -> Optional[float]:
    """Parse a voltage typed by the user, None if it is not a finite number."""
    return _parse_float(text, None)


def _parse_float(text: Optional[str], fallback):
    if text is None:
        return fallback
    try:
        value = float(text.strip())
    except ValueError:
        return fallback
    if not math.isfinite(value):
        return fallback
    return value


def _parse_int(text: Optional[str], fallback: int) -> int:
    if text is None:
        return fallback
    try:
        return int(text.strip())
    except ValueError:
        return fallback


def _parse_chem(value, fallback: BatteryChem) -> BatteryChem:
    if value is None:
        return fallback
    if isinstance(value, BatteryChem):
        return value
    text = str(value).strip()
    if text.upper() in BatteryChem.__members__:
        return BatteryChem[text.upper()]
    try:
        return BatteryChem.from_index(int(text))
    except ValueError:
        return fallback
