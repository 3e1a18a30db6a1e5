"""Battery chemistry profiles and the derived battery estimate."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class BatteryChem(IntEnum):
    """Supported pack chemistries. Values are the persisted indices."""

    LEAD = 0
    LI_ION = 1
    GRAPHENE = 2

    @classmethod
    def from_index(cls, index: int) -> BatteryChem:
        """Map a stored index to a chemistry, clamping out-of-range values."""
        return cls(max(0, min(len(cls) - 1, int(index))))


@dataclass(frozen=True)
class ChemistryProfile:
    """Shape parameters of a chemistry's OCV curve."""

    empty_fraction: float  # Empty voltage as a fraction of nominal pack voltage
    mid_flatten: float  # Height coefficient of the mid-discharge plateau bump


CHEMISTRY_PROFILES = {
    BatteryChem.LEAD: ChemistryProfile(empty_fraction=0.90, mid_flatten=0.0),
    BatteryChem.LI_ION: ChemistryProfile(empty_fraction=0.85, mid_flatten=0.05),
    BatteryChem.GRAPHENE: ChemistryProfile(empty_fraction=0.84, mid_flatten=0.08),
}


@dataclass(frozen=True)
class BatteryEstimate:
    """Live battery readout. Recomputed on demand, never persisted."""

    percent: int  # 0..100
    remaining_km: float  # >= 0
