# Scooter Dash - Data models
from scooter_dash.models.battery import (
    BatteryChem,
    BatteryEstimate,
    ChemistryProfile,
    CHEMISTRY_PROFILES,
)
from scooter_dash.models.data_records import (
    PositionFix,
    OdometerState,
    DashboardData,
    DashboardSnapshot,
)

__all__ = [
    "BatteryChem",
    "BatteryEstimate",
    "ChemistryProfile",
    "CHEMISTRY_PROFILES",
    "PositionFix",
    "OdometerState",
    "DashboardData",
    "DashboardSnapshot",
]
