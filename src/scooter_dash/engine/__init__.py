# Scooter Dash - Battery estimation and odometer engine
from scooter_dash.engine.chemistry import empty_voltage, state_of_charge
from scooter_dash.engine.range_estimator import (
    BASELINE_WH_PER_KM,
    capacity_factor,
    effective_wh_per_km,
    estimate,
    range_at_voltage,
    start_range_km,
)
from scooter_dash.engine.charge_reconciler import apply_charge_voltage
from scooter_dash.engine.odometer import (
    fix_distance_meters,
    on_fix,
    reset_totals,
    reset_trip,
    set_trip,
)

__all__ = [
    "empty_voltage",
    "state_of_charge",
    "BASELINE_WH_PER_KM",
    "capacity_factor",
    "effective_wh_per_km",
    "estimate",
    "range_at_voltage",
    "start_range_km",
    "apply_charge_voltage",
    "fix_distance_meters",
    "on_fix",
    "reset_totals",
    "reset_trip",
    "set_trip",
]
