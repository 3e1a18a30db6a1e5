"""Event-driven owner of dashboard state."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from PySide6.QtCore import QObject, Signal, Slot

from scooter_dash.config.settings import Settings
from scooter_dash.engine import charge_reconciler, odometer, range_estimator
from scooter_dash.models.battery import BatteryEstimate
from scooter_dash.models.data_records import (
    DashboardData,
    DashboardSnapshot,
    OdometerState,
    PositionFix,
)
from scooter_dash.services.fix_channel import FixChannel, FixSubscription
from scooter_dash.services.persistence import PersistenceError
from scooter_dash.services.reset_confirm import ResetTotalsConfirmation

logger = logging.getLogger(__name__)


class DashboardStore(Protocol):
    """Anything that can load and save DashboardData."""

    def load(self) -> DashboardData: ...

    def save(self, data: DashboardData) -> None: ...


class DashboardService(QObject):
    """
    Single source of truth for speed, distance counters, and battery estimate.

    Every event handler runs to completion on the main thread, replacing the
    frozen state values and publishing a fresh DashboardSnapshot. The UI reads
    snapshots; it never mutates state directly.

    Persistence:
        - settings save, charge reconciliation: settings + total
        - accepted total-distance change, total reset: settings + total
        - trip reset: nothing (trip distance is not persisted)
    """

    # Signals
    snapshot_changed = Signal(object)  # DashboardSnapshot
    error_occurred = Signal(str)  # error message

    def __init__(self, store: DashboardStore):
        super().__init__()
        self._store = store

        data = store.load()
        self._settings: Settings = data.settings
        self._odometer = OdometerState(total_meters=data.total_meters)
        self._speed_kmh = 0.0
        self._estimate = range_estimator.estimate(self._settings, self._odometer.trip_meters)
        self._subscription: Optional[FixSubscription] = None

        self.reset_confirm = ResetTotalsConfirmation()
        self.reset_confirm.confirmed.connect(self.reset_totals)

        logger.info(
            "Loaded settings (%s, %.1f V, %.1f Ah), total %.2f km",
            self._settings.chem.name,
            self._settings.pack_voltage,
            self._settings.pack_capacity_ah,
            self._odometer.total_km,
        )

    # ---------- State access ----------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def odometer(self) -> OdometerState:
        return self._odometer

    @property
    def speed_kmh(self) -> float:
        return self._speed_kmh

    @property
    def estimate(self) -> BatteryEstimate:
        return self._estimate

    @property
    def snapshot(self) -> DashboardSnapshot:
        """Current values for the presentation layer."""
        return DashboardSnapshot(
            speed_kmh=self._speed_kmh,
            trip_meters=self._odometer.trip_meters,
            total_meters=self._odometer.total_meters,
            estimate=self._estimate,
            settings=self._settings,
        )

    # ---------- Fix source ----------

    def attach(self, channel: FixChannel) -> FixSubscription:
        """Start consuming fixes from a channel, replacing any previous one."""
        self.detach()
        self._subscription = channel.subscribe(self.on_fix)
        return self._subscription

    def detach(self) -> None:
        """Stop consuming fixes. No on_fix call follows."""
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    # ---------- Events ----------

    @Slot(object)
    def on_fix(self, fix: PositionFix) -> None:
        """Apply a positional fix."""
        previous_total = self._odometer.total_meters
        self._speed_kmh, self._odometer = odometer.on_fix(fix, self._odometer)

        if self._odometer.total_meters != previous_total:
            self._persist()
        self._publish()

    @Slot(object)
    def save_settings(self, settings: Settings) -> None:
        """Replace settings and persist them."""
        self._settings = settings
        logger.info("Settings saved: %s", settings)
        self._persist()
        self._publish()

    @Slot()
    def reset_trip(self) -> None:
        """Zero the trip counter."""
        self._odometer = odometer.reset_trip(self._odometer)
        self._publish()

    @Slot()
    def request_reset_totals(self) -> None:
        self.reset_confirm.request()

    @Slot()
    def confirm_reset_totals(self) -> None:
        self.reset_confirm.confirm()

    @Slot()
    def cancel_reset_totals(self) -> None:
        self.reset_confirm.cancel()

    @Slot()
    def reset_totals(self) -> None:
        """
        Zero lifetime and trip distance.

        Normally reached through the two-step confirmation, not called directly.
        """
        logger.info("Resetting totals (was %.2f km)", self._odometer.total_km)
        self._odometer = odometer.reset_totals(self._odometer)
        self._persist()
        self._publish()

    @Slot(float)
    def apply_charge_voltage(self, volts: float) -> None:
        """Reconcile the trip counter against a post-charge voltage reading."""
        trip_meters, self._settings = charge_reconciler.apply_charge_voltage(self._settings, volts)
        self._odometer = odometer.set_trip(self._odometer, trip_meters)
        logger.info("Charge voltage %.2f V applied, trip set to %.2f km", volts, self._odometer.trip_km)
        self._persist()
        self._publish()

    # ---------- Internals ----------

    def _persist(self) -> None:
        data = DashboardData(settings=self._settings, total_meters=self._odometer.total_meters)
        try:
            self._store.save(data)
        except PersistenceError as e:
            logger.error("%s", e)
            self.error_occurred.emit(str(e))

    def _publish(self) -> None:
        self._estimate = range_estimator.estimate(self._settings, self._odometer.trip_meters)
        self.snapshot_changed.emit(self.snapshot)
