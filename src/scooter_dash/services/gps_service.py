"""GPS service using gpsd for position and ground speed."""

from __future__ import annotations

import logging
import math
import random
import time
from typing import Optional

from PySide6.QtCore import QObject, Signal, Slot

from scooter_dash.models.data_records import PositionFix

logger = logging.getLogger(__name__)


class GPSService(QObject):
    """
    GPS service that polls gpsd at 1 Hz.

    Emits fix_received with a PositionFix for every TPV report that carries a
    2D or 3D fix. Reports without a fix are dropped; when gpsd is missing or
    unreachable nothing is emitted and the service keeps retrying.
    """

    # Signals
    fix_received = Signal(object)  # PositionFix
    connection_status = Signal(bool, str)  # connected, message

    # Configuration
    RECONNECT_DELAY = 5.0  # seconds

    def __init__(self, host: str = "localhost", port: int = 2947):
        super().__init__()
        self._host = host
        self._port = port
        self._running = False
        self._connected = False
        self._gpsd = None

    @Slot()
    def start(self) -> None:
        """Start the GPS polling loop."""
        self._running = True
        self._run_loop()

    @Slot()
    def stop(self) -> None:
        """Stop the GPS polling loop."""
        self._running = False
        self._disconnect()

    def _connect(self) -> bool:
        """Connect to gpsd."""
        try:
            import gps

            self._gpsd = gps.gps(host=self._host, port=self._port, mode=gps.WATCH_ENABLE)
            self._connected = True
            self.connection_status.emit(True, "Connected to gpsd")
            return True
        except ImportError:
            self.connection_status.emit(False, "gps client library not installed")
            return False
        except Exception as e:
            logger.warning("gpsd connection failed: %s", e)
            self.connection_status.emit(False, f"gpsd connection failed: {e}")
            self._connected = False
            return False

    def _disconnect(self) -> None:
        """Disconnect from gpsd."""
        if self._gpsd:
            try:
                self._gpsd.close()
            except OSError as e:
                logger.debug("Error closing gpsd session: %s", e)
            self._gpsd = None
        self._connected = False

    def _run_loop(self) -> None:
        """Main polling loop."""
        while self._running:
            try:
                if not self._connected:
                    if not self._connect():
                        time.sleep(self.RECONNECT_DELAY)
                        continue

                # Read next GPS report
                report = self._gpsd.next()

                if report.get("class") == "TPV":
                    fix = self.parse_tpv(report)
                    if fix is not None:
                        self.fix_received.emit(fix)

                # Small sleep to prevent tight loop
                time.sleep(0.05)

            except StopIteration:
                # No data available, wait briefly
                time.sleep(0.1)
            except Exception as e:
                logger.warning("GPS error: %s", e)
                self.connection_status.emit(False, f"GPS error: {e}")
                self._disconnect()
                if self._running:
                    time.sleep(self.RECONNECT_DELAY)

    @staticmethod
    def parse_tpv(report: dict) -> Optional[PositionFix]:
        """
        Parse a TPV (Time-Position-Velocity) report from gpsd.

        Args:
            report: The gpsd TPV report dictionary

        Returns:
            PositionFix, or None if the report has no usable position
        """
        # Mode: 0=unknown, 1=no fix, 2=2D fix, 3=3D fix
        if report.get("mode", 0) < 2:
            return None

        lat = report.get("lat")
        lon = report.get("lon")
        if lat is None or lon is None:
            return None

        # Speed is m/s from gpsd; absent while the receiver settles
        speed_mps = report.get("speed")

        return PositionFix(
            lat=float(lat),
            lon=float(lon),
            speed_mps=float(speed_mps) if speed_mps is not None else 0.0,
            timestamp=time.time(),
        )


class MockGPSService(QObject):
    """
    Mock GPS service for development/testing without real GPS hardware.

    Simulates a scooter ride around a starting point with realistic values.
    """

    # Signals (same as real service)
    fix_received = Signal(object)  # PositionFix
    connection_status = Signal(bool, str)  # connected, message

    def __init__(self, seed: Optional[int] = None):
        super().__init__()
        self._running = False
        self._rng = random.Random(seed)

        # Starting position (Belgrade)
        self._lat = 44.8125
        self._lon = 20.4612
        self._heading = 45.0
        self._speed_mps = 0.0

        # Movement simulation
        self._time_counter = 0

    @Slot()
    def start(self) -> None:
        """Start the mock GPS (no-op, updates come from mock_tick)."""
        self._running = True
        self.connection_status.emit(True, "Mock GPS active")

    @Slot()
    def stop(self) -> None:
        """Stop the mock GPS."""
        self._running = False

    def mock_tick(self, dt: float = 1.0) -> None:
        """
        Generate a mock fix.

        Call this from MainWindow's mock timer.
        """
        if not self._running:
            return

        self._time_counter += 1

        # Speed varies between 0-30 km/h with occasional stops
        if self._time_counter % 30 < 4:
            self._speed_mps = self._rng.uniform(0, 0.5)
        else:
            self._speed_mps = self._rng.uniform(4.0, 8.3)

        # Move along heading; ~111 km per degree of latitude
        dist_m = self._speed_mps * dt
        self._lat += dist_m / 111_000 * math.cos(math.radians(self._heading))
        self._lon += (
            dist_m
            / (111_000 * math.cos(math.radians(self._lat)))
            * math.sin(math.radians(self._heading))
        )

        # Slowly vary heading (simulates turns)
        self._heading = (self._heading + self._rng.uniform(-5, 5)) % 360

        self.fix_received.emit(
            PositionFix(
                lat=self._lat,
                lon=self._lon,
                speed_mps=self._speed_mps,
                timestamp=time.time(),
            )
        )
