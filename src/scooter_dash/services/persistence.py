"""JSON persistence for settings and lifetime distance."""

from __future__ import annotations

import json
import logging
import math
import sys
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Optional

from PySide6.QtCore import QObject, Signal

from scooter_dash.config.settings import DEFAULT_TOTAL_METERS_SEED, Settings
from scooter_dash.models.battery import BatteryChem
from scooter_dash.models.data_records import DashboardData

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
STORE_FILENAME = "dashboard.json"

# Store keys
KEY_CHEM = "chem"
KEY_PACK_VOLTAGE = "packVoltage"
KEY_PACK_CAPACITY_AH = "packCapacityAh"
KEY_FULL_CHARGE_VOLTAGE = "fullChargeVoltage"
KEY_LAST_CHARGE_VOLTAGE = "lastChargeVoltage"
KEY_TEMPERATURE_C = "temperatureC"
KEY_LOSS_PERCENT = "lossPercent"
KEY_TOTAL_METERS = "totalMeters"


def get_data_dir() -> Path:
    """Get the data directory, creating if needed."""
    if sys.platform.startswith("linux"):
        # Raspberry Pi / Linux - use XDG standard
        data_dir = Path.home() / ".local" / "share" / "scooter_dash"
    else:
        # Windows/Mac development
        data_dir = Path.home() / ".scooter_dash"

    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


class PersistenceError(Exception):
    """Raised when the store cannot be written."""


class DashboardRepository:
    """
    Versioned JSON store for Settings and lifetime distance.

    Layout (version 1):
        {"version": 1, "settings": {...}, "odometer": {"totalMeters": int}}

    A file without a version is read as the legacy flat key-value layout.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        total_meters_seed: float = DEFAULT_TOTAL_METERS_SEED,
    ):
        self._path = path or (get_data_dir() / STORE_FILENAME)
        self._total_meters_seed = total_meters_seed

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> DashboardData:
        """
        Load settings and lifetime distance.

        Returns:
            DashboardData (defaults if the file is missing or unreadable)
        """
        raw: Dict[str, Any] = {}
        try:
            if self._path.exists():
                with open(self._path, encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    raw = data
                else:
                    logger.warning("Ignoring store %s: not a JSON object", self._path)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load store %s: %s", self._path, e)

        settings_raw, odometer_raw = self._migrate(raw)
        return DashboardData(
            settings=self._settings_from_dict(settings_raw),
            total_meters=self._total_from_dict(odometer_raw),
        )

    def save(self, data: DashboardData) -> None:
        """
        Write settings and lifetime distance.

        Raises:
            PersistenceError: If the file cannot be written
        """
        payload = {
            "version": SCHEMA_VERSION,
            "settings": self._settings_to_dict(data.settings),
            "odometer": {KEY_TOTAL_METERS: int(round(data.total_meters))},
        }
        tmp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            tmp_path.replace(self._path)
        except OSError as e:
            raise PersistenceError(f"Failed to save store {self._path}: {e}") from e

    @staticmethod
    def _migrate(raw: Dict[str, Any]):
        """Split a stored document into (settings dict, odometer dict)."""
        version = raw.get("version")
        if version is None:
            # Legacy flat layout: every key at the top level
            return raw, raw
        if isinstance(version, int) and version > SCHEMA_VERSION:
            logger.warning("Store version %s is newer than %s", version, SCHEMA_VERSION)
        settings_raw = raw.get("settings")
        odometer_raw = raw.get("odometer")
        return (
            settings_raw if isinstance(settings_raw, dict) else {},
            odometer_raw if isinstance(odometer_raw, dict) else {},
        )

    @staticmethod
    def _settings_to_dict(settings: Settings) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            KEY_CHEM: int(settings.chem),
            KEY_PACK_VOLTAGE: settings.pack_voltage,
            KEY_PACK_CAPACITY_AH: settings.pack_capacity_ah,
            KEY_FULL_CHARGE_VOLTAGE: settings.full_charge_voltage,
            KEY_TEMPERATURE_C: settings.temperature_c,
            KEY_LOSS_PERCENT: settings.loss_percent,
        }
        if settings.last_charge_voltage is not None:
            data[KEY_LAST_CHARGE_VOLTAGE] = settings.last_charge_voltage
        return data

    @staticmethod
    def _settings_from_dict(data: Dict[str, Any]) -> Settings:
        defaults = Settings()
        chem = defaults.chem
        if KEY_CHEM in data:
            try:
                chem = BatteryChem.from_index(data[KEY_CHEM])
            except (TypeError, ValueError, OverflowError):
                logger.warning("Invalid stored chemistry %r", data[KEY_CHEM])

        return Settings(
            chem=chem,
            pack_voltage=_read_float(data, KEY_PACK_VOLTAGE, defaults.pack_voltage),
            pack_capacity_ah=_read_float(data, KEY_PACK_CAPACITY_AH, defaults.pack_capacity_ah),
            full_charge_voltage=_read_float(
                data, KEY_FULL_CHARGE_VOLTAGE, defaults.full_charge_voltage
            ),
            last_charge_voltage=_read_float(data, KEY_LAST_CHARGE_VOLTAGE, None),
            temperature_c=_read_float(data, KEY_TEMPERATURE_C, defaults.temperature_c),
            loss_percent=_read_int(data, KEY_LOSS_PERCENT, defaults.loss_percent),
        )

    def _total_from_dict(self, data: Dict[str, Any]) -> float:
        total = _read_int(data, KEY_TOTAL_METERS, 0)
        # A zero total is indistinguishable from "never stored"
        if total == 0:
            return float(self._total_meters_seed)
        return float(total)


class AsyncRepositoryWriter(QObject):
    """
    Fire-and-forget writes on a single background worker.

    Only the newest pending DashboardData is kept: saves arriving while a
    write is in progress replace each other, so a slow disk never builds a
    backlog. Failures are logged and emitted as error_occurred; the caller's
    in-memory state is never rolled back.
    """

    # Signals
    error_occurred = Signal(str)  # error message

    def __init__(self, repository: DashboardRepository):
        super().__init__()
        self._repository = repository
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="store")
        self._lock = threading.Lock()
        self._pending: Optional[DashboardData] = None
        self._scheduled = False
        self._last: Optional[Future] = None

    def load(self) -> DashboardData:
        return self._repository.load()

    def save(self, data: DashboardData) -> None:
        """Queue a write and return immediately."""
        with self._lock:
            self._pending = data
            if not self._scheduled:
                self._scheduled = True
                self._last = self._executor.submit(self._drain)

    def flush(self, timeout: Optional[float] = None) -> None:
        """Wait for queued writes to finish."""
        if self._last is not None:
            self._last.result(timeout=timeout)

    def close(self) -> None:
        """Finish queued writes and stop the worker."""
        self._executor.shutdown(wait=True)

    def _drain(self) -> None:
        """Write the newest pending data until nothing is left."""
        while True:
            with self._lock:
                data = self._pending
                self._pending = None
                if data is None:
                    self._scheduled = False
                    return
            try:
                self._repository.save(data)
            except PersistenceError as e:
                logger.error("%s", e)
                self.error_occurred.emit(str(e))


def _read_float(data: Dict[str, Any], key: str, default):
    value = data.get(key)
    if value is None:
        return default
    try:
        value = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid stored value for %s: %r", key, value)
        return default
    if not math.isfinite(value):
        return default
    return value


def _read_int(data: Dict[str, Any], key: str, default: int) -> int:
    value = _read_float(data, key, None)
    if value is None:
        return default
    return int(round(value))
