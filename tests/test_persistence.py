"""
Tests for the JSON repository and the background writer.
"""

import json
import threading

import pytest
from PySide6.QtCore import QCoreApplication

from scooter_dash.config.settings import DEFAULT_TOTAL_METERS_SEED, Settings
from scooter_dash.models.battery import BatteryChem
from scooter_dash.models.data_records import DashboardData
from scooter_dash.services.persistence import (
    SCHEMA_VERSION,
    AsyncRepositoryWriter,
    DashboardRepository,
    PersistenceError,
)


class GatedRepository:
    """Repository whose writes block until the gate opens."""

    def __init__(self):
        self.gate = threading.Event()
        self.started = threading.Event()
        self.saved = []

    def load(self):
        return DashboardData(settings=Settings(), total_meters=0.0)

    def save(self, data):
        self.started.set()
        self.gate.wait(5)
        self.saved.append(data.total_meters)


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "dashboard.json"


class TestLoad:
    """Tests for DashboardRepository.load."""

    def test_missing_file_gives_defaults_and_seed(self, store_path):
        data = DashboardRepository(store_path).load()
        assert data.settings == Settings()
        assert data.total_meters == DEFAULT_TOTAL_METERS_SEED

    def test_path(self, store_path):
        assert DashboardRepository(store_path).path == store_path

    def test_custom_seed(self, store_path):
        data = DashboardRepository(store_path, total_meters_seed=500.0).load()
        assert data.total_meters == 500.0

    def test_zero_total_replaced_by_seed(self, store_path):
        store_path.write_text(json.dumps({"version": 1, "odometer": {"totalMeters": 0}}))
        assert DashboardRepository(store_path).load().total_meters == DEFAULT_TOTAL_METERS_SEED

    def test_corrupt_file_gives_defaults(self, store_path):
        store_path.write_text("{not json")
        data = DashboardRepository(store_path).load()
        assert data.settings == Settings()

    def test_non_object_gives_defaults(self, store_path):
        store_path.write_text("[1, 2, 3]")
        assert DashboardRepository(store_path).load().settings == Settings()

    def test_legacy_flat_layout(self, store_path):
        store_path.write_text(
            json.dumps(
                {
                    "chem": 1,
                    "packVoltage": 48.0,
                    "packCapacityAh": 13.0,
                    "fullChargeVoltage": 54.6,
                    "lastChargeVoltage": 53.0,
                    "temperatureC": 10.0,
                    "lossPercent": 5,
                    "totalMeters": 12345,
                }
            )
        )
        data = DashboardRepository(store_path).load()
        assert data.settings == Settings(
            chem=BatteryChem.LI_ION,
            pack_voltage=48.0,
            pack_capacity_ah=13.0,
            full_charge_voltage=54.6,
            last_charge_voltage=53.0,
            temperature_c=10.0,
            loss_percent=5,
        )
        assert data.total_meters == 12345.0

    def test_chem_index_clamped(self, store_path):
        store_path.write_text(json.dumps({"version": 1, "settings": {"chem": 7}}))
        assert DashboardRepository(store_path).load().settings.chem == BatteryChem.GRAPHENE

    def test_bad_values_use_defaults(self, store_path):
        store_path.write_text(
            json.dumps({"version": 1, "settings": {"packVoltage": "sixty", "chem": "x"}})
        )
        settings = DashboardRepository(store_path).load().settings
        assert settings.pack_voltage == 60.0
        assert settings.chem == BatteryChem.LEAD


class TestSave:
    """Tests for DashboardRepository.save."""

    def test_round_trip(self, store_path):
        repo = DashboardRepository(store_path)
        settings = Settings(chem=BatteryChem.GRAPHENE, last_charge_voltage=72.5, loss_percent=3)
        repo.save(DashboardData(settings=settings, total_meters=1234.6))

        data = repo.load()
        assert data.settings == settings
        assert data.total_meters == 1235.0

    def test_versioned_layout(self, store_path):
        DashboardRepository(store_path).save(DashboardData(settings=Settings(), total_meters=10.0))
        raw = json.loads(store_path.read_text())
        assert raw["version"] == SCHEMA_VERSION
        assert raw["odometer"] == {"totalMeters": 10}
        assert raw["settings"]["packVoltage"] == 60.0
        assert "lastChargeVoltage" not in raw["settings"]

    def test_clearing_last_charge_removes_key(self, store_path):
        repo = DashboardRepository(store_path)
        repo.save(DashboardData(settings=Settings(last_charge_voltage=70.0), total_meters=10.0))
        repo.save(DashboardData(settings=Settings(), total_meters=10.0))
        assert "lastChargeVoltage" not in json.loads(store_path.read_text())["settings"]

    def test_unwritable_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        repo = DashboardRepository(blocker / "dashboard.json")
        with pytest.raises(PersistenceError):
            repo.save(DashboardData(settings=Settings(), total_meters=1.0))


class TestAsyncRepositoryWriter:
    """Tests for AsyncRepositoryWriter."""

    def test_writes_in_order(self, store_path):
        writer = AsyncRepositoryWriter(DashboardRepository(store_path))
        for total in range(1, 21):
            writer.save(DashboardData(settings=Settings(), total_meters=float(total)))
        writer.close()
        assert DashboardRepository(store_path).load().total_meters == 20.0

    def test_failure_reported(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        writer = AsyncRepositoryWriter(DashboardRepository(blocker / "dashboard.json"))
        errors = []
        writer.error_occurred.connect(errors.append)

        writer.save(DashboardData(settings=Settings(), total_meters=1.0))
        writer.flush(timeout=5)
        writer.close()
        # The signal is emitted from the worker thread
        QCoreApplication.processEvents()

        assert len(errors) == 1
        assert "Failed to save" in errors[0]

    def test_writes_coalesce_to_latest(self):
        """Saves queued behind a slow write collapse into one write of the newest data."""
        repository = GatedRepository()
        writer = AsyncRepositoryWriter(repository)

        writer.save(DashboardData(settings=Settings(), total_meters=1.0))
        assert repository.started.wait(5)
        for total in range(2, 11):
            writer.save(DashboardData(settings=Settings(), total_meters=float(total)))
        repository.gate.set()
        writer.close()

        assert repository.saved == [1.0, 10.0]

    def test_saves_after_drain_are_written(self, store_path):
        writer = AsyncRepositoryWriter(DashboardRepository(store_path))
        writer.save(DashboardData(settings=Settings(), total_meters=5.0))
        writer.flush(timeout=5)
        writer.save(DashboardData(settings=Settings(), total_meters=6.0))
        writer.close()
        assert DashboardRepository(store_path).load().total_meters == 6.0
