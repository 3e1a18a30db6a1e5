"""Shared fixtures."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication  # noqa: E402

from scooter_dash.config.settings import Settings  # noqa: E402
from scooter_dash.models.battery import BatteryChem  # noqa: E402
from scooter_dash.models.data_records import PositionFix  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    """Qt objects and signals need an application instance."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def lead_settings():
    """The reference LEAD pack: 60 V, 20 Ah, 74 V full, 20 C, no losses."""
    return Settings(
        chem=BatteryChem.LEAD,
        pack_voltage=60.0,
        pack_capacity_ah=20.0,
        full_charge_voltage=74.0,
        temperature_c=20.0,
        loss_percent=0,
    )


@pytest.fixture
def make_fix():
    def _make(lat=44.8125, lon=20.4612, speed_mps=0.0, timestamp=0.0):
        return PositionFix(lat=lat, lon=lon, speed_mps=speed_mps, timestamp=timestamp)

    return _make
