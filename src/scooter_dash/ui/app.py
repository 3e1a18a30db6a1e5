from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, QTimer, QThread, Slot
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from scooter_dash.models.data_records import DashboardSnapshot
from scooter_dash.services.dashboard_service import DashboardService, DashboardStore
from scooter_dash.services.fix_channel import FixChannel
from scooter_dash.services.gps_service import GPSService, MockGPSService
from scooter_dash.services.persistence import AsyncRepositoryWriter
from scooter_dash.ui.settings_dialog import SettingsDialog

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, store: DashboardStore, mock: bool = True):
        super().__init__()
        self.setWindowTitle("Scooter Dash")
        self.setMinimumSize(480, 640)

        self.mock = mock
        self.store = store

        # Services (initialized later)
        self.dashboard: Optional[DashboardService] = None
        self.fix_channel: Optional[FixChannel] = None
        self.gps_service: Optional[GPSService] = None
        self.mock_gps_service: Optional[MockGPSService] = None
        self.gps_thread: Optional[QThread] = None

        root = QWidget()
        root.setObjectName("root")
        self.setCentralWidget(root)

        main = QVBoxLayout(root)
        main.setContentsMargins(16, 16, 16, 16)
        main.setSpacing(10)

        # --- Status pill ---
        self.gps_pill = self._top_pill("GPS: --")
        main.addWidget(self.gps_pill)

        # --- Readout ---
        self.speed_label = QLabel("0 km/h")
        self.speed_label.setObjectName("speedValue")
        self.speed_label.setAlignment(Qt.AlignCenter)
        self.speed_label.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        main.addWidget(self.speed_label)

        self.trip_label = self._readout("Trip: 0.00 km")
        self.total_label = self._readout("Total: 0.00 km")
        self.battery_label = self._readout("Battery: --% | Remaining: -- km")
        main.addWidget(self.trip_label)
        main.addWidget(self.total_label)
        main.addWidget(self.battery_label)

        main.addStretch(1)

        # --- Bottom bar ---
        bottom = QHBoxLayout()
        bottom.setSpacing(12)

        self.reset_trip_btn = QPushButton("RESET TRIP")
        self.reset_trip_btn.setObjectName("actionBtn")
        self.reset_trip_btn.setFixedHeight(48)

        self.settings_btn = QPushButton("SETTINGS")
        self.settings_btn.setObjectName("actionBtn")
        self.settings_btn.setFixedHeight(48)
        self.settings_btn.clicked.connect(self._open_settings)

        bottom.addWidget(self.reset_trip_btn)
        bottom.addStretch(1)
        bottom.addWidget(self.settings_btn)
        main.addLayout(bottom)

        self._apply_styles()

        # Initialize services
        self._init_services()

        if self.mock:
            self.mock_timer = QTimer(self)
            self.mock_timer.timeout.connect(self._mock_tick)
            self.mock_timer.start(1000)

    def _init_services(self):
        """Initialize the dashboard service and the fix source."""
        self.dashboard = DashboardService(self.store)
        self.dashboard.snapshot_changed.connect(self._on_snapshot)
        self.dashboard.error_occurred.connect(self._on_dashboard_error)
        self.reset_trip_btn.clicked.connect(self.dashboard.reset_trip)
        if isinstance(self.store, AsyncRepositoryWriter):
            self.store.error_occurred.connect(self.dashboard.error_occurred)

        self.fix_channel = FixChannel()
        self.dashboard.attach(self.fix_channel)

        if self.mock:
            # Mock GPS for development
            self.mock_gps_service = MockGPSService()
            self.mock_gps_service.fix_received.connect(self.fix_channel.publish)
            self.mock_gps_service.connection_status.connect(self._on_gps_status)
            self.mock_gps_service.start()
        else:
            # Real GPS service in thread; fixes are queued onto this thread
            self.gps_service = GPSService()
            self.gps_thread = QThread()
            self.gps_service.moveToThread(self.gps_thread)

            self.gps_service.fix_received.connect(self.fix_channel.publish)
            self.gps_service.connection_status.connect(self._on_gps_status)

            self.gps_thread.started.connect(self.gps_service.start)
            self.gps_thread.start()

        self._on_snapshot(self.dashboard.snapshot)

    def closeEvent(self, event):
        """Handle window close - cleanup services."""
        if self.fix_channel:
            self.fix_channel.close()

        # Stop GPS service
        if self.gps_service:
            self.gps_service.stop()
        if self.gps_thread:
            self.gps_thread.quit()
            self.gps_thread.wait(1000)

        super().closeEvent(event)

    # ---------- Service slots ----------

    @Slot(object)
    def _on_snapshot(self, snap: DashboardSnapshot):
        """Render a dashboard snapshot."""
        self.speed_label.setText(f"{snap.speed_kmh:.0f} km/h")
        self.trip_label.setText(f"Trip: {snap.trip_meters / 1000.0:.2f} km")
        self.total_label.setText(f"Total: {snap.total_meters / 1000.0:.2f} km")
        self.battery_label.setText(
            f"Battery: {snap.estimate.percent}% | Remaining: {snap.estimate.remaining_km:.1f} km"
        )

    @Slot(bool, str)
    def _on_gps_status(self, connected: bool, message: str):
        """Handle GPS connection status change."""
        self.gps_pill.setText("GPS: OK" if connected else "GPS: --")
        if not connected:
            logger.info("GPS status: %s", message)

    @Slot(str)
    def _on_dashboard_error(self, message: str):
        """Handle dashboard service error."""
        logger.error("Dashboard error: %s", message)

    # ---------- UI builders ----------

    def _top_pill(self, text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setObjectName("topPill")
        lbl.setFixedHeight(36)
        lbl.setAlignment(Qt.AlignVCenter | Qt.AlignLeft)
        return lbl

    def _readout(self, text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setObjectName("readout")
        lbl.setAlignment(Qt.AlignCenter)
        return lbl

    def _apply_styles(self):
        self.centralWidget().setStyleSheet(
            """
            QWidget#root {
                background-color: rgb(0, 0, 0);
            }
            QLabel#topPill {
                background-color: rgba(20, 40, 28, 210);
                border: 1px solid rgba(0, 255, 106, 55);
                border-radius: 8px;
                padding-left: 12px;
                padding-right: 12px;
                color: rgba(0, 255, 106, 235);
                font-size: 14px;
                font-weight: 800;
            }
            QLabel#speedValue {
                color: rgb(0, 255, 106);
                font-size: 64px;
                font-weight: 900;
            }
            QLabel#readout {
                color: rgb(0, 255, 106);
                font-size: 20px;
                font-weight: 700;
            }
            QPushButton#actionBtn {
                background-color: rgba(20, 40, 28, 230);
                border: 2px solid rgba(0, 255, 106, 85);
                border-radius: 10px;
                color: rgba(0, 255, 106, 240);
                font-size: 16px;
                font-weight: 900;
                letter-spacing: 1px;
                padding: 8px 14px;
            }
            QPushButton#actionBtn:pressed { background-color: rgba(255,255,255,35); }
            """
        )

    # ---------- Dialogs ----------

    def _open_settings(self):
        """Open the settings dialog."""
        if self.dashboard:
            dlg = SettingsDialog(self.dashboard, parent=self)
            dlg.exec()

    # ---------- Mock data ----------

    def _mock_tick(self):
        if self.mock_gps_service:
            self.mock_gps_service.mock_tick()
