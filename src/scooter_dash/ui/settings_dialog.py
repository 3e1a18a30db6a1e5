"""Settings dialog: pack parameters, charge voltage, and lifetime reset."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict

from PySide6.QtCore import Slot
from PySide6.QtWidgets import (
    QButtonGroup,
    QDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

from scooter_dash.config.settings import Settings, parse_voltage
from scooter_dash.models.battery import BatteryChem
from scooter_dash.services.reset_confirm import ResetConfirmState

if TYPE_CHECKING:
    from scooter_dash.services.dashboard_service import DashboardService

CHEM_LABELS = {
    BatteryChem.LEAD: "Lead",
    BatteryChem.LI_ION: "Lithium",
    BatteryChem.GRAPHENE: "Graphene",
}

# (field name, label)
NUMERIC_FIELDS = [
    ("pack_voltage", "Pack voltage (V)"),
    ("pack_capacity_ah", "Capacity (Ah)"),
    ("full_charge_voltage", "Full charge voltage (V)"),
    ("last_charge_voltage", "Voltage after charging (V)"),
    ("temperature_c", "Temperature (°C)"),
    ("loss_percent", "Loss factor (%)"),
]


class SettingsDialog(QDialog):
    """
    Settings form bound to a DashboardService.

    Text fields are parsed on save; malformed values keep their previous
    setting. The reset button walks the service's two-step confirmation.
    """

    def __init__(self, dashboard: "DashboardService", parent=None):
        super().__init__(parent)
        self.dashboard = dashboard
        self._edits: Dict[str, QLineEdit] = {}

        self.setWindowTitle("Settings")
        self.setMinimumWidth(440)

        self._setup_ui()
        self._update_ui_from_settings(dashboard.settings)
        self._on_reset_state_changed(dashboard.reset_confirm.state.value)
        self.dashboard.reset_confirm.state_changed.connect(self._on_reset_state_changed)
        self._watching_reset = True
        self._apply_styles()

    def _setup_ui(self):
        """Build the dialog UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        # Chemistry segmented buttons
        header = QLabel("BATTERY TYPE")
        header.setObjectName("sectionHeader")
        layout.addWidget(header)

        chem_row = QHBoxLayout()
        self.chem_group = QButtonGroup(self)
        self.chem_group.setExclusive(True)
        for chem, label in CHEM_LABELS.items():
            btn = QPushButton(label)
            btn.setObjectName("segmentBtn")
            btn.setCheckable(True)
            self.chem_group.addButton(btn, int(chem))
            chem_row.addWidget(btn)
        layout.addLayout(chem_row)

        form = QFormLayout()
        for name, label in NUMERIC_FIELDS:
            edit = QLineEdit()
            edit.setObjectName("settingsEdit")
            self._edits[name] = edit
            form.addRow(label, edit)
        layout.addLayout(form)

        # Buttons
        btn_layout = QHBoxLayout()
        btn_layout.setSpacing(12)

        self.save_btn = QPushButton("SAVE")
        self.save_btn.setObjectName("settingsBtnPrimary")
        self.save_btn.setFixedHeight(48)
        self.save_btn.clicked.connect(self._save)
        btn_layout.addWidget(self.save_btn)

        self.apply_voltage_btn = QPushButton("APPLY VOLTAGE")
        self.apply_voltage_btn.setObjectName("settingsBtn")
        self.apply_voltage_btn.setFixedHeight(48)
        self.apply_voltage_btn.clicked.connect(self._apply_voltage)
        btn_layout.addWidget(self.apply_voltage_btn)

        layout.addLayout(btn_layout)

        # Reset totals with two-step confirmation
        reset_layout = QHBoxLayout()
        reset_layout.setSpacing(8)

        self.reset_btn = QPushButton("RESET TOTAL")
        self.reset_btn.setObjectName("settingsBtnDanger")
        self.reset_btn.setFixedHeight(48)
        self.reset_btn.clicked.connect(self._on_reset_clicked)
        reset_layout.addWidget(self.reset_btn)

        self.cancel_reset_btn = QPushButton("CANCEL")
        self.cancel_reset_btn.setObjectName("settingsBtn")
        self.cancel_reset_btn.setFixedHeight(48)
        self.cancel_reset_btn.clicked.connect(self.dashboard.cancel_reset_totals)
        reset_layout.addWidget(self.cancel_reset_btn)

        layout.addLayout(reset_layout)

        self.close_btn = QPushButton("CLOSE")
        self.close_btn.setObjectName("settingsBtn")
        self.close_btn.setFixedHeight(48)
        self.close_btn.clicked.connect(self.accept)
        layout.addWidget(self.close_btn)

    def _update_ui_from_settings(self, settings: Settings):
        """Update all UI controls from settings."""
        self.chem_group.button(int(settings.chem)).setChecked(True)
        for name, edit in self._edits.items():
            value = getattr(settings, name)
            edit.setText("" if value is None else str(value))

    def _collect_form(self) -> Dict[str, str]:
        """Collect raw text from UI controls."""
        fields = {name: edit.text() for name, edit in self._edits.items()}
        fields["chem"] = str(self.chem_group.checkedId())
        return fields

    @Slot()
    def _save(self):
        """Parse the form and save settings."""
        settings = Settings.from_form(self._collect_form(), self.dashboard.settings)
        self.dashboard.save_settings(settings)
        self._update_ui_from_settings(settings)

    @Slot()
    def _apply_voltage(self):
        """Reconcile trip distance with the typed post-charge voltage."""
        volts = parse_voltage(self._edits["last_charge_voltage"].text())
        if volts is not None:
            self.dashboard.apply_charge_voltage(volts)

    @Slot()
    def _on_reset_clicked(self):
        if self.dashboard.reset_confirm.state == ResetConfirmState.IDLE:
            self.dashboard.request_reset_totals()
        else:
            self.dashboard.confirm_reset_totals()

    @Slot(str)
    def _on_reset_state_changed(self, state: str):
        """Relabel the reset button for the current confirmation step."""
        labels = {
            ResetConfirmState.IDLE.value: "RESET TOTAL",
            ResetConfirmState.AWAITING_CONFIRM_1.value: "SURE?",
            ResetConfirmState.AWAITING_CONFIRM_2.value: "REALLY SURE?",
        }
        self.reset_btn.setText(labels[state])
        self.cancel_reset_btn.setVisible(state != ResetConfirmState.IDLE.value)

    def done(self, result):
        # Abandon a half-finished confirmation when the dialog goes away
        if self._watching_reset:
            self._watching_reset = False
            self.dashboard.reset_confirm.state_changed.disconnect(self._on_reset_state_changed)
            self.dashboard.cancel_reset_totals()
        super().done(result)

    def _apply_styles(self):
        """Apply dialog styles."""
        self.setStyleSheet(
            """
            QDialog {
                background-color: rgba(10, 14, 12, 250);
            }
            QLabel {
                color: rgba(200, 230, 210, 230);
                font-size: 14px;
                font-weight: 700;
            }
            QLabel#sectionHeader {
                color: rgba(0, 255, 106, 240);
                font-size: 16px;
                font-weight: 900;
                letter-spacing: 1px;
            }
            QLineEdit#settingsEdit {
                color: rgba(235, 255, 240, 255);
                font-size: 16px;
                background-color: rgba(30, 40, 34, 255);
                border: 1px solid rgba(0, 255, 106, 80);
                border-radius: 6px;
                padding: 6px;
            }
            QPushButton#segmentBtn {
                background-color: rgba(30, 40, 34, 230);
                border: 1px solid rgba(0, 255, 106, 75);
                border-radius: 6px;
                color: rgba(200, 230, 210, 240);
                font-size: 14px;
                font-weight: 800;
                padding: 8px 12px;
            }
            QPushButton#segmentBtn:checked {
                background-color: rgba(0, 160, 70, 230);
                color: rgba(255, 255, 255, 250);
            }
            QPushButton#settingsBtn {
                background-color: rgba(30, 40, 34, 230);
                border: 1px solid rgba(0, 255, 106, 75);
                border-radius: 8px;
                color: rgba(200, 230, 210, 240);
                font-size: 14px;
                font-weight: 800;
                padding: 8px 20px;
            }
            QPushButton#settingsBtnPrimary {
                background-color: rgba(0, 140, 60, 230);
                border: 1px solid rgba(0, 255, 106, 100);
                border-radius: 8px;
                color: rgba(255, 255, 255, 250);
                font-size: 14px;
                font-weight: 900;
                padding: 8px 24px;
            }
            QPushButton#settingsBtnDanger {
                background-color: rgba(120, 25, 18, 230);
                border: 1px solid rgba(255, 240, 220, 85);
                border-radius: 8px;
                color: rgba(255, 235, 210, 245);
                font-size: 14px;
                font-weight: 900;
                padding: 8px 24px;
            }
            QPushButton:pressed {
                background-color: rgba(255, 255, 255, 35);
            }
            """
        )
