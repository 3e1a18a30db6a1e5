"""
Tests for post-charge trip reconciliation.
"""

import pytest

from scooter_dash.config.settings import Settings
from scooter_dash.engine.charge_reconciler import apply_charge_voltage
from scooter_dash.engine.range_estimator import estimate
from scooter_dash.models.battery import BatteryChem


class TestApplyChargeVoltage:
    """Tests for apply_charge_voltage."""

    def test_reference_scenario(self, lead_settings):
        """72 V on a 74 V pack: 10% of the 34.29 km full range is used."""
        trip_meters, updated = apply_charge_voltage(lead_settings, 72.0)

        range_at_full = estimate(lead_settings.with_changes(last_charge_voltage=74.0), 0.0).remaining_km
        range_at_observed = estimate(lead_settings.with_changes(last_charge_voltage=72.0), 0.0).remaining_km
        assert range_at_observed < range_at_full
        assert trip_meters == pytest.approx((range_at_full - range_at_observed) * 1000.0)
        assert trip_meters == pytest.approx(1200.0 * 0.1 / 35.0 * 1000.0)
        assert updated.last_charge_voltage == 72.0

    def test_full_voltage_means_no_distance(self, lead_settings):
        trip_meters, updated = apply_charge_voltage(lead_settings, 74.0)
        assert trip_meters == pytest.approx(0.0)
        assert updated.last_charge_voltage == 74.0

    def test_above_full_never_negative(self, lead_settings):
        trip_meters, _ = apply_charge_voltage(lead_settings, 80.0)
        assert trip_meters == 0.0

    def test_empty_pack_uses_whole_range(self, lead_settings):
        trip_meters, _ = apply_charge_voltage(lead_settings, 40.0)
        assert trip_meters == pytest.approx(1200.0 / 35.0 * 1000.0)

    def test_lower_voltage_means_more_distance(self):
        settings = Settings(chem=BatteryChem.LI_ION)
        high, _ = apply_charge_voltage(settings, 70.0)
        low, _ = apply_charge_voltage(settings, 60.0)
        assert low > high > 0.0

    def test_other_settings_unchanged(self, lead_settings):
        _, updated = apply_charge_voltage(lead_settings, 71.0)
        assert updated == lead_settings.with_changes(last_charge_voltage=71.0)

    def test_replaces_previous_reading(self, lead_settings):
        previous = lead_settings.with_changes(last_charge_voltage=65.0)
        trip_meters, updated = apply_charge_voltage(previous, 72.0)
        assert updated.last_charge_voltage == 72.0
        assert trip_meters == pytest.approx(1200.0 * 0.1 / 35.0 * 1000.0)

    def test_estimate_after_reconciliation_is_consistent(self, lead_settings):
        """Remaining range right after reconciling equals the observed-voltage range."""
        trip_meters, updated = apply_charge_voltage(lead_settings, 72.0)
        result = estimate(updated, trip_meters)
        assert result.remaining_km == pytest.approx(1200.0 * 0.9 / 35.0)
        assert result.percent == 90
