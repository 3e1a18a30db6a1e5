"""
Tests for gpsd report parsing and the mock fix generator.
"""

import pytest

from scooter_dash.services.gps_service import GPSService, MockGPSService


class TestParseTPV:
    """Tests for GPSService.parse_tpv."""

    def test_3d_fix(self):
        fix = GPSService.parse_tpv(
            {"class": "TPV", "mode": 3, "lat": 44.81, "lon": 20.46, "speed": 5.5, "alt": 117.0}
        )
        assert fix.lat == 44.81
        assert fix.lon == 20.46
        assert fix.speed_mps == 5.5

    def test_2d_fix_without_speed(self):
        fix = GPSService.parse_tpv({"class": "TPV", "mode": 2, "lat": 1.0, "lon": 2.0})
        assert fix.speed_mps == 0.0

    @pytest.mark.parametrize(
        "report",
        [
            {"class": "TPV", "mode": 1},
            {"class": "TPV"},
            {"class": "TPV", "mode": 3, "lat": 44.0},
        ],
    )
    def test_no_usable_position(self, report):
        assert GPSService.parse_tpv(report) is None


class TestMockGPSService:
    """Tests for MockGPSService."""

    def test_inert_until_started(self):
        mock = MockGPSService(seed=1)
        fixes = []
        mock.fix_received.connect(fixes.append)
        mock.mock_tick()
        assert fixes == []

    def test_emits_plausible_fixes(self):
        mock = MockGPSService(seed=1)
        fixes = []
        mock.fix_received.connect(fixes.append)
        mock.start()
        for _ in range(40):
            mock.mock_tick()
        mock.stop()
        mock.mock_tick()

        assert len(fixes) == 40
        for fix in fixes:
            assert 0.0 <= fix.speed_mps <= 8.3
            assert 44.0 < fix.lat < 46.0
            assert 20.0 < fix.lon < 21.0
