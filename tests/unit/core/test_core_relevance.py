"""
core.relevance 단위 테스트

폴리곤 교차 판정과 onset 시간 창 조건을 테스트합니다.
"""

from datetime import datetime, timedelta

import pytest
from hypothesis import given, strategies as st

from district_alerts.core.models import Alert, FilterConfig
from district_alerts.core.relevance import classify, intersects_boundary, is_within_window
from tests.conftest import INSIDE_RING, OUTSIDE_RING, TOUCHING_RING


def alert_with(*rings, onset=None) -> Alert:
    return Alert(headline="Test", warned_polygons=[list(r) + [r[0]] for r in rings], onset=onset)


class TestGeometricRelevance:
    """교차 판정 테스트"""

    def test_inside_qualifies(self, boundary, config, now):
        assert classify(alert_with(INSIDE_RING), boundary, config, now).qualifies

    def test_outside_does_not_qualify(self, boundary, config, now):
        assert not classify(alert_with(OUTSIDE_RING), boundary, config, now).qualifies

    def test_touching_edge_qualifies(self, boundary, config, now):
        """경계선 접촉도 교차로 취급"""
        assert classify(alert_with(TOUCHING_RING), boundary, config, now).qualifies

    def test_any_polygon_is_enough(self, boundary, config, now):
        """여러 폴리곤 중 하나만 교차해도 해당"""
        assert classify(alert_with(OUTSIDE_RING, INSIDE_RING), boundary, config, now).qualifies

    def test_covering_boundary_qualifies(self, boundary, config, now):
        """경계를 완전히 덮는 경보도 해당 (포함이 아닌 교차)"""
        big = [(170.0, -38.0), (178.0, -38.0), (178.0, -33.0), (170.0, -33.0)]
        assert classify(alert_with(big), boundary, config, now).qualifies

    def test_no_polygons(self, boundary, config, now):
        assert not classify(Alert(headline="x"), boundary, config, now).qualifies
        assert not intersects_boundary(Alert(), boundary)

    def test_classify_returns_copy(self, boundary, config, now):
        """원본 경보는 변경되지 않음"""
        original = alert_with(INSIDE_RING)
        classified = classify(original, boundary, config, now)
        assert classified.qualifies
        assert original.qualifies is False
        assert classified.headline == original.headline


class TestWindowGating:
    """onset 시간 창 테스트"""

    @pytest.fixture
    def windowed(self, config):
        return config.model_copy(update={"require_onset_within_window": True, "window_hours": 100})

    def test_onset_inside_window(self, boundary, windowed, now):
        alert = alert_with(INSIDE_RING, onset=now + timedelta(hours=50))
        assert classify(alert, boundary, windowed, now).qualifies

    def test_onset_beyond_window(self, boundary, windowed, now):
        alert = alert_with(INSIDE_RING, onset=now + timedelta(hours=150))
        assert not classify(alert, boundary, windowed, now).qualifies

    def test_no_onset_never_qualifies(self, boundary, windowed, now):
        assert not classify(alert_with(INSIDE_RING), boundary, windowed, now).qualifies

    def test_past_onset(self, boundary, windowed, now):
        alert = alert_with(INSIDE_RING, onset=now - timedelta(minutes=1))
        assert not classify(alert, boundary, windowed, now).qualifies

    def test_window_ignored_when_not_required(self, boundary, config, now):
        alert = alert_with(INSIDE_RING, onset=now + timedelta(hours=500))
        assert classify(alert, boundary, config, now).qualifies

    def test_window_does_not_rescue_outside(self, boundary, windowed, now):
        alert = alert_with(OUTSIDE_RING, onset=now + timedelta(hours=1))
        assert not classify(alert, boundary, windowed, now).qualifies


class TestIsWithinWindow:
    """is_within_window 경계값 테스트"""

    def test_edges_inclusive(self, now):
        assert is_within_window(now, now, 100)
        assert is_within_window(now + timedelta(hours=100), now, 100)

    def test_naive_onset_treated_as_utc(self, now):
        naive = (now + timedelta(hours=1)).replace(tzinfo=None)
        assert is_within_window(naive, now, 2)

    @given(hours=st.floats(min_value=-1000, max_value=1000, allow_nan=False),
           window=st.floats(min_value=0, max_value=500, allow_nan=False))
    def test_matches_definition(self, hours, window):
        now = datetime(2026, 1, 1).astimezone()
        onset = now + timedelta(hours=hours)
        diff = onset - now
        expected = timedelta(0) <= diff <= timedelta(hours=window)
        assert is_within_window(onset, now, window) == expected
