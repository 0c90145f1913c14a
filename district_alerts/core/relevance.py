"""
Relevance filter for District Alerts.

This module contains pure functions that decide whether an alert
concerns the target district, using polygon intersection and an
optional onset time window.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from .models import Alert, BoundaryGeometry, FilterConfig
from district_alerts.common.geo import polygons_intersect
from district_alerts.observability.logging_setup import get_logger

log = get_logger("district_alerts.relevance")


def is_within_window(onset: Optional[datetime], now: datetime, window_hours: float) -> bool:
    """
    onset이 현재부터 window_hours 시간 이내의 미래인지 확인합니다.

    onset이 없으면 항상 False입니다.
    """
    if onset is None:
        return False
    if onset.tzinfo is None:
        # 시간대가 없는 onset은 UTC로 간주
        onset = onset.replace(tzinfo=timezone.utc)
    diff = onset - now
    return timedelta(0) <= diff <= timedelta(hours=window_hours)


def intersects_boundary(alert: Alert, boundary: BoundaryGeometry) -> bool:
    """경보 폴리곤 중 하나라도 경계와 교차하면 True"""
    if not alert.warned_polygons:
        return False
    return polygons_intersect(alert.warned_polygons, boundary.polygons)


def classify(alert: Alert, boundary: BoundaryGeometry, config: FilterConfig, now: datetime) -> Alert:
    """
    경보를 분류하고 qualifies가 채워진 사본을 반환합니다.

    Args:
        alert: 추출된 경보
        boundary: 대상 지역 경계
        config: 필터 설정
        now: 기준 시각 (timezone-aware)

    Returns:
        qualifies가 설정된 Alert
    """
    geo = intersects_boundary(alert, boundary)
    within = is_within_window(alert.onset, now, config.window_hours)
    qualifies = geo and (not config.require_onset_within_window or within)

    log.debug("경보 분류 완료",
              headline=alert.headline,
              geographic=geo,
              within_window=within,
              qualifies=qualifies)

    return alert.model_copy(update={"qualifies": qualifies})
