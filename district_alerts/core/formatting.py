"""
Display helpers for alert records.

Plain-text values a renderer needs for an alert card. No markup.
"""

from datetime import datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from .models import Alert

NZ_TZ = ZoneInfo("Pacific/Auckland")


def format_onset(onset: Optional[datetime], tz: tzinfo = NZ_TZ) -> str:
    """
    onset을 읽기 쉬운 문자열로 변환합니다.

    예: "Monday 20 October, 3:05 pm"
    """
    if onset is None:
        return ""
    local = onset.astimezone(tz)
    hour = local.hour % 12 or 12
    suffix = "am" if local.hour < 12 else "pm"
    return f"{local:%A} {local.day} {local:%B}, {hour}:{local:%M} {suffix}"


def summary_line(alert: Alert) -> str:
    """카드 제목: "<headline> issued for <areaDesc>" """
    if not alert.area_description:
        return alert.headline
    return f"{alert.headline} issued for {alert.area_description}"
