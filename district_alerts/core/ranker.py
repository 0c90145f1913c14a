"""
Alert ranking for District Alerts.
"""

from typing import Iterable, List

from .models import Alert, FilterConfig


def rank(alerts: Iterable[Alert], config: FilterConfig) -> List[Alert]:
    """
    분류된 경보를 표시 순서로 정렬합니다.

    해당 지역 경보가 먼저 오며, 나중에 처리된 것이 앞에 옵니다 (LIFO).
    include_non_qualifying이면 나머지 경보가 처리 순서대로 뒤에 붙습니다.

    Args:
        alerts: 처리 순서대로의 분류된 경보
        config: 필터 설정

    Returns:
        정렬된 경보 목록 (비어 있을 수 있음)
    """
    qualifying: List[Alert] = []
    others: List[Alert] = []
    for alert in alerts:
        if alert.qualifies:
            qualifying.insert(0, alert)
        elif config.include_non_qualifying:
            others.append(alert)
    return qualifying + others
