"""
Error taxonomy for District Alerts.

Only FeedUnavailable ever reaches the caller of the pipeline.
BoundaryUnavailable is recovered by the boundary cache, and skipped
entries are recorded as EntrySkipped values instead of being raised.
"""

from dataclasses import dataclass
from typing import Optional


class DistrictAlertsError(Exception):
    """기본 예외"""


class FetchError(DistrictAlertsError):
    """HTTP 전송, 상태 코드, 디코딩 실패"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class BoundaryUnavailable(DistrictAlertsError):
    """경계 지오메트리를 가져오거나 해석하지 못함"""


class FeedUnavailable(DistrictAlertsError):
    """최상위 피드를 가져오거나 해석하지 못함"""


@dataclass(frozen=True)
class EntrySkipped:
    """건너뛴 피드 항목 기록 (예외로 발생시키지 않음)"""
    reason: str
    url: Optional[str] = None
    detail: str = ""
