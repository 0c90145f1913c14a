"""
Core domain models for District Alerts.

This module defines the core domain models using Pydantic v2
for type safety and validation.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from district_alerts.common.geo import Ring, close_ring

CAP_NS = "urn:oasis:names:tc:emergency:cap:1.2"
ATOM_NS = "http://www.w3.org/2005/Atom"

FRESHNESS_MS = 24 * 60 * 60 * 1000


def is_within_freshness(fetched_at: int, now_ms: int) -> bool:
    """갱신 후 24시간 이내이면 True (정확히 24시간도 포함)"""
    return now_ms - fetched_at <= FRESHNESS_MS


DEFAULT_FEED_URL = "https://raw.githubusercontent.com/almokinsgov/NZSHAPE/refs/heads/main/alerts/latest.xml"
DEFAULT_BOUNDARY_URL = "https://raw.githubusercontent.com/almokinsgov/NZSHAPE/main/far_north.geojson"
DEFAULT_REGION_NAME = "Far North District"


class BoundaryGeometry(BaseModel):
    """대상 지역 경계 모델 (폴리곤마다 링 목록, 첫 링이 외곽선)"""
    name: str
    polygons: List[List[Ring]]

    @field_validator("polygons")
    @classmethod
    def _closed_rings(cls, polygons: List[List[Ring]]) -> List[List[Ring]]:
        if not polygons:
            raise ValueError("boundary needs at least one polygon")
        closed = []
        for rings in polygons:
            if not rings:
                raise ValueError("polygon needs an exterior ring")
            closed.append([close_ring(ring) for ring in rings])
        return closed


class CachedBoundary(BaseModel):
    """저장소에 보관되는 경계와 갱신 시각 (epoch ms)"""
    boundary: BoundaryGeometry
    fetched_at: int

    def is_fresh(self, now_ms: int) -> bool:
        return is_within_freshness(self.fetched_at, now_ms)


@dataclass
class RawAlertDocument:
    """파싱된 CAP 문서의 info 블록"""
    info: ET.Element
    source_url: Optional[str] = None

    def text(self, tag: str) -> str:
        """첫 번째 일치 요소의 텍스트, 없으면 빈 문자열"""
        el = self.info.find(f".//{{{CAP_NS}}}{tag}")
        if el is None or el.text is None:
            return ""
        return el.text.strip()

    def texts(self, tag: str) -> List[str]:
        """일치하는 모든 요소의 텍스트"""
        return [el.text or "" for el in self.info.iter(f"{{{CAP_NS}}}{tag}")]


class Alert(BaseModel):
    """경보 레코드 (분류 이후 읽기 전용)"""
    model_config = ConfigDict(frozen=True)

    headline: str = ""
    description: str = ""
    area_description: str = ""
    onset: Optional[datetime] = None
    info_url: Optional[str] = None
    warned_polygons: List[Ring] = Field(default_factory=list)
    qualifies: bool = False
    source_url: Optional[str] = None


class FilterConfig(BaseModel):
    """실행 단위 필터 설정 (생성 후 변경 불가)"""
    model_config = ConfigDict(frozen=True)

    target_region_name: str = DEFAULT_REGION_NAME
    include_non_qualifying: bool = False
    require_onset_within_window: bool = False
    window_hours: float = Field(default=100, ge=0)
    feed_source: str = DEFAULT_FEED_URL
    boundary_source: str = DEFAULT_BOUNDARY_URL


BoundaryOutcome = Literal["cache", "remote", "fallback"]
PipelineStatus = Literal["ok", "empty", "failed"]


class PipelineResult(BaseModel):
    """파이프라인 1회 실행 결과: 정렬된 목록 또는 단일 실패"""
    status: PipelineStatus
    alerts: List[Alert] = Field(default_factory=list)
    message: str = ""
    boundary_outcome: Optional[BoundaryOutcome] = None
    skipped: int = 0
