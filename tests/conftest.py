"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처, 가짜 포트 구현을 제공합니다.
"""

import json
import os
import sqlite3
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pytest

from district_alerts.adapters.storage.memory_kv import MemoryKVStore
from district_alerts.core.errors import FetchError
from district_alerts.core.models import BoundaryGeometry, FilterConfig

FEED_URL = "https://alerts.example/latest.xml"
BOUNDARY_URL = "https://shapes.example/far_north.geojson"
REGION = "Far North District"

# 경계: 경도 173~174, 위도 -35.5~-34.5 정사각형
BOUNDARY_RING = [(173.0, -35.5), (174.0, -35.5), (174.0, -34.5), (173.0, -34.5), (173.0, -35.5)]

# 경보 폴리곤 (경도, 위도)
INSIDE_RING = [(173.2, -35.2), (173.4, -35.2), (173.4, -35.0), (173.2, -35.0)]
OUTSIDE_RING = [(175.0, -35.2), (176.0, -35.2), (176.0, -35.0), (175.0, -35.0)]
TOUCHING_RING = [(174.0, -35.2), (175.0, -35.2), (175.0, -35.0), (174.0, -35.0)]


def cap_polygon_text(ring: Sequence[Tuple[float, float]]) -> str:
    """(경도, 위도) 링을 CAP "위도,경도" 텍스트로 변환"""
    return " ".join(f"{lat},{lon}" for lon, lat in ring)


def cap_document(headline: str = "Heavy Rain Warning",
                 area: str = "Northland",
                 onset: Optional[str] = None,
                 web: Optional[str] = "https://www.metservice.com/warnings",
                 polygons: Sequence[str] = (),
                 description: str = "Periods of heavy rain.",
                 with_info: bool = True) -> str:
    """CAP 1.2 문서 텍스트 생성"""
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<alert xmlns="urn:oasis:names:tc:emergency:cap:1.2">',
        "<identifier>test-1</identifier>",
        "<sent>2026-10-19T09:00:00+13:00</sent>",
    ]
    if with_info:
        parts.append("<info>")
        parts.append("<event>Rain</event>")
        parts.append(f"<headline>{headline}</headline>")
        parts.append(f"<description>{description}</description>")
        if onset:
            parts.append(f"<onset>{onset}</onset>")
        if web:
            parts.append(f"<web>{web}</web>")
        parts.append("<area>")
        parts.append(f"<areaDesc>{area}</areaDesc>")
        for polygon in polygons:
            parts.append(f"<polygon>{polygon}</polygon>")
        parts.append("</area>")
        parts.append("</info>")
    parts.append("</alert>")
    return "\n".join(parts)


def atom_feed(links: Sequence[Optional[str]]) -> str:
    """entry마다 related 링크가 있는 Atom 피드 (None이면 링크 없음)"""
    entries = []
    for i, link in enumerate(links):
        link_el = f'<link rel="related" href="{link}"/>' if link else ""
        entries.append(
            f"<entry><id>urn:test:{i}</id><title>Entry {i}</title>"
            f'<link rel="alternate" href="https://alerts.example/page/{i}"/>{link_el}</entry>'
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<feed xmlns="http://www.w3.org/2005/Atom"><title>Alerts</title>'
        + "".join(entries)
        + "</feed>"
    )


def boundary_geojson(ring=BOUNDARY_RING, name: str = REGION) -> dict:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"Name": name},
                "geometry": {"type": "MultiPolygon", "coordinates": [[[list(p) for p in ring]]]},
            }
        ],
    }


class FakeFetcher:
    """URL별 응답(문자열, dict, 예외)을 돌려주는 가짜 FetchPort"""

    def __init__(self, responses: Optional[Dict[str, Union[str, dict, Exception]]] = None):
        self.responses = dict(responses or {})
        self.calls: List[str] = []

    def _lookup(self, url: str):
        self.calls.append(url)
        value = self.responses.get(url)
        if value is None:
            raise FetchError(url, "connection refused")
        if isinstance(value, Exception):
            raise value
        return value

    async def fetch_text(self, url: str) -> str:
        value = self._lookup(url)
        return value if isinstance(value, str) else json.dumps(value)

    async def fetch_json(self, url: str):
        value = self._lookup(url)
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError as e:
                raise FetchError(url, f"invalid JSON: {e}") from e
        return value


class LockedStore(MemoryKVStore):
    """읽기 또는 쓰기가 잠금 오류를 내는 저장소"""

    def __init__(self, fail_get: bool = False, fail_set: bool = False):
        super().__init__()
        self.fail_get = fail_get
        self.fail_set = fail_set

    async def get(self, key: str) -> Optional[str]:
        if self.fail_get:
            raise sqlite3.OperationalError("database is locked")
        return await super().get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_set:
            raise sqlite3.OperationalError("database is locked")
        await super().set(key, value)


class FakeClock:
    """수동으로 진행시키는 시계"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def now():
    return datetime(2026, 10, 19, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(now):
    return FakeClock(now)


@pytest.fixture
def store():
    return MemoryKVStore()


@pytest.fixture
def boundary():
    return BoundaryGeometry(name=REGION, polygons=[[BOUNDARY_RING]])


@pytest.fixture
def config():
    return FilterConfig(
        target_region_name=REGION,
        feed_source=FEED_URL,
        boundary_source=BOUNDARY_URL,
    )


@pytest.fixture
def temp_db_path():
    """임시 데이터베이스 파일 경로"""
    with tempfile.NamedTemporaryFile(suffix='.db', delete=False) as f:
        temp_path = f.name
    yield temp_path
    # 테스트 후 파일 정리
    if os.path.exists(temp_path):
        os.unlink(temp_path)


def pytest_collection_modifyitems(config, items):
    """테스트 아이템 수정"""
    for item in items:
        # 통합 테스트 마커 추가
        if "integration" in item.name:
            item.add_marker(pytest.mark.integration)
