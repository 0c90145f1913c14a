"""
District boundary cache for District Alerts.

The reference boundary is stored as GeoJSON under one key and the
epoch-millisecond time of the last refresh under another. A stored
boundary younger than 24 hours is reused. Otherwise the boundary source
is fetched, and on any failure the embedded outline is stored instead,
so repeated failures do not hit the network again inside the window.
"""

import json
import re
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import ValidationError

from district_alerts.core.boundary import embedded_boundary, parse_feature_collection, to_feature_collection
from district_alerts.core.errors import BoundaryUnavailable, FetchError
from district_alerts.core.models import BoundaryGeometry, BoundaryOutcome, CachedBoundary, is_within_freshness
from district_alerts.observability import metrics
from district_alerts.observability.logging_setup import get_logger
from district_alerts.ports.fetch import FetchPort
from district_alerts.ports.kvstore import KVStorePort

log = get_logger("district_alerts.boundary_cache")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def region_slug(name: str) -> str:
    """저장소 키용 지역 이름 슬러그"""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "region"


def to_epoch_ms(when: datetime) -> int:
    return int(when.timestamp() * 1000)


class BoundaryCache:
    """대상 지역 경계 캐시 (단일 작성자)"""

    def __init__(self, store: KVStorePort, fetcher: FetchPort, clock: Clock = utc_now):
        """
        초기화합니다.

        Args:
            store: 키-값 저장소
            fetcher: 원격 문서 조회 포트
            clock: 현재 시각 (timezone-aware)
        """
        self.store = store
        self.fetcher = fetcher
        self.clock = clock
        self.last_outcome: Optional[BoundaryOutcome] = None

    @staticmethod
    def keys(region_name: str) -> tuple:
        slug = region_slug(region_name)
        return f"boundary:{slug}:geojson", f"boundary:{slug}:timestamp"

    def is_expired(self, timestamp_ms: Optional[int]) -> bool:
        """갱신 시각이 없거나 24시간보다 오래되었으면 True"""
        if timestamp_ms is None:
            return True
        return not is_within_freshness(timestamp_ms, to_epoch_ms(self.clock()))

    async def load_cached(self, region_name: str) -> Optional[CachedBoundary]:
        """
        저장된 경계를 읽습니다.

        손상된 값이나 저장소 읽기 오류는 없는 것으로 취급합니다.
        """
        geojson_key, ts_key = self.keys(region_name)
        try:
            raw_geojson = await self.store.get(geojson_key)
            raw_ts = await self.store.get(ts_key)
        except Exception as e:
            log.error(f"저장된 경계 읽기 오류 region:{region_name} error:{e}")
            return None
        if raw_geojson is None or raw_ts is None:
            return None

        try:
            fetched_at = int(raw_ts)
            boundary = parse_feature_collection(json.loads(raw_geojson), region_name)
            return CachedBoundary(boundary=boundary, fetched_at=fetched_at)
        except (ValueError, BoundaryUnavailable, ValidationError) as e:
            log.warning(f"저장된 경계 손상, 다시 생성 region:{region_name} error:{e}")
            return None

    async def save(self, boundary: BoundaryGeometry) -> CachedBoundary:
        """
        경계와 현재 시각을 저장합니다 (값 전체 교체).

        쓰기 오류는 기록만 하고 경계는 그대로 반환합니다.
        """
        cached = CachedBoundary(boundary=boundary, fetched_at=to_epoch_ms(self.clock()))
        geojson_key, ts_key = self.keys(boundary.name)
        try:
            await self.store.set(geojson_key, json.dumps(to_feature_collection(boundary)))
            await self.store.set(ts_key, str(cached.fetched_at))
        except Exception as e:
            log.warning(f"경계 저장 실패 region:{boundary.name} error:{e}")
        return cached

    async def fetch_remote(self, region_name: str, boundary_source: str) -> BoundaryGeometry:
        """
        경계 원본을 가져와 검증합니다.

        Raises:
            BoundaryUnavailable: 조회 또는 검증 실패
        """
        try:
            data = await self.fetcher.fetch_json(boundary_source)
        except FetchError as e:
            raise BoundaryUnavailable(str(e)) from e
        return parse_feature_collection(data, region_name)

    async def get_boundary(self, region_name: str, boundary_source: str) -> BoundaryGeometry:
        """
        대상 지역 경계를 반환합니다. 예외를 발생시키지 않습니다.

        Args:
            region_name: 대상 지역 이름
            boundary_source: 경계 GeoJSON URL

        Returns:
            캐시, 원격, 또는 내장 경계
        """
        cached = await self.load_cached(region_name)
        if cached is not None and not self.is_expired(cached.fetched_at):
            log.debug(f"캐시된 경계 사용 region:{region_name}")
            return self._done("cache", cached.boundary)

        try:
            boundary = await self.fetch_remote(region_name, boundary_source)
        except BoundaryUnavailable as e:
            log.warning(f"경계 조회 실패, 내장 경계 사용 region:{region_name} error:{e}")
            boundary = embedded_boundary(region_name)
            await self.save(boundary)
            return self._done("fallback", boundary)

        await self.save(boundary)
        log.info(f"경계 갱신 완료 region:{region_name} polygons:{len(boundary.polygons)}")
        return self._done("remote", boundary)

    def _done(self, outcome: BoundaryOutcome, boundary: BoundaryGeometry) -> BoundaryGeometry:
        self.last_outcome = outcome
        metrics.boundary_refresh.labels(outcome=outcome).inc()
        return boundary
