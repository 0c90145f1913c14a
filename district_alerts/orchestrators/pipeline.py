"""
Alert pipeline orchestrator for District Alerts.

This module connects boundary cache, feed ingest, extraction,
relevance filter and ranking into one run, and provides a polling
loop that keeps the latest result for the HTTP surface.
"""

import asyncio
import time
from typing import List, Optional

from district_alerts.core.errors import FeedUnavailable
from district_alerts.core.extract import extract_with_skips
from district_alerts.core.models import Alert, FilterConfig, PipelineResult
from district_alerts.core.ranker import rank
from district_alerts.core.relevance import classify
from district_alerts.observability import metrics
from district_alerts.observability.logging_setup import get_logger
from district_alerts.services.boundary_cache import BoundaryCache, Clock, utc_now
from district_alerts.services.feed_ingest import FeedIngest

log = get_logger("district_alerts.pipeline")


class AlertState:
    """마지막 실행 결과 보관소"""

    def __init__(self):
        self.result: Optional[PipelineResult] = None
        self.updated_at: Optional[float] = None
        self.runs = 0

    def update(self, result: PipelineResult) -> None:
        self.result = result
        self.updated_at = time.time()
        self.runs += 1


class AlertPipeline:
    """경보 파이프라인: 경계 -> 피드 -> 추출 -> 분류 -> 정렬"""

    def __init__(self, boundary_cache: BoundaryCache, feed_ingest: FeedIngest, clock: Clock = utc_now):
        """
        초기화합니다.

        Args:
            boundary_cache: 경계 캐시
            feed_ingest: 피드 수집기
            clock: 현재 시각 (timezone-aware)
        """
        self.boundary_cache = boundary_cache
        self.feed_ingest = feed_ingest
        self.clock = clock

    async def run(self, config: FilterConfig) -> PipelineResult:
        """
        파이프라인을 한 번 실행합니다.

        피드 수준 실패만 전체 실행을 중단하며, 이때 부분 결과는 버립니다.

        Args:
            config: 필터 설정

        Returns:
            정렬된 경보 목록 또는 단일 실패 결과
        """
        started = time.perf_counter()
        boundary = await self.boundary_cache.get_boundary(
            config.target_region_name, config.boundary_source
        )
        outcome = self.boundary_cache.last_outcome

        classified: List[Alert] = []
        polygon_skips = 0
        try:
            async for doc in self.feed_ingest.fetch_alert_documents(config.feed_source):
                alert, skipped = extract_with_skips(doc)
                polygon_skips += len(skipped)
                for record in skipped:
                    metrics.entries_skipped.labels(reason=record.reason).inc()
                classified.append(classify(alert, boundary, config, self.clock()))
        except FeedUnavailable as e:
            result = PipelineResult(status="failed", message=str(e), boundary_outcome=outcome)
            self._record(result, started)
            return result

        ranked = rank(classified, config)
        qualifying = sum(1 for a in classified if a.qualifies)
        metrics.alerts_qualifying.inc(qualifying)

        result = PipelineResult(
            status="ok" if ranked else "empty",
            alerts=ranked,
            message="" if ranked else "No alerts found.",
            boundary_outcome=outcome,
            skipped=len(self.feed_ingest.skipped) + polygon_skips,
        )
        log.info(f"파이프라인 완료 region:{config.target_region_name} "
                 f"processed:{len(classified)} qualifying:{qualifying} shown:{len(ranked)} "
                 f"skipped:{result.skipped} boundary:{outcome}")
        self._record(result, started)
        return result

    async def poll(self, config: FilterConfig, state: AlertState, interval_sec: float) -> None:
        """
        취소될 때까지 주기적으로 실행하고 최신 결과를 state에 저장합니다.

        예상하지 못한 오류는 실패 결과로 기록하고 다음 주기에 다시 실행합니다.

        Args:
            config: 필터 설정
            state: 결과 보관소
            interval_sec: 실행 간격 (초)
        """
        while True:
            try:
                result = await self.run(config)
            except Exception as e:
                log.error(f"파이프라인 실행 오류 region:{config.target_region_name} error:{e}")
                result = PipelineResult(status="failed", message=f"pipeline error: {e}")
                metrics.pipeline_runs.labels(status=result.status).inc()
            state.update(result)
            await asyncio.sleep(interval_sec)

    @staticmethod
    def _record(result: PipelineResult, started: float) -> None:
        metrics.pipeline_runs.labels(status=result.status).inc()
        metrics.pipeline_seconds.observe(time.perf_counter() - started)
        metrics.last_alert_count.set(len(result.alerts))
