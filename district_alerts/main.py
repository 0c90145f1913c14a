# district_alerts/main.py
import os, asyncio
from typing import Optional
import uvicorn
from district_alerts.settings import Settings, StorageConfig
from district_alerts.core.models import FilterConfig
from district_alerts.observability.health import create_app
from district_alerts.observability.logging_setup import setup_logging_dev, get_logger
from district_alerts.adapters.http.client import HttpFetcher
from district_alerts.adapters.storage import MemoryKVStore, SQLiteKVStore
from district_alerts.orchestrators.pipeline import AlertPipeline, AlertState
from district_alerts.services.boundary_cache import BoundaryCache
from district_alerts.services.feed_ingest import FeedIngest

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def build_settings() -> Settings:
    s = Settings()

    # 필터 (실행 단위로 한 번 만들고 변경하지 않음)
    f = s.filter
    s.filter = FilterConfig(
        target_region_name=os.getenv("TARGET_REGION_NAME", f.target_region_name),
        include_non_qualifying=_b("SHOW_NON_QUALIFYING_ALERTS", f.include_non_qualifying),
        require_onset_within_window=_b("REQUIRE_ONSET_WITHIN_WINDOW", f.require_onset_within_window),
        window_hours=float(os.getenv("HOUR_WINDOW", f.window_hours)),
        feed_source=os.getenv("FEED_URL", f.feed_source),
        boundary_source=os.getenv("BOUNDARY_URL", f.boundary_source),
    )

    # HTTP
    s.http.proxy_url = os.getenv("PROXY_URL", s.http.proxy_url)
    s.http.timeout_sec = int(os.getenv("HTTP_TIMEOUT_SEC", s.http.timeout_sec))

    # 저장소
    s.storage = StorageConfig(
        backend=os.getenv("STORAGE_BACKEND", s.storage.backend),
        sqlite_path=os.getenv("SQLITE_PATH", s.storage.sqlite_path),
    )

    # 스케줄
    s.schedule.poll_interval_sec = int(os.getenv("POLL_INTERVAL_SEC", s.schedule.poll_interval_sec))

    # 관측성
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)
    s.observability.http_port = int(os.getenv("METRICS_PORT", s.observability.http_port))
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)

    return s

async def build_store(settings: Settings):
    if settings.storage.backend == "memory":
        return MemoryKVStore()
    store = SQLiteKVStore(settings.storage.sqlite_path)
    await store.init()
    return store

async def start_http(settings: Settings, state: AlertState) -> Optional[asyncio.Task]:
    app = create_app(settings, state)
    return asyncio.create_task(uvicorn.Server(
        uvicorn.Config(app, host="0.0.0.0", port=settings.observability.http_port, log_level="info")
    ).serve())

async def main():
    s = build_settings()
    setup_logging_dev(s.observability.log_level)
    log = get_logger()
    log.info(f"설정 로드 완료 region:{s.filter.target_region_name} feed:{s.filter.feed_source}")

    store = await build_store(s)
    state = AlertState()

    async with HttpFetcher(
        proxy_url=s.http.proxy_url,
        timeout=s.http.timeout_sec,
        max_retries=s.http.max_retries,
        user_agent=s.http.user_agent,
    ) as fetcher:
        pipeline = AlertPipeline(BoundaryCache(store, fetcher), FeedIngest(fetcher))
        http_task = await start_http(s, state)
        log.info(f"HTTP 서버 시작 port:{s.observability.http_port}")
        try:
            await pipeline.poll(s.filter, state, s.schedule.poll_interval_sec)
        finally:
            if http_task:
                http_task.cancel()
                await asyncio.gather(http_task, return_exceptions=True)

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
