"""
HTTP endpoints for District Alerts.

This module implements health, readiness, metrics, info and the
latest ranked alert list for monitoring and for an external renderer.
"""

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response, JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
import time
from district_alerts.core.formatting import format_onset, summary_line
from district_alerts.orchestrators.pipeline import AlertState
from district_alerts.settings import Settings
from district_alerts.observability.logging_setup import get_logger

log = get_logger("district_alerts.http_api")

def create_app(settings: Settings, state: AlertState) -> FastAPI:
    """FastAPI 애플리케이션을 생성합니다."""
    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="District severe-weather alert filter"
    )

    start_time = time.time()

    @app.get("/health")
    async def health():
        """헬스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ok",
            "service": settings.observability.service_name,
            "timestamp": time.time()
        })

    @app.get("/ready")
    async def ready():
        """레디니스 체크 엔드포인트 (첫 실행 완료 후 준비됨)"""
        if state.result is None:
            raise HTTPException(status_code=503, detail="first run pending")
        return JSONResponse({
            "status": "ready",
            "service": settings.observability.service_name,
            "timestamp": time.time()
        })

    @app.get("/metrics")
    async def metrics():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/alerts")
    async def alerts():
        """최근 정렬된 경보 목록"""
        result = state.result
        if result is None:
            return JSONResponse({"status": "loading", "message": "Loading alerts...", "alerts": []})

        if result.status == "failed":
            log.debug(f"실패 결과 반환 message:{result.message}")
            return JSONResponse({
                "status": "failed",
                "message": "Failed to load alerts.",
                "alerts": [],
            })

        items = []
        for alert in result.alerts:
            item = alert.model_dump(mode="json", exclude={"warned_polygons"})
            item["summary"] = summary_line(alert)
            item["starts"] = format_onset(alert.onset)
            items.append(item)

        return JSONResponse({
            "status": result.status,
            "message": result.message,
            "region": settings.filter.target_region_name,
            "updated_at": state.updated_at,
            "alerts": items,
        })

    @app.get("/info")
    async def info():
        """서비스 정보 엔드포인트"""
        uptime = time.time() - start_time
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "build_date": settings.observability.build_date,
            "uptime_seconds": int(uptime),
            "metrics_enabled": settings.observability.metrics_enabled,
            "log_level": settings.observability.log_level,
            "region": settings.filter.target_region_name,
            "runs": state.runs,
        })

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "endpoints": {
                "health": "/health",
                "ready": "/ready",
                "metrics": "/metrics",
                "alerts": "/alerts",
                "info": "/info"
            }
        })

    return app
