# district_alerts/settings.py
from __future__ import annotations
from typing import Literal
from pydantic import BaseModel, Field

from district_alerts.core.models import FilterConfig

class HttpConfig(BaseModel):
    proxy_url: str = ""                       # 예: "https://corsproxy.io/?"
    timeout_sec: int = 30
    max_retries: int = 2
    user_agent: str = "district-alerts/0.1"

class StorageConfig(BaseModel):
    backend: Literal["memory", "sqlite"] = "sqlite"
    sqlite_path: str = "/data/district_alerts.db"

class Schedule(BaseModel):
    poll_interval_sec: int = 300

class Observability(BaseModel):
    http_port: int = 8099
    metrics_enabled: bool = True
    service_name: str = "District-Alerts"
    build_version: str = "0.1.0"
    build_date: str = "2026-10-19"
    log_level: str = "INFO"

class Settings(BaseModel):
    # 하위 섹션 (기본값/팩토리로 누락 방지)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    schedule: Schedule = Field(default_factory=Schedule)
    observability: Observability = Field(default_factory=Observability)
