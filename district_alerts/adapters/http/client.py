"""
HTTP fetch adapter for District Alerts.

This module provides an aiohttp-based client that fetches the alert
feed, the linked CAP documents and the boundary GeoJSON, optionally
through a URL-prefix proxy.
"""

import asyncio
import json
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from district_alerts.common.retry import retry_with_backoff
from district_alerts.core.errors import FetchError
from district_alerts.observability.logging_setup import get_logger

log = get_logger("district_alerts.http")

DEFAULT_USER_AGENT = "district-alerts/0.1"

class HttpFetcher:
    """aiohttp 기반 원격 문서 조회 클라이언트"""

    def __init__(self,
                 proxy_url: str = "",
                 timeout: int = 30,
                 max_retries: int = 2,
                 user_agent: str = DEFAULT_USER_AGENT,
                 backoff_base: float = 0.5):
        """
        초기화합니다.

        Args:
            proxy_url: 요청 URL 앞에 붙일 프록시 접두사 (빈 문자열이면 직접 요청)
            timeout: 요청 타임아웃 (초)
            max_retries: 전송 오류 재시도 횟수
            user_agent: User-Agent 헤더
            backoff_base: 재시도 기본 지연 (초)
        """
        self.proxy_url = proxy_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.user_agent = user_agent
        self.backoff_base = backoff_base
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        self.session = aiohttp.ClientSession(
            headers={"User-Agent": self.user_agent},
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        if self.session:
            await self.session.close()
            self.session = None

    def resolve(self, url: str) -> str:
        """프록시 접두사가 있으면 인코딩한 URL을 붙입니다."""
        if not self.proxy_url:
            return url
        return self.proxy_url + quote(url, safe="")

    async def fetch_text(self, url: str) -> str:
        """
        URL의 본문을 텍스트로 가져옵니다.

        Raises:
            FetchError: 전송, 상태 코드, 디코딩 실패
        """
        if not self.session:
            raise RuntimeError("세션이 초기화되지 않았습니다. async with를 사용하세요.")

        target = self.resolve(url)

        async def _request() -> str:
            async with self.session.get(target) as response:
                response.raise_for_status()
                return await response.text()

        try:
            text = await retry_with_backoff(
                _request,
                max_retries=self.max_retries,
                base_delay=self.backoff_base,
                retry_on=(aiohttp.ClientConnectionError, asyncio.TimeoutError),
            )
        except aiohttp.ClientResponseError as e:
            raise FetchError(url, f"HTTP {e.status}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
            raise FetchError(url, f"{type(e).__name__}: {e}") from e

        log.debug(f"문서 조회 완료 url:{url} bytes:{len(text)}")
        return text

    async def fetch_json(self, url: str) -> Any:
        """
        URL의 본문을 JSON으로 디코딩해 가져옵니다.

        프록시나 raw 호스팅이 content-type을 text/plain으로 주는 경우가 있어
        본문을 직접 디코딩합니다.

        Raises:
            FetchError: 전송, 상태 코드, 디코딩 실패
        """
        text = await self.fetch_text(url)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise FetchError(url, f"invalid JSON: {e}") from e
