"""
Fetch port interface.

This module defines the protocol for fetching and decoding remote
documents. Implementations raise FetchError on any failure.
"""

from typing import Any, Protocol

class FetchPort(Protocol):
    """원격 문서 조회 포트 인터페이스"""

    async def fetch_text(self, url: str) -> str:
        """
        URL의 본문을 텍스트로 가져옵니다.

        Raises:
            FetchError: 전송, 상태 코드, 디코딩 실패
        """
        ...

    async def fetch_json(self, url: str) -> Any:
        """
        URL의 본문을 JSON으로 디코딩해 가져옵니다.

        Raises:
            FetchError: 전송, 상태 코드, 디코딩 실패
        """
        ...
