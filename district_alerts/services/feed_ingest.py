"""
Alert feed ingest for District Alerts.

Reads the Atom feed, follows each entry's related link and yields the
CAP info block of every linked document, one fetch at a time and in
feed order. Only a failure of the feed itself is fatal.
"""

import xml.etree.ElementTree as ET
from typing import AsyncIterator, List, Optional

from district_alerts.core.errors import EntrySkipped, FeedUnavailable, FetchError
from district_alerts.core.models import ATOM_NS, CAP_NS, RawAlertDocument
from district_alerts.observability import metrics
from district_alerts.observability.logging_setup import get_logger
from district_alerts.ports.fetch import FetchPort

log = get_logger("district_alerts.feed")


def related_links(feed_text: str) -> List[str]:
    """
    Atom 피드에서 entry별 rel="related" 링크를 순서대로 추출합니다.

    링크가 없는 entry는 조용히 건너뜁니다.

    Raises:
        ET.ParseError: XML 해석 실패
    """
    root = ET.fromstring(feed_text)
    links = []
    for entry in root.iter(f"{{{ATOM_NS}}}entry"):
        for link in entry.findall(f"{{{ATOM_NS}}}link"):
            href = link.get("href")
            if link.get("rel") == "related" and href:
                links.append(href)
                break
    return links


def parse_cap(text: str, source_url: Optional[str] = None) -> RawAlertDocument:
    """
    CAP 1.2 문서를 파싱해 첫 번째 info 블록을 감쌉니다.

    Raises:
        ET.ParseError: XML 해석 실패
        LookupError: info 블록 없음
    """
    root = ET.fromstring(text)
    info = root.find(f".//{{{CAP_NS}}}info")
    if root.tag == f"{{{CAP_NS}}}info":
        info = root
    if info is None:
        raise LookupError("CAP document has no info block")
    return RawAlertDocument(info=info, source_url=source_url)


class FeedIngest:
    """경보 피드 수집기"""

    def __init__(self, fetcher: FetchPort):
        """
        초기화합니다.

        Args:
            fetcher: 원격 문서 조회 포트
        """
        self.fetcher = fetcher
        self.skipped: List[EntrySkipped] = []

    async def fetch_alert_documents(self, feed_source: str) -> AsyncIterator[RawAlertDocument]:
        """
        피드의 CAP 문서를 순서대로 하나씩 가져옵니다.

        호출할 때마다 피드를 다시 가져옵니다.

        Args:
            feed_source: Atom 피드 URL

        Yields:
            CAP info 블록

        Raises:
            FeedUnavailable: 피드 자체를 가져오거나 해석하지 못함
        """
        self.skipped = []
        try:
            feed_text = await self.fetcher.fetch_text(feed_source)
            links = related_links(feed_text)
        except (FetchError, ET.ParseError) as e:
            log.error(f"피드 조회 실패 url:{feed_source} error:{e}")
            raise FeedUnavailable(f"feed unavailable: {feed_source}: {e}") from e

        log.info(f"피드 조회 완료 url:{feed_source} entries:{len(links)}")

        for url in links:
            try:
                text = await self.fetcher.fetch_text(url)
                doc = parse_cap(text, source_url=url)
            except FetchError as e:
                self._skip(EntrySkipped("fetch_failed", url, str(e)))
                continue
            except ET.ParseError as e:
                self._skip(EntrySkipped("malformed_xml", url, str(e)))
                continue
            except LookupError as e:
                self._skip(EntrySkipped("missing_info", url, str(e)))
                continue

            metrics.feed_entries.inc()
            yield doc

    def _skip(self, record: EntrySkipped) -> None:
        self.skipped.append(record)
        metrics.entries_skipped.labels(reason=record.reason).inc()
        level = "DEBUG" if record.reason == "missing_info" else "WARNING"
        log.log(level, f"피드 항목 건너뜀 reason:{record.reason} url:{record.url} detail:{record.detail}")
