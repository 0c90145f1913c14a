"""
Alert extraction for District Alerts.

This module contains pure functions for converting a parsed CAP info
block into the internal Alert model.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from .errors import EntrySkipped
from .models import Alert, RawAlertDocument
from district_alerts.common.geo import Ring, close_ring, validate_coordinates
from district_alerts.observability.logging_setup import get_logger

log = get_logger("district_alerts.extract")


def parse_polygon_text(text: str) -> Ring:
    """
    CAP polygon 텍스트를 (경도, 위도) 링으로 변환합니다.

    CAP는 공백으로 구분된 "위도,경도" 쌍을 사용합니다.

    Raises:
        ValueError: 해석할 수 없는 텍스트 또는 범위를 벗어난 좌표
    """
    points = []
    for pair in text.split():
        parts = pair.split(",")
        if len(parts) != 2:
            raise ValueError(f"bad coordinate pair: {pair!r}")
        lat, lon = float(parts[0]), float(parts[1])
        if not validate_coordinates(lat, lon):
            raise ValueError(f"coordinate out of range: {pair!r}")
        points.append((lon, lat))
    return close_ring(points)


def parse_onset(text: str) -> Optional[datetime]:
    """ISO-8601 onset 문자열, 비어 있거나 해석 불가하면 None"""
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        log.debug(f"onset 해석 실패 onset:{text}")
        return None


def extract_with_skips(doc: RawAlertDocument) -> Tuple[Alert, List[EntrySkipped]]:
    """
    CAP info 블록에서 Alert를 만들고, 버려진 폴리곤 기록을 함께 반환합니다.

    Args:
        doc: 파싱된 CAP 문서

    Returns:
        (Alert, 건너뛴 폴리곤 목록)
    """
    polygons: List[Ring] = []
    skipped: List[EntrySkipped] = []
    for raw in doc.texts("polygon"):
        try:
            polygons.append(parse_polygon_text(raw))
        except ValueError as e:
            log.debug(f"경보 폴리곤 제외 url:{doc.source_url} error:{e}")
            skipped.append(EntrySkipped("bad_polygon", doc.source_url, str(e)))

    alert = Alert(
        headline=doc.text("headline"),
        description=doc.text("description"),
        area_description=doc.text("areaDesc"),
        onset=parse_onset(doc.text("onset")),
        info_url=doc.text("web") or None,
        warned_polygons=polygons,
        source_url=doc.source_url,
    )
    return alert, skipped


def extract(doc: RawAlertDocument) -> Alert:
    """CAP info 블록에서 Alert를 만듭니다 (qualifies는 False)."""
    alert, _ = extract_with_skips(doc)
    return alert
