"""
Geographic utilities for District Alerts.

This module provides coordinate validation, ring normalisation and
polygon intersection tests on top of shapely.
"""

import math
from typing import List, Sequence, Tuple

from shapely.errors import GEOSException
from shapely.geometry import Polygon

from district_alerts.observability.logging_setup import get_logger

log = get_logger("district_alerts.geo")

# (경도, 위도) 쌍과 닫힌 링
Coordinate = Tuple[float, float]
Ring = List[Coordinate]


def validate_coordinates(lat: float, lon: float) -> bool:
    """
    좌표가 유효한지 확인합니다.

    Args:
        lat: 위도
        lon: 경도

    Returns:
        좌표가 유효하면 True
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def close_ring(points: Sequence[Sequence[float]]) -> Ring:
    """
    링을 검증하고 닫힌 링(first == last)으로 반환합니다.

    Args:
        points: [(경도, 위도), ...]

    Returns:
        닫힌 링

    Raises:
        ValueError: 유한하지 않은 좌표, 잘못된 쌍, 3개 미만의 고유 꼭짓점
    """
    ring: Ring = []
    for point in points:
        if len(point) != 2:
            raise ValueError(f"coordinate must be a (lon, lat) pair: {point!r}")
        lon, lat = float(point[0]), float(point[1])
        if not (math.isfinite(lon) and math.isfinite(lat)):
            raise ValueError(f"non-finite coordinate: {point!r}")
        ring.append((lon, lat))

    if len(set(ring)) < 3:
        raise ValueError("ring needs at least 3 distinct vertices")

    if ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def to_shape(rings: Sequence[Ring]) -> Polygon:
    """첫 번째 링을 외곽선, 나머지를 구멍으로 하는 shapely 폴리곤"""
    return Polygon(rings[0], rings[1:])


def polygons_intersect(warned: Sequence[Ring], boundary: Sequence[Sequence[Ring]]) -> bool:
    """
    경보 폴리곤 중 하나라도 경계 폴리곤 중 하나와 교차하는지 확인합니다.

    경계선 접촉도 교차로 취급합니다 (포함 관계가 아닌 boolean intersects).

    Args:
        warned: 경보 폴리곤 링 목록
        boundary: 경계 폴리곤 목록 (각각 링 목록)

    Returns:
        교차 여부
    """
    boundary_shapes = [to_shape(rings) for rings in boundary if rings]
    for ring in warned:
        warned_shape = Polygon(ring)
        for boundary_shape in boundary_shapes:
            try:
                if warned_shape.intersects(boundary_shape):
                    return True
            except GEOSException as e:
                # 자기 교차 등 위상 오류가 있는 쌍만 제외
                log.warning(f"폴리곤 교차 판정 실패 error:{e}")
    return False
