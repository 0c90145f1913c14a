"""
Boundary GeoJSON conversion for District Alerts.

Converts between the single-region FeatureCollection served by the
boundary source and BoundaryGeometry, and holds the embedded fallback
outlines used when the source cannot be reached.
"""

from typing import Any, Dict, List

from pydantic import ValidationError

from .errors import BoundaryUnavailable
from .models import BoundaryGeometry, DEFAULT_REGION_NAME
from district_alerts.observability.logging_setup import get_logger

log = get_logger("district_alerts.boundary")

# NZSHAPE far_north.geojson 외곽 링의 첫 꼭짓점들 (경도, 위도)
_FAR_NORTH_SOURCE_RING = [
    (173.160619, -35.311454),
    (173.160236, -35.310268),
    (173.160056, -35.311313),
    (173.160619, -35.311454),
]

# 해안선과 Whangarei 경계를 손으로 따라 그린 근사 외곽선.
# NZSHAPE 원본을 받을 수 없을 때만 쓰이며 경계 부근 판정은 부정확할 수 있음
_FAR_NORTH_OUTLINE = [
    (172.6756, -34.4270),
    (173.0116, -34.3982),
    (173.2650, -34.7780),
    (173.5050, -34.9420),
    (173.8050, -34.9960),
    (174.1160, -35.1500),
    (174.3300, -35.1680),
    (174.3150, -35.3560),
    (174.0300, -35.4600),
    (173.8000, -35.5600),
    (173.3600, -35.5700),
    (173.1606, -35.3115),
    (173.1380, -35.1700),
    (172.9500, -34.8500),
    (172.6756, -34.4270),
]

EMBEDDED_BOUNDARIES: Dict[str, List[List[list]]] = {
    DEFAULT_REGION_NAME: [[_FAR_NORTH_OUTLINE], [_FAR_NORTH_SOURCE_RING]],
}


def embedded_boundary(region_name: str) -> BoundaryGeometry:
    """
    대상 지역의 내장 경계를 반환합니다.

    등록되지 않은 지역이면 기본 지역 외곽선을 대상 이름으로 반환합니다.
    """
    polygons = EMBEDDED_BOUNDARIES.get(region_name)
    if polygons is None:
        log.warning(f"내장 경계 없음, 기본 지역 외곽선 사용 region:{region_name}")
        polygons = EMBEDDED_BOUNDARIES[DEFAULT_REGION_NAME]
    return BoundaryGeometry(name=region_name, polygons=polygons)


def _feature_name(feature: Dict[str, Any]) -> Any:
    props = feature.get("properties")
    return props.get("Name") if isinstance(props, dict) else None


def _feature_polygons(geometry: Dict[str, Any]) -> List[list]:
    gtype = geometry.get("type")
    coords = geometry.get("coordinates")
    if not isinstance(coords, list):
        raise BoundaryUnavailable(f"geometry without coordinates: {gtype}")
    if gtype == "MultiPolygon":
        return coords
    if gtype == "Polygon":
        return [coords]
    raise BoundaryUnavailable(f"unsupported geometry type: {gtype}")


def parse_feature_collection(data: Any, region_name: str) -> BoundaryGeometry:
    """
    경계 FeatureCollection을 BoundaryGeometry로 변환합니다.

    Name 속성이 대상 지역과 일치하는 feature를 우선 사용하고,
    일치하는 것이 없으면 문서 전체를 대상 지역으로 취급합니다.

    Args:
        data: 디코딩된 GeoJSON
        region_name: 대상 지역 이름

    Returns:
        검증된 경계

    Raises:
        BoundaryUnavailable: 형식이 잘못되었거나 폴리곤이 비어 있음
    """
    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise BoundaryUnavailable("not a FeatureCollection")

    raw_features = data.get("features")
    features = [f for f in raw_features if isinstance(f, dict)] if isinstance(raw_features, list) else []
    if not features:
        raise BoundaryUnavailable("FeatureCollection has no features")

    matching = [f for f in features if _feature_name(f) == region_name]
    if not matching:
        names = [_feature_name(f) for f in features]
        log.info(f"지역 이름 불일치, 문서 전체 사용 region:{region_name} names:{names}")
        matching = features

    polygons: List[list] = []
    for feature in matching:
        geometry = feature.get("geometry")
        if not isinstance(geometry, dict):
            raise BoundaryUnavailable("feature without geometry")
        polygons.extend(_feature_polygons(geometry))

    try:
        return BoundaryGeometry(name=region_name, polygons=polygons)
    except (ValidationError, TypeError) as e:
        raise BoundaryUnavailable(f"invalid boundary geometry: {e}") from e


def to_feature_collection(boundary: BoundaryGeometry) -> Dict[str, Any]:
    """BoundaryGeometry를 단일 feature GeoJSON으로 직렬화합니다."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"Name": boundary.name},
                "geometry": {
                    "type": "MultiPolygon",
                    "coordinates": [
                        [[list(point) for point in ring] for ring in rings]
                        for rings in boundary.polygons
                    ],
                },
            }
        ],
    }
