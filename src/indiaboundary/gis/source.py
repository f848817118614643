from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from indiaboundary.gis.errors import MissingFeatureError, ParseError, ResourceMissingError
from indiaboundary.gis.geometry import BoundaryGeometry, Polygon, Ring


logger = logging.getLogger(__name__)


def _parse_ring(raw: Any) -> Ring:
    if not isinstance(raw, list):
        raise ParseError(f"Ring must be an array of positions, got {type(raw).__name__}")
    points = []
    for pos in raw:
        if not isinstance(pos, (list, tuple)) or len(pos) < 2:
            raise ParseError(f"Invalid position: {pos!r}")
        try:
            points.append((float(pos[0]), float(pos[1])))
        except (TypeError, ValueError) as exc:
            raise ParseError(f"Invalid position: {pos!r}") from exc
    return tuple(points)


def _parse_polygon(raw: Any) -> Polygon:
    if not isinstance(raw, list):
        raise ParseError(f"Polygon must be an array of rings, got {type(raw).__name__}")
    if not raw:
        # Degenerate but trusted input: contains no points.
        return Polygon(exterior=())
    rings = [_parse_ring(r) for r in raw]
    return Polygon(exterior=rings[0], holes=tuple(rings[1:]))


def parse_geometry(geom: Mapping[str, Any]) -> BoundaryGeometry:
    """
    Convert a GeoJSON geometry object into a `BoundaryGeometry`.

    Only `Polygon` and `MultiPolygon` are accepted.
    """

    geom_type = geom.get("type")
    coords = geom.get("coordinates")
    if coords is None:
        raise ParseError("Geometry has no coordinates")

    if geom_type == "Polygon":
        return BoundaryGeometry(type="Polygon", polygons=(_parse_polygon(coords),))
    if geom_type == "MultiPolygon":
        if not isinstance(coords, list):
            raise ParseError("MultiPolygon coordinates must be an array of polygons")
        return BoundaryGeometry(type="MultiPolygon", polygons=tuple(_parse_polygon(p) for p in coords))
    raise ParseError(f"Unsupported geometry type: {geom_type!r}")


def parse_feature_collection(raw: Any) -> BoundaryGeometry:
    if not isinstance(raw, dict):
        raise ParseError("GeoJSON document must be an object")

    features = raw.get("features")
    if features is None or (isinstance(features, list) and not features):
        raise MissingFeatureError("No features found in boundary GeoJSON")
    if not isinstance(features, list):
        raise ParseError("GeoJSON `features` must be an array")

    first = features[0]
    geom = first.get("geometry") if isinstance(first, dict) else None
    if not isinstance(geom, dict):
        raise ParseError("First feature has no geometry")
    return parse_geometry(geom)


class GeometrySource:
    """
    Reads the border FeatureCollection from disk and returns the first feature's geometry.

    No caching here; `BoundaryService` owns the once-only load.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> BoundaryGeometry:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ResourceMissingError(f"Boundary GeoJSON not found: {self._path}") from exc
        except OSError as exc:
            raise ResourceMissingError(f"Boundary GeoJSON unreadable: {self._path} ({exc})") from exc

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Malformed boundary GeoJSON {self._path}: {exc}") from exc

        geometry = parse_feature_collection(raw)
        logger.debug("Parsed %s from %s", geometry.type, self._path)
        return geometry
