from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from indiaboundary.gis.geometry import BoundaryGeometry, BoundingBox, Polygon, Ring


def point_in_ring(lat: float, lon: float, ring: Ring) -> bool:
    """
    Ray casting (even-odd) point-in-polygon for a single ring (GeoJSON lon/lat order).

    The ring is treated as cyclic, so a repeated closing vertex is harmless.
    Points exactly on an edge or vertex get a consistent but unspecified answer.
    """

    n = len(ring)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = ring[i]
        xj, yj = ring[j]
        # Horizontal edges never pass this test, so the division below is safe.
        if (yi > lat) != (yj > lat):
            x_cross = (xj - xi) * (lat - yi) / (yj - yi) + xi
            if lon < x_cross:
                inside = not inside
        j = i
    return inside


@dataclass(frozen=True)
class _IndexedPolygon:
    polygon: Polygon
    bbox: Optional[BoundingBox]

    def contains(self, lat: float, lon: float) -> bool:
        # Outside the exterior ring's extent ray casting can only return False.
        if self.bbox is None or not self.bbox.contains(lat, lon):
            return False
        if not point_in_ring(lat, lon, self.polygon.exterior):
            return False
        for hole in self.polygon.holes:
            if point_in_ring(lat, lon, hole):
                return False
        return True


class BoundaryIndex:
    """
    Containment queries over one loaded border geometry.

    `bbox` is the fast-reject box. It is a conservative pre-filter only: a point inside the box
    still needs `contains`, a point outside it is reported as outside without touching the rings.
    A `None` box (derived from an empty geometry) rejects every point.
    """

    def __init__(self, geometry: BoundaryGeometry, bbox: Optional[BoundingBox]) -> None:
        self._geometry = geometry
        self._bbox = bbox
        self._polygons = tuple(
            _IndexedPolygon(polygon=p, bbox=BoundingBox.from_points(p.exterior))
            for p in geometry.polygons
        )

    @staticmethod
    def with_derived_bbox(geometry: BoundaryGeometry) -> "BoundaryIndex":
        # An empty geometry has no extent: no box, and every point is rejected.
        return BoundaryIndex(geometry, geometry.extent())

    @property
    def geometry(self) -> BoundaryGeometry:
        return self._geometry

    @property
    def bbox(self) -> Optional[BoundingBox]:
        return self._bbox

    def uncovered_extent(self) -> Optional[BoundingBox]:
        """Return the geometry extent when the fast-reject box does not cover it, else None."""

        extent = self._geometry.extent()
        if extent is None or (self._bbox is not None and self._bbox.covers(extent)):
            return None
        return extent

    def fast_reject_outside_bbox(self, lat: float, lon: float) -> bool:
        return self._bbox is None or not self._bbox.contains(lat, lon)

    def contains(self, lat: float, lon: float) -> bool:
        return any(p.contains(lat, lon) for p in self._polygons)
