from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal


# GeoJSON position order: (x=longitude, y=latitude).
LonLat = tuple[float, float]
Ring = tuple[LonLat, ...]
GeometryType = Literal["Polygon", "MultiPolygon"]


@dataclass(frozen=True)
class BoundingBox:
    south: float
    north: float
    west: float
    east: float

    def contains(self, lat: float, lon: float) -> bool:
        return (self.south <= lat <= self.north) and (self.west <= lon <= self.east)

    def covers(self, other: "BoundingBox") -> bool:
        return (
            self.south <= other.south
            and self.north >= other.north
            and self.west <= other.west
            and self.east >= other.east
        )

    @staticmethod
    def from_points(points: Iterable[LonLat]) -> "BoundingBox | None":
        lons: list[float] = []
        lats: list[float] = []
        for lon, lat in points:
            lons.append(lon)
            lats.append(lat)
        if not lons:
            return None
        return BoundingBox(south=min(lats), north=max(lats), west=min(lons), east=max(lons))

    def to_dict(self) -> dict[str, float]:
        return {"north": self.north, "south": self.south, "east": self.east, "west": self.west}


@dataclass(frozen=True)
class Polygon:
    exterior: Ring
    holes: tuple[Ring, ...] = ()

    @property
    def point_count(self) -> int:
        return len(self.exterior) + sum(len(h) for h in self.holes)

    def iter_points(self) -> Iterable[LonLat]:
        yield from self.exterior
        for hole in self.holes:
            yield from hole


@dataclass(frozen=True)
class BoundaryGeometry:
    """
    One border geometry as read from the source document.

    A single Polygon is stored as a one-element `polygons` tuple so evaluation has one code path;
    `type` keeps the declared GeoJSON type for diagnostics.
    """

    type: GeometryType
    polygons: tuple[Polygon, ...]

    @property
    def polygon_count(self) -> int:
        return len(self.polygons)

    @property
    def total_point_count(self) -> int:
        return sum(p.point_count for p in self.polygons)

    def extent(self) -> BoundingBox | None:
        return BoundingBox.from_points(pt for p in self.polygons for pt in p.iter_points())
