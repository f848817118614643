from indiaboundary.gis.boundaries import BoundaryIndex, point_in_ring
from indiaboundary.gis.errors import (
    BoundaryError,
    BoundaryLoadError,
    InvalidCoordinateError,
    LoadTimeoutError,
    MissingFeatureError,
    ParseError,
    ResourceMissingError,
)
from indiaboundary.gis.geometry import BoundaryGeometry, BoundingBox, Polygon
from indiaboundary.gis.service import BoundaryService, BoundaryStats, LoadState, validate_coordinates
from indiaboundary.gis.source import GeometrySource

__all__ = [
    "BoundaryError",
    "BoundaryGeometry",
    "BoundaryIndex",
    "BoundaryLoadError",
    "BoundaryService",
    "BoundaryStats",
    "BoundingBox",
    "GeometrySource",
    "InvalidCoordinateError",
    "LoadState",
    "LoadTimeoutError",
    "MissingFeatureError",
    "ParseError",
    "Polygon",
    "ResourceMissingError",
    "point_in_ring",
    "validate_coordinates",
]
