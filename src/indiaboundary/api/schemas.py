from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class CoordinatesIn(BaseModel):
    # Kept loose on purpose: non-numeric input must become a 400 "invalid coordinates"
    # response from the handler, not FastAPI's generic 422.
    latitude: Any = None
    longitude: Any = None


class CoordinateResultOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    latitude: float
    longitude: float
    location: str = Field(examples=["India", "Outside India"])


class CoordinateValidationOut(BaseModel):
    success: bool
    message: str
    data: Optional[CoordinateResultOut] = None


class BoundingBoxOut(BaseModel):
    north: float
    south: float
    east: float
    west: float


class BoundaryStatsOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    loaded: bool
    type: Optional[str] = Field(default=None, examples=["Polygon", "MultiPolygon"])
    polygon_count: Optional[int] = Field(default=None, alias="polygonCount")
    total_points: Optional[int] = Field(default=None, alias="totalPoints")
    bounding_box: Optional[BoundingBoxOut] = Field(default=None, alias="boundingBox")


class BoundaryStatsResponseOut(BaseModel):
    success: bool
    data: BoundaryStatsOut


class LocationCheckOut(BaseModel):
    accepted: bool
    reason: str = Field(examples=["inside_boundary", "outside_boundary", "boundary_unavailable"])


class AppStatusOut(BaseModel):
    now_utc: datetime
    app_name: str
    boundary_state: str
    load_count: int
    last_error: Optional[str] = None
