from __future__ import annotations

from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from enum import Enum
import logging
import math
from numbers import Real
import threading
import time
from typing import Any, Optional, Protocol

from indiaboundary.config.models import BoundarySettings
from indiaboundary.gis.boundaries import BoundaryIndex
from indiaboundary.gis.errors import BoundaryLoadError, InvalidCoordinateError, LoadTimeoutError
from indiaboundary.gis.geometry import BoundaryGeometry, BoundingBox
from indiaboundary.gis.source import GeometrySource


logger = logging.getLogger(__name__)


class Loader(Protocol):
    def load(self) -> BoundaryGeometry: ...


class LoadState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class BoundaryStats:
    loaded: bool
    state: LoadState
    type: Optional[str] = None
    polygon_count: int = 0
    total_points: int = 0
    bounding_box: Optional[BoundingBox] = None

    def to_dict(self) -> dict[str, Any]:
        if not self.loaded:
            return {"loaded": False}
        return {
            "loaded": True,
            "type": self.type,
            "polygonCount": self.polygon_count,
            "totalPoints": self.total_points,
            "boundingBox": self.bounding_box.to_dict() if self.bounding_box else None,
        }


def validate_coordinates(lat: Any, lon: Any) -> tuple[float, float]:
    """Return (lat, lon) as floats or raise `InvalidCoordinateError`."""

    for name, value in (("latitude", lat), ("longitude", lon)):
        # bool is an int subclass but not a coordinate.
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidCoordinateError(f"{name} must be a number, got {type(value).__name__}")
    lat_f = float(lat)
    lon_f = float(lon)
    if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
        raise InvalidCoordinateError(f"Coordinates must be finite: ({lat_f}, {lon_f})")
    if not -90.0 <= lat_f <= 90.0:
        raise InvalidCoordinateError(f"Latitude out of range: {lat_f}")
    if not -180.0 <= lon_f <= 180.0:
        raise InvalidCoordinateError(f"Longitude out of range: {lon_f}")
    return lat_f, lon_f


class BoundaryService:
    """
    Shared access point for "is this point inside the border?" queries.

    Lifecycle: construct -> first query (or `ensure_loaded`) loads the geometry -> ready.
    At most one load runs at a time; callers arriving during a load wait on the same
    future and see the same result. A failed load is not remembered: the next call retries.
    Once loaded, the index is immutable and queries read it without taking the lock.
    """

    def __init__(
        self,
        source: Loader,
        *,
        bbox: BoundingBox,
        derive_bbox: bool = False,
        load_timeout_seconds: Optional[float] = None,
    ) -> None:
        self._source = source
        self._bbox = bbox
        self._derive_bbox = derive_bbox
        self._load_timeout = load_timeout_seconds

        self._lock = threading.Lock()
        self._state = LoadState.UNLOADED
        self._pending: Optional[Future[BoundaryIndex]] = None
        self._index: Optional[BoundaryIndex] = None
        self._last_error: Optional[BoundaryLoadError] = None
        self._load_count = 0

    @staticmethod
    def from_settings(settings: BoundarySettings) -> "BoundaryService":
        bbox = BoundingBox(
            south=settings.bbox.south,
            north=settings.bbox.north,
            west=settings.bbox.west,
            east=settings.bbox.east,
        )
        return BoundaryService(
            GeometrySource(settings.geojson_path),
            bbox=bbox,
            derive_bbox=settings.bbox_mode == "derived",
            load_timeout_seconds=settings.load_timeout_seconds,
        )

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def load_count(self) -> int:
        """Number of times the underlying source has been read."""

        return self._load_count

    @property
    def last_error(self) -> Optional[BoundaryLoadError]:
        return self._last_error

    def ensure_loaded(self, timeout: Optional[float] = None) -> BoundaryIndex:
        """
        Return the loaded index, loading it first if needed.

        `timeout` (falling back to `load_timeout_seconds`) bounds how long a caller waits on a load
        started by another caller. The caller that runs the load itself is not interrupted.
        """

        index = self._index
        if index is not None:
            return index

        with self._lock:
            if self._index is not None:
                return self._index
            owner = self._pending is None
            if owner:
                self._pending = Future()
                self._state = LoadState.LOADING
                self._load_count += 1
            pending = self._pending
        assert pending is not None

        if not owner:
            wait = self._load_timeout if timeout is None else timeout
            try:
                return pending.result(timeout=wait)
            except FutureTimeoutError as exc:
                raise LoadTimeoutError(f"Boundary load did not finish within {wait}s") from exc

        try:
            index = self._build_index()
        except Exception as exc:
            if isinstance(exc, BoundaryLoadError):
                error = exc
            else:
                error = BoundaryLoadError(f"Unexpected error loading boundary: {exc}")
                error.__cause__ = exc
            logger.error("Boundary load failed: %s", error)
            with self._lock:
                self._state = LoadState.FAILED
                self._last_error = error
                self._pending = None
            # Waiters re-raise the same exception object.
            pending.set_exception(error)
            raise error
        except BaseException as exc:
            # Interrupts (KeyboardInterrupt, worker timeouts) still propagate, but must not
            # leave waiters on a future nobody will resolve.
            error = BoundaryLoadError(f"Boundary load interrupted: {exc!r}")
            error.__cause__ = exc
            logger.error("Boundary load interrupted: %r", exc)
            with self._lock:
                self._state = LoadState.FAILED
                self._last_error = error
                self._pending = None
            pending.set_exception(error)
            raise

        with self._lock:
            self._index = index
            self._state = LoadState.LOADED
            self._last_error = None
            self._pending = None
        pending.set_result(index)
        return index

    def _build_index(self) -> BoundaryIndex:
        started = time.perf_counter()
        geometry = self._source.load()
        if self._derive_bbox:
            index = BoundaryIndex.with_derived_bbox(geometry)
        else:
            index = BoundaryIndex(geometry, self._bbox)
            uncovered = index.uncovered_extent()
            if uncovered is not None:
                logger.warning(
                    "Fast-reject bbox %s does not cover geometry extent %s; "
                    "points outside the box will be rejected",
                    self._bbox.to_dict(),
                    uncovered.to_dict(),
                )
        logger.info(
            "Boundary loaded: type=%s polygons=%s points=%s (%.1f ms)",
            geometry.type,
            geometry.polygon_count,
            geometry.total_point_count,
            (time.perf_counter() - started) * 1000.0,
        )
        return index

    def is_within_boundary(self, lat: Any, lon: Any) -> bool:
        """
        True when (lat, lon) lies inside the border geometry.

        Invalid coordinates return False. Raises `BoundaryLoadError` when the geometry cannot be loaded.
        """

        try:
            lat_f, lon_f = validate_coordinates(lat, lon)
        except InvalidCoordinateError as exc:
            logger.debug("Rejecting invalid coordinate: %s", exc)
            return False

        index = self.ensure_loaded()
        if index.fast_reject_outside_bbox(lat_f, lon_f):
            return False
        return index.contains(lat_f, lon_f)

    def stats(self) -> BoundaryStats:
        index = self._index
        if index is None:
            return BoundaryStats(loaded=False, state=self._state)
        geometry = index.geometry
        return BoundaryStats(
            loaded=True,
            state=LoadState.LOADED,
            type=geometry.type,
            polygon_count=geometry.polygon_count,
            total_points=geometry.total_point_count,
            bounding_box=index.bbox,
        )
