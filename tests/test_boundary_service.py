from __future__ import annotations

import logging
import math
import threading
import time

import pytest

from indiaboundary.config.loader import PACKAGED_GEOJSON_PATH
from indiaboundary.gis.errors import LoadTimeoutError, ParseError, ResourceMissingError
from indiaboundary.gis.geometry import BoundaryGeometry, BoundingBox, Polygon
from indiaboundary.gis.service import BoundaryService, LoadState
from indiaboundary.gis.source import GeometrySource


INDIA_BOX = BoundingBox(south=6.4, north=37.6, west=68.7, east=97.25)


def _square(x0: float, y0: float, size: float) -> tuple[tuple[float, float], ...]:
    return ((x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size), (x0, y0))


class CountingSource:
    """Geometry source stub that counts reads and can block until released."""

    def __init__(self, geometry: BoundaryGeometry, *, gate: threading.Event | None = None, errors: list[Exception] | None = None) -> None:
        self.geometry = geometry
        self.gate = gate
        self.errors = list(errors or [])
        self.calls = 0
        self.started = threading.Event()
        self._lock = threading.Lock()

    def load(self) -> BoundaryGeometry:
        with self._lock:
            self.calls += 1
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.errors:
            raise self.errors.pop(0)
        return self.geometry


def _india_like() -> BoundaryGeometry:
    return BoundaryGeometry(type="Polygon", polygons=(Polygon(exterior=_square(70.0, 10.0, 20.0)),))


@pytest.fixture
def packaged_service() -> BoundaryService:
    return BoundaryService(GeometrySource(PACKAGED_GEOJSON_PATH), bbox=INDIA_BOX)


def test_new_delhi_inside_london_outside(packaged_service: BoundaryService) -> None:
    assert packaged_service.is_within_boundary(28.6139, 77.2090) is True
    assert packaged_service.is_within_boundary(51.5074, -0.1278) is False


@pytest.mark.parametrize(
    ("lat", "lon", "expected"),
    [
        (12.9716, 77.5946, True),  # Bengaluru
        (22.5726, 88.3639, True),  # Kolkata
        (17.3850, 78.4867, True),  # Hyderabad
        (11.6234, 92.7265, True),  # Port Blair (second polygon)
        (23.8103, 90.4125, False),  # Dhaka: inside the box, outside the outline
        (6.9271, 79.8612, False),  # Colombo
        (40.7128, -74.0060, False),  # New York
    ],
)
def test_packaged_boundary_cities(packaged_service: BoundaryService, lat: float, lon: float, expected: bool) -> None:
    assert packaged_service.is_within_boundary(lat, lon) is expected


def test_packaged_boundary_fits_default_box(packaged_service: BoundaryService) -> None:
    index = packaged_service.ensure_loaded()
    assert index.uncovered_extent() is None
    assert index.geometry.type == "MultiPolygon"


@pytest.mark.parametrize(
    ("lat", "lon"),
    [
        (math.nan, 77.2),
        (28.6, math.nan),
        (math.inf, 77.2),
        (999, 77.2),
        (28.6, -181),
        ("28.6", 77.2),
        (None, 77.2),
        (True, 77.2),
    ],
)
def test_invalid_coordinates_return_false_without_loading(lat, lon) -> None:
    source = CountingSource(_india_like())
    service = BoundaryService(source, bbox=INDIA_BOX)

    assert service.is_within_boundary(lat, lon) is False
    assert source.calls == 0


def test_fast_reject_never_reaches_rings() -> None:
    # Geometry claims the whole world; only the box keeps London out.
    world = BoundaryGeometry(type="Polygon", polygons=(Polygon(exterior=_square(-180.0, -90.0, 360.0)),))
    service = BoundaryService(CountingSource(world), bbox=INDIA_BOX)

    assert service.is_within_boundary(51.5074, -0.1278) is False
    assert service.is_within_boundary(20.0, 80.0) is True


def test_box_alone_never_accepts() -> None:
    service = BoundaryService(CountingSource(_india_like()), bbox=INDIA_BOX)
    # Inside the box but outside the 70..90 / 10..30 square.
    assert service.is_within_boundary(35.0, 95.0) is False


def test_concurrent_first_calls_load_once() -> None:
    gate = threading.Event()
    source = CountingSource(_india_like(), gate=gate)
    service = BoundaryService(source, bbox=INDIA_BOX)
    results: list[object] = []
    errors: list[BaseException] = []

    def worker() -> None:
        try:
            results.append(service.ensure_loaded())
        except BaseException as exc:  # pragma: no cover - surfaced by the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    assert source.started.wait(timeout=5)
    assert service.state is LoadState.LOADING
    time.sleep(0.05)
    gate.set()
    for t in threads:
        t.join(timeout=5)

    assert errors == []
    assert source.calls == 1
    assert service.load_count == 1
    assert len(results) == 16
    assert all(r is results[0] for r in results)
    assert service.state is LoadState.LOADED


def test_concurrent_waiters_share_the_failure() -> None:
    gate = threading.Event()
    source = CountingSource(_india_like(), gate=gate, errors=[ParseError("broken")])
    service = BoundaryService(source, bbox=INDIA_BOX)
    seen: list[BaseException] = []
    lock = threading.Lock()

    def worker() -> None:
        try:
            service.ensure_loaded()
        except ParseError as exc:
            with lock:
                seen.append(exc)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    assert source.started.wait(timeout=5)
    time.sleep(0.05)
    gate.set()
    for t in threads:
        t.join(timeout=5)

    assert source.calls == 1
    assert len(seen) == 8
    assert all(e is seen[0] for e in seen)
    assert service.state is LoadState.FAILED


def test_failed_load_is_retried() -> None:
    source = CountingSource(_india_like(), errors=[ResourceMissingError("gone")])
    service = BoundaryService(source, bbox=INDIA_BOX)

    with pytest.raises(ResourceMissingError):
        service.is_within_boundary(20.0, 80.0)
    assert service.state is LoadState.FAILED
    assert isinstance(service.last_error, ResourceMissingError)
    assert service.stats().to_dict() == {"loaded": False}

    assert service.is_within_boundary(20.0, 80.0) is True
    assert source.calls == 2
    assert service.last_error is None


class _WorkerTimeout(BaseException):
    pass


def test_interrupted_load_is_retried() -> None:
    source = CountingSource(_india_like(), errors=[_WorkerTimeout()])
    service = BoundaryService(source, bbox=INDIA_BOX)

    with pytest.raises(_WorkerTimeout):
        service.ensure_loaded()
    assert service.state is LoadState.FAILED

    # The next caller runs a fresh load instead of waiting on the interrupted one.
    assert service.ensure_loaded(timeout=1.0) is not None
    assert source.calls == 2
    assert service.state is LoadState.LOADED


def test_interrupted_load_releases_waiters() -> None:
    from indiaboundary.gis.errors import BoundaryLoadError

    gate = threading.Event()
    source = CountingSource(_india_like(), gate=gate, errors=[_WorkerTimeout()])
    service = BoundaryService(source, bbox=INDIA_BOX)
    seen: list[BaseException] = []

    def owner() -> None:
        try:
            service.ensure_loaded()
        except _WorkerTimeout:
            pass

    def waiter() -> None:
        try:
            service.ensure_loaded(timeout=5)
        except BoundaryLoadError as exc:
            seen.append(exc)

    first = threading.Thread(target=owner)
    first.start()
    assert source.started.wait(timeout=5)
    second = threading.Thread(target=waiter)
    second.start()
    time.sleep(0.05)
    gate.set()
    first.join(timeout=5)
    second.join(timeout=5)

    assert len(seen) == 1
    assert not isinstance(seen[0], LoadTimeoutError)
    assert isinstance(seen[0].__cause__, _WorkerTimeout)


def test_unexpected_loader_error_is_wrapped() -> None:
    from indiaboundary.gis.errors import BoundaryLoadError

    source = CountingSource(_india_like(), errors=[RuntimeError("disk on fire")])
    service = BoundaryService(source, bbox=INDIA_BOX)

    with pytest.raises(BoundaryLoadError) as excinfo:
        service.ensure_loaded()
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_missing_dataset_propagates(tmp_path) -> None:
    service = BoundaryService(GeometrySource(tmp_path / "missing.geojson"), bbox=INDIA_BOX)
    with pytest.raises(ResourceMissingError):
        service.is_within_boundary(28.6139, 77.2090)
    # Invalid input still answers without touching the dataset.
    assert service.is_within_boundary(math.nan, 77.2) is False


def test_waiter_timeout_is_a_load_error() -> None:
    gate = threading.Event()
    source = CountingSource(_india_like(), gate=gate)
    service = BoundaryService(source, bbox=INDIA_BOX)

    owner = threading.Thread(target=service.ensure_loaded)
    owner.start()
    assert source.started.wait(timeout=5)
    try:
        with pytest.raises(LoadTimeoutError):
            service.ensure_loaded(timeout=0.05)
    finally:
        gate.set()
        owner.join(timeout=5)

    assert service.state is LoadState.LOADED
    assert source.calls == 1


def test_stats_before_and_after_load() -> None:
    service = BoundaryService(CountingSource(_india_like()), bbox=INDIA_BOX)
    assert service.stats().to_dict() == {"loaded": False}
    assert service.stats().state is LoadState.UNLOADED

    service.ensure_loaded()
    assert service.stats().to_dict() == {
        "loaded": True,
        "type": "Polygon",
        "polygonCount": 1,
        "totalPoints": 5,
        "boundingBox": {"north": 37.6, "south": 6.4, "east": 97.25, "west": 68.7},
    }


def test_derived_bbox_of_empty_geometry_has_no_box_in_stats() -> None:
    empty = BoundaryGeometry(type="MultiPolygon", polygons=())
    service = BoundaryService(CountingSource(empty), bbox=INDIA_BOX, derive_bbox=True)

    assert service.is_within_boundary(20.0, 80.0) is False
    stats = service.stats()
    assert stats.bounding_box is None
    assert stats.to_dict()["boundingBox"] is None
    assert stats.to_dict()["polygonCount"] == 0


def test_derived_bbox_mode_reports_geometry_extent() -> None:
    service = BoundaryService(CountingSource(_india_like()), bbox=INDIA_BOX, derive_bbox=True)
    service.ensure_loaded()
    assert service.stats().bounding_box == BoundingBox(south=10.0, north=30.0, west=70.0, east=90.0)
    # Inside the fixed box but outside the derived one.
    assert service.is_within_boundary(35.0, 80.0) is False


def test_uncovered_geometry_logs_warning(caplog) -> None:
    caplog.set_level(logging.WARNING, logger="indiaboundary.gis.service")
    wide = BoundaryGeometry(type="Polygon", polygons=(Polygon(exterior=_square(60.0, 0.0, 50.0)),))
    service = BoundaryService(CountingSource(wide), bbox=INDIA_BOX)

    service.ensure_loaded()

    assert any("does not cover" in r.getMessage() for r in caplog.records)


def test_instances_are_independent() -> None:
    a = BoundaryService(CountingSource(_india_like()), bbox=INDIA_BOX)
    b = BoundaryService(CountingSource(_india_like()), bbox=INDIA_BOX)
    a.ensure_loaded()
    assert a.stats().loaded is True
    assert b.stats().loaded is False
