from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import pytest


def pytest_configure() -> None:
    """
    Keep a `src/` layout while allowing `pytest` to run without requiring an editable install.
    """

    project_root = Path(__file__).resolve().parents[1]
    src_path = project_root / "src"
    sys.path.insert(0, str(src_path))


def square(x0: float, y0: float, size: float) -> list[list[float]]:
    return [[x0, y0], [x0 + size, y0], [x0 + size, y0 + size], [x0, y0 + size], [x0, y0]]


def feature_collection(geometry: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "properties": {"name": "test"}, "geometry": geometry}],
    }


@pytest.fixture
def write_geojson(tmp_path: Path) -> Callable[[Any], Path]:
    def _write(payload: Any, name: str = "boundary.geojson") -> Path:
        path = tmp_path / name
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
