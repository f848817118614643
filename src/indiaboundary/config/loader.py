from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from indiaboundary.config.models import (
    ApiSettings,
    AppConfig,
    AppSettings,
    BoundarySettings,
    BoundingBoxSettings,
    LoggingSettings,
    ValidationSettings,
)


PACKAGED_GEOJSON_PATH = Path(__file__).resolve().parents[1] / "data" / "india_boundary.geojson"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_dotenv_if_available(path: str = ".env") -> None:
    try:
        from dotenv import load_dotenv  # type: ignore
    except ModuleNotFoundError:
        return
    load_dotenv(path)


def _as_path(value: str, *, base_dir: Path) -> Path:
    candidate = Path(value)
    return candidate if candidate.is_absolute() else (base_dir / candidate)


def _env_bool(name: str) -> Optional[bool]:
    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


def load_config(path: Optional[str | Path] = None, *, base_dir: Optional[Path] = None) -> AppConfig:
    """
    Load typed application config from JSON.

    - Path resolution is relative to `base_dir` (defaults to current working directory).
    - `.env` is loaded when python-dotenv is installed (dev convenience).
    - A handful of `INDIABOUNDARY_*` env vars override file values.
    """

    load_dotenv_if_available()

    config_path = Path(
        path
        or os.getenv("INDIABOUNDARY_CONFIG_PATH", "config/default.json")
    ).resolve()
    base_dir = (base_dir or Path.cwd()).resolve()

    raw = json.loads(config_path.read_text(encoding="utf-8"))

    app_raw: Mapping[str, Any] = raw.get("app", {})
    app = AppSettings(name=str(app_raw.get("name", "IndiaBoundary")))

    boundary_raw: Mapping[str, Any] = raw.get("boundary", {})
    geojson_value = os.getenv("INDIABOUNDARY_GEOJSON_PATH") or boundary_raw.get("geojson_path")
    geojson_path = (
        PACKAGED_GEOJSON_PATH if not geojson_value else _as_path(str(geojson_value), base_dir=base_dir)
    )

    bbox_raw: Mapping[str, Any] = boundary_raw.get("bbox", {})
    defaults = BoundingBoxSettings()
    bbox = BoundingBoxSettings(
        south=float(bbox_raw.get("south", defaults.south)),
        north=float(bbox_raw.get("north", defaults.north)),
        west=float(bbox_raw.get("west", defaults.west)),
        east=float(bbox_raw.get("east", defaults.east)),
    )
    if bbox.south >= bbox.north or bbox.west >= bbox.east:
        raise ValueError(f"Invalid boundary.bbox: {bbox}")

    bbox_mode = os.getenv("INDIABOUNDARY_BBOX_MODE") or str(boundary_raw.get("bbox_mode", "fixed"))
    if bbox_mode not in ("fixed", "derived"):
        raise ValueError(f"Unsupported boundary.bbox_mode: {bbox_mode}")

    preload = bool(boundary_raw.get("preload", False))
    env_preload = _env_bool("INDIABOUNDARY_PRELOAD")
    if env_preload is not None:
        preload = env_preload

    timeout_value = boundary_raw.get("load_timeout_seconds")
    boundary = BoundarySettings(
        geojson_path=geojson_path,
        bbox=bbox,
        bbox_mode=bbox_mode,  # type: ignore[arg-type]
        preload=preload,
        load_timeout_seconds=None if timeout_value is None else float(timeout_value),
    )

    validation_raw: Mapping[str, Any] = raw.get("validation", {})
    on_load_failure = os.getenv("INDIABOUNDARY_ON_LOAD_FAILURE") or str(
        validation_raw.get("on_load_failure", "allow")
    )
    if on_load_failure not in ("allow", "reject"):
        raise ValueError(f"Unsupported validation.on_load_failure: {on_load_failure}")
    validation = ValidationSettings(on_load_failure=on_load_failure)  # type: ignore[arg-type]

    logging_raw: Mapping[str, Any] = raw.get("logging", {})
    file_value = logging_raw.get("file")
    log_file = None if not file_value else _as_path(str(file_value), base_dir=base_dir)
    logging_settings = LoggingSettings(
        level=os.getenv("INDIABOUNDARY_LOG_LEVEL") or str(logging_raw.get("level", "INFO")),
        format=str(logging_raw.get("format", "%(asctime)s %(levelname)s %(name)s - %(message)s")),
        file=log_file,
    )

    api_raw: Mapping[str, Any] = raw.get("api", {})
    api = ApiSettings(
        host=str(api_raw.get("host", "127.0.0.1")),
        port=int(api_raw.get("port", 8000)),
    )

    return AppConfig(
        app=app,
        boundary=boundary,
        validation=validation,
        logging=logging_settings,
        api=api,
    )
