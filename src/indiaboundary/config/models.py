from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional


BBoxMode = Literal["fixed", "derived"]
LoadFailurePolicy = Literal["allow", "reject"]


@dataclass(frozen=True)
class AppSettings:
    name: str = "IndiaBoundary"


@dataclass(frozen=True)
class BoundingBoxSettings:
    south: float = 6.4
    north: float = 37.6
    west: float = 68.7
    east: float = 97.25


@dataclass(frozen=True)
class BoundarySettings:
    geojson_path: Path
    bbox: BoundingBoxSettings
    bbox_mode: BBoxMode = "fixed"
    preload: bool = False
    load_timeout_seconds: Optional[float] = None


@dataclass(frozen=True)
class ValidationSettings:
    on_load_failure: LoadFailurePolicy = "allow"


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    format: str
    file: Optional[Path] = None


@dataclass(frozen=True)
class ApiSettings:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass(frozen=True)
class AppConfig:
    app: AppSettings
    boundary: BoundarySettings
    validation: ValidationSettings
    logging: LoggingSettings
    api: ApiSettings
