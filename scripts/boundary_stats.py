from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from indiaboundary.config.loader import load_config
from indiaboundary.gis.service import BoundaryService
from indiaboundary.utils.logging import configure_logging


logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Load the boundary and print its diagnostics.")
    parser.add_argument("--config", default=None)
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.logging)

    service = BoundaryService.from_settings(config.boundary)
    index = service.ensure_loaded()

    report = {
        "path": str(config.boundary.geojson_path),
        "bbox_mode": config.boundary.bbox_mode,
        "stats": service.stats().to_dict(),
    }
    extent = index.geometry.extent()
    report["geometry_extent"] = None if extent is None else extent.to_dict()
    uncovered = index.uncovered_extent()
    report["bbox_covers_geometry"] = uncovered is None
    if uncovered is not None:
        logger.warning("Configured bbox misses part of the geometry; consider bbox_mode=derived")

    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
