from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from indiaboundary.config.loader import load_config
from indiaboundary.gis.errors import BoundaryLoadError
from indiaboundary.gis.service import BoundaryService
from indiaboundary.utils.logging import configure_logging


logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Check whether a lat/lon point lies inside the boundary.")
    parser.add_argument("lat", type=float)
    parser.add_argument("lon", type=float)
    parser.add_argument("--config", default=None)
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.logging)
    service = BoundaryService.from_settings(config.boundary)

    try:
        inside = service.is_within_boundary(args.lat, args.lon)
    except BoundaryLoadError as e:
        logger.error("Could not load boundary from %s: %s", config.boundary.geojson_path, e)
        return 2

    print(f"{args.lat},{args.lon}: {'inside' if inside else 'outside'}")
    return 0 if inside else 1


if __name__ == "__main__":
    raise SystemExit(main())
