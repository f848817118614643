from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from indiaboundary.config.loader import load_config
from indiaboundary.gis.service import BoundaryService
from indiaboundary.gis.tagging import tag_points
from indiaboundary.utils.logging import configure_logging


logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Tag CSV rows with whether their point is inside the boundary.")
    parser.add_argument("--in", dest="in_path", required=True)
    parser.add_argument("--out", dest="out_path", required=True)
    parser.add_argument("--lat-col", default="lat")
    parser.add_argument("--lon-col", default="lon")
    parser.add_argument("--config", default=None)
    args = parser.parse_args()

    config = load_config(args.config)
    configure_logging(config.logging)

    in_path = Path(args.in_path)
    if not in_path.exists():
        raise FileNotFoundError(in_path)

    service = BoundaryService.from_settings(config.boundary)
    out_df = tag_points(pd.read_csv(in_path), service, lat_col=args.lat_col, lon_col=args.lon_col)

    out_path = Path(args.out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_df.to_csv(out_path, index=False)
    outside = int((~out_df["within_boundary"]).sum())
    logger.info("Wrote %s (outside=%s/%s)", out_path, outside, len(out_df))


if __name__ == "__main__":
    main()
