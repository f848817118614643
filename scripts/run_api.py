from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

import uvicorn

from indiaboundary.api.app import create_app
from indiaboundary.config.loader import load_config


logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the boundary validation API.")
    parser.add_argument("--config", default=None)
    parser.add_argument("--host", default=None, help="Overrides INDIABOUNDARY_HOST and config api.host")
    parser.add_argument("--port", type=int, default=None, help="Overrides INDIABOUNDARY_PORT and config api.port")
    args = parser.parse_args()

    config = load_config(args.config)
    app = create_app(config)

    host = args.host or os.getenv("INDIABOUNDARY_HOST", config.api.host)
    port = args.port or int(os.getenv("INDIABOUNDARY_PORT", str(config.api.port)))
    logger.info(
        "Serving %s on %s:%s (boundary=%s, bbox_mode=%s)",
        config.app.name,
        host,
        port,
        config.boundary.geojson_path,
        config.boundary.bbox_mode,
    )

    # uvicorn would otherwise install its own log config over `configure_logging`.
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
