# Use postponed evaluation of annotations so type hints stay as strings at runtime.
from __future__ import annotations

import logging
from typing import Optional

# `FastAPI` exposes the boundary checks as HTTP endpoints for the reporting frontend.
from fastapi import FastAPI

# API routes are defined in a separate module to keep the app factory small and testable.
from indiaboundary.api.routes import router

# `AppConfig` is the typed config model so we can avoid globals and magic strings.
from indiaboundary.config.models import AppConfig
from indiaboundary.gis.errors import BoundaryLoadError

# `BoundaryService` owns the once-only geometry load and the containment queries.
from indiaboundary.gis.service import BoundaryService

# Central logging configuration keeps operational debugging consistent across scripts and the API.
from indiaboundary.utils.logging import configure_logging


logger = logging.getLogger(__name__)


# This app factory builds the FastAPI application from a typed config.
# Tests pass their own `BoundaryService` to control the dataset and observe loads.
def create_app(config: AppConfig, *, boundary_service: Optional[BoundaryService] = None) -> FastAPI:
    # Pitfall: `logging.basicConfig(...)` is a no-op if handlers already exist (common in tests),
    # so treat this as best-effort for local/dev.
    configure_logging(config.logging)

    app = FastAPI(title=config.app.name)

    # One service per app: every request handler shares the same loaded geometry.
    service = boundary_service or BoundaryService.from_settings(config.boundary)
    app.state.config = config
    app.state.boundary_service = service

    if config.boundary.preload:
        # Warm up so the first report does not pay for the parse. A failure here is not fatal:
        # the service stays retryable and the next query tries again.
        try:
            service.ensure_loaded()
        except BoundaryLoadError as e:
            logger.warning("Boundary preload failed; will retry on first query: %s", e)

    app.include_router(router)
    return app
