from __future__ import annotations

# `datetime` gives a stable "now" timestamp for the status endpoint.
from datetime import datetime, timezone
import logging
from typing import Any

# FastAPI primitives:
# - `APIRouter` groups endpoints so the app factory can include them cleanly.
# - `Depends` injects the shared boundary service per request (no module-level globals).
# - `HTTPException` turns load failures into proper HTTP status codes.
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from indiaboundary.api.schemas import (
    AppStatusOut,
    BoundaryStatsResponseOut,
    CoordinateResultOut,
    CoordinatesIn,
    CoordinateValidationOut,
    LocationCheckOut,
)
from indiaboundary.config.models import AppConfig
from indiaboundary.gis.errors import BoundaryLoadError, InvalidCoordinateError
from indiaboundary.gis.service import BoundaryService, validate_coordinates


logger = logging.getLogger(__name__)

router = APIRouter()

OUTSIDE_MESSAGE = "Pothole reporting is only available within India's boundaries"


# Dependency providers: the service and config are built once in `create_app` and kept on `app.state`.
def get_boundary_service(request: Request) -> BoundaryService:
    return request.app.state.boundary_service  # type: ignore[attr-defined]


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config  # type: ignore[attr-defined]


def _parse_coordinates(payload: CoordinatesIn) -> tuple[float, float]:
    # Form posts send strings ("28.61"); accept them the same way as JSON numbers.
    values = []
    for value in (payload.latitude, payload.longitude):
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError as exc:
                raise InvalidCoordinateError(f"Not a number: {value!r}") from exc
        values.append(value)
    return validate_coordinates(values[0], values[1])


def _invalid_coordinates_response() -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid coordinates format"},
    )


@router.get("/status", response_model=AppStatusOut)
def get_status(
    service: BoundaryService = Depends(get_boundary_service),
    config: AppConfig = Depends(get_app_config),
) -> AppStatusOut:
    last_error = service.last_error
    return AppStatusOut(
        now_utc=datetime.now(timezone.utc),
        app_name=config.app.name,
        boundary_state=service.state.value,
        load_count=service.load_count,
        last_error=None if last_error is None else str(last_error),
    )


# Validation endpoint used by the report form before upload starts.
# Dataflow: JSON body -> coordinate parsing -> BoundaryService -> success/failure envelope.
@router.post("/validation/coordinates", response_model=CoordinateValidationOut)
def validate_report_coordinates(
    payload: CoordinatesIn,
    service: BoundaryService = Depends(get_boundary_service),
) -> Any:
    try:
        lat, lon = _parse_coordinates(payload)
    except InvalidCoordinateError as exc:
        logger.debug("Invalid coordinates in validation request: %s", exc)
        return _invalid_coordinates_response()

    try:
        inside = service.is_within_boundary(lat, lon)
    except BoundaryLoadError as e:
        # The boundary dataset is missing or corrupt; report it instead of guessing.
        raise HTTPException(status_code=503, detail=f"Boundary unavailable: {e}") from e

    if inside:
        return CoordinateValidationOut(
            success=True,
            message="Coordinates are within India",
            data=CoordinateResultOut(is_valid=True, latitude=lat, longitude=lon, location="India"),
        )

    body = CoordinateValidationOut(
        success=False,
        message=OUTSIDE_MESSAGE,
        data=CoordinateResultOut(is_valid=False, latitude=lat, longitude=lon, location="Outside India"),
    )
    return JSONResponse(status_code=400, content=body.model_dump(by_alias=True))


@router.get(
    "/validation/boundary-stats",
    response_model=BoundaryStatsResponseOut,
    response_model_exclude_none=True,
)
def get_boundary_stats(service: BoundaryService = Depends(get_boundary_service)) -> BoundaryStatsResponseOut:
    # Diagnostics only: never triggers a load, so it reports `loaded: false` until the first query.
    return BoundaryStatsResponseOut(success=True, data=service.stats().to_dict())


# Submission-side guard. Unlike `/validation/coordinates`, the consuming feature decides what a
# boundary outage means: "allow" keeps reports flowing (fail open), "reject" blocks them (fail closed).
@router.post("/potholes/location-check", response_model=LocationCheckOut)
def check_report_location(
    payload: CoordinatesIn,
    service: BoundaryService = Depends(get_boundary_service),
    config: AppConfig = Depends(get_app_config),
) -> Any:
    try:
        lat, lon = _parse_coordinates(payload)
    except InvalidCoordinateError:
        return _invalid_coordinates_response()

    try:
        inside = service.is_within_boundary(lat, lon)
    except BoundaryLoadError as e:
        if config.validation.on_load_failure == "reject":
            raise HTTPException(status_code=503, detail=f"Boundary unavailable: {e}") from e
        logger.warning("Boundary validation failed, allowing report at (%s, %s): %s", lat, lon, e)
        return LocationCheckOut(accepted=True, reason="boundary_unavailable")

    if inside:
        return LocationCheckOut(accepted=True, reason="inside_boundary")
    return LocationCheckOut(accepted=False, reason="outside_boundary")
