from __future__ import annotations

import pandas as pd

from indiaboundary.gis.service import BoundaryService


def tag_points(
    df: pd.DataFrame,
    service: BoundaryService,
    *,
    lat_col: str = "lat",
    lon_col: str = "lon",
    out_col: str = "within_boundary",
) -> pd.DataFrame:
    """Return a copy of `df` with a boolean `out_col` telling whether each row's point is inside."""

    if not {lat_col, lon_col} <= set(df.columns):
        raise ValueError(f"Input must include {lat_col}, {lon_col}")

    # Nullable dtypes (Float64, Int64) keep pd.NA after coercion; flatten to float64 + NaN.
    lat = pd.to_numeric(df[lat_col], errors="coerce").to_numpy(dtype="float64", na_value=float("nan"))
    lon = pd.to_numeric(df[lon_col], errors="coerce").to_numpy(dtype="float64", na_value=float("nan"))
    out = df.copy()
    # Unparseable or missing cells become NaN, which the service reports as outside.
    out[out_col] = [service.is_within_boundary(float(a), float(b)) for a, b in zip(lat, lon)]
    return out
