"""
Purpose: Turn whatever the caller passed as points into one shape.

What it does:
- Classifies an input as one of two variants:
    TabularPoints       -> pandas DataFrame or a sequence of records (id, lon, lat)
    GeometryLayerPoints -> geopandas GeoDataFrame / GeoSeries
- Converts each variant to a point table: DataFrame with columns id, lon, lat,
  in input order, with a fresh 0..n-1 index.
- Resolves all-pairs vs bipartite mode from locations / sources / destinations.

Rule: positional renaming only. Coordinate ranges are not checked and id
uniqueness is left to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Sequence, Tuple, Union

import geopandas as gpd
import pandas as pd

from .errors import InputError

POINT_COLUMNS = ["id", "lon", "lat"]
WGS84_EPSG = 4326


@dataclass(frozen=True)
class TabularPoints:
    """Plain rows whose first three fields are id, lon, lat."""
    records: Union[pd.DataFrame, Sequence[Any]]


@dataclass(frozen=True)
class GeometryLayerPoints:
    """A geometry layer. Row index values become the point ids."""
    layer: gpd.GeoDataFrame


PointInput = Union[TabularPoints, GeometryLayerPoints]


def classify_points(points: Any, name: str = "points") -> PointInput:
    """Wrap a raw input in the matching variant, or fail with InputError."""
    if isinstance(points, (TabularPoints, GeometryLayerPoints)):
        return points
    if isinstance(points, gpd.GeoSeries):
        return GeometryLayerPoints(gpd.GeoDataFrame(geometry=points))
    if isinstance(points, gpd.GeoDataFrame):
        return GeometryLayerPoints(points)
    if isinstance(points, pd.DataFrame):
        return TabularPoints(points)
    if isinstance(points, (str, bytes)) or not isinstance(points, Sequence):
        raise InputError(
            f"{name}: expected a DataFrame, a GeoDataFrame or a sequence of "
            f"(id, lon, lat) records, got {type(points).__name__}."
        )
    return TabularPoints(points)


#----------------
# one conversion per variant
#----------------
def _tabular_to_table(points: TabularPoints, name: str) -> pd.DataFrame:
    records = points.records
    if isinstance(records, pd.DataFrame):
        if records.shape[1] < 3:
            raise InputError(
                f"{name}: needs 3 columns (id, lon, lat), got {records.shape[1]}."
            )
        table = records.iloc[:, :3].copy()
        table.columns = POINT_COLUMNS
        return table

    rows = []
    for position, record in enumerate(records):
        fields = list(record.values()) if isinstance(record, Mapping) else record
        if isinstance(fields, (str, bytes)) or not isinstance(fields, Sequence) or len(fields) < 3:
            raise InputError(f"{name}: record {position} does not have 3 fields (id, lon, lat).")
        rows.append(list(fields[:3]))
    return pd.DataFrame(rows, columns=POINT_COLUMNS)


def _layer_to_table(points: GeometryLayerPoints, name: str) -> pd.DataFrame:
    layer = points.layer
    if layer.crs is None:
        raise InputError(f"{name}: the geometry layer has no CRS, cannot locate it in WGS84.")

    geometry = layer.geometry
    if geometry.isna().any() or geometry.is_empty.any():
        raise InputError(f"{name}: the geometry layer has missing or empty geometries.")

    # lines and polygons are routed from their centroid, taken in the native CRS
    if not (geometry.geom_type == "Point").all():
        geometry = geometry.centroid
    if geometry.crs.to_epsg() != WGS84_EPSG:
        geometry = geometry.to_crs(epsg=WGS84_EPSG)

    return pd.DataFrame({
        "id": layer.index.to_list(),
        "lon": geometry.x.to_numpy(),
        "lat": geometry.y.to_numpy(),
    })


def to_point_table(points: Any, name: str = "points") -> pd.DataFrame:
    """
    Normalize any supported input to a DataFrame with columns id (str),
    lon (float), lat (float), index 0..n-1, rows in input order.

    Raises:
        InputError: unsupported type, empty set, fewer than 3 fields,
                    missing or non-numeric coordinates.
    """
    variant = classify_points(points, name)
    if isinstance(variant, GeometryLayerPoints):
        table = _layer_to_table(variant, name)
    else:
        table = _tabular_to_table(variant, name)

    if table.empty:
        raise InputError(f"{name}: no points given.")

    try:
        lon = pd.to_numeric(table["lon"], errors="raise").astype(float)
        lat = pd.to_numeric(table["lat"], errors="raise").astype(float)
    except (TypeError, ValueError) as e:
        raise InputError(f"{name}: longitude/latitude must be numeric ({e}).") from e
    if lon.isna().any() or lat.isna().any():
        raise InputError(f"{name}: some points have no longitude/latitude.")

    return pd.DataFrame({
        "id": table["id"].astype(str).to_numpy(),
        "lon": lon.to_numpy(),
        "lat": lat.to_numpy(),
    })


def resolve_point_sets(
    locations: Any = None,
    sources: Any = None,
    destinations: Any = None,
) -> Tuple[pd.DataFrame, pd.DataFrame, bool]:
    """
    Work out which request mode the arguments describe.

    - no destinations: all-pairs over `locations` (or `sources` if that is
      the only set given); sources and destinations are the same table.
    - sources and destinations: bipartite.

    Returns:
        (sources_table, destinations_table, is_bipartite)
    """
    if destinations is None:
        if locations is not None and sources is not None:
            raise InputError("Pass either locations, or sources with destinations, not both.")
        single = locations if locations is not None else sources
        if single is None:
            raise InputError("No points given: pass locations, or sources and destinations.")
        table = to_point_table(single, "locations" if locations is not None else "sources")
        return table, table, False

    if locations is not None:
        raise InputError("Pass either locations, or sources with destinations, not both.")
    if sources is None:
        raise InputError("destinations were given without sources.")

    return (
        to_point_table(sources, "sources"),
        to_point_table(destinations, "destinations"),
        True,
    )
