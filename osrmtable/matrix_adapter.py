#Purpose: shape a validated OSRM table response into labeled matrices.
#Durations become minutes, distances stay metres, rows/columns carry the caller's ids in input order.
#Also echoes the coordinates the server snapped each point to.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from .errors import ServerError

SECONDS_PER_MINUTE = 60.0


@dataclass(frozen=True)
class TableResult:
    """
    What a table() call returns.

    durations: minutes, rows = source ids, columns = destination ids (None if not returned)
    distances: metres, same labels (None if not returned)
    sources / destinations: coordinates the server snapped to, columns id, lon, lat
    """
    sources: pd.DataFrame
    destinations: pd.DataFrame
    durations: Optional[pd.DataFrame] = None
    distances: Optional[pd.DataFrame] = None

    def as_dict(self) -> Dict[str, pd.DataFrame]:
        """Only the keys for payloads the server actually returned."""
        output: Dict[str, pd.DataFrame] = {}
        if self.durations is not None:
            output["durations"] = self.durations
        if self.distances is not None:
            output["distances"] = self.distances
        output["sources"] = self.sources
        output["destinations"] = self.destinations
        return output


def labeled_matrix(values: Any, sources: pd.DataFrame, destinations: pd.DataFrame, name: str) -> pd.DataFrame:
    """
    OSRM 2D array -> DataFrame labeled with the input ids.
    null cells (unreachable pairs) become NaN.
    """
    shape = (len(sources), len(destinations))
    try:
        matrix = np.array(
            [[np.nan if cell is None else cell for cell in row] for row in values],
            dtype=float,
        )
    except (TypeError, ValueError) as e:
        raise ServerError(f"OSRM returned a malformed {name} table: {e}") from e
    if matrix.shape != shape:
        raise ServerError(f"OSRM returned a {name} table of shape {matrix.shape}, expected {shape}.")
    return pd.DataFrame(
        matrix,
        index=pd.Index(sources["id"].to_list(), name="source"),
        columns=pd.Index(destinations["id"].to_list(), name="destination"),
    )


def snapped_coordinates(waypoints: Any, points: pd.DataFrame, name: str) -> pd.DataFrame:
    """OSRM waypoint list -> DataFrame(id, lon, lat) in input order."""
    if not isinstance(waypoints, list) or len(waypoints) != len(points):
        raise ServerError(f"OSRM returned {name} waypoints that do not match the {len(points)} points sent.")
    locations: List[List[float]] = []
    for waypoint in waypoints:
        location = waypoint.get("location") if isinstance(waypoint, dict) else None
        if not location or len(location) != 2:
            raise ServerError(f"OSRM returned a {name} waypoint without a location.")
        locations.append([float(location[0]), float(location[1])])
    return pd.DataFrame({
        "id": points["id"].to_list(),
        "lon": [lon for lon, _ in locations],
        "lat": [lat for _, lat in locations],
    })


def table_result_from_response(data: Dict[str, Any], sources: pd.DataFrame, destinations: pd.DataFrame) -> TableResult:
    """
    Shape a validated OSRM table response. Durations are converted from
    seconds to minutes, distances stay in metres.
    """
    durations = None
    if data.get("durations") is not None:
        durations = labeled_matrix(data["durations"], sources, destinations, "durations") / SECONDS_PER_MINUTE

    distances = None
    if data.get("distances") is not None:
        distances = labeled_matrix(data["distances"], sources, destinations, "distances")

    return TableResult(
        sources=snapped_coordinates(data.get("sources"), sources, "sources"),
        destinations=snapped_coordinates(data.get("destinations"), destinations, "destinations"),
        durations=durations,
        distances=distances,
    )
