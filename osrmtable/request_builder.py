"""
Purpose: Build the OSRM /table request URL.

    <server>table/v1/<profile>/<coordinates>[?sources=..&destinations=..][&exclude=..][&annotations=..]

- all-pairs: the point set is sent once, the server computes the full matrix.
- bipartite: sources then destinations in one coordinate list, with explicit
  sources= / destinations= index lists into that list.
- coordinates are literal "lon,lat;lon,lat" or a Google encoded polyline.
- the public demo server gets no annotations= and no polyline.

Rule: no HTTP here. The result is an immutable TableQuery.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
from urllib.parse import quote

import pandas as pd
import polyline

from .config import ServerConfig
from .errors import InputError

logger = logging.getLogger(__name__)

SUPPORTED_MEASURES = ("duration", "distance")
COORDINATE_DECIMALS = 5

# kept literal inside the query, everything else is percent-encoded
_SAFE_CHARS = ",;"

QueryParam = Tuple[str, str]


@dataclass(frozen=True)
class TableQuery:
    """A fully encoded table request. Never mutated after build_table_query()."""
    url: str
    params: Tuple[QueryParam, ...]
    n_sources: int
    n_destinations: int
    measures: Tuple[str, ...]
    uses_polyline: bool

    @property
    def n_cells(self) -> int:
        return self.n_sources * self.n_destinations


#----------------
# coordinates
#----------------
def _format_coordinate(value: float) -> str:
    # fixed notation, never scientific
    return f"{round(float(value), COORDINATE_DECIMALS):.{COORDINATE_DECIMALS}f}"


def format_coordinates(points: pd.DataFrame) -> str:
    """Points table -> 'lon,lat;lon,lat;...'"""
    return ";".join(
        f"{_format_coordinate(lon)},{_format_coordinate(lat)}"
        for lon, lat in zip(points["lon"], points["lat"])
    )


def encode_coordinates(points: pd.DataFrame) -> str:
    """Points table -> 'polyline(<encoded>)' with the encoded part percent-encoded."""
    encoded = polyline.encode(
        list(zip(points["lat"], points["lon"])),
        precision=COORDINATE_DECIMALS,
    )
    return f"polyline({quote(encoded, safe='')})"


#----------------
# query parameters
#----------------
def _index_list(indexes: Iterable[int]) -> str:
    return ";".join(str(i) for i in indexes)


def normalize_measures(measures: Sequence[str] | str) -> Tuple[str, ...]:
    """Validate requested measures, dropping duplicates but keeping order."""
    if isinstance(measures, str):
        measures = (measures,)
    result: List[str] = []
    for measure in measures:
        if measure not in SUPPORTED_MEASURES:
            raise InputError(
                f"Unknown measure {measure!r}, expected one of {', '.join(SUPPORTED_MEASURES)}."
            )
        if measure not in result:
            result.append(measure)
    if not result:
        raise InputError("At least one measure (duration or distance) is required.")
    return tuple(result)


def build_query_params(
    n_sources: int,
    n_destinations: int,
    bipartite: bool,
    measures: Tuple[str, ...],
    exclude: Optional[str],
    server: ServerConfig,
) -> List[QueryParam]:
    """Ordered (key, value) pairs: sources, destinations, exclude, annotations."""
    params: List[QueryParam] = []
    if bipartite:
        params.append(("sources", _index_list(range(n_sources))))
        params.append(("destinations", _index_list(range(n_sources, n_sources + n_destinations))))
    if exclude:
        params.append(("exclude", exclude))
    if server.is_demo:
        # demo only serves durations and rejects annotations=
        if "distance" in measures:
            logger.warning("The public OSRM demo server only returns durations, distance was not requested.")
    else:
        params.append(("annotations", ",".join(measures)))
    return params


def join_query(params: Sequence[QueryParam]) -> str:
    if not params:
        return ""
    return "?" + "&".join(
        f"{quote(key, safe='')}={quote(value, safe=_SAFE_CHARS)}" for key, value in params
    )


def build_table_query(
    sources: pd.DataFrame,
    destinations: pd.DataFrame,
    bipartite: bool,
    server: ServerConfig,
    measures: Sequence[str] | str = ("duration",),
    exclude: Optional[str] = None,
    use_polyline: bool = False,
) -> TableQuery:
    """
    Assemble the table request for already-normalized point tables.

    Args:
        sources / destinations: point tables (id, lon, lat). In all-pairs mode
            both are the same table and it is sent once.
        bipartite: send sources + destinations with explicit index lists.
        server: active server config, decides profile and demo restrictions.
        measures: "duration", "distance" or both.
        exclude: OSRM exclude class(es), e.g. "toll" or "motorway,ferry".
        use_polyline: send coordinates as an encoded polyline.
    """
    measures = normalize_measures(measures)

    if use_polyline and server.is_demo:
        logger.warning("The public OSRM demo server does not accept polyline coordinates, sending them as lon,lat pairs.")
        use_polyline = False

    points = pd.concat([sources, destinations], ignore_index=True) if bipartite else sources
    coordinates = encode_coordinates(points) if use_polyline else quote(
        format_coordinates(points), safe=_SAFE_CHARS
    )

    params = build_query_params(
        n_sources=len(sources),
        n_destinations=len(destinations),
        bipartite=bipartite,
        measures=measures,
        exclude=exclude,
        server=server,
    )

    path = f"table/v1/{quote(server.profile, safe='')}/{coordinates}"
    url = f"{server.base_url}{path}{join_query(params)}"
    logger.debug(f"OSRM table request: {url}")

    return TableQuery(
        url=url,
        params=tuple(params),
        n_sources=len(sources),
        n_destinations=len(destinations),
        measures=measures,
        uses_polyline=use_polyline,
    )
