"""
Purpose: Travel time / distance matrices between points, from the OSRM table service.

Flow of one call:
    normalize points -> build query -> size guard -> GET with retry -> validate -> shape

Nothing is kept between calls apart from the process-wide server config.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import pandas as pd

from .config import get_server
from .limits import check_request_limits
from .matrix_adapter import TableResult, table_result_from_response
from .osrm_client import OSRMClient
from .points import resolve_point_sets
from .request_builder import build_table_query

logger = logging.getLogger(__name__)


def table(
    locations: Any = None,
    sources: Any = None,
    destinations: Any = None,
    measures: Sequence[str] | str = ("duration",),
    exclude: Optional[str] = None,
    use_polyline: bool = False,
    *,
    client: Optional[OSRMClient] = None,
) -> TableResult:
    """
    Get travel time and/or distance matrices between points.

    Args:
        locations: points for an all-pairs matrix. A DataFrame whose first three
            columns are id, lon, lat (WGS84), a sequence of (id, lon, lat)
            records, or a GeoDataFrame (row index used as ids).
        sources / destinations: same forms; when both are given only the
            source -> destination pairs are computed.
        measures: "duration" (minutes), "distance" (metres) or both.
            The public demo server only returns durations.
        exclude: OSRM exclude option, e.g. "toll".
        use_polyline: send coordinates as an encoded polyline. Ignored on the
            public demo server.
        client: OSRMClient to use, a new one for the active server if omitted.

    Returns:
        TableResult with durations and/or distances (whichever the server
        returned) and the snapped sources / destinations coordinates.

    Raises:
        InputError, RequestLimitError, TransportError, ServerError
        (all subclasses of OSRMError).
    """
    src, dst, bipartite = resolve_point_sets(locations, sources, destinations)

    if client is None:
        with OSRMClient(server=get_server()) as owned_client:
            return _table_with_client(owned_client, src, dst, bipartite, measures, exclude, use_polyline)
    return _table_with_client(client, src, dst, bipartite, measures, exclude, use_polyline)


def _table_with_client(
    client: OSRMClient,
    src: pd.DataFrame,
    dst: pd.DataFrame,
    bipartite: bool,
    measures: Sequence[str] | str,
    exclude: Optional[str],
    use_polyline: bool,
) -> TableResult:
    server = client.server

    query = build_table_query(
        src,
        dst,
        bipartite=bipartite,
        server=server,
        measures=measures,
        exclude=exclude,
        use_polyline=use_polyline,
    )
    check_request_limits(query, server)

    logger.info(
        f"OSRM table: {query.n_sources} x {query.n_destinations} "
        f"({'bipartite' if bipartite else 'all-pairs'}) on {server.base_url}"
    )
    data = client.get_json(query.url)
    return table_result_from_response(data, src, dst)
