#Purpose: pre-flight guard against requests the server would refuse (or that would abuse it).
#Runs after the query is built and before anything is sent.
#The public demo server has fixed limits; a self-hosted server uses the configured
#ones (match them to its --max-table-size option).

from .config import ServerConfig
from .errors import RequestLimitError
from .request_builder import TableQuery

DEMO_MAX_TABLE_CELLS = 9998
DEMO_MAX_URL_LENGTH = 8000


def _limits_for(server: ServerConfig) -> tuple:
    if server.is_demo:
        return DEMO_MAX_TABLE_CELLS, DEMO_MAX_URL_LENGTH
    return server.max_table_cells, server.max_url_length


def check_request_limits(query: TableQuery, server: ServerConfig) -> None:
    """
    Raise RequestLimitError when the projected matrix or the URL is too large.

    max cells: a matrix of exactly max_cells is still allowed.
    max url length: the URL must be strictly shorter than the limit.
    """
    max_cells, max_url_length = _limits_for(server)
    where = "the public OSRM demo server" if server.is_demo else "this OSRM server"

    if max_cells is not None and query.n_cells > max_cells:
        raise RequestLimitError(
            f"{query.n_sources} x {query.n_destinations} = {query.n_cells} values is more than "
            f"{where} allows ({max_cells}). Ask for fewer values or use your own server "
            f"and raise its --max-table-size option."
        )

    url_length = len(query.url)
    if max_url_length is not None and url_length >= max_url_length:
        raise RequestLimitError(
            f"The request is too long for {where} ({url_length} characters, limit {max_url_length}). "
            f"Ask for fewer locations or use your own server."
        )
