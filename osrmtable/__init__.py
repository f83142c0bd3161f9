#Marks osrmtable as a package.
#Re-exports the public API (table, OSRMClient, server config, errors) so callers
#import from osrmtable without knowing internal file names.
#No business logic.

from .config import ServerConfig, get_server, set_server, reset_server
from .errors import InputError, OSRMError, RequestLimitError, ServerError, TransportError
from .matrix_adapter import TableResult
from .osrm_client import OSRMClient
from .retry import RetryOutcome, RetryPolicy
from .table import table

__all__ = [
    "table",
    "TableResult",
    "OSRMClient",
    "RetryPolicy",
    "RetryOutcome",
    "ServerConfig",
    "get_server",
    "set_server",
    "reset_server",
    "OSRMError",
    "InputError",
    "RequestLimitError",
    "TransportError",
    "ServerError",
]
