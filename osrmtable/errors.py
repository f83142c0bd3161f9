#Purpose: exceptions raised by the table client.
#Catch OSRMError to handle every failure of a table() call in one place.

from typing import Optional


class OSRMError(Exception):
    """Base class for OSRM table client errors."""
    pass


class InputError(OSRMError, ValueError):
    """Point sets or options are malformed. Raised before anything is sent."""
    pass


class RequestLimitError(OSRMError):
    """The request is larger than the active server accepts. Nothing was sent."""
    pass


class TransportError(OSRMError):
    """Every attempt to reach the server failed."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class ServerError(OSRMError):
    """
    The server answered, but not with a usable table.
    code/message are the OSRM status fields when the response had them.
    """

    def __init__(self, message: str, code: Optional[str] = None, server_message: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.server_message = server_message
