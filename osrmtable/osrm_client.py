#Purpose: The OSRM HTTP adapter/client.
#Sole responsibility: send an already built request to OSRM and hand back a validated JSON body.
#Encapsulates:
#the HTTP session (user agent, timeout)
#bounded retry on transport failures
#checking the OSRM status code before anyone reads the payload
#It does not build URLs or shape matrices.

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .config import ServerConfig, get_server
from .errors import ServerError, TransportError
from .retry import RetryPolicy

logger = logging.getLogger(__name__)

USER_AGENT = "osrmtable python package"
OK_CODE = "Ok"

# connection errors, timeouts, broken HTTP, and bodies that are not JSON
# (requests' JSONDecodeError is a ValueError)
TRANSPORT_FAILURES = (requests.RequestException, ValueError)


def default_retry_policy() -> RetryPolicy:
    return RetryPolicy(max_attempts=10, delay_s=1.0, retry_on=TRANSPORT_FAILURES)


def validate_response(data: Any) -> Dict[str, Any]:
    """
    Check the OSRM status before any payload is read.

    - no "code": malformed response, fails with whatever "message" there is
    - "code" other than "Ok": fails with code and message
    """
    if not isinstance(data, dict):
        raise ServerError(f"OSRM returned an unexpected response: {type(data).__name__}")

    code = data.get("code")
    message = data.get("message")
    if code is None:
        raise ServerError(message or "OSRM returned a response without a status code.", server_message=message)
    if code != OK_CODE:
        logger.error(f"OSRM error: {code} {message or ''}")
        text = f"{code}\n{message}" if message else str(code)
        raise ServerError(text, code=code, server_message=message)
    return data


class OSRMClient:
    """
    OSRM Adapter / Client

    Sole responsibility:
    - GET a table URL, retrying transport failures with a fixed delay
    - decode the JSON body
    - reject non-Ok answers
    """
    def __init__(
        self,
        server: Optional[ServerConfig] = None,
        retry_policy: Optional[RetryPolicy] = None,
        session: Optional[requests.Session] = None,
    ):
        self.server = server or get_server()
        self.retry_policy = retry_policy or default_retry_policy()
        # only a session created here is closed by close()
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "OSRMClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_json_once(self, url: str) -> Any:
        response = self.session.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=self.server.timeout_s,
        )
        # OSRM answers 4xx with a JSON code/message body, so the status is not checked here
        return response.json()

    def get_json(self, url: str) -> Dict[str, Any]:
        """
        One GET per attempt until the body decodes as JSON.

        Raises:
            TransportError: every attempt failed (chained to the last failure)
            ServerError: the server answered without an Ok code
        """
        outcome = self.retry_policy.run(lambda: self._get_json_once(url))
        if outcome.exhausted:
            logger.error(f"OSRM unreachable after {outcome.attempts} attempts: {outcome.error}")
            raise TransportError(
                f"OSRM request failed after {outcome.attempts} attempts: {outcome.error}",
                attempts=outcome.attempts,
            ) from outcome.error
        logger.debug(f"OSRM answered on attempt {outcome.attempts}")
        return validate_response(outcome.value)
