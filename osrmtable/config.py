#Purpose: process-wide OSRM server configuration.
#Read from the environment (a .env file is loaded first), overridable at runtime
#with set_server(). Every table() call reads the active config once.
#
#Example .env:
#OSRM_SERVER=http://localhost:5000/
#OSRM_PROFILE=driving

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SERVER = "http://router.project-osrm.org/"
DEFAULT_PROFILE = "driving"
DEFAULT_TIMEOUT_S = 30.0

# the public demo server, shared and capability restricted
DEMO_HOST = "router.project-osrm.org"


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return int(value)


def normalize_base_url(base_url: str) -> str:
    """Strip whitespace, require an http(s) scheme and a host, end with a single '/'."""
    base_url = base_url.strip()
    if not base_url:
        raise ValueError("OSRM server URL is empty.")
    parsed = urlparse(base_url)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
        raise ValueError(f"OSRM server URL must start with http:// or https:// and name a host, got {base_url!r}.")
    return base_url.rstrip("/") + "/"


@dataclass(frozen=True)
class ServerConfig:
    """
    Where table requests go and what the server accepts.

    max_table_cells / max_url_length only apply to self-hosted servers,
    None means no limit. The demo server has fixed limits (see limits.py).
    """
    base_url: str = DEFAULT_SERVER
    profile: str = DEFAULT_PROFILE
    timeout_s: float = DEFAULT_TIMEOUT_S
    max_table_cells: Optional[int] = None
    max_url_length: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "base_url", normalize_base_url(self.base_url))
        if not self.profile:
            raise ValueError("OSRM profile must not be empty.")

    @property
    def is_demo(self) -> bool:
        """True when pointing at the public demo endpoint (scheme and trailing slash ignored)."""
        return (urlparse(self.base_url).hostname or "").lower() == DEMO_HOST

    @classmethod
    def from_env(cls) -> "ServerConfig":
        return cls(
            base_url=os.getenv("OSRM_SERVER") or DEFAULT_SERVER,
            profile=os.getenv("OSRM_PROFILE") or DEFAULT_PROFILE,
            timeout_s=float(os.getenv("OSRM_TIMEOUT") or DEFAULT_TIMEOUT_S),
            max_table_cells=_optional_int("OSRM_MAX_TABLE_CELLS"),
            max_url_length=_optional_int("OSRM_MAX_URL_LENGTH"),
        )


#----------------
# active configuration
#----------------
_override: Optional[ServerConfig] = None


def get_server() -> ServerConfig:
    """Active server config: the set_server() override if any, else the environment."""
    if _override is not None:
        return _override
    return ServerConfig.from_env()


def set_server(base_url: str, profile: Optional[str] = None, **kwargs) -> ServerConfig:
    """Point the whole process at another server. Returns the new active config."""
    global _override
    current = get_server()
    _override = replace(
        current,
        base_url=base_url,
        profile=profile or current.profile,
        **kwargs,
    )
    return _override


def reset_server() -> None:
    """Drop any set_server() override and go back to the environment."""
    global _override
    _override = None
