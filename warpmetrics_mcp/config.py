"""Runtime settings read from the environment.

WARPMETRICS_API_URL  API base URL (default: https://api.warpmetrics.com)
WARPMETRICS_API_KEY  API key, required to serve tools
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .errors import ConfigError

DEFAULT_API_URL = "https://api.warpmetrics.com"
SPEC_PATH = "/v1/docs/openapi.json"


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    api_key: str | None = None

    @property
    def spec_url(self) -> str:
        return f"{self.api_url}{SPEC_PATH}"

    def require_api_key(self) -> str:
        """Return the API key, or raise ConfigError if it is not set."""
        if not self.api_key:
            raise ConfigError("WARPMETRICS_API_KEY environment variable is required")
        return self.api_key


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables."""
    env = os.environ if environ is None else environ
    api_url = env.get("WARPMETRICS_API_URL") or DEFAULT_API_URL
    return Settings(
        api_url=api_url.rstrip("/"),
        api_key=env.get("WARPMETRICS_API_KEY") or None,
    )
