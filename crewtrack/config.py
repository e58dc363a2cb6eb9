"""Configuration for the realtime client."""
from __future__ import annotations

import dataclasses
import logging
import os
from typing import Any, Mapping

import voluptuous as vol

from .const import (
    DEFAULT_BASE_PATH,
    DEFAULT_POLL_INTERVAL_MS,
    MAX_CONSECUTIVE_ERRORS,
    REQUEST_TIMEOUT_MS,
)

_LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "CREWTRACK_"

positive_int = vol.All(vol.Coerce(int), vol.Range(min=1))
# Absolute http(s) URL of the realtime API, or of the host serving it
base_url_validator = vol.All(str, vol.Match(r"^https?://[^/\s]+\S*$"))


def normalize_base_url(url: str) -> str:
    """Strip trailing slashes; a bare host gets the default API path."""
    url = url.rstrip("/")
    scheme, _, rest = url.partition("://")
    if "/" not in rest:
        url = f"{scheme}://{rest}{DEFAULT_BASE_PATH}"
    return url


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required("base_url"): base_url_validator,
        vol.Optional("poll_interval_ms", default=DEFAULT_POLL_INTERVAL_MS): positive_int,
        vol.Optional("request_timeout_ms", default=REQUEST_TIMEOUT_MS): positive_int,
        vol.Optional("max_consecutive_errors", default=MAX_CONSECUTIVE_ERRORS): positive_int,
        vol.Optional("reset_on_reconnect", default=True): vol.Boolean(),
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclasses.dataclass(frozen=True)
class RealtimeConfig:
    """Validated client settings."""

    base_url: str
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    request_timeout_ms: int = REQUEST_TIMEOUT_MS
    max_consecutive_errors: int = MAX_CONSECUTIVE_ERRORS
    reset_on_reconnect: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RealtimeConfig:
        """Validate a plain dict and build a config; raises vol.Invalid."""
        validated = CONFIG_SCHEMA(dict(data))
        validated["base_url"] = normalize_base_url(validated["base_url"])
        return cls(**validated)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RealtimeConfig:
        """Read ``CREWTRACK_*`` variables, e.g. CREWTRACK_BASE_URL."""
        environ = os.environ if environ is None else environ
        data = {}
        for field in dataclasses.fields(cls):
            value = environ.get(ENV_PREFIX + field.name.upper())
            if value is not None:
                data[field.name] = value
        config = cls.from_dict(data)
        _LOGGER.debug("Loaded realtime config from environment: %s", config)
        return config
