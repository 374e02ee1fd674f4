"""
Runtime configuration read from environment variables.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

# Checked in order, first non-empty value wins
_CREDENTIAL_VARS = ("UNSPLASH_KEY", "VITE_UNSPLASH_ACCESS_KEY")

_PLACEHOLDER_MARKERS = ("your_", "placeholder")


def _clean_credential(raw: Optional[str]) -> Optional[str]:
    """
    Strip surrounding quotes and whitespace from a credential value.

    Placeholder values copied from example env files are treated as absent.
    """
    if raw is None:
        return None

    value = raw.strip().strip("'\"").strip()
    if not value:
        return None

    lowered = value.lower()
    if any(marker in lowered for marker in _PLACEHOLDER_MARKERS):
        return None

    return value


def mask_key(key: Optional[str]) -> str:
    """Partially mask a credential for log output."""
    if not key:
        return "<<none>>"
    return f"{key[:4]}...{key[-4:]}" if len(key) > 8 else "****"


@dataclass
class Settings:
    """Proxy settings. All durations are in seconds."""
    access_key: Optional[str] = None
    api_base: str = "https://api.unsplash.com"
    cache_ttl: float = 30.0
    cache_max_entries: int = 5000
    rate_limit_window: float = 60.0
    rate_limit_max: int = 120
    rate_limit_max_clients: int = 10000
    upstream_timeout: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the process environment.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            Settings instance
        """
        env = os.environ if environ is None else environ

        access_key = None
        for name in _CREDENTIAL_VARS:
            access_key = _clean_credential(env.get(name))
            if access_key:
                break

        return cls(
            access_key=access_key,
            api_base=env.get("UNSPLASH_API_BASE", cls.api_base).rstrip("/"),
            cache_ttl=float(env.get("CACHE_TTL_SECONDS", cls.cache_ttl)),
            cache_max_entries=int(env.get("CACHE_MAX_ENTRIES", cls.cache_max_entries)),
            rate_limit_window=float(env.get("RATE_LIMIT_WINDOW_SECONDS", cls.rate_limit_window)),
            rate_limit_max=int(env.get("RATE_LIMIT_MAX", cls.rate_limit_max)),
            rate_limit_max_clients=int(env.get("RATE_LIMIT_MAX_CLIENTS", cls.rate_limit_max_clients)),
            upstream_timeout=float(env.get("UPSTREAM_TIMEOUT_SECONDS", cls.upstream_timeout)),
            log_level=env.get("LOG_LEVEL", cls.log_level),
        )
