"""
Configuration helpers for the salt-api client.

Connection settings are centralised here to avoid ad-hoc environment lookups.
Use :func:`get_settings` to obtain a cached :class:`Settings` object and
:func:`configure_settings` to override values before the first client is built.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

DEFAULT_URL = "http://localhost:8000"
DEFAULT_EAUTH = "auto"
DEFAULT_TIMEOUT = 30.0

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Connection settings for a Salt master's HTTP API."""

    url: str
    username: Optional[str]
    password: Optional[str]
    eauth: str
    timeout: float
    verify_ssl: bool

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and self.password is not None

    @classmethod
    def load(cls) -> "Settings":
        url = os.getenv("SALT_API_URL") or DEFAULT_URL

        timeout_env = os.getenv("SALT_API_TIMEOUT")
        try:
            timeout = float(timeout_env) if timeout_env else DEFAULT_TIMEOUT
        except ValueError as exc:
            raise ValueError(f"SALT_API_TIMEOUT must be a number, got {timeout_env!r}") from exc

        verify_env = os.getenv("SALT_API_VERIFY_SSL", "")
        verify_ssl = verify_env.strip().lower() not in _FALSE_VALUES

        return cls(
            url=url.rstrip("/"),
            username=os.getenv("SALT_API_USER") or None,
            password=os.getenv("SALT_API_PASSWORD"),
            eauth=os.getenv("SALT_API_EAUTH") or DEFAULT_EAUTH,
            timeout=timeout,
            verify_ssl=verify_ssl,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.load()


def configure_settings(
    url: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    eauth: Optional[str] = None,
    timeout: Optional[float] = None,
    verify_ssl: Optional[bool] = None,
) -> Settings:
    if url is not None:
        os.environ["SALT_API_URL"] = url
    if username is not None:
        os.environ["SALT_API_USER"] = username
    if password is not None:
        os.environ["SALT_API_PASSWORD"] = password
    if eauth is not None:
        os.environ["SALT_API_EAUTH"] = eauth
    if timeout is not None:
        os.environ["SALT_API_TIMEOUT"] = str(timeout)
    if verify_ssl is not None:
        os.environ["SALT_API_VERIFY_SSL"] = "true" if verify_ssl else "false"
    get_settings.cache_clear()
    return get_settings()
