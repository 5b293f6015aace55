"""
Shared configuration management for the storage STS identity layer.
"""

import os
from typing import Callable, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Fixed override for the key-set endpoint, consulted after the explicit value.
IAM_JWKS_URL_ENV = "STS_IAM_JWKS_URL"

EnvLookup = Callable[[str], Optional[str]]


def resolve_jwks_url(explicit: Optional[str], lookup: EnvLookup = os.environ.get) -> Optional[str]:
    """Return the effective key-set URL.

    A non-empty value found through ``lookup`` under ``IAM_JWKS_URL_ENV``
    overrides ``explicit``. Empty strings count as unset; ``None`` is returned
    when neither source provides a URL.
    """
    override = lookup(IAM_JWKS_URL_ENV)
    if override:
        return override
    return explicit or None


class IdentityConfig(BaseSettings):
    """Configuration for the identity layer."""

    model_config = SettingsConfigDict(
        env_prefix="STS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Identity provider
    jwks_url: Optional[str] = Field(default=None)
    jwks_timeout: float = Field(default=10.0, gt=0)

    def effective_jwks_url(self, lookup: EnvLookup = os.environ.get) -> Optional[str]:
        """Key-set URL after applying the ``STS_IAM_JWKS_URL`` override."""
        return resolve_jwks_url(self.jwks_url, lookup)


def get_config(**overrides) -> IdentityConfig:
    """Get configuration for the identity layer."""
    return IdentityConfig(**overrides)
