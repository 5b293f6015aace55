"""
Wiring for the STS token validator.
"""

import os
from typing import Optional

import httpx
from prometheus_client import CollectorRegistry

from shared.config import EnvLookup, IdentityConfig, get_config
from shared.errors import ConfigError
from shared.logging import get_logger
from shared.metrics import get_metrics
from .jwks.endpoint import KeyEndpoint, ResponseCleanup
from .jwks.store import KeyStore
from .validation.token_validator import TokenValidator

logger = get_logger("sts.factory")


def create_validator(
    config: Optional[IdentityConfig] = None,
    transport: Optional[httpx.Client] = None,
    cleanup: Optional[ResponseCleanup] = None,
    lookup: EnvLookup = os.environ.get,
    registry: Optional[CollectorRegistry] = None,
) -> TokenValidator:
    """Compose configuration, key store and validator.

    No keys are fetched here; the key store fills on first use. Without an
    injected transport, a client bounded by ``config.jwks_timeout`` is built.
    """
    config = config or get_config()

    url = config.effective_jwks_url(lookup)
    if not url:
        raise ConfigError("No key set endpoint configured", details={"setting": "jwks_url"})

    if transport is None:
        transport = httpx.Client(timeout=config.jwks_timeout)

    endpoint = KeyEndpoint.configure(url, transport=transport, cleanup=cleanup)
    metrics = get_metrics(registry)

    logger.info("Token validator configured", jwks_url=str(endpoint.url))
    return TokenValidator(KeyStore(endpoint, metrics=metrics), metrics=metrics)
