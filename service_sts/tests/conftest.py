"""
Fixtures shared by the STS unit tests.
"""

import pytest
from prometheus_client import CollectorRegistry

from service_sts.app.jwks.endpoint import KeyEndpoint
from service_sts.app.jwks.store import KeyStore
from service_sts.app.validation.token_validator import TokenValidator
from shared.metrics import IdentityMetrics
from shared.test_helpers import FrozenClock, KeySetServer, RecordingCleanup, SigningKey

JWKS_URL = "https://idp.example.com/realms/storage/protocol/openid-connect/certs"
NOW = 1_700_000_000


@pytest.fixture(scope="session")
def rsa_key():
    """Provider RSA signing key."""
    return SigningKey.rsa("rsa-key-1")


@pytest.fixture(scope="session")
def rotated_key():
    """Key the provider rotates to after the first one."""
    return SigningKey.rsa("rsa-key-2", algorithm="RS384")


@pytest.fixture(scope="session")
def ec_key():
    """Provider EC signing key."""
    return SigningKey.ec("ec-key-1")


@pytest.fixture
def now():
    """Fixed current time for temporal checks."""
    return NOW


@pytest.fixture
def jwks_url():
    return JWKS_URL


@pytest.fixture
def clock(now):
    return FrozenClock(now)


@pytest.fixture
def metrics():
    """Metrics bound to a private registry."""
    return IdentityMetrics(CollectorRegistry())


@pytest.fixture
def key_server(rsa_key, ec_key):
    """Key-set endpoint publishing the RSA and EC keys."""
    return KeySetServer(keys=[rsa_key, ec_key])


@pytest.fixture
def cleanup():
    return RecordingCleanup()


@pytest.fixture
def endpoint(jwks_url, key_server, cleanup):
    return KeyEndpoint.configure(jwks_url, transport=key_server.client(), cleanup=cleanup)


@pytest.fixture
def key_store(endpoint, metrics):
    return KeyStore(endpoint, metrics=metrics)


@pytest.fixture
def validator(key_store, clock, metrics):
    return TokenValidator(key_store, clock=clock, metrics=metrics)
