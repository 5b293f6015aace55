"""
Key store package.

Retrieves and caches the JSON Web Key Set (JWKS) published by the upstream
identity provider, used to verify token signatures.

Key points:
- Fetch on demand only; there is no background refresh and no TTL.
- A refresh replaces the whole key set, never merges into it.
- Network deadlines come from the injected transport.
"""

from .endpoint import KeyEndpoint, close_response
from .keys import JSONWebKey, JSONWebKeySet, PublicKey, decode_public_key
from .store import KeyStore

__all__ = [
    "KeyEndpoint",
    "KeyStore",
    "JSONWebKey",
    "JSONWebKeySet",
    "PublicKey",
    "close_response",
    "decode_public_key",
]
