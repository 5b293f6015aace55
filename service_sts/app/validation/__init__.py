"""
Token validation package.

Validates JWTs issued by the upstream OpenID Connect provider and derives a
bounded session from them:

- Signature verification against the key store, with one refresh on a miss.
- Temporal checks (exp, nbf, iat) against an injectable clock.
- Session duration policy and clamping to the token's own expiry.

Only standard JOSE/JWT behaviors are assumed, so the provider can be
switched with configuration.
"""

from .claims import ClaimSet, ClaimValue, claim_as_int
from .expiry import (
    DEFAULT_SESSION_DURATION,
    MAX_SESSION_DURATION,
    MIN_SESSION_DURATION,
    resolve_expiration,
)
from .token_validator import ALLOWED_ALGORITHMS, Session, TokenValidator

__all__ = [
    "ALLOWED_ALGORITHMS",
    "ClaimSet",
    "ClaimValue",
    "DEFAULT_SESSION_DURATION",
    "MAX_SESSION_DURATION",
    "MIN_SESSION_DURATION",
    "Session",
    "TokenValidator",
    "claim_as_int",
    "resolve_expiration",
]
