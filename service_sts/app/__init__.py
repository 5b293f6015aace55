"""
STS identity package for the storage service.

Authenticates federated bearer tokens issued by an external OpenID Connect
provider and derives a bounded session from them. It is intentionally small
and focused:

- app.jwks: Key store that fetches and caches the provider's signing keys.
- app.validation: Token validation, claim helpers and session expiry policy.
- app.factory: Composes configuration, key store and validator.

Design notes:
- Keep the package import side-effects minimal; module import must not
  perform network calls. Keys are fetched lazily on first validation.
- Use the shared/ utilities for configuration, logging, metrics and errors.
- Turning errors into protocol responses belongs to the caller.
"""

from .factory import create_validator
from .validation.token_validator import Session, TokenValidator

__all__ = ["Session", "TokenValidator", "create_validator"]
