"""
Token validation service for the STS identity layer.
"""

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Dict, Optional

from jose import jwk, jwt
from jose.exceptions import JOSEError

from shared.errors import (
    InvalidDuration,
    KeySetError,
    MalformedToken,
    MissingKidHeader,
    SignatureInvalid,
    TokenExpired,
    TokenValidationError,
    UnsupportedAlgorithm,
)
from shared.logging import get_logger
from shared.metrics import IdentityMetrics, get_metrics
from ..jwks.keys import EC_ALGORITHMS, RSA_ALGORITHMS, PublicKey, key_supports_algorithm
from ..jwks.store import KeyStore
from .claims import ClaimSet, claim_as_int, claim_as_number
from .expiry import resolve_expiration

# Asymmetric families only; HS* and "none" never reach a key lookup.
ALLOWED_ALGORITHMS = RSA_ALGORITHMS + EC_ALGORITHMS

# Signature verification only; temporal claims are checked against our clock.
_SIGNATURE_ONLY = {
    "verify_signature": True,
    "verify_aud": False,
    "verify_iat": False,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
    "verify_at_hash": False,
}


@dataclass(frozen=True)
class Session:
    """Outcome of a successful validation."""

    claims: ClaimSet
    duration: timedelta
    expires_at: int
    method: str


class TokenValidator:
    """Validates provider-issued JWTs and derives a bounded session."""

    ID = "jwt"

    def __init__(
        self,
        key_store: KeyStore,
        clock: Callable[[], float] = time.time,
        metrics: Optional[IdentityMetrics] = None,
    ):
        self.key_store = key_store
        self.clock = clock
        self.metrics = metrics or get_metrics()
        self.logger = get_logger("sts.validator")

    def id(self) -> str:
        """Identifier tagging credentials produced through this validator."""
        return self.ID

    def validate(self, token: str, requested_duration: str = "") -> ClaimSet:
        """Validate ``token`` and return its claims.

        The ``exp`` claim is reasserted as a plain integer when the token's own
        expiry is the binding limit of the derived session.
        """
        return self.validate_session(token, requested_duration).claims

    def validate_session(self, token: str, requested_duration: str = "") -> Session:
        """Validate ``token`` and return the claims with the derived session."""
        try:
            session = self._validate(token, requested_duration)
        except TokenValidationError as exc:
            self.metrics.record_validation("rejected")
            self.logger.warning("Token validation failed", code=exc.code, error=exc.message)
            raise
        except KeySetError as exc:
            self.metrics.record_validation("error")
            self.logger.error("Token validation aborted", code=exc.code, error=exc.message)
            raise

        self.metrics.record_validation("accepted")
        self.logger.info(
            "Token validated",
            duration_seconds=session.duration.total_seconds(),
            expires_at=session.expires_at
        )
        return session

    def _validate(self, token: str, requested_duration: str) -> Session:
        header = self._parse(token)

        alg = header.get("alg")
        if alg not in ALLOWED_ALGORITHMS:
            raise UnsupportedAlgorithm(alg)

        kid = header.get("kid")
        if not isinstance(kid, str):
            raise MissingKidHeader(details={"kid": repr(kid)})

        claims = self._verify(token, alg, kid)

        now = self.clock()
        self._check_temporal(claims, now)

        try:
            exp_at = claim_as_int(claims.get("exp"))
        except ValueError as exc:
            raise InvalidDuration(
                "Token expiry claim is missing or not numeric",
                details={"error": str(exc)}
            ) from exc

        duration = resolve_expiration(requested_duration)

        # A derived session never outlives its source token.
        remaining = exp_at - now
        if remaining < duration.total_seconds():
            duration = timedelta(seconds=remaining)
            session_expiry = float(exp_at)
        else:
            session_expiry = now + duration.total_seconds()

        if exp_at <= session_expiry:
            claims["exp"] = exp_at

        return Session(
            claims=claims,
            duration=duration,
            expires_at=int(session_expiry),
            method=self.ID
        )

    @staticmethod
    def _parse(token: str) -> Dict[str, Any]:
        """Read header and payload without trusting the signature."""
        if not isinstance(token, str) or not token:
            raise MalformedToken("Token is empty")
        try:
            header = jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JOSEError as exc:
            raise MalformedToken(details={"error": str(exc)}) from exc
        if not isinstance(header, dict):
            raise MalformedToken("Token header is not a JSON object")
        return header

    def _verify(self, token: str, alg: str, kid: str) -> ClaimSet:
        """Verify the signature, refreshing the key set at most once."""
        claims = self._verify_with(token, alg, kid, self.key_store.lookup(kid))
        if claims is not None:
            return claims

        self.logger.info("Signing key unknown or stale, refreshing JWKS", kid=kid)
        self.key_store.refresh()

        claims = self._verify_with(token, alg, kid, self.key_store.lookup(kid))
        if claims is None:
            raise SignatureInvalid(details={"kid": kid, "alg": alg})
        return claims

    def _verify_with(self, token: str, alg: str, kid: str, key: Optional[PublicKey]) -> Optional[ClaimSet]:
        if key is None:
            return None
        if not key_supports_algorithm(key, alg):
            self.logger.debug("Key type does not match token algorithm", kid=kid, alg=alg)
            return None
        try:
            return jwt.decode(token, jwk.construct(key, alg), algorithms=[alg], options=_SIGNATURE_ONLY)
        except JOSEError as exc:
            self.logger.debug("Signature verification failed", kid=kid, error=str(exc))
            return None

    @staticmethod
    def _check_temporal(claims: ClaimSet, now: float) -> None:
        """Enforce exp, nbf and iat where the token carries them as numbers.

        Fractional seconds are kept here; only the session arithmetic truncates.
        """
        exp = _numeric_claim(claims, "exp")
        if exp is not None and now >= exp:
            raise TokenExpired("Token is expired", details={"exp": exp})

        nbf = _numeric_claim(claims, "nbf")
        if nbf is not None and now < nbf:
            raise TokenExpired("Token is not valid yet", details={"nbf": nbf})

        iat = _numeric_claim(claims, "iat")
        if iat is not None and now < iat:
            raise TokenExpired("Token used before issued", details={"iat": iat})


def _numeric_claim(claims: ClaimSet, name: str) -> Optional[float]:
    try:
        return claim_as_number(claims[name])
    except (KeyError, ValueError):
        return None
