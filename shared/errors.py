"""
Shared error handling for the storage STS identity layer.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error payload handed to the surrounding system."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class IdentityException(Exception):
    """Base exception for the identity layer."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


# Key-set side

class KeySetError(IdentityException):
    """Errors raised while configuring or refreshing the key set."""


class ConfigError(KeySetError):
    """The key-set endpoint could not be configured."""

    def __init__(self, message: str = "Invalid key set configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIG_ERROR", message, details)


class NetworkError(KeySetError):
    """The key-set endpoint could not be reached."""

    def __init__(self, message: str = "Key set fetch failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("NETWORK_ERROR", message, details)


class HTTPStatusError(KeySetError):
    """The key-set endpoint answered with a non-success status."""

    def __init__(self, status_code: int, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        details = dict(details or {}, status_code=status_code)
        super().__init__(
            "HTTP_STATUS_ERROR",
            message or f"Key set endpoint returned status {status_code}",
            details
        )


class DecodeError(KeySetError):
    """The key-set document or one of its keys could not be decoded."""

    def __init__(self, message: str = "Malformed key set document", details: Optional[Dict[str, Any]] = None):
        super().__init__("DECODE_ERROR", message, details)


# Token side

class TokenValidationError(IdentityException):
    """Errors raised while validating a bearer token."""


class MalformedToken(TokenValidationError):
    """The token is not a parsable compact JWS."""

    def __init__(self, message: str = "Malformed token", details: Optional[Dict[str, Any]] = None):
        super().__init__("MALFORMED_TOKEN", message, details)


class MissingKidHeader(TokenValidationError):
    """The token header has no usable key identifier."""

    def __init__(self, message: str = "Token header missing key id (kid)", details: Optional[Dict[str, Any]] = None):
        super().__init__("MISSING_KID_HEADER", message, details)


class SignatureInvalid(TokenValidationError):
    """The token signature could not be verified."""

    def __init__(self, message: str = "Token signature is invalid", details: Optional[Dict[str, Any]] = None):
        super().__init__("SIGNATURE_INVALID", message, details)


class UnsupportedAlgorithm(SignatureInvalid):
    """The token is signed with an algorithm outside the allow-list."""

    def __init__(self, algorithm: Any, details: Optional[Dict[str, Any]] = None):
        self.algorithm = algorithm
        details = dict(details or {}, alg=algorithm)
        super().__init__(f"Unsupported signing algorithm: {algorithm!r}", details)
        self.code = "UNSUPPORTED_ALGORITHM"


class TokenExpired(TokenValidationError):
    """The token is outside its validity window."""

    def __init__(self, message: str = "Token is expired or not yet valid", details: Optional[Dict[str, Any]] = None):
        super().__init__("TOKEN_EXPIRED", message, details)


class InvalidDuration(TokenValidationError):
    """A session duration or expiry claim is unusable."""

    def __init__(self, message: str = "Invalid session duration", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_DURATION", message, details)
