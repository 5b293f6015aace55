"""
Test helper functions and factories for the storage STS identity layer.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from jose import jwt
from jose.utils import long_to_base64

EC_CURVES = {
    "ES256": (ec.SECP256R1, "P-256"),
    "ES384": (ec.SECP384R1, "P-384"),
    "ES512": (ec.SECP521R1, "P-521"),
}


def _b64(value: int) -> str:
    return long_to_base64(value).decode("ascii")


@dataclass
class SigningKey:
    """A provider signing key: private PEM for minting, public JWK for publishing."""

    kid: str
    algorithm: str
    private_pem: str
    public_jwk: Dict[str, Any]

    @classmethod
    def rsa(cls, kid: str, algorithm: str = "RS256", key_size: int = 2048) -> "SigningKey":
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
        numbers = private_key.public_key().public_numbers()
        return cls(
            kid=kid,
            algorithm=algorithm,
            private_pem=_private_pem(private_key),
            public_jwk={
                "kid": kid,
                "kty": "RSA",
                "alg": algorithm,
                "use": "sig",
                "n": _b64(numbers.n),
                "e": _b64(numbers.e),
            },
        )

    @classmethod
    def ec(cls, kid: str, algorithm: str = "ES256") -> "SigningKey":
        curve, crv = EC_CURVES[algorithm]
        private_key = ec.generate_private_key(curve())
        numbers = private_key.public_key().public_numbers()
        return cls(
            kid=kid,
            algorithm=algorithm,
            private_pem=_private_pem(private_key),
            public_jwk={
                "kid": kid,
                "kty": "EC",
                "alg": algorithm,
                "use": "sig",
                "crv": crv,
                "x": _b64(numbers.x),
                "y": _b64(numbers.y),
            },
        )

    def with_kid(self, kid: str) -> "SigningKey":
        """Same key material published under another key id."""
        return SigningKey(kid, self.algorithm, self.private_pem, dict(self.public_jwk, kid=kid))

    def sign(self, claims: Dict[str, Any], headers: Optional[Dict[str, Any]] = None) -> str:
        """Mint a compact JWS with ``kid`` in the header unless overridden."""
        token_headers = {"kid": self.kid}
        token_headers.update(headers or {})
        return jwt.encode(claims, self.private_pem, algorithm=self.algorithm, headers=token_headers)


def _private_pem(private_key) -> str:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


def sign_hmac(claims: Dict[str, Any], secret: str, kid: str, algorithm: str = "HS256") -> str:
    """Mint a symmetric token, which the validator must refuse."""
    return jwt.encode(claims, secret, algorithm=algorithm, headers={"kid": kid})


def create_claims(now: int, expires_in: int = 3600, **extra: Any) -> Dict[str, Any]:
    """Typical OIDC id-token claims around ``now``."""
    claims = {
        "iss": "https://idp.example.com/realms/storage",
        "sub": "user1",
        "aud": "storage-sts",
        "iat": now,
        "exp": now + expires_in,
        "email": "john.doe@example.com",
        "groups": ["readers", "writers"],
        "policy": "readwrite",
    }
    claims.update(extra)
    return claims


@dataclass
class KeySetServer:
    """In-process key-set endpoint backed by ``httpx.MockTransport``."""

    keys: List[SigningKey] = field(default_factory=list)
    status_code: int = 200
    body: Optional[bytes] = None
    error: Optional[Exception] = None
    requests: List[httpx.Request] = field(default_factory=list)

    def publish(self, *keys: SigningKey) -> None:
        self.keys = list(keys)

    def document(self) -> Dict[str, Any]:
        return {"keys": [key.public_jwk for key in self.keys]}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        content = self.body if self.body is not None else json.dumps(self.document()).encode()
        return httpx.Response(
            self.status_code,
            content=content,
            headers={"Content-Type": "application/json"},
        )

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


class RecordingCleanup:
    """Response cleanup that remembers which responses it released."""

    def __init__(self):
        self.released: List[httpx.Response] = []

    def __call__(self, response: httpx.Response) -> None:
        self.released.append(response)
        response.close()


class FrozenClock:
    """Clock returning a fixed instant that tests can move."""

    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
