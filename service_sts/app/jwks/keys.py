"""
JSON Web Key models and public-key decoding.

Key-set documents are decoded in two phases: the response body is parsed
into plain JSON structures first, then validated into the models below, and
only then turned into ``cryptography`` key objects.
"""

from typing import Dict, List, Optional, Union

from cryptography.hazmat.primitives.asymmetric import ec, rsa
from jose.utils import base64_to_long
from pydantic import BaseModel, ConfigDict

from shared.errors import DecodeError

PublicKey = Union[rsa.RSAPublicKey, ec.EllipticCurvePublicKey]

EC_CURVES = {
    "P-256": ec.SECP256R1,
    "P-384": ec.SECP384R1,
    "P-521": ec.SECP521R1,
}

RSA_ALGORITHMS = ("RS256", "RS384", "RS512")
EC_ALGORITHMS = ("ES256", "ES384", "ES512")


class JSONWebKey(BaseModel):
    """A single entry of a key-set document."""

    model_config = ConfigDict(extra="allow")

    kid: str
    kty: str
    alg: Optional[str] = None
    use: Optional[str] = None

    # RSA
    n: Optional[str] = None
    e: Optional[str] = None

    # EC
    crv: Optional[str] = None
    x: Optional[str] = None
    y: Optional[str] = None


class JSONWebKeySet(BaseModel):
    """A provider-published key-set document."""

    model_config = ConfigDict(extra="allow")

    keys: List[JSONWebKey]


def decode_public_key(key: JSONWebKey) -> PublicKey:
    """Turn a JSON Web Key into public key material.

    Decoding goes by ``kty`` alone. Entries published for encryption (``use``
    of ``enc``, ``alg`` such as ``RSA-OAEP``) still decode; whether a key may
    verify a given token is decided at verification time.
    """
    if key.kty == "RSA":
        if not key.n or not key.e:
            raise DecodeError("RSA key is missing 'n' or 'e'", details={"kid": key.kid})
        try:
            return rsa.RSAPublicNumbers(base64_to_long(key.e), base64_to_long(key.n)).public_key()
        except (ValueError, TypeError) as exc:
            raise DecodeError("Invalid RSA key material", details={"kid": key.kid, "error": str(exc)}) from exc

    if key.kty == "EC":
        curve = EC_CURVES.get(key.crv or "")
        if curve is None:
            raise DecodeError("Unsupported EC curve", details={"kid": key.kid, "crv": key.crv})
        if not key.x or not key.y:
            raise DecodeError("EC key is missing 'x' or 'y'", details={"kid": key.kid})
        try:
            return ec.EllipticCurvePublicNumbers(
                base64_to_long(key.x), base64_to_long(key.y), curve()
            ).public_key()
        except (ValueError, TypeError) as exc:
            raise DecodeError("Invalid EC key material", details={"kid": key.kid, "error": str(exc)}) from exc

    raise DecodeError("Unsupported key type", details={"kid": key.kid, "kty": key.kty})


def decode_key_set(key_set: JSONWebKeySet) -> Dict[str, PublicKey]:
    """Decode every entry of a key set, indexed by key id."""
    return {key.kid: decode_public_key(key) for key in key_set.keys}


def key_supports_algorithm(key: PublicKey, algorithm: str) -> bool:
    """Whether ``key`` belongs to the family of signing ``algorithm``."""
    if algorithm in RSA_ALGORITHMS:
        return isinstance(key, rsa.RSAPublicKey)
    if algorithm in EC_ALGORITHMS:
        return isinstance(key, ec.EllipticCurvePublicKey)
    return False
