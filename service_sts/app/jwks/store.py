"""
Key store for identity-provider signing keys.
"""

import threading
from types import MappingProxyType
from typing import Dict, Mapping, Optional

import httpx
from pydantic import ValidationError

from shared.errors import DecodeError, HTTPStatusError, KeySetError, NetworkError
from shared.logging import get_logger
from shared.metrics import IdentityMetrics, get_metrics
from .endpoint import KeyEndpoint
from .keys import JSONWebKeySet, PublicKey, decode_key_set


class KeyStore:
    """Holds the provider's public keys and refreshes them on demand.

    The key mapping is replaced as a whole on every successful refresh, so
    lookups never need a lock: they see either the previous mapping or the
    new one. Refreshes are serialized, and a caller that waited behind a
    successful refresh reuses its result instead of fetching again.
    """

    def __init__(self, endpoint: KeyEndpoint, metrics: Optional[IdentityMetrics] = None):
        self.endpoint = endpoint
        self.metrics = metrics or get_metrics()
        self.logger = get_logger("sts.jwks")

        self._keys: Dict[str, PublicKey] = {}
        self._generation = 0
        self._refresh_lock = threading.Lock()

    @property
    def keys(self) -> Mapping[str, PublicKey]:
        """Read-only view of the current key set."""
        return MappingProxyType(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def lookup(self, kid: str) -> Optional[PublicKey]:
        """Get the key for ``kid``, or None if it is unknown."""
        return self._keys.get(kid)

    def refresh(self) -> None:
        """Fetch the key set and swap it in.

        Raises NetworkError, HTTPStatusError or DecodeError; the current key
        set is left untouched on failure.
        """
        generation = self._generation
        with self._refresh_lock:
            if self._generation != generation:
                self.logger.debug("JWKS refresh coalesced", keys_count=len(self._keys))
                return

            try:
                with self.metrics.time_refresh():
                    keys = self._fetch()
            except KeySetError as exc:
                self.metrics.record_refresh("error")
                self.logger.error(
                    "Failed to refresh JWKS",
                    url=str(self.endpoint.url),
                    code=exc.code,
                    error=exc.message
                )
                raise

            self._keys = keys
            self._generation += 1

        self.metrics.record_refresh("success")
        self.logger.info("JWKS refreshed successfully", keys_count=len(keys))

    def _fetch(self) -> Dict[str, PublicKey]:
        """Download and decode the key set."""
        endpoint = self.endpoint
        try:
            request = endpoint.transport.build_request("GET", endpoint.url)
            response = endpoint.transport.send(request, stream=True)
        except httpx.RequestError as exc:
            raise NetworkError(details={"url": str(endpoint.url), "error": str(exc)}) from exc

        try:
            if not response.is_success:
                raise HTTPStatusError(response.status_code, details={"url": str(endpoint.url)})

            try:
                response.read()
            except httpx.RequestError as exc:
                raise NetworkError(details={"url": str(endpoint.url), "error": str(exc)}) from exc

            try:
                payload = response.json()
            except ValueError as exc:
                raise DecodeError("Key set document is not valid JSON", details={"error": str(exc)}) from exc

            try:
                key_set = JSONWebKeySet.model_validate(payload)
            except ValidationError as exc:
                raise DecodeError(
                    "Key set document has an unexpected shape",
                    details={"error": str(exc)}
                ) from exc

            return decode_key_set(key_set)
        finally:
            endpoint.cleanup(response)
