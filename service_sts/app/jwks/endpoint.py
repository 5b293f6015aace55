"""
Key-set endpoint descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from shared.errors import ConfigError

ResponseCleanup = Callable[[httpx.Response], None]


def close_response(response: httpx.Response) -> None:
    """Default cleanup: release the connection backing ``response``."""
    response.close()


@dataclass(frozen=True)
class KeyEndpoint:
    """Where the provider's key set lives and how to fetch it.

    ``transport`` carries any deadline; fetches have no timeout of their own.
    """

    url: httpx.URL
    transport: httpx.Client
    cleanup: ResponseCleanup = close_response

    @classmethod
    def configure(
        cls,
        url: Optional[str],
        transport: Optional[httpx.Client] = None,
        cleanup: Optional[ResponseCleanup] = None,
    ) -> "KeyEndpoint":
        """Validate ``url`` and build a descriptor around it."""
        if not url or not url.strip():
            raise ConfigError("Key set endpoint URL is empty")

        try:
            parsed = httpx.URL(url.strip())
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise ConfigError("Key set endpoint URL is malformed", details={"url": url, "error": str(exc)}) from exc

        if parsed.scheme not in ("http", "https"):
            raise ConfigError("Key set endpoint must use http or https", details={"url": url})
        if not parsed.host:
            raise ConfigError("Key set endpoint URL has no host", details={"url": url})

        return cls(
            url=parsed,
            transport=transport if transport is not None else httpx.Client(),
            cleanup=cleanup if cleanup is not None else close_response,
        )
