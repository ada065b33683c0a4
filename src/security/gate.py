"""Ordered admission checks in front of the vitals endpoint.

Stages run outermost first and the first failure wins:

1. allowlist  -> 403 when networks are configured and the caller is outside them
2. rate limit -> 429, skipped for callers matched by the allowlist
3. API key    -> 401 on a missing or wrong ``X-API-Key``
"""

from __future__ import annotations

import hmac
from http import HTTPStatus
from ipaddress import ip_address
from typing import Any, Optional

from configs.settings import SecurityConfig
from security.ratelimit import FixedWindowRateLimiter

API_KEY_HEADER = "X-API-Key"


class AccessDenied(Exception):
    """A request was refused by one of the gate stages."""

    def __init__(self, status: HTTPStatus) -> None:
        super().__init__(status.phrase)
        self.status_code = int(status)
        self.reason = status.phrase


def keys_match(provided: Optional[str], expected: str) -> bool:
    """Compare keys in time independent of where they first differ."""
    if provided is None:
        provided = ""
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


class AccessGate:
    def __init__(
        self,
        config: SecurityConfig,
        rate_limiter: Optional[FixedWindowRateLimiter] = None,
        logger: Any = None,
    ) -> None:
        self.config = config
        self.logger = logger
        if rate_limiter is None and config.rate_limit > 0:
            rate_limiter = FixedWindowRateLimiter(config.rate_limit)
        self.rate_limiter = rate_limiter if config.rate_limit > 0 else None

    def is_allowlisted(self, client_host: Optional[str]) -> bool:
        """Return whether ``client_host`` falls inside a configured network.

        Always ``False`` when no networks are configured or the address does
        not parse.
        """
        if not self.config.allowed_networks or not client_host:
            return False
        try:
            address = ip_address(client_host)
        except ValueError:
            return False
        # IPv4 callers on a dual-stack socket arrive as ::ffff:a.b.c.d
        mapped = getattr(address, "ipv4_mapped", None)
        candidates = (address, mapped) if mapped is not None else (address,)
        return any(
            candidate in network
            for network in self.config.allowed_networks
            for candidate in candidates
            if candidate.version == network.version
        )

    def _deny(self, status: HTTPStatus, client_host: Optional[str]) -> AccessDenied:
        if self.logger is not None:
            self.logger.debug(f"Denied {client_host}: {int(status)} {status.phrase}")
        return AccessDenied(status)

    def check(self, client_host: Optional[str], provided_key: Optional[str]) -> None:
        """Admit the request or raise :class:`AccessDenied`.

        :param client_host: Caller IP address without port.
        :param provided_key: Value of the ``X-API-Key`` header, if any.
        :raises AccessDenied: With 403, 429 or 401 from the first failing stage.
        """
        trusted = self.is_allowlisted(client_host)
        if self.config.allowed_networks and not trusted:
            raise self._deny(HTTPStatus.FORBIDDEN, client_host)

        # Peers without an address have no key to count against.
        if self.rate_limiter is not None and client_host and not trusted:
            if not self.rate_limiter.allow(client_host):
                raise self._deny(HTTPStatus.TOO_MANY_REQUESTS, client_host)

        if self.config.api_key is not None and not keys_match(provided_key, self.config.api_key):
            raise self._deny(HTTPStatus.UNAUTHORIZED, client_host)
