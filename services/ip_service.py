"""
services/ip_service.py

Responsibility: Fetches the current public IPv4 and IPv6 addresses of the
host machine.
Does NOT: parse DNS records, interact with Cloudflare, or read config.
"""

from __future__ import annotations

import ipaddress
import logging

import httpx

from exceptions import IpFetchError
from providers.dns_provider import Address

logger = logging.getLogger(__name__)

# NOTE: each icanhazip host is reachable over one address family only and
# echoes the caller's address as plain text.
IP_PROVIDER_URLS: dict[int, str] = {
    4: "https://ipv4.icanhazip.com",
    6: "https://ipv6.icanhazip.com",
}


class IpService:
    """
    Fetches the host machine's current public addresses.

    Uses an injected httpx.AsyncClient so the service is fully testable
    without real network calls (use respx.mock in tests).

    Collaborators:
        - httpx.AsyncClient: injected; must be kept alive externally
    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        """
        Initialises the service with a shared HTTP client.

        Args:
            http_client: The httpx.AsyncClient used for the whole run.
        """
        self._client = http_client

    async def fetch_ip(self, url: str, version: int) -> Address:
        """
        Returns the address served as plain text by ``url``.

        Args:
            url: An endpoint that echoes the caller's address.
            version: The expected IP version, 4 or 6.

        Returns:
            The parsed address.

        Raises:
            IpFetchError: If the endpoint is unreachable, returns a non-2xx
                          response, or the body is not an address of the
                          expected version.
        """
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise IpFetchError(
                f"IP provider returned status {exc.response.status_code}."
            ) from exc
        except httpx.RequestError as exc:
            raise IpFetchError(
                f"Could not reach IP provider ({url}): {exc}"
            ) from exc

        text = response.text.strip()
        try:
            address = ipaddress.ip_address(text)
        except ValueError as exc:
            raise IpFetchError(f"IP provider returned an invalid address: {text!r}") from exc

        if address.version != version:
            raise IpFetchError(
                f"IP provider returned an IPv{address.version} address, expected IPv{version}."
            )
        return address

    async def resolve_ip(self, version: int) -> Address | None:
        """
        Returns the public address for one family, or None if unavailable.

        A failed lookup is logged and never raised, so the other family can
        still be reconciled.

        Args:
            version: 4 or 6.

        Returns:
            The parsed address, or None.
        """
        url = IP_PROVIDER_URLS[version]
        try:
            address = await self.fetch_ip(url, version)
        except IpFetchError as exc:
            logger.warning("IPv%d lookup failed: %s", version, exc)
            return None

        logger.debug("Current public IPv%d: %s", version, address)
        return address

    async def get_public_ips(self) -> tuple[Address | None, Address | None]:
        """
        Resolves both address families, one after the other.

        Returns:
            A ``(ipv4, ipv6)`` tuple; either element may be None.
        """
        logger.info("Fetching current IP address...")

        ipv4 = await self.resolve_ip(4)
        logger.info(">> IPv4: %s", ipv4 if ipv4 is not None else "none")

        ipv6 = await self.resolve_ip(6)
        logger.info(">> IPv6: %s", ipv6 if ipv6 is not None else "none")

        return ipv4, ipv6
