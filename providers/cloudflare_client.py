"""
providers/cloudflare_client.py

Responsibility: Implements the DNSProvider protocol using the Cloudflare REST API.
All Cloudflare HTTP calls are concentrated here — no other file may call the
Cloudflare API directly.
Does NOT: read configuration, decide what to change, or fetch public IPs.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from exceptions import ConfigError, DnsProviderError
from providers.dns_provider import DnsRecord, Zone

logger = logging.getLogger(__name__)

_CLOUDFLARE_BASE = "https://api.cloudflare.com/client/v4"

# Largest page size accepted by the dns_records listing endpoint
_RECORDS_PER_PAGE = 100


class CloudflareClient:
    """
    Implements DNSProvider for the Cloudflare DNS REST API (v4).

    All outbound Cloudflare requests go through the injected httpx.AsyncClient,
    making this class fully testable without real network calls (use respx.mock).

    Collaborators:
        - httpx.AsyncClient: injected HTTP client; must be kept alive externally
        - DNSProvider: this class satisfies the protocol contract
    """

    def __init__(self, http_client: httpx.AsyncClient, api_token: str) -> None:
        """
        Initialises the client with an HTTP client and a Cloudflare API token.

        Args:
            http_client: The httpx.AsyncClient used for the whole run.
            api_token: A Cloudflare API token with Zone:Read and DNS:Edit permissions.
        """
        self._client = http_client
        self._headers = {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
        }

    # ---------------------------------------------------------------------------
    # DNSProvider implementation
    # ---------------------------------------------------------------------------

    async def verify_token(self) -> str:
        """
        Verifies the API token and returns its status.

        Returns:
            The token status reported by Cloudflare ("active", "disabled",
            "expired").

        Raises:
            DnsProviderError: If the Cloudflare API returns an error.
        """
        url = f"{_CLOUDFLARE_BASE}/user/tokens/verify"

        logger.debug("GET %s", url)
        data = await self._request("GET", url)

        return (data.get("result") or {}).get("status", "")

    async def get_zone(self, name: str) -> Zone | None:
        """
        Looks up a zone by exact domain name.

        Args:
            name: The zone's domain name, e.g. "example.com".

        Returns:
            The first Zone whose name equals ``name``, or None.

        Raises:
            DnsProviderError: If the Cloudflare API returns an error.
        """
        url = f"{_CLOUDFLARE_BASE}/zones"
        params = {"name": name}

        logger.debug("GET %s params=%s", url, params)
        data = await self._request("GET", url, params=params)

        for raw in data.get("result") or []:
            if raw.get("name") == name:
                return Zone(id=raw["id"], name=raw["name"])
        return None

    async def list_records(self, zone_id: str) -> list[DnsRecord]:
        """
        Returns all DNS records in the given Cloudflare zone.

        Follows ``result_info.total_pages`` until every page has been read.

        Args:
            zone_id: The Cloudflare zone ID.

        Returns:
            A list of DnsRecord instances in API order, possibly empty.

        Raises:
            DnsProviderError: If any page request fails.
        """
        url = f"{_CLOUDFLARE_BASE}/zones/{zone_id}/dns_records"
        records: list[DnsRecord] = []
        page = 1

        while True:
            params = {"page": page, "per_page": _RECORDS_PER_PAGE}
            logger.debug("GET %s (list) params=%s", url, params)
            data = await self._request("GET", url, params=params)

            records.extend(self._parse_record(r) for r in data.get("result") or [])

            total_pages = (data.get("result_info") or {}).get("total_pages", 1)
            if page >= total_pages:
                break
            page += 1

        return records

    async def create_record(
        self,
        zone_id: str,
        record_type: str,
        name: str,
        content: str,
        proxied: bool,
    ) -> DnsRecord:
        """
        Creates a new record in the given Cloudflare zone.

        Args:
            zone_id: The Cloudflare zone ID.
            record_type: "A" or "AAAA".
            name: The fully-qualified DNS name for the new record.
            content: The address for the new record.
            proxied: Whether traffic is routed through Cloudflare's edge.

        Returns:
            The newly created DnsRecord.

        Raises:
            DnsProviderError: If the Cloudflare API returns an error.
        """
        url = f"{_CLOUDFLARE_BASE}/zones/{zone_id}/dns_records"
        payload: dict[str, Any] = {
            "type": record_type,
            "name": name,
            "content": content,
            "ttl": 1,      # 1 = automatic TTL on Cloudflare
            "proxied": proxied,
        }

        logger.debug("POST %s payload=%s", url, payload)
        data = await self._request("POST", url, json=payload)

        return self._parse_record(data["result"])

    async def update_record(
        self,
        zone_id: str,
        record: DnsRecord,
        content: str,
        proxied: bool,
    ) -> DnsRecord:
        """
        Updates the content and proxied flag of an existing record.

        Uses PATCH so that other record attributes (TTL, comment, tags) are
        left as they are.

        Args:
            zone_id: The Cloudflare zone ID.
            record: The existing DnsRecord to update.
            content: The new address.
            proxied: The new proxied flag.

        Returns:
            The updated DnsRecord.

        Raises:
            DnsProviderError: If the Cloudflare API returns an error.
        """
        url = f"{_CLOUDFLARE_BASE}/zones/{zone_id}/dns_records/{record.id}"
        payload: dict[str, Any] = {
            "content": content,
            "proxied": proxied,
        }

        logger.debug("PATCH %s payload=%s", url, payload)
        data = await self._request("PATCH", url, json=payload)

        return self._parse_record(data["result"])

    async def delete_record(self, zone_id: str, record_id: str) -> None:
        """
        Deletes a DNS record from the given Cloudflare zone.

        Args:
            zone_id: The Cloudflare zone ID.
            record_id: The Cloudflare-assigned unique record identifier.

        Raises:
            DnsProviderError: If the Cloudflare API returns an error.
        """
        url = f"{_CLOUDFLARE_BASE}/zones/{zone_id}/dns_records/{record_id}"

        logger.debug("DELETE %s", url)
        await self._request("DELETE", url)

    # ---------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Sends an authenticated HTTP request to the Cloudflare API.

        Args:
            method: HTTP verb ("GET", "POST", "PATCH", "DELETE").
            url: Full URL of the Cloudflare API endpoint.
            params: Optional query-string parameters.
            json: Optional JSON request body.

        Returns:
            The parsed JSON response body as a dict.

        Raises:
            DnsProviderError: If the HTTP call fails, the body is not JSON,
                              or the API returns success=false.
        """
        try:
            response = await self._client.request(
                method, url, headers=self._headers, params=params, json=json
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DnsProviderError(
                f"Cloudflare API error {exc.response.status_code} for {method} {url}: "
                f"{exc.response.text}"
            ) from exc
        except httpx.RequestError as exc:
            raise DnsProviderError(
                f"Network error calling Cloudflare API ({method} {url}): {exc}"
            ) from exc

        try:
            body: dict[str, Any] = response.json()
        except ValueError as exc:
            raise DnsProviderError(
                f"Cloudflare API returned a non-JSON body for {method} {url}"
            ) from exc

        # NOTE: Cloudflare wraps all responses in {"success": bool, "result": ...}
        if not body.get("success", False):
            errors = body.get("errors", [])
            raise DnsProviderError(
                f"Cloudflare API returned success=false for {method} {url}. "
                f"Errors: {errors}"
            )

        return body

    @staticmethod
    def _parse_record(raw: dict[str, Any]) -> DnsRecord:
        """
        Converts a raw Cloudflare API record dict into a typed DnsRecord.

        Args:
            raw: A single record object from the Cloudflare API response.

        Returns:
            A DnsRecord populated from the raw dict.
        """
        return DnsRecord(
            id=raw["id"],
            name=raw["name"],
            content=raw["content"],
            type=raw["type"],
            proxied=raw.get("proxied", False),
            ttl=raw.get("ttl", 1),
            zone_id=raw.get("zone_id", ""),
        )


async def create_verified_client(
    http_client: httpx.AsyncClient,
    api_token: str,
) -> CloudflareClient:
    """
    Builds a CloudflareClient and checks that its token is usable.

    Args:
        http_client: The httpx.AsyncClient used for the whole run.
        api_token: The Cloudflare API token.

    Returns:
        A CloudflareClient whose token Cloudflare reports as active.

    Raises:
        ConfigError: If the token is empty or not active.
        DnsProviderError: If the verification call itself fails.
    """
    if not api_token:
        raise ConfigError(
            "Missing -token flag or CLOUDFLARE_API_TOKEN environment variable"
        )

    client = CloudflareClient(http_client, api_token)
    status = await client.verify_token()
    if status != "active":
        raise ConfigError(f"Error while verifying API token: token is {status or 'unknown'}")

    logger.debug("API token verified (status=%s).", status)
    return client
