"""
updater.py

Responsibility: Runs one dynamic DNS refresh end to end and maps its outcome
to a process exit code.
Does NOT: parse flags, configure logging, or call the Cloudflare API
directly; those are delegated to config, logger and the provider client.
"""

from __future__ import annotations

import logging

import httpx

from config import Settings
from exceptions import ConfigError, DnsProviderError, ResolutionError
from providers.cloudflare_client import create_verified_client
from providers.dns_provider import Address, DesiredState, RECORD_TYPE_VERSIONS, RecordType
from services.dns_service import DnsService
from services.host_service import resolve_host_and_domain
from services.ip_service import IpService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


async def run_update(settings: Settings) -> int:
    """
    Performs a single refresh of the hostname's A and AAAA records.

    Order of work:
        1. hostname and domain (no network),
        2. token check and verification, public IPs, zone and records,
        3. reconcile A with IPv4, then AAAA with IPv6.

    An empty token is rejected by create_verified_client() before any
    request is sent.

    A failure while reconciling one family does not stop the other family
    from being attempted, but still fails the run.

    Args:
        settings: The resolved run settings.

    Returns:
        EXIT_OK on full success, EXIT_FAILURE otherwise.
    """
    logger.info("Beginning dynamic DNS refresh")

    try:
        hostname, domain = resolve_host_and_domain(settings.hostname, settings.domain)
    except ResolutionError as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE

    async with httpx.AsyncClient(timeout=settings.timeout) as http_client:
        try:
            provider = await create_verified_client(http_client, settings.token)
        except ConfigError as exc:
            logger.error("%s", exc)
            return EXIT_FAILURE
        except DnsProviderError as exc:
            logger.error("Error while verifying API token: %s", exc)
            return EXIT_FAILURE

        ipv4, ipv6 = await IpService(http_client).get_public_ips()

        dns_service = DnsService(provider)
        try:
            zone, records = await dns_service.fetch_zone_and_records(domain)
        except DnsProviderError as exc:
            logger.error("%s", exc)
            return EXIT_FAILURE

        addresses: dict[RecordType, Address | None] = {"A": ipv4, "AAAA": ipv6}
        failures: dict[str, DnsProviderError] = {}

        for record_type, address in addresses.items():
            desired = DesiredState(
                record_type=record_type,
                hostname=hostname,
                address=address,
                proxied=settings.proxied,
            )
            try:
                await dns_service.reconcile(zone, records, desired)
            except DnsProviderError as exc:
                logger.error(">> Error: %s", exc)
                failures[record_type] = exc

    if failures:
        for record_type, exc in failures.items():
            logger.error(
                "Failed to update IPv%d DNS record: %s",
                RECORD_TYPE_VERSIONS[record_type],
                exc,
            )
        return EXIT_FAILURE

    logger.info("Finished dynamic DNS refresh")
    return EXIT_OK
