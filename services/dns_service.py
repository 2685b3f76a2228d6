"""
services/dns_service.py

Responsibility: Fetches the zone and records for a domain and reconciles a
single (type, hostname) record against the address the machine should
publish.
Does NOT: make HTTP calls directly, fetch public IPs, or parse CLI flags.
"""

from __future__ import annotations

import logging

from exceptions import ZoneNotFoundError
from providers.dns_provider import DesiredState, DnsRecord, DNSProvider, Zone

logger = logging.getLogger(__name__)


class DnsService:
    """
    Brings one DNS record in line with the machine's current address.

    Decision table for reconcile():

        existing  desired               action
        --------  --------------------  ---------
        absent    absent                unchanged
        present   absent                deleted
        absent    present               created
        present   present, differs      updated
        present   present, same         unchanged

    Collaborators:
        - DNSProvider: abstract interface satisfied by CloudflareClient
    """

    def __init__(self, dns_provider: DNSProvider) -> None:
        """
        Initialises the service with a DNS provider.

        Args:
            dns_provider: Any DNSProvider implementation (e.g. CloudflareClient).
        """
        self._provider = dns_provider

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    async def fetch_zone_and_records(self, domain: str) -> tuple[Zone, list[DnsRecord]]:
        """
        Resolves the zone for ``domain`` and lists all of its records.

        Args:
            domain: The zone's domain name, e.g. "example.com".

        Returns:
            The Zone and every record in it, in provider order.

        Raises:
            ZoneNotFoundError: If the provider has no zone named ``domain``.
            DnsProviderError: If the zone lookup or record listing fails.
        """
        logger.info("Fetching zone %s...", domain)

        zone = await self._provider.get_zone(domain)
        if zone is None:
            raise ZoneNotFoundError(f"Failed to get zone for {domain}: zone not found")

        records = await self._provider.list_records(zone.id)

        logger.info(">> Zone ID: %s", zone.id)
        logger.debug("Zone %s holds %d record(s).", zone.name, len(records))
        return zone, records

    @staticmethod
    def find_record(
        records: list[DnsRecord],
        record_type: str,
        hostname: str,
    ) -> DnsRecord | None:
        """
        Returns the first record matching ``record_type`` and ``hostname``.

        Duplicates after the first match are ignored.

        Args:
            records: The zone's records, in provider order.
            record_type: "A" or "AAAA".
            hostname: The exact record name to look for.

        Returns:
            The matching DnsRecord, or None if the record does not exist yet.
        """
        for record in records:
            if record.name == hostname and record.type == record_type:
                return record
        return None

    async def reconcile(
        self,
        zone: Zone,
        records: list[DnsRecord],
        desired: DesiredState,
    ) -> str:
        """
        Creates, updates or deletes one record so it matches ``desired``.

        At most one provider call is made. On success ``records`` is updated
        in place to reflect the change, so reconciling the same desired state
        again is a no-op.

        Args:
            zone: The zone returned by fetch_zone_and_records().
            records: The zone's records; mutated on success.
            desired: The record type, hostname, address and proxied flag.

        Returns:
            "created", "updated", "deleted" or "unchanged".

        Raises:
            DnsProviderError: If the provider call fails. Never retried.
        """
        existing = self.find_record(records, desired.record_type, desired.hostname)
        content = desired.content

        logger.info("Updating %s record for %s", desired.record_type, desired.hostname)

        if content is None:
            if existing is None:
                logger.info(">> none -> none")
                return "unchanged"

            logger.info(">> %s -> none", existing.content)
            await self._provider.delete_record(zone.id, existing.id)
            records.remove(existing)
            return "deleted"

        if existing is None:
            logger.info(">> none -> %s", content)
            created = await self._provider.create_record(
                zone.id, desired.record_type, desired.hostname, content, desired.proxied
            )
            records.append(created)
            return "created"

        logger.info(">> %s -> %s", existing.content, content)
        if existing.content == content:
            return "unchanged"

        updated = await self._provider.update_record(zone.id, existing, content, desired.proxied)
        records[records.index(existing)] = updated
        return "updated"
