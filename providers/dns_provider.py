"""
providers/dns_provider.py

Responsibility: Defines the DNSProvider Protocol and the value objects that
flow between the provider client and the reconciliation service.
Does NOT: make HTTP calls or implement any provider logic.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Literal, Protocol, Union, runtime_checkable

# An address for one family; None stands for "no address obtained".
Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

RecordType = Literal["A", "AAAA"]

# IP version served by each managed record type
RECORD_TYPE_VERSIONS: dict[str, int] = {"A": 4, "AAAA": 6}


# ---------------------------------------------------------------------------
# Value objects — stable shapes returned by all DNSProvider implementations
# ---------------------------------------------------------------------------


@dataclass
class DnsRecord:
    """
    Represents a single DNS record as returned by a DNSProvider.

    Records are fetched fresh on every run and never persisted locally.
    """

    # Provider-assigned unique identifier for the record
    id: str

    # Fully-qualified DNS name, e.g. "home.example.com"
    name: str

    # Record value; for A/AAAA records the address as text
    content: str

    # Record type, e.g. "A" or "AAAA"
    type: str

    # Whether the record is proxied through the provider's edge network
    proxied: bool = False

    # TTL in seconds; 1 means "automatic" on Cloudflare
    ttl: int = 1

    # The zone ID to which this record belongs
    zone_id: str = ""


@dataclass(frozen=True)
class Zone:
    """A provider zone: the opaque identifier plus the domain it serves."""

    id: str
    name: str


@dataclass(frozen=True)
class DesiredState:
    """
    What a single record should look like after reconciliation.

    ``address`` is None when the machine has no address for the record's
    family, which means any existing record must be removed.
    """

    record_type: RecordType
    hostname: str
    address: Address | None
    proxied: bool = False

    @property
    def content(self) -> str | None:
        return None if self.address is None else str(self.address)


# ---------------------------------------------------------------------------
# Abstract interface: the provider contract DnsService depends on
# ---------------------------------------------------------------------------


@runtime_checkable
class DNSProvider(Protocol):
    """
    Abstract protocol for DNS zone and record management.

    DnsService depends on this abstraction, never on the concrete
    CloudflareClient, so the reconciliation logic can be exercised with
    simple test doubles.
    """

    async def verify_token(self) -> str:
        """
        Checks the configured credential against the provider.

        Returns:
            The credential status reported by the provider, e.g. "active".

        Raises:
            DnsProviderError: If the API call fails.
        """
        ...

    async def get_zone(self, name: str) -> Zone | None:
        """
        Looks up a zone by its exact domain name.

        Args:
            name: The domain name, e.g. "example.com".

        Returns:
            The matching Zone, or None if the account has no such zone.

        Raises:
            DnsProviderError: If the API call fails.
        """
        ...

    async def list_records(self, zone_id: str) -> list[DnsRecord]:
        """
        Returns every DNS record in the given zone, across all pages.

        Args:
            zone_id: The provider-assigned zone identifier.

        Returns:
            A list of DnsRecord instances in provider order, possibly empty.

        Raises:
            DnsProviderError: If the API call fails.
        """
        ...

    async def create_record(
        self,
        zone_id: str,
        record_type: str,
        name: str,
        content: str,
        proxied: bool,
    ) -> DnsRecord:
        """
        Creates a new record in the given zone.

        Raises:
            DnsProviderError: If the API call fails.
        """
        ...

    async def update_record(
        self,
        zone_id: str,
        record: DnsRecord,
        content: str,
        proxied: bool,
    ) -> DnsRecord:
        """
        Changes the content and proxied flag of an existing record.

        Raises:
            DnsProviderError: If the API call fails.
        """
        ...

    async def delete_record(self, zone_id: str, record_id: str) -> None:
        """
        Deletes a record from the given zone.

        Raises:
            DnsProviderError: If the API call fails.
        """
        ...
