"""
exceptions.py

Responsibility: Defines all custom exception classes used across the application.
Does NOT: contain business logic, logging, or HTTP handling.
"""

from __future__ import annotations


class ConfigError(Exception):
    """
    Raised when the run cannot start because of missing or invalid settings.

    The usual cause is an empty or inactive Cloudflare API token. Always
    fatal: the run aborts before any record is touched.
    """


class ResolutionError(Exception):
    """
    Raised by the host resolver when the target hostname or its registrable
    domain cannot be determined.
    """


class IpFetchError(Exception):
    """
    Raised by IpService when a public IP address cannot be determined.

    This may occur due to network connectivity issues, a non-2xx response
    or a body that is not an address of the requested family.
    """


class DnsProviderError(Exception):
    """
    Raised by any DNSProvider implementation when a DNS API call fails.

    Includes a human-readable message describing the failure. The updater
    decides whether the failure is fatal for the whole run or only for one
    address family.
    """


class ZoneNotFoundError(DnsProviderError):
    """
    Raised when the provider has no zone whose name matches the domain.
    """


class SandboxError(Exception):
    """
    Raised when process-level sandboxing cannot be applied.
    """
