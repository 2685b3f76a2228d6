"""
services/host_service.py

Responsibility: Determines which hostname to refresh and which registrable
domain (Cloudflare zone) it belongs to.
Does NOT: make HTTP calls or touch DNS records.
"""

from __future__ import annotations

import ipaddress
import logging
import socket

import tldextract

from exceptions import ResolutionError

logger = logging.getLogger(__name__)

# NOTE: suffix_list_urls=() and cache_dir=None pin tldextract to its bundled
# public suffix snapshot, so domain derivation never touches the network.
_extract = tldextract.TLDExtract(
    cache_dir=None,
    suffix_list_urls=(),
    include_psl_private_domains=True,
)


def normalize_hostname(name: str) -> str:
    """Lowercases a DNS name and drops a trailing root dot."""
    return name.strip().rstrip(".").lower()


def local_hostname() -> str:
    """
    Returns the machine's network hostname.

    Raises:
        ResolutionError: If the hostname cannot be read or is empty.
    """
    try:
        name = socket.gethostname()
    except OSError as exc:
        raise ResolutionError(f"Failed to get hostname: {exc}") from exc

    if not name:
        raise ResolutionError("Failed to get hostname: empty hostname")
    return name


def _is_ip_literal(name: str) -> bool:
    try:
        ipaddress.ip_address(name)
    except ValueError:
        return False
    return True


def registrable_domain(hostname: str) -> str:
    """
    Derives the registrable domain (public suffix plus one label).

    Args:
        hostname: A fully-qualified name, e.g. "home.example.co.uk".

    Names on a TLD missing from the public suffix list fall back to the
    list's default rule, so "box.home.lan" gives "home.lan".

    Returns:
        The registrable domain, e.g. "example.co.uk".

    Raises:
        ResolutionError: If the name has no registrable domain, e.g.
                         "localhost", "co.uk" or an IP literal.
    """
    ext = _extract(hostname)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"

    # Unlisted TLD: the implicit "*" rule makes the last label the suffix.
    labels = hostname.split(".")
    if ext.domain and not ext.suffix and len(labels) >= 2 and not _is_ip_literal(hostname):
        return ".".join(labels[-2:])

    raise ResolutionError(f"Failed to get effective TLD: cannot derive a domain from {hostname!r}")


def resolve_host_and_domain(
    hostname_override: str | None = None,
    domain_override: str | None = None,
) -> tuple[str, str]:
    """
    Resolves the target hostname and its domain.

    Args:
        hostname_override: Explicit hostname; falls back to the machine
            hostname when empty.
        domain_override: Explicit domain; falls back to the registrable
            domain of the hostname when empty.

    Returns:
        A ``(hostname, domain)`` tuple, both lowercase.

    Raises:
        ResolutionError: If either value cannot be determined.
    """
    hostname = normalize_hostname(hostname_override or local_hostname())
    if not hostname:
        raise ResolutionError("Failed to get hostname: empty hostname")

    if domain_override:
        domain = normalize_hostname(domain_override)
    else:
        domain = registrable_domain(hostname)

    logger.info(">> Hostname: %s", hostname)
    logger.info(">> Domain: %s", domain)

    return hostname, domain
