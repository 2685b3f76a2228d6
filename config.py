"""
config.py

Responsibility: Turns command-line flags and the environment into a Settings
object for a single run.
Does NOT: validate the token against Cloudflare or resolve hostnames.
"""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass

TOKEN_ENV_VAR = "CLOUDFLARE_API_TOKEN"

DEFAULT_TIMEOUT = 30.0

_TRUE_VALUES = {"1", "t", "true", "y", "yes", "on"}
_FALSE_VALUES = {"0", "f", "false", "n", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Everything a run needs to know, resolved from flags and environment."""

    # Record name to refresh; empty means "use the machine hostname"
    hostname: str = ""

    # Zone name; empty means "derive from the hostname"
    domain: str = ""

    # Whether created/updated records are proxied through Cloudflare
    proxied: bool = False

    # Cloudflare API token
    token: str = ""

    # Per-request HTTP timeout in seconds
    timeout: float = DEFAULT_TIMEOUT

    verbose: bool = False


def parse_bool(value: str) -> bool:
    """
    Parses a boolean flag value the way Go's flag package does.

    Raises:
        argparse.ArgumentTypeError: If ``value`` is not a recognised boolean.
    """
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError("timeout must be greater than zero")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloudflare-ddns",
        description=(
            "Point the A and AAAA records of a hostname at this machine's "
            "public IPv4 and IPv6 addresses on Cloudflare."
        ),
    )
    parser.add_argument(
        "-hostname", "--hostname",
        default="",
        help="Hostname to refresh (default: machine hostname)",
    )
    parser.add_argument(
        "-domain", "--domain",
        default="",
        help="Domain to refresh (default: derived from value of -hostname)",
    )
    parser.add_argument(
        "-proxy", "--proxy",
        dest="proxied",
        nargs="?",
        const=True,
        default=False,
        type=parse_bool,
        help="Whether the records should be proxied (default: false)",
    )
    parser.add_argument(
        "-token", "--token",
        default=None,
        help=f"Cloudflare API token (can also be passed via {TOKEN_ENV_VAR} variable)",
    )
    parser.add_argument(
        "-timeout", "--timeout",
        default=DEFAULT_TIMEOUT,
        type=_positive_float,
        help=f"HTTP timeout in seconds for every request (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "-verbose", "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> Settings:
    """
    Parses command-line arguments into Settings.

    Args:
        argv: Arguments without the program name; defaults to sys.argv[1:].

    Returns:
        The resolved Settings. The token falls back to the
        CLOUDFLARE_API_TOKEN environment variable when -token is not given.
    """
    args = build_parser().parse_args(argv)

    token = args.token if args.token is not None else os.environ.get(TOKEN_ENV_VAR, "")

    return Settings(
        hostname=args.hostname.strip(),
        domain=args.domain.strip(),
        proxied=args.proxied,
        token=token.strip(),
        timeout=args.timeout,
        verbose=args.verbose,
    )
