"""
sandbox.py

Responsibility: Optional process hardening applied before the run starts.
On OpenBSD the process pledges to stdio, read-only filesystem access and
outbound networking; everywhere else sandboxing is a no-op.
Does NOT: know anything about DNS, Cloudflare or configuration.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import logging
import os
import sys
from typing import Protocol

from exceptions import SandboxError

logger = logging.getLogger(__name__)

# stdio: basic I/O, rpath: CA bundle and module reads, inet+dns: HTTPS calls
PLEDGE_PROMISES = "stdio rpath inet dns"


class Sandbox(Protocol):
    """Restricts what the current process may do for the rest of its life."""

    def restrict(self) -> None:
        ...


class NoopSandbox:
    """Sandbox used on platforms without a supported primitive, and in tests."""

    def restrict(self) -> None:
        logger.debug("Process sandboxing not available on %s, skipping.", sys.platform)


class PledgeSandbox:
    """Applies OpenBSD pledge(2) through libc."""

    def __init__(self, promises: str = PLEDGE_PROMISES) -> None:
        self._promises = promises

    def restrict(self) -> None:
        """
        Calls pledge(2) with the configured promises.

        Raises:
            SandboxError: If libc cannot be loaded or pledge(2) fails.
        """
        libc_path = ctypes.util.find_library("c")
        if libc_path is None:
            raise SandboxError("Failed to initialize pledge: libc not found")

        libc = ctypes.CDLL(libc_path, use_errno=True)
        pledge = libc.pledge
        pledge.argtypes = [ctypes.c_char_p, ctypes.c_char_p]
        pledge.restype = ctypes.c_int

        if pledge(self._promises.encode(), None) != 0:
            errno = ctypes.get_errno()
            raise SandboxError(f"Failed to initialize pledge: {os.strerror(errno)}")

        logger.debug("Pledged: %s", self._promises)


def default_sandbox() -> Sandbox:
    """Returns the strongest sandbox available on this platform."""
    if sys.platform.startswith("openbsd"):
        return PledgeSandbox()
    return NoopSandbox()
