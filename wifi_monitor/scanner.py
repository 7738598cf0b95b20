"""ScanExecutor — runs ``iw dev <iface> scan`` with timeout and busy retry.

The wireless interface can be held by only one scan at a time.  When
another process (NetworkManager, wpa_supplicant, a second monitor) owns it,
``iw`` fails with ``Device or resource busy (-16)``.  That failure is
transient and is retried after a constant delay; every other failure is
raised to the caller at once.
"""

import asyncio
import logging
import os
import subprocess
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from .constants import (
    _BSS_RE, _BUSY_RE, _DEFAULT_RETRIES, _DEFAULT_RETRY_DELAY_MS, _SCAN_TIMEOUT,
)
from .errors import ParseError, ScanFailure, ScanProcessError
from .models import AccessPointRecord
from .parser import parse_iw_scan
from .utils import validate_interface

LOG = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of a successful command execution."""

    returncode: int
    stdout: str
    stderr: str
    duration_ms: int


Runner = Callable[[Sequence[str], float], Awaitable[CommandResult]]
Sleeper = Callable[[float], Awaitable[None]]


# ---------------------------------------------------------------------------
# Interface helpers
# ---------------------------------------------------------------------------

def _find_wireless_interfaces() -> List[str]:
    """Discover wireless interfaces via iw or /sys/class/net."""
    try:
        r = subprocess.run(["iw", "dev"], capture_output=True, text=True, timeout=5)
        ifaces = []
        for line in r.stdout.splitlines():
            s = line.strip()
            if s.startswith("Interface "):
                ifaces.append(s[len("Interface "):].strip())
        if ifaces:
            return ifaces
    except (OSError, subprocess.SubprocessError):
        pass
    try:
        return sorted(
            iface for iface in os.listdir("/sys/class/net")
            if os.path.exists(f"/sys/class/net/{iface}/wireless")
        )
    except OSError:
        return []


def interface_exists(iface: str) -> bool:
    """Return True if the kernel knows a network interface by this name."""
    return os.path.exists(os.path.join("/sys/class/net", iface))


def _is_busy(text: str) -> bool:
    return bool(_BUSY_RE.search(text or ""))


def _has_partial_scan(stderr: str) -> bool:
    return any(_BSS_RE.match(line) for line in stderr.split("\n"))


# ---------------------------------------------------------------------------
# Command runner
# ---------------------------------------------------------------------------

async def run_command(cmd: Sequence[str], timeout: float) -> CommandResult:
    """Run ``cmd`` without a shell, raising ScanProcessError on any failure."""
    start = time.monotonic()
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ScanProcessError(f"Cannot run {cmd[0]}: {e}") from e

    try:
        out, err = await asyncio.wait_for(proc.communicate(), timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise ScanProcessError(
            f"Command timed out after {timeout:g}s: {' '.join(cmd)}",
            timed_out=True,
        ) from None

    stdout = out.decode("utf-8", errors="replace")
    stderr = err.decode("utf-8", errors="replace")
    if proc.returncode != 0:
        detail = stderr.strip() or f"exit status {proc.returncode}"
        raise ScanProcessError(
            f"Command failed: {' '.join(cmd)}: {detail}",
            returncode=proc.returncode, stderr=stderr,
        )
    return CommandResult(
        returncode=proc.returncode,
        stdout=stdout,
        stderr=stderr,
        duration_ms=int((time.monotonic() - start) * 1000),
    )


# ---------------------------------------------------------------------------
# ScanExecutor
# ---------------------------------------------------------------------------

class ScanExecutor:
    """Run one access point scan on an interface, retrying busy failures."""

    def __init__(
        self,
        interface: str,
        use_sudo: bool = False,
        timeout: float = _SCAN_TIMEOUT,
        runner: Optional[Runner] = None,
        sleep: Optional[Sleeper] = None,
    ):
        self.interface = validate_interface(interface)
        self.use_sudo = use_sudo
        self.timeout = timeout
        self._runner = runner or run_command
        self._sleep = sleep or asyncio.sleep

        # Bookkeeping for the most recent scan() call
        self.attempts = 0
        self.retries_used = 0

    @property
    def command(self) -> List[str]:
        cmd = ["iw", "dev", self.interface, "scan"]
        return ["sudo"] + cmd if self.use_sudo else cmd

    async def scan(self, retries: int = _DEFAULT_RETRIES,
                   retry_delay_ms: int = _DEFAULT_RETRY_DELAY_MS) -> List[AccessPointRecord]:
        """Scan and parse, retrying only while the device reports busy.

        ``retries`` is the total attempt budget.  Raises ScanFailure (or its
        ParseError subclass) when the scan cannot be completed.
        """
        attempt = 1
        self.retries_used = 0
        while True:
            self.attempts = attempt
            try:
                result = await self._runner(self.command, self.timeout)
            except ScanProcessError as e:
                if _is_busy(f"{e} {e.stderr}") and attempt < retries:
                    LOG.warning("%s busy (attempt %d/%d), retrying in %d ms",
                                self.interface, attempt, retries, retry_delay_ms)
                    await self._sleep(retry_delay_ms / 1000.0)
                    self.retries_used += 1
                    attempt += 1
                    continue
                raise ScanFailure(f"Scan error: {e}", attempts=attempt) from e

            if result.stderr.strip() and not _has_partial_scan(result.stderr):
                LOG.warning("Scan warning: %s", result.stderr.strip())

            try:
                return parse_iw_scan(result.stdout, self.interface)
            except Exception as e:
                raise ParseError(f"Parse error: {e}", attempts=attempt) from e
