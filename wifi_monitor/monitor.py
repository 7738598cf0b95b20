"""MonitoringLoop — periodic scanning on a fixed-period asyncio timer.

The timer fires every ``interval_ms`` regardless of how long a cycle
takes.  A cycle in flight puts the loop in the SCANNING state; ticks that
arrive meanwhile are dropped and counted rather than starting a second
``iw`` scan against the same radio.
"""

import asyncio
import enum
import logging
import platform
import signal
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence

from .constants import (
    _BANNER, _DEFAULT_INTERVAL_MS, _DEFAULT_RETRIES, _DEFAULT_RETRY_DELAY_MS,
    _DEFAULT_TOP, _FAILURE_ADVISORY_THRESHOLD,
)
from .errors import ScanFailure
from .models import AccessPointRecord
from .output import ScanContext, _sep, persist, print_scan_report
from .scanner import ScanExecutor, _find_wireless_interfaces, interface_exists
from .utils import clamp_interval

LOG = logging.getLogger(__name__)


class LoopState(enum.Enum):
    IDLE = "idle"
    SCANNING = "scanning"


@dataclass
class MonitorStats:
    scan_count: int = 0
    success_count: int = 0
    failure_count: int = 0
    consecutive_failures: int = 0
    dropped_ticks: int = 0


class MonitoringLoop:
    def __init__(
        self,
        executor: ScanExecutor,
        sinks: Sequence[Any] = (),
        interval_ms: int = _DEFAULT_INTERVAL_MS,
        retries: int = _DEFAULT_RETRIES,
        retry_delay_ms: int = _DEFAULT_RETRY_DELAY_MS,
        output_dir: Optional[str] = None,
        top: int = _DEFAULT_TOP,
        quiet: bool = False,
        on_scan: Optional[Callable[[List[AccessPointRecord], MonitorStats], None]] = None,
    ):
        self.executor = executor
        self.interface = executor.interface
        self.sinks = list(sinks)
        self.interval_ms = clamp_interval(interval_ms)
        self.retries = retries
        self.retry_delay_ms = retry_delay_ms
        self.output_dir = output_dir
        self.top = top
        self.quiet = quiet
        self.on_scan = on_scan

        self.state = LoopState.IDLE
        self.running = False
        self.stats = MonitorStats()

        self._timer: Optional[asyncio.Task] = None
        self._cycles: List[asyncio.Task] = []
        self._stopped: Optional[asyncio.Event] = None

    # -----------------------------------------------------------------------
    # One scan cycle
    # -----------------------------------------------------------------------

    async def scan_once(self) -> List[AccessPointRecord]:
        """Run one scan, persist and report it.  ScanFailure propagates."""
        if not self.quiet:
            print(f"\n[{datetime.now():%Y-%m-%d %H:%M:%S}] Scanning {self.interface}...")
        self.state = LoopState.SCANNING
        try:
            records = await self.executor.scan(self.retries, self.retry_delay_ms)
        except ScanFailure:
            self.stats.failure_count += 1
            self.stats.consecutive_failures += 1
            raise
        finally:
            self.state = LoopState.IDLE

        self.stats.success_count += 1
        self.stats.consecutive_failures = 0

        context = ScanContext(interface=self.interface,
                              scan_count=self.stats.scan_count)
        written = persist(self.sinks, records, context)
        self.stats.scan_count += 1

        try:
            if not self.quiet:
                print_scan_report(records, written, self.top)
            if self.on_scan is not None:
                self.on_scan(records, self.stats)
        except Exception:
            LOG.exception("Post-scan hook failed on %s", self.interface)
        return records

    async def _cycle(self):
        try:
            await self.scan_once()
        except ScanFailure as e:
            LOG.error("Scan failed on %s: %s", self.interface, e)
            if self.stats.consecutive_failures > _FAILURE_ADVISORY_THRESHOLD:
                LOG.warning(
                    "%d consecutive scan failures on %s; check that the interface "
                    "is up and that iw has the required privileges",
                    self.stats.consecutive_failures, self.interface)
        except Exception:
            LOG.exception("Unexpected error in scan cycle on %s", self.interface)

    # -----------------------------------------------------------------------
    # Timer
    # -----------------------------------------------------------------------

    def _tick(self):
        if self.state is LoopState.SCANNING:
            self.stats.dropped_ticks += 1
            LOG.debug("Previous scan still running on %s, tick dropped",
                      self.interface)
            return
        # Claim the slot now so a tick before the task starts is dropped too
        self.state = LoopState.SCANNING
        task = asyncio.ensure_future(self._cycle())
        self._cycles.append(task)
        task.add_done_callback(self._cycles.remove)

    async def _timer_loop(self):
        interval = self.interval_ms / 1000.0
        while self.running:
            await asyncio.sleep(interval)
            if not self.running:
                break
            self._tick()

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    async def start(self):
        """Scan immediately, then keep scanning every ``interval_ms``.

        Exits the process with status 1 if the interface does not exist.
        """
        if self.running:
            LOG.warning("Monitoring already running on %s", self.interface)
            return
        if not interface_exists(self.interface):
            LOG.error("Interface %s not found", self.interface)
            print(f"Error: interface {self.interface} not found.")
            found = _find_wireless_interfaces()
            if found:
                print(f"Available wireless interfaces: {', '.join(found)}")
            sys.exit(1)

        if not self.quiet:
            self._print_header()

        self.running = True
        self._stopped = asyncio.Event()
        await self._cycle()
        if self.running:
            self._timer = asyncio.ensure_future(self._timer_loop())

    def stop(self) -> Optional[MonitorStats]:
        """Stop the timer and report totals.  In-flight scans still finish."""
        if not self.running:
            return None
        if not self.quiet:
            print("\nStopping monitoring...")
        self.running = False
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._stopped is not None:
            self._stopped.set()
        if not self.quiet:
            self._print_summary()
        return self.stats

    async def run_forever(self):
        """Start, stop on SIGINT/SIGTERM, and wait for in-flight cycles."""
        loop = asyncio.get_running_loop()
        if platform.system() != "Windows":
            loop.add_signal_handler(signal.SIGINT, self.stop)
            loop.add_signal_handler(signal.SIGTERM, self.stop)

        await self.start()
        if self._stopped is not None:
            await self._stopped.wait()
        if self._cycles:
            await asyncio.gather(*self._cycles, return_exceptions=True)

    # -----------------------------------------------------------------------
    # Console
    # -----------------------------------------------------------------------

    def _print_header(self):
        print(_BANNER)
        print(f"Interface : {self.interface}")
        print(f"Interval  : {self.interval_ms / 1000:g} s")
        print(f"Outputs   : {', '.join(s.kind.value for s in self.sinks) or 'none'}")
        if self.output_dir:
            print(f"Directory : {self.output_dir}")
        print("Running continuously  |  Press Ctrl+C to stop")
        print(_sep())

    def _print_summary(self):
        s = self.stats
        print(_sep())
        print(f"  Scans completed : {s.scan_count}")
        print(f"  Failed cycles   : {s.failure_count}")
        if s.dropped_ticks:
            print(f"  Skipped ticks   : {s.dropped_ticks}")
        if self.output_dir:
            print(f"  Data saved to   : {self.output_dir}")
