"""Exception hierarchy for wifi-monitor."""

from typing import Optional


class WifiMonitorError(Exception):
    """Base class for all wifi-monitor errors."""


class ValidationError(WifiMonitorError, ValueError):
    """Invalid interface name, interval, output path or format."""


class ScanProcessError(WifiMonitorError):
    """A single scan command attempt failed or timed out."""

    def __init__(self, message: str, returncode: Optional[int] = None,
                 stderr: str = "", timed_out: bool = False):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
        self.timed_out = timed_out


class ScanFailure(WifiMonitorError):
    """A scan failed after the retry budget was spent (or was not retryable)."""

    def __init__(self, message: str, attempts: int = 1):
        super().__init__(message)
        self.attempts = attempts


class ParseError(ScanFailure):
    """The scan output parser raised internally."""


class PersistenceError(WifiMonitorError):
    """Writing scan results to an output sink failed."""
