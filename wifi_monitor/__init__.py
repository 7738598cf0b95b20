"""wifi-monitor: periodic Wi-Fi access point monitoring on top of `iw scan`,
with CSV/JSON recording and signal-based distance estimates."""

from .analyze import analyze_csv
from .distance import estimate_distance
from .errors import (
    ParseError, PersistenceError, ScanFailure, ScanProcessError,
    ValidationError, WifiMonitorError,
)
from .models import AccessPointRecord, DistanceEstimate
from .monitor import LoopState, MonitoringLoop, MonitorStats
from .output import CsvSink, JsonSink, escape_csv_value, parse_format
from .parser import parse_iw_scan
from .scanner import ScanExecutor

__version__ = "1.0.0"
__all__ = [
    "AccessPointRecord",
    "DistanceEstimate",
    "estimate_distance",
    "parse_iw_scan",
    "ScanExecutor",
    "MonitoringLoop",
    "MonitorStats",
    "LoopState",
    "CsvSink",
    "JsonSink",
    "escape_csv_value",
    "parse_format",
    "analyze_csv",
    "WifiMonitorError",
    "ValidationError",
    "ScanProcessError",
    "ScanFailure",
    "ParseError",
    "PersistenceError",
]
