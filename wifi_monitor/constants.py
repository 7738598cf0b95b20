"""Global constants for wifi-monitor."""

import re
from typing import Dict, List, Pattern, Tuple

# Defaults (CLI and MonitoringLoop)
_DEFAULT_INTERFACE = "wlp3s0"
_DEFAULT_INTERVAL_MS = 5000
_DEFAULT_OUTPUT_DIR = "./wifi_data"
_DEFAULT_FORMAT = "both"
_DEFAULT_TOP = 5

# Interval clamp (ms)
_MIN_INTERVAL_MS = 1000
_MAX_INTERVAL_MS = 3_600_000

# Scan execution
_SCAN_TIMEOUT = 10.0          # seconds per attempt
_DEFAULT_RETRIES = 3
_DEFAULT_RETRY_DELAY_MS = 1000

# Consecutive failures after which the monitor prints an advisory
_FAILURE_ADVISORY_THRESHOLD = 5

# Distance model
_TX_POWER_DBM = 20.0
_PATH_LOSS_EXPONENT = 3.0
_FSPL_CONSTANT = 32.44        # free-space path loss constant for MHz / km
_UNCERTAINTY_LOW = 0.6        # -40 %
_UNCERTAINTY_HIGH = 1.4       # +40 %

# Interface name rule (kernel IFNAMSIZ is 16)
_INTERFACE_RE: Pattern[str] = re.compile(r"^[A-Za-z0-9_-]{1,16}$")

# iw scan failure produced when another process holds the radio
_BUSY_RE: Pattern[str] = re.compile(
    r"Device or resource busy|\(-16\)|\bEBUSY\b", re.IGNORECASE)

# ---------------------------------------------------------------------------
# iw scan output patterns
# ---------------------------------------------------------------------------

_BSS_RE = re.compile(r"^BSS ([0-9a-f:]{17})")

# Scalar field lines, tried in order; the first match consumes the line.
_FIELD_PATTERNS: List[Tuple[str, Pattern[str], type]] = [
    ("freq_mhz", re.compile(r"^\s*freq:\s*(\d+)"), int),
    ("signal_dbm", re.compile(r"^\s*signal:\s*(-?\d+(?:\.\d+)?)\s*dBm"), float),
    ("last_seen_ms", re.compile(r"^\s*last seen:\s*(\d+)\s*ms"), int),
    ("ssid", re.compile(r"^\s*SSID:\s*(.*)"), str),
    ("channel", re.compile(r"^\s*DS Parameter set:\s*channel\s*(\d+)"), int),
    ("capability", re.compile(r"^\s*capability:\s*(.*)"), str),
    ("beacon_interval", re.compile(r"^\s*beacon int(?:erval)?:\s*(\d+)"), int),
    ("country", re.compile(r"^\s*Country:\s*([A-Z]{2})"), str),
]

# Capability element headers → standard tag
_STANDARD_PATTERNS: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"^\s*HT capabilities"), "802.11n"),
    (re.compile(r"^\s*VHT capabilities"), "802.11ac"),
    (re.compile(r"^\s*HE capabilities"), "802.11ax"),
]

# Security markers, searched anywhere in a line; all that match append.
_SECURITY_PATTERNS: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"WPA:\s*(?:\*\s*)?Version"), "WPA1"),
    (re.compile(r"RSN:\s*(?:\*\s*)?Version"), "WPA2"),
    (re.compile(r"WLAN_KEY_MGMT_SAE|Authentication suites:.*\bSAE\b"), "WPA3"),
]

_STANDARD_COLUMNS: Dict[str, str] = {
    "802.11n": "ht_cap",
    "802.11ac": "vht_cap",
    "802.11ax": "he_cap",
}

# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

_CSV_FILENAME = "wifi_scan.csv"
_JSON_PREFIX = "wifi_scan_"

# CSV column names
_FIELDNAMES = [
    "timestamp",
    "interface",
    "bssid",
    "ssid",
    "freq_mhz",
    "channel",
    "signal_dbm",
    "distance_meters",
    "distance_min",
    "distance_max",
    "last_seen_ms",
    "capability",
    "security",
    "beacon_interval",
    "country",
    "ht_cap",
    "vht_cap",
    "he_cap",
]

# Leading characters a spreadsheet would evaluate as a formula
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t")

# Non-overlapping 2.4 GHz channels
_CHANNELS_24_CLEAR: List[int] = [1, 6, 11]

# Signal strength bands (lower bound in dBm, label)
_SIGNAL_BUCKETS: List[Tuple[float, str]] = [
    (-50, "Excellent"),
    (-60, "Good"),
    (-70, "Fair"),
    (-80, "Weak"),
]
_SIGNAL_BUCKET_FLOOR = "Poor"

_BANNER = r"""
 __      __ _  ___  _     __  __               _  _
 \ \    / /(_)| __|(_)   |  \/  | ___  _ _   (_)| |_  ___  _ _
  \ \/\/ / | || _| | |   | |\/| |/ _ \| ' \  | ||  _|/ _ \| '_|
   \_/\_/  |_||_|  |_|   |_|  |_|\___/|_||_| |_| \__|\___/|_|
"""
