"""Typed records produced by the iw scan parser."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional

from .constants import _STANDARD_COLUMNS


def _finite(value: Optional[float]) -> Optional[float]:
    """Map NaN and infinities to None so JSON and CSV output stay standard."""
    if value is None or math.isfinite(value):
        return value
    return None


@dataclass(frozen=True)
class DistanceEstimate:
    """Distance range derived from signal strength and frequency."""

    estimated_m: float
    min_m: float
    max_m: float
    accuracy_tier: str = "low"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimated_meters": _finite(self.estimated_m),
            "min_meters": _finite(self.min_m),
            "max_meters": _finite(self.max_m),
            "accuracy_tier": self.accuracy_tier,
        }


@dataclass(frozen=True)
class AccessPointRecord:
    """One observation of one access point in one scan pass."""

    bssid: str
    interface: str
    timestamp: str
    ssid: Optional[str] = None
    freq_mhz: Optional[int] = None
    channel: Optional[int] = None
    signal_dbm: Optional[float] = None
    last_seen_ms: Optional[int] = None
    capability: Optional[str] = None
    beacon_interval: Optional[int] = None
    country: Optional[str] = None
    standards: FrozenSet[str] = field(default_factory=frozenset)
    security: Optional[str] = None
    distance: Optional[DistanceEstimate] = None

    @property
    def display_ssid(self) -> str:
        return self.ssid or "(hidden)"

    @property
    def is_open(self) -> bool:
        return not self.security

    def _standard_columns(self) -> Dict[str, Optional[str]]:
        return {
            column: tag if tag in self.standards else None
            for tag, column in _STANDARD_COLUMNS.items()
        }

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable representation used by the snapshot sink."""
        data: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "interface": self.interface,
            "bssid": self.bssid,
            "ssid": self.ssid,
            "freq_mhz": self.freq_mhz,
            "channel": self.channel,
            "signal_dbm": self.signal_dbm,
            "last_seen_ms": self.last_seen_ms,
            "capability": self.capability,
            "beacon_interval": self.beacon_interval,
            "country": self.country,
            "security": self.security,
            "standards": sorted(self.standards),
            "distance": self.distance.to_dict() if self.distance else None,
        }
        data.update(self._standard_columns())
        return data

    def to_row(self) -> Dict[str, Any]:
        """Flat mapping keyed by the CSV column names."""
        dist = self.distance
        row: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "interface": self.interface,
            "bssid": self.bssid,
            "ssid": self.ssid,
            "freq_mhz": self.freq_mhz,
            "channel": self.channel,
            "signal_dbm": self.signal_dbm,
            "distance_meters": _finite(dist.estimated_m) if dist else None,
            "distance_min": _finite(dist.min_m) if dist else None,
            "distance_max": _finite(dist.max_m) if dist else None,
            "last_seen_ms": self.last_seen_ms,
            "capability": self.capability,
            "security": self.security,
            "beacon_interval": self.beacon_interval,
            "country": self.country,
        }
        row.update(self._standard_columns())
        return row
