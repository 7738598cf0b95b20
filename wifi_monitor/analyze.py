"""Offline analysis of collected scans and helpers over record lists."""

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .constants import _CHANNELS_24_CLEAR, _SIGNAL_BUCKET_FLOOR, _SIGNAL_BUCKETS
from .models import AccessPointRecord
from .output import read_csv_rows


# ---------------------------------------------------------------------------
# Record helpers
# ---------------------------------------------------------------------------

def strongest(records: Sequence[AccessPointRecord], n: int = 5) -> List[AccessPointRecord]:
    """Return the ``n`` records with the strongest non-zero signal."""
    with_signal = [r for r in records if r.signal_dbm]
    return sorted(with_signal, key=lambda r: r.signal_dbm, reverse=True)[:n]


def best_5ghz(records: Sequence[AccessPointRecord]) -> Optional[AccessPointRecord]:
    """Strongest access point above 5000 MHz, or None."""
    candidates = [r for r in records
                  if r.freq_mhz and r.freq_mhz > 5000 and r.signal_dbm is not None]
    if not candidates:
        return None
    return max(candidates, key=lambda r: r.signal_dbm)


def hidden_networks(records: Sequence[AccessPointRecord]) -> List[AccessPointRecord]:
    return [r for r in records if not (r.ssid or "").strip()]


def channel_usage(records: Sequence[AccessPointRecord]) -> List[Tuple[int, int]]:
    """(channel, access point count) pairs, busiest first."""
    counts = Counter(r.channel for r in records if r.channel)
    return counts.most_common()


def recommend_24ghz_channel(records: Sequence[AccessPointRecord]) -> Tuple[int, int]:
    """Least crowded of the non-overlapping 2.4 GHz channels (1, 6, 11)."""
    usage = dict(channel_usage(records))
    return min(((ch, usage.get(ch, 0)) for ch in _CHANNELS_24_CLEAR),
               key=lambda item: item[1])


def signal_bucket(signal_dbm: Optional[float]) -> str:
    if signal_dbm is not None:
        for floor, label in _SIGNAL_BUCKETS:
            if signal_dbm >= floor:
                return label
    return _SIGNAL_BUCKET_FLOOR


def signal_buckets(records: Sequence[AccessPointRecord]) -> Dict[str, List[AccessPointRecord]]:
    """Group records by signal quality band, strongest band first."""
    buckets: Dict[str, List[AccessPointRecord]] = {
        label: [] for _, label in _SIGNAL_BUCKETS}
    buckets[_SIGNAL_BUCKET_FLOOR] = []
    for rec in records:
        buckets[signal_bucket(rec.signal_dbm)].append(rec)
    return buckets


# ---------------------------------------------------------------------------
# CSV analysis
# ---------------------------------------------------------------------------

@dataclass
class CsvAnalysis:
    total_rows: int = 0
    unique_ssids: int = 0
    avg_signal_by_ssid: List[Tuple[str, float]] = field(default_factory=list)
    channel_counts: List[Tuple[str, int]] = field(default_factory=list)


def analyze_csv(path: str, top: int = 10) -> CsvAnalysis:
    """Aggregate a wifi-monitor CSV log.

    Rows without an SSID are left out of the per-network averages; rows
    whose signal is not a number are skipped there as well.
    """
    rows = read_csv_rows(path)

    ssids = {row.get("ssid") for row in rows if row.get("ssid")}

    sums: Dict[str, List[float]] = defaultdict(lambda: [0.0, 0])
    for row in rows:
        ssid, signal = row.get("ssid"), row.get("signal_dbm")
        if not ssid or not signal:
            continue
        try:
            value = float(signal)
        except ValueError:
            continue
        sums[ssid][0] += value
        sums[ssid][1] += 1

    averages = sorted(
        ((ssid, round(total / count, 2)) for ssid, (total, count) in sums.items()),
        key=lambda item: item[1], reverse=True,
    )[:top]

    channels = Counter(row["channel"] for row in rows if row.get("channel"))

    return CsvAnalysis(
        total_rows=len(rows),
        unique_ssids=len(ssids),
        avg_signal_by_ssid=averages,
        channel_counts=channels.most_common(),
    )


def print_analysis(result: CsvAnalysis):
    print("\n=== Data analysis ===")
    print(f"Total records : {result.total_rows}")
    print(f"Unique SSIDs  : {result.unique_ssids}")

    if result.avg_signal_by_ssid:
        print("\nAverage signal per network:")
        for ssid, avg in result.avg_signal_by_ssid:
            print(f"  {ssid}: {avg:.2f} dBm")

    if result.channel_counts:
        print("\nChannel usage (records per channel):")
        for ch, count in result.channel_counts:
            print(f"  Channel {ch}: {count} records")
