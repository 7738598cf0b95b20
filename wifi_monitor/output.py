"""CSV/JSON persistence sinks and console reporting for wifi-monitor."""

import csv
import enum
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

from .constants import (
    _CSV_FILENAME, _FIELDNAMES, _FORMULA_PREFIXES, _JSON_PREFIX,
)
from .errors import PersistenceError, ValidationError
from .models import AccessPointRecord
from .utils import _snapshot_stamp, _timestamp

LOG = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Sink selection
# ---------------------------------------------------------------------------

class SinkKind(enum.Enum):
    CSV = "csv"
    JSON = "json"


_FORMAT_SINKS: Dict[str, FrozenSet[SinkKind]] = {
    "csv": frozenset({SinkKind.CSV}),
    "json": frozenset({SinkKind.JSON}),
    "both": frozenset({SinkKind.CSV, SinkKind.JSON}),
}


def parse_format(fmt: str) -> FrozenSet[SinkKind]:
    """Map a ``--format`` value (csv, json, both) to the set of sink kinds."""
    try:
        return _FORMAT_SINKS[(fmt or "").lower()]
    except KeyError:
        raise ValidationError(
            f"Invalid format {fmt!r}: expected one of {', '.join(_FORMAT_SINKS)}"
        ) from None


@dataclass
class ScanContext:
    """Per-scan metadata handed to every sink."""

    interface: str
    scan_count: int
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = _timestamp()


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def escape_csv_value(value: Any) -> str:
    """Render one CSV cell.

    Values a spreadsheet would treat as a formula (leading ``=``, ``+``,
    ``-``, ``@`` or tab) are quoted, as are values containing a comma,
    quote or line break.  Quotes inside a quoted value are doubled.
    """
    if value is None:
        return ""
    text = str(value)
    if text.startswith(_FORMULA_PREFIXES) or any(c in text for c in ',"\r\n'):
        return '"' + text.replace('"', '""') + '"'
    return text


def format_csv_row(row: Dict[str, Any]) -> str:
    return ",".join(escape_csv_value(row.get(k)) for k in _FIELDNAMES)


def read_csv_rows(path: str) -> List[Dict[str, str]]:
    """Read a wifi-monitor CSV back into column → value mappings."""
    with open(path, newline="", encoding="utf-8") as fh:
        return list(csv.DictReader(fh))


class CsvSink:
    """Append one row per access point to ``<output_dir>/wifi_scan.csv``."""

    kind = SinkKind.CSV

    def __init__(self, output_dir: str):
        self.path = os.path.join(output_dir, _CSV_FILENAME)

    def write(self, records: Sequence[AccessPointRecord], context: ScanContext) -> str:
        lines = [format_csv_row(rec.to_row()) for rec in records]
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            new_file = not os.path.exists(self.path) or os.path.getsize(self.path) == 0
            with open(self.path, "a", newline="", encoding="utf-8") as fh:
                if new_file:
                    fh.write(",".join(_FIELDNAMES) + "\n")
                for line in lines:
                    fh.write(line + "\n")
        except OSError as e:
            raise PersistenceError(f"CSV write to {self.path} failed: {e}") from e
        return self.path


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def build_snapshot(records: Sequence[AccessPointRecord],
                   context: ScanContext) -> Dict[str, Any]:
    return {
        "timestamp": context.timestamp,
        "interface": context.interface,
        "scan_count": context.scan_count,
        "total_aps": len(records),
        "access_points": [rec.to_dict() for rec in records],
    }


class JsonSink:
    """Write one ``wifi_scan_<timestamp>.json`` snapshot per scan."""

    kind = SinkKind.JSON

    def __init__(self, output_dir: str):
        self.output_dir = output_dir

    def path_for(self, context: ScanContext) -> str:
        name = f"{_JSON_PREFIX}{_snapshot_stamp(context.timestamp)}.json"
        return os.path.join(self.output_dir, name)

    def write(self, records: Sequence[AccessPointRecord], context: ScanContext) -> str:
        path = self.path_for(context)
        try:
            os.makedirs(self.output_dir, exist_ok=True)
            with open(path, "w", encoding="utf-8") as fh:
                json.dump(build_snapshot(records, context), fh,
                          indent=2, ensure_ascii=False, allow_nan=False)
                fh.write("\n")
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"JSON write to {path} failed: {e}") from e
        return path


_SINK_CLASSES = {
    SinkKind.CSV: CsvSink,
    SinkKind.JSON: JsonSink,
}


def build_sinks(kinds: FrozenSet[SinkKind], output_dir: str) -> List[Any]:
    """Instantiate one sink per kind, CSV first."""
    return [_SINK_CLASSES[k](output_dir) for k in SinkKind if k in kinds]


def persist(sinks: Sequence[Any], records: Sequence[AccessPointRecord],
            context: ScanContext) -> Dict[SinkKind, str]:
    """Write ``records`` to every sink; a failing sink does not stop the rest.

    Returns the paths written, keyed by sink kind.
    """
    written: Dict[SinkKind, str] = {}
    for sink in sinks:
        try:
            written[sink.kind] = sink.write(records, context)
        except PersistenceError as e:
            LOG.error("%s", e)
    return written


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------

def _sep(char="—", width=60):
    return char * width


def format_ap_line(rank: int, rec: AccessPointRecord) -> str:
    line = f"  {rank}. {rec.display_ssid} - {rec.signal_dbm:g} dBm - {rec.bssid}"
    if rec.distance is not None:
        line += f" - ~{rec.distance.estimated_m:.1f} m"
    return line


def print_scan_report(records: Sequence[AccessPointRecord],
                      written: Optional[Dict[SinkKind, str]] = None,
                      top: int = 5):
    """Print the networks found, files written and the strongest signals."""
    from .analyze import strongest

    print(f"Networks found: {len(records)}")
    for kind, path in (written or {}).items():
        print(f"  {kind.name}: {path}")

    best = strongest(records, top)
    if best:
        print(f"\nTop-{len(best)} strongest signals:")
        for i, rec in enumerate(best, 1):
            print(format_ap_line(i, rec))
