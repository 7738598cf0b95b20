"""Parser for ``iw dev <iface> scan`` output.

The text is a sequence of station sections, each opened by a header line::

    BSS 00:11:22:33:44:55(on wlan0)
    	freq: 2437
    	signal: -48.00 dBm
    	SSID: HomeNet
    	RSN:	 * Version: 1
    	...

Parsing is a left fold over the lines.  The accumulator is the partial
record of the section being read (``None`` before the first header); a
header line finalizes the open partial and starts a new one.  Nothing is
shared between calls.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from .constants import (
    _BSS_RE, _FIELD_PATTERNS, _SECURITY_PATTERNS, _STANDARD_PATTERNS,
)
from .distance import estimate_distance
from .models import AccessPointRecord
from .utils import _timestamp

# Partial record: the header's BSSID plus field values seen so far.
_Partial = Dict[str, Any]


def _open_partial(bssid: str, interface: str) -> _Partial:
    return {
        "bssid": bssid,
        "interface": interface,
        "timestamp": _timestamp(),
        "standards": set(),
    }


def _apply_line(partial: _Partial, line: str) -> None:
    """Fold one non-header line into the open partial record."""
    for key, pattern, cast in _FIELD_PATTERNS:
        m = pattern.match(line)
        if m:
            value = m.group(1)
            if key == "capability":
                value = value.strip()
            partial[key] = cast(value)
            return

    for pattern, tag in _STANDARD_PATTERNS:
        if pattern.match(line):
            partial["standards"].add(tag)
            return

    for pattern, tag in _SECURITY_PATTERNS:
        if pattern.search(line):
            partial["security"] = partial.get("security", "") + tag + " "


def _finalize(partial: _Partial) -> AccessPointRecord:
    """Freeze a partial record, attaching a distance estimate when possible."""
    fields = dict(partial)
    fields["standards"] = frozenset(fields["standards"])
    signal = fields.get("signal_dbm")
    freq = fields.get("freq_mhz")
    # Zero signal or frequency is treated as missing.
    if signal and freq:
        fields["distance"] = estimate_distance(signal, freq)
    return AccessPointRecord(**fields)


def _step(partial: Optional[_Partial], line: str,
          interface: str) -> Tuple[Optional[_Partial], Optional[AccessPointRecord]]:
    """One fold step: returns the new accumulator and any finalized record."""
    m = _BSS_RE.match(line)
    if m:
        emitted = _finalize(partial) if partial is not None else None
        return _open_partial(m.group(1), interface), emitted
    if partial is not None:
        _apply_line(partial, line)
    return partial, None


def iter_iw_scan(lines: Iterable[str], interface: str) -> Iterable[AccessPointRecord]:
    """Yield access point records from ``iw`` scan lines, in header order."""
    partial: Optional[_Partial] = None
    for line in lines:
        partial, emitted = _step(partial, line, interface)
        if emitted is not None:
            yield emitted
    if partial is not None:
        yield _finalize(partial)


def _split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only; SSIDs may contain other line-break characters."""
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def parse_iw_scan(text: str, interface: str) -> List[AccessPointRecord]:
    """Parse the full stdout of ``iw dev <interface> scan``.

    Never raises on malformed input: unrecognised lines are skipped and
    lines before the first ``BSS`` header are discarded.  Duplicate BSSIDs
    are kept.
    """
    return list(iter_iw_scan(_split_lines(text), interface))
