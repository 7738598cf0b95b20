"""Utility helpers for wifi-monitor."""

import os
import re
from datetime import datetime, timezone
from typing import Optional

from .constants import _INTERFACE_RE, _MAX_INTERVAL_MS, _MIN_INTERVAL_MS
from .errors import ValidationError


def _timestamp(now: Optional[datetime] = None) -> str:
    """Return a UTC ISO 8601 timestamp with millisecond precision and 'Z'."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + \
        f"{now.microsecond // 1000:03d}Z"


def _snapshot_stamp(timestamp: str) -> str:
    """Turn an ISO timestamp into a filename-safe token.

    ``2024-02-18T14:23:45.123Z`` becomes ``2024-02-18T14-23-45-123Z``; any
    character other than digits, ``T``, ``Z`` and ``-`` is dropped.
    """
    stamp = re.sub(r"[:.]", "-", timestamp)
    return re.sub(r"[^0-9TZ-]", "", stamp)


def validate_interface(name: str) -> str:
    """Return ``name`` if it is a safe interface name, else raise.

    The name ends up in an argv list for ``iw``; only letters, digits, dash
    and underscore are accepted, at most 16 characters.
    """
    if not isinstance(name, str) or not _INTERFACE_RE.fullmatch(name):
        raise ValidationError(
            f"Invalid interface name {name!r}: use letters, digits, '-' or '_' "
            f"(max 16 characters)")
    return name


def clamp_interval(interval_ms) -> int:
    """Clamp a scan interval in milliseconds to the supported range."""
    try:
        value = int(interval_ms)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid interval: {interval_ms!r}") from None
    return max(_MIN_INTERVAL_MS, min(_MAX_INTERVAL_MS, value))


def validate_output_dir(path: str) -> str:
    """Reject output directories containing NUL bytes or ``..`` segments."""
    if not path or "\x00" in path:
        raise ValidationError("Invalid output directory")
    parts = re.split(r"[\\/]+", path)
    if ".." in parts:
        raise ValidationError(f"Output directory must not contain '..': {path}")
    return os.path.normpath(path)
