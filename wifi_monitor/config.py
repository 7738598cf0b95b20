"""Configuration file support for wifi-monitor.

Values from a TOML (or JSON) file fill in any option still at its argparse
default; flags given on the command line always win.
"""

import json
import logging
import os
import sys
from typing import Any, Dict, Optional

LOG = logging.getLogger(__name__)

_CONFIG_ENV_VAR = "WIFI_MONITOR_CONFIG"
_CONFIG_DIR = os.path.expanduser("~/.config/wifi-monitor")
_CONFIG_PATHS = [
    os.path.join(_CONFIG_DIR, "config.toml"),
    os.path.join(_CONFIG_DIR, "config.json"),
]

# key -> accepted type(s); bool is checked before int since bool is an int
_CONFIG_KEYS: Dict[str, Any] = {
    "interface": str,
    "interval": int,
    "output": str,
    "format": str,
    "retries": int,
    "retry_delay": int,
    "sudo": bool,
    "top": int,
    "gui": bool,
    "gui_port": int,
    "verbose": bool,
    "quiet": bool,
}


def _load_toml(path: str) -> Dict[str, Any]:
    if sys.version_info >= (3, 11):
        import tomllib
    else:
        import tomli as tomllib
    with open(path, "rb") as f:
        return tomllib.load(f)


def _load_json(path: str) -> Dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _candidate_paths(config_path: Optional[str]):
    if config_path:
        return [config_path]
    env = os.environ.get(_CONFIG_ENV_VAR)
    return [env] if env else _CONFIG_PATHS


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from file (TOML preferred, JSON fallback).

    Search order:
    1. Explicit ``config_path`` argument
    2. ``$WIFI_MONITOR_CONFIG`` environment variable
    3. ``~/.config/wifi-monitor/config.toml``
    4. ``~/.config/wifi-monitor/config.json``

    The first existing file wins.  A file that cannot be read or parsed, or
    whose top level is not a table, yields ``{}``.
    """
    for path in _candidate_paths(config_path):
        if not os.path.exists(path):
            continue
        loader = _load_toml if path.endswith(".toml") else _load_json
        try:
            data = loader(path)
        except (OSError, ValueError) as e:
            LOG.warning("Ignoring config file %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            LOG.warning("Ignoring config file %s: top level is not a table", path)
            return {}
        LOG.debug("Loaded config from %s", path)
        return data
    return {}


def _accepts(key: str, value: Any) -> bool:
    expected = _CONFIG_KEYS[key]
    if expected is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, expected)


def merge_with_cli(args, config: Dict[str, Any], defaults: Optional[Dict[str, Any]] = None):
    """Copy config values onto ``args`` where the CLI left the default.

    ``defaults`` maps option names to their argparse defaults.  Unknown keys
    and values of the wrong type are skipped.
    """
    defaults = defaults or {}
    for key, value in config.items():
        if key not in _CONFIG_KEYS or not hasattr(args, key):
            LOG.debug("Unknown config key %r", key)
            continue
        if not _accepts(key, value):
            LOG.warning("Config key %r has wrong type (%s)", key, type(value).__name__)
            continue
        current = getattr(args, key)
        if current is None or current == defaults.get(key):
            setattr(args, key, value)
