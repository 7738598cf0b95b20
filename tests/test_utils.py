"""Tests for wifi_monitor.utils — validation and timestamps."""

import re
import unittest
from datetime import datetime, timezone


class TestValidateInterface(unittest.TestCase):
    def test_accepts_common_names(self):
        from wifi_monitor.utils import validate_interface
        for name in ("wlan0", "wlp3s0", "wlx00c0ca123456", "mon_0", "wl-1"):
            self.assertEqual(validate_interface(name), name)

    def test_rejects_injection_and_length(self):
        from wifi_monitor.errors import ValidationError
        from wifi_monitor.utils import validate_interface
        for name in ("", "wlan0;id", "wlan 0", "w" * 17, "wlan0\n", "wlan.0", None):
            with self.assertRaises(ValidationError):
                validate_interface(name)

    def test_validation_error_is_value_error(self):
        from wifi_monitor.utils import validate_interface
        with self.assertRaises(ValueError):
            validate_interface("bad name")


class TestClampInterval(unittest.TestCase):
    def test_clamps(self):
        from wifi_monitor.utils import clamp_interval
        self.assertEqual(clamp_interval(5000), 5000)
        self.assertEqual(clamp_interval(10), 1000)
        self.assertEqual(clamp_interval(-1), 1000)
        self.assertEqual(clamp_interval(99_999_999), 3_600_000)
        self.assertEqual(clamp_interval("2500"), 2500)

    def test_invalid(self):
        from wifi_monitor.errors import ValidationError
        from wifi_monitor.utils import clamp_interval
        with self.assertRaises(ValidationError):
            clamp_interval("soon")


class TestValidateOutputDir(unittest.TestCase):
    def test_accepts_plain_paths(self):
        from wifi_monitor.utils import validate_output_dir
        self.assertEqual(validate_output_dir("./wifi_data"), "wifi_data")
        self.assertEqual(validate_output_dir("/var/lib/wifi"), "/var/lib/wifi")

    def test_rejects_parent_segments_and_nul(self):
        from wifi_monitor.errors import ValidationError
        from wifi_monitor.utils import validate_output_dir
        for path in ("../data", "data/../../etc", "data\\..\\x", "da\x00ta", ""):
            with self.assertRaises(ValidationError):
                validate_output_dir(path)


class TestTimestamps(unittest.TestCase):
    def test_timestamp_format(self):
        from wifi_monitor.utils import _timestamp
        ts = _timestamp(datetime(2024, 2, 18, 14, 23, 45, 123456, tzinfo=timezone.utc))
        self.assertEqual(ts, "2024-02-18T14:23:45.123Z")

    def test_timestamp_now(self):
        from wifi_monitor.utils import _timestamp
        self.assertRegex(_timestamp(), r"^\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z$")

    def test_snapshot_stamp(self):
        from wifi_monitor.utils import _snapshot_stamp
        stamp = _snapshot_stamp("2024-02-18T14:23:45.123Z")
        self.assertEqual(stamp, "2024-02-18T14-23-45-123Z")
        self.assertTrue(re.fullmatch(r"[0-9TZ-]+", _snapshot_stamp("a/b\\c:1.2 Z")))


if __name__ == "__main__":
    unittest.main()
