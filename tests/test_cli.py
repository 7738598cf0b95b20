"""Tests for wifi_monitor.cli — argument handling and one-shot mode."""

import io
import os
import shutil
import tempfile
import unittest
import unittest.mock

_NO_CONFIG = ["--config", "/nonexistent/wifi-monitor.toml"]


def _record():
    from wifi_monitor.models import AccessPointRecord
    return AccessPointRecord(bssid="00:11:22:33:44:55", interface="wlan0",
                             timestamp="2024-02-18T14:23:45.000Z",
                             ssid="HomeNet", freq_mhz=2437, signal_dbm=-60.0)


class TestParser(unittest.TestCase):
    def test_defaults(self):
        from wifi_monitor.cli import _build_parser
        args = _build_parser().parse_args([])
        self.assertEqual(args.interface, "wlp3s0")
        self.assertEqual(args.interval, 5000)
        self.assertEqual(args.output, "./wifi_data")
        self.assertEqual(args.format, "both")
        self.assertEqual(args.retries, 3)
        self.assertEqual(args.retry_delay, 1000)
        self.assertFalse(args.once)

    def test_once_and_analyze_exclusive(self):
        from wifi_monitor.cli import _build_parser
        with unittest.mock.patch("sys.stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                _build_parser().parse_args(["--once", "--analyze", "x.csv"])

    def test_interval_and_format_parsed_as_given(self):
        from wifi_monitor.cli import _build_parser
        args = _build_parser().parse_args(["-t", "abc", "-f", "xml"])
        self.assertEqual(args.interval, "abc")
        self.assertEqual(args.format, "xml")


class TestMain(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.out = io.StringIO()
        self._stdout = unittest.mock.patch("sys.stdout", self.out)
        self._stdout.start()

    def tearDown(self):
        self._stdout.stop()
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_analyze_missing_file_exits(self):
        from wifi_monitor.cli import main
        with self.assertRaises(SystemExit) as ctx:
            main(_NO_CONFIG + ["--analyze", os.path.join(self.tmp, "missing.csv")])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("not found", self.out.getvalue())

    def test_invalid_interface_exits(self):
        from wifi_monitor.cli import main
        with self.assertRaises(SystemExit) as ctx:
            main(_NO_CONFIG + ["-i", "wlan0;reboot", "--once"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("Error:", self.out.getvalue())

    def test_invalid_interval_exits_with_one(self):
        from wifi_monitor.cli import main
        with self.assertRaises(SystemExit) as ctx:
            main(_NO_CONFIG + ["-o", self.tmp, "-t", "abc", "--once"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("Invalid interval", self.out.getvalue())

    def test_invalid_format_exits_with_one(self):
        from wifi_monitor.cli import main
        with self.assertRaises(SystemExit) as ctx:
            main(_NO_CONFIG + ["-o", self.tmp, "-f", "xml", "--once"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("Invalid format", self.out.getvalue())

    def test_output_dir_traversal_exits(self):
        from wifi_monitor.cli import main
        with self.assertRaises(SystemExit) as ctx:
            main(_NO_CONFIG + ["-o", "../elsewhere", "--once"])
        self.assertEqual(ctx.exception.code, 1)

    def test_once_writes_csv(self):
        from wifi_monitor.cli import main
        scan = unittest.mock.AsyncMock(return_value=[_record()])
        with unittest.mock.patch("wifi_monitor.scanner.ScanExecutor.scan", scan):
            main(_NO_CONFIG + ["-i", "wlan0", "-o", self.tmp, "-f", "csv", "--once"])
        scan.assert_awaited_once()
        self.assertTrue(os.path.exists(os.path.join(self.tmp, "wifi_scan.csv")))
        self.assertIn("HomeNet", self.out.getvalue())

    def test_once_failure_exits(self):
        from wifi_monitor.cli import main
        from wifi_monitor.errors import ScanFailure
        scan = unittest.mock.AsyncMock(side_effect=ScanFailure("Scan error: boom"))
        with unittest.mock.patch("wifi_monitor.scanner.ScanExecutor.scan", scan):
            with self.assertRaises(SystemExit) as ctx:
                main(_NO_CONFIG + ["-i", "wlan0", "-o", self.tmp, "--once"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("boom", self.out.getvalue())

    def test_config_file_fills_defaults(self):
        from wifi_monitor.cli import main
        cfg = os.path.join(self.tmp, "config.json")
        with open(cfg, "w") as f:
            f.write('{"interface": "wlan7", "format": "json"}')
        seen = {}

        async def fake_scan(executor, retries=3, retry_delay_ms=1000):
            seen["interface"] = executor.interface
            return []

        with unittest.mock.patch("wifi_monitor.scanner.ScanExecutor.scan", fake_scan):
            main(["--config", cfg, "-o", self.tmp, "--once"])
        self.assertEqual(seen["interface"], "wlan7")
        written = [n for n in os.listdir(self.tmp) if n.startswith("wifi_scan_")]
        self.assertEqual(len(written), 1)


if __name__ == "__main__":
    unittest.main()
