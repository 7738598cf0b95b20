"""Tests for wifi_monitor.analyze — CSV aggregation and record helpers."""

import io
import os
import tempfile
import unittest
import unittest.mock


def _rec(bssid, ssid=None, signal=None, freq=None, channel=None):
    from wifi_monitor.models import AccessPointRecord
    return AccessPointRecord(bssid=bssid, interface="wlan0",
                             timestamp="2024-02-18T14:23:45.000Z",
                             ssid=ssid, signal_dbm=signal, freq_mhz=freq,
                             channel=channel)


RECORDS = [
    _rec("00:00:00:00:00:01", "Alpha", -45.0, 2412, 1),
    _rec("00:00:00:00:00:02", "Beta", -72.0, 5180, 36),
    _rec("00:00:00:00:00:03", "", -65.0, 2437, 6),
    _rec("00:00:00:00:00:04", "Gamma", -58.0, 5745, 149),
    _rec("00:00:00:00:00:05", None, -85.0, 2412, 1),
    _rec("00:00:00:00:00:06", "Delta", None, 2462, 11),
]


class TestRecordHelpers(unittest.TestCase):
    def test_strongest(self):
        from wifi_monitor.analyze import strongest
        top = strongest(RECORDS, 2)
        self.assertEqual([r.ssid for r in top], ["Alpha", "Gamma"])

    def test_strongest_skips_missing_signal(self):
        from wifi_monitor.analyze import strongest
        self.assertNotIn("Delta", [r.ssid for r in strongest(RECORDS, 10)])

    def test_best_5ghz(self):
        from wifi_monitor.analyze import best_5ghz
        self.assertEqual(best_5ghz(RECORDS).ssid, "Gamma")
        self.assertIsNone(best_5ghz(RECORDS[:1]))

    def test_hidden_networks(self):
        from wifi_monitor.analyze import hidden_networks
        hidden = hidden_networks(RECORDS)
        self.assertEqual([r.bssid[-2:] for r in hidden], ["03", "05"])

    def test_channel_usage(self):
        from wifi_monitor.analyze import channel_usage
        usage = channel_usage(RECORDS)
        self.assertEqual(usage[0], (1, 2))
        self.assertEqual(len(usage), 5)

    def test_recommend_channel(self):
        from wifi_monitor.analyze import recommend_24ghz_channel
        # channel 1 has 2 APs, 6 and 11 have one each → 6 (first of the least used)
        self.assertEqual(recommend_24ghz_channel(RECORDS), (6, 1))
        self.assertEqual(recommend_24ghz_channel([]), (1, 0))

    def test_signal_buckets(self):
        from wifi_monitor.analyze import signal_buckets
        buckets = signal_buckets(RECORDS)
        self.assertEqual(list(buckets), ["Excellent", "Good", "Fair", "Weak", "Poor"])
        self.assertEqual(len(buckets["Excellent"]), 1)   # -45
        self.assertEqual(len(buckets["Good"]), 1)        # -58
        self.assertEqual(len(buckets["Fair"]), 1)        # -65
        self.assertEqual(len(buckets["Weak"]), 1)        # -72
        self.assertEqual(len(buckets["Poor"]), 2)        # -85 and missing


class TestAnalyzeCsv(unittest.TestCase):
    def setUp(self):
        from wifi_monitor.output import CsvSink, ScanContext
        self.tmp = tempfile.mkdtemp()
        sink = CsvSink(self.tmp)
        ctx = ScanContext(interface="wlan0", scan_count=0)
        sink.write(RECORDS, ctx)
        sink.write([_rec("00:00:00:00:00:01", "Alpha", -55.0, 2412, 1),
                    _rec("00:00:00:00:00:07", "Cafe, Main St", -60.0, 2437, 6)], ctx)
        self.path = sink.path

    def tearDown(self):
        import shutil
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_totals(self):
        from wifi_monitor.analyze import analyze_csv
        result = analyze_csv(self.path)
        self.assertEqual(result.total_rows, 8)
        # Alpha, Beta, Gamma, Delta, "Cafe, Main St"
        self.assertEqual(result.unique_ssids, 5)

    def test_average_signal_ranking(self):
        from wifi_monitor.analyze import analyze_csv
        result = analyze_csv(self.path)
        ranking = dict(result.avg_signal_by_ssid)
        self.assertEqual(ranking["Alpha"], -50.0)
        self.assertEqual(ranking["Cafe, Main St"], -60.0)
        self.assertNotIn("Delta", ranking)
        self.assertEqual(result.avg_signal_by_ssid[0][0], "Alpha")

    def test_channel_counts(self):
        from wifi_monitor.analyze import analyze_csv
        counts = dict(analyze_csv(self.path).channel_counts)
        self.assertEqual(counts["1"], 3)
        self.assertEqual(counts["6"], 2)

    def test_print_analysis(self):
        from wifi_monitor.analyze import analyze_csv, print_analysis
        captured = io.StringIO()
        with unittest.mock.patch("sys.stdout", captured):
            print_analysis(analyze_csv(self.path))
        out = captured.getvalue()
        self.assertIn("Total records : 8", out)
        self.assertIn("Alpha: -50.00 dBm", out)
        self.assertIn("Channel 1: 3 records", out)


if __name__ == "__main__":
    unittest.main()
