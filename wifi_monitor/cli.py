"""Command-line interface for wifi-monitor."""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from .constants import (
    _DEFAULT_FORMAT, _DEFAULT_INTERFACE, _DEFAULT_INTERVAL_MS, _DEFAULT_OUTPUT_DIR,
    _DEFAULT_RETRIES, _DEFAULT_RETRY_DELAY_MS, _DEFAULT_TOP,
)
from .errors import ScanFailure, ValidationError


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wifi-monitor",
        description=(
            "Periodic Wi-Fi access point monitor built on `iw dev <iface> scan`.\n"
            "Records every scan to CSV and/or JSON with a distance estimate\n"
            "for each access point."
        ),
        epilog=(
            "examples:\n"
            "  wifi-monitor\n"
            "  wifi-monitor -i wlan0 -t 10000 -f csv\n"
            "  wifi-monitor --once\n"
            "  wifi-monitor --analyze ./wifi_data/wifi_scan.csv"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    scan = p.add_argument_group("Scan")
    scan.add_argument(
        "-i", "--interface", metavar="IFACE", default=_DEFAULT_INTERFACE,
        help=f"Wireless interface (default: {_DEFAULT_INTERFACE})",
    )
    scan.add_argument(
        "-t", "--interval", metavar="MS", default=_DEFAULT_INTERVAL_MS,
        help=f"Scan interval in ms, clamped to 1000..3600000 "
             f"(default: {_DEFAULT_INTERVAL_MS})",
    )
    scan.add_argument(
        "--retries", type=int, metavar="N", default=_DEFAULT_RETRIES,
        help=f"Attempts per scan while the device is busy (default: {_DEFAULT_RETRIES})",
    )
    scan.add_argument(
        "--retry-delay", type=int, metavar="MS", default=_DEFAULT_RETRY_DELAY_MS,
        help=f"Delay between busy retries in ms (default: {_DEFAULT_RETRY_DELAY_MS})",
    )
    scan.add_argument(
        "--sudo", action="store_true",
        help="Run iw through sudo",
    )

    mode = p.add_argument_group("Mode")
    mode_ex = mode.add_mutually_exclusive_group()
    mode_ex.add_argument(
        "--once", action="store_true",
        help="Run a single scan and exit",
    )
    mode_ex.add_argument(
        "--analyze", metavar="CSV",
        help="Analyze a previously written CSV file and exit",
    )

    out = p.add_argument_group("Output")
    out.add_argument(
        "-o", "--output", metavar="DIR", default=_DEFAULT_OUTPUT_DIR,
        help=f"Output directory (default: {_DEFAULT_OUTPUT_DIR})",
    )
    out.add_argument(
        "-f", "--format", metavar="{csv,json,both}", default=_DEFAULT_FORMAT,
        help=f"Output format (default: {_DEFAULT_FORMAT})",
    )
    out.add_argument(
        "--top", type=int, metavar="N", default=_DEFAULT_TOP,
        help=f"Strongest networks shown after each scan (default: {_DEFAULT_TOP})",
    )

    ui = p.add_argument_group("User interface")
    ui.add_argument("--gui", action="store_true",
                    help="Open the Flask live view in a browser")
    ui.add_argument("--gui-port", type=int, default=5000, metavar="PORT",
                    help="Live view port (default: 5000)")

    misc = p.add_argument_group("Misc")
    vq = misc.add_mutually_exclusive_group()
    vq.add_argument("-v", "--verbose", action="store_true",
                    help="Debug logging")
    vq.add_argument("-q", "--quiet", action="store_true",
                    help="No per-scan console report")
    misc.add_argument("--config", metavar="FILE",
                      help="Path to configuration file (TOML or JSON)")

    return p


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _run_analyze(path: str):
    from .analyze import analyze_csv, print_analysis
    if not os.path.isfile(path):
        print(f"Error: CSV file not found: {path}")
        sys.exit(1)
    print_analysis(analyze_csv(path))


def main(argv: Optional[List[str]] = None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Merge config file
    from .config import load_config, merge_with_cli
    cfg = load_config(args.config)
    if cfg:
        merge_with_cli(args, cfg, defaults=vars(parser.parse_args([])))

    _setup_logging(args.verbose)

    if args.analyze:
        _run_analyze(args.analyze)
        return

    from .monitor import MonitoringLoop
    from .output import build_sinks, parse_format
    from .scanner import ScanExecutor
    from .utils import validate_output_dir

    try:
        executor = ScanExecutor(args.interface, use_sudo=args.sudo)
        output_dir = validate_output_dir(args.output)
        sinks = build_sinks(parse_format(args.format), output_dir)
        monitor = MonitoringLoop(
            executor,
            sinks=sinks,
            interval_ms=args.interval,
            retries=args.retries,
            retry_delay_ms=args.retry_delay,
            output_dir=output_dir,
            top=args.top,
            quiet=args.quiet,
        )
    except ValidationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.gui:
        from .gui_server import GuiServer
        gui = GuiServer(port=args.gui_port)
        if gui.start():
            def _push(records, stats):
                gui.emit_scan(monitor.interface, records)
                gui.emit_status(vars(stats))
            monitor.on_scan = _push
        else:
            print("[!] --gui needs Flask:  pip install 'wifi-monitor[gui]'")

    if args.once:
        try:
            asyncio.run(monitor.scan_once())
        except ScanFailure as e:
            print(f"Scan error: {e}")
            sys.exit(1)
        return

    try:
        asyncio.run(monitor.run_forever())
    except KeyboardInterrupt:
        monitor.stop()
