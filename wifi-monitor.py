"""Root-level shim entry point for wifi-monitor.

Allows running directly as:  python wifi-monitor.py [args]
"""

if __name__ == "__main__":
    from wifi_monitor.cli import main
    main()
