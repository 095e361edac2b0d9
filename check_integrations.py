#!/usr/bin/env python
"""
Live integration check for the external services the monitor depends on.
Verifies keys are valid and endpoints return data the adapters can parse.

Usage:
    python check_integrations.py [lat lon]
"""

import os
import sys
from datetime import datetime
from typing import Tuple

import django

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')
django.setup()

from apps.adapters.openweathermap import OpenWeatherMapAdapter  # noqa: E402
from apps.adapters.waqi import WAQIAdapter  # noqa: E402
from apps.core.credentials import CredentialStore  # noqa: E402
from apps.core.exceptions import MonitorError  # noqa: E402
from apps.core.records import Coordinate, PlaceInfo  # noqa: E402
from apps.location.services import IPPositionSource, ReverseGeocoder  # noqa: E402


# Color codes for terminal output
class Colors:
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    BOLD = '\033[1m'
    END = '\033[0m'


def print_header(text: str):
    """Print a formatted header."""
    print(f"\n{Colors.BOLD}{Colors.CYAN}{'=' * 80}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{text.center(80)}{Colors.END}")
    print(f"{Colors.BOLD}{Colors.CYAN}{'=' * 80}{Colors.END}\n")


def print_check(name: str, status: str, message: str = ""):
    """Print a check result."""
    if status == "PASS":
        symbol, color = "✓", Colors.GREEN
    elif status == "FAIL":
        symbol, color = "✗", Colors.RED
    else:
        symbol, color = "⚠", Colors.YELLOW

    print(f"{color}{symbol} {name:<50}{Colors.END} {color}{status}{Colors.END}")
    if message:
        print(f"  {Colors.YELLOW}└─ {message}{Colors.END}")


def check_provider(adapter, coordinate: Coordinate) -> Tuple[str, str]:
    if not adapter.is_available():
        return "SKIP", "No API key configured"

    record = adapter.fetch_current(coordinate, PlaceInfo())
    return "PASS", f"{record.place_label}: AQI {record.aqi}, PM2.5 {record.pm25}"


def check_geocoder(coordinate: Coordinate) -> Tuple[str, str]:
    place = ReverseGeocoder().reverse(coordinate)
    return "PASS", place.label


def check_ip_position() -> Tuple[str, str]:
    position = IPPositionSource().get_position(timeout=10)
    return "PASS", str(position)


def main(argv):
    print_header("Air Quality Monitor Integration Check")
    print(f"{Colors.BOLD}Date:{Colors.END} {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    if len(argv) == 2:
        coordinate = Coordinate(float(argv[0]), float(argv[1]))
    else:
        # Los Angeles
        coordinate = Coordinate(34.05, -118.24)
    print(f"{Colors.BOLD}Coordinate:{Colors.END} {coordinate}\n")

    checks = [
        ("OpenWeatherMap", lambda: check_provider(OpenWeatherMapAdapter(api_key=CredentialStore().get() or ''), coordinate)),
        ("WAQI", lambda: check_provider(WAQIAdapter(), coordinate)),
        ("Nominatim reverse geocoding", lambda: check_geocoder(coordinate)),
        ("IP geolocation", check_ip_position),
    ]

    failures = 0
    for name, check in checks:
        try:
            status, message = check()
        except MonitorError as e:
            status, message = "FAIL", str(e)
        print_check(name, status, message)
        if status == "FAIL":
            failures += 1

    print_header("Summary")
    if failures:
        print(f"{Colors.YELLOW}{Colors.BOLD}⚠ {failures} integration(s) failed{Colors.END}\n")
        return 1

    print(f"{Colors.GREEN}{Colors.BOLD}✓ All integrations are working!{Colors.END}\n")
    return 0


if __name__ == '__main__':
    try:
        sys.exit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        print(f"\n\n{Colors.YELLOW}Check interrupted by user{Colors.END}")
        sys.exit(130)
