"""Mark attendance from the command line with the camera or by hand.

    python scripts/scan_attendance.py --email t@school.edu --password secret --subject Physics
    python scripts/scan_attendance.py ... --manual STU1 --status ABSENT --date 2024-05-01
"""
from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "smart_attendance"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from smart_attendance.capture.marking import AttendanceMarker
from smart_attendance.capture.scanner import QRScanner
from smart_attendance.client import ClientError, DataClient
from smart_attendance.core.enums import Role


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--subject", required=True)
    parser.add_argument("--manual", metavar="STUDENT_ID", help="skip the camera and mark this student")
    parser.add_argument("--status", default="PRESENT", choices=["PRESENT", "ABSENT"])
    parser.add_argument("--date", help="YYYY-MM-DD (manual entry only)")
    parser.add_argument("--time", help="HH:MM (manual entry only)")
    parser.add_argument("--repeat", action="store_true", help="keep scanning after each code")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO))
    args = _parse_args(argv)

    client = DataClient.from_settings(settings)
    try:
        teacher = client.login(args.email, args.password, Role.TEACHER)
    except ClientError as e:
        print(f"Login failed: {e}", file=sys.stderr)
        return 1

    marker = AttendanceMarker(client, teacher, subject=args.subject)
    print(f"{teacher.name}: {len(marker.roster)} students, subject {args.subject} ({client.active_mode.value})")

    if args.manual:
        outcome = marker.mark_manual(args.manual, args.status, args.date, args.time)
        print(f"[{outcome.kind.value}] {outcome.message}")
        return 0 if outcome.ok else 2

    outcomes = []

    def on_scan(payload: str) -> None:
        outcome = marker.handle_scan(payload)
        print(f"[{outcome.kind.value}] {outcome.message}")
        outcomes.append(outcome)

    with QRScanner.from_settings(settings) as scanner:
        while True:
            if scanner.run(on_scan) is None:
                print(scanner.error or "Scan stopped", file=sys.stderr)
                return 1
            if not args.repeat:
                return 0 if outcomes[-1].ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
