"""
Command-line front-end for the civic issue client.

Usage:
  - Home summary (+ map file):  python scripts/civic_cli.py home --map-out map.html
  - Watch live updates:         python scripts/civic_cli.py home --watch
  - Admin issue list:           python scripts/civic_cli.py issues --search pothole
  - Admin stats:                python scripts/civic_cli.py stats
  - Change status:              python scripts/civic_cli.py set-status 5 resolved
  - Delete (asks first):        python scripts/civic_cli.py delete 5
  - Report an issue:            python scripts/civic_cli.py report --type pothole --title "Deep pothole" --photo ./p.jpg
  - Voice-style report:         python scripts/civic_cli.py report --voice --lang hi-IN --type trash --description "..."

Credentials are read from the local store at STORAGE_PATH (written by the
login flow). The device position comes from --lat/--lng or DEVICE_LATITUDE /
DEVICE_LONGITUDE.
"""

import argparse
import asyncio
import sys

from civic_client.config.storage import load_session
from civic_client.core.logging import configure_logging
from civic_client.models.issue import ISSUE_TYPE_LABELS, STATUS_ACTIONS
from civic_client.screens.admin_screen import AdminScreen, AdminState
from civic_client.screens.home_screen import HomeScreen
from civic_client.screens.report_screen import ReportScreen, VoiceReportScreen
from civic_client.services.api_client import CivicApiClient
from civic_client.services.device import StaticDevice
from civic_client.services.interaction import ConsoleAlerter, HistoryNavigator
from civic_client.services.speech import LANGUAGES


def _admin_screen() -> AdminScreen:
    return AdminScreen(load_session(), CivicApiClient(), ConsoleAlerter())


async def _admin_ready(screen: AdminScreen) -> bool:
    await screen.mount()
    if screen.state == AdminState.LOGIN_REQUIRED:
        print("Please login as an administrator to access this section")
        return False
    if screen.state == AdminState.ACCESS_DENIED:
        print("Access denied: administrator role required")
        return False
    return True


def _print_issues(screen: AdminScreen) -> None:
    if screen.empty_message:
        print(screen.empty_message)
        return
    for card in screen.issue_cards():
        print(f"#{card.id} [{card.status_text}] {card.type_label} - {card.title}")
        if card.address:
            print(f"    Location: {card.address}")
        if card.reported_at:
            print(f"    Reported: {card.reported_at}")


async def cmd_home(args) -> int:
    device = StaticDevice(latitude=args.lat, longitude=args.lng)
    screen = HomeScreen(load_session(), CivicApiClient(), device, ConsoleAlerter())
    await screen.mount()
    try:
        print(screen.greeting)
        print(f"Total: {screen.stats.total_issues}  Resolved: {screen.stats.resolved_issues}  Pending: {screen.stats.pending_issues}")
        if args.map_out:
            with open(args.map_out, "w", encoding="utf-8") as f:
                f.write(screen.map_html())
            print(f"Map written to {args.map_out}")
        if args.watch:
            print("Watching live updates (Ctrl-C to stop)...")
            seen = {str(i.id): i.status for i in screen.issues}
            while True:
                await asyncio.sleep(1)
                current = {str(i.id): i.status for i in screen.issues}
                if current != seen:
                    for issue_id, status in current.items():
                        if seen.get(issue_id) != status:
                            print(f"#{issue_id} -> {status}")
                    seen = current
    finally:
        await screen.unmount()
    return 0


async def cmd_issues(args) -> int:
    screen = _admin_screen()
    if not await _admin_ready(screen):
        return 1
    if args.search:
        await screen.set_search_query(args.search)
        await screen.wait_for_search()
    _print_issues(screen)
    return 0


async def cmd_stats(args) -> int:
    screen = _admin_screen()
    if not await _admin_ready(screen):
        return 1
    print(screen.welcome)
    stats = screen.stats
    if stats is None:
        return 1
    print(f"Pending: {stats.pending_issues}  In progress: {stats.in_progress_issues}  Resolved: {stats.resolved_issues}")
    print(f"Total: {stats.total_issues}  Recent: {stats.recent_issues}")
    if stats.response_time_avg is not None:
        print(f"Avg. response time: {stats.response_time_avg} days")
    for issue_type, count in sorted((stats.issue_types or {}).items()):
        print(f"  {issue_type}: {count}")
    return 0


async def cmd_set_status(args) -> int:
    screen = _admin_screen()
    if not await _admin_ready(screen):
        return 1
    ok = await screen.update_issue_status(args.issue_id, args.status)
    return 0 if ok else 1


async def cmd_delete(args) -> int:
    alerter = ConsoleAlerter(prompt=(lambda _: "y") if args.yes else input)
    screen = AdminScreen(load_session(), CivicApiClient(), alerter)
    if not await _admin_ready(screen):
        return 1
    ok = await screen.delete_issue(args.issue_id)
    return 0 if ok else 1


async def cmd_report(args) -> int:
    device = StaticDevice(latitude=args.lat, longitude=args.lng, accuracy=args.accuracy, image_path=args.photo)
    navigator = HistoryNavigator()
    cls = VoiceReportScreen if args.voice else ReportScreen
    screen = cls(load_session(), CivicApiClient(), device, ConsoleAlerter(), navigator)
    await screen.mount()

    screen.select_issue_type(args.type)
    screen.set_title(args.title or "")
    if args.voice:
        screen.select_language(args.lang)
    if args.description:
        screen.set_description(args.description)
    if args.voice:
        await screen.wait_for_translation()
        print(f"Translated: {screen.form.translated}")
    if args.photo:
        await screen.pick_image()

    ok = await screen.submit()
    return 0 if ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Civic issue reporter client")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    home = sub.add_parser("home", help="Home summary and map")
    home.add_argument("--lat", type=float, default=None)
    home.add_argument("--lng", type=float, default=None)
    home.add_argument("--map-out", default=None, help="Write the map HTML to this file")
    home.add_argument("--watch", action="store_true", help="Stay connected and print live status changes")
    home.set_defaults(func=cmd_home)

    issues = sub.add_parser("issues", help="Admin issue list")
    issues.add_argument("--search", default="")
    issues.set_defaults(func=cmd_issues)

    stats = sub.add_parser("stats", help="Admin statistics")
    stats.set_defaults(func=cmd_stats)

    set_status = sub.add_parser("set-status", help="Change an issue's status")
    set_status.add_argument("issue_id")
    set_status.add_argument("status", choices=[a.value.value for a in STATUS_ACTIONS])
    set_status.set_defaults(func=cmd_set_status)

    delete = sub.add_parser("delete", help="Remove an issue")
    delete.add_argument("issue_id")
    delete.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    delete.set_defaults(func=cmd_delete)

    report = sub.add_parser("report", help="Report a new issue")
    report.add_argument("--type", required=True, choices=list(ISSUE_TYPE_LABELS))
    report.add_argument("--title", default="")
    report.add_argument("--description", default="")
    report.add_argument("--photo", default=None, help="Path to a photo to attach")
    report.add_argument("--lat", type=float, default=None)
    report.add_argument("--lng", type=float, default=None)
    report.add_argument("--accuracy", type=float, default=None)
    report.add_argument("--voice", action="store_true", help="Translate the description to English before sending")
    report.add_argument("--lang", default=LANGUAGES[0].code, choices=[lang.code for lang in LANGUAGES])
    report.set_defaults(func=cmd_report)

    return parser


def main():
    args = build_parser().parse_args()
    configure_logging(args.log_level)
    try:
        code = asyncio.run(args.func(args))
    except KeyboardInterrupt:
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
