"""Command-line front end: ``cookie-capture URL [options]``.

Exit codes: 0 ok, 1 cookies captured but navigation or saving failed,
2 the session could not start (configuration, connection, launch, seeding).
"""
import argparse
import logging
import sys
import uuid

from dotenv import load_dotenv

from .browser.cookies import load_cookies
from .browser.session import CookieCaptureSession
from .config import ENV_EXECUTABLE_PATH, ENV_REMOTE_ENDPOINT, ConnectionConfig
from .errors import CaptureError
from .telemetry.logger import CaptureEventLogger

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cookie-capture",
        description="Open a browser on URL, wait until you close it, print the cookies it collected",
    )
    parser.add_argument("url", help="Page to open")
    parser.add_argument("--endpoint", default="",
                        help=f"Remote browser CDP endpoint (default: ${ENV_REMOTE_ENDPOINT})")
    parser.add_argument("--executable-path", default="",
                        help=f"Local Chrome/Chromium binary (default: ${ENV_EXECUTABLE_PATH})")
    parser.add_argument("--save", "-o", default="", help="Write captured cookies to this JSON file")
    parser.add_argument("--cookies", default="",
                        help="Seed cookies from a JSON file (array or storage-state)")
    parser.add_argument("--event-log-dir", default="", help="Write JSONL session events here")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    event_logger = None
    if args.event_log_dir:
        event_logger = CaptureEventLogger(uuid.uuid4().hex[:12], log_dir=args.event_log_dir)

    try:
        seed = load_cookies(args.cookies) if args.cookies else []
        session = CookieCaptureSession(
            args.url,
            ConnectionConfig(remote_endpoint=args.endpoint, executable_path=args.executable_path),
            save_path=args.save,
            cookies=seed,
            event_logger=event_logger,
        )
        print("Opening browser... close the window when done.")
        cookies = session.run()
    except CaptureError as e:
        print(f"ERROR ({e.signal.value}): {e}", file=sys.stderr)
        return 2 if e.fatal else 1
    finally:
        if event_logger is not None:
            event_logger.close()

    print(f"Extracted {len(cookies)} cookies:")
    for i, cookie in enumerate(cookies, 1):
        print(f"  {i}. {cookie.get('name')} = {cookie.get('value')} (domain: {cookie.get('domain')})")
    if session.saved_path:
        print(f"Cookies saved to {session.saved_path}")
    for err in session.errors:
        print(f"WARNING ({err.signal.value}): {err}", file=sys.stderr)
    return 1 if session.errors else 0
