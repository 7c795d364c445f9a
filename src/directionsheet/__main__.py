# __main__.py
import os
import sys
import logging
from logging.handlers import RotatingFileHandler
import argparse

from .config import get_setting, load_env
from .formatter import format_itinerary
from .gmaps_utils import RouteUnavailable, fetch_directions, get_provider
from .sheet_writer import (connect_to_spreadsheet, generate_step_by_step,
                           parse_row_number, prepare_sheet)
from .units import meters_to_miles

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="directionsheet",
                                description="Driving directions into a Google Sheet")
    p.add_argument("--env", choices=["dev", "prod"], default="prod")
    p.add_argument("--verbose", action="store_true")
    p.add_argument("--provider", choices=["google", "ors"], default=None,
                   help="Routing provider (default: $DIRECTIONS_PROVIDER or google)")
    p.add_argument("--log-dir", default="logs")

    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("prepare", help="Set up the Input worksheet")

    gen = sub.add_parser("generate", help="Write step-by-step directions for an Input row")
    gen.add_argument("row", type=str, nargs="?", default=None, help='Row number of the addresses to use (for example, "2")')
    gen.add_argument("--miles-formula", dest="miles_formula", default=None,
                     help="Sheet function to reference in the miles column, e.g. METERSTOMILES")
    gen.add_argument("--dry-run", action="store_true",
                     help="Skip the sheet; print the rows for --origin/--destination")
    gen.add_argument("--origin", type=str)
    gen.add_argument("--destination", type=str)

    miles = sub.add_parser("to-miles", help="Convert meters to miles")
    miles.add_argument("value", type=str)

    return p.parse_args(argv)


def _to_number(text: str):
    try:
        return float(text)
    except ValueError:
        return text


def run_generate(args, provider) -> int:
    if args.dry_run:
        if not args.origin or not args.destination:
            raise ValueError("--dry-run needs both --origin and --destination")
        itinerary = fetch_directions(args.origin, args.destination, provider=provider)
        for display_row in format_itinerary(itinerary):
            print(f"{display_row.instruction}\t{display_row.meters}\t{display_row.miles:.2f}")
        print(f"Total\t{itinerary.distance_meters}\t{meters_to_miles(itinerary.distance_meters):.2f}")
        return 0

    row = parse_row_number(args.row)
    spreadsheet = connect_to_spreadsheet()
    rows = generate_step_by_step(spreadsheet, row, provider=provider, miles_formula=args.miles_formula)
    print(f"Wrote {len(rows)} steps for row {row}.")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)

    # ── Load the env file they asked for ───────────────────────────────
    env_file = load_env(args.env)
    # to-miles is a pure conversion; no log files for it
    if args.command != "to-miles":
        configure_logging(args.log_dir)
    if args.verbose:
        print(f"Loaded env: {env_file}")

    try:
        if args.command == "to-miles":
            miles = meters_to_miles(_to_number(args.value))
            print("N/A" if miles is None else miles)
            return 0

        if args.command == "prepare":
            prepare_sheet(connect_to_spreadsheet())
            print("Input sheet prepared.")
            return 0

        provider = get_provider(args.provider or get_setting("DIRECTIONS_PROVIDER", "google"))
        return run_generate(args, provider)

    except RouteUnavailable as e:
        logger.error("Route unavailable (%s): %s", e.status, e.message)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except ValueError as e:
        logger.error("Invalid input: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


class MaxLevelFilter(logging.Filter):
    """Lets through records at or below max_level (console gets DEBUG/INFO only)."""
    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self.max_level


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# (handler name, file name, minimum level)
LOG_FILES = [
    ("directionsheet-info", "directionsheet-info.log", logging.INFO),
    ("directionsheet-errors", "directionsheet-errors.log", logging.ERROR),
]
CONSOLE_HANDLER = "directionsheet-console"

NOISY_MODULES = ["urllib3", "requests", "gspread", "oauth2client"]


def configure_logging(log_dir: str = "logs") -> None:
    """
    Attaches the rotating info/error files and the console handler to the
    root logger. Safe to call more than once: handlers already attached by
    an earlier call are left alone.
    """
    root = logging.getLogger()
    attached = {handler.get_name() for handler in root.handlers}
    root.setLevel(logging.DEBUG)

    for name, file_name, level in LOG_FILES:
        if name in attached:
            continue
        os.makedirs(log_dir, exist_ok=True)
        handler = RotatingFileHandler(
            filename=os.path.join(log_dir, file_name),
            maxBytes=1_000_000,
            backupCount=3,
            encoding="utf-8"
        )
        handler.set_name(name)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    if CONSOLE_HANDLER not in attached:
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER)
        console_handler.setLevel(logging.DEBUG)
        console_handler.addFilter(MaxLevelFilter(logging.INFO))
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root.addHandler(console_handler)

    for module in NOISY_MODULES:
        logging.getLogger(module).setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
