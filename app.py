# krishi_trends/app.py
#
# Main Application Entry Point
# Loads a disease detections export, runs the trend analytics and prints a
# JSON report for the dashboard or for scheduled jobs.

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

# --- Core Application Imports ---
try:
    from config.settings import settings
except ImportError as e:
    print(f"FATAL ERROR: The application's configuration `config.settings` could not be loaded: {e}", file=sys.stderr)
    raise

from analytics import build_report
from data_processing import filter_lookback_window, load_detection_records, load_farmer_districts
from data_processing.helpers import to_utc_timestamp

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Set up global logging based on the level defined in settings."""
    logging.basicConfig(
        level=settings.app.log_level,
        format=settings.app.log_format,
        datefmt=settings.app.log_date_format,
        force=True
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="krishi-trends",
        description="Disease trend prediction and detection volume forecast.",
    )
    parser.add_argument("--input", type=Path, default=None,
                        help="Detections CSV (default: settings.detections_path).")
    parser.add_argument("--lookback", type=int, choices=settings.lookback_options,
                        default=settings.default_lookback_days, help="Lookback window in days.")
    parser.add_argument("--locale", choices=["en", "ne"], default=settings.app.default_locale)
    parser.add_argument("--as-of", dest="as_of", default=None,
                        help="ISO timestamp to anchor the analysis (default: now, UTC).")
    parser.add_argument("--districts", type=Path, default=None,
                        help="Farmer profiles CSV with farmer_id and district columns.")
    parser.add_argument("--output", type=Path, default=None,
                        help="Write the report here instead of stdout.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    as_of = to_utc_timestamp(args.as_of)
    logger.info(f"Running {settings.app.name} v{settings.app.version}: lookback={args.lookback}d, as_of={as_of}.")

    detections = load_detection_records(args.input)
    window = filter_lookback_window(detections, args.lookback, as_of)
    farmer_districts = load_farmer_districts(args.districts) if args.districts else None

    report = build_report(window, args.lookback, args.locale, as_of, farmer_districts)
    text = json.dumps(report, indent=2, ensure_ascii=False)

    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Report written to {args.output}.")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
