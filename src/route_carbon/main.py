import argparse
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

import pandas as pd

from .audit import audit_logger, report_directory
from .comparison import format_carbon_footprint
from .logging_conf import setup_logging
from .models import TravelPreferences
from .processing import plan_summary, routes_to_dataframe
from .utils.input_helpers import (
    candidates_from_dataframe, print_header, print_route_overview, C_SUCCESS, C_RESET
)
from .visualization import Visualizer

logger = logging.getLogger(__name__)

REPORT_BASENAME = "route_sustainability_report"


def load_segment_table(path: str) -> pd.DataFrame:
    """Read a segment table from CSV or Excel."""
    if path.lower().endswith((".xlsx", ".xls")):
        return pd.read_excel(path)
    return pd.read_csv(path)


def execute_route_batch(
    df: pd.DataFrame,
    preferences: Optional[TravelPreferences] = None,
    reports_dir: str = report_directory,
    plot: bool = False,
) -> Optional[str]:
    """
    Score every route in a segment table, print the ranking and save the CSV report.
    Returns the report path, or None when no route survives.
    """
    candidates = candidates_from_dataframe(df)
    print_header(f"Scoring {len(candidates)} candidate routes")

    result = plan_summary(candidates, preferences)
    for route_id, reason in result.rejected:
        logger.warning(f"Rejected {route_id}: {reason}")

    if not result.routes:
        print("No routes to report.")
        return None

    best = result.routes[0]
    print_route_overview(best, result.top_comparison)
    for line in result.insights:
        print(f"  * {line}")

    report_df = routes_to_dataframe(result.routes)
    print("\n" + report_df[[
        "Rank", "Route Name", "Modes", "Total Emissions (kgCO2e)", "Sustainability Score", "Savings (%)"
    ]].to_string(index=False))

    os.makedirs(reports_dir, exist_ok=True)
    out_file = os.path.join(reports_dir, f"{REPORT_BASENAME}.csv")
    try:
        report_df.to_csv(out_file, index=False)
    except PermissionError:
        # File locked (e.g. open in a spreadsheet)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        out_file = os.path.join(reports_dir, f"{REPORT_BASENAME}_{ts}.csv")
        logger.warning(f"Report file locked. Saving to {out_file} instead.")
        report_df.to_csv(out_file, index=False)
    print(f"\n{C_SUCCESS}Report saved to: {out_file}{C_RESET}")

    total = report_df["Total Emissions (kgCO2e)"].sum()
    logger.info(f"Combined footprint of reported routes: {format_carbon_footprint(total)}")

    if plot:
        try:
            vis = Visualizer(mode="batch_run", output_root=reports_dir)
            vis.generate_all_batch_plots(result.routes)
            print(f"Charts saved to: {vis.session_dir}")
        except OSError as e:
            logger.error(f"Batch visualization failed: {e}")

    return out_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="route-carbon",
        description="Rank multi-modal trip options by carbon footprint and sustainability score.",
    )
    parser.add_argument("segments", help="CSV or Excel file, one row per segment "
                                         "(route_id, mode, distance_km, duration_min[, cost, route_name, provider])")
    parser.add_argument("--reports-dir", default=report_directory, help="Output directory for report and charts")
    parser.add_argument("--max-time", type=float, default=None, help="Maximum total duration (minutes)")
    parser.add_argument("--budget", type=float, default=None, help="Maximum total cost")
    parser.add_argument("--fastest-first", action="store_true", help="Order by duration instead of score")
    parser.add_argument("--plot", action="store_true", help="Save charts of the ranking")
    parser.add_argument("--audit", action="store_true", help="Write a calculation audit log")
    parser.add_argument("--log-file", default=None, help="Also write a detailed log to this file")
    parser.add_argument("--verbose", action="store_true", help="Show debug output on the console")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(
        console_level=logging.DEBUG if args.verbose else logging.INFO,
        file_path=args.log_file,
    )

    try:
        preferences = TravelPreferences(
            prioritize_sustainability=not args.fastest_first,
            max_travel_time=args.max_time,
            budget_limit=args.budget,
        )
    except ValueError as e:
        logger.error(f"Invalid preferences: {e}")
        return 2

    if not os.path.exists(args.segments):
        logger.error(f"Segment file not found at {args.segments}")
        return 1
    try:
        df = load_segment_table(args.segments)
    except Exception as e:
        logger.error(f"Error reading segment file: {e}")
        return 1

    if args.audit:
        audit_logger.enable(args.reports_dir)

    try:
        out_file = execute_route_batch(df, preferences, reports_dir=args.reports_dir, plot=args.plot)
    except ValueError as e:
        logger.error(f"Invalid segment table: {e}")
        return 1
    return 0 if out_file else 1


if __name__ == "__main__":
    sys.exit(main())
