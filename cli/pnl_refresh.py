#!/usr/bin/env python3
"""
Profit & Loss View Refresh CLI

Usage:
    python pnl_refresh.py --business ID                 Fetch all report variants, write view models
    python pnl_refresh.py --business ID --view monthly  Build one view and print it
    python pnl_refresh.py --input report.json --view quarterly
    python pnl_refresh.py --business ID --export-csv --search rent
    python pnl_refresh.py --business ID --dry-run       Fetch and build but don't write files
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import requests

import pnl_core
from pnl_core.amounts import format_amount, format_number, format_percent
from pnl_core.export import csv_filename
from pnl_core.metrics import profit_margin
from pnl_core.sources import (
    DEFAULT_RESOURCE,
    DEFAULT_VARIANT_BY_VIEW,
    REPORT_VARIANTS,
    fetch_report_json,
)
from pnl_core.views import DEFAULT_TOP_EXPENSES, VIEW_NAMES, monthly_csv

# Paths
SCRIPT_DIR = Path(__file__).parent
CONFIG_PATH = SCRIPT_DIR / "config.json"
DATA_DIR = SCRIPT_DIR.parent / "data"


def load_config(required: bool = True) -> dict:
    """Load configuration from config.json."""
    if not CONFIG_PATH.exists():
        if not required:
            return {}
        print(f"Error: {CONFIG_PATH} not found.")
        print("Copy config.example.json to config.json and set reports_base_url.")
        sys.exit(1)

    with open(CONFIG_PATH) as f:
        return json.load(f)


def load_input_file(path: str) -> dict:
    """Load a report JSON file from disk."""
    input_path = Path(path)
    if not input_path.exists():
        print(f"Error: {input_path} not found.")
        sys.exit(1)

    with open(input_path) as f:
        return json.load(f)


def fetch_report(config: dict, business_id: str, variant: str) -> dict:
    """Fetch one report variant, exiting on failure."""
    base_url = config.get("reports_base_url")
    if not base_url:
        print("Error: reports_base_url not set in config.json (or pass --base-url)")
        sys.exit(1)

    print(f"Fetching {variant} for {business_id}...")
    try:
        return fetch_report_json(
            base_url,
            config.get("resource", DEFAULT_RESOURCE),
            business_id,
            variant,
            token=config.get("auth_token"),
        )
    except (requests.RequestException, ValueError) as e:
        print(f"Error fetching {variant}: {e}")
        sys.exit(1)


def output_root(config: dict) -> Path:
    """Output directory from config (relative paths resolve against this script)."""
    return SCRIPT_DIR / config.get("output_dir", DATA_DIR)


def write_json_file(path: Path, data: dict) -> None:
    """Write data to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    print(f"Written: {path}")


def write_text_file(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(text)
    print(f"Written: {path}")


def print_summary(view: dict) -> None:
    """Print the headline figures of a single-period view."""
    if not view.get("hasData"):
        print("\nNo profit and loss data available")
        return

    summary = view["summary"]
    print(f"\n--- {view.get('reportName') or 'Profit and Loss'} ({view.get('period', '')}) ---")
    print(f"Total income:       {format_amount(summary['totalIncome'])}")
    print(f"Gross profit:       {format_amount(summary['grossProfit'])}")
    print(f"Operating expenses: {format_amount(summary['totalOperatingExpenses'])}")
    print(f"Net profit:         {format_amount(summary['netProfit'])}")
    print(f"Net margin:         {format_percent(profit_margin(summary['netProfit'], summary['totalIncome']))}")

    if view["expenseBreakdown"]:
        print("\nExpenses:")
        for item in view["expenseBreakdown"]:
            print(f"  {item['name']}: {format_amount(item['value'])}")


def print_net_profit_by_period(view: dict) -> None:
    """Print the net profit series of a monthly view, one period per line."""
    series = view["series"]["netProfit"]
    if not series:
        return

    print("\nNet profit by period:")
    for period, value in series.items():
        print(f"  {period}: {format_number(value)}")


# ============================================================================
# Commands
# ============================================================================

def cmd_build_view(args, config: dict) -> None:
    """Handle --view: build a single view and print or write it."""
    variant = args.variant or DEFAULT_VARIANT_BY_VIEW[args.view]
    if args.input:
        report = load_input_file(args.input)
    else:
        report = fetch_report(config, args.business, variant)

    if report is None:
        print("No data available for this business")
        sys.exit(1)

    view = pnl_core.build_view(
        args.view,
        report,
        search=args.search,
        month=args.month,
        compare=args.compare,
        top_n=args.top,
        currency=args.currency,
    )

    if args.output:
        if not args.dry_run:
            write_json_file(Path(args.output), view)
        return

    print(json.dumps(view, indent=2))


def cmd_export_csv(args, config: dict) -> None:
    """Handle --export-csv: write the monthly breakdown CSV."""
    if args.input:
        report = load_input_file(args.input)
    else:
        report = fetch_report(config, args.business, "monthByMonthBreakdownLast12Months")

    if report is None:
        print("No monthly data available for this business")
        sys.exit(1)

    text = monthly_csv(report, args.search)
    output_dir = output_root(config)
    path = output_dir / (args.business or "local") / csv_filename()

    if args.dry_run:
        print(text)
        print(f"\n[Dry run] Would write {path}")
        return

    write_text_file(path, text)


def cmd_refresh_views(args, config: dict) -> None:
    """Handle the default command: fetch every variant and write its view."""
    output_dir = output_root(config) / args.business
    written = 0

    for variant, view_name in REPORT_VARIANTS.items():
        report = fetch_report(config, args.business, variant)
        if report is None:
            print(f"  No {variant} report, skipping")
            continue

        view = pnl_core.build_view(view_name, report, top_n=args.top, currency=args.currency)
        view["generated_at"] = datetime.now().isoformat()

        if view_name == "single-period":
            print_summary(view)
        elif view_name == "monthly":
            print_net_profit_by_period(view)

        if args.dry_run:
            print(f"[Dry run] Would write {output_dir / f'{view_name}.json'}")
            continue

        write_json_file(output_dir / f"{view_name}.json", view)
        written += 1

    print(f"\n{written} view file(s) written to {output_dir}/")


def main():
    parser = argparse.ArgumentParser(description="Profit & Loss View Refresh CLI")
    parser.add_argument("--business", help="Client business ID")
    parser.add_argument("--input", help="Read the report from a local JSON file instead of fetching")
    parser.add_argument("--view", choices=VIEW_NAMES, help="Build a single view and print it")
    parser.add_argument("--variant", choices=list(REPORT_VARIANTS), help="Report variant to fetch")
    parser.add_argument("--output", help="Write the --view result to this file instead of printing")
    parser.add_argument("--search", default="", help="Filter monthly rows by label or value")
    parser.add_argument("--month", help="Primary period for comparison charts")
    parser.add_argument("--compare", nargs="*", default=[], help="Up to three comparison periods")
    parser.add_argument("--top", type=int, default=DEFAULT_TOP_EXPENSES, help="Top expenses to chart")
    parser.add_argument("--currency", default="USD", help="Currency code for formatted amounts")
    parser.add_argument("--base-url", help="Override reports_base_url from config.json")
    parser.add_argument("--export-csv", action="store_true", help="Export the monthly breakdown as CSV")
    parser.add_argument("--dry-run", action="store_true", help="Build views but don't write files")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.input and not args.business:
        parser.error("--business is required unless --input is given")
    if args.top < 0:
        parser.error("--top must not be negative")

    config = load_config(required=not args.input and not args.base_url)
    if args.base_url:
        config["reports_base_url"] = args.base_url

    if args.export_csv:
        cmd_export_csv(args, config)
    elif args.view:
        cmd_build_view(args, config)
    elif args.input:
        args.view = "single-period"
        cmd_build_view(args, config)
    else:
        cmd_refresh_views(args, config)


if __name__ == "__main__":
    main()
