"""Command-line front end for the ad performance aggregator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from ad_aggregator.application.report_service import run_reporting_pipeline
from ad_aggregator.config import DEFAULT_TOP_K, RunConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ad-aggregator",
        description="Aggregate ad performance rows per campaign and write top-K CTR/CPA reports.",
    )
    parser.add_argument("--input", required=True, type=Path, help="Path to the input CSV file.")
    parser.add_argument("--output", required=True, type=Path, help="Directory for the CSV reports.")
    parser.add_argument(
        "--topk",
        type=int,
        default=DEFAULT_TOP_K,
        help=f"Campaigns per report (default: {DEFAULT_TOP_K}; non-positive values use the default).",
    )
    parser.add_argument("--benchmark", action="store_true", help="Print stage timings on stderr.")
    parser.add_argument(
        "--skip-bad-rows",
        action="store_true",
        help="Skip and count undecodable rows instead of failing the run.",
    )
    parser.add_argument("--delimiter", default=",", help="Input field delimiter (default: ',').")
    parser.add_argument("--excel", type=Path, default=None, help="Also write both rankings to this .xlsx file.")
    parser.add_argument("--summary-json", type=Path, default=None, help="Also write a JSON run summary here.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = RunConfig(
            input_path=args.input,
            output_dir=args.output,
            top_k=args.topk,
            benchmark=args.benchmark,
            on_bad_row="skip" if args.skip_bad_rows else "fail",
            delimiter=args.delimiter,
            excel_path=args.excel,
            summary_json_path=args.summary_json,
        )
        run_reporting_pipeline(config)
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
