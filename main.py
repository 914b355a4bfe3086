# main.py
"""
CLI entry point for PredictGenie pricing analysis.
Usage examples:
  # Analyze one product against competitor URLs
  python main.py url --product-url https://yourstore.com/camera \
      --competitor-url https://competitorA.com/camera --competitor-url https://competitorB.com/cam

  # Analyze a CSV batch, mapping its columns
  python main.py csv --file products.csv --name-column productName --price-column currentPrice \
      --url-column userProductUrl --competitor-column competitorUrl_1 --output data/results.json

  # Write the sample CSV (default: <DATA_DIR>/sample_products.csv)
  python main.py sample
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from predictgenie.config.settings import settings
from predictgenie.utils.analysis_request import (
    AnalysisRequest,
    InvalidRequestError,
    build_prompt,
    build_request_from_csv,
    build_single_request,
)
from predictgenie.utils.analysis_result import SCHEMA_VERSION, ProductAnalysis
from predictgenie.utils.csv_parser import (
    SAMPLE_CSV_FILENAME,
    FormatError,
    read_csv_file,
    write_sample_csv,
)
from predictgenie.utils.field_mapping import FieldMapping, MappingIncompleteError
from predictgenie.utils.logger import get_logger
from predictgenie.utils.normalize import NoValidRowsError
from predictgenie.utils.openai_client import (
    AnalysisInProgressError,
    ExternalServiceError,
    PricingAnalysisClient,
)

logger = get_logger("main")

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_SERVICE_ERROR = 2

RESULTS_FILENAME = "analysis_results.json"


def _parse_args(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(
        description="Get AI pricing suggestions for products and their competitors."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    url_cmd = sub.add_parser("url", help="Analyze one product URL against competitor URLs.")
    url_cmd.add_argument("--product-url", required=True, help="Your product page URL.")
    url_cmd.add_argument(
        "--competitor-url",
        action="append",
        default=[],
        help="Competitor product URL (repeat for several).",
    )

    csv_cmd = sub.add_parser("csv", help="Analyze a CSV batch of products.")
    csv_cmd.add_argument("--file", required=True, help="Path to the products .csv file.")
    csv_cmd.add_argument("--name-column", default="", help="Column holding the product name.")
    csv_cmd.add_argument("--price-column", default="", help="Column holding the current price.")
    csv_cmd.add_argument("--url-column", default="", help="Column holding your product URL (optional).")
    csv_cmd.add_argument(
        "--competitor-column",
        action="append",
        default=[],
        help="Column holding a competitor URL (repeat for several; optional).",
    )

    for cmd in (url_cmd, csv_cmd):
        cmd.add_argument(
            "--output",
            nargs="?",
            const=str(Path(settings.DATA_DIR) / RESULTS_FILENAME),
            help=f"Write the analysis results to this JSON file (bare flag: {settings.DATA_DIR}/{RESULTS_FILENAME}).",
        )
        cmd.add_argument("--model", help=f"Model or deployment name (default: {settings.OPENAI_MODEL}).")
        cmd.add_argument(
            "--no-web-search",
            action="store_true",
            help="Do not let the model search the web for missing competitors.",
        )
        cmd.add_argument(
            "--dry-run",
            action="store_true",
            help="Print the prompt that would be sent and exit.",
        )

    sample_cmd = sub.add_parser("sample", help="Write the sample products CSV.")
    sample_cmd.add_argument(
        "--output",
        default=str(Path(settings.DATA_DIR) / SAMPLE_CSV_FILENAME),
        help="File or directory to write to (default: %(default)s).",
    )
    return parser.parse_args(argv)


def _build_request(args) -> AnalysisRequest:
    if args.command == "url":
        return build_single_request(args.product_url, args.competitor_url)

    table = read_csv_file(args.file)
    mapping = FieldMapping.from_columns(
        args.name_column,
        args.price_column,
        args.url_column,
        args.competitor_column,
    )
    request, result = build_request_from_csv(table, mapping)
    if result.warning:
        logger.warning(result.warning, extra={"skipped_rows": len(result.errors)})
    return request


def _write_results(results: List[ProductAnalysis], output: str) -> Path:
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "schemaVersion": SCHEMA_VERSION,
        "results": [r.to_dict() for r in results],
    }
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, ensure_ascii=False, indent=2)
    logger.info("Saved analysis results", extra={"path": str(path), "count": len(results)})
    return path


def _print_results(results: List[ProductAnalysis]) -> None:
    for item in results:
        product = item.user_product
        print(
            f"{product.product_name}: current {product.current_price:.2f} -> "
            f"suggested {item.suggested_price:.2f} ({item.price_change_percent:+.1f}%)"
        )
        for comp in item.competitors:
            price = "n/a" if comp.price is None else f"{comp.price:.2f}"
            status = comp.stock_status or "unknown stock"
            trend = comp.price_trend or "unknown trend"
            print(f"    {comp.product_name} @ {price} [{status}, {trend}]")
        if item.reasoning:
            print(f"  Reasoning: {item.reasoning}")


def main(argv: Optional[Sequence[str]] = None, client: Optional[PricingAnalysisClient] = None) -> int:
    args = _parse_args(argv)

    if args.command == "sample":
        path = write_sample_csv(args.output)
        print(path)
        return EXIT_OK

    try:
        request = _build_request(args)
    except (FormatError, MappingIncompleteError, NoValidRowsError, InvalidRequestError) as exc:
        logger.error("Invalid input", extra={"error": str(exc)})
        print(str(exc), file=sys.stderr)
        return EXIT_INPUT_ERROR

    if args.dry_run:
        print(build_prompt(request))
        return EXIT_OK

    try:
        client = client or PricingAnalysisClient(
            model=args.model,
            enable_web_search=False if args.no_web_search else None,
        )
        results = client.analyze(request)
    except (ExternalServiceError, AnalysisInProgressError, RuntimeError) as exc:
        logger.error("Analysis Failed", extra={"error": str(exc)})
        print(f"Analysis Failed: {exc}", file=sys.stderr)
        return EXIT_SERVICE_ERROR

    _print_results(results)
    if args.output:
        _write_results(results, args.output)
    return EXIT_OK


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
