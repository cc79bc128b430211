"""Command line interface for enriching phone numbers."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path

from .config import ConfigurationError, load_configuration, load_settings
from .factory import build_orchestrator
from .io import load_phones, write_results

LOGGER = logging.getLogger(__name__)


def build_parser(prog: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Enrich phone numbers into sales-intelligence reports",
    )
    parser.add_argument(
        "--config",
        help="Path to an optional configuration file (YAML or JSON)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    enrich = subparsers.add_parser("enrich", help="Enrich a single phone number and print the result as JSON")
    enrich.add_argument("phone", help="Phone number to look up")
    enrich.add_argument("--output", help="Optional path where the result should also be written")

    batch = subparsers.add_parser("batch", help="Enrich every phone number in a spreadsheet")
    batch.add_argument("input", help="Path to the input spreadsheet (CSV or XLSX)")
    batch.add_argument("output", help="Path where the results should be written (CSV, XLSX or JSON)")
    batch.add_argument("--column", help="Name of the column holding phone numbers")
    batch.add_argument(
        "--mode",
        choices=["sequential", "concurrent"],
        default="sequential",
        help="Whether to enrich phone numbers sequentially or concurrently",
    )
    batch.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Maximum number of workers to use in concurrent mode",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    try:
        config = load_configuration(args.config) if args.config else {}
        orchestrator = build_orchestrator(load_settings(config), config)
    except ConfigurationError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2

    if args.command == "enrich":
        if not args.phone.strip():
            LOGGER.error("A non-blank phone number is required")
            return 2
        result = orchestrator.enrich(args.phone)
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        if args.output:
            write_results(args.output, [args.phone], [result])
            LOGGER.info("Result written to %s", Path(args.output).resolve())
        return 0

    phones = load_phones(args.input, column=args.column)
    results = orchestrator.enrich_many(
        phones,
        concurrent=args.mode == "concurrent",
        max_workers=args.max_workers,
    )
    write_results(args.output, phones, results)

    statuses = Counter(result.status.value for result in results)
    LOGGER.info("Processed %s phone numbers: %s", len(phones), dict(statuses))
    LOGGER.info("Results written to %s", Path(args.output).resolve())
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
