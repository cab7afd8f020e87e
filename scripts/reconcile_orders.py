"""Reconcile a file of participant orderings into a consensus report."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import argparse
import json
import logging

from dotenv import load_dotenv

from order_reconciliation.config import load_config
from order_reconciliation.errors import ReconciliationError
from order_reconciliation.reconciler import reconcile
from order_reconciliation.report import ReconciliationReport
from order_reconciliation.utils.io import load_orderings
from order_reconciliation.utils.logging_config import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI args."""
    parser = argparse.ArgumentParser(description="Compute a consensus file order from participant orderings")
    parser.add_argument("orderings", type=Path, help="JSON or YAML file with ordering records")
    parser.add_argument("--config", type=Path, default=None, help="Engine config YAML (default: $ORDER_RECONCILIATION_CONFIG or config/engine.yaml)")
    parser.add_argument("--reference", type=Path, default=None, help="JSON list with the current order to diff against")
    parser.add_argument("--out", type=Path, default=Path("results/consensus_report.json"))
    parser.add_argument("--log-dir", type=Path, default=None)
    parser.add_argument("--exclude-outliers", action="store_true")
    parser.add_argument("--all-conflicts", action="store_true", help="Report every conflict instead of the top few")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def run(args: argparse.Namespace, logger: logging.Logger) -> ReconciliationReport:
    """Load inputs, reconcile and persist the report."""
    config = load_config(args.config)
    if args.exclude_outliers:
        config.exclude_outliers = True
    if args.all_conflicts:
        config.max_conflicts = None

    orderings = load_orderings(args.orderings)
    reference = None
    if args.reference is not None:
        reference = json.loads(args.reference.read_text(encoding="utf-8"))

    report = reconcile(orderings, config=config, logger=logger, reference=reference)
    path = report.save(args.out)
    logger.info("Report written to %s", path)
    return report


def main(argv: list[str] | None = None) -> int:
    """Program entry point."""
    load_dotenv()
    args = parse_args(argv)
    logger, _ = setup_logging(
        log_dir=args.log_dir,
        name="order_reconciliation",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )
    try:
        report = run(args, logger)
    except (ReconciliationError, ValueError, OSError) as exc:
        logger.error("Reconciliation failed: %s", exc)
        return 1
    return 0 if report.validation.valid else 2


if __name__ == "__main__":
    raise SystemExit(main())
