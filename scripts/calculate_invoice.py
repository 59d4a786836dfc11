#!/usr/bin/env python3
"""
Calculate GST for an invoice described in YAML.

Invoice document:

    seller_id: 27AAPFU0939F1ZV       # optional
    buyer_id: 29AAPFU0939F1ZR        # optional
    mode: partial_tax                # optional per-invoice mode override
    override_rate: 12                # optional per-transaction rate
    as_of: 2026-04-01                # optional catalog effective date
    config:                          # TaxConfig fields, all optional
      tax_included_in_price: false
      round_off: true
    catalog:
      - {product_ref: SKU-1, category: mobile}
    items:
      - {product_ref: SKU-1, description: Phone, quantity: 2, unit_price: "1000"}

Prints the calculation result as JSON on stdout and, with --validate,
each validation issue on stderr. Exit status is 1 when any ERROR issue is
found, 2 when the document cannot be loaded.

Usage:
    python3 scripts/calculate_invoice.py invoice.yaml
    python3 scripts/calculate_invoice.py invoice.yaml --validate
    python3 scripts/calculate_invoice.py invoice.yaml --rates my_rates.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from gst_config.loader import (  # noqa: E402
    load_default_rate_table,
    load_rate_table,
    load_yaml_file,
    parse_catalog,
    parse_date,
    parse_decimal,
    parse_line_items,
    parse_tax_config,
)
from gst_config.schema import TaxMode  # noqa: E402
from gst_engines.rates import CatalogSnapshot  # noqa: E402
from gst_engines.serialization import result_to_json  # noqa: E402
from gst_kernel.exceptions import GstKernelError  # noqa: E402
from gst_kernel.logging_config import configure_logging, get_logger  # noqa: E402
from gst_services.calculation_service import GstCalculationService  # noqa: E402

logger = get_logger("scripts.calculate_invoice")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calculate GST for a YAML invoice.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("invoice", type=Path, help="Invoice YAML document")
    parser.add_argument(
        "--rates",
        type=Path,
        default=None,
        help="Category rate table YAML (default: bundled table)",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Run reconciliation checks and report issues",
    )
    parser.add_argument(
        "--flag-assumed",
        action="store_true",
        help="Warn when the jurisdiction was assumed for a missing identifier",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=getattr(logging, args.log_level))

    try:
        doc = load_yaml_file(args.invoice)
        rate_table = (
            load_rate_table(args.rates) if args.rates else load_default_rate_table()
        )
        config = parse_tax_config(doc.get("config") or {})
        catalog = CatalogSnapshot(
            parse_catalog(doc.get("catalog")),
            rate_table,
            as_of=parse_date(doc.get("as_of")),
        )
        items = parse_line_items(doc.get("items"))
        override = doc.get("override_rate")
        override_rate = (
            parse_decimal(override, "override_rate") if override is not None else None
        )
        mode = TaxMode(doc["mode"]) if doc.get("mode") else None

        service = GstCalculationService(
            config,
            rate_table,
            flag_assumed_jurisdiction=args.flag_assumed,
        )
        result = service.calculate(
            items,
            catalog,
            seller_id=doc.get("seller_id"),
            buyer_id=doc.get("buyer_id"),
            override_rate=override_rate,
            mode_override=mode,
        )
    except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError, GstKernelError) as e:
        logger.error("invoice_load_failed", extra={"path": str(args.invoice), "error": str(e)})
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(result_to_json(result, indent=2))

    if not args.validate:
        return 0

    issues = service.validate(result)
    for issue in issues:
        print(f"{issue.severity.value.upper()} {issue.code.value}: {issue.message}", file=sys.stderr)
    return 1 if any(issue.is_error for issue in issues) else 0


if __name__ == "__main__":
    raise SystemExit(main())
