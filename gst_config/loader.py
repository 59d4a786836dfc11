"""
Configuration Loader (``gst_config.loader``).

Responsibility
--------------
Loads YAML documents and parses them into typed kernel/config objects:
``TaxConfig``, ``RateTable``, catalog snapshots and line items.

Invariants enforced
-------------------
* Parse errors raise ``ValueError``/``KeyError``/``ConfigurationError``
  with descriptive messages; required fields have no silent defaults.
* YAML floats are converted through their decimal text form; no binary
  float value ever reaches the engine.
* ``compute_checksum`` produces a deterministic SHA-256 hash of a parsed
  document for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Out-of-range rates  -> ``InvalidRateError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from gst_config.schema import TaxConfig
from gst_kernel.domain.rates import CatalogEntry, RateCategory, RateInfo, RateTable
from gst_kernel.domain.values import LineItem, as_decimal
from gst_kernel.logging_config import get_logger

logger = get_logger("config.loader")

DEFAULT_RATE_TABLE_PATH = Path(__file__).parent / "defaults" / "rate_table.yaml"

_DECIMAL_CONFIG_FIELDS = ("default_rate", "rounding_unit")


def load_yaml_file(path: Path | str) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any, field: str) -> Decimal:
    """Parse a YAML scalar into a Decimal (floats via their text form)."""
    if isinstance(value, float):
        value = repr(value)
    return as_decimal(value, field)


def parse_date(value: Any) -> date | None:
    """Parse an optional date from YAML (string or date object)."""
    if value is None:
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError(f"Cannot parse date from {value!r}")


def parse_tax_config(data: dict[str, Any]) -> TaxConfig:
    """Parse a ``TaxConfig`` from a dict; absent keys take schema defaults."""
    values = dict(data)
    for name in _DECIMAL_CONFIG_FIELDS:
        if name in values:
            values[name] = parse_decimal(values[name], name)
    return TaxConfig.from_dict(values)


def parse_rate_info(data: dict[str, Any]) -> RateInfo:
    """
    Parse a ``RateInfo``.

    ``category`` is optional; when absent it is derived from ``rate``.
    """
    percentage = parse_decimal(data["rate"], "rate")
    category = data.get("category")
    return RateInfo(
        category=RateCategory(category) if category else RateCategory.for_percentage(percentage),
        percentage=percentage,
        commodity_code=_optional_str(data.get("commodity_code")),
        cess_percentage=parse_decimal(data.get("cess_rate", 0), "cess_rate"),
    )


def parse_rate_table(data: dict[str, Any]) -> RateTable:
    """
    Parse a ``RateTable`` document::

        categories:
          mobile: {rate: 18, commodity_code: "8517"}
        commodity_codes:
          "8517": Mobile Phones
    """
    rates = {
        str(name): parse_rate_info(entry or {})
        for name, entry in (data.get("categories") or {}).items()
    }
    descriptions = {
        str(code): str(text)
        for code, text in (data.get("commodity_codes") or {}).items()
    }
    table = RateTable(rates=rates, descriptions=descriptions)
    logger.info(
        "rate_table_parsed",
        extra={"categories": list(table.categories)},
    )
    return table


def load_rate_table(path: Path | str) -> RateTable:
    return parse_rate_table(load_yaml_file(path))


def load_default_rate_table() -> RateTable:
    """The bundled retail (mobile shop) rate table."""
    return load_rate_table(DEFAULT_RATE_TABLE_PATH)


def parse_catalog_entry(data: dict[str, Any]) -> CatalogEntry:
    override = data.get("rate_override")
    return CatalogEntry(
        product_ref=str(data["product_ref"]),
        category=str(data["category"]),
        rate_override=parse_decimal(override, "rate_override") if override is not None else None,
        commodity_code=_optional_str(data.get("commodity_code")),
        effective_from=parse_date(data.get("effective_from")),
        effective_to=parse_date(data.get("effective_to")),
    )


def parse_catalog(rows: list[dict[str, Any]] | None) -> tuple[CatalogEntry, ...]:
    return tuple(parse_catalog_entry(row) for row in rows or ())


def parse_line_item(data: dict[str, Any]) -> LineItem:
    override = data.get("rate_override")
    return LineItem(
        product_ref=str(data["product_ref"]),
        description=str(data.get("description", "")),
        quantity=int(data["quantity"]),
        unit_price=parse_decimal(data["unit_price"], "unit_price"),
        rate_override=parse_decimal(override, "rate_override") if override is not None else None,
    )


def parse_line_items(rows: list[dict[str, Any]] | None) -> tuple[LineItem, ...]:
    return tuple(parse_line_item(row) for row in rows or ())


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of a parsed YAML document."""
    canonical = json.dumps(data, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
