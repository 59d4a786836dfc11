"""
gst_config -- engine configuration schema and YAML loading.

Architecture position:
    Configuration -- sits above ``gst_kernel`` and below ``gst_engines`` /
    ``gst_services``. The kernel MUST NEVER import from ``gst_config``.

Invariants enforced:
    - ``TaxConfig`` is a frozen, validated snapshot; an out-of-range
      default rate fails at construction (``InvalidRateError``).
    - YAML parsing never produces binary floats for money or rates.
"""

from gst_config.loader import (
    DEFAULT_RATE_TABLE_PATH,
    compute_checksum,
    load_default_rate_table,
    load_rate_table,
    load_yaml_file,
    parse_catalog,
    parse_line_items,
    parse_rate_table,
    parse_tax_config,
)
from gst_config.schema import (
    DisplayPolicy,
    MissingIdentifierPolicy,
    TaxConfig,
    TaxMode,
)

__all__ = [
    "DEFAULT_RATE_TABLE_PATH",
    "compute_checksum",
    "load_default_rate_table",
    "load_rate_table",
    "load_yaml_file",
    "parse_catalog",
    "parse_line_items",
    "parse_rate_table",
    "parse_tax_config",
    "DisplayPolicy",
    "MissingIdentifierPolicy",
    "TaxConfig",
    "TaxMode",
]
