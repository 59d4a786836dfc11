"""
Rate resolution for line items.

Precedence (first match wins), after the config-level kill switch:

    1. explicit override -- the line item's own ``rate_override``, else the
       per-transaction ``override_rate``
    2. catalog lookup by ``product_ref``
    3. ``config.default_rate`` with ``config.default_category``

When the shop disables tax (``allows_tax`` false or ``config.mode`` NO_TAX)
every item resolves to the 0% exempt rate. A per-invoice mode override
does not change this.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable

from gst_config.schema import TaxConfig
from gst_kernel.domain.rates import CatalogEntry, RateInfo, RateTable
from gst_kernel.domain.values import LineItem, validate_percentage
from gst_kernel.exceptions import InvalidConfigurationError
from gst_kernel.logging_config import get_logger

logger = get_logger("engines.rates")


@runtime_checkable
class RateStore(Protocol):
    """External catalog/rate lookup store."""

    def resolve_rate(self, product_ref: str) -> RateInfo | None: ...


class CatalogSnapshot:
    """
    In-memory rate store over catalog rows and a category rate table.

    Lookup for a product:
        - unknown product (or no row effective on ``as_of``) -> None
        - row with ``rate_override`` -> that rate, slab derived from it
        - row whose category is in the table -> the table's rate
        - otherwise -> None

    The row's own commodity code wins over the table's.
    """

    def __init__(
        self,
        entries: Iterable[CatalogEntry],
        rate_table: RateTable | None = None,
        as_of: date | None = None,
    ):
        self.rate_table = rate_table or RateTable()
        self.as_of = as_of
        self._entries: dict[str, CatalogEntry] = {}
        for entry in entries:
            if not entry.is_effective(as_of):
                continue
            if entry.product_ref in self._entries:
                raise InvalidConfigurationError(
                    "catalog",
                    entry.product_ref,
                    "duplicate entry" + (f" effective on {as_of}" if as_of else ""),
                )
            self._entries[entry.product_ref] = entry

    def __len__(self) -> int:
        return len(self._entries)

    def entry(self, product_ref: str) -> CatalogEntry | None:
        return self._entries.get(product_ref)

    def resolve_rate(self, product_ref: str) -> RateInfo | None:
        entry = self._entries.get(product_ref)
        if entry is None:
            return None

        if entry.rate_override is not None:
            table_rate = self.rate_table.lookup(entry.category)
            code = entry.commodity_code or (table_rate.commodity_code if table_rate else None)
            return RateInfo.of(entry.rate_override, commodity_code=code)

        table_rate = self.rate_table.lookup(entry.category)
        if table_rate is None:
            logger.debug(
                "catalog_category_unmapped",
                extra={"product_ref": product_ref, "category": entry.category},
            )
            return None
        if entry.commodity_code:
            return table_rate.with_commodity_code(entry.commodity_code)
        return table_rate


class RateResolver:
    """
    Resolve the applicable rate for one line item.

    Stateless; safe to share across threads.
    """

    def resolve(
        self,
        item: LineItem,
        catalog: RateStore,
        config: TaxConfig,
        override_rate: Decimal | None = None,
    ) -> RateInfo:
        if not config.applies_tax():
            return RateInfo.exempt()

        if item.rate_override is not None:
            return self._from_override(item, catalog, item.rate_override)
        if override_rate is not None:
            return self._from_override(
                item, catalog, validate_percentage(override_rate, "override_rate")
            )

        rate = catalog.resolve_rate(item.product_ref)
        if rate is not None:
            return rate

        logger.debug(
            "rate_defaulted",
            extra={
                "product_ref": item.product_ref,
                "default_rate": str(config.default_rate),
            },
        )
        return config.default_rate_info

    @staticmethod
    def _from_override(
        item: LineItem,
        catalog: RateStore,
        percentage: Decimal,
    ) -> RateInfo:
        # An override replaces the rate, not the product's classification.
        catalogued = catalog.resolve_rate(item.product_ref)
        code = catalogued.commodity_code if catalogued else None
        return RateInfo.of(percentage, commodity_code=code)
