"""
gst_services.calculation_service -- GST calculation for the billing flow.

Responsibility:
    Wires shop configuration, the category rate table and the identifier
    validator into ``GstCalculator`` and ``ReconciliationValidator``, and
    keeps the most recent calculation in a single externally visible slot
    for UI consumers.

Architecture position:
    Services -- stateful orchestration over engines + kernel. The only
    layer that holds mutable state or reads the wall clock.

Invariants enforced:
    - The engines stay stateless; the ``latest`` slot lives here.
    - Last write wins: no locking, every ``calculate`` overwrites the slot.
    - Validation issues are logged at WARNING, never raised.

Failure modes:
    - CatalogRequiredError: ``calculate`` called without a catalog.
    - InvalidRateError: per-transaction override outside [0, 100].

Usage:
    service = GstCalculationService(TaxConfig(), load_default_rate_table())
    result, issues = service.calculate_and_validate(
        line_items=items,
        catalog=catalog_entries,
        seller_id="27AAPFU0939F1ZV",
    )
    service.latest  # -> result
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from gst_config.schema import TaxConfig, TaxMode
from gst_engines.calculator import GstCalculator
from gst_engines.rates import RateStore
from gst_engines.reconciliation import ReconciliationValidator
from gst_engines.serialization import invoice_tax_details
from gst_engines.types import CalculationResult, ValidationIssue
from gst_kernel.domain.identifiers import GstinValidator, TaxIdentifierValidator
from gst_kernel.domain.rates import CatalogEntry, RateTable
from gst_kernel.domain.values import LineItem
from gst_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.calculation")


class GstCalculationService:
    """Calculate, validate and remember the latest GST calculation."""

    def __init__(
        self,
        config: TaxConfig,
        rate_table: RateTable | None = None,
        identifier_validator: TaxIdentifierValidator | None = None,
        flag_assumed_jurisdiction: bool = False,
    ):
        self.config = config
        self.identifier_validator = identifier_validator or GstinValidator()
        self.calculator = GstCalculator(self.identifier_validator, rate_table)
        self.validator = ReconciliationValidator(
            self.identifier_validator,
            flag_assumed_jurisdiction=flag_assumed_jurisdiction,
        )
        self._latest: CalculationResult | None = None

    @property
    def latest(self) -> CalculationResult | None:
        """Most recent result from ``calculate`` (None after ``clear``)."""
        return self._latest

    def clear(self) -> None:
        self._latest = None

    def calculate(
        self,
        line_items: Sequence[LineItem],
        catalog: RateStore | Sequence[CatalogEntry] | None,
        seller_id: str | None = None,
        buyer_id: str | None = None,
        override_rate: Decimal | None = None,
        mode_override: TaxMode | None = None,
    ) -> CalculationResult:
        result = self.calculator.calculate(
            line_items=line_items,
            catalog=catalog,
            config=self.config,
            seller_id=seller_id,
            buyer_id=buyer_id,
            override_rate=override_rate,
            mode_override=mode_override,
        )
        self._latest = result
        return result

    def validate(self, result: CalculationResult) -> tuple[ValidationIssue, ...]:
        issues = self.validator.validate(result=result)
        for issue in issues:
            logger.warning(
                "gst_validation_issue",
                extra={
                    "code": issue.code.value,
                    "severity": issue.severity.value,
                    "issue_message": issue.message,
                },
            )
        return issues

    def calculate_and_validate(
        self,
        line_items: Sequence[LineItem],
        catalog: RateStore | Sequence[CatalogEntry] | None,
        seller_id: str | None = None,
        buyer_id: str | None = None,
        override_rate: Decimal | None = None,
        mode_override: TaxMode | None = None,
    ) -> tuple[CalculationResult, tuple[ValidationIssue, ...]]:
        result = self.calculate(
            line_items,
            catalog,
            seller_id=seller_id,
            buyer_id=buyer_id,
            override_rate=override_rate,
            mode_override=mode_override,
        )
        return result, self.validate(result)

    def tax_details(
        self,
        transaction_id: str | int,
        result: CalculationResult | None = None,
        recorded_at: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Persistence row for ``result`` (default: the latest calculation).

        Raises:
            ValueError: if no result is given and none has been calculated.
        """
        result = result or self._latest
        if result is None:
            raise ValueError("No calculation available for tax details")
        with LogContext.bind(transaction_id=str(transaction_id)):
            row = invoice_tax_details(
                transaction_id, result, recorded_at or datetime.now(UTC)
            )
            logger.info("gst_tax_details_built", extra={"mode": row["mode"]})
        return row
