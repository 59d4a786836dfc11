"""
ReconciliationValidator -- post-hoc checks on a CalculationResult.

Read-only and side-effect free: run after calculation, never instead of it.
Every check reports a ``ValidationIssue``; nothing is auto-corrected and no
check aborts the others.

Checks:
    identifiers   seller present and valid when the mode requires it;
                  buyer valid when present
    amounts       subtotal and total_gst non-negative
    footing       sum of rate breakdown GST == total_gst (exact);
                  total_gst == cgst + sgst + igst; sum of item taxable
                  values == subtotal
    rounding      grand_total - gross_total == round_off_amount
    jurisdiction  CGST/SGST and IGST never both non-zero
    assumption    (opt-in) jurisdiction defaulted for a missing identifier
"""

from __future__ import annotations

from decimal import Decimal

from gst_engines.tracer import traced_engine
from gst_engines.types import (
    CalculationResult,
    IssueCode,
    IssueSeverity,
    ValidationIssue,
)
from gst_kernel.domain.identifiers import TaxIdentifierValidator, clean_identifier
from gst_kernel.domain.values import ZERO
from gst_kernel.logging_config import get_logger

logger = get_logger("engines.reconciliation")


class ReconciliationValidator:
    """
    Cross-check that a calculation result foots.

    Usage:
        validator = ReconciliationValidator(GstinValidator())
        issues = validator.validate(result=result)
        if any(issue.is_error for issue in issues):
            ...
    """

    def __init__(
        self,
        identifier_validator: TaxIdentifierValidator,
        flag_assumed_jurisdiction: bool = False,
    ):
        self.identifier_validator = identifier_validator
        self.flag_assumed_jurisdiction = flag_assumed_jurisdiction

    @traced_engine("gst_reconciliation", "1.0", fingerprint_fields=("result",))
    def validate(self, result: CalculationResult) -> tuple[ValidationIssue, ...]:
        issues: list[ValidationIssue] = []
        issues.extend(self.check_identifiers(result))
        issues.extend(self.check_amounts(result))
        issues.extend(self.check_footing(result))
        issues.extend(self.check_rounding(result))
        issues.extend(self.check_jurisdiction(result))

        logger.info(
            "reconciliation_completed",
            extra={
                "issue_count": len(issues),
                "codes": [issue.code.value for issue in issues],
            },
        )
        return tuple(issues)

    def check_identifiers(self, result: CalculationResult) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []

        if result.mode.requires_identifier:
            seller = clean_identifier(result.seller_id)
            if seller is None:
                issues.append(_error(
                    IssueCode.MISSING_SELLER_IDENTIFIER,
                    f"Seller tax identifier is required in {result.mode.value} mode",
                    mode=result.mode.value,
                ))
            elif not self.identifier_validator.is_valid(seller):
                issues.append(_error(
                    IssueCode.INVALID_SELLER_IDENTIFIER,
                    f"Seller tax identifier {seller!r} is not valid",
                    identifier=seller,
                ))

        buyer = clean_identifier(result.buyer_id)
        if buyer is not None and not self.identifier_validator.is_valid(buyer):
            issues.append(_error(
                IssueCode.INVALID_BUYER_IDENTIFIER,
                f"Buyer tax identifier {buyer!r} is not valid",
                identifier=buyer,
            ))
        return issues

    def check_amounts(self, result: CalculationResult) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for name in ("subtotal", "total_gst"):
            value = getattr(result, name)
            if value < ZERO:
                issues.append(_error(
                    IssueCode.NEGATIVE_AMOUNT,
                    f"{name} cannot be negative: {value}",
                    field=name,
                    amount=str(value),
                ))
        return issues

    def check_footing(self, result: CalculationResult) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []

        breakdown_total = sum(
            (b.total_gst_amount for b in result.rate_breakdown), ZERO
        )
        if breakdown_total != result.total_gst:
            issues.append(_mismatch(
                "rate breakdown GST total does not match total GST",
                "rate_breakdown.total_gst_amount",
                breakdown_total,
                result.total_gst,
            ))

        components = result.total_cgst + result.total_sgst + result.total_igst
        if components != result.total_gst:
            issues.append(_mismatch(
                "CGST + SGST + IGST does not match total GST",
                "total_cgst+total_sgst+total_igst",
                components,
                result.total_gst,
            ))

        item_taxable = sum((i.taxable_amount for i in result.items), ZERO)
        if item_taxable != result.subtotal:
            issues.append(_mismatch(
                "sum of item taxable values does not match subtotal",
                "items.taxable_amount",
                item_taxable,
                result.subtotal,
            ))
        return issues

    def check_rounding(self, result: CalculationResult) -> list[ValidationIssue]:
        difference = result.grand_total - result.gross_total
        if difference == result.round_off_amount:
            return []
        return [_error(
            IssueCode.ROUNDING_MISMATCH,
            "grand total minus gross total does not equal the round-off amount",
            difference=str(difference),
            round_off_amount=str(result.round_off_amount),
        )]

    def check_jurisdiction(self, result: CalculationResult) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        has_split = result.total_cgst != ZERO or result.total_sgst != ZERO
        if has_split and result.total_igst != ZERO:
            issues.append(_error(
                IssueCode.JURISDICTION_CONFLICT,
                "result carries both CGST/SGST and IGST",
                total_cgst=str(result.total_cgst),
                total_sgst=str(result.total_sgst),
                total_igst=str(result.total_igst),
            ))

        if (
            self.flag_assumed_jurisdiction
            and result.jurisdiction_assumed
            and result.total_gst != ZERO
        ):
            issues.append(ValidationIssue(
                code=IssueCode.AMBIGUOUS_JURISDICTION,
                severity=IssueSeverity.WARNING,
                message=(
                    f"jurisdiction assumed {result.jurisdiction.value}: "
                    "seller or buyer identifier is missing"
                ),
                details={
                    "seller_present": clean_identifier(result.seller_id) is not None,
                    "buyer_present": clean_identifier(result.buyer_id) is not None,
                },
            ))
        return issues


def _error(code: IssueCode, message: str, **details: object) -> ValidationIssue:
    return ValidationIssue(
        code=code,
        severity=IssueSeverity.ERROR,
        message=message,
        details=details or None,
    )


def _mismatch(
    message: str,
    source: str,
    actual: Decimal,
    expected: Decimal,
) -> ValidationIssue:
    return _error(
        IssueCode.RECONCILIATION_MISMATCH,
        message,
        source=source,
        actual=str(actual),
        expected=str(expected),
    )
