"""
Jurisdiction resolution -- intrastate vs interstate supply.

Pure function of the two identifiers and the injected validator. When
either identifier is missing the configured ``MissingIdentifierPolicy``
decides (INTRASTATE unless configured otherwise); callers learn that a
default was applied through ``is_assumed`` and the result's
``jurisdiction_assumed`` flag.
"""

from __future__ import annotations

from gst_config.schema import MissingIdentifierPolicy
from gst_engines.types import Jurisdiction
from gst_kernel.domain.identifiers import TaxIdentifierValidator, clean_identifier
from gst_kernel.logging_config import get_logger

logger = get_logger("engines.jurisdiction")

_POLICY_DEFAULTS = {
    MissingIdentifierPolicy.INTRASTATE: Jurisdiction.INTRASTATE,
    MissingIdentifierPolicy.INTERSTATE: Jurisdiction.INTERSTATE,
}


class JurisdictionResolver:
    """
    Decide the jurisdiction of a transaction from two tax identifiers.

    Usage:
        resolver = JurisdictionResolver(GstinValidator())
        resolver.resolve("27AAPFU0939F1ZV", "29AAPFU0939F1ZR")
        # Jurisdiction.INTERSTATE
    """

    def __init__(
        self,
        validator: TaxIdentifierValidator,
        missing_policy: MissingIdentifierPolicy = MissingIdentifierPolicy.INTRASTATE,
    ):
        self.validator = validator
        self.missing_policy = MissingIdentifierPolicy(missing_policy)

    def resolve(
        self,
        seller_id: str | None,
        buyer_id: str | None,
    ) -> Jurisdiction:
        seller = clean_identifier(seller_id)
        buyer = clean_identifier(buyer_id)

        if seller is None or buyer is None:
            jurisdiction = _POLICY_DEFAULTS[self.missing_policy]
            logger.debug(
                "jurisdiction_defaulted",
                extra={
                    "seller_present": seller is not None,
                    "buyer_present": buyer is not None,
                    "jurisdiction": jurisdiction.value,
                },
            )
            return jurisdiction

        if self.validator.same_jurisdiction(seller, buyer):
            return Jurisdiction.INTRASTATE
        return Jurisdiction.INTERSTATE

    @staticmethod
    def is_assumed(seller_id: str | None, buyer_id: str | None) -> bool:
        """True when ``resolve`` falls back to the missing-identifier policy."""
        return clean_identifier(seller_id) is None or clean_identifier(buyer_id) is None
