"""
Tax identifier (GSTIN) validation.

The engine depends only on the ``TaxIdentifierValidator`` protocol; callers
may inject any implementation. ``GstinValidator`` is the bundled one.

GSTIN layout (15 characters)::

    22 AAAAA 0000 A 1 Z 5
    |  |     |    | | | +-- check character
    |  |     |    | | +---- literal 'Z'
    |  |     |    | +------ entity number (1-9, A-Z)
    |  +-----+----+-------- PAN of the registrant
    +---------------------- state code
"""

from __future__ import annotations

import re
from typing import Protocol, runtime_checkable

from gst_kernel.logging_config import get_logger

logger = get_logger("domain.identifiers")

_GSTIN_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")
_CODE_POINTS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

STATE_CODES: dict[str, str] = {
    "01": "Jammu and Kashmir",
    "02": "Himachal Pradesh",
    "03": "Punjab",
    "04": "Chandigarh",
    "05": "Uttarakhand",
    "06": "Haryana",
    "07": "Delhi",
    "08": "Rajasthan",
    "09": "Uttar Pradesh",
    "10": "Bihar",
    "11": "Sikkim",
    "12": "Arunachal Pradesh",
    "13": "Nagaland",
    "14": "Manipur",
    "15": "Mizoram",
    "16": "Tripura",
    "17": "Meghalaya",
    "18": "Assam",
    "19": "West Bengal",
    "20": "Jharkhand",
    "21": "Odisha",
    "22": "Chhattisgarh",
    "23": "Madhya Pradesh",
    "24": "Gujarat",
    "25": "Daman and Diu",
    "26": "Dadra and Nagar Haveli",
    "27": "Maharashtra",
    "28": "Andhra Pradesh",
    "29": "Karnataka",
    "30": "Goa",
    "31": "Lakshadweep",
    "32": "Kerala",
    "33": "Tamil Nadu",
    "34": "Puducherry",
    "35": "Andaman and Nicobar Islands",
    "36": "Telangana",
    "37": "Andhra Pradesh",
    "38": "Ladakh",
    "96": "Other Territory",
    "97": "Other Territory",
    "99": "Centre Jurisdiction",
}


@runtime_checkable
class TaxIdentifierValidator(Protocol):
    """External collaborator deciding identifier validity and jurisdiction."""

    def is_valid(self, identifier: str) -> bool: ...

    def same_jurisdiction(self, identifier_a: str, identifier_b: str) -> bool: ...

    def jurisdiction_code(self, identifier: str) -> str | None: ...


def clean_identifier(identifier: str | None) -> str | None:
    """Trim and upper-case an identifier; blank strings become None."""
    if identifier is None:
        return None
    cleaned = identifier.strip().upper()
    return cleaned or None


def gstin_check_character(gstin_prefix: str) -> str:
    """
    Compute the mod-36 check character for the first 14 GSTIN characters.

    Raises:
        ValueError: if the prefix is not 14 characters of [0-9A-Z].
    """
    if len(gstin_prefix) != 14:
        raise ValueError(f"GSTIN prefix must be 14 characters, got {len(gstin_prefix)}")
    total = 0
    for i, char in enumerate(gstin_prefix):
        code_point = _CODE_POINTS.find(char)
        if code_point < 0:
            raise ValueError(f"Invalid GSTIN character {char!r}")
        product = code_point * (2 if i % 2 else 1)
        total += product // 36 + product % 36
    return _CODE_POINTS[(36 - total % 36) % 36]


class GstinValidator:
    """
    Format and state-code validation of GSTINs.

    The check character is verified only when ``verify_checksum`` is set;
    test and reference-only registrations commonly carry placeholder check
    characters.
    """

    def __init__(self, verify_checksum: bool = False):
        self.verify_checksum = verify_checksum

    def is_valid(self, identifier: str | None) -> bool:
        gstin = clean_identifier(identifier)
        if gstin is None:
            return False
        if not _GSTIN_PATTERN.match(gstin):
            logger.debug("gstin_format_rejected", extra={"length": len(gstin)})
            return False
        if gstin[:2] not in STATE_CODES:
            logger.debug("gstin_state_code_rejected", extra={"state_code": gstin[:2]})
            return False
        if self.verify_checksum and gstin_check_character(gstin[:14]) != gstin[14]:
            logger.debug("gstin_checksum_rejected", extra={"state_code": gstin[:2]})
            return False
        return True

    def same_jurisdiction(self, identifier_a: str | None, identifier_b: str | None) -> bool:
        code_a = self.jurisdiction_code(identifier_a)
        code_b = self.jurisdiction_code(identifier_b)
        if code_a is None or code_b is None:
            return False
        return code_a == code_b

    def jurisdiction_code(self, identifier: str | None) -> str | None:
        """The two-character state code, or None when unavailable."""
        gstin = clean_identifier(identifier)
        if gstin is None or len(gstin) < 2:
            return None
        return gstin[:2]

    def state_name(self, identifier: str | None) -> str | None:
        code = self.jurisdiction_code(identifier)
        return STATE_CODES.get(code) if code else None
