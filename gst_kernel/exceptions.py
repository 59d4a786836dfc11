"""
Typed exception hierarchy for the GST kernel.

Only structurally invalid configuration raises. Business-data anomalies
(missing identifiers, negative totals, footing mismatches) are reported as
``ValidationIssue`` values by the reconciliation validator and never raise.

    GstKernelError (base)
    |
    +-- ConfigurationError
        +-- InvalidRateError
        +-- CatalogRequiredError
        +-- InvalidConfigurationError

Every class carries a ``code`` class attribute so callers catch by type and
report by code, never by parsing messages:

    try:
        config = TaxConfig.from_dict(data)
    except InvalidRateError as e:
        api_response(code=e.code, rate=str(e.rate))
"""


class GstKernelError(Exception):
    """
    Base exception for all GST kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "GST_KERNEL_ERROR"


class ConfigurationError(GstKernelError):
    """Base exception for corrupt or incomplete engine configuration."""

    code: str = "CONFIGURATION_ERROR"


class InvalidRateError(ConfigurationError):
    """A tax rate outside the closed interval [0, 100] percent."""

    code: str = "INVALID_RATE"

    def __init__(self, rate: object, source: str = "rate"):
        self.rate = rate
        self.source = source
        super().__init__(
            f"Invalid {source} {rate}: must be between 0 and 100 percent"
        )


class CatalogRequiredError(ConfigurationError):
    """Calculation was invoked without a catalog snapshot."""

    code: str = "CATALOG_REQUIRED"

    def __init__(self) -> None:
        super().__init__(
            "A catalog snapshot (rate store or catalog entries) is required; "
            "pass an empty sequence when no products are catalogued"
        )


class InvalidConfigurationError(ConfigurationError):
    """A configuration field holds a value the engine cannot use."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid configuration {field}={value!r}: {reason}")
