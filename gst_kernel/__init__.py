"""
GST Kernel

Shared foundation for the GST calculation engine:
- Decimal-only money values and the sale line item
- Rate categories, resolved rates, catalog rows and rate tables
- Tax identifier (GSTIN) validation
- Typed configuration exceptions
- Structured JSON logging
"""

__version__ = "0.1.0"
