"""
gst_services -- Package init and public API.

Responsibility:
    Stateful orchestration over the pure GST engines. This is the only
    layer that may hold mutable state or use wall-clock time.

Architecture position:
    Services -- orchestration over engines + config + kernel.

    Dependency direction (enforced by tests/architecture/test_layer_boundaries.py):
        gst_services/ -> gst_engines/  (allowed)
        gst_engines/  -> gst_services/ (FORBIDDEN)
        gst_kernel/   -> gst_services/ (FORBIDDEN)
"""

from gst_services.calculation_service import GstCalculationService

__all__ = [
    "GstCalculationService",
]
