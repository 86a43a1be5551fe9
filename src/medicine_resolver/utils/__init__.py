# ============================================================================
# src/medicine_resolver/utils/__init__.py
# ============================================================================
"""
Utility modules for the medicine resolver.
"""

from .exceptions import (
    MedicineResolverError,
    ValidationError,
    ConfigurationError,
    StoreError,
    StoreQueryError,
    RecordNotFoundError,
)

from .logging import (
    setup_logging,
    JsonFormatter,
)

from .metrics import (
    MetricsCollector,
    Timer,
    get_metrics,
)

__all__ = [
    # Exceptions
    'MedicineResolverError',
    'ValidationError',
    'ConfigurationError',
    'StoreError',
    'StoreQueryError',
    'RecordNotFoundError',
    # Logging
    'setup_logging',
    'JsonFormatter',
    # Metrics
    'MetricsCollector',
    'Timer',
    'get_metrics',
]
