# ============================================================================
# src/medicine_resolver/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the medicine resolver.
"""

from typing import Optional


class MedicineResolverError(Exception):
    """Base exception for all medicine resolver errors."""
    pass


class ValidationError(MedicineResolverError):
    """Malformed or out-of-range input."""
    def __init__(self, message: str, field_name: Optional[str] = None):
        super().__init__(message)
        self.field_name = field_name


class ConfigurationError(MedicineResolverError):
    """Invalid configuration."""
    pass


class StoreError(MedicineResolverError):
    """Error with the reference store."""
    pass


class StoreQueryError(StoreError):
    """A reference store query failed."""
    def __init__(self, message: str, operation: str, term: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
        self.term = term


class RecordNotFoundError(StoreError):
    """No active record with the requested id."""
    def __init__(self, med_id: int):
        super().__init__(f"Medicine not found: {med_id}")
        self.med_id = med_id
