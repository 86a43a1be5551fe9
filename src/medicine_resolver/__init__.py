# ============================================================================
# src/medicine_resolver/__init__.py
# ============================================================================
"""
Medicine Resolver

Fuzzy resolution of free-text (often OCR-derived) medicine names and
composition strings to canonical catalog records.

    from medicine_resolver import MedicineResolver, SQLiteMedicineStore

    resolver = MedicineResolver(SQLiteMedicineStore("medicines.db"))
    result = resolver.resolve("Paracetmol 500mg Tablet")
"""

from .core import (
    MatchType,
    FailureReason,
    MedicineRecord,
    CompositionSlot,
    SearchOptions,
    SearchResult,
    BatchItem,
    BatchResult,
)
from .resolver import MedicineResolver, BatchRunner
from .store import (
    ReferenceStore,
    SQLiteMedicineStore,
    InMemoryMedicineStore,
    get_medicine_store,
)
from .utils.exceptions import (
    MedicineResolverError,
    ValidationError,
    StoreError,
    StoreQueryError,
)

__version__ = "1.0.0"

__all__ = [
    'MatchType',
    'FailureReason',
    'MedicineRecord',
    'CompositionSlot',
    'SearchOptions',
    'SearchResult',
    'BatchItem',
    'BatchResult',
    'MedicineResolver',
    'BatchRunner',
    'ReferenceStore',
    'SQLiteMedicineStore',
    'InMemoryMedicineStore',
    'get_medicine_store',
    'MedicineResolverError',
    'ValidationError',
    'StoreError',
    'StoreQueryError',
]
