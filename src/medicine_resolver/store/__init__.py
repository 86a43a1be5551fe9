# ============================================================================
# src/medicine_resolver/store/__init__.py
# ============================================================================
"""
Reference stores for the medicine catalog
"""

from .base import ReferenceStore, BrandMatch, CompositionMatch
from .memory_store import InMemoryMedicineStore
from .sqlite_store import (
    SQLiteMedicineStore,
    create_schema,
    insert_records,
    get_medicine_store,
    reset_medicine_store,
)

__all__ = [
    'ReferenceStore',
    'BrandMatch',
    'CompositionMatch',
    'InMemoryMedicineStore',
    'SQLiteMedicineStore',
    'create_schema',
    'insert_records',
    'get_medicine_store',
    'reset_medicine_store',
]
