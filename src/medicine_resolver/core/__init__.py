# ============================================================================
# src/medicine_resolver/core/__init__.py
# ============================================================================
"""
Core data model: catalog records, candidates and results
"""

from .enums import MatchType, StrategyName, FailureReason
from .record import MedicineRecord, CompositionSlot, build_dose_string
from .results import SearchOptions, Candidate, SearchResult, BatchItem, BatchResult
