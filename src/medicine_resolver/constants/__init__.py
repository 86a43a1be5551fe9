# ============================================================================
# src/medicine_resolver/constants/__init__.py
# ============================================================================
"""
Convenient imports for all constants
"""

from .medicine_forms import (
    MEDICINE_SUFFIXES,
    OCR_CONFUSION_CLASSES,
    DOSAGE_UNITS,
    MATCH_SCORE_EQUAL,
    MATCH_SCORE_PREFIX,
    MATCH_SCORE_CONTAINS,
    MATCH_SCORE_OTHER,
    COMPOSITION_SCORE_EXACT,
    COMPOSITION_SCORE_SIMILAR,
    COMPOSITION_SCORE_CONTAINS,
    COMPOSITION_SLOTS,
)
