# ============================================================================
# src/medicine_resolver/matching/__init__.py
# ============================================================================
"""
Name-level matching primitives: dosage extraction, normalization, similarity
"""

from .dosage import ExtractedDose, extract_dose, strip_dose
from .normalizer import generate_variations, remove_suffixes, ocr_variants
from .similarity import (
    levenshtein_distance,
    similarity,
    trigram_similarity,
    is_trigram_similar,
)
