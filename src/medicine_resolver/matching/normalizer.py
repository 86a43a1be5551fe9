# ============================================================================
# src/medicine_resolver/matching/normalizer.py
# ============================================================================
"""
Medicine name normalization.

Turns one raw (often OCR-derived) name into a small, ordered set of search
variants: the raw and lowercase forms, the name without its dosage token,
the name without pharmaceutical-form suffixes, and a bounded number of OCR
character-confusion rewrites.
"""

import logging
import re
from typing import Dict, List, Optional

from ..config import matching_settings
from ..constants import MEDICINE_SUFFIXES, OCR_CONFUSION_CLASSES
from .dosage import extract_dose

logger = logging.getLogger(__name__)

_SUFFIX_PATTERNS = [
    re.compile(rf'\s+{re.escape(suffix)}\s*$', re.IGNORECASE)
    for suffix in MEDICINE_SUFFIXES
]


def remove_suffixes(name: Optional[str]) -> str:
    """
    Remove trailing pharmaceutical-form words from a name.

    Suffixes are applied in MEDICINE_SUFFIXES order, so stacked forms such
    as "Paracetamol SR Tablet" reduce to "paracetamol".

    Args:
        name: Medicine name

    Returns:
        Lowercased name without form suffixes
    """
    if not name:
        return ''

    cleaned = name.lower().strip()
    for pattern in _SUFFIX_PATTERNS:
        cleaned = pattern.sub('', cleaned)
    return cleaned.strip()


def ocr_variants(name: str) -> List[str]:
    """
    OCR-confusion rewrites of a name (o/0, i/1/l, s/5).

    Every occurrence is rewritten at once, one rewrite per substitution,
    rather than enumerating per-position permutations.
    """
    lower = name.lower()
    variants = []
    for members, substitutions in OCR_CONFUSION_CLASSES:
        if not any(ch in lower for ch in members):
            continue
        for source, target in substitutions:
            variants.append(lower.replace(source, target))
    return variants


def generate_variations(
    medicine_name: Optional[str],
    max_ocr_bases: Optional[int] = None,
    min_length: Optional[int] = None,
) -> List[str]:
    """
    Generate search variants for a medicine name.

    Args:
        medicine_name: Raw medicine name
        max_ocr_bases: How many leading variants get OCR rewrites
            (defaults to MAX_OCR_BASE_VARIANTS)
        min_length: Variants shorter than this are dropped
            (defaults to MIN_VARIANT_LENGTH)

    Returns:
        Deduplicated variants in insertion order
    """
    if not medicine_name:
        return []

    if max_ocr_bases is None:
        max_ocr_bases = matching_settings.MAX_OCR_BASE_VARIANTS
    if min_length is None:
        min_length = matching_settings.MIN_VARIANT_LENGTH

    # dict as an insertion-ordered set
    variations: Dict[str, None] = {}
    cleaned = medicine_name.strip()

    variations[cleaned] = None
    variations[cleaned.lower()] = None

    extracted = extract_dose(cleaned)
    if extracted and extracted.base_name and extracted.base_name != cleaned:
        variations[extracted.base_name] = None
        variations[extracted.base_name.lower()] = None

    without_suffix = remove_suffixes(cleaned)
    if without_suffix and without_suffix != cleaned.lower():
        variations[without_suffix] = None

    for base in list(variations)[:max_ocr_bases]:
        for variant in ocr_variants(base):
            variations.setdefault(variant, None)

    result = [v for v in variations if len(v.strip()) >= min_length]
    logger.debug(f"Generated {len(result)} variations for '{medicine_name}'")
    return result
