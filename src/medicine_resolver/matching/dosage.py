# ============================================================================
# src/medicine_resolver/matching/dosage.py
# ============================================================================
"""
Dosage extraction.

Separates a strength token such as "500mg" or "2.5 ml" from the rest of a
medicine name or composition string.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ..constants import DOSAGE_UNITS

# Number, optional whitespace, unit. Single-letter units must not run into
# another letter, so "250 Lotion" is not read as 250 litres; longer units may
# ("250mgs", "500MGTAB").
_WORD_UNITS = "|".join(re.escape(u) for u in DOSAGE_UNITS if u.isalpha() and len(u) > 1)
_LETTER_UNITS = "|".join(re.escape(u) for u in DOSAGE_UNITS if u.isalpha() and len(u) == 1)
_SYMBOL_UNITS = "|".join(re.escape(u) for u in DOSAGE_UNITS if not u.isalpha())
DOSE_PATTERN = re.compile(
    rf"(\d+(?:\.\d+)?)\s*({_WORD_UNITS}|(?:{_LETTER_UNITS})(?![a-z])|{_SYMBOL_UNITS})",
    re.IGNORECASE,
)

_WHITESPACE = re.compile(r'\s+')


@dataclass(frozen=True)
class ExtractedDose:
    base_name: str
    strength: str
    unit: str
    raw_dose_token: str


def extract_dose(name: Optional[str]) -> Optional[ExtractedDose]:
    """
    Extract the first strength+unit token from a name.

    Args:
        name: Raw medicine name, e.g. "Paracetamol 500mg"

    Returns:
        ExtractedDose, or None when the name has no dosage token
    """
    if not name:
        return None

    match = DOSE_PATTERN.search(name)
    if not match:
        return None

    remainder = name[:match.start()] + ' ' + name[match.end():]
    return ExtractedDose(
        base_name=_WHITESPACE.sub(' ', remainder).strip(),
        strength=match.group(1),
        unit=match.group(2).lower(),
        raw_dose_token=match.group(0).lower().strip(),
    )


def strip_dose(name: Optional[str]) -> str:
    """Base name with the dosage token removed, or the trimmed input."""
    if not name:
        return ''
    extracted = extract_dose(name)
    return extracted.base_name if extracted else name.strip()
