# ============================================================================
# src/medicine_resolver/store/base.py
# ============================================================================
"""
Reference Store Interface

A reference store is the read-only medicine catalog the match strategies
query. Implementations must:
- never return inactive or deactivated records
- treat every caller value as a bound parameter, never as query text
- raise StoreQueryError when a query itself fails
- tolerate concurrent read-only use
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ..config import matching_settings
from ..constants import (
    MATCH_SCORE_EQUAL,
    MATCH_SCORE_PREFIX,
    MATCH_SCORE_CONTAINS,
    MATCH_SCORE_OTHER,
    COMPOSITION_SCORE_EXACT,
    COMPOSITION_SCORE_SIMILAR,
    COMPOSITION_SCORE_CONTAINS,
)
from ..core.record import MedicineRecord
from ..matching.similarity import is_trigram_similar, trigram_similarity


@dataclass
class BrandMatch:
    record: MedicineRecord
    match_score: int


@dataclass
class CompositionMatch:
    record: MedicineRecord
    similarity: float      # best trigram similarity across the composition slots
    match_score: int


class ReferenceStore(ABC):
    """Read-only medicine catalog."""

    def __init__(self, trigram_threshold: Optional[float] = None):
        if trigram_threshold is None:
            trigram_threshold = matching_settings.TRIGRAM_SIMILARITY_THRESHOLD
        self.trigram_threshold = trigram_threshold

    @abstractmethod
    def find_exact(self, name: str) -> Optional[MedicineRecord]:
        """
        Case-insensitive brand-name equality.

        Returns:
            Most popular matching record (nulls last), or None
        """

    @abstractmethod
    def search_brand_names(self, term: str, limit: int) -> List[BrandMatch]:
        """
        Records whose brand name contains the term, case-insensitive.

        Returns:
            At most `limit` matches ordered by match score desc, then
            popularity desc with nulls last
        """

    @abstractmethod
    def search_similar_brand_names(self, term: str, limit: int) -> List[BrandMatch]:
        """
        Records whose brand name is trigram-similar to the term. Catches
        dropped or swapped letters that substring search cannot.

        Returns:
            At most `limit` matches, all scored MATCH_SCORE_OTHER, ordered by
            trigram similarity desc, then popularity desc with nulls last
        """

    @abstractmethod
    def search_compositions(
        self,
        name: str,
        strength: Optional[str],
        unit: Optional[str],
        limit: int,
    ) -> List[CompositionMatch]:
        """
        Records with a composition slot approximately equal to (or
        containing / contained in) the composition name.

        Returns:
            At most `limit` matches ordered by match score desc, similarity
            desc, then popularity desc with nulls last
        """

    @abstractmethod
    def get_by_id(self, med_id: int) -> Optional[MedicineRecord]:
        """Active record by id, or None."""

    def close(self) -> None:
        """Release store resources."""


def brand_match_score(brand_name: Optional[str], term: str) -> int:
    """100 equal, 90 prefix, 80 contains, 70 otherwise (case-insensitive)."""
    brand = (brand_name or '').lower()
    needle = term.lower()
    if brand == needle:
        return MATCH_SCORE_EQUAL
    if brand.startswith(needle):
        return MATCH_SCORE_PREFIX
    if needle in brand:
        return MATCH_SCORE_CONTAINS
    return MATCH_SCORE_OTHER


def slot_contains(slot_name: Optional[str], name: str) -> bool:
    """Plain case-insensitive containment in either direction."""
    if not slot_name or not name:
        return False
    a, b = slot_name.lower(), name.lower()
    return a in b or b in a


def score_composition(
    record: MedicineRecord,
    name: str,
    strength: Optional[str],
    unit: Optional[str],
    threshold: float,
) -> Optional[CompositionMatch]:
    """
    Score one record against a composition query.

    Returns:
        CompositionMatch, or None when no slot qualifies
    """
    best_similarity = 0.0
    any_similar = False
    any_exact = False
    any_contains = False

    for slot in record.compositions:
        best_similarity = max(best_similarity, trigram_similarity(slot.name or '', name))
        if is_trigram_similar(slot.name, name, threshold):
            any_similar = True
            if (
                strength is not None and unit is not None
                and slot.strength == strength
                and (slot.unit or '').lower() == unit.lower()
            ):
                any_exact = True
        elif slot_contains(slot.name, name):
            any_contains = True

    if any_exact:
        score = COMPOSITION_SCORE_EXACT
    elif any_similar:
        score = COMPOSITION_SCORE_SIMILAR
    elif any_contains:
        score = COMPOSITION_SCORE_CONTAINS
    else:
        return None

    return CompositionMatch(record=record, similarity=best_similarity, match_score=score)

