# ============================================================================
# src/medicine_resolver/store/memory_store.py
# ============================================================================
"""
In-memory medicine catalog.

Same semantics as the SQLite store over a plain list of records. Suited to
unit tests of the matching logic and to small embedded catalogs.
"""

from typing import Iterable, List, Optional

from .base import (
    BrandMatch,
    CompositionMatch,
    ReferenceStore,
    brand_match_score,
    score_composition,
)
from ..constants import MATCH_SCORE_OTHER
from ..core.record import MedicineRecord
from ..matching.similarity import is_trigram_similar, trigram_similarity
from ..utils.exceptions import StoreQueryError


class InMemoryMedicineStore(ReferenceStore):
    """Reference store over a list of MedicineRecord objects."""

    def __init__(
        self,
        records: Iterable[MedicineRecord] = (),
        trigram_threshold: Optional[float] = None,
        fail_queries: bool = False,
    ):
        super().__init__(trigram_threshold)
        self._records: List[MedicineRecord] = list(records)
        # When set, every query raises StoreQueryError (outage simulation)
        self.fail_queries = fail_queries

    def add(self, record: MedicineRecord) -> None:
        self._records.append(record)

    def _available(self, operation: str = "scan", term: Optional[str] = None) -> List[MedicineRecord]:
        if self.fail_queries:
            raise StoreQueryError("In-memory store is set to fail", operation, term)
        return [r for r in self._records if r.is_available]

    def find_exact(self, name: str) -> Optional[MedicineRecord]:
        needle = name.lower()
        hits = [r for r in self._available("find_exact", name) if (r.brand_name or '').lower() == needle]
        if not hits:
            return None
        return sorted(hits, key=lambda r: r.popularity_key())[0]

    def search_brand_names(self, term: str, limit: int) -> List[BrandMatch]:
        needle = term.lower()
        matches = [
            BrandMatch(record=r, match_score=brand_match_score(r.brand_name, term))
            for r in self._available("search_brand_names", term)
            if needle in (r.brand_name or '').lower()
        ]
        matches.sort(key=lambda m: (-m.match_score, m.record.popularity_key()))
        return matches[:limit]

    def search_similar_brand_names(self, term: str, limit: int) -> List[BrandMatch]:
        scored = []
        for r in self._available("search_similar_brand_names", term):
            if is_trigram_similar(r.brand_name, term, self.trigram_threshold):
                scored.append((trigram_similarity(r.brand_name, term), r))
        scored.sort(key=lambda pair: (-pair[0], pair[1].popularity_key()))
        return [
            BrandMatch(record=r, match_score=MATCH_SCORE_OTHER)
            for _, r in scored[:limit]
        ]

    def search_compositions(
        self,
        name: str,
        strength: Optional[str],
        unit: Optional[str],
        limit: int,
    ) -> List[CompositionMatch]:
        matches = []
        for record in self._available("search_compositions", name):
            match = score_composition(record, name, strength, unit, self.trigram_threshold)
            if match is not None:
                matches.append(match)
        matches.sort(key=lambda m: (-m.match_score, -m.similarity, m.record.popularity_key()))
        return matches[:limit]

    def get_by_id(self, med_id: int) -> Optional[MedicineRecord]:
        for record in self._available("get_by_id", str(med_id)):
            if record.med_id == med_id:
                return record
        return None

    def __len__(self) -> int:
        return sum(1 for r in self._records if r.is_available)
