# ============================================================================
# tests/unit/test_reference_store.py
# ============================================================================
"""
Tests for the reference store implementations

Every test runs against both the in-memory and the SQLite store.
"""

import pytest

from medicine_resolver.constants import (
    COMPOSITION_SCORE_CONTAINS,
    COMPOSITION_SCORE_EXACT,
    COMPOSITION_SCORE_SIMILAR,
    MATCH_SCORE_CONTAINS,
    MATCH_SCORE_EQUAL,
    MATCH_SCORE_OTHER,
    MATCH_SCORE_PREFIX,
)
from medicine_resolver.store import InMemoryMedicineStore, SQLiteMedicineStore


class TestFindExact:
    """Test case-insensitive brand equality"""

    def test_case_insensitive(self, store):
        record = store.find_exact("PARACETAMOL")
        assert record.med_id == 1

    def test_no_partial_match(self, store):
        assert store.find_exact("Paracetam") is None

    def test_deactivated_never_returned(self, store):
        assert store.find_exact("Aspirin") is None
        assert store.find_exact("Ecosprin") is None


class TestSearchBrandNames:
    """Test substring brand search"""

    def test_scores(self, store):
        matches = store.search_brand_names("paracetamol", limit=5)
        scores = {m.record.med_id: m.match_score for m in matches}

        assert scores[1] == MATCH_SCORE_EQUAL
        assert scores[2] == MATCH_SCORE_PREFIX

    def test_contains_score(self, store):
        matches = store.search_brand_names("advance", limit=5)

        assert [m.record.med_id for m in matches] == [3]
        assert matches[0].match_score == MATCH_SCORE_CONTAINS

    def test_limit(self, store):
        assert len(store.search_brand_names("a", limit=2)) == 2

    def test_ordered_by_score_then_popularity(self, store):
        matches = store.search_brand_names("0", limit=10)
        ids = [m.record.med_id for m in matches]

        # All "contains"; weights 70, 50, 40 then null
        assert ids == [5, 2, 7, 4]

    def test_wildcards_are_literal(self, store):
        assert store.search_brand_names("%", limit=5) == []
        assert store.search_brand_names("_", limit=5) == []

    def test_deactivated_never_returned(self, store):
        assert store.search_brand_names("asp", limit=5) == []


class TestSearchSimilarBrandNames:
    """Test trigram brand search"""

    def test_dropped_letter(self, store):
        matches = store.search_similar_brand_names("Paracetmol", limit=5)

        assert [m.record.med_id for m in matches][:2] == [1, 2]
        assert all(m.match_score == MATCH_SCORE_OTHER for m in matches)

    def test_unrelated(self, store):
        assert store.search_similar_brand_names("xqzv", limit=5) == []


class TestSearchCompositions:
    """Test composition (salt) search"""

    def test_exact_strength_and_unit(self, store):
        matches = store.search_compositions("Paracetamol", "500", "MG", limit=10)

        top = [m for m in matches if m.match_score == COMPOSITION_SCORE_EXACT]
        assert [m.record.med_id for m in top] == [1, 3]
        assert top[0].similarity == pytest.approx(1.0)

    def test_similar_without_dose(self, store):
        matches = store.search_compositions("Paracetamol", None, None, limit=10)

        assert {m.record.med_id for m in matches} == {1, 2, 3, 4}
        assert all(m.match_score == COMPOSITION_SCORE_SIMILAR for m in matches)
        # Equal similarity: popularity desc, null weight last
        assert [m.record.med_id for m in matches] == [1, 3, 2, 4]

    def test_other_slots_searched(self, store):
        matches = store.search_compositions("Clavulanic Acid", "125", "mg", limit=5)

        assert matches[0].record.med_id == 6
        assert matches[0].match_score == COMPOSITION_SCORE_EXACT

    def test_deactivated_never_returned(self, store):
        assert store.search_compositions("Aspirin", "75", "mg", limit=5) == []

    def test_limit(self, store):
        assert len(store.search_compositions("Paracetamol", None, None, limit=2)) == 2


@pytest.mark.parametrize("store_cls", ["memory", "sqlite"])
def test_containment_only_scores_70(store_cls, sample_records, tmp_path):
    """With a strict trigram threshold only plain containment qualifies"""
    if store_cls == "memory":
        strict = InMemoryMedicineStore(sample_records, trigram_threshold=0.95)
    else:
        strict = SQLiteMedicineStore.from_records(
            sample_records, db_path=tmp_path / "strict.db", trigram_threshold=0.95
        )

    matches = strict.search_compositions("Clavulanic", None, None, limit=5)

    assert [m.record.med_id for m in matches] == [6]
    assert matches[0].match_score == COMPOSITION_SCORE_CONTAINS
    strict.close()


class TestGetById:
    """Test direct lookup"""

    def test_found(self, store):
        record = store.get_by_id(1)

        assert record.brand_name == "Paracetamol"
        assert record.manufacturer == "GSK"
        assert record.compositions[0].strength == "500"

    def test_missing(self, store):
        assert store.get_by_id(999) is None

    def test_deactivated(self, store):
        assert store.get_by_id(8) is None
        assert store.get_by_id(9) is None
