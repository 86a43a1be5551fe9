# ============================================================================
# tests/unit/test_record.py
# ============================================================================
"""
Tests for catalog records and resolution results
"""

import pytest

from medicine_resolver.core.enums import FailureReason, MatchType, StrategyName
from medicine_resolver.core.record import CompositionSlot, MedicineRecord, build_dose_string
from medicine_resolver.core.results import BatchItem, Candidate, SearchResult


def _candidate(med_id, score, sim, weightage, strategy=StrategyName.FUZZY):
    return Candidate(
        record=MedicineRecord(med_id=med_id, brand_name=f"Brand {med_id}", weightage=weightage),
        similarity=sim,
        match_score=score,
        search_term="brand",
        strategy=strategy,
    )


class TestMedicineRecord:
    """Test the record model"""

    def test_slots_padded(self):
        record = MedicineRecord(med_id=1, brand_name="Dolo 650",
                                compositions=[CompositionSlot("Paracetamol", "650", "mg")])

        assert len(record.compositions) == 5
        assert record.compositions[4].name is None

    def test_too_many_slots(self):
        with pytest.raises(ValueError):
            MedicineRecord(med_id=1, brand_name="X", compositions=[CompositionSlot("A")] * 6)

    def test_sparse_slots_kept_in_position(self):
        record = MedicineRecord(med_id=1, brand_name="X", compositions=[
            CompositionSlot(), CompositionSlot("Caffeine", "65", "mg"),
        ])
        data = record.to_dict()

        assert data["composition1_name"] is None
        assert data["composition2_dose"] == "65mg"
        assert data["composition"] == "Caffeine 65mg"

    def test_dose_string(self):
        assert build_dose_string("500", "mg") == "500mg"
        assert build_dose_string("500", None) is None
        assert build_dose_string(None, "mg") is None

    def test_no_compositions(self):
        assert MedicineRecord(med_id=1, brand_name="X").to_dict()["composition"] is None

    def test_availability(self):
        assert MedicineRecord(1, "X").is_available
        assert not MedicineRecord(1, "X", is_active=False).is_available
        assert not MedicineRecord(1, "X", is_deactivated=True).is_available


class TestCandidateOrdering:
    """Test the arbitration sort key"""

    def test_score_then_similarity_then_popularity(self):
        candidates = [
            _candidate(1, 80, 0.99, 100),
            _candidate(2, 90, 0.75, None),
            _candidate(3, 90, 0.75, 10),
            _candidate(4, 90, 0.80, 1),
        ]

        ordered = sorted(candidates, key=Candidate.sort_key)

        assert [c.record.med_id for c in ordered] == [4, 3, 2, 1]

    def test_full_ties_keep_discovery_order(self):
        candidates = [_candidate(i, 90, 0.8, None) for i in range(5)]

        ordered = sorted(candidates, key=Candidate.sort_key)

        assert [c.record.med_id for c in ordered] == list(range(5))

    def test_match_type_labels(self):
        assert _candidate(1, 100, 1.0, None, StrategyName.EXACT).match_type == MatchType.EXACT
        assert _candidate(1, 100, 1.0, None, StrategyName.FUZZY).match_type == MatchType.FUZZY
        assert _candidate(1, 100, 1.0, None, StrategyName.COMPOSITION).match_type == \
            MatchType.EXACT_COMPOSITION
        assert _candidate(1, 80, 1.0, None, StrategyName.COMPOSITION).match_type == MatchType.FUZZY


class TestSearchResult:
    """Test result construction"""

    def test_failed(self):
        result = SearchResult.failed(FailureReason.NO_MATCH, "No matching medicine found")

        assert not result.success
        assert result.confidence == 0.0
        assert result.to_dict()["failure_reason"] == "no_match"
        assert result.to_dict()["match"] is None

    def test_batch_item_coercion(self):
        assert BatchItem.coerce("Dolo") == BatchItem("Dolo")
        assert BatchItem.coerce({"medicine_name": "Dolo", "medicine_salt": "Paracetamol"}) == \
            BatchItem("Dolo", "Paracetamol")
