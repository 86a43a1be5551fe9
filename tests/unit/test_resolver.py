# ============================================================================
# tests/unit/test_resolver.py
# ============================================================================
"""
Tests for single-item resolution
"""

import pytest

from medicine_resolver.core.enums import FailureReason, MatchType
from medicine_resolver.core.results import SearchOptions
from medicine_resolver.resolver import MedicineResolver
from medicine_resolver.store import InMemoryMedicineStore
from medicine_resolver.utils.exceptions import ValidationError


@pytest.fixture
def resolver(store, metrics):
    return MedicineResolver(store, metrics=metrics)


class TestExactResolution:
    """Test the exact-match short circuit"""

    @pytest.mark.parametrize("name", ["Paracetamol", "PARACETAMOL", "  paracetamol  "])
    def test_case_variants(self, resolver, name):
        result = resolver.resolve(name)

        assert result.success
        assert result.match_type == MatchType.EXACT
        assert result.confidence == 1.0
        assert result.match["med_drug_id"] == 1

    def test_suffix_stripped(self, resolver):
        result = resolver.resolve("Paracetamol Tablet")

        assert result.success
        assert result.match_type == MatchType.EXACT
        assert result.search_term == "paracetamol"

    def test_suffix_after_number(self, resolver):
        result = resolver.resolve("Pan 40 Tablet")

        assert result.match["drug_name"] == "Pan 40"

    def test_exact_disabled(self, resolver):
        result = resolver.resolve("Paracetamol", SearchOptions(prefer_exact_match=False))

        assert result.success
        assert result.match_type == MatchType.FUZZY
        assert result.confidence == 1.0

    def test_counted(self, resolver, metrics):
        resolver.resolve("Paracetamol")

        assert metrics.get_counter("resolve.exact") == 1
        assert metrics.get_timer_stats("resolve")["count"] == 1


class TestFuzzyResolution:
    """Test fuzzy matching and the acceptance threshold"""

    def test_dropped_letter(self, resolver):
        result = resolver.resolve("Paracetmol")

        assert result.success
        assert result.match_type == MatchType.FUZZY
        assert result.confidence >= 0.7
        assert result.match["drug_name"] == "Paracetamol"

    def test_substring_match(self, resolver):
        result = resolver.resolve("Azithral 50")

        assert result.success
        assert result.match["med_drug_id"] == 5
        assert result.confidence == pytest.approx(0.8 * 11 / 12)

    def test_below_threshold(self, resolver, metrics):
        result = resolver.resolve("Crocin")

        assert not result.success
        assert result.failure_reason == FailureReason.NO_MATCH
        assert result.confidence == 0.0
        assert result.match is None
        assert metrics.get_counter("resolve.no_match") == 1

    def test_lower_threshold_accepts(self, resolver):
        result = resolver.resolve("Crocin", SearchOptions(min_similarity=0.3))

        assert result.success
        assert result.match["drug_name"] == "Crocin Advance"

    def test_ocr_confusion(self, resolver):
        result = resolver.resolve("AZ1THRAL 500")

        assert result.success
        assert result.match["med_drug_id"] == 5

    def test_no_candidates(self, resolver):
        result = resolver.resolve("Xqzv")

        assert not result.success
        assert result.failure_reason == FailureReason.NO_MATCH
        assert result.execution_time_ms >= 0

    def test_deactivated_never_returned(self, resolver):
        for name in ("Aspirin", "Ecosprin"):
            result = resolver.resolve(name)
            assert not result.success


class TestCompositionResolution:
    """Test the composition fallback"""

    def test_exact_composition(self, resolver):
        result = resolver.resolve("Xqzv", SearchOptions(include_salt="Paracetamol 500mg"))

        assert result.success
        assert result.match_type == MatchType.EXACT_COMPOSITION
        assert result.confidence == pytest.approx(1.0)
        # Most popular of the 500mg records
        assert result.match["med_drug_id"] == 1

    def test_similar_composition_is_fuzzy(self, resolver):
        result = resolver.resolve("Xqzv", SearchOptions(include_salt="Pantoprazole"))

        assert result.success
        assert result.match_type == MatchType.FUZZY
        assert result.match["drug_name"] == "Pan 40"

    def test_not_run_when_fuzzy_found_candidates(self, resolver):
        # "Crocin" fuzzy candidate is below threshold, but still blocks composition
        result = resolver.resolve("Crocin", SearchOptions(include_salt="Azithromycin 500mg"))

        assert not result.success

    def test_run_when_fuzzy_only_has_trigram_guesses(self, resolver):
        # "Paracip" is trigram-similar to "Paracetamol" but contains no brand name
        result = resolver.resolve("Paracip", SearchOptions(include_salt="Azithromycin 500mg"))

        assert result.success
        assert result.match_type == MatchType.EXACT_COMPOSITION
        assert result.match["med_drug_id"] == 5


class TestValidation:
    """Test input validation"""

    @pytest.mark.parametrize("name", ["a", " a ", "", None, 42])
    def test_short_or_invalid_name(self, resolver, name):
        with pytest.raises(ValidationError):
            resolver.resolve(name)

    @pytest.mark.parametrize("options", [
        SearchOptions(min_similarity=1.5),
        SearchOptions(min_similarity=-0.1),
        SearchOptions(max_results=0),
        SearchOptions(max_results=101),
    ])
    def test_options_out_of_range(self, resolver, options):
        with pytest.raises(ValidationError):
            resolver.resolve("Paracetamol", options)


class TestStoreFailure:
    """Test total and partial store outages"""

    def test_all_queries_failed(self, sample_records, metrics):
        store = InMemoryMedicineStore(sample_records, fail_queries=True)
        result = MedicineResolver(store, metrics=metrics).resolve("Paracetamol")

        assert not result.success
        assert result.failure_reason == FailureReason.STORE_FAILURE
        assert metrics.get_counter("store.query_failures") > 0

    def test_exact_down_fuzzy_up(self, sample_records):
        class NoExactStore(InMemoryMedicineStore):
            def find_exact(self, name):
                self.fail_queries = True
                try:
                    return super().find_exact(name)
                finally:
                    self.fail_queries = False

        result = MedicineResolver(NoExactStore(sample_records)).resolve("Paracetamol")

        assert result.success
        assert result.match_type == MatchType.FUZZY
        assert result.match["med_drug_id"] == 1


class TestResultShape:
    """Test the formatted record"""

    def test_formatted_record(self, resolver):
        match = resolver.resolve("Paracetamol").match

        assert match["drug_name"] == "Paracetamol"
        assert match["composition1_name"] == "Paracetamol"
        assert match["composition1_dose"] == "500mg"
        assert match["composition2_name"] is None
        assert match["composition2_dose"] is None
        assert match["composition"] == "Paracetamol 500mg"
        assert match["mrp"] == 20.5
        assert match["manufacturer"] == "GSK"
        assert match["med_weightage"] == 90

    def test_to_dict(self, resolver):
        data = resolver.resolve("Paracetamol").to_dict()

        assert data["success"] is True
        assert data["match_type"] == "exact"
        assert data["failure_reason"] is None
