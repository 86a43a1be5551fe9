# ============================================================================
# tests/unit/test_normalizer.py
# ============================================================================
"""
Tests for medicine name normalization
"""

import pytest

from medicine_resolver.matching.normalizer import (
    generate_variations,
    ocr_variants,
    remove_suffixes,
)


class TestRemoveSuffixes:
    """Test pharmaceutical form suffix stripping"""

    def test_tablet(self):
        assert remove_suffixes("Paracetamol Tablet") == "paracetamol"

    def test_stacked_suffixes(self):
        assert remove_suffixes("Paracetamol SR Tablet") == "paracetamol"

    def test_plural_form(self):
        assert remove_suffixes("Azithral Tablets") == "azithral"

    def test_suffix_must_be_a_separate_word(self):
        assert remove_suffixes("Gelusil") == "gelusil"
        assert remove_suffixes("Betadine Gel") == "betadine"

    def test_no_suffix(self):
        assert remove_suffixes("Crocin Advance") == "crocin advance"

    def test_empty(self):
        assert remove_suffixes("") == ""
        assert remove_suffixes(None) == ""


class TestOcrVariants:
    """Test OCR confusion rewrites"""

    def test_zero_and_o(self):
        assert "d0l0" in ocr_variants("Dolo")
        assert "dolo" in ocr_variants("D0L0")

    def test_one_i_l(self):
        variants = ocr_variants("pan 1")
        assert "pan i" in variants

    def test_five_and_s(self):
        assert "dolo 6s0" in ocr_variants("dolo 650")

    def test_no_confusable_characters(self):
        assert ocr_variants("xqzv") == []


class TestGenerateVariations:
    """Test variant generation"""

    def test_order_and_content(self):
        variations = generate_variations("Paracetamol 500mg Tablet")

        assert variations[0] == "Paracetamol 500mg Tablet"
        assert variations[1] == "paracetamol 500mg tablet"
        assert variations[2] == "Paracetamol Tablet"
        assert variations[3] == "paracetamol tablet"
        assert "paracetamol 500mg" in variations

    def test_suffix_variant(self):
        assert "paracetamol" in generate_variations("Paracetamol Tablet")

    def test_deduplicated(self):
        variations = generate_variations("dolo")
        assert len(variations) == len(set(variations))
        assert variations[0] == "dolo"

    def test_ocr_base_cap(self):
        without_ocr = generate_variations("Dolo 650mg", max_ocr_bases=0)
        with_ocr = generate_variations("Dolo 650mg")

        assert not any("0l0" in v for v in without_ocr)
        assert "d0l0 650mg" in with_ocr
        assert len(with_ocr) > len(without_ocr)

    def test_short_variants_dropped(self):
        assert all(len(v) >= 3 for v in generate_variations("Dolo", min_length=3))

    @pytest.mark.parametrize("name", ["", None])
    def test_empty(self, name):
        assert generate_variations(name) == []
