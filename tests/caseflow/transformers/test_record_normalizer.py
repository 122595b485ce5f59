"""
Unit tests for record_normalizer module
"""
import pytest

from src.caseflow.transformers.record_normalizer import RecordNormalizer


class TestNormalizeName:
    """Tests for name keys"""

    def test_case_and_surrounding_whitespace(self):
        assert RecordNormalizer.normalize_name("  John Smith ") == "john smith"

    def test_inner_whitespace_collapsed(self):
        assert RecordNormalizer.normalize_name("john   smith") == "john smith"

    def test_punctuation_kept(self):
        """Names are not stripped of punctuation"""
        assert RecordNormalizer.normalize_name("Mary-Ann O'Neil") == "mary-ann o'neil"

    def test_no_unicode_folding(self):
        assert RecordNormalizer.normalize_name("José") != RecordNormalizer.normalize_name("Jose")

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_names(self, value):
        assert RecordNormalizer.normalize_name(value) == ""


class TestNormalizeAddress:
    """Tests for address keys"""

    def test_period_removed(self):
        assert RecordNormalizer.normalize_address("123 Main St.") == "123 main st"

    def test_variants_share_key(self):
        variants = ["123 Main St.", "123 main st", "  123  MAIN   St. ", "123 Main St"]
        keys = {RecordNormalizer.normalize_address(v) for v in variants}
        assert keys == {"123 main st"}

    def test_commas_and_unit(self):
        assert RecordNormalizer.normalize_address("  123 Main St.,  Apt 4 ") == "123 main st apt 4"

    def test_abbreviations_not_expanded(self):
        """Street vs St stays distinct"""
        assert RecordNormalizer.normalize_address("123 Main Street") != RecordNormalizer.normalize_address("123 Main St")

    def test_missing_address(self):
        assert RecordNormalizer.normalize_address(None) == ""

    def test_subclass_punctuation_applies(self):
        class SlashStrippingNormalizer(RecordNormalizer):
            ADDRESS_PUNCTUATION = (".", ",", "/")

        assert SlashStrippingNormalizer.normalize_address("12/B Main St.") == "12b main st"
        assert RecordNormalizer.normalize_address("12/B Main St.") == "12/b main st"


class TestGroupKey:
    """Tests for group identity keys"""

    def test_order_independent(self):
        assert RecordNormalizer.group_key(["b", "a", "c"]) == RecordNormalizer.group_key(["c", "b", "a"])

    def test_joined_sorted(self):
        assert RecordNormalizer.group_key(["2", "1"]) == "1-2"

    def test_different_members(self):
        assert RecordNormalizer.group_key(["1", "2"]) != RecordNormalizer.group_key(["1", "2", "3"])
