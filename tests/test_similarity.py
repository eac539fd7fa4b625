"""Tests for duplicate question detection."""
import pytest
from quality.similarity import (
    normalize_text,
    calculate_similarity,
    is_duplicate,
    find_duplicates,
)


class TestNormalizeText:
    def test_basic_normalization(self):
        assert normalize_text("  What IS   a Cache?! ") == "what is a cache"

    def test_strips_non_alphanumerics(self):
        assert normalize_text("k8s: pods/nodes (v1.2)") == "k8s podsnodes v12"

    def test_empty_string(self):
        assert normalize_text("") == ""


class TestCalculateSimilarity:
    def test_identical_text(self):
        text = "How does consistent hashing work?"
        assert calculate_similarity(text, text) == 1.0

    def test_disjoint_text(self):
        assert calculate_similarity("apple banana", "car truck") == 0.0

    def test_empty_texts(self):
        assert calculate_similarity("", "") == 0.0
        assert calculate_similarity("?!", "...") == 0.0

    def test_case_and_punctuation_ignored(self):
        assert calculate_similarity("What is Redis?", "what is redis") == 1.0

    def test_token_sets(self):
        # {a, b, c} vs {a, b, c, d, e}: 3 shared / 5 total
        assert calculate_similarity("a b c", "a b c d e") == pytest.approx(0.6)

    def test_repeated_tokens_count_once(self):
        assert calculate_similarity("cache cache cache", "cache") == 1.0


class TestIsDuplicate:
    def test_near_paraphrase_flagged(self, make_record):
        existing = [make_record(question="How does consistent hashing work in distributed caches?")]
        assert is_duplicate("How does consistent hashing work in a distributed cache?", existing)

    def test_unrelated_not_flagged(self, make_record):
        existing = [make_record(question="How does consistent hashing work in distributed caches?")]
        assert not is_duplicate("What is a Kubernetes pod disruption budget?", existing)

    def test_threshold_is_inclusive(self, make_record):
        existing = [make_record(question="a b c d e")]
        assert is_duplicate("a b c", existing, threshold=0.6)
        assert not is_duplicate("a b c", existing, threshold=0.61)

    def test_empty_collection(self):
        assert is_duplicate("anything", []) is False


class TestFindDuplicates:
    def test_pairs_in_index_order(self, make_record):
        questions = [
            make_record(id="a", question="How does consistent hashing work in distributed caches?"),
            make_record(id="b", question="What is a Kubernetes pod disruption budget?"),
            make_record(id="c", question="How does consistent hashing work in a distributed cache?"),
        ]
        pairs = find_duplicates(questions)
        assert len(pairs) == 1
        assert (pairs[0].first.id, pairs[0].second.id) == ("a", "c")
        assert pairs[0].similarity == pytest.approx(0.7)

    def test_no_duplicates(self, make_record):
        questions = [
            make_record(id="a", question="apple banana"),
            make_record(id="b", question="car truck"),
        ]
        assert find_duplicates(questions) == []
