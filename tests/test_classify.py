"""Tests for rule-based quality classification."""
import pytest
from quality.classify import classify, needs_improvement, RULES


class TestClassifyGoodQuestion:
    def test_no_issues(self, make_record):
        assert classify(make_record()) == []
        assert needs_improvement(make_record()) is False

    def test_is_pure(self, make_record):
        record = make_record(answer="short")
        before = record.model_dump()
        first = classify(record)
        assert classify(record) == first
        assert record.model_dump() == before


class TestAnswerRules:
    def test_answer_length_15_is_short(self, make_record):
        assert classify(make_record(answer="x" * 15)) == ["short_answer"]

    def test_answer_length_20_is_fine(self, make_record):
        assert classify(make_record(answer="x" * 20)) == []

    def test_missing_answer_is_short_not_long(self, make_record):
        issues = classify(make_record(answer=None))
        assert "short_answer" in issues
        assert "long_answer" not in issues

    def test_long_answer(self, make_record):
        assert classify(make_record(answer="x" * 301)) == ["long_answer"]
        assert classify(make_record(answer="x" * 300)) == []


class TestExplanationRules:
    def test_short_explanation(self, make_record):
        issues = classify(make_record(explanation="For example:\n```\nx\n```"))
        assert issues == ["short_explanation"]

    def test_missing_explanation(self, make_record):
        issues = classify(make_record(explanation=None))
        assert issues == ["short_explanation", "no_examples"]

    def test_empty_explanation_not_flagged_for_code(self, make_record):
        assert "no_code_examples" not in classify(make_record(explanation=""))

    def test_truncated(self, make_record, good_question_data):
        explanation = good_question_data["explanation"] + "\n[truncated for length]"
        assert classify(make_record(explanation=explanation)) == ["truncated"]

    def test_no_code_block_but_mentions_example(self, make_record):
        explanation = "An example of consistent hashing is a ring of virtual nodes. " * 3
        assert classify(make_record(explanation=explanation)) == ["no_code_examples"]

    def test_no_code_block_and_no_example(self, make_record):
        explanation = "Consistent hashing places virtual nodes on a ring of hash values. " * 3
        issues = classify(make_record(explanation=explanation))
        assert issues == ["no_code_examples", "no_examples"]

    def test_example_word_is_case_insensitive(self, make_record):
        explanation = "EXAMPLE: consistent hashing places virtual nodes on a ring of hashes. " * 3
        assert "no_examples" not in classify(make_record(explanation=explanation))


class TestDiagramRules:
    def test_missing_diagram(self, make_record):
        assert classify(make_record(diagram=None)) == ["no_diagram"]

    def test_tiny_diagram(self, make_record):
        assert classify(make_record(diagram="graph TD")) == ["no_diagram", "simple_diagram"]

    def test_two_line_diagram_is_simple(self, make_record):
        diagram = "graph TD\n  A[Client] --> B[Server]"
        assert classify(make_record(diagram=diagram)) == ["simple_diagram"]


class TestQuestionRules:
    def test_missing_question_mark(self, make_record):
        record = make_record(question="How does consistent hashing distribute keys across nodes")
        assert classify(record) == ["no_question_mark"]

    def test_trailing_whitespace_after_question_mark(self, make_record):
        record = make_record(question="How does consistent hashing distribute keys across nodes? ")
        assert classify(record) == ["no_question_mark"]

    def test_short_interview_question(self, make_record):
        issues = classify(make_record(question="How does X work?"))
        assert "too_short_question" in issues
        assert "not_interview_style" not in issues

    def test_not_interview_style(self, make_record):
        record = make_record(question="Tell me about consistent hashing in detail?")
        assert classify(record) == ["not_interview_style"]

    @pytest.mark.parametrize("word", ["How", "what", "Why", "when", "Explain", "describe"])
    def test_interrogative_words(self, make_record, word):
        record = make_record(question=f"{word} consistent hashing matters for cache clusters?")
        assert "not_interview_style" not in classify(record)


class TestRuleOrdering:
    def test_all_rules_evaluated_in_order(self, make_record):
        record = make_record(
            question="Caching",
            answer=None,
            explanation=None,
            diagram=None,
        )
        assert classify(record) == [
            "short_answer",
            "short_explanation",
            "no_diagram",
            "no_question_mark",
            "too_short_question",
            "not_interview_style",
            "no_examples",
        ]

    def test_rule_table_tags_unique(self):
        tags = [tag for tag, _ in RULES]
        assert len(tags) == len(set(tags)) == 11
