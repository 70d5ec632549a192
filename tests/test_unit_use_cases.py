"""
Unit tests for gaia_manager/use_cases.py - use-case tagging.
"""

import pytest

from gaia_manager.use_cases import (
    DEFAULT_USE_CASES,
    RECOMMENDABLE_USE_CASES,
    USE_CASE_RULES,
    all_labels,
    tag,
)


class TestTag:
    """Tests for tag()."""

    def test_codestral_is_coding(self):
        labels = tag("codestral-0.1-22b")
        assert "coding" in labels
        assert "debugging" in labels

    def test_code_excludes_chat_labels(self):
        """First match only: an instruct code model gets coding labels, not chat ones."""
        labels = tag("code-llama-7b-instruct")
        assert "coding" in labels
        assert "general-chat" not in labels
        assert "research" not in labels

    def test_instruct(self):
        labels = tag("llama-3-8b-instruct")
        assert "instruction-following" in labels
        assert "research" not in labels

    def test_instruct_before_mini(self):
        labels = tag("phi-3-mini-instruct-4k")
        assert "general-chat" in labels
        assert "resource-constrained" not in labels

    def test_chat(self):
        assert "conversation" in tag("llama-2-13b-chat")

    def test_mini(self):
        assert "resource-constrained" in tag("phi-3-mini-4k")

    def test_math(self):
        assert "mathematical-reasoning" in tag("deepseek-math-7b")

    def test_llama_family(self):
        assert "research" in tag("llama-3-8b")

    def test_default(self):
        assert tag("gemma-2") == DEFAULT_USE_CASES == frozenset({"general-purpose"})

    def test_case_insensitive(self):
        assert tag("CodeStral-22B") == tag("codestral-22b")

    @pytest.mark.parametrize("model_id", [
        "", "x", "codestral", "llama", "mistral-nemo", "qwen2-72b", "phi-4",
    ])
    def test_never_empty(self, model_id):
        assert len(tag(model_id)) > 0

    def test_single_rule_labels(self):
        """The result is always exactly one rule's label set."""
        rule_sets = [labels for _, labels in USE_CASE_RULES] + [DEFAULT_USE_CASES]
        for model_id in ("code-chat-mini", "chat-llama", "math-instruct", "llama-mini"):
            assert tag(model_id) in rule_sets


class TestAllLabels:
    """Tests for all_labels()."""

    def test_sorted_and_unique(self):
        labels = all_labels()
        assert labels == sorted(set(labels))

    def test_contains_default_and_coding(self):
        labels = all_labels()
        assert "general-purpose" in labels
        assert "coding" in labels

    def test_recommendable_use_cases_are_known(self):
        labels = set(all_labels())
        for key, _ in RECOMMENDABLE_USE_CASES:
            assert key in labels
