"""
Use-case tagging for model identifiers.

Rules are evaluated top to bottom and only the first matching rule
contributes labels; the tag set is never a union of several rules.
"""

from typing import FrozenSet, List, Tuple

DEFAULT_USE_CASES: FrozenSet[str] = frozenset({"general-purpose"})

USE_CASE_RULES: List[Tuple[Tuple[str, ...], FrozenSet[str]]] = [
    # Code-focused models
    (("codestral", "code"), frozenset({
        "coding", "code-generation", "programming-assistance", "debugging",
    })),
    # Instruction-following models
    (("instruct",), frozenset({
        "general-chat", "question-answering", "instruction-following", "creative-writing",
    })),
    # Chat models
    (("chat",), frozenset({
        "general-chat", "conversation", "customer-support", "personal-assistant",
    })),
    # Mini/small models
    (("mini", "phi-3"), frozenset({
        "lightweight-tasks", "quick-responses", "resource-constrained", "mobile-deployment",
    })),
    (("math", "reasoning"), frozenset({
        "mathematical-reasoning", "problem-solving", "analytical-tasks",
    })),
    # Llama family, versatile general purpose
    (("llama",), frozenset({
        "general-purpose", "versatile-tasks", "balanced-performance", "research",
    })),
]

# Use cases offered by the recommend screen, in display order
RECOMMENDABLE_USE_CASES: List[Tuple[str, str]] = [
    ("coding", "🔧 Coding & Programming"),
    ("general-chat", "💬 General Chat & Conversation"),
    ("creative-writing", "✍️  Creative Writing"),
    ("research", "🔬 Research & Analysis"),
    ("resource-constrained", "⚡ Resource-Constrained Environment"),
    ("general-purpose", "📝 General Purpose"),
]


def tag(model_id: str) -> FrozenSet[str]:
    """Return the use-case labels of the first matching rule, or the default label."""
    id_lower = model_id.lower()
    for tokens, labels in USE_CASE_RULES:
        if any(token in id_lower for token in tokens):
            return labels
    return DEFAULT_USE_CASES


def all_labels() -> List[str]:
    """Every label any rule can produce, sorted."""
    labels = set(DEFAULT_USE_CASES)
    for _, rule_labels in USE_CASE_RULES:
        labels.update(rule_labels)
    return sorted(labels)
