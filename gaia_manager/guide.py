"""
Static guidance text: per-use-case recommendations, the model selection guide
and the knowledge base topics.
"""

from typing import Dict, List, Tuple

from .classifier import CapabilityTier
from .use_cases import RECOMMENDABLE_USE_CASES

RECOMMENDATIONS: Dict[str, List[str]] = {
    "coding": [
        "🔧 CODING & PROGRAMMING:",
        "• Small models (1-5B): Good for basic code completion, syntax help",
        "• Standard models (6-9B): Better code understanding, debugging assistance",
        "• Heavy models (17B+): Advanced code generation, complex problem solving",
        "",
        "Recommended: Codestral 22B (if RAM > 24GB) or Llama 3 8B",
    ],
    "general-chat": [
        "💬 GENERAL CHAT & CONVERSATION:",
        "• Small models (1-5B): Quick responses, basic conversations",
        "• Standard models (6-9B): More natural conversations, better context",
        "• Big models (25B+): Human-like interactions, complex discussions",
        "",
        "Recommended: Llama 3 8B or Phi-3 Mini (for faster responses)",
    ],
    "creative-writing": [
        "✍️  CREATIVE WRITING:",
        "• Small models (1-5B): Simple creative tasks, short stories",
        "• Standard models (6-9B): Better storytelling, character development",
        "• Big models (25B+): Complex narratives, nuanced writing styles",
        "",
        "Recommended: Standard or larger instruct models for best creativity",
    ],
    "research": [
        "🔬 RESEARCH & ANALYSIS:",
        "• Standard models (6-9B): Good for literature review, summarization",
        "• Big models (25B+): Complex analysis, research assistance",
        "",
        "Recommended: Llama 3 8B or larger models for comprehensive research tasks",
    ],
    "resource-constrained": [
        "⚡ RESOURCE-CONSTRAINED ENVIRONMENTS:",
        "• Focus on Small models (1-5B parameters)",
        "• Phi-3 Mini: Excellent performance-to-size ratio",
        "• ExaOne 2.4B: Good for multilingual tasks",
    ],
}

GENERAL_PURPOSE = [
    "📝 GENERAL PURPOSE:",
    "• Small (1-5B): Fast responses, basic tasks, mobile/edge deployment",
    "• Standard (6-9B): Balanced performance, most common use cases",
    "• Big (25B+): Advanced capabilities, complex reasoning, research",
]

QUICK_TIPS = [
    "New to AI models? Start with Phi-3 Mini or Llama 3 8B",
    "Need fast responses? Choose Small models (1-5B parameters)",
    "Want best quality? Choose larger models if you have 24GB+ RAM",
    "Coding tasks? Codestral models are specialized for programming",
    "General purpose? Llama models are versatile and well-tested",
]

COMMANDS: List[Tuple[str, str]] = [
    ("gaia", "Open the interactive menu"),
    ("gaia list", "List available models (--size, --use-case, --format)"),
    ("gaia info MODEL", "Show details and compatibility for one model"),
    ("gaia run MODEL", "Install, initialize and start a node (--skip-install, --force)"),
    ("gaia setup", "Interactive model selection and installation"),
    ("gaia recommend", "Get personalized model recommendations"),
    ("gaia chat", "Chat with the running node"),
    ("gaia kb", "Browse the knowledge base"),
    ("gaia help", "Show the model selection guide"),
]


def system_fit_line(use_case: str, total_ram_gb: float) -> str:
    """One-line summary of what this host can handle, for the given use case."""
    if use_case == "resource-constrained":
        advice = "Stick to Small models" if total_ram_gb < 8 else "Can handle Small/Standard models"
    elif total_ram_gb < 8:
        advice = "Small models recommended"
    elif total_ram_gb < 24:
        advice = "Small/Standard/Medium models recommended"
    else:
        advice = "All model sizes supported"
    return f"Your system ({total_ram_gb}GB RAM): {advice}"


def recommendation_for(use_case: str, total_ram_gb: float) -> List[str]:
    """Recommendation text for a use case; unknown use cases get the general-purpose text."""
    lines = list(RECOMMENDATIONS.get(use_case, GENERAL_PURPOSE))
    if use_case not in RECOMMENDATIONS or use_case == "resource-constrained":
        lines += ["", system_fit_line(use_case, total_ram_gb)]
    return lines


def tier_lines() -> List[str]:
    return [f"• {tier.describe()}" for tier in CapabilityTier.ordered()]


def selection_guide(total_ram_gb: float) -> List[str]:
    """The full model selection guide shown by the help screen."""
    lines = [f"📊 YOUR SYSTEM: {total_ram_gb}GB RAM", "", "📏 SIZE TIERS:"]
    lines += tier_lines()
    lines += ["", "🎯 CHOOSE BY USE CASE:"]
    for key, _ in RECOMMENDABLE_USE_CASES:
        lines += [""] + recommendation_for(key, total_ram_gb)
    lines += ["", "💡 QUICK SELECTION TIPS:"]
    lines += [f"• {tip}" for tip in QUICK_TIPS]
    lines += ["", "🔧 COMMANDS:"]
    lines += [f"• {cmd:<16} {text}" for cmd, text in COMMANDS]
    return lines


KB_TOPICS: List[Tuple[str, List[str]]] = [
    ("Model size tiers", [
        "Models are grouped by parameter count, read from the model identifier",
        "(for example '8b' in 'llama-3-8b-instruct'). Identifiers without a count",
        "are matched against size words such as 'mini' or 'large'.",
        "",
    ] + tier_lines()),
    ("Use cases", [
        "Each model gets the labels of the first matching rule, by identifier:",
        "• code / codestral: coding, code generation, debugging",
        "• instruct: general chat, question answering, creative writing",
        "• chat: conversation, customer support, personal assistant",
        "• mini / phi-3: lightweight, resource-constrained deployments",
        "• math / reasoning: mathematical reasoning, problem solving",
        "• llama: general purpose, research",
        "Anything else is tagged general-purpose.",
    ]),
    ("RAM requirements", [
        "`gaia run` refuses models whose minimum RAM exceeds this machine's RAM.",
        "Equal RAM is enough. The guided setup only warns and lets you continue.",
        "Models of unknown size are assumed to need 16GB.",
    ]),
    ("Safety override", [
        "`gaia run MODEL --force` lets an expert start a model that does not fit.",
        "The override asks for a yes/no confirmation, waits a few seconds, asks",
        "you to accept responsibility, to type the confirmation phrase exactly,",
        "then counts down. Declining at any step cancels the run.",
    ]),
    ("Chatting with your node", [
        "Once the node is started, `gaia chat` talks to its OpenAI-compatible",
        "endpoint (default http://127.0.0.1:8080). In the chat, type /menu,",
        "/kb, /clear, /help or /exit.",
    ]),
    ("Commands", [f"• {cmd:<16} {text}" for cmd, text in COMMANDS]),
]
