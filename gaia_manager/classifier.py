"""
Size classification for model identifiers.

Model identifiers are free text (directory names from the node-configs
repository), so the capability tier is inferred with an ordered, best-effort
heuristic:

1. the first "<number>b" token is read as a parameter count in billions
2. otherwise literal size tokens are checked in a fixed priority order
3. otherwise a short list of known model families is consulted
4. otherwise the tier is UNKNOWN

The rule tables are plain data so they can be inspected and tested on their
own. The first qualifying match always wins.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class TierSpec:
    """Static attributes of a capability tier."""
    label: str
    rank: int
    min_params_b: Optional[float]  # exclusive lower bound, None for open
    max_params_b: Optional[float]  # inclusive upper bound, None for open
    min_ram_gb: int


class CapabilityTier(Enum):
    """Model size tier, ordered from smallest to largest. UNKNOWN sorts last."""
    SMALL = TierSpec("Small", 0, None, 5, 8)
    STANDARD = TierSpec("Standard", 1, 5, 9, 16)
    MEDIUM = TierSpec("Medium", 2, 9, 16, 24)
    HEAVY = TierSpec("Heavy", 3, 16, 24, 32)
    BIG = TierSpec("Big", 4, 24, 70, 64)
    MAX = TierSpec("Max", 5, 70, None, 128)
    UNKNOWN = TierSpec("Unknown", 6, None, None, 16)

    @property
    def label(self) -> str:
        return self.value.label

    @property
    def rank(self) -> int:
        return self.value.rank

    @property
    def min_ram_gb(self) -> int:
        return self.value.min_ram_gb

    def params_range(self) -> str:
        """Human readable parameter range, e.g. '6-9B'."""
        bounds = self.value
        if bounds.min_params_b is None and bounds.max_params_b is None:
            return "unknown size"
        if bounds.min_params_b is None:
            return f"1-{bounds.max_params_b:g}B"
        if bounds.max_params_b is None:
            return f">{bounds.min_params_b:g}B"
        return f"{bounds.min_params_b + 1:g}-{bounds.max_params_b:g}B"

    def describe(self) -> str:
        """Label with parameter range and RAM requirement."""
        if self is CapabilityTier.UNKNOWN:
            return f"{self.label} (unknown size, assume {self.min_ram_gb}GB+ RAM)"
        return f"{self.label} ({self.params_range()} parameters, {self.min_ram_gb}GB+ RAM)"

    def __lt__(self, other: "CapabilityTier") -> bool:
        if not isinstance(other, CapabilityTier):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def ordered(cls) -> List["CapabilityTier"]:
        return sorted(cls, key=lambda t: t.rank)

    @classmethod
    def from_name(cls, name: str) -> "CapabilityTier":
        """Look up a tier by member name or label, case-insensitively."""
        wanted = name.strip().lower()
        for tier in cls:
            if tier.name.lower() == wanted or tier.label.lower() == wanted:
                return tier
        raise ValueError(f"Unknown tier: {name}")


# First "<digits>[.<digits>]" immediately followed by b/B
PARAM_COUNT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)[bB]")

# Upper breakpoints (inclusive, billions) -> tier. Anything larger is MAX.
TIER_BREAKPOINTS: List[Tuple[float, CapabilityTier]] = [
    (5, CapabilityTier.SMALL),
    (9, CapabilityTier.STANDARD),
    (16, CapabilityTier.MEDIUM),
    (24, CapabilityTier.HEAVY),
    (70, CapabilityTier.BIG),
]

# Same breakpoints -> minimum RAM in GB. Anything larger needs 128GB.
RAM_BREAKPOINTS: List[Tuple[float, int]] = [
    (5, 8),
    (9, 16),
    (16, 24),
    (24, 32),
    (70, 64),
]
MAX_RAM_GB = 128

# Step 2: literal size tokens, checked in this order
SIZE_TOKEN_RULES: List[Tuple[Tuple[str, ...], CapabilityTier]] = [
    (("7b", "8b", "9b"), CapabilityTier.STANDARD),
    (("1b", "2b", "3b", "mini", "small", "tiny"), CapabilityTier.SMALL),
    (("13b",), CapabilityTier.MEDIUM),
    (("22b",), CapabilityTier.HEAVY),
    (("30b", "70b", "qwen", "big"), CapabilityTier.BIG),
    (("large", "huge", "xl"), CapabilityTier.MAX),
]

# Step 3: known families whose identifiers carry no usable size token
FAMILY_OVERRIDES: List[Tuple[str, CapabilityTier]] = [
    ("phi-3-mini", CapabilityTier.SMALL),
    ("exaone-3.5-2.4b", CapabilityTier.SMALL),
    ("codestral-0.1-22b", CapabilityTier.HEAVY),
    ("phi-4", CapabilityTier.MEDIUM),
]


def parameter_count(model_id: str) -> Optional[float]:
    """Return the first parameter count (in billions) found in the identifier."""
    match = PARAM_COUNT_PATTERN.search(model_id.lower())
    if match:
        return float(match.group(1))
    return None


def tier_for_params(params_b: float) -> CapabilityTier:
    """Map a parameter count through the breakpoint table."""
    for upper, tier in TIER_BREAKPOINTS:
        if params_b <= upper:
            return tier
    return CapabilityTier.MAX


def ram_for_params(params_b: float) -> int:
    """Map a parameter count to the minimum RAM requirement in GB."""
    for upper, ram_gb in RAM_BREAKPOINTS:
        if params_b <= upper:
            return ram_gb
    return MAX_RAM_GB


def classify(model_id: str) -> CapabilityTier:
    """Classify a model identifier into a capability tier. Never raises."""
    id_lower = model_id.lower()

    params = parameter_count(id_lower)
    if params is not None:
        return tier_for_params(params)

    for tokens, tier in SIZE_TOKEN_RULES:
        if any(token in id_lower for token in tokens):
            return tier

    for family, tier in FAMILY_OVERRIDES:
        if family in id_lower:
            return tier

    return CapabilityTier.UNKNOWN


def min_ram_for(model_id: str) -> int:
    """
    Minimum RAM (GB) needed to run a model.

    Re-derived from the parsed parameter count when the identifier has one;
    otherwise the requirement attached to the heuristic tier is used.
    """
    params = parameter_count(model_id)
    if params is not None:
        return ram_for_params(params)
    return classify(model_id).min_ram_gb
