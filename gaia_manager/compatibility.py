"""
Compatibility gate between a model's RAM requirement and the host.

The direct run path is strictly binary: a model either fits (COMPATIBLE) or
is blocked (INCOMPATIBLE) and can then only proceed through the override
ritual. The guided setup path never blocks; it only produces graduated
warnings (MARGINAL) to help the user pick.
"""

from enum import Enum
from typing import List, Tuple

from .catalog import ModelEntry
from .classifier import CapabilityTier
from .errors import CompatibilityBlocked
from .hardware import SystemProfile


class CompatibilityVerdict(Enum):
    COMPATIBLE = "compatible"
    MARGINAL = "marginal"          # warn, proceed
    INCOMPATIBLE = "incompatible"  # blocked, override only


def check(entry: ModelEntry, profile: SystemProfile) -> CompatibilityVerdict:
    """Binary RAM check. Equal RAM is compatible."""
    if profile.total_ram_gb >= entry.min_ram_gb:
        return CompatibilityVerdict.COMPATIBLE
    return CompatibilityVerdict.INCOMPATIBLE


def shortfall_gb(entry: ModelEntry, profile: SystemProfile) -> float:
    """Missing RAM in GB (0 when the model fits)."""
    return round(max(0.0, entry.min_ram_gb - profile.total_ram_gb), 1)


def enforce(entry: ModelEntry, profile: SystemProfile) -> None:
    """
    Raise if the model does not fit.

    Raises:
        CompatibilityBlocked: With the required, available and missing RAM
    """
    if check(entry, profile) is CompatibilityVerdict.INCOMPATIBLE:
        raise CompatibilityBlocked(
            entry.id, entry.min_ram_gb, profile.total_ram_gb, shortfall_gb(entry, profile)
        )


def ram_guidance(profile: SystemProfile) -> List[str]:
    """General sizing advice shown before the setup screen's model choice."""
    ram = profile.total_ram_gb
    if ram < 4:
        return ["⚠️  Your system has very low RAM. Running even small models might be challenging."]
    if ram < 8:
        return ["Models in the 'Small' category are generally recommended for your system."]
    if ram < 24:
        return [
            "Models in 'Small', 'Standard' or 'Medium' categories are generally recommended.",
            "Running 'Heavy' or larger models may lead to performance issues or errors "
            "on systems with less than 24GB RAM.",
        ]
    return ["Your system appears to have sufficient RAM for most model categories."]


def setup_advice(entry: ModelEntry, profile: SystemProfile) -> Tuple[CompatibilityVerdict, str]:
    """
    Soft assessment used by the guided setup screen.

    Returns COMPATIBLE with an empty message, or MARGINAL with a warning.
    Never returns INCOMPATIBLE: setup warns and lets the user continue.
    """
    ram = profile.total_ram_gb
    if ram >= entry.min_ram_gb:
        return CompatibilityVerdict.COMPATIBLE, ""

    tier = entry.tier
    if tier is CapabilityTier.UNKNOWN:
        message = (
            f"The size of {entry.display_name} is unknown. Your system has {ram} GB of RAM; "
            "performance might be suboptimal."
        )
    else:
        message = (
            f"You've selected a '{tier.label}' model ({entry.display_name}), but your system "
            f"has {ram} GB of RAM. Optimal performance for '{tier.label}' models is generally "
            f"expected with {entry.min_ram_gb}GB RAM or more. You might experience performance "
            "issues or out-of-memory errors."
        )
    return CompatibilityVerdict.MARGINAL, message
