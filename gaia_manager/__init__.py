"""
GaiaNet Model Manager

Discover, classify and safely deploy model configurations on a local GaiaNet
node.

Modules:
- catalog: Remote model listing with hardcoded fallback
- chat: Chat session against the node's completion endpoint
- classifier: Size tier classification of model identifiers
- cli: Command-line entry point
- compatibility: RAM compatibility gate and setup advice
- config: Settings from defaults, YAML file and environment
- errors: Error hierarchy and exit codes
- guide: Recommendation, help and knowledge base text
- hardware: Host RAM detection
- navigator: Session state machine
- override: Safety override ritual
- runtime: Node install/init/start commands
- screens: Screen handlers for the navigator
- ui: Terminal UI utilities and session log
- use_cases: Use-case tagging of model identifiers
- utils: General utilities
"""

import importlib
from typing import Any

__version__ = "1.0.0"

# Submodules available for lazy loading
__all__ = [
    "catalog",
    "chat",
    "classifier",
    "cli",
    "compatibility",
    "config",
    "errors",
    "guide",
    "hardware",
    "navigator",
    "override",
    "runtime",
    "screens",
    "ui",
    "use_cases",
    "utils",
    # Key classes and functions
    "CapabilityTier",
    "classify",
    "tag",
    "ModelEntry",
    "resolve",
    "CompatibilityVerdict",
    "check",
    "SystemProfile",
    "detect_system_profile",
    "Navigator",
    "Screen",
    "Transition",
    "OverrideRitual",
    "ChatSession",
    "Settings",
    "load_settings",
]

# Cache for lazily loaded modules
_module_cache: dict = {}

# Mapping of exported names to their source modules
_EXPORTS = {
    "CapabilityTier": "classifier",
    "classify": "classifier",
    "tag": "use_cases",
    "ModelEntry": "catalog",
    "resolve": "catalog",
    "CompatibilityVerdict": "compatibility",
    "check": "compatibility",
    "SystemProfile": "hardware",
    "detect_system_profile": "hardware",
    "Navigator": "navigator",
    "Screen": "navigator",
    "Transition": "navigator",
    "OverrideRitual": "override",
    "ChatSession": "chat",
    "Settings": "config",
    "load_settings": "config",
}

_SUBMODULES = {name for name in __all__ if name[0].islower() and name not in _EXPORTS}


def _load_module(name: str) -> Any:
    """Lazily load and cache a submodule."""
    if name not in _module_cache:
        _module_cache[name] = importlib.import_module(f".{name}", __name__)
    return _module_cache[name]


def __getattr__(name: str) -> Any:
    """Lazy loading for submodules and exported names."""
    if name in _SUBMODULES:
        return _load_module(name)

    if name in _EXPORTS:
        module = _load_module(_EXPORTS[name])
        return getattr(module, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list:
    """Return list of available names for tab completion."""
    return list(__all__) + ["__version__"]
