"""
Pytest configuration and shared fixtures for gaia-manager tests.

Provides settings, host profiles, small catalogs and input helpers used
across all test files.
"""

import sys
from pathlib import Path
from typing import List

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gaia_manager.catalog import build_entry
from gaia_manager.config import Settings
from gaia_manager.hardware import SystemProfile
from gaia_manager.navigator import SessionContext


SMALL_MODEL_ID = "phi-3-mini-instruct-4k"
MAX_MODEL_ID = "llama-3.1-405b-instruct"


# =============================================================================
# Settings and Host Fixtures
# =============================================================================

@pytest.fixture
def settings(tmp_path):
    """Default settings with the log kept inside the test directory."""
    return Settings(log_path=tmp_path / "logs" / "gaia-manager.log")


@pytest.fixture
def profile_16gb():
    """16GB RAM Linux host."""
    return SystemProfile(total_ram_gb=16.0, os_name="Linux", cpu_arch="x86_64", cpu_brand="Test CPU")


@pytest.fixture
def profile_8gb():
    """8GB RAM host (just enough for Small models)."""
    return SystemProfile(total_ram_gb=8.0, os_name="Linux", cpu_arch="x86_64")


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture
def small_entry(settings):
    """SMALL tier entry, needs 8GB."""
    return build_entry(SMALL_MODEL_ID, settings)


@pytest.fixture
def max_entry(settings):
    """MAX tier entry, needs 128GB."""
    return build_entry(MAX_MODEL_ID, settings)


@pytest.fixture
def catalog(small_entry, max_entry):
    """Two-entry catalog spanning SMALL and MAX."""
    return [small_entry, max_entry]


@pytest.fixture
def ctx(settings, profile_16gb, catalog):
    """Session context with a known host and catalog (no detection, no network)."""
    return SessionContext(settings, profile=profile_16gb, catalog=catalog)


@pytest.fixture
def listing_payload():
    """GitHub contents API listing with files and hidden directories mixed in."""
    return [
        {"name": ".github", "type": "dir"},
        {"name": "README.md", "type": "file"},
        {"name": "llama-3-8b-instruct", "type": "dir"},
        {"name": "codestral-0.1-22b", "type": "dir"},
        {"name": "phi-3-mini-instruct-4k", "type": "dir"},
    ]


# =============================================================================
# Input Helpers
# =============================================================================

class MockInputSequence:
    """Helper class to mock a sequence of user inputs."""

    def __init__(self, responses: List[str]):
        self.responses = iter(responses)
        self.prompts: List[str] = []

    def __call__(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        try:
            return next(self.responses)
        except StopIteration:
            raise EOFError("No more mock input")


@pytest.fixture
def input_sequence():
    """Factory fixture to create input sequences."""
    def _create_sequence(responses: List[str]) -> MockInputSequence:
        return MockInputSequence(responses)
    return _create_sequence
