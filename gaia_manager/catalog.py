"""
Model catalog resolution.

Fetches the list of available node configurations from the GaiaNet
node-configs repository and decorates every entry with its capability tier,
use cases and RAM requirement. When the listing cannot be used, a small
hardcoded catalog is returned instead, so resolution itself never fails.
"""

import difflib
import http.client
import json
import logging
import re
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, FrozenSet, List, Optional

from . import ui
from .classifier import CapabilityTier, classify, min_ram_for
from .config import Settings
from .errors import CatalogUnavailable, ModelNotFound
from .use_cases import tag
from .utils import get_ssl_context

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelEntry:
    """A decorated catalog item. Built only by this module."""
    id: str
    display_name: str
    config_url: str
    tier: CapabilityTier
    use_cases: FrozenSet[str]
    min_ram_gb: int

    def use_case_list(self) -> List[str]:
        return sorted(self.use_cases)


# (model_id, display name) pairs used when the remote listing is unusable
FALLBACK_MODELS = [
    ("phi-3-mini-instruct-4k", "Phi-3 Mini 4k (Fallback)"),
    ("llama-3-8b-instruct", "Llama 3 8B (Fallback)"),
    ("codestral-0.1-22b", "Codestral 0.1 22B (Fallback)"),
]


def display_name_for(model_id: str) -> str:
    """'llama-3-8b_instruct' -> 'Llama 3 8b Instruct'."""
    spaced = model_id.replace("-", " ").replace("_", " ")
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def build_entry(model_id: str, settings: Settings, display_name: Optional[str] = None) -> ModelEntry:
    """
    Decorate a raw identifier into a ModelEntry.

    The identifier is kept as listed: it names a directory in a
    case-sensitive repository path.
    """
    return ModelEntry(
        id=model_id,
        display_name=display_name or display_name_for(model_id),
        config_url=settings.config_url_template.format(model_id=model_id),
        tier=classify(model_id),
        use_cases=tag(model_id),
        min_ram_gb=min_ram_for(model_id),
    )


def fallback_catalog(settings: Settings) -> List[ModelEntry]:
    """The hardcoded catalog. Always non-empty and spans several tiers."""
    return [build_entry(model_id, settings, name) for model_id, name in FALLBACK_MODELS]


def parse_listing(payload: Any, settings: Settings) -> List[ModelEntry]:
    """
    Turn a contents listing into catalog entries.

    Only directory records whose name does not start with '.' are kept.

    Raises:
        CatalogUnavailable: If the payload is not a list of records or no
            usable entry remains
    """
    if not isinstance(payload, list):
        raise CatalogUnavailable("Unexpected listing format (expected a list of records)")

    entries = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        if item.get("type") != "dir" or not isinstance(name, str) or not name or name.startswith("."):
            continue
        entries.append(build_entry(name, settings))

    if not entries:
        raise CatalogUnavailable("No models found in the remote listing")
    return entries


def fetch_remote_catalog(settings: Settings) -> List[ModelEntry]:
    """
    Fetch and decorate the remote listing.

    Raises:
        CatalogUnavailable: On any network, HTTP or parse failure
    """
    req = urllib.request.Request(
        settings.catalog_url,
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        method="GET",
    )
    try:
        with urllib.request.urlopen(
            req, timeout=settings.request_timeout, context=get_ssl_context(settings.verify_ssl)
        ) as response:
            if response.status != 200:
                raise CatalogUnavailable(f"Listing endpoint responded with status {response.status}")
            payload = json.loads(response.read().decode("utf-8"))
    except urllib.error.HTTPError as e:
        raise CatalogUnavailable(f"Listing endpoint responded with status {e.code}") from e
    except (urllib.error.URLError, OSError) as e:
        raise CatalogUnavailable(f"Could not reach {settings.catalog_url}: {e}") from e
    except http.client.HTTPException as e:
        raise CatalogUnavailable(f"Incomplete response from {settings.catalog_url}: {e!r}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogUnavailable(f"Invalid JSON in listing: {e}") from e

    return parse_listing(payload, settings)


def resolve(settings: Settings, show_progress: bool = True) -> List[ModelEntry]:
    """
    Resolve the catalog for this invocation.

    Tries the remote listing once; on any failure logs the reason and returns
    the fallback catalog. Never returns an empty list.
    """
    if show_progress:
        ui.print_info("Fetching latest models from GitHub...")
    try:
        entries = fetch_remote_catalog(settings)
    except CatalogUnavailable as e:
        _logger.warning("Catalog unavailable, using fallback list: %s", e)
        if show_progress:
            ui.print_error("Error fetching models from GitHub.")
            ui.print_info(f"Details: {e}")
            ui.print_warning("Falling back to a minimal hardcoded list...")
        entries = fallback_catalog(settings)
        if not entries:
            raise RuntimeError("Fallback catalog is empty")
        return entries

    _logger.info("Fetched %d model(s) from %s", len(entries), settings.catalog_url)
    if show_progress:
        ui.print_success(f"Successfully fetched model list ({len(entries)} models).")
    return entries


def find_model(catalog: List[ModelEntry], model_id: str) -> ModelEntry:
    """
    Look up a model by identifier (case-insensitive).

    Raises:
        ModelNotFound: If no entry matches; close identifiers are suggested
    """
    wanted = model_id.strip().lower()
    for entry in catalog:
        if entry.id.lower() == wanted:
            return entry
    ids = {e.id.lower(): e.id for e in catalog}
    suggestions = [ids[m] for m in difflib.get_close_matches(wanted, list(ids), n=3, cutoff=0.6)]
    raise ModelNotFound(model_id, suggestions)


def filter_catalog(
    catalog: List[ModelEntry],
    tier: Optional[CapabilityTier] = None,
    use_case: Optional[str] = None,
) -> List[ModelEntry]:
    """Entries matching the given tier and/or use-case label."""
    result = catalog
    if tier is not None:
        result = [e for e in result if e.tier is tier]
    if use_case:
        wanted = use_case.strip().lower()
        result = [e for e in result if wanted in e.use_cases]
    return list(result)


def sort_catalog(catalog: List[ModelEntry]) -> List[ModelEntry]:
    """Order by tier (UNKNOWN last), then identifier."""
    return sorted(catalog, key=lambda e: (e.tier.rank, e.id.lower()))
