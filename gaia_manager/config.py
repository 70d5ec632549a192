"""
Runtime configuration.

Settings come from three layers, later layers winning:
- built-in defaults
- a YAML file (~/.gaia-manager/config.yaml, or the path given with --config)
- GAIA_* environment variables

Command-line options are applied on top by the CLI.
"""

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError

_logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".gaia-manager"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.yaml"

CATALOG_API_URL = "https://api.github.com/repos/GaiaNet-AI/node-configs/contents/"
CONFIG_URL_TEMPLATE = "https://raw.githubusercontent.com/GaiaNet-AI/node-configs/main/{model_id}/config.json"
INSTALLER_URL = "https://github.com/GaiaNet-AI/gaianet-node/releases/latest/download/install.sh"
USER_AGENT = "GaiaNet-CLI-Model-Fetcher/0.1.0"

# The override cooldown can be configured longer, never shorter
MIN_OVERRIDE_DELAY_SECONDS = 5.0


@dataclass
class Settings:
    """Effective configuration for one invocation."""
    catalog_url: str = CATALOG_API_URL
    config_url_template: str = CONFIG_URL_TEMPLATE
    installer_url: str = INSTALLER_URL
    runtime_binary: str = "gaianet"
    user_agent: str = USER_AGENT
    request_timeout: float = 15.0
    verify_ssl: bool = True
    chat_endpoint: str = "http://127.0.0.1:8080"
    chat_model: str = "default"
    chat_api_key: str = ""
    chat_timeout: float = 120.0
    system_prompt: str = ""
    override_delay_seconds: float = MIN_OVERRIDE_DELAY_SECONDS
    override_countdown_seconds: int = 3
    log_path: Path = field(default_factory=lambda: CONFIG_DIR / "logs" / "gaia-manager.log")

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


# Environment variable -> settings field
ENV_VARS = {
    "GAIA_CATALOG_URL": "catalog_url",
    "GAIA_CONFIG_URL_TEMPLATE": "config_url_template",
    "GAIA_INSTALLER_URL": "installer_url",
    "GAIA_RUNTIME_BINARY": "runtime_binary",
    "GAIA_REQUEST_TIMEOUT": "request_timeout",
    "GAIA_VERIFY_SSL": "verify_ssl",
    "GAIA_CHAT_ENDPOINT": "chat_endpoint",
    "GAIA_CHAT_MODEL": "chat_model",
    "GAIA_API_KEY": "chat_api_key",
    "GAIA_CHAT_TIMEOUT": "chat_timeout",
    "GAIA_SYSTEM_PROMPT": "system_prompt",
    "GAIA_OVERRIDE_DELAY": "override_delay_seconds",
    "GAIA_LOG_PATH": "log_path",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw YAML/env value to the type of the matching field."""
    default = getattr(Settings(), name)
    try:
        if isinstance(default, bool):
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in _TRUE_VALUES:
                return True
            if text in _FALSE_VALUES:
                return False
            raise ValueError(f"not a boolean: {value!r}")
        if isinstance(default, float):
            return float(value)
        if isinstance(default, int):
            return int(value)
        if isinstance(default, Path):
            return Path(str(value)).expanduser()
        return str(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{name}': {e}") from e


def _validate(settings: Settings) -> Settings:
    if "{model_id}" not in settings.config_url_template:
        raise ConfigError("config_url_template must contain '{model_id}'")
    if settings.override_delay_seconds < MIN_OVERRIDE_DELAY_SECONDS:
        _logger.warning(
            "override_delay_seconds=%s is below the minimum; using %s",
            settings.override_delay_seconds, MIN_OVERRIDE_DELAY_SECONDS,
        )
        settings = replace(settings, override_delay_seconds=MIN_OVERRIDE_DELAY_SECONDS)
    if settings.request_timeout <= 0 or settings.chat_timeout <= 0:
        raise ConfigError("timeouts must be positive")
    return settings


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read a YAML settings file.

    Args:
        path: File to read

    Returns:
        Mapping of settings field names to coerced values

    Raises:
        ConfigError: If the file is unreadable, is not a mapping, or names
            an unknown setting
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown setting(s) in {path}: {', '.join(unknown)}")

    return {name: _coerce(name, value) for name, value in data.items()}


def read_environment(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect GAIA_* overrides from the environment."""
    environ = os.environ if environ is None else environ
    values = {}
    for var, name in ENV_VARS.items():
        if var in environ and environ[var] != "":
            values[name] = _coerce(name, environ[var])
    return values


def load_settings(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build the effective settings.

    An explicitly given ``path`` must exist; the default file is optional.
    """
    settings = Settings()

    config_path = path if path is not None else DEFAULT_CONFIG_PATH
    if path is not None or config_path.exists():
        file_values = read_config_file(config_path)
        _logger.debug("Loaded %d setting(s) from %s", len(file_values), config_path)
        settings = replace(settings, **file_values)

    env_values = read_environment(environ)
    if env_values:
        _logger.debug("Applied environment overrides: %s", ", ".join(sorted(env_values)))
        settings = replace(settings, **env_values)

    return _validate(settings)
