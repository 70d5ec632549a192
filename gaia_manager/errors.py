"""
Error types raised across gaia-manager.

Every user-visible failure derives from GaiaManagerError, which carries the
process exit code the command line should terminate with.
"""

from typing import List, Optional, Union


class GaiaManagerError(Exception):
    """Base class for all expected failures."""
    exit_code = 1


class ConfigError(GaiaManagerError):
    """Invalid configuration file or environment override."""


class CatalogUnavailable(GaiaManagerError):
    """
    The remote model listing could not be fetched or parsed.

    Recovered inside the catalog resolver by switching to the fallback list;
    it never reaches the command line.
    """


class ModelNotFound(GaiaManagerError):
    """A user-supplied model identifier has no catalog match."""

    def __init__(self, model_id: str, suggestions: Optional[List[str]] = None):
        self.model_id = model_id
        self.suggestions = suggestions or []
        message = f"Model not found in catalog: {model_id}"
        if self.suggestions:
            message += f" (did you mean: {', '.join(self.suggestions)}?)"
        super().__init__(message)


class CompatibilityBlocked(GaiaManagerError):
    """The host does not have enough RAM for the model and no override was granted."""

    def __init__(self, model_id: str, required_gb: int, available_gb: float, shortfall_gb: float):
        self.model_id = model_id
        self.required_gb = required_gb
        self.available_gb = available_gb
        self.shortfall_gb = shortfall_gb
        super().__init__(
            f"{model_id} needs {required_gb}GB RAM but this system has {available_gb}GB "
            f"({shortfall_gb:g}GB short)"
        )


class SubprocessFailure(GaiaManagerError):
    """An external install/init/start command failed or could not be launched."""

    def __init__(self, command: Union[str, List[str]], returncode: Optional[int] = None, reason: str = ""):
        self.command = command if isinstance(command, str) else " ".join(command)
        self.returncode = returncode
        self.reason = reason
        if returncode is None:
            message = f"Failed to start command: {self.command}"
            if reason:
                message += f" ({reason})"
        else:
            message = f"Command failed with code {returncode}: {self.command}"
        super().__init__(message)


class RemoteChatFailure(GaiaManagerError):
    """A chat completion request failed; reported per turn, the session continues."""
