"""
Host memory detection.

Builds the SystemProfile the compatibility gate compares model requirements
against. Detection happens once per invocation.
"""

import logging
import platform
from dataclasses import dataclass
from typing import Optional

from . import ui
from . import utils

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SystemProfile:
    """Measured host resources (read-only)."""
    total_ram_gb: float
    os_name: str = ""
    cpu_arch: str = ""
    cpu_brand: str = ""

    def describe(self) -> str:
        """One-line human readable summary."""
        parts = [f"{self.total_ram_gb}GB RAM"]
        if self.os_name:
            parts.append(self.os_name)
        if self.cpu_arch:
            parts.append(self.cpu_arch)
        return " | ".join(parts)


def round_ram_gb(total_bytes: float) -> float:
    """Convert bytes to GiB rounded to one decimal."""
    return round(total_bytes / (1024 ** 3), 1)


def _read_ram_bytes_darwin() -> Optional[int]:
    code, stdout, _ = utils.run_command(["sysctl", "-n", "hw.memsize"])
    if code == 0:
        try:
            return int(stdout.strip())
        except ValueError:
            return None
    return None


def _read_ram_bytes_linux() -> Optional[int]:
    try:
        with open("/proc/meminfo") as f:
            for line in f:
                if line.startswith("MemTotal"):
                    kb = int(line.split()[1])
                    return kb * 1024
    except (OSError, ValueError, IndexError):
        return None
    return None


def _read_ram_bytes_windows() -> Optional[int]:
    code, stdout, _ = utils.run_command(["wmic", "OS", "get", "TotalVisibleMemorySize"])
    if code == 0:
        lines = [line.strip() for line in stdout.strip().split("\n") if line.strip()]
        if len(lines) > 1:
            try:
                return int(lines[1]) * 1024
            except ValueError:
                return None
    return None


def _read_cpu_brand(os_name: str) -> str:
    if os_name == "Darwin":
        code, stdout, _ = utils.run_command(["sysctl", "-n", "machdep.cpu.brand_string"])
        if code == 0:
            return stdout.strip()
    elif os_name == "Linux":
        try:
            with open("/proc/cpuinfo") as f:
                for line in f:
                    if "model name" in line:
                        return line.split(":")[1].strip()
        except (OSError, IndexError):
            pass
    return platform.processor() or ""


def detect_system_profile(show: bool = False, quiet: bool = False) -> SystemProfile:
    """
    Detect total system RAM.

    Uses sysctl on macOS, /proc/meminfo on Linux and wmic on Windows. When
    detection fails the profile reports 0.0GB, which makes every model fail
    the compatibility gate rather than pass it blindly.

    Args:
        show: Print the detected values
        quiet: Only log a detection failure; keep stdout clean for
            machine-readable output

    Returns:
        SystemProfile for this host
    """
    os_name = platform.system()
    readers = {
        "Darwin": _read_ram_bytes_darwin,
        "Linux": _read_ram_bytes_linux,
        "Windows": _read_ram_bytes_windows,
    }
    reader = readers.get(os_name)
    total_bytes = reader() if reader else None

    if total_bytes is None:
        _logger.warning("Could not detect system RAM on %s", os_name or "unknown OS")
        if not quiet:
            ui.print_warning("Could not detect system RAM; treating it as 0GB")
        total_bytes = 0

    profile = SystemProfile(
        total_ram_gb=round_ram_gb(total_bytes),
        os_name=os_name,
        cpu_arch=platform.machine(),
        cpu_brand=_read_cpu_brand(os_name),
    )
    _logger.debug("Detected system profile: %s", profile)

    if show:
        ui.print_info(f"OS: {profile.os_name} ({profile.cpu_arch})")
        ui.print_info(f"CPU: {profile.cpu_brand or 'Unknown'}")
        ui.print_info(f"RAM: {profile.total_ram_gb} GB")

    return profile
