"""
UI utilities for terminal output and user interaction.

Provides colored terminal output, formatted headers, interactive prompts and
the session log that mirrors everything printed through this module.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"


DEFAULT_LOG_PATH = Path.home() / ".gaia-manager" / "logs" / "gaia-manager.log"

_LOG_FILE_PATH: Optional[Path] = None


def init_logging(log_path: Optional[Path] = None, verbose: bool = False) -> Path:
    """
    Initialize the session log.

    Every UI line is appended to a local file for later troubleshooting, and
    the ``gaia_manager`` package logger writes to the same file. With
    ``verbose`` the package logger also emits DEBUG records to stderr.
    """
    global _LOG_FILE_PATH

    if log_path is None:
        log_path = DEFAULT_LOG_PATH

    package_logger = logging.getLogger("gaia_manager")
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        # Touch file to validate permissions early
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(f"\n--- gaia-manager started {datetime.now().isoformat(timespec='seconds')} ---\n")
        _LOG_FILE_PATH = log_path
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        package_logger.addHandler(handler)
    except OSError:
        # Logging must never break interactive UX
        _LOG_FILE_PATH = None

    if verbose:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        package_logger.addHandler(stream)

    return log_path


def _log_line(level: str, text: str) -> None:
    """Best-effort append to log file."""
    if _LOG_FILE_PATH is None:
        return
    try:
        ts = datetime.now().isoformat(timespec="seconds")
        with open(_LOG_FILE_PATH, "a", encoding="utf-8") as f:
            f.write(f"{ts} [{level}] {text}\n")
    except OSError:
        return


def colorize(text: str, color: str) -> str:
    """Apply color to text."""
    return f"{color}{text}{Colors.RESET}"


def print_header(text: str) -> None:
    """Print a styled header."""
    _log_line("HEADER", text)
    width = max(60, len(text) + 10)
    print()
    print(colorize("═" * width, Colors.CYAN))
    print(colorize(f"  {text}", Colors.CYAN + Colors.BOLD))
    print(colorize("═" * width, Colors.CYAN))
    print()


def print_subheader(text: str) -> None:
    """Print a styled subheader."""
    _log_line("SUBHEADER", text)
    print()
    print(colorize(f"▸ {text}", Colors.BLUE + Colors.BOLD))
    print(colorize("─" * 50, Colors.DIM))


def print_success(text: str) -> None:
    """Print success message."""
    _log_line("SUCCESS", text)
    print(colorize(f"✓ {text}", Colors.GREEN))


def print_error(text: str) -> None:
    """Print error message."""
    _log_line("ERROR", text)
    print(colorize(f"✗ {text}", Colors.RED))


def print_warning(text: str) -> None:
    """Print warning message."""
    _log_line("WARN", text)
    print(colorize(f"⚠ {text}", Colors.YELLOW))


def print_info(text: str) -> None:
    """Print info message."""
    _log_line("INFO", text)
    print(colorize(f"ℹ {text}", Colors.BLUE))


def print_step(step: int, total: int, text: str) -> None:
    """Print a step indicator."""
    _log_line("STEP", f"[{step}/{total}] {text}")
    print(colorize(f"[{step}/{total}] {text}", Colors.MAGENTA))


def prompt_yes_no(question: str, default: bool = True) -> bool:
    """Prompt user for yes/no answer."""
    suffix = "[Y/n]" if default else "[y/N]"
    while True:
        response = input(f"{colorize('?', Colors.CYAN)} {question} {colorize(suffix, Colors.DIM)}: ").strip().lower()
        if not response:
            return default
        if response in ("y", "yes"):
            return True
        if response in ("n", "no"):
            return False
        print_warning("Please enter 'y' or 'n'")


def prompt_choice(question: str, choices: List[str], default: int = 0) -> int:
    """Prompt user to select from choices. Returns the selected index."""
    print(f"\n{colorize('?', Colors.CYAN)} {question}")
    for i, choice in enumerate(choices):
        marker = colorize("●", Colors.GREEN) if i == default else colorize("○", Colors.DIM)
        print(f"  {marker} [{i + 1}] {choice}")

    while True:
        response = input(f"\n  Enter choice (1-{len(choices)}) [{default + 1}]: ").strip()
        if not response:
            return default
        try:
            idx = int(response) - 1
            if 0 <= idx < len(choices):
                return idx
        except ValueError:
            pass
        print_warning(f"Please enter a number between 1 and {len(choices)}")


def prompt_text(question: str, default: str = "") -> str:
    """
    Prompt user for free text.

    The answer is returned exactly as typed (no case folding, no stripping of
    inner whitespace); an empty answer yields ``default``.
    """
    hint = f" {colorize(f'[{default}]', Colors.DIM)}" if default else ""
    response = input(f"{colorize('?', Colors.CYAN)} {question}{hint}: ")
    response = response.strip("\r\n")
    if not response.strip():
        return default
    return response
