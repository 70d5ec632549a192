"""
GaiaNet node runtime management.

Runs the three external steps needed to bring a node up with a chosen model:

    install     curl -sSfL '<installer>' | bash
    initialize  gaianet init --config <config url>
    start       gaianet start

Each step is awaited; a non-zero exit or a launch failure raises
SubprocessFailure and the remaining steps are not run.
"""

import logging
import shlex
import subprocess
from typing import List, Union

from . import ui
from .catalog import ModelEntry
from .config import Settings
from .errors import SubprocessFailure

_logger = logging.getLogger(__name__)

Command = Union[str, List[str]]


def format_command(cmd: Command) -> str:
    if isinstance(cmd, str):
        return cmd
    return " ".join(shlex.quote(part) for part in cmd)


def run_step(cmd: Command, shell: bool = False) -> None:
    """
    Run one external command with inherited stdio.

    Args:
        cmd: Shell pipeline string (with ``shell=True``) or argv list
        shell: Run through the system shell

    Raises:
        SubprocessFailure: If the command cannot be started or exits non-zero
    """
    command_line = format_command(cmd)
    ui.print_info(f"Executing: {command_line}")
    _logger.info("Executing: %s", command_line)
    try:
        result = subprocess.run(cmd, shell=shell, check=False)
    except OSError as e:
        _logger.error("Failed to start command: %s (%s)", command_line, e)
        ui.print_error(f"Failed to start command: {command_line}")
        raise SubprocessFailure(command_line, None, str(e)) from e

    if result.returncode != 0:
        _logger.error("Command failed with code %s: %s", result.returncode, command_line)
        ui.print_error(f"Command failed with code {result.returncode}: {command_line}")
        raise SubprocessFailure(command_line, result.returncode)

    ui.print_success(f"Command finished successfully: {command_line}")


def install_command(settings: Settings) -> str:
    return f"curl -sSfL {shlex.quote(settings.installer_url)} | bash"


def init_command(settings: Settings, config_url: str) -> List[str]:
    return [settings.runtime_binary, "init", "--config", config_url]


def start_command(settings: Settings) -> List[str]:
    return [settings.runtime_binary, "start"]


def install_node(settings: Settings) -> None:
    run_step(install_command(settings), shell=True)


def init_node(settings: Settings, config_url: str) -> None:
    run_step(init_command(settings, config_url))


def start_node(settings: Settings) -> None:
    run_step(start_command(settings))


def deploy(entry: ModelEntry, settings: Settings, skip_install: bool = False) -> None:
    """
    Install, initialize and start a node for ``entry``, strictly in that order.

    Raises:
        SubprocessFailure: From the first failing step
    """
    total = 2 if skip_install else 3
    step = 1

    ui.print_subheader(f"Deploying {entry.display_name} ({entry.tier.label})")

    if skip_install:
        ui.print_info("Skipping GaiaNet node installation")
    else:
        ui.print_step(step, total, "Installing GaiaNet node...")
        install_node(settings)
        step += 1

    ui.print_step(step, total, f"Initializing with {entry.display_name} model...")
    init_node(settings, entry.config_url)
    ui.print_success(f"{entry.display_name} model initialized successfully.")
    step += 1

    ui.print_step(step, total, "Starting the node...")
    start_node(settings)
    ui.print_success("GaiaNet node started successfully.")

    print()
    ui.print_success(f"🎉 Setup complete for {entry.display_name}!")
    ui.print_info("Your GaiaNet node should now be running.")
    _logger.info("Deployed %s", entry.id)
