"""
Override ritual for running a model the compatibility gate blocked.

Bypassing the RAM check takes a fixed, ordered sequence of confirmations.
Every step must succeed, in order; the first declined step ends the ritual
and the run is abandoned without touching the node runtime.

    SHOW_SHORTFALL         print how much RAM is missing
    CONFIRM_RISK           yes/no, defaults to no
    COOLDOWN               visible wait of at least five seconds
    ACCEPT_RESPONSIBILITY  Cancel (default) or accept responsibility
    TYPE_PHRASE            exact, case-sensitive confirmation phrase, no retry
    COUNTDOWN              visible final countdown, then the override is granted
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict, List, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn

from . import ui
from .catalog import ModelEntry
from .compatibility import shortfall_gb
from .config import MIN_OVERRIDE_DELAY_SECONDS, Settings
from .hardware import SystemProfile

_logger = logging.getLogger(__name__)

CONFIRMATION_PHRASE = "I ACCEPT THE RISK"
RESPONSIBILITY_CHOICES = ["Cancel", "I accept full responsibility for running this model"]
COOLDOWN_TICK_SECONDS = 0.25
MIN_COUNTDOWN_SECONDS = 3


class OverrideStep(Enum):
    SHOW_SHORTFALL = 1
    CONFIRM_RISK = 2
    COOLDOWN = 3
    ACCEPT_RESPONSIBILITY = 4
    TYPE_PHRASE = 5
    COUNTDOWN = 6


class OverrideRitual:
    """
    Drives the override steps for one blocked model.

    ``sleep`` and ``console`` are injectable so each step can be exercised
    without a real terminal or real waiting.
    """

    def __init__(
        self,
        entry: ModelEntry,
        profile: SystemProfile,
        delay_seconds: float = MIN_OVERRIDE_DELAY_SECONDS,
        countdown_seconds: int = 3,
        sleep: Optional[Callable[[float], None]] = None,
        console: Optional[Console] = None,
    ):
        self.entry = entry
        self.profile = profile
        self.delay_seconds = max(MIN_OVERRIDE_DELAY_SECONDS, delay_seconds)
        self.countdown_seconds = max(MIN_COUNTDOWN_SECONDS, countdown_seconds)
        self.sleep = sleep or time.sleep
        self.console = console or Console()
        self.completed_steps: List[OverrideStep] = []
        self.aborted_at: Optional[OverrideStep] = None
        self._handlers: Dict[OverrideStep, Callable[[], bool]] = {
            OverrideStep.SHOW_SHORTFALL: self.show_shortfall,
            OverrideStep.CONFIRM_RISK: self.confirm_risk,
            OverrideStep.COOLDOWN: self.cooldown,
            OverrideStep.ACCEPT_RESPONSIBILITY: self.accept_responsibility,
            OverrideStep.TYPE_PHRASE: self.type_phrase,
            OverrideStep.COUNTDOWN: self.countdown,
        }

    @property
    def granted(self) -> bool:
        return self.completed_steps == list(OverrideStep)

    def run(self) -> bool:
        """Run every step in order. Returns True only if all of them succeed."""
        _logger.info("Override requested for %s", self.entry.id)
        for step in OverrideStep:
            if not self._handlers[step]():
                self.aborted_at = step
                _logger.info("Override for %s aborted at %s", self.entry.id, step.name)
                ui.print_info("Override cancelled. The model was not started.")
                return False
            self.completed_steps.append(step)
        _logger.warning(
            "Override granted for %s (%sGB short)", self.entry.id, shortfall_gb(self.entry, self.profile)
        )
        return True

    def show_shortfall(self) -> bool:
        missing = shortfall_gb(self.entry, self.profile)
        ui.print_subheader("Resource Safety Override")
        ui.print_warning(
            f"{self.entry.display_name} requires {self.entry.min_ram_gb}GB RAM; "
            f"this system has {self.profile.total_ram_gb}GB."
        )
        ui.print_warning(f"Shortfall: {missing:g}GB")
        return True

    def confirm_risk(self) -> bool:
        return ui.prompt_yes_no(
            "Do you understand that running this model may crash or freeze your system?",
            default=False,
        )

    def cooldown(self) -> bool:
        ui.print_info(f"Please take {self.delay_seconds:g} seconds to reconsider...")
        with Progress(
            TextColumn("[yellow]{task.description}"),
            BarColumn(),
            TimeRemainingColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task("Waiting", total=self.delay_seconds)
            waited = 0.0
            while waited < self.delay_seconds:
                tick = min(COOLDOWN_TICK_SECONDS, self.delay_seconds - waited)
                self.sleep(tick)
                waited += tick
                progress.update(task, completed=waited)
        return True

    def accept_responsibility(self) -> bool:
        choice = ui.prompt_choice(
            "How do you want to proceed?", RESPONSIBILITY_CHOICES, default=0
        )
        return choice == 1

    def type_phrase(self) -> bool:
        typed = ui.prompt_text(f"Type '{CONFIRMATION_PHRASE}' exactly to continue")
        if typed != CONFIRMATION_PHRASE:
            ui.print_warning("Confirmation phrase did not match.")
            return False
        return True

    def countdown(self) -> bool:
        for remaining in range(self.countdown_seconds, 0, -1):
            self.console.print(f"[bold red]Overriding safety check in {remaining}...[/bold red]")
            self.sleep(1)
        ui.print_warning("Safety check overridden.")
        return True


def request_override(
    entry: ModelEntry,
    profile: SystemProfile,
    settings: Settings,
    sleep: Optional[Callable[[float], None]] = None,
) -> bool:
    """Run the full ritual with the configured timings."""
    ritual = OverrideRitual(
        entry,
        profile,
        delay_seconds=settings.override_delay_seconds,
        countdown_seconds=settings.override_countdown_seconds,
        sleep=sleep,
    )
    return ritual.run()
