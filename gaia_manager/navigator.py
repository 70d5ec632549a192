"""
Session navigator: the state machine behind the interactive menu.

Every screen is a function ``handler(ctx, state) -> Transition``. The
navigator dispatches the current screen, then follows the transition it
returns: back to the main menu, on to another screen, or out of the program.
Screen-local answers live in a NavigationState that only exists while the
screen runs; the SessionContext carries the values shared by all screens
(settings, the host profile and the resolved catalog).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from . import ui
from .catalog import ModelEntry, resolve
from .config import Settings
from .errors import GaiaManagerError
from .hardware import SystemProfile, detect_system_profile

_logger = logging.getLogger(__name__)


class Screen(Enum):
    MAIN_MENU = "main-menu"
    LIST = "list"
    INFO = "info"
    RUN = "run"
    SETUP = "setup"
    RECOMMEND = "recommend"
    CHAT = "chat"
    KNOWLEDGE_BASE = "knowledge-base"
    HELP = "help"
    EXIT = "exit"


class TransitionKind(Enum):
    RETURN_TO_MENU = "return-to-menu"
    ADVANCE = "advance"
    EXIT = "exit"


@dataclass(frozen=True)
class Transition:
    kind: TransitionKind
    target: Optional[Screen] = None

    @classmethod
    def menu(cls) -> "Transition":
        return cls(TransitionKind.RETURN_TO_MENU)

    @classmethod
    def advance(cls, target: Screen) -> "Transition":
        return cls(TransitionKind.ADVANCE, target)

    @classmethod
    def exit(cls) -> "Transition":
        return cls(TransitionKind.EXIT)

    def next_screen(self) -> Screen:
        if self.kind is TransitionKind.EXIT:
            return Screen.EXIT
        if self.kind is TransitionKind.ADVANCE and self.target is not None:
            return self.target
        return Screen.MAIN_MENU


@dataclass
class NavigationState:
    """Screen-local answers, discarded when the screen completes."""
    screen: Screen
    answers: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.answers.get(key, default)


class SessionContext:
    """
    Values shared by all screens of one invocation.

    The host profile is detected and the catalog resolved at most once, on
    first use. Both can be supplied up front (tests, or a caller that already
    has them). With ``quiet`` both happen without messages on stdout, for
    machine-readable output.
    """

    def __init__(
        self,
        settings: Settings,
        profile: Optional[SystemProfile] = None,
        catalog: Optional[List[ModelEntry]] = None,
        quiet: bool = False,
    ):
        self.settings = settings
        self.quiet = quiet
        self._profile = profile
        self._catalog = catalog

    @property
    def profile(self) -> SystemProfile:
        if self._profile is None:
            self._profile = detect_system_profile(quiet=self.quiet)
        return self._profile

    @property
    def catalog(self) -> List[ModelEntry]:
        if self._catalog is None:
            self._catalog = resolve(self.settings, show_progress=not self.quiet)
        return self._catalog


Handler = Callable[[SessionContext, NavigationState], Transition]


class Navigator:
    """Runs screens until one of them asks to exit."""

    def __init__(self, ctx: SessionContext, handlers: Optional[Dict[Screen, Handler]] = None):
        if handlers is None:
            from .screens import SCREENS
            handlers = SCREENS
        self.ctx = ctx
        self.handlers = handlers
        self.history: List[Screen] = []

    def dispatch(self, state: NavigationState) -> Transition:
        handler = self.handlers.get(state.screen)
        if handler is None:
            raise ValueError(f"No handler registered for screen {state.screen.value}")
        _logger.debug("Entering screen %s", state.screen.value)
        transition = handler(self.ctx, state)
        _logger.debug("Leaving screen %s with %s", state.screen.value, transition)
        return transition

    def run(
        self,
        start: Screen = Screen.MAIN_MENU,
        answers: Optional[Dict[str, Any]] = None,
        standalone: bool = False,
        offer_menu: bool = True,
    ) -> int:
        """
        Drive the state machine starting at ``start``.

        Args:
            start: First screen to show
            answers: Pre-collected answers for the first screen only
            standalone: The first screen was invoked directly as a command.
                Until the main menu is reached, errors propagate to the
                caller instead of returning to the menu.
            offer_menu: For standalone screens returning to the menu, ask
                whether to open it (otherwise the program ends)

        Returns:
            Process exit code (0)
        """
        current = start
        pending_answers = dict(answers or {})
        in_menu = not standalone

        while current is not Screen.EXIT:
            if current is Screen.MAIN_MENU:
                in_menu = True
            state = NavigationState(current, pending_answers)
            pending_answers = {}
            self.history.append(current)

            try:
                transition = self.dispatch(state)
            except GaiaManagerError as e:
                if not in_menu:
                    raise
                _logger.warning("Screen %s failed: %s", current.value, e)
                ui.print_error(str(e))
                transition = Transition.menu()

            if not in_menu and transition.kind is TransitionKind.RETURN_TO_MENU:
                if not (offer_menu and ui.prompt_yes_no("Return to the main menu?", default=False)):
                    transition = Transition.exit()

            current = transition.next_screen()

        return 0
