"""
Screen handlers for the session navigator.

Each handler takes the shared SessionContext and the screen's own
NavigationState, does its work through the UI helpers, and returns the
Transition the navigator should follow next.
"""

import json
import logging
from typing import Dict

from rich.console import Console
from rich.table import Table

from . import guide, runtime, ui
from .catalog import ModelEntry, filter_catalog, find_model, sort_catalog
from .chat import DIRECTIVE_HELP, ChatSession, parse_directive
from .classifier import CapabilityTier
from .compatibility import (
    CompatibilityVerdict,
    check,
    enforce,
    ram_guidance,
    setup_advice,
    shortfall_gb,
)
from .errors import RemoteChatFailure
from .navigator import Handler, NavigationState, Screen, SessionContext, Transition
from .override import request_override
from .use_cases import RECOMMENDABLE_USE_CASES

_logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("table", "json", "plain")

MENU_ENTRIES = [
    ("📋 List available models", Screen.LIST),
    ("🔎 Show model details", Screen.INFO),
    ("🚀 Run a model", Screen.RUN),
    ("🛠  Guided setup", Screen.SETUP),
    ("🎯 Personalized recommendations", Screen.RECOMMEND),
    ("💬 Chat with your node", Screen.CHAT),
    ("📚 Knowledge base", Screen.KNOWLEDGE_BASE),
    ("❓ Model selection guide", Screen.HELP),
    ("👋 Exit", Screen.EXIT),
]


def _verdict_text(entry: ModelEntry, ctx: SessionContext) -> str:
    if check(entry, ctx.profile) is CompatibilityVerdict.COMPATIBLE:
        return "✓ fits"
    return f"✗ {shortfall_gb(entry, ctx.profile):g}GB short"


def _pick_model(ctx: SessionContext, state: NavigationState, question: str) -> ModelEntry:
    """The model named in the answers, or one chosen from the catalog."""
    model_id = state.get("model")
    if model_id:
        return find_model(ctx.catalog, model_id)
    entries = sort_catalog(ctx.catalog)
    idx = ui.prompt_choice(question, [f"{e.display_name} ({e.id}, {e.tier.label})" for e in entries])
    return entries[idx]


def main_menu(ctx: SessionContext, state: NavigationState) -> Transition:
    ui.print_header("🤖 GaiaNet Model Manager")
    ui.print_info(f"System: {ctx.profile.describe()}")
    idx = ui.prompt_choice("What would you like to do?", [label for label, _ in MENU_ENTRIES])
    target = MENU_ENTRIES[idx][1]
    if target is Screen.EXIT:
        ui.print_info("Goodbye!")
        return Transition.exit()
    return Transition.advance(target)


def list_models(ctx: SessionContext, state: NavigationState) -> Transition:
    """
    List catalog entries, optionally filtered by tier and use case.

    Answers: ``tier`` (CapabilityTier or name), ``use_case`` (label) and
    ``format`` (table, json or plain).
    """
    tier = state.get("tier")
    if isinstance(tier, str):
        tier = CapabilityTier.from_name(tier)
    use_case = state.get("use_case")
    fmt = state.get("format") or "table"

    entries = sort_catalog(filter_catalog(ctx.catalog, tier=tier, use_case=use_case))

    if fmt == "json":
        print(json.dumps([_entry_record(e, ctx) for e in entries], indent=2))
        return Transition.menu()
    if fmt == "plain":
        for entry in entries:
            print(entry.id)
        return Transition.menu()

    if not entries:
        ui.print_warning("No models match the given filters.")
        return Transition.menu()

    table = Table(title=f"Available models ({len(entries)})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Tier")
    table.add_column("Min RAM", justify="right")
    table.add_column("Use cases")
    table.add_column(f"Fit ({ctx.profile.total_ram_gb}GB)")
    for entry in entries:
        table.add_row(
            entry.id,
            entry.display_name,
            entry.tier.label,
            f"{entry.min_ram_gb}GB",
            ", ".join(entry.use_case_list()),
            _verdict_text(entry, ctx),
        )
    Console().print(table)
    return Transition.menu()


def _entry_record(entry: ModelEntry, ctx: SessionContext) -> Dict[str, object]:
    return {
        "id": entry.id,
        "name": entry.display_name,
        "tier": entry.tier.name,
        "min_ram_gb": entry.min_ram_gb,
        "use_cases": entry.use_case_list(),
        "config_url": entry.config_url,
        "compatible": check(entry, ctx.profile) is CompatibilityVerdict.COMPATIBLE,
    }


def model_info(ctx: SessionContext, state: NavigationState) -> Transition:
    entry = _pick_model(ctx, state, "Which model do you want to inspect?")
    profile = ctx.profile

    ui.print_subheader(entry.display_name)
    print(f"  ID:          {ui.colorize(entry.id, ui.Colors.CYAN)}")
    print(f"  Tier:        {entry.tier.describe()}")
    print(f"  Min RAM:     {entry.min_ram_gb}GB")
    print(f"  Use cases:   {', '.join(entry.use_case_list())}")
    print(f"  Config:      {entry.config_url}")
    print()
    if check(entry, profile) is CompatibilityVerdict.COMPATIBLE:
        ui.print_success(f"Compatible with this system ({profile.total_ram_gb}GB RAM)")
    else:
        ui.print_warning(
            f"Not compatible with this system ({profile.total_ram_gb}GB RAM): "
            f"{shortfall_gb(entry, profile):g}GB short"
        )
    return Transition.menu()


def run_model(ctx: SessionContext, state: NavigationState) -> Transition:
    """
    Gate, then deploy a model.

    Answers: ``model``, ``skip_install``, ``force`` (go straight to the
    override ritual when blocked) and ``offer_override`` (ask whether to start
    the ritual when blocked without ``force``; menu mode only).

    Raises:
        ModelNotFound: Unknown model identifier
        CompatibilityBlocked: Blocked and no override was granted
        SubprocessFailure: From the node runtime
    """
    entry = _pick_model(ctx, state, "Which model do you want to run?")
    profile = ctx.profile
    force = bool(state.get("force", False))
    _logger.info("Run requested for %s (force=%s)", entry.id, force)

    if check(entry, profile) is CompatibilityVerdict.INCOMPATIBLE:
        ui.print_error(
            f"{entry.display_name} requires {entry.min_ram_gb}GB RAM, "
            f"this system has {profile.total_ram_gb}GB ({shortfall_gb(entry, profile):g}GB short)."
        )
        wants_override = force or (
            state.get("offer_override", True)
            and ui.prompt_yes_no("Start the safety override procedure?", default=False)
        )
        if not wants_override or not request_override(entry, profile, ctx.settings):
            enforce(entry, profile)
    else:
        ui.print_success(f"{entry.display_name} fits this system ({profile.total_ram_gb}GB RAM).")

    runtime.deploy(entry, ctx.settings, skip_install=bool(state.get("skip_install", False)))
    return Transition.menu()


def guided_setup(ctx: SessionContext, state: NavigationState) -> Transition:
    profile = ctx.profile
    ui.print_header("🛠  GaiaNet Node Setup")
    ui.print_info(f"Your system has approximately {profile.total_ram_gb} GB of RAM.")
    print("    Please consider this when selecting a model size.")
    for line in ram_guidance(profile):
        print(f"    {line}")

    catalog = ctx.catalog
    tiers = CapabilityTier.ordered()
    while True:
        choices = [
            f"{tier.describe()} [{len(filter_catalog(catalog, tier=tier))}]" for tier in tiers
        ]
        tier = tiers[ui.prompt_choice("What kind of model do you want to run?", choices)]
        models = sort_catalog(filter_catalog(catalog, tier=tier))
        if models:
            break
        ui.print_info(f'No models found in the "{tier.label}" category.')
        if not ui.prompt_yes_no("Would you like to select a different category?", default=True):
            return Transition.menu()

    idx = ui.prompt_choice(
        f'Select a model from the "{tier.label}" category:',
        [f"{e.display_name} ({e.id})" for e in models],
    )
    entry = models[idx]

    verdict, message = setup_advice(entry, profile)
    if verdict is CompatibilityVerdict.MARGINAL:
        print()
        ui.print_warning(f"Warning: {message}")

    ui.print_info(f"🚀 Starting setup for GaiaNet node with model: {entry.display_name} ({tier.label})")
    runtime.deploy(entry, ctx.settings)
    return Transition.menu()


def recommend(ctx: SessionContext, state: NavigationState) -> Transition:
    ram = ctx.profile.total_ram_gb
    ui.print_header("🎯 Personalized Model Recommendations")
    ui.print_info(f"Based on your system: {ram}GB RAM")

    use_case = state.get("use_case")
    if not use_case:
        idx = ui.prompt_choice(
            "What will you primarily use the AI model for?",
            [label for _, label in RECOMMENDABLE_USE_CASES],
        )
        use_case = RECOMMENDABLE_USE_CASES[idx][0]

    print()
    for line in guide.recommendation_for(use_case, ram):
        print(f"    {line}")

    matching = [
        e for e in sort_catalog(filter_catalog(ctx.catalog, use_case=use_case))
        if check(e, ctx.profile) is CompatibilityVerdict.COMPATIBLE
    ]
    print()
    if matching:
        ui.print_success(f"Models in the catalog that fit this system ({len(matching)}):")
        for entry in matching:
            print(f"  • {ui.colorize(entry.display_name, ui.Colors.CYAN)} ({entry.id}) - {entry.min_ram_gb}GB+")
    else:
        ui.print_info("No catalog model tagged for this use case fits this system.")

    if ui.prompt_yes_no("Would you like to see available models and start setup?", default=True):
        return Transition.advance(Screen.SETUP)
    return Transition.menu()


def chat(ctx: SessionContext, state: NavigationState) -> Transition:
    session = ChatSession(ctx.settings, model=state.get("model"), system_prompt=state.get("system_prompt"))
    ui.print_header("💬 Chat with your GaiaNet node")
    ui.print_info(f"Endpoint: {session.url} (model: {session.model})")
    _print_directives()

    while True:
        try:
            line = input(f"\n{ui.colorize('you ›', ui.Colors.CYAN + ui.Colors.BOLD)} ")
        except EOFError:
            print()
            return Transition.exit()

        text = line.strip()
        if not text:
            continue

        transition = parse_directive(text)
        if transition is not None:
            return transition
        command = text.lower()
        if command == "/clear":
            session.reset()
            ui.print_info("Conversation cleared.")
            continue
        if command == "/help":
            _print_directives()
            continue
        if command.startswith("/") and " " not in command:
            ui.print_warning(f"Unknown command: {text} (type /help)")
            continue

        try:
            reply = session.send(text)
        except RemoteChatFailure as e:
            ui.print_error(str(e))
            continue
        print(f"\n{ui.colorize('node ›', ui.Colors.GREEN + ui.Colors.BOLD)} {reply}")


def _print_directives() -> None:
    print(ui.colorize("  Commands:", ui.Colors.DIM))
    for directive, text in DIRECTIVE_HELP:
        print(ui.colorize(f"    {directive:<8} {text}", ui.Colors.DIM))


def knowledge_base(ctx: SessionContext, state: NavigationState) -> Transition:
    topics = guide.KB_TOPICS
    choices = [title for title, _ in topics] + ["💬 Chat with your node", "↩ Back to main menu"]
    ui.print_header("📚 Knowledge Base")
    while True:
        idx = ui.prompt_choice("Pick a topic", choices, default=len(choices) - 1)
        if idx == len(topics):
            return Transition.advance(Screen.CHAT)
        if idx == len(topics) + 1:
            return Transition.advance(Screen.MAIN_MENU)
        title, lines = topics[idx]
        ui.print_subheader(title)
        for line in lines:
            print(f"  {line}")


def help_guide(ctx: SessionContext, state: NavigationState) -> Transition:
    ui.print_header("🤖 GAIA MODEL SELECTION GUIDE")
    for line in guide.selection_guide(ctx.profile.total_ram_gb):
        print(f"  {line}")
    print()
    ui.print_info("For guided installation, run: gaia setup")
    return Transition.menu()


SCREENS: Dict[Screen, Handler] = {
    Screen.MAIN_MENU: main_menu,
    Screen.LIST: list_models,
    Screen.INFO: model_info,
    Screen.RUN: run_model,
    Screen.SETUP: guided_setup,
    Screen.RECOMMEND: recommend,
    Screen.CHAT: chat,
    Screen.KNOWLEDGE_BASE: knowledge_base,
    Screen.HELP: help_guide,
}
