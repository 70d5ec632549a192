"""
Command-line entry point for gaia-manager.

Without a subcommand the interactive menu opens; every subcommand runs the
matching screen directly and exits with a non-zero code on failure.
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from . import __version__, ui
from .classifier import CapabilityTier
from .config import load_settings
from .errors import GaiaManagerError
from .navigator import Navigator, Screen, SessionContext
from .screens import OUTPUT_FORMATS
from .use_cases import all_labels

_logger = logging.getLogger(__name__)

EPILOG = """
Examples:
  gaia                              open the interactive menu
  gaia list --size small            list Small models
  gaia list --format json           machine-readable catalog
  gaia info llama-3-8b-instruct     details and compatibility
  gaia run llama-3-8b-instruct      install, initialize and start a node
  gaia chat --system "Be brief."    chat with the running node
"""

# Subcommand -> (screen, offer the main menu afterwards)
COMMANDS = {
    "list": (Screen.LIST, False),
    "info": (Screen.INFO, False),
    "run": (Screen.RUN, False),
    "setup": (Screen.SETUP, True),
    "recommend": (Screen.RECOMMEND, True),
    "help": (Screen.HELP, True),
    "chat": (Screen.CHAT, True),
    "kb": (Screen.KNOWLEDGE_BASE, True),
}


def _tier_arg(value: str) -> CapabilityTier:
    try:
        return CapabilityTier.from_name(value)
    except ValueError:
        names = ", ".join(t.name.lower() for t in CapabilityTier.ordered())
        raise argparse.ArgumentTypeError(f"unknown size '{value}' (choose from {names})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gaia",
        description="Discover, check and deploy models on a local GaiaNet node",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="Settings file (default: ~/.gaia-manager/config.yaml)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging to stderr")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p_list = sub.add_parser("list", help="List available models")
    p_list.add_argument("--size", type=_tier_arg, help="Only models of this size tier")
    p_list.add_argument("--use-case", choices=all_labels(), metavar="LABEL", help="Only models tagged with LABEL")
    p_list.add_argument("--format", choices=OUTPUT_FORMATS, default="table", help="Output format")

    p_info = sub.add_parser("info", help="Show details and compatibility for one model")
    p_info.add_argument("model", help="Model identifier")

    p_run = sub.add_parser("run", help="Install, initialize and start a node with a model")
    p_run.add_argument("model", help="Model identifier")
    p_run.add_argument("--skip-install", action="store_true", help="Skip the node installer")
    p_run.add_argument("--force", action="store_true", help="Start the safety override if the model does not fit")

    sub.add_parser("setup", help="Interactive model selection and installation")
    sub.add_parser("recommend", help="Personalized recommendations by use case")
    sub.add_parser("help", help="Show the model selection guide")

    p_chat = sub.add_parser("chat", help="Chat with the running node")
    p_chat.add_argument("--endpoint", help="Node endpoint (default from settings)")
    p_chat.add_argument("--model", help="Model name sent with each request")
    p_chat.add_argument("--system", help="System prompt for the conversation")

    sub.add_parser("kb", help="Browse the knowledge base")
    return parser


def _answers(args: argparse.Namespace) -> dict:
    if args.command == "list":
        return {"tier": args.size, "use_case": args.use_case, "format": args.format}
    if args.command == "info":
        return {"model": args.model}
    if args.command == "run":
        return {
            "model": args.model,
            "skip_install": args.skip_install,
            "force": args.force,
            "offer_override": False,
        }
    if args.command == "chat":
        return {"model": args.model, "system_prompt": args.system}
    return {}


def main(argv: Optional[List[str]] = None) -> int:
    """Run gaia-manager and return the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
        if args.command == "chat":
            settings = settings.with_overrides(chat_endpoint=args.endpoint)
        ui.init_logging(settings.log_path, verbose=args.verbose)
        _logger.info("gaia-manager %s: %s", __version__, args.command or "menu")

        machine_output = args.command == "list" and args.format != "table"
        ctx = SessionContext(settings, quiet=machine_output)
        navigator = Navigator(ctx)

        if args.command is None:
            return navigator.run()
        screen, offer_menu = COMMANDS[args.command]
        return navigator.run(screen, _answers(args), standalone=True, offer_menu=offer_menu)

    except GaiaManagerError as e:
        _logger.error("%s: %s", type(e).__name__, e)
        ui.print_error(str(e))
        return e.exit_code
    except (KeyboardInterrupt, EOFError):
        print()
        ui.print_warning("Interrupted. Goodbye!")
        return 130
    except Exception as e:
        _logger.exception("Unexpected error")
        ui.print_error(f"Unexpected error: {e}")
        traceback.print_exc()
        return 1


def run() -> None:
    sys.exit(main())
