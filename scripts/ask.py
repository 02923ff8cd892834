#!/usr/bin/env python
"""Ask script for the ai-dispatch provider layer.

This script sends one prompt (optionally rendered from a template with
placeholder bindings) to the configured chat-completion provider and prints
the reply.

Usage:
    # Ask the default provider
    python scripts/ask.py --prompt "Explain the following text: {highlight}" \
        --highlight "tabula rasa"

    # Pin a provider block from settings
    python scripts/ask.py --prompt "Hello" --provider anthropic

    # List providers shown in the provider switch
    python scripts/ask.py --list-providers

Exit codes:
    0 - Success
    1 - Provider error
    2 - Configuration error
"""

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path
_SCRIPT_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _SCRIPT_DIR.parent
sys.path.insert(0, str(_REPO_ROOT))

from ai_dispatch.core.dispatcher import ChatDispatcher, format_error
from ai_dispatch.core.prompt_template import build_conversation, render, resolve_language
from ai_dispatch.core.settings import load_settings
from ai_dispatch.core.types import ChatError, ErrorKind
from ai_dispatch.libs.llm import LLMFactory
from ai_dispatch.observability.logger import configure_logging, get_logger

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Send a prompt to the configured chat-completion provider.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--prompt", "-p",
        help="User prompt; may contain {title}, {author}, {highlight}, {language}, {progress}."
    )

    parser.add_argument(
        "--system",
        default=None,
        help="System prompt (default: features.system_prompt or a generic assistant prompt)"
    )

    parser.add_argument(
        "--provider",
        default=None,
        help="Provider id from provider_settings (default: settings.provider)"
    )

    parser.add_argument(
        "--config",
        default=str(_REPO_ROOT / "config" / "settings.yaml"),
        help="Path to configuration file (default: config/settings.yaml)"
    )

    parser.add_argument("--highlight", default=None, help="Value for {highlight}")
    parser.add_argument("--title", default=None, help="Value for {title}")
    parser.add_argument("--author", default=None, help="Value for {author}")
    parser.add_argument("--progress", default=None, help="Value for {progress}")

    parser.add_argument(
        "--list-providers",
        action="store_true",
        help="Print visible provider ids and exit"
    )

    return parser.parse_args(argv)


def _bindings(args: argparse.Namespace, features: dict) -> dict:
    bindings = {"language": resolve_language(features)}
    for name in ("highlight", "title", "author", "progress"):
        value = getattr(args, name)
        if value is not None:
            bindings[name] = value
    return bindings


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load settings: %s", exc)
        return 2

    configure_logging(settings.observability)

    if args.list_providers:
        for name in LLMFactory.visible_providers(settings):
            print(name)
        return 0

    if not args.prompt:
        print("Error: --prompt is required", file=sys.stderr)
        return 2

    bindings = _bindings(args, settings.features)
    user_prompt = render(args.prompt, bindings)
    system_prompt = args.system or settings.features.get("system_prompt")
    messages = build_conversation(user_prompt, system_prompt=system_prompt)

    try:
        dispatcher = ChatDispatcher(settings)
    except ValueError as exc:
        logger.error("Invalid transport configuration: %s", exc)
        return 2

    outcome = dispatcher.query(messages, provider_id=args.provider)
    if isinstance(outcome, ChatError):
        print(format_error(outcome, LLMFactory.provider_label(settings, args.provider)), file=sys.stderr)
        return 2 if outcome.kind is ErrorKind.CONFIG_MISSING else 1

    print(outcome.text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
