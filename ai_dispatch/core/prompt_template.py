"""Prompt placeholder substitution and conversation assembly."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional

from ai_dispatch.core.types import Message

PLACEHOLDERS = ("title", "author", "highlight", "language", "progress")

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."
DEFAULT_LANGUAGE = "English"

_TOKEN_PATTERN = re.compile(r"\{(\w+)\}")


def render(template: str, bindings: Mapping[str, Any]) -> str:
    """Replace every bound ``{name}`` token with its value.

    Tokens with no binding are left verbatim so templates can reference
    placeholders the caller does not supply yet.

    Args:
        template: Prompt text containing ``{name}`` tokens.
        bindings: Mapping of placeholder name to value.

    Returns:
        The rendered prompt.
    """

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in bindings:
            return match.group(0)
        return str(bindings[name])

    return _TOKEN_PATTERN.sub(_substitute, template)


def resolve_language(features: Optional[Mapping[str, Any]]) -> str:
    """Pick the answer language: response_language > dictionary_translate_to > English."""
    features = features or {}
    for key in ("response_language", "dictionary_translate_to"):
        value = features.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return DEFAULT_LANGUAGE


def build_conversation(
    user_prompt: str,
    system_prompt: Optional[str] = None,
    history: Iterable[Message] = (),
) -> list[Message]:
    """Assemble system turn, prior turns and the new user turn in order."""
    messages = [Message(role="system", content=system_prompt or DEFAULT_SYSTEM_PROMPT)]
    messages.extend(history)
    messages.append(Message(role="user", content=user_prompt))
    return messages
