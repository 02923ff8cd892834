"""OpenAI-compatible chat completion adapters.

``OpenAILLM`` speaks the ``/v1/chat/completions`` dialect. Several vendors
(xAI Grok, OpenRouter, Groq, Mistral, DeepSeek) accept the same request and
response shape, so they are thin subclasses that differ only in name.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ai_dispatch.core.types import Message, ProviderConfig
from ai_dispatch.libs.llm.base_llm import BaseLLM


class OpenAILLM(BaseLLM):
    """OpenAI chat completions adapter.

    Request: ``Authorization: Bearer <api_key>`` and
    ``{model, messages, stream: false, **extra_params}``.
    Response text: ``choices[0].message.content``.
    """

    display_name = "OpenAI"

    def build_url(self, config: ProviderConfig) -> str:
        return config.base_url

    def build_headers(self, config: ProviderConfig) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.api_key}",
        }

    def build_payload(self, messages: Sequence[Message], config: ProviderConfig) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": config.model,
            "messages": [m.to_dict() for m in messages],
            "stream": False,
        }
        payload.update(config.extra_params)
        return payload

    def extract_text(self, parsed: dict[str, Any]) -> Optional[str]:
        return extract_choice_text(parsed)


class OpenRouterLLM(OpenAILLM):
    display_name = "OpenRouter"


class GroqLLM(OpenAILLM):
    display_name = "Groq"


class MistralLLM(OpenAILLM):
    display_name = "Mistral"


class DeepSeekLLM(OpenAILLM):
    display_name = "DeepSeek"


def extract_choice_text(parsed: dict[str, Any]) -> Optional[str]:
    """``choices[0].message.content``; a null content reads as empty text."""
    choices = parsed.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict) or "content" not in message:
        return None
    content = message["content"]
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    return None
