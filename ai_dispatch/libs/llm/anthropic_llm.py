"""Anthropic Messages API adapter."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ai_dispatch.core.types import Message, ProviderConfig
from ai_dispatch.libs.llm.base_llm import BaseLLM


class AnthropicLLM(BaseLLM):
    """Adapter for ``/v1/messages``.

    System turns are lifted out of the message list into the top-level
    ``system`` field. ``extra_params.anthropic_version`` goes into the
    ``anthropic-version`` header instead of the body; ``max_tokens`` is
    mandatory for this API and defaults to ``DEFAULT_MAX_TOKENS``.
    """

    display_name = "Anthropic"

    DEFAULT_API_VERSION = "2023-06-01"
    DEFAULT_MAX_TOKENS = 4096

    def build_url(self, config: ProviderConfig) -> str:
        return config.base_url

    def build_headers(self, config: ProviderConfig) -> dict[str, str]:
        version = config.extra_params.get("anthropic_version") or self.DEFAULT_API_VERSION
        return {
            "Content-Type": "application/json",
            "x-api-key": config.api_key,
            "anthropic-version": str(version),
        }

    def build_payload(self, messages: Sequence[Message], config: ProviderConfig) -> dict[str, Any]:
        system_parts = [m.content for m in messages if m.role == "system"]
        conversation = [m.to_dict() for m in messages if m.role != "system"]

        payload: dict[str, Any] = {
            "model": config.model,
            "messages": conversation,
            "max_tokens": self.DEFAULT_MAX_TOKENS,
        }
        if system_parts:
            payload["system"] = "\n\n".join(system_parts)
        for key, value in config.extra_params.items():
            if key != "anthropic_version":
                payload[key] = value
        return payload

    def extract_text(self, parsed: dict[str, Any]) -> Optional[str]:
        content = parsed.get("content")
        if not isinstance(content, list):
            return None
        texts = [
            block.get("text", "")
            for block in content
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        return "".join(t for t in texts if isinstance(t, str))
