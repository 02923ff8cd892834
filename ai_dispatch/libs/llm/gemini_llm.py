"""Google Gemini ``generateContent`` adapter."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ai_dispatch.core.types import Message, ProviderConfig
from ai_dispatch.libs.llm.base_llm import BaseLLM

# extra_params keys mapped onto generationConfig field names
_GENERATION_CONFIG_KEYS = {
    "temperature": "temperature",
    "max_tokens": "maxOutputTokens",
    "top_p": "topP",
    "top_k": "topK",
}


class GeminiLLM(BaseLLM):
    """Adapter for ``<base_url>/<model>:generateContent``.

    The API key travels in the ``x-goog-api-key`` header rather than the
    ``key`` query parameter so it never shows up in a logged URL.
    Conversation turns become ``contents`` entries (``assistant`` is sent as
    ``model``); system turns become ``systemInstruction``.
    """

    display_name = "Gemini"

    def build_url(self, config: ProviderConfig) -> str:
        return f"{config.base_url.rstrip('/')}/{config.model}:generateContent"

    def build_headers(self, config: ProviderConfig) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": config.api_key,
        }

    def build_payload(self, messages: Sequence[Message], config: ProviderConfig) -> dict[str, Any]:
        contents = [
            {
                "role": "model" if m.role == "assistant" else "user",
                "parts": [{"text": m.content}],
            }
            for m in messages
            if m.role != "system"
        ]
        payload: dict[str, Any] = {"contents": contents}

        system_parts = [{"text": m.content} for m in messages if m.role == "system"]
        if system_parts:
            payload["systemInstruction"] = {"parts": system_parts}

        generation_config: dict[str, Any] = {}
        for key, value in config.extra_params.items():
            if key == "thinking_budget":
                generation_config["thinkingConfig"] = {"thinkingBudget": value}
            else:
                generation_config[_GENERATION_CONFIG_KEYS.get(key, key)] = value
        if generation_config:
            payload["generationConfig"] = generation_config
        return payload

    def extract_text(self, parsed: dict[str, Any]) -> Optional[str]:
        candidates = parsed.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return None
        content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
        if not isinstance(content, dict):
            return None
        parts = content.get("parts") or []
        return "".join(
            part["text"]
            for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str) and not part.get("thought")
        )

    def extract_reported_error(self, parsed: dict[str, Any]) -> Optional[str]:
        message = super().extract_reported_error(parsed)
        if message:
            return message
        feedback = parsed.get("promptFeedback")
        if isinstance(feedback, dict) and feedback.get("blockReason"):
            return f"prompt blocked ({feedback['blockReason']})"
        return None

    def extract_usage(self, parsed: dict[str, Any]) -> Optional[dict[str, Any]]:
        usage = parsed.get("usageMetadata")
        return usage if isinstance(usage, dict) else None
