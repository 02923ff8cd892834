"""Ollama chat adapter.

Ollama accepts the OpenAI-compatible request body, so only the reply shape
differs: the assistant text sits at ``message.content``.
"""

from __future__ import annotations

from typing import Any, Optional

from ai_dispatch.libs.llm.openai_llm import OpenAILLM


class OllamaLLM(OpenAILLM):
    """Adapter for an Ollama ``/api/chat`` endpoint (often behind a proxy).

    ``api_key`` is required because proxied deployments expect bearer auth;
    a placeholder such as ``"ollama"`` is fine for a bare local server.
    """

    display_name = "Ollama"

    def extract_text(self, parsed: dict[str, Any]) -> Optional[str]:
        message = parsed.get("message")
        if not isinstance(message, dict):
            return None
        content = message.get("content")
        if content is None:
            return ""
        return content if isinstance(content, str) else None
