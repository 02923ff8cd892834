"""Azure OpenAI chat completions adapter.

Azure addresses a model through a deployment rather than a model id, so the
request URL is composed from the resource endpoint, the deployment name and
the API version instead of a flat ``base_url``.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ai_dispatch.core.types import Message, ProviderConfig
from ai_dispatch.libs.llm.base_llm import BaseLLM
from ai_dispatch.libs.llm.openai_llm import extract_choice_text


class AzureLLM(BaseLLM):
    """Azure OpenAI provider implementation.

    Request: ``api-key`` header and ``{messages, stream: false,
    **extra_params}``; the deployment fixes the model so none is sent.
    Response text: ``choices[0].message.content``.

    Example:
        endpoint ``https://my-resource.openai.azure.com``, deployment
        ``gpt-4o`` and version ``2024-02-15-preview`` give
        ``https://my-resource.openai.azure.com/openai/deployments/gpt-4o/
        chat/completions?api-version=2024-02-15-preview``.
    """

    display_name = "Azure OpenAI"
    required_settings = ("endpoint", "deployment_name", "api_version", "api_key")

    def build_url(self, config: ProviderConfig) -> str:
        endpoint = config.endpoint.rstrip("/")
        return (
            f"{endpoint}/openai/deployments/{config.deployment_name}/chat/completions"
            f"?api-version={config.api_version}"
        )

    def build_headers(self, config: ProviderConfig) -> dict[str, str]:
        return {
            "api-key": config.api_key,
            "Content-Type": "application/json",
        }

    def build_payload(self, messages: Sequence[Message], config: ProviderConfig) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "messages": [m.to_dict() for m in messages],
            "stream": False,
        }
        payload.update(config.extra_params)
        return payload

    def extract_text(self, parsed: dict[str, Any]) -> Optional[str]:
        return extract_choice_text(parsed)
