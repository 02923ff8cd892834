"""Dispatcher tying settings, registry, adapters and transport together.

``ChatDispatcher.query`` returns the structured ``ChatResult``/``ChatError``;
``ChatDispatcher.ask`` is the string boundary consumed by a UI layer: the
assistant text, or a single human-readable line prefixed ``Error:``.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ai_dispatch.core.settings import Settings
from ai_dispatch.core.types import ChatError, ChatOutcome, ChatRequest, ErrorKind, Message
from ai_dispatch.libs.llm import LLMFactory
from ai_dispatch.libs.transport.base_transport import BaseTransport
from ai_dispatch.libs.transport.transport_factory import create_transport

logger = logging.getLogger(__name__)


def format_error(error: ChatError, provider_label: str = "Provider") -> str:
    """Render a ``ChatError`` as the single-line ``Error:`` string."""
    kind = error.kind
    if kind is ErrorKind.CONFIG_MISSING:
        return f"Error: Missing {error.detail} in configuration"
    if kind is ErrorKind.CONNECTION_FAILED:
        return f"Error: Failed to connect to {provider_label} API - {error.detail}"
    if kind is ErrorKind.HTTP_ERROR:
        generic = f"request failed with status {error.status_code}"
        if error.detail and error.detail != generic:
            return f"Error: {provider_label} API returned HTTP {error.status_code} - {error.detail}"
        return f"Error: {provider_label} API request failed with HTTP status {error.status_code}"
    if kind is ErrorKind.PARSE_FAILED:
        return f"Error: Failed to parse {provider_label} API response"
    if kind is ErrorKind.PROVIDER_REPORTED:
        return f"Error: {provider_label} API - {error.detail}"
    return f"Error: Unexpected response format from {provider_label} API"


class ChatDispatcher:
    """Send conversations to the configured provider.

    The transport is chosen once, at construction, from the ``transport``
    settings section unless one is injected.

    Attributes:
        settings: Application settings.
        transport: Strategy shared by every adapter this dispatcher builds.
    """

    def __init__(self, settings: Settings, transport: Optional[BaseTransport] = None) -> None:
        self.settings = settings
        self.transport = transport or create_transport(settings.transport)

    def query(self, messages: Iterable[Message], provider_id: Optional[str] = None) -> ChatOutcome:
        """Resolve the provider and run one request.

        Args:
            messages: Conversation in chronological order.
            provider_id: Optional provider id overriding the configured one.

        Returns:
            ``ChatResult`` or ``ChatError``.
        """
        outcome, _ = self._dispatch(messages, provider_id)
        return outcome

    def ask(self, messages: Iterable[Message], provider_id: Optional[str] = None) -> str:
        """Like ``query`` but returns plain text or an ``Error:`` string."""
        outcome, provider_label = self._dispatch(messages, provider_id)
        if isinstance(outcome, ChatError):
            return format_error(outcome, provider_label)
        return outcome.text

    def _dispatch(
        self,
        messages: Iterable[Message],
        provider_id: Optional[str],
    ) -> tuple[ChatOutcome, str]:
        resolution = LLMFactory.resolve(self.settings, self.transport, provider_id)
        if isinstance(resolution, ChatError):
            logger.warning("Provider resolution failed: missing %s", resolution.detail)
            return resolution, LLMFactory.provider_label(self.settings, provider_id)

        adapter, config = resolution
        selected = LLMFactory.select_provider(self.settings, provider_id) or ""
        request = ChatRequest(messages=tuple(messages), provider_id=selected, config=config)
        return adapter.query(request), adapter.display_name
