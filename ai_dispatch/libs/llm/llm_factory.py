"""Registry that maps provider ids to adapters and their configuration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Optional, Union

from ai_dispatch.core.settings import Settings, provider_config_from_block
from ai_dispatch.core.types import ChatError, ErrorKind, ProviderConfig
from ai_dispatch.libs.llm.base_llm import BaseLLM
from ai_dispatch.libs.transport.base_transport import BaseTransport


LLMCreator = Callable[[BaseTransport], BaseLLM]

Resolution = Union[tuple[BaseLLM, ProviderConfig], ChatError]


class LLMFactory:
    """Factory that resolves provider adapters by handler family name."""

    _registry: dict[str, LLMCreator] = {}

    @classmethod
    def register(cls, provider: str, creator: LLMCreator) -> None:
        """Register a provider constructor.

        Args:
            provider: Handler family key (e.g. "openai", "anthropic", "ollama").
            creator: Callable that builds an adapter around a transport.
        """

        normalized = provider.strip().lower()
        if not normalized:
            raise ValueError("Provider name cannot be empty")
        cls._registry[normalized] = creator

    @classmethod
    def registered(cls) -> list[str]:
        return sorted(cls._registry)

    @classmethod
    def handler_for(cls, provider_id: str, block: Optional[dict[str, Any]] = None) -> Optional[str]:
        """Handler family for ``provider_id``.

        An explicit ``handler`` key in the block wins. Otherwise the longest
        registered ``_``-separated prefix of the id is used, so
        ``openai_grok`` is served by ``openai`` and ``azure_openai`` by
        ``azure_openai``.
        """
        explicit = (block or {}).get("handler")
        if isinstance(explicit, str) and explicit.strip():
            name = explicit.strip().lower()
            return name if name in cls._registry else None

        parts = provider_id.strip().lower().split("_")
        for end in range(len(parts), 0, -1):
            candidate = "_".join(parts[:end])
            if candidate in cls._registry:
                return candidate
        return None

    @classmethod
    def create(cls, handler: str, transport: BaseTransport) -> BaseLLM:
        """Instantiate the adapter registered under ``handler``.

        Raises:
            ValueError: If the handler is not registered.
        """
        creator = cls._registry.get(handler.strip().lower())
        if creator is None:
            available = ", ".join(cls.registered()) or "<none>"
            raise ValueError(f"Unsupported provider handler: {handler}. Registered providers: {available}")
        return creator(transport)

    @classmethod
    def select_provider(cls, settings: Settings, provider_id: Optional[str] = None) -> Optional[str]:
        """Pick the active provider id.

        Order: explicit argument, ``settings.provider``, the first block
        marked ``default: true``, then the first visible block in
        declaration order.
        """
        for pinned in (provider_id, settings.provider):
            if isinstance(pinned, str) and pinned.strip():
                return pinned.strip()

        blocks = settings.provider_settings
        for name, block in blocks.items():
            if block.get("default") or block.get("defalut"):
                return name
        for name, block in blocks.items():
            if block.get("visible", True):
                return name
        return None

    @classmethod
    def provider_label(cls, settings: Settings, provider_id: Optional[str] = None) -> str:
        """Display name of the adapter that would serve the selected provider."""
        selected = cls.select_provider(settings, provider_id)
        if selected is None:
            return "Provider"
        handler = cls.handler_for(selected, settings.provider_settings.get(selected))
        if handler is None:
            return "Provider"
        return getattr(cls._registry[handler], "display_name", "Provider")

    @classmethod
    def visible_providers(cls, settings: Settings) -> list[str]:
        """Provider ids offered in a provider switch, in declaration order."""
        return [
            name
            for name, block in settings.provider_settings.items()
            if block.get("visible", True)
        ]

    @classmethod
    def resolve(
        cls,
        settings: Settings,
        transport: BaseTransport,
        provider_id: Optional[str] = None,
    ) -> Resolution:
        """Resolve the adapter and configuration for a provider.

        Performs no network activity; required-field checks happen in the
        adapter before dispatch.

        Args:
            settings: Application settings.
            transport: Transport injected into the adapter.
            provider_id: Optional pinned provider id.

        Returns:
            ``(adapter, config)`` or a CONFIG_MISSING ``ChatError``.
        """
        selected = cls.select_provider(settings, provider_id)
        if selected is None:
            return ChatError(kind=ErrorKind.CONFIG_MISSING, detail="provider")

        block = settings.provider_settings.get(selected)
        if not isinstance(block, dict):
            return ChatError(kind=ErrorKind.CONFIG_MISSING, detail=f"provider_settings.{selected}")

        handler = cls.handler_for(selected, block)
        if handler is None:
            return ChatError(
                kind=ErrorKind.CONFIG_MISSING,
                detail=f"handler for provider '{selected}'",
            )

        return cls.create(handler, transport), provider_config_from_block(block)
