"""Factory that selects a transport strategy once, at construction time."""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable
from typing import Any, Mapping, Optional

from ai_dispatch.libs.transport.base_transport import DEFAULT_TIMEOUT, BaseTransport
from ai_dispatch.libs.transport.curl_transport import (
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
    CurlTransport,
)
from ai_dispatch.libs.transport.fallback_transport import FallbackTransport
from ai_dispatch.libs.transport.requests_transport import RequestsTransport

logger = logging.getLogger(__name__)

CONSTRAINED_DEVICE_ENV = "AI_DISPATCH_CONSTRAINED_DEVICE"

_TRUE_STRINGS = ("1", "true", "yes")

TransportCreator = Callable[[Mapping[str, Any]], BaseTransport]


def is_constrained_device(transport_settings: Optional[Mapping[str, Any]] = None) -> bool:
    """Capability probe: is this a constrained/sandboxed device?

    An explicit ``constrained_device`` setting wins; otherwise the
    ``AI_DISPATCH_CONSTRAINED_DEVICE`` environment variable decides.
    """
    configured = (transport_settings or {}).get("constrained_device")
    if configured is not None:
        return _as_flag(configured)
    return _as_flag(os.environ.get(CONSTRAINED_DEVICE_ENV, ""))


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _as_number(transport_settings: Mapping[str, Any], key: str, default: int) -> int:
    """Non-negative integer setting (``timeout`` must be positive); null means ``default``."""
    value = transport_settings.get(key)
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Settings field transport.{key} must be an integer, got {value!r}") from None
    if number < 0 or (key == "timeout" and number == 0):
        raise ValueError(f"Settings field transport.{key} must be positive, got {value!r}")
    return number


def curl_available(executable: str = "curl") -> bool:
    return shutil.which(executable) is not None


def _create_requests(transport_settings: Mapping[str, Any]) -> BaseTransport:
    return RequestsTransport(
        timeout=_as_number(transport_settings, "timeout", DEFAULT_TIMEOUT),
        verify_tls=_as_flag(transport_settings.get("verify_tls", False)),
    )


def _create_curl(transport_settings: Mapping[str, Any]) -> BaseTransport:
    curl = CurlTransport(
        executable=transport_settings.get("curl_executable") or "curl",
        timeout=_as_number(transport_settings, "timeout", DEFAULT_TIMEOUT),
        retries=_as_number(transport_settings, "retries", DEFAULT_RETRIES),
        retry_delay=_as_number(transport_settings, "retry_delay", DEFAULT_RETRY_DELAY),
        verify_tls=_as_flag(transport_settings.get("verify_tls", False)),
    )
    return FallbackTransport(primary=curl, fallback=_create_requests(transport_settings))


def _create_auto(transport_settings: Mapping[str, Any]) -> BaseTransport:
    executable = transport_settings.get("curl_executable") or "curl"
    if is_constrained_device(transport_settings) and curl_available(executable):
        return _create_curl(transport_settings)
    return _create_requests(transport_settings)


class TransportFactory:
    """Factory that resolves transport strategies by name."""

    _registry: dict[str, TransportCreator] = {
        "auto": _create_auto,
        "curl": _create_curl,
        "requests": _create_requests,
    }

    @classmethod
    def create(cls, transport_settings: Optional[Mapping[str, Any]] = None) -> BaseTransport:
        """Create a transport from the ``transport`` settings section.

        Args:
            transport_settings: Section with ``strategy`` (``auto`` by
                default), ``timeout``, ``retries``, ``retry_delay``,
                ``verify_tls`` and ``constrained_device``.

        Returns:
            The selected transport strategy.

        Raises:
            ValueError: If the strategy is not registered.
        """
        transport_settings = transport_settings or {}
        strategy = str(transport_settings.get("strategy") or "auto").strip().lower()
        creator = cls._registry.get(strategy)
        if creator is None:
            available = ", ".join(sorted(cls._registry))
            raise ValueError(
                f"Unsupported transport.strategy: {strategy}. Registered strategies: {available}"
            )

        transport = creator(transport_settings)
        logger.debug("Selected transport %s for strategy %s", type(transport).__name__, strategy)
        return transport


def create_transport(transport_settings: Optional[Mapping[str, Any]] = None) -> BaseTransport:
    return TransportFactory.create(transport_settings)
