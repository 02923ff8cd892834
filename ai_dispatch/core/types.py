"""Normalized data types shared by every provider adapter.

This module defines the provider-agnostic contracts that flow through the
dispatch layer:

- ``Message``: one role-tagged conversation turn.
- ``ProviderConfig``: validated, read-only settings for one provider block.
- ``ChatRequest``: an immutable conversation bound to a provider.
- ``ChatResult`` / ``ChatError``: the only two things ``query`` can return.
- ``TransportSuccess`` / ``TransportFailure``: the outcome of one send attempt.

All of them are value objects created per call and discarded afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal, Mapping, Optional, Sequence, Union

Role = Literal["system", "user", "assistant"]

VALID_ROLES = frozenset({"system", "user", "assistant"})


@dataclass(frozen=True)
class Message:
    """A single conversation turn.

    Attributes:
        role: One of ``system``, ``user`` or ``assistant``.
        content: Message text.
    """

    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in VALID_ROLES:
            raise ValueError(f"Unsupported message role: {self.role!r}")

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ProviderConfig:
    """Settings for one provider block.

    ``model``, ``base_url`` and ``api_key`` cover most providers. Azure OpenAI
    composes its URL from ``endpoint``, ``deployment_name`` and
    ``api_version`` instead of a flat ``base_url``.

    Attributes:
        model: Model identifier sent to the provider.
        base_url: Full chat endpoint URL (or URL prefix for Gemini).
        api_key: Credential; never logged.
        extra_params: Provider-specific passthrough parameters.
        endpoint: Azure resource endpoint.
        deployment_name: Azure deployment name.
        api_version: Azure API version.
    """

    model: str = ""
    base_url: str = ""
    api_key: str = field(default="", repr=False)
    extra_params: Mapping[str, Any] = field(default_factory=dict)
    endpoint: str = ""
    deployment_name: str = ""
    api_version: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra_params", MappingProxyType(dict(self.extra_params)))


@dataclass(frozen=True)
class ChatRequest:
    """One conversation bound to one provider. One request = one call attempt."""

    messages: Sequence[Message]
    provider_id: str
    config: ProviderConfig

    def __post_init__(self) -> None:
        object.__setattr__(self, "messages", tuple(self.messages))


@dataclass(frozen=True)
class ChatResult:
    """A successfully extracted assistant reply (``text`` may be empty)."""

    text: str
    model: Optional[str] = None
    usage: Optional[dict[str, Any]] = None


class ErrorKind(str, Enum):
    """Classification of every failure an adapter can report."""

    CONFIG_MISSING = "config_missing"
    CONNECTION_FAILED = "connection_failed"
    HTTP_ERROR = "http_error"
    PARSE_FAILED = "parse_failed"
    UNEXPECTED_FORMAT = "unexpected_format"
    PROVIDER_REPORTED = "provider_reported"


@dataclass(frozen=True)
class ChatError:
    """A normalized failure.

    Attributes:
        kind: Failure classification.
        detail: Human-readable detail (missing field, connection reason,
            upstream message, ...).
        status_code: HTTP status for ``HTTP_ERROR``; ``None`` otherwise.
    """

    kind: ErrorKind
    detail: str = ""
    status_code: Optional[int] = None

    @property
    def is_retryable(self) -> bool:
        """Whether re-invoking the whole operation may succeed."""
        if self.kind is ErrorKind.CONNECTION_FAILED:
            return True
        if self.kind is ErrorKind.HTTP_ERROR and self.status_code is not None:
            return self.status_code >= 500
        return False


ChatOutcome = Union[ChatResult, ChatError]


@dataclass(frozen=True)
class TransportSuccess:
    """The server answered; ``status_code`` may still be >= 400."""

    status_code: int
    body: str


@dataclass(frozen=True)
class TransportFailure:
    """No HTTP response was obtained (DNS, TLS, timeout, reset, process error)."""

    reason: str


TransportOutcome = Union[TransportSuccess, TransportFailure]
