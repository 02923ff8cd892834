"""Base abstraction for chat-capable provider adapters."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from ai_dispatch.core.types import (
    ChatError,
    ChatOutcome,
    ChatRequest,
    ChatResult,
    ErrorKind,
    Message,
    ProviderConfig,
    TransportFailure,
)
from ai_dispatch.libs.transport.base_transport import (
    BaseTransport,
    describe_headers,
    is_http_url,
    redact,
    sensitive_values,
)

logger = logging.getLogger(__name__)

# Config fields that must hold an absolute http(s) URL when required.
URL_SETTINGS = frozenset({"base_url", "endpoint"})


class BaseLLM(ABC):
    """Abstract interface for all provider adapters.

    ``query`` is implemented once here: validate config, build the wire
    payload, dispatch through the injected transport, classify the outcome
    and parse the body. Subclasses supply only the provider-specific pieces
    (URL, headers, payload shape, text extraction).

    Attributes:
        transport: Strategy used to deliver requests.
    """

    #: Human-readable provider name used in error strings.
    display_name: str = "Provider"
    #: ProviderConfig fields that must be non-empty before dispatch.
    required_settings: tuple[str, ...] = ("base_url", "model", "api_key")

    def __init__(self, transport: BaseTransport) -> None:
        self.transport = transport

    def query(self, request: ChatRequest) -> ChatOutcome:
        """Send one conversation and return exactly one result or error.

        Args:
            request: Conversation, provider id and resolved config.

        Returns:
            ``ChatResult`` with the assistant text, or ``ChatError``.
        """
        config = request.config
        config_error = self.validate_config(config)
        if config_error is not None:
            return config_error

        url = self.build_url(config)
        headers = self.build_headers(config)
        payload = self.build_payload(request.messages, config)
        body = json.dumps(payload, ensure_ascii=False)
        secrets = [*sensitive_values(headers), config.api_key]

        logger.debug(
            "Attempting %s API request: url=%s headers=%s body_length=%s",
            self.display_name,
            redact(url, secrets),
            describe_headers(headers),
            len(body),
        )
        outcome = self.transport.send(url, headers, body)

        if isinstance(outcome, TransportFailure):
            error = ChatError(kind=ErrorKind.CONNECTION_FAILED, detail=outcome.reason)
            self._log_failure(error, config, url, secrets)
            return error

        if outcome.status_code >= 400:
            message = _extract_error_message(_loads_or_none(outcome.body))
            error = ChatError(
                kind=ErrorKind.HTTP_ERROR,
                detail=message or f"request failed with status {outcome.status_code}",
                status_code=outcome.status_code,
            )
            self._log_failure(error, config, url, secrets, response_body=outcome.body)
            return error

        return self.parse_response(outcome.body, config, secrets)

    def validate_config(self, config: ProviderConfig) -> Optional[ChatError]:
        """Return a CONFIG_MISSING error for the first unusable required field."""
        for setting in self.required_settings:
            value = getattr(config, setting, "")
            if not value:
                return ChatError(kind=ErrorKind.CONFIG_MISSING, detail=setting)
            if setting in URL_SETTINGS and not is_http_url(value):
                return ChatError(kind=ErrorKind.CONFIG_MISSING, detail=f"valid {setting}")
        return None

    def parse_response(
        self,
        body: str,
        config: ProviderConfig,
        secrets: Sequence[str] = (),
    ) -> ChatOutcome:
        """Turn a < 400 response body into a result or error.

        ``secrets`` are redacted from every warning emitted while parsing.
        """
        try:
            parsed = json.loads(body)
        except ValueError as exc:
            logger.warning("%s JSON decode error: %s", self.display_name, redact(str(exc), secrets))
            return ChatError(kind=ErrorKind.PARSE_FAILED, detail=str(exc))

        if isinstance(parsed, dict):
            text = self.extract_text(parsed)
            if text is not None:
                return ChatResult(
                    text=text,
                    model=parsed.get("model") or config.model or None,
                    usage=self.extract_usage(parsed),
                )

            reported = self.extract_reported_error(parsed)
            if reported:
                logger.warning(
                    "%s API error in successful response: %s",
                    self.display_name,
                    redact(reported, secrets),
                )
                return ChatError(kind=ErrorKind.PROVIDER_REPORTED, detail=reported)

        logger.warning(
            "Unexpected %s API response format: %s",
            self.display_name,
            redact(body, secrets)[:500],
        )
        return ChatError(kind=ErrorKind.UNEXPECTED_FORMAT, detail=body[:200])

    def extract_reported_error(self, parsed: dict[str, Any]) -> Optional[str]:
        """Error message embedded in an otherwise successful response."""
        return _extract_error_message(parsed)

    def extract_usage(self, parsed: dict[str, Any]) -> Optional[dict[str, Any]]:
        usage = parsed.get("usage")
        return usage if isinstance(usage, dict) else None

    @abstractmethod
    def build_url(self, config: ProviderConfig) -> str:
        """Full request URL for ``config``."""

    @abstractmethod
    def build_headers(self, config: ProviderConfig) -> dict[str, str]:
        """Request headers, content type and authentication included."""

    @abstractmethod
    def build_payload(self, messages: Sequence[Message], config: ProviderConfig) -> dict[str, Any]:
        """Provider-specific JSON request body."""

    @abstractmethod
    def extract_text(self, parsed: dict[str, Any]) -> Optional[str]:
        """Assistant text from a decoded success body, or None if absent."""

    def _log_failure(
        self,
        error: ChatError,
        config: ProviderConfig,
        url: str,
        secrets: Sequence[str],
        response_body: Optional[str] = None,
    ) -> None:
        # upstream error text can echo the credential back
        logger.warning(
            "%s API request failed: kind=%s status=%s detail=%s model=%s url=%s response_body=%s",
            self.display_name,
            error.kind.value,
            error.status_code,
            redact(error.detail, secrets),
            config.model or config.deployment_name,
            redact(url, secrets),
            redact(response_body or "", secrets)[:500],
        )


def _loads_or_none(body: str) -> Any:
    try:
        return json.loads(body)
    except ValueError:
        return None


def _extract_error_message(parsed: Any) -> Optional[str]:
    """Message from ``{"error": "..."}`` or ``{"error": {"message": "..."}}``."""
    if not isinstance(parsed, dict):
        return None
    error = parsed.get("error")
    if isinstance(error, str) and error:
        return error
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    return None
