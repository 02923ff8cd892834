"""Base abstraction for HTTP POST transport strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Mapping, Union
from urllib.parse import urlparse

from ai_dispatch.core.types import TransportOutcome

DEFAULT_TIMEOUT = 30
REDACTION_MARKER = "***"

SENSITIVE_HEADERS = frozenset({"authorization", "x-api-key", "api-key", "x-goog-api-key"})

Body = Union[str, bytes]


class BaseTransport(ABC):
    """Abstract interface for transport strategies.

    Implementations deliver one POST request and report the outcome as data:
    ``TransportSuccess`` for any HTTP response (including status >= 400) and
    ``TransportFailure`` for connection-level problems. Only a malformed URL
    raises.
    """

    @abstractmethod
    def send(self, url: str, headers: Mapping[str, str], body: Body) -> TransportOutcome:
        """Deliver ``body`` to ``url`` with ``headers``.

        Args:
            url: Absolute http(s) URL.
            headers: Header name to value; includes content type and auth.
            body: Already-serialized request body. Not mutated.

        Returns:
            The outcome of this single attempt.

        Raises:
            ValueError: If ``url`` is not an absolute http(s) URL.
        """


def check_url(url: str) -> None:
    """Raise ``ValueError`` unless ``url`` is an absolute http(s) URL."""
    if not is_http_url(url):
        raise ValueError(f"Transport requires an absolute http(s) URL, got {url!r}")


def is_http_url(url: str) -> bool:
    if not isinstance(url, str):
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def encode_body(body: Body) -> bytes:
    if isinstance(body, bytes):
        return body
    return body.encode("utf-8")


def sensitive_values(headers: Mapping[str, str]) -> list[str]:
    """Collect credential strings carried by ``headers``.

    Includes the full value of every sensitive header and, for
    ``Bearer <token>`` values, the bare token.
    """
    secrets: list[str] = []
    for name, value in headers.items():
        if name.lower() not in SENSITIVE_HEADERS or not value:
            continue
        secrets.append(value)
        scheme, _, token = value.partition(" ")
        if scheme.lower() == "bearer" and token:
            secrets.append(token)
    return secrets


def redact(text: str, secrets: Iterable[str]) -> str:
    """Replace every exact occurrence of each secret with a marker."""
    for secret in sorted({s for s in secrets if s}, key=len, reverse=True):
        text = text.replace(secret, REDACTION_MARKER)
    return text


def describe_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Header map safe for logs: sensitive values replaced by the marker."""
    return {
        name: REDACTION_MARKER if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }
