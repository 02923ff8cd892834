"""Sequential primary/fallback composition of two transport strategies."""

from __future__ import annotations

import logging
from typing import Mapping

from ai_dispatch.core.types import TransportFailure, TransportOutcome
from ai_dispatch.libs.transport.base_transport import BaseTransport, Body

logger = logging.getLogger(__name__)


class FallbackTransport(BaseTransport):
    """Try ``primary``; on a connection-level failure try ``fallback`` once.

    HTTP responses from the primary, error statuses included, are returned
    as-is. The strategies are never raced and their results never merged.
    """

    def __init__(self, primary: BaseTransport, fallback: BaseTransport) -> None:
        self.primary = primary
        self.fallback = fallback

    def send(self, url: str, headers: Mapping[str, str], body: Body) -> TransportOutcome:
        outcome = self.primary.send(url, headers, body)
        if not isinstance(outcome, TransportFailure):
            return outcome

        logger.info(
            "%s failed (%s); falling back to %s",
            type(self.primary).__name__,
            outcome.reason,
            type(self.fallback).__name__,
        )
        return self.fallback.send(url, headers, body)
