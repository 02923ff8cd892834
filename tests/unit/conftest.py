"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import Callable, Mapping

import pytest

from ai_dispatch.core.types import TransportOutcome
from ai_dispatch.libs.transport.base_transport import BaseTransport


class RecordingTransport(BaseTransport):
    """Transport stub that returns a canned outcome and records every call."""

    def __init__(self, outcome: TransportOutcome) -> None:
        self.outcome = outcome
        self.calls: list[dict] = []

    def send(self, url: str, headers: Mapping[str, str], body) -> TransportOutcome:
        self.calls.append({"url": url, "headers": dict(headers), "body": body})
        return self.outcome


@pytest.fixture
def make_transport() -> Callable[[TransportOutcome], RecordingTransport]:
    """Build a ``RecordingTransport`` returning the given outcome."""
    return RecordingTransport
