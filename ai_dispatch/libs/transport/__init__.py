"""
Transport Module.

This package contains the HTTP POST delivery strategies:
- Base transport class and redaction helpers
- External-process strategy (curl)
- Direct TLS strategy (requests)
- Primary/fallback composition
- Transport factory with device capability probe
"""

from ai_dispatch.libs.transport.base_transport import BaseTransport, redact, sensitive_values
from ai_dispatch.libs.transport.curl_transport import CurlTransport
from ai_dispatch.libs.transport.fallback_transport import FallbackTransport
from ai_dispatch.libs.transport.requests_transport import RequestsTransport
from ai_dispatch.libs.transport.transport_factory import TransportFactory, create_transport

__all__ = [
    "BaseTransport",
    "CurlTransport",
    "FallbackTransport",
    "RequestsTransport",
    "TransportFactory",
    "create_transport",
    "redact",
    "sensitive_values",
]
