"""Direct HTTPS transport built on ``requests``."""

from __future__ import annotations

import logging
from typing import Mapping

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from ai_dispatch.core.types import TransportFailure, TransportOutcome, TransportSuccess
from ai_dispatch.libs.transport.base_transport import (
    DEFAULT_TIMEOUT,
    BaseTransport,
    Body,
    check_url,
    encode_body,
    redact,
    sensitive_values,
)

logger = logging.getLogger(__name__)


class RequestsTransport(BaseTransport):
    """Deliver requests over a direct TLS connection.

    Certificate validation is off by default because the target devices
    cannot be assumed to carry a trusted root store. HTTP error statuses are
    returned as ``TransportSuccess``; only connection-level errors become
    ``TransportFailure``.

    Attributes:
        timeout: Connect and read timeout in seconds.
        verify_tls: Whether to validate server certificates.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, verify_tls: bool = False) -> None:
        self.timeout = timeout
        self.verify_tls = verify_tls
        if not verify_tls:
            urllib3.disable_warnings(InsecureRequestWarning)

    def send(self, url: str, headers: Mapping[str, str], body: Body) -> TransportOutcome:
        check_url(url)
        payload = encode_body(body)
        logger.debug("Attempting HTTPS request to %s (body_length=%s)", url, len(payload))

        try:
            with requests.post(
                url,
                data=payload,
                headers=dict(headers),
                timeout=self.timeout,
                verify=self.verify_tls,
            ) as response:
                status_code = response.status_code
                response_body = response.content.decode("utf-8", errors="replace")
        except requests.exceptions.RequestException as exc:
            reason = redact(str(exc), sensitive_values(headers))
            logger.warning("HTTPS request failed: %s", reason)
            return TransportFailure(reason)

        logger.debug("HTTPS response status=%s length=%s", status_code, len(response_body))
        return TransportSuccess(status_code=status_code, body=response_body)
