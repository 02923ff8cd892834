"""External-process transport that shells out to ``curl``.

Used preferentially on constrained or sandboxed devices where the Python TLS
stack is unreliable. The request body and the response are exchanged through
two files in a private temporary directory that is removed on every exit path.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Mapping, Optional

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

DEFAULT_RETRIES = 2
DEFAULT_RETRY_DELAY = 3
DEFAULT_PROCESS_TIMEOUT = 300

_REQUEST_FILENAME = "request.json"
_RESPONSE_FILENAME = "response.json"


class CurlTransport(BaseTransport):
    """Deliver requests by invoking the ``curl`` command-line client.

    Attributes:
        executable: Name or path of the curl binary.
        timeout: Connection timeout, and the no-progress window after which a
            stalled transfer is aborted, in seconds.
        retries: curl's own automatic retry count.
        retry_delay: Seconds between curl retries.
        verify_tls: Whether curl validates certificates (``-k`` when False).
        process_timeout: Hard ceiling for the whole curl process, retries
            included.
        temp_dir: Parent directory for the private working directory
            (system default when None).
    """

    def __init__(
        self,
        executable: str = "curl",
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        retry_delay: int = DEFAULT_RETRY_DELAY,
        verify_tls: bool = False,
        process_timeout: float = DEFAULT_PROCESS_TIMEOUT,
        temp_dir: Optional[str | Path] = None,
    ) -> None:
        self.executable = executable
        self.timeout = timeout
        self.retries = retries
        self.retry_delay = retry_delay
        self.verify_tls = verify_tls
        self.process_timeout = process_timeout
        self.temp_dir = str(temp_dir) if temp_dir is not None else None

    def send(self, url: str, headers: Mapping[str, str], body: Body) -> TransportOutcome:
        check_url(url)
        payload = encode_body(body)
        secrets = sensitive_values(headers)

        with tempfile.TemporaryDirectory(prefix="ai-dispatch-", dir=self.temp_dir) as workdir:
            request_path = Path(workdir) / _REQUEST_FILENAME
            response_path = Path(workdir) / _RESPONSE_FILENAME
            request_path.write_bytes(payload)

            command = self.build_command(url, headers, request_path, response_path)
            logger.debug(
                "Executing curl command: %s",
                shlex.join(redact(arg, secrets) for arg in command),
            )

            try:
                completed = subprocess.run(
                    command,
                    capture_output=True,
                    text=True,
                    timeout=self.process_timeout,
                    check=False,
                )
            except subprocess.TimeoutExpired:
                logger.warning("curl did not finish within %s seconds", self.process_timeout)
                return TransportFailure(f"curl timed out after {self.process_timeout} seconds")
            except OSError as exc:
                logger.warning("curl could not be started: %s", exc)
                return TransportFailure(f"curl could not be started: {exc}")

            logger.debug("curl exited with status %s", completed.returncode)
            if completed.returncode != 0:
                stderr = redact((completed.stderr or "").strip(), secrets)
                reason = f"curl exited with status {completed.returncode}"
                if stderr:
                    reason = f"{reason}: {stderr}"
                return TransportFailure(reason)

            try:
                response_body = response_path.read_bytes().decode("utf-8", errors="replace")
            except OSError as exc:
                logger.warning("Failed to read curl response file: %s", exc)
                return TransportFailure("failed to read curl response file")

        status_code = _parse_status(completed.stdout)
        if status_code is None:
            return TransportFailure(
                f"curl reported no HTTP status (write-out: {(completed.stdout or '').strip()!r})"
            )

        logger.debug("curl response status=%s length=%s", status_code, len(response_body))
        return TransportSuccess(status_code=status_code, body=response_body)

    def build_command(
        self,
        url: str,
        headers: Mapping[str, str],
        request_path: Path,
        response_path: Path,
    ) -> list[str]:
        """Build the argv list for one curl invocation."""
        command = [self.executable]
        if not self.verify_tls:
            command.append("-k")
        command.extend(["-s", "-S", "-X", "POST"])
        for name, value in headers.items():
            command.extend(["-H", f"{name}: {value}"])
        command.extend([
            "--connect-timeout", str(self.timeout),
            "--speed-limit", "1",
            "--speed-time", str(self.timeout),
            "--retry", str(self.retries),
            "--retry-delay", str(self.retry_delay),
            "--data-binary", f"@{request_path}",
            "-o", str(response_path),
            "-w", "%{http_code}",
            url,
        ])
        return command


def _parse_status(write_out: Optional[str]) -> Optional[int]:
    text = (write_out or "").strip()
    if not text.isdigit():
        return None
    status = int(text)
    # curl prints 000 when no response was received
    if status == 0:
        return None
    return status
