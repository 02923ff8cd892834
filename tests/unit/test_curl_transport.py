"""Unit tests for CurlTransport.

``subprocess.run`` is replaced with a fake that inspects the argv, writes
the response file the way curl would, and reports a status on stdout.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

import pytest

from ai_dispatch.core.types import TransportFailure, TransportSuccess
from ai_dispatch.libs.transport import curl_transport
from ai_dispatch.libs.transport.curl_transport import CurlTransport


_URL = "https://api.example.com/v1/chat/completions"
_TOKEN = "sk-very-secret-token"
_HEADERS = {"Content-Type": "application/json", "Authorization": f"Bearer {_TOKEN}"}


class FakeCurl:
    """Stand-in for ``subprocess.run`` that emulates one curl invocation."""

    def __init__(
        self,
        status: str = "200",
        response: Optional[bytes] = b'{"ok": true}',
        returncode: int = 0,
        stderr: str = "",
        raises: Optional[BaseException] = None,
    ) -> None:
        self.status = status
        self.response = response
        self.returncode = returncode
        self.stderr = stderr
        self.raises = raises
        self.commands: list[list[str]] = []
        self.request_bodies: list[bytes] = []

    def __call__(self, command, **kwargs):
        self.commands.append(list(command))
        request_arg = command[command.index("--data-binary") + 1]
        self.request_bodies.append(Path(request_arg.lstrip("@")).read_bytes())
        if self.raises is not None:
            raise self.raises
        if self.response is not None and self.returncode == 0:
            Path(command[command.index("-o") + 1]).write_bytes(self.response)
        return subprocess.CompletedProcess(command, self.returncode, stdout=self.status, stderr=self.stderr)


@pytest.fixture
def fake_curl(monkeypatch: pytest.MonkeyPatch):
    def install(**kwargs) -> FakeCurl:
        fake = FakeCurl(**kwargs)
        monkeypatch.setattr(curl_transport.subprocess, "run", fake)
        return fake

    return install


# =============================================================================
# Success path
# =============================================================================


def test_success_returns_status_and_body(fake_curl, tmp_path: Path) -> None:
    fake = fake_curl(status="200", response=b'{"choices": []}')
    transport = CurlTransport(temp_dir=tmp_path)

    outcome = transport.send(_URL, _HEADERS, '{"model": "m"}')

    assert outcome == TransportSuccess(status_code=200, body='{"choices": []}')
    assert fake.request_bodies == [b'{"model": "m"}']


def test_http_error_status_is_still_a_success_outcome(fake_curl, tmp_path: Path) -> None:
    fake_curl(status="401", response=b'{"error": "bad key"}')

    outcome = CurlTransport(temp_dir=tmp_path).send(_URL, _HEADERS, "{}")

    assert outcome == TransportSuccess(status_code=401, body='{"error": "bad key"}')


def test_body_is_written_byte_for_byte(fake_curl, tmp_path: Path) -> None:
    fake = fake_curl()
    body = '{"content": "Grüße, \\"quoted\\" and \'single\'"}'

    CurlTransport(temp_dir=tmp_path).send(_URL, _HEADERS, body)

    assert fake.request_bodies == [body.encode("utf-8")]


def test_command_carries_headers_timeouts_and_retries(fake_curl, tmp_path: Path) -> None:
    fake = fake_curl()

    CurlTransport(timeout=30, retries=2, retry_delay=3, temp_dir=tmp_path).send(_URL, _HEADERS, "{}")

    command = fake.commands[0]
    assert command[0] == "curl"
    assert "-k" in command
    assert command[-1] == _URL
    assert "Content-Type: application/json" in command
    assert f"Authorization: Bearer {_TOKEN}" in command
    assert command[command.index("--connect-timeout") + 1] == "30"
    assert command[command.index("--retry") + 1] == "2"
    assert command[command.index("--retry-delay") + 1] == "3"
    assert command[command.index("-w") + 1] == "%{http_code}"


def test_verify_tls_drops_insecure_flag(fake_curl, tmp_path: Path) -> None:
    fake = fake_curl()

    CurlTransport(verify_tls=True, temp_dir=tmp_path).send(_URL, _HEADERS, "{}")

    assert "-k" not in fake.commands[0]


# =============================================================================
# Failure paths
# =============================================================================


def test_nonzero_exit_is_failure_with_stderr(fake_curl, tmp_path: Path) -> None:
    fake_curl(returncode=6, stderr="curl: (6) Could not resolve host: api.example.com", status="000")

    outcome = CurlTransport(temp_dir=tmp_path).send(_URL, _HEADERS, "{}")

    assert isinstance(outcome, TransportFailure)
    assert "status 6" in outcome.reason
    assert "Could not resolve host" in outcome.reason


def test_missing_curl_binary_is_failure(fake_curl, tmp_path: Path) -> None:
    fake_curl(raises=FileNotFoundError(2, "No such file or directory", "curl"))

    outcome = CurlTransport(temp_dir=tmp_path).send(_URL, _HEADERS, "{}")

    assert isinstance(outcome, TransportFailure)
    assert "could not be started" in outcome.reason


def test_process_timeout_is_failure(fake_curl, tmp_path: Path) -> None:
    fake_curl(raises=subprocess.TimeoutExpired(cmd="curl", timeout=5))

    outcome = CurlTransport(process_timeout=5, temp_dir=tmp_path).send(_URL, _HEADERS, "{}")

    assert outcome == TransportFailure("curl timed out after 5 seconds")


def test_missing_response_file_is_failure(fake_curl, tmp_path: Path) -> None:
    fake_curl(response=None)

    outcome = CurlTransport(temp_dir=tmp_path).send(_URL, _HEADERS, "{}")

    assert outcome == TransportFailure("failed to read curl response file")


@pytest.mark.parametrize("write_out", ["000", "", "garbage"])
def test_unusable_status_is_failure(fake_curl, tmp_path: Path, write_out: str) -> None:
    fake_curl(status=write_out)

    outcome = CurlTransport(temp_dir=tmp_path).send(_URL, _HEADERS, "{}")

    assert isinstance(outcome, TransportFailure)
    assert "no HTTP status" in outcome.reason


def test_invalid_url_raises_before_spawning(fake_curl, tmp_path: Path) -> None:
    fake = fake_curl()

    with pytest.raises(ValueError, match=r"absolute http"):
        CurlTransport(temp_dir=tmp_path).send("api.example.com/v1", _HEADERS, "{}")

    assert fake.commands == []


# =============================================================================
# Temporary files and secrecy
# =============================================================================


@pytest.mark.parametrize(
    "fake_kwargs",
    [
        {},
        {"returncode": 7, "stderr": "connection refused"},
        {"raises": OSError("exec failed")},
        {"response": None},
    ],
)
def test_temporary_files_removed_on_every_path(fake_curl, tmp_path: Path, fake_kwargs: dict) -> None:
    fake_curl(**fake_kwargs)

    CurlTransport(temp_dir=tmp_path).send(_URL, _HEADERS, "{}")

    assert list(tmp_path.iterdir()) == []


def test_token_redacted_from_logs_and_failure_reason(
    fake_curl, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    fake_curl(returncode=22, stderr=f"rejected header Authorization: Bearer {_TOKEN}")

    with caplog.at_level(logging.DEBUG, logger="ai_dispatch"):
        outcome = CurlTransport(temp_dir=tmp_path).send(_URL, _HEADERS, "{}")

    assert "Executing curl command" in caplog.text
    assert _TOKEN not in caplog.text
    assert _TOKEN not in outcome.reason
    assert "***" in outcome.reason


def test_token_with_shell_quote_is_redacted_before_quoting(
    fake_curl, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    fake_curl()
    token = "sk-it's-secret"
    headers = {"Content-Type": "application/json", "Authorization": f"Bearer {token}"}

    with caplog.at_level(logging.DEBUG, logger="ai_dispatch"):
        CurlTransport(temp_dir=tmp_path).send(_URL, headers, "{}")

    assert "Executing curl command" in caplog.text
    assert "'Authorization: ***'" in caplog.text
    assert "sk-it" not in caplog.text
