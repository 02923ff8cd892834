"""End-to-End tests for the ask script.

Runs scripts/ask.py as a subprocess against throwaway settings files,
covering:
- Help output and provider listing
- Configuration errors (exit code 2)
- Connection errors against a closed local port (exit code 1)
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

# Project root for script execution
PROJECT_ROOT = Path(__file__).parent.parent.parent

_SETTINGS = """
provider: ollama
provider_settings:
  ollama:
    model: llama3
    base_url: http://127.0.0.1:9/api/chat
    api_key: ollama
  openai:
    model: gpt-4o-mini
    base_url: https://api.openai.com/v1/chat/completions
  anthropic:
    visible: false
    model: claude-3-5-haiku-latest
transport:
  strategy: requests
  timeout: 5
observability:
  log_level: WARNING
"""


class TestAskScript:
    """E2E tests for scripts/ask.py."""

    @pytest.fixture
    def settings_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(_SETTINGS, encoding="utf-8")
        return path

    def run_ask_script(self, *args: str) -> subprocess.CompletedProcess:
        """Run the ask script as a subprocess.

        Args:
            *args: Command line arguments.

        Returns:
            CompletedProcess with stdout, stderr, and return code
        """
        env = os.environ.copy()
        env["PYTHONUTF8"] = "1"

        return subprocess.run(
            [sys.executable, str(PROJECT_ROOT / "scripts" / "ask.py"), *args],
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
            timeout=120,
            env=env,
            encoding="utf-8",
            errors="replace",
        )

    def test_ask_help(self):
        result = self.run_ask_script("--help")

        assert result.returncode == 0
        assert "--prompt" in result.stdout
        assert "--provider" in result.stdout
        assert "--list-providers" in result.stdout

    def test_ask_missing_config_file(self, tmp_path):
        result = self.run_ask_script("--config", str(tmp_path / "absent.yaml"), "--prompt", "hi")

        assert result.returncode == 2
        assert "not found" in result.stderr.lower()

    def test_list_providers_skips_hidden_blocks(self, settings_file):
        result = self.run_ask_script("--config", str(settings_file), "--list-providers")

        assert result.returncode == 0
        assert result.stdout.split() == ["ollama", "openai"]

    def test_prompt_is_required(self, settings_file):
        result = self.run_ask_script("--config", str(settings_file))

        assert result.returncode == 2
        assert "--prompt is required" in result.stderr

    def test_missing_api_key_is_configuration_error(self, settings_file):
        result = self.run_ask_script("--config", str(settings_file), "--provider", "openai", "--prompt", "hi")

        assert result.returncode == 2
        assert "Error: Missing api_key in configuration" in result.stderr

    def test_unknown_provider_is_configuration_error(self, settings_file):
        result = self.run_ask_script("--config", str(settings_file), "--provider", "nope", "--prompt", "hi")

        assert result.returncode == 2
        assert "Error: Missing provider_settings.nope in configuration" in result.stderr

    def test_unreachable_provider_is_connection_error(self, settings_file):
        result = self.run_ask_script(
            "--config", str(settings_file),
            "--prompt", "Explain {highlight} in {language}",
            "--highlight", "tabula rasa",
        )

        assert result.returncode == 1
        assert "Error: Failed to connect to Ollama API" in result.stderr
