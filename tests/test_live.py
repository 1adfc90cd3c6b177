"""
YouGile CLI Smoke Test Suite - read-only commands against the REAL API.

Run with: python -m pytest tests/test_live.py -v -s
Requires: YOUGILE_API_KEY (optionally YOUGILE_BASE_URL) in the environment or .env
"""

import json
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest
import yaml

from yougile_cli.config import DEFAULT_BASE_URL

# =============================================================================
# Configuration
# =============================================================================

API_KEY = os.environ.get("YOUGILE_API_KEY")
BASE_URL = os.environ.get("YOUGILE_BASE_URL") or DEFAULT_BASE_URL

CLI_TIMEOUT = 60  # Timeout in seconds for CLI commands


# =============================================================================
# CLI Runner
# =============================================================================


@dataclass
class CLITestResult:
    """Track result of a single CLI invocation."""

    args: list[str]
    success: bool
    exit_code: int
    stdout: str
    stderr: str


def run_cli(config_path: Path, *args: str, timeout: int = CLI_TIMEOUT) -> CLITestResult:
    """Run the CLI in a subprocess against the given config file."""
    cmd = [sys.executable, "-m", "yougile_cli.cli", "--config", str(config_path), *args]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=Path(__file__).resolve().parent.parent,
        )
    except subprocess.TimeoutExpired:
        return CLITestResult(
            args=list(args),
            success=False,
            exit_code=-1,
            stdout="",
            stderr=f"Command timed out after {timeout} seconds",
        )
    return CLITestResult(
        args=list(args),
        success=result.returncode == 0,
        exit_code=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def live_config(tmp_path_factory):
    """Write a config for the live API; skip when no key is available."""
    if not API_KEY:
        pytest.skip("YOUGILE_API_KEY required")
    path = tmp_path_factory.mktemp("live") / "config.yaml"
    path.write_text(yaml.safe_dump({"base_url": BASE_URL, "api_key": API_KEY}))
    return path


# =============================================================================
# Read-only Endpoints
# =============================================================================


class TestReadOnlyEndpoints:
    """Listing commands succeed and print the raw API envelope with --json."""

    def test_company_get(self, live_config):
        result = run_cli(live_config, "--json", "company", "get")
        assert result.success, f"company get failed: {result.stderr}"
        assert "id" in json.loads(result.stdout)

    @pytest.mark.parametrize(
        "command",
        ["projects", "boards", "columns", "users", "departments", "chats"],
    )
    def test_list(self, live_config, command):
        result = run_cli(live_config, "--json", command, "list", "--limit", "1")
        assert result.success, f"{command} list failed: {result.stderr}"
        assert "content" in json.loads(result.stdout)

    def test_projects_list_table(self, live_config):
        result = run_cli(live_config, "projects", "list", "--limit", "3")
        assert result.success, f"projects list failed: {result.stderr}"
        assert result.stdout.splitlines()[0].split() == ["ID", "Title"]

    def test_invalid_key(self, tmp_path):
        if not API_KEY:
            pytest.skip("YOUGILE_API_KEY required")
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({"base_url": BASE_URL, "api_key": "not-a-real-key"}))
        result = run_cli(path, "projects", "list")
        assert result.exit_code == 1
        assert "list projects: HTTP" in result.stderr
