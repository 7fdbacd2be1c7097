"""
Pytest configuration and shared fixtures for deployctl tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from deployctl.logging import SilentLogger, set_global_logger


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Keep tests away from the real home directory, working directory and
    DEPLOYCTL_* variables.
    """
    home = tmp_path / "home"
    home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
    for key in ("SERVER", "SKIP_VERIFY", "TOKEN_FILE", "TIMEOUT"):
        monkeypatch.delenv(f"DEPLOYCTL_{key}", raising=False)
    monkeypatch.chdir(workdir)
    yield workdir
    set_global_logger(SilentLogger())


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir(exist_ok=True)
    return data_dir


@pytest.fixture
def artifact_bytes() -> bytes:
    """Binary artifact content including CR/LF and NUL bytes."""
    return bytes(range(256)) * 40 + b"\r\n--not-a-boundary\r\n" + b"\x00" * 17


@pytest.fixture
def artifact_file(tmp_test_dir: Path, artifact_bytes: bytes) -> Path:
    """Artifact file on disk."""
    path = tmp_test_dir / "release-1.0.artifact"
    path.write_bytes(artifact_bytes)
    return path


@pytest.fixture
def token_file(tmp_test_dir: Path) -> Path:
    """Token file as written by the login flow."""
    path = tmp_test_dir / "authtoken"
    path.write_bytes(b"eyJhbGciOiJSUzI1NiJ9.test-token")
    return path


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("settings.yaml", {"server": "https://x"})
    """

    def _create(filename: str, data: Any) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


class RecordingLogger:
    """Logger that keeps every message for assertions."""

    def __init__(self) -> None:
        self.infos: list[str] = []
        self.verbose_messages: list[tuple[str, str]] = []
        self.debug_messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def verbose(self, prefix: str, message: str) -> None:
        self.verbose_messages.append((prefix, message))

    def debug(self, prefix: str, message: str) -> None:
        self.debug_messages.append((prefix, message))


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()
