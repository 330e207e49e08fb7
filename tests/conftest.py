"""Pytest configuration for test isolation.

The CLI configures package logging once per process and reads configuration
from the environment, optionally populated from a ``.env`` in the working
directory. Both can leak between tests: a handler bound to a previous test's
captured stderr, or a developer's local ``.env`` changing limits.

An autouse fixture clears the package environment variables, runs each test
from its own temporary directory and resets the logging configuration
afterwards.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from fatura_parser.intake import MAX_FILE_BYTES_ENV
from fatura_parser.logging_setup import LOG_LEVEL_ENV, reset_logging

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run each test without package env vars, from an empty working directory."""

    for name in (LOG_LEVEL_ENV, MAX_FILE_BYTES_ENV):
        # setenv first so teardown also removes values a test's .env loaded.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    yield
    reset_logging()


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR
