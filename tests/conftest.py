"""
Shared fixtures for mirror tests.

Every test starts from an environment with no mirror variables set, so a
developer's shell or CI runner cannot leak into the results.
"""

from __future__ import annotations

import logging

import pytest

from repo_mirror.logging_config import SecretMaskingFilter, clear_secrets

MIRROR_VARS = [
    "SOURCE_REPO",
    "TARGET_REPO",
    "BRANCH",
    "GITHUB_TOKEN",
    "AUTH_MODE",
    "CHECK_TARGET",
    "DRY_RUN",
]

TOKEN = "ghp_testtoken123"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove every mirror variable (primary and fallback names)."""
    for name in MIRROR_VARS:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"INPUT_{name}", raising=False)
    monkeypatch.delenv("GITHUB_ACTOR", raising=False)
    monkeypatch.delenv("GIT_CONFIG_COUNT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)

    root = logging.getLogger()
    level = root.level
    yield
    clear_secrets()
    # Drop handlers installed by setup_logging during the test
    for handler in list(root.handlers):
        if any(isinstance(f, SecretMaskingFilter) for f in handler.filters):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def mirror_env(monkeypatch):
    """A complete, valid mirror environment using the INPUT_* names."""
    values = {
        "INPUT_SOURCE_REPO": "github.com/upstream/project.git",
        "INPUT_TARGET_REPO": "backup-org/project",
        "INPUT_BRANCH": "main",
        "INPUT_GITHUB_TOKEN": TOKEN,
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    return values
